"""
Entidades del dominio.
"""
from attachment_transfer.domain.entities.field_values import (
    AttachmentEntry,
    FieldValue,
    TimeSpanData,
    ScoringGroup,
)
from attachment_transfer.domain.entities.records import (
    FieldDefinition,
    FieldType,
    FileContent,
    FileInfo,
    ListValue,
    RecordPage,
    SourceRecord,
)
from attachment_transfer.domain.entities.results import (
    ApiResult,
    ErrorKind,
    Failure,
    MatchResult,
    MatchStatus,
    Success,
)
from attachment_transfer.domain.entities.transfer_config import (
    FlagFieldConfig,
    ResolvedCheckpoint,
    RunOptions,
    TransferConfig,
)

__all__ = [
    "AttachmentEntry",
    "FieldValue",
    "TimeSpanData",
    "ScoringGroup",
    "FieldDefinition",
    "FieldType",
    "FileContent",
    "FileInfo",
    "ListValue",
    "RecordPage",
    "SourceRecord",
    "ApiResult",
    "ErrorKind",
    "Failure",
    "MatchResult",
    "MatchStatus",
    "Success",
    "FlagFieldConfig",
    "ResolvedCheckpoint",
    "RunOptions",
    "TransferConfig",
]
