"""
Resultados explicitos de las operaciones contra Onspring.

Cada operacion del gateway devuelve `Success(value)` o `Failure(kind, message)`;
los llamadores deciden que hacer con cada fallo en lugar de revisar `None`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Taxonomia de errores del transfer."""

    NOT_FOUND = "not_found"
    AMBIGUOUS_MATCH = "ambiguous_match"
    TRANSPORT_FAILURE = "transport_failure"
    CONFIGURATION_INVALID = "configuration_invalid"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return False


ApiResult = Union[Success[T], Failure]


class MatchStatus(str, Enum):
    MATCHED = "matched"
    NO_MATCH = "no_match"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class MatchResult:
    """
    Resultado de buscar el registro destino.

    NO_MATCH y AMBIGUOUS se tratan igual (se salta el registro), pero se
    distinguen para diagnostico.
    """

    status: MatchStatus
    record_id: Optional[int] = None
    candidates: int = 0

    @property
    def is_resolved(self) -> bool:
        return self.status is MatchStatus.MATCHED

    @classmethod
    def matched(cls, record_id: int) -> "MatchResult":
        return cls(status=MatchStatus.MATCHED, record_id=record_id, candidates=1)

    @classmethod
    def no_match(cls) -> "MatchResult":
        return cls(status=MatchStatus.NO_MATCH)

    @classmethod
    def ambiguous(cls, candidates: int) -> "MatchResult":
        return cls(status=MatchStatus.AMBIGUOUS, candidates=candidates)


@dataclass(frozen=True)
class TransferOutcome:
    """Resultado de transferir un archivo."""

    source_file_id: int
    target_file_id: Optional[int] = None
    error: Optional[Failure] = None

    @property
    def succeeded(self) -> bool:
        return self.target_file_id is not None


class SkipReason(str, Enum):
    MISSING_MATCH_VALUE = "missing_match_value"
    NO_MATCH = "no_match"
    AMBIGUOUS_MATCH = "ambiguous_match"
    MATCH_LOOKUP_FAILED = "match_lookup_failed"


@dataclass(frozen=True)
class RecordOutcome:
    """Resumen del procesamiento de un registro origen."""

    record_id: int
    skipped: Optional[SkipReason] = None
    target_record_id: Optional[int] = None
    files_transferred: int = 0
    files_failed: int = 0
    fields_skipped: int = 0
    checkpointed: bool = False
