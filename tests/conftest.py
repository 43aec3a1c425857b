"""
Configuración de fixtures para pytest.

FakeOnspringGateway implementa OnspringGateway en memoria: filtra por las
mismas expresiones que usa el pipeline (`eq` para match, `contains` para el
checkpoint) y registra cada llamada para poder verificarla.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Sequence
from uuid import UUID

import pytest
from loguru import logger

from attachment_transfer.application.services.run_context import RunContext
from attachment_transfer.application.services.value_canonicalizer import canonicalize
from attachment_transfer.domain.entities.field_values import GuidValue, StringValue
from attachment_transfer.domain.entities.records import (
    FieldDefinition,
    FieldType,
    FileContent,
    FileInfo,
    ListValue,
    RecordPage,
    SourceRecord,
)
from attachment_transfer.domain.entities.results import ErrorKind, Failure, Success
from attachment_transfer.domain.entities.transfer_config import (
    FlagFieldConfig,
    ResolvedCheckpoint,
    RunOptions,
    TransferConfig,
)

SOURCE_KEY = "source-key"
TARGET_KEY = "target-key"
SOURCE_APP_ID = 100
TARGET_APP_ID = 200
SOURCE_MATCH_FIELD_ID = 1000
TARGET_MATCH_FIELD_ID = 2000
SOURCE_ATTACHMENT_FIELD_ID = 1001
TARGET_ATTACHMENT_FIELD_ID = 2001
SECOND_SOURCE_ATTACHMENT_FIELD_ID = 1002
SECOND_TARGET_ATTACHMENT_FIELD_ID = 2002
FLAG_FIELD_ID = 1003

PROCESS_VALUE_ID = UUID("11111111-1111-1111-1111-111111111111")
PROCESSED_VALUE_ID = UUID("22222222-2222-2222-2222-222222222222")

_EQ_FILTER = re.compile(r"^(\d+) eq '(.*)'$")
_CONTAINS_FILTER = re.compile(r"^(\d+) contains '(.*)'$")

_NOT_FOUND = Failure(ErrorKind.NOT_FOUND, "not found", status_code=404)
_TRANSPORT = Failure(ErrorKind.TRANSPORT_FAILURE, "boom", status_code=500)


@dataclass
class FakeOnspringGateway:
    """Gateway en memoria para tests del pipeline."""

    fields: dict[tuple[str, int], FieldDefinition] = field(default_factory=dict)
    source_records: list[SourceRecord] = field(default_factory=list)
    target_records: list[SourceRecord] = field(default_factory=list)
    files: dict[tuple[int, int, int], tuple[FileInfo, FileContent]] = field(default_factory=dict)

    page_failures: int = 0
    query_failure: bool = False
    failing_file_info: set[tuple[int, int, int]] = field(default_factory=set)
    failing_file_content: set[tuple[int, int, int]] = field(default_factory=set)
    failing_saves: set[tuple[int, int]] = field(default_factory=set)
    fail_save_record: bool = False

    page_requests: list[dict[str, Any]] = field(default_factory=list)
    match_queries: list[str] = field(default_factory=list)
    file_info_requests: list[tuple[int, int, int]] = field(default_factory=list)
    file_requests: list[tuple[int, int, int]] = field(default_factory=list)
    saved_files: list[dict[str, Any]] = field(default_factory=list)
    saved_records: list[dict[str, Any]] = field(default_factory=list)

    async def get_field(self, instance_key: str, field_id: int):
        definition = self.fields.get((instance_key, field_id))
        if definition is None:
            return _NOT_FOUND
        return Success(definition)

    async def get_page_of_records(
        self,
        instance_key: str,
        app_id: int,
        field_ids: Sequence[int],
        page_number: int,
        page_size: int,
        filter_expression: Optional[str] = None,
    ):
        self.page_requests.append(
            {"page_number": page_number, "page_size": page_size, "filter": filter_expression}
        )
        if self.page_failures > 0:
            self.page_failures -= 1
            return _TRANSPORT

        records = [r for r in self.source_records if self._matches_checkpoint(r, filter_expression)]
        total_pages = math.ceil(len(records) / page_size)
        start = (page_number - 1) * page_size
        return Success(
            RecordPage(
                page_number=page_number,
                page_size=page_size,
                total_pages=total_pages,
                total_records=len(records),
                items=tuple(records[start:start + page_size]),
            )
        )

    async def query_records(
        self, instance_key: str, app_id: int, field_ids: Sequence[int], filter_expression: str
    ):
        self.match_queries.append(filter_expression)
        if self.query_failure:
            return _TRANSPORT
        field_id, value = _EQ_FILTER.match(filter_expression).groups()
        return Success(
            [
                r for r in self.target_records
                if int(field_id) in r.fields and canonicalize(r.fields[int(field_id)]) == value
            ]
        )

    async def get_file_info(self, instance_key: str, record_id: int, field_id: int, file_id: int):
        key = (record_id, field_id, file_id)
        self.file_info_requests.append(key)
        if key in self.failing_file_info or key not in self.files:
            return _NOT_FOUND
        return Success(self.files[key][0])

    async def get_file(self, instance_key: str, record_id: int, field_id: int, file_id: int):
        key = (record_id, field_id, file_id)
        self.file_requests.append(key)
        if key in self.failing_file_content or key not in self.files:
            return _NOT_FOUND
        return Success(self.files[key][1])

    async def save_file(
        self,
        instance_key: str,
        record_id: int,
        field_id: int,
        file_name: str,
        content_type: str,
        content: bytes,
        notes: str,
    ):
        if (record_id, field_id) in self.failing_saves:
            return _TRANSPORT
        new_id = 9000 + len(self.saved_files)
        self.saved_files.append(
            {
                "instance_key": instance_key,
                "record_id": record_id,
                "field_id": field_id,
                "file_name": file_name,
                "content_type": content_type,
                "content": content,
                "notes": notes,
                "new_file_id": new_id,
            }
        )
        return Success(new_id)

    async def save_record(self, instance_key: str, app_id: int, record_id: int, fields: Mapping[int, Any]):
        if self.fail_save_record:
            return _TRANSPORT
        self.saved_records.append(
            {"instance_key": instance_key, "app_id": app_id, "record_id": record_id, "fields": dict(fields)}
        )
        # Refleja el cambio en el "servidor" para que el filtro de checkpoint lo vea.
        for index, record in enumerate(self.source_records):
            if record.record_id == record_id:
                updated = dict(record.fields)
                for field_id, value in fields.items():
                    updated[field_id] = GuidValue(UUID(str(value)))
                self.source_records[index] = replace(record, fields=updated)
        return Success(record_id)

    @staticmethod
    def _matches_checkpoint(record: SourceRecord, filter_expression: Optional[str]) -> bool:
        if not filter_expression:
            return True
        field_id, value = _CONTAINS_FILTER.match(filter_expression).groups()
        current = record.fields.get(int(field_id))
        return isinstance(current, GuidValue) and str(current.value) == value


def make_config(*, mappings: Optional[dict[int, int]] = None, with_flag: bool = False) -> TransferConfig:
    return TransferConfig(
        source_instance_key=SOURCE_KEY,
        target_instance_key=TARGET_KEY,
        source_app_id=SOURCE_APP_ID,
        target_app_id=TARGET_APP_ID,
        source_match_field_id=SOURCE_MATCH_FIELD_ID,
        target_match_field_id=TARGET_MATCH_FIELD_ID,
        attachment_field_mappings=mappings or {SOURCE_ATTACHMENT_FIELD_ID: TARGET_ATTACHMENT_FIELD_ID},
        flag_field=(
            FlagFieldConfig(field_id=FLAG_FIELD_ID, process_value="Process", processed_value="Processed")
            if with_flag
            else None
        ),
    )


def make_checkpoint() -> ResolvedCheckpoint:
    return ResolvedCheckpoint(
        field_id=FLAG_FIELD_ID,
        process_value_id=PROCESS_VALUE_ID,
        processed_value_id=PROCESSED_VALUE_ID,
    )


def make_context(
    gateway: FakeOnspringGateway,
    *,
    config: Optional[TransferConfig] = None,
    options: Optional[RunOptions] = None,
    checkpoint: Optional[ResolvedCheckpoint] = None,
) -> RunContext:
    return RunContext(
        config=config or make_config(),
        gateway=gateway,
        options=options or RunOptions(),
        checkpoint=checkpoint,
        log=logger.bind(run="test"),
    )


def target_record(record_id: int, match_value: str) -> SourceRecord:
    return SourceRecord(
        app_id=TARGET_APP_ID,
        record_id=record_id,
        fields={TARGET_MATCH_FIELD_ID: StringValue(match_value)},
    )


def flag_field_definition() -> FieldDefinition:
    return FieldDefinition(
        id=FLAG_FIELD_ID,
        app_id=SOURCE_APP_ID,
        name="Transfer Status",
        type=FieldType.LIST,
        values=(
            ListValue(id=PROCESS_VALUE_ID, name="Process"),
            ListValue(id=PROCESSED_VALUE_ID, name="Processed"),
        ),
    )


@pytest.fixture
def gateway() -> FakeOnspringGateway:
    return FakeOnspringGateway()


@pytest.fixture
def log_messages():
    """Captura los mensajes de loguru (nivel + texto) durante el test."""
    messages: list[tuple[str, str]] = []
    handler_id = logger.add(
        lambda message: messages.append(
            (message.record["level"].name, message.record["message"])
        ),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)
