"""
Parseo de respuestas JSON de Onspring a entidades de dominio.

Funciones puras (sin I/O) para poder testearlas con payloads de ejemplo.
Un valor con un `type` desconocido se convierte en `UnsupportedValue`, nunca
en una excepción.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional
from uuid import UUID

from attachment_transfer.domain.entities.field_values import (
    INTERNAL_STORAGE,
    AttachmentEntry,
    AttachmentListValue,
    DateValue,
    DecimalValue,
    FieldValue,
    FileListValue,
    GuidListValue,
    GuidValue,
    IntegerListValue,
    IntegerValue,
    ScoringGroup,
    ScoringGroupListValue,
    StringListValue,
    StringValue,
    TimeSpanData,
    TimeSpanValue,
    UnsupportedValue,
)
from attachment_transfer.domain.entities.records import (
    FieldDefinition,
    FieldType,
    FileInfo,
    ListValue,
    RecordPage,
    SourceRecord,
)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normaliza datetime a UTC (aware).

    Onspring devuelve ISO8601 con zona; aun así, normalizamos para
    comparar de forma consistente.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_datetime(raw: Any) -> Optional[datetime]:
    if raw in (None, ""):
        return None
    return ensure_utc(datetime.fromisoformat(str(raw).replace("Z", "+00:00")))


def parse_decimal(raw: Any) -> Optional[Decimal]:
    if raw in (None, ""):
        return None
    try:
        return Decimal(str(raw))
    except InvalidOperation as e:
        raise ValueError(f"Valor decimal inválido: {raw!r}") from e


def parse_int(raw: Any) -> Optional[int]:
    if raw in (None, ""):
        return None
    return int(raw)


def parse_guid(raw: Any) -> Optional[UUID]:
    if raw in (None, ""):
        return None
    return UUID(str(raw))


def _time_span(raw: Any) -> TimeSpanValue:
    raw = raw or {}
    return TimeSpanValue(
        TimeSpanData(
            quantity=parse_decimal(raw.get("quantity")),
            increment=raw.get("increment"),
            recurrence=raw.get("recurrence"),
            end_by_date=parse_datetime(raw.get("endByDate")),
            end_after_occurrences=parse_int(raw.get("endAfterOccurrences")),
        )
    )


def _attachment(raw: dict[str, Any]) -> AttachmentEntry:
    return AttachmentEntry(
        file_id=int(raw["fileId"]),
        file_name=raw.get("fileName"),
        notes=raw.get("notes"),
        storage_location=raw.get("storageLocation") or INTERNAL_STORAGE,
    )


def _scoring_group(raw: dict[str, Any]) -> ScoringGroup:
    return ScoringGroup(
        list_value_id=parse_guid(raw.get("listValueId")),
        name=raw.get("name"),
        score=parse_decimal(raw.get("score")),
        maximum_score=parse_decimal(raw.get("maximumScore")),
    )


_VALUE_PARSERS: dict[str, Callable[[Any], FieldValue]] = {
    "string": lambda v: StringValue(None if v is None else str(v)),
    "integer": lambda v: IntegerValue(parse_int(v)),
    "decimal": lambda v: DecimalValue(parse_decimal(v)),
    "date": lambda v: DateValue(parse_datetime(v)),
    "timespan": _time_span,
    "guid": lambda v: GuidValue(parse_guid(v)),
    "stringlist": lambda v: StringListValue(tuple(str(x) for x in v or [])),
    "integerlist": lambda v: IntegerListValue(tuple(int(x) for x in v or [])),
    "guidlist": lambda v: GuidListValue(tuple(UUID(str(x)) for x in v or [])),
    "attachmentlist": lambda v: AttachmentListValue(tuple(_attachment(x) for x in v or [])),
    "scoringgrouplist": lambda v: ScoringGroupListValue(tuple(_scoring_group(x) for x in v or [])),
    "filelist": lambda v: FileListValue(tuple(int(x) for x in v or [])),
}


def parse_field_value(raw: dict[str, Any]) -> FieldValue:
    """Convierte un item de `fieldData` en su variante de FieldValue."""
    type_name = str(raw.get("type") or "Unknown")
    parser = _VALUE_PARSERS.get(type_name.lower())
    if parser is None:
        return UnsupportedValue(type_name=type_name, raw=raw.get("value"))
    return parser(raw.get("value"))


def parse_record(raw: dict[str, Any]) -> SourceRecord:
    fields: dict[int, FieldValue] = {}
    for item in raw.get("fieldData") or []:
        fields[int(item["fieldId"])] = parse_field_value(item)
    return SourceRecord(
        app_id=int(raw.get("appId") or 0),
        record_id=int(raw["recordId"]),
        fields=fields,
    )


def parse_record_page(raw: dict[str, Any]) -> RecordPage:
    return RecordPage(
        page_number=int(raw.get("pageNumber") or 1),
        page_size=int(raw.get("pageSize") or 0),
        total_pages=int(raw.get("totalPages") or 0),
        total_records=int(raw.get("totalRecords") or 0),
        items=tuple(parse_record(item) for item in raw.get("items") or []),
    )


def parse_field(raw: dict[str, Any]) -> FieldDefinition:
    values = tuple(
        ListValue(id=UUID(str(v["id"])), name=str(v.get("name") or ""))
        for v in raw.get("values") or []
    )
    return FieldDefinition(
        id=int(raw["id"]),
        app_id=int(raw.get("appId") or 0),
        name=str(raw.get("name") or ""),
        type=FieldType.parse(raw.get("type")),
        output_type=raw.get("outputType"),
        values=values,
    )


def parse_file_info(raw: dict[str, Any]) -> FileInfo:
    return FileInfo(
        name=str(raw.get("name") or ""),
        notes=raw.get("notes"),
        content_type=raw.get("contentType"),
    )
