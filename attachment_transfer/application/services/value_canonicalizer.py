"""
Canonicalización de valores de campo.

Convierte cualquier FieldValue en un string determinista para usarlo como
valor de match contra la app destino. La función es total y pura: ninguna
variante levanta excepción, los valores nulos se vuelven "" y los tipos que no
sabemos interpretar producen un texto de diagnóstico.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, assert_never

from attachment_transfer.domain.entities.field_values import (
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
from attachment_transfer.domain.entities.records import FieldDefinition, FieldType

LIST_SEPARATOR = ", "

MATCH_FIELD_TYPES = frozenset(
    {FieldType.TEXT, FieldType.NUMBER, FieldType.DATE, FieldType.AUTO_NUMBER, FieldType.FORMULA}
)
LIST_FORMULA_OUTPUT = "listvalue"


def _text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return _format_datetime(value)
    if isinstance(value, Decimal):
        return _format_decimal(value)
    return str(value)


def _format_datetime(value: datetime) -> str:
    # Mismo formato que devuelve Onspring: ISO8601 en UTC con 'Z'.
    return value.isoformat().replace("+00:00", "Z")


def _format_decimal(value: Decimal) -> str:
    # Punto fijo: evita notaciones como '1E+2'.
    return format(value, "f")


def _join(items: Iterable[object]) -> str:
    return LIST_SEPARATOR.join(_text(item) for item in items)


def _time_span(data: TimeSpanData) -> str:
    return (
        f"Quantity: {_text(data.quantity)}, "
        f"Increment: {_text(data.increment)}, "
        f"Recurrence: {_text(data.recurrence)}, "
        f"EndByDate: {_text(data.end_by_date)}, "
        f"EndAfterOccurrences: {_text(data.end_after_occurrences)}"
    )


def _attachment(entry: AttachmentEntry) -> str:
    return f"FileId: {entry.file_id}, FileName: {_text(entry.file_name)}, Notes: {_text(entry.notes)}"


def _scoring_group(group: ScoringGroup) -> str:
    return (
        f"ListValueId: {_text(group.list_value_id)}, "
        f"Name: {_text(group.name)}, "
        f"Score: {_text(group.score)}, "
        f"MaximumScore: {_text(group.maximum_score)}"
    )


def canonicalize(value: FieldValue) -> str:
    """
    Representación textual determinista de un valor de campo.

    Las listas mantienen el orden original: dos listas con los mismos
    elementos en distinto orden producen strings distintos.
    """
    if isinstance(value, (StringValue, IntegerValue, DecimalValue, DateValue, GuidValue)):
        return _text(value.value)
    if isinstance(value, TimeSpanValue):
        return _time_span(value.value)
    if isinstance(value, (StringListValue, IntegerListValue, GuidListValue)):
        return _join(value.values)
    if isinstance(value, FileListValue):
        return _join(value.file_ids)
    if isinstance(value, AttachmentListValue):
        return LIST_SEPARATOR.join(_attachment(entry) for entry in value.entries)
    if isinstance(value, ScoringGroupListValue):
        return LIST_SEPARATOR.join(_scoring_group(group) for group in value.groups)
    if isinstance(value, UnsupportedValue):
        return f"Unsupported ResultValueType: {value.type_name}"
    assert_never(value)


def is_valid_match_field(field: Optional[FieldDefinition]) -> bool:
    """
    Un campo sirve para match si es Text, Number, Date, AutoNumber o una
    Formula cuyo resultado no sea una lista.
    """
    if field is None or field.type not in MATCH_FIELD_TYPES:
        return False
    if field.type is FieldType.FORMULA:
        return (field.output_type or "").lower() != LIST_FORMULA_OUTPUT
    return True
