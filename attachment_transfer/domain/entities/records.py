"""
Entidades de registros, campos y archivos de Onspring.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional
from uuid import UUID

from attachment_transfer.domain.entities.field_values import FieldValue


class FieldType(str, Enum):
    """Tipos de campo de Onspring relevantes para el transfer."""

    TEXT = "Text"
    NUMBER = "Number"
    DATE = "Date"
    AUTO_NUMBER = "AutoNumber"
    FORMULA = "Formula"
    LIST = "List"
    ATTACHMENT = "Attachment"
    IMAGE = "Image"
    REFERENCE = "Reference"
    TIME_SPAN = "TimeSpan"
    SCORING_GROUP = "ScoringGroup"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "FieldType":
        for member in cls:
            if raw is not None and member.value.lower() == str(raw).lower():
                return member
        return cls.UNKNOWN


@dataclass(frozen=True)
class ListValue:
    """Opcion de un campo de lista."""

    id: UUID
    name: str


@dataclass(frozen=True)
class FieldDefinition:
    """
    Definicion de un campo.

    - output_type: solo aplica a campos Formula (p. ej. "Text", "ListValue").
    - values: opciones, solo para campos List (y formulas de lista).
    """

    id: int
    app_id: int
    name: str
    type: FieldType
    output_type: Optional[str] = None
    values: tuple[ListValue, ...] = ()


@dataclass(frozen=True)
class SourceRecord:
    """
    Registro devuelto por una consulta.

    `fields` solo contiene los campos pedidos: la ausencia de una clave
    significa "no solicitado / sin datos", distinto de un valor vacio.
    """

    app_id: int
    record_id: int
    fields: Mapping[int, FieldValue] = field(default_factory=dict)

    def get_value(self, field_id: int) -> Optional[FieldValue]:
        return self.fields.get(field_id)


@dataclass(frozen=True)
class RecordPage:
    page_number: int
    page_size: int
    total_pages: int
    total_records: int
    items: tuple[SourceRecord, ...] = ()


@dataclass(frozen=True)
class FileInfo:
    name: str
    notes: Optional[str] = None
    content_type: Optional[str] = None


@dataclass(frozen=True)
class FileContent:
    content_type: str
    content: bytes
    file_name: Optional[str] = None
