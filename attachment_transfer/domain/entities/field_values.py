"""
Valores de campo de un registro Onspring.

Cada variante es un dataclass inmutable. `FieldValue` es la union cerrada de
todas ellas: el canonicalizador y el extractor de adjuntos la recorren de forma
exhaustiva, asi que agregar una variante nueva sin manejarla es un error de tipos.

Se mantienen libres de I/O para poder testearlas facilmente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

# Ubicacion de almacenamiento de los archivos alojados por Onspring.
# Cualquier otro valor (p. ej. "GoogleDrive") apunta a contenido externo.
INTERNAL_STORAGE = "Internal"


@dataclass(frozen=True)
class TimeSpanData:
    """Descriptor de intervalo (campo TimeSpan de Onspring)."""

    quantity: Optional[Decimal] = None
    increment: Optional[str] = None
    recurrence: Optional[str] = None
    end_by_date: Optional[datetime] = None
    end_after_occurrences: Optional[int] = None


@dataclass(frozen=True)
class AttachmentEntry:
    """Entrada de un campo de adjuntos."""

    file_id: int
    file_name: Optional[str] = None
    notes: Optional[str] = None
    storage_location: str = INTERNAL_STORAGE

    @property
    def is_internal(self) -> bool:
        return self.storage_location == INTERNAL_STORAGE


@dataclass(frozen=True)
class ScoringGroup:
    """Grupo de puntaje de un campo de scoring."""

    list_value_id: Optional[UUID] = None
    name: Optional[str] = None
    score: Optional[Decimal] = None
    maximum_score: Optional[Decimal] = None


@dataclass(frozen=True)
class StringValue:
    value: Optional[str]


@dataclass(frozen=True)
class IntegerValue:
    value: Optional[int]


@dataclass(frozen=True)
class DecimalValue:
    value: Optional[Decimal]


@dataclass(frozen=True)
class DateValue:
    value: Optional[datetime]


@dataclass(frozen=True)
class TimeSpanValue:
    value: TimeSpanData


@dataclass(frozen=True)
class GuidValue:
    value: Optional[UUID]


@dataclass(frozen=True)
class StringListValue:
    values: tuple[str, ...] = ()


@dataclass(frozen=True)
class IntegerListValue:
    values: tuple[int, ...] = ()


@dataclass(frozen=True)
class GuidListValue:
    values: tuple[UUID, ...] = ()


@dataclass(frozen=True)
class AttachmentListValue:
    entries: tuple[AttachmentEntry, ...] = ()


@dataclass(frozen=True)
class ScoringGroupListValue:
    groups: tuple[ScoringGroup, ...] = ()


@dataclass(frozen=True)
class FileListValue:
    file_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class UnsupportedValue:
    """Tipo de valor que la API devolvio y que no sabemos interpretar."""

    type_name: str
    raw: object = field(default=None, compare=False)


FieldValue = Union[
    StringValue,
    IntegerValue,
    DecimalValue,
    DateValue,
    TimeSpanValue,
    GuidValue,
    StringListValue,
    IntegerListValue,
    GuidListValue,
    AttachmentListValue,
    ScoringGroupListValue,
    FileListValue,
    UnsupportedValue,
]
