"""
Configuracion de una corrida de transferencia.

Este modulo no realiza I/O: solo define configuracion.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional
from uuid import UUID


@dataclass(frozen=True)
class FlagFieldConfig:
    """
    Campo de checkpoint en la app origen.

    process_value / processed_value pueden ser el nombre de la opcion de lista
    o su id (GUID) literal; se resuelven contra el campo antes de correr.
    """

    field_id: int
    process_value: str
    processed_value: str


@dataclass(frozen=True)
class ResolvedCheckpoint:
    """Checkpoint ya validado contra la definicion del campo."""

    field_id: int
    process_value_id: UUID
    processed_value_id: UUID


@dataclass(frozen=True)
class TransferConfig:
    """
    Config inmutable de la corrida.

    attachment_field_mappings: campo de adjuntos origen -> campo destino,
    en el orden en que se configuraron.
    """

    source_instance_key: str
    target_instance_key: str
    source_app_id: int
    target_app_id: int
    source_match_field_id: int
    target_match_field_id: int
    attachment_field_mappings: Mapping[int, int]
    flag_field: Optional[FlagFieldConfig] = None

    def __post_init__(self) -> None:
        if not self.attachment_field_mappings:
            raise ValueError("attachment_field_mappings no puede estar vacio")
        # Copia de solo lectura para que nadie mute el mapeo tras crear la config.
        object.__setattr__(
            self,
            "attachment_field_mappings",
            MappingProxyType(dict(self.attachment_field_mappings)),
        )

    @property
    def source_attachment_field_ids(self) -> list[int]:
        return list(self.attachment_field_mappings.keys())

    @property
    def source_field_ids(self) -> list[int]:
        field_ids = self.source_attachment_field_ids + [self.source_match_field_id]
        if self.flag_field is not None:
            field_ids.append(self.flag_field.field_id)
        return field_ids

    @property
    def target_field_ids(self) -> list[int]:
        return list(self.attachment_field_mappings.values()) + [self.target_match_field_id]

    def target_field_for(self, source_field_id: int) -> int:
        return self.attachment_field_mappings[source_field_id]


@dataclass(frozen=True)
class RunOptions:
    """Opciones de ejecucion (CLI)."""

    page_size: int = 50
    page_limit: Optional[int] = None
    parallel: bool = False
    max_concurrency: Optional[int] = None
    retry_delay_seconds: float = 0.0
    log_level: str = "INFO"
