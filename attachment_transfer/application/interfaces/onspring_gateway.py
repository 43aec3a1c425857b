"""
Interfaz del servicio remoto (Onspring) que consume el pipeline.

Este contrato existe para:
- Mantener Clean Architecture: los servicios no dependen de requests directamente.
- Facilitar tests unitarios con un gateway en memoria.

Ninguna operacion levanta excepciones por fallos remotos: todas devuelven
`Success(valor)` o `Failure(kind, message)`.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from attachment_transfer.domain.entities.records import (
    FieldDefinition,
    FileContent,
    FileInfo,
    RecordPage,
    SourceRecord,
)
from attachment_transfer.domain.entities.results import ApiResult


class OnspringGateway(Protocol):
    """
    Operaciones remotas usadas por la transferencia.

    Implementaciones:
    - HTTP real (`infrastructure.external.onspring.gateway`).
    - Fake en memoria para tests.
    """

    async def get_field(self, instance_key: str, field_id: int) -> ApiResult[FieldDefinition]:
        ...

    async def get_page_of_records(
        self,
        instance_key: str,
        app_id: int,
        field_ids: Sequence[int],
        page_number: int,
        page_size: int,
        filter_expression: Optional[str] = None,
    ) -> ApiResult[RecordPage]:
        """Pagina de registros; si hay filtro, solo los que lo cumplen."""
        ...

    async def query_records(
        self,
        instance_key: str,
        app_id: int,
        field_ids: Sequence[int],
        filter_expression: str,
    ) -> ApiResult[list[SourceRecord]]:
        """Registros que cumplen el filtro (primera pagina; se esperan 0 o 1)."""
        ...

    async def get_file_info(
        self, instance_key: str, record_id: int, field_id: int, file_id: int
    ) -> ApiResult[FileInfo]:
        ...

    async def get_file(
        self, instance_key: str, record_id: int, field_id: int, file_id: int
    ) -> ApiResult[FileContent]:
        ...

    async def save_file(
        self,
        instance_key: str,
        record_id: int,
        field_id: int,
        file_name: str,
        content_type: str,
        content: bytes,
        notes: str,
    ) -> ApiResult[int]:
        """Sube un archivo al campo; devuelve el id del archivo nuevo."""
        ...

    async def save_record(
        self,
        instance_key: str,
        app_id: int,
        record_id: int,
        fields: Mapping[int, Any],
    ) -> ApiResult[int]:
        """Actualiza campos de un registro; devuelve el id del registro."""
        ...
