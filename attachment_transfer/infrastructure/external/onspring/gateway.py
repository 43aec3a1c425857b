"""
Implementación HTTP del OnspringGateway.

Traduce cada llamada del cliente síncrono a una corrutina (pool de threads) y
cada error a un `Failure` explícito:
- 404 -> NOT_FOUND
- cualquier otro error HTTP / de red / de parseo -> TRANSPORT_FAILURE
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar

from attachment_transfer.core.config import Settings
from attachment_transfer.domain.entities.records import (
    FieldDefinition,
    FileContent,
    FileInfo,
    RecordPage,
    SourceRecord,
)
from attachment_transfer.domain.entities.results import ApiResult, ErrorKind, Failure, Success
from attachment_transfer.infrastructure.external.onspring.client import (
    OnspringApiError,
    OnspringClient,
    OnspringCredentials,
)
from attachment_transfer.infrastructure.external.onspring.http_executor import HttpExecutor
from attachment_transfer.infrastructure.external.onspring.parsers import (
    parse_field,
    parse_file_info,
    parse_record_page,
)

T = TypeVar("T")

# Los queries de match piden una sola página: con más de un resultado ya es ambiguo.
MATCH_QUERY_PAGE_SIZE = 2


def _failure_from_error(error: OnspringApiError) -> Failure:
    if error.status_code == 404:
        return Failure(ErrorKind.NOT_FOUND, str(error), status_code=404)
    return Failure(ErrorKind.TRANSPORT_FAILURE, str(error), status_code=error.status_code)


class HttpOnspringGateway:
    """
    Gateway real contra la API de Onspring.

    Mantiene un cliente por API key (origen y destino pueden ser instancias
    distintas) y un pool de threads compartido para las llamadas HTTP.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        executor: Optional[HttpExecutor] = None,
        client_factory: Optional[Callable[[str], OnspringClient]] = None,
    ) -> None:
        self._settings = settings
        self._executor = executor or HttpExecutor(max_workers=settings.HTTP_MAX_WORKERS)
        self._client_factory = client_factory or self._default_client
        self._clients: dict[str, OnspringClient] = {}

    def _default_client(self, instance_key: str) -> OnspringClient:
        return OnspringClient(
            OnspringCredentials(api_key=instance_key),
            base_url=self._settings.api_base_url,
            api_version=self._settings.ONSPRING_API_VERSION,
            timeout_s=self._settings.HTTP_TIMEOUT_SECONDS,
            max_retries=self._settings.HTTP_MAX_RETRIES,
        )

    def _client(self, instance_key: str) -> OnspringClient:
        client = self._clients.get(instance_key)
        if client is None:
            client = self._client_factory(instance_key)
            self._clients[instance_key] = client
        return client

    async def _call(self, func: Callable[..., Any], *args: Any, parse: Callable[[Any], T], **kwargs: Any) -> ApiResult[T]:
        try:
            raw = await self._executor.run(func, *args, **kwargs)
        except OnspringApiError as e:
            return _failure_from_error(e)
        try:
            return Success(parse(raw))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            return Failure(ErrorKind.TRANSPORT_FAILURE, f"Respuesta inesperada de Onspring: {e}")

    async def get_field(self, instance_key: str, field_id: int) -> ApiResult[FieldDefinition]:
        return await self._call(self._client(instance_key).get_field, field_id, parse=parse_field)

    async def get_page_of_records(
        self,
        instance_key: str,
        app_id: int,
        field_ids: Sequence[int],
        page_number: int,
        page_size: int,
        filter_expression: Optional[str] = None,
    ) -> ApiResult[RecordPage]:
        client = self._client(instance_key)
        if filter_expression:
            return await self._call(
                client.query_records,
                app_id,
                filter_expression=filter_expression,
                field_ids=field_ids,
                page_number=page_number,
                page_size=page_size,
                parse=parse_record_page,
            )
        return await self._call(
            client.get_records_by_app,
            app_id,
            field_ids=field_ids,
            page_number=page_number,
            page_size=page_size,
            parse=parse_record_page,
        )

    async def query_records(
        self,
        instance_key: str,
        app_id: int,
        field_ids: Sequence[int],
        filter_expression: str,
    ) -> ApiResult[list[SourceRecord]]:
        return await self._call(
            self._client(instance_key).query_records,
            app_id,
            filter_expression=filter_expression,
            field_ids=field_ids,
            page_number=1,
            page_size=MATCH_QUERY_PAGE_SIZE,
            parse=lambda raw: list(parse_record_page(raw).items),
        )

    async def get_file_info(
        self, instance_key: str, record_id: int, field_id: int, file_id: int
    ) -> ApiResult[FileInfo]:
        return await self._call(
            self._client(instance_key).get_file_info,
            record_id,
            field_id,
            file_id,
            parse=parse_file_info,
        )

    async def get_file(
        self, instance_key: str, record_id: int, field_id: int, file_id: int
    ) -> ApiResult[FileContent]:
        return await self._call(
            self._client(instance_key).get_file,
            record_id,
            field_id,
            file_id,
            parse=lambda raw: FileContent(
                content_type=raw.content_type,
                content=raw.content,
                file_name=raw.file_name,
            ),
        )

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
        return await self._call(
            self._client(instance_key).save_file,
            record_id=record_id,
            field_id=field_id,
            file_name=file_name,
            content_type=content_type,
            content=content,
            notes=notes,
            parse=lambda raw: int(raw["id"]),
        )

    async def save_record(
        self,
        instance_key: str,
        app_id: int,
        record_id: int,
        fields: Mapping[int, Any],
    ) -> ApiResult[int]:
        return await self._call(
            self._client(instance_key).save_record,
            app_id,
            record_id,
            dict(fields),
            parse=lambda raw: int(raw.get("id") or record_id),
        )

    def close(self) -> None:
        self._executor.shutdown()
