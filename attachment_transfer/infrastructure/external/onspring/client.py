"""
Cliente mínimo de la API REST de Onspring (v2, sin SDKs externos).

Requisitos cubiertos:
- requests
- autenticación por x-apikey + x-api-version
- paginación por PagingRequest.PageNumber / PagingRequest.PageSize
- rate-limit/backoff (429, 5xx)
- descarga y subida de archivos

El cliente es síncrono; el gateway lo ejecuta en un pool de threads.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import requests


@dataclass(frozen=True)
class OnspringCredentials:
    api_key: str


class OnspringApiError(RuntimeError):
    """Error de integración con Onspring."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class RawFile:
    """Contenido de un archivo tal como lo devuelve la API."""

    content_type: str
    content: bytes
    file_name: Optional[str] = None


def _file_name_from_disposition(disposition: Optional[str]) -> Optional[str]:
    """Extrae filename de un header Content-Disposition simple."""
    if not disposition:
        return None
    for part in disposition.split(";"):
        key, _, value = part.strip().partition("=")
        if key.lower() == "filename" and value:
            return value.strip().strip('"')
    return None


class OnspringClient:
    """
    Cliente HTTP de Onspring para una instancia (una API key).

    Importante:
    - Devuelve JSON crudo: el parseo a entidades vive en `parsers`.
    - Errores no recuperables levantan OnspringApiError con el status code.
    """

    def __init__(
        self,
        credentials: OnspringCredentials,
        *,
        session: Optional[requests.Session] = None,
        base_url: str = "https://api.onspring.com",
        api_version: str = "2",
        timeout_s: int = 120,
        max_retries: int = 3,
        min_backoff_s: float = 0.8,
        max_backoff_s: float = 20.0,
    ) -> None:
        self._creds = credentials
        self._base_url = base_url.rstrip("/")
        self._api_version = api_version
        self._timeout_s = timeout_s
        self._max_retries = max_retries
        self._min_backoff_s = min_backoff_s
        self._max_backoff_s = max_backoff_s
        self._session = session or requests.Session()

    # ------------------------------------------------------------------
    # Campos
    # ------------------------------------------------------------------

    def get_field(self, field_id: int) -> dict[str, Any]:
        return self._request_json("GET", f"Fields/id/{field_id}")

    # ------------------------------------------------------------------
    # Registros
    # ------------------------------------------------------------------

    def get_records_by_app(
        self,
        app_id: int,
        *,
        field_ids: Sequence[int],
        page_number: int,
        page_size: int,
    ) -> dict[str, Any]:
        """Página de registros de una app, sin filtro."""
        query: list[tuple[str, Any]] = [
            ("PagingRequest.PageNumber", page_number),
            ("PagingRequest.PageSize", page_size),
            ("dataFormat", "Raw"),
        ]
        if field_ids:
            query.append(("fieldIds", ",".join(str(f) for f in field_ids)))
        return self._request_json("GET", f"Records/appId/{app_id}", query=query)

    def query_records(
        self,
        app_id: int,
        *,
        filter_expression: str,
        field_ids: Sequence[int],
        page_number: int = 1,
        page_size: int = 50,
    ) -> dict[str, Any]:
        """Página de registros que cumplen `filter_expression`."""
        query = [
            ("PagingRequest.PageNumber", page_number),
            ("PagingRequest.PageSize", page_size),
        ]
        body = {
            "appId": app_id,
            "filter": filter_expression,
            "fieldIds": list(field_ids),
            "dataFormat": "Raw",
        }
        return self._request_json("POST", "Records/Query", query=query, json_body=body)

    def save_record(self, app_id: int, record_id: int, fields: dict[int, Any]) -> dict[str, Any]:
        body = {
            "appId": app_id,
            "recordId": record_id,
            "fields": {str(k): v for k, v in fields.items()},
        }
        return self._request_json("PUT", "Records", json_body=body)

    # ------------------------------------------------------------------
    # Archivos
    # ------------------------------------------------------------------

    def get_file_info(self, record_id: int, field_id: int, file_id: int) -> dict[str, Any]:
        path = f"Files/recordId/{record_id}/fieldId/{field_id}/fileId/{file_id}"
        return self._request_json("GET", path)

    def get_file(self, record_id: int, field_id: int, file_id: int) -> RawFile:
        path = f"Files/recordId/{record_id}/fieldId/{field_id}/fileId/{file_id}/file"
        resp = self._request("GET", path)
        return RawFile(
            content_type=resp.headers.get("Content-Type") or "application/octet-stream",
            content=resp.content,
            file_name=_file_name_from_disposition(resp.headers.get("Content-Disposition")),
        )

    def save_file(
        self,
        *,
        record_id: int,
        field_id: int,
        file_name: str,
        content_type: str,
        content: bytes,
        notes: str = "",
    ) -> dict[str, Any]:
        data = {"RecordId": str(record_id), "FieldId": str(field_id), "Notes": notes}
        files = {"File": (file_name, content, content_type)}
        return self._request_json("POST", "Files", data=data, files=files)

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        """
        Request que espera un cuerpo JSON.

        Un 2xx con cuerpo vacío o no JSON (p. ej. una página HTML de un proxy)
        se reporta como OnspringApiError con el status de la respuesta.
        """
        resp = self._request(method, path, **kwargs)
        try:
            return resp.json()
        except ValueError as e:
            raise OnspringApiError(
                f"Respuesta no JSON de Onspring ({method} {path}, {resp.status_code}): {e}",
                status_code=resp.status_code,
            ) from e

    def _request(
        self,
        method: str,
        path: str,
        *,
        query: Optional[list[tuple[str, Any]]] = None,
        json_body: Optional[dict[str, Any]] = None,
        data: Optional[dict[str, Any]] = None,
        files: Optional[dict[str, Any]] = None,
    ) -> requests.Response:
        """
        Request HTTP con backoff para 429/5xx.

        Estrategia:
        - 429: respeta Retry-After si existe, si no exponencial con jitter simple.
        - 5xx y errores de red: exponencial con jitter.
        - 4xx (no 429): error inmediato.
        """
        url = f"{self._base_url}/{path}"
        headers = {
            "x-apikey": self._creds.api_key,
            "x-api-version": self._api_version,
            "Accept": "application/json",
        }

        for attempt in range(self._max_retries + 1):
            try:
                resp = self._session.request(
                    method=method,
                    url=url,
                    params=query,
                    json=json_body,
                    data=data,
                    files=files,
                    headers=headers,
                    timeout=self._timeout_s,
                )
            except requests.RequestException as e:
                if attempt >= self._max_retries:
                    raise OnspringApiError(
                        f"Onspring no respondió ({method} {path}) tras {attempt} reintentos: {e}"
                    ) from e
                time.sleep(self._backoff(attempt))
                continue

            if 200 <= resp.status_code < 300:
                return resp

            # Errores recuperables
            if resp.status_code == 429 or 500 <= resp.status_code < 600:
                if attempt >= self._max_retries:
                    raise OnspringApiError(
                        f"Onspring error {resp.status_code} ({method} {path}) tras {attempt} reintentos: {resp.text}",
                        status_code=resp.status_code,
                    )

                time.sleep(self._retry_delay(resp, attempt))
                continue

            # Errores no recuperables
            raise OnspringApiError(
                f"Onspring request falló {resp.status_code} ({method} {path}): {resp.text}",
                status_code=resp.status_code,
            )

        # Inalcanzable: el loop siempre retorna o levanta.
        raise OnspringApiError(f"Onspring request agotó reintentos ({method} {path})")

    def _retry_delay(self, resp: requests.Response, attempt: int) -> float:
        """Segundos a esperar: Retry-After si el servidor lo indica, si no backoff."""
        retry_after = resp.headers.get("Retry-After")
        if not retry_after:
            return self._backoff(attempt)
        try:
            return max(0.0, float(retry_after))
        except ValueError:
            # Retry-After con fecha HTTP: no lo interpretamos.
            return self._min_backoff_s

    def _backoff(self, attempt: int) -> float:
        delay = min(self._max_backoff_s, self._min_backoff_s * (2**attempt))
        return delay * 1.15
