"""
Controlador de paginación y reintentos de la transferencia.

Máquina de estados:
    IDLE -> FETCHING_PAGE -> PROCESSING_PAGE -> FETCHING_PAGE ... -> DONE
            FETCHING_PAGE -> RETRYING -> FETCHING_PAGE (misma página)
            FETCHING_PAGE -> ABORTED (tras MAX_CONSECUTIVE_FAILURES)

- Un fetch fallido no avanza la página; 3 fallos consecutivos abortan la corrida.
- Un fetch exitoso resetea el contador y despacha todos los registros al
  RecordProcessor (en orden o concurrentemente, según las opciones).
- Termina al superar el total de páginas o al alcanzar el límite de páginas.

El estado (PageState) solo lo muta este controlador, entre páginas.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from attachment_transfer.application.services.filters import build_contains_filter
from attachment_transfer.application.services.record_processor import RecordProcessor
from attachment_transfer.application.services.run_context import RunContext
from attachment_transfer.domain.entities.results import Failure, RecordOutcome

MAX_CONSECUTIVE_FAILURES = 3


class ControllerState(str, Enum):
    IDLE = "idle"
    FETCHING_PAGE = "fetching_page"
    PROCESSING_PAGE = "processing_page"
    RETRYING = "retrying"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class PageState:
    """
    Estado de la paginación.

    total_pages solo es exacto después de al menos un fetch exitoso.
    """

    page_number: int = 1
    page_size: int = 50
    total_pages: int = 1
    consecutive_failures: int = 0
    page_limit: Optional[int] = None
    pages_processed: int = 0
    status: ControllerState = ControllerState.IDLE

    @property
    def limit_reached(self) -> bool:
        return self.page_limit is not None and self.pages_processed >= self.page_limit

    @property
    def exhausted(self) -> bool:
        return self.page_number > self.total_pages


@dataclass
class RunSummary:
    """Totales de la corrida, para el log final y el código de salida."""

    state: PageState
    fetch_attempts: int = 0
    records_processed: int = 0
    records_skipped: int = 0
    files_transferred: int = 0
    files_failed: int = 0
    records_checkpointed: int = 0
    skipped_record_ids: list[int] = field(default_factory=list)

    @property
    def aborted(self) -> bool:
        return self.state.status is ControllerState.ABORTED

    def add(self, outcome: RecordOutcome) -> None:
        if outcome.skipped is not None:
            self.records_skipped += 1
            self.skipped_record_ids.append(outcome.record_id)
            return
        self.records_processed += 1
        self.files_transferred += outcome.files_transferred
        self.files_failed += outcome.files_failed
        if outcome.checkpointed:
            self.records_checkpointed += 1


class TransferUseCases:
    """Recorre las páginas de registros origen y procesa cada registro."""

    def __init__(self, context: RunContext, processor: Optional[RecordProcessor] = None) -> None:
        self._ctx = context
        self._processor = processor or RecordProcessor(context)

    def _page_filter(self) -> Optional[str]:
        checkpoint = self._ctx.checkpoint
        if checkpoint is None:
            return None
        return build_contains_filter(checkpoint.field_id, str(checkpoint.process_value_id))

    async def run(self) -> RunSummary:
        config = self._ctx.config
        options = self._ctx.options
        log = self._ctx.log
        state = PageState(page_size=options.page_size, page_limit=options.page_limit)
        summary = RunSummary(state=state)
        page_filter = self._page_filter()

        while True:
            state.status = ControllerState.FETCHING_PAGE
            log.info(f"Obteniendo página {state.page_number} de registros de la App origen {config.source_app_id}.")
            summary.fetch_attempts += 1
            result = await self._ctx.gateway.get_page_of_records(
                config.source_instance_key,
                config.source_app_id,
                config.source_field_ids,
                state.page_number,
                state.page_size,
                page_filter,
            )

            if isinstance(result, Failure):
                state.consecutive_failures += 1
                if state.consecutive_failures >= MAX_CONSECUTIVE_FAILURES:
                    state.status = ControllerState.ABORTED
                    log.error(
                        f"No se pudo obtener la página {state.page_number} de la App origen "
                        f"{config.source_app_id} tras {state.consecutive_failures} intentos. "
                        f"Se aborta la corrida: {result.message}"
                    )
                    break

                state.status = ControllerState.RETRYING
                log.warning(
                    f"Falló la página {state.page_number} "
                    f"(intento {state.consecutive_failures}/{MAX_CONSECUTIVE_FAILURES}): {result.message}"
                )
                if options.retry_delay_seconds > 0:
                    await asyncio.sleep(options.retry_delay_seconds)
                continue

            state.consecutive_failures = 0
            state.status = ControllerState.PROCESSING_PAGE
            page = result.value
            log.info(f"Procesando página {state.page_number} ({len(page.items)} registros).")

            outcomes = await self._ctx.dispatcher.map(self._processor.process, page.items)
            for outcome in outcomes:
                summary.add(outcome)

            log.info(f"Página {state.page_number} de la App origen {config.source_app_id} procesada.")
            state.total_pages = page.total_pages
            state.pages_processed += 1
            state.page_number += 1

            if state.exhausted or state.limit_reached:
                state.status = ControllerState.DONE
                break

        return summary
