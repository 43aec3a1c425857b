"""
Procesamiento de un registro origen.

Orden:
1. Leer el valor de match (si falta, se salta el registro).
2. Canonicalizarlo y resolver el registro destino (si no hay match único, se salta).
3. Por cada mapeo de campo de adjuntos: extraer ids y transferir cada archivo.
   Un campo sin datos se salta sin afectar a los demás.
4. Si hay checkpoint, marcar el registro como procesado. Si falla, solo se
   advierte: el registro puede volver a procesarse en otra corrida.

Nada de esto se reintenta a nivel registro.
"""
from __future__ import annotations

from dataclasses import dataclass

from attachment_transfer.application.services.attachment_extractor import extract_file_ids
from attachment_transfer.application.services.record_matcher import RecordMatcher
from attachment_transfer.application.services.run_context import RunContext
from attachment_transfer.application.services.transfer_executor import TransferExecutor
from attachment_transfer.application.services.value_canonicalizer import canonicalize
from attachment_transfer.domain.entities.records import SourceRecord
from attachment_transfer.domain.entities.results import (
    Failure,
    MatchStatus,
    RecordOutcome,
    SkipReason,
    TransferOutcome,
)


@dataclass(frozen=True)
class _FieldOutcome:
    skipped: bool
    transfers: tuple[TransferOutcome, ...] = ()


class RecordProcessor:
    def __init__(self, context: RunContext) -> None:
        self._ctx = context
        self._matcher = RecordMatcher(context)
        self._executor = TransferExecutor(context)

    async def process(self, record: SourceRecord) -> RecordOutcome:
        config = self._ctx.config
        log = self._ctx.log.bind(source_record_id=record.record_id)
        log.info(f"Procesando Registro {record.record_id} de la App origen {record.app_id}.")

        match_value = record.get_value(config.source_match_field_id)
        if match_value is None:
            log.warning(
                f"El Registro {record.record_id} de la App origen {record.app_id} "
                f"no tiene valor en el campo de match {config.source_match_field_id}."
            )
            return RecordOutcome(record_id=record.record_id, skipped=SkipReason.MISSING_MATCH_VALUE)

        match_string = canonicalize(match_value)
        resolved = await self._matcher.resolve(match_string)

        if isinstance(resolved, Failure):
            log.warning(
                f"Se salta el Registro {record.record_id}: falló la búsqueda del match '{match_string}'."
            )
            return RecordOutcome(record_id=record.record_id, skipped=SkipReason.MATCH_LOOKUP_FAILED)

        match = resolved.value
        if not match.is_resolved:
            reason = (
                SkipReason.AMBIGUOUS_MATCH
                if match.status is MatchStatus.AMBIGUOUS
                else SkipReason.NO_MATCH
            )
            log.warning(
                f"Se salta el Registro {record.record_id} de la App origen {record.app_id}: "
                f"sin match único ('{match_string}') en la App destino {config.target_app_id}."
            )
            return RecordOutcome(record_id=record.record_id, skipped=reason)

        target_record_id = match.record_id

        async def _process_field(source_field_id: int) -> _FieldOutcome:
            return await self._process_field(record, source_field_id, target_record_id)

        field_outcomes = await self._ctx.dispatcher.map(
            _process_field, config.source_attachment_field_ids
        )

        transfers = [t for outcome in field_outcomes for t in outcome.transfers]
        checkpointed = await self._mark_processed(record)

        log.info(f"Registro {record.record_id} de la App origen {record.app_id} procesado.")
        return RecordOutcome(
            record_id=record.record_id,
            target_record_id=target_record_id,
            files_transferred=sum(1 for t in transfers if t.succeeded),
            files_failed=sum(1 for t in transfers if not t.succeeded),
            fields_skipped=sum(1 for outcome in field_outcomes if outcome.skipped),
            checkpointed=checkpointed,
        )

    async def _process_field(
        self, record: SourceRecord, source_field_id: int, target_record_id: int
    ) -> _FieldOutcome:
        value = record.get_value(source_field_id)
        if value is None:
            self._ctx.log.warning(
                f"Sin datos en el campo de adjuntos {source_field_id} "
                f"del Registro {record.record_id} (App {record.app_id})."
            )
            return _FieldOutcome(skipped=True)

        target_field_id = self._ctx.config.target_field_for(source_field_id)

        async def _transfer(file_id: int) -> TransferOutcome:
            return await self._executor.transfer(
                record.record_id, source_field_id, file_id, target_record_id, target_field_id
            )

        transfers = await self._ctx.dispatcher.map(_transfer, extract_file_ids(value))
        return _FieldOutcome(skipped=False, transfers=tuple(transfers))

    async def _mark_processed(self, record: SourceRecord) -> bool:
        checkpoint = self._ctx.checkpoint
        if checkpoint is None:
            return False

        config = self._ctx.config
        result = await self._ctx.gateway.save_record(
            config.source_instance_key,
            config.source_app_id,
            record.record_id,
            {checkpoint.field_id: str(checkpoint.processed_value_id)},
        )
        if isinstance(result, Failure):
            self._ctx.log.warning(
                f"No se pudo marcar como procesado el Registro {record.record_id} "
                f"(App {config.source_app_id}, campo {checkpoint.field_id}): {result.message}"
            )
            return False
        return True
