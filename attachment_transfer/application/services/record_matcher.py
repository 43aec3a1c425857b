"""
Búsqueda del registro destino que corresponde a un registro origen.

Match exacto (`eq`) sobre el campo de match de la app destino; no hay match
parcial ni difuso. Exactamente un resultado resuelve el match; cero o más de
uno se tratan igual (se salta el registro) pero se loguean distinto.
"""
from __future__ import annotations

from attachment_transfer.application.services.filters import build_equals_filter
from attachment_transfer.application.services.run_context import RunContext
from attachment_transfer.domain.entities.results import ApiResult, Failure, MatchResult, Success


class RecordMatcher:
    def __init__(self, context: RunContext) -> None:
        self._ctx = context

    async def resolve(self, match_value: str) -> ApiResult[MatchResult]:
        """
        Resuelve `match_value` contra la app destino.

        Un fallo del query se devuelve como Failure: nunca se confunde con
        "sin match".
        """
        config = self._ctx.config
        log = self._ctx.log
        result = await self._ctx.gateway.query_records(
            config.target_instance_key,
            config.target_app_id,
            [config.target_match_field_id],
            build_equals_filter(config.target_match_field_id, match_value),
        )

        if isinstance(result, Failure):
            log.error(
                f"No se pudo consultar la App destino {config.target_app_id} "
                f"buscando el valor '{match_value}': {result.message}"
            )
            return result

        records = result.value
        if len(records) == 1:
            return Success(MatchResult.matched(records[0].record_id))

        if not records:
            log.warning(
                f"Ningún registro en la App destino {config.target_app_id} "
                f"tiene el valor de match '{match_value}'."
            )
            return Success(MatchResult.no_match())

        log.error(
            f"Match ambiguo: {len(records)} registros en la App destino {config.target_app_id} "
            f"tienen el valor de match '{match_value}'."
        )
        return Success(MatchResult.ambiguous(len(records)))
