"""
Validaciones previas a la corrida.

Si alguna falla la corrida no empieza:
- campos de match inexistentes o de tipo no soportado -> InvalidMatchFieldsException
- campo de checkpoint que no es lista, o valores que no existen -> InvalidFlagFieldException
"""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from attachment_transfer.application.services.run_context import RunContext
from attachment_transfer.application.services.value_canonicalizer import is_valid_match_field
from attachment_transfer.domain.entities.records import FieldDefinition, FieldType, ListValue
from attachment_transfer.domain.entities.results import Failure
from attachment_transfer.domain.entities.transfer_config import ResolvedCheckpoint
from attachment_transfer.shared.exceptions import (
    InvalidFlagFieldException,
    InvalidMatchFieldsException,
)


def find_list_value(field: FieldDefinition, value: str) -> Optional[ListValue]:
    """
    Busca una opcion de lista por id (GUID literal) o por nombre.

    El nombre se compara sin distinguir mayusculas ni espacios en los extremos.
    """
    candidate = value.strip()
    try:
        as_guid: Optional[UUID] = UUID(candidate)
    except ValueError:
        as_guid = None

    for option in field.values:
        if as_guid is not None and option.id == as_guid:
            return option
    for option in field.values:
        if option.name.strip().lower() == candidate.lower():
            return option
    return None


class ValidationUseCases:
    def __init__(self, context: RunContext) -> None:
        self._ctx = context

    async def validate_match_fields(self) -> None:
        config = self._ctx.config
        checks = (
            ("origen", config.source_instance_key, config.source_match_field_id),
            ("destino", config.target_instance_key, config.target_match_field_id),
        )
        for side, instance_key, field_id in checks:
            result = await self._ctx.gateway.get_field(instance_key, field_id)
            if isinstance(result, Failure):
                raise InvalidMatchFieldsException(
                    f"No se pudo obtener el campo de match {side} {field_id}: {result.message}",
                    field_id=field_id,
                )
            if not is_valid_match_field(result.value):
                raise InvalidMatchFieldsException(
                    f"El campo de match {side} {field_id} es de tipo {result.value.type.value}"
                    f" y no se puede usar para hacer match.",
                    field_id=field_id,
                )
        self._ctx.log.info("Campos de match validados.")

    async def resolve_checkpoint(self) -> Optional[ResolvedCheckpoint]:
        """Devuelve el checkpoint resuelto, o None si no se configuro."""
        config = self._ctx.config
        flag = config.flag_field
        if flag is None:
            return None

        result = await self._ctx.gateway.get_field(config.source_instance_key, flag.field_id)
        if isinstance(result, Failure):
            raise InvalidFlagFieldException(
                f"No se pudo obtener el campo de checkpoint {flag.field_id}: {result.message}",
                field_id=flag.field_id,
            )

        field = result.value
        if field.type is not FieldType.LIST:
            raise InvalidFlagFieldException(
                f"El campo de checkpoint {flag.field_id} debe ser un campo de lista "
                f"(es {field.type.value}).",
                field_id=flag.field_id,
            )

        resolved: list[ListValue] = []
        for value in (flag.process_value, flag.processed_value):
            option = find_list_value(field, value)
            if option is None:
                raise InvalidFlagFieldException(
                    f"El valor '{value}' no existe en el campo de checkpoint {flag.field_id}.",
                    field_id=flag.field_id,
                    value=value,
                )
            resolved.append(option)

        process_option, processed_option = resolved
        self._ctx.log.info(
            f"Checkpoint: campo {flag.field_id}, procesar '{process_option.name}', "
            f"procesado '{processed_option.name}'."
        )
        return ResolvedCheckpoint(
            field_id=flag.field_id,
            process_value_id=process_option.id,
            processed_value_id=processed_option.id,
        )
