"""
Construcción interactiva de la configuración cuando no se pasa archivo.

Cada valor se pregunta hasta que sea válido. El checkpoint es opcional: dejar
vacío el id del campo de checkpoint lo omite.
"""
from __future__ import annotations

from typing import Callable, Dict, Optional

from loguru import logger

from attachment_transfer.core.run_config import parse_field_mappings
from attachment_transfer.domain.entities.transfer_config import FlagFieldConfig, TransferConfig

InputFunc = Callable[[str], str]


def _ask_value(ask: InputFunc, message: str) -> str:
    while True:
        value = ask(message).strip()
        if value:
            return value


def _ask_id(ask: InputFunc, message: str, *, optional: bool = False) -> Optional[int]:
    while True:
        raw = ask(message).strip()
        if optional and not raw:
            return None
        try:
            parsed = int(raw)
        except ValueError:
            logger.error(f"'{raw}' no es un id válido.")
            continue
        if parsed > 0:
            return parsed
        logger.error(f"'{raw}' no es un id válido.")


def _ask_mappings(ask: InputFunc) -> Dict[int, int]:
    while True:
        raw = ask("Mapeos de campos de adjuntos (p. ej. 1001|2001,1002|2002): ")
        try:
            return parse_field_mappings(raw)
        except ValueError as e:
            logger.error(f"Mapeo inválido: {e}")


def prompt_transfer_config(ask: InputFunc = input) -> TransferConfig:
    source_key = _ask_value(ask, "API key de la instancia origen: ")
    target_key = _ask_value(ask, "API key de la instancia destino: ")
    source_app_id = _ask_id(ask, "Id de la app origen: ")
    target_app_id = _ask_id(ask, "Id de la app destino: ")
    source_match = _ask_id(ask, "Id del campo de match en la app origen: ")
    target_match = _ask_id(ask, "Id del campo de match en la app destino: ")
    mappings = _ask_mappings(ask)

    flag_field = None
    flag_field_id = _ask_id(
        ask,
        "Id del campo de checkpoint en la app origen (vacío para no usar checkpoint): ",
        optional=True,
    )
    if flag_field_id is not None:
        flag_field = FlagFieldConfig(
            field_id=flag_field_id,
            process_value=_ask_value(ask, "Valor que indica que el registro debe procesarse: "),
            processed_value=_ask_value(ask, "Valor con el que se marca el registro como procesado: "),
        )

    return TransferConfig(
        source_instance_key=source_key,
        target_instance_key=target_key,
        source_app_id=source_app_id,
        target_app_id=target_app_id,
        source_match_field_id=source_match,
        target_match_field_id=target_match,
        attachment_field_mappings=mappings,
        flag_field=flag_field,
    )
