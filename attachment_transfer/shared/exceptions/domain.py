"""
Excepciones que impiden iniciar la corrida.

Cada condición tiene su propio código de salida para que quien ejecute el
proceso pueda distinguirlas.
"""
from typing import Any, Optional

from attachment_transfer.shared.exceptions.base import TransferException

EXIT_INVALID_CONFIGURATION = 1
EXIT_INVALID_MATCH_FIELDS = 2
EXIT_INVALID_FLAG_FIELD = 3
EXIT_RUN_ABORTED = 4


class InvalidConfigurationException(TransferException):
    """La configuración (archivo, prompts o settings) no es válida."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else None
        super().__init__(
            message=message,
            exit_code=EXIT_INVALID_CONFIGURATION,
            error_code="INVALID_CONFIGURATION",
            details=details
        )


class InvalidMatchFieldsException(TransferException):
    """Alguno de los campos de match no existe o no es de un tipo soportado."""

    def __init__(self, message: str, field_id: Any = None):
        super().__init__(
            message=message,
            exit_code=EXIT_INVALID_MATCH_FIELDS,
            error_code="INVALID_MATCH_FIELDS",
            details={"field_id": field_id} if field_id is not None else None
        )


class InvalidFlagFieldException(TransferException):
    """El campo de checkpoint o sus valores no se pudieron resolver."""

    def __init__(self, message: str, field_id: Any = None, value: Optional[str] = None):
        details = {}
        if field_id is not None:
            details["field_id"] = field_id
        if value is not None:
            details["value"] = value
        super().__init__(
            message=message,
            exit_code=EXIT_INVALID_FLAG_FIELD,
            error_code="INVALID_FLAG_FIELD",
            details=details
        )
