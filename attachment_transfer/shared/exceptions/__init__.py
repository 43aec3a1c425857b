"""
Excepciones de la aplicación.
"""
from attachment_transfer.shared.exceptions.base import TransferException
from attachment_transfer.shared.exceptions.domain import (
    EXIT_INVALID_CONFIGURATION,
    EXIT_INVALID_FLAG_FIELD,
    EXIT_INVALID_MATCH_FIELDS,
    EXIT_RUN_ABORTED,
    InvalidConfigurationException,
    InvalidFlagFieldException,
    InvalidMatchFieldsException,
)

__all__ = [
    "TransferException",
    "InvalidConfigurationException",
    "InvalidMatchFieldsException",
    "InvalidFlagFieldException",
    "EXIT_INVALID_CONFIGURATION",
    "EXIT_INVALID_MATCH_FIELDS",
    "EXIT_INVALID_FLAG_FIELD",
    "EXIT_RUN_ABORTED",
]
