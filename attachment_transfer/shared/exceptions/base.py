"""
Excepción base para los errores que impiden completar la transferencia.
"""
from typing import Optional, Dict, Any


class TransferException(Exception):
    """
    Error fatal de la corrida.

    El CLI la atrapa, loguea `error_code: message` y termina el proceso con
    `exit_code`.
    """

    def __init__(
        self,
        message: str,
        exit_code: int = 1,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            message: Descripción legible del problema
            exit_code: Código con el que termina el proceso
            error_code: Identificador estable del tipo de error
            details: Datos de contexto (ids de campo, valores, etc.)
        """
        self.message = message
        self.exit_code = exit_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)
