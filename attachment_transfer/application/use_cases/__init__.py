"""
Casos de uso de la aplicacion.
"""
from .transfer_use_cases import TransferUseCases, RunSummary, PageState, ControllerState
from .validation_use_cases import ValidationUseCases
from .request_estimator import estimate_request_count

__all__ = [
    "TransferUseCases",
    "RunSummary",
    "PageState",
    "ControllerState",
    "ValidationUseCases",
    "estimate_request_count",
]
