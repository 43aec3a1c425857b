"""
Servicios de aplicacion.

Componentes del pipeline de match y transferencia, de las hojas hacia arriba.
"""
from attachment_transfer.application.services.value_canonicalizer import (
    canonicalize,
    is_valid_match_field,
)
from attachment_transfer.application.services.attachment_extractor import extract_file_ids
from attachment_transfer.application.services.dispatch import (
    ConcurrentDispatcher,
    Dispatcher,
    SequentialDispatcher,
    build_dispatcher,
)
from attachment_transfer.application.services.run_context import RunContext
from attachment_transfer.application.services.record_matcher import RecordMatcher
from attachment_transfer.application.services.transfer_executor import TransferExecutor
from attachment_transfer.application.services.record_processor import RecordProcessor

__all__ = [
    # Valores
    "canonicalize",
    "is_valid_match_field",
    "extract_file_ids",
    # Despacho
    "Dispatcher",
    "SequentialDispatcher",
    "ConcurrentDispatcher",
    "build_dispatcher",
    # Pipeline
    "RunContext",
    "RecordMatcher",
    "TransferExecutor",
    "RecordProcessor",
]
