"""
Contexto explicito de una corrida.

Reune lo que cada componente necesita (config, opciones, gateway, checkpoint
resuelto y el logger de la corrida) y se pasa hacia abajo; ningun componente
lee configuracion global.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from loguru import logger

from attachment_transfer.application.interfaces.onspring_gateway import OnspringGateway
from attachment_transfer.application.services.dispatch import Dispatcher, build_dispatcher
from attachment_transfer.domain.entities.transfer_config import (
    ResolvedCheckpoint,
    RunOptions,
    TransferConfig,
)


@dataclass(frozen=True)
class RunContext:
    config: TransferConfig
    gateway: OnspringGateway
    options: RunOptions = field(default_factory=RunOptions)
    checkpoint: Optional[ResolvedCheckpoint] = None
    log: Any = field(default_factory=lambda: logger.bind(run="attachment-transfer"))

    @property
    def dispatcher(self) -> Dispatcher:
        return build_dispatcher(self.options.parallel, self.options.max_concurrency)

    def with_checkpoint(self, checkpoint: Optional[ResolvedCheckpoint]) -> "RunContext":
        return replace(self, checkpoint=checkpoint)
