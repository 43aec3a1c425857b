"""
Contratos hacia servicios externos.
"""
from attachment_transfer.application.interfaces.onspring_gateway import OnspringGateway

__all__ = ["OnspringGateway"]
