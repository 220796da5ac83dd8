"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    EventQueueFullError,
    GatewayUnavailableError,
    InfrastructureError,
)

__all__ = [
    "EventQueueFullError",
    "GatewayUnavailableError",
    "InfrastructureError",
]
