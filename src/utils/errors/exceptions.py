"""Exceções de domínio para falhas recuperáveis de infraestrutura."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class GatewayUnavailableError(InfrastructureError):
    """Falha de conexão/timeout ao acessar o gateway do protocolo."""


class EventQueueFullError(InfrastructureError):
    """Fila de eventos do protocolo cheia (publicação sem espera)."""
