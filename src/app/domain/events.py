"""Eventos assíncronos do cliente de protocolo consumidos pelo Event Bridge."""

from __future__ import annotations

from dataclasses import dataclass

from app.domain.messages import InboundMessage


@dataclass(frozen=True, slots=True)
class PairingRequired:
    """Novo artefato de pareamento (QR) disponível."""

    artifact: str


@dataclass(frozen=True, slots=True)
class ConnectionOpened:
    """Conexão estabelecida (pareamento concluído ou credenciais retomadas)."""


@dataclass(frozen=True, slots=True)
class ConnectionClosed:
    """Conexão encerrada pelo protocolo."""

    reason: str | None = None
    should_reconnect: bool = False


@dataclass(frozen=True, slots=True)
class MessageReceived:
    """Mensagem inbound entregue pelo protocolo."""

    message: InboundMessage


SessionEvent = PairingRequired | ConnectionOpened | ConnectionClosed | MessageReceived
