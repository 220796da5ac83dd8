"""Conversão dos eventos do gateway em eventos de domínio da sessão.

Formato recebido:
    {"event": "pairing.required", "data": {"qr": "..."}}
    {"event": "connection.open", "data": {}}
    {"event": "connection.close", "data": {"reason": "...", "shouldReconnect": true}}
    {"event": "message.received", "data": {<mensagem>}}
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from app.domain.events import (
    ConnectionClosed,
    ConnectionOpened,
    MessageReceived,
    PairingRequired,
    SessionEvent,
)
from app.domain.messages import InboundMessage


class GatewayEventType(StrEnum):
    PAIRING_REQUIRED = "pairing.required"
    CONNECTION_OPEN = "connection.open"
    CONNECTION_CLOSE = "connection.close"
    MESSAGE_RECEIVED = "message.received"


class GatewayEventError(ValueError):
    """Evento do gateway desconhecido ou malformado."""


def parse_gateway_event(payload: dict[str, Any]) -> SessionEvent:
    """Converte o payload do webhook em evento de domínio.

    Raises:
        GatewayEventError: Se o tipo for desconhecido ou faltar dado obrigatório.
    """
    raw_type = payload.get("event")
    try:
        event_type = GatewayEventType(str(raw_type))
    except ValueError as exc:
        raise GatewayEventError("unknown_event") from exc

    data = payload.get("data") or {}
    if not isinstance(data, dict):
        raise GatewayEventError("data_not_object")

    if event_type is GatewayEventType.PAIRING_REQUIRED:
        artifact = data.get("qr")
        if not isinstance(artifact, str) or not artifact:
            raise GatewayEventError("missing_qr")
        return PairingRequired(artifact=artifact)

    if event_type is GatewayEventType.CONNECTION_OPEN:
        return ConnectionOpened()

    if event_type is GatewayEventType.CONNECTION_CLOSE:
        reason = data.get("reason")
        return ConnectionClosed(
            reason=str(reason) if reason else None,
            should_reconnect=bool(data.get("shouldReconnect", False)),
        )

    try:
        message = InboundMessage.from_payload(data)
    except ValueError as exc:
        raise GatewayEventError("invalid_message") from exc
    return MessageReceived(message=message)
