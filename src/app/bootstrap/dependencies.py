"""Factories do núcleo de sessão — criação de implementações concretas.

Centraliza a criação do cliente de protocolo e do contexto da sessão
a partir das configurações de ambiente.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.connectors.gateway.http_client import create_gateway_client
from app.sessions.context import WhatsAppSessionContext
from config.settings import get_gateway_settings, get_session_settings

if TYPE_CHECKING:
    from app.protocols.messaging_client import MessagingClientProtocol

logger = logging.getLogger(__name__)


def create_messaging_client() -> MessagingClientProtocol:
    """Cria o cliente do gateway do protocolo conforme GATEWAY_*."""
    gateway = get_gateway_settings()
    logger.info(
        "messaging_client_created",
        extra={"backend": "gateway_http", "max_retries": gateway.max_retries},
    )
    return create_gateway_client(gateway)


def create_session_context(
    client: MessagingClientProtocol | None = None,
) -> WhatsAppSessionContext:
    """Monta o contexto da sessão (estado, buffer, bridge, serviço, dispatcher).

    Args:
        client: Cliente de protocolo opcional. Se None, usa o gateway HTTP.
    """
    return WhatsAppSessionContext.create(
        client or create_messaging_client(),
        settings=get_session_settings(),
        address_suffix=get_gateway_settings().address_suffix,
    )
