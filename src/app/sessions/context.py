"""Contexto explícito da sessão WhatsApp, criado pela raiz de composição.

Substitui singletons globais: a aplicação cria um único contexto,
guarda-o em `app.state` e os handlers o recebem por dependência.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.infra.stores.message_buffer import InboundMessageBuffer
from app.sessions.event_bridge import EventBridge
from app.sessions.service import SessionService
from app.sessions.state_holder import ConnectionStateHolder
from app.use_cases.whatsapp.send_outbound_message import OutboundDispatcher
from config.settings.base.session import SessionSettings

if TYPE_CHECKING:
    from app.protocols.messaging_client import MessagingClientProtocol

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WhatsAppSessionContext:
    """Componentes do núcleo de sessão compartilhados pela aplicação."""

    client: MessagingClientProtocol
    holder: ConnectionStateHolder
    buffer: InboundMessageBuffer
    bridge: EventBridge
    service: SessionService
    dispatcher: OutboundDispatcher

    @classmethod
    def create(
        cls,
        client: MessagingClientProtocol,
        settings: SessionSettings | None = None,
        address_suffix: str | None = None,
    ) -> WhatsAppSessionContext:
        """Monta o núcleo de sessão sobre um cliente de protocolo."""
        settings = settings or SessionSettings()
        holder = ConnectionStateHolder()
        buffer = InboundMessageBuffer(max_messages=settings.max_buffered_messages)
        bridge = EventBridge(holder, buffer, queue_size=settings.event_queue_size)
        service = SessionService(holder, buffer, client, settings)
        dispatcher = OutboundDispatcher(
            holder,
            client,
            send_timeout_seconds=settings.send_timeout_seconds,
            address_suffix=address_suffix,
        )
        bridge.set_reconnect_handler(service.initialize_session)
        return cls(
            client=client,
            holder=holder,
            buffer=buffer,
            bridge=bridge,
            service=service,
            dispatcher=dispatcher,
        )

    async def start(self) -> None:
        await self.bridge.start()

    async def close(self) -> None:
        """Para o bridge e fecha o cliente de protocolo."""
        await self.bridge.stop()
        await self.dispatcher.drain()
        await self.client.aclose()
        logger.info("session_context_closed")
