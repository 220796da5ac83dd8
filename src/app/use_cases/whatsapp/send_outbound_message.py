"""Use case para envio outbound WhatsApp (Outbound Dispatcher)."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

from app.constants.whatsapp import DEFAULT_AUDIO_MIMETYPE, USER_ADDRESS_SUFFIX, MessageKind
from app.domain.addresses import normalize_address
from app.domain.results import (
    CheckNumberResult,
    Failure,
    FailureReason,
    MessageSent,
    NumberChecked,
    SendFailed,
    SendResult,
)
from app.observability.metrics import record_latency, record_send_outcome
from app.protocols.messaging_client import MessagingClientError
from config.logging import mask_address
from fsm.states import ConnectionPhase

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.protocols.messaging_client import MessagingClientProtocol, SendReceipt
    from app.sessions.state_holder import ConnectionStateHolder

logger = logging.getLogger(__name__)

DEFAULT_SEND_TIMEOUT_SECONDS = 30.0


class OutboundDispatcher:
    """Serializa envios contra a conexão ativa e tipa o resultado.

    Envios só saem com a sessão CONNECTED; fora disso falham na hora
    com `not_connected`, sem chamar o cliente. Cada envio roda numa task
    própria (protegida com `asyncio.shield`), então o cancelamento da
    requisição HTTP não interrompe um envio já despachado.
    """

    def __init__(
        self,
        holder: ConnectionStateHolder,
        client: MessagingClientProtocol,
        *,
        send_timeout_seconds: float = DEFAULT_SEND_TIMEOUT_SECONDS,
        address_suffix: str | None = None,
    ) -> None:
        self._holder = holder
        self._client = client
        self._send_timeout = send_timeout_seconds
        self._suffix = address_suffix or USER_ADDRESS_SUFFIX
        self._lock = asyncio.Lock()
        self._in_flight: set[asyncio.Task[Any]] = set()

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def normalize(self, address: str) -> str:
        return normalize_address(address, self._suffix)

    async def send_text(self, to: str, body: str) -> SendResult:
        """Envia mensagem de texto."""
        return await self._dispatch(
            MessageKind.TEXT,
            to,
            lambda jid: self._client.send_message(jid, body),
        )

    async def send_audio(
        self,
        to: str,
        audio: bytes,
        mimetype: str | None = None,
    ) -> SendResult:
        """Envia áudio como anexo binário."""
        resolved_mimetype = mimetype or DEFAULT_AUDIO_MIMETYPE
        return await self._dispatch(
            MessageKind.AUDIO,
            to,
            lambda jid: self._client.send_audio(jid, audio, resolved_mimetype),
        )

    async def check_number_registered(self, address: str) -> CheckNumberResult:
        """Consulta se o endereço tem conta ativa (não altera estado)."""
        if self._holder.phase != ConnectionPhase.CONNECTED:
            return Failure(FailureReason.NOT_CONNECTED)

        jid = self.normalize(address)
        try:
            lookup = await asyncio.wait_for(
                self._client.check_number(jid), timeout=self._send_timeout
            )
        except TimeoutError:
            return Failure(FailureReason.TIMEOUT)
        return NumberChecked(address=lookup.address or jid, exists=lookup.exists)

    async def _dispatch(
        self,
        kind: MessageKind,
        to: str,
        send: Callable[[str], Awaitable[SendReceipt]],
    ) -> SendResult:
        if self._holder.phase != ConnectionPhase.CONNECTED:
            record_send_outcome(kind.value, False, FailureReason.NOT_CONNECTED.value)
            return SendFailed(to=to, reason=FailureReason.NOT_CONNECTED)

        jid = self.normalize(to)
        task = asyncio.create_task(self._send_serialized(kind, jid, send))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return await asyncio.shield(task)

    async def _send_serialized(
        self,
        kind: MessageKind,
        jid: str,
        send: Callable[[str], Awaitable[SendReceipt]],
    ) -> SendResult:
        started = time.perf_counter()
        try:
            async with asyncio.timeout(self._send_timeout):
                async with self._lock:
                    receipt = await send(jid)
        except TimeoutError:
            result: SendResult = SendFailed(to=jid, reason=FailureReason.TIMEOUT)
        except MessagingClientError as exc:
            result = SendFailed(
                to=jid,
                reason=FailureReason.DELIVERY_FAILED,
                message=str(exc),
            )
        else:
            if receipt.accepted:
                result = MessageSent(to=jid, message_id=receipt.message_id)
            else:
                result = SendFailed(
                    to=jid,
                    reason=FailureReason.DELIVERY_FAILED,
                    message=receipt.error or "",
                )
        finally:
            record_latency(
                "outbound_dispatcher",
                f"send_{kind.value}",
                (time.perf_counter() - started) * 1000,
            )

        record_send_outcome(
            kind.value,
            result.success,
            None if isinstance(result, MessageSent) else result.reason.value,
        )
        logger.info(
            "outbound_message_dispatched",
            extra={
                "message_kind": kind.value,
                "to": mask_address(jid),
                "success": result.success,
            },
        )
        return result

    async def drain(self, timeout_seconds: float = 10.0) -> None:
        """Aguarda envios pendentes durante o shutdown."""
        if not self.in_flight:
            return
        logger.info("outbound_dispatch_draining", extra={"pending_sends": self.in_flight})
        pending_now = list(self._in_flight)
        _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning(
                "outbound_dispatch_shutdown_cancelled",
                extra={"cancelled_tasks": len(pending)},
            )
