"""Event Bridge — aplica eventos assíncronos do protocolo ao estado da sessão.

Eventos entram numa fila limitada e são consumidos em ordem de chegada
por uma única task (iniciada/parada pelo lifespan da aplicação). Cada
evento vira uma transição no ConnectionStateHolder ou um registro no
InboundMessageBuffer.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

from app.constants.whatsapp import is_error_disconnect
from app.domain.events import (
    ConnectionClosed,
    ConnectionOpened,
    MessageReceived,
    PairingRequired,
    SessionEvent,
)
from fsm.states import ConnectionPhase
from utils.errors import EventQueueFullError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.infra.stores.message_buffer import InboundMessageBuffer
    from app.sessions.state_holder import ConnectionStateHolder

logger = logging.getLogger(__name__)

DEFAULT_EVENT_QUEUE_SIZE = 1000

# Fases a partir das quais um fechamento de conexão é aplicado
_CLOSABLE_PHASES = frozenset({ConnectionPhase.CONNECTED, ConnectionPhase.AWAITING_PAIRING})


class EventBridge:
    """Consumidor único dos eventos de conexão e mensagem."""

    def __init__(
        self,
        holder: ConnectionStateHolder,
        buffer: InboundMessageBuffer,
        *,
        queue_size: int = DEFAULT_EVENT_QUEUE_SIZE,
    ) -> None:
        self._holder = holder
        self._buffer = buffer
        self._queue_size = queue_size
        self._queue: asyncio.Queue[SessionEvent] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._consumer: asyncio.Task[None] | None = None
        self._reconnect_handler: Callable[[], Awaitable[Any]] | None = None
        self._reconnect_tasks: set[asyncio.Task[Any]] = set()

    @property
    def is_running(self) -> bool:
        return self._consumer is not None and not self._consumer.done()

    @property
    def pending_events(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    def set_reconnect_handler(self, handler: Callable[[], Awaitable[Any]]) -> None:
        """Define o caminho de inicialização chamado quando o protocolo pede reconexão."""
        self._reconnect_handler = handler

    async def start(self) -> None:
        """Inicia a task consumidora no loop atual."""
        if self.is_running:
            return
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue(maxsize=self._queue_size)
        self._consumer = asyncio.create_task(self._consume(), name="session_event_bridge")
        logger.info("event_bridge_started", extra={"queue_size": self._queue_size})

    async def stop(self) -> None:
        """Para o consumidor e cancela reconexões pendentes.

        Eventos ainda na fila são descartados (não há persistência).
        """
        consumer = self._consumer
        self._consumer = None
        if consumer is not None:
            consumer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await consumer

        pending = list(self._reconnect_tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        dropped = self.pending_events
        self._queue = None
        self._loop = None
        logger.info("event_bridge_stopped", extra={"dropped_events": dropped})

    async def publish(self, event: SessionEvent) -> None:
        """Enfileira um evento, aguardando espaço na fila (backpressure)."""
        await self._require_queue().put(event)

    def publish_nowait(self, event: SessionEvent) -> None:
        """Enfileira sem esperar.

        Raises:
            EventQueueFullError: Se a fila estiver cheia.
        """
        try:
            self._require_queue().put_nowait(event)
        except asyncio.QueueFull as exc:
            logger.error(
                "event_bridge_queue_full",
                extra={"event_type": type(event).__name__, "queue_size": self._queue_size},
            )
            raise EventQueueFullError("fila de eventos cheia") from exc

    def publish_threadsafe(self, event: SessionEvent) -> None:
        """Enfileira a partir de uma thread fora do loop do bridge."""
        loop = self._loop
        if loop is None or not self.is_running:
            raise RuntimeError("event bridge não iniciado")
        loop.call_soon_threadsafe(self._enqueue_from_thread, event)

    def _enqueue_from_thread(self, event: SessionEvent) -> None:
        try:
            self.publish_nowait(event)
        except (EventQueueFullError, RuntimeError):
            logger.warning(
                "event_bridge_event_dropped",
                extra={"event_type": type(event).__name__},
            )

    def _require_queue(self) -> asyncio.Queue[SessionEvent]:
        if self._queue is None:
            raise RuntimeError("event bridge não iniciado")
        return self._queue

    async def _consume(self) -> None:
        queue = self._require_queue()
        while True:
            event = await queue.get()
            try:
                await self.apply(event)
            except Exception:
                logger.exception(
                    "event_bridge_apply_failed",
                    extra={"event_type": type(event).__name__},
                )
            finally:
                queue.task_done()

    async def join(self) -> None:
        """Aguarda até que todos os eventos enfileirados sejam aplicados."""
        if self._queue is not None:
            await self._queue.join()

    async def apply(self, event: SessionEvent) -> None:
        """Aplica um evento ao estado (chamado pelo consumidor)."""
        match event:
            case PairingRequired():
                self._on_pairing_required(event)
            case ConnectionOpened():
                self._on_connection_opened()
            case ConnectionClosed():
                self._on_connection_closed(event)
            case MessageReceived():
                self._buffer.record(event.message)
            case _:
                logger.warning(
                    "event_bridge_unknown_event",
                    extra={"event_type": type(event).__name__},
                )

    def _on_pairing_required(self, event: PairingRequired) -> None:
        phase = self._holder.phase
        if phase == ConnectionPhase.CONNECTED:
            logger.info("pairing_required_ignored", extra={"phase": phase.value})
            return
        self._holder.apply(
            ConnectionPhase.AWAITING_PAIRING,
            trigger="pairing_required",
            pairing_artifact=event.artifact,
        )

    def _on_connection_opened(self) -> None:
        if self._holder.phase == ConnectionPhase.CONNECTED:
            return
        self._holder.apply(ConnectionPhase.CONNECTED, trigger="connection_open")

    def _on_connection_closed(self, event: ConnectionClosed) -> None:
        phase = self._holder.phase
        if phase not in _CLOSABLE_PHASES:
            logger.info(
                "connection_close_ignored",
                extra={"phase": phase.value, "reason": event.reason},
            )
        elif is_error_disconnect(event.reason):
            self._holder.apply(
                ConnectionPhase.ERROR,
                trigger="connection_close",
                error_detail=event.reason,
            )
        else:
            self._holder.apply(ConnectionPhase.DISCONNECTED, trigger="connection_close")

        if event.should_reconnect:
            self._schedule_reconnect(event.reason)

    def _schedule_reconnect(self, reason: str | None) -> None:
        handler = self._reconnect_handler
        if handler is None:
            logger.warning("reconnect_requested_without_handler", extra={"reason": reason})
            return
        task = asyncio.create_task(self._run_reconnect(handler))
        self._reconnect_tasks.add(task)
        task.add_done_callback(self._reconnect_tasks.discard)
        logger.info(
            "reconnect_scheduled",
            extra={"reason": reason, "active_tasks": len(self._reconnect_tasks)},
        )

    async def _run_reconnect(self, handler: Callable[[], Awaitable[Any]]) -> None:
        try:
            await handler()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.error(
                "reconnect_failed",
                extra={"error_type": type(exc).__name__},
            )
