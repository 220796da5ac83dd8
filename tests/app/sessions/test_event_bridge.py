"""Testes do EventBridge (aplicação de eventos e ciclo de vida da fila)."""

from __future__ import annotations

import asyncio

import pytest

from app.constants.whatsapp import MessageKind
from app.domain.events import (
    ConnectionClosed,
    ConnectionOpened,
    MessageReceived,
    PairingRequired,
)
from app.domain.messages import InboundMessage
from app.infra.stores.message_buffer import InboundMessageBuffer
from app.sessions.event_bridge import EventBridge
from app.sessions.state_holder import ConnectionStateHolder
from fsm.states import ConnectionPhase
from utils.errors import EventQueueFullError


def _bridge(queue_size: int = 10) -> tuple[EventBridge, ConnectionStateHolder, InboundMessageBuffer]:
    holder = ConnectionStateHolder()
    buffer = InboundMessageBuffer()
    return EventBridge(holder, buffer, queue_size=queue_size), holder, buffer


def _message(message_id: str = "m1") -> InboundMessage:
    return InboundMessage(
        id=message_id,
        sender="5491112223344@s.whatsapp.net",
        from_me=False,
        timestamp=1_700_000_000,
        kind=MessageKind.AUDIO,
        content={"mimetype": "audio/ogg; codecs=opus"},
    )


class TestApply:
    """Regras de aplicação evento → estado."""

    @pytest.mark.asyncio
    async def test_pairing_then_open(self) -> None:
        bridge, holder, _ = _bridge()

        await bridge.apply(PairingRequired(artifact="2@abc"))
        assert holder.snapshot().phase == ConnectionPhase.AWAITING_PAIRING
        assert holder.snapshot().pairing_artifact == "2@abc"

        await bridge.apply(PairingRequired(artifact="2@def"))
        assert holder.snapshot().pairing_artifact == "2@def"

        await bridge.apply(ConnectionOpened())
        state = holder.snapshot()
        assert state.phase == ConnectionPhase.CONNECTED
        assert state.pairing_artifact is None

    @pytest.mark.asyncio
    async def test_pairing_ignored_while_connected(self) -> None:
        bridge, holder, _ = _bridge()
        await bridge.apply(ConnectionOpened())
        version = holder.snapshot().version

        await bridge.apply(PairingRequired(artifact="2@late"))
        await bridge.apply(ConnectionOpened())

        assert holder.snapshot().phase == ConnectionPhase.CONNECTED
        assert holder.snapshot().version == version

    @pytest.mark.asyncio
    async def test_close_with_error_reason(self) -> None:
        bridge, holder, _ = _bridge()
        await bridge.apply(ConnectionOpened())

        await bridge.apply(ConnectionClosed(reason="connection_replaced"))

        state = holder.snapshot()
        assert state.phase == ConnectionPhase.ERROR
        assert state.error_detail == "connection_replaced"

    @pytest.mark.asyncio
    async def test_close_with_ordinary_reason(self) -> None:
        bridge, holder, _ = _bridge()
        await bridge.apply(PairingRequired(artifact="2@abc"))

        await bridge.apply(ConnectionClosed(reason="timed_out"))

        assert holder.snapshot().phase == ConnectionPhase.DISCONNECTED
        assert holder.snapshot().pairing_artifact is None

    @pytest.mark.asyncio
    async def test_close_ignored_when_already_disconnected(self) -> None:
        bridge, holder, _ = _bridge()
        await bridge.apply(ConnectionClosed(reason="bad_session"))
        assert holder.snapshot().version == 0

    @pytest.mark.asyncio
    async def test_message_received_recorded_once(self) -> None:
        bridge, _, buffer = _bridge()
        await bridge.apply(MessageReceived(message=_message("m1")))
        await bridge.apply(MessageReceived(message=_message("m1")))
        assert [m.id for m in buffer.list_messages()] == ["m1"]


class TestReconnect:
    @pytest.mark.asyncio
    async def test_should_reconnect_invokes_handler(self) -> None:
        bridge, holder, _ = _bridge()
        called = asyncio.Event()

        async def handler() -> None:
            called.set()

        bridge.set_reconnect_handler(handler)
        await bridge.apply(ConnectionOpened())
        await bridge.apply(ConnectionClosed(reason="connection_lost", should_reconnect=True))

        await asyncio.wait_for(called.wait(), timeout=1)
        assert holder.snapshot().phase == ConnectionPhase.DISCONNECTED

    @pytest.mark.asyncio
    async def test_reconnect_from_error_keeps_phase(self) -> None:
        bridge, holder, _ = _bridge()
        called = asyncio.Event()

        async def handler() -> None:
            called.set()

        bridge.set_reconnect_handler(handler)
        holder.apply(
            ConnectionPhase.ERROR, trigger="initialize_pairing_timeout", error_detail="timeout"
        )
        version = holder.snapshot().version

        await bridge.apply(ConnectionClosed(reason="connection_lost", should_reconnect=True))

        await asyncio.wait_for(called.wait(), timeout=1)
        state = holder.snapshot()
        assert state.phase == ConnectionPhase.ERROR
        assert state.error_detail == "timeout"
        assert state.version == version

    @pytest.mark.asyncio
    async def test_failing_handler_is_contained(self) -> None:
        bridge, _, _ = _bridge()
        done = asyncio.Event()

        async def handler() -> None:
            done.set()
            raise RuntimeError("gateway fora")

        bridge.set_reconnect_handler(handler)
        await bridge.apply(ConnectionOpened())
        await bridge.apply(ConnectionClosed(reason="restart_required", should_reconnect=True))

        await asyncio.wait_for(done.wait(), timeout=1)
        await asyncio.sleep(0)

    @pytest.mark.asyncio
    async def test_stop_cancels_pending_reconnect(self) -> None:
        bridge, _, _ = _bridge()
        started = asyncio.Event()
        cancelled = asyncio.Event()

        async def handler() -> None:
            started.set()
            try:
                await asyncio.sleep(60)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        bridge.set_reconnect_handler(handler)
        await bridge.start()
        await bridge.apply(ConnectionOpened())
        await bridge.apply(ConnectionClosed(reason="connection_lost", should_reconnect=True))
        await asyncio.wait_for(started.wait(), timeout=1)

        await bridge.stop()

        assert cancelled.is_set()


class TestQueueLifecycle:
    @pytest.mark.asyncio
    async def test_events_applied_in_arrival_order(self) -> None:
        bridge, holder, buffer = _bridge()
        await bridge.start()
        try:
            await bridge.publish(PairingRequired(artifact="2@abc"))
            bridge.publish_nowait(ConnectionOpened())
            bridge.publish_nowait(MessageReceived(message=_message("m1")))
            await asyncio.wait_for(bridge.join(), timeout=1)
        finally:
            await bridge.stop()

        assert holder.snapshot().phase == ConnectionPhase.CONNECTED
        assert buffer.get_by_id("m1") is not None
        assert bridge.is_running is False

    @pytest.mark.asyncio
    async def test_publish_before_start_raises(self) -> None:
        bridge, _, _ = _bridge()
        with pytest.raises(RuntimeError):
            await bridge.publish(ConnectionOpened())
        with pytest.raises(RuntimeError):
            bridge.publish_threadsafe(ConnectionOpened())

    @pytest.mark.asyncio
    async def test_publish_nowait_when_full(self) -> None:
        bridge, _, _ = _bridge(queue_size=1)
        await bridge.start()
        try:
            bridge.publish_nowait(ConnectionOpened())
            with pytest.raises(EventQueueFullError):
                bridge.publish_nowait(ConnectionOpened())
        finally:
            await bridge.stop()

    @pytest.mark.asyncio
    async def test_publish_threadsafe_from_worker_thread(self) -> None:
        bridge, _, buffer = _bridge()
        await bridge.start()
        try:
            await asyncio.to_thread(
                bridge.publish_threadsafe, MessageReceived(message=_message("m9"))
            )
            await asyncio.sleep(0)
            await asyncio.wait_for(bridge.join(), timeout=1)
        finally:
            await bridge.stop()

        assert buffer.get_by_id("m9") is not None
