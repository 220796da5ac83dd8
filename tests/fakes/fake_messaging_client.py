"""Fake in-memory do cliente de protocolo para testes deterministas."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from typing import Any

from app.protocols.messaging_client import (
    ClientStatus,
    MediaNotFoundError,
    NumberLookup,
    SendReceipt,
)
from fsm.states import ConnectionPhase


class FakeMessagingClient:
    """Implementa o protocolo sem IO para testes unitários.

    Registra as chamadas recebidas e permite configurar respostas,
    erros e atrasos por operação. `on_initialize` simula os eventos
    que o cliente real publicaria no Event Bridge.
    """

    def __init__(
        self,
        *,
        status: ClientStatus | None = None,
        pairing_artifact: str | None = None,
        receipt: SendReceipt | None = None,
        registered: frozenset[str] = frozenset(),
        audio_chunks: dict[str, list[bytes]] | None = None,
    ) -> None:
        self.status = status or ClientStatus(phase=ConnectionPhase.DISCONNECTED)
        self.pairing_artifact = pairing_artifact
        self.receipt = receipt or SendReceipt(accepted=True, message_id="wamid_fake")
        self.registered = registered
        self.audio_chunks = audio_chunks or {}

        self.on_initialize: Callable[[], Any] | None = None
        self.initialize_error: Exception | None = None
        self.logout_error: Exception | None = None
        self.send_error: Exception | None = None
        self.send_delay: float = 0.0
        self.audio_delay: float = 0.0
        self.audio_error: Exception | None = None

        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.closed = False

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def initialize(self) -> None:
        self.calls.append(("initialize", ()))
        if self.initialize_error is not None:
            raise self.initialize_error
        if self.on_initialize is not None:
            result = self.on_initialize()
            if asyncio.iscoroutine(result):
                await result

    async def get_connection_status(self) -> ClientStatus:
        self.calls.append(("get_connection_status", ()))
        return self.status

    async def get_latest_pairing_artifact(self) -> str | None:
        self.calls.append(("get_latest_pairing_artifact", ()))
        return self.pairing_artifact

    async def logout(self) -> None:
        self.calls.append(("logout", ()))
        if self.logout_error is not None:
            raise self.logout_error

    async def send_message(self, to: str, text: str) -> SendReceipt:
        self.calls.append(("send_message", (to, text)))
        return await self._send()

    async def send_audio(self, to: str, audio: bytes, mimetype: str) -> SendReceipt:
        self.calls.append(("send_audio", (to, audio, mimetype)))
        return await self._send()

    async def _send(self) -> SendReceipt:
        if self.send_delay:
            await asyncio.sleep(self.send_delay)
        if self.send_error is not None:
            raise self.send_error
        return self.receipt

    async def check_number(self, address: str) -> NumberLookup:
        self.calls.append(("check_number", (address,)))
        return NumberLookup(address=address, exists=address in self.registered)

    def get_audio_stream_by_id(self, message_id: str) -> AsyncIterator[bytes]:
        self.calls.append(("get_audio_stream_by_id", (message_id,)))
        return self._stream(message_id)

    async def _stream(self, message_id: str) -> AsyncIterator[bytes]:
        if self.audio_delay:
            await asyncio.sleep(self.audio_delay)
        if self.audio_error is not None:
            raise self.audio_error
        if message_id not in self.audio_chunks:
            raise MediaNotFoundError("media not found", code="media_not_found")
        for chunk in self.audio_chunks[message_id]:
            yield chunk

    async def aclose(self) -> None:
        self.closed = True
