"""Serviço de sessão — inicialização, status, logout e busca de áudio.

Operações chamadas pelos handlers HTTP. Condições esperadas voltam como
resultados tipados (`Failure`); apenas falhas inesperadas do cliente de
protocolo propagam como exceção.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from app.domain.connection import ConnectionState
from app.domain.messages import AudioAsset
from app.domain.results import (
    AudioLookupResult,
    Failure,
    FailureReason,
    InitializeResult,
    LoggedOut,
    LogoutResult,
    SessionStarted,
)
from app.observability.metrics import record_latency
from app.protocols.messaging_client import MediaNotFoundError
from config.settings.base.session import SessionSettings
from fsm.states import PAIRING_PHASES, ConnectionPhase

if TYPE_CHECKING:
    from app.infra.stores.message_buffer import InboundMessageBuffer
    from app.protocols.messaging_client import MessagingClientProtocol
    from app.sessions.state_holder import ConnectionStateHolder

logger = logging.getLogger(__name__)


def _is_settled(state: ConnectionState) -> bool:
    """Estado que encerra a espera de uma tentativa de conexão."""
    if state.phase in PAIRING_PHASES:
        return bool(state.pairing_artifact)
    return state.phase in (ConnectionPhase.CONNECTED, ConnectionPhase.ERROR)


async def _prepend(first: bytes, rest: AsyncIterator[bytes]) -> AsyncIterator[bytes]:
    if first:
        yield first
    async for chunk in rest:
        yield chunk


class SessionService:
    """Comandos e consultas da sessão única do processo.

    Garante no máximo uma tentativa de conexão em andamento: chamadas
    concorrentes de `initialize_session` aguardam a mesma task, protegida
    com `asyncio.shield` contra o cancelamento da requisição HTTP.
    """

    def __init__(
        self,
        holder: ConnectionStateHolder,
        buffer: InboundMessageBuffer,
        client: MessagingClientProtocol,
        settings: SessionSettings | None = None,
    ) -> None:
        self._holder = holder
        self._buffer = buffer
        self._client = client
        self._settings = settings or SessionSettings()
        self._attempt: asyncio.Task[InitializeResult] | None = None

    async def initialize_session(self) -> InitializeResult:
        """Inicia (ou reaproveita) a conexão com a rede.

        - CONNECTED: sucesso imediato com `already_connected=True`
        - AWAITING_PAIRING com QR: devolve o QR atual
        - demais: inicia a tentativa ou junta-se à que está em andamento
        """
        state = self._holder.snapshot()
        if state.phase == ConnectionPhase.CONNECTED:
            return SessionStarted(state=state, already_connected=True)
        if state.phase == ConnectionPhase.AWAITING_PAIRING and state.pairing_artifact:
            return SessionStarted(state=state)

        attempt = self._attempt
        if attempt is None or attempt.done():
            attempt = asyncio.create_task(self._run_attempt(), name="session_initialize")
            self._attempt = attempt
        else:
            logger.info("session_initialize_joined")
        return await asyncio.shield(attempt)

    async def _run_attempt(self) -> InitializeResult:
        loop = asyncio.get_running_loop()
        changed = asyncio.Event()

        def _notify(_state: ConnectionState) -> None:
            loop.call_soon_threadsafe(changed.set)

        started = time.perf_counter()
        start_version = self._holder.snapshot().version
        self._holder.add_listener(_notify)
        try:
            logger.info("session_initialize_started")
            try:
                await asyncio.wait_for(
                    self._client.initialize(),
                    timeout=self._settings.initialize_timeout_seconds,
                )
            except TimeoutError:
                return self._fail(FailureReason.TIMEOUT, "Tiempo de espera agotado al iniciar la sesión")
            except Exception as exc:
                logger.exception("session_initialize_client_failed")
                return self._fail(FailureReason.INITIALIZE_FAILED, str(exc) or type(exc).__name__)

            state = await self._wait_until_settled(changed, start_version)
            if state is None:
                state = await self._poll_client()
            if isinstance(state, Failure):
                return state
            if state.phase == ConnectionPhase.ERROR:
                return Failure(
                    FailureReason.INITIALIZE_FAILED,
                    state.error_detail or "",
                )
            return SessionStarted(state=state)
        finally:
            self._holder.remove_listener(_notify)
            record_latency(
                "session_service",
                "initialize",
                (time.perf_counter() - started) * 1000,
            )

    async def _wait_until_settled(
        self,
        changed: asyncio.Event,
        start_version: int,
    ) -> ConnectionState | None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._settings.pairing_wait_timeout_seconds
        while True:
            changed.clear()
            state = self._holder.snapshot()
            if state.version > start_version and _is_settled(state):
                return state
            remaining = deadline - loop.time()
            if remaining <= 0:
                return None
            try:
                await asyncio.wait_for(changed.wait(), timeout=remaining)
            except TimeoutError:
                return None

    async def _poll_client(self) -> ConnectionState | Failure:
        """Consulta o cliente uma vez quando nenhum evento chegou a tempo."""
        timeout = self._settings.initialize_timeout_seconds
        try:
            status = await asyncio.wait_for(
                self._client.get_connection_status(), timeout=timeout
            )
            artifact = await asyncio.wait_for(
                self._client.get_latest_pairing_artifact(), timeout=timeout
            )
        except Exception as exc:
            logger.warning(
                "session_initialize_poll_failed",
                extra={"error_type": type(exc).__name__},
            )
            return self._fail(FailureReason.INITIALIZE_FAILED, str(exc) or type(exc).__name__)

        current = self._holder.snapshot()
        if status.phase == ConnectionPhase.CONNECTED:
            if current.phase != ConnectionPhase.CONNECTED:
                self._holder.apply(ConnectionPhase.CONNECTED, trigger="initialize_poll")
            return self._holder.snapshot()
        if artifact:
            self._holder.apply(
                ConnectionPhase.AWAITING_PAIRING,
                trigger="initialize_poll",
                pairing_artifact=artifact,
            )
            state = self._holder.snapshot()
            if _is_settled(state):
                return state
        return self._fail(FailureReason.PAIRING_TIMEOUT)

    def _fail(self, reason: FailureReason, detail: str | None = None) -> Failure:
        failure = Failure(reason, detail or "")
        self._holder.apply(
            ConnectionPhase.ERROR,
            trigger=f"initialize_{reason.value}",
            error_detail=failure.message,
        )
        logger.warning("session_initialize_failed", extra={"reason": reason.value})
        return failure

    def get_status(self) -> ConnectionState:
        """Snapshot do último estado aplicado."""
        return self._holder.snapshot()

    async def logout(self) -> LogoutResult:
        """Encerra a sessão ativa.

        Raises:
            Exception: Falhas do cliente de protocolo propagam sem alterar a fase.
        """
        state = self._holder.snapshot()
        if state.phase != ConnectionPhase.CONNECTED:
            return Failure(FailureReason.NOT_CONNECTED)

        await asyncio.wait_for(
            self._client.logout(), timeout=self._settings.send_timeout_seconds
        )
        new_state = self._holder.apply(ConnectionPhase.DISCONNECTED, trigger="logout")
        logger.info("session_logged_out")
        return LoggedOut(state=new_state or self._holder.snapshot())

    async def get_audio(self, message_id: str) -> AudioLookupResult:
        """Resolve o áudio de uma mensagem do buffer.

        O primeiro chunk já é buscado aqui, para que erros do cliente
        apareçam antes do início do streaming HTTP.
        """
        message = self._buffer.get_by_id(message_id)
        if message is None:
            return Failure(FailureReason.NOT_FOUND)
        if not message.is_audio:
            return Failure(FailureReason.NOT_AUDIO)

        stream = self._client.get_audio_stream_by_id(message_id)
        try:
            async with asyncio.timeout(self._settings.send_timeout_seconds):
                first = await anext(stream)
        except StopAsyncIteration:
            first = b""
        except MediaNotFoundError:
            logger.info("audio_media_unavailable", extra={"message_id": message_id})
            return Failure(FailureReason.MEDIA_UNAVAILABLE)
        except TimeoutError:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
            return Failure(FailureReason.TIMEOUT)

        return AudioAsset(
            message_id=message_id,
            mimetype=message.audio_mimetype,
            stream=_prepend(first, stream),
        )
