"""Contrato do cliente de protocolo WhatsApp (colaborador opaco).

O núcleo de sessão depende desse protocolo em vez da implementação
concreta (gateway HTTP em api/connectors/gateway). Eventos assíncronos
de conexão e mensagem não passam por aqui: o cliente os publica no
Event Bridge.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol

from fsm.states import ConnectionPhase


class MessagingClientError(Exception):
    """Falha reportada pelo cliente de protocolo.

    Atributos:
        code: Código estruturado reportado pelo cliente (quando houver)
        status_code: Status HTTP de origem (quando houver)
    """

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class MediaNotFoundError(MessagingClientError):
    """Mídia solicitada não existe mais no cliente de protocolo."""


@dataclass(frozen=True, slots=True)
class SendReceipt:
    """Confirmação de envio retornada pelo cliente."""

    accepted: bool
    message_id: str | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class NumberLookup:
    """Resultado da consulta de número registrado."""

    address: str
    exists: bool


@dataclass(frozen=True, slots=True)
class ClientStatus:
    """Estado da conexão segundo o próprio cliente."""

    phase: ConnectionPhase
    pairing_artifact: str | None = None
    error: str | None = None


class MessagingClientProtocol(Protocol):
    """Contrato mínimo consumido pelo núcleo de sessão."""

    async def initialize(self) -> None:
        """Inicia uma tentativa de conexão (resultado chega por eventos)."""
        ...

    async def get_connection_status(self) -> ClientStatus: ...

    async def get_latest_pairing_artifact(self) -> str | None: ...

    async def logout(self) -> None:
        """Encerra a conexão e apaga credenciais armazenadas."""
        ...

    async def send_message(self, to: str, text: str) -> SendReceipt: ...

    async def send_audio(self, to: str, audio: bytes, mimetype: str) -> SendReceipt: ...

    async def check_number(self, address: str) -> NumberLookup: ...

    def get_audio_stream_by_id(self, message_id: str) -> AsyncIterator[bytes]:
        """Retorna stream assíncrono dos bytes da mídia.

        Raises:
            MediaNotFoundError: Se a mídia não estiver disponível.
        """
        ...

    async def aclose(self) -> None: ...
