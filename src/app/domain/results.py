"""Resultados tipados das operações do núcleo de sessão.

Condições esperadas (não conectado, não encontrado, timeout) são
retornadas como variantes `Failure`/`SendFailed`, nunca como exceções.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from app.domain.connection import ConnectionState
from app.domain.messages import AudioAsset


class FailureReason(StrEnum):
    """Motivos estruturados de falha expostos na API."""

    NOT_CONNECTED = "not_connected"
    NOT_FOUND = "not_found"
    NOT_AUDIO = "not_audio"
    INITIALIZE_FAILED = "initialize_failed"
    PAIRING_TIMEOUT = "pairing_timeout"
    TIMEOUT = "timeout"
    DELIVERY_FAILED = "delivery_failed"
    MEDIA_UNAVAILABLE = "media_unavailable"


# Mensagens padrão (voltadas ao usuário final)
DEFAULT_FAILURE_MESSAGES: dict[FailureReason, str] = {
    FailureReason.NOT_CONNECTED: "No hay sesión activa",
    FailureReason.NOT_FOUND: "Audio no encontrado",
    FailureReason.NOT_AUDIO: "El mensaje no es de audio",
    FailureReason.INITIALIZE_FAILED: "No se pudo iniciar la sesión",
    FailureReason.PAIRING_TIMEOUT: "Tiempo de espera agotado para el código QR",
    FailureReason.TIMEOUT: "Tiempo de espera agotado",
    FailureReason.DELIVERY_FAILED: "No se pudo enviar el mensaje",
    FailureReason.MEDIA_UNAVAILABLE: "Audio no disponible",
}


@dataclass(frozen=True, slots=True)
class Failure:
    """Variante de falha compartilhada pelas operações."""

    reason: FailureReason
    message: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            object.__setattr__(self, "message", DEFAULT_FAILURE_MESSAGES[self.reason])

    success = False


@dataclass(frozen=True, slots=True)
class SessionStarted:
    state: ConnectionState
    already_connected: bool = False

    success = True


@dataclass(frozen=True, slots=True)
class LoggedOut:
    state: ConnectionState

    success = True


@dataclass(frozen=True, slots=True)
class MessageSent:
    to: str
    message_id: str | None = None

    success = True
    status = "success"


@dataclass(frozen=True, slots=True)
class SendFailed:
    to: str
    reason: FailureReason
    message: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            object.__setattr__(self, "message", DEFAULT_FAILURE_MESSAGES[self.reason])

    success = False
    status = "failure"


@dataclass(frozen=True, slots=True)
class NumberChecked:
    address: str
    exists: bool

    success = True


InitializeResult = SessionStarted | Failure
LogoutResult = LoggedOut | Failure
SendResult = MessageSent | SendFailed
CheckNumberResult = NumberChecked | Failure
AudioLookupResult = AudioAsset | Failure
