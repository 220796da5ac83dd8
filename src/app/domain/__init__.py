"""Modelos de domínio da sessão WhatsApp."""

from app.domain.addresses import normalize_address
from app.domain.connection import ConnectionState
from app.domain.events import (
    ConnectionClosed,
    ConnectionOpened,
    MessageReceived,
    PairingRequired,
    SessionEvent,
)
from app.domain.messages import AudioAsset, InboundMessage
from app.domain.results import (
    AudioLookupResult,
    CheckNumberResult,
    Failure,
    FailureReason,
    InitializeResult,
    LoggedOut,
    LogoutResult,
    MessageSent,
    NumberChecked,
    SendFailed,
    SendResult,
    SessionStarted,
)

__all__ = [
    "AudioAsset",
    "AudioLookupResult",
    "CheckNumberResult",
    "ConnectionClosed",
    "ConnectionOpened",
    "ConnectionState",
    "Failure",
    "FailureReason",
    "InboundMessage",
    "InitializeResult",
    "LoggedOut",
    "LogoutResult",
    "MessageReceived",
    "MessageSent",
    "NumberChecked",
    "PairingRequired",
    "SendFailed",
    "SendResult",
    "SessionEvent",
    "SessionStarted",
    "normalize_address",
]
