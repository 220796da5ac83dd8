"""Schemas pydantic de entrada e saída da API."""

from api.schemas.requests import (
    CheckNumberRequest,
    LoginRequest,
    SendAudioBase64Request,
    SendTextRequest,
)
from api.schemas.responses import (
    AudioBase64Response,
    CheckNumberResponse,
    InboundMessageOut,
    LoginResponse,
    LogoutResponse,
    MessageResponse,
    ReceivedMessagesResponse,
    SendAudioResponse,
    SendTextResponse,
    SessionStatusResponse,
)

__all__ = [
    "AudioBase64Response",
    "CheckNumberRequest",
    "CheckNumberResponse",
    "InboundMessageOut",
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "MessageResponse",
    "ReceivedMessagesResponse",
    "SendAudioBase64Request",
    "SendAudioResponse",
    "SendTextRequest",
    "SessionStatusResponse",
]
