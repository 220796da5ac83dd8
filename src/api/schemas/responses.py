"""Schemas de saída da API (documentação OpenAPI)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LoginResponse(BaseModel):
    success: bool = True
    token: str


class SessionStatusResponse(BaseModel):
    """Estado da sessão com QR opcional."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    status: str
    connected: bool
    error: str | None = None
    qr: str | None = None
    qr_base64: str | None = Field(default=None, alias="qrBase64")
    already_connected: bool | None = Field(default=None, alias="alreadyConnected")


class LogoutResponse(BaseModel):
    success: bool = True
    status: str
    message: str


class InboundMessageOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    sender: str = Field(alias="from")
    from_me: bool = Field(alias="fromMe")
    timestamp: int
    type: str
    push_name: str | None = Field(default=None, alias="pushName")
    content: dict[str, Any] = Field(default_factory=dict)


class ReceivedMessagesResponse(BaseModel):
    success: bool = True
    mensajes: list[InboundMessageOut]


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class AudioBase64Response(BaseModel):
    success: bool = True
    id: str
    mimetype: str
    base64: str


class CheckNumberResponse(BaseModel):
    success: bool = True
    to: str
    exists: bool


class SendTextResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    status: str
    to: str
    message_id: str | None = Field(default=None, alias="messageId")


class SendAudioResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    to: str
    message_id: str | None = Field(default=None, alias="messageId")
