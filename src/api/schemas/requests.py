"""Schemas de entrada da API (validação de corpo)."""

from __future__ import annotations

import base64
import binascii
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

_DATA_URI_PREFIX = re.compile(r"^data:[\w/+.-]+(;[\w=.-]+)*;base64,", re.IGNORECASE)


def clean_recipient(value: str) -> str:
    """Remove espaços e `+` inicial do destinatário.

    Raises:
        ValueError: Se não sobrar nada do endereço.
    """
    recipient = value.strip().removeprefix("+").strip()
    if not recipient:
        raise ValueError("destinatário vazio")
    return recipient


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RecipientRequest(BaseModel):
    """Base dos corpos com destinatário (`to`)."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    to: str = Field(..., min_length=1, max_length=64, description="Número ou JID.")

    @field_validator("to")
    @classmethod
    def _validate_to(cls, value: str) -> str:
        return clean_recipient(value)


class CheckNumberRequest(RecipientRequest):
    """Consulta de número registrado."""


class SendTextRequest(RecipientRequest):
    """Envio de mensagem de texto."""

    message: str = Field(..., min_length=1, max_length=4096, description="Texto a enviar.")


class SendAudioBase64Request(RecipientRequest):
    """Envio de áudio codificado em base64 (aceita data URI)."""

    base64: str = Field(..., min_length=1, description="Áudio em base64.")
    mimetype: str | None = Field(default=None, max_length=128)

    @field_validator("base64")
    @classmethod
    def _validate_base64(cls, value: str) -> str:
        payload = _DATA_URI_PREFIX.sub("", value)
        try:
            decoded = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("base64 inválido") from exc
        if not decoded:
            raise ValueError("áudio vazio")
        return payload

    def audio_bytes(self) -> bytes:
        return base64.b64decode(self.base64)
