"""Endpoints de envio outbound e consulta de número.

Endpoints:
- POST /message/check-number
- POST /message/send-text
- POST /message/enviar-audio-base64
- POST /message/enviar-audio-file (multipart)
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile

from api.dependencies import SessionContextDep, require_bearer_token
from api.errors import DomainFailureError, RequestValidationFailure
from api.schemas import (
    CheckNumberRequest,
    CheckNumberResponse,
    SendAudioBase64Request,
    SendAudioResponse,
    SendTextRequest,
    SendTextResponse,
)
from api.schemas.requests import clean_recipient
from app.domain.results import Failure, SendFailed, SendResult
from config.settings import GatewaySettings, get_gateway_settings

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_bearer_token)])

AUDIO_SENT_MESSAGE = "Audio enviado correctamente"


def _ensure_audio_size(size: int, settings: GatewaySettings) -> None:
    if size == 0:
        raise RequestValidationFailure("El archivo de audio está vacío")
    if size > settings.media_max_size_bytes:
        raise RequestValidationFailure(
            f"El audio excede el tamaño máximo de {settings.media_max_size_bytes} bytes"
        )


def _raise_if_failed(result: SendResult) -> None:
    if isinstance(result, SendFailed):
        raise DomainFailureError.from_failure(
            result,
            extra={"status": result.status, "to": result.to},
        )


@router.post("/check-number", response_model=CheckNumberResponse)
async def check_number(
    body: CheckNumberRequest,
    context: SessionContextDep,
) -> CheckNumberResponse:
    """Verifica se o número tem conta WhatsApp ativa."""
    result = await context.dispatcher.check_number_registered(body.to)
    if isinstance(result, Failure):
        raise DomainFailureError.from_failure(result)
    return CheckNumberResponse(to=result.address, exists=result.exists)


@router.post("/send-text", response_model=SendTextResponse)
async def send_text(body: SendTextRequest, context: SessionContextDep) -> SendTextResponse:
    """Envia mensagem de texto (requer sessão conectada)."""
    result = await context.dispatcher.send_text(body.to, body.message)
    _raise_if_failed(result)
    return SendTextResponse(status=result.status, to=result.to, message_id=result.message_id)


@router.post("/enviar-audio-base64", response_model=SendAudioResponse)
async def send_audio_base64(
    body: SendAudioBase64Request,
    context: SessionContextDep,
    settings: Annotated[GatewaySettings, Depends(get_gateway_settings)],
) -> SendAudioResponse:
    """Envia áudio recebido em base64."""
    audio = body.audio_bytes()
    _ensure_audio_size(len(audio), settings)
    result = await context.dispatcher.send_audio(body.to, audio, body.mimetype)
    _raise_if_failed(result)
    return SendAudioResponse(message=AUDIO_SENT_MESSAGE, to=result.to, message_id=result.message_id)


@router.post("/enviar-audio-file", response_model=SendAudioResponse)
async def send_audio_file(
    context: SessionContextDep,
    settings: Annotated[GatewaySettings, Depends(get_gateway_settings)],
    file: Annotated[UploadFile, File(description="Arquivo de áudio")],
    to: Annotated[str, Form(min_length=1, max_length=64)],
    mimetype: Annotated[str | None, Form(max_length=128)] = None,
) -> SendAudioResponse:
    """Envia áudio enviado como arquivo multipart."""
    try:
        recipient = clean_recipient(to)
    except ValueError as exc:
        raise RequestValidationFailure("El destinatario no puede estar vacío") from exc

    audio = await file.read(settings.media_max_size_bytes + 1)
    await file.close()
    _ensure_audio_size(len(audio), settings)

    content_type = file.content_type or ""
    resolved_mimetype = mimetype or (content_type if content_type.startswith("audio/") else None)
    result = await context.dispatcher.send_audio(recipient, audio, resolved_mimetype)
    _raise_if_failed(result)
    return SendAudioResponse(message=AUDIO_SENT_MESSAGE, to=result.to, message_id=result.message_id)
