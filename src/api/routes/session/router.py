"""Endpoints de sessão — ciclo de vida da conexão e mensagens recebidas.

Endpoints:
- POST /session/start
- GET /session/status
- POST /session/logout
- GET/DELETE /session/mensajes/recibidos
- GET /session/mensajes/audio/{id} (stream, sem autenticação)
- GET /session/mensajes/audio/{id}/base64
"""

from __future__ import annotations

import base64
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import StreamingResponse

from api.dependencies import SessionContextDep, require_bearer_token
from api.errors import DomainFailureError, InternalFailure
from api.schemas import (
    AudioBase64Response,
    InboundMessageOut,
    LogoutResponse,
    MessageResponse,
    ReceivedMessagesResponse,
    SessionStatusResponse,
)
from app.domain.connection import ConnectionState
from app.domain.results import Failure, FailureReason
from app.infra.qr import QRRenderError, render_qr_data_uri
from app.protocols.messaging_client import MessagingClientError
from utils.errors import InfrastructureError

logger = logging.getLogger(__name__)

router = APIRouter()

_auth = [Depends(require_bearer_token)]

LOGOUT_MESSAGE = "Sesión cerrada correctamente"
CLEARED_MESSAGE = "Mensajes eliminados de memoria"


def _status_response(
    state: ConnectionState,
    already_connected: bool | None = None,
) -> SessionStatusResponse:
    qr_base64 = None
    if state.pairing_artifact:
        try:
            qr_base64 = render_qr_data_uri(state.pairing_artifact)
        except QRRenderError as exc:
            raise InternalFailure(str(exc)) from exc
    return SessionStatusResponse(
        status=state.phase.value,
        connected=state.connected,
        error=state.error_detail,
        qr=state.pairing_artifact,
        qr_base64=qr_base64,
        already_connected=already_connected,
    )


@router.post(
    "/start",
    dependencies=_auth,
    response_model=SessionStatusResponse,
    response_model_exclude_none=True,
)
async def start_session(context: SessionContextDep) -> SessionStatusResponse:
    """Inicia a sessão; devolve o QR quando o pareamento é necessário."""
    result = await context.service.initialize_session()
    if isinstance(result, Failure):
        raise DomainFailureError(
            result.reason,
            result.message,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            extra={"status": context.service.get_status().phase.value},
        )
    return _status_response(result.state, already_connected=result.already_connected)


@router.get(
    "/status",
    dependencies=_auth,
    response_model=SessionStatusResponse,
    response_model_exclude_none=True,
)
async def session_status(context: SessionContextDep) -> SessionStatusResponse:
    """Estado atual da conexão, com QR se estiver aguardando pareamento."""
    return _status_response(context.service.get_status())


@router.post("/logout", dependencies=_auth, response_model=LogoutResponse)
async def logout(context: SessionContextDep) -> LogoutResponse:
    """Encerra a sessão ativa (400 se não houver sessão)."""
    result = await context.service.logout()
    if isinstance(result, Failure):
        raise DomainFailureError.from_failure(result)
    return LogoutResponse(status=result.state.phase.value, message=LOGOUT_MESSAGE)


@router.get(
    "/mensajes/recibidos",
    dependencies=_auth,
    response_model=ReceivedMessagesResponse,
)
async def list_received_messages(context: SessionContextDep) -> ReceivedMessagesResponse:
    """Mensagens recebidas em memória, em ordem de chegada."""
    messages = [
        InboundMessageOut.model_validate(message.to_dict())
        for message in context.buffer.list_messages()
    ]
    return ReceivedMessagesResponse(mensajes=messages)


@router.delete("/mensajes/recibidos", dependencies=_auth, response_model=MessageResponse)
async def clear_received_messages(context: SessionContextDep) -> MessageResponse:
    """Remove todas as mensagens em memória."""
    context.buffer.clear()
    return MessageResponse(message=CLEARED_MESSAGE)


@router.get("/mensajes/audio/{message_id}", response_model=None)
async def stream_audio(message_id: str, context: SessionContextDep) -> StreamingResponse:
    """Stream do áudio recebido (reprodução direta no navegador)."""
    try:
        result = await context.service.get_audio(message_id)
    except (MessagingClientError, InfrastructureError) as exc:
        # Rota pública: qualquer falha do colaborador responde 404
        logger.warning(
            "audio_stream_lookup_failed",
            extra={"message_id": message_id, "error_type": type(exc).__name__},
        )
        result = Failure(FailureReason.MEDIA_UNAVAILABLE)
    if isinstance(result, Failure):
        raise DomainFailureError(result.reason, result.message, status.HTTP_404_NOT_FOUND)
    return StreamingResponse(
        result.stream,
        media_type=result.mimetype,
        headers={"Content-Disposition": f'inline; filename="{result.filename}"'},
    )


@router.get(
    "/mensajes/audio/{message_id}/base64",
    dependencies=_auth,
    response_model=AudioBase64Response,
)
async def audio_base64(message_id: str, context: SessionContextDep) -> AudioBase64Response:
    """Áudio recebido codificado em base64 com seu mimetype."""
    result = await context.service.get_audio(message_id)
    if isinstance(result, Failure):
        raise DomainFailureError(result.reason, result.message, status.HTTP_404_NOT_FOUND)
    data = await result.read_all()
    logger.info("audio_base64_served", extra={"message_id": message_id, "size_bytes": len(data)})
    return AudioBase64Response(
        id=message_id,
        mimetype=result.mimetype,
        base64=base64.b64encode(data).decode("ascii"),
    )
