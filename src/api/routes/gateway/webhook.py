"""Endpoint de eventos do gateway do protocolo.

- POST /webhook/gateway: eventos de conexão e mensagens recebidas

Segurança:
- Validação HMAC (X-Gateway-Signature) quando GATEWAY_WEBHOOK_SECRET está configurado
- O evento é só enfileirado no Event Bridge; a aplicação ocorre no consumidor
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from api.connectors.gateway.webhook.receive import (
    InvalidEventError,
    InvalidJsonError,
    InvalidSignatureError,
    parse_webhook_request,
)
from api.dependencies import SessionContextDep
from config.settings import GatewaySettings, get_gateway_settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _reject(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@router.post("/gateway", response_model=None)
async def receive_gateway_event(
    request: Request,
    context: SessionContextDep,
    settings: Annotated[GatewaySettings, Depends(get_gateway_settings)],
) -> JSONResponse:
    """Recebe um evento do gateway e o publica no Event Bridge."""
    raw_body = await request.body()

    try:
        event, signature_result = parse_webhook_request(
            raw_body=raw_body,
            headers=dict(request.headers),
            secret=settings.webhook_secret or None,
        )
    except InvalidSignatureError as exc:
        logger.warning("gateway_webhook_signature_invalid", extra={"error": str(exc)})
        return _reject(status.HTTP_401_UNAUTHORIZED, "invalid_signature")
    except (InvalidJsonError, InvalidEventError) as exc:
        logger.warning("gateway_webhook_payload_invalid", extra={"error": str(exc)})
        return _reject(status.HTTP_400_BAD_REQUEST, str(exc))

    if not context.bridge.is_running:
        logger.error("gateway_webhook_bridge_stopped")
        return _reject(status.HTTP_503_SERVICE_UNAVAILABLE, "event_bridge_stopped")

    await context.bridge.publish(event)
    event_type = type(event).__name__
    logger.info(
        "gateway_webhook_received",
        extra={
            "event_type": event_type,
            "signature_skipped": signature_result.skipped,
            "payload_size": len(raw_body),
            "pending_events": context.bridge.pending_events,
        },
    )
    return JSONResponse(content={"success": True, "event": event_type})
