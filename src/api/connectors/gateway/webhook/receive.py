"""Parse e validação inicial do webhook do gateway (sem PII)."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from ..events import GatewayEventError, parse_gateway_event
from ..signature import SignatureResult, verify_gateway_signature

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.domain.events import SessionEvent


class WebhookRequestError(ValueError):
    """Erro base para falhas de webhook."""


class InvalidSignatureError(WebhookRequestError):
    """Assinatura inválida do webhook."""


class InvalidJsonError(WebhookRequestError):
    """JSON inválido no payload do webhook."""


class InvalidEventError(WebhookRequestError):
    """Evento desconhecido ou malformado."""


def parse_webhook_request(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | None,
) -> tuple[SessionEvent, SignatureResult]:
    """Valida assinatura, parseia JSON e converte em evento de domínio.

    Args:
        raw_body: Corpo bruto do request
        headers: Headers recebidos
        secret: Secret HMAC do gateway

    Raises:
        InvalidSignatureError: Se assinatura for inválida
        InvalidJsonError: Se o JSON estiver inválido ou não for objeto
        InvalidEventError: Se o evento não for reconhecido

    Returns:
        (evento de domínio, SignatureResult)
    """
    signature_result = verify_gateway_signature(raw_body, headers, secret)
    if not signature_result.valid:
        reason = signature_result.error or "invalid_signature"
        raise InvalidSignatureError(reason)

    try:
        payload = json.loads(raw_body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidJsonError("invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidJsonError("payload_not_object")

    try:
        event = parse_gateway_event(payload)
    except GatewayEventError as exc:
        raise InvalidEventError(str(exc)) from exc
    return event, signature_result
