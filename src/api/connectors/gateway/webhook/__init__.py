"""Webhook do gateway: assinatura e parsing seguro de eventos."""

from ..signature import SignatureResult, verify_gateway_signature
from .receive import (
    InvalidEventError,
    InvalidJsonError,
    InvalidSignatureError,
    WebhookRequestError,
    parse_webhook_request,
)

__all__ = [
    "InvalidEventError",
    "InvalidJsonError",
    "InvalidSignatureError",
    "SignatureResult",
    "WebhookRequestError",
    "parse_webhook_request",
    "verify_gateway_signature",
]
