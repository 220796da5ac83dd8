"""Validação de assinatura HMAC dos eventos enviados pelo gateway."""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

SIGNATURE_HEADER = "x-gateway-signature"
SIGNATURE_PREFIX = "sha256="


@dataclass(frozen=True)
class SignatureResult:
    """Resultado da validação de assinatura."""

    valid: bool
    skipped: bool = False
    error: str | None = None


def compute_signature(raw_body: bytes, secret: str) -> str:
    """Calcula o valor do header (`sha256=<hex>`) para um corpo."""
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def _get_header(headers: Mapping[str, str], name: str) -> str | None:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def verify_gateway_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | None,
) -> SignatureResult:
    """Valida `X-Gateway-Signature: sha256=<hmac>` do corpo bruto.

    Sem secret configurado a validação é pulada (apenas development;
    validate_runtime_settings exige o secret em staging/production).
    """
    if not secret:
        return SignatureResult(valid=True, skipped=True)

    header = _get_header(headers, SIGNATURE_HEADER)
    if not header:
        return SignatureResult(valid=False, error="missing_signature")
    if not header.startswith(SIGNATURE_PREFIX):
        return SignatureResult(valid=False, error="malformed_signature")

    expected = compute_signature(raw_body, secret)
    if not hmac.compare_digest(header.strip(), expected):
        return SignatureResult(valid=False, error="signature_mismatch")
    return SignatureResult(valid=True)
