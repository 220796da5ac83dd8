"""Emissão e verificação de tokens JWT (Bearer) da API."""

from __future__ import annotations

import hmac
import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt

if TYPE_CHECKING:
    from config.settings import AuthSettings

logger = logging.getLogger(__name__)

# Claims obrigatórias em todo token aceito
REQUIRED_CLAIMS = ("exp", "iat", "sub")


class TokenError(Exception):
    """Base para falhas de token."""


class TokenConfigurationError(TokenError):
    """Segredo de assinatura ausente."""


class InvalidTokenError(TokenError):
    """Token malformado, com assinatura inválida ou expirado."""


def verify_credentials(username: str, password: str, settings: AuthSettings) -> bool:
    """Compara credenciais em tempo constante.

    Sem credenciais configuradas, nenhum login é aceito.
    """
    if not settings.username or not settings.password:
        return False
    user_ok = hmac.compare_digest(username.encode("utf-8"), settings.username.encode("utf-8"))
    pass_ok = hmac.compare_digest(password.encode("utf-8"), settings.password.encode("utf-8"))
    return user_ok and pass_ok


def issue_token(
    username: str,
    settings: AuthSettings,
    now: datetime | None = None,
) -> str:
    """Emite token assinado para o usuário.

    Raises:
        TokenConfigurationError: Se AUTH_TOKEN_SECRET não estiver configurado.
    """
    if not settings.token_secret:
        raise TokenConfigurationError("AUTH_TOKEN_SECRET não configurado")
    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": username,
        "username": username,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=settings.token_ttl_seconds),
    }
    return jwt.encode(payload, settings.token_secret, algorithm=settings.algorithm)


def decode_token(token: str, settings: AuthSettings) -> dict[str, Any]:
    """Valida assinatura e expiração e retorna as claims.

    Raises:
        TokenConfigurationError: Se AUTH_TOKEN_SECRET não estiver configurado.
        InvalidTokenError: Se o token for inválido ou expirado.
    """
    if not settings.token_secret:
        raise TokenConfigurationError("AUTH_TOKEN_SECRET não configurado")
    try:
        return jwt.decode(
            token,
            settings.token_secret,
            algorithms=[settings.algorithm],
            options={"require": list(REQUIRED_CLAIMS)},
        )
    except jwt.ExpiredSignatureError as exc:
        logger.info("token_expired")
        raise InvalidTokenError("token_expired") from exc
    except jwt.PyJWTError as exc:
        logger.info("token_invalid", extra={"error_type": type(exc).__name__})
        raise InvalidTokenError("token_invalid") from exc
