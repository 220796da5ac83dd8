"""Segurança da API — tokens Bearer e verificação de credenciais."""

from api.security.tokens import (
    InvalidTokenError,
    TokenConfigurationError,
    TokenError,
    decode_token,
    issue_token,
    verify_credentials,
)

__all__ = [
    "InvalidTokenError",
    "TokenConfigurationError",
    "TokenError",
    "decode_token",
    "issue_token",
    "verify_credentials",
]
