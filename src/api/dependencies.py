"""Dependências FastAPI da camada HTTP (auth e contexto da sessão)."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.errors import AuthenticationError, InternalFailure
from api.security.tokens import InvalidTokenError, TokenConfigurationError, decode_token
from app.sessions.context import WhatsAppSessionContext
from config.settings import AuthSettings, get_auth_settings

_bearer_scheme = HTTPBearer(auto_error=False)


def get_session_context(request: Request) -> WhatsAppSessionContext:
    """Contexto da sessão criado pela raiz de composição (`app.state`)."""
    context = getattr(request.app.state, "session_context", None)
    if context is None:
        raise InternalFailure("session_context não inicializado")
    return context


def require_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
    settings: Annotated[AuthSettings, Depends(get_auth_settings)],
) -> dict[str, Any]:
    """Exige `Authorization: Bearer <token>` válido.

    Raises:
        AuthenticationError: 401 sem token, 403 com token inválido/expirado.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError.missing_token()
    try:
        return decode_token(credentials.credentials, settings)
    except InvalidTokenError as exc:
        raise AuthenticationError.invalid_token() from exc
    except TokenConfigurationError as exc:
        raise InternalFailure(str(exc)) from exc


SessionContextDep = Annotated[WhatsAppSessionContext, Depends(get_session_context)]
