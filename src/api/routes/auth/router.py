"""Endpoint de login — emite o token Bearer usado pelas demais rotas."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from api.errors import AuthenticationError, InternalFailure
from api.schemas import LoginRequest, LoginResponse
from api.security.tokens import TokenConfigurationError, issue_token, verify_credentials
from config.settings import AuthSettings, get_auth_settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    settings: Annotated[AuthSettings, Depends(get_auth_settings)],
) -> LoginResponse:
    """Troca usuário/senha por um token JWT (validade padrão de 1 dia)."""
    if not verify_credentials(body.username, body.password, settings):
        logger.info("login_rejected")
        raise AuthenticationError.invalid_credentials()

    try:
        token = issue_token(body.username, settings)
    except TokenConfigurationError as exc:
        raise InternalFailure(str(exc)) from exc

    logger.info("login_succeeded", extra={"token_ttl_seconds": settings.token_ttl_seconds})
    return LoginResponse(token=token)
