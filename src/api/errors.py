"""Taxonomia de erros HTTP e handlers de exceção.

Toda resposta JSON carrega `success`. Mapeamento:
- AuthenticationError: 401 (token ausente) / 403 (token inválido ou expirado)
- RequestValidationFailure e RequestValidationError: 400
- DomainFailureError: 400 / 404 com `reason`
- InternalFailure, InfrastructureError, MessagingClientError e inesperados: 500
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.domain.results import Failure, FailureReason, SendFailed
from app.observability import get_correlation_id
from app.protocols.messaging_client import MessagingClientError
from utils.errors import InfrastructureError

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Error interno del servidor"
VALIDATION_ERROR_MESSAGE = "Datos de entrada inválidos"

# Motivos de domínio respondidos com 404
NOT_FOUND_REASONS = frozenset(
    {FailureReason.NOT_FOUND, FailureReason.NOT_AUDIO, FailureReason.MEDIA_UNAVAILABLE}
)


class ApiError(Exception):
    """Base dos erros mapeados para resposta HTTP."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_content(self) -> dict[str, Any]:
        return {"success": False, "message": self.message}


class AuthenticationError(ApiError):
    """Token ausente (401) ou inválido/expirado (403)."""

    status_code = status.HTTP_401_UNAUTHORIZED

    @classmethod
    def missing_token(cls) -> AuthenticationError:
        return cls("Unauthorized access: No token provided", status.HTTP_401_UNAUTHORIZED)

    @classmethod
    def invalid_token(cls) -> AuthenticationError:
        return cls("Invalid token", status.HTTP_403_FORBIDDEN)

    @classmethod
    def invalid_credentials(cls) -> AuthenticationError:
        return cls("Credenciales inválidas", status.HTTP_401_UNAUTHORIZED)


class RequestValidationFailure(ApiError):
    """Corpo da requisição malformado (além da validação do schema)."""

    status_code = status.HTTP_400_BAD_REQUEST


class DomainFailureError(ApiError):
    """Condição de domínio esperada (não conectado, não encontrado, ...)."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        reason: FailureReason,
        message: str,
        status_code: int | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, status_code)
        self.reason = reason
        self.extra = extra or {}

    @classmethod
    def from_failure(
        cls,
        failure: Failure | SendFailed,
        extra: dict[str, Any] | None = None,
    ) -> DomainFailureError:
        status_code = (
            status.HTTP_404_NOT_FOUND
            if failure.reason in NOT_FOUND_REASONS
            else status.HTTP_400_BAD_REQUEST
        )
        return cls(failure.reason, failure.message, status_code, extra)

    def to_content(self) -> dict[str, Any]:
        return {
            "success": False,
            "reason": self.reason.value,
            "message": self.message,
            **self.extra,
        }


class InternalFailure(ApiError):
    """Falha inesperada; a mensagem ao cliente é sempre opaca."""

    def to_content(self) -> dict[str, Any]:
        return {"success": False, "message": INTERNAL_ERROR_MESSAGE}


def _internal_error_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": INTERNAL_ERROR_MESSAGE},
    )


async def _handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.INFO
    logger.log(
        level,
        "api_error",
        extra={
            "error_type": type(exc).__name__,
            "status_code": exc.status_code,
            "path": request.url.path,
            "correlation_id": get_correlation_id(),
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


async def _handle_request_validation(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    logger.info(
        "request_validation_failed",
        extra={"path": request.url.path, "error_count": len(errors)},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(
            {"success": False, "message": VALIDATION_ERROR_MESSAGE, "errors": errors}
        ),
    )


async def _handle_http_exception(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        exc_info=exc,
        extra={
            "error_type": type(exc).__name__,
            "path": request.url.path,
            "correlation_id": get_correlation_id(),
        },
    )
    return _internal_error_response()


def register_exception_handlers(app: FastAPI) -> None:
    """Registra os handlers da taxonomia no app."""
    app.add_exception_handler(ApiError, _handle_api_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    # Falhas do colaborador têm handler explícito (não passam pelo ServerErrorMiddleware)
    app.add_exception_handler(InfrastructureError, _handle_unexpected)
    app.add_exception_handler(MessagingClientError, _handle_unexpected)
    app.add_exception_handler(TimeoutError, _handle_unexpected)
    app.add_exception_handler(Exception, _handle_unexpected)
