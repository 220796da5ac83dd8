"""Helpers de logging para a API do gateway (sem PII)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .gateway_errors import GatewayApiError

logger = logging.getLogger(__name__)


def log_gateway_error(
    error: GatewayApiError,
    method: str,
    path: str,
) -> None:
    """Loga erro do gateway sem expor dados sensíveis."""
    logger.warning(
        "gateway_api_error",
        extra={
            "method": method,
            "path": path,
            "error_code": error.code,
            "status_code": error.status_code,
            "is_permanent": error.is_permanent,
        },
    )


def log_success(
    method: str,
    path: str,
    status_code: int,
) -> None:
    """Loga sucesso sem expor dados sensíveis."""
    logger.debug(
        "gateway_api_success",
        extra={
            "method": method,
            "path": path,
            "status_code": status_code,
        },
    )
