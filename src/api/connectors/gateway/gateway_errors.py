"""Erros e helpers de parsing para a API do gateway."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Códigos do gateway que indicam mídia inexistente
MEDIA_NOT_FOUND_CODES = frozenset({"media_not_found", "message_not_found"})


@dataclass(frozen=True)
class GatewayApiError:
    """Erro retornado pelo gateway (`{"error": {"code", "message"}}`)."""

    code: str
    message: str
    status_code: int
    is_permanent: bool  # True se erro não é retentável


def is_permanent_error(status_code: int) -> bool:
    """Classifica erro como permanente ou transitório.

    Erros permanentes: 4xx exceto 408 e 429
    Erros transitórios: 408, 429, 500+
    """
    if status_code in (408, 429):
        return False
    return 400 <= status_code < 500


def parse_gateway_error(
    response_data: Any,
    status_code: int,
) -> GatewayApiError | None:
    """Extrai informações de erro do response do gateway.

    Args:
        response_data: JSON decodificado do response (qualquer tipo)
        status_code: Status HTTP do response

    Returns:
        GatewayApiError se houver erro, None se sucesso
    """
    error_obj = response_data.get("error") if isinstance(response_data, dict) else None
    if not isinstance(error_obj, dict):
        if status_code < 400:
            return None
        error_obj = {}

    return GatewayApiError(
        code=str(error_obj.get("code") or f"http_{status_code}"),
        message=str(error_obj.get("message") or "Erro desconhecido do gateway"),
        status_code=status_code,
        is_permanent=is_permanent_error(status_code),
    )


def is_media_not_found(error: GatewayApiError) -> bool:
    return error.status_code == 404 or error.code in MEDIA_NOT_FOUND_CODES
