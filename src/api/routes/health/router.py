"""Endpoints de health check (liveness e readiness)."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.settings import get_base_settings

logger = logging.getLogger(__name__)

router = APIRouter()

GATEWAY_CHECK_TIMEOUT_SECONDS = 2.0


class HealthResponse(BaseModel):
    """Resposta do health check."""

    success: bool = True
    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "degraded", "failed"]
    latency_ms: float | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe — verifica se o serviço está rodando."""
    return HealthResponse(
        status="healthy",
        service=get_base_settings().service_name,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe: Event Bridge ativo e gateway acessível."""
    context = getattr(request.app.state, "session_context", None)
    bridge_check = _check_bridge(context)
    gateway_check = await _check_gateway(getattr(context, "client", None))

    ready = bridge_check.status == "ok" and gateway_check.status == "ok"
    payload: dict[str, Any] = {
        "success": ready,
        "status": "ready" if ready else "not_ready",
        "checks": {
            "event_bridge": bridge_check.as_dict(),
            "gateway": gateway_check.as_dict(),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    if context is not None:
        payload["session"] = context.holder.summary()
    return JSONResponse(content=payload, status_code=200 if ready else 503)


def _check_bridge(context: Any | None) -> DependencyCheck:
    if context is None:
        return DependencyCheck(status="failed", error="not_configured")
    if not context.bridge.is_running:
        return DependencyCheck(status="failed", error="not_running")
    return DependencyCheck(status="ok")


async def _check_gateway(client: Any | None) -> DependencyCheck:
    if client is None:
        return DependencyCheck(status="failed", error="not_configured")
    started_at = time.perf_counter()
    try:
        await asyncio.wait_for(
            client.get_connection_status(),
            timeout=GATEWAY_CHECK_TIMEOUT_SECONDS,
        )
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        logger.warning("readiness_gateway_check_failed", extra={"error_type": type(exc).__name__})
        return DependencyCheck(status="failed", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))
