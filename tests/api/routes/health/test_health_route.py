"""Testes dos endpoints de health e readiness."""

from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.requests import Request

from api.routes.health.router import health_check, readiness_check
from app.protocols.messaging_client import ClientStatus
from app.sessions.context import WhatsAppSessionContext
from fsm.states import ConnectionPhase
from tests.fakes.fake_messaging_client import FakeMessagingClient


def _build_request_with_state(state: SimpleNamespace) -> Request:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/ready",
        "raw_path": b"/ready",
        "query_string": b"",
        "headers": [],
        "app": SimpleNamespace(state=state),
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(scope, _receive)


@pytest.mark.asyncio
async def test_health_check_reports_service() -> None:
    response = await health_check()
    assert response.success is True
    assert response.status == "healthy"
    assert response.service


@pytest.mark.asyncio
async def test_readiness_returns_not_ready_without_context() -> None:
    request = _build_request_with_state(SimpleNamespace(session_context=None))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["success"] is False
    assert payload["status"] == "not_ready"
    assert payload["checks"]["event_bridge"]["error"] == "not_configured"
    assert payload["checks"]["gateway"]["error"] == "not_configured"
    assert "session" not in payload


@pytest.mark.asyncio
async def test_readiness_returns_ready_when_bridge_and_gateway_are_ok() -> None:
    client = FakeMessagingClient(status=ClientStatus(phase=ConnectionPhase.CONNECTED))
    context = WhatsAppSessionContext.create(client)
    await context.start()
    try:
        request = _build_request_with_state(SimpleNamespace(session_context=context))
        response = await readiness_check(request)
    finally:
        await context.close()
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["status"] == "ready"
    assert payload["checks"]["event_bridge"]["status"] == "ok"
    assert payload["checks"]["gateway"]["status"] == "ok"
    assert payload["session"]["current_phase"] == "DISCONNECTED"


@pytest.mark.asyncio
async def test_readiness_fails_when_gateway_errors() -> None:
    gateway = MagicMock()
    gateway.get_connection_status = AsyncMock(side_effect=ConnectionError("refused"))
    context = SimpleNamespace(
        client=gateway,
        bridge=SimpleNamespace(is_running=True),
        holder=SimpleNamespace(summary=lambda: {"current_phase": "DISCONNECTED"}),
    )
    request = _build_request_with_state(SimpleNamespace(session_context=context))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["checks"]["gateway"] == {
        "status": "failed",
        "latency_ms": None,
        "error": "ConnectionError",
    }


@pytest.mark.asyncio
async def test_readiness_gateway_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    import api.routes.health.router as health_router

    monkeypatch.setattr(health_router, "GATEWAY_CHECK_TIMEOUT_SECONDS", 0.01)

    async def _slow() -> None:
        await asyncio.sleep(1)

    gateway = SimpleNamespace(get_connection_status=_slow)
    context = SimpleNamespace(
        client=gateway,
        bridge=SimpleNamespace(is_running=True),
        holder=SimpleNamespace(summary=dict),
    )
    request = _build_request_with_state(SimpleNamespace(session_context=context))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert payload["checks"]["gateway"]["error"] == "timeout"
