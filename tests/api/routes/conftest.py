"""Fixtures das rotas HTTP: app com contexto fake e auth configurada."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from api.security.tokens import issue_token
from app.app import create_app
from app.sessions.context import WhatsAppSessionContext
from config.settings import (
    AuthSettings,
    GatewaySettings,
    SessionSettings,
    get_auth_settings,
    get_gateway_settings,
)
from tests.fakes.fake_messaging_client import FakeMessagingClient

AUTH = AuthSettings(
    username="admin",
    password="s3cret",
    token_secret="test-secret-with-at-least-32-bytes!!",
)
GATEWAY = GatewaySettings(
    base_url="http://gateway.test",
    webhook_secret="",
    media_max_size_bytes=1024,
)
FAST_SESSION = SessionSettings(
    initialize_timeout_seconds=0.5,
    pairing_wait_timeout_seconds=0.2,
    send_timeout_seconds=0.5,
)


@pytest.fixture
def fake_client() -> FakeMessagingClient:
    return FakeMessagingClient()


@pytest.fixture
def session_context(fake_client: FakeMessagingClient) -> WhatsAppSessionContext:
    return WhatsAppSessionContext.create(fake_client, FAST_SESSION)


@pytest.fixture
def auth_settings() -> AuthSettings:
    return AUTH


@pytest.fixture
def gateway_settings() -> GatewaySettings:
    return GATEWAY


@pytest.fixture
def api_client(
    session_context: WhatsAppSessionContext,
    auth_settings: AuthSettings,
    gateway_settings: GatewaySettings,
) -> Iterator[TestClient]:
    app = create_app(context=session_context)
    app.dependency_overrides[get_auth_settings] = lambda: auth_settings
    app.dependency_overrides[get_gateway_settings] = lambda: gateway_settings
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def auth_headers(auth_settings: AuthSettings) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token('admin', auth_settings)}"}
