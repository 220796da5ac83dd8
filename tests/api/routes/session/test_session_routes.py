"""Testes das rotas /session (ciclo de vida, mensagens e áudio)."""

from __future__ import annotations

import base64

import pytest
from fastapi.testclient import TestClient

from app.constants.whatsapp import MessageKind
from app.domain.events import ConnectionOpened, PairingRequired
from app.domain.messages import InboundMessage
from app.protocols.messaging_client import MessagingClientError
from app.sessions.context import WhatsAppSessionContext
from fsm.states import ConnectionPhase
from tests.fakes.fake_messaging_client import FakeMessagingClient
from utils.errors import GatewayUnavailableError


def _connect(context: WhatsAppSessionContext) -> None:
    context.holder.apply(ConnectionPhase.CONNECTED, trigger="connection_open")


def _audio(message_id: str, mimetype: str = "audio/ogg; codecs=opus") -> InboundMessage:
    return InboundMessage(
        id=message_id,
        sender="5491112223344@s.whatsapp.net",
        from_me=False,
        timestamp=1_700_000_000,
        kind=MessageKind.AUDIO,
        push_name="Ana",
        content={"mimetype": mimetype, "seconds": 3, "ptt": True},
    )


class TestStartAndStatus:
    def test_start_returns_qr(
        self,
        api_client: TestClient,
        auth_headers: dict[str, str],
        session_context: WhatsAppSessionContext,
        fake_client: FakeMessagingClient,
    ) -> None:
        fake_client.on_initialize = lambda: session_context.bridge.apply(PairingRequired("2@abc"))

        response = api_client.post("/session/start", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["status"] == "waiting_qr"
        assert body["connected"] is False
        assert body["qr"] == "2@abc"
        assert body["qrBase64"].startswith("data:image/png;base64,")
        assert body["alreadyConnected"] is False
        assert "error" not in body

    def test_start_when_connected(
        self,
        api_client: TestClient,
        auth_headers: dict[str, str],
        session_context: WhatsAppSessionContext,
        fake_client: FakeMessagingClient,
    ) -> None:
        _connect(session_context)

        response = api_client.post("/session/start", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "status": "connected",
            "connected": True,
            "alreadyConnected": True,
        }
        assert fake_client.calls == []

    def test_start_with_event_connecting(
        self,
        api_client: TestClient,
        auth_headers: dict[str, str],
        session_context: WhatsAppSessionContext,
        fake_client: FakeMessagingClient,
    ) -> None:
        fake_client.on_initialize = lambda: session_context.bridge.apply(ConnectionOpened())

        response = api_client.post("/session/start", headers=auth_headers)

        assert response.json()["status"] == "connected"

    def test_start_failure(
        self,
        api_client: TestClient,
        auth_headers: dict[str, str],
        fake_client: FakeMessagingClient,
    ) -> None:
        fake_client.initialize_error = RuntimeError("socket fechado")

        response = api_client.post("/session/start", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "reason": "initialize_failed",
            "message": "socket fechado",
            "status": "error",
        }
        status = api_client.get("/session/status", headers=auth_headers).json()
        assert status["status"] == "error"
        assert status["error"] == "socket fechado"

    def test_status_initial(self, api_client: TestClient, auth_headers: dict[str, str]) -> None:
        response = api_client.get("/session/status", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "status": "disconnected", "connected": False}

    def test_status_while_waiting_qr(
        self,
        api_client: TestClient,
        auth_headers: dict[str, str],
        session_context: WhatsAppSessionContext,
    ) -> None:
        session_context.holder.apply(
            ConnectionPhase.AWAITING_PAIRING, trigger="pairing_required", pairing_artifact="2@xyz"
        )

        body = api_client.get("/session/status", headers=auth_headers).json()

        assert body["qr"] == "2@xyz"
        assert body["qrBase64"].startswith("data:image/png;base64,")


class TestLogout:
    def test_logout_without_session(
        self, api_client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        response = api_client.post("/session/logout", headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "reason": "not_connected",
            "message": "No hay sesión activa",
        }

    def test_logout_connected(
        self,
        api_client: TestClient,
        auth_headers: dict[str, str],
        session_context: WhatsAppSessionContext,
    ) -> None:
        _connect(session_context)

        response = api_client.post("/session/logout", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "status": "disconnected",
            "message": "Sesión cerrada correctamente",
        }
        status = api_client.get("/session/status", headers=auth_headers).json()
        assert status["connected"] is False

    def test_logout_client_failure_is_opaque_500(
        self,
        api_client: TestClient,
        auth_headers: dict[str, str],
        session_context: WhatsAppSessionContext,
        fake_client: FakeMessagingClient,
    ) -> None:
        _connect(session_context)
        fake_client.logout_error = RuntimeError("detalhe interno")

        response = api_client.post("/session/logout", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Error interno del servidor"}


class TestReceivedMessages:
    def test_list_and_clear(
        self,
        api_client: TestClient,
        auth_headers: dict[str, str],
        session_context: WhatsAppSessionContext,
    ) -> None:
        session_context.buffer.record(_audio("m1"))

        listed = api_client.get("/session/mensajes/recibidos", headers=auth_headers).json()

        assert listed["success"] is True
        assert listed["mensajes"] == [
            {
                "id": "m1",
                "from": "5491112223344@s.whatsapp.net",
                "fromMe": False,
                "timestamp": 1_700_000_000,
                "type": "audio",
                "pushName": "Ana",
                "content": {"mimetype": "audio/ogg; codecs=opus", "seconds": 3, "ptt": True},
            }
        ]

        cleared = api_client.delete("/session/mensajes/recibidos", headers=auth_headers)
        assert cleared.json() == {"success": True, "message": "Mensajes eliminados de memoria"}

        after = api_client.get("/session/mensajes/recibidos", headers=auth_headers).json()
        assert after["mensajes"] == []


class TestAudio:
    def test_stream_audio(
        self,
        api_client: TestClient,
        session_context: WhatsAppSessionContext,
        fake_client: FakeMessagingClient,
    ) -> None:
        session_context.buffer.record(_audio("a1"))
        fake_client.audio_chunks["a1"] = [b"OggS", b"payload"]

        response = api_client.get("/session/mensajes/audio/a1")

        assert response.status_code == 200
        assert response.content == b"OggSpayload"
        assert response.headers["content-type"].startswith("audio/ogg")
        assert response.headers["content-disposition"] == 'inline; filename="a1.ogg"'

    def test_stream_not_audio(
        self,
        api_client: TestClient,
        session_context: WhatsAppSessionContext,
    ) -> None:
        session_context.buffer.record(
            InboundMessage(
                id="t1",
                sender="x@s.whatsapp.net",
                from_me=False,
                timestamp=1,
                kind=MessageKind.TEXT,
            )
        )

        response = api_client.get("/session/mensajes/audio/t1")

        assert response.status_code == 404
        assert response.json()["reason"] == "not_audio"

    def test_stream_media_unavailable(
        self,
        api_client: TestClient,
        session_context: WhatsAppSessionContext,
    ) -> None:
        session_context.buffer.record(_audio("a2"))

        response = api_client.get("/session/mensajes/audio/a2")

        assert response.status_code == 404
        assert response.json()["reason"] == "media_unavailable"

    @pytest.mark.parametrize(
        "error",
        [
            GatewayUnavailableError("gateway indisponível"),
            MessagingClientError("falha no gateway", code="internal", status_code=400),
        ],
    )
    def test_stream_collaborator_failure_is_not_found(
        self,
        api_client: TestClient,
        session_context: WhatsAppSessionContext,
        fake_client: FakeMessagingClient,
        error: Exception,
    ) -> None:
        session_context.buffer.record(_audio("a4"))
        fake_client.audio_error = error

        response = api_client.get("/session/mensajes/audio/a4")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "reason": "media_unavailable",
            "message": "Audio no disponible",
        }

    def test_base64_gateway_failure_is_internal(
        self,
        api_client: TestClient,
        auth_headers: dict[str, str],
        session_context: WhatsAppSessionContext,
        fake_client: FakeMessagingClient,
    ) -> None:
        session_context.buffer.record(_audio("a5"))
        fake_client.audio_error = GatewayUnavailableError("gateway indisponível")

        response = api_client.get("/session/mensajes/audio/a5/base64", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Error interno del servidor"}

    def test_audio_base64(
        self,
        api_client: TestClient,
        auth_headers: dict[str, str],
        session_context: WhatsAppSessionContext,
        fake_client: FakeMessagingClient,
    ) -> None:
        session_context.buffer.record(_audio("a3", mimetype="audio/mpeg"))
        fake_client.audio_chunks["a3"] = [b"ID3", b"-mp3"]

        response = api_client.get("/session/mensajes/audio/a3/base64", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "id": "a3",
            "mimetype": "audio/mpeg",
            "base64": base64.b64encode(b"ID3-mp3").decode(),
        }

    def test_audio_base64_requires_token(self, api_client: TestClient) -> None:
        response = api_client.get("/session/mensajes/audio/a3/base64")
        assert response.status_code == 401
