"""Testes dos tipos de domínio (mensagens, estado, resultados, endereços)."""

from __future__ import annotations

import pytest

from app.constants.whatsapp import (
    DEFAULT_AUDIO_MIMETYPE,
    DisconnectReason,
    MessageKind,
    is_error_disconnect,
)
from app.domain.addresses import normalize_address
from app.domain.connection import ConnectionState
from app.domain.messages import AudioAsset, InboundMessage
from app.domain.results import Failure, FailureReason, MessageSent, SendFailed
from fsm.states import ConnectionPhase


class TestInboundMessage:
    def test_from_payload_and_public_dict(self) -> None:
        message = InboundMessage.from_payload(
            {
                "id": "m1",
                "from": "5491112223344@s.whatsapp.net",
                "fromMe": False,
                "timestamp": "1700000000",
                "type": "AUDIO",
                "pushName": "Ana",
                "content": {"mimetype": "audio/mpeg", "seconds": 4, "ptt": True},
            }
        )

        assert message.is_audio is True
        assert message.audio_mimetype == "audio/mpeg"
        assert message.to_dict() == {
            "id": "m1",
            "from": "5491112223344@s.whatsapp.net",
            "fromMe": False,
            "timestamp": 1700000000,
            "type": "audio",
            "pushName": "Ana",
            "content": {"mimetype": "audio/mpeg", "seconds": 4, "ptt": True},
        }

    def test_unknown_type_becomes_other(self) -> None:
        message = InboundMessage.from_payload({"id": "m2", "from": "x@s", "type": "sticker"})
        assert message.kind == MessageKind.OTHER
        assert message.push_name is None
        assert message.audio_mimetype == DEFAULT_AUDIO_MIMETYPE

    @pytest.mark.parametrize(
        "payload",
        [
            {"from": "x@s"},
            {"id": "m3"},
            {"id": "m3", "from": "x@s", "timestamp": "ontem"},
        ],
    )
    def test_invalid_payload(self, payload: dict) -> None:
        with pytest.raises(ValueError):
            InboundMessage.from_payload(payload)

    def test_content_is_read_only(self) -> None:
        source = {"text": "hola"}
        message = InboundMessage(
            id="m4", sender="x@s", from_me=True, timestamp=1, kind=MessageKind.TEXT, content=source
        )
        source["text"] = "alterado"

        assert message.content["text"] == "hola"
        with pytest.raises(TypeError):
            message.content["text"] = "x"  # type: ignore[index]


@pytest.mark.asyncio
async def test_audio_asset_read_all() -> None:
    async def chunks():
        yield b"ab"
        yield b"cd"

    asset = AudioAsset(message_id="m1", mimetype="audio/ogg", stream=chunks())
    assert asset.filename == "m1.ogg"
    assert await asset.read_all() == b"abcd"


class TestConnectionState:
    def test_default_is_disconnected(self) -> None:
        state = ConnectionState()
        assert state.phase == ConnectionPhase.DISCONNECTED
        assert state.connected is False
        assert state.version == 0

    def test_artifact_only_in_awaiting_pairing(self) -> None:
        with pytest.raises(ValueError):
            ConnectionState(phase=ConnectionPhase.CONNECTED, pairing_artifact="2@x")
        state = ConnectionState(phase=ConnectionPhase.AWAITING_PAIRING, pairing_artifact="2@x")
        assert state.pairing_artifact == "2@x"

    def test_error_detail_only_in_error(self) -> None:
        with pytest.raises(ValueError):
            ConnectionState(phase=ConnectionPhase.DISCONNECTED, error_detail="boom")
        state = ConnectionState(phase=ConnectionPhase.ERROR, error_detail="boom")
        assert state.error_detail == "boom"
        assert state.connected is False


class TestResults:
    def test_failure_default_message(self) -> None:
        failure = Failure(FailureReason.NOT_CONNECTED)
        assert failure.message == "No hay sesión activa"
        assert failure.success is False

    def test_send_variants(self) -> None:
        sent = MessageSent(to="1@s.whatsapp.net", message_id="wamid")
        failed = SendFailed(to="1@s.whatsapp.net", reason=FailureReason.TIMEOUT)
        assert (sent.success, sent.status) == (True, "success")
        assert (failed.success, failed.status) == (False, "failure")
        assert failed.message == "Tiempo de espera agotado"


class TestAddresses:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("5491112223344", "5491112223344@s.whatsapp.net"),
            ("+5491112223344", "5491112223344@s.whatsapp.net"),
            (" 5491112223344 ", "5491112223344@s.whatsapp.net"),
            ("5491112223344@s.whatsapp.net", "5491112223344@s.whatsapp.net"),
            ("120363@g.us", "120363@g.us"),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        assert normalize_address(raw) == expected

    def test_custom_suffix(self) -> None:
        assert normalize_address("123", "@c.us") == "123@c.us"

    @pytest.mark.parametrize("raw", ["", "   ", "+"])
    def test_empty_rejected(self, raw: str) -> None:
        with pytest.raises(ValueError):
            normalize_address(raw)


@pytest.mark.parametrize(
    ("reason", "expected"),
    [
        (DisconnectReason.BAD_SESSION, True),
        ("connection_replaced", True),
        (DisconnectReason.CONNECTION_LOST, False),
        ("logged_out", False),
        (None, False),
        ("", False),
    ],
)
def test_is_error_disconnect(reason: str | None, expected: bool) -> None:
    assert is_error_disconnect(reason) is expected
