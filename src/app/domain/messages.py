"""Mensagens inbound e assets de áudio derivados."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from app.constants.whatsapp import DEFAULT_AUDIO_MIMETYPE, MessageKind


def _freeze(content: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(content or {}))


def _coerce_kind(value: Any) -> MessageKind:
    try:
        return MessageKind(str(value).lower())
    except ValueError:
        return MessageKind.OTHER


@dataclass(frozen=True, slots=True)
class InboundMessage:
    """Mensagem recebida da rede, registrada pelo Event Bridge.

    Nunca é alterada após a criação. O `content` é opaco: para áudio
    costuma conter `mimetype`, `seconds` e `ptt`.
    """

    id: str
    sender: str
    from_me: bool
    timestamp: int
    kind: MessageKind
    push_name: str | None = None
    content: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id da mensagem é obrigatório")
        object.__setattr__(self, "content", _freeze(self.content))

    @property
    def is_audio(self) -> bool:
        return self.kind == MessageKind.AUDIO

    @property
    def audio_mimetype(self) -> str:
        mimetype = self.content.get("mimetype")
        return mimetype if isinstance(mimetype, str) and mimetype else DEFAULT_AUDIO_MIMETYPE

    def to_dict(self) -> dict[str, Any]:
        """Serializa no formato público (`/session/mensajes/recibidos`)."""
        return {
            "id": self.id,
            "from": self.sender,
            "fromMe": self.from_me,
            "timestamp": self.timestamp,
            "type": self.kind.value,
            "pushName": self.push_name,
            "content": dict(self.content),
        }

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> InboundMessage:
        """Constrói a partir do payload do gateway.

        Raises:
            ValueError: Se `id` ou `from` estiverem ausentes ou o
                timestamp não for numérico.
        """
        message_id = str(data.get("id") or "").strip()
        sender = str(data.get("from") or "").strip()
        if not message_id or not sender:
            raise ValueError("payload de mensagem sem id ou remetente")

        try:
            timestamp = int(data.get("timestamp") or 0)
        except (TypeError, ValueError) as exc:
            raise ValueError("timestamp inválido") from exc

        content = data.get("content")
        push_name = data.get("pushName")
        return cls(
            id=message_id,
            sender=sender,
            from_me=bool(data.get("fromMe", False)),
            timestamp=timestamp,
            kind=_coerce_kind(data.get("type")),
            push_name=str(push_name) if push_name else None,
            content=content if isinstance(content, Mapping) else {},
        )


@dataclass(frozen=True, slots=True)
class AudioAsset:
    """Visão derivada de uma mensagem de áudio, resolvida sob demanda."""

    message_id: str
    mimetype: str
    stream: AsyncIterator[bytes]

    @property
    def filename(self) -> str:
        return f"{self.message_id}.ogg"

    async def read_all(self) -> bytes:
        """Consome o stream inteiro (usado pela rota base64)."""
        chunks = [chunk async for chunk in self.stream]
        return b"".join(chunks)
