"""Enums e constantes de domínio do protocolo WhatsApp."""

from __future__ import annotations

from enum import StrEnum

# Sufixo padrão de endereço (JID) de usuários na rede
USER_ADDRESS_SUFFIX = "@s.whatsapp.net"

# Mimetype usado quando o chamador não informa um
DEFAULT_AUDIO_MIMETYPE = "audio/ogg; codecs=opus"


class MessageKind(StrEnum):
    """Tipos de mensagem inbound expostos pela API."""

    TEXT = "text"
    AUDIO = "audio"
    OTHER = "other"


class DisconnectReason(StrEnum):
    """Motivos de desconexão reportados pelo gateway do protocolo."""

    CONNECTION_CLOSED = "connection_closed"
    CONNECTION_LOST = "connection_lost"
    TIMED_OUT = "timed_out"
    RESTART_REQUIRED = "restart_required"
    LOGGED_OUT = "logged_out"
    BAD_SESSION = "bad_session"
    CONNECTION_REPLACED = "connection_replaced"
    MULTIDEVICE_MISMATCH = "multidevice_mismatch"
    FORBIDDEN = "forbidden"
    UNAVAILABLE_SERVICE = "unavailable_service"


# Motivos que levam a sessão à fase de erro (os demais desconectam)
ERROR_DISCONNECT_REASONS = frozenset(
    {
        DisconnectReason.BAD_SESSION,
        DisconnectReason.CONNECTION_REPLACED,
        DisconnectReason.MULTIDEVICE_MISMATCH,
        DisconnectReason.FORBIDDEN,
        DisconnectReason.UNAVAILABLE_SERVICE,
    }
)


def is_error_disconnect(reason: str | None) -> bool:
    """Indica se o motivo de desconexão deve ser tratado como erro."""
    return bool(reason) and reason in ERROR_DISCONNECT_REASONS
