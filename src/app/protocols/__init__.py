"""Protocolos e contratos do core da aplicação."""

from .messaging_client import (
    ClientStatus,
    MediaNotFoundError,
    MessagingClientError,
    MessagingClientProtocol,
    NumberLookup,
    SendReceipt,
)

__all__ = [
    "ClientStatus",
    "MediaNotFoundError",
    "MessagingClientError",
    "MessagingClientProtocol",
    "NumberLookup",
    "SendReceipt",
]
