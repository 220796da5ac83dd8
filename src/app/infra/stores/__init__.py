"""Stores — implementações concretas de armazenamento.

Módulos disponíveis:
    - message_buffer: Buffer em memória das mensagens inbound
"""

from __future__ import annotations

from app.infra.stores.message_buffer import InboundMessageBuffer

__all__ = ["InboundMessageBuffer"]
