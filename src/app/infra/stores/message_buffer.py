"""Buffer em memória das mensagens inbound.

Sem persistência entre reinícios. Por padrão não tem limite de tamanho;
com `max_messages > 0` as entradas mais antigas são descartadas.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict

from app.domain.messages import InboundMessage

logger = logging.getLogger(__name__)


class InboundMessageBuffer:
    """Log append-only de mensagens recebidas, indexado por id.

    Todas as operações passam pelo mesmo lock; leituras retornam
    snapshots imutáveis (tuple), então um `record` concorrente nunca
    expõe estado parcial.
    """

    def __init__(self, max_messages: int = 0) -> None:
        if max_messages < 0:
            raise ValueError("max_messages não pode ser negativo")
        self._messages: OrderedDict[str, InboundMessage] = OrderedDict()
        self._max_messages = max_messages
        self._lock = threading.Lock()

    @property
    def max_messages(self) -> int:
        return self._max_messages

    def record(self, message: InboundMessage) -> bool:
        """Registra a mensagem.

        Returns:
            True se inserida; False se o id já estava no buffer.
        """
        evicted: InboundMessage | None = None
        with self._lock:
            if message.id in self._messages:
                duplicate = True
            else:
                duplicate = False
                self._messages[message.id] = message
                if self._max_messages and len(self._messages) > self._max_messages:
                    _, evicted = self._messages.popitem(last=False)

        if duplicate:
            logger.info(
                "inbound_message_duplicate_ignored",
                extra={"message_id": message.id},
            )
            return False
        if evicted is not None:
            logger.info(
                "inbound_message_evicted",
                extra={"message_id": evicted.id, "max_messages": self._max_messages},
            )
        return True

    def list_messages(self) -> tuple[InboundMessage, ...]:
        """Snapshot ordenado por inserção."""
        with self._lock:
            return tuple(self._messages.values())

    def get_by_id(self, message_id: str) -> InboundMessage | None:
        """Retorna a mensagem ou None se não estiver no buffer."""
        with self._lock:
            return self._messages.get(message_id)

    def clear(self) -> int:
        """Esvazia o buffer. Retorna quantas mensagens foram removidas."""
        with self._lock:
            removed = len(self._messages)
            self._messages.clear()
        logger.info("inbound_messages_cleared", extra={"removed": removed})
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)
