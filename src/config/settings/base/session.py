"""Settings da sessão de mensagens.

Limites de tempo e de memória do núcleo de sessão (estado da conexão,
buffer de mensagens recebidas e ponte de eventos).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class SessionSettings:
    """Configurações do núcleo de sessão.

    Attributes:
        initialize_timeout_seconds: Limite para o cliente iniciar a conexão
        pairing_wait_timeout_seconds: Espera máxima pelo código de pareamento
        send_timeout_seconds: Limite por envio outbound
        max_buffered_messages: Máximo de mensagens em memória (0 = sem limite)
        event_queue_size: Capacidade da fila de eventos do protocolo
    """

    initialize_timeout_seconds: float = 30.0
    pairing_wait_timeout_seconds: float = 20.0
    send_timeout_seconds: float = 30.0
    max_buffered_messages: int = 0
    event_queue_size: int = 1000

    def validate(self) -> list[str]:
        """Valida configurações de sessão.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.initialize_timeout_seconds <= 0:
            errors.append("SESSION_INITIALIZE_TIMEOUT_SECONDS deve ser > 0")

        if self.pairing_wait_timeout_seconds <= 0:
            errors.append("SESSION_PAIRING_WAIT_SECONDS deve ser > 0")

        if self.send_timeout_seconds <= 0:
            errors.append("SESSION_SEND_TIMEOUT_SECONDS deve ser > 0")

        if self.max_buffered_messages < 0:
            errors.append("SESSION_MAX_BUFFERED_MESSAGES deve ser >= 0")

        if self.event_queue_size < 1:
            errors.append("SESSION_EVENT_QUEUE_SIZE deve ser >= 1")

        return errors


def _load_session_from_env() -> SessionSettings:
    """Carrega SessionSettings de variáveis de ambiente."""
    return SessionSettings(
        initialize_timeout_seconds=float(
            os.getenv("SESSION_INITIALIZE_TIMEOUT_SECONDS", "30")
        ),
        pairing_wait_timeout_seconds=float(
            os.getenv("SESSION_PAIRING_WAIT_SECONDS", "20")
        ),
        send_timeout_seconds=float(os.getenv("SESSION_SEND_TIMEOUT_SECONDS", "30")),
        max_buffered_messages=int(os.getenv("SESSION_MAX_BUFFERED_MESSAGES", "0")),
        event_queue_size=int(os.getenv("SESSION_EVENT_QUEUE_SIZE", "1000")),
    )


@lru_cache(maxsize=1)
def get_session_settings() -> SessionSettings:
    """Retorna instância cacheada de SessionSettings."""
    return _load_session_from_env()
