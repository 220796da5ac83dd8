"""Connection State Holder — estado único da sessão do processo.

Guarda o snapshot atual (`ConnectionState`) e aplica transições
validadas pela FSM. O Event Bridge é o escritor principal; logout e
inicialização também escrevem. Leitores recebem sempre um snapshot
imutável, nunca um estado parcial.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from app.domain.connection import ConnectionState
from app.observability.metrics import record_phase_change
from fsm import FSMStateMachine, create_fsm
from fsm.states import ConnectionPhase

logger = logging.getLogger(__name__)

StateListener = Callable[[ConnectionState], None]


class ConnectionStateHolder:
    """Registro thread-safe da fase da conexão.

    Seções críticas são curtas e sem await; listeners são notificados
    fora do lock, na thread que aplicou a transição.
    """

    def __init__(self, fsm: FSMStateMachine | None = None) -> None:
        self._fsm = fsm or create_fsm("whatsapp_session")
        self._state = ConnectionState(phase=self._fsm.current_phase)
        self._lock = threading.Lock()
        self._listeners: list[StateListener] = []

    def snapshot(self) -> ConnectionState:
        """Retorna o último estado aplicado."""
        with self._lock:
            return self._state

    @property
    def phase(self) -> ConnectionPhase:
        return self.snapshot().phase

    def add_listener(self, listener: StateListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def apply(
        self,
        target: ConnectionPhase,
        *,
        trigger: str,
        pairing_artifact: str | None = None,
        error_detail: str | None = None,
    ) -> ConnectionState | None:
        """Aplica uma transição de fase.

        O artefato de pareamento só é mantido em AWAITING_PAIRING e o
        detalhe de erro só em ERROR; qualquer outra fase os descarta.

        Returns:
            Novo snapshot, ou None se a FSM rejeitou a transição.
        """
        with self._lock:
            previous = self._state
            result = self._fsm.transition(target, trigger)
            if not result.success:
                rejected_reason = result.error_reason
                new_state = None
            else:
                new_state = ConnectionState(
                    phase=target,
                    pairing_artifact=(
                        pairing_artifact if target == ConnectionPhase.AWAITING_PAIRING else None
                    ),
                    error_detail=(
                        (error_detail or "unknown_error")
                        if target == ConnectionPhase.ERROR
                        else None
                    ),
                    updated_at=datetime.now(UTC),
                    version=previous.version + 1,
                )
                self._state = new_state
            listeners = list(self._listeners)

        if new_state is None:
            logger.warning(
                "connection_transition_rejected",
                extra={
                    "from_phase": previous.phase.value,
                    "to_phase": target.value,
                    "trigger": trigger,
                    "reason": rejected_reason,
                },
            )
            return None

        logger.info(
            "connection_phase_changed",
            extra={
                "from_phase": previous.phase.value,
                "to_phase": target.value,
                "trigger": trigger,
                "version": new_state.version,
            },
        )
        record_phase_change(previous.phase.value, target.value, trigger)

        for listener in listeners:
            try:
                listener(new_state)
            except Exception:
                logger.exception("connection_state_listener_failed")
        return new_state

    def summary(self) -> dict[str, Any]:
        """Resumo da FSM para observabilidade (sem PII)."""
        with self._lock:
            return {
                **self._fsm.get_state_summary(),
                "version": self._state.version,
                "recent_transitions": self._fsm.get_history_summary()[-5:],
            }
