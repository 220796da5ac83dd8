"""
Máquina de estados (FSMStateMachine) da conexão com a rede de mensagens.

Controla a fase atual, valida transições contra o mapa e os guards
e mantém um histórico limitado para observabilidade.

A máquina não é thread-safe: quem a possui (ConnectionStateHolder)
serializa o acesso.
"""

from collections import deque
from typing import Any

from fsm.rules.guards import GuardResult, evaluate_guards
from fsm.states.connection import DEFAULT_INITIAL_PHASE, ConnectionPhase
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult

DEFAULT_HISTORY_LIMIT = 50


class FSMStateMachine:
    """
    Máquina de estados da conexão.

    Attributes:
        current_phase: Fase atual da máquina
        history: Últimas transições realizadas (limitado)
    """

    __slots__ = ("_current_phase", "_history", "_name")

    def __init__(
        self,
        initial_phase: ConnectionPhase | None = None,
        name: str = "",
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        """
        Inicializa a máquina de estados.

        Args:
            initial_phase: Fase inicial (usa DEFAULT_INITIAL_PHASE se None)
            name: Identificador da conexão para logs
            history_limit: Máximo de transições mantidas no histórico
        """
        self._current_phase = initial_phase or DEFAULT_INITIAL_PHASE
        self._history: deque[StateTransition] = deque(maxlen=history_limit)
        self._name = name

    @property
    def current_phase(self) -> ConnectionPhase:
        """Fase atual da máquina."""
        return self._current_phase

    @property
    def name(self) -> str:
        """Identificador da conexão."""
        return self._name

    def get_valid_targets(self) -> frozenset[ConnectionPhase]:
        """Retorna fases de destino válidas a partir da fase atual."""
        return get_valid_targets(self._current_phase)

    def transition(
        self,
        target: ConnectionPhase,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de fase.

        Args:
            target: Fase de destino
            trigger: Identificador do gatilho (ex: 'connection_open', 'logout')
            metadata: Dados adicionais para auditoria (nunca PII)

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not is_transition_valid(self._current_phase, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_phase.name} → {target.name}"
                ),
            )

        guard_result: GuardResult = evaluate_guards(self._current_phase, target)
        if not guard_result.allowed:
            return TransitionResult(
                success=False,
                error_reason=guard_result.reason,
            )

        transition = StateTransition(
            from_phase=self._current_phase,
            to_phase=target,
            trigger=trigger,
            metadata=metadata or {},
        )

        self._current_phase = target
        self._history.append(transition)

        return TransitionResult(success=True, transition=transition)

    def get_state_summary(self) -> dict[str, Any]:
        """
        Retorna resumo do estado atual para observability.

        Returns:
            Dict com informações do estado (seguro para logs)
        """
        return {
            "connection": self._name,
            "current_phase": self._current_phase.name,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.name for s in self.get_valid_targets()),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        """
        Retorna histórico em formato seguro para logs.

        Returns:
            Lista de transições em formato dict
        """
        return [t.to_log_dict() for t in self._history]


def create_fsm(
    name: str,
    initial_phase: ConnectionPhase | None = None,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> FSMStateMachine:
    """
    Factory function para criar uma FSM.

    Args:
        name: Identificador da conexão
        initial_phase: Fase inicial (opcional)
        history_limit: Tamanho máximo do histórico

    Returns:
        FSMStateMachine configurada
    """
    return FSMStateMachine(
        initial_phase=initial_phase,
        name=name,
        history_limit=history_limit,
    )
