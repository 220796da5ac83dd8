"""
Guards e invariantes para transições de fase da conexão.

Guards são regras adicionais avaliadas depois do mapa de transições.
Podem bloquear uma transição que o grafo permitiria.
"""

from collections.abc import Callable

from fsm.states.connection import ConnectionPhase
from fsm.transitions.rules import REFLEXIVE_PHASES


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        """Cria resultado permitindo a transição."""
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        """Cria resultado negando a transição."""
        return cls(allowed=False, reason=reason)


Guard = Callable[[ConnectionPhase, ConnectionPhase], GuardResult]


def guard_valid_phase(
    from_phase: ConnectionPhase,
    to_phase: ConnectionPhase,
) -> GuardResult:
    """
    Guard: Verifica se ambas as fases são válidas.

    Args:
        from_phase: Fase de origem
        to_phase: Fase de destino

    Returns:
        GuardResult indicando se transição é permitida
    """
    if not isinstance(from_phase, ConnectionPhase):
        return GuardResult.deny(f"Fase de origem inválida: {from_phase}")

    if not isinstance(to_phase, ConnectionPhase):
        return GuardResult.deny(f"Fase de destino inválida: {to_phase}")

    return GuardResult.allow()


def guard_same_phase(
    from_phase: ConnectionPhase,
    to_phase: ConnectionPhase,
) -> GuardResult:
    """
    Guard: Previne transição para a mesma fase (exceto casos explícitos).

    AWAITING_PAIRING pode transitar para si mesma (código renovado) e
    ERROR também (falha repetida com novo detalhe).

    Args:
        from_phase: Fase de origem
        to_phase: Fase de destino

    Returns:
        GuardResult indicando se transição é permitida
    """
    if from_phase in REFLEXIVE_PHASES:
        return GuardResult.allow()

    if from_phase == to_phase:
        return GuardResult.deny(
            f"Transição reflexiva não permitida: {from_phase.name} → {to_phase.name}"
        )

    return GuardResult.allow()


# Lista de guards a serem aplicados em ordem
# Todos devem retornar allow() para a transição prosseguir
DEFAULT_GUARDS: list[Guard] = [
    guard_valid_phase,
    guard_same_phase,
]


def evaluate_guards(
    from_phase: ConnectionPhase,
    to_phase: ConnectionPhase,
    guards: list[Guard] | None = None,
) -> GuardResult:
    """
    Avalia todos os guards para uma transição.

    Args:
        from_phase: Fase de origem
        to_phase: Fase de destino
        guards: Lista de guards a aplicar (usa DEFAULT_GUARDS se None)

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem
    """
    guards_to_apply = guards if guards is not None else DEFAULT_GUARDS

    for guard in guards_to_apply:
        result = guard(from_phase, to_phase)
        if not result.allowed:
            return result

    return GuardResult.allow()
