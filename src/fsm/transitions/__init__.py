"""
Exports públicos do módulo fsm/transitions.

Regras de transição válidas entre fases da conexão.
"""

from fsm.transitions.rules import (
    REFLEXIVE_PHASES,
    VALID_TRANSITIONS,
    TransitionMap,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)

__all__ = [
    "REFLEXIVE_PHASES",
    "VALID_TRANSITIONS",
    "TransitionMap",
    "get_valid_targets",
    "is_transition_valid",
    "validate_transition_map",
]
