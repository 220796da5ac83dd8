"""
Módulo FSM — Máquina de Estados da conexão com a rede de mensagens.

Implementa a FSM determinística que governa as fases da sessão única
do serviço (desconectada, aguardando pareamento, conectada, erro).

Estrutura:
    - states/: Definições das fases (ConnectionPhase enum)
    - transitions/: Regras de transição (VALID_TRANSITIONS)
    - rules/: Guards e invariantes
    - manager/: Máquina de estados (FSMStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult)
"""

from fsm.manager import (
    DEFAULT_HISTORY_LIMIT,
    FSMStateMachine,
    create_fsm,
)
from fsm.rules import (
    GuardResult,
    evaluate_guards,
)
from fsm.states import (
    DEFAULT_INITIAL_PHASE,
    ConnectionPhase,
    parse_phase,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "DEFAULT_INITIAL_PHASE",
    "VALID_TRANSITIONS",
    "ConnectionPhase",
    "FSMStateMachine",
    "GuardResult",
    "StateTransition",
    "TransitionResult",
    "create_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_transition_valid",
    "parse_phase",
    "validate_transition_map",
]
