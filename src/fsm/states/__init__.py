"""
Exports públicos do módulo fsm/states.

Fases canônicas da conexão com a rede de mensagens.
"""

from fsm.states.connection import (
    DEFAULT_INITIAL_PHASE,
    PAIRING_PHASES,
    ConnectionPhase,
    parse_phase,
)

__all__ = [
    "DEFAULT_INITIAL_PHASE",
    "PAIRING_PHASES",
    "ConnectionPhase",
    "parse_phase",
]
