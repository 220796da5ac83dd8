"""
Regras de transição válidas entre fases da conexão.

Este módulo define o grafo de transições da máquina de estados
da conexão. Auto-transições existem apenas onde o protocolo as exige:
renovação do código de pareamento e falhas repetidas.
"""

from fsm.states.connection import ConnectionPhase

# Tipagem explícita do mapa de transições
TransitionMap = dict[ConnectionPhase, frozenset[ConnectionPhase]]

# Mapa de transições válidas
# Chave: fase de origem
# Valor: conjunto de fases de destino permitidas
VALID_TRANSITIONS: TransitionMap = {
    # DISCONNECTED: pode pedir pareamento, retomar credenciais ou falhar
    ConnectionPhase.DISCONNECTED: frozenset({
        ConnectionPhase.AWAITING_PAIRING,
        ConnectionPhase.CONNECTED,
        ConnectionPhase.ERROR,
    }),

    # AWAITING_PAIRING: código renovado, pareado, caiu ou falhou
    ConnectionPhase.AWAITING_PAIRING: frozenset({
        ConnectionPhase.AWAITING_PAIRING,  # Renovação do código de pareamento
        ConnectionPhase.CONNECTED,
        ConnectionPhase.DISCONNECTED,
        ConnectionPhase.ERROR,
    }),

    # CONNECTED: só sai por desconexão (logout/queda) ou erro
    ConnectionPhase.CONNECTED: frozenset({
        ConnectionPhase.DISCONNECTED,
        ConnectionPhase.ERROR,
    }),

    # ERROR: nova tentativa pode levar a qualquer fase
    ConnectionPhase.ERROR: frozenset({
        ConnectionPhase.ERROR,  # Falha repetida atualiza o detalhe
        ConnectionPhase.AWAITING_PAIRING,
        ConnectionPhase.CONNECTED,
        ConnectionPhase.DISCONNECTED,
    }),
}

# Fases que aceitam transição reflexiva
REFLEXIVE_PHASES: frozenset[ConnectionPhase] = frozenset(
    phase for phase, targets in VALID_TRANSITIONS.items() if phase in targets
)


def get_valid_targets(phase: ConnectionPhase) -> frozenset[ConnectionPhase]:
    """
    Retorna as fases de destino válidas para uma fase de origem.

    Args:
        phase: Fase de origem

    Returns:
        Conjunto de fases de destino permitidas
    """
    return VALID_TRANSITIONS.get(phase, frozenset())


def is_transition_valid(from_phase: ConnectionPhase, to_phase: ConnectionPhase) -> bool:
    """
    Verifica se uma transição é válida segundo as regras definidas.

    Args:
        from_phase: Fase de origem
        to_phase: Fase de destino

    Returns:
        True se a transição é permitida, False caso contrário
    """
    return to_phase in get_valid_targets(from_phase)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica:
    - Todas as fases do enum estão no mapa
    - Toda fase tem ao menos uma saída
    - Nenhuma transição aponta para fase inexistente

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for phase in ConnectionPhase:
        if phase not in VALID_TRANSITIONS:
            errors.append(f"Fase {phase.name} ausente em VALID_TRANSITIONS")
        elif not VALID_TRANSITIONS[phase]:
            errors.append(f"Fase {phase.name} sem transições de saída")

    for from_phase, targets in VALID_TRANSITIONS.items():
        for target in targets:
            if not isinstance(target, ConnectionPhase):
                errors.append(
                    f"Transição {from_phase.name} → {target}: destino inválido"
                )

    return errors
