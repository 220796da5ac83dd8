"""
Fases canônicas da conexão com a rede de mensagens.

Este módulo define as fases que a sessão única do serviço pode assumir.
A fase é alterada apenas por eventos do cliente de protocolo (via
EventBridge) ou por comandos explícitos (logout, falha de inicialização).
"""

from enum import StrEnum


class ConnectionPhase(StrEnum):
    """
    Fases da conexão com a rede de mensagens.

    Valores seguem o contrato HTTP legado (ex: "waiting_qr").

    Fases:
        - DISCONNECTED: Sem conexão ativa (estado inicial)
        - AWAITING_PAIRING: Aguardando leitura do código de pareamento
        - CONNECTED: Conexão ativa, envios permitidos
        - ERROR: Falha de conexão ou inicialização (detalhe disponível)
    """

    DISCONNECTED = "disconnected"
    AWAITING_PAIRING = "waiting_qr"
    CONNECTED = "connected"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


# Fases em que o código de pareamento pode existir
PAIRING_PHASES: frozenset[ConnectionPhase] = frozenset({
    ConnectionPhase.AWAITING_PAIRING,
})

# Fase inicial padrão do processo
DEFAULT_INITIAL_PHASE: ConnectionPhase = ConnectionPhase.DISCONNECTED


def parse_phase(value: str | None) -> ConnectionPhase | None:
    """
    Converte o valor de wire (ex: "waiting_qr") em ConnectionPhase.

    Args:
        value: Valor recebido de fora (gateway, configuração)

    Returns:
        ConnectionPhase correspondente ou None se desconhecido
    """
    if not value:
        return None
    try:
        return ConnectionPhase(value.strip().lower())
    except ValueError:
        return None
