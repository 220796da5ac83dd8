"""Snapshot imutável do estado da conexão com a rede WhatsApp."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from fsm.states import DEFAULT_INITIAL_PHASE, ConnectionPhase


@dataclass(frozen=True, slots=True)
class ConnectionState:
    """Estado atual da sessão única do processo.

    Atributos:
        phase: Fase do ciclo de vida da conexão
        pairing_artifact: Payload do QR (apenas em AWAITING_PAIRING)
        error_detail: Descrição legível do último erro (apenas em ERROR)
        updated_at: Momento da última transição aplicada
        version: Contador monotônico de transições aplicadas
    """

    phase: ConnectionPhase = DEFAULT_INITIAL_PHASE
    pairing_artifact: str | None = None
    error_detail: str | None = None
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    version: int = 0

    def __post_init__(self) -> None:
        if self.pairing_artifact is not None and self.phase != ConnectionPhase.AWAITING_PAIRING:
            raise ValueError("pairing_artifact só é válido em AWAITING_PAIRING")
        if self.error_detail is not None and self.phase != ConnectionPhase.ERROR:
            raise ValueError("error_detail só é válido em ERROR")

    @property
    def connected(self) -> bool:
        return self.phase == ConnectionPhase.CONNECTED

