"""Núcleo de sessão WhatsApp.

Componentes:
    - state_holder: fase da conexão e artefato de pareamento
    - event_bridge: aplica eventos do protocolo ao estado
    - service: inicialização, status, logout e busca de áudio
    - context: agrupa os componentes para a aplicação
"""

from app.sessions.context import WhatsAppSessionContext
from app.sessions.event_bridge import EventBridge
from app.sessions.service import SessionService
from app.sessions.state_holder import ConnectionStateHolder

__all__ = [
    "ConnectionStateHolder",
    "EventBridge",
    "SessionService",
    "WhatsAppSessionContext",
]
