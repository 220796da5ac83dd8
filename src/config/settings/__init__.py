"""Agregador de settings do conecta-wa.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

from config.settings.auth import (
    AuthSettings,
    get_auth_settings,
)
from config.settings.base import (
    BaseSettings,
    Environment,
    SessionSettings,
    get_base_settings,
    get_session_settings,
)
from config.settings.gateway import (
    DEFAULT_ADDRESS_SUFFIX,
    GatewaySettings,
    get_gateway_settings,
)

__all__ = [
    "DEFAULT_ADDRESS_SUFFIX",
    "AuthSettings",
    "BaseSettings",
    "Environment",
    "GatewaySettings",
    "SessionSettings",
    "get_auth_settings",
    "get_base_settings",
    "get_gateway_settings",
    "get_session_settings",
]
