"""Connectors — adapters de borda para sistemas externos.

Estrutura:
- gateway/: gateway HTTP do protocolo WhatsApp (sessão, envios, eventos)
"""

__all__: list[str] = []
