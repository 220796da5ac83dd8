"""Conector do gateway WhatsApp - adapter de borda para o processo do protocolo.

Este módulo é o único ponto de IO com o gateway.
Responsabilidades:
- HTTP client (sessão, envios, consulta de número, mídia)
- Erros da API do gateway
- Webhook de eventos (assinatura, parsing)
"""

from .events import GatewayEventError, GatewayEventType, parse_gateway_event
from .gateway_errors import GatewayApiError, is_permanent_error, parse_gateway_error
from .http_client import GatewayMessagingClient, create_gateway_client
from .signature import SignatureResult, compute_signature, verify_gateway_signature

__all__ = [
    "GatewayApiError",
    "GatewayEventError",
    "GatewayEventType",
    "GatewayMessagingClient",
    "SignatureResult",
    "compute_signature",
    "create_gateway_client",
    "is_permanent_error",
    "parse_gateway_error",
    "parse_gateway_event",
    "verify_gateway_signature",
]
