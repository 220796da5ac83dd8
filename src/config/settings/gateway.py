"""Settings do gateway de protocolo WhatsApp.

O gateway é o processo auxiliar que encapsula a biblioteca do protocolo
(pareamento, criptografia, sockets). Este serviço fala com ele via HTTP
e recebe seus eventos via webhook assinado.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

# Sufixo padrão de endereços de usuários na rede WhatsApp
DEFAULT_ADDRESS_SUFFIX: str = "@s.whatsapp.net"


@dataclass(frozen=True)
class GatewaySettings:
    """Configurações do gateway.

    Attributes:
        base_url: URL base da API HTTP do gateway
        api_key: Token enviado ao gateway como Bearer
        webhook_secret: Secret HMAC dos eventos recebidos do gateway
        request_timeout_seconds: Timeout para requisições HTTP
        max_retries: Máximo de tentativas em erros transitórios
        media_max_size_bytes: Tamanho máximo de áudio aceito para envio
        address_suffix: Sufixo anexado a destinatários sem domínio
    """

    base_url: str = "http://localhost:8081"
    api_key: str = field(default="", repr=False)
    webhook_secret: str = field(default="", repr=False)

    request_timeout_seconds: float = 30.0
    max_retries: int = 2

    media_max_size_bytes: int = 16 * 1024 * 1024  # 16MB
    address_suffix: str = DEFAULT_ADDRESS_SUFFIX

    def validate(self) -> list[str]:
        """Valida configurações mínimas do gateway.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.base_url:
            errors.append("GATEWAY_BASE_URL não configurado")
        elif not self.base_url.startswith(("http://", "https://")):
            errors.append("GATEWAY_BASE_URL deve começar com http:// ou https://")

        if not self.webhook_secret:
            errors.append("GATEWAY_WEBHOOK_SECRET não configurado")

        if self.request_timeout_seconds <= 0:
            errors.append("GATEWAY_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 0:
            errors.append("GATEWAY_MAX_RETRIES deve ser >= 0")

        if not self.address_suffix.startswith("@"):
            errors.append("GATEWAY_ADDRESS_SUFFIX deve começar com '@'")

        return errors


def _load_from_env() -> GatewaySettings:
    """Carrega GatewaySettings a partir de variáveis de ambiente."""
    return GatewaySettings(
        base_url=os.getenv("GATEWAY_BASE_URL", "http://localhost:8081"),
        api_key=os.getenv("GATEWAY_API_KEY", ""),
        webhook_secret=os.getenv("GATEWAY_WEBHOOK_SECRET", ""),
        request_timeout_seconds=float(
            os.getenv("GATEWAY_REQUEST_TIMEOUT_SECONDS", "30")
        ),
        max_retries=int(os.getenv("GATEWAY_MAX_RETRIES", "2")),
        media_max_size_bytes=int(
            os.getenv("GATEWAY_MEDIA_MAX_SIZE_BYTES", str(16 * 1024 * 1024))
        ),
        address_suffix=os.getenv("GATEWAY_ADDRESS_SUFFIX", DEFAULT_ADDRESS_SUFFIX),
    )


@lru_cache(maxsize=1)
def get_gateway_settings() -> GatewaySettings:
    """Retorna instância cacheada de GatewaySettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
