"""Settings de autenticação da API.

Credenciais do operador e parâmetros de emissão dos tokens JWT.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

SUPPORTED_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})


@dataclass(frozen=True)
class AuthSettings:
    """Configurações de autenticação.

    Attributes:
        username: Usuário aceito em /auth/login
        password: Senha aceita em /auth/login
        token_secret: Segredo compartilhado de assinatura dos tokens
        token_ttl_seconds: Validade do token emitido
        algorithm: Algoritmo HMAC de assinatura
    """

    username: str = ""
    password: str = field(default="", repr=False)
    token_secret: str = field(default="", repr=False)
    token_ttl_seconds: int = 86400  # 1 dia
    algorithm: str = "HS256"

    def validate(self) -> list[str]:
        """Valida configurações de autenticação.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.token_secret:
            errors.append("AUTH_TOKEN_SECRET não configurado")

        if not self.username or not self.password:
            errors.append("AUTH_USERNAME/AUTH_PASSWORD não configurados")

        if self.token_ttl_seconds <= 0:
            errors.append("AUTH_TOKEN_TTL_SECONDS deve ser > 0")

        if self.algorithm not in SUPPORTED_ALGORITHMS:
            errors.append(f"AUTH_TOKEN_ALGORITHM inválido: {self.algorithm}")

        return errors


def _load_from_env() -> AuthSettings:
    """Carrega AuthSettings a partir de variáveis de ambiente."""
    return AuthSettings(
        username=os.getenv("AUTH_USERNAME", ""),
        password=os.getenv("AUTH_PASSWORD", ""),
        token_secret=os.getenv("AUTH_TOKEN_SECRET", ""),
        token_ttl_seconds=int(os.getenv("AUTH_TOKEN_TTL_SECONDS", "86400")),
        algorithm=os.getenv("AUTH_TOKEN_ALGORITHM", "HS256").upper(),
    )


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Retorna instância cacheada de AuthSettings."""
    return _load_from_env()
