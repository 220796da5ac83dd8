"""Rotas HTTP da API — adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (auth, sessão, mensagens, webhook do gateway, health)
- Validação inicial de request (headers, corpo)
- Delegação para o núcleo de sessão (app.sessions / app.use_cases)
- Respostas HTTP apropriadas

Estrutura:
- routes/auth/: login e emissão de token
- routes/session/: ciclo de vida da sessão e mensagens recebidas
- routes/message/: envios outbound e consulta de número
- routes/gateway/: eventos do gateway do protocolo
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
