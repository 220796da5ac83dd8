"""Entrypoint da aplicação conecta-wa.

Este módulo é o ponto de entrada principal do serviço.
Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 3000

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 3000
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from api.routes import create_api_router
from app.bootstrap import initialize_app, validate_runtime_settings
from app.bootstrap.dependencies import create_session_context
from app.observability import get_correlation_id, reset_correlation_id, set_correlation_id
from app.observability.correlation import CORRELATION_ID_HEADER
from config.logging import get_logger
from config.settings import get_base_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from fastapi import Response

    from app.sessions.context import WhatsAppSessionContext

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Cria o contexto da sessão (se não injetado) e inicia o Event Bridge

    Shutdown:
    - Para o Event Bridge, aguarda envios pendentes e fecha o cliente
    """
    service_name = get_base_settings().service_name
    logger.info("app_starting", extra={"service_name": service_name})
    validate_runtime_settings()

    context: WhatsAppSessionContext | None = getattr(app.state, "session_context", None)
    if context is None:
        context = create_session_context()
        app.state.session_context = context
    await context.start()

    yield

    logger.info("app_shutting_down", extra={"service_name": service_name})
    await context.close()


async def correlation_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Propaga `x-correlation-id` (ou gera um) para logs e resposta."""
    token = set_correlation_id(request.headers.get(CORRELATION_ID_HEADER))
    try:
        response = await call_next(request)
        response.headers[CORRELATION_ID_HEADER] = get_correlation_id()
        return response
    finally:
        reset_correlation_id(token)


def create_app(context: WhatsAppSessionContext | None = None) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Args:
        context: Contexto da sessão já montado (testes). Se None, o
            lifespan cria um sobre o gateway HTTP.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="conecta-wa",
        description="API REST sobre o protocolo WhatsApp: sessão, mensagens e áudio",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    fastapi_app.state.session_context = context

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", CORRELATION_ID_HEADER],
    )
    fastapi_app.middleware("http")(correlation_id_middleware)

    register_exception_handlers(fastapi_app)
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"injected_context": context is not None})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    base = get_base_settings()
    logger.info("Starting conecta-wa in development mode")
    uvicorn.run(
        "app.app:app",
        host=base.host,
        port=base.port,
        reload=base.debug,
    )


if __name__ == "__main__":
    main()
