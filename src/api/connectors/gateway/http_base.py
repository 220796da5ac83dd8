"""Cliente HTTP base para conectores da camada API."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    base_url: str = ""
    timeout_seconds: float = 30.0
    max_retries: int = 2
    backoff_base_seconds: float = 0.5
    backoff_max_seconds: float = 10.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpError(Exception):
    """Erro de requisição HTTP sem dados sensíveis."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable


def _is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


class HttpClient:
    """Cliente HTTP com retries e backoff exponencial.

    Mantém um único `httpx.AsyncClient` (pool de conexões) até `aclose()`.
    Respostas 429/5xx e falhas de conexão são retentadas; esgotadas as
    tentativas, a última resposta é devolvida (status) ou um HttpError é
    levantado (conexão).
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._client = httpx.AsyncClient(
            base_url=self._config.base_url,
            headers=self._config.default_headers,
            timeout=self._config.timeout_seconds,
            verify=self._config.verify_ssl,
            transport=transport,
        )

    async def request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        for attempt in range(self._config.max_retries + 1):
            try:
                response = await self._client.request(method, path, json=json)
            except (httpx.TimeoutException, httpx.TransportError) as exc:
                if attempt >= self._config.max_retries:
                    raise HttpError("http_connection_error", is_retryable=True) from exc
                logger.info(
                    "http_retry_connection_error",
                    extra={"method": method, "path": path, "attempt": attempt + 1},
                )
            else:
                if not _is_retryable_status(response.status_code):
                    return response
                if attempt >= self._config.max_retries:
                    return response
                logger.info(
                    "http_retry_status",
                    extra={
                        "method": method,
                        "path": path,
                        "status_code": response.status_code,
                        "attempt": attempt + 1,
                    },
                )
            await _backoff_sleep(
                attempt,
                self._config.backoff_base_seconds,
                self._config.backoff_max_seconds,
            )
        raise HttpError("http_retry_exhausted", is_retryable=True)

    @contextlib.asynccontextmanager
    async def stream(self, method: str, path: str) -> AsyncIterator[httpx.Response]:
        """Abre resposta em streaming (sem retries)."""
        try:
            async with self._client.stream(method, path) as response:
                yield response
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            raise HttpError("http_connection_error", is_retryable=True) from exc

    async def aclose(self) -> None:
        await self._client.aclose()


async def _backoff_sleep(attempt: int, base: float, max_seconds: float) -> None:
    backoff = min((2**attempt) * base, max_seconds)
    logger.info("http_backoff", extra={"backoff_seconds": backoff})
    await asyncio.sleep(backoff)
