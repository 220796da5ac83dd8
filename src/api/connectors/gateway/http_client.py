"""Cliente HTTP do gateway do protocolo WhatsApp.

Implementa MessagingClientProtocol sobre a API HTTP do gateway:
- Retries com backoff em 429/5xx e falhas de conexão (HttpClient)
- Erros `{"error": {"code", "message"}}` viram MessagingClientError
- Falhas de transporte viram GatewayUnavailableError
- Logging estruturado sem números de telefone nem conteúdo
"""

from __future__ import annotations

import base64
import json
import logging
from typing import TYPE_CHECKING, Any

from api.connectors.gateway.gateway_errors import is_media_not_found, parse_gateway_error
from api.connectors.gateway.gateway_logging import log_gateway_error, log_success
from api.connectors.gateway.http_base import HttpClient, HttpClientConfig, HttpError
from app.protocols.messaging_client import (
    ClientStatus,
    MediaNotFoundError,
    MessagingClientError,
    NumberLookup,
    SendReceipt,
)
from fsm.states import ConnectionPhase, parse_phase
from utils.errors import GatewayUnavailableError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import httpx

    from config.settings import GatewaySettings

logger: logging.Logger = logging.getLogger(__name__)

# Caminhos da API do gateway
INITIALIZE_PATH = "/session/initialize"
STATUS_PATH = "/session/status"
LOGOUT_PATH = "/session/logout"
SEND_TEXT_PATH = "/messages/text"
SEND_AUDIO_PATH = "/messages/audio"
CHECK_NUMBER_PATH = "/contacts/check"
MEDIA_PATH = "/media/{message_id}"


class GatewayMessagingClient(HttpClient):
    """Cliente do gateway que encapsula a biblioteca do protocolo."""

    async def initialize(self) -> None:
        await self._call("POST", INITIALIZE_PATH)

    async def get_connection_status(self) -> ClientStatus:
        data = await self._call("GET", STATUS_PATH)
        phase = parse_phase(str(data.get("status") or "")) or ConnectionPhase.DISCONNECTED
        artifact = data.get("qr")
        error = data.get("error")
        return ClientStatus(
            phase=phase,
            pairing_artifact=artifact if isinstance(artifact, str) and artifact else None,
            error=str(error) if error else None,
        )

    async def get_latest_pairing_artifact(self) -> str | None:
        status = await self.get_connection_status()
        return status.pairing_artifact

    async def logout(self) -> None:
        await self._call("POST", LOGOUT_PATH)

    async def send_message(self, to: str, text: str) -> SendReceipt:
        data = await self._call("POST", SEND_TEXT_PATH, {"to": to, "text": text})
        return _parse_receipt(data)

    async def send_audio(self, to: str, audio: bytes, mimetype: str) -> SendReceipt:
        payload = {
            "to": to,
            "mimetype": mimetype,
            "base64": base64.b64encode(audio).decode("ascii"),
        }
        data = await self._call("POST", SEND_AUDIO_PATH, payload)
        return _parse_receipt(data)

    async def check_number(self, address: str) -> NumberLookup:
        data = await self._call("POST", CHECK_NUMBER_PATH, {"address": address})
        return NumberLookup(
            address=str(data.get("address") or address),
            exists=bool(data.get("exists", False)),
        )

    async def get_audio_stream_by_id(self, message_id: str) -> AsyncIterator[bytes]:
        """Stream dos bytes da mídia de uma mensagem.

        Raises:
            MediaNotFoundError: Se o gateway não tiver mais a mídia.
            GatewayUnavailableError: Se o gateway estiver inacessível.
        """
        path = MEDIA_PATH.format(message_id=message_id)
        try:
            async with self.stream("GET", path) as response:
                if response.status_code >= 400:
                    await response.aread()
                    self._raise_for_error(response, "GET", path)
                log_success("GET", path, response.status_code)
                async for chunk in response.aiter_bytes():
                    yield chunk
        except HttpError as exc:
            raise GatewayUnavailableError("gateway indisponível") from exc

    async def _call(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            response = await self.request(method, path, json=payload)
        except HttpError as exc:
            logger.error(
                "gateway_unavailable",
                extra={"method": method, "path": path, "error": str(exc)},
            )
            raise GatewayUnavailableError("gateway indisponível") from exc

        if response.status_code >= 400:
            self._raise_for_error(response, method, path)

        log_success(method, path, response.status_code)
        if not response.content:
            return {}
        try:
            data = response.json()
        except json.JSONDecodeError as exc:
            logger.error("gateway_invalid_json", extra={"method": method, "path": path})
            raise MessagingClientError(
                "Response JSON inválido", status_code=response.status_code
            ) from exc
        return data if isinstance(data, dict) else {}

    def _raise_for_error(self, response: httpx.Response, method: str, path: str) -> None:
        try:
            data: Any = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            data = None
        error = parse_gateway_error(data, response.status_code)
        if error is None:
            return
        log_gateway_error(error, method, path)
        if error.status_code >= 500 or error.status_code == 429:
            raise GatewayUnavailableError(f"gateway error: {error.code}")
        error_cls = MediaNotFoundError if is_media_not_found(error) else MessagingClientError
        raise error_cls(error.message, code=error.code, status_code=error.status_code)


def _parse_receipt(data: dict[str, Any]) -> SendReceipt:
    """Converte a confirmação do gateway.

    Aceita `accepted: bool` ou o formato legado `status: 1`.
    """
    if "accepted" in data:
        accepted = bool(data["accepted"])
    else:
        accepted = data.get("status") == 1
    message_id = data.get("messageId") or data.get("message_id")
    error = data.get("error")
    return SendReceipt(
        accepted=accepted,
        message_id=str(message_id) if message_id else None,
        error=str(error) if error and not accepted else None,
    )


def create_gateway_client(
    settings: GatewaySettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> GatewayMessagingClient:
    """Factory para criar cliente do gateway com config padrão.

    Args:
        settings: GatewaySettings opcional. Se None, carrega do ambiente.
        transport: Transport httpx opcional (testes).

    Returns:
        Cliente configurado.
    """
    # Import local para evitar dependência circular
    from config.settings import get_gateway_settings

    gateway = settings or get_gateway_settings()
    headers = {"Accept": "application/json"}
    if gateway.api_key:
        headers["Authorization"] = f"Bearer {gateway.api_key}"
    config = HttpClientConfig(
        base_url=gateway.base_url,
        timeout_seconds=gateway.request_timeout_seconds,
        max_retries=gateway.max_retries,
        default_headers=headers,
    )
    return GatewayMessagingClient(config=config, transport=transport)
