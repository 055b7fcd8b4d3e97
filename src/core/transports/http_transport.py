import logging
from typing import Optional

import httpx

from core.models.config_data import HttpConfig
from core.telemetry_cache import TelemetryCache
from core.transports.base import Transport, TransportError, TransportState

logger = logging.getLogger(__name__)

READ_CATEGORIES = ("status", "sensors", "tasks", "statistics")


class HttpTransport(Transport):
    """
    Polls the robot's own REST endpoints.

    Reads fetch fresh data on every call and fall back to the cache when the
    robot does not answer. There is no retry; the next read simply tries again.
    """

    transport_type = "http"

    def __init__(self, cache: TelemetryCache, config: HttpConfig, client: Optional[httpx.AsyncClient] = None):
        super().__init__(cache)
        self.config = config
        self._client = client
        self._owns_client = client is None

    async def connect(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.config.base_url, timeout=self.config.timeout)
            self._owns_client = True
        # No handshake: the link is considered up until a request proves otherwise
        self._set_state(TransportState.CONNECTED)

    async def disconnect(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
        self._set_state(TransportState.DISCONNECTED)

    async def refresh(self, category: str) -> bool:
        if category not in READ_CATEGORIES or self._client is None:
            return False
        endpoint = self.config.endpoints[category]
        try:
            response = await self._client.get(endpoint)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"[http] GET {endpoint} failed: {e}")
            return False

        if not isinstance(body, dict) or not body.get("success") or body.get("data") is None:
            logger.error(f"[http] unexpected response from {endpoint}: {body}")
            return False
        return self.on_telemetry(category, body["data"])

    async def _send(self, message: dict) -> None:
        if self._client is None:
            raise TransportError("HTTP client not started")
        kind = message["type"]
        endpoint = self.config.endpoints["control"]
        try:
            response = await self._client.post(endpoint, json={kind: message[kind]})
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(str(e)) from e
