import asyncio
import json
import logging
from typing import Any, Optional

import websockets
from websockets.exceptions import WebSocketException

from core.models.config_data import WebSocketConfig
from core.telemetry_cache import TelemetryCache
from core.transports.base import Transport, TransportError, TransportState

logger = logging.getLogger(__name__)


class WebSocketTransport(Transport):
    """Receives telemetry envelopes from a WebSocket and sends control messages back on it."""

    transport_type = "websocket"

    def __init__(self, cache: TelemetryCache, config: WebSocketConfig):
        super().__init__(cache)
        self.config = config
        self._ws: Optional[Any] = None
        self._task: Optional[asyncio.Task] = None

    async def connect(self) -> None:
        if self._task is None:
            self._set_state(TransportState.CONNECTING)
            self._task = asyncio.get_running_loop().create_task(self._run())

    async def disconnect(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self._ws = None
        self._set_state(TransportState.DISCONNECTED)

    async def _run(self):
        failure_logged = False
        while True:
            self._set_state(TransportState.CONNECTING)
            try:
                async with websockets.connect(self.config.url, open_timeout=self.config.open_timeout) as ws:
                    self._ws = ws
                    failure_logged = False
                    self._set_state(TransportState.CONNECTED)
                    async for message in ws:
                        self.on_telemetry("envelope", message)
            except (OSError, asyncio.TimeoutError, WebSocketException) as e:
                if not failure_logged:
                    logger.warning(f"WebSocket {self.config.url} unavailable: {e}")
                    failure_logged = True
                else:
                    logger.debug(f"WebSocket {self.config.url} still unavailable: {e}")
            self._ws = None
            self._set_state(TransportState.DISCONNECTED)
            await asyncio.sleep(self.config.reconnect_delay)

    async def _send(self, message: dict) -> None:
        if self._ws is None:
            raise TransportError(f"WebSocket {self.config.url} is not open")
        try:
            await self._ws.send(json.dumps(message, ensure_ascii=False))
        except WebSocketException as e:
            raise TransportError(str(e)) from e
