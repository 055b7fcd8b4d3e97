import asyncio
import json
import logging
from typing import Optional

import serial

from core.models.config_data import SerialConfig
from core.telemetry_cache import TelemetryCache
from core.transports.base import Transport, TransportError, TransportState

logger = logging.getLogger(__name__)


class SerialTransport(Transport):
    """
    Line-delimited JSON over a serial link.

    Each inbound line is a telemetry envelope ({robot, sensors, tasks, statistics}).
    The port is closed and reopened after `reconnect_delay` on any I/O error;
    connection changes are logged once per transition.
    """

    transport_type = "serial"

    def __init__(self, cache: TelemetryCache, config: SerialConfig):
        super().__init__(cache)
        self.config = config
        self._serial: Optional[serial.SerialBase] = None
        self._task: Optional[asyncio.Task] = None

    async def connect(self) -> None:
        if self._task is None:
            self._set_state(TransportState.CONNECTING)
            self._task = asyncio.get_running_loop().create_task(self._read_loop())

    async def disconnect(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self._close()
        self._set_state(TransportState.DISCONNECTED)

    def _close(self):
        if self._serial is not None:
            try:
                self._serial.close()
            except (serial.SerialException, OSError) as e:
                logger.debug(f"[Serial] error closing {self.config.port}: {e}")
            self._serial = None

    async def _read_loop(self):
        port, baud = self.config.port, self.config.baud
        open_failure_logged = False
        while True:
            try:
                if self._serial is None:
                    self._set_state(TransportState.CONNECTING)
                    self._serial = serial.serial_for_url(port, baud, timeout=0.1)
                    logger.info(f"[Serial] opened {port} @ {baud} baud")
                    open_failure_logged = False
                    self._set_state(TransportState.CONNECTED)
                if self._serial.in_waiting > 0:
                    line = self._serial.readline().decode('utf-8', errors='replace').strip()
                    if line:
                        self.on_telemetry("envelope", line)
                        continue
                await asyncio.sleep(0.01)
            except (serial.SerialException, OSError) as e:
                if self.state == TransportState.CONNECTED:
                    logger.warning(f"[Serial] lost {port}: {e}")
                elif not open_failure_logged:
                    logger.warning(f"[Serial] cannot open {port}: {e}")
                    open_failure_logged = True
                self._close()
                self._set_state(TransportState.DISCONNECTED)
                await asyncio.sleep(self.config.reconnect_delay)

    async def _send(self, message: dict) -> None:
        if self._serial is None:
            raise TransportError(f"serial port {self.config.port} is not open")
        try:
            self._serial.write((json.dumps(message, ensure_ascii=False) + "\n").encode('utf-8'))
        except (serial.SerialException, OSError) as e:
            raise TransportError(str(e)) from e
