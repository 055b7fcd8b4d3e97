"""
Transport interface shared by every data source.

A transport owns the link to the robot: it pushes inbound telemetry into the
TelemetryCache and carries control messages back out.
"""
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import TypeAdapter

from core.models.telemetry import (
    RobotStatusUpdate,
    SensorReadingUpdate,
    StatisticsReport,
    Task,
    TelemetryEnvelope,
)
from core.telemetry_cache import TelemetryCache

logger = logging.getLogger(__name__)

_task_list = TypeAdapter(List[Task])


class TransportState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class CommandKind(str, Enum):
    COMMAND = "command"
    ACTION = "action"


class TransportError(Exception):
    """Raised by concrete transports when an upstream operation fails."""


@dataclass
class CommandAck:
    executed: bool
    message: str = ""


@dataclass
class ConnectionState:
    transport_type: str
    connected: bool
    state: TransportState
    last_update_timestamp: Optional[float]


FAILURE_PREFIX = {
    CommandKind.COMMAND: "指令发送失败",
    CommandKind.ACTION: "操作发送失败",
}


class Transport(ABC):
    """Base class for all data sources."""

    transport_type = "base"

    def __init__(self, cache: TelemetryCache):
        self.cache = cache
        self.state = TransportState.DISCONNECTED

    @property
    def connected(self) -> bool:
        return self.state == TransportState.CONNECTED

    def _set_state(self, state: TransportState):
        if state == self.state:
            return
        previous = self.state
        self.state = state
        if state == TransportState.CONNECTED:
            logger.info("[%s] connected", self.transport_type)
        elif previous == TransportState.CONNECTED:
            logger.warning("[%s] disconnected", self.transport_type)

    @abstractmethod
    async def connect(self) -> None:
        """Establish the link. Failures are logged, never raised."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Release sockets, tasks and threads. Safe to call twice."""

    @abstractmethod
    async def _send(self, message: dict) -> None:
        """Transmit one control message or raise TransportError."""

    async def refresh(self, category: str) -> bool:
        """Pull fresh data for a category into the cache. Push transports do nothing."""
        return False

    async def send_command(self, kind: CommandKind, value: str) -> CommandAck:
        kind = CommandKind(kind)
        prefix = FAILURE_PREFIX[kind]
        if not self.connected:
            return CommandAck(False, f"{prefix}: {self.transport_type} transport not connected")

        message = {"type": kind.value, kind.value: value}
        try:
            await self._send(message)
        except TransportError as e:
            logger.error("[%s] failed to send %s: %s", self.transport_type, message, e)
            return CommandAck(False, f"{prefix}: {e}")
        return CommandAck(True)

    def on_telemetry(self, channel: str, payload: Union[bytes, str, Any]) -> bool:
        """
        Decode one inbound payload and merge it into the cache.

        Returns False when the payload was dropped.
        """
        try:
            if isinstance(payload, (bytes, bytearray)):
                payload = payload.decode("utf-8")
            if isinstance(payload, str):
                payload = json.loads(payload)

            if channel == "status":
                self.cache.merge_robot_status(RobotStatusUpdate.model_validate(payload))
            elif channel == "sensors":
                self.cache.merge_sensor_reading(SensorReadingUpdate.model_validate(payload))
            elif channel == "statistics":
                self.cache.merge_statistics(StatisticsReport.model_validate(payload))
            elif channel == "tasks":
                self.cache.replace_tasks(_task_list.validate_python(payload))
            elif channel == "envelope":
                self.cache.apply_envelope(TelemetryEnvelope.model_validate(payload))
            else:
                logger.warning("[%s] payload on unknown channel '%s' ignored", self.transport_type, channel)
                return False
        except ValueError as e:
            # json.JSONDecodeError, UnicodeDecodeError and pydantic ValidationError all land here
            logger.error("[%s] dropped malformed %s payload: %s", self.transport_type, channel, e)
            return False
        return True

    def get_connection_state(self) -> ConnectionState:
        return ConnectionState(
            transport_type=self.transport_type,
            connected=self.connected,
            state=self.state,
            last_update_timestamp=self.cache.last_update,
        )
