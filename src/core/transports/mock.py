import asyncio
import logging
import random
from typing import Optional

from core.models.config_data import MockConfig
from core.models.telemetry import (
    CoordinatesUpdate,
    RobotStatusUpdate,
    SensorReadingUpdate,
    StatisticsUpdate,
)
from core.telemetry_cache import TelemetryCache
from core.transports.base import Transport, TransportState

logger = logging.getLogger(__name__)

BATTERY_FLOOR = 20


class MockTransport(Transport):
    """
    Emulated robot. Always reachable; once connected, a background task drifts
    the cached telemetry the way a slowly working field robot would.
    """

    transport_type = "mock"

    def __init__(self, cache: TelemetryCache, config: Optional[MockConfig] = None):
        super().__init__(cache)
        self.config = config or MockConfig()
        self.sent_messages: list[dict] = []
        self._task: Optional[asyncio.Task] = None

    async def connect(self) -> None:
        self._set_state(TransportState.CONNECTED)
        if self.config.simulate and self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._loop())
            logger.info(f"Mock simulator started (tick {self.config.tick_interval}s)")

    async def disconnect(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Mock simulator stopped")
        self._set_state(TransportState.DISCONNECTED)

    async def _send(self, message: dict) -> None:
        self.sent_messages.append(message)
        logger.info(f"[mock] control message: {message}")

    async def _loop(self):
        while True:
            await asyncio.sleep(self.config.tick_interval)
            self.tick()

    def tick(self):
        """Advance the simulation by one step."""
        robot = self.cache.robot_status()
        battery = robot.battery
        if battery > BATTERY_FLOOR:
            battery = max(BATTERY_FLOOR, battery - random.uniform(0, 0.05))
        self.cache.merge_robot_status(RobotStatusUpdate(
            battery=battery,
            speed=random.uniform(0, 2),
            temperature=random.uniform(25, 31),
            coordinates=CoordinatesUpdate(
                lat=max(-90.0, min(90.0, robot.coordinates.lat + random.uniform(-0.005, 0.005))),
                lon=max(-180.0, min(180.0, robot.coordinates.lon + random.uniform(-0.005, 0.005))),
            ),
        ))

        self.cache.merge_sensor_reading(SensorReadingUpdate(
            soil_humidity=random.uniform(60, 70),
            soil_temp=random.uniform(20, 25),
            light=random.uniform(7000, 9000),
            air_humidity=random.uniform(50, 60),
        ))

        stats = self.cache.statistics()
        completed = min(stats.total_area, stats.completed_area + random.uniform(0, 0.1))
        self.cache.merge_statistics(StatisticsUpdate(completed_area=completed))
