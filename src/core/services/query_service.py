import logging
from typing import List

from core.models.telemetry import (
    RobotStatus,
    RobotStatusUpdate,
    SensorReading,
    SensorReadingUpdate,
    Statistics,
    StatisticsUpdate,
    Task,
    TaskCreate,
    TaskUpdate,
)
from core.telemetry_cache import TelemetryCache
from core.transports.base import Transport, TransportError

logger = logging.getLogger(__name__)


class QueryService:
    """
    Read and write access to telemetry for the API layer.

    Reads ask the transport for fresh data first; whatever happens upstream,
    the caller gets the cache's current value.
    """

    def __init__(self, cache: TelemetryCache, transport: Transport):
        self.cache = cache
        self.transport = transport

    async def _refresh(self, category: str):
        try:
            await self.transport.refresh(category)
        except TransportError as e:
            logger.warning(f"Refresh of {category} failed, serving cached data: {e}")

    async def get_robot_status(self) -> RobotStatus:
        await self._refresh("status")
        return self.cache.robot_status()

    async def get_sensor_reading(self) -> SensorReading:
        await self._refresh("sensors")
        return self.cache.sensor_reading()

    async def get_statistics(self) -> Statistics:
        await self._refresh("statistics")
        return self.cache.statistics()

    async def get_tasks(self) -> List[Task]:
        await self._refresh("tasks")
        return self.cache.tasks()

    def update_robot_status(self, update: RobotStatusUpdate) -> RobotStatus:
        return self.cache.merge_robot_status(update)

    def update_sensor_reading(self, update: SensorReadingUpdate) -> SensorReading:
        return self.cache.merge_sensor_reading(update)

    def update_statistics(self, update: StatisticsUpdate) -> Statistics:
        return self.cache.merge_statistics(update)

    def create_task(self, data: TaskCreate) -> Task:
        if not data.name:
            raise ValueError("缺少必填字段: name")
        task = self.cache.create_task(data)
        logger.info(f"Task #{task.id} created: {task.name}")
        return task

    def update_task(self, task_id: int, data: TaskUpdate) -> Task:
        return self.cache.update_task(task_id, data)

    def delete_task(self, task_id: int) -> None:
        self.cache.delete_task(task_id)
        logger.info(f"Task #{task_id} deleted")
