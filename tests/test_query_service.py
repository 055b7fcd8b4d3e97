"""Tests for QueryService read/refresh behaviour."""
import pytest

from core.models.config_data import MockConfig
from core.models.telemetry import TaskCreate
from core.services.query_service import QueryService
from core.telemetry_cache import TelemetryCache
from core.transports.base import TransportError
from core.transports.mock import MockTransport


class RefreshingTransport(MockTransport):
    """Mock transport whose refresh can be told to fail."""

    def __init__(self, cache, fail_with=None):
        super().__init__(cache, MockConfig(simulate=False))
        self.fail_with = fail_with
        self.refreshed = []

    async def refresh(self, category):
        self.refreshed.append(category)
        if self.fail_with is not None:
            raise self.fail_with
        return self.on_telemetry("status", {"battery": 10}) if category == "status" else False


class TestQueryService:

    @pytest.mark.asyncio
    async def test_reads_refresh_first(self):
        cache = TelemetryCache.with_demo_data()
        transport = RefreshingTransport(cache)
        service = QueryService(cache, transport)

        status = await service.get_robot_status()
        await service.get_sensor_reading()
        await service.get_tasks()
        await service.get_statistics()

        assert status.battery == 10
        assert transport.refreshed == ["status", "sensors", "tasks", "statistics"]

    @pytest.mark.asyncio
    async def test_refresh_failure_serves_stale_value(self):
        cache = TelemetryCache.with_demo_data()
        service = QueryService(cache, RefreshingTransport(cache, fail_with=TransportError("offline")))

        status = await service.get_robot_status()
        assert status.battery == 85

    @pytest.mark.asyncio
    async def test_returned_snapshot_is_detached(self):
        cache = TelemetryCache.with_demo_data()
        service = QueryService(cache, RefreshingTransport(cache))

        reading = await service.get_sensor_reading()
        reading.light = 0
        assert (await service.get_sensor_reading()).light == 8000

    def test_create_task_requires_name(self):
        cache = TelemetryCache()
        service = QueryService(cache, RefreshingTransport(cache))
        with pytest.raises(ValueError, match="name"):
            service.create_task(TaskCreate())
        with pytest.raises(ValueError):
            service.create_task(TaskCreate(name=""))
        assert service.create_task(TaskCreate(name="ok")).id == 1
