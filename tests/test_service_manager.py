"""Tests for ServiceManager lifecycle."""
import pytest

from core.models.config_data import DataSourceConfig, MockConfig
from core.service_manager import ServiceManager
from core.transports.http_transport import HttpTransport
from core.transports.mock import MockTransport


class TestServiceManager:

    @pytest.mark.asyncio
    async def test_start_stop(self):
        manager = ServiceManager()
        manager.configure(DataSourceConfig(mock=MockConfig(simulate=False)))
        await manager.start_services()
        await manager.start_services()
        assert manager.running
        assert isinstance(manager.transport, MockTransport)
        assert manager.transport.connected
        assert len(manager.cache.tasks()) == 3

        await manager.stop_services()
        await manager.stop_services()
        assert not manager.running
        assert not manager.transport.connected

    @pytest.mark.asyncio
    async def test_source_override(self):
        manager = ServiceManager()
        manager.configure(DataSourceConfig(mock=MockConfig(simulate=False)))
        await manager.start_services(source_type="http")
        try:
            assert isinstance(manager.transport, HttpTransport)
            # Live sources start without demo data
            assert manager.cache.tasks() == []
        finally:
            await manager.stop_services()

    @pytest.mark.asyncio
    async def test_unknown_source(self):
        manager = ServiceManager()
        with pytest.raises(ValueError):
            await manager.start_services(source_type="smoke-signals")
        assert not manager.running

    @pytest.mark.asyncio
    async def test_cannot_reconfigure_while_running(self):
        manager = ServiceManager()
        manager.configure(DataSourceConfig(mock=MockConfig(simulate=False)))
        await manager.start_services()
        with pytest.raises(RuntimeError):
            manager.configure(DataSourceConfig())
        await manager.stop_services()

    def test_require_running(self):
        with pytest.raises(RuntimeError):
            ServiceManager().require_running()
