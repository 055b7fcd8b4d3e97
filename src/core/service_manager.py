# External libs
import logging
from dataclasses import replace
from typing import Optional

# Internal libs
from core.config_loader import config_loader
from core.models.config_data import DataSourceConfig
from core.services.command_dispatcher import CommandDispatcher
from core.services.query_service import QueryService
from core.telemetry_cache import TelemetryCache
from core.transports.base import Transport
from core.transports.factory import create_transport

logger = logging.getLogger(__name__)


class ServiceManager:
    """
    Owns the telemetry cache, the active transport and the services built on them.
    Everything is created in `configure` and torn down in `stop_services`.
    """

    def __init__(self):
        self.running = False
        self.config: Optional[DataSourceConfig] = None
        self.cache: Optional[TelemetryCache] = None
        self.transport: Optional[Transport] = None
        self.query_service: Optional[QueryService] = None
        self.command_dispatcher: Optional[CommandDispatcher] = None

    def configure(self, config: DataSourceConfig, cache: Optional[TelemetryCache] = None):
        """Build cache, transport and services for the given data source config."""
        if self.running:
            raise RuntimeError("Cannot reconfigure while services are running")

        if cache is None:
            # Only the emulated robot starts with demo data; live sources start empty
            cache = TelemetryCache.with_demo_data() if config.type == "mock" else TelemetryCache()

        self.transport = create_transport(config, cache)
        self.config = config
        self.cache = cache
        self.query_service = QueryService(cache, self.transport)
        self.command_dispatcher = CommandDispatcher(self.transport)
        logger.info(f"Services configured for '{config.type}' data source")

    async def start_services(self, source_type: Optional[str] = None):
        """Connect the transport if not already started.
        Args:
            source_type: Overrides the configured data source type.
        """
        if self.running:
            return

        if self.transport is None or (source_type and source_type != self.config.type):
            config = self.config or config_loader.get_data_source_config()
            if source_type:
                config = replace(config, type=source_type)
            self.configure(config)

        logger.info("Starting background services...")
        await self.transport.connect()
        self.running = True
        logger.info("Background services started.")

    async def stop_services(self):
        """Stop background services."""
        if not self.running:
            return
        await self.transport.disconnect()
        self.running = False
        logger.info("Background services stopped.")

    def require_running(self):
        if not self.running or self.query_service is None:
            raise RuntimeError("Services not started")


service_manager = ServiceManager()
