from core.models.config_data import DataSourceConfig
from core.telemetry_cache import TelemetryCache
from core.transports.base import Transport


def create_transport(config: DataSourceConfig, cache: TelemetryCache) -> Transport:
    """Build the transport named by `config.type`. Raises ValueError for unknown names."""
    source = config.type
    if source == "mock":
        from core.transports.mock import MockTransport
        return MockTransport(cache, config.mock)
    elif source == "serial":
        from core.transports.serial_transport import SerialTransport
        return SerialTransport(cache, config.serial)
    elif source == "mqtt":
        from core.transports.mqtt_transport import MqttTransport
        return MqttTransport(cache, config.mqtt)
    elif source == "http":
        from core.transports.http_transport import HttpTransport
        return HttpTransport(cache, config.http)
    elif source == "websocket":
        from core.transports.websocket_transport import WebSocketTransport
        return WebSocketTransport(cache, config.websocket)
    elif source == "database":
        from core.transports.database_transport import DatabaseTransport
        return DatabaseTransport(cache, config.database)
    raise ValueError(f"Unknown data source type '{source}'")
