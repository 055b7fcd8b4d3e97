import json
import logging
from pathlib import Path
from typing import Optional

from core.models.config_data import (
    DatabaseConfig,
    DataSourceConfig,
    HttpConfig,
    MockConfig,
    MqttConfig,
    MqttTopics,
    SerialConfig,
    WebSocketConfig,
    default_http_endpoints,
)

logger = logging.getLogger(__name__)

DATA_SOURCE_TYPES = ("mock", "serial", "mqtt", "http", "websocket", "database")


class ConfigLoader:
    """Loads and manages the data source configuration from a JSON file."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigLoader, cls).__new__(cls)
            cls._instance._config = DataSourceConfig()
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._config = DataSourceConfig()
            self.load_config()
            self._initialized = True

    @staticmethod
    def get_config_path() -> Path:
        """Get the path to the robot_config.json file."""
        # Config file lives in the project root/config directory
        return Path(__file__).parent.parent.parent / "config" / "robot_config.json"

    def load_config(self, config_path: Optional[Path] = None):
        """Load configuration from JSON file, keeping defaults on any error."""
        config_path = config_path or self.get_config_path()

        self._config = DataSourceConfig()

        if not config_path.exists():
            logger.error(f"Configuration file not found: {config_path}")
            return

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                json_data = json.load(f)
            self._config = self._parse(json_data.get("data_source", {}))
            logger.info(f"Configuration loaded from {config_path}")

        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse configuration file: {e}")
            self._config = DataSourceConfig()

        except (TypeError, ValueError, AttributeError) as e:
            logger.error(f"Invalid configuration in {config_path}: {e}")
            self._config = DataSourceConfig()

    @staticmethod
    def _parse(data: dict) -> DataSourceConfig:
        source_type = data.get("type", "mock")
        if source_type not in DATA_SOURCE_TYPES:
            raise ValueError(f"Unknown data source type '{source_type}'")

        mqtt_cfg = dict(data.get("mqtt", {}))
        topics = MqttTopics(**mqtt_cfg.pop("topics", {}))

        http_cfg = dict(data.get("http", {}))
        endpoints = default_http_endpoints()
        endpoints.update(http_cfg.pop("endpoints", {}))

        return DataSourceConfig(
            type=source_type,
            mock=MockConfig(**data.get("mock", {})),
            serial=SerialConfig(**data.get("serial", {})),
            mqtt=MqttConfig(topics=topics, **mqtt_cfg),
            http=HttpConfig(endpoints=endpoints, **http_cfg),
            websocket=WebSocketConfig(**data.get("websocket", {})),
            database=DatabaseConfig(**data.get("database", {})),
        )

    def get_data_source_type(self) -> str:
        """Get the configured transport name."""
        return self._config.type

    def get_data_source_config(self) -> DataSourceConfig:
        """Get the full data source configuration."""
        return self._config

    def reload_config(self):
        """Reload configuration from file."""
        self.load_config()
        logger.info("Configuration reloaded")


# Global singleton instance
config_loader = ConfigLoader()
