import json

import pytest
from core.config_loader import ConfigLoader, config_loader
from core.models.config_data import DataSourceConfig


class TestConfigLoader:
    """Test configuration loading and access."""

    @pytest.fixture(autouse=True)
    def restore_config(self):
        yield
        config_loader.reload_config()

    def test_singleton(self):
        assert ConfigLoader() is config_loader

    def test_config_loads(self):
        """Test that the bundled config loads successfully."""
        config = config_loader.get_data_source_config()
        assert isinstance(config, DataSourceConfig)
        assert config_loader.get_data_source_type() == "mock"
        assert config.mqtt.topics.control == "robot/control"
        assert config.http.endpoints["status"] == "/api/robot/status"

    def test_partial_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "robot_config.json"
        path.write_text(json.dumps({
            "data_source": {
                "type": "mqtt",
                "mqtt": {"host": "broker.local", "topics": {"status": "farm/status"}},
                "http": {"endpoints": {"control": "/control"}},
            }
        }))
        config_loader.load_config(path)
        config = config_loader.get_data_source_config()
        assert config.type == "mqtt"
        assert config.mqtt.host == "broker.local"
        assert config.mqtt.port == 1883
        assert config.mqtt.topics.status == "farm/status"
        assert config.mqtt.topics.sensors == "robot/sensors"
        assert config.http.endpoints["control"] == "/control"
        assert config.http.endpoints["tasks"] == "/api/tasks"
        assert config.serial.port == "/dev/ttyUSB0"

    def test_missing_file_uses_defaults(self, tmp_path):
        config_loader.load_config(tmp_path / "absent.json")
        assert config_loader.get_data_source_config() == DataSourceConfig()

    def test_broken_json_uses_defaults(self, tmp_path):
        path = tmp_path / "robot_config.json"
        path.write_text("{not json")
        config_loader.load_config(path)
        assert config_loader.get_data_source_type() == "mock"

    def test_unknown_type_uses_defaults(self, tmp_path):
        path = tmp_path / "robot_config.json"
        path.write_text(json.dumps({"data_source": {"type": "fax"}}))
        config_loader.load_config(path)
        assert config_loader.get_data_source_type() == "mock"

    def test_unknown_key_uses_defaults(self, tmp_path):
        path = tmp_path / "robot_config.json"
        path.write_text(json.dumps({"data_source": {"type": "serial", "serial": {"parity": "N"}}}))
        config_loader.load_config(path)
        assert config_loader.get_data_source_config() == DataSourceConfig()
