from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class SerialConfig:
    port: str = "/dev/ttyUSB0"
    baud: int = 9600
    reconnect_delay: float = 1.0


@dataclass
class MqttTopics:
    status: str = "robot/status"
    sensors: str = "robot/sensors"
    tasks: str = "robot/tasks"
    statistics: str = "robot/statistics"
    control: str = "robot/control"


@dataclass
class MqttConfig:
    host: str = "localhost"
    port: int = 1883
    client_id: str = "robot-backend-server"
    username: Optional[str] = None
    password: Optional[str] = None
    keepalive: int = 60
    reconnect_period: float = 5.0
    topics: MqttTopics = field(default_factory=MqttTopics)


def default_http_endpoints() -> Dict[str, str]:
    return {
        "status": "/api/robot/status",
        "sensors": "/api/sensors",
        "tasks": "/api/tasks",
        "statistics": "/api/statistics",
        "control": "/api/control",
    }


@dataclass
class HttpConfig:
    base_url: str = "http://192.168.1.100:8080"
    timeout: float = 5.0
    endpoints: Dict[str, str] = field(default_factory=default_http_endpoints)


@dataclass
class WebSocketConfig:
    url: str = "ws://192.168.1.100:8080/ws"
    reconnect_delay: float = 5.0
    open_timeout: float = 5.0


@dataclass
class DatabaseConfig:
    url: str = "sqlite+aiosqlite:///robot.db"
    timeout: float = 5.0


@dataclass
class MockConfig:
    tick_interval: float = 2.0
    simulate: bool = True


@dataclass
class DataSourceConfig:
    type: str = "mock"
    mock: MockConfig = field(default_factory=MockConfig)
    serial: SerialConfig = field(default_factory=SerialConfig)
    mqtt: MqttConfig = field(default_factory=MqttConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    websocket: WebSocketConfig = field(default_factory=WebSocketConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
