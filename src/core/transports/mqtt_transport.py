import json
import logging
from typing import Any, Callable, Dict, Optional

import paho.mqtt.client as mqtt

from core.models.config_data import MqttConfig
from core.telemetry_cache import TelemetryCache
from core.transports.base import Transport, TransportError, TransportState

logger = logging.getLogger(__name__)


def default_client_factory(config: MqttConfig) -> mqtt.Client:
    return mqtt.Client(
        callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
        client_id=config.client_id,
    )


class MqttTransport(Transport):
    """
    Subscribes to the robot's telemetry topics and publishes control messages.

    paho runs its network loop on its own thread, so callbacks write to the
    cache from there. Reconnection is left to paho (`reconnect_delay_set`).
    """

    transport_type = "mqtt"

    def __init__(
        self,
        cache: TelemetryCache,
        config: MqttConfig,
        client_factory: Callable[[MqttConfig], Any] = default_client_factory,
    ):
        super().__init__(cache)
        self.config = config
        self._client_factory = client_factory
        self._client: Optional[Any] = None
        topics = config.topics
        self._channels: Dict[str, str] = {
            topics.status: "status",
            topics.sensors: "sensors",
            topics.tasks: "tasks",
            topics.statistics: "statistics",
        }

    async def connect(self) -> None:
        if self._client is not None:
            return
        self._set_state(TransportState.CONNECTING)
        client = self._client_factory(self.config)
        if self.config.username:
            client.username_pw_set(self.config.username, self.config.password)
        client.on_connect = self._on_connect
        client.on_connect_fail = self._on_connect_fail
        client.on_disconnect = self._on_disconnect
        client.on_message = self._on_message
        period = max(1, int(self.config.reconnect_period))
        client.reconnect_delay_set(min_delay=period, max_delay=period)
        try:
            client.connect_async(self.config.host, self.config.port, keepalive=self.config.keepalive)
            client.loop_start()
        except (OSError, ValueError) as e:
            logger.error(f"MQTT connect to {self.config.host}:{self.config.port} failed: {e}")
            self._set_state(TransportState.DISCONNECTED)
            return
        self._client = client
        logger.info(f"MQTT connecting to {self.config.host}:{self.config.port}")

    async def disconnect(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            client.disconnect()
            client.loop_stop()
        self._set_state(TransportState.DISCONNECTED)

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        if reason_code.is_failure:
            logger.error(f"MQTT broker refused connection: {reason_code}")
            self._set_state(TransportState.DISCONNECTED)
            return
        for topic in self._channels:
            client.subscribe(topic)
        self._set_state(TransportState.CONNECTED)

    def _on_connect_fail(self, client, userdata):
        # Broker unreachable; paho retries after the reconnect delay
        if self.state != TransportState.DISCONNECTED:
            logger.warning(f"MQTT broker {self.config.host}:{self.config.port} unreachable")
        self._set_state(TransportState.DISCONNECTED)

    def _on_disconnect(self, client, userdata, disconnect_flags, reason_code, properties=None):
        # paho keeps retrying on its own until disconnect() is called
        self._set_state(TransportState.DISCONNECTED)

    def _on_message(self, client, userdata, msg):
        channel = self._channels.get(msg.topic)
        if channel is None:
            logger.debug(f"Ignoring message on unsubscribed topic {msg.topic}")
            return
        self.on_telemetry(channel, msg.payload)

    async def _send(self, message: dict) -> None:
        if self._client is None:
            raise TransportError("MQTT client not started")
        info = self._client.publish(self.config.topics.control, json.dumps(message, ensure_ascii=False))
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise TransportError(mqtt.error_string(info.rc))
