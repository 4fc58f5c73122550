"""MQTT communication between the orchestrator and lorhammer instances."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any
from urllib.parse import urlsplit

import paho.mqtt.client as paho

from lorhammer.random_utils import random_bytes

MQTT_LORHAMMER_TOPIC = "/lorhammer"
MQTT_ORCHESTRATOR_TOPIC = "/lorhammer/orchestrator"

logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {
    "": 1883,
    "tcp": 1883,
    "mqtt": 1883,
    "ssl": 8883,
    "tls": 8883,
    "mqtts": 8883,
    "ws": 80,
    "wss": 443,
}
_TLS_SCHEMES = {"ssl", "tls", "mqtts", "wss"}
_WS_SCHEMES = {"ws", "wss"}


class MqttClient:
    """Connects to an MQTT broker, subscribes to topics and publishes messages."""

    def __init__(self, url: str, client_id: str, client: Any = None) -> None:
        self.url = url
        self.client_id = client_id
        self._connected = threading.Event()
        if client is None:
            scheme = urlsplit(url).scheme.lower()
            transport = "websockets" if scheme in _WS_SCHEMES else "tcp"
            client = paho.Client(
                paho.CallbackAPIVersion.VERSION2,
                client_id=client_id,
                transport=transport,
            )
            client.on_connect = self._on_connect
            client.on_disconnect = self._on_disconnect
        self._client = client

    @property
    def address(self) -> str:
        """The broker address this client was built with."""
        return self.url

    @property
    def is_connected(self) -> bool:
        """Whether the broker has acknowledged the connection."""
        return self._connected.is_set()

    def _on_connect(self, client, userdata, flags, reason_code, properties=None) -> None:
        self._connected.set()
        logger.info("Connected to Mqtt broker %s as %s", self.url, self.client_id)

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None) -> None:
        self._connected.clear()
        logger.warning("Connection mqtt lost: %s", reason_code)

    def connect(self) -> None:
        """Connect to the broker and start the network loop."""
        parts = urlsplit(self.url)
        scheme = parts.scheme.lower()
        if scheme not in _DEFAULT_PORTS:
            raise ValueError(f"Unsupported mqtt scheme {parts.scheme!r}")
        if not parts.hostname:
            raise ValueError(f"No broker host in {self.url!r}")
        port = parts.port or _DEFAULT_PORTS[scheme]
        if scheme in _TLS_SCHEMES:
            self._client.tls_set()
        rc = self._client.connect(parts.hostname, port)
        if rc:
            raise ConnectionError(f"Mqtt connection failed: {paho.error_string(rc)}")
        self._client.loop_start()

    def disconnect(self) -> None:
        """Disconnect from the broker and stop the network loop."""
        self._client.disconnect()
        self._client.loop_stop()
        self._connected.clear()

    def handle(self, topics: Iterable[str], handler: Callable[[bytes], None]) -> None:
        """Subscribe to ``topics`` and call ``handler`` with each message payload."""
        topics = list(topics)

        def on_message(client, userdata, message) -> None:
            handler(message.payload)

        for topic in topics:
            self._client.message_callback_add(topic, on_message)
        rc, _ = self._client.subscribe([(topic, 0) for topic in topics])
        if rc:
            raise ConnectionError(f"Mqtt subscribe failed: {paho.error_string(rc)}")

    def publish(self, topic: str, message: bytes | str) -> None:
        """Publish ``message`` on ``topic`` with QoS 0, not retained."""
        if isinstance(message, str):
            message = message.encode()
        self._client.publish(topic, message, qos=0, retain=False)


def new_mqtt(hostname: str, mqtt_addr: str) -> MqttClient:
    """Build a client for ``mqtt_addr`` (protocol://ip:port) with an id based on ``hostname``."""
    client_id = f"{hostname}_{random_bytes(8).hex()}"
    return MqttClient(mqtt_addr, client_id)