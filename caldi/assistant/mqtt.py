"""Optional MQTT telemetry for transcripts and calculation results."""

from __future__ import annotations

import json
import logging
import ssl
import threading
from typing import Any

import paho.mqtt.client as mqtt

from .config import MqttConfig


class AssistantMqtt:
    def __init__(self, config: MqttConfig, logger: logging.Logger | None = None) -> None:
        self.config = config
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return bool(self.config.host)

    def connect(self) -> None:
        if not self.enabled:
            self._logger.debug("[mqtt] MQTT host not configured; result telemetry disabled")
            return
        with self._lock:
            if self._client is not None:
                return
            client = mqtt.Client(
                callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
                client_id=f"caldi-{self.config.topic_base.replace('/', '-')}",
                clean_session=True,
            )
            if self.config.username:
                client.username_pw_set(self.config.username, self.config.password or "")
            if self.config.tls_enabled:
                client.tls_set(
                    ca_certs=self.config.ca_cert,
                    certfile=self.config.cert,
                    keyfile=self.config.key,
                    tls_version=ssl.PROTOCOL_TLS_CLIENT,
                )
            try:
                client.connect(self.config.host, self.config.port, keepalive=30)
            except OSError as exc:
                self._logger.warning("[mqtt] Failed to connect to MQTT at %s:%s: %s", self.config.host, self.config.port, exc)
                return
            client.loop_start()
            self._client = client
            self._logger.info("[mqtt] Connected to %s:%s", self.config.host, self.config.port)

    def disconnect(self) -> None:
        with self._lock:
            client = self._client
            self._client = None
        if client:
            client.loop_stop()
            client.disconnect()

    def is_connected(self) -> bool:
        client = self._client
        return bool(client and client.is_connected())

    def publish(self, topic: str, payload: str, retain: bool = False, qos: int = 0) -> None:
        client = self._client
        if not client:
            return
        try:
            client.publish(topic, payload=payload, qos=qos, retain=retain)
        except (OSError, ValueError) as exc:
            self._logger.debug("[mqtt] Failed to publish MQTT message to %s: %s", topic, exc)

    def publish_json(self, topic: str, payload: dict[str, Any], retain: bool = False) -> None:
        self.publish(topic, json.dumps(payload), retain=retain)
