"""Internal MQTT runtime and topic parsing for TeslaMate feeds."""

from __future__ import annotations

import asyncio
import logging
import socket
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, cast

import paho.mqtt.client as mqtt

from teslamate_telegram._constants import DEFAULT_TOPIC_PREFIX
from teslamate_telegram.exceptions import MqttConnectError


@dataclass(frozen=True)
class FieldUpdate:
    """One TeslaMate telemetry field update."""

    vehicle_id: int
    field: str
    value: str


def build_client_id() -> str:
    return f"teslamate-telegram-{socket.gethostname()}"


def parse_topic(topic: str, prefix: str = DEFAULT_TOPIC_PREFIX) -> tuple[int, str] | None:
    """Split ``<prefix>/<id>/<field>`` into ``(id, field)``.

    Returns ``None`` for topics outside *prefix* or with a
    non-numeric car id.
    """
    head = prefix.rstrip("/") + "/"
    if not topic.startswith(head):
        return None
    car_id, sep, field = topic[len(head) :].partition("/")
    if not sep or not field:
        return None
    try:
        vehicle_id = int(car_id, 10)
    except ValueError:
        return None
    return vehicle_id, field


class TeslaMateMqttRuntime:
    """Threaded paho-mqtt runtime that emits field updates onto an asyncio loop."""

    def __init__(
        self,
        *,
        loop: asyncio.AbstractEventLoop,
        on_update: Callable[[FieldUpdate], None],
        topic_prefix: str = DEFAULT_TOPIC_PREFIX,
        keepalive: int = 60,
        client_id: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._loop = loop
        self._on_update = on_update
        self._topic_prefix = topic_prefix.rstrip("/")
        self._keepalive = keepalive
        self._client_id = client_id or build_client_id()
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        """Whether the MQTT runtime is actively running."""
        return self._running

    @property
    def subscription(self) -> str:
        return f"{self._topic_prefix}/#"

    def handle_message(self, topic: str, payload: bytes) -> None:
        """Parse one PUBLISH and hand it to the event loop."""
        parsed = parse_topic(topic, self._topic_prefix)
        if parsed is None:
            self._logger.warning("Failed to parse topic: %s", topic)
            return
        vehicle_id, field = parsed
        value = payload.decode("utf-8", errors="replace")
        self._logger.debug("Received PUBLISH topic=%s payload=%r", topic, value)
        update = FieldUpdate(vehicle_id=vehicle_id, field=field, value=value)
        self._loop.call_soon_threadsafe(self._on_update, update)

    def start(self, host: str, port: int) -> None:
        """Connect, subscribe on every (re)connect, and start the network loop.

        Raises :class:`MqttConnectError` when the broker is unreachable.
        """
        self.stop()
        self._logger.debug(
            "MQTT runtime start requested host=%s port=%s topic=%s client_id=%s",
            host,
            port,
            self.subscription,
            self._client_id,
        )

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=self._client_id,
            clean_session=False,
            protocol=mqtt.MQTTv311,
        )
        client.enable_logger(self._logger)

        def on_connect(
            c: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.is_failure:
                self._logger.warning("MQTT connect failed: %s", reason_code)
                return
            self._logger.info("Connected to MQTT, subscribing topic=%s", self.subscription)
            c.subscribe(self.subscription, qos=0)

        def on_message(_c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
            try:
                self.handle_message(msg.topic, msg.payload)
            except Exception:
                self._logger.debug("MQTT message handling failure", exc_info=True)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if self._running:
                self._logger.warning("MQTT disconnected: %s", reason_code)

        client.on_connect = on_connect
        client.on_message = on_message
        client.on_disconnect = on_disconnect

        try:
            client.connect(host, port, keepalive=self._keepalive)
        except OSError as exc:
            raise MqttConnectError(f"Cannot connect to MQTT broker {host}:{port}: {exc}", endpoint=f"{host}:{port}") from exc
        client.loop_start()

        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def stop(self) -> None:
        """Stop and disconnect current MQTT client if running."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")
