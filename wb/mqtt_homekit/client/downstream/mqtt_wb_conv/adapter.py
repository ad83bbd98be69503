#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

import paho.mqtt.client as paho_mqtt

from ..base import DownstreamAdapter, RawMessageHandler
from ..models import DownstreamWrite, RawDownstreamMessage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MqttConnectionConfig:
    """
    MQTT connection settings for paho-mqtt client
    """

    host: str = "localhost"
    port: int = 1883
    client_id: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    keepalive: int = 60
    qos: int = 0
    retain: bool = False


class MqttWbConvAdapter(DownstreamAdapter):
    """
    MQTT adapter for Wiren Board controls using paho-mqtt

    - control topics are subscribed on start() and on every reconnect
    - messages are handed to the handler from the paho network thread
    - in tests a mocked paho client is injected via `client=...`
    """

    def __init__(
        self,
        *,
        cfg: MqttConnectionConfig,
        subscriptions: Iterable[str] = (),
        client: Optional[Any] = None,
    ) -> None:
        self._cfg = cfg
        self._subs: List[str] = list(subscriptions)
        self._handler: Optional[RawMessageHandler] = None
        self._started = False

        if client is None:
            client = paho_mqtt.Client(paho_mqtt.CallbackAPIVersion.VERSION2, client_id=cfg.client_id or "")
        self._client = client

        if cfg.username:
            self._client.username_pw_set(cfg.username, cfg.password)

        self._client.on_connect = self._on_connect
        self._client.on_message = self._on_message
        self._client.on_disconnect = self._on_disconnect

    @property
    def downstream_name(self) -> str:
        return "mqtt_wb_conv"

    @property
    def subscriptions(self) -> List[str]:
        return list(self._subs)

    def start(self, handler: RawMessageHandler) -> None:
        self._handler = handler
        logger.info(
            "Starting MQTT adapter: host=%s port=%s subs=%d",
            self._cfg.host,
            self._cfg.port,
            len(self._subs),
        )
        self._client.connect(self._cfg.host, self._cfg.port, keepalive=self._cfg.keepalive)
        for topic in self._subs:
            self._client.subscribe(topic, qos=self._cfg.qos)
        self._started = True
        self._client.loop_start()

    def stop(self) -> None:
        logger.info("Stopping MQTT adapter")
        self._started = False
        try:
            self._client.loop_stop()
        finally:
            try:
                self._client.disconnect()
            except Exception:
                logger.exception("MQTT disconnect failed")

    def subscribe(self, address: str) -> None:
        if address in self._subs:
            return
        self._subs.append(address)
        if self._started:
            self._client.subscribe(address, qos=self._cfg.qos)

    def write(self, req: DownstreamWrite) -> None:
        if req.downstream_name != self.downstream_name:
            raise ValueError(f"Downstream mismatch: expected={self.downstream_name} got={req.downstream_name}")
        payload = req.payload
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        logger.debug("MQTT publish: topic=%s payload=%r", req.address, payload)
        self._client.publish(req.address, payload=payload, qos=self._cfg.qos, retain=self._cfg.retain)

    # ---- paho callbacks ----

    def _on_connect(self, client: Any, userdata: Any, flags: Any, reason_code: Any, properties: Any = None) -> None:
        logger.info("MQTT connected: rc=%s", reason_code)
        # Subscriptions do not survive a clean reconnect
        for topic in self._subs:
            try:
                client.subscribe(topic, qos=self._cfg.qos)
            except Exception:
                logger.exception("MQTT subscribe failed: %s", topic)

    def _on_disconnect(
        self, client: Any, userdata: Any, flags: Any, reason_code: Any = None, properties: Any = None
    ) -> None:
        logger.warning("MQTT disconnected: rc=%s", reason_code)

    def _on_message(self, client: Any, userdata: Any, msg: Any) -> None:
        if self._handler is None:
            return
        raw = RawDownstreamMessage(
            downstream_name=self.downstream_name,
            address=str(getattr(msg, "topic", "")),
            payload=getattr(msg, "payload", None),
            meta={"qos": getattr(msg, "qos", None), "retain": getattr(msg, "retain", None)},
        )
        try:
            self._handler(raw)
        except Exception:
            logger.exception("Failed to handle MQTT message: topic=%s", raw.address)
