#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from wb.mqtt_homekit.client.bridge.items import (
    DecimalType,
    HSBType,
    ItemKind,
    OnOffType,
    OpenClosedType,
    PercentType,
    StringType,
    UnDefType,
)
from wb.mqtt_homekit.client.downstream.models import DownstreamWrite, RawDownstreamMessage
from wb.mqtt_homekit.client.downstream.mqtt_wb_conv.adapter import MqttConnectionConfig, MqttWbConvAdapter
from wb.mqtt_homekit.client.downstream.mqtt_wb_conv.codec import MqttWbConvCodec, hsb_to_rgb, rgb_to_hsb

K1 = "/devices/wb-mr6c_1/controls/K1"


@pytest.mark.parametrize(
    "payload,expected",
    [
        (b"1", OnOffType.ON),
        (b"0", OnOffType.OFF),
        (b"true", OnOffType.ON),
        (b"OFF", OnOffType.OFF),
    ],
)
def test_codec_decode_switch(payload: bytes, expected):
    assert MqttWbConvCodec().decode(ItemKind.SWITCH, payload) is expected


def test_codec_decode_contact():
    codec = MqttWbConvCodec()
    assert codec.decode(ItemKind.CONTACT, b"1") is OpenClosedType.OPEN
    assert codec.decode(ItemKind.CONTACT, b"0") is OpenClosedType.CLOSED


def test_codec_decode_number():
    assert MqttWbConvCodec().decode(ItemKind.NUMBER, b"23.5") == DecimalType(Decimal("23.5"))


@pytest.mark.parametrize(
    "payload,expected",
    [(b"40", PercentType(40)), (b"150", PercentType(100)), (b"-3", PercentType(0))],
)
def test_codec_decode_dimmer_is_clamped(payload: bytes, expected):
    assert MqttWbConvCodec().decode(ItemKind.DIMMER, payload) == expected


def test_codec_decode_color():
    assert MqttWbConvCodec().decode(ItemKind.COLOR, b"255;0;0") == HSBType(0, 100, 100)


def test_codec_decode_string():
    assert MqttWbConvCodec().decode(ItemKind.STRING, "Garden") == StringType("Garden")


@pytest.mark.parametrize(
    "kind,payload",
    [
        (ItemKind.SWITCH, b""),
        (ItemKind.SWITCH, b"maybe"),
        (ItemKind.NUMBER, b"n/a"),
        (ItemKind.COLOR, b"255;0"),
        (ItemKind.NUMBER, b"nan"),
        (ItemKind.NUMBER, b"-Infinity"),
        (ItemKind.DIMMER, b"inf"),
        (ItemKind.ROLLERSHUTTER, b"NaN"),
    ],
)
def test_codec_decode_bad_payload_is_undef(kind, payload):
    assert MqttWbConvCodec().decode(kind, payload) is UnDefType.UNDEF


def test_codec_encode():
    codec = MqttWbConvCodec()
    assert codec.encode(ItemKind.SWITCH, OnOffType.ON) == b"1"
    assert codec.encode(ItemKind.SWITCH, OnOffType.OFF) == b"0"
    assert codec.encode(ItemKind.NUMBER, DecimalType("21.5")) == b"21.5"
    assert codec.encode(ItemKind.DIMMER, PercentType(10)) == b"10"
    assert codec.encode(ItemKind.COLOR, HSBType(120, 100, 100)) == b"0;255;0"
    assert codec.encode(ItemKind.DIMMER, HSBType(120, 100, 35)) == b"35"


def test_codec_encode_unsupported_command(caplog):
    assert MqttWbConvCodec().encode(ItemKind.STRING, StringType("x")) is None
    assert "cannot be encoded" in caplog.text


def test_rgb_hsb_conversion():
    assert rgb_to_hsb("0;0;0") == HSBType(0, 0, 0)
    assert hsb_to_rgb(HSBType(0, 0, 100)) == "255;255;255"


def test_adapter_subscribe_and_emit_raw_message():
    paho_client = MagicMock()

    cfg = MqttConnectionConfig(host="localhost", port=1883)
    adapter = MqttWbConvAdapter(cfg=cfg, subscriptions=[K1], client=paho_client)

    received = []

    def on_raw(msg: RawDownstreamMessage) -> None:
        received.append(msg)

    adapter.start(on_raw)

    paho_client.connect.assert_called_once_with("localhost", 1883, keepalive=60)
    paho_client.subscribe.assert_any_call(K1, qos=0)
    paho_client.loop_start.assert_called_once()

    # Simulate inbound message from paho
    fake_msg = MagicMock()
    fake_msg.topic = K1
    fake_msg.payload = b"1"
    fake_msg.qos = 0
    fake_msg.retain = True

    adapter._on_message(paho_client, None, fake_msg)

    assert len(received) == 1
    assert received[0].downstream_name == "mqtt_wb_conv"
    assert received[0].address == K1
    assert received[0].payload == b"1"
    assert received[0].meta == {"qos": 0, "retain": True}


def test_adapter_subscribe_after_start():
    paho_client = MagicMock()
    adapter = MqttWbConvAdapter(cfg=MqttConnectionConfig(qos=1), client=paho_client)

    adapter.subscribe(K1)
    paho_client.subscribe.assert_not_called()

    adapter.start(lambda msg: None)
    adapter.subscribe(K1)
    adapter.subscribe("/devices/wb-mr6c_1/controls/K2")

    assert adapter.subscriptions == [K1, "/devices/wb-mr6c_1/controls/K2"]
    assert paho_client.subscribe.call_count == 2


def test_adapter_resubscribes_on_connect():
    paho_client = MagicMock()
    adapter = MqttWbConvAdapter(cfg=MqttConnectionConfig(), subscriptions=[K1], client=paho_client)

    adapter._on_connect(paho_client, None, {}, 0, None)

    paho_client.subscribe.assert_called_once_with(K1, qos=0)


def test_adapter_handler_error_is_logged(caplog):
    paho_client = MagicMock()
    adapter = MqttWbConvAdapter(cfg=MqttConnectionConfig(), client=paho_client)
    adapter.start(MagicMock(side_effect=RuntimeError("boom")))

    fake_msg = MagicMock(topic=K1, payload=b"1", qos=0, retain=False)
    adapter._on_message(paho_client, None, fake_msg)

    assert "Failed to handle MQTT message" in caplog.text


def test_adapter_write_publish():
    paho_client = MagicMock()
    cfg = MqttConnectionConfig(host="localhost", port=1883, qos=1, retain=True)
    adapter = MqttWbConvAdapter(cfg=cfg, subscriptions=[], client=paho_client)

    adapter.write(DownstreamWrite(downstream_name="mqtt_wb_conv", address=f"{K1}/on", payload="1"))
    paho_client.publish.assert_called_once_with(f"{K1}/on", payload=b"1", qos=1, retain=True)


def test_adapter_write_rejects_foreign_downstream():
    adapter = MqttWbConvAdapter(cfg=MqttConnectionConfig(), client=MagicMock())
    with pytest.raises(ValueError, match="Downstream mismatch"):
        adapter.write(DownstreamWrite(downstream_name="file_poll", address=K1, payload=b"1"))


def test_adapter_credentials():
    paho_client = MagicMock()
    MqttWbConvAdapter(cfg=MqttConnectionConfig(username="wb", password="secret"), client=paho_client)
    paho_client.username_pw_set.assert_called_once_with("wb", "secret")
