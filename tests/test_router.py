#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

"""
Router tests.

We check 2 directions:

1) Inbound (downstream -> router -> item):
   - adapter provides RawDownstreamMessage
   - router finds the item bound to the control topic
   - router decodes payload using codec
   - item state changes and characteristic subscribers are notified

2) Outbound (characteristic write -> item -> router -> adapter):
   - item command is encoded using codec
   - router sends DownstreamWrite to the control "/on" topic
"""

import asyncio
from typing import List
from unittest.mock import MagicMock

import pytest

from wb.mqtt_homekit.client.bridge.characteristic_registry import create_characteristic
from wb.mqtt_homekit.client.bridge.characteristic_types import CharacteristicType, SwingModeEnum
from wb.mqtt_homekit.client.bridge.items import DecimalType, HSBType, Item, ItemKind, OnOffType, TaggedItem, UnDefType
from wb.mqtt_homekit.client.bridge.updater import AccessoryUpdater
from wb.mqtt_homekit.client.downstream.models import DownstreamWrite, RawDownstreamMessage
from wb.mqtt_homekit.client.downstream.mqtt_wb_conv.codec import MqttWbConvCodec
from wb.mqtt_homekit.client.router import ItemRouter


class DummyAdapter:
    """
    Minimal adapter stub:
    - subscribe() and write() collect requests so we can assert what router sent
    """

    downstream_name = "mqtt_wb_conv"

    def __init__(self) -> None:
        self.subscriptions: List[str] = []
        self.writes: List[DownstreamWrite] = []

    def start(self, handler) -> None:  # pragma: no cover
        self._handler = handler

    def stop(self) -> None:  # pragma: no cover
        return None

    def subscribe(self, address: str) -> None:
        self.subscriptions.append(address)

    def write(self, req: DownstreamWrite) -> None:
        self.writes.append(req)


def _build_router():
    adapter = DummyAdapter()
    return ItemRouter(MqttWbConvCodec(), adapter), adapter


def _message(address: str, payload: bytes) -> RawDownstreamMessage:
    return RawDownstreamMessage(downstream_name="mqtt_wb_conv", address=address, payload=payload)


def test_router_bind_subscribes_full_topic():
    router, adapter = _build_router()
    router.bind(Item("Fan_Swing", ItemKind.SWITCH), "wb-mr6c_1/K1")

    assert adapter.subscriptions == ["/devices/wb-mr6c_1/controls/K1"]
    assert router.addresses == ["/devices/wb-mr6c_1/controls/K1"]


def test_router_bind_rejects_invalid_and_duplicate():
    router, _ = _build_router()
    item = Item("Fan_Swing", ItemKind.SWITCH)
    with pytest.raises(ValueError, match="invalid control topic"):
        router.bind(item, "wb-mr6c_1")
    router.bind(item, "wb-mr6c_1/K1")
    with pytest.raises(ValueError, match="already bound"):
        router.bind(item, "wb-mr6c_1/K2")


def test_router_inbound_decodes_and_notifies_characteristic():
    router, _ = _build_router()
    item = Item("Fan_Swing", ItemKind.SWITCH)
    router.bind(item, "/devices/wb-mr6c_1/controls/K1")
    characteristic = create_characteristic(
        TaggedItem(item=item, characteristic_type=CharacteristicType.SWING_MODE), AccessoryUpdater()
    )
    callback = MagicMock()
    characteristic.subscribe(callback)

    router.on_downstream_message(_message("/devices/wb-mr6c_1/controls/K1", b"1"))

    assert item.state is OnOffType.ON
    callback.assert_called_once_with()
    assert asyncio.run(characteristic.read()) is SwingModeEnum.SWING_ENABLED

    # Retained duplicate does not notify again
    router.on_downstream_message(_message("/devices/wb-mr6c_1/controls/K1", b"1"))
    callback.assert_called_once_with()


def test_router_outbound_encodes_and_writes_to_adapter():
    router, adapter = _build_router()
    swing = Item("Fan_Swing", ItemKind.SWITCH)
    speed = Item("Fan_Speed", ItemKind.NUMBER)
    router.bind(swing, "wb-mr6c_1/K1")
    router.bind(speed, "wb-mao4_20/Channel 1")

    updater = AccessoryUpdater()
    swing_mode = create_characteristic(TaggedItem(item=swing, characteristic_type=CharacteristicType.SWING_MODE), updater)
    rotation_speed = create_characteristic(
        TaggedItem(item=speed, characteristic_type=CharacteristicType.ROTATION_SPEED), updater
    )

    asyncio.run(swing_mode.write(SwingModeEnum.SWING_DISABLED))
    asyncio.run(rotation_speed.write(75))

    assert adapter.writes == [
        DownstreamWrite(downstream_name="mqtt_wb_conv", address="/devices/wb-mr6c_1/controls/K1/on", payload=b"0"),
        DownstreamWrite(
            downstream_name="mqtt_wb_conv", address="/devices/wb-mao4_20/controls/Channel 1/on", payload=b"75"
        ),
    ]
    # State is reported back by the device, not set by the command
    assert speed.state != DecimalType(75)


def test_router_outbound_color_channel_merges_current_color():
    router, adapter = _build_router()
    rgb = Item("Strip_Color", ItemKind.COLOR)
    router.bind(rgb, "wb-mrgbw-d_21/RGB")
    router.on_downstream_message(_message("/devices/wb-mrgbw-d_21/controls/RGB", b"255;0;0"))
    assert rgb.state == HSBType(0, 100, 100)

    hue = create_characteristic(TaggedItem(item=rgb, characteristic_type=CharacteristicType.HUE), AccessoryUpdater())
    asyncio.run(hue.write(120.0))

    assert adapter.writes[-1].address == "/devices/wb-mrgbw-d_21/controls/RGB/on"
    assert adapter.writes[-1].payload == b"0;255;0"


def test_router_inbound_ignores_unknown_address():
    router, _ = _build_router()
    item = Item("Fan_Swing", ItemKind.SWITCH)
    router.bind(item, "wb-mr6c_1/K1")

    router.on_downstream_message(_message("/devices/wb-mr6c_1/controls/K9", b"1"))

    assert router.item_for("/devices/wb-mr6c_1/controls/K9") is None
    assert item.state is not OnOffType.ON


def test_router_rejects_mismatched_codec():
    adapter = DummyAdapter()
    adapter.downstream_name = "file_poll"
    with pytest.raises(ValueError, match="does not match"):
        ItemRouter(MqttWbConvCodec(), adapter)


def test_router_repeated_non_finite_reading_notifies_once():
    router, _ = _build_router()
    item = Item("Valve_Duration", ItemKind.NUMBER, state=DecimalType(30))
    router.bind(item, "wb-mao4_20/Channel 1")
    characteristic = create_characteristic(
        TaggedItem(item=item, characteristic_type=CharacteristicType.REMAINING_DURATION), AccessoryUpdater()
    )
    callback = MagicMock()
    characteristic.subscribe(callback)

    router.on_downstream_message(_message("/devices/wb-mao4_20/controls/Channel 1", b"nan"))
    router.on_downstream_message(_message("/devices/wb-mao4_20/controls/Channel 1", b"nan"))

    assert item.state is UnDefType.UNDEF
    callback.assert_called_once_with()
    assert asyncio.run(characteristic.read()) == 0
