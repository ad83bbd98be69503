#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from wb.mqtt_homekit.lib.mqtt_topic import MQTTTopic

from .bridge.items import Command, Item
from .downstream.base import DownstreamAdapter, DownstreamCodec
from .downstream.models import DownstreamWrite, RawDownstreamMessage

logger = logging.getLogger(__name__)


class ItemRouter:
    """
    Routes messages between a downstream adapter and items

    Responsibilities:
      1) Inbound (downstream -> item):
         - Receive RawDownstreamMessage from the adapter
         - Find the item bound to the message address (control topic)
         - Decode payload via the codec using the item kind
         - Set the decoded state on the item (which notifies subscribers)

      2) Outbound (item -> downstream):
         - Receive a command sent to a bound item
         - Encode it via the codec
         - Write it to the control command topic via adapter.write()

    Notes:
      - Router does NOT know MQTT payload conventions; the codec does
      - Router does NOT update item state on commands: the device reports back
    """

    def __init__(self, codec: DownstreamCodec, adapter: DownstreamAdapter) -> None:
        if codec.downstream_name != adapter.downstream_name:
            raise ValueError(
                f"Codec {codec.downstream_name!r} does not match adapter {adapter.downstream_name!r}"
            )
        self.codec = codec
        self.adapter = adapter
        self._items_by_address: Dict[str, Item] = {}
        self._topics_by_item: Dict[str, MQTTTopic] = {}

    @property
    def addresses(self) -> List[str]:
        return list(self._items_by_address)

    def bind(self, item: Item, topic: str) -> None:
        """
        Bind an item to a control topic (short or full Wiren Board form)

        Example:
            router.bind(Item("Kitchen_Light", ItemKind.SWITCH), "wb-mr6c_1/K1")
            # state:    /devices/wb-mr6c_1/controls/K1
            # commands: /devices/wb-mr6c_1/controls/K1/on
        """
        mqtt_topic = MQTTTopic(topic)
        if not mqtt_topic.is_valid:
            raise ValueError(f"Item {item.name} has invalid control topic: {topic!r}")
        if item.name in self._topics_by_item:
            raise ValueError(f"Item {item.name} is already bound to {self._topics_by_item[item.name].short}")
        self._items_by_address[mqtt_topic.full] = item
        self._topics_by_item[item.name] = mqtt_topic
        item.command_sink = self.on_item_command
        self.adapter.subscribe(mqtt_topic.full)

    def item_for(self, address: str) -> Optional[Item]:
        return self._items_by_address.get(address)

    def on_downstream_message(self, msg: RawDownstreamMessage) -> None:
        item = self._items_by_address.get(msg.address)
        if item is None:
            logger.debug("No item bound to %s/%s", msg.downstream_name, msg.address)
            return
        item.set_state(self.codec.decode(item.kind, msg.payload))

    def on_item_command(self, item: Item, command: Command) -> None:
        mqtt_topic = self._topics_by_item.get(item.name)
        if mqtt_topic is None:
            logger.warning("Item %s is not bound to a control, command %s dropped", item.name, command)
            return
        payload = self.codec.encode(item.kind, command)
        if payload is None:
            return
        self.adapter.write(
            DownstreamWrite(
                downstream_name=self.adapter.downstream_name,
                address=mqtt_topic.command,
                payload=payload,
            )
        )
