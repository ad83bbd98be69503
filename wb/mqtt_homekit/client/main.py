#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import argparse
import asyncio
import logging
import signal
import sys
from typing import List, Optional, Sequence, Set

from pydantic import ValidationError

from wb.mqtt_homekit.lib.constants import (
    CONFIG_PATH,
    LOG_DATE_FORMAT,
    LOG_FORMAT,
    WB_MQTT_HOMEKIT_LOGGER_NAME,
)
from wb.mqtt_homekit.client.bridge.characteristic import Characteristic
from wb.mqtt_homekit.client.bridge.characteristic_registry import DEFAULT_REGISTRY, CharacteristicRegistry
from wb.mqtt_homekit.client.bridge.characteristic_types import CharacteristicType
from wb.mqtt_homekit.client.bridge.config_loader import LOG_LEVELS, BridgeConfig, ItemConfig, load_config
from wb.mqtt_homekit.client.bridge.errors import HomekitError
from wb.mqtt_homekit.client.bridge.items import Item, TaggedItem
from wb.mqtt_homekit.client.bridge.updater import AccessoryUpdater
from wb.mqtt_homekit.client.downstream.mqtt_wb_conv.adapter import MqttConnectionConfig, MqttWbConvAdapter
from wb.mqtt_homekit.client.downstream.mqtt_wb_conv.codec import MqttWbConvCodec
from wb.mqtt_homekit.client.router import ItemRouter

logger = logging.getLogger(WB_MQTT_HOMEKIT_LOGGER_NAME)


def create_item_characteristics(
    item_cfg: ItemConfig,
    item: Item,
    updater: AccessoryUpdater,
    registry: CharacteristicRegistry = DEFAULT_REGISTRY,
) -> List[Characteristic]:
    """
    Create every characteristic listed for an item

    Unknown tags and unsupported types are logged and skipped, so one bad
    entry does not take the whole accessory down
    """
    characteristics = []
    for tag in item_cfg.characteristics:
        try:
            characteristic_type = CharacteristicType.from_tag(tag)
        except ValueError:
            logger.warning("Item %s: unknown characteristic tag %r, skipped", item.name, tag)
            continue
        tagged_item = TaggedItem(
            item=item,
            characteristic_type=characteristic_type,
            accessory_type=item_cfg.accessory_type,
            configuration=dict(item_cfg.configuration),
        )
        try:
            characteristics.append(registry.create_characteristic(tagged_item, updater))
        except HomekitError as e:
            logger.warning("Item %s: %s", item.name, e)
    return characteristics


class HomekitBridge:
    """
    Wires configured items, the MQTT runtime and HomeKit characteristics

    Every created characteristic is subscribed and its fresh value is logged
    on each change of the backing item
    """

    def __init__(self, cfg: BridgeConfig, adapter: Optional[MqttWbConvAdapter] = None) -> None:
        self.cfg = cfg
        if adapter is None:
            adapter = MqttWbConvAdapter(cfg=MqttConnectionConfig(**cfg.mqtt.model_dump()))
        self.adapter = adapter
        self.router = ItemRouter(MqttWbConvCodec(), adapter)
        self.updater = AccessoryUpdater()
        self.items: List[Item] = []
        self.characteristics: List[Characteristic] = []
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._reports: Set[asyncio.Task] = set()

        for item_cfg in cfg.items:
            item = Item(item_cfg.name, item_cfg.kind, label=item_cfg.label)
            self.router.bind(item, item_cfg.topic)
            self.items.append(item)
            self.characteristics.extend(create_item_characteristics(item_cfg, item, self.updater))

    def start(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        for characteristic in self.characteristics:
            characteristic.subscribe(self._change_callback(characteristic))
        logger.info("Bridge started: items=%d characteristics=%d", len(self.items), len(self.characteristics))
        self.adapter.start(self.router.on_downstream_message)

    def stop(self) -> None:
        for characteristic in self.characteristics:
            characteristic.unsubscribe()
        self.updater.unsubscribe_all()
        self.adapter.stop()
        logger.info("Bridge stopped")

    def _change_callback(self, characteristic: Characteristic):
        def changed() -> None:
            # Called from the MQTT network thread
            if self._loop is None or self._loop.is_closed():
                return
            self._loop.call_soon_threadsafe(self._schedule_report, characteristic)

        return changed

    def _schedule_report(self, characteristic: Characteristic) -> None:
        # Loop keeps only weak references to tasks
        task = self._loop.create_task(self._report(characteristic))
        self._reports.add(task)
        task.add_done_callback(self._reports.discard)

    async def _report(self, characteristic: Characteristic) -> None:
        value = await characteristic.read()
        logger.info("%s changed: %r", characteristic.tag, value)


async def run(cfg: BridgeConfig) -> None:
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    bridge = HomekitBridge(cfg)
    bridge.start(loop)
    try:
        await stop_event.wait()
    finally:
        bridge.stop()


def list_types() -> None:
    for characteristic_type in DEFAULT_REGISTRY.supported_types:
        print(f"{characteristic_type.tag:<30} {characteristic_type.value_kind.value}")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Wiren Board MQTT to HomeKit characteristic bridge")
    parser.add_argument("-c", "--config", default=CONFIG_PATH, help="path to bridge config (default: %(default)s)")
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="override log level from config",
    )
    parser.add_argument("--list-types", action="store_true", help="print supported characteristic types and exit")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    if args.list_types:
        list_types()
        return 0

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    try:
        cfg = load_config(args.config)
    except (OSError, ValueError, ValidationError) as e:
        logger.error("Cannot load config %s: %r", args.config, e)
        return 2

    level = (args.log_level or cfg.log_level).upper()
    logging.getLogger().setLevel(level)
    logger.info("Log level: %s", level)

    try:
        asyncio.run(run(cfg))
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception("Bridge failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
