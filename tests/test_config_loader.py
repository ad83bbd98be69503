#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from wb.mqtt_homekit.client.bridge.characteristic_types import CharacteristicType
from wb.mqtt_homekit.client.bridge.config_loader import BridgeConfig, load_config
from wb.mqtt_homekit.client.bridge.items import Item, ItemKind
from wb.mqtt_homekit.client.bridge.updater import AccessoryUpdater
from wb.mqtt_homekit.client.downstream.models import RawDownstreamMessage
from wb.mqtt_homekit.client.downstream.mqtt_wb_conv.adapter import MqttConnectionConfig, MqttWbConvAdapter
from wb.mqtt_homekit.client.main import HomekitBridge, create_item_characteristics, main, parse_args


def _build_min_config() -> dict:
    """
    Minimal config with 2 items:
    - valve duration with configured default
    - fan swing switch with an unknown and an unsupported tag
    """
    return {
        "log_level": "debug",
        "mqtt": {"host": "wb.local", "port": 1884},
        "items": [
            {
                "name": "Valve_Duration",
                "kind": "number",
                "topic": "wb-mao4_20/Channel 1",
                "accessory_type": "Valve",
                "characteristics": ["Duration", "RemainingDuration"],
                "configuration": {"homekitDefaultDuration": 30},
            },
            {
                "name": "Fan_Swing",
                "kind": "switch",
                "topic": "/devices/wb-mr6c_1/controls/K1",
                "accessory_type": "Fan",
                "characteristics": ["SwingMode", "Bogus", "OnState"],
            },
        ],
    }


def _write_config(tmp_path: Path, data: dict) -> str:
    path = tmp_path / "wb-mqtt-homekit.conf"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_load_config_from_file(tmp_path):
    cfg = load_config(_write_config(tmp_path, _build_min_config()))

    assert cfg.log_level == "DEBUG"
    assert cfg.mqtt.host == "wb.local"
    assert cfg.mqtt.port == 1884
    assert cfg.mqtt.qos == 0
    assert [item.name for item in cfg.items] == ["Valve_Duration", "Fan_Swing"]
    assert cfg.items[0].kind is ItemKind.NUMBER
    assert cfg.items[0].configuration == {"homekitDefaultDuration": 30}
    assert cfg.items[1].label is None


def test_defaults():
    cfg = BridgeConfig()
    assert cfg.log_level == "INFO"
    assert cfg.mqtt.host == "localhost"
    assert cfg.items == []


@pytest.mark.parametrize(
    "patch",
    [
        {"log_level": "verbose"},
        {"items": [{"name": "x", "kind": "thermostat", "topic": "a/b"}]},
        {"items": [{"name": "x", "kind": "switch"}]},
        {
            "items": [
                {"name": "x", "kind": "switch", "topic": "a/b"},
                {"name": "x", "kind": "number", "topic": "a/c"},
            ]
        },
    ],
)
def test_invalid_config_raises(patch):
    with pytest.raises(ValidationError):
        BridgeConfig.model_validate(patch)


def test_create_item_characteristics_skips_unknown_and_unsupported(caplog):
    cfg = BridgeConfig.model_validate(_build_min_config())
    item_cfg = cfg.items[1]
    item = Item(item_cfg.name, item_cfg.kind)

    characteristics = create_item_characteristics(item_cfg, item, AccessoryUpdater())

    assert [c.characteristic_type for c in characteristics] == [CharacteristicType.SWING_MODE]
    assert "unknown characteristic tag 'Bogus'" in caplog.text
    assert "OnState" in caplog.text


def test_bridge_wires_items_and_characteristics():
    cfg = BridgeConfig.model_validate(_build_min_config())
    paho_client = MagicMock()
    adapter = MqttWbConvAdapter(cfg=MqttConnectionConfig(), client=paho_client)
    bridge = HomekitBridge(cfg, adapter=adapter)

    assert [item.name for item in bridge.items] == ["Valve_Duration", "Fan_Swing"]
    assert len(bridge.characteristics) == 3
    assert adapter.subscriptions == [
        "/devices/wb-mao4_20/controls/Channel 1",
        "/devices/wb-mr6c_1/controls/K1",
    ]

    loop = MagicMock()
    loop.is_closed.return_value = False
    bridge.start(loop)
    assert len(bridge.updater.subscriptions) == 3
    paho_client.loop_start.assert_called_once()

    bridge.router.on_downstream_message(
        RawDownstreamMessage(downstream_name="mqtt_wb_conv", address="/devices/wb-mr6c_1/controls/K1", payload=b"1")
    )
    loop.call_soon_threadsafe.assert_called_once()

    bridge.stop()
    assert len(bridge.updater.subscriptions) == 0
    paho_client.loop_stop.assert_called_once()


def test_main_list_types(capsys):
    assert main(["--list-types"]) == 0
    out = capsys.readouterr().out
    assert "RotationSpeed" in out
    assert "OnState" not in out


def test_main_missing_config(tmp_path):
    assert main(["-c", str(tmp_path / "missing.conf")]) == 2


@pytest.mark.parametrize("level", ["loud", "verbose"])
def test_main_rejects_unknown_log_level(tmp_path, level, capsys):
    path = _write_config(tmp_path, _build_min_config())
    with pytest.raises(SystemExit) as exc_info:
        main(["-c", path, "--log-level", level])
    assert exc_info.value.code == 2
    assert "invalid choice" in capsys.readouterr().err


def test_parse_args_log_level_is_case_insensitive():
    assert parse_args(["--log-level", "debug"]).log_level == "DEBUG"


def test_bridge_keeps_report_tasks_until_done():
    cfg = BridgeConfig.model_validate(_build_min_config())
    bridge = HomekitBridge(cfg, adapter=MqttWbConvAdapter(cfg=MqttConnectionConfig(), client=MagicMock()))

    async def scenario():
        bridge._loop = asyncio.get_running_loop()
        bridge._schedule_report(bridge.characteristics[0])
        assert len(bridge._reports) == 1
        await asyncio.gather(*bridge._reports)
        await asyncio.sleep(0)
        assert not bridge._reports

    asyncio.run(scenario())
