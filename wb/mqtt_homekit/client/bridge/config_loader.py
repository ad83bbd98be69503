#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, field_validator

from .items import ItemKind

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class MqttSettings(BaseModel):
    host: str = "localhost"
    port: int = 1883
    client_id: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    keepalive: int = 60
    qos: int = 0
    retain: bool = False


class ItemConfig(BaseModel):
    """
    One Wiren Board control exposed as an item

    Example (input JSON):
        {
          "name": "Valve_Duration",
          "kind": "number",
          "topic": "wb-mao4_20/Channel 1",
          "accessory_type": "Valve",
          "characteristics": ["Duration"],
          "configuration": {"homekitDefaultDuration": 30}
        }
    """

    name: str
    kind: ItemKind
    topic: str
    label: Optional[str] = None
    accessory_type: str = ""
    characteristics: List[str] = []
    configuration: Dict[str, Any] = {}


class BridgeConfig(BaseModel):
    log_level: str = "INFO"  # Possible values: "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"
    mqtt: MqttSettings = MqttSettings()
    items: List[ItemConfig] = []

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("items")
    @classmethod
    def _check_unique_names(cls, items: List[ItemConfig]) -> List[ItemConfig]:
        seen = set()
        for item in items:
            if item.name in seen:
                raise ValueError(f"Duplicate item name: {item.name}")
            seen.add(item.name)
        return items


def load_config(path: str) -> BridgeConfig:
    """
    Load JSON config from disk and validate it

    Output:
      BridgeConfig, pydantic ValidationError is raised on invalid content

    Example:
      cfg = load_config("/etc/wb-mqtt-homekit.conf")
      for item_cfg in cfg.items: ...
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return BridgeConfig.model_validate(data)
