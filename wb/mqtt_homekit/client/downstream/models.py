#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class RawDownstreamMessage:
    """
    Raw message produced by a downstream adapter, before codec conversion

    Fields:
      - downstream_name: downstream id (e.g. "mqtt_wb_conv")
      - address: transport-level address (e.g. MQTT topic of a control)
      - payload: raw payload (bytes/str depending on adapter)
      - meta: optional metadata (e.g. qos/retain for MQTT)
    """

    downstream_name: str
    address: str
    payload: Any
    meta: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class DownstreamWrite:
    """
    Request to write an encoded item command to a downstream address

    Example:
        DownstreamWrite(
            downstream_name="mqtt_wb_conv",
            address="/devices/wb-mr6c_1/controls/K1/on",
            payload=b"1",
        )
    """

    downstream_name: str
    address: str
    payload: Any
    meta: Optional[Mapping[str, Any]] = None
