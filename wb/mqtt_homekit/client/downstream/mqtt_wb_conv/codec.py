#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import colorsys
import logging
from decimal import Decimal
from typing import Any, Optional

from ..base import DownstreamCodec
from ...bridge.items import (
    Command,
    DecimalType,
    HSBType,
    ItemKind,
    OnOffType,
    OpenClosedType,
    PercentType,
    State,
    StringType,
    UnDefType,
)

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "on", "yes")
_FALSE_VALUES = ("0", "false", "off", "no")


def _payload_text(raw: Any) -> str:
    if isinstance(raw, (bytes, bytearray)):
        return raw.decode("utf-8", errors="replace").strip()
    if raw is None:
        return ""
    return str(raw).strip()


def _parse_bool(text: str) -> Optional[bool]:
    lowered = text.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def _parse_number(text: str) -> Decimal:
    value = Decimal(text)
    if not value.is_finite():
        raise ValueError("not a finite number")
    return value


def _clamp_percent(value: Decimal) -> Decimal:
    return max(Decimal(0), min(Decimal(100), value))


def rgb_to_hsb(text: str) -> HSBType:
    """
    Convert Wiren Board RGB control value to HSB

    Example:
        >>> rgb_to_hsb("255;0;0")
        HSBType(hue=Decimal('0'), saturation=Decimal('100'), brightness=Decimal('100'))
    """
    components = [part.strip() for part in text.split(";")]
    if len(components) != 3:
        raise ValueError(f"RGB must be in Wiren Board format 'R;G;B': {text!r}")
    red, green, blue = (max(0, min(255, int(part))) for part in components)
    hue, saturation, value = colorsys.rgb_to_hsv(red / 255.0, green / 255.0, blue / 255.0)
    return HSBType(round(hue * 360), round(saturation * 100), round(value * 100))


def hsb_to_rgb(color: HSBType) -> str:
    """
    Convert HSB to Wiren Board RGB control value

    Example:
        >>> hsb_to_rgb(HSBType(120, 100, 100))
        '0;255;0'
    """
    red, green, blue = colorsys.hsv_to_rgb(
        float(color.hue) / 360.0,
        float(color.saturation) / 100.0,
        float(color.brightness) / 100.0,
    )
    return f"{round(red * 255)};{round(green * 255)};{round(blue * 255)}"


class MqttWbConvCodec(DownstreamCodec):
    """
    Codec for MQTT Wiren Board convention

    Control values are plain text:
      - switch         "1"/"0"      <-> ON/OFF
      - contact        "1"/"0"       -> OPEN/CLOSED
      - number         "23.5"       <-> DecimalType
      - dimmer, rollershutter "0".."100" <-> PercentType (clamped)
      - color          "R;G;B"      <-> HSBType
      - string         any text      -> StringType
    An empty payload (control removed/not published yet) is UNDEF
    """

    @property
    def downstream_name(self) -> str:
        return "mqtt_wb_conv"

    def decode(self, kind: ItemKind, raw: Any) -> State:
        text = _payload_text(raw)
        if not text:
            return UnDefType.UNDEF
        try:
            return self._decode_text(kind, text)
        except (ArithmeticError, ValueError) as error:
            logger.warning("Cannot decode %r for %s item: %r", text, kind.value, error)
            return UnDefType.UNDEF

    def _decode_text(self, kind: ItemKind, text: str) -> State:
        if kind is ItemKind.SWITCH:
            flag = _parse_bool(text)
            if flag is None:
                raise ValueError("not a switch value")
            return OnOffType.from_bool(flag)

        if kind is ItemKind.CONTACT:
            flag = _parse_bool(text)
            if flag is None:
                raise ValueError("not a contact value")
            return OpenClosedType.OPEN if flag else OpenClosedType.CLOSED

        if kind is ItemKind.NUMBER:
            return DecimalType(_parse_number(text))

        if kind in (ItemKind.DIMMER, ItemKind.ROLLERSHUTTER):
            return PercentType(_clamp_percent(_parse_number(text)))

        if kind is ItemKind.COLOR:
            return rgb_to_hsb(text)

        return StringType(text)

    def encode(self, kind: ItemKind, command: Command) -> Optional[bytes]:
        if isinstance(command, OnOffType):
            return b"1" if command is OnOffType.ON else b"0"

        if isinstance(command, (DecimalType, PercentType)):
            return str(command.value).encode("utf-8")

        if isinstance(command, HSBType):
            if kind is ItemKind.COLOR:
                return hsb_to_rgb(command).encode("utf-8")
            return str(command.brightness).encode("utf-8")

        logger.warning("Command %r cannot be encoded for %s item", command, kind.value)
        return None
