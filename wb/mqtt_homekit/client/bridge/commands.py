#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Command translators for the HomeKit bridge
Handles conversion of characteristic values written by HomeKit into item commands

Translators check the item kind first. A value written to an item of the
wrong kind means a configuration problem: it is logged and no command is
produced (None), the write never fails
"""

import logging
import math
from decimal import Decimal
from enum import IntEnum
from typing import Optional, Union

from .items import (
    ColorChannel,
    ColorChannelCommand,
    Command,
    DecimalType,
    ItemKind,
    OnOffType,
    PercentType,
    TaggedItem,
)

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal]


def _warn_unsupported_kind(tagged_item: TaggedItem, supported: str) -> None:
    logger.warning(
        "Item type %s is not supported for %s. Only %s supported",
        tagged_item.kind.value,
        tagged_item.name,
        supported,
    )


def _to_percent(tagged_item: TaggedItem, value: Number) -> Optional[PercentType]:
    try:
        return PercentType(value)
    except (ValueError, ArithmeticError):
        logger.warning("Value %r is not a valid percent for %s", value, tagged_item.name)
        return None


def _is_finite(tagged_item: TaggedItem, value: Number) -> bool:
    if math.isfinite(value):
        return True
    logger.warning("Value %r is not a finite number for %s", value, tagged_item.name)
    return False


def send_command(tagged_item: TaggedItem, command: Optional[Command]) -> None:
    if command is None:
        return
    tagged_item.send(command)


def translate_int(tagged_item: TaggedItem, value: Number) -> Optional[Command]:
    if not tagged_item.kind.is_numeric:
        _warn_unsupported_kind(tagged_item, "Number type is")
        return None
    if not _is_finite(tagged_item, value):
        return None
    return DecimalType(value)


def translate_enum_code(tagged_item: TaggedItem, value: IntEnum) -> Optional[Command]:
    if not tagged_item.kind.is_numeric:
        _warn_unsupported_kind(tagged_item, "Number type is")
        return None
    return DecimalType(int(value))


def translate_enum(
    tagged_item: TaggedItem,
    value: IntEnum,
    off_value: IntEnum,
    on_value: IntEnum,
) -> Optional[Command]:
    """
    Translate a two-valued enum into a switch or number command

    Switch items get OFF/ON, number items get the enum code.
    Any value other than off_value/on_value cannot be reproduced on the item

    Example:
        # Switch item, swing mode
        translate_enum(tagged, SwingModeEnum.SWING_ENABLED,
                       SwingModeEnum.SWING_DISABLED, SwingModeEnum.SWING_ENABLED)
          -> OnOffType.ON
    """
    if value != off_value and value != on_value:
        logger.warning(
            "Enum value %r is not supported for %s. Only following values are supported: %r, %r",
            value,
            tagged_item.name,
            off_value,
            on_value,
        )
        return None
    if tagged_item.kind is ItemKind.SWITCH:
        return OnOffType.from_bool(value == on_value)
    if tagged_item.kind is ItemKind.NUMBER:
        return DecimalType(int(value))
    _warn_unsupported_kind(tagged_item, "Switch and Number item types are")
    return None


def translate_on_off(tagged_item: TaggedItem, value: bool) -> Optional[Command]:
    if tagged_item.kind is not ItemKind.SWITCH:
        _warn_unsupported_kind(tagged_item, "Switch type is")
        return None
    return OnOffType.from_bool(bool(value))


def translate_hue(tagged_item: TaggedItem, value: Number) -> Optional[Command]:
    if not tagged_item.kind.is_color:
        _warn_unsupported_kind(tagged_item, "Color type is")
        return None
    if not 0 <= value <= 360:
        logger.warning("Hue %r is out of range for %s", value, tagged_item.name)
        return None
    return ColorChannelCommand(ColorChannel.HUE, DecimalType(value))


def translate_saturation(tagged_item: TaggedItem, value: Number) -> Optional[Command]:
    if not tagged_item.kind.is_color:
        _warn_unsupported_kind(tagged_item, "Color type is")
        return None
    if not _is_finite(tagged_item, value):
        return None
    # Color items keep saturation as integer percent
    percent = _to_percent(tagged_item, int(value))
    if percent is None:
        return None
    return ColorChannelCommand(ColorChannel.SATURATION, percent)


def translate_brightness(tagged_item: TaggedItem, value: Number) -> Optional[Command]:
    if not tagged_item.kind.is_dimmer_capable:
        _warn_unsupported_kind(tagged_item, "Color and Dimmer types are")
        return None
    percent = _to_percent(tagged_item, value)
    if percent is None:
        return None
    return ColorChannelCommand(ColorChannel.BRIGHTNESS, percent)
