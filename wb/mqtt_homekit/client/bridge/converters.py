#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
State converters for the HomeKit bridge
Handles conversion of item states into characteristic values

Every converter is total: an unexpected state gives the characteristic
default value and a log record, never an exception
"""

import logging
from decimal import Decimal
from enum import IntEnum
from typing import Optional, Type, TypeVar

from .items import (
    DecimalType,
    HSBType,
    OnOffType,
    OpenClosedType,
    PercentType,
    State,
    UnDefType,
)

logger = logging.getLogger(__name__)

E = TypeVar("E")
C = TypeVar("C", bound=IntEnum)


def as_decimal(state: State) -> Optional[Decimal]:
    """
    Return numeric view of a state, or None if the state is not numeric

    Examples:
        >>> as_decimal(DecimalType("2.5"))
        Decimal('2.5')
        >>> as_decimal(PercentType(40))
        Decimal('40')
        >>> as_decimal(OnOffType.ON) is None
        True
    """
    if isinstance(state, (DecimalType, PercentType)):
        return state.value
    return None


def convert_to_enum(state: State, off_value: E, on_value: E, default: E, item_name: str = "") -> E:
    """
    Convert item state to one of two enum values

    Rules:
      - ON/OFF: OFF -> off_value, ON -> on_value
      - OPEN/CLOSED: CLOSED -> off_value, OPEN -> on_value
      - number: 0 -> off_value, anything else -> on_value
      - undefined: default
      - other: default (logged)

    Example:
        >>> convert_to_enum(DecimalType(0), "normal", "low", "normal")
        'normal'
        >>> convert_to_enum(OpenClosedType.OPEN, "normal", "low", "normal")
        'low'
    """
    if isinstance(state, OnOffType):
        return off_value if state is OnOffType.OFF else on_value
    if isinstance(state, OpenClosedType):
        return off_value if state is OpenClosedType.CLOSED else on_value
    if isinstance(state, (DecimalType, PercentType)):
        return off_value if state.int_value() == 0 else on_value
    if isinstance(state, UnDefType):
        return default
    logger.warning(
        "Item state %s is not supported for %s. Only OnOff, OpenClosed and Decimal (0/1) are supported",
        state,
        item_name,
    )
    return default


def convert_to_int(state: State, item_name: str = "") -> int:
    """
    Convert percent/decimal item state to int, fractions are truncated

    Example:
        >>> convert_to_int(DecimalType("2.9"))
        2
        >>> convert_to_int(DecimalType("-2.9"))
        -2
        >>> convert_to_int(UnDefType.UNDEF)
        0
    """
    if isinstance(state, (PercentType, DecimalType)):
        return state.int_value()
    if isinstance(state, UnDefType):
        logger.debug("Item state %s is undefined for %s, set 0", state, item_name)
        return 0
    logger.warning(
        "Item state %s is not supported for %s. Only Percent and Decimal are supported, set 0",
        state,
        item_name,
    )
    return 0


def convert_to_float(state: State) -> float:
    value = as_decimal(state)
    if value is None:
        logger.debug("Item state %s is not a number, set 0.0", state)
        return 0.0
    return float(value)


def convert_to_enum_by_code(state: State, enum_type: Type[C], default: C) -> C:
    """
    Convert numeric item state to the enum member with the same code

    Unknown codes and non-numeric states give default

    Example:
        >>> convert_to_enum_by_code(DecimalType(2), CurrentFanStateEnum, CurrentFanStateEnum.INACTIVE)
        <CurrentFanStateEnum.BLOWING_AIR: 2>
    """
    value = as_decimal(state)
    if value is None:
        return default
    try:
        return enum_type(int(value))
    except ValueError:
        logger.debug("Code %s is not a valid %s, set %s", value, enum_type.__name__, default.name)
        return default


def convert_hue(state: State) -> float:
    if isinstance(state, HSBType):
        return float(state.hue)
    return 0.0


def convert_saturation(state: State) -> float:
    if isinstance(state, HSBType):
        return float(state.saturation)
    if isinstance(state, PercentType):
        return float(state.value)
    return 0.0


def convert_brightness(state: State) -> int:
    """Brightness of a color item or level of a dimmer item, truncated"""
    if isinstance(state, HSBType):
        return int(state.brightness)
    if isinstance(state, PercentType):
        return state.int_value()
    return 0


def convert_to_presence(state: State) -> bool:
    """True for ON and OPEN states only (obstruction/active status)"""
    return state is OnOffType.ON or state is OpenClosedType.OPEN


def convert_to_name(state: State) -> str:
    if isinstance(state, UnDefType):
        return ""
    return str(state)
