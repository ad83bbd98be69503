#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Builders of optional HomeKit characteristics

Each builder composes a characteristic from a tagged item:
  - getter: converts the live item state (converters.py)
  - setter: translates a HomeKit write into an item command (commands.py)
  - subscriber/unsubscriber: item change notifications (updater.py)

Builders keep no state of their own, calling one twice for the same item
gives two independent characteristics
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from enum import IntEnum
from typing import Callable, Optional

from . import commands, converters
from .characteristic import Characteristic, Getter, Setter, Subscriber, Unsubscriber
from .characteristic_types import (
    CharacteristicType,
    CurrentFanStateEnum,
    LockPhysicalControlsEnum,
    RotationDirectionEnum,
    StatusFaultEnum,
    StatusLowBatteryEnum,
    StatusTamperedEnum,
    SwingModeEnum,
    TargetFanStateEnum,
)
from .items import DecimalType, ItemKind, TaggedItem
from .updater import AccessoryUpdater, ChangeCallback, SubscriptionHandle

logger = logging.getLogger(__name__)

# Item configuration key with the duration used while the item has no value
CONFIG_DEFAULT_DURATION = "homekitDefaultDuration"

Builder = Callable[[TaggedItem, AccessoryUpdater], Characteristic]


# ---- supporting closures ----


def _subscriber(tagged_item: TaggedItem, key: CharacteristicType, updater: AccessoryUpdater) -> Subscriber:
    def subscribe(callback: ChangeCallback) -> SubscriptionHandle:
        return updater.subscribe(tagged_item.item, key.tag, callback)

    return subscribe


def _unsubscriber(updater: AccessoryUpdater) -> Unsubscriber:
    return updater.cancel


def _enum_getter(tagged_item: TaggedItem, off_value: IntEnum, on_value: IntEnum, default: IntEnum) -> Getter:
    return lambda: converters.convert_to_enum(tagged_item.state, off_value, on_value, default, tagged_item.name)


def _enum_setter(tagged_item: TaggedItem, off_value: IntEnum, on_value: IntEnum) -> Setter:
    return lambda value: commands.send_command(
        tagged_item, commands.translate_enum(tagged_item, value, off_value, on_value)
    )


def _int_getter(tagged_item: TaggedItem) -> Getter:
    return lambda: converters.convert_to_int(tagged_item.state, tagged_item.name)


def _int_setter(tagged_item: TaggedItem) -> Setter:
    return lambda value: commands.send_command(tagged_item, commands.translate_int(tagged_item, value))


def _float_getter(tagged_item: TaggedItem) -> Getter:
    return lambda: converters.convert_to_float(tagged_item.state)


def _presence_getter(tagged_item: TaggedItem) -> Getter:
    return lambda: converters.convert_to_presence(tagged_item.state)


def _observable(
    key: CharacteristicType,
    tagged_item: TaggedItem,
    updater: AccessoryUpdater,
    default,
    getter: Optional[Getter],
    setter: Optional[Setter] = None,
) -> Characteristic:
    return Characteristic(
        key,
        default,
        getter=getter,
        setter=setter,
        subscriber=_subscriber(tagged_item, key, updater),
        unsubscriber=_unsubscriber(updater),
    )


def _two_valued(
    key: CharacteristicType,
    tagged_item: TaggedItem,
    updater: AccessoryUpdater,
    off_value: IntEnum,
    on_value: IntEnum,
    writable: bool = False,
) -> Characteristic:
    # Off value doubles as the default for every two-valued characteristic
    setter = _enum_setter(tagged_item, off_value, on_value) if writable else None
    return _observable(
        key,
        tagged_item,
        updater,
        off_value,
        _enum_getter(tagged_item, off_value, on_value, off_value),
        setter,
    )


# ---- status ----


def create_status_low_battery(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _two_valued(
        CharacteristicType.BATTERY_LOW_STATUS,
        tagged_item,
        updater,
        StatusLowBatteryEnum.NORMAL,
        StatusLowBatteryEnum.LOW,
    )


def create_status_fault(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _two_valued(
        CharacteristicType.FAULT_STATUS,
        tagged_item,
        updater,
        StatusFaultEnum.NO_FAULT,
        StatusFaultEnum.GENERAL_FAULT,
    )


def create_status_tampered(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _two_valued(
        CharacteristicType.TAMPERED_STATUS,
        tagged_item,
        updater,
        StatusTamperedEnum.NOT_TAMPERED,
        StatusTamperedEnum.TAMPERED,
    )


def create_obstruction_detected(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.OBSTRUCTION_STATUS, tagged_item, updater, False, _presence_getter(tagged_item)
    )


def create_status_active(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(CharacteristicType.ACTIVE_STATUS, tagged_item, updater, False, _presence_getter(tagged_item))


def create_name(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return Characteristic(
        CharacteristicType.NAME,
        "",
        getter=lambda: converters.convert_to_name(tagged_item.state),
    )


def create_hold_position(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    # Write-only in HomeKit
    return Characteristic(
        CharacteristicType.HOLD_POSITION,
        False,
        setter=lambda value: commands.send_command(tagged_item, commands.translate_on_off(tagged_item, value)),
    )


# ---- air quality ----


def create_carbon_monoxide_level(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.CARBON_MONOXIDE_LEVEL, tagged_item, updater, 0.0, _float_getter(tagged_item)
    )


def create_carbon_monoxide_peak_level(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.CARBON_MONOXIDE_PEAK_LEVEL, tagged_item, updater, 0.0, _float_getter(tagged_item)
    )


def create_carbon_dioxide_level(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.CARBON_DIOXIDE_LEVEL, tagged_item, updater, 0.0, _float_getter(tagged_item)
    )


def create_carbon_dioxide_peak_level(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.CARBON_DIOXIDE_PEAK_LEVEL, tagged_item, updater, 0.0, _float_getter(tagged_item)
    )


# ---- window covering ----


def create_current_horizontal_tilt_angle(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.CURRENT_HORIZONTAL_TILT_ANGLE, tagged_item, updater, 0, _int_getter(tagged_item)
    )


def create_current_vertical_tilt_angle(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.CURRENT_VERTICAL_TILT_ANGLE, tagged_item, updater, 0, _int_getter(tagged_item)
    )


def create_target_horizontal_tilt_angle(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.TARGET_HORIZONTAL_TILT_ANGLE,
        tagged_item,
        updater,
        0,
        _int_getter(tagged_item),
        _int_setter(tagged_item),
    )


def create_target_vertical_tilt_angle(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.TARGET_VERTICAL_TILT_ANGLE,
        tagged_item,
        updater,
        0,
        _int_getter(tagged_item),
        _int_setter(tagged_item),
    )


# ---- lightbulb ----


def create_hue(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.HUE,
        tagged_item,
        updater,
        0.0,
        lambda: converters.convert_hue(tagged_item.state),
        lambda hue: commands.send_command(tagged_item, commands.translate_hue(tagged_item, hue)),
    )


def create_brightness(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.BRIGHTNESS,
        tagged_item,
        updater,
        0,
        lambda: converters.convert_brightness(tagged_item.state),
        lambda value: commands.send_command(tagged_item, commands.translate_brightness(tagged_item, value)),
    )


def create_saturation(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.SATURATION,
        tagged_item,
        updater,
        0.0,
        lambda: converters.convert_saturation(tagged_item.state),
        lambda value: commands.send_command(tagged_item, commands.translate_saturation(tagged_item, value)),
    )


def create_color_temperature(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.COLOR_TEMPERATURE,
        tagged_item,
        updater,
        0,
        _int_getter(tagged_item),
        _int_setter(tagged_item),
    )


# ---- fan ----


def create_current_fan_state(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.CURRENT_FAN_STATE,
        tagged_item,
        updater,
        CurrentFanStateEnum.INACTIVE,
        lambda: converters.convert_to_enum_by_code(
            tagged_item.state, CurrentFanStateEnum, CurrentFanStateEnum.INACTIVE
        ),
    )


def create_target_fan_state(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.TARGET_FAN_STATE,
        tagged_item,
        updater,
        TargetFanStateEnum.AUTO,
        lambda: converters.convert_to_enum_by_code(tagged_item.state, TargetFanStateEnum, TargetFanStateEnum.AUTO),
        lambda value: commands.send_command(tagged_item, commands.translate_enum_code(tagged_item, value)),
    )


def create_rotation_direction(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _two_valued(
        CharacteristicType.ROTATION_DIRECTION,
        tagged_item,
        updater,
        RotationDirectionEnum.CLOCKWISE,
        RotationDirectionEnum.COUNTER_CLOCKWISE,
        writable=True,
    )


def create_swing_mode(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _two_valued(
        CharacteristicType.SWING_MODE,
        tagged_item,
        updater,
        SwingModeEnum.SWING_DISABLED,
        SwingModeEnum.SWING_ENABLED,
        writable=True,
    )


def create_lock_physical_controls(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _two_valued(
        CharacteristicType.LOCK_CONTROL,
        tagged_item,
        updater,
        LockPhysicalControlsEnum.CONTROL_LOCK_DISABLED,
        LockPhysicalControlsEnum.CONTROL_LOCK_ENABLED,
        writable=True,
    )


def create_rotation_speed(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.ROTATION_SPEED,
        tagged_item,
        updater,
        0,
        _int_getter(tagged_item),
        _int_setter(tagged_item),
    )


# ---- valve ----


def _default_duration(tagged_item: TaggedItem) -> Optional[int]:
    duration = tagged_item.configuration.get(CONFIG_DEFAULT_DURATION)
    if isinstance(duration, bool) or not isinstance(duration, (int, float, Decimal)):
        return None
    if not math.isfinite(duration):
        logger.warning("Default duration of %s is not a finite number: %r", tagged_item.name, duration)
        return None
    return int(duration)


def create_duration(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    """
    Set duration of a valve

    While the item has no duration (0) the configured default is returned
    and stored into a number item, so the item keeps it after a restart
    """

    def read_duration() -> int:
        value = converters.convert_to_int(tagged_item.state, tagged_item.name)
        if value != 0:
            return value
        duration = _default_duration(tagged_item)
        if duration is None:
            return value
        if tagged_item.kind is ItemKind.NUMBER:
            logger.debug("Duration of %s is not set, use default %d", tagged_item.name, duration)
            tagged_item.item.set_state(DecimalType(duration))
        return duration

    return _observable(
        CharacteristicType.DURATION,
        tagged_item,
        updater,
        0,
        read_duration,
        _int_setter(tagged_item),
    )


def create_remaining_duration(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(CharacteristicType.REMAINING_DURATION, tagged_item, updater, 0, _int_getter(tagged_item))


# ---- audio ----


def create_volume(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    return _observable(
        CharacteristicType.VOLUME,
        tagged_item,
        updater,
        0,
        _int_getter(tagged_item),
        _int_setter(tagged_item),
    )
