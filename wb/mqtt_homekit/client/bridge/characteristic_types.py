#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
HomeKit characteristic types and the enumerations their values use
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Optional, Type


class ValueKind(Enum):
    BOOLEAN = "bool"
    INTEGER = "int"
    DOUBLE = "float"
    ENUM = "enum"
    STRING = "string"


# HAP enumerations, values are the codes sent over the wire


class StatusLowBatteryEnum(IntEnum):
    NORMAL = 0
    LOW = 1


class StatusFaultEnum(IntEnum):
    NO_FAULT = 0
    GENERAL_FAULT = 1


class StatusTamperedEnum(IntEnum):
    NOT_TAMPERED = 0
    TAMPERED = 1


class CurrentFanStateEnum(IntEnum):
    INACTIVE = 0
    IDLE = 1
    BLOWING_AIR = 2


class TargetFanStateEnum(IntEnum):
    MANUAL = 0
    AUTO = 1


class RotationDirectionEnum(IntEnum):
    CLOCKWISE = 0
    COUNTER_CLOCKWISE = 1


class SwingModeEnum(IntEnum):
    SWING_DISABLED = 0
    SWING_ENABLED = 1


class LockPhysicalControlsEnum(IntEnum):
    CONTROL_LOCK_DISABLED = 0
    CONTROL_LOCK_ENABLED = 1


class CharacteristicType(Enum):
    """
    Characteristic type identifier

    Each member carries:
      - tag: stable string used in item configuration and as subscription key
      - value_kind: kind of value the characteristic operates on
      - enum_type: enumeration of the value for ValueKind.ENUM characteristics

    Example:
        >>> CharacteristicType.HUE.tag
        'Hue'
        >>> CharacteristicType.from_tag("SwingMode") is CharacteristicType.SWING_MODE
        True
    """

    NAME = ("Name", ValueKind.STRING)
    BATTERY_LOW_STATUS = ("BatteryLowStatus", ValueKind.ENUM, StatusLowBatteryEnum)
    FAULT_STATUS = ("FaultStatus", ValueKind.ENUM, StatusFaultEnum)
    TAMPERED_STATUS = ("TamperedStatus", ValueKind.ENUM, StatusTamperedEnum)
    ACTIVE_STATUS = ("ActiveStatus", ValueKind.BOOLEAN)
    OBSTRUCTION_STATUS = ("ObstructionStatus", ValueKind.BOOLEAN)
    CARBON_MONOXIDE_LEVEL = ("CarbonMonoxideLevel", ValueKind.DOUBLE)
    CARBON_MONOXIDE_PEAK_LEVEL = ("CarbonMonoxidePeakLevel", ValueKind.DOUBLE)
    CARBON_DIOXIDE_LEVEL = ("CarbonDioxideLevel", ValueKind.DOUBLE)
    CARBON_DIOXIDE_PEAK_LEVEL = ("CarbonDioxidePeakLevel", ValueKind.DOUBLE)
    HOLD_POSITION = ("HoldPosition", ValueKind.BOOLEAN)
    CURRENT_HORIZONTAL_TILT_ANGLE = ("CurrentHorizontalTiltAngle", ValueKind.INTEGER)
    CURRENT_VERTICAL_TILT_ANGLE = ("CurrentVerticalTiltAngle", ValueKind.INTEGER)
    TARGET_HORIZONTAL_TILT_ANGLE = ("TargetHorizontalTiltAngle", ValueKind.INTEGER)
    TARGET_VERTICAL_TILT_ANGLE = ("TargetVerticalTiltAngle", ValueKind.INTEGER)
    HUE = ("Hue", ValueKind.DOUBLE)
    BRIGHTNESS = ("Brightness", ValueKind.INTEGER)
    SATURATION = ("Saturation", ValueKind.DOUBLE)
    COLOR_TEMPERATURE = ("ColorTemperature", ValueKind.INTEGER)
    CURRENT_FAN_STATE = ("CurrentFanState", ValueKind.ENUM, CurrentFanStateEnum)
    TARGET_FAN_STATE = ("TargetFanState", ValueKind.ENUM, TargetFanStateEnum)
    ROTATION_DIRECTION = ("RotationDirection", ValueKind.ENUM, RotationDirectionEnum)
    ROTATION_SPEED = ("RotationSpeed", ValueKind.INTEGER)
    SWING_MODE = ("SwingMode", ValueKind.ENUM, SwingModeEnum)
    LOCK_CONTROL = ("LockControl", ValueKind.ENUM, LockPhysicalControlsEnum)
    DURATION = ("Duration", ValueKind.INTEGER)
    REMAINING_DURATION = ("RemainingDuration", ValueKind.INTEGER)
    VOLUME = ("Volume", ValueKind.INTEGER)
    # Legacy tag, kept so that old item configurations keep working
    OLD_BATTERY_LOW_STATUS = ("homekit:BatteryLowStatus", ValueKind.ENUM, StatusLowBatteryEnum)

    # Mandatory accessory characteristics, handled by the accessory itself
    ON_STATE = ("OnState", ValueKind.BOOLEAN)
    CURRENT_TEMPERATURE = ("CurrentTemperature", ValueKind.DOUBLE)

    def __init__(self, tag: str, value_kind: ValueKind, enum_type: Optional[Type[IntEnum]] = None) -> None:
        self.tag = tag
        self.value_kind = value_kind
        self.enum_type = enum_type

    @classmethod
    def from_tag(cls, tag: str) -> "CharacteristicType":
        for member in cls:
            if member.tag == tag:
                return member
        raise ValueError(f"Unknown characteristic tag: {tag!r}")

    def __str__(self) -> str:
        return self.tag
