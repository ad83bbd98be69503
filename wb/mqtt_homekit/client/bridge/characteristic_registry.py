#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, List, Mapping, Optional

from . import builders
from .builders import Builder
from .characteristic import Characteristic
from .characteristic_types import CharacteristicType, ValueKind
from .errors import UnsupportedCharacteristicError
from .items import TaggedItem
from .updater import AccessoryUpdater

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CharacteristicBuilder:
    """
    Registry entry: builder function plus the value kind it produces

    Example:
        CharacteristicBuilder(ValueKind.DOUBLE, builders.create_hue)
    """

    value_kind: ValueKind
    build: Builder


class CharacteristicRegistry:
    """
    Immutable mapping CharacteristicType -> CharacteristicBuilder

    Adding a characteristic kind means adding one builder and one entry here.

    Example usage:
        registry = CharacteristicRegistry({CharacteristicType.HUE: CharacteristicBuilder(...)})
        hue = registry.create_characteristic(tagged_item, updater)
        registry.resolve(CharacteristicType.ON_STATE)  # UnsupportedCharacteristicError
    """

    def __init__(self, builders: Mapping[CharacteristicType, CharacteristicBuilder]) -> None:
        for characteristic_type, builder in builders.items():
            if builder.value_kind is not characteristic_type.value_kind:
                raise ValueError(
                    f"Builder for {characteristic_type.name} produces {builder.value_kind.name}, "
                    f"expected {characteristic_type.value_kind.name}"
                )
        self._builders: Mapping[CharacteristicType, CharacteristicBuilder] = MappingProxyType(dict(builders))

    @property
    def supported_types(self) -> List[CharacteristicType]:
        return list(self._builders)

    def __contains__(self, characteristic_type: Any) -> bool:
        return characteristic_type in self._builders

    def __len__(self) -> int:
        return len(self._builders)

    def resolve(self, characteristic_type: Any, accessory_type: str = "") -> CharacteristicBuilder:
        builder = self._builders.get(characteristic_type)
        if builder is None:
            raise UnsupportedCharacteristicError(characteristic_type, accessory_type)
        return builder

    def create_characteristic(
        self,
        tagged_item: TaggedItem,
        updater: AccessoryUpdater,
        characteristic_type: Optional[CharacteristicType] = None,
    ) -> Characteristic:
        """
        Build characteristic of the given type (item's own type by default) for a tagged item

        Raises UnsupportedCharacteristicError when the type has no builder
        """
        if characteristic_type is None:
            characteristic_type = tagged_item.characteristic_type
        logger.debug("Create characteristic %s for item %s", characteristic_type, tagged_item.name)
        try:
            builder = self.resolve(characteristic_type, tagged_item.accessory_type)
        except UnsupportedCharacteristicError:
            logger.warning(
                "Unsupported optional characteristic. Accessory type %s, characteristic type %s",
                tagged_item.accessory_type,
                characteristic_type,
            )
            raise
        return builder.build(tagged_item, updater)


_T = CharacteristicType
_K = ValueKind

# Optional characteristics an accessory may get from its items
DEFAULT_REGISTRY = CharacteristicRegistry(
    {
        _T.NAME: CharacteristicBuilder(_K.STRING, builders.create_name),
        _T.BATTERY_LOW_STATUS: CharacteristicBuilder(_K.ENUM, builders.create_status_low_battery),
        _T.FAULT_STATUS: CharacteristicBuilder(_K.ENUM, builders.create_status_fault),
        _T.TAMPERED_STATUS: CharacteristicBuilder(_K.ENUM, builders.create_status_tampered),
        _T.ACTIVE_STATUS: CharacteristicBuilder(_K.BOOLEAN, builders.create_status_active),
        _T.CARBON_MONOXIDE_LEVEL: CharacteristicBuilder(_K.DOUBLE, builders.create_carbon_monoxide_level),
        _T.CARBON_MONOXIDE_PEAK_LEVEL: CharacteristicBuilder(_K.DOUBLE, builders.create_carbon_monoxide_peak_level),
        _T.CARBON_DIOXIDE_LEVEL: CharacteristicBuilder(_K.DOUBLE, builders.create_carbon_dioxide_level),
        _T.CARBON_DIOXIDE_PEAK_LEVEL: CharacteristicBuilder(_K.DOUBLE, builders.create_carbon_dioxide_peak_level),
        _T.HOLD_POSITION: CharacteristicBuilder(_K.BOOLEAN, builders.create_hold_position),
        _T.OBSTRUCTION_STATUS: CharacteristicBuilder(_K.BOOLEAN, builders.create_obstruction_detected),
        _T.CURRENT_HORIZONTAL_TILT_ANGLE: CharacteristicBuilder(
            _K.INTEGER, builders.create_current_horizontal_tilt_angle
        ),
        _T.CURRENT_VERTICAL_TILT_ANGLE: CharacteristicBuilder(_K.INTEGER, builders.create_current_vertical_tilt_angle),
        _T.TARGET_HORIZONTAL_TILT_ANGLE: CharacteristicBuilder(
            _K.INTEGER, builders.create_target_horizontal_tilt_angle
        ),
        _T.TARGET_VERTICAL_TILT_ANGLE: CharacteristicBuilder(_K.INTEGER, builders.create_target_vertical_tilt_angle),
        _T.HUE: CharacteristicBuilder(_K.DOUBLE, builders.create_hue),
        _T.BRIGHTNESS: CharacteristicBuilder(_K.INTEGER, builders.create_brightness),
        _T.SATURATION: CharacteristicBuilder(_K.DOUBLE, builders.create_saturation),
        _T.COLOR_TEMPERATURE: CharacteristicBuilder(_K.INTEGER, builders.create_color_temperature),
        _T.CURRENT_FAN_STATE: CharacteristicBuilder(_K.ENUM, builders.create_current_fan_state),
        _T.TARGET_FAN_STATE: CharacteristicBuilder(_K.ENUM, builders.create_target_fan_state),
        _T.ROTATION_DIRECTION: CharacteristicBuilder(_K.ENUM, builders.create_rotation_direction),
        _T.ROTATION_SPEED: CharacteristicBuilder(_K.INTEGER, builders.create_rotation_speed),
        _T.SWING_MODE: CharacteristicBuilder(_K.ENUM, builders.create_swing_mode),
        _T.LOCK_CONTROL: CharacteristicBuilder(_K.ENUM, builders.create_lock_physical_controls),
        _T.DURATION: CharacteristicBuilder(_K.INTEGER, builders.create_duration),
        _T.REMAINING_DURATION: CharacteristicBuilder(_K.INTEGER, builders.create_remaining_duration),
        _T.VOLUME: CharacteristicBuilder(_K.INTEGER, builders.create_volume),
        # Legacy tag
        _T.OLD_BATTERY_LOW_STATUS: CharacteristicBuilder(_K.ENUM, builders.create_status_low_battery),
    }
)


def create_characteristic(tagged_item: TaggedItem, updater: AccessoryUpdater) -> Characteristic:
    """Build the optional characteristic the tagged item is configured for"""
    return DEFAULT_REGISTRY.create_characteristic(tagged_item, updater)
