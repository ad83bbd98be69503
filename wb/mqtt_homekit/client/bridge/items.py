#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Item model: typed states, commands and the items carrying them

An item is a single control of a home-automation device (relay, dimmer,
RGB strip, sensor value...). It has exactly one current state and accepts
commands. Characteristics read the state and issue commands through a
TaggedItem, which also knows which characteristic the item backs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, List, Mapping, Optional, Union

if TYPE_CHECKING:
    from .characteristic_types import CharacteristicType

logger = logging.getLogger(__name__)


class OnOffType(Enum):
    ON = "ON"
    OFF = "OFF"

    @classmethod
    def from_bool(cls, value: bool) -> "OnOffType":
        return cls.ON if value else cls.OFF

    def __str__(self) -> str:
        return self.value


class OpenClosedType(Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"

    def __str__(self) -> str:
        return self.value


class UnDefType(Enum):
    """Item state is unknown (never received or explicitly undefined)"""

    UNDEF = "UNDEF"
    NULL = "NULL"

    def __str__(self) -> str:
        return self.value


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        # str() keeps 2.9 as 2.9 instead of its binary expansion
        result = Decimal(str(value))
    else:
        result = Decimal(value)
    # NaN/Infinity have no integer value and NaN never equals itself
    if not result.is_finite():
        raise ValueError(f"Numeric state must be finite, got {result}")
    return result


@dataclass(frozen=True)
class DecimalType:
    value: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _to_decimal(self.value))

    def int_value(self) -> int:
        # int() on Decimal truncates toward zero
        return int(self.value)

    def float_value(self) -> float:
        return float(self.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class PercentType:
    value: Decimal

    def __post_init__(self) -> None:
        value = _to_decimal(self.value)
        if not Decimal(0) <= value <= Decimal(100):
            raise ValueError(f"Percent value must be within 0..100, got {value}")
        object.__setattr__(self, "value", value)

    def int_value(self) -> int:
        return int(self.value)

    def float_value(self) -> float:
        return float(self.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class HSBType:
    """
    Composite color state

    hue: 0..360 degrees, saturation and brightness: 0..100 percent

    Example:
        >>> str(HSBType(120, 50, 100))
        '120,50,100'
    """

    hue: Decimal
    saturation: Decimal
    brightness: Decimal

    def __post_init__(self) -> None:
        hue = _to_decimal(self.hue)
        saturation = _to_decimal(self.saturation)
        brightness = _to_decimal(self.brightness)
        if not Decimal(0) <= hue <= Decimal(360):
            raise ValueError(f"Hue must be within 0..360, got {hue}")
        for name, value in (("saturation", saturation), ("brightness", brightness)):
            if not Decimal(0) <= value <= Decimal(100):
                raise ValueError(f"Color {name} must be within 0..100, got {value}")
        object.__setattr__(self, "hue", hue)
        object.__setattr__(self, "saturation", saturation)
        object.__setattr__(self, "brightness", brightness)

    def __str__(self) -> str:
        return f"{self.hue},{self.saturation},{self.brightness}"


@dataclass(frozen=True)
class StringType:
    value: str

    def __str__(self) -> str:
        return self.value


State = Union[OnOffType, OpenClosedType, DecimalType, PercentType, HSBType, StringType, UnDefType]


class ColorChannel(Enum):
    """Single channel of a color item addressed by a proxy command"""

    HUE = "hue"
    SATURATION = "saturation"
    BRIGHTNESS = "brightness"


@dataclass(frozen=True)
class ColorChannelCommand:
    """
    Change one channel of a color/dimmer item, keeping the others

    Resolved into a concrete PercentType/HSBType by TaggedItem.send()
    """

    channel: ColorChannel
    value: Union[DecimalType, PercentType]


Command = Union[OnOffType, DecimalType, PercentType, HSBType, ColorChannelCommand]

StateChangeListener = Callable[["Item", State, State], None]
CommandSink = Callable[["Item", Command], None]


class ItemKind(Enum):
    SWITCH = "switch"
    CONTACT = "contact"
    NUMBER = "number"
    DIMMER = "dimmer"
    COLOR = "color"
    STRING = "string"
    ROLLERSHUTTER = "rollershutter"

    @property
    def is_dimmer_capable(self) -> bool:
        return self in (ItemKind.DIMMER, ItemKind.COLOR)

    @property
    def is_color(self) -> bool:
        return self is ItemKind.COLOR

    @property
    def is_numeric(self) -> bool:
        return self is ItemKind.NUMBER


class Item:
    """
    In-memory item with a live state and a state-change listener bus

    - set_state() replaces the state and notifies listeners if it changed
    - send() forwards a command to the command sink (e.g. MQTT router),
      it does not touch the state: the new state arrives back from the device
    """

    def __init__(
        self,
        name: str,
        kind: ItemKind,
        state: State = UnDefType.NULL,
        label: Optional[str] = None,
        command_sink: Optional[CommandSink] = None,
    ) -> None:
        self.name = name
        self.kind = kind
        self.label = label
        self.command_sink = command_sink
        self._state: State = state
        self._listeners: List[StateChangeListener] = []

    @property
    def state(self) -> State:
        return self._state

    def set_state(self, state: State) -> None:
        old_state = self._state
        self._state = state
        if old_state == state:
            return
        logger.debug("Item %s changed: %s -> %s", self.name, old_state, state)
        # Iterate over a copy: listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            try:
                listener(self, old_state, state)
            except Exception:
                logger.exception("State change listener failed for item %s", self.name)

    def send(self, command: Command) -> None:
        if self.command_sink is None:
            logger.warning("Item %s has no command sink, command %s dropped", self.name, command)
            return
        logger.debug("Item %s command: %s", self.name, command)
        self.command_sink(self, command)

    def add_state_change_listener(self, listener: StateChangeListener) -> None:
        self._listeners.append(listener)

    def remove_state_change_listener(self, listener: StateChangeListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, kind={self.kind.value}, state={self._state})"


# Base color used when a color channel command hits an item without a color state
_BASE_COLOR = HSBType(0, 0, 100)


@dataclass(frozen=True)
class TaggedItem:
    """
    Item annotated with the characteristic it backs

    Fields:
      - item: live item (state is read through it, commands sent to it)
      - characteristic_type: role of the item inside the accessory
      - accessory_type: accessory the item belongs to, for diagnostics
      - configuration: free-form item configuration, e.g.
          {"homekitDefaultDuration": 30}
    """

    item: Item
    characteristic_type: Optional["CharacteristicType"] = None
    accessory_type: str = ""
    configuration: Mapping[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.item.name

    @property
    def kind(self) -> ItemKind:
        return self.item.kind

    @property
    def state(self) -> State:
        return self.item.state

    def send(self, command: Command) -> None:
        if isinstance(command, ColorChannelCommand):
            resolved = self._resolve_channel_command(command)
            if resolved is None:
                return
            command = resolved
        self.item.send(command)

    def _resolve_channel_command(self, command: ColorChannelCommand) -> Optional[Command]:
        value = command.value.value
        if self.kind is ItemKind.DIMMER and command.channel is ColorChannel.BRIGHTNESS:
            return PercentType(value)
        if self.kind is not ItemKind.COLOR:
            logger.warning(
                "Color channel %s is not supported by %s item %s",
                command.channel.value,
                self.kind.value,
                self.name,
            )
            return None

        current = self.state
        if isinstance(current, HSBType):
            base = current
        elif isinstance(current, PercentType):
            base = HSBType(_BASE_COLOR.hue, _BASE_COLOR.saturation, current.value)
        else:
            base = _BASE_COLOR

        if command.channel is ColorChannel.HUE:
            return HSBType(value, base.saturation, base.brightness)
        if command.channel is ColorChannel.SATURATION:
            return HSBType(base.hue, value, base.brightness)
        return HSBType(base.hue, base.saturation, value)
