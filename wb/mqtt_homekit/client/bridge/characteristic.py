#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from .characteristic_types import CharacteristicType, ValueKind
from .updater import ChangeCallback, SubscriptionHandle

logger = logging.getLogger(__name__)

Getter = Callable[[], Any]
Setter = Callable[[Any], None]
Subscriber = Callable[[ChangeCallback], SubscriptionHandle]
Unsubscriber = Callable[[SubscriptionHandle], None]

# HAP permission strings
PERM_READ = "pr"
PERM_WRITE = "pw"
PERM_EVENTS = "ev"


class Characteristic:
    """
    HomeKit characteristic backed by closures over an item

    Shape seen by the protocol layer:
      - await read()          -> current value (pr)
      - await write(value)    -> sends a command to the item (pw)
      - subscribe(callback)   -> callback() on every item change (ev)
      - unsubscribe()

    Nothing raised by the closures reaches the caller: a failing read
    returns the default value, a failing write is dropped, both logged.
    """

    def __init__(
        self,
        characteristic_type: CharacteristicType,
        default: Any,
        getter: Optional[Getter] = None,
        setter: Optional[Setter] = None,
        subscriber: Optional[Subscriber] = None,
        unsubscriber: Optional[Unsubscriber] = None,
    ) -> None:
        self.characteristic_type = characteristic_type
        self.default = default
        self._getter = getter
        self._setter = setter
        self._subscriber = subscriber
        self._unsubscriber = unsubscriber
        self._handle: Optional[SubscriptionHandle] = None

    @property
    def tag(self) -> str:
        return self.characteristic_type.tag

    @property
    def value_kind(self) -> ValueKind:
        return self.characteristic_type.value_kind

    @property
    def readable(self) -> bool:
        return self._getter is not None

    @property
    def writable(self) -> bool:
        return self._setter is not None

    @property
    def notifiable(self) -> bool:
        return self._subscriber is not None

    @property
    def perms(self) -> List[str]:
        perms = []
        if self.readable:
            perms.append(PERM_READ)
        if self.writable:
            perms.append(PERM_WRITE)
        if self.notifiable:
            perms.append(PERM_EVENTS)
        return perms

    async def read(self) -> Any:
        if self._getter is None:
            return self.default
        try:
            return self._getter()
        except Exception:
            logger.exception("Failed to read %s, return default %r", self.tag, self.default)
            return self.default

    async def write(self, value: Any) -> None:
        if self._setter is None:
            logger.warning("Characteristic %s is read-only, value %r ignored", self.tag, value)
            return
        try:
            self._setter(self._normalize(value))
        except Exception:
            logger.exception("Failed to write %r to %s", value, self.tag)

    def subscribe(self, callback: ChangeCallback) -> None:
        if self._subscriber is None:
            logger.debug("Characteristic %s does not support notifications", self.tag)
            return
        self._handle = self._subscriber(callback)

    def unsubscribe(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None or self._unsubscriber is None:
            return
        self._unsubscriber(handle)

    def _normalize(self, value: Any) -> Any:
        # HomeKit controllers send enum values as plain integer codes
        enum_type = self.characteristic_type.enum_type
        if enum_type is not None and not isinstance(value, enum_type):
            return enum_type(value)
        return value

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.tag}, perms={self.perms})"
