#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from typing import Any


class HomekitError(Exception):
    """Base error of the HomeKit bridge"""


class UnsupportedCharacteristicError(HomekitError):
    """No builder is registered for the requested characteristic type"""

    def __init__(self, characteristic_type: Any, accessory_type: str = "") -> None:
        self.characteristic_type = characteristic_type
        self.accessory_type = accessory_type
        super().__init__(
            f"Unsupported optional characteristic. Accessory type {accessory_type!r}, "
            f"characteristic type {characteristic_type!s}"
        )
