"""
mqtt_topic.py - Wiren Board control topic handling

A control can be referenced in two forms:
- short format (device/control)
- full format (/devices/device/controls/control)

Commands to a control are published to its full topic with "/on" suffix.

Typical usage:
    topic = MQTTTopic("wb-mrgbw-d_21/RGB")
    print(topic.full)     # /devices/wb-mrgbw-d_21/controls/RGB
    print(topic.command)  # /devices/wb-mrgbw-d_21/controls/RGB/on
"""

from typing import Optional

from .constants import WB_COMMAND_SUFFIX, WB_CONTROLS_SEGMENT, WB_DEVICES_PREFIX


class MQTTTopic:
    """Wiren Board control topic

    Attributes:
        original (str): topic string the object was built from
        device (str): device name, None if the topic is invalid
        control (str): control name, None if the topic is invalid
        is_valid (bool): whether the topic was parsed

    Example:
        >>> MQTTTopic("/devices/wb-mr6cv3_127/controls/K1").short
        'wb-mr6cv3_127/K1'
        >>> MQTTTopic("wb-mr6cv3_127/K1/on").is_valid
        False
    """

    def __init__(self, topic_str: str) -> None:
        self.original = topic_str
        self.device: Optional[str] = None
        self.control: Optional[str] = None
        self.is_valid = False
        self._parse(topic_str.strip())

    def _parse(self, topic_str: str) -> None:
        if topic_str.startswith("/"):
            parts = topic_str.strip("/").split("/")
            if len(parts) == 4 and parts[0] == WB_DEVICES_PREFIX and parts[2] == WB_CONTROLS_SEGMENT:
                self.device, self.control = parts[1], parts[3]
        else:
            parts = topic_str.split("/")
            if len(parts) == 2:
                self.device, self.control = parts
        self.is_valid = bool(self.device) and bool(self.control)

    @property
    def short(self) -> str:
        if not self.is_valid:
            return self.original
        return f"{self.device}/{self.control}"

    @property
    def full(self) -> str:
        if not self.is_valid:
            return self.original
        return f"/{WB_DEVICES_PREFIX}/{self.device}/{WB_CONTROLS_SEGMENT}/{self.control}"

    @property
    def command(self) -> str:
        return f"{self.full}/{WB_COMMAND_SUFFIX}"

    def __str__(self) -> str:
        if not self.is_valid:
            return f"Invalid MQTT Topic: {self.original}"
        return self.short

    def __repr__(self) -> str:
        if not self.is_valid:
            return f"{self.__class__.__name__}('{self.original}') [invalid]"
        return f"{self.__class__.__name__}(device='{self.device}', control='{self.control}')"
