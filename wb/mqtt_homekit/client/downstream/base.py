#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from .models import DownstreamWrite, RawDownstreamMessage
from ..bridge.items import Command, ItemKind, State

RawMessageHandler = Callable[[RawDownstreamMessage], None]


class DownstreamAdapter(ABC):
    """
    Base interface for a downstream adapter

    Adapter responsibilities:
      - start(handler): begin receiving messages from a transport and pass
        them to handler as RawDownstreamMessage
      - subscribe(address): receive messages of one more address
      - write(req): send encoded item command to the transport
      - stop(): cleanup
    """

    @property
    @abstractmethod
    def downstream_name(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def start(self, handler: RawMessageHandler) -> None:
        raise NotImplementedError

    @abstractmethod
    def stop(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def subscribe(self, address: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def write(self, req: DownstreamWrite) -> None:
        raise NotImplementedError


class DownstreamCodec(ABC):
    """
    Base interface for raw <-> item state/command conversion per downstream

    decode(): inbound raw payload -> item state
    encode(): outbound item command -> raw payload (None if not encodable)

    Item kind tells the codec how to interpret the raw value
    """

    @property
    @abstractmethod
    def downstream_name(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def decode(self, kind: ItemKind, raw: Any) -> State:
        raise NotImplementedError

    @abstractmethod
    def encode(self, kind: ItemKind, command: Command) -> Optional[bytes]:
        raise NotImplementedError
