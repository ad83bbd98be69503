#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Mapping

from .items import Item, State

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[], None]

_tokens = itertools.count(1)


@dataclass(frozen=True)
class SubscriptionKey:
    item_name: str
    tag: str


@dataclass(frozen=True)
class SubscriptionHandle:
    """
    Returned by AccessoryUpdater.subscribe() and passed back to cancel()

    token identifies one particular registration: after a re-subscribe under
    the same key the old handle no longer matches and cancel() ignores it
    """

    key: SubscriptionKey
    token: int


class _Subscription:
    def __init__(self, item: Item, key: SubscriptionKey, callback: ChangeCallback) -> None:
        self.item = item
        self.handle = SubscriptionHandle(key=key, token=next(_tokens))
        self._callback = callback
        self._active = True

    def on_state_changed(self, item: Item, old_state: State, new_state: State) -> None:
        # Notification may race with detach(), late ones are dropped
        if not self._active:
            return
        try:
            self._callback()
        except Exception:
            logger.exception("Change callback failed for %s/%s", self.handle.key.item_name, self.handle.key.tag)

    def detach(self) -> None:
        self._active = False
        self.item.remove_state_change_listener(self.on_state_changed)


class AccessoryUpdater:
    """
    Keeps HomeKit change callbacks attached to item state changes

    One registration per (item name, characteristic tag):
      - subscribe() with an existing key replaces the previous callback
      - unsubscribe()/cancel() of a missing registration does nothing

    Example:
        updater = AccessoryUpdater()
        handle = updater.subscribe(item, "Hue", lambda: print("hue changed"))
        item.set_state(HSBType(120, 100, 100))   # prints "hue changed"
        updater.unsubscribe(item, "Hue")
    """

    def __init__(self) -> None:
        self._subscriptions: Dict[SubscriptionKey, _Subscription] = {}

    @property
    def subscriptions(self) -> Mapping[SubscriptionKey, SubscriptionHandle]:
        return MappingProxyType({key: sub.handle for key, sub in self._subscriptions.items()})

    def subscribe(self, item: Item, tag: str, callback: ChangeCallback) -> SubscriptionHandle:
        key = SubscriptionKey(item_name=item.name, tag=tag)
        subscription = _Subscription(item, key, callback)
        previous = self._subscriptions.get(key)
        self._subscriptions[key] = subscription
        if previous is not None:
            logger.debug("Replacing subscription %s/%s", key.item_name, key.tag)
            previous.detach()
        item.add_state_change_listener(subscription.on_state_changed)
        logger.debug("Subscribed %s/%s", key.item_name, key.tag)
        return subscription.handle

    def unsubscribe(self, item: Item, tag: str) -> None:
        key = SubscriptionKey(item_name=item.name, tag=tag)
        subscription = self._subscriptions.pop(key, None)
        if subscription is None:
            logger.debug("No subscription %s/%s to remove", key.item_name, key.tag)
            return
        subscription.detach()
        logger.debug("Unsubscribed %s/%s", key.item_name, key.tag)

    def cancel(self, handle: SubscriptionHandle) -> None:
        subscription = self._subscriptions.get(handle.key)
        if subscription is None or subscription.handle.token != handle.token:
            logger.debug("Subscription %s/%s already replaced or removed", handle.key.item_name, handle.key.tag)
            return
        self.unsubscribe(subscription.item, handle.key.tag)

    def unsubscribe_all(self) -> None:
        for key in list(self._subscriptions):
            subscription = self._subscriptions.pop(key, None)
            if subscription is not None:
                subscription.detach()
