"""Notification source contract and an in-process reference implementation.

A collector only needs two things from whatever it observes: a way to
register a handler for a named channel, and a handle that revokes that
registration. ``EventBus`` provides both for plain Python programs and tests.

Usage:
    bus = EventBus()
    bus.declare("ticks")

    subscription = bus.subscribe("ticks", print)
    bus.publish_nowait("ticks", {"price": 10})
    subscription.release()
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
import threading
from typing import Any, Protocol, runtime_checkable

from .exceptions import InvalidChannelError

LOGGER = logging.getLogger(__name__)

Handler = Callable[[Any], None]


@runtime_checkable
class SubscriptionHandle(Protocol):
    """Revocable registration returned by a source."""

    def release(self) -> None:
        """Revoke the registration. Must be idempotent."""


@runtime_checkable
class NotificationSource(Protocol):
    """Anything a collector can attach to."""

    def subscribe(self, channel: str, handler: Handler) -> SubscriptionHandle:
        """Register ``handler`` for every notification on ``channel``."""


class Subscription:
    """Registration of one handler on one ``EventBus`` channel."""

    def __init__(self, bus: EventBus, channel: str, handler: Handler) -> None:
        self.channel = channel
        self.handler = handler
        self._bus = bus
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def release(self) -> None:
        if not self._active:
            return
        self._active = False
        self._bus._remove(self)

    def __repr__(self) -> str:
        state = "active" if self._active else "released"
        return f"<Subscription channel={self.channel!r} {state}>"


class EventBus:
    """Small in-process notification source with named channels.

    Channels must be declared before they can be subscribed to or published
    on. Any number of subscriptions may share a channel; each one receives
    every notification in registration order.
    """

    def __init__(self, channels: list[str] | tuple[str, ...] = ()) -> None:
        self._subscriptions: dict[str, list[Subscription]] = {}
        self._registry_lock = threading.Lock()
        self._publish_lock = asyncio.Lock()
        for channel in channels:
            self.declare(channel)

    def declare(self, channel: str) -> None:
        """Expose ``channel`` on this bus. Declaring twice is harmless."""
        if not isinstance(channel, str) or not channel.strip():
            raise InvalidChannelError("Channel name must be a non-empty string.")
        with self._registry_lock:
            self._subscriptions.setdefault(channel, [])

    def has_channel(self, channel: str) -> bool:
        return channel in self._subscriptions

    def channels(self) -> list[str]:
        return list(self._subscriptions)

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscriptions.get(channel, []))

    def subscribe(self, channel: str, handler: Handler) -> Subscription:
        """Register ``handler`` on ``channel`` and return its subscription.

        Args:
            channel: A previously declared channel name.
            handler: Callable invoked with each notification payload.

        Raises:
            InvalidChannelError: If ``channel`` was never declared.
        """
        if not callable(handler):
            raise TypeError("handler must be callable")
        with self._registry_lock:
            if channel not in self._subscriptions:
                raise InvalidChannelError(f"Unknown channel {channel!r}.")
            subscription = Subscription(self, channel, handler)
            self._subscriptions[channel].append(subscription)
        LOGGER.debug(f"Subscribed to channel: {channel}")
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._registry_lock:
            items = self._subscriptions.get(subscription.channel, [])
            self._subscriptions[subscription.channel] = [
                s for s in items if s is not subscription
            ]
        LOGGER.debug(f"Unsubscribed from channel: {subscription.channel}")

    def _snapshot(self, channel: str) -> list[Subscription]:
        with self._registry_lock:
            if channel not in self._subscriptions:
                raise InvalidChannelError(f"Unknown channel {channel!r}.")
            return list(self._subscriptions[channel])

    def _deliver(self, channel: str, payload: Any) -> int:
        delivered = 0
        for subscription in self._snapshot(channel):
            # Released while an earlier handler ran.
            if not subscription.active:
                continue
            try:
                subscription.handler(payload)
            except Exception as exc:
                LOGGER.error(
                    "bus.handler.failed",
                    extra={
                        "event": "bus.handler.failed",
                        "channel": channel,
                        "reason": str(exc),
                    },
                )
            delivered += 1
        return delivered

    def publish_nowait(self, channel: str, payload: Any) -> int:
        """Deliver ``payload`` synchronously and return the number of handlers reached."""
        return self._deliver(channel, payload)

    async def publish(self, channel: str, payload: Any) -> int:
        """Deliver ``payload`` while holding the bus publish lock.

        Concurrent ``publish`` calls from one event loop are serialised, so
        notifications arrive at handlers in the order they were awaited.
        """
        async with self._publish_lock:
            return self._deliver(channel, payload)
