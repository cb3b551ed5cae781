"""Bounded, order-preserving capture of notifications from a single channel."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterator
import logging
import threading
from typing import Any

from .bus import NotificationSource, SubscriptionHandle
from .config import DEFAULT_CAPACITY, CollectorOptions
from .exceptions import InvalidChannelError, TransformError
from .state import CollectorState
from .status import CollectorStatus, describe_callable

LOGGER = logging.getLogger(__name__)


class EventCollector:
    """Local store of the most recent notifications emitted on one channel.

    The collector subscribes on construction and starts enabled. ``stop()``
    pauses capture without dropping the subscription, ``start()`` resumes it,
    and ``close()`` releases the subscription for good. Once ``capacity``
    entries are held, each new entry evicts the oldest one.

    If ``transform`` is given, it is applied to every accepted notification
    and its result is stored instead. A transform failure drops only that
    notification; it is logged, counted in ``dropped`` and passed to
    ``on_error`` as a ``TransformError``.
    """

    def __init__(
        self,
        source: NotificationSource,
        channel: str,
        *,
        capacity: int = DEFAULT_CAPACITY,
        transform: Callable[[Any], Any] | None = None,
        on_error: Callable[[TransformError], None] | None = None,
    ) -> None:
        options = CollectorOptions.build(
            channel=channel, capacity=capacity, transform=transform, on_error=on_error
        )
        if source is None or not callable(getattr(source, "subscribe", None)):
            raise TypeError("source must provide subscribe(channel, handler)")

        self._source = source
        self._channel = options.channel
        self._capacity = options.capacity
        self._transform = options.transform
        self._on_error = options.on_error
        self._store: deque[Any] = deque(maxlen=self._capacity)
        self._lock = threading.RLock()
        self._dropped = 0
        self._last_error: TransformError | None = None
        self._closed = False
        self._running = True
        self._subscription: SubscriptionHandle | None = self._subscribe()

    @classmethod
    def from_options(
        cls, source: NotificationSource, options: CollectorOptions
    ) -> EventCollector:
        """Create a collector from pre-validated options."""
        return cls(
            source,
            options.channel,
            capacity=options.capacity,
            transform=options.transform,
            on_error=options.on_error,
        )

    def _subscribe(self) -> SubscriptionHandle:
        try:
            handle = self._source.subscribe(self._channel, self._receive)
        except InvalidChannelError:
            raise
        except LookupError as exc:
            raise InvalidChannelError(
                f"{type(self._source).__name__} has no channel {self._channel!r}."
            ) from exc
        LOGGER.debug(
            "collector.subscribed",
            extra={
                "event": "collector.subscribed",
                "channel": self._channel,
                "capacity": self._capacity,
            },
        )
        return handle

    @property
    def source(self) -> NotificationSource:
        return self._source

    @property
    def channel(self) -> str:
        return self._channel

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def transform(self) -> Callable[[Any], Any] | None:
        return self._transform

    @property
    def dropped(self) -> int:
        """Number of notifications discarded because the transform failed."""
        return self._dropped

    @property
    def last_error(self) -> TransformError | None:
        return self._last_error

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def state(self) -> CollectorState:
        with self._lock:
            if self._closed:
                return CollectorState.CLOSED
            return CollectorState.ACTIVE if self._running else CollectorState.PAUSED

    def is_running(self) -> bool:
        """Return True when incoming notifications are being stored."""
        return self._running

    def start(self) -> None:
        """Resume capture. Has no effect on a closed collector."""
        with self._lock:
            if not self._closed:
                self._running = True

    def stop(self) -> None:
        """Pause capture; the subscription stays live."""
        with self._lock:
            self._running = False

    def _receive(self, notification: Any) -> None:
        with self._lock:
            if self._closed or not self._running:
                return
            try:
                if self._transform is None:
                    stored = notification
                else:
                    stored = self._transform(notification)
            except Exception as exc:
                error = TransformError(
                    f"Transform {describe_callable(self._transform)} failed on "
                    f"{self._channel!r}: {exc}",
                    notification=notification,
                    channel=self._channel,
                )
                error.__cause__ = exc
                self._dropped += 1
                self._last_error = error
            else:
                # The transform may have stopped or closed this collector.
                if self._running and not self._closed:
                    # maxlen evicts the oldest entry
                    self._store.append(stored)
                return
        self._report(error)

    def _report(self, error: TransformError) -> None:
        LOGGER.warning(
            "collector.transform.failed",
            extra={
                "event": "collector.transform.failed",
                "channel": self._channel,
                "reason": str(error.__cause__),
                "dropped": self._dropped,
            },
        )
        if self._on_error is None:
            return
        try:
            self._on_error(error)
        except Exception as exc:
            LOGGER.error(
                "collector.error_callback.failed",
                extra={
                    "event": "collector.error_callback.failed",
                    "channel": self._channel,
                    "reason": str(exc),
                },
            )

    def count(self) -> int:
        """Return the number of stored entries."""
        with self._lock:
            return len(self._store)

    def last(self, default: Any = None) -> Any:
        """Return the most recent entry, or ``default`` when empty."""
        with self._lock:
            if not self._store:
                return default
            return self._store[-1]

    def pop(self, default: Any = None) -> Any:
        """Remove and return the most recent entry, or ``default`` when empty."""
        with self._lock:
            if not self._store:
                return default
            return self._store.pop()

    def all(self) -> list[Any]:
        """Return a copy of all stored entries, oldest first."""
        with self._lock:
            return list(self._store)

    def clear(self) -> None:
        """Discard all stored entries."""
        with self._lock:
            self._store.clear()

    def close(self) -> None:
        """Release the subscription and stop capture permanently.

        Safe to call more than once and never raises.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._running = False
            subscription, self._subscription = self._subscription, None

        if subscription is not None:
            try:
                subscription.release()
            except Exception as exc:
                LOGGER.warning(
                    "collector.release.failed",
                    extra={
                        "event": "collector.release.failed",
                        "channel": self._channel,
                        "reason": str(exc),
                    },
                )
        LOGGER.debug(
            "collector.closed",
            extra={"event": "collector.closed", "channel": self._channel},
        )

    def status(self) -> CollectorStatus:
        """Return a snapshot suitable for display."""
        with self._lock:
            return CollectorStatus(
                channel=self._channel,
                source_type=type(self._source).__name__,
                state=self.state,
                running=self._running,
                transform=(
                    describe_callable(self._transform)
                    if self._transform is not None
                    else None
                ),
                count=len(self._store),
                capacity=self._capacity,
                dropped=self._dropped,
            )

    def __enter__(self) -> EventCollector:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[Any]:
        return iter(self.all())

    def __repr__(self) -> str:
        return (
            f"<EventCollector channel={self._channel!r} "
            f"state={self.state.value} count={len(self._store)}>"
        )
