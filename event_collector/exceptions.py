"""Domain exception hierarchy for the event collector."""

from __future__ import annotations

from typing import Any


class EventCollectorError(RuntimeError):
    """Base class for all event collector errors."""


class InvalidChannelError(EventCollectorError, LookupError):
    """Raised when a source does not expose the requested notification channel."""


class InvalidCapacityError(EventCollectorError, ValueError):
    """Raised when a collector capacity is not a positive integer."""


class ConfigValidationError(EventCollectorError):
    """Raised when collector options or configuration cannot be validated."""


class TransformError(EventCollectorError):
    """Raised (and reported, never propagated) when a transform rejects a notification.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, message: str, notification: Any, channel: str) -> None:
        super().__init__(message)
        self.notification = notification
        self.channel = channel
