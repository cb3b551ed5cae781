"""Top-level package for event-collector."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .bus import EventBus, NotificationSource, Subscription, SubscriptionHandle
    from .collector import EventCollector
    from .config import CollectorOptions, load_config
    from .exceptions import (
        ConfigValidationError,
        EventCollectorError,
        InvalidCapacityError,
        InvalidChannelError,
        TransformError,
    )
    from .state import CollectorState
    from .status import CollectorStatus, format_status

__all__ = [
    "CollectorOptions",
    "CollectorState",
    "CollectorStatus",
    "ConfigValidationError",
    "EventBus",
    "EventCollector",
    "EventCollectorError",
    "InvalidCapacityError",
    "InvalidChannelError",
    "NotificationSource",
    "Subscription",
    "SubscriptionHandle",
    "TransformError",
    "format_status",
    "load_config",
]


def __getattr__(name: str) -> Any:
    """Lazily import symbols so importing the package stays cheap."""
    if name == "EventCollector":
        from .collector import EventCollector

        return EventCollector
    if name in {"EventBus", "NotificationSource", "Subscription", "SubscriptionHandle"}:
        from . import bus

        return getattr(bus, name)
    if name in {"CollectorOptions", "load_config"}:
        from .config import CollectorOptions, load_config

        return {"CollectorOptions": CollectorOptions, "load_config": load_config}[name]
    if name in {
        "ConfigValidationError",
        "EventCollectorError",
        "InvalidCapacityError",
        "InvalidChannelError",
        "TransformError",
    }:
        from . import exceptions

        return getattr(exceptions, name)
    if name == "CollectorState":
        from .state import CollectorState

        return CollectorState
    if name in {"CollectorStatus", "format_status"}:
        from .status import CollectorStatus, format_status

        return {"CollectorStatus": CollectorStatus, "format_status": format_status}[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
