"""Collector lifecycle states."""

from __future__ import annotations

from enum import Enum


class CollectorState(str, Enum):
    """Finite state machine for a collector's lifetime.

    ``CLOSED`` is terminal.
    """

    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    CLOSED = "CLOSED"
