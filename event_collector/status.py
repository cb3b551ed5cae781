"""Read-only status snapshots for display and logging."""

from __future__ import annotations

from dataclasses import dataclass

from .state import CollectorState


@dataclass(frozen=True)
class CollectorStatus:
    """Point-in-time view of a collector."""

    channel: str
    source_type: str
    state: CollectorState
    running: bool
    transform: str | None
    count: int
    capacity: int
    dropped: int = 0


def describe_callable(func: object) -> str:
    """Return a short human name for a transform."""
    name = getattr(func, "__qualname__", None) or getattr(func, "__name__", None)
    if name:
        module = getattr(func, "__module__", None)
        return f"{module}.{name}" if module and module != "builtins" else name
    return repr(func)


def format_status(status: CollectorStatus) -> str:
    """Render a status snapshot as aligned plain text."""
    lines = [f"       Listening to: {status.channel} of {status.source_type}"]
    if status.transform is not None:
        lines.append(f"          Parsed by: {status.transform}")
    if status.state is CollectorState.CLOSED:
        label = "closed"
    else:
        label = "running" if status.running else "stopped"
    lines.append(f" Collector's status: {label}")
    lines.append(f"   Number of events: {status.count} / {status.capacity}")
    if status.dropped:
        lines.append(f"     Dropped events: {status.dropped}")
    return "\n".join(lines)
