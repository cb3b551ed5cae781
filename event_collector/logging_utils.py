"""Logging bootstrap for collector diagnostics.

Package modules log through ``logging.getLogger(__name__)`` with a dotted
event name as the message and structured fields in ``extra``. When
structured output is enabled those records are rendered as JSON lines by a
structlog ``ProcessorFormatter``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import structlog

# Fields the collector and bus attach to their records via ``extra``.
COLLECTOR_LOG_FIELDS = ("event", "channel", "capacity", "dropped", "reason")

DEFAULT_LOG_FILE = "~/.local/state/event-collector/collector.log"


def _message_to_field(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    # structlog keeps the log message under "event"; collector records use
    # that key for their own event name.
    event_dict["message"] = event_dict.pop("event", "")
    return event_dict


def build_json_formatter() -> structlog.stdlib.ProcessorFormatter:
    """Return a formatter rendering package records as one JSON object per line."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            _message_to_field,
            structlog.stdlib.ExtraAdder(allow=COLLECTOR_LOG_FIELDS),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            structlog.processors.format_exc_info,
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(
                ensure_ascii=False, separators=(",", ":")
            ),
        ],
    )


def _best_effort_private_permissions(path: Path) -> None:
    if os.name != "posix":
        return
    try:
        path.chmod(0o600)
    except OSError:
        logging.getLogger(__name__).warning(
            "Unable to enforce 0600 permissions for %s", path
        )


def configure_logging(logging_config: dict[str, Any]) -> None:
    """Install handlers for the ``[logging]`` config section.

    Collector warnings (dropped notifications, failed releases) always reach
    stderr; other libraries' records are filtered out there. The optional log
    file receives everything at the configured level.
    """
    level_name = str(logging_config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    structured = bool(logging_config.get("structured", True))
    log_to_file = bool(logging_config.get("log_to_file", False))
    log_file_path = str(logging_config.get("log_file_path", DEFAULT_LOG_FILE))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    formatter: logging.Formatter
    if structured:
        formatter = build_json_formatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    def collector_only_filter(record: logging.LogRecord) -> bool:
        return record.name.startswith("event_collector")

    stderr_handler = logging.StreamHandler()
    stderr_handler.setLevel(max(level, logging.WARNING))
    stderr_handler.setFormatter(formatter)
    stderr_handler.addFilter(collector_only_filter)
    root.addHandler(stderr_handler)

    if log_to_file:
        target = Path(log_file_path).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(target, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        _best_effort_private_permissions(target)
