"""CLI entrypoint for event-collector.

Publishes the given payloads on an in-process bus with a collector attached,
then prints what the collector retained.
"""

from __future__ import annotations

import argparse
from importlib import metadata
import json
from pathlib import Path
import sys
from typing import Sequence

from .bus import EventBus
from .collector import EventCollector
from .config import ensure_config_dir, load_config
from .exceptions import EventCollectorError
from .logging_utils import configure_logging
from .status import format_status


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="event-collector",
        description="Capture notifications into a bounded buffer and report them.",
    )
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    parser.add_argument("--config", type=Path, help="Path to a config.toml file")
    parser.add_argument("--channel", help="Channel to publish and collect on")
    parser.add_argument("--capacity", type=int, help="Maximum number of retained events")
    parser.add_argument(
        "--json", action="store_true", help="Print retained events as a JSON array"
    )
    parser.add_argument("payloads", nargs="*", help="Notifications to publish")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run a single capture session and print the collector's contents."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("event-collector")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"event-collector {version}")
        return 0

    if args.config is None:
        ensure_config_dir()
    config = load_config(config_path=args.config)
    configure_logging(config["logging"])

    channel = args.channel or config["collector"]["default_channel"]
    capacity = (
        args.capacity
        if args.capacity is not None
        else config["collector"]["default_capacity"]
    )

    try:
        bus = EventBus([channel])
        collector = EventCollector(bus, channel, capacity=capacity)
    except EventCollectorError as exc:
        print(f"event-collector: {exc}", file=sys.stderr)
        return 2

    with collector:
        for payload in args.payloads:
            bus.publish_nowait(channel, payload)
        if args.json:
            print(json.dumps(collector.all(), ensure_ascii=False))
        else:
            print(format_status(collector.status()))
            for entry in collector:
                print(f"  {entry}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
