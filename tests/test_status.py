"""Tests for status rendering."""

from __future__ import annotations

import unittest

from event_collector.state import CollectorState
from event_collector.status import CollectorStatus, describe_callable, format_status


def parse_message(event: dict[str, str]) -> str:
    return event["message"]


class FormatStatusTests(unittest.TestCase):
    """Validate the human-readable collector summary."""

    def test_running_without_transform(self) -> None:
        text = format_status(
            CollectorStatus(
                channel="ticks",
                source_type="EventBus",
                state=CollectorState.ACTIVE,
                running=True,
                transform=None,
                count=3,
                capacity=10,
            )
        )
        self.assertIn("Listening to: ticks of EventBus", text)
        self.assertIn("Collector's status: running", text)
        self.assertIn("Number of events: 3 / 10", text)
        self.assertNotIn("Parsed by", text)
        self.assertNotIn("Dropped", text)

    def test_paused_with_transform_and_drops(self) -> None:
        text = format_status(
            CollectorStatus(
                channel="ticks",
                source_type="EventBus",
                state=CollectorState.PAUSED,
                running=False,
                transform="parse_message",
                count=0,
                capacity=5,
                dropped=2,
            )
        )
        self.assertIn("Parsed by: parse_message", text)
        self.assertIn("Collector's status: stopped", text)
        self.assertIn("Dropped events: 2", text)

    def test_closed_collector(self) -> None:
        text = format_status(
            CollectorStatus(
                channel="ticks",
                source_type="EventBus",
                state=CollectorState.CLOSED,
                running=False,
                transform=None,
                count=1,
                capacity=5,
            )
        )
        self.assertIn("Collector's status: closed", text)

    def test_describe_callable(self) -> None:
        self.assertEqual(
            describe_callable(parse_message), f"{__name__}.parse_message"
        )
        self.assertEqual(describe_callable(len), "len")


if __name__ == "__main__":
    unittest.main()
