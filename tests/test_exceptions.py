"""Tests for domain exception hierarchy."""

from __future__ import annotations

import unittest

from event_collector.exceptions import (
    ConfigValidationError,
    EventCollectorError,
    InvalidCapacityError,
    InvalidChannelError,
    TransformError,
)


class ExceptionHierarchyTests(unittest.TestCase):
    """Validate exception inheritance contract."""

    def test_exception_hierarchy(self) -> None:
        self.assertTrue(issubclass(InvalidChannelError, EventCollectorError))
        self.assertTrue(issubclass(InvalidCapacityError, EventCollectorError))
        self.assertTrue(issubclass(TransformError, EventCollectorError))
        self.assertTrue(issubclass(ConfigValidationError, EventCollectorError))
        self.assertTrue(issubclass(EventCollectorError, RuntimeError))

    def test_builtin_compatibility(self) -> None:
        self.assertTrue(issubclass(InvalidChannelError, LookupError))
        self.assertTrue(issubclass(InvalidCapacityError, ValueError))

    def test_transform_error_carries_notification(self) -> None:
        error = TransformError("bad", notification={"id": 3}, channel="ticks")
        self.assertEqual(error.notification, {"id": 3})
        self.assertEqual(error.channel, "ticks")
        self.assertEqual(str(error), "bad")


if __name__ == "__main__":
    unittest.main()
