"""Tests for top-level package lazy exports."""

from __future__ import annotations

import unittest

import event_collector


class PackageExportTests(unittest.TestCase):
    """Ensure __getattr__ and exported symbols behave as expected."""

    def test_lazy_exports_resolve_known_symbols(self) -> None:
        for name in event_collector.__all__:
            with self.subTest(name=name):
                self.assertIsNotNone(getattr(event_collector, name))
        self.assertTrue(callable(event_collector.load_config))
        self.assertTrue(callable(event_collector.format_status))

    def test_unknown_symbol_raises_attribute_error(self) -> None:
        with self.assertRaises(AttributeError):
            getattr(event_collector, "THIS_DOES_NOT_EXIST")


if __name__ == "__main__":
    unittest.main()
