#!/usr/bin/env python3
"""
Tests for the presentation boundary.

Tests that DismissHandle runs its callback at most once, including when
several threads race to dismiss.
"""

import threading
import unittest
from unittest.mock import Mock

# Add project root to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from spotlight_tour.overlay.presentation import DismissHandle, PresentationResult


class TestDismissHandle(unittest.TestCase):
    """Test one-shot dismissal."""

    def test_fires_once(self):
        callback = Mock()
        handle = DismissHandle(callback, name="test")

        self.assertFalse(handle.fired)
        self.assertTrue(handle())
        self.assertFalse(handle())
        self.assertTrue(handle.fired)
        callback.assert_called_once_with()

    def test_concurrent_calls_fire_once(self):
        callback = Mock()
        handle = DismissHandle(callback)
        barrier = threading.Barrier(8)
        results = []

        def dismiss():
            barrier.wait()
            results.append(handle())

        threads = [threading.Thread(target=dismiss) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        callback.assert_called_once_with()
        self.assertEqual(results.count(True), 1)

    def test_callback_error_still_consumes_handle(self):
        callback = Mock(side_effect=RuntimeError("boom"))
        handle = DismissHandle(callback)

        with self.assertRaises(RuntimeError):
            handle()

        self.assertFalse(handle())
        self.assertEqual(callback.call_count, 1)

    def test_cancel_disarms_handle(self):
        callback = Mock()
        handle = DismissHandle(callback)

        self.assertTrue(handle.cancel())
        self.assertFalse(handle())
        self.assertTrue(handle.cancelled)
        self.assertFalse(handle.fired)
        callback.assert_not_called()

    def test_cancel_after_fire_reports_used(self):
        callback = Mock()
        handle = DismissHandle(callback)

        handle()

        self.assertFalse(handle.cancel())
        self.assertFalse(handle.cancelled)
        self.assertTrue(handle.fired)


class TestPresentationResult(unittest.TestCase):

    def test_values(self):
        self.assertEqual(PresentationResult("accepted"), PresentationResult.ACCEPTED)
        self.assertEqual(PresentationResult.REJECTED.value, "rejected")


if __name__ == '__main__':
    unittest.main()
