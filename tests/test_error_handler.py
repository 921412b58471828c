"""
Tests for per-element failure containment.
"""
import unittest

from utils.error_handler import ErrorHandler


def fail(message):
    raise ValueError(message)


class TestErrorHandler(unittest.TestCase):
    def test_success_passes_through(self):
        handler = ErrorHandler()
        self.assertEqual(handler.contain(lambda x: x * 2)(21), 42)
        self.assertEqual(handler.failure_count, 0)

    def test_log_strategy_calls_back(self):
        failures = []
        handler = ErrorHandler(fail_strategy="log", on_failure=failures.append)

        self.assertIsNone(handler.contain(fail)("boom"))
        self.assertEqual(handler.failure_count, 1)
        self.assertEqual([str(e) for e in failures], ["boom"])

    def test_skip_strategy(self):
        handler = ErrorHandler(fail_strategy="skip")
        self.assertIsNone(handler.contain(fail)("boom"))
        self.assertEqual(handler.failure_count, 1)

    def test_raise_strategy(self):
        handler = ErrorHandler(fail_strategy="raise")
        with self.assertRaises(ValueError):
            handler.contain(fail)("boom")

    def test_other_errors_propagate(self):
        handler = ErrorHandler()

        def broken():
            raise KeyError("missing")

        with self.assertRaises(KeyError):
            handler.contain(broken)()

    def test_unknown_strategy(self):
        with self.assertRaises(ValueError):
            ErrorHandler(fail_strategy="retry")
