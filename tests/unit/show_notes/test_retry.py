#!/usr/bin/env python3
"""Tests for the retry executor."""

import unittest

import pytest

from show_notes.exceptions import ExternalCallError
from show_notes.utils.retry import (
    DEFAULT_RETRY_POLICY,
    retry_with_exponential_backoff,
    RetryPolicy,
)

pytestmark = [pytest.mark.unit]


class TestRetryPolicy(unittest.TestCase):
    def test_default_delays(self):
        """Seven attempts wait 1, 2, 4, 8, 16 and 32 seconds between them."""
        self.assertEqual(DEFAULT_RETRY_POLICY.max_attempts, 7)
        self.assertEqual(DEFAULT_RETRY_POLICY.delays(), (1.0, 2.0, 4.0, 8.0, 16.0, 32.0))

    def test_invalid_policy_rejected(self):
        with self.assertRaises(ValueError):
            RetryPolicy(max_attempts=0)
        with self.assertRaises(ValueError):
            RetryPolicy(base_delay=-1)


class TestRetryWithExponentialBackoff(unittest.TestCase):
    def setUp(self):
        self.sleeps = []

    def _sleep(self, seconds):
        self.sleeps.append(seconds)

    def test_success_on_first_attempt_does_not_sleep(self):
        result = retry_with_exponential_backoff(lambda: "ok", sleep=self._sleep)
        self.assertEqual(result, "ok")
        self.assertEqual(self.sleeps, [])

    def test_succeeds_after_transient_failures(self):
        calls = []

        def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise ConnectionError("temporary")
            return "done"

        result = retry_with_exponential_backoff(flaky, sleep=self._sleep)
        self.assertEqual(result, "done")
        self.assertEqual(len(calls), 3)
        self.assertEqual(self.sleeps, [1.0, 2.0])

    def test_succeeds_on_final_attempt(self):
        """Six failures then success returns the seventh result after 63 seconds of backoff."""
        calls = []

        def fails_six_times():
            calls.append(1)
            if len(calls) < 7:
                raise ConnectionError(f"attempt {len(calls)} failed")
            return f"result of attempt {len(calls)}"

        result = retry_with_exponential_backoff(fails_six_times, sleep=self._sleep)

        self.assertEqual(result, "result of attempt 7")
        self.assertEqual(len(calls), 7)
        self.assertEqual(self.sleeps, [1.0, 2.0, 4.0, 8.0, 16.0, 32.0])
        self.assertGreaterEqual(sum(self.sleeps), 63.0)

    def test_exhausted_attempts_raise_with_attempt_count(self):
        """A call that always fails is tried 7 times and waits 63 seconds in total."""
        calls = []

        def always_fails():
            calls.append(1)
            raise RuntimeError("boom")

        with self.assertRaises(ExternalCallError) as ctx:
            retry_with_exponential_backoff(
                always_fails, description="fetch thing", sleep=self._sleep
            )

        self.assertEqual(len(calls), 7)
        self.assertEqual(sum(self.sleeps), 63.0)
        self.assertEqual(ctx.exception.attempts, 7)
        self.assertIn("7 attempts", str(ctx.exception))
        self.assertIn("fetch thing", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)

    def test_non_retryable_exception_propagates_immediately(self):
        calls = []

        def fails():
            calls.append(1)
            raise KeyError("not retried")

        with self.assertRaises(KeyError):
            retry_with_exponential_backoff(
                fails, retryable_exceptions=(ConnectionError,), sleep=self._sleep
            )
        self.assertEqual(len(calls), 1)
        self.assertEqual(self.sleeps, [])

    def test_custom_policy(self):
        policy = RetryPolicy(max_attempts=3, base_delay=0.5)

        with self.assertRaises(ExternalCallError) as ctx:
            retry_with_exponential_backoff(
                lambda: (_ for _ in ()).throw(OSError("x")), policy, sleep=self._sleep
            )
        self.assertEqual(ctx.exception.attempts, 3)
        self.assertEqual(self.sleeps, [0.5, 1.0])


if __name__ == "__main__":
    unittest.main()
