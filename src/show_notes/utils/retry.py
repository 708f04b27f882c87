"""Retry utilities with exponential backoff for unreliable external calls.

Every process spawn and network fetch in the pipeline goes through
``retry_with_exponential_backoff``. The default policy makes 7 attempts and
waits 1s, 2s, 4s, 8s, 16s and 32s between them. There is no jitter and no
delay cap; every attempt fully re-executes the function.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Type, TypeVar

from ..exceptions import ExternalCallError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 7
DEFAULT_BASE_DELAY_SECONDS = 1.0


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt ceiling and base delay for exponential backoff.

    Attributes:
        max_attempts: Total number of attempts, including the first one.
        base_delay: Delay in seconds after the first failed attempt.

    Example:
        >>> RetryPolicy().delays()
        (1.0, 2.0, 4.0, 8.0, 16.0, 32.0)
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float = DEFAULT_BASE_DELAY_SECONDS

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.base_delay < 0:
            raise ValueError(f"base_delay must be non-negative, got {self.base_delay}")

    def delay_for(self, attempt: int) -> float:
        """Return the delay to wait after failed attempt number ``attempt`` (1-based)."""
        return self.base_delay * (2 ** (attempt - 1))

    def delays(self) -> Tuple[float, ...]:
        """Return every delay the policy can produce, in order."""
        return tuple(self.delay_for(k) for k in range(1, self.max_attempts))


DEFAULT_RETRY_POLICY = RetryPolicy()


def retry_with_exponential_backoff(
    func: Callable[[], T],
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    *,
    description: Optional[str] = None,
    retryable_exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call ``func`` until it succeeds or the policy's attempts are exhausted.

    Args:
        func: Function to retry (must be callable with no arguments)
        policy: Attempt ceiling and base delay (default: 7 attempts, 1s base)
        description: Short label used in log lines and the final error
        retryable_exceptions: Exception types that trigger another attempt;
            anything else propagates immediately
        sleep: Sleep function, injectable for tests

    Returns:
        Result of the first successful call to func()

    Raises:
        ExternalCallError: When every attempt failed. ``attempts`` holds the
            number of attempts made and the last error is chained as the cause.
    """
    label = description or getattr(func, "__name__", "call")
    last_exception: Optional[BaseException] = None

    for attempt in range(1, policy.max_attempts + 1):
        try:
            return func()
        except retryable_exceptions as e:
            last_exception = e
            if attempt < policy.max_attempts:
                delay = policy.delay_for(attempt)
                logger.warning(
                    f"{label}: attempt {attempt}/{policy.max_attempts} failed: {e}. "
                    f"Retrying in {delay:.1f}s..."
                )
                sleep(delay)
            else:
                logger.error(f"{label}: all {policy.max_attempts} attempts failed. Last error: {e}")

    raise ExternalCallError(
        f"{label} failed after {policy.max_attempts} attempts: {last_exception}",
        target=label,
        attempts=policy.max_attempts,
    ) from last_exception
