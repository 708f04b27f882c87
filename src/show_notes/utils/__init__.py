"""Core utilities for show_notes.

This module provides:
- Retry with exponential backoff for unreliable external calls
- External command execution helpers
"""

from .process import check_tool_available, run_command
from .retry import (
    DEFAULT_RETRY_POLICY,
    retry_with_exponential_backoff,
    RetryPolicy,
)

__all__ = [
    "DEFAULT_RETRY_POLICY",
    "RetryPolicy",
    "check_tool_available",
    "retry_with_exponential_backoff",
    "run_command",
]
