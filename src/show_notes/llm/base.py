"""LLM provider interface and shared helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Protocol

MAX_OUTPUT_TOKENS = 4000


@dataclass(frozen=True)
class LLMUsage:
    """Token usage as reported by the provider (None when not reported)."""

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None


@dataclass(frozen=True)
class LLMResult:
    text: str
    usage: LLMUsage = LLMUsage()


class LLMProvider(Protocol):
    """A backend that turns a prompt and a transcript into show notes."""

    service: str
    model_id: str

    def complete(self, prompt: str, transcript: str) -> LLMResult:
        """Run the model on the prompt followed by the transcript.

        Raises:
            Exception: Any failure; callers retry the whole call
        """
        ...


def combine_prompt(prompt: str, transcript: str) -> str:
    """Join the prompt and transcript into the single user message sent to a model."""
    return f"{prompt}\n{transcript}"


def as_token_count(value: Any) -> Optional[int]:
    """Return ``value`` as an int token count, or None for missing or non-numeric values."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def quiet_sdk_loggers(names: Iterable[str]) -> None:
    """Raise chatty SDK loggers to WARNING when the root logger runs at DEBUG."""
    root_logger = logging.getLogger()
    root_level = root_logger.level if root_logger.level else logging.INFO
    if root_level <= logging.DEBUG:
        for logger_name in names:
            logging.getLogger(logger_name).setLevel(logging.WARNING)
