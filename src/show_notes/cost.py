"""Cost estimation for transcription and LLM calls.

Transcription cost is measured from the actual audio duration (via ffprobe)
and expressed in cents. LLM cost is expressed in dollars and uses a
whitespace word count as a rough token estimate. The estimate is not billing
accurate: real tokenizers usually produce more tokens than words.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, NamedTuple, Optional

from .providers.catalog import CENTS_PER_DOLLAR, ProviderModel
from .utils.process import run_command

logger = logging.getLogger(__name__)

SECONDS_PER_MINUTE = 60.0
TOKENS_PER_MILLION = 1_000_000
# Rates below this are treated as free
ZERO_RATE_EPSILON = 1e-7
# Costs below this are rounded to zero to hide floating-point noise
MIN_REPORTED_COST = 1e-5
FFPROBE_TIMEOUT_SECONDS = 30
# Output budget assumed when estimating a call that has not run yet
ASSUMED_OUTPUT_TOKENS = 4000


class LLMCost(NamedTuple):
    """Estimated LLM cost in dollars."""

    input_cost: float
    output_cost: float
    total_cost: float


def probe_duration_seconds(audio_path: str) -> float:
    """Return the duration of a media file in seconds using ffprobe.

    Raises:
        ExternalCallError: If ffprobe fails
        ValueError: If the reported duration is not a number
    """
    output = run_command(
        [
            "ffprobe",
            "-v",
            "error",
            "-show_entries",
            "format=duration",
            "-of",
            "csv=p=0",
            audio_path,
        ],
        timeout=FFPROBE_TIMEOUT_SECONDS,
    )
    try:
        duration = float(output.strip())
    except ValueError:
        raise ValueError(f"Could not parse audio duration for {audio_path}: {output!r}") from None
    if math.isnan(duration):
        raise ValueError(f"Could not parse audio duration for {audio_path}: {output!r}")
    return duration


def estimate_transcription_cost(
    audio_path: str,
    cost_per_minute_cents: float,
    *,
    probe: Callable[[str], float] = probe_duration_seconds,
) -> float:
    """Estimate transcription cost in cents from the audio duration.

    Args:
        audio_path: Path to the audio file
        cost_per_minute_cents: Model rate in cents per audio minute
        probe: Duration probe, injectable for tests

    Returns:
        Estimated cost in cents

    Example:
        >>> estimate_transcription_cost("a.wav", 0.25, probe=lambda _: 120.0)
        0.5
    """
    minutes = probe(audio_path) / SECONDS_PER_MINUTE
    cost = minutes * cost_per_minute_cents
    logger.debug(
        "Transcription cost for %s: %.2f min x %s cents = %s cents",
        audio_path,
        minutes,
        cost_per_minute_cents,
        cost,
    )
    return cost


def approximate_tokens(text: str) -> int:
    """Approximate a token count by counting whitespace-delimited words."""
    return len(text.split())


def _round_noise(cost: float) -> float:
    return 0.0 if cost < MIN_REPORTED_COST else cost


def estimate_llm_cost(model: ProviderModel, input_tokens: int, output_tokens: int) -> LLMCost:
    """Estimate the dollar cost of an LLM call.

    Rates are normalized to dollars per million tokens first. A model whose
    rates are both zero always costs exactly zero, and any component below
    $0.00001 is rounded to zero.
    """
    input_rate, output_rate = model.rates_per_1m_usd()
    if input_rate < ZERO_RATE_EPSILON and output_rate < ZERO_RATE_EPSILON:
        return LLMCost(0.0, 0.0, 0.0)

    input_cost = _round_noise((input_tokens / TOKENS_PER_MILLION) * input_rate)
    output_cost = _round_noise((output_tokens / TOKENS_PER_MILLION) * output_rate)
    total = _round_noise(input_cost + output_cost)
    return LLMCost(input_cost, output_cost, total)


def cents_to_dollars(cents: float) -> float:
    return cents / CENTS_PER_DOLLAR


def format_cost(cost: Optional[float]) -> str:
    """Format a dollar amount for display.

    Returns ``N/A`` for unknown costs, ``0¢`` for zero, four-decimal cents
    below one cent, two-decimal cents below one dollar, and dollars otherwise.

    Example:
        >>> format_cost(0.0042)
        '¢0.4200'
        >>> format_cost(0.25)
        '¢25.00'
        >>> format_cost(3.5)
        '$3.50'
    """
    if cost is None:
        return "N/A"
    if cost == 0:
        return "0¢"
    cents = cost * CENTS_PER_DOLLAR
    if cents < 1:
        return f"¢{cents:.4f}"
    if cost < 1:
        return f"¢{cents:.2f}"
    return f"${cost:.2f}"


def estimate_llm_cost_for_file(
    path: str, model: ProviderModel, output_tokens: int = ASSUMED_OUTPUT_TOKENS
) -> LLMCost:
    """Estimate what running ``model`` on a prompt-and-transcript file would cost.

    Input tokens are approximated from the file's word count; output tokens
    are assumed to reach the completion limit.

    Raises:
        ValueError: If the file cannot be read
    """
    try:
        with open(path, "r", encoding="utf-8") as handle:
            content = handle.read()
    except OSError as exc:
        raise ValueError(f"Failed to read {path}: {exc}") from exc
    input_tokens = approximate_tokens(content)
    logger.debug("Approximate input tokens for %s: %d", path, input_tokens)
    return estimate_llm_cost(model, input_tokens, output_tokens)
