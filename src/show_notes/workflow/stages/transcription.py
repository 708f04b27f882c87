"""Stage 3: transcribe the canonical WAV and price it by measured duration."""

from __future__ import annotations

import logging
from typing import Callable

from ...cost import cents_to_dollars, estimate_transcription_cost, format_cost
from ...cost import probe_duration_seconds
from ...transcription import TranscriptionProvider
from ...utils.retry import retry_with_exponential_backoff, RetryPolicy
from ..types import TranscriptResult

logger = logging.getLogger(__name__)


def run_transcription(
    audio_path: str,
    provider: TranscriptionProvider,
    policy: RetryPolicy,
    *,
    probe: Callable[[str], float] = probe_duration_seconds,
) -> TranscriptResult:
    """Transcribe ``audio_path`` with ``provider`` under the retry policy.

    Raises:
        ExternalCallError: If every transcription attempt failed or ffprobe failed
        ValueError: If the audio duration cannot be parsed
    """
    result = retry_with_exponential_backoff(
        lambda: provider.transcribe(audio_path),
        policy,
        description=f"{provider.service} transcription",
    )
    cost_cents = estimate_transcription_cost(audio_path, result.cost_per_minute_cents, probe=probe)
    logger.info(
        "  - transcribed with %s (%s), estimated cost %s",
        provider.service,
        result.model_id,
        format_cost(cents_to_dollars(cost_cents)),
    )
    return TranscriptResult(result.text, provider.service, result.model_id, cost_cents)
