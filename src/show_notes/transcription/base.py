"""Transcription provider interface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class TranscriptionResult:
    """Transcript text plus what is needed to price it afterwards.

    Attributes:
        text: Formatted transcript with timestamps.
        model_id: Model that produced the transcript.
        cost_per_minute_cents: Rate applied to the measured audio duration.
    """

    text: str
    model_id: str
    cost_per_minute_cents: float


class TranscriptionProvider(Protocol):
    """A backend that turns a canonical WAV file into transcript text."""

    service: str

    def transcribe(self, audio_path: str) -> TranscriptionResult:
        """Transcribe one canonical WAV file.

        Raises:
            Exception: Any failure; callers retry the whole call
        """
        ...
