"""Transcription providers and transcript formatting."""

from .base import TranscriptionProvider, TranscriptionResult
from .factory import create_transcription_provider

__all__ = ["TranscriptionProvider", "TranscriptionResult", "create_transcription_provider"]
