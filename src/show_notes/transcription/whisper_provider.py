"""Local transcription with the openai-whisper library."""

from __future__ import annotations

import importlib
import logging
import time
from types import ModuleType
from typing import Any, Optional

from .. import config
from ..providers.catalog import ProviderModel
from .base import TranscriptionResult
from .formatting import format_whisper_segments

logger = logging.getLogger(__name__)


def _import_whisper() -> ModuleType:
    """Import the openai-whisper library, failing with an install hint."""
    try:
        whisper_lib = importlib.import_module("whisper")
    except ImportError as exc:
        raise ImportError(
            f"Failed to import openai-whisper library: {exc}. "
            "Install it with: pip install 'show-notes[whisper]' (ffmpeg is also required)"
        ) from exc
    if not hasattr(whisper_lib, "load_model"):
        raise ImportError(
            "Imported 'whisper' module does not have 'load_model' function. "
            "Make sure 'openai-whisper' is installed: pip install openai-whisper"
        )
    return whisper_lib


class WhisperProvider:
    """Transcribe with a local Whisper model.

    The model is loaded on the first call and reused for later items. Local
    transcription has no API key and no cost. ``provider_timeout`` does not
    apply because the work runs in-process.
    """

    service = "whisper"

    def __init__(self, cfg: config.Config, model: ProviderModel):
        self.cfg = cfg
        self.model = model
        self._whisper_model: Optional[Any] = None

    def _load(self) -> Any:
        if self._whisper_model is None:
            whisper_lib = _import_whisper()
            logger.debug("Loading Whisper model: %s", self.model.model_id)
            self._whisper_model = whisper_lib.load_model(
                self.model.model_id, download_root=self.cfg.whisper_model_dir
            )
        return self._whisper_model

    def transcribe(self, audio_path: str) -> TranscriptionResult:
        whisper_model = self._load()
        logger.info("    transcribing with Whisper (%s)...", self.model.model_id)
        start = time.time()
        result = whisper_model.transcribe(audio_path, task="transcribe", verbose=False)
        segments = result.get("segments") or []
        logger.debug(
            "Whisper transcription finished in %.2fs (segments=%d text_chars=%d)",
            time.time() - start,
            len(segments),
            len(result.get("text") or ""),
        )
        text = format_whisper_segments(segments) or str(result.get("text") or "").strip()
        return TranscriptionResult(text, self.model.model_id, self.model.cost_per_minute_cents)
