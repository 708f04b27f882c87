"""Deepgram pre-recorded audio transcription over its REST API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from .. import config, downloader
from ..providers.catalog import ProviderModel
from .base import TranscriptionResult
from .formatting import format_deepgram_words

logger = logging.getLogger(__name__)

DEEPGRAM_LISTEN_URL = "https://api.deepgram.com/v1/listen"


def _extract_words(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    try:
        words = payload["results"]["channels"][0]["alternatives"][0]["words"]
    except (KeyError, IndexError, TypeError):
        words = None
    if not words:
        raise ValueError("No transcription results found in Deepgram response")
    return words


class DeepgramProvider:
    """Upload a WAV file to Deepgram and format the returned words."""

    service = "deepgram"

    def __init__(self, cfg: config.Config, model: ProviderModel):
        if not cfg.deepgram_api_key:
            raise ValueError(
                "Deepgram API key required for Deepgram provider. "
                "Set DEEPGRAM_API_KEY environment variable or deepgram_api_key in config."
            )
        self.cfg = cfg
        self.model = model

    def transcribe(self, audio_path: str) -> TranscriptionResult:
        params = {
            "model": self.model.model_id,
            "smart_format": "true",
            "punctuate": "true",
            "diarize": "false",
            "paragraphs": "true",
        }
        headers = {
            "Authorization": f"Token {self.cfg.deepgram_api_key}",
            "Content-Type": "audio/wav",
            "User-Agent": self.cfg.user_agent,
        }
        logger.info("    transcribing with Deepgram (%s)...", self.model.model_id)
        session = downloader.get_session()
        with open(audio_path, "rb") as audio:
            resp = session.post(
                DEEPGRAM_LISTEN_URL,
                params=params,
                headers=headers,
                data=audio,
                timeout=self.cfg.provider_timeout,
            )
        try:
            resp.raise_for_status()
            payload = resp.json()
        finally:
            resp.close()
        words = _extract_words(payload)
        logger.debug("Deepgram returned %d words", len(words))
        return TranscriptionResult(
            format_deepgram_words(words), self.model.model_id, self.model.cost_per_minute_cents
        )
