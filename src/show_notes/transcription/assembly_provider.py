"""AssemblyAI transcription: upload, request, then poll until the transcript is done."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict

from .. import config, downloader
from ..providers.catalog import ProviderModel
from .base import TranscriptionResult
from .formatting import format_assembly_transcript

logger = logging.getLogger(__name__)

ASSEMBLY_BASE_URL = "https://api.assemblyai.com/v2"
POLL_INTERVAL_SECONDS = 3.0


class AssemblyProvider:
    """Transcribe with AssemblyAI, labelling speakers in the formatted output.

    Polling stops with an error once ``provider_timeout`` seconds have passed
    since the transcript was requested; without a timeout it polls until the
    transcript completes or fails.
    """

    service = "assembly"

    def __init__(
        self,
        cfg: config.Config,
        model: ProviderModel,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not cfg.assembly_api_key:
            raise ValueError(
                "AssemblyAI API key required for AssemblyAI provider. "
                "Set ASSEMBLY_API_KEY environment variable or assembly_api_key in config."
            )
        self.cfg = cfg
        self.model = model
        self._sleep = sleep

    def _headers(self, content_type: str = "application/json") -> Dict[str, str]:
        return {
            "Authorization": str(self.cfg.assembly_api_key),
            "Content-Type": content_type,
            "User-Agent": self.cfg.user_agent,
        }

    def _upload(self, audio_path: str) -> str:
        session = downloader.get_session()
        with open(audio_path, "rb") as audio:
            resp = session.post(
                f"{ASSEMBLY_BASE_URL}/upload",
                headers=self._headers("application/octet-stream"),
                data=audio,
                timeout=self.cfg.provider_timeout,
            )
        resp.raise_for_status()
        upload_url = resp.json().get("upload_url")
        if not upload_url:
            raise ValueError("Upload URL not returned by AssemblyAI.")
        logger.debug("Audio file uploaded to AssemblyAI")
        return str(upload_url)

    def _request(self, upload_url: str) -> str:
        resp = downloader.get_session().post(
            f"{ASSEMBLY_BASE_URL}/transcript",
            headers=self._headers(),
            json={
                "audio_url": upload_url,
                "speech_model": self.model.model_id,
                "speaker_labels": True,
            },
            timeout=self.cfg.provider_timeout,
        )
        resp.raise_for_status()
        return str(resp.json()["id"])

    def _poll(self, transcript_id: str) -> Dict[str, Any]:
        deadline = None
        if self.cfg.provider_timeout:
            deadline = time.monotonic() + self.cfg.provider_timeout
        while True:
            resp = downloader.get_session().get(
                f"{ASSEMBLY_BASE_URL}/transcript/{transcript_id}",
                headers=self._headers(),
                timeout=self.cfg.provider_timeout,
            )
            resp.raise_for_status()
            transcript = resp.json()
            status = transcript.get("status")
            if status == "completed":
                return transcript
            if status == "error" or transcript.get("error"):
                raise RuntimeError(f"Transcription failed: {transcript.get('error')}")
            if deadline is not None and time.monotonic() >= deadline:
                raise TimeoutError(
                    f"AssemblyAI transcript {transcript_id} not ready after "
                    f"{self.cfg.provider_timeout}s (status={status})"
                )
            self._sleep(POLL_INTERVAL_SECONDS)

    def transcribe(self, audio_path: str) -> TranscriptionResult:
        logger.info("    transcribing with AssemblyAI (%s)...", self.model.model_id)
        transcript = self._poll(self._request(self._upload(audio_path)))
        return TranscriptionResult(
            format_assembly_transcript(transcript),
            self.model.model_id,
            self.model.cost_per_minute_cents,
        )
