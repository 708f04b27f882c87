"""Gemini completions through the google-generativeai SDK."""

from __future__ import annotations

import logging
from typing import Any, Dict

# Import Gemini SDK
try:
    import google.generativeai as genai
except ImportError:
    genai = None  # type: ignore

from .. import config
from ..providers.catalog import ProviderModel
from .base import as_token_count, combine_prompt, LLMResult, LLMUsage, MAX_OUTPUT_TOKENS
from .base import quiet_sdk_loggers

logger = logging.getLogger(__name__)


class GeminiProvider:
    service = "gemini"

    def __init__(self, cfg: config.Config, model: ProviderModel):
        """Configure the Gemini SDK.

        Raises:
            ImportError: If google-generativeai is not installed
            ValueError: If the Gemini API key is missing
        """
        if genai is None:
            raise ImportError(
                "google-generativeai package required for Gemini provider. "
                "Install with: pip install google-generativeai"
            )
        if not cfg.gemini_api_key:
            raise ValueError(
                "Gemini API key required for Gemini provider. "
                "Set GEMINI_API_KEY environment variable or gemini_api_key in config."
            )
        self.cfg = cfg
        self.model_id = model.model_id

        quiet_sdk_loggers(["google.generativeai", "google.api_core"])
        genai.configure(api_key=cfg.gemini_api_key)

    def complete(self, prompt: str, transcript: str) -> LLMResult:
        logger.debug("Calling Gemini generate_content (model: %s)", self.model_id)
        model = genai.GenerativeModel(
            self.model_id,
            generation_config={"max_output_tokens": MAX_OUTPUT_TOKENS},
        )
        kwargs: Dict[str, Any] = {}
        if self.cfg.provider_timeout:
            kwargs["request_options"] = {"timeout": self.cfg.provider_timeout}
        response = model.generate_content(combine_prompt(prompt, transcript), **kwargs)

        text = response.text if hasattr(response, "text") else str(response)
        if not text:
            raise ValueError("Gemini API returned an empty response")

        usage = getattr(response, "usage_metadata", None)
        return LLMResult(
            text=text,
            usage=LLMUsage(
                input_tokens=as_token_count(getattr(usage, "prompt_token_count", None)),
                output_tokens=as_token_count(getattr(usage, "candidates_token_count", None)),
                total_tokens=as_token_count(getattr(usage, "total_token_count", None)),
            ),
        )
