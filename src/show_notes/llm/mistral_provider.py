"""Mistral chat completions through the mistralai SDK."""

from __future__ import annotations

import logging
from typing import Any, Dict

try:
    from mistralai import Mistral
except ImportError:
    Mistral = None  # type: ignore

from .. import config
from ..providers.catalog import ProviderModel
from .base import as_token_count, combine_prompt, LLMResult, LLMUsage, MAX_OUTPUT_TOKENS
from .base import quiet_sdk_loggers

logger = logging.getLogger(__name__)

MILLISECONDS_PER_SECOND = 1000


class MistralProvider:
    service = "mistral"

    def __init__(self, cfg: config.Config, model: ProviderModel):
        """Create the Mistral client.

        Raises:
            ImportError: If the mistralai package is not installed
            ValueError: If the Mistral API key is missing
        """
        if Mistral is None:
            raise ImportError(
                "mistralai package required for Mistral provider. "
                "Install with: pip install mistralai"
            )
        if not cfg.mistral_api_key:
            raise ValueError(
                "Mistral API key required for Mistral provider. "
                "Set MISTRAL_API_KEY environment variable or mistral_api_key in config."
            )
        self.cfg = cfg
        self.model_id = model.model_id

        quiet_sdk_loggers(["mistralai", "httpx", "httpcore"])

        client_kwargs: Dict[str, Any] = {"api_key": cfg.mistral_api_key}
        if cfg.provider_timeout:
            client_kwargs["timeout_ms"] = int(cfg.provider_timeout * MILLISECONDS_PER_SECOND)
        self.client = Mistral(**client_kwargs)

    def complete(self, prompt: str, transcript: str) -> LLMResult:
        logger.debug("Calling Mistral chat.complete (model: %s)", self.model_id)
        response = self.client.chat.complete(
            model=self.model_id,
            max_tokens=MAX_OUTPUT_TOKENS,
            messages=[{"role": "user", "content": combine_prompt(prompt, transcript)}],
        )
        # Mistral SDK response structure: response.choices[0].message.content
        if not response or not response.choices or not response.choices[0].message.content:
            raise ValueError("No valid response from the Mistral API")
        content = response.choices[0].message.content
        text = content if isinstance(content, str) else str(content)

        usage = response.usage
        return LLMResult(
            text=text,
            usage=LLMUsage(
                input_tokens=as_token_count(getattr(usage, "prompt_tokens", None)),
                output_tokens=as_token_count(getattr(usage, "completion_tokens", None)),
                total_tokens=as_token_count(getattr(usage, "total_tokens", None)),
            ),
        )
