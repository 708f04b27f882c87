"""Claude completions through the Anthropic SDK."""

from __future__ import annotations

import logging
from typing import Any, Dict

# Import Anthropic SDK
try:
    from anthropic import Anthropic
except ImportError:
    Anthropic = None  # type: ignore

from .. import config
from ..providers.catalog import ProviderModel
from .base import as_token_count, combine_prompt, LLMResult, LLMUsage, MAX_OUTPUT_TOKENS
from .base import quiet_sdk_loggers

logger = logging.getLogger(__name__)


class AnthropicProvider:
    service = "claude"

    def __init__(self, cfg: config.Config, model: ProviderModel):
        """Create the Anthropic client.

        Raises:
            ImportError: If the anthropic package is not installed
            ValueError: If the Anthropic API key is missing
        """
        if Anthropic is None:
            raise ImportError(
                "anthropic package required for Claude provider. "
                "Install with: pip install anthropic"
            )
        if not cfg.anthropic_api_key:
            raise ValueError(
                "Anthropic API key required for Claude provider. "
                "Set ANTHROPIC_API_KEY environment variable or anthropic_api_key in config."
            )
        self.cfg = cfg
        self.model_id = model.model_id

        quiet_sdk_loggers(["anthropic", "anthropic._client", "httpx", "httpcore"])

        client_kwargs: Dict[str, Any] = {"api_key": cfg.anthropic_api_key, "max_retries": 0}
        if cfg.provider_timeout:
            client_kwargs["timeout"] = cfg.provider_timeout
        self.client = Anthropic(**client_kwargs)  # type: ignore[arg-type]

    def complete(self, prompt: str, transcript: str) -> LLMResult:
        logger.debug("Calling Anthropic messages API (model: %s)", self.model_id)
        response = self.client.messages.create(
            model=self.model_id,
            max_tokens=MAX_OUTPUT_TOKENS,
            messages=[{"role": "user", "content": combine_prompt(prompt, transcript)}],
        )

        # Only text blocks carry output
        text = next(
            (block.text for block in response.content or [] if getattr(block, "text", None)),
            "",
        )
        if not text:
            raise ValueError("No text content returned from the Anthropic API")

        input_tokens = as_token_count(getattr(response.usage, "input_tokens", None))
        output_tokens = as_token_count(getattr(response.usage, "output_tokens", None))
        total = None
        if input_tokens is not None and output_tokens is not None:
            total = input_tokens + output_tokens
        return LLMResult(text, LLMUsage(input_tokens, output_tokens, total))
