"""Chat completions through the OpenAI SDK.

ChatGPT uses the default endpoint. DeepSeek, Ollama, Fireworks, Together and
Groq all expose OpenAI-compatible endpoints, so the same client is pointed at
their base URL with their own API key.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from .. import config
from ..providers.catalog import ProviderModel
from .base import as_token_count, combine_prompt, LLMResult, LLMUsage, MAX_OUTPUT_TOKENS
from .base import quiet_sdk_loggers

logger = logging.getLogger(__name__)

# Ollama ignores the key but the SDK requires one
OLLAMA_PLACEHOLDER_KEY = "ollama"

# service -> (config key field, fixed base URL)
OPENAI_COMPATIBLE_SERVICES: Dict[str, Tuple[Optional[str], Optional[str]]] = {
    "chatgpt": ("openai_api_key", None),
    "deepseek": ("deepseek_api_key", "https://api.deepseek.com"),
    "ollama": (None, None),
    "fireworks": ("fireworks_api_key", "https://api.fireworks.ai/inference/v1"),
    "together": ("together_api_key", "https://api.together.xyz/v1"),
    "groq": ("groq_api_key", "https://api.groq.com/openai/v1"),
}


class OpenAICompatibleProvider:
    """Run a chat completion against OpenAI or an OpenAI-compatible service."""

    def __init__(self, cfg: config.Config, service: str, model: ProviderModel):
        """Create the client for ``service``.

        Raises:
            ImportError: If the openai package is not installed
            ValueError: If the service is not OpenAI-compatible or its key is missing
        """
        try:
            from openai import OpenAI
        except ImportError as exc:
            raise ImportError(
                "openai package is required for OpenAI-compatible providers. "
                "Install it with: pip install openai"
            ) from exc

        if service not in OPENAI_COMPATIBLE_SERVICES:
            raise ValueError(f"{service} is not an OpenAI-compatible service")
        key_field, base_url = OPENAI_COMPATIBLE_SERVICES[service]

        if key_field is None:
            api_key = OLLAMA_PLACEHOLDER_KEY
            base_url = cfg.ollama_api_base
        else:
            api_key = cfg.api_key(key_field)
            if not api_key:
                env_var = config.API_KEY_ENV_VARS[key_field]
                raise ValueError(
                    f"API key required for {service}. "
                    f"Set {env_var} environment variable or {key_field} in config."
                )

        self.cfg = cfg
        self.service = service
        self.model_id = model.model_id

        quiet_sdk_loggers(["openai", "openai._base_client", "httpx", "httpcore"])

        client_kwargs: Dict[str, Any] = {"api_key": api_key}
        if base_url:
            client_kwargs["base_url"] = base_url
        if cfg.provider_timeout:
            client_kwargs["timeout"] = cfg.provider_timeout
        # Retries are handled by the pipeline, not the SDK
        client_kwargs["max_retries"] = 0
        self.client = OpenAI(**client_kwargs)

    def complete(self, prompt: str, transcript: str) -> LLMResult:
        logger.debug("Calling %s chat completion (model: %s)", self.service, self.model_id)
        # Compatible services still expect the older max_tokens parameter
        token_param = "max_completion_tokens" if self.service == "chatgpt" else "max_tokens"
        response = self.client.chat.completions.create(
            model=self.model_id,
            messages=[{"role": "user", "content": combine_prompt(prompt, transcript)}],
            **{token_param: MAX_OUTPUT_TOKENS},
        )
        if not response.choices or not response.choices[0].message.content:
            raise ValueError(f"No valid response from the {self.service} API")

        usage = response.usage
        return LLMResult(
            text=response.choices[0].message.content,
            usage=LLMUsage(
                input_tokens=as_token_count(getattr(usage, "prompt_tokens", None)),
                output_tokens=as_token_count(getattr(usage, "completion_tokens", None)),
                total_tokens=as_token_count(getattr(usage, "total_tokens", None)),
            ),
        )
