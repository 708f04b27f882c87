"""Factory for creating LLM providers."""

from __future__ import annotations

from .. import config
from ..providers.catalog import ProviderModel
from .base import LLMProvider
from .openai_provider import OPENAI_COMPATIBLE_SERVICES


def create_llm_provider(cfg: config.Config, service: str, model: ProviderModel) -> LLMProvider:
    """Create the provider for a resolved LLM service.

    Args:
        cfg: Configuration holding API keys and timeouts
        service: Service key from the LLM catalog
        model: Resolved model from the provider registry

    Returns:
        LLMProvider instance

    Raises:
        ValueError: If the service is not supported or its API key is missing
        ImportError: If the service's SDK is not installed
    """
    if service in OPENAI_COMPATIBLE_SERVICES:
        from .openai_provider import OpenAICompatibleProvider

        return OpenAICompatibleProvider(cfg, service, model)
    elif service == "claude":
        from .anthropic_provider import AnthropicProvider

        return AnthropicProvider(cfg, model)
    elif service == "gemini":
        from .gemini_provider import GeminiProvider

        return GeminiProvider(cfg, model)
    elif service == "mistral":
        from .mistral_provider import MistralProvider

        return MistralProvider(cfg, model)
    raise ValueError(f"Unsupported LLM provider: {service}")
