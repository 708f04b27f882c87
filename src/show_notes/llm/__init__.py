"""LLM providers behind a common ``complete(prompt, transcript)`` interface."""

from .base import LLMProvider, LLMResult, LLMUsage
from .factory import create_llm_provider

__all__ = ["LLMProvider", "LLMResult", "LLMUsage", "create_llm_provider"]
