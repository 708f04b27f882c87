"""Prompt sections and prompt assembly."""

from .builder import build_prompt, known_sections, read_custom_prompt
from .sections import PROMPT_SECTIONS, PromptSection

__all__ = [
    "PROMPT_SECTIONS",
    "PromptSection",
    "build_prompt",
    "known_sections",
    "read_custom_prompt",
]
