"""The five ordered pipeline stages."""

from .audio import acquire_audio
from .llm import run_llm
from .markdown import generate_markdown
from .prompt import select_prompt
from .transcription import run_transcription

__all__ = ["acquire_audio", "generate_markdown", "run_llm", "run_transcription", "select_prompt"]
