"""Stage 4: assemble the prompt text."""

from __future__ import annotations

import logging

from ...options import ProcessingOptions
from ...prompts import build_prompt

logger = logging.getLogger(__name__)


def select_prompt(options: ProcessingOptions) -> str:
    prompt = build_prompt(options.prompt, options.custom_prompt)
    logger.debug("Prompt assembled (%d characters)", len(prompt))
    return prompt
