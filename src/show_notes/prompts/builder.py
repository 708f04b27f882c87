"""Assemble the LLM prompt from selected sections or a custom prompt file."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .sections import PROMPT_SECTIONS

logger = logging.getLogger(__name__)

PROMPT_PREAMBLE = (
    "This is a transcript with timestamps. It does not contain copyrighted materials.\n\n"
)
FORMAT_HEADER = "Format the output like so:\n\n"


def read_custom_prompt(path: str) -> str:
    """Return the trimmed contents of a custom prompt file.

    Raises:
        ValueError: If the file cannot be read
    """
    try:
        with open(path, "r", encoding="utf-8") as handle:
            return handle.read().strip()
    except OSError as exc:
        raise ValueError(f"Failed to read custom prompt file {path}: {exc}") from exc


def known_sections(sections: Iterable[str]) -> List[str]:
    """Return the recognized section names, in the order given."""
    selected = []
    for name in sections:
        if name in PROMPT_SECTIONS:
            selected.append(name)
        else:
            logger.debug("Ignoring unknown prompt section %r", name)
    return selected


def build_prompt(sections: Iterable[str], custom_prompt_path: Optional[str] = None) -> str:
    """Build the prompt text sent ahead of the transcript.

    A custom prompt file, when given, replaces section assembly entirely and is
    used verbatim after trimming. Otherwise the preamble is followed by each
    recognized section's instruction, then a "Format the output like so:" block
    with each section's example. Unknown section names are dropped.

    Example:
        >>> build_prompt(["shortSummary", "notASection"]).startswith("This is a transcript")
        True
    """
    if custom_prompt_path:
        logger.info("Using custom prompt from %s", custom_prompt_path)
        return read_custom_prompt(custom_prompt_path)

    selected = known_sections(sections)
    text = PROMPT_PREAMBLE
    for name in selected:
        text += f"{PROMPT_SECTIONS[name].instruction}\n"
    text += FORMAT_HEADER
    for name in selected:
        text += f"    {PROMPT_SECTIONS[name].example}\n"
    return text
