"""Re-run the LLM stage on a previously written ``-prompt.md`` file."""

from __future__ import annotations

import logging
import os
import re
from typing import Dict, List, NamedTuple, Optional

from ..db import ShowNoteStore
from ..filesystem import PROMPT_SUFFIX
from ..llm import LLMProvider
from ..models import metadata_from_dict, ShowNoteMetadata
from ..providers.catalog import ProviderModel
from ..utils.retry import RetryPolicy
from .stages.llm import run_llm, TRANSCRIPT_HEADING
from .types import LLMStageResult, TranscriptResult

logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"
_FRONTMATTER_LINE_RE = re.compile(r'^(\w+):\s*"?([^"]+)"?')


class PromptFile(NamedTuple):
    """The pieces of a saved prompt file."""

    frontmatter: str
    metadata: ShowNoteMetadata
    prompt: str
    transcript: str


def parse_prompt_file(text: str) -> PromptFile:
    """Split a prompt file into front matter, prompt and transcript.

    Front matter is the block between the first two ``---`` lines. The prompt
    is everything after it up to the ``## Transcript`` heading (matched
    case-insensitively); the transcript is everything after the heading.

    Raises:
        ValueError: If the file has no transcript section
    """
    lines = text.splitlines()
    frontmatter_lines: List[str] = []
    values: Dict[str, str] = {}
    index = 0

    if lines and lines[0].strip() == FRONTMATTER_DELIMITER:
        frontmatter_lines.append(lines[0])
        index = 1
        while index < len(lines):
            line = lines[index]
            frontmatter_lines.append(line)
            index += 1
            if line.strip() == FRONTMATTER_DELIMITER:
                break
            match = _FRONTMATTER_LINE_RE.match(line)
            if match:
                values[match.group(1)] = match.group(2).strip()

    heading_index: Optional[int] = None
    for position in range(index, len(lines)):
        if lines[position].strip().lower().startswith(TRANSCRIPT_HEADING.lower()):
            heading_index = position
            break
    if heading_index is None:
        raise ValueError(f"No '{TRANSCRIPT_HEADING}' section found")

    prompt_lines = lines[index:heading_index]
    while prompt_lines and not prompt_lines[0].strip():
        prompt_lines.pop(0)
    transcript_lines = lines[heading_index + 1 :]
    while transcript_lines and not transcript_lines[0].strip():
        transcript_lines.pop(0)

    prompt = "\n".join(prompt_lines)
    if prompt_lines:
        prompt += "\n"
    frontmatter = "\n".join(frontmatter_lines)
    if frontmatter_lines:
        frontmatter += "\n"
    return PromptFile(
        frontmatter=frontmatter,
        metadata=metadata_from_dict(values),
        prompt=prompt,
        transcript="\n".join(transcript_lines),
    )


def base_path_for(path: str) -> str:
    """Return the output base path a prompt file was written for."""
    if path.endswith(PROMPT_SUFFIX):
        return path[: -len(PROMPT_SUFFIX)]
    return os.path.splitext(path)[0]


def rerun_prompt_file(
    path: str,
    provider: LLMProvider,
    model: ProviderModel,
    policy: RetryPolicy,
    store: Optional[ShowNoteStore] = None,
) -> LLMStageResult:
    """Send a saved prompt file to ``provider`` and write its show notes beside it.

    No transcription ran for this call, so the record carries no
    transcription service or cost.

    Raises:
        ValueError: If the file cannot be read or parsed
        ExternalCallError: If the LLM call kept failing
        PersistenceError: If the record could not be stored
    """
    try:
        with open(path, "r", encoding="utf-8") as handle:
            text = handle.read()
    except OSError as exc:
        raise ValueError(f"Failed to read prompt file {path}: {exc}") from exc

    parsed = parse_prompt_file(text)
    logger.info("Running %s on prompt file %s", provider.service, path)
    return run_llm(
        base_path_for(path),
        parsed.frontmatter,
        parsed.metadata,
        parsed.prompt,
        TranscriptResult(parsed.transcript, "", "", 0.0),
        policy,
        provider=provider,
        model=model,
        store=store,
    )
