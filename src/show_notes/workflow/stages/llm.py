"""Stage 5: run the LLM (or stop at the prompt), write markdown and persist the record."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from ...cost import approximate_tokens, cents_to_dollars, estimate_llm_cost, format_cost, LLMCost
from ...db import ShowNoteStore
from ...filesystem import PROMPT_SUFFIX, SHOWNOTES_SUFFIX, write_text_file
from ...llm import LLMProvider, LLMResult
from ...models import ShowNoteMetadata, ShowNoteRecord
from ...providers.catalog import ProviderModel
from ...utils.retry import retry_with_exponential_backoff, RetryPolicy
from ..types import LLMStageResult, TranscriptResult

logger = logging.getLogger(__name__)

TRANSCRIPT_HEADING = "## Transcript"


def prompt_file_content(frontmatter: str, prompt: str, transcript: str) -> str:
    """Lay out a prompt file; the transcript heading always starts its own line."""
    if prompt and not prompt.endswith("\n"):
        prompt += "\n"
    return f"{frontmatter}\n{prompt}{TRANSCRIPT_HEADING}\n\n{transcript}"


def shownotes_file_content(frontmatter: str, llm_output: str, transcript: str) -> str:
    return f"{frontmatter}\n{llm_output}\n\n{TRANSCRIPT_HEADING}\n\n{transcript}"


def shownotes_path(base_path: str, service: str) -> str:
    return f"{base_path}-{service}{SHOWNOTES_SUFFIX}"


def llm_token_counts(prompt: str, transcript: str, result: LLMResult) -> Tuple[int, int, bool]:
    """Return (input, output, estimated) token counts for pricing.

    Provider-reported usage is used when present. Missing counts fall back to
    a whitespace word count, which only approximates real tokenization.
    """
    input_tokens = result.usage.input_tokens
    output_tokens = result.usage.output_tokens
    estimated = input_tokens is None or output_tokens is None
    if input_tokens is None:
        input_tokens = approximate_tokens(f"{prompt}\n{transcript}")
    if output_tokens is None:
        output_tokens = approximate_tokens(result.text)
    return input_tokens, output_tokens, estimated


def call_llm(
    provider: LLMProvider,
    model: ProviderModel,
    prompt: str,
    transcript: str,
    policy: RetryPolicy,
) -> Tuple[LLMResult, LLMCost]:
    """Run ``provider`` under the retry policy and price the call.

    Raises:
        ExternalCallError: If every attempt failed
    """
    result = retry_with_exponential_backoff(
        lambda: provider.complete(prompt, transcript),
        policy,
        description=f"{provider.service} completion",
    )
    input_tokens, output_tokens, estimated = llm_token_counts(prompt, transcript, result)
    cost = estimate_llm_cost(model, input_tokens, output_tokens)
    logger.info(
        "  - %s (%s): %d input / %d output tokens%s, cost %s",
        provider.service,
        model.model_id,
        input_tokens,
        output_tokens,
        " (estimated from word count)" if estimated else "",
        format_cost(cost.total_cost),
    )
    return result, cost


def _persist(store: Optional[ShowNoteStore], record: ShowNoteRecord) -> ShowNoteRecord:
    if store is not None:
        record.id = store.insert(record)
    return record


def run_llm(
    base_path: str,
    frontmatter: str,
    metadata: ShowNoteMetadata,
    prompt: str,
    transcript: TranscriptResult,
    policy: RetryPolicy,
    *,
    provider: Optional[LLMProvider] = None,
    model: Optional[ProviderModel] = None,
    store: Optional[ShowNoteStore] = None,
) -> LLMStageResult:
    """Write the item's markdown file and persist its record.

    Without a provider the front matter, prompt and transcript go to
    ``<base>-prompt.md`` and no LLM fields are recorded. With one, its output
    goes to ``<base>-<service>-shownotes.md``. Files are written before the
    record is inserted so a store failure never loses generated content.

    Raises:
        ExternalCallError: If the LLM call kept failing
        PersistenceError: If the record could not be stored
    """
    transcription_cost = cents_to_dollars(transcript.cost_cents)
    record = ShowNoteRecord(
        metadata=metadata,
        frontmatter=frontmatter,
        prompt=prompt,
        transcript=transcript.text,
        transcription_service=transcript.service or None,
        transcription_model=transcript.model_id or None,
        transcription_cost=transcription_cost,
        final_cost=transcription_cost,
    )

    if provider is None:
        output_path = f"{base_path}{PROMPT_SUFFIX}"
        write_text_file(output_path, prompt_file_content(frontmatter, prompt, transcript.text))
        logger.info("  - prompt file written: %s", output_path)
        return LLMStageResult(output_path, _persist(store, record))

    if model is None:
        raise ValueError(f"No model resolved for LLM provider {provider.service}")
    result, cost = call_llm(provider, model, prompt, transcript.text, policy)

    output_path = shownotes_path(base_path, provider.service)
    write_text_file(output_path, shownotes_file_content(frontmatter, result.text, transcript.text))
    logger.info("  - show notes written: %s", output_path)

    record.llm_output = result.text
    record.llm_service = provider.service
    record.llm_model = model.model_id
    record.llm_cost = cost.total_cost
    record.final_cost = transcription_cost + cost.total_cost
    return LLMStageResult(output_path, _persist(store, record))
