"""Show notes pipeline: per-item stages, batch drivers and the run entry point."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from .. import config
from ..db import ShowNoteStore
from ..options import ProcessingOptions
from .batch import BatchSummary, process_channel, process_file, process_playlist
from .batch import process_rss, process_urls, process_video, run_source, validate_source_options
from .orchestration import apply_log_level, process_item
from .prompt_file import parse_prompt_file, rerun_prompt_file
from .runtime import build_runtime, PipelineRuntime

logger = logging.getLogger(__name__)


def _summarize(summary: BatchSummary, options: ProcessingOptions) -> str:
    if summary.info_files:
        return f"Info written for {summary.total} item(s): {', '.join(summary.info_files)}"
    text = f"Processed {summary.processed} of {summary.total} item(s)"
    if summary.skipped:
        text += f", skipped {summary.skipped}"
    if not options.llm_service:
        text += " (prompt files only)"
    return text


def run_pipeline(
    cfg: config.Config,
    options: ProcessingOptions,
    *,
    store: Optional[ShowNoteStore] = None,
) -> Tuple[int, str]:
    """Run the selected source through the pipeline.

    Args:
        cfg: Runtime configuration
        options: What to process and with which providers
        store: Show note store (default: opened from ``cfg.database_url``)

    Returns:
        Tuple of (processed item count, one-line summary)

    Raises:
        ValidationError: If the options are invalid
        ProviderResolutionError: If a selected service cannot be resolved
        StageError: If a single video or file failed
        ExternalCallError: If a feed, playlist or channel could not be listed
    """
    validate_source_options(options)
    runtime = build_runtime(cfg, options, store=store)
    try:
        summary = run_source(runtime)
    finally:
        if store is None and runtime.store is not None:
            runtime.store.close()
    return summary.processed, _summarize(summary, options)


__all__ = [
    "BatchSummary",
    "PipelineRuntime",
    "apply_log_level",
    "build_runtime",
    "parse_prompt_file",
    "process_channel",
    "process_file",
    "process_item",
    "process_playlist",
    "process_rss",
    "process_urls",
    "process_video",
    "rerun_prompt_file",
    "run_pipeline",
    "run_source",
    "validate_source_options",
]
