"""Drive one item through the five pipeline stages and configure logging."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from ..exceptions import StageError
from ..filesystem import remove_intermediate, WAV_EXTENSION
from ..models import RSSItem, ShowNoteRecord
from .runtime import PipelineRuntime
from .stages import acquire_audio, generate_markdown, run_llm, run_transcription, select_prompt
from .types import ProcessContext

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
NOISY_LOGGERS = ("urllib3", "openai", "anthropic", "httpx", "httpcore")


def apply_log_level(level: str, log_file: Optional[str] = None) -> None:
    """Apply logging level to root logger and configure handlers.

    Args:
        level: Log level string (e.g., 'DEBUG', 'INFO', 'WARNING')
        log_file: Optional path to log file. If provided, logs will be written to both
                  console and file.

    Raises:
        ValueError: If log level is invalid
        OSError: If log file cannot be created or written to
    """
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    root_logger = logging.getLogger()
    formatter = logging.Formatter(LOG_FORMAT)

    if not root_logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)
    else:
        for handler in root_logger.handlers:
            handler.setLevel(numeric_level)
            handler.setFormatter(formatter)
    root_logger.setLevel(numeric_level)

    if log_file:
        file_handler_exists = any(
            isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_file)
            for h in root_logger.handlers
        )
        if not file_handler_exists:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            logger.info(f"Logging to file: {log_file}")

    if numeric_level <= logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def _cleanup(ctx: ProcessContext, runtime: PipelineRuntime) -> None:
    audio_path = ctx.audio_path
    # A failed download can leave a partial file at the target path
    if audio_path is None and ctx.markdown is not None:
        audio_path = f"{ctx.markdown.base_path}{WAV_EXTENSION}"
    if audio_path is None:
        return
    if runtime.options.keep_intermediates:
        logger.debug("Keeping intermediate audio %s", audio_path)
        return
    remove_intermediate(audio_path)


def process_item(
    source: str,
    source_kind: str,
    runtime: PipelineRuntime,
    rss_item: Optional[RSSItem] = None,
) -> ShowNoteRecord:
    """Run the five stages for one item and return its persisted record.

    Stages run strictly in order: markdown, audio, transcription, prompt,
    LLM. The canonical WAV is removed afterwards unless intermediates are
    kept, whether or not the run succeeded.

    Args:
        source: Video URL, local file path, or enclosure URL
        source_kind: ``"video"``, ``"file"`` or ``"rss"``
        runtime: Per-run providers, policy and store
        rss_item: The normalized feed item for RSS sources

    Raises:
        StageError: Naming the failed stage and item; the original error is the cause
    """
    ctx = ProcessContext(source=source, source_kind=source_kind, rss_item=rss_item)
    stage = "markdown"
    try:
        ctx.markdown = generate_markdown(
            source, source_kind, runtime.output_dir, runtime.policy, rss_item=rss_item
        )

        stage = "audio"
        base_path = ctx.require("markdown").base_path
        ctx.audio_path = acquire_audio(source, source_kind, base_path, runtime.policy)

        stage = "transcription"
        ctx.transcript = run_transcription(
            ctx.require("audio_path"), runtime.transcription_provider, runtime.policy
        )

        stage = "prompt"
        ctx.prompt = select_prompt(runtime.options)

        stage = "llm"
        markdown = ctx.require("markdown")
        ctx.result = run_llm(
            markdown.base_path,
            markdown.frontmatter,
            markdown.metadata,
            ctx.require("prompt"),
            ctx.require("transcript"),
            runtime.policy,
            provider=runtime.llm_provider,
            model=runtime.llm_model,
            store=runtime.store,
        )
    except Exception as exc:
        logger.error("Stage '%s' failed for %s: %s", stage, source, exc)
        raise StageError(stage, source, str(exc)) from exc
    finally:
        _cleanup(ctx, runtime)

    return ctx.require("result").record
