"""Command-line interface for show_notes."""

from __future__ import annotations

import argparse
import json
import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional, Sequence, Tuple, TYPE_CHECKING

from pydantic import ValidationError

from . import __version__, config, cost, progress, workflow
from .db import ShowNoteStore
from .exceptions import ShowNotesError
from .llm import create_llm_provider
from .options import ProcessingOptions
from .providers.catalog import LLM_SERVICES, TRANSCRIPTION_SERVICES
from .providers.registry import ProviderRegistry
from .workflow.runtime import retry_policy_for

if TYPE_CHECKING:  # pragma: no cover - typing only
    import tqdm

_LOGGER = logging.getLogger(__name__)

# Progress bar constants
TQDM_NCOLS = 80
TQDM_MIN_INTERVAL = 0.5

CONFIG_ARGUMENTS = ("output_dir", "database_url", "log_level", "log_file", "provider_timeout")
OPTION_ARGUMENTS = (
    "video",
    "playlist",
    "channel",
    "urls",
    "file",
    "rss",
    *TRANSCRIPTION_SERVICES,
    *LLM_SERVICES,
    "prompt",
    "custom_prompt",
    "item",
    "last",
    "skip",
    "order",
    "date",
    "last_days",
    "info",
    "keep_intermediates",
)


class _TqdmProgress:
    """Simple adapter that exposes tqdm's update interface."""

    def __init__(self, bar: "tqdm.tqdm") -> None:
        self._bar = bar

    def update(self, advance: int) -> None:
        self._bar.update(advance)


@contextmanager
def _tqdm_progress(total: Optional[int], description: str) -> Iterator[_TqdmProgress]:
    """Create a tqdm progress context matching the shared progress API."""
    from tqdm import tqdm

    kwargs: Dict[str, Any] = {
        "desc": description,
        "total": total,
        "unit": "item",
        "leave": True,
        "mininterval": TQDM_MIN_INTERVAL,
        "ncols": TQDM_NCOLS,
    }
    with tqdm(**kwargs) as bar:
        yield _TqdmProgress(bar)


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("sources")
    group.add_argument("--video", default=None, help="Process a single video URL")
    group.add_argument("--playlist", default=None, help="Process every video in a playlist")
    group.add_argument("--channel", default=None, help="Process videos from a channel")
    group.add_argument("--urls", default=None, help="Process URLs listed in a text file")
    group.add_argument("--file", default=None, help="Process a local audio or video file")
    group.add_argument(
        "--rss",
        nargs="+",
        default=None,
        help="Process podcast feed URLs (a .md path lists more feeds)",
    )


def _add_service_arguments(parser: argparse.ArgumentParser) -> None:
    """Each service flag takes an optional model id; a bare flag selects the default model."""
    transcription = parser.add_argument_group("transcription services")
    for service in TRANSCRIPTION_SERVICES:
        transcription.add_argument(
            f"--{service}",
            nargs="?",
            const=True,
            default=None,
            metavar="MODEL",
            help=f"Transcribe with {service}",
        )
    llm = parser.add_argument_group("LLM services")
    for service in LLM_SERVICES:
        llm.add_argument(
            f"--{service}",
            nargs="?",
            const=True,
            default=None,
            metavar="MODEL",
            help=f"Generate show notes with {service}",
        )


def _add_processing_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("processing")
    group.add_argument("--prompt", nargs="+", default=None, help="Prompt sections to include")
    group.add_argument(
        "--customPrompt",
        dest="custom_prompt",
        default=None,
        help="File whose contents are used as the prompt",
    )
    group.add_argument("--item", nargs="+", default=None, help="RSS enclosure URLs to process")
    group.add_argument("--last", type=int, default=None, help="Process the first N items")
    group.add_argument("--skip", type=int, default=None, help="Skip the first N items")
    group.add_argument("--order", default=None, help="Item order: newest or oldest")
    group.add_argument("--date", nargs="+", default=None, help="RSS publish dates (YYYY-MM-DD)")
    group.add_argument(
        "--lastDays",
        dest="last_days",
        type=int,
        default=None,
        help="RSS items published in the last N days",
    )
    group.add_argument(
        "--info",
        action="store_true",
        default=None,
        help="Write item metadata as JSON instead of processing",
    )
    group.add_argument(
        "--keep-intermediates",
        dest="keep_intermediates",
        action="store_true",
        default=None,
        help="Keep the converted WAV file after processing",
    )


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("configuration")
    group.add_argument("--config", default=None, help="Path to configuration file (JSON or YAML)")
    group.add_argument("--output-dir", dest="output_dir", default=None, help="Output directory")
    group.add_argument(
        "--database-url", dest="database_url", default=None, help="SQLAlchemy database URL"
    )
    group.add_argument("--log-level", dest="log_level", default=None, help="Logging level")
    group.add_argument("--log-file", dest="log_file", default=None, help="Also log to this file")
    group.add_argument(
        "--provider-timeout",
        dest="provider_timeout",
        type=float,
        default=None,
        help="Timeout in seconds for each transcription or LLM call",
    )
    group.add_argument("--version", action="store_true", help="Show program version and exit")


def _add_command_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("commands")
    commands = group.add_mutually_exclusive_group()
    commands.add_argument(
        "--list-notes", dest="list_notes", action="store_true", help="List stored show notes"
    )
    commands.add_argument(
        "--show-note", dest="show_note", type=int, default=None, metavar="ID", help="Show one note"
    )
    commands.add_argument(
        "--run-llm",
        dest="run_llm",
        default=None,
        metavar="PROMPT_FILE",
        help="Run the selected LLM on a saved -prompt.md file",
    )
    commands.add_argument(
        "--transcript-cost",
        dest="transcript_cost",
        default=None,
        metavar="FILE",
        help="Estimate transcription cost for an audio file",
    )
    commands.add_argument(
        "--llm-cost",
        dest="llm_cost",
        default=None,
        metavar="FILE",
        help="Estimate LLM cost for a prompt or transcript file",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="show-notes",
        description="Turn videos, audio files and podcast feeds into show notes.",
    )
    _add_source_arguments(parser)
    _add_service_arguments(parser)
    _add_processing_arguments(parser)
    _add_config_arguments(parser)
    _add_command_arguments(parser)
    return parser


def _split_config_data(data: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Split a config file mapping into ``Config`` and ``ProcessingOptions`` fields.

    Raises:
        ValueError: If a key belongs to neither model
    """
    option_keys = set(ProcessingOptions.model_fields) | {"lastDays"}
    cfg_data: Dict[str, Any] = {}
    opt_data: Dict[str, Any] = {}
    unknown = []
    for key, value in data.items():
        if key in config.Config.model_fields:
            cfg_data[key] = value
        elif key in option_keys:
            opt_data["last_days" if key == "lastDays" else key] = value
        else:
            unknown.append(key)
    if unknown:
        raise ValueError("Unknown config option(s): " + ", ".join(sorted(unknown)))
    return cfg_data, opt_data


def build_settings(args: argparse.Namespace) -> Tuple[config.Config, ProcessingOptions]:
    """Materialize Config and ProcessingOptions; CLI values override the config file.

    Raises:
        ValueError: If the config file is invalid
        pydantic.ValidationError: If a value or combination of options is invalid
    """
    cfg_data: Dict[str, Any] = {}
    opt_data: Dict[str, Any] = {}
    if args.config:
        cfg_data, opt_data = _split_config_data(config.load_config_file(args.config))

    for name in CONFIG_ARGUMENTS:
        value = getattr(args, name)
        if value is not None:
            cfg_data[name] = value
    for name in OPTION_ARGUMENTS:
        value = getattr(args, name)
        if value is not None:
            opt_data[name] = value

    return config.Config.model_validate(cfg_data), ProcessingOptions.model_validate(opt_data)


def _log_configuration(
    cfg: config.Config, options: ProcessingOptions, logger: logging.Logger
) -> None:
    logger.info("=" * 60)
    logger.info("Configuration")
    logger.info("=" * 60)
    logger.info(f"  Source: {options.source_kind or 'none'}")
    logger.info(f"  Output Directory: {cfg.output_dir}")
    logger.info(f"  Database: {cfg.database_url}")
    logger.info(f"  Transcription: {options.transcription_service}")
    logger.info(f"  LLM: {options.llm_service or 'none (prompt files only)'}")
    if options.custom_prompt:
        logger.info(f"  Custom Prompt: {options.custom_prompt}")
    else:
        logger.info(f"  Prompt Sections: {', '.join(options.prompt)}")
    logger.info(f"  Keep Intermediates: {options.keep_intermediates}")
    logger.info(f"  Provider Timeout: {cfg.provider_timeout or 'none'}")
    logger.info(f"  Log File: {cfg.log_file or 'console only'}")
    logger.info("=" * 60)


def _list_notes(store: ShowNoteStore) -> int:
    records = store.list_all()
    if not records:
        print("No show notes stored.")
        return 0
    for record in records:
        print(
            f"{record.id}\t{record.metadata.publish_date or '-'}\t"
            f"{record.llm_service or 'prompt'}\t{cost.format_cost(record.final_cost)}\t"
            f"{record.metadata.title}"
        )
    return 0


def _show_note(store: ShowNoteStore, note_id: int, log: logging.Logger) -> int:
    record = store.get_by_id(note_id)
    if record is None:
        log.error(f"Show note {note_id} not found")
        return 1
    print(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))
    return 0


def _run_llm_on_prompt_file(
    cfg: config.Config, options: ProcessingOptions, path: str, log: logging.Logger
) -> int:
    if not options.llm_service:
        log.error("Error: --run-llm requires an LLM service flag (e.g. --chatgpt)")
        return 1
    registry = ProviderRegistry(cfg)
    spec, model = registry.require(registry.resolve_llm(options), "llm")
    provider = create_llm_provider(cfg, spec.key, model)
    store = ShowNoteStore(str(cfg.database_url))
    try:
        result = workflow.rerun_prompt_file(
            path, provider, model, retry_policy_for(cfg), store=store
        )
    finally:
        store.close()
    log.info(f"Show notes written to {result.output_path} (record {result.record.id})")
    return 0


def _estimate_transcript_cost(
    cfg: config.Config, options: ProcessingOptions, path: str, log: logging.Logger
) -> int:
    registry = ProviderRegistry(cfg)
    spec, model = registry.require(registry.resolve_transcription(options), "transcription")
    cents = cost.estimate_transcription_cost(path, model.cost_per_minute_cents)
    log.info(
        f"Estimated transcription cost with {spec.name} ({model.model_id}): "
        f"{cost.format_cost(cost.cents_to_dollars(cents))}"
    )
    return 0


def _estimate_llm_cost(
    cfg: config.Config, options: ProcessingOptions, path: str, log: logging.Logger
) -> int:
    if not options.llm_service:
        log.error("Error: --llm-cost requires an LLM service flag (e.g. --claude)")
        return 1
    registry = ProviderRegistry(cfg)
    spec, model = registry.require(registry.resolve_llm(options), "llm")
    estimate = cost.estimate_llm_cost_for_file(path, model)
    log.info(
        f"Estimated LLM cost with {spec.name} ({model.model_id}): "
        f"input {cost.format_cost(estimate.input_cost)}, "
        f"output {cost.format_cost(estimate.output_cost)}, "
        f"total {cost.format_cost(estimate.total_cost)}"
    )
    return 0


def _run_command(
    args: argparse.Namespace,
    cfg: config.Config,
    options: ProcessingOptions,
    log: logging.Logger,
) -> Optional[int]:
    """Run a standalone command if one was requested; None means run the pipeline."""
    if args.list_notes or args.show_note is not None:
        store = ShowNoteStore(str(cfg.database_url))
        try:
            if args.list_notes:
                return _list_notes(store)
            return _show_note(store, args.show_note, log)
        finally:
            store.close()
    if args.run_llm:
        return _run_llm_on_prompt_file(cfg, options, args.run_llm, log)
    if args.transcript_cost:
        return _estimate_transcript_cost(cfg, options, args.transcript_cost, log)
    if args.llm_cost:
        return _estimate_llm_cost(cfg, options, args.llm_cost, log)
    return None


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    apply_log_level_fn: Optional[Callable[[str, Optional[str]], None]] = None,
    run_pipeline_fn: Optional[
        Callable[[config.Config, ProcessingOptions], Tuple[int, str]]
    ] = None,
    logger: Optional[logging.Logger] = None,
) -> int:
    """Entry point for the CLI; returns an exit status code."""
    progress.set_progress_factory(_tqdm_progress)
    log = logger or _LOGGER
    if apply_log_level_fn is None:
        apply_log_level_fn = workflow.apply_log_level
    if run_pipeline_fn is None:
        run_pipeline_fn = workflow.run_pipeline

    args = build_parser().parse_args(argv)
    if args.version:
        print(f"show_notes {__version__}")
        return 0

    try:
        cfg, options = build_settings(args)
    except ValueError as exc:
        # pydantic's ValidationError is a ValueError subclass
        if isinstance(exc, ValidationError):
            log.error(f"Invalid options: {exc.errors()[0].get('msg', exc)}")
        else:
            log.error(f"Error: {exc}")
        return 1

    try:
        apply_log_level_fn(cfg.log_level, cfg.log_file)
    except (ValueError, OSError) as exc:
        log.error(f"Error: {exc}")
        return 1

    try:
        status = _run_command(args, cfg, options, log)
        if status is not None:
            return status

        if not options.source_kind:
            log.error(
                "Error: no source given. "
                "Use --video, --playlist, --channel, --urls, --file or --rss"
            )
            return 1

        log.info("Starting show notes run")
        _log_configuration(cfg, options, log)
        _, summary = run_pipeline_fn(cfg, options)
    except ShowNotesError as exc:
        log.error(f"Error: {exc}")
        return 1
    except ValueError as exc:
        log.error(f"Error: {exc}")
        return 1
    except Exception as exc:  # pragma: no cover
        log.error(f"Unexpected failure: {exc}")
        return 1

    log.info(summary)
    return 0


if __name__ == "__main__":  # pragma: no cover - script entry
    raise SystemExit(main())
