"""Per-run services shared by every item: resolved providers, retry policy and store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .. import config
from ..db import ShowNoteStore
from ..filesystem import validate_and_normalize_output_dir
from ..llm import create_llm_provider, LLMProvider
from ..options import ProcessingOptions
from ..providers.catalog import ProviderModel
from ..providers.registry import ProviderRegistry
from ..transcription import create_transcription_provider, TranscriptionProvider
from ..utils.retry import RetryPolicy

logger = logging.getLogger(__name__)


@dataclass
class PipelineRuntime:
    """Everything an item run needs besides the item itself.

    Built once per invocation so provider resolution failures stop the run
    before any item starts, and so a loaded local model is reused across items.
    """

    cfg: config.Config
    options: ProcessingOptions
    output_dir: str
    policy: RetryPolicy
    transcription_service: str
    transcription_model: ProviderModel
    transcription_provider: TranscriptionProvider
    llm_service: Optional[str] = None
    llm_model: Optional[ProviderModel] = None
    llm_provider: Optional[LLMProvider] = None
    store: Optional[ShowNoteStore] = None


def retry_policy_for(cfg: config.Config) -> RetryPolicy:
    return RetryPolicy(max_attempts=cfg.max_attempts, base_delay=cfg.retry_base_delay)


def build_runtime(
    cfg: config.Config,
    options: ProcessingOptions,
    *,
    registry: Optional[ProviderRegistry] = None,
    store: Optional[ShowNoteStore] = None,
    transcription_provider: Optional[TranscriptionProvider] = None,
    llm_provider: Optional[LLMProvider] = None,
) -> PipelineRuntime:
    """Resolve providers and open the store for one invocation.

    Providers passed in are used as-is; otherwise they are created from the
    resolved service and model.

    Raises:
        ProviderResolutionError: If a selected service cannot be resolved
        PersistenceError: If the store cannot be opened
    """
    registry = registry or ProviderRegistry(cfg)

    t_spec, t_model = registry.require(registry.resolve_transcription(options), "transcription")
    logger.info("Transcription: %s (%s)", t_spec.name, t_model.model_id)
    if transcription_provider is None:
        transcription_provider = create_transcription_provider(cfg, t_spec.key, t_model)

    llm_service: Optional[str] = None
    llm_model: Optional[ProviderModel] = None
    llm_resolution = registry.resolve_llm(options)
    if llm_resolution.service is None and llm_resolution.is_valid:
        logger.info("No LLM selected; writing prompt files only")
    else:
        l_spec, llm_model = registry.require(llm_resolution, "llm")
        llm_service = l_spec.key
        logger.info("LLM: %s (%s)", l_spec.name, llm_model.model_id)
        if llm_provider is None:
            llm_provider = create_llm_provider(cfg, llm_service, llm_model)

    return PipelineRuntime(
        cfg=cfg,
        options=options,
        output_dir=validate_and_normalize_output_dir(cfg.output_dir),
        policy=retry_policy_for(cfg),
        transcription_service=t_spec.key,
        transcription_model=t_model,
        transcription_provider=transcription_provider,
        llm_service=llm_service,
        llm_model=llm_model,
        llm_provider=llm_provider if llm_service else None,
        store=store if store is not None else ShowNoteStore(str(cfg.database_url)),
    )
