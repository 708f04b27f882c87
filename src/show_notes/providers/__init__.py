"""Provider catalog and registry for transcription and LLM services."""

from .catalog import (
    DEFAULT_TRANSCRIPTION_SERVICE,
    LLM_CATALOG,
    LLM_SERVICES,
    ProviderModel,
    ProviderSpec,
    TRANSCRIPTION_CATALOG,
    TRANSCRIPTION_SERVICES,
)

__all__ = [
    "DEFAULT_TRANSCRIPTION_SERVICE",
    "LLM_CATALOG",
    "LLM_SERVICES",
    "ProviderModel",
    "ProviderSpec",
    "TRANSCRIPTION_CATALOG",
    "TRANSCRIPTION_SERVICES",
]
