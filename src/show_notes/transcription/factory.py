"""Factory for creating transcription providers."""

from __future__ import annotations

from .. import config
from ..providers.catalog import ProviderModel
from .base import TranscriptionProvider


def create_transcription_provider(
    cfg: config.Config, service: str, model: ProviderModel
) -> TranscriptionProvider:
    """Create the provider for a resolved transcription service.

    Args:
        cfg: Configuration holding API keys and timeouts
        service: Service key (``"whisper"``, ``"deepgram"`` or ``"assembly"``)
        model: Resolved model from the provider registry

    Returns:
        TranscriptionProvider instance

    Raises:
        ValueError: If the service is not supported or its API key is missing
    """
    if service == "whisper":
        from .whisper_provider import WhisperProvider

        return WhisperProvider(cfg, model)
    elif service == "deepgram":
        from .deepgram_provider import DeepgramProvider

        return DeepgramProvider(cfg, model)
    elif service == "assembly":
        from .assembly_provider import AssemblyProvider

        return AssemblyProvider(cfg, model)
    raise ValueError(
        f"Unsupported transcription provider: {service}. "
        "Supported providers: 'whisper', 'deepgram', 'assembly'."
    )
