"""Resolve a requested transcription or LLM service to a concrete model.

The registry is built from an explicit ``Config`` so API key presence is
checked against that configuration rather than the process environment.
"""

from __future__ import annotations

import logging
from typing import Dict, NamedTuple, Optional, Tuple

from .. import config
from ..exceptions import ProviderResolutionError
from ..options import BARE_FLAG_VALUE, ProcessingOptions
from .catalog import Capability, LLM_CATALOG, ProviderModel, ProviderSpec, TRANSCRIPTION_CATALOG

logger = logging.getLogger(__name__)

SKIP_SERVICE = "skip"


class ServiceResolution(NamedTuple):
    """Result of resolving a service and its model.

    ``service`` and ``model_id`` are None when no LLM was requested (a valid
    no-op). ``reason`` explains why a resolution is invalid.
    """

    service: Optional[str]
    model_id: Optional[str]
    is_valid: bool
    reason: Optional[str] = None


class ProviderRegistry:
    """Read-only lookup over the provider catalogs.

    Args:
        cfg: Runtime configuration supplying API keys
        transcription_catalog: Transcription providers (default: built-in catalog)
        llm_catalog: LLM providers (default: built-in catalog)

    Example:
        >>> registry = ProviderRegistry(Config(openai_api_key="sk-test"))
        >>> registry.resolve("chatgpt", ProcessingOptions())
        ServiceResolution(service='chatgpt', model_id='gpt-4o-mini', is_valid=True, reason=None)
    """

    def __init__(
        self,
        cfg: config.Config,
        transcription_catalog: Optional[Dict[str, ProviderSpec]] = None,
        llm_catalog: Optional[Dict[str, ProviderSpec]] = None,
    ) -> None:
        self.cfg = cfg
        self._catalogs: Dict[Capability, Dict[str, ProviderSpec]] = {
            "transcription": transcription_catalog or TRANSCRIPTION_CATALOG,
            "llm": llm_catalog or LLM_CATALOG,
        }

    def spec(self, service: str, capability: Capability) -> ProviderSpec:
        """Return the provider spec for ``service``.

        Raises:
            ProviderResolutionError: If the service is unknown
        """
        try:
            return self._catalogs[capability][service]
        except KeyError:
            raise ProviderResolutionError(
                f"Unknown {capability} service: {service}", service=service
            ) from None

    def resolve(
        self,
        service: Optional[str],
        options: ProcessingOptions,
        capability: Capability = "llm",
    ) -> ServiceResolution:
        """Resolve ``service`` to a model id and check its prerequisites.

        A bare flag (``"true"``) or empty value selects the provider's default
        model. Model ids are matched case-insensitively and returned in their
        catalog spelling.

        Args:
            service: Requested service key, or None / ``"skip"`` for no LLM
            options: Processing options holding the per-service model override
            capability: ``"transcription"`` or ``"llm"``

        Returns:
            ServiceResolution with ``is_valid`` False and a ``reason`` when the
            service is unknown, its API key is missing, or the model is unknown.
        """
        if not service or service == SKIP_SERVICE:
            if capability == "transcription":
                return ServiceResolution(None, None, False, "A transcription service is required")
            return ServiceResolution(None, None, True)

        catalog = self._catalogs[capability]
        spec = catalog.get(service)
        if spec is None:
            reason = f"Invalid {capability} service: {service}"
            logger.error(reason)
            return ServiceResolution(None, None, False, reason)

        if spec.api_key_field and not self.cfg.api_key(spec.api_key_field):
            env_var = config.API_KEY_ENV_VARS[spec.api_key_field]
            reason = f"Missing {env_var} for {spec.name}"
            logger.error(reason)
            return ServiceResolution(service, None, False, reason)

        raw_value = options.option_value(service)
        if raw_value and raw_value != BARE_FLAG_VALUE:
            requested = raw_value
        else:
            requested = spec.default_model.model_id

        model = spec.find_model(requested)
        if model is None:
            reason = f"Model {requested} not found for service {spec.name}"
            logger.error(reason)
            return ServiceResolution(service, requested, False, reason)

        return ServiceResolution(service, model.model_id, True)

    def resolve_transcription(self, options: ProcessingOptions) -> ServiceResolution:
        return self.resolve(options.transcription_service, options, "transcription")

    def resolve_llm(self, options: ProcessingOptions) -> ServiceResolution:
        return self.resolve(options.llm_service, options, "llm")

    def require(
        self, resolution: ServiceResolution, capability: Capability
    ) -> Tuple[ProviderSpec, ProviderModel]:
        """Turn a valid resolution into its spec and model.

        Raises:
            ProviderResolutionError: If the resolution is invalid or empty
        """
        if not resolution.is_valid or not resolution.service or not resolution.model_id:
            suggestion = None
            if resolution.reason and resolution.reason.startswith("Missing "):
                env_var = resolution.reason.split()[1]
                suggestion = f"Set {env_var} environment variable or the matching config key"
            raise ProviderResolutionError(
                resolution.reason or f"No {capability} service resolved",
                service=resolution.service,
                model_id=resolution.model_id,
                suggestion=suggestion,
            )
        spec = self.spec(resolution.service, capability)
        return spec, self.find_model(resolution.service, resolution.model_id, capability)

    def find_model(self, service: str, model_id: str, capability: Capability) -> ProviderModel:
        """Look up a model by id for cost calculations.

        Raises:
            ProviderResolutionError: If the service or model is unknown
        """
        model = self.spec(service, capability).find_model(model_id)
        if model is None:
            raise ProviderResolutionError(
                f"Model {model_id} not found", service=service, model_id=model_id
            )
        return model
