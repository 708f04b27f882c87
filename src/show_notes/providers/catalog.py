"""Static catalog of transcription and LLM providers, their models, and costs.

Pricing is for cost estimation only. Prices change; verify current rates with
each vendor before relying on the numbers.

Transcription rates are expressed in cents per audio minute. LLM rates are
expressed per one million tokens, in US dollars unless a model declares
``cost_unit="cents"``; ``ProviderModel.rates_per_1m_usd`` normalizes both.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Optional, Tuple

Capability = Literal["transcription", "llm"]
CostUnit = Literal["usd", "cents"]

DEFAULT_TRANSCRIPTION_SERVICE = "whisper"
CENTS_PER_DOLLAR = 100.0


@dataclass(frozen=True)
class ProviderModel:
    """One model offered by a provider, with its cost coefficients.

    Attributes:
        model_id: Identifier passed to the provider API or library.
        name: Human-readable model name.
        cost_per_minute_cents: Transcription cost per audio minute, in cents.
        input_cost_per_1m: LLM input cost per one million tokens.
        output_cost_per_1m: LLM output cost per one million tokens.
        cost_unit: Unit of the LLM rates, ``"usd"`` or ``"cents"``.
    """

    model_id: str
    name: str
    cost_per_minute_cents: float = 0.0
    input_cost_per_1m: float = 0.0
    output_cost_per_1m: float = 0.0
    cost_unit: CostUnit = "usd"

    def rates_per_1m_usd(self) -> Tuple[float, float]:
        """Return (input, output) LLM rates per one million tokens in dollars."""
        if self.cost_unit == "cents":
            return (
                self.input_cost_per_1m / CENTS_PER_DOLLAR,
                self.output_cost_per_1m / CENTS_PER_DOLLAR,
            )
        return self.input_cost_per_1m, self.output_cost_per_1m


@dataclass(frozen=True)
class ProviderSpec:
    """A transcription or LLM provider and the models it exposes.

    The first model in ``models`` is the provider's default, used when the
    service is selected without naming a model.

    Attributes:
        key: Service key used in options (e.g. ``"chatgpt"``).
        name: Human-readable service name.
        capability: ``"transcription"`` or ``"llm"``.
        models: Non-empty tuple of models, default first.
        api_key_field: ``Config`` field holding the API key, or None when the
            service runs locally without one.
    """

    key: str
    name: str
    capability: Capability
    models: Tuple[ProviderModel, ...]
    api_key_field: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.models:
            raise ValueError(f"Provider {self.key} must declare at least one model")

    @property
    def default_model(self) -> ProviderModel:
        return self.models[0]

    def find_model(self, model_id: str) -> Optional[ProviderModel]:
        """Return the model whose id matches ``model_id`` case-insensitively."""
        wanted = model_id.strip().lower()
        for model in self.models:
            if model.model_id.lower() == wanted:
                return model
        return None


def _free(*model_ids: str) -> Tuple[ProviderModel, ...]:
    return tuple(ProviderModel(model_id=m, name=m) for m in model_ids)


TRANSCRIPTION_CATALOG: Dict[str, ProviderSpec] = {
    "whisper": ProviderSpec(
        key="whisper",
        name="Whisper (local)",
        capability="transcription",
        models=_free(
            "base",
            "base.en",
            "tiny",
            "tiny.en",
            "small",
            "small.en",
            "medium",
            "medium.en",
            "large-v1",
            "large-v2",
            "large-v3-turbo",
            "turbo",
        ),
    ),
    "deepgram": ProviderSpec(
        key="deepgram",
        name="Deepgram",
        capability="transcription",
        api_key_field="deepgram_api_key",
        models=(
            ProviderModel("nova-2", "Nova-2", cost_per_minute_cents=0.43),
            ProviderModel("base", "Base", cost_per_minute_cents=1.25),
            ProviderModel("enhanced", "Enhanced", cost_per_minute_cents=1.45),
        ),
    ),
    "assembly": ProviderSpec(
        key="assembly",
        name="AssemblyAI",
        capability="transcription",
        api_key_field="assembly_api_key",
        models=(
            ProviderModel("best", "Best", cost_per_minute_cents=0.62),
            ProviderModel("nano", "Nano", cost_per_minute_cents=0.2),
        ),
    ),
}


def _llm(model_id: str, name: str, rate_in: float, rate_out: float, unit: CostUnit = "usd"):
    return ProviderModel(
        model_id=model_id,
        name=name,
        input_cost_per_1m=rate_in,
        output_cost_per_1m=rate_out,
        cost_unit=unit,
    )


LLM_CATALOG: Dict[str, ProviderSpec] = {
    "chatgpt": ProviderSpec(
        key="chatgpt",
        name="OpenAI ChatGPT",
        capability="llm",
        api_key_field="openai_api_key",
        models=(
            _llm("gpt-4o-mini", "GPT 4o Mini", 0.15, 0.60),
            _llm("gpt-4o", "GPT 4o", 2.50, 10.00),
            _llm("o1-mini", "GPT o1 Mini", 3.00, 12.00),
        ),
    ),
    "claude": ProviderSpec(
        key="claude",
        name="Anthropic Claude",
        capability="llm",
        api_key_field="anthropic_api_key",
        models=(
            _llm("claude-3-5-sonnet-latest", "Claude 3.5 Sonnet", 3.00, 15.00),
            _llm("claude-3-opus-latest", "Claude 3 Opus", 15.00, 75.00),
            _llm("claude-3-sonnet-20240229", "Claude 3 Sonnet", 3.00, 15.00),
            _llm("claude-3-haiku-20240307", "Claude 3 Haiku", 0.25, 1.25),
        ),
    ),
    "gemini": ProviderSpec(
        key="gemini",
        name="Google Gemini",
        capability="llm",
        api_key_field="gemini_api_key",
        models=(
            _llm("gemini-1.5-flash", "Gemini 1.5 Flash", 0.15, 0.60),
            _llm("gemini-1.5-pro", "Gemini 1.5 Pro", 2.50, 10.00),
        ),
    ),
    "deepseek": ProviderSpec(
        key="deepseek",
        name="DeepSeek",
        capability="llm",
        api_key_field="deepseek_api_key",
        models=(
            _llm("deepseek-chat", "DeepSeek Chat", 0.07, 1.10),
            _llm("deepseek-reasoner", "DeepSeek Reasoner", 0.14, 2.19),
        ),
    ),
    "mistral": ProviderSpec(
        key="mistral",
        name="Mistral",
        capability="llm",
        api_key_field="mistral_api_key",
        models=(
            _llm("ministral-8b-latest", "Ministral 8B", 0.10, 0.10),
            _llm("mistral-large-latest", "Mistral Large", 2.00, 6.00),
            _llm("open-mistral-nemo", "Mistral Nemo", 0.15, 0.15),
        ),
    ),
    "ollama": ProviderSpec(
        key="ollama",
        name="Ollama (local inference)",
        capability="llm",
        models=_free(
            "qwen2.5:0.5b",
            "qwen2.5:1.5b",
            "qwen2.5:3b",
            "llama3.2:1b",
            "llama3.2:3b",
            "gemma2:2b",
            "phi3.5:3.8b",
            "deepseek-r1:1.5b",
        ),
    ),
    "fireworks": ProviderSpec(
        key="fireworks",
        name="Fireworks AI",
        capability="llm",
        api_key_field="fireworks_api_key",
        models=(
            _llm(
                "accounts/fireworks/models/llama-v3p1-405b-instruct", "Llama 3.1 405B", 3.00, 3.00
            ),
            _llm("accounts/fireworks/models/llama-v3p1-70b-instruct", "Llama 3.1 70B", 0.90, 0.90),
            _llm("accounts/fireworks/models/llama-v3p1-8b-instruct", "Llama 3.1 8B", 0.20, 0.20),
            _llm("accounts/fireworks/models/llama-v3p2-3b-instruct", "Llama 3.2 3B", 0.10, 0.10),
            _llm("accounts/fireworks/models/qwen2p5-72b-instruct", "Qwen 2.5 72B", 0.90, 0.90),
        ),
    ),
    "together": ProviderSpec(
        key="together",
        name="Together AI",
        capability="llm",
        api_key_field="together_api_key",
        models=(
            _llm("meta-llama/Llama-3.2-3B-Instruct-Turbo", "Llama 3.2 3B", 0.06, 0.06),
            _llm("meta-llama/Meta-Llama-3.1-405B-Instruct-Turbo", "Llama 3.1 405B", 3.50, 3.50),
            _llm("meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo", "Llama 3.1 70B", 0.88, 0.88),
            _llm("meta-llama/Meta-Llama-3.1-8B-Instruct-Turbo", "Llama 3.1 8B", 0.18, 0.18),
            _llm("google/gemma-2-27b-it", "Gemma 2 27B", 0.80, 0.80),
            _llm("google/gemma-2-9b-it", "Gemma 2 9B", 0.30, 0.30),
            _llm("Qwen/Qwen2.5-72B-Instruct-Turbo", "Qwen 2.5 72B", 1.20, 1.20),
            _llm("Qwen/Qwen2.5-7B-Instruct-Turbo", "Qwen 2.5 7B", 0.30, 0.30),
        ),
    ),
    "groq": ProviderSpec(
        key="groq",
        name="Groq",
        capability="llm",
        api_key_field="groq_api_key",
        # Groq publishes rates in cents per million tokens
        models=(
            _llm("llama-3.1-8b-instant", "Llama 3.1 8B Instant", 5, 8, unit="cents"),
            _llm("llama-3.3-70b-versatile", "Llama 3.3 70B Versatile", 59, 79, unit="cents"),
            _llm("mixtral-8x7b-32768", "Mixtral 8x7B", 24, 24, unit="cents"),
        ),
    ),
}

TRANSCRIPTION_SERVICES: Tuple[str, ...] = tuple(TRANSCRIPTION_CATALOG)
LLM_SERVICES: Tuple[str, ...] = tuple(LLM_CATALOG)
