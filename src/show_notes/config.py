from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# SKIP .env loading in test environments - tests should use Config objects and
# environment variables directly, never rely on .env files
def _is_test_environment() -> bool:
    """Check if we're running in a test environment."""
    import sys

    if "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ:
        return True
    if os.environ.get("TESTING", "").lower() in ("1", "true", "yes"):
        return True
    return False


if not _is_test_environment():
    try:
        load_dotenv(override=False)
    except (PermissionError, OSError):
        # If loading fails, continue without .env file
        pass

DEFAULT_LOG_LEVEL = "INFO"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_OUTPUT_DIR = "content"
DEFAULT_DATABASE_URL = "sqlite:///show_notes.db"
DEFAULT_USER_AGENT = "show-notes/1.0 (+https://github.com/show-notes)"
DEFAULT_RSS_TIMEOUT_SECONDS = 10
MIN_TIMEOUT_SECONDS = 1
DEFAULT_MAX_ATTEMPTS = 7
DEFAULT_RETRY_BASE_DELAY_SECONDS = 1.0
DEFAULT_OLLAMA_API_BASE = "http://localhost:11434/v1"

# Config field -> environment variable holding the API key
API_KEY_ENV_VARS: Dict[str, str] = {
    "openai_api_key": "OPENAI_API_KEY",
    "anthropic_api_key": "ANTHROPIC_API_KEY",
    "gemini_api_key": "GEMINI_API_KEY",
    "deepseek_api_key": "DEEPSEEK_API_KEY",
    "mistral_api_key": "MISTRAL_API_KEY",
    "fireworks_api_key": "FIREWORKS_API_KEY",
    "together_api_key": "TOGETHER_API_KEY",
    "groq_api_key": "GROQ_API_KEY",
    "deepgram_api_key": "DEEPGRAM_API_KEY",
    "assembly_api_key": "ASSEMBLY_API_KEY",
}


# Config field -> environment variable read when the field is not given
ENV_BACKED_FIELDS: Dict[str, str] = {
    "database_url": "DATABASE_URL",
    "log_file": "LOG_FILE",
    "ollama_api_base": "OLLAMA_API_BASE",
    **API_KEY_ENV_VARS,
}


def _clean_optional(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip() or None


class Config(BaseModel):
    """Runtime environment for the show notes pipeline.

    ``Config`` holds everything that describes *where* and *with which
    credentials* the pipeline runs: output locations, the database URL,
    logging, HTTP and retry behavior, and provider API keys. What to process
    and which providers to use is described separately by
    ``show_notes.options.ProcessingOptions``.

    The instance is passed explicitly to the provider registry and to every
    provider; nothing in the package reads API keys from ``os.environ`` after
    a ``Config`` has been built. API key fields fall back to their environment
    variables (see ``API_KEY_ENV_VARS``) when not given.

    The model is immutable (frozen) after creation.

    Attributes:
        output_dir: Directory receiving markdown, WAV, and info files.
        database_url: SQLAlchemy URL of the show note store.
        log_level: Root log level name.
        log_file: Optional log file path (env ``LOG_FILE``).
        user_agent: HTTP User-Agent header for feed requests.
        rss_timeout: Per-attempt timeout in seconds for feed fetches.
        provider_timeout: Optional timeout in seconds for each transcription or
            LLM call. ``None`` waits indefinitely.
        max_attempts: Attempt ceiling for retried external calls.
        retry_base_delay: Delay in seconds after the first failed attempt.
        ollama_api_base: OpenAI-compatible endpoint of a local Ollama server.
        whisper_model_dir: Optional download root for local Whisper models.

    Example:
        >>> from show_notes import Config
        >>> cfg = Config(output_dir="./notes", log_level="debug")
        >>> cfg.log_level
        'DEBUG'
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    output_dir: str = Field(default=DEFAULT_OUTPUT_DIR)
    database_url: str = Field(default=DEFAULT_DATABASE_URL)
    log_level: str = Field(default=DEFAULT_LOG_LEVEL)
    log_file: Optional[str] = Field(default=None)
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    rss_timeout: int = Field(default=DEFAULT_RSS_TIMEOUT_SECONDS)
    provider_timeout: Optional[float] = Field(default=None)
    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1)
    retry_base_delay: float = Field(default=DEFAULT_RETRY_BASE_DELAY_SECONDS, ge=0)

    openai_api_key: Optional[str] = Field(default=None)
    anthropic_api_key: Optional[str] = Field(default=None)
    gemini_api_key: Optional[str] = Field(default=None)
    deepseek_api_key: Optional[str] = Field(default=None)
    mistral_api_key: Optional[str] = Field(default=None)
    fireworks_api_key: Optional[str] = Field(default=None)
    together_api_key: Optional[str] = Field(default=None)
    groq_api_key: Optional[str] = Field(default=None)
    deepgram_api_key: Optional[str] = Field(default=None)
    assembly_api_key: Optional[str] = Field(default=None)
    ollama_api_base: str = Field(default=DEFAULT_OLLAMA_API_BASE)
    whisper_model_dir: Optional[str] = Field(default=None)

    @model_validator(mode="before")
    @classmethod
    def _load_environment(cls, data: Any) -> Any:
        """Fill fields that were not given from their environment variables."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for field_name, env_var in ENV_BACKED_FIELDS.items():
            if data.get(field_name) is not None:
                continue
            # Check environment variable (loaded from .env by dotenv)
            env_value = os.getenv(env_var)
            if env_value and env_value.strip():
                data[field_name] = env_value.strip()
        return data

    @field_validator("output_dir", mode="before")
    @classmethod
    def _coerce_output_dir(cls, value: Any) -> str:
        if value is None:
            return DEFAULT_OUTPUT_DIR
        return str(value).strip() or DEFAULT_OUTPUT_DIR

    @field_validator("database_url", mode="before")
    @classmethod
    def _coerce_database_url(cls, value: Any) -> str:
        return _clean_optional(value) or DEFAULT_DATABASE_URL

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> str:
        """Normalize log level value."""
        if value is None:
            return DEFAULT_LOG_LEVEL
        return str(value).strip().upper() or DEFAULT_LOG_LEVEL

    @field_validator("log_level", mode="after")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        """Validate log level is one of the valid levels."""
        if value not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}, got: {value}")
        return value

    @field_validator("log_file", mode="before")
    @classmethod
    def _coerce_log_file(cls, value: Any) -> Optional[str]:
        return _clean_optional(value)

    @field_validator("user_agent", mode="before")
    @classmethod
    def _coerce_user_agent(cls, value: Any) -> str:
        if value is None:
            return DEFAULT_USER_AGENT
        return str(value).strip() or DEFAULT_USER_AGENT

    @field_validator("rss_timeout", mode="before")
    @classmethod
    def _ensure_rss_timeout(cls, value: Any) -> int:
        if value is None or value == "":
            return DEFAULT_RSS_TIMEOUT_SECONDS
        try:
            timeout = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError("rss_timeout must be an integer") from exc
        return max(MIN_TIMEOUT_SECONDS, timeout)

    @field_validator("provider_timeout", mode="before")
    @classmethod
    def _coerce_provider_timeout(cls, value: Any) -> Optional[float]:
        if value is None or value == "":
            return None
        try:
            timeout = float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError("provider_timeout must be a number") from exc
        if timeout <= 0:
            raise ValueError(f"provider_timeout must be positive, got {timeout}")
        return timeout

    @field_validator(*API_KEY_ENV_VARS.keys(), mode="before")
    @classmethod
    def _coerce_api_key(cls, value: Any) -> Optional[str]:
        """Treat blank keys as missing."""
        return _clean_optional(value)

    @field_validator("ollama_api_base", mode="before")
    @classmethod
    def _coerce_ollama_api_base(cls, value: Any) -> str:
        return _clean_optional(value) or DEFAULT_OLLAMA_API_BASE

    def api_key(self, field_name: str) -> Optional[str]:
        """Return the API key stored in ``field_name`` (e.g. ``"openai_api_key"``)."""
        if field_name not in API_KEY_ENV_VARS:
            raise KeyError(f"Unknown API key field: {field_name}")
        return getattr(self, field_name)


def load_config_file(path: str) -> Dict[str, Any]:  # noqa: C901 - file parsing handles formats
    """Load configuration from a JSON or YAML file.

    The file format is auto-detected from the file extension (`.json`, `.yaml`,
    or `.yml`). The returned dictionary may hold both ``Config`` fields and
    ``ProcessingOptions`` fields; the CLI splits them by field name.

    Args:
        path: Path to configuration file (JSON or YAML). Supports tilde expansion.

    Returns:
        Dict[str, Any]: Dictionary containing configuration values from the file.

    Raises:
        ValueError: If the path is empty, the file does not exist, the format is
            unsupported, parsing fails, or the top-level value is not a mapping.

    Example:
        >>> from show_notes import Config, load_config_file
        >>> data = load_config_file("show-notes.yaml")
        >>> cfg = Config(**{k: v for k, v in data.items() if k in Config.model_fields})

    Supported Formats:
        **YAML** (`.yaml`, `.yml`):

            output_dir: ./content
            log_level: DEBUG
            chatgpt: gpt-4o-mini
            prompt: [summary, takeaways]
    """
    if not path:
        raise ValueError("Config path cannot be empty")

    cfg_path = Path(path).expanduser()
    try:
        resolved = cfg_path.resolve()
    except (OSError, RuntimeError) as exc:
        raise ValueError(f"Invalid config path: {path} ({exc})") from exc

    if not resolved.exists():
        raise ValueError(f"Config file not found: {resolved}")

    suffix = resolved.suffix.lower()
    try:
        text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Failed to read config file {resolved}: {exc}") from exc

    if suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON config file {resolved}: {exc}") from exc
    elif suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:  # type: ignore[attr-defined]
            raise ValueError(f"Invalid YAML config file {resolved}: {exc}") from exc
    else:
        raise ValueError(f"Unsupported config file type: {resolved.suffix}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(data).__name__}")
    return data
