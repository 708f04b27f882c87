"""Per-invocation processing options."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .providers.catalog import DEFAULT_TRANSCRIPTION_SERVICE, LLM_SERVICES, TRANSCRIPTION_SERVICES

SOURCE_KINDS = ("video", "playlist", "channel", "urls", "file", "rss")
DEFAULT_PROMPT_SECTIONS = ["summary", "longChapters"]
BARE_FLAG_VALUE = "true"


class ProcessingOptions(BaseModel):
    """What to process and which providers to use, resolved once per invocation.

    Service fields (``whisper``, ``chatgpt``, ...) hold ``None`` when the
    service is not selected, ``"true"`` when it is selected without a model
    (the service's default model is used), or an explicit model id.

    At most one source kind, one transcription service, and one LLM service
    may be selected. Violations raise a pydantic ``ValidationError`` when the
    model is built, before any work starts.

    Attributes:
        video: Single remote video URL.
        playlist: Playlist URL expanded with yt-dlp.
        channel: Channel URL expanded with yt-dlp.
        urls: Path to a text file of URLs, one per line.
        file: Path to a local audio or video file.
        rss: One or more feed URLs or paths; a ``.md`` entry lists more feeds.
        prompt: Prompt section names to assemble.
        custom_prompt: Path to a file whose contents replace section assembly.
        item: Enclosure URLs to select from an RSS feed.
        last: Process only the first N items (feed or channel order).
        skip: Drop the first N items after ordering.
        order: ``"newest"`` or ``"oldest"``.
        date: Publish dates (``YYYY-MM-DD``) to select from an RSS feed.
        last_days: Select RSS items published within the last N days.
        info: Write selected item metadata as JSON instead of processing.
        keep_intermediates: Keep the canonical WAV after processing.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    video: Optional[str] = None
    playlist: Optional[str] = None
    channel: Optional[str] = None
    urls: Optional[str] = None
    file: Optional[str] = None
    rss: List[str] = Field(default_factory=list)

    whisper: Optional[str] = None
    deepgram: Optional[str] = None
    assembly: Optional[str] = None

    chatgpt: Optional[str] = None
    claude: Optional[str] = None
    gemini: Optional[str] = None
    deepseek: Optional[str] = None
    mistral: Optional[str] = None
    ollama: Optional[str] = None
    fireworks: Optional[str] = None
    together: Optional[str] = None
    groq: Optional[str] = None

    prompt: List[str] = Field(default_factory=lambda: list(DEFAULT_PROMPT_SECTIONS))
    custom_prompt: Optional[str] = None

    item: List[str] = Field(default_factory=list)
    last: Optional[int] = None
    skip: Optional[int] = None
    order: Optional[str] = None
    date: List[str] = Field(default_factory=list)
    last_days: Optional[int] = Field(default=None, alias="lastDays")

    info: bool = False
    keep_intermediates: bool = False

    @field_validator("rss", "item", "date", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        return [str(v) for v in value if str(v).strip()]

    @field_validator("prompt", mode="before")
    @classmethod
    def _coerce_prompt(cls, value: Any) -> List[str]:
        if value is None:
            return list(DEFAULT_PROMPT_SECTIONS)
        if isinstance(value, str):
            value = value.split(",")
        sections = [str(v).strip() for v in value if str(v).strip()]
        return sections or list(DEFAULT_PROMPT_SECTIONS)

    @field_validator(*TRANSCRIPTION_SERVICES, *LLM_SERVICES, mode="before")
    @classmethod
    def _coerce_service_flag(cls, value: Any) -> Optional[str]:
        """Map bare boolean flags onto the ``"true"`` marker."""
        if value is None or value is False:
            return None
        if value is True:
            return BARE_FLAG_VALUE
        text = str(value).strip()
        return text or None

    @field_validator("video", "playlist", "channel", "urls", "file", "custom_prompt", mode="before")
    @classmethod
    def _strip_optional(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @model_validator(mode="after")
    def _validate_exclusive_selections(self) -> "ProcessingOptions":
        """At most one source kind, transcription service, and LLM service."""
        sources = [kind for kind in SOURCE_KINDS if getattr(self, kind)]
        if len(sources) > 1:
            raise ValueError(
                f"Only one source kind may be given at a time, got: {', '.join(sources)}"
            )
        transcription = [s for s in TRANSCRIPTION_SERVICES if getattr(self, s)]
        if len(transcription) > 1:
            raise ValueError(
                "Only one transcription service may be selected, got: "
                f"{', '.join(transcription)}"
            )
        llms = [s for s in LLM_SERVICES if getattr(self, s)]
        if len(llms) > 1:
            raise ValueError(f"Only one LLM service may be selected, got: {', '.join(llms)}")
        return self

    @property
    def source_kind(self) -> Optional[str]:
        """Return the selected source kind, or None when no source is given."""
        for kind in SOURCE_KINDS:
            if getattr(self, kind):
                return kind
        return None

    @property
    def transcription_service(self) -> str:
        """Return the selected transcription service, defaulting to whisper."""
        for service in TRANSCRIPTION_SERVICES:
            if getattr(self, service):
                return service
        return DEFAULT_TRANSCRIPTION_SERVICE

    @property
    def llm_service(self) -> Optional[str]:
        """Return the selected LLM service, or None to skip LLM processing."""
        for service in LLM_SERVICES:
            if getattr(self, service):
                return service
        return None

    def option_value(self, service: str) -> Optional[str]:
        """Return the raw option value for a service (``"true"``, a model id, or None)."""
        if service not in TRANSCRIPTION_SERVICES and service not in LLM_SERVICES:
            return None
        return getattr(self, service)
