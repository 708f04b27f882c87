"""Type definitions for the per-item pipeline.

Each stage takes the values it needs and returns a small NamedTuple with the
values it produces. ``ProcessContext`` accumulates those results for one item
so later stages, cleanup and error reports can reach them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple, Optional

from ..models import RSSItem, ShowNoteMetadata, ShowNoteRecord

SOURCE_VIDEO = "video"
SOURCE_FILE = "file"
SOURCE_RSS = "rss"


class MarkdownResult(NamedTuple):
    """Identity of one item: output base path, front matter and metadata."""

    base_path: str
    frontmatter: str
    metadata: ShowNoteMetadata


class TranscriptResult(NamedTuple):
    """Transcript text plus the provider bookkeeping needed for costs."""

    text: str
    service: str
    model_id: str
    cost_cents: float


class LLMStageResult(NamedTuple):
    """Markdown file written for the item and the persisted record."""

    output_path: str
    record: ShowNoteRecord


class MissingStageOutputError(RuntimeError):
    """Raised when a stage needs a value an earlier stage has not produced."""


@dataclass
class ProcessContext:
    """State for one item, owned by a single pipeline run and discarded afterwards.

    Attributes:
        source: URL or local path identifying the item.
        source_kind: ``"video"``, ``"file"`` or ``"rss"``.
        rss_item: Normalized feed item when processing an RSS source.
    """

    source: str
    source_kind: str
    rss_item: Optional[RSSItem] = None
    markdown: Optional[MarkdownResult] = None
    audio_path: Optional[str] = None
    transcript: Optional[TranscriptResult] = None
    prompt: Optional[str] = None
    result: Optional[LLMStageResult] = None

    def require(self, name: str) -> Any:
        """Return a populated field, failing fast when it is still empty.

        Raises:
            MissingStageOutputError: If the field has not been set
        """
        value = getattr(self, name)
        if value is None:
            raise MissingStageOutputError(
                f"{name} is not available for {self.source}; an earlier stage did not produce it"
            )
        return value
