from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ShowNoteMetadata:
    """Show and episode identity written into front matter and persisted records.

    Attributes:
        show_link: Canonical link to the episode (page URL, enclosure URL, or file name).
        channel: Channel or podcast name.
        channel_url: Channel or podcast home page.
        title: Episode title.
        description: Episode description (empty when unknown).
        publish_date: Publish date as ``YYYY-MM-DD`` (empty for local files).
        cover_image: Cover image URL (empty when unknown).

    Example:
        >>> meta = ShowNoteMetadata(
        ...     show_link="https://www.youtube.com/watch?v=abc",
        ...     channel="Example Channel",
        ...     channel_url="https://www.youtube.com/@example",
        ...     title="Episode 1",
        ...     publish_date="2024-09-24",
        ... )
    """

    show_link: str = ""
    channel: str = ""
    channel_url: str = ""
    title: str = ""
    description: str = ""
    publish_date: str = ""
    cover_image: str = ""

    def to_dict(self) -> Dict[str, str]:
        """Return the metadata keyed by its front matter names."""
        return {
            "showLink": self.show_link,
            "channel": self.channel,
            "channelURL": self.channel_url,
            "title": self.title,
            "description": self.description,
            "publishDate": self.publish_date,
            "coverImage": self.cover_image,
        }


@dataclass(frozen=True)
class RSSItem:
    """One feed entry normalized for selection and processing.

    Attributes:
        publish_date: ``YYYY-MM-DD``; today's date when ``pubDate`` is missing or unparseable.
        title: Item title.
        show_link: Audio or video enclosure URL.
        channel: Feed (channel) title.
        channel_url: Feed (channel) link.
        description: Item description (empty when absent).
        cover_image: Item ``itunes:image`` or the channel image.
    """

    publish_date: str
    title: str
    show_link: str
    channel: str = ""
    channel_url: str = ""
    description: str = ""
    cover_image: str = ""

    def to_metadata(self) -> ShowNoteMetadata:
        return ShowNoteMetadata(
            show_link=self.show_link,
            channel=self.channel,
            channel_url=self.channel_url,
            title=self.title,
            description=self.description,
            publish_date=self.publish_date,
            cover_image=self.cover_image,
        )

    def to_dict(self) -> Dict[str, str]:
        return self.to_metadata().to_dict()


@dataclass
class RSSFeed:
    """A parsed feed: channel identity plus its normalized media items.

    Attributes:
        title: Channel title.
        link: Channel link.
        image: Channel image URL (``image/url`` or ``itunes:image``).
        items: Normalized items in feed order.
    """

    title: str
    link: str = ""
    image: str = ""
    items: List[RSSItem] = field(default_factory=list)


@dataclass(frozen=True)
class VideoInfo:
    """A channel video as reported by yt-dlp, used for ordering and selection."""

    url: str
    upload_date: str
    timestamp: float
    is_live: bool = False


@dataclass
class ShowNoteRecord:
    """A completed show note, ready to persist.

    Cost fields are in dollars. LLM fields are None when no LLM ran.
    """

    metadata: ShowNoteMetadata
    frontmatter: str
    prompt: str
    transcript: str
    llm_output: str = ""
    llm_service: Optional[str] = None
    llm_model: Optional[str] = None
    llm_cost: Optional[float] = None
    transcription_service: Optional[str] = None
    transcription_model: Optional[str] = None
    transcription_cost: Optional[float] = None
    final_cost: Optional[float] = None
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id}
        data.update(self.metadata.to_dict())
        data.update(
            {
                "frontmatter": self.frontmatter,
                "prompt": self.prompt,
                "transcript": self.transcript,
                "llmOutput": self.llm_output,
                "llmService": self.llm_service,
                "llmModel": self.llm_model,
                "llmCost": self.llm_cost,
                "transcriptionService": self.transcription_service,
                "transcriptionModel": self.transcription_model,
                "transcriptionCost": self.transcription_cost,
                "finalCost": self.final_cost,
            }
        )
        return data


def metadata_from_dict(data: Dict[str, Any]) -> ShowNoteMetadata:
    """Build metadata from a mapping keyed by front matter names."""
    return ShowNoteMetadata(
        show_link=str(data.get("showLink") or ""),
        channel=str(data.get("channel") or ""),
        channel_url=str(data.get("channelURL") or ""),
        title=str(data.get("title") or ""),
        description=str(data.get("description") or ""),
        publish_date=str(data.get("publishDate") or ""),
        cover_image=str(data.get("coverImage") or ""),
    )


__all__ = [
    "RSSFeed",
    "RSSItem",
    "ShowNoteMetadata",
    "ShowNoteRecord",
    "VideoInfo",
    "metadata_from_dict",
]
