"""Stage 1: derive the output base name, metadata and front matter for one item."""

from __future__ import annotations

import logging
import os
from typing import List

from ...filesystem import sanitize_title
from ...models import RSSItem, ShowNoteMetadata
from ...utils.process import run_command
from ...utils.retry import retry_with_exponential_backoff, RetryPolicy
from ..types import MarkdownResult

logger = logging.getLogger(__name__)

# yt-dlp output templates, printed one per line in this order
YTDLP_METADATA_FIELDS = (
    "%(webpage_url)s",
    "%(channel)s",
    "%(uploader_url)s",
    "%(title)s",
    "%(upload_date>%Y-%m-%d)s",
    "%(thumbnail)s",
)
INCOMPLETE_METADATA_MESSAGE = "Incomplete metadata received from yt-dlp."


def build_frontmatter(metadata: ShowNoteMetadata) -> str:
    """Return the YAML front matter block for ``metadata``, ending with a newline."""
    lines = ["---"]
    for key, value in metadata.to_dict().items():
        lines.append(f'{key}: "{value}"')
    lines.append("---\n")
    return "\n".join(lines)


def _ytdlp_metadata_args(url: str) -> List[str]:
    args = ["yt-dlp", "--restrict-filenames"]
    for template in YTDLP_METADATA_FIELDS:
        args.extend(["--print", template])
    args.append(url)
    return args


def parse_ytdlp_metadata(output: str) -> ShowNoteMetadata:
    """Parse the six line-delimited fields printed by yt-dlp.

    Raises:
        ValueError: If any field is missing or empty
    """
    fields = output.strip().split("\n")
    if len(fields) < len(YTDLP_METADATA_FIELDS) or not all(
        f.strip() for f in fields[: len(YTDLP_METADATA_FIELDS)]
    ):
        raise ValueError(INCOMPLETE_METADATA_MESSAGE)
    show_link, channel, channel_url, title, publish_date, cover_image = (
        f.strip() for f in fields[: len(YTDLP_METADATA_FIELDS)]
    )
    return ShowNoteMetadata(
        show_link=show_link,
        channel=channel,
        channel_url=channel_url,
        title=title,
        description="",
        publish_date=publish_date,
        cover_image=cover_image,
    )


def extract_video_metadata(url: str, policy: RetryPolicy) -> ShowNoteMetadata:
    """Fetch video metadata with yt-dlp, retrying failed runs.

    Raises:
        ExternalCallError: If yt-dlp kept failing or kept returning incomplete metadata
    """
    return retry_with_exponential_backoff(
        lambda: parse_ytdlp_metadata(run_command(_ytdlp_metadata_args(url))),
        policy,
        description=f"yt-dlp metadata {url}",
    )


def metadata_for_file(path: str) -> ShowNoteMetadata:
    """Metadata for a local file: link and title are the file's base name."""
    name = os.path.basename(path)
    return ShowNoteMetadata(show_link=name, title=name)


def generate_markdown(
    source: str,
    source_kind: str,
    output_dir: str,
    policy: RetryPolicy,
    rss_item: RSSItem | None = None,
) -> MarkdownResult:
    """Build the identity of one item.

    Remote videos are named ``<upload date>-<title>``, RSS items
    ``<publish date>-<title>`` and local files by their sanitized stem.

    Args:
        source: Video URL, local path, or enclosure URL
        source_kind: ``"video"``, ``"file"`` or ``"rss"``
        output_dir: Directory receiving the item's files
        policy: Retry policy for yt-dlp metadata extraction
        rss_item: The normalized feed item (RSS sources only)

    Raises:
        ValueError: If the source kind is unknown or an RSS item is missing
    """
    if source_kind == "video":
        metadata = extract_video_metadata(source, policy)
        filename = f"{metadata.publish_date}-{sanitize_title(metadata.title)}"
    elif source_kind == "file":
        metadata = metadata_for_file(source)
        stem = os.path.splitext(os.path.basename(source))[0]
        filename = sanitize_title(stem)
    elif source_kind == "rss":
        if rss_item is None:
            raise ValueError(f"RSS item data missing for {source}")
        metadata = rss_item.to_metadata()
        filename = f"{rss_item.publish_date}-{sanitize_title(rss_item.title)}"
    else:
        raise ValueError(f"Unknown source kind: {source_kind}")

    base_path = os.path.join(output_dir, filename)
    logger.info("  - base path: %s", base_path)
    return MarkdownResult(base_path, build_frontmatter(metadata), metadata)
