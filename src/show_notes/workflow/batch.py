"""Batch drivers: expand a source into items and run the pipeline once per item.

Single-source runs (one video or one file) let the item's ``StageError``
propagate. Multi-item runs log each failed item with its stage and keep
going, then report how many items were processed and skipped. Option
validation and feed/listing failures stop the run before any item starts.
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .. import progress
from ..exceptions import ExternalCallError, StageError, ValidationError
from ..filesystem import sanitize_title, write_text_file
from ..models import RSSItem, ShowNoteRecord, VideoInfo
from ..options import ProcessingOptions
from ..rss import load_feed, select_items, validate_ordering_options, validate_rss_options
from ..rss.selection import describe_selection
from ..utils.process import run_command
from ..utils.retry import retry_with_exponential_backoff, RetryPolicy
from .orchestration import process_item
from .runtime import PipelineRuntime
from .stages.markdown import extract_video_metadata
from .types import SOURCE_FILE, SOURCE_RSS, SOURCE_VIDEO

logger = logging.getLogger(__name__)

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={id}"
FEED_LIST_SUFFIX = ".md"
CHANNEL_INFO_FILENAME = "channel_info.json"
INFO_SUFFIX = "_info.json"

# (source, source kind, feed item for RSS sources)
WorkItem = Tuple[str, str, Optional[RSSItem]]


@dataclass
class BatchSummary:
    """Outcome of a run: items attempted, processed and skipped after failures."""

    total: int = 0
    processed: int = 0
    skipped: int = 0
    records: List[ShowNoteRecord] = field(default_factory=list)
    failures: List[StageError] = field(default_factory=list)
    info_files: List[str] = field(default_factory=list)

    def merge(self, other: "BatchSummary") -> None:
        self.total += other.total
        self.processed += other.processed
        self.skipped += other.skipped
        self.records.extend(other.records)
        self.failures.extend(other.failures)
        self.info_files.extend(other.info_files)


def read_list_file(path: str) -> List[str]:
    """Read one entry per line, ignoring blank lines and ``#`` comments.

    Raises:
        ValueError: If the file cannot be read
    """
    try:
        with open(os.path.expanduser(path), "r", encoding="utf-8") as handle:
            lines = handle.read().splitlines()
    except OSError as exc:
        raise ValueError(f"Failed to read list file {path}: {exc}") from exc
    return [line.strip() for line in lines if line.strip() and not line.strip().startswith("#")]


def expand_rss_sources(sources: Sequence[str]) -> List[str]:
    """Replace each ``.md`` entry with the feed URLs it lists."""
    expanded: List[str] = []
    for source in sources:
        if source.lower().endswith(FEED_LIST_SUFFIX):
            feeds = read_list_file(source)
            logger.info("Read %d feed(s) from %s", len(feeds), source)
            expanded.extend(feeds)
        else:
            expanded.append(source)
    return expanded


def write_info(output_dir: str, filename: str, data: Any) -> str:
    """Write item metadata as pretty-printed JSON and return the file path."""
    path = os.path.join(output_dir, filename)
    write_text_file(path, json.dumps(data, indent=2, ensure_ascii=False))
    logger.info("Info saved to %s", path)
    return path


def run_items(
    items: Sequence[WorkItem], runtime: PipelineRuntime, description: str
) -> BatchSummary:
    """Process items sequentially; a failed item is logged and skipped."""
    summary = BatchSummary(total=len(items))
    for index, (source, kind, rss_item) in enumerate(progress.track(items, description), start=1):
        logger.info("=" * 60)
        logger.info("Item %d/%d: %s", index, len(items), source)
        try:
            summary.records.append(process_item(source, kind, runtime, rss_item=rss_item))
            summary.processed += 1
        except StageError as exc:
            logger.error("Skipping %s (stage %s): %s", exc.item, exc.stage, exc.reason)
            summary.failures.append(exc)
            summary.skipped += 1
    logger.info(
        "%s finished: %d processed, %d skipped", description, summary.processed, summary.skipped
    )
    return summary


def _collect_metadata(urls: Sequence[str], policy: RetryPolicy) -> List[Dict[str, str]]:
    """Fetch metadata for each URL; URLs that fail are logged and left out."""
    collected = []
    for url in urls:
        try:
            collected.append(extract_video_metadata(url, policy).to_dict())
        except ExternalCallError as exc:
            logger.error("Error getting metadata for %s: %s", url, exc)
    return collected


def process_video(url: str, runtime: PipelineRuntime) -> ShowNoteRecord:
    """Process one remote video.

    Raises:
        StageError: If any stage fails
    """
    return process_item(url, SOURCE_VIDEO, runtime)


def process_file(path: str, runtime: PipelineRuntime) -> ShowNoteRecord:
    """Process one local audio or video file.

    Raises:
        StageError: If any stage fails
    """
    return process_item(path, SOURCE_FILE, runtime)


def list_playlist_videos(url: str, policy: RetryPolicy) -> Tuple[str, List[str]]:
    """Return the playlist title and its video URLs.

    Raises:
        ExternalCallError: If yt-dlp kept failing
        ValueError: If yt-dlp output is not JSON or the playlist is empty
    """
    output = retry_with_exponential_backoff(
        lambda: run_command(
            ["yt-dlp", "--dump-single-json", "--flat-playlist", "--no-warnings", url]
        ),
        policy,
        description=f"yt-dlp playlist {url}",
    )
    try:
        data = json.loads(output)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid playlist data from yt-dlp for {url}: {exc}") from exc
    entries = [e for e in data.get("entries") or [] if e and e.get("id")]
    if not entries:
        raise ValueError(f"No videos found in the playlist: {url}")
    urls = [YOUTUBE_WATCH_URL.format(id=entry["id"]) for entry in entries]
    return str(data.get("title") or "playlist"), urls


def process_playlist(url: str, runtime: PipelineRuntime) -> BatchSummary:
    title, urls = list_playlist_videos(url, runtime.policy)
    logger.info("Found %d video(s) in playlist %r", len(urls), title)
    if runtime.options.info:
        info = _collect_metadata(urls, runtime.policy)
        path = write_info(runtime.output_dir, f"{sanitize_title(title)}{INFO_SUFFIX}", info)
        return BatchSummary(total=len(urls), info_files=[path])
    return run_items([(u, SOURCE_VIDEO, None) for u in urls], runtime, "Playlist")


def parse_video_info(line: str) -> VideoInfo:
    """Parse ``upload_date|timestamp|is_live|webpage_url`` printed by yt-dlp.

    A missing or non-numeric timestamp falls back to midnight UTC of the upload date.

    Raises:
        ValueError: If a required field is missing
    """
    parts = line.strip().split("|")
    if len(parts) < 4 or not parts[0] or not parts[3]:
        raise ValueError("Incomplete video information received from yt-dlp")
    upload_date, raw_timestamp, is_live, url = parts[0], parts[1], parts[2], "|".join(parts[3:])
    try:
        timestamp = float(raw_timestamp)
    except ValueError:
        timestamp = datetime.strptime(upload_date, "%Y%m%d").timestamp()
    return VideoInfo(
        url=url, upload_date=upload_date, timestamp=timestamp, is_live=is_live == "True"
    )


def list_channel_videos(url: str, policy: RetryPolicy) -> List[VideoInfo]:
    """Return details for every video in a channel; videos whose details fail are skipped.

    Raises:
        ExternalCallError: If listing the channel kept failing
        ValueError: If no video details could be read
    """
    output = retry_with_exponential_backoff(
        lambda: run_command(
            ["yt-dlp", "--flat-playlist", "--print", "%(url)s", "--no-warnings", url]
        ),
        policy,
        description=f"yt-dlp channel {url}",
    )
    videos: List[VideoInfo] = []
    for video_url in [line.strip() for line in output.splitlines() if line.strip()]:
        try:
            details = run_command(
                [
                    "yt-dlp",
                    "--print",
                    "%(upload_date)s|%(timestamp)s|%(is_live)s|%(webpage_url)s",
                    "--no-warnings",
                    video_url,
                ]
            )
            videos.append(parse_video_info(details))
        except (ExternalCallError, ValueError) as exc:
            logger.error("Error getting details for video %s: %s", video_url, exc)
    if not videos:
        raise ValueError(f"No videos found in the channel: {url}")
    return videos


def select_channel_videos(
    videos: Sequence[VideoInfo], options: ProcessingOptions
) -> List[VideoInfo]:
    """Order videos newest first (oldest first with ``order="oldest"``), then apply last/skip."""
    ordered = sorted(videos, key=lambda v: v.timestamp)
    if options.order != "oldest":
        ordered.reverse()
    if options.last:
        return ordered[: options.last]
    return ordered[options.skip or 0 :]


def process_channel(url: str, runtime: PipelineRuntime) -> BatchSummary:
    """Process a channel's videos after validating ``last``/``skip``/``order``.

    Raises:
        ValidationError: If the ordering options are invalid
    """
    validate_ordering_options(runtime.options)
    videos = list_channel_videos(url, runtime.policy)
    selected = select_channel_videos(videos, runtime.options)
    logger.info("Found %d video(s) in channel, processing %d", len(videos), len(selected))
    if runtime.options.info:
        info = _collect_metadata([v.url for v in selected], runtime.policy)
        path = write_info(runtime.output_dir, CHANNEL_INFO_FILENAME, info)
        return BatchSummary(total=len(selected), info_files=[path])
    return run_items([(v.url, SOURCE_VIDEO, None) for v in selected], runtime, "Channel")


def process_urls(path: str, runtime: PipelineRuntime) -> BatchSummary:
    """Process every URL listed in a text file.

    Raises:
        ValueError: If the file cannot be read or lists no URLs
    """
    urls = read_list_file(path)
    if not urls:
        raise ValueError(f"No URLs found in {path}")
    logger.info("Found %d URL(s) in %s", len(urls), path)
    if runtime.options.info:
        info = _collect_metadata(urls, runtime.policy)
        now = datetime.now()
        filename = f"urls_info_{now.strftime('%Y-%m-%d')}_{int(time.time())}.json"
        path = write_info(runtime.output_dir, filename, info)
        return BatchSummary(total=len(urls), info_files=[path])
    return run_items([(u, SOURCE_VIDEO, None) for u in urls], runtime, "URLs")


def process_rss(sources: Sequence[str], runtime: PipelineRuntime) -> BatchSummary:
    """Process the selected items of one or more feeds.

    Filter options are validated once before any feed is fetched. A feed that
    cannot be fetched or parsed stops the run; a failed item is skipped.

    Raises:
        ValidationError: If the filter options are invalid
        ExternalCallError: If a feed could not be fetched
        ValueError: If a feed could not be parsed
        UnsupportedInputError: If a feed has no items at all
    """
    validate_rss_options(runtime.options)
    summary = BatchSummary()
    for source in expand_rss_sources(sources):
        logger.info("Fetching feed %s", source)
        feed = load_feed(source, runtime.cfg)
        selected = select_items(feed.items, runtime.options)
        logger.info(describe_selection(len(feed.items), len(selected), runtime.options))
        if not selected:
            logger.info("No items to process in feed %r", feed.title or source)
            continue
        if runtime.options.info:
            filename = f"{sanitize_title(feed.title or 'feed')}{INFO_SUFFIX}"
            path = write_info(runtime.output_dir, filename, [i.to_dict() for i in selected])
            summary.merge(BatchSummary(total=len(selected), info_files=[path]))
            continue
        items: List[WorkItem] = [(i.show_link, SOURCE_RSS, i) for i in selected]
        summary.merge(run_items(items, runtime, feed.title or "RSS"))
    return summary


def validate_source_options(options: ProcessingOptions) -> None:
    """Check the selection flags of the chosen source before any work starts.

    Raises:
        ValidationError: If the RSS or channel ordering options are invalid
    """
    if options.source_kind == SOURCE_RSS:
        validate_rss_options(options)
    elif options.source_kind == "channel":
        validate_ordering_options(options)


def run_source(runtime: PipelineRuntime) -> BatchSummary:
    """Dispatch on the selected source kind.

    Single-source runs return a one-item summary; their failures propagate.

    Raises:
        ValidationError: If no source is selected
    """
    options = runtime.options
    kind = options.source_kind
    if kind == "video":
        record = process_video(str(options.video), runtime)
        return BatchSummary(total=1, processed=1, records=[record])
    if kind == "file":
        record = process_file(str(options.file), runtime)
        return BatchSummary(total=1, processed=1, records=[record])
    if kind == "playlist":
        return process_playlist(str(options.playlist), runtime)
    if kind == "channel":
        return process_channel(str(options.channel), runtime)
    if kind == "urls":
        return process_urls(str(options.urls), runtime)
    if kind == "rss":
        return process_rss(options.rss, runtime)
    raise ValidationError(
        "No source given.",
        suggestion="Pass one of --video, --playlist, --channel, --urls, --file or --rss",
    )
