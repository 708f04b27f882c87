"""RSS feed parsing and item normalization."""

from __future__ import annotations

import logging
import os
import re

# Bandit: parsing handled via defusedxml safe APIs
import xml.etree.ElementTree as ET  # nosec B405
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from html import unescape
from html.parser import HTMLParser
from typing import List, Optional, Tuple
from urllib.parse import urljoin, urlparse

from defusedxml.ElementTree import fromstring as safe_fromstring, ParseError as DefusedXMLParseError

from .. import config, downloader
from ..exceptions import UnsupportedInputError
from ..models import RSSFeed, RSSItem
from ..utils.retry import RetryPolicy

logger = logging.getLogger(__name__)

ITUNES_NS = "{http://www.itunes.com/dtds/podcast-1.0.dtd}"
ATOM_NS = "{http://www.w3.org/2005/Atom}"
MEDIA_TYPE_PREFIXES = ("audio/", "video/")
DATE_FORMAT = "%Y-%m-%d"


class _HTMLStripper(HTMLParser):
    """Collect text content from HTML, separating blocks with spaces."""

    def __init__(self) -> None:
        super().__init__()
        self._parts: List[str] = []

    def handle_data(self, data: str) -> None:
        self._parts.append(data)

    def handle_starttag(self, tag, attrs):  # type: ignore[no-untyped-def]
        self._parts.append(" ")

    def get_text(self) -> str:
        return "".join(self._parts)


def _strip_html(text: str) -> str:
    """Strip HTML tags and decode entities, normalizing whitespace."""
    if not text:
        return ""
    text = unescape(text)
    stripper = _HTMLStripper()
    stripper.feed(text)
    stripper.close()
    return re.sub(r"\s+", " ", stripper.get_text()).strip()


def _find_child(parent: ET.Element, name: str) -> Optional[ET.Element]:
    """Find a direct child by tag, falling back to any namespaced descendant."""
    found = parent.find(name)
    if found is None:
        found = next(
            (e for e in parent.iter() if isinstance(e.tag, str) and e.tag.endswith(name)),
            None,
        )
    return found


def _child_text(parent: ET.Element, name: str) -> str:
    elem = _find_child(parent, name)
    if elem is not None and elem.text:
        return elem.text.strip()
    return ""


def find_enclosure_media(item: ET.Element, base_url: str) -> Optional[Tuple[str, Optional[str]]]:
    """Find the enclosure media URL in an RSS item.

    Args:
        item: RSS item element
        base_url: Base URL for resolving relative URLs

    Returns:
        Tuple of (url, type) or None if not found
    """
    for el in item.iter():
        if isinstance(el.tag, str) and el.tag.lower().endswith("enclosure"):
            url_attr = el.attrib.get("url")
            if url_attr:
                resolved_url = urljoin(base_url, url_attr.strip()) if base_url else url_attr.strip()
                return resolved_url, (el.attrib.get("type") or None)
    return None


def is_media_enclosure(media_type: Optional[str]) -> bool:
    """Return True for audio/* and video/* enclosure types."""
    if not media_type:
        return False
    return media_type.lower().startswith(MEDIA_TYPE_PREFIXES)


def extract_publish_date(item: ET.Element, today: date) -> str:
    """Return the item publish date as ``YYYY-MM-DD``.

    Tries RSS 2.0 ``pubDate`` then Atom ``published``/``updated``. Falls back
    to ``today`` when no date is present or it cannot be parsed.
    """
    parsed: Optional[datetime] = None

    pub_date = _child_text(item, "pubDate")
    if pub_date:
        try:
            parsed = parsedate_to_datetime(pub_date)
        except (TypeError, ValueError, IndexError):
            logger.debug("Unparseable pubDate %r", pub_date)

    if parsed is None:
        for tag in (f"{ATOM_NS}published", f"{ATOM_NS}updated"):
            elem = item.find(tag)
            if elem is not None and elem.text:
                try:
                    parsed = datetime.fromisoformat(elem.text.strip().replace("Z", "+00:00"))
                    break
                except ValueError:
                    logger.debug("Unparseable Atom date %r", elem.text)

    if parsed is None:
        return today.strftime(DATE_FORMAT)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime(DATE_FORMAT)


def _extract_image_url(elem: ET.Element, base_url: str) -> str:
    """Extract an iTunes image href from an item or channel element."""
    itunes_image_elem = elem.find(f"{ITUNES_NS}image")
    if itunes_image_elem is None:
        return ""
    href = (itunes_image_elem.attrib.get("href") or "").strip()
    if href and base_url:
        return urljoin(base_url, href)
    return href


def _extract_channel_image(channel: ET.Element, base_url: str) -> str:
    image_elem = channel.find("image")
    if image_elem is not None:
        url = _child_text(image_elem, "url")
        if url:
            return urljoin(base_url, url) if base_url else url
    return _extract_image_url(channel, base_url)


def parse_feed(xml_bytes: bytes, base_url: str = "", today: Optional[date] = None) -> RSSFeed:
    """Parse RSS XML into a feed with normalized media items.

    Only items with an ``audio/*`` or ``video/*`` enclosure are kept. Items
    without a parseable date get ``today``.

    Args:
        xml_bytes: Raw RSS feed XML content
        base_url: Base URL for resolving relative links
        today: Fallback publish date (default: current UTC date)

    Returns:
        RSSFeed with channel title, link, image, and items in feed order

    Raises:
        ValueError: If the XML cannot be parsed or has no channel
        UnsupportedInputError: If the channel contains no items at all
    """
    today = today or datetime.now(timezone.utc).date()
    try:
        root = safe_fromstring(xml_bytes)
    except (DefusedXMLParseError, ValueError) as exc:
        raise ValueError(f"Failed to parse RSS XML: {exc}") from exc
    if root is None:
        raise ValueError("Failed to parse RSS XML: empty document")

    channel = root.find("channel")
    if channel is None:
        channel = next(
            (e for e in root.iter() if isinstance(e.tag, str) and e.tag.endswith("channel")),
            None,
        )
    if channel is None:
        raise ValueError("RSS feed has no channel element")

    channel_title = _child_text(channel, "title")
    channel_link = _child_text(channel, "link")
    channel_image = _extract_channel_image(channel, base_url)

    raw_items = channel.findall("item")
    if not raw_items:
        raw_items = [e for e in root.iter() if isinstance(e.tag, str) and e.tag.endswith("item")]
    if not raw_items:
        raise UnsupportedInputError("No items found in the RSS feed", path=base_url or None)

    items: List[RSSItem] = []
    for raw in raw_items:
        enclosure = find_enclosure_media(raw, base_url)
        if enclosure is None or not is_media_enclosure(enclosure[1]):
            logger.debug("Skipping item without media enclosure: %s", _child_text(raw, "title"))
            continue
        items.append(
            RSSItem(
                publish_date=extract_publish_date(raw, today),
                title=_child_text(raw, "title"),
                show_link=enclosure[0],
                channel=channel_title,
                channel_url=channel_link,
                description=_strip_html(_child_text(raw, "description")),
                cover_image=_extract_image_url(raw, base_url) or channel_image,
            )
        )

    logger.debug(
        "Parsed %d media items (of %d) from feed %r", len(items), len(raw_items), channel_title
    )
    return RSSFeed(title=channel_title, link=channel_link, image=channel_image, items=items)


def _is_remote(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def load_feed(source: str, cfg: config.Config, today: Optional[date] = None) -> RSSFeed:
    """Load and parse a feed from a URL or a local file path.

    Network fetches use ``cfg.rss_timeout`` per attempt inside the retry loop.

    Raises:
        ExternalCallError: If the feed could not be fetched after all attempts
        ValueError: If the feed could not be read or parsed
    """
    if _is_remote(source):
        policy = RetryPolicy(max_attempts=cfg.max_attempts, base_delay=cfg.retry_base_delay)
        xml_bytes = downloader.fetch_feed_bytes(source, cfg.user_agent, cfg.rss_timeout, policy)
        base_url = source
    else:
        path = os.path.expanduser(source)
        try:
            with open(path, "rb") as handle:
                xml_bytes = handle.read()
        except OSError as exc:
            raise ValueError(f"Failed to read RSS file {source}: {exc}") from exc
        base_url = ""
    return parse_feed(xml_bytes, base_url=base_url, today=today)
