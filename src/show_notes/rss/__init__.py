"""RSS feed parsing and item selection."""

from .parser import find_enclosure_media, load_feed, parse_feed
from .selection import select_items, validate_ordering_options, validate_rss_options

__all__ = [
    "find_enclosure_media",
    "load_feed",
    "parse_feed",
    "select_items",
    "validate_ordering_options",
    "validate_rss_options",
]
