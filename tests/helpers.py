"""Test constants, object factories and fake providers shared by show_notes tests.

The tests directory is on ``pythonpath`` (see pyproject.toml), so test modules
import these with ``from helpers import ...``.
"""

from typing import List, Optional

from show_notes import config, options
from show_notes.llm import LLMResult, LLMUsage
from show_notes.models import RSSItem, ShowNoteMetadata
from show_notes.transcription import TranscriptionResult

# Test constants
TEST_BASE_URL = "https://example.com"
TEST_FEED_URL = "https://example.com/feed.xml"
TEST_VIDEO_URL = "https://www.youtube.com/watch?v=abc123"
TEST_MEDIA_URL = f"{TEST_BASE_URL}/episode.mp3"
TEST_FEED_TITLE = "Test Feed"
TEST_EPISODE_TITLE = "Episode Title"
TEST_TRANSCRIPT = "[00:00] Hello and welcome.\n[00:05] Today we talk about testing."
TEST_LLM_OUTPUT = "## Episode Summary\n\nA short show about testing."


def create_test_config(**overrides):
    """Create a Config with fast retries and no API keys from the environment.

    Args:
        **overrides: Fields to override from defaults

    Returns:
        config.Config object with test defaults
    """
    defaults = {
        "output_dir": "output",
        "database_url": "sqlite:///:memory:",
        "log_level": "INFO",
        "user_agent": "test-agent",
        "max_attempts": 2,
        "retry_base_delay": 0,
    }
    for field_name in config.API_KEY_ENV_VARS:
        defaults[field_name] = ""
    defaults.update(overrides)
    return config.Config(**defaults)


def create_test_options(**overrides):
    """Create ProcessingOptions with the given fields."""
    return options.ProcessingOptions(**overrides)


def create_test_metadata(**overrides):
    defaults = {
        "show_link": TEST_VIDEO_URL,
        "channel": "Test Channel",
        "channel_url": "https://www.youtube.com/@test",
        "title": TEST_EPISODE_TITLE,
        "description": "",
        "publish_date": "2024-09-24",
        "cover_image": "https://example.com/cover.jpg",
    }
    defaults.update(overrides)
    return ShowNoteMetadata(**defaults)


def create_test_rss_item(index: int = 1, publish_date: str = "2024-09-24", **overrides):
    defaults = {
        "publish_date": publish_date,
        "title": f"Episode {index}",
        "show_link": f"{TEST_BASE_URL}/episode{index}.mp3",
        "channel": TEST_FEED_TITLE,
        "channel_url": TEST_BASE_URL,
        "description": f"Description {index}",
        "cover_image": f"{TEST_BASE_URL}/cover.jpg",
    }
    defaults.update(overrides)
    return RSSItem(**defaults)


def build_rss_xml(items: List[dict], title: str = TEST_FEED_TITLE) -> bytes:
    """Build an RSS 2.0 feed from item dicts (title, url, type, pub_date, description)."""
    parts = []
    for item in items:
        enclosure = ""
        if item.get("url"):
            media_type = item.get("type", "audio/mpeg")
            enclosure = f'<enclosure url="{item["url"]}" type="{media_type}" length="1"/>'
        pub_date = f"<pubDate>{item['pub_date']}</pubDate>" if item.get("pub_date") else ""
        description = (
            f"<description>{item['description']}</description>" if item.get("description") else ""
        )
        parts.append(
            f"<item><title>{item.get('title', '')}</title>{pub_date}{description}{enclosure}</item>"
        )
    return (
        '<?xml version="1.0"?>'
        '<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">'
        f"<channel><title>{title}</title><link>{TEST_BASE_URL}</link>"
        f'<itunes:image href="{TEST_BASE_URL}/channel.jpg"/>'
        f"{''.join(parts)}</channel></rss>"
    ).encode("utf-8")


class FakeTranscriptionProvider:
    """Transcription provider returning a fixed transcript; can fail a number of times first."""

    service = "deepgram"

    def __init__(self, text: str = TEST_TRANSCRIPT, failures: int = 0, cost: float = 0.43):
        self.text = text
        self.failures = failures
        self.cost = cost
        self.calls: List[str] = []

    def transcribe(self, audio_path: str) -> TranscriptionResult:
        self.calls.append(audio_path)
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("transient transcription failure")
        return TranscriptionResult(self.text, "nova-2", self.cost)


class FakeLLMProvider:
    """LLM provider returning fixed output with optional reported usage."""

    service = "chatgpt"
    model_id = "gpt-4o-mini"

    def __init__(
        self,
        text: str = TEST_LLM_OUTPUT,
        usage: Optional[LLMUsage] = None,
        error: Optional[Exception] = None,
    ):
        self.text = text
        self.usage = usage or LLMUsage(1000, 200, 1200)
        self.error = error
        self.calls: List[tuple] = []

    def complete(self, prompt: str, transcript: str) -> LLMResult:
        self.calls.append((prompt, transcript))
        if self.error is not None:
            raise self.error
        return LLMResult(self.text, self.usage)

