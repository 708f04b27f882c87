#!/usr/bin/env python3
"""Tests for RSS parsing, option validation and item selection."""

import unittest
from datetime import date, datetime, timezone
from unittest.mock import patch

import pytest

from helpers import build_rss_xml, create_test_config, create_test_options, create_test_rss_item
from helpers import TEST_BASE_URL, TEST_FEED_TITLE, TEST_FEED_URL
from show_notes.exceptions import ExternalCallError, UnsupportedInputError, ValidationError
from show_notes.rss import load_feed, parse_feed, select_items, validate_rss_options
from show_notes.rss.selection import describe_selection, validate_ordering_options

pytestmark = [pytest.mark.unit]

TODAY = date(2024, 10, 1)


class TestParseFeed(unittest.TestCase):
    def test_media_items_normalized(self):
        xml = build_rss_xml(
            [
                {
                    "title": "Episode 1",
                    "url": f"{TEST_BASE_URL}/ep1.mp3",
                    "pub_date": "Tue, 24 Sep 2024 10:00:00 +0000",
                    "description": "&lt;p&gt;Great &amp;amp; fun&lt;/p&gt;",
                },
            ]
        )
        feed = parse_feed(xml, base_url=TEST_FEED_URL, today=TODAY)
        self.assertEqual(feed.title, TEST_FEED_TITLE)
        self.assertEqual(feed.link, TEST_BASE_URL)
        self.assertEqual(len(feed.items), 1)
        item = feed.items[0]
        self.assertEqual(item.publish_date, "2024-09-24")
        self.assertEqual(item.show_link, f"{TEST_BASE_URL}/ep1.mp3")
        self.assertEqual(item.channel, TEST_FEED_TITLE)
        self.assertEqual(item.description, "Great & fun")
        self.assertEqual(item.cover_image, f"{TEST_BASE_URL}/channel.jpg")

    def test_items_without_media_enclosure_dropped(self):
        xml = build_rss_xml(
            [
                {"title": "Audio", "url": f"{TEST_BASE_URL}/a.mp3", "type": "audio/mpeg"},
                {"title": "Video", "url": f"{TEST_BASE_URL}/v.mp4", "type": "video/mp4"},
                {"title": "PDF", "url": f"{TEST_BASE_URL}/doc.pdf", "type": "application/pdf"},
                {"title": "Nothing"},
            ]
        )
        feed = parse_feed(xml, today=TODAY)
        self.assertEqual([i.title for i in feed.items], ["Audio", "Video"])

    def test_missing_or_bad_date_uses_today(self):
        xml = build_rss_xml(
            [
                {"title": "No date", "url": f"{TEST_BASE_URL}/a.mp3"},
                {"title": "Bad date", "url": f"{TEST_BASE_URL}/b.mp3", "pub_date": "someday"},
            ]
        )
        feed = parse_feed(xml, today=TODAY)
        self.assertEqual([i.publish_date for i in feed.items], ["2024-10-01", "2024-10-01"])

    def test_relative_enclosure_resolved(self):
        xml = build_rss_xml([{"title": "Rel", "url": "media/ep.mp3"}])
        feed = parse_feed(xml, base_url=TEST_FEED_URL, today=TODAY)
        self.assertEqual(feed.items[0].show_link, f"{TEST_BASE_URL}/media/ep.mp3")

    def test_no_items_is_unsupported(self):
        with self.assertRaises(UnsupportedInputError):
            parse_feed(build_rss_xml([]), today=TODAY)

    def test_malformed_xml(self):
        with self.assertRaises(ValueError):
            parse_feed(b"<rss><channel>", today=TODAY)


class TestLoadFeed(unittest.TestCase):
    @patch("show_notes.rss.parser.downloader.fetch_feed_bytes")
    def test_remote_feed_fetched_with_retry_policy(self, mock_fetch):
        mock_fetch.return_value = build_rss_xml([{"title": "E", "url": f"{TEST_BASE_URL}/e.mp3"}])
        cfg = create_test_config(max_attempts=4, retry_base_delay=0.5)
        feed = load_feed(TEST_FEED_URL, cfg, today=TODAY)
        self.assertEqual(len(feed.items), 1)
        _url, _agent, timeout, policy = mock_fetch.call_args[0]
        self.assertEqual(timeout, cfg.rss_timeout)
        self.assertEqual((policy.max_attempts, policy.base_delay), (4, 0.5))

    @patch("show_notes.rss.parser.downloader.fetch_feed_bytes")
    def test_fetch_failure_propagates(self, mock_fetch):
        mock_fetch.side_effect = ExternalCallError("down", attempts=7)
        with self.assertRaises(ExternalCallError):
            load_feed(TEST_FEED_URL, create_test_config())

    def test_missing_local_file(self):
        with self.assertRaises(ValueError):
            load_feed("/nonexistent/feed.xml", create_test_config())


class TestValidateRSSOptions(unittest.TestCase):
    def _assert_invalid(self, fragment, **overrides):
        with self.assertRaises(ValidationError) as ctx:
            validate_rss_options(create_test_options(**overrides))
        self.assertIn(fragment, str(ctx.exception))

    def test_valid_combinations(self):
        for overrides in (
            {},
            {"last": 3},
            {"skip": 2, "order": "oldest"},
            {"date": ["2024-09-24"]},
            {"last_days": 7},
            {"item": [f"{TEST_BASE_URL}/a.mp3"]},
        ):
            validate_rss_options(create_test_options(**overrides))

    def test_last_must_be_positive(self):
        self._assert_invalid("--last option must be a positive integer", last=0)

    def test_last_with_skip_or_order(self):
        self._assert_invalid("cannot be used with --skip or --order", last=2, skip=1)
        self._assert_invalid("cannot be used with --skip or --order", last=2, order="newest")

    def test_skip_must_be_non_negative(self):
        self._assert_invalid("--skip option must be a non-negative integer", skip=-1)

    def test_order_values(self):
        self._assert_invalid("either 'newest' or 'oldest'", order="random")

    def test_last_days_positive(self):
        self._assert_invalid("--lastDays option must be a positive integer", last_days=0)

    def test_last_days_exclusive(self):
        self._assert_invalid("--lastDays option cannot be used", last_days=3, date=["2024-01-01"])
        self._assert_invalid("--lastDays option cannot be used", last_days=3, skip=1)

    def test_date_format(self):
        self._assert_invalid('Invalid date format "2024/09/24"', date=["2024/09/24"])

    def test_date_exclusive(self):
        self._assert_invalid("--date option cannot be used", date=["2024-09-24"], order="oldest")

    def test_ordering_validation_shared(self):
        with self.assertRaises(ValidationError):
            validate_ordering_options(create_test_options(skip=-2))


class TestSelectItems(unittest.TestCase):
    def setUp(self):
        # Feed order, newest first
        self.items = [
            create_test_rss_item(1, "2024-09-30"),
            create_test_rss_item(2, "2024-09-24"),
            create_test_rss_item(3, "2024-09-20"),
            create_test_rss_item(4, "2024-09-01"),
        ]

    def _select(self, **overrides):
        now = datetime(2024, 10, 1, tzinfo=timezone.utc)
        return [i.title for i in select_items(self.items, create_test_options(**overrides), now)]

    def test_default_is_all_items_in_feed_order(self):
        self.assertEqual(self._select(), ["Episode 1", "Episode 2", "Episode 3", "Episode 4"])

    def test_item_matches_enclosure_urls(self):
        self.assertEqual(
            self._select(item=[f"{TEST_BASE_URL}/episode3.mp3", "https://other/none.mp3"]),
            ["Episode 3"],
        )

    def test_last_days(self):
        self.assertEqual(self._select(last_days=8), ["Episode 1", "Episode 2"])

    def test_date(self):
        selected = self._select(date=["2024-09-20", "2024-09-01"])
        self.assertEqual(selected, ["Episode 3", "Episode 4"])

    def test_last_takes_first_items_in_feed_order(self):
        self.assertEqual(self._select(last=2), ["Episode 1", "Episode 2"])

    def test_oldest_reverses_then_skips(self):
        selected = self._select(order="oldest", skip=1)
        self.assertEqual(selected, ["Episode 3", "Episode 2", "Episode 1"])

    def test_skip(self):
        self.assertEqual(self._select(skip=3), ["Episode 4"])

    def test_empty_selection_is_not_an_error(self):
        self.assertEqual(self._select(date=["1999-01-01"]), [])

    def test_describe_selection(self):
        text = describe_selection(4, 2, create_test_options(last=2))
        self.assertEqual(text, "Processing 2 of 4 item(s) (the first 2 item(s))")


if __name__ == "__main__":
    unittest.main()
