#!/usr/bin/env python3
"""Integration tests for the full per-item pipeline.

External tools (ffprobe, ffmpeg, yt-dlp) are replaced by a fake command
runner that writes the files the real tools would; providers are in-process
fakes. Everything else runs for real: file naming, markdown output, cleanup,
cost calculation and the SQLite store.
"""

import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

import pytest

from helpers import (
    build_rss_xml,
    create_test_config,
    create_test_options,
    FakeLLMProvider,
    FakeTranscriptionProvider,
    TEST_BASE_URL,
    TEST_LLM_OUTPUT,
    TEST_TRANSCRIPT,
)
from show_notes.db import ShowNoteStore
from show_notes.exceptions import ExternalCallError, StageError
from show_notes.workflow import build_runtime, process_item, run_source
from show_notes.workflow.stages.markdown import build_frontmatter, metadata_for_file


class FakeTools:
    """Stand-in for ffprobe, ffmpeg and yt-dlp that creates their output files."""

    def __init__(self, detected_type="mp3", failing_urls=()):
        self.detected_type = detected_type
        self.failing_urls = set(failing_urls)
        self.commands = []

    def __call__(self, args, **kwargs):
        args = [str(a) for a in args]
        self.commands.append(args)
        tool = args[0]
        if tool == "ffprobe":
            return f"{self.detected_type}\n"
        if tool == "ffmpeg":
            self._touch(args[-1])
            return ""
        if tool == "yt-dlp":
            url = args[-1]
            if url in self.failing_urls:
                raise ExternalCallError(f"yt-dlp exited with status 1: {url}", target="yt-dlp")
            self._touch(args[args.index("-o") + 1])
            return ""
        raise AssertionError(f"unexpected command {tool}")

    @staticmethod
    def _touch(path):
        with open(path, "wb") as handle:
            handle.write(b"RIFF----WAVEfmt ")


@pytest.mark.integration
class TestPipeline(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.output_dir = os.path.join(self.temp_dir, "content")
        self.store = ShowNoteStore(f"sqlite:///{os.path.join(self.temp_dir, 'notes.db')}")
        self.tools = FakeTools()
        for target in (
            "show_notes.workflow.stages.audio.run_command",
            "show_notes.workflow.stages.markdown.run_command",
        ):
            patcher = patch(target, side_effect=self.tools)
            patcher.start()
            self.addCleanup(patcher.stop)
        duration = patch("show_notes.cost.run_command", return_value="120.0\n")
        duration.start()
        self.addCleanup(duration.stop)

        self.media_path = os.path.join(self.temp_dir, "My Talk (Live).mp3")
        with open(self.media_path, "wb") as handle:
            handle.write(b"ID3")

    def tearDown(self):
        self.store.close()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _runtime(self, llm_provider=None, **options):
        cfg = create_test_config(
            output_dir=self.output_dir, deepgram_api_key="dg-test", openai_api_key="sk-test"
        )
        return build_runtime(
            cfg,
            create_test_options(deepgram=True, **options),
            transcription_provider=FakeTranscriptionProvider(cost=0.43),
            llm_provider=llm_provider,
            store=self.store,
        )

    def _read(self, path):
        with open(path, encoding="utf-8") as handle:
            return handle.read()

    def test_file_without_llm_writes_prompt_file(self):
        runtime = self._runtime(prompt=["titles"])

        record = process_item(self.media_path, "file", runtime)

        prompt_path = os.path.join(runtime.output_dir, "my-talk-live-prompt.md")
        content = self._read(prompt_path)
        frontmatter = build_frontmatter(metadata_for_file(self.media_path))
        self.assertTrue(content.startswith(frontmatter + "\n"))
        self.assertLess(content.index(record.prompt), content.index("## Transcript"))
        self.assertTrue(content.endswith("## Transcript\n\n" + TEST_TRANSCRIPT))

        self.assertIsNone(record.llm_service)
        self.assertIsNone(record.llm_cost)
        self.assertEqual(record.transcription_service, "deepgram")
        self.assertEqual(record.transcription_model, "nova-2")
        # 2 minutes at 0.43 cents per minute
        self.assertAlmostEqual(record.transcription_cost, 0.0086)
        self.assertAlmostEqual(record.final_cost, 0.0086)

        self.assertFalse(os.path.exists(os.path.join(runtime.output_dir, "my-talk-live.wav")))
        self.assertEqual([r.id for r in self.store.list_all()], [record.id])

    def test_file_with_llm_writes_show_notes(self):
        llm = FakeLLMProvider()
        runtime = self._runtime(llm_provider=llm, chatgpt=True)

        record = process_item(self.media_path, "file", runtime)

        notes_path = os.path.join(runtime.output_dir, "my-talk-live-chatgpt-shownotes.md")
        content = self._read(notes_path)
        self.assertIn(TEST_LLM_OUTPUT + "\n\n## Transcript\n\n" + TEST_TRANSCRIPT, content)
        self.assertEqual(len(llm.calls), 1)
        self.assertEqual(record.llm_service, "chatgpt")
        self.assertEqual(record.llm_model, "gpt-4o-mini")
        # 1000 input and 200 output tokens at $0.15 / $0.60 per million
        self.assertAlmostEqual(record.llm_cost, 0.00027)
        self.assertAlmostEqual(record.final_cost, 0.0086 + 0.00027)
        stored = self.store.get_by_id(record.id)
        self.assertEqual(stored.llm_output, TEST_LLM_OUTPUT)

    def test_keep_intermediates(self):
        runtime = self._runtime(keep_intermediates=True)
        process_item(self.media_path, "file", runtime)
        self.assertTrue(os.path.exists(os.path.join(runtime.output_dir, "my-talk-live.wav")))

    def test_unsupported_file_fails_audio_stage(self):
        self.tools.detected_type = "png_pipe"
        with self.assertRaises(StageError) as ctx:
            process_item(self.media_path, "file", self._runtime())
        self.assertEqual(ctx.exception.stage, "audio")
        self.assertEqual(self.store.list_all(), [])

    def test_llm_failure_keeps_no_record(self):
        llm = FakeLLMProvider(error=RuntimeError("rate limited"))
        runtime = self._runtime(llm_provider=llm, chatgpt=True)
        with self.assertRaises(StageError) as ctx:
            process_item(self.media_path, "file", runtime)
        self.assertEqual(ctx.exception.stage, "llm")
        self.assertEqual(len(llm.calls), 2)
        self.assertEqual(self.store.list_all(), [])
        self.assertFalse(os.path.exists(os.path.join(runtime.output_dir, "my-talk-live.wav")))

    def test_rss_feed_skips_failed_items(self):
        feed_path = os.path.join(self.temp_dir, "feed.xml")
        with open(feed_path, "wb") as handle:
            handle.write(
                build_rss_xml(
                    [
                        {
                            "title": "Good Episode",
                            "url": f"{TEST_BASE_URL}/good.mp3",
                            "pub_date": "Tue, 24 Sep 2024 10:00:00 +0000",
                        },
                        {
                            "title": "Broken Episode",
                            "url": f"{TEST_BASE_URL}/broken.mp3",
                            "pub_date": "Mon, 23 Sep 2024 10:00:00 +0000",
                        },
                    ]
                )
            )
        self.tools.failing_urls.add(f"{TEST_BASE_URL}/broken.mp3")
        runtime = self._runtime(rss=[feed_path])

        summary = run_source(runtime)

        self.assertEqual((summary.total, summary.processed, summary.skipped), (2, 1, 1))
        self.assertEqual(summary.failures[0].stage, "audio")
        self.assertTrue(
            os.path.exists(os.path.join(runtime.output_dir, "2024-09-24-good-episode-prompt.md"))
        )
        stored = self.store.list_all()
        self.assertEqual([r.metadata.title for r in stored], ["Good Episode"])
        self.assertEqual(stored[0].metadata.channel, "Test Feed")


if __name__ == "__main__":
    unittest.main()
