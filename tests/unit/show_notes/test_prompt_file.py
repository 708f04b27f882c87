#!/usr/bin/env python3
"""Tests for parsing saved prompt files and re-running the LLM on them."""

import os
import tempfile
import unittest

import pytest

from helpers import create_test_metadata, FakeLLMProvider, TEST_LLM_OUTPUT, TEST_TRANSCRIPT
from show_notes.prompts import build_prompt
from show_notes.providers.catalog import LLM_CATALOG
from show_notes.utils.retry import RetryPolicy
from show_notes.workflow.prompt_file import base_path_for, parse_prompt_file, rerun_prompt_file
from show_notes.workflow.stages.llm import prompt_file_content, run_llm
from show_notes.workflow.stages.markdown import build_frontmatter
from show_notes.workflow.types import TranscriptResult

pytestmark = [pytest.mark.unit]

PROMPT = "Write a summary.\n\nFormat:\n    ## Episode Summary\n"


class TestParsePromptFile(unittest.TestCase):
    def test_written_file_parses_back(self):
        metadata = create_test_metadata()
        frontmatter = build_frontmatter(metadata)
        parsed = parse_prompt_file(prompt_file_content(frontmatter, PROMPT, TEST_TRANSCRIPT))
        self.assertEqual(parsed.frontmatter, frontmatter)
        self.assertEqual(parsed.prompt, PROMPT)
        self.assertEqual(parsed.transcript, TEST_TRANSCRIPT)
        self.assertEqual(parsed.metadata, metadata)

    def test_heading_matched_case_insensitively(self):
        parsed = parse_prompt_file("Prompt text\n## TRANSCRIPT\n\nhello")
        self.assertEqual(parsed.frontmatter, "")
        self.assertEqual(parsed.prompt, "Prompt text\n")
        self.assertEqual(parsed.transcript, "hello")

    def test_prompt_without_trailing_newline(self):
        content = prompt_file_content("", "Summarize this episode.", TEST_TRANSCRIPT)
        self.assertIn("Summarize this episode.\n## Transcript\n", content)
        self.assertEqual(parse_prompt_file(content).prompt, "Summarize this episode.\n")

    def test_missing_transcript_section(self):
        with self.assertRaises(ValueError):
            parse_prompt_file("---\ntitle: \"x\"\n---\nJust a prompt\n")


class TestBasePathFor(unittest.TestCase):
    def test_prompt_suffix_removed(self):
        self.assertEqual(base_path_for("out/2024-09-24-ep-prompt.md"), "out/2024-09-24-ep")

    def test_other_files_lose_extension(self):
        self.assertEqual(base_path_for("out/notes.md"), "out/notes")


class TestRerunPromptFile(unittest.TestCase):
    def test_show_notes_written_beside_prompt_file(self):
        metadata = create_test_metadata()
        frontmatter = build_frontmatter(metadata)
        provider = FakeLLMProvider()
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, "2024-09-24-episode-prompt.md")
            with open(path, "w", encoding="utf-8") as handle:
                handle.write(prompt_file_content(frontmatter, PROMPT, TEST_TRANSCRIPT))

            result = rerun_prompt_file(
                path,
                provider,
                LLM_CATALOG["chatgpt"].default_model,
                RetryPolicy(max_attempts=1, base_delay=0),
            )

            self.assertEqual(
                result.output_path,
                os.path.join(tmp_dir, "2024-09-24-episode-chatgpt-shownotes.md"),
            )
            self.assertTrue(os.path.exists(result.output_path))
        self.assertEqual(provider.calls, [(PROMPT, TEST_TRANSCRIPT)])
        record = result.record
        self.assertEqual(record.llm_output, TEST_LLM_OUTPUT)
        self.assertEqual(record.metadata, metadata)
        self.assertIsNone(record.transcription_service)
        self.assertEqual(record.transcription_cost, 0.0)

    def test_custom_prompt_file_can_be_rerun(self):
        metadata = create_test_metadata()
        provider = FakeLLMProvider()
        policy = RetryPolicy(max_attempts=1, base_delay=0)
        with tempfile.TemporaryDirectory() as tmp_dir:
            custom_path = os.path.join(tmp_dir, "custom.md")
            with open(custom_path, "w", encoding="utf-8") as handle:
                handle.write("Summarize this episode.\n")
            written = run_llm(
                os.path.join(tmp_dir, "2024-09-24-episode"),
                build_frontmatter(metadata),
                metadata,
                build_prompt([], custom_path),
                TranscriptResult(TEST_TRANSCRIPT, "deepgram", "nova-2", 0.5),
                policy,
            )

            result = rerun_prompt_file(
                written.output_path, provider, LLM_CATALOG["chatgpt"].default_model, policy
            )

            self.assertTrue(os.path.exists(result.output_path))
        self.assertEqual(provider.calls, [("Summarize this episode.\n", TEST_TRANSCRIPT)])
        self.assertEqual(result.record.metadata, metadata)

    def test_unreadable_file(self):
        with self.assertRaises(ValueError):
            rerun_prompt_file(
                "/nonexistent/x-prompt.md",
                FakeLLMProvider(),
                LLM_CATALOG["chatgpt"].default_model,
                RetryPolicy(max_attempts=1, base_delay=0),
            )


if __name__ == "__main__":
    unittest.main()
