#!/usr/bin/env python3
"""Integration tests for the SQLite-backed show note store.

These tests verify records survive a round trip through a real database file:
- Insert returns increasing ids
- Records read back with metadata, costs and NULL LLM fields intact
- Listing is ordered newest publish date first
- The CLI listing and detail commands read the same file
"""

import json
import os
import shutil
import tempfile
import unittest
from unittest.mock import Mock, patch

import pytest

from helpers import create_test_metadata
from show_notes import cli
from show_notes.db import ShowNoteStore
from show_notes.exceptions import PersistenceError
from show_notes.models import ShowNoteRecord


def _record(title, publish_date, **overrides):
    fields = {
        "metadata": create_test_metadata(title=title, publish_date=publish_date),
        "frontmatter": f'---\ntitle: "{title}"\n---\n',
        "prompt": "PROMPT\n",
        "transcript": "[00:00] hello",
        "transcription_service": "deepgram",
        "transcription_model": "nova-2",
        "transcription_cost": 0.0043,
        "final_cost": 0.0043,
    }
    fields.update(overrides)
    return ShowNoteRecord(**fields)


@pytest.mark.integration
class TestShowNoteStore(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.database_url = f"sqlite:///{os.path.join(self.temp_dir, 'data', 'notes.db')}"
        self.store = ShowNoteStore(self.database_url)

    def tearDown(self):
        self.store.close()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_parent_directory_created(self):
        self.assertTrue(os.path.isdir(os.path.join(self.temp_dir, "data")))

    def test_insert_and_read_back(self):
        record = _record(
            "With LLM",
            "2024-09-24",
            llm_output="## Summary",
            llm_service="claude",
            llm_model="claude-3-5-sonnet-latest",
            llm_cost=0.01,
            final_cost=0.0143,
        )
        note_id = self.store.insert(record)

        loaded = self.store.get_by_id(note_id)

        self.assertEqual(loaded.id, note_id)
        self.assertEqual(loaded.metadata, record.metadata)
        self.assertEqual(loaded.llm_service, "claude")
        self.assertAlmostEqual(loaded.final_cost, 0.0143)
        self.assertEqual(loaded.transcript, "[00:00] hello")

    def test_prompt_only_record_keeps_null_llm_fields(self):
        note_id = self.store.insert(_record("Prompt only", "2024-09-24"))
        loaded = self.store.get_by_id(note_id)
        self.assertIsNone(loaded.llm_service)
        self.assertIsNone(loaded.llm_model)
        self.assertIsNone(loaded.llm_cost)
        self.assertEqual(loaded.llm_output, "")

    def test_ids_increase(self):
        first = self.store.insert(_record("One", "2024-01-01"))
        second = self.store.insert(_record("Two", "2024-01-02"))
        self.assertGreater(second, first)

    def test_missing_id(self):
        self.assertIsNone(self.store.get_by_id(999))

    def test_list_newest_first(self):
        self.store.insert(_record("Old", "2024-01-01"))
        self.store.insert(_record("New", "2024-09-01"))
        self.store.insert(_record("Mid", "2024-05-01"))
        titles = [r.metadata.title for r in self.store.list_all()]
        self.assertEqual(titles, ["New", "Mid", "Old"])

    def test_reopen_sees_existing_records(self):
        self.store.insert(_record("Kept", "2024-09-24"))
        reopened = ShowNoteStore(self.database_url)
        try:
            self.assertEqual([r.metadata.title for r in reopened.list_all()], ["Kept"])
        finally:
            reopened.close()


@pytest.mark.integration
class TestStoreErrors(unittest.TestCase):
    def test_unknown_backend(self):
        with self.assertRaises(PersistenceError):
            ShowNoteStore("nosuchdb://localhost/notes")


@pytest.mark.integration
class TestStoreCommands(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.database_url = f"sqlite:///{os.path.join(self.temp_dir, 'notes.db')}"
        store = ShowNoteStore(self.database_url)
        self.note_id = store.insert(_record("Stored Episode", "2024-09-24"))
        store.close()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _main(self, argv):
        return cli.main(
            argv + ["--database-url", self.database_url],
            apply_log_level_fn=Mock(),
            logger=Mock(),
        )

    @patch("builtins.print")
    def test_list_notes(self, mock_print):
        self.assertEqual(self._main(["--list-notes"]), 0)
        line = mock_print.call_args[0][0]
        self.assertTrue(line.startswith(f"{self.note_id}\t2024-09-24\tprompt\t"))
        self.assertTrue(line.endswith("Stored Episode"))

    @patch("builtins.print")
    def test_show_note(self, mock_print):
        self.assertEqual(self._main(["--show-note", str(self.note_id)]), 0)
        data = json.loads(mock_print.call_args[0][0])
        self.assertEqual(data["title"], "Stored Episode")
        self.assertEqual(data["transcriptionService"], "deepgram")
        self.assertIsNone(data["llmService"])

    @patch("builtins.print")
    def test_show_missing_note(self, mock_print):
        self.assertEqual(self._main(["--show-note", "999"]), 1)
        mock_print.assert_not_called()


if __name__ == "__main__":
    unittest.main()
