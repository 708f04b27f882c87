#!/usr/bin/env python3
"""Tests for filesystem helpers."""

import os
import tempfile
import unittest

import pytest

from show_notes import filesystem

pytestmark = [pytest.mark.unit]


class TestSanitizeTitle(unittest.TestCase):
    def test_basic_title(self):
        self.assertEqual(
            filesystem.sanitize_title("Episode 42: The Answer (Part_1)"),
            "episode-42-the-answer-part-1",
        )

    def test_removes_special_characters(self):
        self.assertEqual(
            filesystem.sanitize_title("Hello, World! What's up?"), "hello-world-whats-up"
        )

    def test_collapses_whitespace_and_hyphens(self):
        self.assertEqual(filesystem.sanitize_title("a  --  b___c"), "a-b-c")

    def test_non_ascii_removed(self):
        self.assertEqual(filesystem.sanitize_title("Café Über"), "caf-ber")

    def test_truncated_to_200_characters(self):
        self.assertEqual(len(filesystem.sanitize_title("x" * 500)), 200)

    def test_output_is_filesystem_safe(self):
        result = filesystem.sanitize_title('Bad/Name\\With*Chars?"<>|')
        for char in '/\\*?"<>| ':
            self.assertNotIn(char, result)


class TestRenameAside(unittest.TestCase):
    def test_missing_file_returns_none(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            self.assertIsNone(filesystem.rename_aside(os.path.join(tmp_dir, "none.wav")))

    def test_existing_file_is_moved(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, "audio.wav")
            with open(path, "w") as handle:
                handle.write("old")
            moved = filesystem.rename_aside(path)
            self.assertIsNotNone(moved)
            self.assertFalse(os.path.exists(path))
            self.assertTrue(os.path.exists(moved))
            self.assertTrue(moved.endswith(".wav"))


class TestRemoveIntermediate(unittest.TestCase):
    def test_removes_file(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, "audio.wav")
            open(path, "w").close()
            self.assertTrue(filesystem.remove_intermediate(path))
            self.assertFalse(os.path.exists(path))

    def test_missing_file_is_not_an_error(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            self.assertFalse(filesystem.remove_intermediate(os.path.join(tmp_dir, "gone.wav")))


class TestValidateOutputDir(unittest.TestCase):
    def test_empty_path_rejected(self):
        with self.assertRaises(ValueError):
            filesystem.validate_and_normalize_output_dir("  ")

    def test_returns_absolute_path(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            result = filesystem.validate_and_normalize_output_dir(tmp_dir)
            self.assertTrue(os.path.isabs(result))


if __name__ == "__main__":
    unittest.main()
