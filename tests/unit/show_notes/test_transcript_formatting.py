#!/usr/bin/env python3
"""Tests for transcript formatting."""

import unittest

import pytest

from show_notes.transcription import formatting

pytestmark = [pytest.mark.unit]


class TestFormatTimestamp(unittest.TestCase):
    def test_minutes_and_seconds(self):
        self.assertEqual(formatting.format_timestamp(0), "00:00")
        self.assertEqual(formatting.format_timestamp(65.9), "01:05")

    def test_minutes_not_wrapped_into_hours(self):
        self.assertEqual(formatting.format_timestamp(3725), "62:05")


class TestWhisperSegments(unittest.TestCase):
    def test_one_line_per_segment(self):
        segments = [
            {"start": 0.0, "text": " Hello there."},
            {"start": 61.2, "text": " Second part."},
            {"start": 70.0, "text": "   "},
        ]
        self.assertEqual(
            formatting.format_whisper_segments(segments),
            "[00:00] Hello there.\n[01:01] Second part.",
        )


class TestDeepgramWords(unittest.TestCase):
    def test_sentences_and_capitals_get_timestamps(self):
        words = [
            {"word": "hello", "punctuated_word": "Hello", "start": 0.0},
            {"word": "world", "punctuated_word": "world.", "start": 0.5},
            {"word": "next", "punctuated_word": "Next", "start": 61.0},
            {"word": "one", "punctuated_word": "one", "start": 61.5},
        ]
        self.assertEqual(
            formatting.format_deepgram_words(words),
            "[00:00] Hello world. \n[01:01] Next one \n",
        )

    def test_new_line_every_thirty_words(self):
        words = [{"word": "w", "start": float(i)} for i in range(31)]
        lines = formatting.format_deepgram_words(words).splitlines()
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[0].startswith("[00:00] "))
        self.assertTrue(lines[1].startswith("[00:30] "))

    def test_falls_back_to_plain_word(self):
        self.assertEqual(
            formatting.format_deepgram_words([{"word": "ok", "start": 1}]), "[00:01] ok \n"
        )


class TestAssemblyTranscript(unittest.TestCase):
    def test_utterances_with_speakers(self):
        transcript = {
            "utterances": [
                {"speaker": "A", "start": 0, "text": "Welcome."},
                {"speaker": "B", "start": 65000, "text": "Thanks."},
            ]
        }
        self.assertEqual(
            formatting.format_assembly_transcript(transcript),
            "Speaker A (00:00): Welcome.\nSpeaker B (01:05): Thanks.",
        )

    def test_without_speaker_labels(self):
        transcript = {"utterances": [{"speaker": "A", "start": 1000, "text": "Hi."}]}
        self.assertEqual(
            formatting.format_assembly_transcript(transcript, speaker_labels=False), "(00:01): Hi."
        )

    def test_words_grouped_into_lines(self):
        words = [{"text": "word", "start": i * 1000} for i in range(40)]
        output = formatting.format_assembly_transcript({"words": words})
        lines = output.splitlines()
        self.assertGreater(len(lines), 1)
        self.assertTrue(lines[0].startswith("[00:00] word"))
        for line in lines:
            self.assertLessEqual(len(line.split("] ", 1)[1]), formatting.ASSEMBLY_LINE_CHARS)

    def test_text_fallback(self):
        self.assertEqual(formatting.format_assembly_transcript({"text": "plain"}), "plain")
        self.assertEqual(
            formatting.format_assembly_transcript({}), formatting.NO_TRANSCRIPT_TEXT
        )


if __name__ == "__main__":
    unittest.main()
