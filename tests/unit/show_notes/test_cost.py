#!/usr/bin/env python3
"""Tests for cost estimation and formatting."""

import os
import tempfile
import unittest
from unittest.mock import patch

import pytest

from show_notes import cost
from show_notes.providers.catalog import LLM_CATALOG, ProviderModel

pytestmark = [pytest.mark.unit]


class TestTranscriptionCost(unittest.TestCase):
    def test_cost_from_duration(self):
        """Two minutes at 0.25 cents per minute cost half a cent."""
        result = cost.estimate_transcription_cost("a.wav", 0.25, probe=lambda _: 120.0)
        self.assertAlmostEqual(result, 0.5)

    def test_free_model_costs_zero(self):
        self.assertEqual(cost.estimate_transcription_cost("a.wav", 0.0, probe=lambda _: 600.0), 0.0)

    @patch("show_notes.cost.run_command", return_value="93.5\n")
    def test_probe_parses_ffprobe_output(self, mock_run):
        self.assertEqual(cost.probe_duration_seconds("a.wav"), 93.5)
        args = mock_run.call_args[0][0]
        self.assertEqual(args[0], "ffprobe")
        self.assertIn("format=duration", args)

    @patch("show_notes.cost.run_command", return_value="N/A\n")
    def test_probe_rejects_non_numeric_duration(self, _mock_run):
        with self.assertRaises(ValueError):
            cost.probe_duration_seconds("a.wav")


class TestLLMCost(unittest.TestCase):
    def test_word_count_token_estimate(self):
        self.assertEqual(cost.approximate_tokens("one two  three\nfour"), 4)
        self.assertEqual(cost.approximate_tokens(""), 0)

    def test_cost_for_one_million_tokens(self):
        model = ProviderModel("m", "M", input_cost_per_1m=3.0, output_cost_per_1m=15.0)
        result = cost.estimate_llm_cost(model, 1_000_000, 1_000_000)
        self.assertAlmostEqual(result.input_cost, 3.0)
        self.assertAlmostEqual(result.output_cost, 15.0)
        self.assertAlmostEqual(result.total_cost, 18.0)

    def test_zero_rate_model_is_free(self):
        model = LLM_CATALOG["ollama"].default_model
        self.assertEqual(cost.estimate_llm_cost(model, 10_000, 5_000), cost.LLMCost(0.0, 0.0, 0.0))

    def test_tiny_costs_round_to_zero(self):
        model = ProviderModel("m", "M", input_cost_per_1m=0.15, output_cost_per_1m=0.60)
        result = cost.estimate_llm_cost(model, 10, 1)
        self.assertEqual(result.input_cost, 0.0)
        self.assertEqual(result.output_cost, 0.0)

    def test_cent_denominated_rates_are_normalized(self):
        model = ProviderModel(
            "m", "M", input_cost_per_1m=100.0, output_cost_per_1m=200.0, cost_unit="cents"
        )
        result = cost.estimate_llm_cost(model, 1_000_000, 1_000_000)
        self.assertAlmostEqual(result.total_cost, 3.0)

    def test_file_estimate_assumes_full_output(self):
        model = ProviderModel("m", "M", input_cost_per_1m=1.0, output_cost_per_1m=2.0)
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, "prompt.md")
            with open(path, "w", encoding="utf-8") as handle:
                handle.write("word " * 1000)
            result = cost.estimate_llm_cost_for_file(path, model)
        self.assertAlmostEqual(result.input_cost, 0.001)
        self.assertAlmostEqual(result.output_cost, 0.008)

    def test_file_estimate_missing_file(self):
        with self.assertRaises(ValueError):
            cost.estimate_llm_cost_for_file(
                "/nonexistent/prompt.md", LLM_CATALOG["chatgpt"].models[0]
            )


class TestFormatCost(unittest.TestCase):
    def test_unknown(self):
        self.assertEqual(cost.format_cost(None), "N/A")

    def test_zero(self):
        self.assertEqual(cost.format_cost(0), "0¢")

    def test_below_one_cent(self):
        self.assertEqual(cost.format_cost(0.0042), "¢0.4200")

    def test_below_one_dollar(self):
        self.assertEqual(cost.format_cost(0.25), "¢25.00")

    def test_dollars(self):
        self.assertEqual(cost.format_cost(3.5), "$3.50")

    def test_cents_to_dollars(self):
        self.assertAlmostEqual(cost.cents_to_dollars(50), 0.5)


if __name__ == "__main__":
    unittest.main()
