"""
OutputFormatterのユニットテスト
"""

import json
import unittest

from wspin import __version__
from wspin.errors import create_selection_error
from wspin.library.aggregator import LibrarySummary
from wspin.library.models import Game
from wspin.output.formatter import OutputFormat, OutputFormatter, format_threshold


class TestFormatThreshold(unittest.TestCase):
    """format_threshold のテスト"""

    def test_hours(self):
        self.assertEqual(format_threshold(120), "2h")
        self.assertEqual(format_threshold(90), "1.5h")
        self.assertEqual(format_threshold(0), "0h")


class TestOutputFormatter(unittest.TestCase):
    """OutputFormatterクラスのテスト"""

    def setUp(self):
        self.formatter = OutputFormatter()
        zeta = Game(name="Zeta", playtime_minutes=0)
        alpha = Game(name="Alpha", playtime_minutes=300)
        beta = Game(name="Beta", playtime_minutes=5)
        self.summary = LibrarySummary(
            games=[alpha, beta, zeta],
            unplayed=[beta, zeta],
            threshold_minutes=120,
            random_unplayed=beta,
            least_played=zeta,
        )

    def test_markdown(self):
        output = self.formatter.format(self.summary, OutputFormat.MARKDOWN)

        self.assertTrue(output.startswith(f"# Welcome to WSPIN {__version__}"))
        self.assertIn("Total games: 3, Unplayed (<2h) games: 2", output)
        self.assertIn("## Random Unplayed Game\n\nBeta", output)
        self.assertIn("## Least Played Game\n\nZeta (0 minutes)", output)

    def test_markdown_skips_missing_selection(self):
        summary = LibrarySummary(
            games=[Game(name="Alpha", playtime_minutes=300)],
            unplayed=[],
            threshold_minutes=120,
            least_played=Game(name="Alpha", playtime_minutes=300),
            errors=[create_selection_error("no unplayed games")],
        )

        output = self.formatter.format(summary, OutputFormat.MARKDOWN)

        self.assertNotIn("Random Unplayed Game", output)
        self.assertIn("Alpha (300 minutes)", output)

    def test_markdown_empty_library(self):
        summary = LibrarySummary(games=[], unplayed=[], threshold_minutes=120)
        self.assertEqual(self.formatter.format(summary, OutputFormat.MARKDOWN), "No games found.")

    def test_json(self):
        data = json.loads(self.formatter.format(self.summary, OutputFormat.JSON))

        self.assertEqual(data["total_games"], 3)
        self.assertEqual(data["unplayed_games"], 2)
        self.assertEqual(data["threshold_minutes"], 120)
        self.assertEqual(data["random_unplayed"]["name"], "Beta")
        self.assertEqual(
            data["least_played"],
            {"name": "Zeta", "playtime_minutes": 0, "playtime_hours": 0.0},
        )
        self.assertEqual([game["name"] for game in data["games"]], ["Alpha", "Beta", "Zeta"])
        self.assertEqual(data["games"][0]["playtime_hours"], 5.0)
        self.assertEqual(data["errors"], [])

    def test_json_reports_errors(self):
        summary = LibrarySummary(
            games=[],
            unplayed=[],
            threshold_minutes=120,
            errors=[create_selection_error("no unplayed games")],
        )
        data = json.loads(self.formatter.format(summary, OutputFormat.JSON))
        self.assertIsNone(data["random_unplayed"])
        self.assertEqual(data["errors"], [{"code": "LIBRARY_001", "message": "no unplayed games"}])

    def test_unsupported_format(self):
        with self.assertRaises(ValueError):
            self.formatter.format(self.summary, "yaml")


if __name__ == "__main__":
    unittest.main()
