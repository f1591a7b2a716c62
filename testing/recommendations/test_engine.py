"""Tests for show recommendation scoring."""

import unittest
from dataclasses import dataclass, field

from otakutrack.recommendations.engine import build_preferences, rank_shows, score_show


@dataclass
class FakeShow:
    """Minimal show carrying the scored attributes."""

    title: str
    genres: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    rating_average: float = 0.0
    is_popular: bool = False
    year: int | None = None


class TestBuildPreferences(unittest.TestCase):
    """Tests for build_preferences function."""

    def test_counts_genres_and_tags(self) -> None:
        """Test that genre and tag frequencies are summed."""
        history = [
            FakeShow("A", genres=["Action", "Drama"], tags=["mecha"]),
            FakeShow("B", genres=["Action"]),
        ]

        preferences = build_preferences(history)

        self.assertEqual(preferences.genres["Action"], 2)
        self.assertEqual(preferences.genres["Drama"], 1)
        self.assertEqual(preferences.tags["mecha"], 1)
        self.assertFalse(preferences.is_empty)

    def test_empty_history(self) -> None:
        """Test that no history gives empty preferences."""
        self.assertTrue(build_preferences([]).is_empty)


class TestScoreShow(unittest.TestCase):
    """Tests for score_show function."""

    def test_combines_weights_and_bonuses(self) -> None:
        """Test the full score for a matching, popular, recent show."""
        preferences = build_preferences(
            [
                FakeShow("A", genres=["Action"], tags=["mecha"]),
                FakeShow("B", genres=["Action"]),
            ]
        )
        show = FakeShow(
            "C",
            genres=["Action"],
            tags=["mecha"],
            rating_average=8.0,
            is_popular=True,
            year=2025,
        )

        # 2*2 genre + 1 tag + 8*0.5 rating + 3 popular + 2 recent
        self.assertEqual(score_show(show, preferences, current_year=2026), 14.0)

    def test_old_show_gets_no_recency_bonus(self) -> None:
        """Test that shows older than the window score no bonus."""
        preferences = build_preferences([])
        show = FakeShow("Old", year=2010)

        self.assertEqual(score_show(show, preferences, current_year=2026), 0.0)


class TestRankShows(unittest.TestCase):
    """Tests for rank_shows function."""

    def test_orders_best_first_and_limits(self) -> None:
        """Test that the highest scoring shows are returned first."""
        history = [FakeShow("Seen", genres=["Romance"])]
        candidates = [
            FakeShow("Plain"),
            FakeShow("Match", genres=["Romance"]),
            FakeShow("Popular", is_popular=True),
        ]

        result = rank_shows(candidates, history, limit=2, current_year=2026)

        # Popular 3, Match 2 (one genre hit), Plain 0
        self.assertEqual([show.title for show in result], ["Popular", "Match"])

    def test_ties_keep_original_order(self) -> None:
        """Test that equal scores keep candidate order."""
        candidates = [FakeShow("First"), FakeShow("Second")]

        result = rank_shows(candidates, [], current_year=2026)

        self.assertEqual([show.title for show in result], ["First", "Second"])


if __name__ == "__main__":
    unittest.main()
