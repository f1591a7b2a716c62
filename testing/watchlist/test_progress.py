"""Tests for watchlist progress rules."""

import unittest
from datetime import UTC, datetime

from otakutrack.enums import WatchStatus
from otakutrack.watchlist.progress import (
    completion_percentage,
    new_episodes_watched,
    status_for_progress,
    time_spent_days,
    validate_progress,
)


class TestValidateProgress(unittest.TestCase):
    """Tests for validate_progress function."""

    def test_accepts_progress_within_total(self) -> None:
        """Test that valid progress passes."""
        validate_progress(5, 12)

    def test_accepts_any_progress_when_total_unknown(self) -> None:
        """Test that an unknown total does not cap progress."""
        validate_progress(500, 0)

    def test_rejects_negative_episode(self) -> None:
        """Test that a negative episode raises ValueError."""
        with self.assertRaises(ValueError) as context:
            validate_progress(-1, 12)
        self.assertIn("negative", str(context.exception))

    def test_rejects_episode_past_total(self) -> None:
        """Test that exceeding the total raises ValueError."""
        with self.assertRaises(ValueError) as context:
            validate_progress(13, 12)
        self.assertIn("exceeds total episodes", str(context.exception))


class TestStatusForProgress(unittest.TestCase):
    """Tests for status_for_progress function."""

    def test_zero_is_plan_to_watch(self) -> None:
        """Test that no progress maps to Plan to Watch."""
        self.assertEqual(status_for_progress(0, 12), WatchStatus.PLAN_TO_WATCH)

    def test_partial_is_watching(self) -> None:
        """Test that partial progress maps to Watching."""
        self.assertEqual(status_for_progress(3, 12), WatchStatus.WATCHING)

    def test_reaching_total_is_completed(self) -> None:
        """Test that the last episode maps to Completed."""
        self.assertEqual(status_for_progress(12, 12), WatchStatus.COMPLETED)

    def test_unknown_total_stays_watching(self) -> None:
        """Test that a show with no known total never auto-completes."""
        self.assertEqual(status_for_progress(40, 0), WatchStatus.WATCHING)


class TestDerivedValues(unittest.TestCase):
    """Tests for completion, time spent and new episode helpers."""

    def test_completion_percentage_rounds(self) -> None:
        """Test that completion is a rounded percentage."""
        self.assertEqual(completion_percentage(1, 3), 33)
        self.assertEqual(completion_percentage(12, 12), 100)

    def test_completion_percentage_unknown_total(self) -> None:
        """Test that an unknown total gives 0."""
        self.assertEqual(completion_percentage(5, 0), 0)

    def test_time_spent_days(self) -> None:
        """Test whole days between start and finish."""
        start = datetime(2025, 1, 1, tzinfo=UTC)
        finish = datetime(2025, 1, 11, 6, tzinfo=UTC)

        self.assertEqual(time_spent_days(start, finish), 10)

    def test_time_spent_days_missing_dates(self) -> None:
        """Test that a missing date gives 0."""
        self.assertEqual(time_spent_days(None, datetime(2025, 1, 1, tzinfo=UTC)), 0)

    def test_new_episodes_watched(self) -> None:
        """Test that only forward progress counts."""
        self.assertEqual(new_episodes_watched(3, 7), 4)
        self.assertEqual(new_episodes_watched(7, 3), 0)


if __name__ == "__main__":
    unittest.main()
