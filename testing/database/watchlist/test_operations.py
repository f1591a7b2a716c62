"""Tests for watchlist database operations."""

import unittest
from datetime import UTC, datetime
from unittest.mock import MagicMock, patch
from uuid import uuid4

from otakutrack.database.shows.models import Episode, Show
from otakutrack.database.watchlist.models import WatchlistItem
from otakutrack.database.watchlist.operations import (
    WatchlistStats,
    add_to_watchlist,
    get_watchlist_stats,
    update_progress,
    update_watchlist_item,
)
from otakutrack.enums import WatchStatus

NOW = datetime(2025, 4, 1, 20, 0, tzinfo=UTC)


def _make_item(**overrides: object) -> WatchlistItem:
    values: dict[str, object] = {
        "id": uuid4(),
        "user_id": uuid4(),
        "show_id": uuid4(),
        "status": WatchStatus.PLAN_TO_WATCH.value,
        "current_episode": 0,
        "total_episodes": 12,
        "rewatch_count": 0,
    }
    values.update(overrides)
    return WatchlistItem(**values)


class TestAddToWatchlist(unittest.TestCase):
    """Tests for add_to_watchlist operation."""

    @patch("otakutrack.database.watchlist.operations.get_watchlist_item_for_show")
    def test_adds_with_episode_total(self, mock_get: MagicMock) -> None:
        """Test that the total comes from the show's episodes."""
        mock_get.return_value = None
        show = Show(id=uuid4(), title="K-On!", description="")
        show.episodes = [Episode(number=n) for n in range(1, 14)]
        mock_session = MagicMock()

        item = add_to_watchlist(mock_session, uuid4(), show, notes="comfy")

        self.assertEqual(item.total_episodes, 13)
        self.assertEqual(item.status, "Plan to Watch")
        self.assertEqual(item.notes, "comfy")
        mock_session.add.assert_called_once_with(item)

    @patch("otakutrack.database.watchlist.operations.get_watchlist_item_for_show")
    def test_duplicate_raises(self, mock_get: MagicMock) -> None:
        """Test that adding the same show twice raises ValueError."""
        mock_get.return_value = _make_item()
        show = Show(id=uuid4(), title="K-On!", description="")

        with self.assertRaises(ValueError) as context:
            add_to_watchlist(MagicMock(), uuid4(), show)
        self.assertEqual(str(context.exception), "Show already in watchlist")


class TestUpdateProgress(unittest.TestCase):
    """Tests for update_progress operation."""

    def test_first_episode_starts_watching(self) -> None:
        """Test that progress moves the item to Watching and sets start_date."""
        item = _make_item()

        result = update_progress(MagicMock(), item, current_episode=3, now=NOW)

        self.assertEqual(item.status, "Watching")
        self.assertEqual(item.start_date, NOW)
        self.assertEqual(item.last_watched, NOW)
        self.assertEqual(result.new_episodes, 3)
        self.assertEqual(result.previous_status, "Plan to Watch")

    def test_last_episode_completes(self) -> None:
        """Test that reaching the total completes the show."""
        item = _make_item(status="Watching", current_episode=11, start_date=NOW)

        result = update_progress(MagicMock(), item, current_episode=12, now=NOW)

        self.assertEqual(item.status, "Completed")
        self.assertEqual(item.finish_date, NOW)
        self.assertEqual(result.new_episodes, 1)

    def test_rejects_episode_past_total(self) -> None:
        """Test that invalid progress leaves the item unchanged."""
        item = _make_item(status="Watching", current_episode=5)

        with self.assertRaises(ValueError):
            update_progress(MagicMock(), item, current_episode=13, now=NOW)
        self.assertEqual(item.current_episode, 5)
        self.assertEqual(item.status, "Watching")

    def test_going_back_counts_no_new_episodes(self) -> None:
        """Test that lowering progress does not count as watching."""
        item = _make_item(status="Watching", current_episode=6)

        result = update_progress(MagicMock(), item, current_episode=4, now=NOW)

        self.assertEqual(result.new_episodes, 0)
        self.assertEqual(item.current_episode, 4)


class TestUpdateWatchlistItem(unittest.TestCase):
    """Tests for update_watchlist_item operation."""

    def test_explicit_status_kept(self) -> None:
        """Test that a general update does not derive status from progress."""
        item = _make_item(current_episode=2, status="Watching")

        update_watchlist_item(MagicMock(), item, now=NOW, status=WatchStatus.DROPPED)

        self.assertEqual(item.status, "Dropped")
        self.assertIsNone(item.finish_date)

    def test_completed_sets_finish_date(self) -> None:
        """Test that marking completed records the finish date."""
        item = _make_item()

        update_watchlist_item(MagicMock(), item, now=NOW, status=WatchStatus.COMPLETED)

        self.assertEqual(item.finish_date, NOW)

    def test_unknown_field_raises(self) -> None:
        """Test that protected fields cannot be updated."""
        with self.assertRaises(ValueError):
            update_watchlist_item(MagicMock(), _make_item(), user_id=uuid4())


class TestWatchlistStats(unittest.TestCase):
    """Tests for get_watchlist_stats and WatchlistStats."""

    def test_groups_by_status(self) -> None:
        """Test that per-status rows are summed."""
        mock_session = MagicMock()
        query = mock_session.query.return_value.filter.return_value.group_by.return_value
        query.all.return_value = [("Completed", 3, 36), ("Watching", 1, 4)]

        stats = get_watchlist_stats(mock_session, uuid4())

        self.assertEqual(stats.total_shows, 4)
        self.assertEqual(stats.completed_shows, 3)
        self.assertEqual(stats.by_status["Completed"], {"count": 3, "total_episodes": 36})
        self.assertEqual(stats.completion_rate, 75)

    def test_completion_rate_empty(self) -> None:
        """Test that an empty watchlist has a 0% completion rate."""
        self.assertEqual(WatchlistStats().completion_rate, 0)


class TestWatchlistItemModel(unittest.TestCase):
    """Tests for WatchlistItem derived properties."""

    def test_completion_and_time_spent(self) -> None:
        """Test completion percentage and days spent."""
        item = _make_item(
            current_episode=6,
            start_date=datetime(2025, 1, 1, tzinfo=UTC),
            finish_date=datetime(2025, 1, 8, tzinfo=UTC),
        )

        self.assertEqual(item.completion_percentage, 50)
        self.assertEqual(item.time_spent_days, 7)


if __name__ == "__main__":
    unittest.main()
