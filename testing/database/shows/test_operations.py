"""Tests for show database operations."""

import unittest
from unittest.mock import MagicMock, patch
from uuid import uuid4

from otakutrack.database.shows.models import Show
from otakutrack.database.shows.operations import (
    apply_rating,
    average_rating,
    count_show_genres,
    create_show,
    deactivate_show,
    get_similar_shows,
    update_show,
)


class TestRatings(unittest.TestCase):
    """Tests for average_rating and apply_rating."""

    def test_average_rounded_to_one_decimal(self) -> None:
        """Test that the mean is rounded."""
        self.assertEqual(average_rating([8, 9, 9]), 8.7)

    def test_average_of_nothing_is_zero(self) -> None:
        """Test that a show with no reviews averages 0."""
        self.assertEqual(average_rating([]), 0.0)

    def test_apply_rating_sets_columns(self) -> None:
        """Test that average and count are written to the show."""
        show = Show(title="Mushishi", description="")

        apply_rating(show, [10, 7])

        self.assertEqual(show.rating_average, 8.5)
        self.assertEqual(show.rating_count, 2)


class TestCreateShow(unittest.TestCase):
    """Tests for create_show operation."""

    def test_creates_show_with_episodes_and_links(self) -> None:
        """Test that nested episodes and links are built."""
        mock_session = MagicMock()

        show = create_show(
            mock_session,
            episodes=[{"number": 1, "title": "Pilot"}, {"number": 2}],
            streaming_links=[{"platform": "Crunchyroll", "url": "https://example.com/s"}],
            title="Cowboy Bebop",
            description="Space bounty hunters.",
            genres=["Action", "Sci-Fi"],
        )

        self.assertEqual(show.title, "Cowboy Bebop")
        self.assertEqual(show.episode_count, 2)
        self.assertEqual(show.episodes[0].title, "Pilot")
        self.assertEqual(show.streaming_links[0].platform, "Crunchyroll")
        mock_session.add.assert_called_once_with(show)

    def test_rejects_unknown_genre(self) -> None:
        """Test that genres outside the catalogue raise ValueError."""
        with self.assertRaises(ValueError) as context:
            create_show(MagicMock(), title="X", description="", genres=["Isekai Cooking"])
        self.assertIn("Invalid genre", str(context.exception))

    def test_rejects_rating_fields(self) -> None:
        """Test that derived rating columns cannot be set directly."""
        with self.assertRaises(ValueError):
            create_show(MagicMock(), title="X", description="", rating_average=10.0)


class TestUpdateShow(unittest.TestCase):
    """Tests for update_show and deactivate_show."""

    @patch("otakutrack.database.shows.operations.get_show_by_id")
    def test_replaces_episodes_when_given(self, mock_get: MagicMock) -> None:
        """Test that episodes are replaced wholesale."""
        show = Show(id=uuid4(), title="Old", description="")
        mock_get.return_value = show

        update_show(MagicMock(), show.id, episodes=[{"number": 1}], title="New")

        self.assertEqual(show.title, "New")
        self.assertEqual(show.episode_count, 1)

    @patch("otakutrack.database.shows.operations.get_show_by_id", return_value=None)
    def test_missing_show_returns_none(self, _mock_get: MagicMock) -> None:
        """Test that unknown shows return None."""
        self.assertIsNone(update_show(MagicMock(), uuid4(), title="New"))
        self.assertIsNone(deactivate_show(MagicMock(), uuid4()))

    @patch("otakutrack.database.shows.operations.get_show_by_id")
    def test_deactivate_soft_deletes(self, mock_get: MagicMock) -> None:
        """Test that deactivation clears is_active."""
        show = Show(id=uuid4(), title="Gone", description="", is_active=True)
        mock_get.return_value = show

        deactivate_show(MagicMock(), show.id)

        self.assertFalse(show.is_active)


class TestQueries(unittest.TestCase):
    """Tests for query helpers that do not need a database."""

    def test_similar_shows_without_genres_or_tags(self) -> None:
        """Test that a show with nothing to match returns no suggestions."""
        mock_session = MagicMock()
        show = Show(id=uuid4(), title="Bare", description="", genres=[], tags=[])

        self.assertEqual(get_similar_shows(mock_session, show), [])
        mock_session.query.assert_not_called()

    def test_count_show_genres(self) -> None:
        """Test that genres are counted across shows."""
        mock_session = MagicMock()
        mock_session.query.return_value.all.return_value = [
            (["Action", "Drama"],),
            (["Action"],),
            (None,),
        ]

        result = count_show_genres(mock_session)

        self.assertEqual(result[0], {"genre": "Action", "count": 2})
        self.assertEqual(result[1], {"genre": "Drama", "count": 1})


if __name__ == "__main__":
    unittest.main()
