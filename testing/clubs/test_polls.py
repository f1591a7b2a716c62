"""Tests for poll tallying and vote selection."""

import unittest
from datetime import UTC, datetime, timedelta

from otakutrack.clubs.polls import (
    OptionVotes,
    is_poll_open,
    select_vote_indexes,
    tally_poll,
    user_vote_indexes,
)


class TestTallyPoll(unittest.TestCase):
    """Tests for tally_poll function."""

    def test_counts_and_percentages(self) -> None:
        """Test that each option gets its vote count and share."""
        options = [
            OptionVotes("Naruto", ["a", "b", "c"]),
            OptionVotes("Bleach", ["d"]),
        ]

        result = tally_poll(options)

        self.assertEqual(result.total_votes, 4)
        self.assertEqual(result.unique_voters, 4)
        self.assertEqual([o.votes for o in result.options], [3, 1])
        self.assertEqual([o.percentage for o in result.options], [75.0, 25.0])
        self.assertEqual([o.index for o in result.options], [0, 1])

    def test_no_votes_gives_zero_percentages(self) -> None:
        """Test that an empty poll reports 0% everywhere."""
        options = [OptionVotes("Yes", []), OptionVotes("No", [])]

        result = tally_poll(options)

        self.assertEqual(result.total_votes, 0)
        self.assertEqual(result.unique_voters, 0)
        self.assertEqual([o.percentage for o in result.options], [0.0, 0.0])

    def test_percentages_rounded_to_two_places(self) -> None:
        """Test that thirds are rounded."""
        options = [
            OptionVotes("A", ["u1"]),
            OptionVotes("B", ["u2"]),
            OptionVotes("C", ["u3"]),
        ]

        result = tally_poll(options)

        self.assertEqual(result.options[0].percentage, 33.33)

    def test_multiple_choice_voter_counted_once(self) -> None:
        """Test that a voter on several options is one unique voter."""
        options = [OptionVotes("A", ["u1", "u2"]), OptionVotes("B", ["u1"])]

        result = tally_poll(options)

        self.assertEqual(result.total_votes, 3)
        self.assertEqual(result.unique_voters, 2)


class TestUserVoteIndexes(unittest.TestCase):
    """Tests for user_vote_indexes function."""

    def test_returns_voted_indexes(self) -> None:
        """Test that the options a user chose are reported."""
        options = [OptionVotes("A", ["u1"]), OptionVotes("B", []), OptionVotes("C", ["u1"])]

        self.assertEqual(user_vote_indexes(options, "u1"), [0, 2])

    def test_returns_empty_when_not_voted(self) -> None:
        """Test that a non-voter gets an empty list."""
        options = [OptionVotes("A", ["u1"])]

        self.assertEqual(user_vote_indexes(options, "u2"), [])


class TestSelectVoteIndexes(unittest.TestCase):
    """Tests for select_vote_indexes function."""

    def test_single_choice_keeps_first_valid(self) -> None:
        """Test that single choice polls record only one vote."""
        result = select_vote_indexes([5, 1, 2], option_count=3, multiple_choice=False)

        self.assertEqual(result, [1])

    def test_multiple_choice_drops_invalid_and_duplicates(self) -> None:
        """Test that out-of-range and repeated indexes are ignored."""
        result = select_vote_indexes([0, -1, 2, 0, 3], option_count=3, multiple_choice=True)

        self.assertEqual(result, [0, 2])

    def test_all_invalid_returns_empty(self) -> None:
        """Test that nothing is selected when every index is out of range."""
        result = select_vote_indexes([7, 9], option_count=2, multiple_choice=True)

        self.assertEqual(result, [])


class TestIsPollOpen(unittest.TestCase):
    """Tests for is_poll_open function."""

    def setUp(self) -> None:
        """Fix the current time."""
        self.now = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)

    def test_open_without_end_date(self) -> None:
        """Test that an active poll with no end date is open."""
        self.assertTrue(is_poll_open(True, None, self.now))

    def test_closed_when_inactive(self) -> None:
        """Test that a closed poll rejects votes."""
        self.assertFalse(is_poll_open(False, None, self.now))

    def test_closed_after_end_date(self) -> None:
        """Test that a poll past its end date is closed."""
        self.assertFalse(is_poll_open(True, self.now - timedelta(minutes=1), self.now))

    def test_open_before_end_date(self) -> None:
        """Test that a poll before its end date is open."""
        self.assertTrue(is_poll_open(True, self.now + timedelta(days=1), self.now))


if __name__ == "__main__":
    unittest.main()
