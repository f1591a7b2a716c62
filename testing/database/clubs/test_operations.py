"""Tests for club database operations."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch
from uuid import uuid4

from otakutrack.database.clubs.models import (
    Club,
    ClubMember,
    ClubPost,
    Poll,
    PollOption,
    PollVote,
)
from otakutrack.database.clubs.operations import (
    add_comment,
    create_club,
    create_poll,
    delete_comment,
    get_comment,
    join_club,
    leave_club,
    list_polls,
    toggle_post_like,
    update_club,
    vote_on_poll,
)

NOW = datetime(2025, 5, 1, 12, 0, tzinfo=UTC)


def _make_club(**overrides: object) -> Club:
    values: dict[str, object] = {
        "id": uuid4(),
        "name": "Mecha Monday",
        "description": "Giant robots every week.",
        "category": "Genre",
        "max_members": 1000,
        "is_active": True,
        "is_spoiler_free": False,
        "created_by": uuid4(),
    }
    values.update(overrides)
    club = Club(**values)
    club.members = [ClubMember(user_id=club.created_by, role="admin")]
    return club


def _make_poll(is_multiple_choice: bool = False, **overrides: object) -> Poll:
    values: dict[str, object] = {
        "id": uuid4(),
        "club_id": uuid4(),
        "created_by": uuid4(),
        "question": "Best opening?",
        "is_active": True,
        "is_multiple_choice": is_multiple_choice,
        "end_date": None,
        "created_at": NOW,
    }
    values.update(overrides)
    poll = Poll(**values)
    poll.options = [
        PollOption(position=0, text="Unravel"),
        PollOption(position=1, text="Gurenge"),
        PollOption(position=2, text="Again"),
    ]
    return poll


class TestCreateClub(unittest.TestCase):
    """Tests for create_club operation."""

    @patch("otakutrack.database.clubs.operations.get_club_by_name", return_value=None)
    def test_creator_becomes_admin_member(self, _mock_get: MagicMock) -> None:
        """Test that the creator is the first member with the admin role."""
        creator_id = uuid4()
        mock_session = MagicMock()

        club = create_club(
            mock_session, creator_id, "Slice Club", "Comfy shows", tags=["iyashikei"]
        )

        self.assertEqual(club.member_count, 1)
        self.assertEqual(club.members[0].user_id, creator_id)
        self.assertEqual(club.members[0].role, "admin")
        self.assertEqual(club.tags, ["iyashikei"])
        mock_session.add.assert_called_once_with(club)

    @patch("otakutrack.database.clubs.operations.get_club_by_name")
    def test_duplicate_name_raises(self, mock_get: MagicMock) -> None:
        """Test that club names are unique."""
        mock_get.return_value = _make_club()

        with self.assertRaises(ValueError) as context:
            create_club(MagicMock(), uuid4(), "Mecha Monday", "Again")
        self.assertEqual(str(context.exception), "Club name already exists")

    @patch("otakutrack.database.clubs.operations.get_club_by_name")
    def test_rename_to_taken_name_raises(self, mock_get: MagicMock) -> None:
        """Test that renaming onto another club's name fails."""
        mock_get.return_value = _make_club(name="Taken")

        with self.assertRaises(ValueError):
            update_club(MagicMock(), _make_club(), name="Taken")


class TestMembership(unittest.TestCase):
    """Tests for join_club and leave_club."""

    def test_join_adds_member(self) -> None:
        """Test that joining adds a plain member."""
        club = _make_club()
        user_id = uuid4()

        member = join_club(MagicMock(), club, user_id)

        self.assertEqual(member.role, "member")
        self.assertEqual(club.member_count, 2)

    def test_join_twice_raises(self) -> None:
        """Test that a member cannot join again."""
        club = _make_club()

        with self.assertRaises(ValueError) as context:
            join_club(MagicMock(), club, club.created_by)
        self.assertEqual(str(context.exception), "Already a member of this club")

    def test_join_full_club_raises(self) -> None:
        """Test that the member cap is enforced."""
        club = _make_club(max_members=1)

        with self.assertRaises(ValueError) as context:
            join_club(MagicMock(), club, uuid4())
        self.assertEqual(str(context.exception), "Club is full")

    def test_leave_removes_member(self) -> None:
        """Test that a member can leave."""
        club = _make_club()
        user_id = uuid4()
        join_club(MagicMock(), club, user_id)

        leave_club(MagicMock(), club, user_id)

        self.assertIsNone(club.get_member(user_id))

    def test_admin_cannot_leave(self) -> None:
        """Test that the club admin must stay."""
        club = _make_club()

        with self.assertRaises(ValueError) as context:
            leave_club(MagicMock(), club, club.created_by)
        self.assertIn("Transfer ownership", str(context.exception))

    def test_non_member_cannot_leave(self) -> None:
        """Test that leaving requires membership."""
        with self.assertRaises(ValueError):
            leave_club(MagicMock(), _make_club(), uuid4())


class TestPosts(unittest.TestCase):
    """Tests for likes and comments on posts."""

    def setUp(self) -> None:
        """Create a post."""
        self.post = ClubPost(id=uuid4(), club_id=uuid4(), author_id=uuid4(), title="T", content="C")
        self.post.likes = []
        self.post.comments = []

    def test_toggle_like(self) -> None:
        """Test that likes toggle on and off."""
        user_id = uuid4()

        self.assertTrue(toggle_post_like(MagicMock(), self.post, user_id))
        self.assertTrue(self.post.liked_by(user_id))
        self.assertEqual(self.post.like_count, 1)

        self.assertFalse(toggle_post_like(MagicMock(), self.post, user_id))
        self.assertEqual(self.post.like_count, 0)

    def test_add_and_delete_comment(self) -> None:
        """Test that comments can be added, found and removed."""
        comment = add_comment(MagicMock(), self.post, uuid4(), "Agreed!")
        comment.id = uuid4()

        self.assertIs(get_comment(self.post, comment.id), comment)

        delete_comment(MagicMock(), self.post, comment)

        self.assertIsNone(get_comment(self.post, comment.id))


class TestPolls(unittest.TestCase):
    """Tests for poll creation and voting."""

    def test_create_poll_strips_blank_options(self) -> None:
        """Test that blank options are dropped and positions assigned."""
        poll = create_poll(MagicMock(), _make_club(), uuid4(), "Q?", [" A ", "", "B", "   "])

        self.assertEqual([o.text for o in poll.options], ["A", "B"])
        self.assertEqual([o.position for o in poll.options], [0, 1])

    def test_create_poll_needs_two_options(self) -> None:
        """Test that a poll needs at least two answers."""
        with self.assertRaises(ValueError) as context:
            create_poll(MagicMock(), _make_club(), uuid4(), "Q?", ["Only", " "])
        self.assertEqual(str(context.exception), "Poll must have at least 2 options")

    def test_single_choice_vote_records_first_index(self) -> None:
        """Test that single choice polls keep one vote."""
        poll = _make_poll()
        user_id = uuid4()

        recorded = vote_on_poll(MagicMock(), poll, user_id, [2, 0], now=NOW)

        self.assertEqual(recorded, [2])
        self.assertEqual(len(poll.options[2].votes), 1)
        self.assertEqual(len(poll.options[0].votes), 0)

    def test_revote_replaces_previous_votes(self) -> None:
        """Test that voting again replaces the user's earlier choice."""
        poll = _make_poll(is_multiple_choice=True)
        user_id = uuid4()
        other = uuid4()
        poll.options[0].votes = [PollVote(user_id=user_id), PollVote(user_id=other)]

        vote_on_poll(MagicMock(), poll, user_id, [1, 2], now=NOW)

        self.assertEqual([v.user_id for v in poll.options[0].votes], [other])
        self.assertEqual(len(poll.options[1].votes), 1)
        self.assertEqual(len(poll.options[2].votes), 1)

    def test_vote_on_closed_poll_raises(self) -> None:
        """Test that closed polls reject votes."""
        poll = _make_poll(is_active=False)

        with self.assertRaises(ValueError) as context:
            vote_on_poll(MagicMock(), poll, uuid4(), [0], now=NOW)
        self.assertEqual(str(context.exception), "Poll is not active")

    def test_vote_after_end_date_raises(self) -> None:
        """Test that expired polls reject votes."""
        poll = _make_poll(end_date=NOW - timedelta(hours=1))

        with self.assertRaises(ValueError):
            vote_on_poll(MagicMock(), poll, uuid4(), [0], now=NOW)

    def test_list_active_polls_filters_expired(self) -> None:
        """Test that active_only leaves out closed and expired polls."""
        open_poll = _make_poll()
        expired = _make_poll(end_date=NOW - timedelta(days=1))
        closed = _make_poll(is_active=False)
        mock_session = MagicMock()
        query = mock_session.query.return_value.filter.return_value.order_by.return_value
        query.all.return_value = [open_poll, expired, closed]

        page = list_polls(mock_session, _make_club(), active_only=True, now=NOW)

        self.assertEqual(page.items, [open_poll])
        self.assertEqual(page.total, 1)


if __name__ == "__main__":
    unittest.main()
