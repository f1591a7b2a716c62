"""Tests for reminder Dagster ops."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch
from uuid import uuid4

from dagster import build_op_context
from otakutrack.dagster.reminders.ops import (
    ReminderStats,
    _format_reminder_body,
    _format_reminder_title,
    process_reminders_op,
)
from otakutrack.database.reminders.models import Reminder
from otakutrack.database.shows.models import Show
from otakutrack.database.users.models import User


def _make_reminder(**overrides: object) -> Reminder:
    values: dict[str, object] = {
        "id": uuid4(),
        "user_id": uuid4(),
        "show_id": uuid4(),
        "alert_time": datetime.now(UTC) - timedelta(minutes=1),
        "alert_type": "both",
        "is_active": True,
        "is_recurring": False,
        "recurring_pattern": "weekly",
        "message": "New episode available!",
        "priority": "medium",
        "sent_count": 0,
        "max_sends": 10,
        "show": Show(title="Frieren", description="", episode_duration=24),
        "user": User(name="Aki", email="aki@example.com", password_hash="x"),
    }
    values.update(overrides)
    return Reminder(**values)


class TestFormatReminder(unittest.TestCase):
    """Tests for the reminder title and body helpers."""

    def test_title_includes_episode_number(self) -> None:
        """Test that the episode number is appended when known."""
        reminder = _make_reminder(episode_number=12)

        self.assertEqual(_format_reminder_title(reminder), "Frieren: Episode 12")

    def test_title_without_episode(self) -> None:
        """Test that the show title is used alone."""
        self.assertEqual(_format_reminder_title(_make_reminder()), "Frieren")

    def test_body_includes_episode_title(self) -> None:
        """Test that the episode title follows the message."""
        reminder = _make_reminder(episode_title="The Journey's End")

        result = _format_reminder_body(reminder)

        self.assertEqual(result, "New episode available!\nEpisode: The Journey's End")

    def test_recurring_body_shows_send_count(self) -> None:
        """Test that recurring reminders display the upcoming send number.

        sent_count is incremented after sending, so sent_count=1 shows 2/10.
        """
        reminder = _make_reminder(is_recurring=True, sent_count=1)

        self.assertIn("(Reminder 2/10)", _format_reminder_body(reminder))


class TestReminderStats(unittest.TestCase):
    """Tests for ReminderStats dataclass."""

    def test_default_values(self) -> None:
        """Test that defaults are initialized correctly."""
        stats = ReminderStats()

        self.assertEqual(stats.reminders_due, 0)
        self.assertEqual(stats.reminders_sent, 0)
        self.assertEqual(stats.notifications_created, 0)
        self.assertEqual(stats.emails_sent, 0)
        self.assertEqual(stats.reminders_deactivated, 0)
        self.assertEqual(stats.errors, [])


class TestProcessRemindersOp(unittest.TestCase):
    """Tests for process_reminders_op."""

    def setUp(self) -> None:
        """Patch the session and email sender used by the op."""
        session_patcher = patch("otakutrack.dagster.reminders.ops.get_session")
        mock_get_session = session_patcher.start()
        self.addCleanup(session_patcher.stop)
        self.mock_session = MagicMock()
        mock_get_session.return_value.__enter__ = MagicMock(return_value=self.mock_session)
        mock_get_session.return_value.__exit__ = MagicMock(return_value=False)

        sender_patcher = patch("otakutrack.dagster.reminders.ops.get_email_sender")
        self.mock_sender = sender_patcher.start().return_value
        self.addCleanup(sender_patcher.stop)
        self.mock_sender.send.return_value = True

    @patch("otakutrack.dagster.reminders.ops.get_due_reminders")
    def test_returns_stats_with_no_work(self, mock_get_due: MagicMock) -> None:
        """Test op returns empty stats when no reminders are due."""
        mock_get_due.return_value = []

        result = process_reminders_op(build_op_context())

        self.assertEqual(result.reminders_due, 0)
        self.assertEqual(result.reminders_sent, 0)
        self.assertEqual(result.errors, [])

    @patch("otakutrack.dagster.reminders.ops.create_notification")
    @patch("otakutrack.dagster.reminders.ops.get_due_reminders")
    def test_delivers_both_channels(
        self,
        mock_get_due: MagicMock,
        mock_create_notification: MagicMock,
    ) -> None:
        """Test that a both-channel reminder notifies in-app and by email."""
        reminder = _make_reminder(episode_number=3)
        mock_get_due.return_value = [reminder]

        result = process_reminders_op(build_op_context())

        self.assertEqual(result.reminders_due, 1)
        self.assertEqual(result.reminders_sent, 1)
        self.assertEqual(result.notifications_created, 1)
        self.assertEqual(result.emails_sent, 1)
        self.assertEqual(result.reminders_deactivated, 1)
        mock_create_notification.assert_called_once_with(
            self.mock_session,
            reminder.user_id,
            "Frieren: Episode 3",
            "New episode available!",
            reminder_id=reminder.id,
        )
        self.mock_sender.send.assert_called_once_with(
            "aki@example.com",
            "Reminder: Frieren: Episode 3",
            "New episode available!",
        )
        self.assertEqual(reminder.sent_count, 1)
        self.assertFalse(reminder.is_active)

    @patch("otakutrack.dagster.reminders.ops.create_notification")
    @patch("otakutrack.dagster.reminders.ops.get_due_reminders")
    def test_in_app_only_skips_email(
        self,
        mock_get_due: MagicMock,
        mock_create_notification: MagicMock,
    ) -> None:
        """Test that in-app reminders never send email."""
        mock_get_due.return_value = [_make_reminder(alert_type="inApp", is_recurring=True)]

        result = process_reminders_op(build_op_context())

        self.assertEqual(result.notifications_created, 1)
        self.assertEqual(result.emails_sent, 0)
        self.assertEqual(result.reminders_deactivated, 0)
        self.mock_sender.send.assert_not_called()
        mock_create_notification.assert_called_once()

    @patch("otakutrack.dagster.reminders.ops.create_notification")
    @patch("otakutrack.dagster.reminders.ops.get_due_reminders")
    def test_undelivered_email_reminder_stays_due(
        self,
        mock_get_due: MagicMock,
        mock_create_notification: MagicMock,
    ) -> None:
        """Test that an email-only reminder the sender could not send is not marked sent."""
        self.mock_sender.send.return_value = False
        reminder = _make_reminder(alert_type="email")
        mock_get_due.return_value = [reminder]

        result = process_reminders_op(build_op_context())

        self.assertEqual(result.reminders_due, 1)
        self.assertEqual(result.reminders_sent, 0)
        self.assertEqual(result.emails_sent, 0)
        self.assertEqual(result.reminders_deactivated, 0)
        self.assertEqual(len(result.errors), 1)
        self.assertIn(str(reminder.id), result.errors[0])
        mock_create_notification.assert_not_called()
        self.assertEqual(reminder.sent_count, 0)
        self.assertIsNone(reminder.last_sent)
        self.assertTrue(reminder.is_active)

    @patch("otakutrack.dagster.reminders.ops.create_notification")
    @patch("otakutrack.dagster.reminders.ops.get_due_reminders")
    def test_failed_email_still_sent_in_app(
        self,
        mock_get_due: MagicMock,
        mock_create_notification: MagicMock,
    ) -> None:
        """Test that a both-channel reminder counts as sent when only the notification lands."""
        self.mock_sender.send.return_value = False
        reminder = _make_reminder()
        mock_get_due.return_value = [reminder]

        result = process_reminders_op(build_op_context())

        self.assertEqual(result.reminders_sent, 1)
        self.assertEqual(result.notifications_created, 1)
        self.assertEqual(result.emails_sent, 0)
        self.assertEqual(result.errors, [])
        self.assertEqual(reminder.sent_count, 1)

    @patch("otakutrack.dagster.reminders.ops.create_notification")
    @patch("otakutrack.dagster.reminders.ops.get_due_reminders")
    def test_failure_is_recorded_and_others_continue(
        self,
        mock_get_due: MagicMock,
        mock_create_notification: MagicMock,
    ) -> None:
        """Test that one failing reminder does not stop the rest."""
        failing = _make_reminder(alert_type="inApp")
        working = _make_reminder(alert_type="inApp")
        mock_get_due.return_value = [failing, working]
        mock_create_notification.side_effect = [RuntimeError("db down"), MagicMock()]

        result = process_reminders_op(build_op_context())

        self.assertEqual(result.reminders_due, 2)
        self.assertEqual(result.reminders_sent, 1)
        self.assertEqual(len(result.errors), 1)
        self.assertIn(str(failing.id), result.errors[0])
        self.assertEqual(failing.sent_count, 0)
        self.assertTrue(failing.is_active)


if __name__ == "__main__":
    unittest.main()
