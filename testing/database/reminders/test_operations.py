"""Tests for reminder database operations."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock
from uuid import uuid4

from otakutrack.database.reminders.models import Reminder
from otakutrack.database.reminders.operations import (
    calculate_next_alert_time,
    create_reminder,
    deactivate_reminder,
    mark_reminder_sent,
    update_reminder,
)
from otakutrack.enums import AlertType, RecurringPattern, ReminderPriority


def _make_reminder(**overrides: object) -> Reminder:
    values: dict[str, object] = {
        "id": uuid4(),
        "user_id": uuid4(),
        "show_id": uuid4(),
        "alert_time": datetime(2025, 1, 6, 12, 0, tzinfo=UTC),
        "alert_type": AlertType.BOTH.value,
        "is_active": True,
        "is_recurring": False,
        "recurring_pattern": RecurringPattern.WEEKLY.value,
        "message": "New episode available!",
        "priority": ReminderPriority.MEDIUM.value,
        "sent_count": 0,
        "max_sends": 10,
    }
    values.update(overrides)
    return Reminder(**values)


class TestCalculateNextAlertTime(unittest.TestCase):
    """Tests for calculate_next_alert_time function."""

    def test_daily_step(self) -> None:
        """Test that a daily reminder moves forward one day."""
        alert_time = datetime(2025, 1, 6, 9, 0, tzinfo=UTC)
        now = datetime(2025, 1, 6, 9, 1, tzinfo=UTC)

        result = calculate_next_alert_time(alert_time, RecurringPattern.DAILY, now)

        self.assertEqual(result, datetime(2025, 1, 7, 9, 0, tzinfo=UTC))

    def test_weekly_skips_missed_weeks(self) -> None:
        """Test that missed occurrences are skipped until the result is in the future."""
        alert_time = datetime(2025, 1, 6, 12, 0, tzinfo=UTC)
        now = datetime(2025, 1, 20, 13, 0, tzinfo=UTC)

        result = calculate_next_alert_time(alert_time, RecurringPattern.WEEKLY, now)

        self.assertEqual(result, datetime(2025, 1, 27, 12, 0, tzinfo=UTC))

    def test_monthly_clamps_to_month_end(self) -> None:
        """Test that the 31st becomes the last day of February."""
        alert_time = datetime(2025, 1, 31, 18, 0, tzinfo=UTC)
        now = datetime(2025, 2, 1, tzinfo=UTC)

        result = calculate_next_alert_time(alert_time, RecurringPattern.MONTHLY, now)

        self.assertEqual(result, datetime(2025, 2, 28, 18, 0, tzinfo=UTC))

    def test_monthly_does_not_drift(self) -> None:
        """Test that skipping past a short month returns to the original day."""
        alert_time = datetime(2025, 1, 31, 18, 0, tzinfo=UTC)
        now = datetime(2025, 3, 1, tzinfo=UTC)

        result = calculate_next_alert_time(alert_time, RecurringPattern.MONTHLY, now)

        self.assertEqual(result, datetime(2025, 3, 31, 18, 0, tzinfo=UTC))

    def test_accepts_string_pattern(self) -> None:
        """Test that the stored string value is accepted."""
        alert_time = datetime(2025, 1, 6, tzinfo=UTC)

        result = calculate_next_alert_time(alert_time, "daily", alert_time)

        self.assertEqual(result, alert_time + timedelta(days=1))


class TestCreateReminder(unittest.TestCase):
    """Tests for create_reminder operation."""

    def test_creates_with_defaults(self) -> None:
        """Test creating a one-time reminder."""
        mock_session = MagicMock()
        user_id = uuid4()
        show_id = uuid4()
        alert_time = datetime.now(UTC) + timedelta(hours=1)

        reminder = create_reminder(mock_session, user_id, show_id, alert_time)

        self.assertEqual(reminder.user_id, user_id)
        self.assertEqual(reminder.show_id, show_id)
        self.assertEqual(reminder.alert_time, alert_time)
        self.assertEqual(reminder.alert_type, "both")
        self.assertEqual(reminder.priority, "medium")
        self.assertEqual(reminder.sent_count, 0)
        self.assertFalse(reminder.is_recurring)
        mock_session.add.assert_called_once_with(reminder)
        mock_session.flush.assert_called_once()

    def test_creates_recurring_with_custom_message(self) -> None:
        """Test that recurrence, message and extra fields are stored."""
        mock_session = MagicMock()

        reminder = create_reminder(
            mock_session,
            uuid4(),
            uuid4(),
            datetime.now(UTC),
            alert_type=AlertType.IN_APP,
            is_recurring=True,
            recurring_pattern=RecurringPattern.DAILY,
            message="Episode day",
            episode_number=5,
            tags=["simulcast"],
        )

        self.assertTrue(reminder.is_recurring)
        self.assertEqual(reminder.recurring_pattern, "daily")
        self.assertEqual(reminder.alert_type, "inApp")
        self.assertEqual(reminder.message, "Episode day")
        self.assertEqual(reminder.episode_number, 5)
        self.assertEqual(reminder.tags, ["simulcast"])

    def test_rejects_unknown_fields(self) -> None:
        """Test that unknown fields raise ValueError."""
        with self.assertRaises(ValueError):
            create_reminder(MagicMock(), uuid4(), uuid4(), None, sent_count=3)


class TestUpdateReminder(unittest.TestCase):
    """Tests for update_reminder operation."""

    def test_updates_given_fields_only(self) -> None:
        """Test that None values leave fields untouched."""
        mock_session = MagicMock()
        reminder = _make_reminder(message="Old")

        update_reminder(mock_session, reminder, message="New", priority=None)

        self.assertEqual(reminder.message, "New")
        self.assertEqual(reminder.priority, "medium")
        mock_session.flush.assert_called_once()

    def test_rejects_protected_fields(self) -> None:
        """Test that delivery counters cannot be set."""
        with self.assertRaises(ValueError):
            update_reminder(MagicMock(), _make_reminder(), sent_count=0)

    def test_rejects_max_sends_below_sent_count(self) -> None:
        """Test that the send limit cannot drop under deliveries already made."""
        mock_session = MagicMock()
        reminder = _make_reminder(is_recurring=True, sent_count=4)

        with self.assertRaises(ValueError):
            update_reminder(mock_session, reminder, max_sends=3)

        self.assertEqual(reminder.max_sends, 10)
        mock_session.flush.assert_not_called()

    def test_max_sends_equal_to_sent_count(self) -> None:
        """Test that the limit may be lowered to exactly the deliveries made."""
        reminder = _make_reminder(is_recurring=True, sent_count=4)

        update_reminder(MagicMock(), reminder, max_sends=4)

        self.assertEqual(reminder.max_sends, 4)
        self.assertEqual(reminder.sends_remaining, 0)

    def test_rejects_reactivating_exhausted_reminder(self) -> None:
        """Test that a reminder with no sends left cannot be switched back on."""
        reminder = _make_reminder(is_active=False, sent_count=10, max_sends=10)

        with self.assertRaises(ValueError):
            update_reminder(MagicMock(), reminder, is_active=True)

        self.assertFalse(reminder.is_active)

    def test_reactivates_with_raised_limit(self) -> None:
        """Test that raising the limit lets an exhausted reminder fire again."""
        reminder = _make_reminder(is_active=False, sent_count=10, max_sends=10)

        update_reminder(MagicMock(), reminder, is_active=True, max_sends=12)

        self.assertTrue(reminder.is_active)
        self.assertEqual(reminder.sends_remaining, 2)


class TestDeactivateReminder(unittest.TestCase):
    """Tests for deactivate_reminder operation."""

    def test_deactivates_existing(self) -> None:
        """Test that a found reminder is deactivated."""
        mock_session = MagicMock()
        reminder = _make_reminder()
        mock_session.query.return_value.filter.return_value.first.return_value = reminder

        result = deactivate_reminder(mock_session, reminder.id)

        self.assertIs(result, reminder)
        self.assertFalse(reminder.is_active)

    def test_returns_none_when_missing(self) -> None:
        """Test that a missing reminder returns None."""
        mock_session = MagicMock()
        mock_session.query.return_value.filter.return_value.first.return_value = None

        self.assertIsNone(deactivate_reminder(mock_session, uuid4()))


class TestMarkReminderSent(unittest.TestCase):
    """Tests for mark_reminder_sent operation."""

    def test_one_time_reminder_deactivates(self) -> None:
        """Test that a non-recurring reminder is deactivated after sending."""
        now = datetime(2025, 1, 6, 12, 5, tzinfo=UTC)
        reminder = _make_reminder()

        mark_reminder_sent(MagicMock(), reminder, now)

        self.assertEqual(reminder.sent_count, 1)
        self.assertEqual(reminder.last_sent, now)
        self.assertFalse(reminder.is_active)

    def test_recurring_reminder_advances(self) -> None:
        """Test that a recurring reminder moves to its next occurrence."""
        now = datetime(2025, 1, 6, 12, 5, tzinfo=UTC)
        reminder = _make_reminder(is_recurring=True)

        mark_reminder_sent(MagicMock(), reminder, now)

        self.assertTrue(reminder.is_active)
        self.assertEqual(reminder.alert_time, datetime(2025, 1, 13, 12, 0, tzinfo=UTC))

    def test_exhausted_reminder_deactivates(self) -> None:
        """Test that reaching max_sends deactivates a recurring reminder."""
        reminder = _make_reminder(is_recurring=True, sent_count=9, max_sends=10)

        mark_reminder_sent(MagicMock(), reminder, datetime(2025, 1, 6, 13, 0, tzinfo=UTC))

        self.assertEqual(reminder.sent_count, 10)
        self.assertFalse(reminder.is_active)

    def test_sent_count_never_exceeds_max(self) -> None:
        """Test that sent_count is capped at max_sends."""
        reminder = _make_reminder(sent_count=3, max_sends=3)

        mark_reminder_sent(MagicMock(), reminder)

        self.assertEqual(reminder.sent_count, 3)


if __name__ == "__main__":
    unittest.main()
