"""Tests for notification database operations."""

import unittest
from unittest.mock import MagicMock
from uuid import uuid4

from otakutrack.database.notifications.models import Notification
from otakutrack.database.notifications.operations import (
    create_notification,
    mark_notification_read,
)


class TestCreateNotification(unittest.TestCase):
    """Tests for create_notification operation."""

    def test_creates_unread(self) -> None:
        """Test that new notifications are unread."""
        mock_session = MagicMock()
        reminder_id = uuid4()

        notification = create_notification(
            mock_session,
            uuid4(),
            "Frieren: Episode 5",
            "New episode available!",
            reminder_id=reminder_id,
        )

        self.assertFalse(notification.is_read)
        self.assertEqual(notification.reminder_id, reminder_id)
        mock_session.add.assert_called_once_with(notification)


class TestMarkNotificationRead(unittest.TestCase):
    """Tests for mark_notification_read operation."""

    def test_marks_read(self) -> None:
        """Test that the notification is flagged read."""
        notification = Notification(id=uuid4(), user_id=uuid4(), title="T", body="B", is_read=False)
        mock_session = MagicMock()
        mock_session.query.return_value.filter.return_value.first.return_value = notification

        result = mark_notification_read(mock_session, notification.id, notification.user_id)

        self.assertIs(result, notification)
        self.assertTrue(notification.is_read)

    def test_returns_none_when_missing(self) -> None:
        """Test that another user's or unknown notification is not found."""
        mock_session = MagicMock()
        mock_session.query.return_value.filter.return_value.first.return_value = None

        self.assertIsNone(mark_notification_read(mock_session, uuid4(), uuid4()))


if __name__ == "__main__":
    unittest.main()
