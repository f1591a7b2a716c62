"""Tests for notification API endpoints."""

import unittest
from unittest.mock import MagicMock, patch
from uuid import uuid4

from fastapi.testclient import TestClient

from otakutrack.api.app import app
from otakutrack.api.dependencies import get_current_user
from otakutrack.database.notifications import Notification
from testing.api.fixtures import CREATED_AT, make_user, mock_session_context


class TestNotificationEndpoints(unittest.TestCase):
    """Tests for the notification endpoints."""

    def setUp(self) -> None:
        """Set up test client with an authenticated user."""
        self.client = TestClient(app)
        self.user = make_user()
        app.dependency_overrides[get_current_user] = lambda: self.user

    def tearDown(self) -> None:
        """Clear dependency overrides."""
        app.dependency_overrides.clear()

    def _notification(self, is_read: bool = False) -> Notification:
        return Notification(
            id=uuid4(),
            user_id=self.user.id,
            reminder_id=uuid4(),
            title="Frieren episode 12",
            body="Episode 12 is out.",
            is_read=is_read,
            created_at=CREATED_AT,
        )

    @patch("otakutrack.api.notifications.endpoints.list_notifications")
    @patch("otakutrack.api.notifications.endpoints.get_session")
    def test_list_unread(self, mock_get_session: MagicMock, mock_list: MagicMock) -> None:
        """Test the unread filter is passed through."""
        mock_session = mock_session_context(mock_get_session)
        mock_list.return_value = [self._notification()]

        response = self.client.get("/api/notifications", params={"unread_only": "true"})

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data[0]["title"], "Frieren episode 12")
        self.assertFalse(data[0]["is_read"])
        mock_list.assert_called_once_with(mock_session, self.user.id, unread_only=True, limit=50)

    @patch("otakutrack.api.notifications.endpoints.mark_notification_read")
    @patch("otakutrack.api.notifications.endpoints.get_session")
    def test_mark_read(self, mock_get_session: MagicMock, mock_mark: MagicMock) -> None:
        """Test marking one of the caller's notifications as read."""
        mock_session = mock_session_context(mock_get_session)
        notification = self._notification(is_read=True)
        mock_mark.return_value = notification

        response = self.client.post(f"/api/notifications/{notification.id}/read")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["data"]["is_read"])
        mock_mark.assert_called_once_with(mock_session, notification.id, self.user.id)

    @patch("otakutrack.api.notifications.endpoints.mark_notification_read", return_value=None)
    @patch("otakutrack.api.notifications.endpoints.get_session")
    def test_mark_read_not_found(self, mock_get_session: MagicMock, _mock_mark: MagicMock) -> None:
        """Test another user's or a missing notification returns 404."""
        mock_session_context(mock_get_session)

        response = self.client.post(f"/api/notifications/{uuid4()}/read")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Notification not found")

    def test_requires_token(self) -> None:
        """Test notifications need authentication."""
        app.dependency_overrides.clear()

        response = self.client.get("/api/notifications")

        self.assertEqual(response.status_code, 401)


if __name__ == "__main__":
    unittest.main()
