"""Tests for the SMTP email sender."""

import unittest
from unittest.mock import MagicMock, patch

from otakutrack.messaging.email import EmailSender


class TestEmailSender(unittest.TestCase):
    """Tests for EmailSender."""

    def test_not_configured_without_credentials(self) -> None:
        """Test that missing credentials disable sending."""
        sender = EmailSender("smtp.example.com", 587, user=None, password=None)

        self.assertFalse(sender.is_configured)
        self.assertFalse(sender.send("to@example.com", "Hi", "Body"))

    def test_default_from_address_uses_login(self) -> None:
        """Test that the From header falls back to the login user."""
        sender = EmailSender("smtp.example.com", 587, "bot@example.com", "secret")

        self.assertEqual(sender.from_address, "OtakuTrack <bot@example.com>")

    def test_build_message_escapes_html(self) -> None:
        """Test that the HTML part escapes the body."""
        sender = EmailSender("smtp.example.com", 587, "bot@example.com", "secret")

        msg = sender.build_message("to@example.com", "Subject", "<b>Ep 3</b>")

        self.assertEqual(msg["To"], "to@example.com")
        html_part = msg.get_payload()[1].get_payload()
        self.assertIn("&lt;b&gt;Ep 3&lt;/b&gt;", html_part)

    @patch("otakutrack.messaging.email.smtplib.SMTP")
    def test_send_uses_starttls_and_login(self, mock_smtp: MagicMock) -> None:
        """Test that sending logs in over STARTTLS."""
        server = mock_smtp.return_value.__enter__.return_value
        sender = EmailSender("smtp.example.com", 587, "bot@example.com", "secret")

        result = sender.send("to@example.com", "Reminder", "Episode 3 is out")

        self.assertTrue(result)
        mock_smtp.assert_called_once_with("smtp.example.com", 587, timeout=10)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("bot@example.com", "secret")
        server.sendmail.assert_called_once()


if __name__ == "__main__":
    unittest.main()
