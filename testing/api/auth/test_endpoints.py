"""Tests for auth API endpoints."""

import unittest
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from otakutrack.api.app import app
from otakutrack.api.dependencies import get_current_user
from testing.api.fixtures import make_user, mock_session_context


class TestRegisterEndpoint(unittest.TestCase):
    """Tests for POST /api/auth/register."""

    def setUp(self) -> None:
        """Set up test client."""
        self.client = TestClient(app)

    @patch("otakutrack.api.auth.endpoints.create_access_token", return_value="token-123")
    @patch("otakutrack.api.auth.endpoints.hash_password", return_value="hashed")
    @patch("otakutrack.api.auth.endpoints.create_user")
    @patch("otakutrack.api.auth.endpoints.get_session")
    def test_register_success(
        self,
        mock_get_session: MagicMock,
        mock_create_user: MagicMock,
        mock_hash: MagicMock,
        mock_token: MagicMock,
    ) -> None:
        """Test a new account gets a token and the user back."""
        mock_session = mock_session_context(mock_get_session)
        user = make_user()
        mock_create_user.return_value = user

        response = self.client.post(
            "/api/auth/register",
            json={"name": "Aki", "email": "aki@example.com", "password": "secret123"},
        )

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "User registered successfully")
        self.assertEqual(body["data"]["token"], "token-123")
        self.assertEqual(body["data"]["user"]["email"], "aki@example.com")
        mock_hash.assert_called_once_with("secret123")
        mock_create_user.assert_called_once_with(
            mock_session, name="Aki", email="aki@example.com", password_hash="hashed"
        )
        mock_token.assert_called_once_with(user.id)

    @patch("otakutrack.api.auth.endpoints.hash_password", return_value="hashed")
    @patch("otakutrack.api.auth.endpoints.create_user")
    @patch("otakutrack.api.auth.endpoints.get_session")
    def test_register_duplicate_email(
        self,
        mock_get_session: MagicMock,
        mock_create_user: MagicMock,
        _mock_hash: MagicMock,
    ) -> None:
        """Test a taken email returns 400 with the error message."""
        mock_session_context(mock_get_session)
        mock_create_user.side_effect = ValueError("User already exists")

        response = self.client.post(
            "/api/auth/register",
            json={"name": "Aki", "email": "aki@example.com", "password": "secret123"},
        )

        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["message"], "User already exists")

    def test_register_short_password(self) -> None:
        """Test a short password fails validation with field errors."""
        response = self.client.post(
            "/api/auth/register",
            json={"name": "Aki", "email": "aki@example.com", "password": "123"},
        )

        self.assertEqual(response.status_code, 422)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["message"], "Validation failed")
        self.assertTrue(any(e["field"].endswith("password") for e in body["errors"]))

    def test_register_invalid_email(self) -> None:
        """Test a malformed email fails validation."""
        response = self.client.post(
            "/api/auth/register",
            json={"name": "Aki", "email": "not-an-email", "password": "secret123"},
        )

        self.assertEqual(response.status_code, 422)


class TestLoginEndpoint(unittest.TestCase):
    """Tests for POST /api/auth/login."""

    def setUp(self) -> None:
        """Set up test client."""
        self.client = TestClient(app)

    @patch("otakutrack.api.auth.endpoints.create_access_token", return_value="token-123")
    @patch("otakutrack.api.auth.endpoints.verify_password", return_value=True)
    @patch("otakutrack.api.auth.endpoints.get_user_by_email")
    @patch("otakutrack.api.auth.endpoints.get_session")
    def test_login_success(
        self,
        mock_get_session: MagicMock,
        mock_get_user: MagicMock,
        _mock_verify: MagicMock,
        _mock_token: MagicMock,
    ) -> None:
        """Test valid credentials return a token."""
        mock_session_context(mock_get_session)
        mock_get_user.return_value = make_user()

        response = self.client.post(
            "/api/auth/login",
            json={"email": "aki@example.com", "password": "secret123"},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["message"], "Login successful")
        self.assertEqual(body["data"]["token"], "token-123")

    @patch("otakutrack.api.auth.endpoints.verify_password", return_value=False)
    @patch("otakutrack.api.auth.endpoints.get_user_by_email")
    @patch("otakutrack.api.auth.endpoints.get_session")
    def test_login_wrong_password(
        self,
        mock_get_session: MagicMock,
        mock_get_user: MagicMock,
        _mock_verify: MagicMock,
    ) -> None:
        """Test a wrong password returns 401."""
        mock_session_context(mock_get_session)
        mock_get_user.return_value = make_user()

        response = self.client.post(
            "/api/auth/login",
            json={"email": "aki@example.com", "password": "wrong"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid email or password")

    @patch("otakutrack.api.auth.endpoints.get_user_by_email", return_value=None)
    @patch("otakutrack.api.auth.endpoints.get_session")
    def test_login_unknown_email(
        self,
        mock_get_session: MagicMock,
        _mock_get_user: MagicMock,
    ) -> None:
        """Test an unknown email gets the same 401 as a wrong password."""
        mock_session_context(mock_get_session)

        response = self.client.post(
            "/api/auth/login",
            json={"email": "ghost@example.com", "password": "secret123"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid email or password")

    @patch("otakutrack.api.auth.endpoints.verify_password", return_value=True)
    @patch("otakutrack.api.auth.endpoints.get_user_by_email")
    @patch("otakutrack.api.auth.endpoints.get_session")
    def test_login_deactivated(
        self,
        mock_get_session: MagicMock,
        mock_get_user: MagicMock,
        _mock_verify: MagicMock,
    ) -> None:
        """Test a banned user cannot log in."""
        mock_session_context(mock_get_session)
        mock_get_user.return_value = make_user(is_active=False)

        response = self.client.post(
            "/api/auth/login",
            json={"email": "aki@example.com", "password": "secret123"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Account has been deactivated")


class TestProfileEndpoints(unittest.TestCase):
    """Tests for the profile and password endpoints."""

    def setUp(self) -> None:
        """Set up test client with an authenticated user."""
        self.client = TestClient(app)
        self.user = make_user()
        app.dependency_overrides[get_current_user] = lambda: self.user

    def tearDown(self) -> None:
        """Clear dependency overrides."""
        app.dependency_overrides.clear()

    def test_get_profile(self) -> None:
        """Test the caller's own account is returned."""
        response = self.client.get("/api/auth/profile")

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["id"], str(self.user.id))
        self.assertEqual(data["role"], "user")

    def test_get_profile_requires_token(self) -> None:
        """Test the profile is unavailable without a bearer token."""
        app.dependency_overrides.clear()

        response = self.client.get("/api/auth/profile")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Not authorized, no token")

    @patch("otakutrack.api.auth.endpoints.update_user_profile")
    @patch("otakutrack.api.auth.endpoints.get_session")
    def test_update_profile_only_sends_given_fields(
        self,
        mock_get_session: MagicMock,
        mock_update: MagicMock,
    ) -> None:
        """Test only the fields in the request body are updated."""
        mock_session = mock_session_context(mock_get_session)
        updated = make_user(name="Aki H.", user_id=self.user.id)
        mock_update.return_value = updated

        response = self.client.put("/api/auth/profile", json={"name": "Aki H."})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["name"], "Aki H.")
        mock_update.assert_called_once_with(mock_session, self.user.id, name="Aki H.")

    @patch("otakutrack.api.auth.endpoints.update_password_hash")
    @patch("otakutrack.api.auth.endpoints.hash_password", return_value="new-hash")
    @patch("otakutrack.api.auth.endpoints.verify_password", return_value=True)
    @patch("otakutrack.api.auth.endpoints.get_user_by_id")
    @patch("otakutrack.api.auth.endpoints.get_session")
    def test_change_password_success(
        self,
        mock_get_session: MagicMock,
        mock_get_user: MagicMock,
        _mock_verify: MagicMock,
        _mock_hash: MagicMock,
        mock_update_hash: MagicMock,
    ) -> None:
        """Test the password hash is replaced after the current one checks out."""
        mock_session = mock_session_context(mock_get_session)
        mock_get_user.return_value = self.user

        response = self.client.put(
            "/api/auth/change-password",
            json={"current_password": "secret123", "new_password": "newsecret"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Password updated successfully")
        mock_update_hash.assert_called_once_with(mock_session, self.user.id, "new-hash")

    @patch("otakutrack.api.auth.endpoints.update_password_hash")
    @patch("otakutrack.api.auth.endpoints.verify_password", return_value=False)
    @patch("otakutrack.api.auth.endpoints.get_user_by_id")
    @patch("otakutrack.api.auth.endpoints.get_session")
    def test_change_password_wrong_current(
        self,
        mock_get_session: MagicMock,
        mock_get_user: MagicMock,
        _mock_verify: MagicMock,
        mock_update_hash: MagicMock,
    ) -> None:
        """Test a wrong current password returns 400 and changes nothing."""
        mock_session_context(mock_get_session)
        mock_get_user.return_value = self.user

        response = self.client.put(
            "/api/auth/change-password",
            json={"current_password": "wrong", "new_password": "newsecret"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Current password is incorrect")
        mock_update_hash.assert_not_called()


if __name__ == "__main__":
    unittest.main()
