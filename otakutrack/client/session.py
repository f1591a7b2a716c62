"""Token persistence and the signed-in user session."""

import json
import logging
from pathlib import Path
from typing import Any

from otakutrack.client.base import AuthenticationExpiredError, OtakuTrackClient
from otakutrack.enums import UserRole
from otakutrack.paths import token_file_path

logger = logging.getLogger(__name__)


class TokenStore:
    """Keeps the access token and user in a JSON file between runs."""

    def __init__(self, path: Path | str | None = None) -> None:
        """Initialise the store.

        :param path: JSON file location. Defaults to OTAKU_TOKEN_FILE or
            ``~/.otakutrack/auth.json``.
        """
        self.path = token_file_path(path)
        self._data: dict[str, Any] = self._read()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning(f"Ignoring unreadable token file: {self.path}")
            return {}
        return data if isinstance(data, dict) else {}

    @property
    def token(self) -> str | None:
        """The stored access token."""
        return self._data.get("token")

    @property
    def user(self) -> dict[str, Any] | None:
        """The stored user, as returned by the API."""
        return self._data.get("user")

    def save(self, token: str, user: dict[str, Any]) -> None:
        """Persist a token and the user it belongs to.

        :param token: Bearer access token.
        :param user: User object from the login or register response.
        """
        self._data = {"token": token, "user": user}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data), encoding="utf-8")
        logger.debug(f"Saved token: path={self.path}")

    def update_user(self, user: dict[str, Any]) -> None:
        """Replace the stored user, keeping the token."""
        if self.token is not None:
            self.save(self.token, user)

    def clear(self) -> None:
        """Forget the token and user."""
        self._data = {}
        self.path.unlink(missing_ok=True)
        logger.debug(f"Cleared token: path={self.path}")


class AuthSession:
    """The signed-in user, backed by a TokenStore.

    Register and login save the returned token; a 401 on any request clears
    it, after which ``is_authenticated`` is False.
    """

    def __init__(self, client: OtakuTrackClient, store: TokenStore) -> None:
        """Initialise the session.

        :param client: API client. Its token store is set to ``store``.
        :param store: Where the token is kept.
        """
        self.client = client
        self.store = store
        self.client.token_store = store

    @property
    def current_user(self) -> dict[str, Any] | None:
        """The signed-in user, or None."""
        return self.store.user if self.store.token else None

    @property
    def is_authenticated(self) -> bool:
        """Whether a token is stored."""
        return self.store.token is not None

    @property
    def is_admin(self) -> bool:
        """Whether the signed-in user is a site admin."""
        user = self.current_user
        return user is not None and user.get("role") == UserRole.ADMIN

    def register(self, name: str, email: str, password: str) -> dict[str, Any]:
        """Create an account and sign in.

        :returns: The new user.
        """
        data = self.client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        self.store.save(data["token"], data["user"])
        return data["user"]

    def login(self, email: str, password: str) -> dict[str, Any]:
        """Sign in.

        :returns: The signed-in user.
        :raises AuthenticationExpiredError: On wrong credentials.
        """
        data = self.client.post("/api/auth/login", json={"email": email, "password": password})
        self.store.save(data["token"], data["user"])
        logger.info(f"Logged in: user_id={data['user']['id']}")
        return data["user"]

    def logout(self) -> None:
        """Sign out by forgetting the token."""
        self.store.clear()

    def restore(self) -> dict[str, Any] | None:
        """Re-validate a stored token against the server.

        :returns: The refreshed user, or None if no token is stored. An expired
            token is cleared by the client and None is returned.
        """
        if not self.is_authenticated:
            return None
        try:
            user = self.client.get("/api/auth/profile")
        except AuthenticationExpiredError:
            return None
        self.store.update_user(user)
        return user
