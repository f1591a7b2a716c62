"""HTTP client for the OtakuTrack API."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

import requests
from requests.exceptions import RequestException

from otakutrack.client.resources import (
    AdminResource,
    AnalyticsResource,
    AuthResource,
    ClubsResource,
    RemindersResource,
    ReviewsResource,
    ShowsResource,
    WatchlistResource,
)

if TYPE_CHECKING:
    from otakutrack.client.session import TokenStore

logger = logging.getLogger(__name__)

# Default timeout for API requests in seconds
DEFAULT_TIMEOUT = 10

# HTTP status code threshold for errors
HTTP_ERROR_THRESHOLD = 400

HTTP_UNAUTHORIZED = 401


class OtakuTrackClientError(Exception):
    """Raised when an API request fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialise the error.

        :param message: Error message.
        :param status_code: HTTP status code if available.
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationExpiredError(OtakuTrackClientError):
    """Raised on a 401 after the stored token has been cleared."""


class OtakuTrackClient:
    """HTTP client for the OtakuTrack API.

    Attaches the stored bearer token to every request and unwraps the
    ``{success, data, message}`` envelope. Any 401 clears the stored token so
    the caller is logged out.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token_store: TokenStore | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialise the API client.

        :param base_url: Server root. Defaults to OTAKU_API_BASE_URL or localhost.
        :param token_store: Where the access token is kept between runs.
        :param timeout: Request timeout in seconds.
        """
        self.base_url = (
            base_url or os.environ.get("OTAKU_API_BASE_URL", "http://localhost:8000")
        ).rstrip("/")
        self.token_store = token_store
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

        self.auth = AuthResource(self)
        self.shows = ShowsResource(self)
        self.watchlist = WatchlistResource(self)
        self.reviews = ReviewsResource(self)
        self.clubs = ClubsResource(self)
        self.reminders = RemindersResource(self)
        self.analytics = AnalyticsResource(self)
        self.admin = AdminResource(self)

        logger.debug(f"OtakuTrackClient initialised: base_url={self.base_url}")

    @property
    def token(self) -> str | None:
        """The current access token, if any."""
        if self.token_store is None:
            return None
        return self.token_store.token

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make a GET request and return the envelope's data.

        :param path: API endpoint path, e.g. ``/api/shows``.
        :param params: Query parameters.
        :returns: The ``data`` member of the response.
        :raises OtakuTrackClientError: If the request fails.
        """
        return self._request("GET", path, params=params)["data"]

    def get_page(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Make a GET request for a paginated list.

        :param path: API endpoint path.
        :param params: Query parameters.
        :returns: The whole envelope, including ``pagination``.
        :raises OtakuTrackClientError: If the request fails.
        """
        return self._request("GET", path, params=params)

    def post(self, path: str, json: dict[str, Any] | None = None) -> Any:
        """Make a POST request and return the envelope's data."""
        return self._request("POST", path, json=json).get("data")

    def put(self, path: str, json: dict[str, Any] | None = None) -> Any:
        """Make a PUT request and return the envelope's data."""
        return self._request("PUT", path, json=json).get("data")

    def delete(self, path: str) -> Any:
        """Make a DELETE request and return the envelope's data."""
        return self._request("DELETE", path).get("data")

    def get_text(self, path: str, params: dict[str, Any] | None = None) -> str:
        """Make a GET request for a non-JSON body such as a CSV export.

        :param path: API endpoint path.
        :param params: Query parameters.
        :returns: The raw response text.
        :raises OtakuTrackClientError: If the request fails.
        """
        return self._send("GET", path, params=params).text

    def health(self) -> dict[str, Any]:
        """Check the server's health endpoint, which is not enveloped."""
        return dict(self._send("GET", "/health").json())

    def _headers(self) -> dict[str, str]:
        token = self.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> requests.Response:
        """Send a request and raise on error statuses.

        :param method: HTTP method.
        :param path: API endpoint path.
        :param params: Query parameters.
        :param json: JSON request body.
        :returns: The successful response.
        :raises AuthenticationExpiredError: On 401, after clearing the stored token.
        :raises OtakuTrackClientError: On other error statuses or transport failure.
        """
        url = f"{self.base_url}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            logger.debug(f"API request: {method} {path} params={params}")
            response = self._session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except RequestException as e:
            logger.exception(f"API request error: {method} {path}")
            raise OtakuTrackClientError(f"Request failed: {e}") from e

        if response.status_code == HTTP_UNAUTHORIZED:
            message = self._extract_error_detail(response)
            logger.warning(f"API request unauthorised: {method} {path}: {message}")
            if self.token_store is not None:
                self.token_store.clear()
            raise AuthenticationExpiredError(message, status_code=response.status_code)

        if response.status_code >= HTTP_ERROR_THRESHOLD:
            message = self._extract_error_detail(response)
            logger.warning(
                f"API request failed: {method} {path} -> {response.status_code}: {message}"
            )
            raise OtakuTrackClientError(message, status_code=response.status_code)

        return response

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and decode the JSON envelope.

        :param method: HTTP method.
        :param path: API endpoint path.
        :param params: Query parameters.
        :param json: JSON request body.
        :returns: The decoded envelope.
        :raises OtakuTrackClientError: If the request fails or the body is not JSON.
        """
        response = self._send(method, path, params=params, json=json)
        try:
            return dict(response.json())
        except ValueError as e:
            raise OtakuTrackClientError(
                f"Invalid JSON response: {method} {path}",
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _extract_error_detail(response: requests.Response) -> str:
        """Extract the error message from an error envelope.

        :param response: HTTP response.
        :returns: Error message string.
        """
        try:
            data = response.json()
            if isinstance(data, dict):
                return str(data.get("message") or data.get("detail") or data)
            return str(data)
        except ValueError:
            return response.text or f"HTTP {response.status_code}"

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def __enter__(self) -> OtakuTrackClient:
        """Enter context manager."""
        return self

    def __exit__(self, *args: object) -> None:
        """Exit context manager."""
        self.close()
