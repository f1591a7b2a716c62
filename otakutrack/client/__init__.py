"""Python client for the OtakuTrack API."""

from otakutrack.client.base import (
    AuthenticationExpiredError,
    OtakuTrackClient,
    OtakuTrackClientError,
)
from otakutrack.client.session import AuthSession, TokenStore

__all__ = [
    "AuthSession",
    "AuthenticationExpiredError",
    "OtakuTrackClient",
    "OtakuTrackClientError",
    "TokenStore",
]
