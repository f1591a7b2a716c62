"""Shared test fixtures for API endpoint tests.

Models are built as transient ORM objects with every column set, since
column defaults are only applied on insert.
"""

from datetime import UTC, datetime
from typing import Any
from unittest.mock import MagicMock
from uuid import UUID, uuid4

from otakutrack.database.shows import Show
from otakutrack.database.users import User
from otakutrack.enums import AgeRating, ShowStatus, ShowType, UserRole

CREATED_AT = datetime(2025, 1, 10, 12, 0, tzinfo=UTC)


def mock_session_context(mock_get_session: MagicMock) -> MagicMock:
    """Wire a patched get_session to yield a fresh MagicMock session.

    :param mock_get_session: The patched get_session.
    :returns: The session the endpoint will receive.
    """
    mock_session = MagicMock()
    mock_get_session.return_value.__enter__ = MagicMock(return_value=mock_session)
    mock_get_session.return_value.__exit__ = MagicMock(return_value=False)
    return mock_session


def make_user(
    name: str = "Aki",
    email: str = "aki@example.com",
    role: str = UserRole.USER,
    is_active: bool = True,
    user_id: UUID | None = None,
) -> User:
    """Build a user with every column set."""
    return User(
        id=user_id or uuid4(),
        name=name,
        email=email,
        password_hash="hashed",
        role=role,
        is_active=is_active,
        avatar=None,
        bio=None,
        created_at=CREATED_AT,
    )


def make_admin(**kwargs: Any) -> User:
    """Build a site admin."""
    kwargs.setdefault("name", "Admin")
    kwargs.setdefault("email", "admin@example.com")
    return make_user(role=UserRole.ADMIN, **kwargs)


def make_show(
    title: str = "Frieren",
    genres: list[str] | None = None,
    rating_average: float = 0.0,
    show_id: UUID | None = None,
) -> Show:
    """Build a show with every column set and no episodes."""
    return Show(
        id=show_id or uuid4(),
        title=title,
        original_title=None,
        description="An elf mage outlives her party.",
        type=ShowType.TV,
        status=ShowStatus.ONGOING,
        genres=genres if genres is not None else ["Fantasy", "Adventure"],
        tags=[],
        season=None,
        year=2023,
        rating_average=rating_average,
        rating_count=0,
        poster=None,
        banner=None,
        trailer=None,
        studio="Madhouse",
        source=None,
        age_rating=AgeRating.PG_13,
        episode_duration=24,
        is_popular=False,
        is_recommended=False,
        is_active=True,
        episodes=[],
        streaming_links=[],
        created_at=CREATED_AT,
    )
