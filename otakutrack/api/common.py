"""Helpers shared by the API routers."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from otakutrack.api.models import ApiResponse, Pagination, ShowSummary, UserSummary
from otakutrack.database.base import Page
from otakutrack.database.shows import Show
from otakutrack.database.users import User

logger = logging.getLogger(__name__)


def paginated_response[T, R](
    page: Page[T],
    convert: Callable[[T], R],
    message: str | None = None,
) -> ApiResponse[list[R]]:
    """Wrap a page of results in the response envelope.

    :param page: The page of database rows.
    :param convert: Converts a row to its response model.
    :param message: Optional status message.
    :returns: The envelope with data and pagination set.
    """
    return ApiResponse[list[Any]](
        data=[convert(item) for item in page.items],
        message=message,
        pagination=Pagination(page=page.page, limit=page.limit, total=page.total, pages=page.pages),
    )


def not_found(resource: str) -> HTTPException:
    """Build a 404 for a missing resource."""
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource} not found")


def forbidden(detail: str) -> HTTPException:
    """Build a 403 for an ownership or membership violation."""
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def bad_request(error: ValueError) -> HTTPException:
    """Build a 400 from a rule violation raised by a database operation."""
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


@contextmanager
def tracking(session: Session, action: str) -> Iterator[None]:
    """Run analytics tracking without letting it fail the request.

    Tracking runs in a savepoint so a failure only rolls back the tracking
    writes. The error is logged and the request carries on.

    :param session: Database session shared with the request.
    :param action: Description used in the log line.
    """
    try:
        with session.begin_nested():
            yield
    except Exception as e:
        logger.exception(f"Analytics tracking failed: action={action}, error={e}")


def user_summary(user: User) -> UserSummary:
    """Convert a user to its public summary."""
    return UserSummary(id=user.id, name=user.name, avatar=user.avatar)


def show_summary(show: Show) -> ShowSummary:
    """Convert a show to its short summary."""
    return ShowSummary(
        id=show.id,
        title=show.title,
        poster=show.poster,
        type=show.type,
        status=show.status,
        episode_count=show.episode_count,
        episode_duration=show.episode_duration,
        rating_average=show.rating_average,
    )
