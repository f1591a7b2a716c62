"""Database operations for the show catalogue."""

from __future__ import annotations

import logging
import uuid as uuid_module
from collections import Counter
from collections.abc import Iterable
from enum import StrEnum
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session

from otakutrack.database.base import DEFAULT_PAGE_SIZE, Page, paginate
from otakutrack.database.shows.models import Episode, Show, StreamingLink
from otakutrack.enums import AiringSeason, Genre, ShowStatus, ShowType

logger = logging.getLogger(__name__)

# Minimum rating average for a show to count as trending
TRENDING_MIN_RATING = 7.0

# Scalar columns that may be set on create/update
SHOW_FIELDS = frozenset(
    {
        "title",
        "original_title",
        "description",
        "type",
        "status",
        "genres",
        "tags",
        "season",
        "year",
        "poster",
        "banner",
        "trailer",
        "studio",
        "source",
        "age_rating",
        "episode_duration",
        "is_popular",
        "is_recommended",
    }
)


class ShowSort(StrEnum):
    """Sort orders supported by list_shows."""

    RATING = "rating"
    TITLE = "title"
    YEAR = "year"
    NEWEST = "newest"


def _by_rating(query: Any) -> Any:
    return query.order_by(Show.rating_average.desc(), Show.rating_count.desc())


def average_rating(ratings: Iterable[int | float]) -> float:
    """Mean of a set of ratings rounded to one decimal, 0 when empty.

    :param ratings: Individual review ratings.
    :returns: The rounded average.
    """
    values = list(ratings)
    if not values:
        return 0.0
    return round(sum(values) / len(values), 1)


def apply_rating(show: Show, ratings: Iterable[int | float]) -> Show:
    """Set a show's rating columns from its review ratings.

    :param show: The show to update.
    :param ratings: All current review ratings for the show.
    :returns: The same show.
    """
    values = list(ratings)
    show.rating_average = average_rating(values)
    show.rating_count = len(values)
    return show


def _validate_fields(fields: dict[str, Any]) -> None:
    unknown = set(fields) - SHOW_FIELDS
    if unknown:
        raise ValueError(f"Unknown show fields: {sorted(unknown)}")
    for genre in fields.get("genres") or []:
        if genre not in {g.value for g in Genre}:
            raise ValueError(f"Invalid genre: {genre}")


def _build_episodes(episodes: Iterable[dict[str, Any]]) -> list[Episode]:
    return [Episode(**episode) for episode in episodes]


def _build_links(links: Iterable[dict[str, Any]]) -> list[StreamingLink]:
    return [StreamingLink(**link) for link in links]


def create_show(
    session: Session,
    episodes: Iterable[dict[str, Any]] = (),
    streaming_links: Iterable[dict[str, Any]] = (),
    **fields: Any,
) -> Show:
    """Create a new show with its episodes and streaming links.

    :param session: Database session.
    :param episodes: Episode column values.
    :param streaming_links: Streaming link column values.
    :param fields: Show column values (see SHOW_FIELDS).
    :returns: The created show.
    :raises ValueError: If an unknown field or genre is given.
    """
    _validate_fields(fields)
    show = Show(**fields)
    show.episodes = _build_episodes(episodes)
    show.streaming_links = _build_links(streaming_links)
    session.add(show)
    session.flush()
    logger.info(f"Created show: id={show.id}, title={show.title!r}, episodes={show.episode_count}")
    return show


def get_show_by_id(
    session: Session,
    show_id: uuid_module.UUID,
    include_inactive: bool = False,
) -> Show | None:
    """Get a show by ID.

    :param session: Database session.
    :param show_id: Show ID.
    :param include_inactive: Also return soft-deleted shows.
    :returns: The show or None if not found.
    """
    query = session.query(Show).filter(Show.id == show_id)
    if not include_inactive:
        query = query.filter(Show.is_active.is_(True))
    return query.first()


def update_show(
    session: Session,
    show_id: uuid_module.UUID,
    episodes: Iterable[dict[str, Any]] | None = None,
    streaming_links: Iterable[dict[str, Any]] | None = None,
    **fields: Any,
) -> Show | None:
    """Update a show.

    Episodes and streaming links are replaced wholesale when given.

    :param session: Database session.
    :param show_id: Show ID.
    :param episodes: Replacement episodes, or None to keep.
    :param streaming_links: Replacement links, or None to keep.
    :param fields: Column values to set.
    :returns: The updated show or None if not found.
    :raises ValueError: If an unknown field or genre is given.
    """
    _validate_fields(fields)
    show = get_show_by_id(session, show_id)
    if show is None:
        return None

    for name, value in fields.items():
        setattr(show, name, value)
    if episodes is not None:
        show.episodes = _build_episodes(episodes)
    if streaming_links is not None:
        show.streaming_links = _build_links(streaming_links)

    session.flush()
    logger.info(f"Updated show: id={show_id}, fields={sorted(fields)}")
    return show


def deactivate_show(session: Session, show_id: uuid_module.UUID) -> Show | None:
    """Soft delete a show.

    :param session: Database session.
    :param show_id: Show ID.
    :returns: The deactivated show or None if not found.
    """
    show = get_show_by_id(session, show_id)
    if show is None:
        return None

    show.is_active = False
    session.flush()
    logger.info(f"Deactivated show: id={show_id}")
    return show


def list_shows(  # noqa: PLR0913
    session: Session,
    genres: list[str] | None = None,
    tags: list[str] | None = None,
    show_type: ShowType | None = None,
    status: ShowStatus | None = None,
    year: int | None = None,
    season: AiringSeason | None = None,
    search: str | None = None,
    sort: ShowSort = ShowSort.RATING,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> Page[Show]:
    """List active shows with filtering, sorting and pagination.

    :param session: Database session.
    :param genres: Match shows having any of these genres.
    :param tags: Match shows having any of these tags.
    :param show_type: Filter by show type.
    :param status: Filter by airing status.
    :param year: Filter by year.
    :param season: Filter by season.
    :param search: Case-insensitive substring of the title or original title.
    :param sort: Sort order.
    :param page: Page number.
    :param limit: Page size.
    :returns: A page of shows.
    """
    query = session.query(Show).filter(Show.is_active.is_(True))
    if genres:
        query = query.filter(Show.genres.overlap(genres))
    if tags:
        query = query.filter(Show.tags.overlap(tags))
    if show_type is not None:
        query = query.filter(Show.type == show_type.value)
    if status is not None:
        query = query.filter(Show.status == status.value)
    if year is not None:
        query = query.filter(Show.year == year)
    if season is not None:
        query = query.filter(Show.season == season.value)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(Show.title.ilike(pattern), Show.original_title.ilike(pattern)))

    if sort == ShowSort.TITLE:
        query = query.order_by(Show.title.asc())
    elif sort == ShowSort.YEAR:
        query = query.order_by(Show.year.desc())
    elif sort == ShowSort.NEWEST:
        query = query.order_by(Show.created_at.desc())
    else:
        query = _by_rating(query)

    return paginate(query, page=page, limit=limit)


def get_popular_shows(session: Session, limit: int = 20) -> list[Show]:
    """Get the highest rated shows.

    :param session: Database session.
    :param limit: Maximum shows to return.
    :returns: Shows ordered by rating average then rating count.
    """
    query = session.query(Show).filter(Show.is_active.is_(True))
    return _by_rating(query).limit(limit).all()


def get_trending_shows(session: Session, limit: int = 20) -> list[Show]:
    """Get well rated shows.

    :param session: Database session.
    :param limit: Maximum shows to return.
    :returns: Shows rated at least TRENDING_MIN_RATING, best first.
    """
    return (
        session.query(Show)
        .filter(Show.is_active.is_(True), Show.rating_average >= TRENDING_MIN_RATING)
        .order_by(Show.rating_average.desc())
        .limit(limit)
        .all()
    )


def get_shows_by_genre(session: Session, genre: Genre, limit: int = 20) -> list[Show]:
    """Get the best rated shows in a genre.

    :param session: Database session.
    :param genre: The genre to match.
    :param limit: Maximum shows to return.
    :returns: Matching shows.
    """
    query = session.query(Show).filter(
        Show.is_active.is_(True),
        Show.genres.any(genre.value),
    )
    return _by_rating(query).limit(limit).all()


def get_similar_shows(session: Session, show: Show, limit: int = 10) -> list[Show]:
    """Get shows sharing at least one genre or tag with a show.

    :param session: Database session.
    :param show: The reference show (excluded from results).
    :param limit: Maximum shows to return.
    :returns: Similar shows, best rated first.
    """
    conditions = []
    if show.genres:
        conditions.append(Show.genres.overlap(show.genres))
    if show.tags:
        conditions.append(Show.tags.overlap(show.tags))
    if not conditions:
        return []

    return (
        session.query(Show)
        .filter(Show.is_active.is_(True), Show.id != show.id, or_(*conditions))
        .order_by(Show.rating_average.desc())
        .limit(limit)
        .all()
    )


def get_seasonal_shows(
    session: Session,
    season: AiringSeason,
    year: int,
    limit: int = 20,
) -> list[Show]:
    """Get the best rated shows of a season.

    :param session: Database session.
    :param season: Airing season.
    :param year: Airing year.
    :param limit: Maximum shows to return.
    :returns: Matching shows.
    """
    query = session.query(Show).filter(
        Show.is_active.is_(True),
        Show.season == season.value,
        Show.year == year,
    )
    return _by_rating(query).limit(limit).all()


def get_candidate_shows(
    session: Session,
    exclude_ids: Iterable[uuid_module.UUID] = (),
) -> list[Show]:
    """Get all active shows except the given ones.

    :param session: Database session.
    :param exclude_ids: Show IDs to leave out.
    :returns: Candidate shows for recommendation scoring.
    """
    query = session.query(Show).filter(Show.is_active.is_(True))
    excluded = list(exclude_ids)
    if excluded:
        query = query.filter(Show.id.notin_(excluded))
    return query.all()


def count_shows(session: Session, active_only: bool = True) -> int:
    """Count shows, by default only active ones."""
    query = session.query(Show)
    if active_only:
        query = query.filter(Show.is_active.is_(True))
    return query.count()


def count_show_genres(session: Session, limit: int = 10) -> list[dict[str, Any]]:
    """Count how many shows carry each genre.

    :param session: Database session.
    :param limit: Maximum genres to return.
    :returns: ``{"genre", "count"}`` dicts, most common first.
    """
    counter: Counter[str] = Counter()
    for (genres,) in session.query(Show.genres).all():
        counter.update(genres or [])
    return [{"genre": genre, "count": count} for genre, count in counter.most_common(limit)]
