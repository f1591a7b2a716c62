"""Database operations for user watchlists."""

from __future__ import annotations

import logging
import uuid as uuid_module
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from otakutrack.database.shows.models import Show
from otakutrack.database.watchlist.models import WatchlistItem
from otakutrack.enums import WatchStatus
from otakutrack.watchlist.progress import (
    new_episodes_watched,
    status_for_progress,
    validate_progress,
)

logger = logging.getLogger(__name__)

# Fields the general update may set
UPDATABLE_FIELDS = frozenset(
    {
        "status",
        "current_episode",
        "rewatch_count",
        "rating",
        "notes",
        "start_date",
        "finish_date",
        "is_private",
        "tags",
    }
)


@dataclass
class WatchlistStats:
    """Aggregated watchlist counts for a user."""

    total_shows: int = 0
    completed_shows: int = 0
    by_status: dict[str, dict[str, int]] = field(default_factory=dict)

    @property
    def completion_rate(self) -> int:
        """Percentage of watchlist shows that are completed."""
        if self.total_shows == 0:
            return 0
        return round(self.completed_shows / self.total_shows * 100)


@dataclass
class ProgressResult:
    """Outcome of a progress update."""

    item: WatchlistItem
    new_episodes: int
    previous_status: str


def get_watchlist_item(
    session: Session,
    item_id: uuid_module.UUID,
) -> WatchlistItem | None:
    """Get a watchlist item by ID.

    :param session: Database session.
    :param item_id: Watchlist item ID.
    :returns: The item or None if not found.
    """
    return session.query(WatchlistItem).filter(WatchlistItem.id == item_id).first()


def get_watchlist_item_for_show(
    session: Session,
    user_id: uuid_module.UUID,
    show_id: uuid_module.UUID,
) -> WatchlistItem | None:
    """Get a user's watchlist item for a show.

    :param session: Database session.
    :param user_id: Owner ID.
    :param show_id: Show ID.
    :returns: The item or None if the show is not on the watchlist.
    """
    return (
        session.query(WatchlistItem)
        .filter(WatchlistItem.user_id == user_id, WatchlistItem.show_id == show_id)
        .first()
    )


def list_watchlist(
    session: Session,
    user_id: uuid_module.UUID,
    status: WatchStatus | None = None,
) -> list[WatchlistItem]:
    """List a user's watchlist, most recently updated first.

    :param session: Database session.
    :param user_id: Owner ID.
    :param status: Only return items with this status.
    :returns: Watchlist items.
    """
    query = session.query(WatchlistItem).filter(WatchlistItem.user_id == user_id)
    if status is not None:
        query = query.filter(WatchlistItem.status == status.value)
    return query.order_by(WatchlistItem.updated_at.desc()).all()


def add_to_watchlist(
    session: Session,
    user_id: uuid_module.UUID,
    show: Show,
    status: WatchStatus = WatchStatus.PLAN_TO_WATCH,
    notes: str = "",
) -> WatchlistItem:
    """Add a show to a user's watchlist.

    :param session: Database session.
    :param user_id: Owner ID.
    :param show: The show to add.
    :param status: Initial status.
    :param notes: Optional notes.
    :returns: The created item.
    :raises ValueError: If the show is already on the watchlist.
    """
    if get_watchlist_item_for_show(session, user_id, show.id) is not None:
        raise ValueError("Show already in watchlist")

    item = WatchlistItem(
        user_id=user_id,
        show_id=show.id,
        status=status.value,
        notes=notes,
        current_episode=0,
        rewatch_count=0,
        total_episodes=show.episode_count,
    )
    item.show = show
    session.add(item)
    session.flush()
    logger.info(f"Added to watchlist: user_id={user_id}, show_id={show.id}, status={status}")
    return item


def update_watchlist_item(
    session: Session,
    item: WatchlistItem,
    now: datetime | None = None,
    **fields: Any,
) -> WatchlistItem:
    """Apply a general update to a watchlist item.

    Status is taken as given. Moving to Completed sets finish_date once and a
    changed current_episode sets last_watched.

    :param session: Database session.
    :param item: The item to update.
    :param now: Current time (defaults to now).
    :param fields: Values to set; None values are ignored.
    :returns: The updated item.
    :raises ValueError: If an unknown field is given.
    """
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update fields: {sorted(unknown)}")
    if now is None:
        now = datetime.now(UTC)

    for name, value in fields.items():
        if value is None:
            continue
        setattr(item, name, value.value if isinstance(value, WatchStatus) else value)

    if fields.get("status") == WatchStatus.COMPLETED and item.finish_date is None:
        item.finish_date = now
    if fields.get("current_episode"):
        item.last_watched = now

    session.flush()
    logger.info(f"Updated watchlist item: id={item.id}, fields={sorted(fields)}")
    return item


def update_progress(
    session: Session,
    item: WatchlistItem,
    current_episode: int | None = None,
    rewatch_count: int | None = None,
    now: datetime | None = None,
) -> ProgressResult:
    """Record episode progress and derive the status from it.

    :param session: Database session.
    :param item: The item to update.
    :param current_episode: The episode the user has reached.
    :param rewatch_count: New rewatch count.
    :param now: Current time (defaults to now).
    :returns: The updated item and the number of newly watched episodes.
    :raises ValueError: If the episode is past the known total. The item is
        left unchanged.
    """
    if now is None:
        now = datetime.now(UTC)

    previous_status = item.status
    new_episodes = 0
    if current_episode is not None:
        validate_progress(current_episode, item.total_episodes)
        new_episodes = new_episodes_watched(item.current_episode, current_episode)
        item.current_episode = current_episode
    if rewatch_count is not None:
        item.rewatch_count = rewatch_count

    item.last_watched = now
    status = status_for_progress(item.current_episode, item.total_episodes)
    item.status = status.value
    if status == WatchStatus.COMPLETED and item.finish_date is None:
        item.finish_date = now
    if status == WatchStatus.WATCHING and item.start_date is None:
        item.start_date = now

    session.flush()
    logger.info(
        f"Updated progress: id={item.id}, episode={item.current_episode}/{item.total_episodes}, "
        f"status={item.status}, new_episodes={new_episodes}"
    )
    return ProgressResult(item=item, new_episodes=new_episodes, previous_status=previous_status)


def remove_from_watchlist(session: Session, item: WatchlistItem) -> None:
    """Delete a watchlist item.

    :param session: Database session.
    :param item: The item to delete.
    """
    session.delete(item)
    session.flush()
    logger.info(f"Removed from watchlist: id={item.id}, user_id={item.user_id}")


def get_watchlist_stats(session: Session, user_id: uuid_module.UUID) -> WatchlistStats:
    """Aggregate a user's watchlist by status.

    :param session: Database session.
    :param user_id: Owner ID.
    :returns: Totals plus per-status item and episode counts.
    """
    rows = (
        session.query(
            WatchlistItem.status,
            func.count(WatchlistItem.id),
            func.coalesce(func.sum(WatchlistItem.current_episode), 0),
        )
        .filter(WatchlistItem.user_id == user_id)
        .group_by(WatchlistItem.status)
        .all()
    )

    stats = WatchlistStats()
    for status, count, episodes in rows:
        stats.by_status[status] = {"count": int(count), "total_episodes": int(episodes)}
        stats.total_shows += int(count)
        if status == WatchStatus.COMPLETED:
            stats.completed_shows = int(count)
    return stats


def get_watched_shows(session: Session, user_id: uuid_module.UUID) -> list[Show]:
    """Get the shows a user is watching or has completed.

    :param session: Database session.
    :param user_id: Owner ID.
    :returns: The shows, used as recommendation history.
    """
    items = (
        session.query(WatchlistItem)
        .filter(
            WatchlistItem.user_id == user_id,
            WatchlistItem.status.in_([WatchStatus.WATCHING.value, WatchStatus.COMPLETED.value]),
        )
        .all()
    )
    return [item.show for item in items if item.show is not None]


def get_watchlist_show_ids(session: Session, user_id: uuid_module.UUID) -> list[uuid_module.UUID]:
    """Get the IDs of every show on a user's watchlist."""
    return [
        row[0]
        for row in session.query(WatchlistItem.show_id)
        .filter(WatchlistItem.user_id == user_id)
        .all()
    ]
