"""Database operations for user analytics and the activity feed."""

from __future__ import annotations

import logging
import uuid as uuid_module
from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from otakutrack.database.analytics.models import ActivityEvent, UserAnalytics, empty_activity
from otakutrack.database.clubs.operations import count_clubs
from otakutrack.database.reviews.operations import count_reviews
from otakutrack.database.shows.models import DEFAULT_EPISODE_DURATION, Show
from otakutrack.database.shows.operations import count_shows
from otakutrack.database.users.models import User
from otakutrack.database.users.operations import count_users
from otakutrack.database.watchlist.models import WatchlistItem
from otakutrack.enums import ActivityType, ClubActivity, WatchStatus

logger = logging.getLogger(__name__)

# Size of the recent activity feed
RECENT_ACTIVITY_LIMIT = 50

# Watch status to the counter column that tracks it
STATUS_COLUMNS = {
    WatchStatus.WATCHING: "watching_shows",
    WatchStatus.COMPLETED: "completed_shows",
    WatchStatus.ON_HOLD: "on_hold_shows",
    WatchStatus.DROPPED: "dropped_shows",
    WatchStatus.PLAN_TO_WATCH: "plan_to_watch_shows",
}


@dataclass
class SiteTotals:
    """Site-wide counts shown on public and admin analytics."""

    total_users: int = 0
    total_shows: int = 0
    total_reviews: int = 0
    total_clubs: int = 0
    most_watched_shows: list[dict[str, Any]] = field(default_factory=list)
    top_genres: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class GlobalAnalytics(SiteTotals):
    """Site-wide analytics for administrators."""

    total_episodes_tracked: int = 0
    total_watch_minutes: int = 0
    daily_active_users: int = 0
    weekly_active_users: int = 0
    monthly_active_users: int = 0
    recent_activity: list[ActivityEvent] = field(default_factory=list)


def _bump(bucket: dict[str, Any] | None, key: str, amount: int = 1) -> dict[str, Any]:
    updated = {**empty_activity(), **(bucket or {})}
    updated[key] = updated.get(key, 0) + amount
    return updated


def get_user_analytics(session: Session, user_id: uuid_module.UUID) -> UserAnalytics | None:
    """Get a user's analytics row, if one exists."""
    return session.query(UserAnalytics).filter(UserAnalytics.user_id == user_id).first()


def get_or_create_user_analytics(
    session: Session,
    user_id: uuid_module.UUID,
) -> UserAnalytics:
    """Get a user's analytics row, creating a zeroed one if missing.

    :param session: Database session.
    :param user_id: User ID.
    :returns: The analytics row.
    """
    analytics = get_user_analytics(session, user_id)
    if analytics is not None:
        return analytics

    now = datetime.now(UTC)
    analytics = UserAnalytics(
        user_id=user_id,
        episodes_watched=0,
        total_watch_minutes=0,
        shows_in_watchlist=0,
        reviews_posted=0,
        comments_posted=0,
        club_posts=0,
        club_likes=0,
        clubs_joined=0,
        poll_votes=0,
        favorite_genres={},
        weekly_activity=empty_activity(),
        monthly_activity=empty_activity(),
        last_activity=now,
        created_at=now,
    )
    session.add(analytics)
    session.flush()
    logger.info(f"Created user analytics: user_id={user_id}")
    return analytics


def record_activity(
    session: Session,
    activity_type: ActivityType,
    user_id: uuid_module.UUID,
    show_id: uuid_module.UUID | None = None,
) -> ActivityEvent:
    """Append an event to the recent activity feed.

    :param session: Database session.
    :param activity_type: What happened.
    :param user_id: Acting user ID.
    :param show_id: Show involved, if any.
    :returns: The created event.
    """
    event = ActivityEvent(type=activity_type.value, user_id=user_id, show_id=show_id)
    session.add(event)
    session.flush()
    return event


def track_episodes_watched(
    session: Session,
    user_id: uuid_module.UUID,
    show_id: uuid_module.UUID,
    episodes: int = 1,
    episode_duration: int = DEFAULT_EPISODE_DURATION,
) -> UserAnalytics:
    """Record newly watched episodes.

    :param session: Database session.
    :param user_id: User ID.
    :param show_id: Show the episodes belong to.
    :param episodes: Number of episodes watched.
    :param episode_duration: Minutes per episode.
    :returns: The updated analytics row.
    """
    analytics = get_or_create_user_analytics(session, user_id)
    analytics.episodes_watched += episodes
    analytics.total_watch_minutes += episodes * episode_duration
    analytics.weekly_activity = _bump(analytics.weekly_activity, "episodes_watched", episodes)
    analytics.monthly_activity = _bump(analytics.monthly_activity, "episodes_watched", episodes)
    analytics.last_activity = datetime.now(UTC)
    record_activity(session, ActivityType.EPISODE_WATCHED, user_id, show_id)

    session.flush()
    logger.info(
        f"Tracked episodes watched: user_id={user_id}, show_id={show_id}, "
        f"episodes={episodes}, total={analytics.episodes_watched}"
    )
    return analytics


def track_show_added(session: Session, user_id: uuid_module.UUID, show: Show) -> UserAnalytics:
    """Record a show being added to a watchlist, counting its genres.

    :param session: Database session.
    :param user_id: User ID.
    :param show: The added show.
    :returns: The updated analytics row.
    """
    analytics = get_or_create_user_analytics(session, user_id)
    analytics.shows_in_watchlist += 1
    analytics.weekly_activity = _bump(analytics.weekly_activity, "shows_added")
    analytics.monthly_activity = _bump(analytics.monthly_activity, "shows_added")

    genres = dict(analytics.favorite_genres or {})
    for genre in show.genres or []:
        genres[genre] = genres.get(genre, 0) + 1
    analytics.favorite_genres = genres
    analytics.last_activity = datetime.now(UTC)
    record_activity(session, ActivityType.SHOW_ADDED, user_id, show.id)

    session.flush()
    logger.info(f"Tracked show added: user_id={user_id}, show_id={show.id}")
    return analytics


def track_review_posted(
    session: Session,
    user_id: uuid_module.UUID,
    show_id: uuid_module.UUID,
) -> UserAnalytics:
    """Record a posted review."""
    analytics = get_or_create_user_analytics(session, user_id)
    analytics.reviews_posted += 1
    analytics.weekly_activity = _bump(analytics.weekly_activity, "reviews_posted")
    analytics.monthly_activity = _bump(analytics.monthly_activity, "reviews_posted")
    analytics.last_activity = datetime.now(UTC)
    record_activity(session, ActivityType.REVIEW_POSTED, user_id, show_id)

    session.flush()
    logger.info(f"Tracked review posted: user_id={user_id}, show_id={show_id}")
    return analytics


def track_club_activity(
    session: Session,
    user_id: uuid_module.UUID,
    activity: ClubActivity,
) -> UserAnalytics:
    """Record club participation.

    Posts, likes and joins have lifetime counters. Posts and poll votes also
    count towards the weekly and monthly buckets.

    :param session: Database session.
    :param user_id: User ID.
    :param activity: The kind of club activity.
    :returns: The updated analytics row.
    """
    analytics = get_or_create_user_analytics(session, user_id)
    if activity == ClubActivity.POST:
        analytics.club_posts += 1
        analytics.weekly_activity = _bump(analytics.weekly_activity, "club_posts")
        analytics.monthly_activity = _bump(analytics.monthly_activity, "club_posts")
    elif activity == ClubActivity.LIKE:
        analytics.club_likes += 1
    elif activity == ClubActivity.JOIN:
        analytics.clubs_joined += 1
        record_activity(session, ActivityType.CLUB_JOINED, user_id)
    elif activity == ClubActivity.POLL_VOTE:
        analytics.poll_votes += 1
        analytics.weekly_activity = _bump(analytics.weekly_activity, "poll_votes")
        analytics.monthly_activity = _bump(analytics.monthly_activity, "poll_votes")
    analytics.last_activity = datetime.now(UTC)

    session.flush()
    logger.info(f"Tracked club activity: user_id={user_id}, activity={activity}")
    return analytics


def watchlist_status_counts(session: Session, user_id: uuid_module.UUID) -> dict[str, int]:
    """Count a user's watchlist items per status, including empty statuses.

    :param session: Database session.
    :param user_id: User ID.
    :returns: Mapping of status value to item count.
    """
    counts = {status.value: 0 for status in WatchStatus}
    rows = (
        session.query(WatchlistItem.status, func.count(WatchlistItem.id))
        .filter(WatchlistItem.user_id == user_id)
        .group_by(WatchlistItem.status)
        .all()
    )
    for status, count in rows:
        counts[status] = int(count)
    return counts


def sync_watchlist_status_counts(
    session: Session,
    user_id: uuid_module.UUID,
) -> UserAnalytics:
    """Refresh the per-status show counters from the user's watchlist rows."""
    analytics = get_or_create_user_analytics(session, user_id)
    counts = watchlist_status_counts(session, user_id)
    for status, column in STATUS_COLUMNS.items():
        setattr(analytics, column, counts.get(status.value, 0))
    analytics.last_activity = datetime.now(UTC)

    session.flush()
    logger.info(f"Synced watchlist status counts: user_id={user_id}, counts={counts}")
    return analytics


def list_recent_activity(
    session: Session,
    limit: int = RECENT_ACTIVITY_LIMIT,
) -> list[ActivityEvent]:
    """Get the newest activity events."""
    return (
        session.query(ActivityEvent)
        .order_by(ActivityEvent.created_at.desc())
        .limit(limit)
        .all()
    )


def get_top_genres(session: Session, limit: int = 5) -> list[dict[str, Any]]:
    """Count genres across every watchlist entry.

    :param session: Database session.
    :param limit: Maximum genres to return.
    :returns: ``{"genre", "count"}`` dicts, most common first.
    """
    rows = (
        session.query(Show.genres)
        .join(WatchlistItem, WatchlistItem.show_id == Show.id)
        .all()
    )
    counter: Counter[str] = Counter()
    for (genres,) in rows:
        counter.update(genres or [])
    return [{"genre": genre, "count": count} for genre, count in counter.most_common(limit)]


def get_most_watched(session: Session, limit: int = 5) -> list[dict[str, Any]]:
    """Shows with the most watchlist entries.

    :param session: Database session.
    :param limit: Maximum shows to return.
    :returns: ``{"show_id", "title", "watch_count"}`` dicts.
    """
    watchers = func.count(WatchlistItem.id).label("watch_count")
    rows = (
        session.query(Show.id, Show.title, watchers)
        .join(WatchlistItem, WatchlistItem.show_id == Show.id)
        .group_by(Show.id, Show.title)
        .order_by(watchers.desc())
        .limit(limit)
        .all()
    )
    return [
        {"show_id": show_id, "title": title, "watch_count": int(count)}
        for show_id, title, count in rows
    ]


def count_active_users(session: Session, since: datetime) -> int:
    """Count users with tracked activity at or after a time."""
    return (
        session.query(UserAnalytics)
        .filter(UserAnalytics.last_activity >= since)
        .count()
    )


def get_watch_totals(session: Session) -> tuple[int, int]:
    """Total episodes and minutes tracked across all watchlists.

    :param session: Database session.
    :returns: (episodes, minutes), using each show's episode duration.
    """
    episodes, minutes = (
        session.query(
            func.coalesce(func.sum(WatchlistItem.current_episode), 0),
            func.coalesce(func.sum(WatchlistItem.current_episode * Show.episode_duration), 0),
        )
        .join(Show, WatchlistItem.show_id == Show.id)
        .one()
    )
    return int(episodes), int(minutes)


def active_user_windows(now: datetime | None = None) -> dict[str, datetime]:
    """Cut-off times for daily, weekly and monthly active users."""
    if now is None:
        now = datetime.now(UTC)
    return {
        "daily": now - timedelta(days=1),
        "weekly": now - timedelta(days=7),
        "monthly": now - timedelta(days=30),
    }


def get_site_totals(session: Session) -> SiteTotals:
    """Build the public site-wide counts.

    :param session: Database session.
    :returns: Totals with the top five genres and most watched shows.
    """
    return SiteTotals(
        total_users=count_users(session, active_only=True),
        total_shows=count_shows(session),
        total_reviews=count_reviews(session),
        total_clubs=count_clubs(session, active_only=True),
        most_watched_shows=get_most_watched(session),
        top_genres=get_top_genres(session),
    )


def get_global_analytics(session: Session, now: datetime | None = None) -> GlobalAnalytics:
    """Build site-wide analytics for administrators.

    Computed from the live tables on every call.

    :param session: Database session.
    :param now: Current time for the active user windows (defaults to now).
    :returns: Totals, watch volume, active user counts and the activity feed.
    """
    totals = get_site_totals(session)
    episodes, minutes = get_watch_totals(session)
    windows = active_user_windows(now)
    return GlobalAnalytics(
        **vars(totals),
        total_episodes_tracked=episodes,
        total_watch_minutes=minutes,
        daily_active_users=count_active_users(session, windows["daily"]),
        weekly_active_users=count_active_users(session, windows["weekly"]),
        monthly_active_users=count_active_users(session, windows["monthly"]),
        recent_activity=list_recent_activity(session),
    )


@dataclass
class EpisodeRanking:
    """A user's position on the episodes-watched leaderboard."""

    rank: int
    total_users: int
    top_users: list[dict[str, Any]] = field(default_factory=list)


def get_episode_ranking(
    session: Session,
    user_id: uuid_module.UUID,
    top: int = 3,
) -> EpisodeRanking:
    """Rank a user by episodes watched against every tracked user.

    Ties are broken by analytics row ID so the order is stable. A user
    without an analytics row is ranked last.

    :param session: Database session.
    :param user_id: User to rank.
    :param top: Number of leaders to include.
    :returns: The user's 1-based rank, the number of ranked users and the leaders.
    """
    rows = (
        session.query(UserAnalytics.user_id, UserAnalytics.episodes_watched, User.name)
        .join(User, User.id == UserAnalytics.user_id)
        .order_by(UserAnalytics.episodes_watched.desc(), UserAnalytics.id.asc())
        .all()
    )
    ranked_ids = [row_user_id for row_user_id, _, _ in rows]
    rank = ranked_ids.index(user_id) + 1 if user_id in ranked_ids else len(rows)
    leaders = [
        {"rank": position, "name": name, "episodes_watched": episodes}
        for position, (_, episodes, name) in enumerate(rows[:top], start=1)
    ]
    return EpisodeRanking(rank=rank, total_users=len(rows), top_users=leaders)
