"""SQLAlchemy ORM models for user analytics and the activity feed."""

import uuid as uuid_module
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from otakutrack.database.core import Base, TimestampMixin, utc_now

# Counters kept in the weekly and monthly activity buckets
ACTIVITY_KEYS = ("episodes_watched", "shows_added", "reviews_posted", "club_posts", "poll_votes")


def empty_activity() -> dict[str, int]:
    """A zeroed weekly/monthly activity bucket."""
    return dict.fromkeys(ACTIVITY_KEYS, 0)


class UserAnalytics(TimestampMixin, Base):
    """ORM model for per-user activity counters.

    One row per user, created lazily the first time something is tracked.
    JSONB columns are replaced rather than mutated in place so changes are
    detected on flush.
    """

    __tablename__ = "user_analytics"

    id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid_module.uuid4,
    )
    user_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    episodes_watched: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_watch_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    shows_in_watchlist: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    watching_shows: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed_shows: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    on_hold_shows: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    dropped_shows: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    plan_to_watch_shows: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reviews_posted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comments_posted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    club_posts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    club_likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    clubs_joined: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    poll_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    favorite_genres: Mapped[dict[str, int]] = mapped_column(JSONB, nullable=False, default=dict)
    weekly_activity: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=empty_activity,
    )
    monthly_activity: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=empty_activity,
    )
    last_activity: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    __table_args__ = (
        Index("idx_user_analytics_last_activity", "last_activity"),
        Index("idx_user_analytics_episodes", "episodes_watched"),
    )

    @property
    def engagement_score(self) -> int:
        """Weighted sum of the user's activity."""
        return (
            self.episodes_watched * 10
            + self.reviews_posted * 50
            + (self.club_posts + self.club_likes) * 5
            + self.shows_in_watchlist * 2
        )

    def avg_episodes_per_day(self, now: datetime | None = None) -> float:
        """Episodes per whole day since the record was created, at least one day."""
        if now is None:
            now = datetime.now(UTC)
        created = self.created_at or now
        days = max(1, (now - created).days)
        return round(self.episodes_watched / days, 2)

    def top_genres(self, limit: int = 5) -> list[tuple[str, int]]:
        """The user's most watched genres, highest count first."""
        ranked = sorted((self.favorite_genres or {}).items(), key=lambda kv: (-kv[1], kv[0]))
        return ranked[:limit]


class ActivityEvent(Base):
    """ORM model for an entry in the site-wide recent activity feed."""

    __tablename__ = "activity_events"

    id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid_module.uuid4,
    )
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    user_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    show_id: Mapped[uuid_module.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("shows.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    __table_args__ = (Index("idx_activity_events_created", "created_at"),)

    def __repr__(self) -> str:
        """Return string representation of the event."""
        return f"<ActivityEvent(type={self.type}, user_id={self.user_id})>"
