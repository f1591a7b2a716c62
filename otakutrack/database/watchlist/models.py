"""SQLAlchemy ORM models for user watchlists."""

import uuid as uuid_module
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from otakutrack.database.core import Base, TimestampMixin
from otakutrack.database.shows.models import Show
from otakutrack.enums import WatchStatus
from otakutrack.watchlist.progress import completion_percentage, time_spent_days


class WatchlistItem(TimestampMixin, Base):
    """ORM model for a show on a user's watchlist.

    total_episodes is a snapshot of the show's episode count taken when the
    item was added.
    """

    __tablename__ = "watchlist_items"

    id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid_module.uuid4,
    )
    user_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    show_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("shows.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=WatchStatus.PLAN_TO_WATCH.value,
    )
    current_episode: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_episodes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rewatch_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    finish_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_watched: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tags: Mapped[list[str]] = mapped_column(ARRAY(String(50)), nullable=False, default=list)

    show: Mapped[Show] = relationship(Show, lazy="joined")

    __table_args__ = (
        UniqueConstraint("user_id", "show_id", name="uq_watchlist_user_show"),
        Index("idx_watchlist_user_status", "user_id", "status"),
    )

    @property
    def completion_percentage(self) -> int:
        """Percentage of episodes watched."""
        return completion_percentage(self.current_episode, self.total_episodes)

    @property
    def time_spent_days(self) -> int:
        """Days between starting and finishing the show."""
        return time_spent_days(self.start_date, self.finish_date)

    def __repr__(self) -> str:
        """Return string representation of the item."""
        return (
            f"<WatchlistItem(id={self.id}, status={self.status}, "
            f"progress={self.current_episode}/{self.total_episodes})>"
        )
