"""SQLAlchemy ORM models for episode reminders."""

import uuid as uuid_module
from datetime import UTC, datetime, timedelta

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from otakutrack.database.core import Base, TimestampMixin
from otakutrack.database.shows.models import Show
from otakutrack.database.users.models import User
from otakutrack.enums import AlertStatus, AlertType, RecurringPattern, ReminderPriority

# Default text sent with a reminder
DEFAULT_REMINDER_MESSAGE = "New episode available!"

# Default cap on how often a reminder is delivered
DEFAULT_MAX_SENDS = 10

# Alerts closer than this are reported as upcoming
UPCOMING_WINDOW = timedelta(hours=24)


class Reminder(TimestampMixin, Base):
    """ORM model for a user's reminder about a show's next episode.

    A reminder fires when alert_time passes. One-off reminders deactivate after
    their first delivery; recurring ones move alert_time forward by their
    pattern until sent_count reaches max_sends.
    """

    __tablename__ = "reminders"

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
    episode_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    episode_title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    episode_air_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    alert_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    alert_type: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=AlertType.BOTH.value,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recurring_pattern: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=RecurringPattern.WEEKLY.value,
    )
    message: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        default=DEFAULT_REMINDER_MESSAGE,
    )
    priority: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=ReminderPriority.MEDIUM.value,
    )
    last_sent: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    sent_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_sends: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_MAX_SENDS)
    tags: Mapped[list[str]] = mapped_column(ARRAY(String(50)), nullable=False, default=list)

    user: Mapped[User] = relationship(User, lazy="joined")
    show: Mapped[Show] = relationship(Show, lazy="joined")

    __table_args__ = (
        Index("idx_reminders_user_alert", "user_id", "alert_time"),
        Index("idx_reminders_active_alert", "is_active", "alert_time"),
    )

    def time_until_alert(self, now: datetime | None = None) -> timedelta | None:
        """Time left before the alert, floored at zero.

        :param now: Current time (defaults to now).
        :returns: The remaining time, or None without an alert time.
        """
        if self.alert_time is None:
            return None
        if now is None:
            now = datetime.now(UTC)
        return max(self.alert_time - now, timedelta(0))

    def alert_status(self, now: datetime | None = None) -> AlertStatus:
        """Classify the reminder relative to the current time.

        :param now: Current time (defaults to now).
        :returns: inactive, no-date, overdue, upcoming (within 24 hours) or
            scheduled.
        """
        if not self.is_active:
            return AlertStatus.INACTIVE
        if self.alert_time is None:
            return AlertStatus.NO_DATE
        if now is None:
            now = datetime.now(UTC)
        if self.alert_time <= now:
            return AlertStatus.OVERDUE
        if self.alert_time - now <= UPCOMING_WINDOW:
            return AlertStatus.UPCOMING
        return AlertStatus.SCHEDULED

    @property
    def sends_remaining(self) -> int:
        """Deliveries left before the reminder is exhausted."""
        return max(self.max_sends - self.sent_count, 0)

    def __repr__(self) -> str:
        """Return string representation of the reminder."""
        recurrence = self.recurring_pattern if self.is_recurring else "one-time"
        return (
            f"<Reminder(id={self.id}, show_id={self.show_id}, {recurrence}, "
            f"sent={self.sent_count}/{self.max_sends})>"
        )
