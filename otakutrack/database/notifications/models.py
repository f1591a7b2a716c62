"""SQLAlchemy ORM models for in-app notifications."""

import uuid as uuid_module

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from otakutrack.database.core import Base, TimestampMixin


class Notification(TimestampMixin, Base):
    """ORM model for a message shown to a user inside the app."""

    __tablename__ = "notifications"

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
    reminder_id: Mapped[uuid_module.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("reminders.id", ondelete="SET NULL"),
        nullable=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (Index("idx_notifications_user_read", "user_id", "is_read"),)

    def __repr__(self) -> str:
        """Return string representation of the notification."""
        return f"<Notification(id={self.id}, user_id={self.user_id}, read={self.is_read})>"
