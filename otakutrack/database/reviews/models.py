"""SQLAlchemy ORM models for show reviews."""

import uuid as uuid_module
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from otakutrack.database.core import Base, TimestampMixin, utc_now
from otakutrack.database.shows.models import Show
from otakutrack.database.users.models import User
from otakutrack.enums import ReviewReactionKind


def like_ratio(likes: int, dislikes: int) -> int:
    """Rounded percentage of likes among likes and dislikes, 0 with no votes."""
    total = likes + dislikes
    if total == 0:
        return 0
    return round(likes / total * 100)


class Review(TimestampMixin, Base):
    """ORM model for a user's review of a show.

    A user may review each show once. Edits keep the previous comment and
    rating in ReviewEdit rows.
    """

    __tablename__ = "reviews"

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
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_spoiler: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    spoiler_episode: Mapped[int | None] = mapped_column(Integer, nullable=True)
    spoiler_season: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tags: Mapped[list[str]] = mapped_column(ARRAY(String(50)), nullable=False, default=list)
    is_edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_reported: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    report_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)

    user: Mapped[User] = relationship(User, lazy="joined")
    show: Mapped[Show] = relationship(Show, lazy="joined")
    reactions: Mapped[list["ReviewReaction"]] = relationship(
        "ReviewReaction",
        back_populates="review",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    edits: Mapped[list["ReviewEdit"]] = relationship(
        "ReviewEdit",
        back_populates="review",
        cascade="all, delete-orphan",
        order_by="ReviewEdit.edited_at",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "show_id", name="uq_reviews_user_show"),
        Index("idx_reviews_show_rating", "show_id", "rating"),
        Index("idx_reviews_reported", "is_reported"),
    )

    def _count(self, kind: ReviewReactionKind) -> int:
        return sum(1 for reaction in self.reactions if reaction.kind == kind)

    @property
    def like_count(self) -> int:
        """Number of likes."""
        return self._count(ReviewReactionKind.LIKE)

    @property
    def dislike_count(self) -> int:
        """Number of dislikes."""
        return self._count(ReviewReactionKind.DISLIKE)

    @property
    def helpful_count(self) -> int:
        """Number of helpful votes."""
        return self._count(ReviewReactionKind.HELPFUL)

    @property
    def helpful_score(self) -> int:
        """Helpful votes minus dislikes."""
        return self.helpful_count - self.dislike_count

    @property
    def like_ratio(self) -> int:
        """Percentage of likes among likes and dislikes."""
        return like_ratio(self.like_count, self.dislike_count)

    def __repr__(self) -> str:
        """Return string representation of the review."""
        return f"<Review(id={self.id}, show_id={self.show_id}, rating={self.rating})>"


class ReviewReaction(Base):
    """ORM model for a like, dislike or helpful vote on a review."""

    __tablename__ = "review_reactions"

    id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid_module.uuid4,
    )
    review_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("reviews.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    kind: Mapped[str] = mapped_column(String(10), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    review: Mapped["Review"] = relationship("Review", back_populates="reactions")

    __table_args__ = (
        UniqueConstraint("review_id", "user_id", "kind", name="uq_review_reactions"),
    )


class ReviewEdit(Base):
    """ORM model for a previous version of a review."""

    __tablename__ = "review_edits"

    id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid_module.uuid4,
    )
    review_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("reviews.id", ondelete="CASCADE"),
        nullable=False,
    )
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    edited_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    review: Mapped["Review"] = relationship("Review", back_populates="edits")
