"""SQLAlchemy ORM models for the show catalogue."""

import uuid as uuid_module
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from otakutrack.database.core import Base, TimestampMixin
from otakutrack.enums import AgeRating, ShowStatus, ShowType

# Default episode length in minutes
DEFAULT_EPISODE_DURATION = 24


class Show(TimestampMixin, Base):
    """ORM model for an anime or TV show.

    Shows are soft deleted by clearing is_active. The rating columns are
    maintained from reviews and never set directly by clients.
    """

    __tablename__ = "shows"

    id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid_module.uuid4,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    original_title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default=ShowType.TV.value)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ShowStatus.ONGOING.value,
    )
    genres: Mapped[list[str]] = mapped_column(ARRAY(String(50)), nullable=False, default=list)
    tags: Mapped[list[str]] = mapped_column(ARRAY(String(50)), nullable=False, default=list)
    season: Mapped[str | None] = mapped_column(String(10), nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rating_average: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    poster: Mapped[str | None] = mapped_column(String(500), nullable=True)
    banner: Mapped[str | None] = mapped_column(String(500), nullable=True)
    trailer: Mapped[str | None] = mapped_column(String(500), nullable=True)
    studio: Mapped[str | None] = mapped_column(String(100), nullable=True)
    source: Mapped[str | None] = mapped_column(String(20), nullable=True)
    age_rating: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=AgeRating.UNKNOWN.value,
    )
    episode_duration: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=DEFAULT_EPISODE_DURATION,
    )
    is_popular: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_recommended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    episodes: Mapped[list["Episode"]] = relationship(
        "Episode",
        back_populates="show",
        cascade="all, delete-orphan",
        order_by="Episode.number",
    )
    streaming_links: Mapped[list["StreamingLink"]] = relationship(
        "StreamingLink",
        back_populates="show",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_shows_title", "title"),
        Index("idx_shows_rating", "rating_average", "rating_count"),
        Index("idx_shows_season_year", "season", "year"),
        Index("idx_shows_genres", "genres", postgresql_using="gin"),
    )

    @property
    def episode_count(self) -> int:
        """Number of known episodes."""
        return len(self.episodes)

    def __repr__(self) -> str:
        """Return string representation of the show."""
        return f"<Show(id={self.id}, title={self.title!r}, episodes={self.episode_count})>"


class Episode(Base):
    """ORM model for a single episode of a show."""

    __tablename__ = "episodes"

    id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid_module.uuid4,
    )
    show_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("shows.id", ondelete="CASCADE"),
        nullable=False,
    )
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=DEFAULT_EPISODE_DURATION,
    )
    air_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    thumbnail: Mapped[str | None] = mapped_column(String(500), nullable=True)

    show: Mapped["Show"] = relationship("Show", back_populates="episodes")

    __table_args__ = (Index("idx_episodes_show_number", "show_id", "number"),)

    def __repr__(self) -> str:
        """Return string representation of the episode."""
        return f"<Episode(show_id={self.show_id}, number={self.number})>"


class StreamingLink(Base):
    """ORM model for where a show can be streamed."""

    __tablename__ = "streaming_links"

    id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid_module.uuid4,
    )
    show_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("shows.id", ondelete="CASCADE"),
        nullable=False,
    )
    platform: Mapped[str] = mapped_column(String(30), nullable=False)
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    region: Mapped[str] = mapped_column(String(30), nullable=False, default="Global")

    show: Mapped["Show"] = relationship("Show", back_populates="streaming_links")

    def __repr__(self) -> str:
        """Return string representation of the link."""
        return f"<StreamingLink(show_id={self.show_id}, platform={self.platform})>"
