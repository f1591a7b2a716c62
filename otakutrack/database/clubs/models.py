"""SQLAlchemy ORM models for clubs, their posts and polls."""

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

from otakutrack.clubs.polls import OptionVotes
from otakutrack.database.core import Base, TimestampMixin, utc_now
from otakutrack.database.users.models import User
from otakutrack.enums import ClubCategory, ClubRole

# Default member cap for a new club
DEFAULT_MAX_MEMBERS = 1000


def _uuid_pk() -> Mapped[uuid_module.UUID]:
    return mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid_module.uuid4)


class Club(TimestampMixin, Base):
    """ORM model for a community club.

    Clubs are soft deleted by clearing is_active. is_approved is controlled
    by site admins.
    """

    __tablename__ = "clubs"

    id: Mapped[uuid_module.UUID] = _uuid_pk()
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(String(1000), nullable=False)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    banner: Mapped[str | None] = mapped_column(String(500), nullable=True)
    category: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ClubCategory.GENERAL.value,
    )
    related_show_id: Mapped[uuid_module.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("shows.id", ondelete="SET NULL"),
        nullable=True,
    )
    rules: Mapped[list[str]] = mapped_column(ARRAY(String(500)), nullable=False, default=list)
    tags: Mapped[list[str]] = mapped_column(ARRAY(String(50)), nullable=False, default=list)
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_spoiler_free: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    max_members: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_MAX_MEMBERS)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    creator: Mapped[User] = relationship(User, lazy="joined")
    members: Mapped[list["ClubMember"]] = relationship(
        "ClubMember",
        back_populates="club",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    posts: Mapped[list["ClubPost"]] = relationship(
        "ClubPost",
        back_populates="club",
        cascade="all, delete-orphan",
    )
    polls: Mapped[list["Poll"]] = relationship(
        "Poll",
        back_populates="club",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("idx_clubs_category_active", "category", "is_active"),)

    @property
    def member_count(self) -> int:
        """Number of members, including the creator."""
        return len(self.members)

    @property
    def post_count(self) -> int:
        """Number of posts."""
        return len(self.posts)

    @property
    def is_full(self) -> bool:
        """Check if the member cap has been reached."""
        return self.member_count >= self.max_members

    def get_member(self, user_id: uuid_module.UUID) -> "ClubMember | None":
        """Find a user's membership of this club."""
        for member in self.members:
            if member.user_id == user_id:
                return member
        return None

    def __repr__(self) -> str:
        """Return string representation of the club."""
        return f"<Club(id={self.id}, name={self.name!r}, members={self.member_count})>"


class ClubMember(Base):
    """ORM model for a user's membership of a club."""

    __tablename__ = "club_members"

    id: Mapped[uuid_module.UUID] = _uuid_pk()
    club_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("clubs.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=ClubRole.MEMBER.value)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    club: Mapped["Club"] = relationship("Club", back_populates="members")
    user: Mapped[User] = relationship(User, lazy="joined")

    __table_args__ = (UniqueConstraint("club_id", "user_id", name="uq_club_members"),)

    @property
    def can_moderate(self) -> bool:
        """Check if the member is a club admin or moderator."""
        return self.role in (ClubRole.ADMIN, ClubRole.MODERATOR)


class ClubPost(TimestampMixin, Base):
    """ORM model for a discussion post in a club."""

    __tablename__ = "club_posts"

    id: Mapped[uuid_module.UUID] = _uuid_pk()
    club_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("clubs.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_spoiler: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    spoiler_show_id: Mapped[uuid_module.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("shows.id", ondelete="SET NULL"),
        nullable=True,
    )
    spoiler_episode: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tags: Mapped[list[str]] = mapped_column(ARRAY(String(50)), nullable=False, default=list)

    club: Mapped["Club"] = relationship("Club", back_populates="posts")
    author: Mapped[User] = relationship(User, lazy="joined")
    likes: Mapped[list["PostLike"]] = relationship(
        "PostLike",
        back_populates="post",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    comments: Mapped[list["PostComment"]] = relationship(
        "PostComment",
        back_populates="post",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PostComment.created_at",
    )

    __table_args__ = (Index("idx_club_posts_club_created", "club_id", "created_at"),)

    @property
    def like_count(self) -> int:
        """Number of likes."""
        return len(self.likes)

    def liked_by(self, user_id: uuid_module.UUID) -> bool:
        """Check if a user has liked the post."""
        return any(like.user_id == user_id for like in self.likes)


class PostLike(Base):
    """ORM model for a like on a club post."""

    __tablename__ = "post_likes"

    id: Mapped[uuid_module.UUID] = _uuid_pk()
    post_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("club_posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    post: Mapped["ClubPost"] = relationship("ClubPost", back_populates="likes")

    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_post_likes"),)


class PostComment(Base):
    """ORM model for a comment on a club post."""

    __tablename__ = "post_comments"

    id: Mapped[uuid_module.UUID] = _uuid_pk()
    post_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("club_posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(String(1000), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    post: Mapped["ClubPost"] = relationship("ClubPost", back_populates="comments")
    user: Mapped[User] = relationship(User, lazy="joined")


class Poll(Base):
    """ORM model for a poll in a club.

    Votes are stored per option. A poll past its end_date accepts no votes
    even while is_active is still set.
    """

    __tablename__ = "polls"

    id: Mapped[uuid_module.UUID] = _uuid_pk()
    club_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("clubs.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_by: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    question: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_multiple_choice: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    club: Mapped["Club"] = relationship("Club", back_populates="polls")
    options: Mapped[list["PollOption"]] = relationship(
        "PollOption",
        back_populates="poll",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PollOption.position",
    )

    def option_votes(self) -> list[OptionVotes]:
        """The poll's options with their voters, ready for tallying."""
        return [
            OptionVotes(text=option.text, voters=[vote.user_id for vote in option.votes])
            for option in self.options
        ]

    def __repr__(self) -> str:
        """Return string representation of the poll."""
        return f"<Poll(id={self.id}, question={self.question!r}, active={self.is_active})>"


class PollOption(Base):
    """ORM model for one answer on a poll."""

    __tablename__ = "poll_options"

    id: Mapped[uuid_module.UUID] = _uuid_pk()
    poll_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("polls.id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    text: Mapped[str] = mapped_column(String(200), nullable=False)

    poll: Mapped["Poll"] = relationship("Poll", back_populates="options")
    votes: Mapped[list["PollVote"]] = relationship(
        "PollVote",
        back_populates="option",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class PollVote(Base):
    """ORM model for a user's vote on a poll option."""

    __tablename__ = "poll_votes"

    id: Mapped[uuid_module.UUID] = _uuid_pk()
    option_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("poll_options.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid_module.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    option: Mapped["PollOption"] = relationship("PollOption", back_populates="votes")

    __table_args__ = (UniqueConstraint("option_id", "user_id", name="uq_poll_votes"),)
