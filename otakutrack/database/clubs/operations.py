"""Database operations for clubs, their posts and polls.

Permission checks that depend on the caller (membership, club role) live in
the API layer. Operations here raise ValueError for rule violations that do
not depend on who is asking.
"""

from __future__ import annotations

import logging
import uuid as uuid_module
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from otakutrack.clubs.polls import is_poll_open, select_vote_indexes
from otakutrack.database.base import DEFAULT_PAGE_SIZE, Page, paginate, paginate_list
from otakutrack.database.clubs.models import (
    Club,
    ClubMember,
    ClubPost,
    Poll,
    PollOption,
    PollVote,
    PostComment,
    PostLike,
)
from otakutrack.enums import ClubCategory, ClubRole

logger = logging.getLogger(__name__)

# Minimum number of answers on a poll
MIN_POLL_OPTIONS = 2

# Club fields a club admin may change
CLUB_FIELDS = frozenset(
    {
        "name",
        "description",
        "avatar",
        "banner",
        "category",
        "related_show_id",
        "rules",
        "tags",
        "is_private",
        "is_spoiler_free",
        "max_members",
    }
)

# Post fields the author may change
POST_FIELDS = frozenset(
    {"title", "content", "is_spoiler", "spoiler_show_id", "spoiler_episode", "tags"}
)


class ClubSort(StrEnum):
    """Sort orders for club listings."""

    MEMBERS = "members"
    POSTS = "posts"
    NEWEST = "newest"


def _member_count():
    return (
        select(func.count(ClubMember.id))
        .where(ClubMember.club_id == Club.id)
        .correlate(Club)
        .scalar_subquery()
    )


def _post_count():
    return (
        select(func.count(ClubPost.id))
        .where(ClubPost.club_id == Club.id)
        .correlate(Club)
        .scalar_subquery()
    )


def get_club_by_name(session: Session, name: str) -> Club | None:
    """Get a club by its unique name."""
    return session.query(Club).filter(Club.name == name).first()


def get_club_by_id(
    session: Session,
    club_id: uuid_module.UUID,
    include_inactive: bool = False,
) -> Club | None:
    """Get a club by ID.

    :param session: Database session.
    :param club_id: Club ID.
    :param include_inactive: Also return soft-deleted clubs.
    :returns: The club or None if not found.
    """
    query = session.query(Club).filter(Club.id == club_id)
    if not include_inactive:
        query = query.filter(Club.is_active.is_(True))
    return query.first()


def create_club(
    session: Session,
    creator_id: uuid_module.UUID,
    name: str,
    description: str,
    **fields: Any,
) -> Club:
    """Create a club with its creator as club admin.

    :param session: Database session.
    :param creator_id: ID of the creating user.
    :param name: Unique club name.
    :param description: Club description.
    :param fields: Other club fields (see CLUB_FIELDS).
    :returns: The created club.
    :raises ValueError: If the name is taken or an unknown field is given.
    """
    unknown = set(fields) - CLUB_FIELDS
    if unknown:
        raise ValueError(f"Unknown club fields: {sorted(unknown)}")
    if get_club_by_name(session, name) is not None:
        raise ValueError("Club name already exists")

    values = {k: v for k, v in fields.items() if v is not None}
    club = Club(name=name, description=description, created_by=creator_id, **values)
    club.members = [ClubMember(user_id=creator_id, role=ClubRole.ADMIN.value)]
    session.add(club)
    session.flush()
    logger.info(f"Created club: id={club.id}, name={name!r}, creator={creator_id}")
    return club


def update_club(session: Session, club: Club, **fields: Any) -> Club:
    """Update club details.

    :param session: Database session.
    :param club: The club to update.
    :param fields: Values to set; None values are ignored.
    :returns: The updated club.
    :raises ValueError: If a new name is taken or an unknown field is given.
    """
    unknown = set(fields) - CLUB_FIELDS
    if unknown:
        raise ValueError(f"Unknown club fields: {sorted(unknown)}")

    new_name = fields.get("name")
    if new_name and new_name != club.name and get_club_by_name(session, new_name) is not None:
        raise ValueError("Club name already exists")

    for name, value in fields.items():
        if value is not None:
            setattr(club, name, value)

    session.flush()
    logger.info(f"Updated club: id={club.id}, fields={sorted(fields)}")
    return club


def set_club_active(session: Session, club: Club, is_active: bool) -> Club:
    """Activate or soft delete a club."""
    club.is_active = is_active
    session.flush()
    logger.info(f"Set club active: id={club.id}, is_active={is_active}")
    return club


def set_club_approved(session: Session, club: Club, is_approved: bool) -> Club:
    """Approve or reject a club."""
    club.is_approved = is_approved
    session.flush()
    logger.info(f"Set club approval: id={club.id}, is_approved={is_approved}")
    return club


def delete_club(session: Session, club: Club) -> None:
    """Permanently delete a club and everything in it."""
    session.delete(club)
    session.flush()
    logger.info(f"Deleted club: id={club.id}")


def list_clubs(  # noqa: PLR0913
    session: Session,
    category: ClubCategory | None = None,
    search: str | None = None,
    sort: ClubSort = ClubSort.MEMBERS,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    include_inactive: bool = False,
) -> Page[Club]:
    """List clubs.

    :param session: Database session.
    :param category: Filter by category.
    :param search: Case-insensitive match on name or description.
    :param sort: Most members, most posts or newest first.
    :param page: Page number.
    :param limit: Page size.
    :param include_inactive: Also list soft-deleted clubs.
    :returns: A page of clubs.
    """
    query = session.query(Club)
    if not include_inactive:
        query = query.filter(Club.is_active.is_(True))
    if category is not None:
        query = query.filter(Club.category == category.value)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Club.name.ilike(pattern), Club.description.ilike(pattern)))

    if sort == ClubSort.POSTS:
        query = query.order_by(_post_count().desc())
    elif sort == ClubSort.NEWEST:
        query = query.order_by(Club.created_at.desc())
    else:
        query = query.order_by(_member_count().desc())

    return paginate(query, page=page, limit=limit)


def count_clubs(session: Session, active_only: bool = False) -> int:
    """Count clubs, optionally only active ones."""
    query = session.query(Club)
    if active_only:
        query = query.filter(Club.is_active.is_(True))
    return query.count()


def join_club(session: Session, club: Club, user_id: uuid_module.UUID) -> ClubMember:
    """Add a user to a club as a plain member.

    :param session: Database session.
    :param club: The club to join.
    :param user_id: Joining user ID.
    :returns: The new membership.
    :raises ValueError: If the user is already a member or the club is full.
    """
    if club.get_member(user_id) is not None:
        raise ValueError("Already a member of this club")
    if club.is_full:
        raise ValueError("Club is full")

    member = ClubMember(user_id=user_id, role=ClubRole.MEMBER.value)
    club.members.append(member)
    session.flush()
    logger.info(f"Joined club: club_id={club.id}, user_id={user_id}")
    return member


def leave_club(session: Session, club: Club, user_id: uuid_module.UUID) -> None:
    """Remove a user from a club.

    :param session: Database session.
    :param club: The club to leave.
    :param user_id: Leaving user ID.
    :raises ValueError: If the user is not a member or is the club admin.
    """
    member = club.get_member(user_id)
    if member is None:
        raise ValueError("Not a member of this club")
    if member.role == ClubRole.ADMIN:
        raise ValueError("Admin cannot leave club. Transfer ownership first.")

    club.members.remove(member)
    session.flush()
    logger.info(f"Left club: club_id={club.id}, user_id={user_id}")


def get_post(
    session: Session,
    club_id: uuid_module.UUID,
    post_id: uuid_module.UUID,
) -> ClubPost | None:
    """Get a post within a club.

    :param session: Database session.
    :param club_id: Club ID.
    :param post_id: Post ID.
    :returns: The post or None if not found in that club.
    """
    return (
        session.query(ClubPost)
        .filter(ClubPost.id == post_id, ClubPost.club_id == club_id)
        .first()
    )


def list_posts(
    session: Session,
    club: Club,
    hide_spoilers: bool = False,
    page: int = 1,
    limit: int = 10,
) -> Page[ClubPost]:
    """List a club's posts, newest first.

    Spoilers are only hidden in spoiler-free clubs.

    :param session: Database session.
    :param club: The club.
    :param hide_spoilers: Leave out spoiler posts.
    :param page: Page number.
    :param limit: Page size.
    :returns: A page of posts.
    """
    query = session.query(ClubPost).filter(ClubPost.club_id == club.id)
    if hide_spoilers and club.is_spoiler_free:
        query = query.filter(ClubPost.is_spoiler.is_(False))
    return paginate(query.order_by(ClubPost.created_at.desc()), page=page, limit=limit)


def create_post(
    session: Session,
    club: Club,
    author_id: uuid_module.UUID,
    title: str,
    content: str,
    **fields: Any,
) -> ClubPost:
    """Create a post in a club.

    :param session: Database session.
    :param club: The club.
    :param author_id: Author ID.
    :param title: Post title.
    :param content: Post body.
    :param fields: Spoiler flags and tags.
    :returns: The created post.
    """
    values = {k: v for k, v in fields.items() if k in POST_FIELDS and v is not None}
    post = ClubPost(club_id=club.id, author_id=author_id, title=title, content=content, **values)
    session.add(post)
    session.flush()
    logger.info(f"Created club post: id={post.id}, club_id={club.id}, author={author_id}")
    return post


def update_post(session: Session, post: ClubPost, **fields: Any) -> ClubPost:
    """Edit a post.

    :param session: Database session.
    :param post: The post to update.
    :param fields: Values to set; None values are ignored.
    :returns: The updated post.
    :raises ValueError: If an unknown field is given.
    """
    unknown = set(fields) - POST_FIELDS
    if unknown:
        raise ValueError(f"Unknown post fields: {sorted(unknown)}")

    for name, value in fields.items():
        if value is not None:
            setattr(post, name, value)
    session.flush()
    logger.info(f"Updated club post: id={post.id}")
    return post


def delete_post(session: Session, post: ClubPost) -> None:
    """Delete a post with its likes and comments."""
    session.delete(post)
    session.flush()
    logger.info(f"Deleted club post: id={post.id}")


def toggle_post_like(session: Session, post: ClubPost, user_id: uuid_module.UUID) -> bool:
    """Like or unlike a post.

    :param session: Database session.
    :param post: The post.
    :param user_id: Liking user ID.
    :returns: True if the post is now liked by the user.
    """
    existing = next((like for like in post.likes if like.user_id == user_id), None)
    if existing is not None:
        post.likes.remove(existing)
        liked = False
    else:
        post.likes.append(PostLike(user_id=user_id))
        liked = True

    session.flush()
    logger.info(f"Toggled post like: id={post.id}, user_id={user_id}, liked={liked}")
    return liked


def add_comment(
    session: Session,
    post: ClubPost,
    user_id: uuid_module.UUID,
    content: str,
) -> PostComment:
    """Comment on a post."""
    comment = PostComment(user_id=user_id, content=content)
    post.comments.append(comment)
    session.flush()
    logger.info(f"Added comment: id={comment.id}, post_id={post.id}")
    return comment


def get_comment(post: ClubPost, comment_id: uuid_module.UUID) -> PostComment | None:
    """Find a comment on a loaded post."""
    return next((c for c in post.comments if c.id == comment_id), None)


def delete_comment(session: Session, post: ClubPost, comment: PostComment) -> None:
    """Remove a comment from a post."""
    post.comments.remove(comment)
    session.flush()
    logger.info(f"Deleted comment: id={comment.id}, post_id={post.id}")


def count_posts(session: Session) -> int:
    """Count posts across all clubs."""
    return session.query(ClubPost).count()


def get_poll(session: Session, club_id: uuid_module.UUID, poll_id: uuid_module.UUID) -> Poll | None:
    """Get a poll within a club.

    :param session: Database session.
    :param club_id: Club ID.
    :param poll_id: Poll ID.
    :returns: The poll or None if not found in that club.
    """
    return session.query(Poll).filter(Poll.id == poll_id, Poll.club_id == club_id).first()


def list_polls(  # noqa: PLR0913
    session: Session,
    club: Club,
    active_only: bool = False,
    page: int = 1,
    limit: int = 10,
    now: datetime | None = None,
) -> Page[Poll]:
    """List a club's polls, newest first.

    :param session: Database session.
    :param club: The club.
    :param active_only: Only return polls that still accept votes.
    :param page: Page number.
    :param limit: Page size.
    :param now: Current time (defaults to now).
    :returns: A page of polls.
    """
    if now is None:
        now = datetime.now(UTC)

    polls = (
        session.query(Poll)
        .filter(Poll.club_id == club.id)
        .order_by(Poll.created_at.desc())
        .all()
    )
    if active_only:
        polls = [poll for poll in polls if is_poll_open(poll.is_active, poll.end_date, now)]
    return paginate_list(polls, page=page, limit=limit)


def create_poll(  # noqa: PLR0913
    session: Session,
    club: Club,
    creator_id: uuid_module.UUID,
    question: str,
    options: list[str],
    is_multiple_choice: bool = False,
    end_date: datetime | None = None,
) -> Poll:
    """Create a poll in a club.

    :param session: Database session.
    :param club: The club.
    :param creator_id: Creating user ID.
    :param question: Poll question.
    :param options: Answer texts in display order.
    :param is_multiple_choice: Allow several answers per voter.
    :param end_date: Optional closing time.
    :returns: The created poll.
    :raises ValueError: If fewer than two non-blank options are given.
    """
    texts = [text.strip() for text in options if text and text.strip()]
    if len(texts) < MIN_POLL_OPTIONS:
        raise ValueError("Poll must have at least 2 options")

    poll = Poll(
        club_id=club.id,
        created_by=creator_id,
        question=question,
        is_multiple_choice=is_multiple_choice,
        end_date=end_date,
    )
    poll.options = [PollOption(position=i, text=text) for i, text in enumerate(texts)]
    session.add(poll)
    session.flush()
    logger.info(f"Created poll: id={poll.id}, club_id={club.id}, options={len(texts)}")
    return poll


def vote_on_poll(
    session: Session,
    poll: Poll,
    user_id: uuid_module.UUID,
    option_indexes: list[int],
    now: datetime | None = None,
) -> list[int]:
    """Replace a user's votes on a poll.

    Existing votes by the user are removed before the new ones are added.

    :param session: Database session.
    :param poll: The poll.
    :param user_id: Voting user ID.
    :param option_indexes: Chosen option indexes.
    :param now: Current time (defaults to now).
    :returns: The option indexes actually recorded.
    :raises ValueError: If the poll is closed or past its end date.
    """
    if now is None:
        now = datetime.now(UTC)
    if not is_poll_open(poll.is_active, poll.end_date, now):
        raise ValueError("Poll is not active")

    for option in poll.options:
        option.votes = [vote for vote in option.votes if vote.user_id != user_id]

    recorded = select_vote_indexes(option_indexes, len(poll.options), poll.is_multiple_choice)
    for index in recorded:
        poll.options[index].votes.append(PollVote(user_id=user_id))

    session.flush()
    logger.info(f"Recorded poll vote: poll_id={poll.id}, user_id={user_id}, options={recorded}")
    return recorded


def close_poll(session: Session, poll: Poll) -> Poll:
    """Stop a poll from accepting votes."""
    poll.is_active = False
    session.flush()
    logger.info(f"Closed poll: id={poll.id}")
    return poll


def delete_poll(session: Session, poll: Poll) -> None:
    """Delete a poll and its votes."""
    session.delete(poll)
    session.flush()
    logger.info(f"Deleted poll: id={poll.id}")
