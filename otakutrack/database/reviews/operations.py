"""Database operations for show reviews."""

from __future__ import annotations

import logging
import uuid as uuid_module
from enum import StrEnum
from typing import Any

from sqlalchemy.orm import Session

from otakutrack.database.base import DEFAULT_PAGE_SIZE, Page, paginate, paginate_list
from otakutrack.database.reviews.models import Review, ReviewEdit, ReviewReaction
from otakutrack.database.shows.models import Show
from otakutrack.database.shows.operations import apply_rating
from otakutrack.enums import ReviewReactionKind

logger = logging.getLogger(__name__)

# Fields the owner may change
UPDATABLE_FIELDS = frozenset(
    {"rating", "comment", "title", "is_spoiler", "spoiler_episode", "spoiler_season", "tags"}
)


class ReviewSort(StrEnum):
    """Sort orders for a show's reviews."""

    RATING = "rating"
    HELPFUL = "helpful"


def recompute_show_rating(session: Session, show_id: uuid_module.UUID) -> Show | None:
    """Refresh a show's rating average and count from its reviews.

    :param session: Database session.
    :param show_id: Show ID.
    :returns: The updated show or None if not found.
    """
    show = session.query(Show).filter(Show.id == show_id).first()
    if show is None:
        return None

    rows = session.query(Review.rating).filter(Review.show_id == show_id).all()
    ratings = [row[0] for row in rows]
    apply_rating(show, ratings)
    session.flush()
    logger.info(
        f"Recomputed show rating: show_id={show_id}, "
        f"average={show.rating_average}, count={show.rating_count}"
    )
    return show


def get_review_by_id(session: Session, review_id: uuid_module.UUID) -> Review | None:
    """Get a review by ID.

    :param session: Database session.
    :param review_id: Review ID.
    :returns: The review or None if not found.
    """
    return session.query(Review).filter(Review.id == review_id).first()


def get_review_for_show(
    session: Session,
    user_id: uuid_module.UUID,
    show_id: uuid_module.UUID,
) -> Review | None:
    """Get a user's review of a show, if any."""
    return (
        session.query(Review)
        .filter(Review.user_id == user_id, Review.show_id == show_id)
        .first()
    )


def create_review(  # noqa: PLR0913
    session: Session,
    user_id: uuid_module.UUID,
    show_id: uuid_module.UUID,
    rating: int,
    comment: str,
    title: str | None = None,
    is_spoiler: bool = False,
    spoiler_episode: int | None = None,
    spoiler_season: int | None = None,
    tags: list[str] | None = None,
) -> Review:
    """Create a review and refresh the show's rating.

    :param session: Database session.
    :param user_id: Author ID.
    :param show_id: Reviewed show ID.
    :param rating: Score from 1 to 10.
    :param comment: Review text.
    :param title: Optional headline.
    :param is_spoiler: Whether the review contains spoilers.
    :param spoiler_episode: Episode the spoilers relate to.
    :param spoiler_season: Season the spoilers relate to.
    :param tags: Free-form tags.
    :returns: The created review.
    :raises ValueError: If the user has already reviewed the show.
    """
    if get_review_for_show(session, user_id, show_id) is not None:
        raise ValueError("You have already reviewed this show")

    review = Review(
        user_id=user_id,
        show_id=show_id,
        rating=rating,
        comment=comment,
        title=title,
        is_spoiler=is_spoiler,
        spoiler_episode=spoiler_episode,
        spoiler_season=spoiler_season,
        tags=tags or [],
    )
    session.add(review)
    session.flush()
    recompute_show_rating(session, show_id)
    logger.info(f"Created review: id={review.id}, show_id={show_id}, rating={rating}")
    return review


def update_review(session: Session, review: Review, **fields: Any) -> Review:
    """Update a review, keeping the previous comment and rating as history.

    :param session: Database session.
    :param review: The review to update.
    :param fields: Values to set; None values are ignored.
    :returns: The updated review.
    :raises ValueError: If an unknown field is given.
    """
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update fields: {sorted(unknown)}")

    review.edits.append(ReviewEdit(comment=review.comment, rating=review.rating))
    for name, value in fields.items():
        if value is not None:
            setattr(review, name, value)
    review.is_edited = True

    session.flush()
    recompute_show_rating(session, review.show_id)
    logger.info(f"Updated review: id={review.id}, edits={len(review.edits)}")
    return review


def delete_review(session: Session, review: Review) -> None:
    """Delete a review and refresh the show's rating.

    :param session: Database session.
    :param review: The review to delete.
    """
    show_id = review.show_id
    session.delete(review)
    session.flush()
    recompute_show_rating(session, show_id)
    logger.info(f"Deleted review: id={review.id}, show_id={show_id}")


def list_reviews_for_show(  # noqa: PLR0913
    session: Session,
    show_id: uuid_module.UUID,
    rating: int | None = None,
    sort: ReviewSort = ReviewSort.RATING,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> Page[Review]:
    """List a show's reviews.

    :param session: Database session.
    :param show_id: Show ID.
    :param rating: Only return reviews with exactly this rating.
    :param sort: RATING (highest then newest) or HELPFUL (most helpful, fewest
        dislikes).
    :param page: Page number.
    :param limit: Page size.
    :returns: A page of reviews.
    """
    query = session.query(Review).filter(Review.show_id == show_id)
    if rating is not None:
        query = query.filter(Review.rating == rating)

    if sort == ReviewSort.HELPFUL:
        reviews = sorted(query.all(), key=lambda r: (-r.helpful_count, r.dislike_count))
        return paginate_list(reviews, page=page, limit=limit)

    query = query.order_by(Review.rating.desc(), Review.created_at.desc())
    return paginate(query, page=page, limit=limit)


def list_reviews_for_user(session: Session, user_id: uuid_module.UUID) -> list[Review]:
    """List a user's reviews, newest first."""
    return (
        session.query(Review)
        .filter(Review.user_id == user_id)
        .order_by(Review.created_at.desc())
        .all()
    )


def toggle_reaction(
    session: Session,
    review: Review,
    user_id: uuid_module.UUID,
    kind: ReviewReactionKind,
) -> dict[str, int]:
    """Toggle a user's reaction on a review.

    Liking removes the user's dislike and vice versa. Helpful votes are
    independent.

    :param session: Database session.
    :param review: The review.
    :param user_id: Reacting user ID.
    :param kind: The reaction to toggle.
    :returns: The resulting like, dislike and helpful counts.
    """
    opposite = {
        ReviewReactionKind.LIKE: ReviewReactionKind.DISLIKE,
        ReviewReactionKind.DISLIKE: ReviewReactionKind.LIKE,
    }.get(kind)

    mine = {r.kind: r for r in review.reactions if r.user_id == user_id}
    if opposite is not None and opposite in mine:
        review.reactions.remove(mine[opposite])
    if kind in mine:
        review.reactions.remove(mine[kind])
    else:
        review.reactions.append(ReviewReaction(user_id=user_id, kind=kind.value))

    session.flush()
    logger.info(f"Toggled review reaction: id={review.id}, kind={kind}, user_id={user_id}")
    return {
        "likes": review.like_count,
        "dislikes": review.dislike_count,
        "helpful": review.helpful_count,
    }


def report_review(session: Session, review: Review, reason: str | None) -> Review:
    """Flag a review for moderation.

    :param session: Database session.
    :param review: The review to report.
    :param reason: Why it was reported.
    :returns: The reported review.
    :raises ValueError: If the review is already reported.
    """
    if review.is_reported:
        raise ValueError("Review already reported")

    review.is_reported = True
    review.report_reason = reason
    session.flush()
    logger.info(f"Reported review: id={review.id}")
    return review


def list_reported_reviews(
    session: Session,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> Page[Review]:
    """List flagged reviews, newest first."""
    query = (
        session.query(Review)
        .filter(Review.is_reported.is_(True))
        .order_by(Review.created_at.desc())
    )
    return paginate(query, page=page, limit=limit)


def count_reviews(session: Session, reported_only: bool = False) -> int:
    """Count reviews, optionally only flagged ones."""
    query = session.query(Review)
    if reported_only:
        query = query.filter(Review.is_reported.is_(True))
    return query.count()
