"""API endpoints for show reviews and reactions."""

import logging
import time
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from otakutrack.api.common import (
    bad_request,
    forbidden,
    not_found,
    paginated_response,
    tracking,
    user_summary,
)
from otakutrack.api.dependencies import get_current_user
from otakutrack.api.models import ApiResponse
from otakutrack.api.reviews.models import (
    CreateReviewRequest,
    ReactionCountsResponse,
    ReportReviewRequest,
    ReviewEditResponse,
    ReviewResponse,
    UpdateReviewRequest,
)
from otakutrack.database.analytics import track_review_posted
from otakutrack.database.base import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from otakutrack.database.connection import get_session
from otakutrack.database.reviews import (
    Review,
    ReviewSort,
    create_review,
    delete_review,
    get_review_by_id,
    list_reviews_for_show,
    list_reviews_for_user,
    report_review,
    toggle_reaction,
    update_review,
)
from otakutrack.database.shows import get_show_by_id
from otakutrack.database.users import User
from otakutrack.enums import ReviewReactionKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def review_to_response(review: Review) -> ReviewResponse:
    """Convert a review model to response.

    :param review: The database model.
    :returns: API response model.
    """
    return ReviewResponse(
        id=review.id,
        show_id=review.show_id,
        show_title=review.show.title if review.show is not None else None,
        user=user_summary(review.user) if review.user is not None else None,
        rating=review.rating,
        title=review.title,
        comment=review.comment,
        is_spoiler=review.is_spoiler,
        spoiler_episode=review.spoiler_episode,
        spoiler_season=review.spoiler_season,
        tags=list(review.tags or []),
        likes=review.like_count,
        dislikes=review.dislike_count,
        helpful=review.helpful_count,
        helpful_score=review.helpful_score,
        like_ratio=review.like_ratio,
        is_edited=review.is_edited,
        edit_history=[
            ReviewEditResponse(comment=e.comment, rating=e.rating, edited_at=e.edited_at)
            for e in review.edits
        ],
        is_reported=review.is_reported,
        report_reason=review.report_reason,
        created_at=review.created_at,
    )


def _get_review(session: Session, review_id: UUID) -> Review:
    review = get_review_by_id(session, review_id)
    if review is None:
        raise not_found("Review")
    return review


def _get_owned_review(session: Session, review_id: UUID, user: User) -> Review:
    review = _get_review(session, review_id)
    if review.user_id != user.id:
        logger.warning(f"Review access denied: id={review_id}, user_id={user.id}")
        raise forbidden("Not authorized to modify this review")
    return review


@router.get(
    "/show/{show_id}",
    response_model=ApiResponse[list[ReviewResponse]],
    summary="List reviews for a show",
)
def get_show_reviews(
    show_id: UUID,
    rating: int | None = Query(None, ge=1, le=10, description="Only this rating"),
    sort: ReviewSort = Query(ReviewSort.RATING, description="Sort order"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
) -> ApiResponse[list[ReviewResponse]]:
    """List a show's reviews, highest rated and newest first unless sorted by helpfulness."""
    start = time.perf_counter()
    logger.info(f"List show reviews: show_id={show_id}, rating={rating}, sort={sort}, page={page}")

    with get_session() as session:
        result = list_reviews_for_show(
            session, show_id, rating=rating, sort=sort, page=page, limit=limit
        )
        response = paginated_response(result, review_to_response)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"List show reviews complete: total={result.total}, elapsed={elapsed_ms:.0f}ms")

    return response


@router.get(
    "/user",
    response_model=ApiResponse[list[ReviewResponse]],
    summary="List my reviews",
)
def get_my_reviews(user: User = Depends(get_current_user)) -> ApiResponse[list[ReviewResponse]]:
    """List the caller's reviews, newest first."""
    logger.info(f"List user reviews: user_id={user.id}")
    with get_session() as session:
        results = [review_to_response(r) for r in list_reviews_for_user(session, user.id)]
    return ApiResponse(data=results)


@router.post(
    "",
    response_model=ApiResponse[ReviewResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Post review",
)
def post_review(
    request: CreateReviewRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[ReviewResponse]:
    """Post a review. Each user may review a show once."""
    start = time.perf_counter()
    logger.info(
        f"Post review: user_id={user.id}, show_id={request.show_id}, rating={request.rating}"
    )

    with get_session() as session:
        if get_show_by_id(session, request.show_id) is None:
            raise not_found("Show")
        try:
            review = create_review(session, user_id=user.id, **request.model_dump())
        except ValueError as e:
            raise bad_request(e) from e

        with tracking(session, "review_posted"):
            track_review_posted(session, user.id, request.show_id)

        response = review_to_response(review)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Post review complete: id={response.id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response, message="Review created successfully")


@router.put(
    "/{review_id}",
    response_model=ApiResponse[ReviewResponse],
    summary="Edit review",
)
def edit_review(
    review_id: UUID,
    request: UpdateReviewRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[ReviewResponse]:
    """Edit the caller's review. The previous version is kept in the edit history."""
    start = time.perf_counter()
    fields = request.model_dump(exclude_unset=True)
    logger.info(f"Edit review: id={review_id}, fields={sorted(fields)}")

    with get_session() as session:
        review = _get_owned_review(session, review_id, user)
        try:
            review = update_review(session, review, **fields)
        except ValueError as e:
            raise bad_request(e) from e
        response = review_to_response(review)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Edit review complete: id={review_id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response, message="Review updated successfully")


@router.delete(
    "/{review_id}",
    response_model=ApiResponse[None],
    summary="Delete review",
)
def remove_review(review_id: UUID, user: User = Depends(get_current_user)) -> ApiResponse[None]:
    """Delete the caller's review."""
    start = time.perf_counter()
    logger.info(f"Delete review: id={review_id}, user_id={user.id}")

    with get_session() as session:
        review = _get_owned_review(session, review_id, user)
        delete_review(session, review)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Delete review complete: id={review_id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(message="Review deleted successfully")


@router.post(
    "/{review_id}/report",
    response_model=ApiResponse[None],
    summary="Report review",
)
def report(
    review_id: UUID,
    request: ReportReviewRequest | None = None,
    user: User = Depends(get_current_user),
) -> ApiResponse[None]:
    """Flag a review for moderation."""
    logger.info(f"Report review: id={review_id}, user_id={user.id}")

    with get_session() as session:
        review = _get_review(session, review_id)
        try:
            report_review(session, review, request.reason if request is not None else None)
        except ValueError as e:
            raise bad_request(e) from e

    return ApiResponse(message="Review reported successfully")


@router.post(
    "/{review_id}/{action}",
    response_model=ApiResponse[ReactionCountsResponse],
    summary="React to review",
)
def react(
    review_id: UUID,
    action: ReviewReactionKind,
    user: User = Depends(get_current_user),
) -> ApiResponse[ReactionCountsResponse]:
    """Toggle a like, dislike or helpful vote. Like and dislike exclude each other."""
    start = time.perf_counter()
    logger.info(f"React to review: id={review_id}, action={action}, user_id={user.id}")

    with get_session() as session:
        review = _get_review(session, review_id)
        counts = toggle_reaction(session, review, user.id, action)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"React to review complete: id={review_id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=ReactionCountsResponse(**counts))
