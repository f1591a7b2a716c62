"""Database models and operations for show reviews."""

from otakutrack.database.reviews.models import Review, ReviewEdit, ReviewReaction, like_ratio
from otakutrack.database.reviews.operations import (
    ReviewSort,
    count_reviews,
    create_review,
    delete_review,
    get_review_by_id,
    get_review_for_show,
    list_reported_reviews,
    list_reviews_for_show,
    list_reviews_for_user,
    recompute_show_rating,
    report_review,
    toggle_reaction,
    update_review,
)

__all__ = [
    # Models
    "Review",
    "ReviewEdit",
    "ReviewReaction",
    "like_ratio",
    # Operations
    "ReviewSort",
    "count_reviews",
    "create_review",
    "delete_review",
    "get_review_by_id",
    "get_review_for_show",
    "list_reported_reviews",
    "list_reviews_for_show",
    "list_reviews_for_user",
    "recompute_show_rating",
    "report_review",
    "toggle_reaction",
    "update_review",
]
