"""Pydantic models for review endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from otakutrack.api.models import UserSummary


class ReviewEditResponse(BaseModel):
    """A previous version of a review."""

    comment: str = Field(..., description="Comment before the edit")
    rating: int = Field(..., description="Rating before the edit")
    edited_at: datetime = Field(..., description="When the edit happened")


class ReviewResponse(BaseModel):
    """Response model for a review."""

    id: UUID = Field(..., description="Review ID")
    show_id: UUID = Field(..., description="Reviewed show ID")
    show_title: str | None = Field(None, description="Reviewed show title")
    user: UserSummary | None = Field(None, description="Review author")
    rating: int = Field(..., description="Score from 1 to 10")
    title: str | None = Field(None, description="Headline")
    comment: str = Field(..., description="Review text")
    is_spoiler: bool = Field(..., description="Contains spoilers")
    spoiler_episode: int | None = Field(None, description="Episode the spoilers relate to")
    spoiler_season: int | None = Field(None, description="Season the spoilers relate to")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    likes: int = Field(..., description="Like count")
    dislikes: int = Field(..., description="Dislike count")
    helpful: int = Field(..., description="Helpful vote count")
    helpful_score: int = Field(..., description="Likes minus dislikes")
    like_ratio: int = Field(..., description="Percentage of reactions that are likes")
    is_edited: bool = Field(..., description="Edited after posting")
    edit_history: list[ReviewEditResponse] = Field(
        default_factory=list,
        description="Previous versions",
    )
    is_reported: bool = Field(..., description="Flagged for moderation")
    report_reason: str | None = Field(None, description="Why it was flagged")
    created_at: datetime | None = Field(None, description="When the review was posted")


class ReactionCountsResponse(BaseModel):
    """Reaction counts after a toggle."""

    likes: int = Field(..., description="Like count")
    dislikes: int = Field(..., description="Dislike count")
    helpful: int = Field(..., description="Helpful vote count")


class CreateReviewRequest(BaseModel):
    """Request model for posting a review."""

    show_id: UUID = Field(..., description="Show being reviewed")
    rating: int = Field(..., ge=1, le=10, description="Score from 1 to 10")
    comment: str = Field(..., min_length=1, max_length=2000, description="Review text")
    title: str | None = Field(None, max_length=100, description="Headline")
    is_spoiler: bool = Field(False, description="Contains spoilers")
    spoiler_episode: int | None = Field(None, ge=1, description="Episode the spoilers relate to")
    spoiler_season: int | None = Field(None, ge=1, description="Season the spoilers relate to")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")


class UpdateReviewRequest(BaseModel):
    """Request model for editing a review."""

    rating: int | None = Field(None, ge=1, le=10, description="Score from 1 to 10")
    comment: str | None = Field(None, min_length=1, max_length=2000, description="Review text")
    title: str | None = Field(None, max_length=100, description="Headline")
    is_spoiler: bool | None = Field(None, description="Contains spoilers")
    spoiler_episode: int | None = Field(None, ge=1, description="Spoiler episode")
    spoiler_season: int | None = Field(None, ge=1, description="Spoiler season")
    tags: list[str] | None = Field(None, description="Free-form tags")


class ReportReviewRequest(BaseModel):
    """Request model for reporting a review."""

    reason: str | None = Field(None, max_length=500, description="Why the review is reported")
