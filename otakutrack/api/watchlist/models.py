"""Pydantic models for watchlist endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from otakutrack.api.models import ShowSummary, UtcDatetime
from otakutrack.enums import WatchStatus


class WatchlistItemResponse(BaseModel):
    """Response model for a watchlist item."""

    id: UUID = Field(..., description="Watchlist item ID")
    show_id: UUID = Field(..., description="Show ID")
    show: ShowSummary | None = Field(None, description="The show being tracked")
    status: str = Field(..., description="Watch status")
    current_episode: int = Field(..., description="Episodes watched")
    total_episodes: int = Field(..., description="Known episode total")
    rewatch_count: int = Field(..., description="Times rewatched")
    completion_percentage: int = Field(..., description="Percentage of episodes watched")
    rating: float | None = Field(None, description="The user's own rating")
    notes: str = Field("", description="Private notes")
    start_date: datetime | None = Field(None, description="When watching started")
    finish_date: datetime | None = Field(None, description="When the show was completed")
    last_watched: datetime | None = Field(None, description="Last progress update")
    time_spent_days: int = Field(..., description="Days between start and finish")
    is_private: bool = Field(..., description="Hidden from other users")
    tags: list[str] = Field(default_factory=list, description="Personal tags")
    created_at: datetime | None = Field(None, description="When the item was added")


class StatusCount(BaseModel):
    """Item and episode totals for one status."""

    count: int = Field(..., description="Items with this status")
    total_episodes: int = Field(..., description="Episodes watched across those items")


class WatchlistStatsResponse(BaseModel):
    """Response model for watchlist statistics."""

    total_shows: int = Field(..., description="Items on the watchlist")
    completed_shows: int = Field(..., description="Completed items")
    completion_rate: int = Field(..., description="Percentage of items completed")
    by_status: dict[str, StatusCount] = Field(
        default_factory=dict,
        description="Totals per watch status",
    )


class AddToWatchlistRequest(BaseModel):
    """Request model for adding a show to the watchlist."""

    show_id: UUID = Field(..., description="Show to add")
    status: WatchStatus = Field(WatchStatus.PLAN_TO_WATCH, description="Initial status")
    notes: str = Field("", max_length=500, description="Private notes")


class UpdateWatchlistItemRequest(BaseModel):
    """Request model for a general watchlist update.

    Status is taken as given here; progress updates derive it instead.
    """

    status: WatchStatus | None = Field(None, description="Watch status")
    current_episode: int | None = Field(None, ge=0, description="Episodes watched")
    rewatch_count: int | None = Field(None, ge=0, description="Times rewatched")
    rating: float | None = Field(None, ge=1, le=10, description="The user's own rating")
    notes: str | None = Field(None, max_length=500, description="Private notes")
    start_date: UtcDatetime | None = Field(None, description="When watching started")
    finish_date: UtcDatetime | None = Field(None, description="When the show was completed")
    is_private: bool | None = Field(None, description="Hide from other users")
    tags: list[str] | None = Field(None, description="Personal tags")


class UpdateProgressRequest(BaseModel):
    """Request model for recording episode progress."""

    current_episode: int | None = Field(None, ge=0, description="Episode reached")
    rewatch_count: int | None = Field(None, ge=0, description="Times rewatched")
