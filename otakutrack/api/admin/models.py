"""Pydantic models for admin API endpoints."""

from pydantic import BaseModel, Field

from otakutrack.enums import UserRole


class UpdateRoleRequest(BaseModel):
    """Request model for changing a user's role."""

    role: UserRole = Field(..., description="New site role")


class UpdateStatusRequest(BaseModel):
    """Request model for activating or deactivating a user or club."""

    is_active: bool = Field(..., description="New active flag")


class TotalActive(BaseModel):
    """A total with how many of them are active."""

    total: int = Field(..., description="All records")
    active: int = Field(..., description="Active records")


class UserCounts(TotalActive):
    """User counts for the admin dashboard."""

    new: int = Field(..., description="Registered in the last 30 days")


class ReviewCounts(BaseModel):
    """Review counts for the admin dashboard."""

    total: int = Field(..., description="All reviews")
    flagged: int = Field(..., description="Reviews awaiting moderation")


class GenreCount(BaseModel):
    """A genre with how many shows carry it."""

    genre: str = Field(..., description="Genre name")
    count: int = Field(..., description="Number of shows")


class AdminStatsResponse(BaseModel):
    """Response model for the admin dashboard."""

    users: UserCounts = Field(..., description="User counts")
    shows: TotalActive = Field(..., description="Show counts")
    clubs: TotalActive = Field(..., description="Club counts")
    reviews: ReviewCounts = Field(..., description="Review counts")
    top_genres: list[GenreCount] = Field(default_factory=list, description="Most common genres")
