"""Pydantic models for API responses."""

from datetime import UTC, datetime
from typing import Annotated, Any, Generic, TypeVar
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field

T = TypeVar("T")


def as_utc(value: datetime) -> datetime:
    """Normalise a datetime to UTC, reading naive values as UTC.

    :param value: Parsed request datetime.
    :returns: A timezone-aware UTC datetime.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# Request datetime that is always timezone-aware
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class Pagination(BaseModel):
    """Pagination details for list responses."""

    page: int = Field(..., description="Current page number")
    limit: int = Field(..., description="Page size")
    total: int = Field(..., description="Total matching items")
    pages: int = Field(..., description="Total number of pages")


class ApiResponse(BaseModel, Generic[T]):
    """Standard success envelope wrapping every response payload."""

    success: bool = Field(True, description="Whether the request succeeded")
    data: T | None = Field(None, description="Response payload")
    message: str | None = Field(None, description="Human readable status message")
    pagination: Pagination | None = Field(None, description="Pagination for list responses")


class ErrorResponse(BaseModel):
    """Standard error response model."""

    success: bool = Field(False, description="Always false for errors")
    message: str = Field(..., description="Error description")
    errors: list[dict[str, Any]] | None = Field(None, description="Validation errors")


class UserSummary(BaseModel):
    """Public view of a user embedded in other resources."""

    id: UUID = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    avatar: str | None = Field(None, description="Avatar URL")


class ShowSummary(BaseModel):
    """Short view of a show embedded in other resources."""

    id: UUID = Field(..., description="Show ID")
    title: str = Field(..., description="Show title")
    poster: str | None = Field(None, description="Poster URL")
    type: str = Field(..., description="Show type")
    status: str = Field(..., description="Airing status")
    episode_count: int = Field(..., description="Number of episodes")
    episode_duration: int = Field(..., description="Episode length in minutes")
    rating_average: float = Field(..., description="Average review rating")
