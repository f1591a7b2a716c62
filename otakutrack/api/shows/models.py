"""Pydantic models for show catalogue endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from otakutrack.api.models import UtcDatetime
from otakutrack.database.shows import DEFAULT_EPISODE_DURATION
from otakutrack.enums import (
    AgeRating,
    AiringSeason,
    Genre,
    ShowStatus,
    ShowType,
    SourceMaterial,
    StreamingPlatform,
)


class EpisodeResponse(BaseModel):
    """Response model for an episode."""

    id: UUID = Field(..., description="Episode ID")
    number: int = Field(..., description="Episode number")
    title: str | None = Field(None, description="Episode title")
    description: str | None = Field(None, description="Episode synopsis")
    duration: int = Field(..., description="Length in minutes")
    air_date: datetime | None = Field(None, description="When the episode aired")
    thumbnail: str | None = Field(None, description="Thumbnail URL")


class StreamingLinkResponse(BaseModel):
    """Response model for a streaming link."""

    platform: str = Field(..., description="Streaming platform")
    url: str = Field(..., description="Link to the show on the platform")
    region: str = Field(..., description="Region the link is available in")


class ShowResponse(BaseModel):
    """Response model for a show."""

    id: UUID = Field(..., description="Show ID")
    title: str = Field(..., description="Title")
    original_title: str | None = Field(None, description="Original language title")
    description: str = Field(..., description="Synopsis")
    type: str = Field(..., description="Release format")
    status: str = Field(..., description="Airing status")
    genres: list[str] = Field(default_factory=list, description="Genres")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    season: str | None = Field(None, description="Broadcast season")
    year: int | None = Field(None, description="Broadcast year")
    rating_average: float = Field(..., description="Average review rating")
    rating_count: int = Field(..., description="Number of reviews")
    poster: str | None = Field(None, description="Poster URL")
    banner: str | None = Field(None, description="Banner URL")
    trailer: str | None = Field(None, description="Trailer URL")
    studio: str | None = Field(None, description="Animation studio")
    source: str | None = Field(None, description="Source material")
    age_rating: str = Field(..., description="Age rating")
    episode_duration: int = Field(..., description="Typical episode length in minutes")
    episode_count: int = Field(..., description="Number of known episodes")
    is_popular: bool = Field(..., description="Featured as popular")
    is_recommended: bool = Field(..., description="Featured as recommended")
    episodes: list[EpisodeResponse] = Field(default_factory=list, description="Episodes")
    streaming_links: list[StreamingLinkResponse] = Field(
        default_factory=list,
        description="Where to stream the show",
    )
    created_at: datetime | None = Field(None, description="When the show was added")


class EpisodeRequest(BaseModel):
    """Request model for an episode."""

    number: int = Field(..., ge=1, description="Episode number")
    title: str | None = Field(None, max_length=200, description="Episode title")
    description: str | None = Field(None, description="Episode synopsis")
    duration: int = Field(DEFAULT_EPISODE_DURATION, ge=1, description="Length in minutes")
    air_date: UtcDatetime | None = Field(None, description="When the episode aired")
    thumbnail: str | None = Field(None, max_length=500, description="Thumbnail URL")


class StreamingLinkRequest(BaseModel):
    """Request model for a streaming link."""

    platform: StreamingPlatform = Field(..., description="Streaming platform")
    url: str = Field(..., min_length=1, max_length=500, description="Link to the show")
    region: str = Field("Global", max_length=30, description="Availability region")


class CreateShowRequest(BaseModel):
    """Request model for adding a show to the catalogue."""

    title: str = Field(..., min_length=1, max_length=200, description="Title")
    original_title: str | None = Field(None, max_length=200, description="Original title")
    description: str = Field(..., min_length=1, max_length=2000, description="Synopsis")
    type: ShowType = Field(ShowType.TV, description="Release format")
    status: ShowStatus = Field(ShowStatus.ONGOING, description="Airing status")
    genres: list[Genre] = Field(default_factory=list, description="Genres")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    season: AiringSeason | None = Field(None, description="Broadcast season")
    year: int | None = Field(None, ge=1900, le=2100, description="Broadcast year")
    poster: str | None = Field(None, max_length=500, description="Poster URL")
    banner: str | None = Field(None, max_length=500, description="Banner URL")
    trailer: str | None = Field(None, max_length=500, description="Trailer URL")
    studio: str | None = Field(None, max_length=100, description="Animation studio")
    source: SourceMaterial | None = Field(None, description="Source material")
    age_rating: AgeRating = Field(AgeRating.UNKNOWN, description="Age rating")
    episode_duration: int = Field(
        DEFAULT_EPISODE_DURATION,
        ge=1,
        description="Typical episode length in minutes",
    )
    is_popular: bool = Field(False, description="Feature as popular")
    is_recommended: bool = Field(False, description="Feature as recommended")
    episodes: list[EpisodeRequest] = Field(default_factory=list, description="Episodes")
    streaming_links: list[StreamingLinkRequest] = Field(
        default_factory=list,
        description="Where to stream the show",
    )


class UpdateShowRequest(BaseModel):
    """Request model for updating a show. Only provided fields are changed."""

    title: str | None = Field(None, min_length=1, max_length=200, description="Title")
    original_title: str | None = Field(None, max_length=200, description="Original title")
    description: str | None = Field(None, min_length=1, max_length=2000, description="Synopsis")
    type: ShowType | None = Field(None, description="Release format")
    status: ShowStatus | None = Field(None, description="Airing status")
    genres: list[Genre] | None = Field(None, description="Genres")
    tags: list[str] | None = Field(None, description="Free-form tags")
    season: AiringSeason | None = Field(None, description="Broadcast season")
    year: int | None = Field(None, ge=1900, le=2100, description="Broadcast year")
    poster: str | None = Field(None, max_length=500, description="Poster URL")
    banner: str | None = Field(None, max_length=500, description="Banner URL")
    trailer: str | None = Field(None, max_length=500, description="Trailer URL")
    studio: str | None = Field(None, max_length=100, description="Animation studio")
    source: SourceMaterial | None = Field(None, description="Source material")
    age_rating: AgeRating | None = Field(None, description="Age rating")
    episode_duration: int | None = Field(None, ge=1, description="Episode length in minutes")
    is_popular: bool | None = Field(None, description="Feature as popular")
    is_recommended: bool | None = Field(None, description="Feature as recommended")
    episodes: list[EpisodeRequest] | None = Field(None, description="Replacement episodes")
    streaming_links: list[StreamingLinkRequest] | None = Field(
        None,
        description="Replacement streaming links",
    )
