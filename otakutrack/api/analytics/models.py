"""Pydantic models for analytics API endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from otakutrack.api.reviews.models import ReviewResponse
from otakutrack.api.watchlist.models import WatchlistItemResponse
from otakutrack.database.shows.models import DEFAULT_EPISODE_DURATION
from otakutrack.enums import ClubActivity


class GenreCount(BaseModel):
    """A genre with how often it appears."""

    genre: str = Field(..., description="Genre name")
    count: int = Field(..., description="Number of watchlist entries")


class WatchedShow(BaseModel):
    """A show with how many watchlists it is on."""

    show_id: UUID = Field(..., description="Show ID")
    title: str = Field(..., description="Show title")
    watch_count: int = Field(..., description="Number of watchlist entries")


class ActivityEventResponse(BaseModel):
    """An entry in the recent activity feed."""

    type: str = Field(..., description="What happened")
    user_id: UUID = Field(..., description="Acting user")
    show_id: UUID | None = Field(None, description="Show involved")
    created_at: datetime = Field(..., description="When it happened")


class UserAnalyticsResponse(BaseModel):
    """Response model for a user's activity counters."""

    user_id: UUID = Field(..., description="User ID")
    episodes_watched: int = Field(..., description="Episodes watched")
    total_watch_minutes: int = Field(..., description="Minutes watched")
    shows_in_watchlist: int = Field(..., description="Shows added to the watchlist")
    watching_shows: int = Field(..., description="Shows being watched")
    completed_shows: int = Field(..., description="Completed shows")
    on_hold_shows: int = Field(..., description="Shows on hold")
    dropped_shows: int = Field(..., description="Dropped shows")
    plan_to_watch_shows: int = Field(..., description="Planned shows")
    reviews_posted: int = Field(..., description="Reviews posted")
    comments_posted: int = Field(..., description="Comments posted")
    club_posts: int = Field(..., description="Club posts")
    club_likes: int = Field(..., description="Club post likes given")
    clubs_joined: int = Field(..., description="Clubs joined")
    poll_votes: int = Field(..., description="Poll votes cast")
    favorite_genres: list[GenreCount] = Field(
        default_factory=list,
        description="Most watched genres, highest first",
    )
    weekly_activity: dict[str, int] = Field(default_factory=dict, description="This week")
    monthly_activity: dict[str, int] = Field(default_factory=dict, description="This month")
    engagement_score: int = Field(..., description="Weighted activity score")
    avg_episodes_per_day: float = Field(..., description="Episodes per day since joining")
    last_activity: datetime | None = Field(None, description="Last tracked activity")


class LeaderboardEntry(BaseModel):
    """A user on the episodes-watched leaderboard."""

    rank: int = Field(..., description="1-based position")
    name: str = Field(..., description="User name")
    episodes_watched: int = Field(..., description="Episodes watched")


class DashboardResponse(BaseModel):
    """Response model for the caller's analytics dashboard."""

    user_analytics: UserAnalyticsResponse = Field(..., description="The caller's counters")
    status_distribution: dict[str, int] = Field(
        default_factory=dict,
        description="Watchlist items per status",
    )
    recent_watchlist: list[WatchlistItemResponse] = Field(
        default_factory=list,
        description="Most recently updated watchlist items",
    )
    recent_reviews: list[ReviewResponse] = Field(
        default_factory=list,
        description="Most recent reviews",
    )
    user_ranking: int = Field(..., description="Rank by episodes watched")
    total_users: int = Field(..., description="Users on the leaderboard")
    top_users: list[LeaderboardEntry] = Field(default_factory=list, description="Leaders")


class PublicAnalyticsResponse(BaseModel):
    """Response model for site-wide counts anyone may see."""

    total_users: int = Field(..., description="Active users")
    total_shows: int = Field(..., description="Active shows")
    total_reviews: int = Field(..., description="Reviews")
    total_clubs: int = Field(..., description="Active clubs")
    most_watched_shows: list[WatchedShow] = Field(default_factory=list, description="Top shows")
    top_genres: list[GenreCount] = Field(default_factory=list, description="Top genres")


class GlobalAnalyticsResponse(PublicAnalyticsResponse):
    """Response model for site-wide analytics for administrators."""

    total_episodes_tracked: int = Field(..., description="Episodes across all watchlists")
    total_watch_minutes: int = Field(..., description="Minutes across all watchlists")
    daily_active_users: int = Field(..., description="Active in the last day")
    weekly_active_users: int = Field(..., description="Active in the last 7 days")
    monthly_active_users: int = Field(..., description="Active in the last 30 days")
    recent_activity: list[ActivityEventResponse] = Field(
        default_factory=list,
        description="Newest activity events",
    )


class TrackEpisodeRequest(BaseModel):
    """Request model for recording a watched episode."""

    show_id: UUID = Field(..., description="Show the episode belongs to")
    episode_number: int | None = Field(None, ge=1, description="Episode number")
    episode_duration: int = Field(
        DEFAULT_EPISODE_DURATION,
        ge=1,
        le=600,
        description="Episode length in minutes",
    )


class TrackEpisodeResponse(BaseModel):
    """Response model after recording a watched episode."""

    episodes_watched: int = Field(..., description="Episodes watched in total")
    total_watch_minutes: int = Field(..., description="Minutes watched in total")


class TrackClubRequest(BaseModel):
    """Request model for recording club participation."""

    activity: ClubActivity = Field(..., description="post, like, join or poll_vote")
