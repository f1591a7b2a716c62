"""API endpoints for user and site analytics."""

import logging
import time
from dataclasses import asdict
from datetime import UTC, datetime
from uuid import UUID

from fastapi import APIRouter, Depends

from otakutrack.api.analytics.models import (
    ActivityEventResponse,
    DashboardResponse,
    GenreCount,
    GlobalAnalyticsResponse,
    LeaderboardEntry,
    PublicAnalyticsResponse,
    TrackClubRequest,
    TrackEpisodeRequest,
    TrackEpisodeResponse,
    UserAnalyticsResponse,
)
from otakutrack.api.common import forbidden, not_found
from otakutrack.api.dependencies import get_current_user, require_admin
from otakutrack.api.models import ApiResponse
from otakutrack.api.reviews.endpoints import review_to_response
from otakutrack.api.watchlist.endpoints import item_to_response
from otakutrack.database.analytics import (
    UserAnalytics,
    get_episode_ranking,
    get_global_analytics,
    get_or_create_user_analytics,
    get_site_totals,
    sync_watchlist_status_counts,
    track_club_activity,
    track_episodes_watched,
    watchlist_status_counts,
)
from otakutrack.database.connection import get_session
from otakutrack.database.reviews import list_reviews_for_user
from otakutrack.database.shows import get_show_by_id
from otakutrack.database.users import User, get_user_by_id
from otakutrack.database.watchlist import list_watchlist

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["Analytics"])

# Recent items shown on the dashboard
DASHBOARD_RECENT_LIMIT = 5


def _analytics_to_response(
    analytics: UserAnalytics,
    now: datetime | None = None,
) -> UserAnalyticsResponse:
    """Convert a user analytics model to response.

    :param analytics: The database model.
    :param now: Current time for the daily average (defaults to now).
    :returns: API response model.
    """
    return UserAnalyticsResponse(
        user_id=analytics.user_id,
        episodes_watched=analytics.episodes_watched,
        total_watch_minutes=analytics.total_watch_minutes,
        shows_in_watchlist=analytics.shows_in_watchlist,
        watching_shows=analytics.watching_shows,
        completed_shows=analytics.completed_shows,
        on_hold_shows=analytics.on_hold_shows,
        dropped_shows=analytics.dropped_shows,
        plan_to_watch_shows=analytics.plan_to_watch_shows,
        reviews_posted=analytics.reviews_posted,
        comments_posted=analytics.comments_posted,
        club_posts=analytics.club_posts,
        club_likes=analytics.club_likes,
        clubs_joined=analytics.clubs_joined,
        poll_votes=analytics.poll_votes,
        favorite_genres=[
            GenreCount(genre=genre, count=count) for genre, count in analytics.top_genres()
        ],
        weekly_activity=dict(analytics.weekly_activity or {}),
        monthly_activity=dict(analytics.monthly_activity or {}),
        engagement_score=analytics.engagement_score,
        avg_episodes_per_day=analytics.avg_episodes_per_day(now),
        last_activity=analytics.last_activity,
    )


@router.get(
    "/dashboard",
    response_model=ApiResponse[DashboardResponse],
    summary="Analytics dashboard",
)
def get_dashboard(user: User = Depends(get_current_user)) -> ApiResponse[DashboardResponse]:
    """Get the caller's analytics dashboard.

    The per-status show counters are refreshed from the watchlist rows before
    they are returned, so they never drift from the watchlist itself.
    """
    start = time.perf_counter()
    logger.info(f"Get analytics dashboard: user_id={user.id}")

    with get_session() as session:
        analytics = sync_watchlist_status_counts(session, user.id)
        recent_watchlist = list_watchlist(session, user.id)[:DASHBOARD_RECENT_LIMIT]
        recent_reviews = list_reviews_for_user(session, user.id)[:DASHBOARD_RECENT_LIMIT]
        ranking = get_episode_ranking(session, user.id)
        response = DashboardResponse(
            user_analytics=_analytics_to_response(analytics),
            status_distribution=watchlist_status_counts(session, user.id),
            recent_watchlist=[item_to_response(item) for item in recent_watchlist],
            recent_reviews=[review_to_response(review) for review in recent_reviews],
            user_ranking=ranking.rank,
            total_users=ranking.total_users,
            top_users=[LeaderboardEntry(**entry) for entry in ranking.top_users],
        )

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Get analytics dashboard complete: rank={response.user_ranking}/"
        f"{response.total_users}, elapsed={elapsed_ms:.0f}ms"
    )

    return ApiResponse(data=response)


@router.get(
    "/public",
    response_model=ApiResponse[PublicAnalyticsResponse],
    summary="Public analytics",
)
def get_public_analytics() -> ApiResponse[PublicAnalyticsResponse]:
    """Get site-wide totals, top genres and the most watched shows."""
    start = time.perf_counter()
    logger.info("Get public analytics")

    with get_session() as session:
        response = PublicAnalyticsResponse(**asdict(get_site_totals(session)))

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Get public analytics complete: elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response)


@router.get(
    "/global",
    response_model=ApiResponse[GlobalAnalyticsResponse],
    summary="Global analytics",
)
def get_global(_admin: User = Depends(require_admin)) -> ApiResponse[GlobalAnalyticsResponse]:
    """Get site-wide analytics (admins only), computed from the live tables."""
    start = time.perf_counter()
    logger.info("Get global analytics")

    with get_session() as session:
        result = get_global_analytics(session)
        recent = [
            ActivityEventResponse(
                type=event.type,
                user_id=event.user_id,
                show_id=event.show_id,
                created_at=event.created_at,
            )
            for event in result.recent_activity
        ]
        totals = {k: v for k, v in vars(result).items() if k != "recent_activity"}
        response = GlobalAnalyticsResponse(**totals, recent_activity=recent)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Get global analytics complete: users={response.total_users}, "
        f"dau={response.daily_active_users}, elapsed={elapsed_ms:.0f}ms"
    )

    return ApiResponse(data=response)


@router.post(
    "/track-episode",
    response_model=ApiResponse[TrackEpisodeResponse],
    summary="Track episode watched",
)
def track_episode(
    request: TrackEpisodeRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[TrackEpisodeResponse]:
    """Record that the caller watched an episode."""
    logger.info(
        f"Track episode: show_id={request.show_id}, episode={request.episode_number}, "
        f"user_id={user.id}"
    )

    with get_session() as session:
        if get_show_by_id(session, request.show_id) is None:
            raise not_found("Show")
        analytics = track_episodes_watched(
            session,
            user.id,
            request.show_id,
            episode_duration=request.episode_duration,
        )
        response = TrackEpisodeResponse(
            episodes_watched=analytics.episodes_watched,
            total_watch_minutes=analytics.total_watch_minutes,
        )

    return ApiResponse(data=response, message="Episode tracked successfully")


@router.post(
    "/track-club",
    response_model=ApiResponse[None],
    summary="Track club activity",
)
def track_club(
    request: TrackClubRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[None]:
    """Record club participation by the caller."""
    logger.info(f"Track club activity: activity={request.activity}, user_id={user.id}")
    with get_session() as session:
        track_club_activity(session, user.id, request.activity)
    return ApiResponse(message="Club activity tracked successfully")


@router.get(
    "/{user_id}",
    response_model=ApiResponse[UserAnalyticsResponse],
    summary="Get user analytics",
)
def get_analytics_for_user(
    user_id: UUID,
    user: User = Depends(get_current_user),
) -> ApiResponse[UserAnalyticsResponse]:
    """Get a user's analytics (the user themselves or an admin)."""
    logger.info(f"Get user analytics: user_id={user_id}, caller={user.id}")

    if user_id != user.id and not user.is_admin:
        raise forbidden("Not authorized to view these analytics")

    with get_session() as session:
        if get_user_by_id(session, user_id) is None:
            raise not_found("User")
        analytics = get_or_create_user_analytics(session, user_id)
        response = _analytics_to_response(analytics, datetime.now(UTC))

    return ApiResponse(data=response)
