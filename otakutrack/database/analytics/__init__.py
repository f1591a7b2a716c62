"""Database models and operations for user analytics and the activity feed."""

from otakutrack.database.analytics.models import (
    ACTIVITY_KEYS,
    ActivityEvent,
    UserAnalytics,
    empty_activity,
)
from otakutrack.database.analytics.operations import (
    RECENT_ACTIVITY_LIMIT,
    EpisodeRanking,
    GlobalAnalytics,
    SiteTotals,
    active_user_windows,
    count_active_users,
    get_most_watched,
    get_episode_ranking,
    get_global_analytics,
    get_or_create_user_analytics,
    get_site_totals,
    get_top_genres,
    get_user_analytics,
    get_watch_totals,
    list_recent_activity,
    record_activity,
    sync_watchlist_status_counts,
    track_club_activity,
    track_episodes_watched,
    track_review_posted,
    track_show_added,
    watchlist_status_counts,
)

__all__ = [
    # Models
    "ACTIVITY_KEYS",
    "ActivityEvent",
    "UserAnalytics",
    "empty_activity",
    # Operations
    "RECENT_ACTIVITY_LIMIT",
    "EpisodeRanking",
    "GlobalAnalytics",
    "SiteTotals",
    "active_user_windows",
    "count_active_users",
    "get_most_watched",
    "get_episode_ranking",
    "get_global_analytics",
    "get_or_create_user_analytics",
    "get_site_totals",
    "get_top_genres",
    "get_user_analytics",
    "get_watch_totals",
    "list_recent_activity",
    "record_activity",
    "sync_watchlist_status_counts",
    "track_club_activity",
    "track_episodes_watched",
    "track_review_posted",
    "track_show_added",
    "watchlist_status_counts",
]
