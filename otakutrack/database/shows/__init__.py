"""Database models and operations for the show catalogue."""

from otakutrack.database.shows.models import DEFAULT_EPISODE_DURATION, Episode, Show, StreamingLink
from otakutrack.database.shows.operations import (
    TRENDING_MIN_RATING,
    ShowSort,
    apply_rating,
    average_rating,
    count_show_genres,
    count_shows,
    create_show,
    deactivate_show,
    get_candidate_shows,
    get_popular_shows,
    get_seasonal_shows,
    get_show_by_id,
    get_shows_by_genre,
    get_similar_shows,
    get_trending_shows,
    list_shows,
    update_show,
)

__all__ = [
    # Models
    "DEFAULT_EPISODE_DURATION",
    "Episode",
    "Show",
    "StreamingLink",
    # Operations
    "TRENDING_MIN_RATING",
    "ShowSort",
    "apply_rating",
    "average_rating",
    "count_show_genres",
    "count_shows",
    "create_show",
    "deactivate_show",
    "get_candidate_shows",
    "get_popular_shows",
    "get_seasonal_shows",
    "get_show_by_id",
    "get_shows_by_genre",
    "get_similar_shows",
    "get_trending_shows",
    "list_shows",
    "update_show",
]
