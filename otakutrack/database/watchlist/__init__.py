"""Database models and operations for user watchlists."""

from otakutrack.database.watchlist.models import WatchlistItem
from otakutrack.database.watchlist.operations import (
    ProgressResult,
    WatchlistStats,
    add_to_watchlist,
    get_watched_shows,
    get_watchlist_item,
    get_watchlist_item_for_show,
    get_watchlist_show_ids,
    get_watchlist_stats,
    list_watchlist,
    remove_from_watchlist,
    update_progress,
    update_watchlist_item,
)

__all__ = [
    # Models
    "WatchlistItem",
    # Operations
    "ProgressResult",
    "WatchlistStats",
    "add_to_watchlist",
    "get_watched_shows",
    "get_watchlist_item",
    "get_watchlist_item_for_show",
    "get_watchlist_show_ids",
    "get_watchlist_stats",
    "list_watchlist",
    "remove_from_watchlist",
    "update_progress",
    "update_watchlist_item",
]
