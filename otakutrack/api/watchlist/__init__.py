"""Watchlist endpoints."""

from otakutrack.api.watchlist.endpoints import router

__all__ = ["router"]
