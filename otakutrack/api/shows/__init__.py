"""Show catalogue endpoints."""

from otakutrack.api.shows.endpoints import router

__all__ = ["router"]
