"""Review endpoints."""

from otakutrack.api.reviews.endpoints import router

__all__ = ["router"]
