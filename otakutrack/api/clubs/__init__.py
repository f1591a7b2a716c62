"""Club, post and poll endpoints."""

from otakutrack.api.clubs.endpoints import router

__all__ = ["router"]
