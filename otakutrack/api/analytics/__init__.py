"""User and site analytics endpoints."""

from otakutrack.api.analytics.endpoints import router

__all__ = ["router"]
