"""Authentication endpoints."""

from otakutrack.api.auth.endpoints import router

__all__ = ["router"]
