"""Health check endpoints."""

from otakutrack.api.health.endpoints import router

__all__ = ["router"]
