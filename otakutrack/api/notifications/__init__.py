"""In-app notification endpoints."""

from otakutrack.api.notifications.endpoints import router

__all__ = ["router"]
