"""Episode reminder endpoints."""

from otakutrack.api.reminders.endpoints import router

__all__ = ["router"]
