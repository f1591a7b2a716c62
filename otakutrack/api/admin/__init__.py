"""Site administration endpoints."""

from otakutrack.api.admin.endpoints import router

__all__ = ["router"]
