"""Database models and operations for in-app notifications."""

from otakutrack.database.notifications.models import Notification
from otakutrack.database.notifications.operations import (
    create_notification,
    list_notifications,
    mark_notification_read,
)

__all__ = [
    # Models
    "Notification",
    # Operations
    "create_notification",
    "list_notifications",
    "mark_notification_read",
]
