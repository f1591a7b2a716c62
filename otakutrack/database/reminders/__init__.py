"""Database models and operations for episode reminders."""

from otakutrack.database.reminders.models import (
    DEFAULT_MAX_SENDS,
    DEFAULT_REMINDER_MESSAGE,
    Reminder,
)
from otakutrack.database.reminders.operations import (
    calculate_next_alert_time,
    create_reminder,
    deactivate_reminder,
    get_due_reminders,
    get_reminder_by_id,
    list_reminders_for_user,
    mark_reminder_sent,
    update_reminder,
)

__all__ = [
    # Models
    "DEFAULT_MAX_SENDS",
    "DEFAULT_REMINDER_MESSAGE",
    "Reminder",
    # Operations
    "calculate_next_alert_time",
    "create_reminder",
    "deactivate_reminder",
    "get_due_reminders",
    "get_reminder_by_id",
    "list_reminders_for_user",
    "mark_reminder_sent",
    "update_reminder",
]
