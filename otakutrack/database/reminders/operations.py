"""Database operations for episode reminders."""

from __future__ import annotations

import logging
import uuid as uuid_module
from datetime import UTC, datetime
from typing import Any

from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from otakutrack.database.reminders.models import Reminder
from otakutrack.enums import AlertType, RecurringPattern, ReminderPriority

logger = logging.getLogger(__name__)

# Calendar step for each recurrence pattern
RECURRENCE_STEPS = {
    RecurringPattern.DAILY: relativedelta(days=1),
    RecurringPattern.WEEKLY: relativedelta(weeks=1),
    RecurringPattern.MONTHLY: relativedelta(months=1),
}

# Fields the owner may change
UPDATABLE_FIELDS = frozenset(
    {
        "episode_number",
        "episode_title",
        "episode_air_date",
        "alert_time",
        "alert_type",
        "is_active",
        "is_recurring",
        "recurring_pattern",
        "message",
        "priority",
        "max_sends",
        "tags",
    }
)


def calculate_next_alert_time(
    alert_time: datetime,
    pattern: RecurringPattern,
    now: datetime | None = None,
) -> datetime:
    """Move an alert time forward by its pattern until it is in the future.

    Monthly steps are calendar aware, so the 31st becomes the last day of a
    shorter month.

    :param alert_time: The alert time that has just fired.
    :param pattern: Recurrence pattern.
    :param now: Current time (defaults to now).
    :returns: The first step strictly after now.
    """
    if now is None:
        now = datetime.now(UTC)

    step = RECURRENCE_STEPS[RecurringPattern(pattern)]
    next_time = alert_time + step
    count = 1
    while next_time <= now:
        count += 1
        # Step from the original time so month-end days do not drift
        next_time = alert_time + step * count
    return next_time


def create_reminder(  # noqa: PLR0913
    session: Session,
    user_id: uuid_module.UUID,
    show_id: uuid_module.UUID,
    alert_time: datetime | None,
    alert_type: AlertType = AlertType.BOTH,
    is_recurring: bool = False,
    recurring_pattern: RecurringPattern = RecurringPattern.WEEKLY,
    message: str | None = None,
    priority: ReminderPriority = ReminderPriority.MEDIUM,
    **fields: Any,
) -> Reminder:
    """Create a reminder.

    :param session: Database session.
    :param user_id: Owner ID.
    :param show_id: Show the reminder is about.
    :param alert_time: When to alert, or None to keep the reminder undated.
    :param alert_type: Delivery channel(s).
    :param is_recurring: Whether the reminder repeats.
    :param recurring_pattern: How often it repeats.
    :param message: Text to deliver (defaults to the standard message).
    :param priority: Priority label.
    :param fields: Episode snapshot, max_sends and tags.
    :returns: The created reminder.
    :raises ValueError: If an unknown field is given.
    """
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown reminder fields: {sorted(unknown)}")

    values = {k: v for k, v in fields.items() if v is not None}
    if message:
        values["message"] = message
    reminder = Reminder(
        user_id=user_id,
        show_id=show_id,
        alert_time=alert_time,
        alert_type=AlertType(alert_type).value,
        is_recurring=is_recurring,
        recurring_pattern=RecurringPattern(recurring_pattern).value,
        priority=ReminderPriority(priority).value,
        sent_count=0,
        **values,
    )
    session.add(reminder)
    session.flush()
    logger.info(
        f"Created reminder: id={reminder.id}, show_id={show_id}, "
        f"alert_time={alert_time}, recurring={is_recurring}"
    )
    return reminder


def get_reminder_by_id(
    session: Session,
    reminder_id: uuid_module.UUID,
) -> Reminder | None:
    """Get a reminder by ID.

    :param session: Database session.
    :param reminder_id: Reminder ID.
    :returns: The reminder or None if not found.
    """
    return session.query(Reminder).filter(Reminder.id == reminder_id).first()


def list_reminders_for_user(
    session: Session,
    user_id: uuid_module.UUID,
    include_inactive: bool = False,
    limit: int = 50,
) -> list[Reminder]:
    """List a user's reminders, soonest first.

    :param session: Database session.
    :param user_id: Owner ID.
    :param include_inactive: Whether to include deactivated reminders.
    :param limit: Maximum number of reminders to return.
    :returns: List of reminders.
    """
    query = session.query(Reminder).filter(Reminder.user_id == user_id)

    if not include_inactive:
        query = query.filter(Reminder.is_active.is_(True))

    return query.order_by(Reminder.alert_time.asc().nulls_last()).limit(limit).all()


def update_reminder(session: Session, reminder: Reminder, **fields: Any) -> Reminder:
    """Update a reminder.

    :param session: Database session.
    :param reminder: The reminder to update.
    :param fields: Values to set; None values are ignored.
    :returns: The updated reminder.
    :raises ValueError: If an unknown field is given, max_sends would drop
        below the deliveries already made, or an exhausted reminder would be
        reactivated.
    """
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update fields: {sorted(unknown)}")

    max_sends = fields.get("max_sends")
    if max_sends is not None and max_sends < reminder.sent_count:
        raise ValueError(
            f"max_sends cannot be below the number of reminders already sent "
            f"({reminder.sent_count})"
        )
    if max_sends is None:
        max_sends = reminder.max_sends
    if fields.get("is_active") and reminder.sent_count >= max_sends:
        raise ValueError("Cannot reactivate a reminder that has used all of its sends")

    for name, value in fields.items():
        if value is not None:
            setattr(reminder, name, value)

    session.flush()
    logger.info(f"Updated reminder: id={reminder.id}, fields={sorted(fields)}")
    return reminder


def deactivate_reminder(
    session: Session,
    reminder_id: uuid_module.UUID,
) -> Reminder | None:
    """Deactivate (cancel) a reminder.

    :param session: Database session.
    :param reminder_id: Reminder ID to deactivate.
    :returns: The deactivated reminder or None if not found.
    """
    reminder = get_reminder_by_id(session, reminder_id)
    if reminder is None:
        return None

    reminder.is_active = False
    session.flush()
    logger.info(f"Deactivated reminder: id={reminder_id}")
    return reminder


def get_due_reminders(
    session: Session,
    now: datetime | None = None,
) -> list[Reminder]:
    """Get active reminders whose alert time has passed and sends remain.

    Used by the Dagster job to find reminders to deliver.

    :param session: Database session.
    :param now: Current time (defaults to now).
    :returns: List of reminders ready to send.
    """
    if now is None:
        now = datetime.now(UTC)

    return (
        session.query(Reminder)
        .filter(
            Reminder.is_active.is_(True),
            Reminder.alert_time.is_not(None),
            Reminder.alert_time <= now,
            Reminder.sent_count < Reminder.max_sends,
        )
        .all()
    )


def mark_reminder_sent(
    session: Session,
    reminder: Reminder,
    now: datetime | None = None,
) -> None:
    """Record a delivery and schedule the next one.

    sent_count never passes max_sends. The reminder is deactivated once it
    reaches max_sends or if it does not recur.

    :param session: Database session.
    :param reminder: The reminder that was sent.
    :param now: Current time (defaults to now).
    """
    if now is None:
        now = datetime.now(UTC)

    reminder.last_sent = now
    reminder.sent_count = min(reminder.sent_count + 1, reminder.max_sends)

    if not reminder.is_recurring or reminder.sent_count >= reminder.max_sends:
        reminder.is_active = False
    elif reminder.alert_time is not None:
        reminder.alert_time = calculate_next_alert_time(
            reminder.alert_time,
            RecurringPattern(reminder.recurring_pattern),
            now,
        )

    session.flush()
    logger.info(
        f"Marked reminder sent: id={reminder.id}, "
        f"sent_count={reminder.sent_count}/{reminder.max_sends}, active={reminder.is_active}"
    )
