"""Dagster ops for delivering episode reminders."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from dagster import Backoff, Jitter, OpExecutionContext, RetryPolicy, op
from otakutrack.database.connection import get_session
from otakutrack.database.notifications.operations import create_notification
from otakutrack.database.reminders.models import Reminder
from otakutrack.database.reminders.operations import get_due_reminders, mark_reminder_sent
from otakutrack.enums import AlertType
from otakutrack.messaging.email import EmailSender, get_email_sender

# Retry policy for reminder ops
REMINDER_RETRY_POLICY = RetryPolicy(
    max_retries=1,
    delay=30,
    backoff=Backoff.EXPONENTIAL,
    jitter=Jitter.FULL,
)


@dataclass
class ReminderStats:
    """Stats for reminder processing operations."""

    reminders_due: int = 0
    reminders_sent: int = 0
    notifications_created: int = 0
    emails_sent: int = 0
    reminders_deactivated: int = 0
    errors: list[str] = field(default_factory=list)


def _format_reminder_title(reminder: Reminder) -> str:
    """Build the heading for a reminder.

    :param reminder: The reminder being delivered.
    :returns: Show title plus the episode number when known.
    """
    title = reminder.show.title if reminder.show is not None else "Your show"
    if reminder.episode_number is not None:
        return f"{title}: Episode {reminder.episode_number}"
    return title


def _format_reminder_body(reminder: Reminder) -> str:
    """Build the text for a reminder.

    send_count is incremented after sending, so add 1 for display.

    :param reminder: The reminder being delivered.
    :returns: The reminder message with episode details.
    """
    lines = [reminder.message]
    if reminder.episode_title:
        lines.append(f"Episode: {reminder.episode_title}")
    if reminder.is_recurring:
        lines.append(f"(Reminder {reminder.sent_count + 1}/{reminder.max_sends})")
    return "\n".join(lines)


def _deliver_reminder(
    session: Session,
    reminder: Reminder,
    email_sender: EmailSender,
    stats: ReminderStats,
) -> bool:
    """Deliver a reminder through the channels its alert type selects.

    :param session: Database session.
    :param reminder: The reminder to deliver.
    :param email_sender: SMTP sender for email alerts.
    :param stats: Stats updated with what was delivered.
    :returns: True if at least one channel delivered the reminder.
    """
    delivered = False
    title = _format_reminder_title(reminder)
    body = _format_reminder_body(reminder)
    alert_type = AlertType(reminder.alert_type)

    if alert_type in (AlertType.IN_APP, AlertType.BOTH):
        create_notification(session, reminder.user_id, title, body, reminder_id=reminder.id)
        stats.notifications_created += 1
        delivered = True

    if alert_type in (AlertType.EMAIL, AlertType.BOTH) and reminder.user is not None:
        if email_sender.send(reminder.user.email, f"Reminder: {title}", body):
            stats.emails_sent += 1
            delivered = True

    return delivered


@op(
    name="process_reminders",
    retry_policy=REMINDER_RETRY_POLICY,
    description="Deliver due episode reminders in-app and by email.",
)
def process_reminders_op(context: OpExecutionContext) -> ReminderStats:
    """Process all due reminders.

    This op performs the following:
    1. Find active reminders whose alert time has passed
    2. Create an in-app notification and/or send an email per alert type
    3. Mark each delivered reminder sent, which advances recurring reminders
       and deactivates one-off or exhausted ones. Reminders no channel
       delivered stay due and are recorded as errors

    :param context: Dagster execution context.
    :returns: Stats with counts of processed reminders.
    """
    context.log.info("Starting reminder processing")
    now = datetime.now(UTC)
    stats = ReminderStats()
    email_sender = get_email_sender()

    with get_session() as session:
        due_reminders = get_due_reminders(session, now)
        stats.reminders_due = len(due_reminders)
        context.log.info(f"Found {len(due_reminders)} due reminders")

        for reminder in due_reminders:
            try:
                with session.begin_nested():
                    delivered = _deliver_reminder(session, reminder, email_sender, stats)
                    if delivered:
                        mark_reminder_sent(session, reminder, now)

                if not delivered:
                    # Left due so the next run retries it
                    error_msg = f"No channel delivered reminder {reminder.id}"
                    context.log.warning(error_msg)
                    stats.errors.append(error_msg)
                    continue

                stats.reminders_sent += 1
                if not reminder.is_active:
                    stats.reminders_deactivated += 1
                context.log.info(
                    f"Sent reminder {reminder.id} "
                    f"(send {reminder.sent_count}/{reminder.max_sends})"
                )

            except Exception as e:
                error_msg = f"Failed to send reminder {reminder.id}: {e}"
                context.log.error(error_msg)
                stats.errors.append(error_msg)

    context.log.info(
        f"Reminder processing complete: "
        f"due={stats.reminders_due}, "
        f"sent={stats.reminders_sent}, "
        f"notifications={stats.notifications_created}, "
        f"emails={stats.emails_sent}, "
        f"deactivated={stats.reminders_deactivated}, "
        f"errors={len(stats.errors)}"
    )

    return stats
