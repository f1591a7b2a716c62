"""Database operations for in-app notifications."""

from __future__ import annotations

import logging
import uuid as uuid_module

from sqlalchemy.orm import Session

from otakutrack.database.notifications.models import Notification

logger = logging.getLogger(__name__)


def create_notification(
    session: Session,
    user_id: uuid_module.UUID,
    title: str,
    body: str,
    reminder_id: uuid_module.UUID | None = None,
) -> Notification:
    """Create an unread notification.

    :param session: Database session.
    :param user_id: Recipient ID.
    :param title: Short heading.
    :param body: Notification text.
    :param reminder_id: Reminder that produced the notification, if any.
    :returns: The created notification.
    """
    notification = Notification(
        user_id=user_id,
        title=title,
        body=body,
        reminder_id=reminder_id,
        is_read=False,
    )
    session.add(notification)
    session.flush()
    logger.info(f"Created notification: id={notification.id}, user_id={user_id}")
    return notification


def list_notifications(
    session: Session,
    user_id: uuid_module.UUID,
    unread_only: bool = False,
    limit: int = 50,
) -> list[Notification]:
    """List a user's notifications, newest first.

    :param session: Database session.
    :param user_id: Recipient ID.
    :param unread_only: Only return unread notifications.
    :param limit: Maximum number to return.
    :returns: List of notifications.
    """
    query = session.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.created_at.desc()).limit(limit).all()


def mark_notification_read(
    session: Session,
    notification_id: uuid_module.UUID,
    user_id: uuid_module.UUID,
) -> Notification | None:
    """Mark one of a user's notifications as read.

    :param session: Database session.
    :param notification_id: Notification ID.
    :param user_id: Recipient ID; other users' notifications are not found.
    :returns: The notification or None if not found.
    """
    notification = (
        session.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
        .first()
    )
    if notification is None:
        return None

    notification.is_read = True
    session.flush()
    logger.info(f"Marked notification read: id={notification_id}")
    return notification
