"""API endpoints for in-app notifications."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from otakutrack.api.common import not_found
from otakutrack.api.dependencies import get_current_user
from otakutrack.api.models import ApiResponse
from otakutrack.api.notifications.models import NotificationResponse
from otakutrack.database.connection import get_session
from otakutrack.database.notifications import (
    Notification,
    list_notifications,
    mark_notification_read,
)
from otakutrack.database.users import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def _notification_to_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=notification.id,
        reminder_id=notification.reminder_id,
        title=notification.title,
        body=notification.body,
        is_read=notification.is_read,
        created_at=notification.created_at,
    )


@router.get(
    "",
    response_model=ApiResponse[list[NotificationResponse]],
    summary="List notifications",
)
def get_notifications(
    unread_only: bool = Query(False, description="Only unread notifications"),
    limit: int = Query(50, ge=1, le=100, description="Maximum notifications to return"),
    user: User = Depends(get_current_user),
) -> ApiResponse[list[NotificationResponse]]:
    """List the caller's notifications, newest first."""
    logger.info(f"List notifications: user_id={user.id}, unread_only={unread_only}")
    with get_session() as session:
        notifications = list_notifications(session, user.id, unread_only=unread_only, limit=limit)
        results = [_notification_to_response(n) for n in notifications]
    return ApiResponse(data=results)


@router.post(
    "/{notification_id}/read",
    response_model=ApiResponse[NotificationResponse],
    summary="Mark notification read",
)
def read_notification(
    notification_id: UUID,
    user: User = Depends(get_current_user),
) -> ApiResponse[NotificationResponse]:
    """Mark one of the caller's notifications as read."""
    logger.info(f"Mark notification read: id={notification_id}, user_id={user.id}")
    with get_session() as session:
        notification = mark_notification_read(session, notification_id, user.id)
        if notification is None:
            raise not_found("Notification")
        response = _notification_to_response(notification)
    return ApiResponse(data=response)
