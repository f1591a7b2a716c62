"""API endpoints for managing episode reminders."""

import logging
import time
from datetime import UTC, datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from otakutrack.api.common import bad_request, forbidden, not_found, show_summary
from otakutrack.api.dependencies import get_current_user
from otakutrack.api.models import ApiResponse
from otakutrack.api.reminders.models import (
    CreateReminderRequest,
    ReminderResponse,
    UpdateReminderRequest,
)
from otakutrack.database.connection import get_session
from otakutrack.database.reminders import (
    Reminder,
    create_reminder,
    deactivate_reminder,
    get_reminder_by_id,
    list_reminders_for_user,
    update_reminder,
)
from otakutrack.database.shows import get_show_by_id
from otakutrack.database.users import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reminders", tags=["Reminders"])


def _reminder_to_response(reminder: Reminder, now: datetime | None = None) -> ReminderResponse:
    """Convert a reminder model to response.

    :param reminder: The database model.
    :param now: Current time used for the alert countdown (defaults to now).
    :returns: API response model.
    """
    if now is None:
        now = datetime.now(UTC)
    remaining = reminder.time_until_alert(now)
    return ReminderResponse(
        id=reminder.id,
        show=show_summary(reminder.show) if reminder.show is not None else None,
        episode_number=reminder.episode_number,
        episode_title=reminder.episode_title,
        episode_air_date=reminder.episode_air_date,
        alert_time=reminder.alert_time,
        alert_type=reminder.alert_type,
        is_active=reminder.is_active,
        is_recurring=reminder.is_recurring,
        recurring_pattern=reminder.recurring_pattern,
        message=reminder.message,
        priority=reminder.priority,
        last_sent=reminder.last_sent,
        sent_count=reminder.sent_count,
        max_sends=reminder.max_sends,
        tags=list(reminder.tags or []),
        time_until_alert_seconds=int(remaining.total_seconds()) if remaining is not None else None,
        alert_status=reminder.alert_status(now),
        created_at=reminder.created_at,
    )


def _get_owned_reminder(session: Session, reminder_id: UUID, user: User) -> Reminder:
    reminder = get_reminder_by_id(session, reminder_id)
    if reminder is None:
        raise not_found("Reminder")
    if reminder.user_id != user.id:
        logger.warning(f"Reminder ownership check failed: id={reminder_id}, user_id={user.id}")
        raise forbidden("Not authorized to access this reminder")
    return reminder


@router.get(
    "",
    response_model=ApiResponse[list[ReminderResponse]],
    summary="List reminders",
)
def get_reminders(
    include_inactive: bool = Query(False, description="Include deactivated reminders"),
    limit: int = Query(50, ge=1, le=100, description="Maximum reminders to return"),
    user: User = Depends(get_current_user),
) -> ApiResponse[list[ReminderResponse]]:
    """List the caller's reminders, soonest first."""
    start = time.perf_counter()
    logger.info(
        f"List reminders: user_id={user.id}, include_inactive={include_inactive}, limit={limit}"
    )

    now = datetime.now(UTC)
    with get_session() as session:
        reminders = list_reminders_for_user(
            session, user.id, include_inactive=include_inactive, limit=limit
        )
        results = [_reminder_to_response(r, now) for r in reminders]

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"List reminders complete: found={len(results)}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=results)


@router.post(
    "",
    response_model=ApiResponse[ReminderResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create reminder",
)
def add_reminder(
    request: CreateReminderRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[ReminderResponse]:
    """Create a reminder for a show's next episode.

    One-off reminders fire once. Recurring reminders move their alert time
    forward by their pattern after each delivery until max_sends is reached.
    """
    start = time.perf_counter()
    logger.info(
        f"Create reminder: show_id={request.show_id}, alert_time={request.alert_time}, "
        f"recurring={request.is_recurring}, user_id={user.id}"
    )

    with get_session() as session:
        if get_show_by_id(session, request.show_id) is None:
            raise not_found("Show")
        try:
            reminder = create_reminder(
                session,
                user_id=user.id,
                **request.model_dump(),
            )
        except ValueError as e:
            raise bad_request(e) from e
        response = _reminder_to_response(reminder)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Create reminder complete: id={response.id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response, message="Reminder created successfully")


@router.get(
    "/{reminder_id}",
    response_model=ApiResponse[ReminderResponse],
    summary="Get reminder",
)
def get_reminder(
    reminder_id: UUID,
    user: User = Depends(get_current_user),
) -> ApiResponse[ReminderResponse]:
    """Get one of the caller's reminders."""
    logger.info(f"Get reminder: id={reminder_id}")
    with get_session() as session:
        response = _reminder_to_response(_get_owned_reminder(session, reminder_id, user))
    return ApiResponse(data=response)


@router.put(
    "/{reminder_id}",
    response_model=ApiResponse[ReminderResponse],
    summary="Update reminder",
)
def edit_reminder(
    reminder_id: UUID,
    request: UpdateReminderRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[ReminderResponse]:
    """Update one of the caller's reminders."""
    start = time.perf_counter()
    fields = request.model_dump(exclude_unset=True)
    logger.info(f"Update reminder: id={reminder_id}, fields={sorted(fields)}")

    with get_session() as session:
        reminder = _get_owned_reminder(session, reminder_id, user)
        try:
            reminder = update_reminder(session, reminder, **fields)
        except ValueError as e:
            raise bad_request(e) from e
        response = _reminder_to_response(reminder)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Update reminder complete: id={reminder_id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response, message="Reminder updated successfully")


@router.delete(
    "/{reminder_id}",
    response_model=ApiResponse[None],
    summary="Cancel reminder",
)
def cancel_reminder(
    reminder_id: UUID,
    user: User = Depends(get_current_user),
) -> ApiResponse[None]:
    """Cancel (deactivate) a reminder.

    The reminder is kept for history but will no longer fire.
    """
    start = time.perf_counter()
    logger.info(f"Cancel reminder: id={reminder_id}, user_id={user.id}")

    with get_session() as session:
        _get_owned_reminder(session, reminder_id, user)
        deactivate_reminder(session, reminder_id)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Cancel reminder complete: id={reminder_id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(message="Reminder deleted successfully")
