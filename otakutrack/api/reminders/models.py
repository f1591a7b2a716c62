"""Pydantic models for reminders API endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from otakutrack.api.models import ShowSummary, UtcDatetime
from otakutrack.enums import AlertStatus, AlertType, RecurringPattern, ReminderPriority


class ReminderResponse(BaseModel):
    """Response model for an episode reminder."""

    id: UUID = Field(..., description="Reminder ID")
    show: ShowSummary | None = Field(None, description="Show the reminder is about")
    episode_number: int | None = Field(None, description="Episode number")
    episode_title: str | None = Field(None, description="Episode title")
    episode_air_date: datetime | None = Field(None, description="Episode air date")
    alert_time: datetime | None = Field(None, description="When the alert fires")
    alert_type: AlertType = Field(..., description="Delivery channel(s)")
    is_active: bool = Field(..., description="Whether the reminder will fire")
    is_recurring: bool = Field(..., description="Whether the reminder repeats")
    recurring_pattern: RecurringPattern = Field(..., description="How often it repeats")
    message: str = Field(..., description="Text delivered with the alert")
    priority: ReminderPriority = Field(..., description="Priority label")
    last_sent: datetime | None = Field(None, description="Last delivery time")
    sent_count: int = Field(..., description="Number of deliveries so far")
    max_sends: int = Field(..., description="Delivery cap")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    time_until_alert_seconds: int | None = Field(
        None,
        description="Seconds until the alert, 0 when overdue, null without an alert time",
    )
    alert_status: AlertStatus = Field(..., description="Status relative to now")
    created_at: datetime | None = Field(None, description="When the reminder was created")


class CreateReminderRequest(BaseModel):
    """Request model for creating a reminder."""

    show_id: UUID = Field(..., description="Show to be reminded about")
    episode_number: int | None = Field(None, ge=1, description="Episode number")
    episode_title: str | None = Field(None, max_length=200, description="Episode title")
    episode_air_date: UtcDatetime | None = Field(None, description="Episode air date")
    alert_time: UtcDatetime | None = Field(None, description="When to alert (UTC if no offset)")
    alert_type: AlertType = Field(AlertType.BOTH, description="Delivery channel(s)")
    is_recurring: bool = Field(False, description="Whether the reminder repeats")
    recurring_pattern: RecurringPattern = Field(
        RecurringPattern.WEEKLY,
        description="How often it repeats",
    )
    message: str | None = Field(None, max_length=200, description="Text to deliver")
    priority: ReminderPriority = Field(ReminderPriority.MEDIUM, description="Priority label")
    max_sends: int | None = Field(None, ge=1, le=100, description="Delivery cap")
    tags: list[str] | None = Field(None, description="Free-form tags")


class UpdateReminderRequest(BaseModel):
    """Request model for updating a reminder."""

    episode_number: int | None = Field(None, ge=1, description="Episode number")
    episode_title: str | None = Field(None, max_length=200, description="Episode title")
    episode_air_date: UtcDatetime | None = Field(None, description="Episode air date")
    alert_time: UtcDatetime | None = Field(None, description="New alert time")
    alert_type: AlertType | None = Field(None, description="Delivery channel(s)")
    is_active: bool | None = Field(None, description="Re-enable or pause the reminder")
    is_recurring: bool | None = Field(None, description="Whether the reminder repeats")
    recurring_pattern: RecurringPattern | None = Field(None, description="How often it repeats")
    message: str | None = Field(None, min_length=1, max_length=200, description="Text to deliver")
    priority: ReminderPriority | None = Field(None, description="Priority label")
    max_sends: int | None = Field(None, ge=1, le=100, description="Delivery cap")
    tags: list[str] | None = Field(None, description="Free-form tags")
