"""Pydantic models for notifications API endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class NotificationResponse(BaseModel):
    """Response model for an in-app notification."""

    id: UUID = Field(..., description="Notification ID")
    reminder_id: UUID | None = Field(None, description="Reminder that produced it")
    title: str = Field(..., description="Notification title")
    body: str = Field(..., description="Notification text")
    is_read: bool = Field(..., description="Whether the user has read it")
    created_at: datetime | None = Field(None, description="When it was delivered")
