"""Pydantic models for authentication endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

# Minimum accepted password length
MIN_PASSWORD_LENGTH = 6


class UserResponse(BaseModel):
    """Response model for the authenticated user's own account."""

    id: UUID = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    role: str = Field(..., description="Site role")
    is_active: bool = Field(..., description="False when the account is banned")
    avatar: str | None = Field(None, description="Avatar URL")
    bio: str | None = Field(None, description="Profile text")
    created_at: datetime | None = Field(None, description="When the account was created")


class AuthResponse(BaseModel):
    """Response model for register and login."""

    token: str = Field(..., description="Bearer access token")
    user: UserResponse = Field(..., description="The authenticated user")


class RegisterRequest(BaseModel):
    """Request model for creating an account."""

    name: str = Field(..., min_length=1, max_length=50, description="Display name")
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, description="Password")


class LoginRequest(BaseModel):
    """Request model for logging in."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Password")


class UpdateProfileRequest(BaseModel):
    """Request model for updating the caller's profile."""

    name: str | None = Field(None, min_length=1, max_length=50, description="Display name")
    avatar: str | None = Field(None, max_length=500, description="Avatar URL")
    bio: str | None = Field(None, max_length=500, description="Profile text")


class ChangePasswordRequest(BaseModel):
    """Request model for changing the caller's password."""

    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        description="Replacement password",
    )
