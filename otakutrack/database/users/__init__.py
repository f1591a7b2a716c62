"""Database models and operations for user accounts."""

from otakutrack.database.users.models import User
from otakutrack.database.users.operations import (
    count_users,
    create_user,
    delete_user,
    get_user_by_email,
    get_user_by_id,
    list_users,
    normalise_email,
    set_user_active,
    update_password_hash,
    update_user_profile,
    update_user_role,
)

__all__ = [
    # Models
    "User",
    # Operations
    "count_users",
    "create_user",
    "delete_user",
    "get_user_by_email",
    "get_user_by_id",
    "list_users",
    "normalise_email",
    "set_user_active",
    "update_password_hash",
    "update_user_profile",
    "update_user_role",
]
