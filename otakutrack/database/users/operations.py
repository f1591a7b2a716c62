"""Database operations for user accounts."""

from __future__ import annotations

import logging
import uuid as uuid_module
from datetime import datetime
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session

from otakutrack.database.base import DEFAULT_PAGE_SIZE, Page, paginate
from otakutrack.database.users.models import User
from otakutrack.enums import UserRole

logger = logging.getLogger(__name__)

# Profile fields a user may change about themselves
PROFILE_FIELDS = frozenset({"name", "avatar", "bio"})


def normalise_email(email: str) -> str:
    """Lower-case and strip an email address for storage and lookup."""
    return email.strip().lower()


def create_user(
    session: Session,
    name: str,
    email: str,
    password_hash: str,
    role: UserRole = UserRole.USER,
) -> User:
    """Create a new user.

    :param session: Database session.
    :param name: Display name.
    :param email: Email address (stored lower-cased).
    :param password_hash: Pre-computed password hash.
    :param role: Initial role.
    :returns: The created user.
    :raises ValueError: If the email is already registered.
    """
    email = normalise_email(email)
    if get_user_by_email(session, email) is not None:
        raise ValueError("User already exists with this email")

    user = User(name=name, email=email, password_hash=password_hash, role=role.value)
    session.add(user)
    session.flush()
    logger.info(f"Created user: id={user.id}, role={user.role}")
    return user


def get_user_by_id(session: Session, user_id: uuid_module.UUID) -> User | None:
    """Get a user by ID.

    :param session: Database session.
    :param user_id: User ID.
    :returns: The user or None if not found.
    """
    return session.query(User).filter(User.id == user_id).first()


def get_user_by_email(session: Session, email: str) -> User | None:
    """Get a user by email address.

    :param session: Database session.
    :param email: Email address (case-insensitive).
    :returns: The user or None if not found.
    """
    return session.query(User).filter(User.email == normalise_email(email)).first()


def list_users(
    session: Session,
    role: UserRole | None = None,
    search: str | None = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> Page[User]:
    """List users, newest first.

    :param session: Database session.
    :param role: Only return users with this role.
    :param search: Case-insensitive match on name or email.
    :param page: Page number.
    :param limit: Page size.
    :returns: A page of users.
    """
    query = session.query(User)
    if role is not None:
        query = query.filter(User.role == role.value)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    return paginate(query.order_by(User.created_at.desc()), page=page, limit=limit)


def count_users(
    session: Session,
    active_only: bool = False,
    since: datetime | None = None,
) -> int:
    """Count registered users.

    :param session: Database session.
    :param active_only: Only count users that are not banned.
    :param since: Only count users registered at or after this time.
    :returns: Number of users.
    """
    query = session.query(User)
    if active_only:
        query = query.filter(User.is_active.is_(True))
    if since is not None:
        query = query.filter(User.created_at >= since)
    return query.count()


def update_user_profile(
    session: Session,
    user_id: uuid_module.UUID,
    **fields: Any,
) -> User | None:
    """Update profile fields on a user.

    Only name, avatar and bio may be changed. None values are ignored.

    :param session: Database session.
    :param user_id: User ID.
    :param fields: Field values to set.
    :returns: The updated user or None if not found.
    :raises ValueError: If an unknown field is given.
    """
    unknown = set(fields) - PROFILE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update fields: {sorted(unknown)}")

    user = get_user_by_id(session, user_id)
    if user is None:
        return None

    for name, value in fields.items():
        if value is not None:
            setattr(user, name, value)

    session.flush()
    logger.info(f"Updated user profile: id={user_id}, fields={sorted(fields)}")
    return user


def update_password_hash(
    session: Session,
    user_id: uuid_module.UUID,
    password_hash: str,
) -> User | None:
    """Replace a user's password hash.

    :param session: Database session.
    :param user_id: User ID.
    :param password_hash: The new hash.
    :returns: The updated user or None if not found.
    """
    user = get_user_by_id(session, user_id)
    if user is None:
        return None

    user.password_hash = password_hash
    session.flush()
    logger.info(f"Changed password: user_id={user_id}")
    return user


def update_user_role(
    session: Session,
    user_id: uuid_module.UUID,
    role: UserRole,
) -> User | None:
    """Change a user's role.

    :param session: Database session.
    :param user_id: User ID.
    :param role: The new role.
    :returns: The updated user or None if not found.
    """
    user = get_user_by_id(session, user_id)
    if user is None:
        return None

    user.role = role.value
    session.flush()
    logger.info(f"Updated user role: id={user_id}, role={role.value}")
    return user


def set_user_active(
    session: Session,
    user_id: uuid_module.UUID,
    is_active: bool,
) -> User | None:
    """Activate or deactivate (ban) a user.

    :param session: Database session.
    :param user_id: User ID.
    :param is_active: New active flag.
    :returns: The updated user or None if not found.
    """
    user = get_user_by_id(session, user_id)
    if user is None:
        return None

    user.is_active = is_active
    session.flush()
    logger.info(f"Set user active: id={user_id}, is_active={is_active}")
    return user


def delete_user(session: Session, user_id: uuid_module.UUID) -> bool:
    """Permanently delete a user.

    :param session: Database session.
    :param user_id: User ID.
    :returns: True if deleted, False if not found.
    """
    user = get_user_by_id(session, user_id)
    if user is None:
        return False

    session.delete(user)
    session.flush()
    logger.info(f"Deleted user: id={user_id}")
    return True
