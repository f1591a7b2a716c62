"""Password hashing and access token handling."""

import logging
import uuid as uuid_module
from datetime import UTC, datetime, timedelta

import jwt
from passlib.context import CryptContext

from otakutrack.config import get_settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenConfigurationError(Exception):
    """Raised when no JWT secret is configured."""


def hash_password(password: str) -> str:
    """Hash a password with bcrypt.

    :param password: The plain text password.
    :returns: The bcrypt hash.
    """
    return str(pwd_context.hash(password))


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain text password against a stored hash.

    :param password: The plain text password.
    :param password_hash: The stored bcrypt hash.
    :returns: True if the password matches.
    """
    try:
        return bool(pwd_context.verify(password, password_hash))
    except ValueError as e:
        logger.warning(f"Unusable password hash: {e}")
        return False


def _get_secret() -> str:
    secret = get_settings().jwt_secret
    if not secret:
        raise TokenConfigurationError(
            "JWT secret not configured. Set OTAKU_JWT_SECRET environment variable."
        )
    return secret


def create_access_token(user_id: uuid_module.UUID, now: datetime | None = None) -> str:
    """Create a signed access token for a user.

    :param user_id: The user the token identifies.
    :param now: Issue time (defaults to now).
    :returns: The encoded JWT.
    :raises TokenConfigurationError: If no secret is configured.
    """
    settings = get_settings()
    if now is None:
        now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(days=settings.token_expiry_days),
    }
    return jwt.encode(payload, _get_secret(), algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> uuid_module.UUID:
    """Validate an access token and return the user ID it carries.

    :param token: The encoded JWT.
    :returns: The user ID from the token subject.
    :raises TokenConfigurationError: If no secret is configured.
    :raises jwt.InvalidTokenError: If the token is invalid, expired or has a bad subject.
    """
    payload = jwt.decode(token, _get_secret(), algorithms=[get_settings().jwt_algorithm])
    try:
        return uuid_module.UUID(str(payload["sub"]))
    except (KeyError, ValueError) as e:
        raise jwt.InvalidTokenError("Token subject is not a user ID") from e
