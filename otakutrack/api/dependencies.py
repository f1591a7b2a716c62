"""Shared dependencies for API endpoints."""

import logging

import jwt
from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from otakutrack.api.security import TokenConfigurationError, decode_access_token
from otakutrack.database.connection import get_session
from otakutrack.database.users import User, get_user_by_id

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorised(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _load_user(token: str) -> User:
    """Resolve a bearer token to an active user.

    :param token: The raw bearer token.
    :returns: The authenticated user.
    :raises HTTPException: 401 for bad tokens or banned users, 500 when unconfigured.
    """
    try:
        user_id = decode_access_token(token)
    except TokenConfigurationError as e:
        logger.error(f"Token configuration error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication not configured",
        ) from e
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token provided: {e}")
        raise _unauthorised("Not authorized, token failed") from e

    with get_session() as session:
        user = get_user_by_id(session, user_id)

    if user is None:
        logger.warning(f"Token for unknown user: user_id={user_id}")
        raise _unauthorised("User not found")
    if not user.is_active:
        logger.warning(f"Token for deactivated user: user_id={user_id}")
        raise _unauthorised("Account has been deactivated")
    return user


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(security),
) -> User:
    """Require a valid bearer token.

    :param credentials: The HTTP Authorisation credentials.
    :returns: The authenticated user.
    :raises HTTPException: If the token is missing or invalid.
    """
    if credentials is None:
        raise _unauthorised("Not authorized, no token")
    return _load_user(credentials.credentials)


def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Security(security),
) -> User | None:
    """Resolve the caller when a bearer token is supplied.

    :param credentials: The HTTP Authorisation credentials, if any.
    :returns: The authenticated user or None for anonymous callers.
    """
    if credentials is None:
        return None
    return _load_user(credentials.credentials)


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Require the caller to be a site admin.

    :param user: The authenticated user.
    :returns: The same user.
    :raises HTTPException: 403 if the user is not an admin.
    """
    if not user.is_admin:
        logger.warning(f"Admin access denied: user_id={user.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized as admin",
        )
    return user
