"""API endpoints for registration, login and the caller's profile."""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, status

from otakutrack.api.auth.models import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    UpdateProfileRequest,
    UserResponse,
)
from otakutrack.api.common import bad_request, not_found
from otakutrack.api.dependencies import get_current_user
from otakutrack.api.models import ApiResponse
from otakutrack.api.security import create_access_token, hash_password, verify_password
from otakutrack.database.connection import get_session
from otakutrack.database.users import (
    User,
    create_user,
    get_user_by_email,
    get_user_by_id,
    update_password_hash,
    update_user_profile,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def user_to_response(user: User) -> UserResponse:
    """Convert a user model to response.

    :param user: The database model.
    :returns: API response model.
    """
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        is_active=user.is_active,
        avatar=user.avatar,
        bio=user.bio,
        created_at=user.created_at,
    )


@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register",
)
def register(request: RegisterRequest) -> ApiResponse[AuthResponse]:
    """Create an account and return an access token for it."""
    start = time.perf_counter()
    logger.info(f"Register: email={request.email}")

    with get_session() as session:
        try:
            user = create_user(
                session,
                name=request.name,
                email=request.email,
                password_hash=hash_password(request.password),
            )
        except ValueError as e:
            raise bad_request(e) from e
        response = AuthResponse(token=create_access_token(user.id), user=user_to_response(user))

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Register complete: user_id={response.user.id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response, message="User registered successfully")


@router.post(
    "/login",
    response_model=ApiResponse[AuthResponse],
    summary="Log in",
)
def login(request: LoginRequest) -> ApiResponse[AuthResponse]:
    """Exchange email and password for an access token.

    Deactivated accounts cannot log in.
    """
    start = time.perf_counter()
    logger.info(f"Login: email={request.email}")

    with get_session() as session:
        user = get_user_by_email(session, request.email)
        if user is None or not verify_password(request.password, user.password_hash):
            logger.warning(f"Login failed: email={request.email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )
        if not user.is_active:
            logger.warning(f"Login refused for deactivated user: user_id={user.id}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Account has been deactivated",
            )
        response = AuthResponse(token=create_access_token(user.id), user=user_to_response(user))

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Login complete: user_id={response.user.id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response, message="Login successful")


@router.get(
    "/profile",
    response_model=ApiResponse[UserResponse],
    summary="Get profile",
)
def get_profile(user: User = Depends(get_current_user)) -> ApiResponse[UserResponse]:
    """Get the authenticated user's account."""
    logger.info(f"Get profile: user_id={user.id}")
    return ApiResponse(data=user_to_response(user))


@router.put(
    "/profile",
    response_model=ApiResponse[UserResponse],
    summary="Update profile",
)
def update_profile(
    request: UpdateProfileRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[UserResponse]:
    """Update the authenticated user's name, avatar or bio."""
    start = time.perf_counter()
    fields = request.model_dump(exclude_unset=True)
    logger.info(f"Update profile: user_id={user.id}, fields={sorted(fields)}")

    with get_session() as session:
        updated = update_user_profile(session, user.id, **fields)
        if updated is None:
            raise not_found("User")
        response = user_to_response(updated)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Update profile complete: user_id={user.id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response, message="Profile updated successfully")


@router.put(
    "/change-password",
    response_model=ApiResponse[None],
    summary="Change password",
)
def change_password(
    request: ChangePasswordRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[None]:
    """Change the authenticated user's password after checking the current one."""
    start = time.perf_counter()
    logger.info(f"Change password: user_id={user.id}")

    with get_session() as session:
        current = get_user_by_id(session, user.id)
        if current is None:
            raise not_found("User")
        if not verify_password(request.current_password, current.password_hash):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Current password is incorrect",
            )
        update_password_hash(session, user.id, hash_password(request.new_password))

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Change password complete: user_id={user.id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(message="Password updated successfully")
