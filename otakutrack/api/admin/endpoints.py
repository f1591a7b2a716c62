"""API endpoints for site administration.

Every route requires the admin role.
"""

import csv
import io
import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from otakutrack.api.admin.models import (
    AdminStatsResponse,
    GenreCount,
    ReviewCounts,
    TotalActive,
    UpdateRoleRequest,
    UpdateStatusRequest,
    UserCounts,
)
from otakutrack.api.auth.endpoints import user_to_response
from otakutrack.api.auth.models import UserResponse
from otakutrack.api.clubs.endpoints import club_to_response
from otakutrack.api.clubs.models import ClubResponse
from otakutrack.api.common import not_found, paginated_response
from otakutrack.api.dependencies import require_admin
from otakutrack.api.models import ApiResponse
from otakutrack.api.reviews.endpoints import review_to_response
from otakutrack.api.reviews.models import ReviewResponse
from otakutrack.database.base import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Page
from otakutrack.database.clubs import (
    Club,
    ClubSort,
    count_clubs,
    delete_club,
    get_club_by_id,
    list_clubs,
    set_club_active,
    set_club_approved,
)
from otakutrack.database.connection import get_session
from otakutrack.database.reviews import (
    count_reviews,
    delete_review,
    get_review_by_id,
    list_reported_reviews,
)
from otakutrack.database.shows import count_show_genres, count_shows
from otakutrack.database.users import (
    User,
    count_users,
    delete_user,
    list_users,
    set_user_active,
    update_user_role,
)
from otakutrack.enums import UserRole

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])

# Window for the "new users" count on the dashboard
NEW_USER_WINDOW = timedelta(days=30)

# Rows fetched per query while building a CSV export
EXPORT_PAGE_SIZE = MAX_PAGE_SIZE


def _reject_self(admin: User, user_id: UUID, detail: str) -> None:
    if admin.id == user_id:
        logger.warning(f"Admin self-change rejected: user_id={user_id}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _set_active(session: Session, user_id: UUID, is_active: bool) -> UserResponse:
    user = set_user_active(session, user_id, is_active)
    if user is None:
        raise not_found("User")
    return user_to_response(user)


def _get_any_club(session: Session, club_id: UUID) -> Club:
    club = get_club_by_id(session, club_id, include_inactive=True)
    if club is None:
        raise not_found("Club")
    return club


def _csv_response(filename: str, header: list[str], rows: list[list[str]]) -> Response:
    """Render rows as a downloadable CSV file.

    :param filename: Name offered to the browser.
    :param header: Column titles.
    :param rows: Data rows.
    :returns: A text/csv response with an attachment disposition.
    """
    output = io.StringIO(newline="")
    writer = csv.writer(output, quoting=csv.QUOTE_ALL)
    writer.writerow(header)
    writer.writerows(rows)
    return Response(
        content=output.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


def _all_items[T](fetch: Callable[[int], Page[T]]) -> list[T]:
    """Collect every item by walking pages until the last one."""
    items: list[T] = []
    page = 1
    while True:
        result = fetch(page)
        items.extend(result.items)
        if page >= result.pages:
            return items
        page += 1


def _status_label(is_active: bool) -> str:
    return "Active" if is_active else "Inactive"


@router.get(
    "/users",
    response_model=ApiResponse[list[UserResponse]],
    summary="List users",
)
def get_users(
    role: UserRole | None = Query(None, description="Only users with this role"),
    search: str | None = Query(None, description="Search name and email"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
) -> ApiResponse[list[UserResponse]]:
    """List users, newest first."""
    start = time.perf_counter()
    logger.info(f"Admin list users: role={role}, search={search!r}, page={page}")

    with get_session() as session:
        result = list_users(session, role=role, search=search, page=page, limit=limit)
        response = paginated_response(result, user_to_response)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Admin list users complete: total={result.total}, elapsed={elapsed_ms:.0f}ms")

    return response


@router.put(
    "/users/{user_id}/role",
    response_model=ApiResponse[UserResponse],
    summary="Change user role",
)
def change_role(
    user_id: UUID,
    request: UpdateRoleRequest,
    admin: User = Depends(require_admin),
) -> ApiResponse[UserResponse]:
    """Change a user's role. Admins cannot change their own role."""
    logger.info(f"Admin change role: user_id={user_id}, role={request.role}")
    _reject_self(admin, user_id, "Cannot change your own role")

    with get_session() as session:
        user = update_user_role(session, user_id, request.role)
        if user is None:
            raise not_found("User")
        response = user_to_response(user)

    return ApiResponse(data=response, message="User role updated successfully")


@router.put(
    "/users/{user_id}/status",
    response_model=ApiResponse[UserResponse],
    summary="Change user status",
)
def change_status(
    user_id: UUID,
    request: UpdateStatusRequest,
    admin: User = Depends(require_admin),
) -> ApiResponse[UserResponse]:
    """Activate or deactivate a user. Admins cannot deactivate themselves."""
    logger.info(f"Admin change status: user_id={user_id}, is_active={request.is_active}")
    _reject_self(admin, user_id, "Cannot deactivate your own account")

    with get_session() as session:
        response = _set_active(session, user_id, request.is_active)

    return ApiResponse(data=response, message="User status updated successfully")


@router.put(
    "/users/{user_id}/ban",
    response_model=ApiResponse[UserResponse],
    summary="Ban user",
)
def ban(user_id: UUID, admin: User = Depends(require_admin)) -> ApiResponse[UserResponse]:
    """Ban a user. Banned users cannot log in or use existing tokens."""
    logger.info(f"Admin ban user: user_id={user_id}")
    _reject_self(admin, user_id, "Cannot ban your own account")

    with get_session() as session:
        response = _set_active(session, user_id, False)

    return ApiResponse(data=response, message="User banned successfully")


@router.put(
    "/users/{user_id}/unban",
    response_model=ApiResponse[UserResponse],
    summary="Unban user",
)
def unban(user_id: UUID) -> ApiResponse[UserResponse]:
    """Lift a ban."""
    logger.info(f"Admin unban user: user_id={user_id}")
    with get_session() as session:
        response = _set_active(session, user_id, True)
    return ApiResponse(data=response, message="User unbanned successfully")


@router.delete(
    "/users/{user_id}",
    response_model=ApiResponse[None],
    summary="Delete user",
)
def remove_user(user_id: UUID, admin: User = Depends(require_admin)) -> ApiResponse[None]:
    """Permanently delete a user and everything they own."""
    logger.info(f"Admin delete user: user_id={user_id}")
    _reject_self(admin, user_id, "Cannot delete your own account")

    with get_session() as session:
        if not delete_user(session, user_id):
            raise not_found("User")

    return ApiResponse(message="User deleted successfully")


@router.get(
    "/flagged",
    response_model=ApiResponse[list[ReviewResponse]],
    summary="List flagged reviews",
)
def get_flagged(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
) -> ApiResponse[list[ReviewResponse]]:
    """List reported reviews, newest first."""
    logger.info(f"Admin list flagged reviews: page={page}")
    with get_session() as session:
        result = list_reported_reviews(session, page=page, limit=limit)
        response = paginated_response(result, review_to_response)
    return response


@router.delete(
    "/reviews/{review_id}",
    response_model=ApiResponse[None],
    summary="Remove flagged review",
)
def remove_flagged_review(review_id: UUID) -> ApiResponse[None]:
    """Delete a reported review. Reviews that were never reported are refused."""
    logger.info(f"Admin remove flagged review: id={review_id}")

    with get_session() as session:
        review = get_review_by_id(session, review_id)
        if review is None:
            raise not_found("Review")
        if not review.is_reported:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Review is not flagged",
            )
        delete_review(session, review)

    return ApiResponse(message="Flagged review removed successfully")


@router.get(
    "/clubs",
    response_model=ApiResponse[list[ClubResponse]],
    summary="List all clubs",
)
def get_all_clubs(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
) -> ApiResponse[list[ClubResponse]]:
    """List every club, including inactive ones, newest first."""
    logger.info(f"Admin list clubs: page={page}")
    with get_session() as session:
        result = list_clubs(
            session, sort=ClubSort.NEWEST, page=page, limit=limit, include_inactive=True
        )
        response = paginated_response(result, club_to_response)
    return response


@router.put(
    "/clubs/{club_id}/status",
    response_model=ApiResponse[ClubResponse],
    summary="Change club status",
)
def change_club_status(club_id: UUID, request: UpdateStatusRequest) -> ApiResponse[ClubResponse]:
    """Activate or deactivate a club."""
    logger.info(f"Admin change club status: id={club_id}, is_active={request.is_active}")
    with get_session() as session:
        club = set_club_active(session, _get_any_club(session, club_id), request.is_active)
        response = club_to_response(club)
    return ApiResponse(data=response, message="Club status updated successfully")


@router.put(
    "/clubs/{club_id}/approve",
    response_model=ApiResponse[ClubResponse],
    summary="Approve club",
)
def approve_club(club_id: UUID) -> ApiResponse[ClubResponse]:
    """Mark a club as approved."""
    logger.info(f"Admin approve club: id={club_id}")
    with get_session() as session:
        club = set_club_approved(session, _get_any_club(session, club_id), True)
        response = club_to_response(club)
    return ApiResponse(data=response, message="Club approved successfully")


@router.put(
    "/clubs/{club_id}/reject",
    response_model=ApiResponse[ClubResponse],
    summary="Reject club",
)
def reject_club(club_id: UUID) -> ApiResponse[ClubResponse]:
    """Withdraw a club's approval."""
    logger.info(f"Admin reject club: id={club_id}")
    with get_session() as session:
        club = set_club_approved(session, _get_any_club(session, club_id), False)
        response = club_to_response(club)
    return ApiResponse(data=response, message="Club rejected successfully")


@router.delete(
    "/clubs/{club_id}",
    response_model=ApiResponse[None],
    summary="Delete club",
)
def remove_club(club_id: UUID) -> ApiResponse[None]:
    """Permanently delete a club with its members, posts and polls."""
    logger.info(f"Admin delete club: id={club_id}")
    with get_session() as session:
        delete_club(session, _get_any_club(session, club_id))
    return ApiResponse(message="Club deleted successfully")


@router.get(
    "/stats",
    response_model=ApiResponse[AdminStatsResponse],
    summary="Admin dashboard stats",
)
def get_stats() -> ApiResponse[AdminStatsResponse]:
    """Get site counts for the admin dashboard."""
    start = time.perf_counter()
    logger.info("Admin stats")

    since = datetime.now(UTC) - NEW_USER_WINDOW
    with get_session() as session:
        response = AdminStatsResponse(
            users=UserCounts(
                total=count_users(session),
                active=count_users(session, active_only=True),
                new=count_users(session, since=since),
            ),
            shows=TotalActive(
                total=count_shows(session, active_only=False),
                active=count_shows(session),
            ),
            clubs=TotalActive(
                total=count_clubs(session),
                active=count_clubs(session, active_only=True),
            ),
            reviews=ReviewCounts(
                total=count_reviews(session),
                flagged=count_reviews(session, reported_only=True),
            ),
            top_genres=[GenreCount(**row) for row in count_show_genres(session)],
        )

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Admin stats complete: elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response)


@router.get("/export/users", summary="Export users as CSV")
def export_users() -> Response:
    """Download every user as CSV."""
    logger.info("Admin export users")
    with get_session() as session:
        users = _all_items(lambda page: list_users(session, page=page, limit=EXPORT_PAGE_SIZE))
        rows = [
            [
                user.name,
                user.email,
                user.role,
                _status_label(user.is_active),
                user.created_at.isoformat() if user.created_at else "",
            ]
            for user in users
        ]
    logger.info(f"Admin export users complete: rows={len(rows)}")
    return _csv_response(
        "users-export.csv",
        ["Name", "Email", "Role", "Status", "Created At"],
        rows,
    )


@router.get("/export/clubs", summary="Export clubs as CSV")
def export_clubs() -> Response:
    """Download every club as CSV."""
    logger.info("Admin export clubs")
    with get_session() as session:
        clubs = _all_items(
            lambda page: list_clubs(
                session,
                sort=ClubSort.NEWEST,
                page=page,
                limit=EXPORT_PAGE_SIZE,
                include_inactive=True,
            )
        )
        rows = [
            [
                club.name,
                club.description,
                club.creator.name if club.creator is not None else "Unknown",
                str(club.member_count),
                _status_label(club.is_active),
                club.created_at.isoformat() if club.created_at else "",
            ]
            for club in clubs
        ]
    logger.info(f"Admin export clubs complete: rows={len(rows)}")
    return _csv_response(
        "clubs-export.csv",
        ["Name", "Description", "Owner", "Members", "Status", "Created At"],
        rows,
    )
