"""API endpoints for the authenticated user's watchlist."""

import logging
import time
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from otakutrack.api.common import bad_request, forbidden, not_found, show_summary, tracking
from otakutrack.api.dependencies import get_current_user
from otakutrack.api.models import ApiResponse
from otakutrack.api.watchlist.models import (
    AddToWatchlistRequest,
    StatusCount,
    UpdateProgressRequest,
    UpdateWatchlistItemRequest,
    WatchlistItemResponse,
    WatchlistStatsResponse,
)
from otakutrack.database.analytics import (
    sync_watchlist_status_counts,
    track_episodes_watched,
    track_show_added,
)
from otakutrack.database.connection import get_session
from otakutrack.database.shows import get_show_by_id
from otakutrack.database.users import User
from otakutrack.database.watchlist import (
    WatchlistItem,
    add_to_watchlist,
    get_watchlist_item,
    get_watchlist_item_for_show,
    get_watchlist_stats,
    list_watchlist,
    remove_from_watchlist,
    update_progress,
    update_watchlist_item,
)
from otakutrack.enums import WatchStatus
from otakutrack.watchlist.progress import validate_progress

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/watchlist", tags=["Watchlist"])


def item_to_response(item: WatchlistItem) -> WatchlistItemResponse:
    """Convert a watchlist item model to response.

    :param item: The database model.
    :returns: API response model.
    """
    return WatchlistItemResponse(
        id=item.id,
        show_id=item.show_id,
        show=show_summary(item.show) if item.show is not None else None,
        status=item.status,
        current_episode=item.current_episode,
        total_episodes=item.total_episodes,
        rewatch_count=item.rewatch_count,
        completion_percentage=item.completion_percentage,
        rating=item.rating,
        notes=item.notes,
        start_date=item.start_date,
        finish_date=item.finish_date,
        last_watched=item.last_watched,
        time_spent_days=item.time_spent_days,
        is_private=item.is_private,
        tags=list(item.tags or []),
        created_at=item.created_at,
    )


def _get_owned_item(session: Session, item_id: UUID, user: User) -> WatchlistItem:
    """Load a watchlist item and check the caller owns it.

    :param session: Database session.
    :param item_id: Watchlist item ID.
    :param user: The caller.
    :returns: The item.
    :raises HTTPException: 404 if missing, 403 if owned by someone else.
    """
    item = get_watchlist_item(session, item_id)
    if item is None:
        raise not_found("Watchlist item")
    if item.user_id != user.id:
        logger.warning(f"Watchlist access denied: id={item_id}, user_id={user.id}")
        raise forbidden("Not authorized to access this item")
    return item


@router.get(
    "",
    response_model=ApiResponse[list[WatchlistItemResponse]],
    summary="Get watchlist",
)
def get_watchlist(
    user: User = Depends(get_current_user),
) -> ApiResponse[list[WatchlistItemResponse]]:
    """Get every item on the caller's watchlist, most recently updated first."""
    start = time.perf_counter()
    logger.info(f"Get watchlist: user_id={user.id}")

    with get_session() as session:
        results = [item_to_response(i) for i in list_watchlist(session, user.id)]

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Get watchlist complete: found={len(results)}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=results)


@router.get(
    "/status/{watch_status}",
    response_model=ApiResponse[list[WatchlistItemResponse]],
    summary="Get watchlist by status",
)
def get_watchlist_by_status(
    watch_status: WatchStatus,
    user: User = Depends(get_current_user),
) -> ApiResponse[list[WatchlistItemResponse]]:
    """Get the caller's watchlist items with a given status."""
    logger.info(f"Get watchlist by status: user_id={user.id}, status={watch_status}")
    with get_session() as session:
        results = [
            item_to_response(i) for i in list_watchlist(session, user.id, status=watch_status)
        ]
    return ApiResponse(data=results)


@router.get(
    "/stats",
    response_model=ApiResponse[WatchlistStatsResponse],
    summary="Get watchlist statistics",
)
def get_stats(user: User = Depends(get_current_user)) -> ApiResponse[WatchlistStatsResponse]:
    """Get item and episode counts per status for the caller's watchlist."""
    logger.info(f"Get watchlist stats: user_id={user.id}")
    with get_session() as session:
        stats = get_watchlist_stats(session, user.id)

    return ApiResponse(
        data=WatchlistStatsResponse(
            total_shows=stats.total_shows,
            completed_shows=stats.completed_shows,
            completion_rate=stats.completion_rate,
            by_status={
                name: StatusCount(**counts) for name, counts in stats.by_status.items()
            },
        )
    )


@router.get(
    "/show/{show_id}",
    response_model=ApiResponse[WatchlistItemResponse],
    summary="Get watchlist item for a show",
)
def get_item_for_show(
    show_id: UUID,
    user: User = Depends(get_current_user),
) -> ApiResponse[WatchlistItemResponse]:
    """Get the caller's item for a show. Data is null when the show is not on the list."""
    logger.info(f"Get watchlist item for show: user_id={user.id}, show_id={show_id}")
    with get_session() as session:
        item = get_watchlist_item_for_show(session, user.id, show_id)
        response = item_to_response(item) if item is not None else None
    return ApiResponse(data=response)


@router.post(
    "",
    response_model=ApiResponse[WatchlistItemResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add to watchlist",
)
def add_item(
    request: AddToWatchlistRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[WatchlistItemResponse]:
    """Add a show to the caller's watchlist."""
    start = time.perf_counter()
    logger.info(
        f"Add to watchlist: user_id={user.id}, show_id={request.show_id}, status={request.status}"
    )

    with get_session() as session:
        show = get_show_by_id(session, request.show_id)
        if show is None:
            raise not_found("Show")
        try:
            item = add_to_watchlist(
                session, user.id, show, status=request.status, notes=request.notes
            )
        except ValueError as e:
            raise bad_request(e) from e

        with tracking(session, "show_added"):
            track_show_added(session, user.id, show)
            sync_watchlist_status_counts(session, user.id)

        response = item_to_response(item)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Add to watchlist complete: id={response.id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response, message="Added to watchlist")


@router.put(
    "/{item_id}",
    response_model=ApiResponse[WatchlistItemResponse],
    summary="Update watchlist item",
)
def update_item(
    item_id: UUID,
    request: UpdateWatchlistItemRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[WatchlistItemResponse]:
    """Update a watchlist item. The status is taken as given."""
    start = time.perf_counter()
    fields = request.model_dump(exclude_unset=True)
    logger.info(f"Update watchlist item: id={item_id}, fields={sorted(fields)}")

    with get_session() as session:
        item = _get_owned_item(session, item_id, user)
        try:
            if request.current_episode is not None:
                validate_progress(request.current_episode, item.total_episodes)
            item = update_watchlist_item(session, item, **fields)
        except ValueError as e:
            raise bad_request(e) from e

        if request.status is not None:
            with tracking(session, "status_change"):
                sync_watchlist_status_counts(session, user.id)

        response = item_to_response(item)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Update watchlist item complete: id={item_id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response)


@router.put(
    "/{item_id}/progress",
    response_model=ApiResponse[WatchlistItemResponse],
    summary="Update progress",
)
def update_item_progress(
    item_id: UUID,
    request: UpdateProgressRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[WatchlistItemResponse]:
    """Record episode progress. The status follows from the progress.

    Newly watched episodes are added to the caller's analytics.
    """
    start = time.perf_counter()
    logger.info(
        f"Update progress: id={item_id}, episode={request.current_episode}, "
        f"rewatch={request.rewatch_count}"
    )

    with get_session() as session:
        item = _get_owned_item(session, item_id, user)
        try:
            result = update_progress(
                session,
                item,
                current_episode=request.current_episode,
                rewatch_count=request.rewatch_count,
            )
        except ValueError as e:
            raise bad_request(e) from e

        if result.new_episodes > 0:
            with tracking(session, "episodes_watched"):
                track_episodes_watched(
                    session,
                    user.id,
                    item.show_id,
                    episodes=result.new_episodes,
                    episode_duration=item.show.episode_duration,
                )
        if result.previous_status != item.status:
            with tracking(session, "status_change"):
                sync_watchlist_status_counts(session, user.id)

        response = item_to_response(result.item)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Update progress complete: id={item_id}, status={response.status}, "
        f"new_episodes={result.new_episodes}, elapsed={elapsed_ms:.0f}ms"
    )

    return ApiResponse(data=response)


@router.delete(
    "/{item_id}",
    response_model=ApiResponse[None],
    summary="Remove from watchlist",
)
def remove_item(item_id: UUID, user: User = Depends(get_current_user)) -> ApiResponse[None]:
    """Remove an item from the caller's watchlist."""
    start = time.perf_counter()
    logger.info(f"Remove from watchlist: id={item_id}, user_id={user.id}")

    with get_session() as session:
        item = _get_owned_item(session, item_id, user)
        remove_from_watchlist(session, item)
        with tracking(session, "status_change"):
            sync_watchlist_status_counts(session, user.id)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Remove from watchlist complete: id={item_id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(message="Removed from watchlist")
