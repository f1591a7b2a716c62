"""API endpoints for browsing and managing the show catalogue."""

import logging
import time
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from otakutrack.api.common import bad_request, not_found, paginated_response
from otakutrack.api.dependencies import get_current_user, require_admin
from otakutrack.api.models import ApiResponse
from otakutrack.api.shows.models import (
    CreateShowRequest,
    EpisodeResponse,
    ShowResponse,
    StreamingLinkResponse,
    UpdateShowRequest,
)
from otakutrack.database.base import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from otakutrack.database.connection import get_session
from otakutrack.database.shows import (
    Show,
    ShowSort,
    create_show,
    deactivate_show,
    get_candidate_shows,
    get_popular_shows,
    get_seasonal_shows,
    get_show_by_id,
    get_shows_by_genre,
    get_similar_shows,
    get_trending_shows,
    list_shows,
    update_show,
)
from otakutrack.database.users import User
from otakutrack.database.watchlist import get_watched_shows, get_watchlist_show_ids
from otakutrack.enums import AiringSeason, Genre, ShowStatus, ShowType
from otakutrack.recommendations.engine import rank_shows

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shows", tags=["Shows"])


def _split(value: str | None) -> list[str] | None:
    """Split a comma-separated query parameter."""
    if not value:
        return None
    return [part.strip() for part in value.split(",") if part.strip()] or None


def _show_to_response(show: Show) -> ShowResponse:
    """Convert a show model to response.

    :param show: The database model.
    :returns: API response model.
    """
    return ShowResponse(
        id=show.id,
        title=show.title,
        original_title=show.original_title,
        description=show.description,
        type=show.type,
        status=show.status,
        genres=list(show.genres or []),
        tags=list(show.tags or []),
        season=show.season,
        year=show.year,
        rating_average=show.rating_average,
        rating_count=show.rating_count,
        poster=show.poster,
        banner=show.banner,
        trailer=show.trailer,
        studio=show.studio,
        source=show.source,
        age_rating=show.age_rating,
        episode_duration=show.episode_duration,
        episode_count=show.episode_count,
        is_popular=show.is_popular,
        is_recommended=show.is_recommended,
        episodes=[
            EpisodeResponse(
                id=episode.id,
                number=episode.number,
                title=episode.title,
                description=episode.description,
                duration=episode.duration,
                air_date=episode.air_date,
                thumbnail=episode.thumbnail,
            )
            for episode in show.episodes
        ],
        streaming_links=[
            StreamingLinkResponse(platform=link.platform, url=link.url, region=link.region)
            for link in show.streaming_links
        ],
        created_at=show.created_at,
    )


@router.get(
    "",
    response_model=ApiResponse[list[ShowResponse]],
    summary="List shows",
)
def get_shows(  # noqa: PLR0913
    genre: str | None = Query(None, description="Comma-separated genres (match any)"),
    tag: str | None = Query(None, description="Comma-separated tags (match any)"),
    show_type: ShowType | None = Query(None, alias="type", description="Release format"),
    show_status: ShowStatus | None = Query(None, alias="status", description="Airing status"),
    year: int | None = Query(None, description="Broadcast year"),
    season: AiringSeason | None = Query(None, description="Broadcast season"),
    search: str | None = Query(None, description="Search title and original title"),
    sort: ShowSort = Query(ShowSort.RATING, description="Sort order"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
) -> ApiResponse[list[ShowResponse]]:
    """List active shows with filters, sorting and pagination."""
    start = time.perf_counter()
    logger.info(
        f"List shows: genre={genre}, tag={tag}, type={show_type}, status={show_status}, "
        f"year={year}, season={season}, search={search!r}, sort={sort}, page={page}"
    )

    with get_session() as session:
        result = list_shows(
            session,
            genres=_split(genre),
            tags=_split(tag),
            show_type=show_type,
            status=show_status,
            year=year,
            season=season,
            search=search,
            sort=sort,
            page=page,
            limit=limit,
        )
        response = paginated_response(result, _show_to_response)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"List shows complete: total={result.total}, elapsed={elapsed_ms:.0f}ms")

    return response


@router.get(
    "/popular",
    response_model=ApiResponse[list[ShowResponse]],
    summary="Popular shows",
)
def popular_shows(
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE, description="Maximum shows"),
) -> ApiResponse[list[ShowResponse]]:
    """Get the best rated shows."""
    logger.info(f"Popular shows: limit={limit}")
    with get_session() as session:
        shows = [_show_to_response(s) for s in get_popular_shows(session, limit=limit)]
    return ApiResponse(data=shows)


@router.get(
    "/trending",
    response_model=ApiResponse[list[ShowResponse]],
    summary="Trending shows",
)
def trending_shows(
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE, description="Maximum shows"),
) -> ApiResponse[list[ShowResponse]]:
    """Get highly rated shows."""
    logger.info(f"Trending shows: limit={limit}")
    with get_session() as session:
        shows = [_show_to_response(s) for s in get_trending_shows(session, limit=limit)]
    return ApiResponse(data=shows)


@router.get(
    "/recommendations",
    response_model=ApiResponse[list[ShowResponse]],
    summary="Personalised recommendations",
)
def recommendations(
    limit: int = Query(10, ge=1, le=50, description="Maximum shows"),
    user: User = Depends(get_current_user),
) -> ApiResponse[list[ShowResponse]]:
    """Recommend unseen shows based on what the user watches.

    Users without a watching or completed history get popular shows.
    """
    start = time.perf_counter()
    logger.info(f"Recommendations: user_id={user.id}, limit={limit}")

    with get_session() as session:
        history = get_watched_shows(session, user.id)
        if history:
            candidates = get_candidate_shows(
                session,
                exclude_ids=get_watchlist_show_ids(session, user.id),
            )
            shows = rank_shows(candidates, history, limit=limit)
        else:
            shows = get_popular_shows(session, limit=limit)
        results = [_show_to_response(s) for s in shows]

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Recommendations complete: user_id={user.id}, history={len(history)}, "
        f"found={len(results)}, elapsed={elapsed_ms:.0f}ms"
    )

    return ApiResponse(data=results)


@router.get(
    "/genre/{genre}",
    response_model=ApiResponse[list[ShowResponse]],
    summary="Shows by genre",
)
def shows_by_genre(
    genre: Genre,
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE, description="Maximum shows"),
) -> ApiResponse[list[ShowResponse]]:
    """Get shows tagged with a genre."""
    logger.info(f"Shows by genre: genre={genre}, limit={limit}")
    with get_session() as session:
        shows = [_show_to_response(s) for s in get_shows_by_genre(session, genre, limit=limit)]
    return ApiResponse(data=shows)


@router.get(
    "/seasonal/{season}/{year}",
    response_model=ApiResponse[list[ShowResponse]],
    summary="Seasonal shows",
)
def seasonal_shows(
    season: AiringSeason,
    year: int,
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE, description="Maximum shows"),
) -> ApiResponse[list[ShowResponse]]:
    """Get shows that aired in a given season."""
    logger.info(f"Seasonal shows: season={season}, year={year}")
    with get_session() as session:
        shows = [
            _show_to_response(s) for s in get_seasonal_shows(session, season, year, limit=limit)
        ]
    return ApiResponse(data=shows)


@router.get(
    "/{show_id}",
    response_model=ApiResponse[ShowResponse],
    summary="Get show",
)
def get_show(show_id: UUID) -> ApiResponse[ShowResponse]:
    """Get a show with its episodes and streaming links."""
    start = time.perf_counter()
    logger.info(f"Get show: id={show_id}")

    with get_session() as session:
        show = get_show_by_id(session, show_id)
        if show is None:
            raise not_found("Show")
        response = _show_to_response(show)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Get show complete: id={show_id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response)


@router.get(
    "/{show_id}/similar",
    response_model=ApiResponse[list[ShowResponse]],
    summary="Similar shows",
)
def similar_shows(
    show_id: UUID,
    limit: int = Query(10, ge=1, le=50, description="Maximum shows"),
) -> ApiResponse[list[ShowResponse]]:
    """Get shows sharing a genre or tag with the given show."""
    logger.info(f"Similar shows: id={show_id}, limit={limit}")
    with get_session() as session:
        show = get_show_by_id(session, show_id)
        if show is None:
            raise not_found("Show")
        shows = [_show_to_response(s) for s in get_similar_shows(session, show, limit=limit)]
    return ApiResponse(data=shows)


@router.post(
    "",
    response_model=ApiResponse[ShowResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create show",
)
def add_show(
    request: CreateShowRequest,
    admin: User = Depends(require_admin),
) -> ApiResponse[ShowResponse]:
    """Add a show to the catalogue (admin only)."""
    start = time.perf_counter()
    logger.info(f"Create show: title={request.title!r}, admin_id={admin.id}")

    fields = request.model_dump(exclude={"episodes", "streaming_links"})
    with get_session() as session:
        try:
            show = create_show(
                session,
                episodes=[e.model_dump() for e in request.episodes],
                streaming_links=[link.model_dump() for link in request.streaming_links],
                **fields,
            )
        except ValueError as e:
            raise bad_request(e) from e
        response = _show_to_response(show)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Create show complete: id={response.id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response, message="Show created successfully")


@router.put(
    "/{show_id}",
    response_model=ApiResponse[ShowResponse],
    summary="Update show",
)
def edit_show(
    show_id: UUID,
    request: UpdateShowRequest,
    admin: User = Depends(require_admin),
) -> ApiResponse[ShowResponse]:
    """Update a show (admin only). Episodes and links are replaced when given."""
    start = time.perf_counter()
    fields = {
        name: value
        for name, value in request.model_dump(exclude={"episodes", "streaming_links"}).items()
        if value is not None
    }
    logger.info(f"Update show: id={show_id}, fields={sorted(fields)}, admin_id={admin.id}")

    episodes = None
    if request.episodes is not None:
        episodes = [e.model_dump() for e in request.episodes]
    links = None
    if request.streaming_links is not None:
        links = [link.model_dump() for link in request.streaming_links]

    with get_session() as session:
        try:
            show = update_show(session, show_id, episodes=episodes, streaming_links=links, **fields)
        except ValueError as e:
            raise bad_request(e) from e
        if show is None:
            raise not_found("Show")
        response = _show_to_response(show)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Update show complete: id={show_id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response, message="Show updated successfully")


@router.delete(
    "/{show_id}",
    response_model=ApiResponse[None],
    summary="Delete show",
)
def remove_show(show_id: UUID, admin: User = Depends(require_admin)) -> ApiResponse[None]:
    """Soft delete a show (admin only). It disappears from listings."""
    start = time.perf_counter()
    logger.info(f"Delete show: id={show_id}, admin_id={admin.id}")

    with get_session() as session:
        if deactivate_show(session, show_id) is None:
            raise not_found("Show")

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Delete show complete: id={show_id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(message="Show deleted successfully")
