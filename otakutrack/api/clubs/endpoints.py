"""API endpoints for clubs, their posts and polls."""

import logging
import time
from datetime import UTC, datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from otakutrack.api.clubs.models import (
    ClubDetailResponse,
    ClubMemberResponse,
    ClubResponse,
    CommentResponse,
    CreateClubRequest,
    CreateCommentRequest,
    CreatePollRequest,
    CreatePostRequest,
    LikeResponse,
    PollOptionResponse,
    PollResponse,
    PostResponse,
    UpdateClubRequest,
    UpdatePostRequest,
    VoteRequest,
)
from otakutrack.api.common import (
    bad_request,
    forbidden,
    not_found,
    paginated_response,
    tracking,
    user_summary,
)
from otakutrack.api.dependencies import get_current_user, get_optional_user
from otakutrack.api.models import ApiResponse
from otakutrack.clubs.polls import is_poll_open, select_vote_indexes, tally_poll, user_vote_indexes
from otakutrack.database.analytics import track_club_activity
from otakutrack.database.base import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from otakutrack.database.clubs import (
    Club,
    ClubMember,
    ClubPost,
    ClubSort,
    Poll,
    add_comment,
    close_poll,
    create_club,
    create_poll,
    create_post,
    delete_comment,
    delete_poll,
    delete_post,
    get_club_by_id,
    get_comment,
    get_poll,
    get_post,
    join_club,
    leave_club,
    list_clubs,
    list_polls,
    list_posts,
    set_club_active,
    toggle_post_like,
    update_club,
    update_post,
    vote_on_poll,
)
from otakutrack.database.connection import get_session
from otakutrack.database.users import User
from otakutrack.enums import ClubActivity, ClubCategory, ClubRole

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clubs", tags=["Clubs"])


def club_to_response(club: Club) -> ClubResponse:
    """Convert a club model to response.

    :param club: The database model.
    :returns: API response model.
    """
    return ClubResponse(
        id=club.id,
        name=club.name,
        description=club.description,
        avatar=club.avatar,
        banner=club.banner,
        category=club.category,
        related_show_id=club.related_show_id,
        rules=list(club.rules or []),
        tags=list(club.tags or []),
        is_private=club.is_private,
        is_spoiler_free=club.is_spoiler_free,
        max_members=club.max_members,
        member_count=club.member_count,
        post_count=club.post_count,
        is_active=club.is_active,
        is_approved=club.is_approved,
        creator=user_summary(club.creator) if club.creator is not None else None,
        created_at=club.created_at,
    )


def _club_to_detail(club: Club) -> ClubDetailResponse:
    return ClubDetailResponse(
        **club_to_response(club).model_dump(),
        members=[
            ClubMemberResponse(user=user_summary(m.user), role=m.role, joined_at=m.joined_at)
            for m in club.members
        ],
    )


def _post_to_response(post: ClubPost, viewer_id: UUID | None = None) -> PostResponse:
    """Convert a post model to response.

    :param post: The database model.
    :param viewer_id: The caller, used to report whether they liked the post.
    :returns: API response model.
    """
    return PostResponse(
        id=post.id,
        club_id=post.club_id,
        author=user_summary(post.author) if post.author is not None else None,
        title=post.title,
        content=post.content,
        is_spoiler=post.is_spoiler,
        spoiler_show_id=post.spoiler_show_id,
        spoiler_episode=post.spoiler_episode,
        tags=list(post.tags or []),
        like_count=post.like_count,
        liked=viewer_id is not None and post.liked_by(viewer_id),
        comments=[
            CommentResponse(
                id=c.id,
                user=user_summary(c.user) if c.user is not None else None,
                content=c.content,
                created_at=c.created_at,
            )
            for c in post.comments
        ],
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def _poll_to_response(
    poll: Poll,
    viewer_id: UUID | None = None,
    now: datetime | None = None,
) -> PollResponse:
    """Convert a poll model to response with its tally.

    :param poll: The database model.
    :param viewer_id: The caller, used to report their vote.
    :param now: Current time (defaults to now).
    :returns: API response model.
    """
    if now is None:
        now = datetime.now(UTC)
    option_votes = poll.option_votes()
    tally = tally_poll(option_votes)
    return PollResponse(
        id=poll.id,
        club_id=poll.club_id,
        created_by=poll.created_by,
        question=poll.question,
        options=[
            PollOptionResponse(
                index=option.index,
                text=option.text,
                votes=option.votes,
                percentage=option.percentage,
            )
            for option in tally.options
        ],
        is_active=is_poll_open(poll.is_active, poll.end_date, now),
        is_multiple_choice=poll.is_multiple_choice,
        end_date=poll.end_date,
        total_votes=tally.total_votes,
        unique_voters=tally.unique_voters,
        user_votes=user_vote_indexes(option_votes, viewer_id) if viewer_id is not None else [],
        created_at=poll.created_at,
    )


def _get_club(session: Session, club_id: UUID) -> Club:
    club = get_club_by_id(session, club_id)
    if club is None:
        raise not_found("Club")
    return club


def _require_member(club: Club, user: User, action: str) -> ClubMember:
    """Check the caller belongs to the club.

    :param club: The club.
    :param user: The caller.
    :param action: What the caller is trying to do, for the error message.
    :returns: The caller's membership.
    :raises HTTPException: 403 if the caller is not a member.
    """
    member = club.get_member(user.id)
    if member is None:
        logger.warning(f"Club member check failed: club_id={club.id}, user_id={user.id}")
        raise forbidden(f"Must be a member to {action}")
    return member


def _require_club_admin(club: Club, user: User, action: str) -> None:
    member = club.get_member(user.id)
    if member is None or member.role != ClubRole.ADMIN:
        logger.warning(f"Club admin check failed: club_id={club.id}, user_id={user.id}")
        raise forbidden(f"Only club admins can {action} the club")


def _can_moderate(club: Club, user: User) -> bool:
    member = club.get_member(user.id)
    return member is not None and member.can_moderate


def _get_post(session: Session, club_id: UUID, post_id: UUID) -> ClubPost:
    post = get_post(session, club_id, post_id)
    if post is None:
        raise not_found("Post")
    return post


def _get_poll(session: Session, club_id: UUID, poll_id: UUID) -> Poll:
    poll = get_poll(session, club_id, poll_id)
    if poll is None:
        raise not_found("Poll")
    return poll


@router.get(
    "",
    response_model=ApiResponse[list[ClubResponse]],
    summary="List clubs",
)
def get_clubs(
    category: ClubCategory | None = Query(None, description="Club category"),
    search: str | None = Query(None, description="Search name, description and tags"),
    sort: ClubSort = Query(ClubSort.MEMBERS, description="Sort order"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
) -> ApiResponse[list[ClubResponse]]:
    """List active clubs."""
    start = time.perf_counter()
    logger.info(f"List clubs: category={category}, search={search!r}, sort={sort}, page={page}")

    with get_session() as session:
        result = list_clubs(
            session, category=category, search=search, sort=sort, page=page, limit=limit
        )
        response = paginated_response(result, club_to_response)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"List clubs complete: total={result.total}, elapsed={elapsed_ms:.0f}ms")

    return response


@router.get(
    "/{club_id}",
    response_model=ApiResponse[ClubDetailResponse],
    summary="Get club",
)
def get_club(club_id: UUID) -> ApiResponse[ClubDetailResponse]:
    """Get a club with its members."""
    logger.info(f"Get club: id={club_id}")
    with get_session() as session:
        response = _club_to_detail(_get_club(session, club_id))
    return ApiResponse(data=response)


@router.post(
    "",
    response_model=ApiResponse[ClubDetailResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create club",
)
def add_club(
    request: CreateClubRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[ClubDetailResponse]:
    """Create a club. The creator becomes its admin."""
    start = time.perf_counter()
    logger.info(f"Create club: name={request.name!r}, user_id={user.id}")

    fields = request.model_dump(exclude={"name", "description"})
    with get_session() as session:
        try:
            club = create_club(session, user.id, request.name, request.description, **fields)
        except ValueError as e:
            raise bad_request(e) from e
        response = _club_to_detail(club)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Create club complete: id={response.id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response, message="Club created successfully")


@router.put(
    "/{club_id}",
    response_model=ApiResponse[ClubDetailResponse],
    summary="Update club",
)
def edit_club(
    club_id: UUID,
    request: UpdateClubRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[ClubDetailResponse]:
    """Update a club (club admins only)."""
    start = time.perf_counter()
    fields = request.model_dump(exclude_unset=True)
    logger.info(f"Update club: id={club_id}, fields={sorted(fields)}, user_id={user.id}")

    with get_session() as session:
        club = _get_club(session, club_id)
        _require_club_admin(club, user, "update")
        try:
            club = update_club(session, club, **fields)
        except ValueError as e:
            raise bad_request(e) from e
        response = _club_to_detail(club)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Update club complete: id={club_id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response, message="Club updated successfully")


@router.delete(
    "/{club_id}",
    response_model=ApiResponse[None],
    summary="Delete club",
)
def remove_club(club_id: UUID, user: User = Depends(get_current_user)) -> ApiResponse[None]:
    """Delete a club (club admins only). The club is hidden, not erased."""
    start = time.perf_counter()
    logger.info(f"Delete club: id={club_id}, user_id={user.id}")

    with get_session() as session:
        club = _get_club(session, club_id)
        _require_club_admin(club, user, "delete")
        set_club_active(session, club, False)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Delete club complete: id={club_id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(message="Club deleted successfully")


@router.post(
    "/{club_id}/join",
    response_model=ApiResponse[ClubDetailResponse],
    summary="Join club",
)
def join(club_id: UUID, user: User = Depends(get_current_user)) -> ApiResponse[ClubDetailResponse]:
    """Join a club as a member."""
    logger.info(f"Join club: id={club_id}, user_id={user.id}")

    with get_session() as session:
        club = _get_club(session, club_id)
        try:
            join_club(session, club, user.id)
        except ValueError as e:
            raise bad_request(e) from e

        with tracking(session, "club_join"):
            track_club_activity(session, user.id, ClubActivity.JOIN)

        response = _club_to_detail(club)

    return ApiResponse(data=response, message="Successfully joined club")


@router.post(
    "/{club_id}/leave",
    response_model=ApiResponse[None],
    summary="Leave club",
)
def leave(club_id: UUID, user: User = Depends(get_current_user)) -> ApiResponse[None]:
    """Leave a club. The club admin cannot leave."""
    logger.info(f"Leave club: id={club_id}, user_id={user.id}")

    with get_session() as session:
        club = _get_club(session, club_id)
        try:
            leave_club(session, club, user.id)
        except ValueError as e:
            raise bad_request(e) from e

    return ApiResponse(message="Successfully left club")


@router.get(
    "/{club_id}/posts",
    response_model=ApiResponse[list[PostResponse]],
    summary="List posts",
)
def get_posts(
    club_id: UUID,
    hide_spoilers: bool = Query(False, description="Hide spoiler posts in spoiler-free clubs"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
    user: User | None = Depends(get_optional_user),
) -> ApiResponse[list[PostResponse]]:
    """List a club's posts, newest first."""
    start = time.perf_counter()
    logger.info(f"List posts: club_id={club_id}, hide_spoilers={hide_spoilers}, page={page}")
    viewer_id = user.id if user is not None else None

    with get_session() as session:
        club = _get_club(session, club_id)
        result = list_posts(session, club, hide_spoilers=hide_spoilers, page=page, limit=limit)
        response = paginated_response(result, lambda p: _post_to_response(p, viewer_id))

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"List posts complete: total={result.total}, elapsed={elapsed_ms:.0f}ms")

    return response


@router.post(
    "/{club_id}/posts",
    response_model=ApiResponse[PostResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
)
def add_post(
    club_id: UUID,
    request: CreatePostRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[PostResponse]:
    """Post in a club (members only)."""
    start = time.perf_counter()
    logger.info(f"Create post: club_id={club_id}, user_id={user.id}")

    fields = request.model_dump(exclude={"title", "content"})
    with get_session() as session:
        club = _get_club(session, club_id)
        _require_member(club, user, "post")
        post = create_post(session, club, user.id, request.title, request.content, **fields)

        with tracking(session, "club_post"):
            track_club_activity(session, user.id, ClubActivity.POST)

        response = _post_to_response(post, user.id)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Create post complete: id={response.id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response, message="Post created successfully")


@router.put(
    "/{club_id}/posts/{post_id}",
    response_model=ApiResponse[PostResponse],
    summary="Edit post",
)
def edit_post(
    club_id: UUID,
    post_id: UUID,
    request: UpdatePostRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[PostResponse]:
    """Edit a post (author only)."""
    fields = request.model_dump(exclude_unset=True)
    logger.info(f"Edit post: id={post_id}, club_id={club_id}, fields={sorted(fields)}")

    with get_session() as session:
        _get_club(session, club_id)
        post = _get_post(session, club_id, post_id)
        if post.author_id != user.id:
            raise forbidden("Not authorized to edit this post")
        try:
            post = update_post(session, post, **fields)
        except ValueError as e:
            raise bad_request(e) from e
        response = _post_to_response(post, user.id)

    return ApiResponse(data=response, message="Post updated successfully")


@router.delete(
    "/{club_id}/posts/{post_id}",
    response_model=ApiResponse[None],
    summary="Delete post",
)
def remove_post(
    club_id: UUID,
    post_id: UUID,
    user: User = Depends(get_current_user),
) -> ApiResponse[None]:
    """Delete a post (author, club admin or club moderator)."""
    logger.info(f"Delete post: id={post_id}, club_id={club_id}, user_id={user.id}")

    with get_session() as session:
        club = _get_club(session, club_id)
        post = _get_post(session, club_id, post_id)
        if post.author_id != user.id and not _can_moderate(club, user):
            raise forbidden("Not authorized to delete this post")
        delete_post(session, post)

    return ApiResponse(message="Post deleted successfully")


@router.post(
    "/{club_id}/posts/{post_id}/like",
    response_model=ApiResponse[LikeResponse],
    summary="Like post",
)
def like_post(
    club_id: UUID,
    post_id: UUID,
    user: User = Depends(get_current_user),
) -> ApiResponse[LikeResponse]:
    """Like a post, or remove the caller's like (members only)."""
    logger.info(f"Toggle post like: id={post_id}, club_id={club_id}, user_id={user.id}")

    with get_session() as session:
        club = _get_club(session, club_id)
        _require_member(club, user, "like posts")
        post = _get_post(session, club_id, post_id)
        liked = toggle_post_like(session, post, user.id)

        if liked:
            with tracking(session, "club_like"):
                track_club_activity(session, user.id, ClubActivity.LIKE)

        response = LikeResponse(liked=liked, like_count=post.like_count)

    return ApiResponse(data=response)


@router.post(
    "/{club_id}/posts/{post_id}/comments",
    response_model=ApiResponse[PostResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Comment on post",
)
def comment_on_post(
    club_id: UUID,
    post_id: UUID,
    request: CreateCommentRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[PostResponse]:
    """Comment on a post (members only)."""
    logger.info(f"Add comment: post_id={post_id}, club_id={club_id}, user_id={user.id}")

    with get_session() as session:
        club = _get_club(session, club_id)
        _require_member(club, user, "comment")
        post = _get_post(session, club_id, post_id)
        add_comment(session, post, user.id, request.content)
        response = _post_to_response(post, user.id)

    return ApiResponse(data=response, message="Comment added successfully")


@router.delete(
    "/{club_id}/posts/{post_id}/comments/{comment_id}",
    response_model=ApiResponse[None],
    summary="Delete comment",
)
def remove_comment(
    club_id: UUID,
    post_id: UUID,
    comment_id: UUID,
    user: User = Depends(get_current_user),
) -> ApiResponse[None]:
    """Delete a comment (author, club admin or club moderator)."""
    logger.info(f"Delete comment: id={comment_id}, post_id={post_id}, user_id={user.id}")

    with get_session() as session:
        club = _get_club(session, club_id)
        post = _get_post(session, club_id, post_id)
        comment = get_comment(post, comment_id)
        if comment is None:
            raise not_found("Comment")
        if comment.user_id != user.id and not _can_moderate(club, user):
            raise forbidden("Not authorized to delete this comment")
        delete_comment(session, post, comment)

    return ApiResponse(message="Comment deleted successfully")


@router.get(
    "/{club_id}/polls",
    response_model=ApiResponse[list[PollResponse]],
    summary="List polls",
)
def get_polls(
    club_id: UUID,
    active: bool = Query(False, description="Only polls that accept votes"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
    user: User | None = Depends(get_optional_user),
) -> ApiResponse[list[PollResponse]]:
    """List a club's polls with their tallies, newest first."""
    logger.info(f"List polls: club_id={club_id}, active={active}, page={page}")
    viewer_id = user.id if user is not None else None
    now = datetime.now(UTC)

    with get_session() as session:
        club = _get_club(session, club_id)
        result = list_polls(session, club, active_only=active, page=page, limit=limit, now=now)
        response = paginated_response(result, lambda p: _poll_to_response(p, viewer_id, now))

    return response


@router.post(
    "/{club_id}/polls",
    response_model=ApiResponse[PollResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create poll",
)
def add_poll(
    club_id: UUID,
    request: CreatePollRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[PollResponse]:
    """Create a poll (members only). At least two options are required."""
    start = time.perf_counter()
    logger.info(f"Create poll: club_id={club_id}, options={len(request.options)}")

    with get_session() as session:
        club = _get_club(session, club_id)
        _require_member(club, user, "create polls")
        try:
            poll = create_poll(
                session,
                club,
                user.id,
                request.question,
                request.options,
                is_multiple_choice=request.is_multiple_choice,
                end_date=request.end_date,
            )
        except ValueError as e:
            raise bad_request(e) from e
        response = _poll_to_response(poll, user.id)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Create poll complete: id={response.id}, elapsed={elapsed_ms:.0f}ms")

    return ApiResponse(data=response, message="Poll created successfully")


@router.post(
    "/{club_id}/polls/{poll_id}/vote",
    response_model=ApiResponse[PollResponse],
    summary="Vote on poll",
)
def vote(
    club_id: UUID,
    poll_id: UUID,
    request: VoteRequest,
    user: User = Depends(get_current_user),
) -> ApiResponse[PollResponse]:
    """Vote on a poll (members only). A new vote replaces the caller's previous one."""
    logger.info(f"Vote on poll: id={poll_id}, options={request.option_indexes}, user_id={user.id}")

    with get_session() as session:
        club = _get_club(session, club_id)
        _require_member(club, user, "vote")
        poll = _get_poll(session, club_id, poll_id)
        if not select_vote_indexes(
            request.option_indexes, len(poll.options), poll.is_multiple_choice
        ):
            raise bad_request(ValueError("Invalid option index"))
        try:
            vote_on_poll(session, poll, user.id, request.option_indexes)
        except ValueError as e:
            raise bad_request(e) from e

        with tracking(session, "poll_vote"):
            track_club_activity(session, user.id, ClubActivity.POLL_VOTE)

        response = _poll_to_response(poll, user.id)

    return ApiResponse(data=response, message="Vote recorded successfully")


@router.get(
    "/{club_id}/polls/{poll_id}/results",
    response_model=ApiResponse[PollResponse],
    summary="Poll results",
)
def poll_results(
    club_id: UUID,
    poll_id: UUID,
    user: User | None = Depends(get_optional_user),
) -> ApiResponse[PollResponse]:
    """Get a poll's tally and, for signed in callers, their own vote."""
    logger.info(f"Poll results: id={poll_id}, club_id={club_id}")

    with get_session() as session:
        _get_club(session, club_id)
        poll = _get_poll(session, club_id, poll_id)
        response = _poll_to_response(poll, user.id if user is not None else None)

    return ApiResponse(data=response)


@router.put(
    "/{club_id}/polls/{poll_id}/close",
    response_model=ApiResponse[PollResponse],
    summary="Close poll",
)
def close(
    club_id: UUID,
    poll_id: UUID,
    user: User = Depends(get_current_user),
) -> ApiResponse[PollResponse]:
    """Stop a poll accepting votes (creator, club admin or club moderator)."""
    logger.info(f"Close poll: id={poll_id}, club_id={club_id}, user_id={user.id}")

    with get_session() as session:
        club = _get_club(session, club_id)
        poll = _get_poll(session, club_id, poll_id)
        if poll.created_by != user.id and not _can_moderate(club, user):
            raise forbidden("Not authorized to close this poll")
        close_poll(session, poll)
        response = _poll_to_response(poll, user.id)

    return ApiResponse(data=response, message="Poll closed successfully")


@router.delete(
    "/{club_id}/polls/{poll_id}",
    response_model=ApiResponse[None],
    summary="Delete poll",
)
def remove_poll(
    club_id: UUID,
    poll_id: UUID,
    user: User = Depends(get_current_user),
) -> ApiResponse[None]:
    """Delete a poll (creator, club admin or club moderator)."""
    logger.info(f"Delete poll: id={poll_id}, club_id={club_id}, user_id={user.id}")

    with get_session() as session:
        club = _get_club(session, club_id)
        poll = _get_poll(session, club_id, poll_id)
        if poll.created_by != user.id and not _can_moderate(club, user):
            raise forbidden("Not authorized to delete this poll")
        delete_poll(session, poll)

    return ApiResponse(message="Poll deleted successfully")
