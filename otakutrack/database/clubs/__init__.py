"""Database models and operations for clubs, their posts and polls."""

from otakutrack.database.clubs.models import (
    DEFAULT_MAX_MEMBERS,
    Club,
    ClubMember,
    ClubPost,
    Poll,
    PollOption,
    PollVote,
    PostComment,
    PostLike,
)
from otakutrack.database.clubs.operations import (
    MIN_POLL_OPTIONS,
    ClubSort,
    add_comment,
    close_poll,
    count_clubs,
    count_posts,
    create_club,
    create_poll,
    create_post,
    delete_club,
    delete_comment,
    delete_poll,
    delete_post,
    get_club_by_id,
    get_club_by_name,
    get_comment,
    get_poll,
    get_post,
    join_club,
    leave_club,
    list_clubs,
    list_polls,
    list_posts,
    set_club_active,
    set_club_approved,
    toggle_post_like,
    update_club,
    update_post,
    vote_on_poll,
)

__all__ = [
    # Models
    "DEFAULT_MAX_MEMBERS",
    "Club",
    "ClubMember",
    "ClubPost",
    "Poll",
    "PollOption",
    "PollVote",
    "PostComment",
    "PostLike",
    # Operations
    "MIN_POLL_OPTIONS",
    "ClubSort",
    "add_comment",
    "close_poll",
    "count_clubs",
    "count_posts",
    "create_club",
    "create_poll",
    "create_post",
    "delete_club",
    "delete_comment",
    "delete_poll",
    "delete_post",
    "get_club_by_id",
    "get_club_by_name",
    "get_comment",
    "get_poll",
    "get_post",
    "join_club",
    "leave_club",
    "list_clubs",
    "list_polls",
    "list_posts",
    "set_club_active",
    "set_club_approved",
    "toggle_post_like",
    "update_club",
    "update_post",
    "vote_on_poll",
]
