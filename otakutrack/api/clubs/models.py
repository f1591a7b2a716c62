"""Pydantic models for club, post and poll endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from otakutrack.api.models import UserSummary, UtcDatetime
from otakutrack.database.clubs import DEFAULT_MAX_MEMBERS
from otakutrack.enums import ClubCategory


class ClubMemberResponse(BaseModel):
    """Response model for a club member."""

    user: UserSummary = Field(..., description="The member")
    role: str = Field(..., description="Role within the club")
    joined_at: datetime = Field(..., description="When the user joined")


class ClubResponse(BaseModel):
    """Response model for a club."""

    id: UUID = Field(..., description="Club ID")
    name: str = Field(..., description="Unique club name")
    description: str = Field(..., description="Club description")
    avatar: str | None = Field(None, description="Avatar URL")
    banner: str | None = Field(None, description="Banner URL")
    category: str = Field(..., description="Club category")
    related_show_id: UUID | None = Field(None, description="Show the club is about")
    rules: list[str] = Field(default_factory=list, description="Club rules")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    is_private: bool = Field(..., description="Private club")
    is_spoiler_free: bool = Field(..., description="Spoiler posts can be hidden")
    max_members: int = Field(..., description="Member cap")
    member_count: int = Field(..., description="Number of members")
    post_count: int = Field(..., description="Number of posts")
    is_active: bool = Field(..., description="False when soft deleted")
    is_approved: bool = Field(..., description="Approved by a site admin")
    creator: UserSummary | None = Field(None, description="User who created the club")
    created_at: datetime | None = Field(None, description="When the club was created")


class ClubDetailResponse(ClubResponse):
    """Response model for a single club with its members."""

    members: list[ClubMemberResponse] = Field(default_factory=list, description="Members")


class CreateClubRequest(BaseModel):
    """Request model for creating a club."""

    name: str = Field(..., min_length=1, max_length=100, description="Unique club name")
    description: str = Field(..., min_length=1, max_length=1000, description="Club description")
    avatar: str | None = Field(None, max_length=500, description="Avatar URL")
    banner: str | None = Field(None, max_length=500, description="Banner URL")
    category: ClubCategory = Field(ClubCategory.GENERAL, description="Club category")
    related_show_id: UUID | None = Field(None, description="Show the club is about")
    rules: list[str] = Field(default_factory=list, description="Club rules")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    is_private: bool = Field(False, description="Private club")
    is_spoiler_free: bool = Field(False, description="Allow hiding spoiler posts")
    max_members: int = Field(DEFAULT_MAX_MEMBERS, ge=2, le=10000, description="Member cap")


class UpdateClubRequest(BaseModel):
    """Request model for updating a club. Only provided fields are changed."""

    name: str | None = Field(None, min_length=1, max_length=100, description="Club name")
    description: str | None = Field(None, min_length=1, max_length=1000, description="Description")
    avatar: str | None = Field(None, max_length=500, description="Avatar URL")
    banner: str | None = Field(None, max_length=500, description="Banner URL")
    category: ClubCategory | None = Field(None, description="Club category")
    related_show_id: UUID | None = Field(None, description="Show the club is about")
    rules: list[str] | None = Field(None, description="Club rules")
    tags: list[str] | None = Field(None, description="Free-form tags")
    is_private: bool | None = Field(None, description="Private club")
    is_spoiler_free: bool | None = Field(None, description="Allow hiding spoiler posts")
    max_members: int | None = Field(None, ge=2, le=10000, description="Member cap")


class CommentResponse(BaseModel):
    """Response model for a comment on a post."""

    id: UUID = Field(..., description="Comment ID")
    user: UserSummary | None = Field(None, description="Comment author")
    content: str = Field(..., description="Comment text")
    created_at: datetime = Field(..., description="When the comment was posted")


class PostResponse(BaseModel):
    """Response model for a club post."""

    id: UUID = Field(..., description="Post ID")
    club_id: UUID = Field(..., description="Club ID")
    author: UserSummary | None = Field(None, description="Post author")
    title: str = Field(..., description="Post title")
    content: str = Field(..., description="Post body")
    is_spoiler: bool = Field(..., description="Contains spoilers")
    spoiler_show_id: UUID | None = Field(None, description="Show the spoilers relate to")
    spoiler_episode: int | None = Field(None, description="Episode the spoilers relate to")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    like_count: int = Field(..., description="Number of likes")
    liked: bool = Field(False, description="Whether the caller has liked the post")
    comments: list[CommentResponse] = Field(default_factory=list, description="Comments")
    created_at: datetime | None = Field(None, description="When the post was created")
    updated_at: datetime | None = Field(None, description="When the post was last edited")


class CreatePostRequest(BaseModel):
    """Request model for creating a post."""

    title: str = Field(..., min_length=1, max_length=200, description="Post title")
    content: str = Field(..., min_length=1, description="Post body")
    is_spoiler: bool = Field(False, description="Contains spoilers")
    spoiler_show_id: UUID | None = Field(None, description="Show the spoilers relate to")
    spoiler_episode: int | None = Field(None, ge=1, description="Episode the spoilers relate to")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")


class UpdatePostRequest(BaseModel):
    """Request model for editing a post."""

    title: str | None = Field(None, min_length=1, max_length=200, description="Post title")
    content: str | None = Field(None, min_length=1, description="Post body")
    is_spoiler: bool | None = Field(None, description="Contains spoilers")
    spoiler_show_id: UUID | None = Field(None, description="Show the spoilers relate to")
    spoiler_episode: int | None = Field(None, ge=1, description="Spoiler episode")
    tags: list[str] | None = Field(None, description="Free-form tags")


class LikeResponse(BaseModel):
    """Response model for a post like toggle."""

    liked: bool = Field(..., description="Whether the caller now likes the post")
    like_count: int = Field(..., description="Number of likes")


class CreateCommentRequest(BaseModel):
    """Request model for commenting on a post."""

    content: str = Field(..., min_length=1, max_length=1000, description="Comment text")


class PollOptionResponse(BaseModel):
    """Tally for one poll option."""

    index: int = Field(..., description="Option index")
    text: str = Field(..., description="Option text")
    votes: int = Field(..., description="Votes for this option")
    percentage: float = Field(..., description="Share of all votes, 0 when nobody voted")


class PollResponse(BaseModel):
    """Response model for a poll."""

    id: UUID = Field(..., description="Poll ID")
    club_id: UUID = Field(..., description="Club ID")
    created_by: UUID = Field(..., description="Poll creator")
    question: str = Field(..., description="Poll question")
    options: list[PollOptionResponse] = Field(default_factory=list, description="Options")
    is_active: bool = Field(..., description="Accepts votes (open and not past its end date)")
    is_multiple_choice: bool = Field(..., description="Several answers allowed")
    end_date: datetime | None = Field(None, description="Closing time")
    total_votes: int = Field(..., description="Votes across all options")
    unique_voters: int = Field(..., description="Distinct voters")
    user_votes: list[int] = Field(default_factory=list, description="Options the caller chose")
    created_at: datetime | None = Field(None, description="When the poll was created")


class CreatePollRequest(BaseModel):
    """Request model for creating a poll."""

    question: str = Field(..., min_length=1, max_length=200, description="Poll question")
    options: list[str] = Field(..., description="Answer texts, at least two")
    is_multiple_choice: bool = Field(False, description="Allow several answers")
    end_date: UtcDatetime | None = Field(None, description="Closing time")


class VoteRequest(BaseModel):
    """Request model for voting on a poll."""

    option_indexes: list[int] = Field(..., min_length=1, description="Chosen option indexes")
