"""Create otakutrack tables

Revision ID: a7c1e9d2b4f0
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a7c1e9d2b4f0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _tags() -> sa.Column:
    return sa.Column(
        "tags",
        postgresql.ARRAY(sa.String(length=50)),
        nullable=False,
        server_default="{}",
    )


def upgrade() -> None:
    """Upgrade schema."""
    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("avatar", sa.String(length=500), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("idx_users_role", "users", ["role"], unique=False)

    # Create shows table
    op.create_table(
        "shows",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("original_title", sa.String(length=200), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False, server_default="TV"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Ongoing"),
        sa.Column(
            "genres",
            postgresql.ARRAY(sa.String(length=50)),
            nullable=False,
            server_default="{}",
        ),
        _tags(),
        sa.Column("season", sa.String(length=10), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("rating_average", sa.Float(), nullable=False, server_default="0"),
        sa.Column("rating_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("poster", sa.String(length=500), nullable=True),
        sa.Column("banner", sa.String(length=500), nullable=True),
        sa.Column("trailer", sa.String(length=500), nullable=True),
        sa.Column("studio", sa.String(length=100), nullable=True),
        sa.Column("source", sa.String(length=20), nullable=True),
        sa.Column("age_rating", sa.String(length=10), nullable=False, server_default="Unknown"),
        sa.Column("episode_duration", sa.Integer(), nullable=False, server_default="24"),
        sa.Column("is_popular", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_recommended", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_shows_title", "shows", ["title"], unique=False)
    op.create_index(
        "idx_shows_rating",
        "shows",
        ["rating_average", "rating_count"],
        unique=False,
    )
    op.create_index("idx_shows_season_year", "shows", ["season", "year"], unique=False)
    op.create_index(
        "idx_shows_genres",
        "shows",
        ["genres"],
        unique=False,
        postgresql_using="gin",
    )

    op.create_table(
        "episodes",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("show_id", sa.UUID(), nullable=False),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=False, server_default="24"),
        sa.Column("air_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("thumbnail", sa.String(length=500), nullable=True),
        sa.ForeignKeyConstraint(["show_id"], ["shows.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_episodes_show_number",
        "episodes",
        ["show_id", "number"],
        unique=False,
    )

    op.create_table(
        "streaming_links",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("show_id", sa.UUID(), nullable=False),
        sa.Column("platform", sa.String(length=30), nullable=False),
        sa.Column("url", sa.String(length=500), nullable=False),
        sa.Column("region", sa.String(length=30), nullable=False, server_default="Global"),
        sa.ForeignKeyConstraint(["show_id"], ["shows.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    # Create watchlist_items table
    op.create_table(
        "watchlist_items",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("show_id", sa.UUID(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("current_episode", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_episodes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("rewatch_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("finish_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_watched", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_private", sa.Boolean(), nullable=False, server_default="false"),
        _tags(),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["show_id"], ["shows.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "show_id", name="uq_watchlist_user_show"),
    )
    op.create_index(
        "idx_watchlist_user_status",
        "watchlist_items",
        ["user_id", "status"],
        unique=False,
    )

    # Create review tables
    op.create_table(
        "reviews",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("show_id", sa.UUID(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=True),
        sa.Column("is_spoiler", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("spoiler_episode", sa.Integer(), nullable=True),
        sa.Column("spoiler_season", sa.Integer(), nullable=True),
        _tags(),
        sa.Column("is_edited", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_reported", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("report_reason", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["show_id"], ["shows.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "show_id", name="uq_reviews_user_show"),
    )
    op.create_index("idx_reviews_show_rating", "reviews", ["show_id", "rating"], unique=False)
    op.create_index("idx_reviews_reported", "reviews", ["is_reported"], unique=False)

    op.create_table(
        "review_reactions",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("review_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("kind", sa.String(length=10), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["review_id"], ["reviews.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("review_id", "user_id", "kind", name="uq_review_reactions"),
    )

    op.create_table(
        "review_edits",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("review_id", sa.UUID(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("edited_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["review_id"], ["reviews.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    # Create club tables
    op.create_table(
        "clubs",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=False),
        sa.Column("avatar", sa.String(length=500), nullable=True),
        sa.Column("banner", sa.String(length=500), nullable=True),
        sa.Column("category", sa.String(length=20), nullable=False),
        sa.Column("related_show_id", sa.UUID(), nullable=True),
        sa.Column(
            "rules",
            postgresql.ARRAY(sa.String(length=500)),
            nullable=False,
            server_default="{}",
        ),
        _tags(),
        sa.Column("is_private", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_spoiler_free", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("max_members", sa.Integer(), nullable=False, server_default="1000"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("created_by", sa.UUID(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["related_show_id"], ["shows.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index(
        "idx_clubs_category_active",
        "clubs",
        ["category", "is_active"],
        unique=False,
    )

    op.create_table(
        "club_members",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("club_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="member"),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["club_id"], ["clubs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("club_id", "user_id", name="uq_club_members"),
    )

    op.create_table(
        "club_posts",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("club_id", sa.UUID(), nullable=False),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_spoiler", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("spoiler_show_id", sa.UUID(), nullable=True),
        sa.Column("spoiler_episode", sa.Integer(), nullable=True),
        _tags(),
        *_timestamps(),
        sa.ForeignKeyConstraint(["club_id"], ["clubs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["spoiler_show_id"], ["shows.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_club_posts_club_created",
        "club_posts",
        ["club_id", "created_at"],
        unique=False,
    )

    op.create_table(
        "post_likes",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("post_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["club_posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post_id", "user_id", name="uq_post_likes"),
    )

    op.create_table(
        "post_comments",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("post_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("content", sa.String(length=1000), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["club_posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    # Create poll tables
    op.create_table(
        "polls",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("club_id", sa.UUID(), nullable=False),
        sa.Column("created_by", sa.UUID(), nullable=False),
        sa.Column("question", sa.String(length=200), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("is_multiple_choice", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["club_id"], ["clubs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "poll_options",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("poll_id", sa.UUID(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("text", sa.String(length=200), nullable=False),
        sa.ForeignKeyConstraint(["poll_id"], ["polls.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "poll_votes",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("option_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["option_id"], ["poll_options.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("option_id", "user_id", name="uq_poll_votes"),
    )

    # Create reminders table
    op.create_table(
        "reminders",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("show_id", sa.UUID(), nullable=False),
        sa.Column("episode_number", sa.Integer(), nullable=True),
        sa.Column("episode_title", sa.String(length=200), nullable=True),
        sa.Column("episode_air_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("alert_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("alert_type", sa.String(length=10), nullable=False, server_default="both"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("is_recurring", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column(
            "recurring_pattern",
            sa.String(length=10),
            nullable=False,
            server_default="weekly",
        ),
        sa.Column("message", sa.String(length=200), nullable=False),
        sa.Column("priority", sa.String(length=10), nullable=False, server_default="medium"),
        sa.Column("last_sent", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sent_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_sends", sa.Integer(), nullable=False, server_default="10"),
        _tags(),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["show_id"], ["shows.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_reminders_user_alert",
        "reminders",
        ["user_id", "alert_time"],
        unique=False,
    )
    op.create_index(
        "idx_reminders_active_alert",
        "reminders",
        ["is_active", "alert_time"],
        unique=False,
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("reminder_id", sa.UUID(), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default="false"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reminder_id"], ["reminders.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_notifications_user_read",
        "notifications",
        ["user_id", "is_read"],
        unique=False,
    )

    # Create analytics tables
    op.create_table(
        "user_analytics",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("episodes_watched", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_watch_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("shows_in_watchlist", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("watching_shows", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("completed_shows", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("on_hold_shows", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("dropped_shows", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("plan_to_watch_shows", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reviews_posted", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("comments_posted", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("club_posts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("club_likes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("clubs_joined", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("poll_votes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("favorite_genres", postgresql.JSONB(), nullable=False),
        sa.Column("weekly_activity", postgresql.JSONB(), nullable=False),
        sa.Column("monthly_activity", postgresql.JSONB(), nullable=False),
        sa.Column("last_activity", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )
    op.create_index(
        "idx_user_analytics_last_activity",
        "user_analytics",
        ["last_activity"],
        unique=False,
    )
    op.create_index(
        "idx_user_analytics_episodes",
        "user_analytics",
        ["episodes_watched"],
        unique=False,
    )

    op.create_table(
        "activity_events",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("show_id", sa.UUID(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["show_id"], ["shows.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_activity_events_created",
        "activity_events",
        ["created_at"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_activity_events_created", table_name="activity_events")
    op.drop_table("activity_events")
    op.drop_index("idx_user_analytics_episodes", table_name="user_analytics")
    op.drop_index("idx_user_analytics_last_activity", table_name="user_analytics")
    op.drop_table("user_analytics")
    op.drop_index("idx_notifications_user_read", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("idx_reminders_active_alert", table_name="reminders")
    op.drop_index("idx_reminders_user_alert", table_name="reminders")
    op.drop_table("reminders")
    op.drop_table("poll_votes")
    op.drop_table("poll_options")
    op.drop_table("polls")
    op.drop_table("post_comments")
    op.drop_table("post_likes")
    op.drop_index("idx_club_posts_club_created", table_name="club_posts")
    op.drop_table("club_posts")
    op.drop_table("club_members")
    op.drop_index("idx_clubs_category_active", table_name="clubs")
    op.drop_table("clubs")
    op.drop_table("review_edits")
    op.drop_table("review_reactions")
    op.drop_index("idx_reviews_reported", table_name="reviews")
    op.drop_index("idx_reviews_show_rating", table_name="reviews")
    op.drop_table("reviews")
    op.drop_index("idx_watchlist_user_status", table_name="watchlist_items")
    op.drop_table("watchlist_items")
    op.drop_table("streaming_links")
    op.drop_index("idx_episodes_show_number", table_name="episodes")
    op.drop_table("episodes")
    op.drop_index("idx_shows_genres", table_name="shows")
    op.drop_index("idx_shows_season_year", table_name="shows")
    op.drop_index("idx_shows_rating", table_name="shows")
    op.drop_index("idx_shows_title", table_name="shows")
    op.drop_table("shows")
    op.drop_index("idx_users_role", table_name="users")
    op.drop_table("users")
