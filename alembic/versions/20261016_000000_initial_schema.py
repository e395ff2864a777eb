"""Initial schema for BookTalks Buddy

Revision ID: 20261016_000000
Revises: None
Create Date: 2026-10-16 00:00:00.000000

Creates every table of the service:
- Users and platform settings
- Stores, store administrators and the featured-book carousel
- Subscriptions
- Book catalog and personal library (books, reading lists, collections)
- Clubs, memberships, moderators and join questions
- Discussions, reading progress, nominations and events
- Reports, moderation actions and notifications

When ``PLATFORM_OWNER_ID`` is set, it is seeded as the platform owner.

Revision format: YYYYMMDD_HHMMSS_description

"""

import os
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261016_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ID = sa.String(64)


def upgrade() -> None:
    """Create all tables and seed the platform owner."""

    op.create_table(
        "users",
        sa.Column("id", ID, nullable=False),
        sa.Column("email", sa.String(254), nullable=True),
        sa.Column("username", sa.String(30), nullable=True),
        sa.Column("display_name", sa.String(50), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("bio", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_users_email", "email"),
        sa.Index("ix_users_username", "username", unique=True),
        sa.Index("ix_users_created_at", "created_at"),
    )

    op.create_table(
        "platform_settings",
        sa.Column("key", sa.String(100), nullable=False),
        sa.Column("value", sa.String(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("key"),
    )

    op.create_table(
        "stores",
        sa.Column("id", ID, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "store_administrators",
        sa.Column("id", ID, nullable=False),
        sa.Column("store_id", ID, sa.ForeignKey("stores.id"), nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("assigned_by", ID, nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("store_id", "user_id", name="uq_store_administrators_store_user"),
        sa.Index("ix_store_administrators_store_id", "store_id"),
        sa.Index("ix_store_administrators_user_id", "user_id"),
    )

    op.create_table(
        "carousel_items",
        sa.Column("id", ID, nullable=False),
        sa.Column("store_id", ID, sa.ForeignKey("stores.id"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("book_title", sa.String(200), nullable=False),
        sa.Column("book_author", sa.String(100), nullable=False),
        sa.Column("book_isbn", sa.String(20), nullable=True),
        sa.Column("featured_badge", sa.String(50), nullable=True),
        sa.Column("overlay_text", sa.String(100), nullable=True),
        sa.Column("click_destination_url", sa.String(500), nullable=True),
        sa.Column("book_image_url", sa.String(500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by", ID, nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("store_id", "position", name="uq_carousel_items_store_position"),
        sa.Index("ix_carousel_items_store_id", "store_id"),
    )

    op.create_table(
        "user_subscriptions",
        sa.Column("id", ID, nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("tier", sa.String(32), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("payment_reference", sa.String(200), nullable=True),
        sa.Column("store_id", ID, sa.ForeignKey("stores.id"), nullable=True),
        sa.Column("created_by", ID, nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_user_subscriptions_user_id", "user_id"),
        sa.Index("ix_user_subscriptions_end_date", "end_date"),
        sa.Index("ix_user_subscriptions_is_active", "is_active"),
    )

    op.create_table(
        "books",
        sa.Column("id", ID, nullable=False),
        sa.Column("google_books_id", ID, nullable=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("author", sa.String(300), nullable=True),
        sa.Column("description", sa.String(2000), nullable=True),
        sa.Column("cover_url", sa.String(500), nullable=True),
        sa.Column("page_count", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_books_google_books_id", "google_books_id", unique=True),
        sa.Index("ix_books_title", "title"),
    )

    op.create_table(
        "personal_books",
        sa.Column("id", ID, nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("google_books_id", ID, nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("author", sa.String(300), nullable=False),
        sa.Column("cover_image_url", sa.String(500), nullable=True),
        sa.Column("description", sa.String(2000), nullable=True),
        sa.Column("genre", sa.String(100), nullable=True),
        sa.Column("categories", sa.JSON(), nullable=True),
        sa.Column("published_date", sa.String(20), nullable=True),
        sa.Column("page_count", sa.Integer(), nullable=True),
        sa.Column("added_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "google_books_id", name="uq_personal_books_user_google_id"),
        sa.Index("ix_personal_books_user_id", "user_id"),
        sa.Index("ix_personal_books_added_at", "added_at"),
    )

    op.create_table(
        "reading_lists",
        sa.Column("id", ID, nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("book_id", ID, sa.ForeignKey("personal_books.id"), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("review_text", sa.String(2000), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("review_is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("added_at", sa.DateTime(), nullable=False),
        sa.Column("status_changed_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "book_id", name="uq_reading_lists_user_book"),
        sa.CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_reading_lists_rating"),
        sa.Index("ix_reading_lists_user_id", "user_id"),
        sa.Index("ix_reading_lists_book_id", "book_id"),
        sa.Index("ix_reading_lists_added_at", "added_at"),
    )

    op.create_table(
        "book_collections",
        sa.Column("id", ID, nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_book_collections_user_id", "user_id"),
    )

    op.create_table(
        "collection_books",
        sa.Column("id", ID, nullable=False),
        sa.Column("collection_id", ID, sa.ForeignKey("book_collections.id"), nullable=False),
        sa.Column("book_id", ID, sa.ForeignKey("personal_books.id"), nullable=False),
        sa.Column("notes", sa.String(500), nullable=True),
        sa.Column("added_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("collection_id", "book_id", name="uq_collection_books_collection_book"),
        sa.Index("ix_collection_books_collection_id", "collection_id"),
        sa.Index("ix_collection_books_book_id", "book_id"),
    )

    op.create_table(
        "book_clubs",
        sa.Column("id", ID, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("privacy", sa.String(16), nullable=False, server_default="public"),
        sa.Column("lead_user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("store_id", ID, sa.ForeignKey("stores.id"), nullable=True),
        sa.Column("current_book_id", ID, sa.ForeignKey("books.id"), nullable=True),
        sa.Column("join_questions_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("progress_tracking_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_premium", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_book_clubs_name", "name"),
        sa.Index("ix_book_clubs_lead_user_id", "lead_user_id"),
        sa.Index("ix_book_clubs_store_id", "store_id"),
        sa.Index("ix_book_clubs_is_deleted", "is_deleted"),
        sa.Index("ix_book_clubs_created_at", "created_at"),
    )

    op.create_table(
        "club_members",
        sa.Column("id", ID, nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("club_id", ID, sa.ForeignKey("book_clubs.id"), nullable=False),
        sa.Column("role", sa.String(16), nullable=False, server_default="member"),
        sa.Column("join_answers", sa.JSON(), nullable=True),
        sa.Column("joined_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "club_id", name="uq_club_members_user_club"),
        sa.Index("ix_club_members_user_id", "user_id"),
        sa.Index("ix_club_members_club_id", "club_id"),
        sa.Index("ix_club_members_joined_at", "joined_at"),
    )

    op.create_table(
        "club_moderators",
        sa.Column("id", ID, nullable=False),
        sa.Column("club_id", ID, sa.ForeignKey("book_clubs.id"), nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("assigned_by", ID, nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("club_id", "user_id", name="uq_club_moderators_club_user"),
        sa.Index("ix_club_moderators_club_id", "club_id"),
        sa.Index("ix_club_moderators_user_id", "user_id"),
    )

    op.create_table(
        "club_join_questions",
        sa.Column("id", ID, nullable=False),
        sa.Column("club_id", ID, sa.ForeignKey("book_clubs.id"), nullable=False),
        sa.Column("question_text", sa.String(200), nullable=False),
        sa.Column("is_required", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("club_id", "display_order", name="uq_club_join_questions_club_order"),
        sa.Index("ix_club_join_questions_club_id", "club_id"),
    )

    op.create_table(
        "discussion_topics",
        sa.Column("id", ID, nullable=False),
        sa.Column("club_id", ID, sa.ForeignKey("book_clubs.id"), nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("content", sa.String(5000), nullable=True),
        sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_locked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_discussion_topics_club_id", "club_id"),
        sa.Index("ix_discussion_topics_user_id", "user_id"),
        sa.Index("ix_discussion_topics_created_at", "created_at"),
    )

    op.create_table(
        "discussion_posts",
        sa.Column("id", ID, nullable=False),
        sa.Column("topic_id", ID, sa.ForeignKey("discussion_topics.id"), nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("parent_post_id", ID, sa.ForeignKey("discussion_posts.id"), nullable=True),
        sa.Column("content", sa.String(5000), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_discussion_posts_topic_id", "topic_id"),
        sa.Index("ix_discussion_posts_user_id", "user_id"),
        sa.Index("ix_discussion_posts_created_at", "created_at"),
    )

    op.create_table(
        "member_reading_progress",
        sa.Column("id", ID, nullable=False),
        sa.Column("club_id", ID, sa.ForeignKey("book_clubs.id"), nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("book_id", ID, sa.ForeignKey("books.id"), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="not_started"),
        sa.Column("progress_type", sa.String(16), nullable=True),
        sa.Column("current_progress", sa.Integer(), nullable=True),
        sa.Column("total_progress", sa.Integer(), nullable=True),
        sa.Column("progress_percentage", sa.Float(), nullable=True),
        sa.Column("notes", sa.String(500), nullable=True),
        sa.Column("is_private", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("started_at", sa.DateTime(), nullable=True),
        sa.Column("finished_at", sa.DateTime(), nullable=True),
        sa.Column("last_updated", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("club_id", "user_id", "book_id", name="uq_member_reading_progress_club_user_book"),
        sa.Index("ix_member_reading_progress_club_id", "club_id"),
        sa.Index("ix_member_reading_progress_user_id", "user_id"),
    )

    op.create_table(
        "book_nominations",
        sa.Column("id", ID, nullable=False),
        sa.Column("club_id", ID, sa.ForeignKey("book_clubs.id"), nullable=False),
        sa.Column("book_id", ID, sa.ForeignKey("books.id"), nullable=False),
        sa.Column("nominated_by", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("nominated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_book_nominations_club_id", "club_id"),
        sa.Index("ix_book_nominations_book_id", "book_id"),
        sa.Index("ix_book_nominations_nominated_at", "nominated_at"),
    )

    op.create_table(
        "nomination_likes",
        sa.Column("id", ID, nullable=False),
        sa.Column("nomination_id", ID, sa.ForeignKey("book_nominations.id"), nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("liked_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("nomination_id", "user_id", name="uq_nomination_likes_nomination_user"),
        sa.Index("ix_nomination_likes_nomination_id", "nomination_id"),
    )

    op.create_table(
        "events",
        sa.Column("id", ID, nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.String(5000), nullable=True),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=True),
        sa.Column("location", sa.String(300), nullable=True),
        sa.Column("is_virtual", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("virtual_meeting_url", sa.String(500), nullable=True),
        sa.Column("max_participants", sa.Integer(), nullable=True),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("store_id", ID, sa.ForeignKey("stores.id"), nullable=False),
        sa.Column("club_id", ID, sa.ForeignKey("book_clubs.id"), nullable=True),
        sa.Column("created_by", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_events_start_time", "start_time"),
        sa.Index("ix_events_store_id", "store_id"),
        sa.Index("ix_events_club_id", "club_id"),
    )

    op.create_table(
        "event_participants",
        sa.Column("id", ID, nullable=False),
        sa.Column("event_id", ID, sa.ForeignKey("events.id"), nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("rsvp_status", sa.String(16), nullable=False, server_default="going"),
        sa.Column("rsvp_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("event_id", "user_id", name="uq_event_participants_event_user"),
        sa.Index("ix_event_participants_event_id", "event_id"),
        sa.Index("ix_event_participants_user_id", "user_id"),
    )

    op.create_table(
        "reports",
        sa.Column("id", ID, nullable=False),
        sa.Column("reporter_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("target_type", sa.String(32), nullable=False),
        sa.Column("target_id", ID, nullable=True),
        sa.Column("target_user_id", ID, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("reason", sa.String(32), nullable=False),
        sa.Column("description", sa.String(2000), nullable=False),
        sa.Column("severity", sa.String(16), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("club_id", ID, sa.ForeignKey("book_clubs.id"), nullable=True),
        sa.Column("store_id", ID, sa.ForeignKey("stores.id"), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("resolved_by", ID, nullable=True),
        sa.Column("resolved_at", sa.DateTime(), nullable=True),
        sa.Column("resolution_action", sa.String(64), nullable=True),
        sa.Column("resolution_notes", sa.String(2000), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_reports_reporter_id", "reporter_id"),
        sa.Index("ix_reports_club_id", "club_id"),
        sa.Index("ix_reports_store_id", "store_id"),
        sa.Index("ix_reports_status", "status"),
        sa.Index("ix_reports_created_at", "created_at"),
    )

    op.create_table(
        "moderation_actions",
        sa.Column("id", ID, nullable=False),
        sa.Column("action_type", sa.String(32), nullable=False),
        sa.Column("target_type", sa.String(32), nullable=False),
        sa.Column("target_id", ID, nullable=False),
        sa.Column("target_user_id", ID, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("moderator_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("moderator_role", sa.String(32), nullable=False),
        sa.Column("reason", sa.String(2000), nullable=False),
        sa.Column("severity", sa.String(16), nullable=False),
        sa.Column("duration_hours", sa.Integer(), nullable=True),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("club_id", ID, sa.ForeignKey("book_clubs.id"), nullable=True),
        sa.Column("store_id", ID, sa.ForeignKey("stores.id"), nullable=True),
        sa.Column("related_report_id", ID, sa.ForeignKey("reports.id"), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("revoked_by", ID, nullable=True),
        sa.Column("revoked_at", sa.DateTime(), nullable=True),
        sa.Column("revoked_reason", sa.String(1000), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_moderation_actions_moderator_id", "moderator_id"),
        sa.Index("ix_moderation_actions_club_id", "club_id"),
        sa.Index("ix_moderation_actions_created_at", "created_at"),
    )

    op.create_table(
        "notifications",
        sa.Column("id", ID, nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("type", sa.String(64), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.String(2000), nullable=False),
        sa.Column("data", sa.JSON(), nullable=True),
        sa.Column("priority", sa.String(16), nullable=False, server_default="normal"),
        sa.Column("category", sa.String(64), nullable=False, server_default="general"),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(), nullable=True),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_notifications_user_id", "user_id"),
        sa.Index("ix_notifications_type", "type"),
        sa.Index("ix_notifications_is_read", "is_read"),
        sa.Index("ix_notifications_created_at", "created_at"),
    )

    owner_id = os.getenv("PLATFORM_OWNER_ID")
    if owner_id:
        op.execute(
            sa.text(
                "INSERT INTO platform_settings (key, value, updated_at) "
                "VALUES ('platform_owner_id', :owner_id, CURRENT_TIMESTAMP)"
            ).bindparams(owner_id=owner_id)
        )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("notifications")
    op.drop_table("moderation_actions")
    op.drop_table("reports")
    op.drop_table("event_participants")
    op.drop_table("events")
    op.drop_table("nomination_likes")
    op.drop_table("book_nominations")
    op.drop_table("member_reading_progress")
    op.drop_table("discussion_posts")
    op.drop_table("discussion_topics")
    op.drop_table("club_join_questions")
    op.drop_table("club_moderators")
    op.drop_table("club_members")
    op.drop_table("book_clubs")
    op.drop_table("collection_books")
    op.drop_table("book_collections")
    op.drop_table("reading_lists")
    op.drop_table("personal_books")
    op.drop_table("books")
    op.drop_table("user_subscriptions")
    op.drop_table("carousel_items")
    op.drop_table("store_administrators")
    op.drop_table("platform_settings")
    op.drop_table("stores")
    op.drop_table("users")
