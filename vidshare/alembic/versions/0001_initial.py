"""initial schema: users, videos, comments, likes

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

JSON_VARIANT = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(20), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(50), nullable=False),
        sa.Column("avatar", sa.String(255), nullable=False, server_default="default-avatar.png"),
        sa.Column("cover_image", sa.String(255)),
        sa.Column("bio", sa.String(500), nullable=False, server_default=""),
        sa.Column("channel_name", sa.String(100)),
        sa.Column("channel_description", sa.Text(), nullable=False, server_default=""),
        sa.Column("subscribers_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_videos", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("role", sa.String(16), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
        sa.Column("login_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("password_changed_at", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.CheckConstraint(
            "subscribers_count >= 0 AND total_videos >= 0 AND total_views >= 0",
            name="ck_users_counts_nonneg",
        ),
        sa.CheckConstraint("role in ('user','admin','moderator')", name="ck_users_role_enum"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_created_at", "users", ["created_at"])
    op.create_index("ix_users_active_created", "users", ["is_active", "created_at"])

    op.create_table(
        "videos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("owner_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("video_file", sa.String(255), nullable=False),
        sa.Column("thumbnail", sa.String(255), nullable=False, server_default="default-thumbnail.jpg"),
        sa.Column("duration", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("file_size", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("format", sa.String(64)),
        sa.Column("status", sa.String(16), nullable=False, server_default="processing"),
        sa.Column("privacy", sa.String(12), nullable=False, server_default="public"),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("published_at", sa.DateTime(timezone=True)),
        sa.Column("category", sa.String(24), nullable=False, server_default="Other"),
        sa.Column("tags", JSON_VARIANT, nullable=False),
        sa.Column("language", sa.String(8), nullable=False, server_default="en"),
        sa.Column("allow_comments", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("allow_likes", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("likes_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("dislikes_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("comments_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("shares_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("trending_score", sa.Float(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint(
            "views >= 0 AND likes_count >= 0 AND dislikes_count >= 0 "
            "AND comments_count >= 0 AND shares_count >= 0",
            name="ck_videos_counts_nonneg",
        ),
        sa.CheckConstraint("privacy in ('public','private','unlisted')", name="ck_videos_privacy_enum"),
        sa.CheckConstraint(
            "status in ('processing','ready','failed','deleted')", name="ck_videos_status_enum"
        ),
    )
    op.create_index("ix_videos_id", "videos", ["id"])
    op.create_index("ix_videos_owner_id", "videos", ["owner_id"])
    op.create_index("ix_videos_status", "videos", ["status"])
    op.create_index("ix_videos_privacy", "videos", ["privacy"])
    op.create_index("ix_videos_published_at", "videos", ["published_at"])
    op.create_index("ix_videos_category", "videos", ["category"])
    op.create_index("ix_videos_trending_score", "videos", ["trending_score"])
    op.create_index("ix_videos_created_at", "videos", ["created_at"])
    op.create_index("ix_videos_feed", "videos", ["privacy", "status", "is_published", "created_at"])
    op.create_index("ix_videos_trending", "videos", ["trending_score", "views"])
    op.create_index("ix_videos_owner_created", "videos", ["owner_id", "created_at"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("video_id", sa.Integer(), sa.ForeignKey("videos.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("parent_id", sa.Integer(), sa.ForeignKey("comments.id", ondelete="CASCADE")),
        sa.Column("reply_to_user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_edited", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("edited_at", sa.DateTime(timezone=True)),
        sa.Column("likes_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("replies_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint("likes_count >= 0 AND replies_count >= 0", name="ck_comments_counts_nonneg"),
        sa.CheckConstraint("status in ('active','hidden','deleted')", name="ck_comments_status_enum"),
    )
    op.create_index("ix_comments_id", "comments", ["id"])
    op.create_index("ix_comments_video_id", "comments", ["video_id"])
    op.create_index("ix_comments_user_id", "comments", ["user_id"])
    op.create_index("ix_comments_parent_id", "comments", ["parent_id"])
    op.create_index("ix_comments_status", "comments", ["status"])
    op.create_index("ix_comments_created_at", "comments", ["created_at"])
    op.create_index("ix_comments_video_parent_time", "comments", ["video_id", "parent_id", "created_at"])
    op.create_index("ix_comments_parent_status", "comments", ["parent_id", "status"])

    op.create_table(
        "likes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("target_kind", sa.String(16), nullable=False),
        sa.Column("target_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(8), nullable=False, server_default="like"),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "target_kind", "target_id", name="uq_like_user_target"),
        sa.CheckConstraint("target_kind in ('video','comment')", name="ck_like_target_kind"),
        sa.CheckConstraint("type in ('like','dislike')", name="ck_like_type_enum"),
    )
    op.create_index("ix_likes_id", "likes", ["id"])
    op.create_index("ix_likes_user_id", "likes", ["user_id"])
    op.create_index("ix_likes_created_at", "likes", ["created_at"])
    op.create_index("ix_like_target_type", "likes", ["target_kind", "target_id", "type"])


def downgrade() -> None:
    op.drop_table("likes")
    op.drop_table("comments")
    op.drop_table("videos")
    op.drop_table("users")
