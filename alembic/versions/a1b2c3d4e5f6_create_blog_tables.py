"""create users and blog tables

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(254), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("email_verified", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"])

    op.create_table(
        "blog_posts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("author_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(150), nullable=False),
        sa.Column("slug", sa.String(170), nullable=False),
        sa.Column("excerpt", sa.String(320), nullable=False),
        sa.Column("content_html", sa.Text(), nullable=False),
        sa.Column("content_text", sa.Text(), nullable=False),
        sa.Column("content_raw", sa.Text(), nullable=False),
        sa.Column("cover_image_url", sa.String(2000), nullable=False),
        sa.Column("category", sa.String(40), nullable=False),
        sa.Column("custom_category", sa.String(80), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("reading_time", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("featured", sa.Boolean(), nullable=False),
        sa.Column("seo_title", sa.String(160), nullable=False),
        sa.Column("seo_description", sa.String(320), nullable=False),
        sa.Column("og_image_url", sa.String(2000), nullable=False),
        sa.Column("moderation_notes", sa.String(1000), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_by", sa.Integer(), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejected_by", sa.Integer(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.String(500), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_by", sa.Integer(), nullable=True),
        sa.Column("views", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["approved_by"], ["users.id"]),
        sa.ForeignKeyConstraint(["rejected_by"], ["users.id"]),
        sa.ForeignKeyConstraint(["deleted_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug", name="uq_blog_posts_slug"),
    )
    op.create_index(op.f("ix_blog_posts_id"), "blog_posts", ["id"])
    op.create_index(op.f("ix_blog_posts_author_id"), "blog_posts", ["author_id"])
    op.create_index(op.f("ix_blog_posts_status"), "blog_posts", ["status"])
    op.create_index(op.f("ix_blog_posts_featured"), "blog_posts", ["featured"])
    op.create_index(op.f("ix_blog_posts_is_deleted"), "blog_posts", ["is_deleted"])
    op.create_index("ix_blog_posts_status_published_at", "blog_posts", ["status", "published_at"])
    op.create_index("ix_blog_posts_author_created_at", "blog_posts", ["author_id", "created_at"])
    op.create_index("ix_blog_posts_category_published_at", "blog_posts", ["category", "published_at"])

    op.create_table(
        "blog_revisions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("edited_by", sa.Integer(), nullable=True),
        sa.Column("source", sa.String(40), nullable=False),
        sa.Column("changed_fields", sa.JSON(), nullable=False),
        sa.Column("before", sa.JSON(), nullable=False),
        sa.Column("after", sa.JSON(), nullable=False),
        sa.Column("edited_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["blog_posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["edited_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_blog_revisions_id"), "blog_revisions", ["id"])
    op.create_index(op.f("ix_blog_revisions_post_id"), "blog_revisions", ["post_id"])
    op.create_index(op.f("ix_blog_revisions_edited_by"), "blog_revisions", ["edited_by"])
    op.create_index(op.f("ix_blog_revisions_edited_at"), "blog_revisions", ["edited_at"])
    op.create_index("ix_blog_revisions_post_edited_at", "blog_revisions", ["post_id", "edited_at"])

    op.create_table(
        "blog_views",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("ip_address", sa.String(100), nullable=False),
        sa.Column("viewed_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["blog_posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_blog_views_id"), "blog_views", ["id"])
    op.create_index(op.f("ix_blog_views_post_id"), "blog_views", ["post_id"])
    op.create_index(op.f("ix_blog_views_user_id"), "blog_views", ["user_id"])
    op.create_index(op.f("ix_blog_views_viewed_at"), "blog_views", ["viewed_at"])
    op.create_index("ix_blog_views_post_user_viewed_at", "blog_views", ["post_id", "user_id", "viewed_at"])
    op.create_index("ix_blog_views_post_ip_viewed_at", "blog_views", ["post_id", "ip_address", "viewed_at"])


def downgrade() -> None:
    op.drop_table("blog_views")
    op.drop_table("blog_revisions")
    op.drop_table("blog_posts")
    op.drop_table("users")
