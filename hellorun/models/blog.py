from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from hellorun.database import Base
from hellorun.constants.blog import BlogStatus, SLUG_MAX_LENGTH


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BlogPost(Base):
    __tablename__ = "blog_posts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Content
    title = Column(String(150), nullable=False)
    slug = Column(String(SLUG_MAX_LENGTH), nullable=False)
    excerpt = Column(String(320), nullable=False, default="")
    content_html = Column(Text, nullable=False, default="")
    content_text = Column(Text, nullable=False, default="")
    content_raw = Column(Text, nullable=False, default="")
    cover_image_url = Column(String(2000), nullable=False, default="")
    category = Column(String(40), nullable=False)
    custom_category = Column(String(80), nullable=False, default="")
    tags = Column(JSON, nullable=False, default=list)
    reading_time = Column(Integer, nullable=False, default=1)

    # Moderation / SEO
    status = Column(String(20), nullable=False, default=BlogStatus.DRAFT.value, index=True)
    featured = Column(Boolean, nullable=False, default=False, index=True)
    seo_title = Column(String(160), nullable=False, default="")
    seo_description = Column(String(320), nullable=False, default="")
    og_image_url = Column(String(2000), nullable=False, default="")
    moderation_notes = Column(String(1000), nullable=False, default="")

    # Lifecycle timestamps
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)
    rejected_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(String(500), nullable=False, default="")
    published_at = Column(DateTime(timezone=True), nullable=True)

    # Soft delete
    is_deleted = Column(Boolean, nullable=False, default=False, index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    views = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Optimistic concurrency counter
    version = Column(Integer, nullable=False)

    # Relationships
    author = relationship("User", back_populates="blog_posts", foreign_keys=[author_id], lazy="selectin")

    __table_args__ = (
        UniqueConstraint("slug", name="uq_blog_posts_slug"),
        Index("ix_blog_posts_status_published_at", "status", "published_at"),
        Index("ix_blog_posts_author_created_at", "author_id", "created_at"),
        Index("ix_blog_posts_category_published_at", "category", "published_at"),
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<BlogPost(id={self.id}, slug={self.slug}, status={self.status})>"
