from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from hellorun.database import Base
from hellorun.constants.blog import REVISION_SOURCE_ADMIN_AUTOSAVE


class BlogRevision(Base):
    """Immutable audit entry describing one admin edit of a blog post."""

    __tablename__ = "blog_revisions"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    edited_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    source = Column(String(40), nullable=False, default=REVISION_SOURCE_ADMIN_AUTOSAVE)
    changed_fields = Column(JSON, nullable=False, default=list)
    before = Column(JSON, nullable=False, default=dict)
    after = Column(JSON, nullable=False, default=dict)
    edited_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True)

    post = relationship("BlogPost")
    editor = relationship("User", foreign_keys=[edited_by], lazy="selectin")

    __table_args__ = (Index("ix_blog_revisions_post_edited_at", "post_id", "edited_at"),)
