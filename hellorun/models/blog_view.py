from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from datetime import datetime, timezone
from hellorun.database import Base


class BlogView(Base):
    """One counted read of a published post."""

    __tablename__ = "blog_views"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    ip_address = Column(String(100), nullable=False, default="")
    viewed_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True)

    __table_args__ = (
        Index("ix_blog_views_post_user_viewed_at", "post_id", "user_id", "viewed_at"),
        Index("ix_blog_views_post_ip_viewed_at", "post_id", "ip_address", "viewed_at"),
    )
