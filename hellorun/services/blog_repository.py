import logging
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import String, cast, exists, func, or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from hellorun.constants.blog import BlogStatus
from hellorun.exceptions import StorageFailure
from hellorun.models.blog import BlogPost
from hellorun.models.blog_view import BlogView
from hellorun.utils.blog import escape_like

logger = logging.getLogger(__name__)


class BlogRepository:
    """Queries over blog posts. Soft-deleted posts are hidden unless stated otherwise."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def add(self, post: BlogPost) -> None:
        self.db.add(post)

    async def _execute(self, query, operation: str):
        """Run a read query, reporting database errors as StorageFailure."""
        try:
            return await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Database error during {operation}: {e}")
            raise StorageFailure("Failed to read blog posts", operation=operation) from e

    async def get(self, post_id: int) -> Optional[BlogPost]:
        result = await self._execute(
            select(BlogPost).where(BlogPost.id == post_id, BlogPost.is_deleted.is_(False)),
            "get_post",
        )
        return result.scalars().first()

    async def get_for_author(self, post_id: int, author_id: int) -> Optional[BlogPost]:
        query = select(BlogPost).where(
            BlogPost.id == post_id,
            BlogPost.author_id == author_id,
            BlogPost.is_deleted.is_(False),
        )
        result = await self._execute(query, "get_author_post")
        return result.scalars().first()

    async def get_published_by_slug(self, slug: str) -> Optional[BlogPost]:
        query = select(BlogPost).where(
            BlogPost.slug == slug,
            BlogPost.status == BlogStatus.PUBLISHED.value,
            BlogPost.is_deleted.is_(False),
        )
        result = await self._execute(query, "get_published_post")
        return result.scalars().first()

    async def slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        """Check every post, deleted ones included, since slugs are never reused."""
        query = select(BlogPost.id).where(BlogPost.slug == slug)
        if exclude_id is not None:
            query = query.where(BlogPost.id != exclude_id)
        result = await self._execute(select(exists(query)), "check_slug")
        return bool(result.scalar())

    async def list_for_author(self, author_id: int, status: Optional[str] = None) -> Sequence[BlogPost]:
        query = select(BlogPost).where(BlogPost.author_id == author_id, BlogPost.is_deleted.is_(False))
        if status:
            query = query.where(BlogPost.status == status)
        query = query.order_by(BlogPost.updated_at.desc(), BlogPost.id.desc())
        result = await self._execute(query, "list_author_posts")
        return result.scalars().all()

    async def list_for_admin(self, status: Optional[str] = None, search: Optional[str] = None) -> Sequence[BlogPost]:
        query = select(BlogPost).where(BlogPost.is_deleted.is_(False))
        if status:
            query = query.where(BlogPost.status == status)
        if search:
            pattern = f"%{escape_like(search)}%"
            query = query.where(
                or_(
                    BlogPost.title.ilike(pattern, escape="\\"),
                    BlogPost.slug.ilike(pattern, escape="\\"),
                    BlogPost.category.ilike(pattern, escape="\\"),
                    BlogPost.custom_category.ilike(pattern, escape="\\"),
                )
            )
        query = query.order_by(BlogPost.submitted_at.desc(), BlogPost.created_at.desc())
        result = await self._execute(query, "list_moderation_queue")
        return result.scalars().all()

    async def list_published(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        sort: str = "latest",
        limit: int = 12,
    ) -> Sequence[BlogPost]:
        query = select(BlogPost).where(
            BlogPost.status == BlogStatus.PUBLISHED.value,
            BlogPost.is_deleted.is_(False),
        )
        if category:
            query = query.where(BlogPost.category == category)
        if search:
            pattern = f"%{escape_like(search)}%"
            query = query.where(
                or_(
                    BlogPost.title.ilike(pattern, escape="\\"),
                    BlogPost.excerpt.ilike(pattern, escape="\\"),
                    BlogPost.content_text.ilike(pattern, escape="\\"),
                    cast(BlogPost.tags, String).ilike(pattern, escape="\\"),
                    BlogPost.category.ilike(pattern, escape="\\"),
                    BlogPost.custom_category.ilike(pattern, escape="\\"),
                )
            )

        if sort == "oldest":
            query = query.order_by(BlogPost.published_at.asc(), BlogPost.id.asc())
        elif sort == "popular":
            query = query.order_by(BlogPost.views.desc(), BlogPost.published_at.desc())
        else:
            query = query.order_by(BlogPost.published_at.desc(), BlogPost.id.desc())

        result = await self._execute(query.limit(limit), "list_published")
        return result.scalars().all()

    async def list_related_candidates(self, post: BlogPost, limit: int = 50) -> Sequence[BlogPost]:
        query = (
            select(BlogPost)
            .where(
                BlogPost.id != post.id,
                BlogPost.status == BlogStatus.PUBLISHED.value,
                BlogPost.is_deleted.is_(False),
            )
            .order_by(BlogPost.published_at.desc(), BlogPost.id.desc())
            .limit(limit)
        )
        result = await self._execute(query, "list_related_posts")
        return result.scalars().all()

    async def has_recent_view(
        self, post_id: int, since: datetime, user_id: Optional[int] = None, ip_address: str = ""
    ) -> bool:
        # Raises SQLAlchemyError as is; register_blog_view recovers from it
        query = select(func.count(BlogView.id)).where(BlogView.post_id == post_id, BlogView.viewed_at >= since)
        if user_id is not None:
            query = query.where(BlogView.user_id == user_id)
        else:
            query = query.where(BlogView.user_id.is_(None), BlogView.ip_address == ip_address)
        result = await self.db.execute(query)
        return (result.scalar() or 0) > 0

    async def increment_views(self, post_id: int) -> None:
        """Bump the counter in SQL so the post's version is left alone."""
        await self.db.execute(
            update(BlogPost)
            .where(BlogPost.id == post_id)
            .values(views=BlogPost.views + 1, updated_at=BlogPost.updated_at)
            .execution_options(synchronize_session=False)
        )
