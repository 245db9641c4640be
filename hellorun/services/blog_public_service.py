"""
Public Blog Service

Read side of the blog: published listings, single post pages with related
posts and SEO metadata, and per-reader view counting.
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from hellorun.auth import CurrentUser
from hellorun.config import settings
from hellorun.constants.blog import BLOG_CATEGORIES
from hellorun.exceptions import PostNotFoundError
from hellorun.models.blog import BlogPost, utcnow
from hellorun.models.blog_view import BlogView
from hellorun.models.user import User
from hellorun.services.blog_repository import BlogRepository

logger = logging.getLogger(__name__)

BLOG_SORTS = ("latest", "oldest", "popular")
RELATED_POST_LIMIT = 4
RELATED_CANDIDATE_LIMIT = 50
SEARCH_MAX_LENGTH = 80
META_DESCRIPTION_MAX_LENGTH = 280
DEFAULT_META_DESCRIPTION = "Read this helloRun community blog post."


@dataclass
class BlogSeo:
    title: str
    description: str
    og_image_url: str = ""
    canonical_url: str = ""


@dataclass
class PublishedPostView:
    post: BlogPost
    author_name: str = ""
    related: Sequence[BlogPost] = field(default_factory=list)
    seo: Optional[BlogSeo] = None


def normalize_category(value: Optional[str]) -> Optional[str]:
    category = str(value or "").strip()
    return category if category in BLOG_CATEGORIES else None


def normalize_sort(value: Optional[str]) -> str:
    sort = str(value or "").strip().lower()
    return sort if sort in BLOG_SORTS else "latest"


def should_track_view(viewer: Optional[CurrentUser], author_id: Optional[int]) -> bool:
    """Admins and the post's own author never count as readers."""
    if viewer is None:
        return True
    if viewer.is_admin:
        return False
    return viewer.id != author_id


def build_seo(post: BlogPost) -> BlogSeo:
    description = (post.seo_description or post.excerpt or "").strip()[:META_DESCRIPTION_MAX_LENGTH]
    title = (post.seo_title or "").strip() or f"{post.title} - helloRun Blog"
    base_url = settings.app_url.strip().rstrip("/")
    return BlogSeo(
        title=title,
        description=description or DEFAULT_META_DESCRIPTION,
        og_image_url=(post.og_image_url or post.cover_image_url or "").strip(),
        canonical_url=f"{base_url}/blog/{post.slug}" if base_url else "",
    )


def pick_related(post: BlogPost, candidates: Sequence[BlogPost], limit: int = RELATED_POST_LIMIT) -> list[BlogPost]:
    """Candidates sharing the post's category or at least one tag, in the order given."""
    tags = set(post.tags or [])
    related = [
        candidate
        for candidate in candidates
        if candidate.category == post.category or tags.intersection(candidate.tags or [])
    ]
    return related[:limit]


class BlogPublicService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = BlogRepository(db)

    async def list_published(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[BlogPost]:
        search = (search or "").strip()[:SEARCH_MAX_LENGTH] or None
        return await self.repository.list_published(
            category=normalize_category(category),
            search=search,
            sort=normalize_sort(sort),
            limit=limit or settings.blog_public_list_limit,
        )

    async def get_published_post(
        self,
        slug: str,
        viewer: Optional[CurrentUser] = None,
        ip_address: Optional[str] = None,
    ) -> PublishedPostView:
        """
        Load a published post for reading and count the view.

        Raises:
            PostNotFoundError: If no published post has this slug
        """
        slug = (slug or "").strip()
        post = await self.repository.get_published_by_slug(slug) if slug else None
        if post is None:
            raise PostNotFoundError(slug)

        try:
            counted = await self.register_blog_view(post, viewer, ip_address)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Blog view tracking failed for post {post.id}: {e}")
            counted = False
            post = await self.repository.get_published_by_slug(slug)
            if post is None:
                raise PostNotFoundError(slug) from e

        if counted:
            set_committed_value(post, "views", (post.views or 0) + 1)

        author = await self.db.get(User, post.author_id)
        candidates = await self.repository.list_related_candidates(post, RELATED_CANDIDATE_LIMIT)

        return PublishedPostView(
            post=post,
            author_name=author.display_name if author else "",
            related=pick_related(post, candidates),
            seo=build_seo(post),
        )

    async def register_blog_view(
        self,
        post: BlogPost,
        viewer: Optional[CurrentUser],
        ip_address: Optional[str],
    ) -> bool:
        """
        Count one view per reader per window.

        Signed-in readers are identified by user id, anonymous readers by IP.

        Returns:
            True if the view was counted
        """
        if not should_track_view(viewer, post.author_id):
            return False

        user_id = viewer.id if viewer else None
        clean_ip = (ip_address or "").strip()[:100]
        since = utcnow() - timedelta(hours=settings.blog_view_window_hours)

        if user_id is not None or clean_ip:
            if await self.repository.has_recent_view(post.id, since, user_id=user_id, ip_address=clean_ip):
                return False

        self.db.add(BlogView(post_id=post.id, user_id=user_id, ip_address="" if user_id else clean_ip))
        await self.repository.increment_views(post.id)
        await self.db.commit()
        return True
