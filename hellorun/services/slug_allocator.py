import logging
from typing import Optional

from hellorun.config import settings
from hellorun.constants.blog import SLUG_MAX_LENGTH
from hellorun.exceptions import StorageFailure
from hellorun.services.blog_repository import BlogRepository
from hellorun.utils.slugify import slugify_blog_title

logger = logging.getLogger(__name__)

FALLBACK_SLUG = "post"


class SlugAllocator:
    """
    Derive a unique slug from a post title.

    Candidates are probed in order: base, base-2, base-3, ... The probe is
    not atomic; the unique constraint on blog_posts.slug is what finally
    rejects a concurrent duplicate.
    """

    def __init__(self, repository: BlogRepository, max_attempts: Optional[int] = None):
        self.repository = repository
        self.max_attempts = max_attempts or settings.slug_max_attempts

    @staticmethod
    def base_slug(title: str) -> str:
        # Leave room for a numeric suffix
        base = slugify_blog_title(title)[: SLUG_MAX_LENGTH - 8].strip("-")
        return base or FALLBACK_SLUG

    async def allocate(self, title: str, exclude_id: Optional[int] = None) -> str:
        base = self.base_slug(title)
        candidate = base

        for attempt in range(1, self.max_attempts + 1):
            if not await self.repository.slug_exists(candidate, exclude_id=exclude_id):
                return candidate
            candidate = f"{base}-{attempt + 1}"

        logger.error(f"Could not allocate a slug for '{base}' after {self.max_attempts} attempts")
        raise StorageFailure(f"Could not allocate a unique slug for '{base}'", operation="allocate_slug")
