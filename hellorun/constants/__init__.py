"""Constants package for helloRun."""

from .blog import (
    BLOG_CATEGORIES,
    BLOG_STATUSES,
    EDITABLE_STATUSES,
    OTHER_CATEGORY,
    REVIEW_READY_STATUSES,
    BlogStatus,
)
from .roles import DEFAULT_ROLE, RoleName

__all__ = [
    # Role constants
    "RoleName",
    "DEFAULT_ROLE",
    # Blog constants
    "BlogStatus",
    "BLOG_STATUSES",
    "BLOG_CATEGORIES",
    "EDITABLE_STATUSES",
    "REVIEW_READY_STATUSES",
    "OTHER_CATEGORY",
]
