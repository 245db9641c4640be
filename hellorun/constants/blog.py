"""
Blog Constants for helloRun

Statuses, categories and field limits shared by the blog validator,
lifecycle and services.
"""

from enum import Enum


class BlogStatus(str, Enum):
    """Lifecycle states of a blog post."""

    DRAFT = "draft"
    PENDING = "pending"
    PUBLISHED = "published"
    REJECTED = "rejected"
    ARCHIVED = "archived"


BLOG_STATUSES = tuple(status.value for status in BlogStatus)

# Statuses in which the author still controls the post
EDITABLE_STATUSES = frozenset({BlogStatus.DRAFT.value, BlogStatus.PENDING.value, BlogStatus.REJECTED.value})

# Statuses a post may only hold while it satisfies the ready-for-review bar
REVIEW_READY_STATUSES = frozenset({BlogStatus.PENDING.value, BlogStatus.PUBLISHED.value, BlogStatus.ARCHIVED.value})

OTHER_CATEGORY = "Other"

BLOG_CATEGORIES = (
    "Training",
    "Nutrition",
    "Gear",
    "Motivation",
    "Race Tips",
    "Injury Prevention",
    "General",
    "Travel",
    "Mental Health",
    "Community",
    "Personal Stories",
    OTHER_CATEGORY,
)

# Field limits
TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = 150
SLUG_MAX_LENGTH = 170
EXCERPT_MAX_LENGTH = 320
CONTENT_HTML_MAX_LENGTH = 120000
CONTENT_TEXT_MIN_LENGTH = 50
CONTENT_RAW_MAX_LENGTH = 150000
URL_MAX_LENGTH = 2000
CUSTOM_CATEGORY_MIN_LENGTH = 2
CUSTOM_CATEGORY_MAX_LENGTH = 80
TAG_MAX_LENGTH = 40
MAX_TAGS = 12
SEO_TITLE_MAX_LENGTH = 160
SEO_DESCRIPTION_MAX_LENGTH = 320
MODERATION_NOTES_MAX_LENGTH = 1000
REJECTION_REASON_MIN_LENGTH = 15
REJECTION_REASON_MAX_LENGTH = 500

WORDS_PER_MINUTE = 200

# Revision history
REVISION_MAX_FIELD_LENGTH = 12000
REVISION_TRUNCATION_MARKER = "\n...[truncated]"
REVISION_SOURCE_ADMIN_AUTOSAVE = "admin_autosave"
