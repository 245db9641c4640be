"""
Blog payload normalization

Turns raw author payloads and admin autosave patches into a normalized
PostData record: HTML sanitized, strings trimmed, tags normalized and the
custom category dropped unless the category is "Other".
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from hellorun.constants.blog import (
    BLOG_STATUSES,
    MODERATION_NOTES_MAX_LENGTH,
    OTHER_CATEGORY,
    SEO_DESCRIPTION_MAX_LENGTH,
    SEO_TITLE_MAX_LENGTH,
    URL_MAX_LENGTH,
)
from hellorun.models.blog import BlogPost
from hellorun.schemas.blog import BlogPostInput, BlogPostPatch
from hellorun.utils.blog import normalize_boolean, normalize_tags
from hellorun.utils.sanitize import html_to_plain_text, sanitize_html


@dataclass
class PostData:
    title: str = ""
    excerpt: str = ""
    category: str = ""
    custom_category: str = ""
    cover_image_url: str = ""
    content_html: str = ""
    content_text: str = ""
    content_raw: str = ""
    tags: list[str] = field(default_factory=list)

    # Admin-only fields, populated by autosave patches
    status: Optional[str] = None
    featured: bool = False
    seo_title: str = ""
    seo_description: str = ""
    og_image_url: str = ""
    moderation_notes: str = ""

    def content_fields(self) -> dict[str, Any]:
        """Fields an author payload writes onto a post."""
        data = asdict(self)
        for key in ("status", "featured", "seo_title", "seo_description", "og_image_url", "moderation_notes"):
            data.pop(key)
        return data


def _text(value: Any) -> str:
    return str(value or "").strip()


def _custom_category(category: str, custom_category: str) -> str:
    return custom_category if category == OTHER_CATEGORY else ""


def normalize_post_input(payload: BlogPostInput) -> PostData:
    """Normalize a full author payload."""
    content_html = sanitize_html(payload.content_html)
    category = _text(payload.category)

    return PostData(
        title=_text(payload.title),
        excerpt=_text(payload.excerpt),
        category=category,
        custom_category=_custom_category(category, _text(payload.custom_category)),
        cover_image_url=_text(payload.cover_image_url),
        content_html=content_html,
        content_text=html_to_plain_text(content_html),
        content_raw=_text(payload.content_raw),
        tags=normalize_tags(payload.tags),
    )


def post_to_data(post: BlogPost) -> PostData:
    """Build a PostData from the stored post, for readiness checks."""
    return PostData(
        title=_text(post.title),
        excerpt=_text(post.excerpt),
        category=_text(post.category),
        custom_category=_text(post.custom_category),
        cover_image_url=_text(post.cover_image_url),
        content_html=post.content_html or "",
        content_text=post.content_text or "",
        content_raw=post.content_raw or "",
        tags=list(post.tags or []),
        status=post.status,
        featured=bool(post.featured),
        seo_title=_text(post.seo_title),
        seo_description=_text(post.seo_description),
        og_image_url=_text(post.og_image_url),
        moderation_notes=_text(post.moderation_notes),
    )


def normalize_autosave_patch(patch: BlogPostPatch, post: BlogPost) -> PostData:
    """
    Merge an admin autosave patch over the current post.

    Fields absent from the patch keep the post's current value. An unknown
    status is ignored and the current status kept.
    """
    provided = patch.provided_fields()
    current = post_to_data(post)

    def pick(name: str) -> Any:
        return getattr(patch, name) if name in provided else getattr(current, name)

    category = _text(pick("category"))
    content_html = sanitize_html(pick("content_html"))

    if "tags" in provided:
        tags = normalize_tags(patch.tags)
    else:
        tags = normalize_tags(current.tags)

    status = _text(pick("status")).lower()
    if status not in BLOG_STATUSES:
        status = post.status

    return PostData(
        title=_text(pick("title")),
        excerpt=_text(pick("excerpt")),
        category=category,
        custom_category=_custom_category(category, _text(pick("custom_category"))),
        cover_image_url=_text(pick("cover_image_url")),
        content_html=content_html,
        content_text=html_to_plain_text(content_html),
        content_raw=_text(pick("content_raw")),
        tags=tags,
        status=status,
        featured=normalize_boolean(patch.featured, current.featured) if "featured" in provided else current.featured,
        seo_title=_text(pick("seo_title"))[:SEO_TITLE_MAX_LENGTH],
        seo_description=_text(pick("seo_description"))[:SEO_DESCRIPTION_MAX_LENGTH],
        og_image_url=_text(pick("og_image_url"))[:URL_MAX_LENGTH],
        moderation_notes=_text(pick("moderation_notes"))[:MODERATION_NOTES_MAX_LENGTH],
    )
