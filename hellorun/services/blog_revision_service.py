"""
Blog revision history

Snapshots the tracked fields of a post before and after an admin edit and
stores an immutable BlogRevision holding only the fields that changed.
Long strings are truncated, so a revision is an audit record and cannot be
used to restore a post.
"""

import json
import logging
from typing import Any, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from hellorun.constants.blog import (
    REVISION_MAX_FIELD_LENGTH,
    REVISION_SOURCE_ADMIN_AUTOSAVE,
    REVISION_TRUNCATION_MARKER,
)
from hellorun.models.blog import BlogPost
from hellorun.models.blog_revision import BlogRevision

logger = logging.getLogger(__name__)

TRACKED_FIELDS = (
    "title",
    "slug",
    "excerpt",
    "content_html",
    "content_raw",
    "cover_image_url",
    "category",
    "custom_category",
    "tags",
    "status",
    "featured",
    "seo_title",
    "seo_description",
    "og_image_url",
    "moderation_notes",
    "reading_time",
)


def take_snapshot(post: BlogPost) -> dict[str, Any]:
    """Copy the tracked fields of a post into plain JSON-friendly values."""
    return {
        "title": str(post.title or ""),
        "slug": str(post.slug or ""),
        "excerpt": str(post.excerpt or ""),
        "content_html": str(post.content_html or ""),
        "content_raw": str(post.content_raw or ""),
        "cover_image_url": str(post.cover_image_url or ""),
        "category": str(post.category or ""),
        "custom_category": str(post.custom_category or ""),
        "tags": list(post.tags or []),
        "status": str(post.status or ""),
        "featured": bool(post.featured),
        "seo_title": str(post.seo_title or ""),
        "seo_description": str(post.seo_description or ""),
        "og_image_url": str(post.og_image_url or ""),
        "moderation_notes": str(post.moderation_notes or ""),
        "reading_time": int(post.reading_time or 1),
    }


def diff_snapshots(before: dict[str, Any], after: dict[str, Any]) -> list[str]:
    """Tracked fields whose serialized values differ, in tracked-field order."""
    return [
        field
        for field in TRACKED_FIELDS
        if json.dumps(before.get(field)) != json.dumps(after.get(field))
    ]


def compact_value(value: Any) -> Any:
    if isinstance(value, str):
        if len(value) > REVISION_MAX_FIELD_LENGTH:
            return value[:REVISION_MAX_FIELD_LENGTH] + REVISION_TRUNCATION_MARKER
        return value
    if isinstance(value, (list, tuple)):
        return [compact_value(item) for item in value]
    if isinstance(value, dict):
        return {key: compact_value(item) for key, item in value.items()}
    return value


def pick_fields(snapshot: dict[str, Any], fields: Sequence[str]) -> dict[str, Any]:
    return {field: compact_value(snapshot.get(field)) for field in fields}


class RevisionRecorder:
    def __init__(self, db: AsyncSession):
        self.db = db

    def record(
        self,
        post_id: int,
        editor_id: Optional[int],
        before: dict[str, Any],
        after: dict[str, Any],
        source: str = REVISION_SOURCE_ADMIN_AUTOSAVE,
    ) -> Optional[BlogRevision]:
        """
        Stage a revision for the changed fields.

        The revision is added to the session but not committed, so it is
        written in the same transaction as the post change. Returns None
        when nothing changed.
        """
        changed_fields = diff_snapshots(before, after)
        if not changed_fields:
            return None

        revision = BlogRevision(
            post_id=post_id,
            edited_by=editor_id,
            source=source,
            changed_fields=changed_fields,
            before=pick_fields(before, changed_fields),
            after=pick_fields(after, changed_fields),
        )
        self.db.add(revision)
        logger.info(f"Recorded revision for post {post_id}: {', '.join(changed_fields)}")
        return revision

    async def list_recent(self, post_id: int, limit: int = 25) -> Sequence[BlogRevision]:
        result = await self.db.execute(
            select(BlogRevision)
            .where(BlogRevision.post_id == post_id)
            .order_by(BlogRevision.edited_at.desc(), BlogRevision.id.desc())
            .limit(limit)
        )
        return result.scalars().all()
