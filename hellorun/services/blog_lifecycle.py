"""
Blog post state machine.

draft ──submit──> pending ──approve──> published ──archive──> archived
  ^                  │
  │               reject
  │                  v
  └─── (edit) ── rejected ──submit──> pending

Authors move posts only while they are in an editable status. Admins can
also force any status through autosave, with the side effects applied by
apply_admin_status.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from hellorun.constants.blog import EDITABLE_STATUSES, BlogStatus
from hellorun.exceptions import StateConflict
from hellorun.models.blog import BlogPost, utcnow

logger = logging.getLogger(__name__)

LOCKED_MESSAGES = {
    "edit": "Post with status \"{status}\" is locked for editing.",
    "submit": "Post with status \"{status}\" cannot be submitted.",
    "delete": "Post with status \"{status}\" cannot be deleted by author.",
}


def _clear_approval(post: BlogPost) -> None:
    post.approved_at = None
    post.approved_by = None


def _clear_rejection(post: BlogPost) -> None:
    post.rejected_at = None
    post.rejected_by = None
    post.rejection_reason = ""


class PostLifecycle:
    """Applies status transitions and their timestamp bookkeeping to a post."""

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self.clock = clock

    def ensure_author_editable(self, post: BlogPost, action: str) -> None:
        if post.status not in EDITABLE_STATUSES:
            template = LOCKED_MESSAGES.get(action, "Post with status \"{status}\" cannot be changed by its author.")
            raise StateConflict(post.status, action, message=template.format(status=post.status))

    def submit(self, post: BlogPost) -> None:
        """Move an author's post into the review queue."""
        self.ensure_author_editable(post, "submit")
        post.status = BlogStatus.PENDING.value
        post.submitted_at = self.clock()
        post.reviewed_at = None
        _clear_approval(post)
        _clear_rejection(post)
        logger.info(f"Post {post.id} submitted for review")

    def clear_stale_rejection(self, post: BlogPost) -> None:
        """Drop the rejection reason once the author starts fixing a rejected post."""
        if post.status == BlogStatus.REJECTED.value:
            _clear_rejection(post)

    def ensure_status(self, post: BlogPost, expected: str, action: str) -> None:
        if post.status != expected:
            raise StateConflict(post.status, action)

    def approve(self, post: BlogPost, actor_id: Optional[int]) -> None:
        self.ensure_status(post, BlogStatus.PENDING.value, "approve")

        now = self.clock()
        post.status = BlogStatus.PUBLISHED.value
        post.published_at = now
        post.approved_at = now
        post.approved_by = actor_id
        post.reviewed_at = now
        _clear_rejection(post)
        logger.info(f"Post {post.id} approved by user {actor_id}")

    def reject(self, post: BlogPost, actor_id: Optional[int], reason: str) -> None:
        self.ensure_status(post, BlogStatus.PENDING.value, "reject")

        now = self.clock()
        post.status = BlogStatus.REJECTED.value
        post.rejected_at = now
        post.rejected_by = actor_id
        post.rejection_reason = reason
        post.reviewed_at = now
        _clear_approval(post)
        logger.info(f"Post {post.id} rejected by user {actor_id}")

    def archive(self, post: BlogPost) -> None:
        if post.status != BlogStatus.PUBLISHED.value:
            raise StateConflict(
                post.status,
                "archive",
                message=f"Only published posts can be archived. Current status: \"{post.status}\".",
            )

        post.status = BlogStatus.ARCHIVED.value
        post.reviewed_at = self.clock()
        logger.info(f"Post {post.id} archived")

    def apply_admin_status(self, post: BlogPost, next_status: str, actor_id: Optional[int]) -> None:
        """
        Force a status from the admin editor.

        Existing approval, rejection and submission stamps are kept when the
        target status still needs them, otherwise they are cleared.
        """
        now = self.clock()
        previous = post.status
        post.status = next_status
        post.reviewed_at = now

        if next_status == BlogStatus.PUBLISHED.value:
            post.published_at = post.published_at or now
            post.approved_at = post.approved_at or now
            post.approved_by = post.approved_by or actor_id
            _clear_rejection(post)
        elif next_status == BlogStatus.REJECTED.value:
            post.rejected_at = post.rejected_at or now
            post.rejected_by = post.rejected_by or actor_id
            _clear_approval(post)
        elif next_status == BlogStatus.PENDING.value:
            post.submitted_at = post.submitted_at or now
            _clear_approval(post)
            _clear_rejection(post)
        elif next_status == BlogStatus.ARCHIVED.value:
            post.approved_at = post.approved_at or now
            post.approved_by = post.approved_by or actor_id
            _clear_rejection(post)
        else:
            _clear_approval(post)
            _clear_rejection(post)

        logger.info(f"Post {post.id} moved from {previous} to {next_status} by admin {actor_id}")

    def soft_delete(self, post: BlogPost, actor_id: Optional[int]) -> None:
        self.ensure_author_editable(post, "delete")
        post.is_deleted = True
        post.deleted_at = self.clock()
        post.deleted_by = actor_id
        logger.info(f"Post {post.id} deleted by user {actor_id}")
