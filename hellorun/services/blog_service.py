"""
Blog Moderation Service

Author and admin operations over blog posts. Each operation normalizes and
validates the payload, applies the lifecycle transition and persists the
result in a single commit.

Cover uploads happen before anything is saved; if the operation then fails
for any reason the uploaded object is removed again.
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from hellorun.auth import CurrentUser, ensure_admin, ensure_author
from hellorun.config import settings
from hellorun.constants.blog import BLOG_STATUSES, REVIEW_READY_STATUSES, BlogStatus
from hellorun.exceptions import PostNotFoundError, StateConflict, StorageFailure, ValidationFailed
from hellorun.models.blog import BlogPost
from hellorun.models.blog_revision import BlogRevision
from hellorun.schemas.blog import BlogPostInput, BlogPostPatch
from hellorun.services.blog_lifecycle import PostLifecycle
from hellorun.services.blog_payload import PostData, normalize_autosave_patch, normalize_post_input
from hellorun.services.blog_repository import BlogRepository
from hellorun.services.blog_revision_service import RevisionRecorder, diff_snapshots, take_snapshot
from hellorun.services.blog_validator import (
    ensure_valid,
    validate_blog_payload,
    validate_ready_for_review,
    validate_rejection_reason,
)
from hellorun.services.slug_allocator import SlugAllocator
from hellorun.services.upload_service import ObjectStore
from hellorun.utils.blog import estimate_reading_time

logger = logging.getLogger(__name__)

T = TypeVar("T")

INCOMPLETE_MESSAGE = "Post is incomplete and cannot be submitted yet."
ADMIN_QUEUE_ALL = "all"


@dataclass
class AutosaveResult:
    post: BlogPost
    changed_fields: list[str] = field(default_factory=list)


@dataclass
class PostReview:
    post: BlogPost
    revisions: Sequence[BlogRevision] = field(default_factory=list)


def normalize_status_filter(value: Optional[str]) -> Optional[str]:
    status = str(value or "").strip().lower()
    return status if status in BLOG_STATUSES else None


class BlogModerationService:
    """Blog post operations for authors and admins."""

    def __init__(
        self,
        db: AsyncSession,
        object_store: ObjectStore,
        lifecycle: Optional[PostLifecycle] = None,
        slug_allocator: Optional[SlugAllocator] = None,
    ):
        self.db = db
        self.object_store = object_store
        self.repository = BlogRepository(db)
        self.lifecycle = lifecycle or PostLifecycle()
        self.slug_allocator = slug_allocator or SlugAllocator(self.repository)
        self.revisions = RevisionRecorder(db)

    # ============== Persistence helpers ==============

    async def _commit(self, post: BlogPost, action: str) -> BlogPost:
        """
        Commit the unit of work and reload the post.

        IntegrityError is left to the caller, which retries slug collisions.
        """
        status = post.status
        post_id = post.id
        try:
            await self.db.commit()
        except IntegrityError:
            raise
        except StaleDataError as e:
            await self.db.rollback()
            logger.warning(f"Concurrent update detected on post {post_id} during {action}")
            raise StateConflict(
                status, action, message="The post was changed by someone else. Reload it and try again."
            ) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error during {action} of post {post_id}: {e}")
            raise StorageFailure(f"Failed to {action} post", operation=action) from e

        await self.db.refresh(post)
        return post

    async def _with_slug_retry(self, operation: Callable[[], Awaitable[T]], action: str) -> T:
        """
        Run an operation, retrying it once when the commit hits the slug constraint.

        The operation must reload whatever it mutates, since the rollback
        expires every instance in the session.
        """
        try:
            return await operation()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(f"Slug collision during {action}, allocating a new slug and retrying")

        try:
            return await operation()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Slug collision persisted after retry during {action}: {e}")
            raise StorageFailure(f"Failed to {action} post", operation=action) from e

    async def _discard_objects(self, keys: Sequence[str]) -> None:
        """Best-effort removal of stored objects. Failures are logged only."""
        keys = [key for key in keys if key]
        if not keys:
            return
        try:
            await self.object_store.delete(keys)
        except Exception as e:
            logger.error(f"Failed to delete stored objects {keys}: {e}")

    async def _get_author_post(self, post_id: int, author_id: int) -> BlogPost:
        post = await self.repository.get_for_author(post_id, author_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    async def _get_post(self, post_id: int) -> BlogPost:
        post = await self.repository.get(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    @staticmethod
    def _ensure_ready(data: PostData) -> None:
        errors = validate_ready_for_review(data)
        if errors:
            raise ValidationFailed(errors, message=INCOMPLETE_MESSAGE)

    @staticmethod
    def _apply_content(post: BlogPost, data: PostData) -> None:
        for name, value in data.content_fields().items():
            setattr(post, name, value)
        post.reading_time = estimate_reading_time(data.content_html)

    # ============== Author operations ==============

    async def create_post(
        self,
        author: Optional[CurrentUser],
        payload: BlogPostInput,
        cover: Optional[UploadFile] = None,
    ) -> BlogPost:
        """
        Create a draft, or submit it straight away when payload.submit is set.

        Args:
            author: The acting user
            payload: Raw author payload
            cover: Optional cover image upload, replaces payload.cover_image_url

        Returns:
            The persisted post
        """
        author = ensure_author(author)
        uploaded_keys: list[str] = []

        try:
            data = normalize_post_input(payload)
            if cover is not None:
                stored = await self.object_store.upload(author.id, cover)
                uploaded_keys.append(stored.key)
                data.cover_image_url = stored.url

            ensure_valid(validate_blog_payload(data))
            if payload.submit:
                self._ensure_ready(data)

            async def operation() -> BlogPost:
                post = BlogPost(author_id=author.id, status=BlogStatus.DRAFT.value)
                self._apply_content(post, data)
                post.slug = await self.slug_allocator.allocate(data.title)
                if payload.submit:
                    self.lifecycle.submit(post)
                self.repository.add(post)
                return await self._commit(post, "create")

            post = await self._with_slug_retry(operation, "create")
        except Exception:
            await self._discard_objects(uploaded_keys)
            raise

        logger.info(f"Post {post.id} created by user {author.id} with status {post.status}")
        return post

    async def get_author_post(self, author: Optional[CurrentUser], post_id: int) -> BlogPost:
        author = ensure_author(author)
        return await self._get_author_post(post_id, author.id)

    async def update_post(
        self,
        author: Optional[CurrentUser],
        post_id: int,
        payload: BlogPostInput,
        cover: Optional[UploadFile] = None,
        remove_cover: bool = False,
    ) -> BlogPost:
        """
        Replace the content of an author's post.

        A new cover upload wins over remove_cover, which wins over the URL
        in the payload; with none of them the current cover is kept. Saving
        a rejected post clears its rejection even without resubmitting.
        """
        author = ensure_author(author)
        post = await self._get_author_post(post_id, author.id)
        self.lifecycle.ensure_author_editable(post, "edit")
        previous_cover = (post.cover_image_url or "").strip()
        uploaded_keys: list[str] = []

        try:
            data = normalize_post_input(payload)
            if cover is not None:
                stored = await self.object_store.upload(author.id, cover)
                uploaded_keys.append(stored.key)
                data.cover_image_url = stored.url
            elif remove_cover:
                data.cover_image_url = ""
            elif not data.cover_image_url:
                data.cover_image_url = previous_cover

            ensure_valid(validate_blog_payload(data))
            if payload.submit:
                self._ensure_ready(data)

            async def operation() -> BlogPost:
                current = await self._get_author_post(post_id, author.id)
                self.lifecycle.ensure_author_editable(current, "edit")
                self.lifecycle.clear_stale_rejection(current)
                if data.title != current.title:
                    current.slug = await self.slug_allocator.allocate(data.title, exclude_id=current.id)
                self._apply_content(current, data)
                if payload.submit:
                    self.lifecycle.submit(current)
                return await self._commit(current, "edit")

            post = await self._with_slug_retry(operation, "edit")
        except Exception:
            await self._discard_objects(uploaded_keys)
            raise

        if previous_cover and previous_cover != post.cover_image_url:
            old_key = self.object_store.key_from_public_url(previous_cover)
            if old_key:
                await self._discard_objects([old_key])

        logger.info(f"Post {post.id} updated by user {author.id}")
        return post

    async def submit_for_review(self, author: Optional[CurrentUser], post_id: int) -> BlogPost:
        author = ensure_author(author)
        post = await self._get_author_post(post_id, author.id)
        self.lifecycle.ensure_author_editable(post, "submit")
        errors = validate_ready_for_review(post)
        if errors:
            raise ValidationFailed(errors, message=INCOMPLETE_MESSAGE)

        self.lifecycle.submit(post)
        return await self._commit(post, "submit")

    async def delete_post(self, author: Optional[CurrentUser], post_id: int) -> None:
        author = ensure_author(author)
        post = await self._get_author_post(post_id, author.id)
        self.lifecycle.soft_delete(post, author.id)
        await self._commit(post, "delete")

    async def list_for_author(self, author: Optional[CurrentUser], status: Optional[str] = None) -> Sequence[BlogPost]:
        author = ensure_author(author)
        return await self.repository.list_for_author(author.id, normalize_status_filter(status))

    # ============== Admin operations ==============

    async def admin_list_queue(
        self,
        actor: Optional[CurrentUser],
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Sequence[BlogPost]:
        """
        List posts for moderation.

        The queue shows pending posts unless another status is requested;
        "all" lists every status.
        """
        ensure_admin(actor)
        if str(status or "").strip().lower() == ADMIN_QUEUE_ALL:
            status_filter = None
        else:
            status_filter = normalize_status_filter(status) or BlogStatus.PENDING.value
        search = (search or "").strip() or None
        return await self.repository.list_for_admin(status_filter, search)

    async def admin_get_post(self, actor: Optional[CurrentUser], post_id: int) -> BlogPost:
        ensure_admin(actor)
        return await self._get_post(post_id)

    async def admin_review(self, actor: Optional[CurrentUser], post_id: int) -> PostReview:
        ensure_admin(actor)
        post = await self._get_post(post_id)
        revisions = await self.revisions.list_recent(post.id, settings.blog_revision_history_limit)
        return PostReview(post=post, revisions=revisions)

    async def admin_approve(self, actor: Optional[CurrentUser], post_id: int) -> BlogPost:
        actor = ensure_admin(actor)
        post = await self._get_post(post_id)
        self.lifecycle.approve(post, actor.id)
        return await self._commit(post, "approve")

    async def admin_reject(self, actor: Optional[CurrentUser], post_id: int, reason: Optional[str]) -> BlogPost:
        actor = ensure_admin(actor)
        post = await self._get_post(post_id)
        self.lifecycle.ensure_status(post, BlogStatus.PENDING.value, "reject")

        reason = (reason or "").strip()
        errors = validate_rejection_reason(reason)
        if errors:
            raise ValidationFailed(errors, message=errors[0])

        self.lifecycle.reject(post, actor.id, reason)
        return await self._commit(post, "reject")

    async def admin_archive(self, actor: Optional[CurrentUser], post_id: int) -> BlogPost:
        actor = ensure_admin(actor)
        post = await self._get_post(post_id)
        self.lifecycle.archive(post)
        return await self._commit(post, "archive")

    async def admin_autosave(
        self,
        actor: Optional[CurrentUser],
        post_id: int,
        patch: BlogPostPatch,
    ) -> AutosaveResult:
        """
        Apply a partial admin edit and record what changed.

        Only fields present in the patch are changed. When the resulting
        status is one that requires a review-ready post, the cover image
        becomes mandatory as well. The post change and its revision are
        written in one commit; no revision is written when nothing changed.
        """
        actor = ensure_admin(actor)

        async def operation() -> AutosaveResult:
            post = await self._get_post(post_id)
            before = take_snapshot(post)

            data = normalize_autosave_patch(patch, post)
            require_ready = data.status in REVIEW_READY_STATUSES
            ensure_valid(validate_blog_payload(data, require_cover=require_ready))

            if data.title != post.title:
                post.slug = await self.slug_allocator.allocate(data.title, exclude_id=post.id)
            self._apply_content(post, data)
            post.featured = data.featured
            post.seo_title = data.seo_title
            post.seo_description = data.seo_description
            post.og_image_url = data.og_image_url
            post.moderation_notes = data.moderation_notes

            if data.status != post.status:
                self.lifecycle.apply_admin_status(post, data.status, actor.id)

            after = take_snapshot(post)
            self.revisions.record(post.id, actor.id, before, after)
            post = await self._commit(post, "autosave")
            return AutosaveResult(post=post, changed_fields=diff_snapshots(before, after))

        result = await self._with_slug_retry(operation, "autosave")
        if result.changed_fields:
            logger.info(f"Admin {actor.id} autosaved post {post_id}: {', '.join(result.changed_fields)}")
        return result
