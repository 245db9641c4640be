"""
Admin Blog Routes

Moderation queue, review page data and the moderation actions. Autosave
takes a JSON patch holding only the fields the editor changed.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from hellorun.auth import CurrentUser, require_admin
from hellorun.models.blog import utcnow
from hellorun.routes.blog import get_blog_service
from hellorun.schemas.blog import (
    AdminBlogPostEnvelope,
    AdminBlogPostResponse,
    BlogAutosaveResponse,
    BlogPostListResponse,
    BlogPostPatch,
    BlogPostSummary,
    BlogReviewResponse,
    BlogRevisionResponse,
    RejectRequest,
)
from hellorun.services.blog_service import BlogModerationService

router = APIRouter(prefix="/admin/blog/posts", tags=["Blog Moderation"])


def admin_envelope(post, message: str) -> AdminBlogPostEnvelope:
    return AdminBlogPostEnvelope(message=message, post=AdminBlogPostResponse.model_validate(post))


@router.get("", response_model=BlogPostListResponse)
async def list_moderation_queue(
    status_filter: Optional[str] = Query(None, alias="status"),
    q: Optional[str] = Query(None, max_length=200),
    current_user: CurrentUser = Depends(require_admin),
    service: BlogModerationService = Depends(get_blog_service),
):
    posts = await service.admin_list_queue(current_user, status_filter, q)
    return BlogPostListResponse(posts=[BlogPostSummary.model_validate(post) for post in posts])


@router.get("/{post_id}", response_model=AdminBlogPostEnvelope)
async def get_post(
    post_id: int,
    current_user: CurrentUser = Depends(require_admin),
    service: BlogModerationService = Depends(get_blog_service),
):
    post = await service.admin_get_post(current_user, post_id)
    return admin_envelope(post, "")


@router.get("/{post_id}/review", response_model=BlogReviewResponse)
async def review_post(
    post_id: int,
    current_user: CurrentUser = Depends(require_admin),
    service: BlogModerationService = Depends(get_blog_service),
):
    review = await service.admin_review(current_user, post_id)
    return BlogReviewResponse(
        post=AdminBlogPostResponse.model_validate(review.post),
        revisions=[BlogRevisionResponse.model_validate(revision) for revision in review.revisions],
    )


@router.post("/{post_id}/approve", response_model=AdminBlogPostEnvelope)
async def approve_post(
    post_id: int,
    current_user: CurrentUser = Depends(require_admin),
    service: BlogModerationService = Depends(get_blog_service),
):
    post = await service.admin_approve(current_user, post_id)
    return admin_envelope(post, "Post approved and published.")


@router.post("/{post_id}/reject", response_model=AdminBlogPostEnvelope)
async def reject_post(
    post_id: int,
    payload: RejectRequest,
    current_user: CurrentUser = Depends(require_admin),
    service: BlogModerationService = Depends(get_blog_service),
):
    post = await service.admin_reject(current_user, post_id, payload.rejection_reason)
    return admin_envelope(post, "Post rejected successfully.")


@router.post("/{post_id}/archive", response_model=AdminBlogPostEnvelope)
async def archive_post(
    post_id: int,
    current_user: CurrentUser = Depends(require_admin),
    service: BlogModerationService = Depends(get_blog_service),
):
    post = await service.admin_archive(current_user, post_id)
    return admin_envelope(post, "Post archived successfully.")


@router.post("/{post_id}/autosave", response_model=BlogAutosaveResponse)
async def autosave_post(
    post_id: int,
    patch: BlogPostPatch,
    current_user: CurrentUser = Depends(require_admin),
    service: BlogModerationService = Depends(get_blog_service),
):
    result = await service.admin_autosave(current_user, post_id, patch)
    return BlogAutosaveResponse(
        message="Post auto-saved.",
        changed_fields=result.changed_fields,
        saved_at=result.post.updated_at or utcnow(),
        post=AdminBlogPostResponse.model_validate(result.post),
    )
