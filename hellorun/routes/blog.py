"""
Author Blog Routes

Endpoints through which a verified user manages their own blog posts.
Create and update accept multipart forms so a cover image can be uploaded
alongside the fields.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from hellorun.auth import CurrentUser, require_author
from hellorun.database import get_db
from hellorun.schemas.blog import BlogPostEnvelope, BlogPostInput, BlogPostListResponse, BlogPostResponse, BlogPostSummary
from hellorun.services.blog_service import BlogModerationService
from hellorun.services.upload_service import ObjectStore, get_object_store
from hellorun.utils.blog import normalize_boolean

router = APIRouter(prefix="/blogs/me", tags=["Blog"])

SUBMIT_ACTION = "submit_review"


def get_blog_service(
    db: AsyncSession = Depends(get_db),
    object_store: ObjectStore = Depends(get_object_store),
) -> BlogModerationService:
    return BlogModerationService(db, object_store)


def build_post_input(
    title: str = Form(""),
    excerpt: str = Form(""),
    category: str = Form(""),
    custom_category: str = Form(""),
    cover_image_url: str = Form(""),
    content_html: str = Form(""),
    content_raw: str = Form(""),
    tags: str = Form(""),
    action: str = Form(""),
) -> BlogPostInput:
    return BlogPostInput(
        title=title,
        excerpt=excerpt,
        category=category,
        custom_category=custom_category,
        cover_image_url=cover_image_url,
        content_html=content_html,
        content_raw=content_raw,
        tags=tags,
        submit=action.strip() == SUBMIT_ACTION,
    )


def uploaded_cover(cover_image: Optional[UploadFile]) -> Optional[UploadFile]:
    # Browsers send an empty part when no file was chosen
    if cover_image is None or not cover_image.filename:
        return None
    return cover_image


def envelope(post, message: str) -> BlogPostEnvelope:
    return BlogPostEnvelope(message=message, post=BlogPostResponse.model_validate(post))


@router.get("", response_model=BlogPostListResponse)
async def list_my_posts(
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: CurrentUser = Depends(require_author),
    service: BlogModerationService = Depends(get_blog_service),
):
    posts = await service.list_for_author(current_user, status_filter)
    return BlogPostListResponse(posts=[BlogPostSummary.model_validate(post) for post in posts])


@router.post("", response_model=BlogPostEnvelope, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: BlogPostInput = Depends(build_post_input),
    cover_image: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(require_author),
    service: BlogModerationService = Depends(get_blog_service),
):
    post = await service.create_post(current_user, payload, uploaded_cover(cover_image))
    message = "Post submitted for review." if payload.submit else "Draft created successfully."
    return envelope(post, message)


@router.get("/{post_id}", response_model=BlogPostEnvelope)
async def get_my_post(
    post_id: int,
    current_user: CurrentUser = Depends(require_author),
    service: BlogModerationService = Depends(get_blog_service),
):
    post = await service.get_author_post(current_user, post_id)
    return envelope(post, "")


@router.post("/{post_id}", response_model=BlogPostEnvelope)
async def update_post(
    post_id: int,
    payload: BlogPostInput = Depends(build_post_input),
    cover_image: Optional[UploadFile] = File(None),
    remove_cover_image: str = Form(""),
    current_user: CurrentUser = Depends(require_author),
    service: BlogModerationService = Depends(get_blog_service),
):
    post = await service.update_post(
        current_user,
        post_id,
        payload,
        cover=uploaded_cover(cover_image),
        remove_cover=normalize_boolean(remove_cover_image),
    )
    message = "Post submitted for review." if payload.submit else "Draft updated successfully."
    return envelope(post, message)


@router.post("/{post_id}/submit", response_model=BlogPostEnvelope)
async def submit_post(
    post_id: int,
    current_user: CurrentUser = Depends(require_author),
    service: BlogModerationService = Depends(get_blog_service),
):
    post = await service.submit_for_review(current_user, post_id)
    return envelope(post, "Post submitted for review.")


@router.post("/{post_id}/delete")
async def delete_post(
    post_id: int,
    current_user: CurrentUser = Depends(require_author),
    service: BlogModerationService = Depends(get_blog_service),
):
    await service.delete_post(current_user, post_id)
    return {"success": True, "message": "Post deleted successfully."}
