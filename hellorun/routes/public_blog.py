from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hellorun.auth import CurrentUser, get_current_user
from hellorun.database import get_db
from hellorun.schemas.blog import (
    BlogPostListResponse,
    BlogPostSummary,
    BlogSeoResponse,
    PublishedBlogPostResponse,
    PublishedPostResponse,
)
from hellorun.services.blog_public_service import BlogPublicService

router = APIRouter(prefix="/blog", tags=["Public Blog"])


def get_request_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded.strip():
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else ""


@router.get("", response_model=BlogPostListResponse)
async def list_posts(
    category: Optional[str] = Query(None),
    q: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    posts = await BlogPublicService(db).list_published(category=category, search=q, sort=sort)
    return BlogPostListResponse(posts=[BlogPostSummary.model_validate(post) for post in posts])


@router.get("/{slug}", response_model=PublishedPostResponse)
async def read_post(
    slug: str,
    request: Request,
    current_user: Optional[CurrentUser] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    view = await BlogPublicService(db).get_published_post(slug, current_user, get_request_ip(request))
    return PublishedPostResponse(
        post=PublishedBlogPostResponse.model_validate(view.post),
        author_name=view.author_name,
        related=[BlogPostSummary.model_validate(post) for post in view.related],
        seo=BlogSeoResponse(
            title=view.seo.title,
            description=view.seo.description,
            og_image_url=view.seo.og_image_url,
            canonical_url=view.seo.canonical_url,
        ),
    )
