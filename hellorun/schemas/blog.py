"""
Blog Schemas

Pydantic models for author payloads, admin autosave patches, moderation
requests and blog responses.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BlogPostInput(BaseModel):
    """Full author payload. Missing fields are treated as empty."""

    title: str = ""
    excerpt: str = ""
    category: str = ""
    custom_category: str = ""
    cover_image_url: str = ""
    content_html: str = ""
    content_raw: str = ""
    tags: list[str] | str | None = None
    submit: bool = False


class BlogPostPatch(BaseModel):
    """
    Partial admin autosave payload.

    Only the fields the client actually sent are applied; every other field
    keeps the post's current value.
    """

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    excerpt: str | None = None
    category: str | None = None
    custom_category: str | None = None
    cover_image_url: str | None = None
    content_html: str | None = None
    content_raw: str | None = None
    tags: list[str] | str | None = None
    status: str | None = None
    featured: bool | str | int | None = None
    seo_title: str | None = None
    seo_description: str | None = None
    og_image_url: str | None = None
    moderation_notes: str | None = None

    def provided_fields(self) -> set[str]:
        """Names of the fields present in the request body."""
        return set(self.model_fields_set)


class RejectRequest(BaseModel):
    """Admin rejection payload"""

    rejection_reason: str = Field("", description="Why the post was rejected (15-500 characters).")


class BlogPostResponse(BaseModel):
    """Blog post as its author sees it"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    author_id: int
    title: str
    slug: str
    excerpt: str
    content_html: str
    content_raw: str
    cover_image_url: str
    category: str
    custom_category: str
    tags: list[str] = Field(default_factory=list)
    reading_time: int
    status: str
    featured: bool
    seo_title: str
    seo_description: str
    og_image_url: str
    submitted_at: datetime | None = None
    approved_at: datetime | None = None
    approved_by: int | None = None
    rejected_at: datetime | None = None
    rejected_by: int | None = None
    reviewed_at: datetime | None = None
    rejection_reason: str
    published_at: datetime | None = None
    views: int
    created_at: datetime
    updated_at: datetime


class AdminBlogPostResponse(BlogPostResponse):
    """Blog post as moderators see it, with internal notes"""

    moderation_notes: str


class PublishedBlogPostResponse(BaseModel):
    """Post as shown to readers; moderation and editor-source fields are left out"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    author_id: int
    title: str
    slug: str
    excerpt: str
    content_html: str
    cover_image_url: str
    category: str
    custom_category: str
    tags: list[str] = Field(default_factory=list)
    reading_time: int
    featured: bool
    seo_title: str
    seo_description: str
    og_image_url: str
    published_at: datetime | None = None
    views: int
    created_at: datetime
    updated_at: datetime


class BlogPostSummary(BaseModel):
    """Compact post representation for listings"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    excerpt: str
    cover_image_url: str
    category: str
    custom_category: str
    tags: list[str] = Field(default_factory=list)
    reading_time: int
    status: str
    featured: bool
    views: int
    published_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class BlogRevisionResponse(BaseModel):
    """Revision history entry"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    edited_by: int | None = None
    source: str
    changed_fields: list[str] = Field(default_factory=list)
    before: dict[str, Any] = Field(default_factory=dict)
    after: dict[str, Any] = Field(default_factory=dict)
    edited_at: datetime


class BlogSeoResponse(BaseModel):
    title: str
    description: str
    og_image_url: str
    canonical_url: str


class BlogPostListResponse(BaseModel):
    success: bool = True
    posts: list[BlogPostSummary]


class BlogPostEnvelope(BaseModel):
    success: bool = True
    message: str = ""
    post: BlogPostResponse


class AdminBlogPostEnvelope(BaseModel):
    success: bool = True
    message: str = ""
    post: AdminBlogPostResponse


class BlogReviewResponse(BaseModel):
    success: bool = True
    post: AdminBlogPostResponse
    revisions: list[BlogRevisionResponse]


class BlogAutosaveResponse(BaseModel):
    success: bool = True
    message: str
    changed_fields: list[str]
    saved_at: datetime
    post: AdminBlogPostResponse


class PublishedPostResponse(BaseModel):
    success: bool = True
    post: PublishedBlogPostResponse
    author_name: str = ""
    related: list[BlogPostSummary]
    seo: BlogSeoResponse
