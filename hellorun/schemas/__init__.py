from .blog import (
    BlogAutosaveResponse,
    BlogPostEnvelope,
    BlogPostInput,
    BlogPostListResponse,
    BlogPostPatch,
    BlogPostResponse,
    BlogPostSummary,
    BlogReviewResponse,
    BlogRevisionResponse,
    BlogSeoResponse,
    PublishedPostResponse,
    RejectRequest,
)

# Define the public API of this module
__all__ = [
    "BlogAutosaveResponse",
    "BlogPostEnvelope",
    "BlogPostInput",
    "BlogPostListResponse",
    "BlogPostPatch",
    "BlogPostResponse",
    "BlogPostSummary",
    "BlogReviewResponse",
    "BlogRevisionResponse",
    "BlogSeoResponse",
    "PublishedPostResponse",
    "RejectRequest",
]
