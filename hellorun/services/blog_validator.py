"""
Blog payload validation.

Every rule is checked and each violation contributes one message, so the
caller can show all problems at once.
"""

from typing import Union

from hellorun.constants.blog import (
    BLOG_CATEGORIES,
    CONTENT_HTML_MAX_LENGTH,
    CONTENT_RAW_MAX_LENGTH,
    CONTENT_TEXT_MIN_LENGTH,
    CUSTOM_CATEGORY_MAX_LENGTH,
    CUSTOM_CATEGORY_MIN_LENGTH,
    EXCERPT_MAX_LENGTH,
    MAX_TAGS,
    OTHER_CATEGORY,
    REJECTION_REASON_MAX_LENGTH,
    REJECTION_REASON_MIN_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
    URL_MAX_LENGTH,
)
from hellorun.exceptions import ValidationFailed
from hellorun.models.blog import BlogPost
from hellorun.services.blog_payload import PostData, post_to_data
from hellorun.utils.blog import is_valid_http_url


def validate_blog_payload(data: PostData, require_cover: bool = False) -> list[str]:
    """
    Validate a normalized payload.

    Args:
        data: Normalized post data
        require_cover: Also require a cover image (ready-for-review bar)

    Returns:
        List of error messages, empty when the payload is valid
    """
    errors = []

    if not data.title or not TITLE_MIN_LENGTH <= len(data.title) <= TITLE_MAX_LENGTH:
        errors.append("Title must be between 5 and 150 characters.")
    if len(data.excerpt) > EXCERPT_MAX_LENGTH:
        errors.append("Excerpt must be 320 characters or less.")
    if data.category not in BLOG_CATEGORIES:
        errors.append("Category is invalid.")
    if data.category == OTHER_CATEGORY:
        if not CUSTOM_CATEGORY_MIN_LENGTH <= len(data.custom_category) <= CUSTOM_CATEGORY_MAX_LENGTH:
            errors.append("Please provide a custom category (2-80 characters) when selecting Other.")
    if data.cover_image_url and len(data.cover_image_url) > URL_MAX_LENGTH:
        errors.append("Cover image URL is too long.")
    elif data.cover_image_url and not is_valid_http_url(data.cover_image_url):
        errors.append("Cover image URL must be a valid http/https URL.")
    if require_cover and not data.cover_image_url:
        errors.append("Cover image is required before submitting for review.")
    if len(data.content_html) > CONTENT_HTML_MAX_LENGTH:
        errors.append("Content exceeds maximum allowed length.")
    if len(data.content_raw) > CONTENT_RAW_MAX_LENGTH:
        errors.append("Content source exceeds maximum allowed length.")
    if len(data.content_text) < CONTENT_TEXT_MIN_LENGTH:
        errors.append("Content body is too short. Add more details before saving.")
    if len(data.tags) > MAX_TAGS:
        errors.append("Maximum 12 tags are allowed.")

    return errors


def validate_ready_for_review(post: Union[BlogPost, PostData]) -> list[str]:
    """Validate against the stricter bar a post must meet before it enters review."""
    data = post if isinstance(post, PostData) else post_to_data(post)
    return validate_blog_payload(data, require_cover=True)


def validate_rejection_reason(reason: str) -> list[str]:
    if not REJECTION_REASON_MIN_LENGTH <= len(reason) <= REJECTION_REASON_MAX_LENGTH:
        return ["Rejection reason must be 15-500 characters."]
    return []


def ensure_valid(errors: list[str]) -> None:
    """Raise ValidationFailed when any errors were collected."""
    if errors:
        raise ValidationFailed(errors)
