"""
Tests for blog payload validation
"""

import pytest

from hellorun.exceptions import ValidationFailed
from hellorun.services.blog_payload import PostData
from hellorun.services.blog_validator import (
    ensure_valid,
    validate_blog_payload,
    validate_ready_for_review,
    validate_rejection_reason,
)

CONTENT_TEXT = "Today I ran my first ten kilometres along the river and learned a lot."


def make_data(**overrides) -> PostData:
    data = {
        "title": "My First Run Blog Post",
        "category": "Training",
        "content_html": f"<p>{CONTENT_TEXT}</p>",
        "content_text": CONTENT_TEXT,
        "tags": ["training"],
    }
    data.update(overrides)
    return PostData(**data)


class TestValidateBlogPayload:
    """Test basic payload validation"""

    def test_valid_payload(self):
        """Test that a complete draft has no errors"""
        assert validate_blog_payload(make_data()) == []

    def test_title_bounds(self):
        """Test title length limits"""
        message = "Title must be between 5 and 150 characters."
        assert message in validate_blog_payload(make_data(title="Run"))
        assert message in validate_blog_payload(make_data(title="x" * 151))
        assert validate_blog_payload(make_data(title="x" * 150)) == []

    def test_excerpt_limit(self):
        """Test excerpt maximum"""
        assert validate_blog_payload(make_data(excerpt="x" * 321)) == ["Excerpt must be 320 characters or less."]

    def test_unknown_category(self):
        """Test category membership"""
        assert validate_blog_payload(make_data(category="Cycling")) == ["Category is invalid."]

    def test_other_requires_custom_category(self):
        """Test that Other needs a 2-80 character custom category"""
        message = "Please provide a custom category (2-80 characters) when selecting Other."
        assert validate_blog_payload(make_data(category="Other", custom_category="")) == [message]
        assert validate_blog_payload(make_data(category="Other", custom_category="U")) == [message]
        assert validate_blog_payload(make_data(category="Other", custom_category="Ultra")) == []

    def test_cover_url_must_be_http(self):
        """Test cover URL format"""
        errors = validate_blog_payload(make_data(cover_image_url="javascript:alert(1)"))
        assert errors == ["Cover image URL must be a valid http/https URL."]

    def test_cover_url_too_long(self):
        """Test cover URL length"""
        url = "https://cdn.test/" + "a" * 2000
        assert validate_blog_payload(make_data(cover_image_url=url)) == ["Cover image URL is too long."]

    def test_short_content(self):
        """Test minimum plain-text length"""
        errors = validate_blog_payload(make_data(content_text="Too short."))
        assert errors == ["Content body is too short. Add more details before saving."]

    def test_content_source_limit(self):
        """Test the editor source length limit"""
        errors = validate_blog_payload(make_data(content_raw="x" * 150001))
        assert errors == ["Content source exceeds maximum allowed length."]
        assert validate_blog_payload(make_data(content_raw="x" * 150000)) == []

    def test_too_many_tags(self):
        """Test the tag count limit"""
        errors = validate_blog_payload(make_data(tags=[f"t{i}" for i in range(13)]))
        assert errors == ["Maximum 12 tags are allowed."]

    def test_all_errors_are_collected(self):
        """Test that every violation is reported at once"""
        errors = validate_blog_payload(make_data(title="", category="", content_text=""))
        assert len(errors) == 3

    def test_cover_not_required_for_drafts(self):
        """Test that drafts may have no cover"""
        assert validate_blog_payload(make_data(cover_image_url="")) == []


class TestReadyForReview:
    """Test the stricter review bar"""

    def test_cover_required(self):
        """Test that a cover is mandatory before review"""
        errors = validate_ready_for_review(make_data())
        assert errors == ["Cover image is required before submitting for review."]

    def test_complete_post_is_ready(self):
        """Test a post with a cover passes"""
        assert validate_ready_for_review(make_data(cover_image_url="https://cdn.test/c.jpg")) == []


class TestRejectionReason:
    """Test rejection reason bounds"""

    def test_bounds(self):
        """Test 15-500 characters"""
        message = ["Rejection reason must be 15-500 characters."]
        assert validate_rejection_reason("too short") == message
        assert validate_rejection_reason("x" * 501) == message
        assert validate_rejection_reason("x" * 15) == []
        assert validate_rejection_reason("x" * 500) == []


class TestEnsureValid:
    """Test raising collected errors"""

    def test_raises_with_errors(self):
        """Test that errors are carried on the exception"""
        with pytest.raises(ValidationFailed) as exc_info:
            ensure_valid(["Category is invalid."])
        assert exc_info.value.errors == ["Category is invalid."]
        assert exc_info.value.status_code == 400

    def test_no_errors_passes(self):
        """Test that an empty list does nothing"""
        ensure_valid([])
