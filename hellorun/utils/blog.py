"""
Blog field helpers: tag normalization, reading time and small coercions.
"""

import math
import re
from typing import Any, Iterable, Optional, Union
from urllib.parse import urlparse

from hellorun.constants.blog import MAX_TAGS, TAG_MAX_LENGTH, WORDS_PER_MINUTE
from hellorun.utils.sanitize import html_to_plain_text

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def normalize_tag(value: Any) -> str:
    """Trim, lowercase and collapse whitespace in a single tag, capped at 40 chars."""
    tag = re.sub(r"\s+", " ", str(value or "").strip().lower())
    return tag[:TAG_MAX_LENGTH]


def split_tags(value: Any) -> list[str]:
    """Split a comma separated tag string. Anything that is not a string yields no tags."""
    if not isinstance(value, str):
        return []
    return [item.strip() for item in value.split(",")]


def normalize_tags(value: Union[str, Iterable[Any], None]) -> list[str]:
    """
    Normalize a tag list or a comma separated tag string.

    Empty tags are dropped, duplicates are removed keeping the first
    occurrence, and only the first 12 tags are kept.
    """
    if value is None:
        return []
    items = split_tags(value) if isinstance(value, str) else list(value)

    tags: list[str] = []
    for item in items:
        tag = normalize_tag(item)
        if tag and tag not in tags:
            tags.append(tag)
    return tags[:MAX_TAGS]


def estimate_reading_time(content_html: Optional[str]) -> int:
    """Minutes needed to read the content at 200 words per minute, never below 1."""
    plain_text = html_to_plain_text(content_html)
    words = len(plain_text.split(" ")) if plain_text else 0
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def is_valid_http_url(value: Any) -> bool:
    try:
        parsed = urlparse(str(value or "").strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def normalize_boolean(value: Any, fallback: bool = False) -> bool:
    """Coerce form-style booleans ("1", "on", "false", ...) falling back when unrecognised."""
    if isinstance(value, bool):
        return value
    normalized = str(value if value is not None else "").strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    return bool(fallback)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input is matched literally (use with escape='\\')."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
