"""
Input Sanitization Utilities

Provides HTML sanitization for blog content and plain-text extraction used
for length checks and reading time.
"""

import html
import re
from typing import Optional

import bleach
from bleach.html5lib_shim import Filter


# Allowed tags for blog post bodies
BLOG_CONTENT_TAGS = ['p', 'br', 'strong', 'em', 'ul', 'ol', 'li', 'h2', 'h3', 'blockquote', 'a']

# Allowed attributes for blog post bodies
BLOG_CONTENT_ATTRS = {
    'a': ['href', 'rel', 'target'],
}

# Allowed protocols for URLs
ALLOWED_PROTOCOLS = ['http', 'https', 'mailto']

# Elements whose text content must never survive, even as plain text
NON_TEXT_BLOCKS = re.compile(
    r'<(script|style|iframe|object|embed|noscript|textarea)\b[^>]*>.*?</\1\s*>',
    re.IGNORECASE | re.DOTALL,
)

TAG_PATTERN = re.compile(r'<[^>]*>')
WHITESPACE_PATTERN = re.compile(r'\s+')


class ExternalLinkFilter(Filter):
    """Force every link to open in a new tab without leaking the opener."""

    def __iter__(self):
        for token in Filter.__iter__(self):
            if token['type'] in ('StartTag', 'EmptyTag') and token['name'] == 'a':
                attrs = dict(token.get('data') or {})
                attrs[(None, 'rel')] = 'noopener noreferrer'
                attrs[(None, 'target')] = '_blank'
                token['data'] = attrs
            yield token


_blog_cleaner = bleach.sanitizer.Cleaner(
    tags=BLOG_CONTENT_TAGS,
    attributes=BLOG_CONTENT_ATTRS,
    protocols=ALLOWED_PROTOCOLS,
    strip=True,
    filters=[ExternalLinkFilter],
)


def sanitize_html(text: Optional[str]) -> str:
    """
    Sanitize blog HTML down to the allowed subset.

    Args:
        text: The raw HTML submitted by the editor

    Returns:
        Sanitized, trimmed HTML
    """
    if not text:
        return ""

    without_blocks = NON_TEXT_BLOCKS.sub('', str(text))
    return _blog_cleaner.clean(without_blocks).strip()


def html_to_plain_text(text: Optional[str]) -> str:
    """
    Strip all markup and return normalized plain text.

    Tags become spaces so adjacent blocks do not glue words together.
    """
    if not text:
        return ""

    stripped = TAG_PATTERN.sub(' ', str(text))
    stripped = html.unescape(stripped)
    return WHITESPACE_PATTERN.sub(' ', stripped).strip()

