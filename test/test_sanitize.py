"""
Tests for input sanitization utilities

Tests blog HTML sanitization and plain-text extraction.
"""

from hellorun.utils.sanitize import html_to_plain_text, sanitize_html


class TestSanitizeHtml:
    """Test blog HTML sanitization (allow-listed subset)"""

    def test_preserves_allowed_tags(self):
        """Test that the allowed formatting tags survive"""
        safe = "<h2>Week 1</h2><p>This is <strong>bold</strong> and <em>soft</em></p><ul><li>run</li></ul>"
        assert sanitize_html(safe) == safe

    def test_removes_script_with_contents(self):
        """Test that script blocks disappear together with their code"""
        clean = sanitize_html("<script>alert('xss')</script><p>Safe content</p>")
        assert "<script>" not in clean
        assert "alert" not in clean
        assert "<p>Safe content</p>" in clean

    def test_removes_style_and_iframe_blocks(self):
        """Test that style and iframe blocks are removed with their contents"""
        clean = sanitize_html("<style>p{color:red}</style><iframe src='x'>frame</iframe><p>ok</p>")
        assert clean == "<p>ok</p>"

    def test_strips_disallowed_tags_keeps_text(self):
        """Test that unknown tags are stripped but their text kept"""
        clean = sanitize_html("<div><span>Keep me</span></div>")
        assert clean == "Keep me"

    def test_removes_event_attributes(self):
        """Test that event handler attributes are removed"""
        clean = sanitize_html("<p onclick=\"alert('xss')\">Click me</p>")
        assert "onclick" not in clean
        assert "Click me" in clean

    def test_links_are_forced_to_new_tab(self):
        """Test that links get rel and target forced"""
        clean = sanitize_html('<a href="https://example.com" rel="opener" target="_self">Race</a>')
        assert 'href="https://example.com"' in clean
        assert 'rel="noopener noreferrer"' in clean
        assert 'target="_blank"' in clean
        assert "opener\"" not in clean.replace("noopener noreferrer\"", "")

    def test_javascript_links_lose_href(self):
        """Test that non http/https/mailto links are neutralized"""
        clean = sanitize_html('<a href="javascript:alert(1)">bad</a>')
        assert "javascript" not in clean

    def test_mailto_links_allowed(self):
        """Test that mailto links are kept"""
        clean = sanitize_html('<a href="mailto:coach@example.com">Mail</a>')
        assert 'href="mailto:coach@example.com"' in clean

    def test_result_is_trimmed(self):
        """Test that surrounding whitespace is trimmed"""
        assert sanitize_html("   <p>x</p>  \n") == "<p>x</p>"

    def test_handles_none(self):
        """Test None input"""
        assert sanitize_html(None) == ""


class TestHtmlToPlainText:
    """Test plain-text extraction"""

    def test_tags_become_spaces(self):
        """Test that adjacent blocks do not glue words together"""
        assert html_to_plain_text("<p>Hello</p><p>World</p>") == "Hello World"

    def test_entities_are_unescaped(self):
        """Test that HTML entities are decoded"""
        assert html_to_plain_text("<p>Fish &amp; chips&nbsp;after</p>") == "Fish & chips after"

    def test_whitespace_collapses(self):
        """Test whitespace normalization"""
        assert html_to_plain_text("  a \n\n b\t c ") == "a b c"

    def test_markup_only_gives_empty(self):
        """Test that markup with no text yields nothing"""
        assert html_to_plain_text("<p><br></p><p> </p>") == ""

