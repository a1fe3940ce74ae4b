"""Tests for HTML sanitization and message truncation."""

from searchbot.constants import MAX_MESSAGE_LENGTH_CHARS
from searchbot.services.html_sanitizer import sanitize_html, truncate_message


class TestSanitizeHtml:
    """Test sanitize_html()."""

    def test_strips_inline_tags(self):
        assert sanitize_html("<p>Hello <b>World</b></p>") == "Hello World"

    def test_empty_input(self):
        assert sanitize_html("") == ""

    def test_plain_text_unchanged(self):
        assert sanitize_html("just text") == "just text"

    def test_attributes_removed(self):
        html = '<a href="https://example.com" class="link" onclick="x()">Link</a>'
        assert sanitize_html(html) == "Link"

    def test_script_and_style_content_dropped(self):
        html = (
            "<html><head><style>body { color: red; }</style>"
            "<script>alert('x')</script></head>"
            "<body><p>Visible</p></body></html>"
        )
        assert sanitize_html(html) == "Visible"

    def test_iframes_dropped(self):
        html = '<div>Before<iframe src="https://evil.example">fallback</iframe>After</div>'
        text = sanitize_html(html)
        assert "fallback" not in text
        assert "iframe" not in text
        assert text == "BeforeAfter"

    def test_entities_decoded(self):
        assert sanitize_html("<p>Fish &amp; Chips</p>") == "Fish & Chips"

    def test_blank_lines_and_spaces_collapsed(self):
        html = "<div>\n\n   First    line  \n\n\n<p>Second\tline</p>\n</div>"
        assert sanitize_html(html) == "First line\nSecond line"

    def test_block_elements_keep_line_breaks(self):
        html = "<ul>\n<li>One</li>\n<li>Two</li>\n</ul>"
        assert sanitize_html(html) == "One\nTwo"

    def test_comments_dropped(self):
        assert sanitize_html("<p>Keep<!-- hidden --></p>") == "Keep"

    def test_no_angle_brackets_left_from_markup(self):
        html = "<html><body><h1>Title</h1><div><span>Body</span></div></body></html>"
        text = sanitize_html(html)
        assert "<" not in text
        assert ">" not in text


class TestTruncateMessage:
    """Test truncate_message()."""

    def test_short_text_unchanged(self):
        assert truncate_message("hello") == "hello"

    def test_text_just_below_limit_unchanged(self):
        text = "x" * (MAX_MESSAGE_LENGTH_CHARS - 1)
        assert truncate_message(text) == text

    def test_text_at_limit_kept_whole(self):
        text = "x" * MAX_MESSAGE_LENGTH_CHARS
        assert truncate_message(text) == text

    def test_long_text_cut_to_limit(self):
        text = "".join(str(i % 10) for i in range(2500))
        result = truncate_message(text)
        assert len(result) == MAX_MESSAGE_LENGTH_CHARS
        assert result == text[:MAX_MESSAGE_LENGTH_CHARS]

    def test_custom_limit(self):
        assert truncate_message("abcdef", limit=3) == "abc"

    def test_truncation_logged(self, mock_logfire):
        truncate_message("y" * 2100)
        mock_logfire.info.assert_called_once()
        assert mock_logfire.info.call_args.kwargs["original_length"] == 2100
