"""Unit and property-based tests for reply rendering."""
from hypothesis import given
from hypothesis import strategies as st

from rally.render import (
    FENCE,
    SegmentKind,
    escape_code,
    join_segments,
    render_code_block,
    render_prose,
    render_reply,
    render_user_message,
    split_language,
    split_segments,
    unescape_code,
)

COPY_BUTTON = '<button class="copy-button" onclick="copyToClipboard(this)">Copy</button>'


def code_block(language: str, escaped: str) -> str:
    return (
        f'<div class="code-block">{COPY_BUTTON}'
        f'<pre><code class="language-{language}">{escaped}</code></pre></div>'
    )


class TestSplitSegments:
    """Tests for fence splitting."""

    def test_no_fence_is_single_prose_segment(self):
        segments = split_segments("just some text")
        assert len(segments) == 1
        assert segments[0].kind is SegmentKind.PROSE
        assert segments[0].text == "just some text"

    def test_balanced_fences(self):
        segments = split_segments("a```b```c")
        assert [s.kind for s in segments] == [
            SegmentKind.PROSE,
            SegmentKind.CODE,
            SegmentKind.PROSE,
        ]
        assert [s.text for s in segments] == ["a", "b", "c"]

    def test_unterminated_fence_makes_rest_code(self):
        segments = split_segments("intro```r\nx <- 1")
        assert [s.kind for s in segments] == [SegmentKind.PROSE, SegmentKind.CODE]
        assert segments[1].text == "r\nx <- 1"

    def test_trailing_fence_gives_empty_code_segment(self):
        segments = split_segments("intro```")
        assert segments[-1].kind is SegmentKind.CODE
        assert segments[-1].text == ""

    def test_empty_string(self):
        segments = split_segments("")
        assert len(segments) == 1
        assert segments[0].text == ""

    @given(st.text(alphabet="ab`\n *", max_size=60))
    def test_join_restores_original(self, text: str):
        """Property test: re-inserting fences reproduces the input exactly."""
        assert join_segments(split_segments(text)) == text

    @given(st.text(alphabet="ab`\n", max_size=60))
    def test_kinds_alternate_by_position(self, text: str):
        """Property test: even positions are prose, odd positions are code."""
        segments = split_segments(text)
        assert len(segments) == text.count(FENCE) + 1
        for i, segment in enumerate(segments):
            expected = SegmentKind.CODE if i % 2 else SegmentKind.PROSE
            assert segment.kind is expected


class TestRenderProse:
    """Tests for inline markdown substitutions."""

    def test_pass_order(self):
        rendered = render_prose("**a** *b* `c`\nd")
        assert rendered == "<strong>a</strong> <em>b</em> <code>c</code><br>d"

    def test_bold_only(self):
        assert render_prose("**bold**") == "<strong>bold</strong>"

    def test_italic_only(self):
        assert render_prose("*soft*") == "<em>soft</em>"

    def test_inline_code_is_not_escaped(self):
        assert render_prose("`<b>`") == "<code><b></code>"

    def test_every_newline_becomes_break(self):
        assert render_prose("one\n\ntwo\n") == "one<br><br>two<br>"

    def test_plain_text_untouched(self):
        assert render_prose("nothing special here") == "nothing special here"

    def test_bold_spans_lines(self):
        assert render_prose("**a\nb**") == "<strong>a<br>b</strong>"

    def test_italic_spans_lines(self):
        assert render_prose("*a\nb*") == "<em>a<br>b</em>"


class TestCodeBlocks:
    """Tests for code segment rendering."""

    def test_language_line_is_stripped(self):
        assert split_language("python\nprint(1)\n") == ("python", "print(1)")

    def test_missing_language_defaults_to_r(self):
        assert split_language("\nx <- 1\n") == ("r", "\nx <- 1\n")

    def test_non_alphabetic_first_line_is_content(self):
        code = "x <- 1\ny <- 2"
        assert split_language(code) == ("r", code)

    def test_language_with_digits_is_not_a_tag(self):
        code = "python3\nprint(1)"
        assert split_language(code) == ("r", code)

    def test_language_only(self):
        assert split_language("sql") == ("sql", "")

    def test_empty_code(self):
        assert split_language("") == ("r", "")

    def test_escape_order(self):
        assert escape_code("a < b > c") == "a &lt; b &gt; c"

    @given(st.text(alphabet=st.characters(exclude_characters="&"), max_size=80))
    def test_escape_removes_angle_brackets(self, text: str):
        """Property test: escaping leaves no brackets and can be undone."""
        escaped = escape_code(text)
        assert "<" not in escaped
        assert ">" not in escaped
        assert unescape_code(escaped) == text

    def test_render_code_block_markup(self):
        html = render_code_block("r\nif (a < b) print('<ok>')\n")
        assert html == code_block("r", "if (a &lt; b) print('&lt;ok&gt;')")

    def test_code_whitespace_preserved(self):
        html = render_code_block("py\n  indented\n\n  again\n")
        assert "  indented\n\n  again" in html


class TestRenderReply:
    """End-to-end rendering of assistant replies."""

    def test_reply_with_code_block(self):
        reply = "Use this:\n```r\nx <- 1\nprint(x)\n```\nDone."
        expected = "Use this:<br>" + code_block("r", "x &lt;- 1\nprint(x)") + "<br>Done."
        assert render_reply(reply) == expected

    def test_reply_without_fences(self):
        assert render_reply("**Hi**\nthere") == "<strong>Hi</strong><br>there"

    def test_unterminated_fence_renders_code(self):
        html = render_reply("Try:\n```r\nsummary(df)")
        assert html == "Try:<br>" + code_block("r", "summary(df)")

    def test_trailing_fence_renders_empty_block(self):
        assert render_reply("end```") == "end" + code_block("r", "")

    def test_markdown_inside_code_is_left_alone(self):
        html = render_reply("```\n**not bold**\n```")
        assert "<strong>" not in html
        assert "**not bold**" in html

    def test_user_message_is_escaped(self):
        assert render_user_message("<script>\nhi") == "&lt;script&gt;<br>hi"
