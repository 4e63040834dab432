"""
Light markdown rendering for chat bubbles.

A reply is split on code fences into alternating prose and code segments.
Prose gets a handful of inline substitutions; code becomes a standalone
block with a language tag and a copy button. The output is injected into the
transcript as-is.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple

from markupsafe import escape

FENCE: str = "```"
DEFAULT_CODE_LANGUAGE: str = "r"

_BOLD_RE = re.compile(r"\*\*(.*?)\*\*", re.DOTALL)
_ITALIC_RE = re.compile(r"\*(.*?)\*", re.DOTALL)
_INLINE_CODE_RE = re.compile(r"`([^`]+)`")
_LANGUAGE_RE = re.compile(r"[A-Za-z]+")


class SegmentKind(str, Enum):
    PROSE = "prose"
    CODE = "code"


@dataclass(frozen=True)
class RenderSegment:
    kind: SegmentKind
    text: str


# === Segmentation ==========================================================


def split_segments(text: str) -> List[RenderSegment]:
    """
    Split ``text`` on the fence marker.

    Parity alone decides the kind: even positions are prose, odd positions
    are code. An unmatched final fence therefore turns everything after it
    (possibly nothing) into a code segment.
    """
    return [
        RenderSegment(SegmentKind.CODE if i % 2 else SegmentKind.PROSE, part)
        for i, part in enumerate(text.split(FENCE))
    ]


def join_segments(segments: Iterable[RenderSegment]) -> str:
    return FENCE.join(segment.text for segment in segments)


# === Prose =================================================================


def render_prose(text: str) -> str:
    # bold must run before italic
    text = _BOLD_RE.sub(r"<strong>\1</strong>", text)
    text = _ITALIC_RE.sub(r"<em>\1</em>", text)
    text = _INLINE_CODE_RE.sub(r"<code>\1</code>", text)
    return text.replace("\n", "<br>")


# === Code ==================================================================


def escape_code(text: str) -> str:
    return text.replace("<", "&lt;").replace(">", "&gt;")


def unescape_code(text: str) -> str:
    return text.replace("&gt;", ">").replace("&lt;", "<")


def split_language(code: str) -> Tuple[str, str]:
    """
    Return ``(language, content)`` for a code segment.

    A first line made only of ASCII letters is taken as the language tag and
    removed, together with a single trailing empty line. Anything else keeps
    the whole segment under the default language.
    """
    lines = code.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    if lines and _LANGUAGE_RE.fullmatch(lines[0]):
        return lines[0], "\n".join(lines[1:])
    return DEFAULT_CODE_LANGUAGE, code


def render_code_block(code: str) -> str:
    language, content = split_language(code)
    return (
        '<div class="code-block">'
        '<button class="copy-button" onclick="copyToClipboard(this)">Copy</button>'
        f'<pre><code class="language-{language}">'
        f"{escape_code(content)}"
        "</code></pre></div>"
    )


# === Whole messages ========================================================


def render_segment(segment: RenderSegment) -> str:
    if segment.kind is SegmentKind.CODE:
        return render_code_block(segment.text)
    return render_prose(segment.text)


def render_reply(text: str) -> str:
    """Render an assistant reply to HTML."""
    return "".join(render_segment(segment) for segment in split_segments(text))


def render_user_message(text: str) -> str:
    """User text is escaped and keeps its line breaks."""
    return str(escape(text)).replace("\n", "<br>")
