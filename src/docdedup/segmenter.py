"""Section segmenter for markdown / plain-text documents.

Splits a document into heading-delimited sections with:
- ATX heading detection (``# Title`` .. ``###### Title``)
- Setext heading detection (``Title`` underlined with ``===`` or ``---``)
- Fenced code awareness (headings inside ``` / ~~~ fences are ignored)
- Byte span boundaries (offsets into the UTF-8 encoding of the source)

3-phase approach:
    1. Split into lines and compute each line's byte offset.
    2. Find heading lines, skipping fenced code blocks.
    3. Cut sections at heading lines; leading text before the first
       heading becomes an implicit section with an empty heading.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from docdedup.errors import MalformedInputError
from docdedup.types import Section


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# "# What is X?", "### Coroutines ###". Up to 3 leading spaces, as in
# CommonMark; 4+ spaces is an indented code block.
_ATX_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?[ \t]*$")

# Optional closing sequence: "## Title ##"
_ATX_CLOSING_RE = re.compile(r"(?:^|[ \t]+)#+$")

_SETEXT_H1_RE = re.compile(r"^ {0,3}=+[ \t]*$")
_SETEXT_H2_RE = re.compile(r"^ {0,3}-{2,}[ \t]*$")

_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")

# Only LF, CRLF and CR end a line; U+2028, form feed and friends do not.
_LINE_RE = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+")


@dataclass(frozen=True, slots=True)
class HeadingLine:
    """A heading found in phase 2."""

    line_index: int
    line_span: int      # 1 for ATX, 2 for setext (text + underline)
    level: int
    text: str


# ---------------------------------------------------------------------------
# Heading extraction helpers
# ---------------------------------------------------------------------------

def _clean_heading(raw: str) -> str:
    """Collapse whitespace and drop an ATX closing sequence."""
    cleaned = _ATX_CLOSING_RE.sub("", raw.strip())
    return re.sub(r"\s+", " ", cleaned).strip()


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def split_lines(text: str) -> list[str]:
    """Split on LF, CRLF or CR, keeping each line's terminator."""
    return _LINE_RE.findall(text)


def _atx_heading(line: str) -> tuple[int, str] | None:
    m = _ATX_RE.match(_strip_eol(line))
    if m is None:
        return None
    return len(m.group(1)), _clean_heading(m.group(2) or "")


def _setext_level(underline: str) -> int:
    stripped = _strip_eol(underline)
    if _SETEXT_H1_RE.match(stripped):
        return 1
    if _SETEXT_H2_RE.match(stripped):
        return 2
    return 0


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def find_headings(lines: list[str]) -> list[HeadingLine]:
    """Find heading lines in a document already split by split_lines.

    A setext heading needs its text line to open a paragraph (preceded by
    a blank line, a heading or the start of the document); otherwise the
    underline is read as a thematic break.
    """
    headings: list[HeadingLine] = []
    fence: str | None = None
    prev_blank = True
    i = 0
    while i < len(lines):
        line = _strip_eol(lines[i])

        fence_match = _FENCE_RE.match(line)
        if fence is not None:
            if fence_match and fence_match.group(1)[0] == fence[0] and len(
                fence_match.group(1)
            ) >= len(fence):
                fence = None
            prev_blank = False
            i += 1
            continue
        if fence_match:
            fence = fence_match.group(1)
            prev_blank = False
            i += 1
            continue

        atx = _atx_heading(line)
        if atx is not None:
            level, text = atx
            headings.append(HeadingLine(i, 1, level, text))
            prev_blank = True
            i += 1
            continue

        if (
            line.strip()
            and prev_blank
            and i + 1 < len(lines)
            and not line.startswith("    ")
        ):
            level = _setext_level(lines[i + 1])
            if level:
                headings.append(HeadingLine(i, 2, level, _clean_heading(line)))
                prev_blank = True
                i += 2
                continue

        prev_blank = not line.strip()
        i += 1
    return headings


def segment_document(identifier: str, text: str) -> tuple[Section, ...]:
    """Split one document into ordered sections.

    Args:
        identifier: Document path or name, used in error messages.
        text: Raw document text.

    Returns:
        Sections in source order. Byte offsets refer to ``text`` encoded
        as UTF-8.

    Raises:
        MalformedInputError: ``text`` is empty after whitespace trimming.
    """
    if not text or not text.strip():
        raise MalformedInputError(identifier, "document is empty")

    # Phase 1: lines and byte offsets
    lines = split_lines(text)
    offsets = [0] * (len(lines) + 1)
    for i, line in enumerate(lines):
        offsets[i + 1] = offsets[i] + len(line.encode("utf-8"))

    # Phase 2: headings
    headings = find_headings(lines)

    # Phase 3: cut sections
    sections: list[Section] = []
    first_heading = headings[0].line_index if headings else len(lines)
    leading = lines[:first_heading]
    if any(line.strip() for line in leading):
        sections.append(Section(
            heading="",
            body_lines=tuple(_strip_eol(line) for line in leading),
            byte_start=0,
            byte_end=offsets[first_heading],
            level=0,
            index=0,
        ))

    for n, heading in enumerate(headings):
        end_line = (
            headings[n + 1].line_index if n + 1 < len(headings) else len(lines)
        )
        body_start = heading.line_index + heading.line_span
        sections.append(Section(
            heading=heading.text,
            body_lines=tuple(_strip_eol(line) for line in lines[body_start:end_line]),
            byte_start=offsets[heading.line_index],
            byte_end=offsets[end_line],
            level=heading.level,
            index=len(sections),
        ))

    return tuple(sections)
