"""Tests for docdedup.normalizer."""
from __future__ import annotations

from docdedup.normalizer import (
    fingerprint,
    normalize_section,
    normalize_text,
    section_key,
)
from docdedup.types import Section


def _section(heading: str, *body: str) -> Section:
    return Section(
        heading=heading,
        body_lines=tuple(body),
        byte_start=0,
        byte_end=10,
        level=1 if heading else 0,
        index=0,
    )


class TestNormalizeText:
    def test_empty(self) -> None:
        assert normalize_text("") == ""

    def test_lowercase_and_whitespace(self) -> None:
        assert normalize_text("  What   IS\tX\n\n") == "what is x"

    def test_emphasis_markers_removed(self) -> None:
        assert normalize_text("**Bold** and _italic_ and `code`") == "bold and italic and code"

    def test_strikethrough_removed(self) -> None:
        assert normalize_text("~~old~~ new") == "old new"

    def test_punctuation_is_not_semantic(self) -> None:
        assert normalize_text("What is X?") == normalize_text("what is x")
        assert normalize_text("Yes, really.") == "yes really"

    def test_apostrophes_dropped_not_spaced(self) -> None:
        assert normalize_text("Don't") == "dont"
        assert normalize_text("Don\u2019t") == "dont"

    def test_semantic_punctuation_kept(self) -> None:
        assert normalize_text("C# is 100% @Annotated") == "c# is 100% @annotated"

    def test_links_reduced_to_text(self) -> None:
        assert normalize_text("See [the docs](https://example.com/x).") == "see the docs"

    def test_images_reduced_to_alt(self) -> None:
        assert normalize_text("![diagram](img.png)") == "diagram"

    def test_zero_width_removed(self) -> None:
        assert normalize_text("co\u200broutine") == "coroutine"

    def test_nfkc_folding(self) -> None:
        # Fullwidth letters and the "fi" ligature fold to ASCII
        assert normalize_text("\uff2b\uff4f\uff54\uff4c\uff49\uff4e") == "kotlin"
        assert normalize_text("\ufb01le") == "file"

    def test_casefold(self) -> None:
        assert normalize_text("STRASSE") == normalize_text("straße")

    def test_deterministic(self) -> None:
        text = "## *What* is `lateinit`?\n\nIt defers   initialization."
        assert normalize_text(text) == normalize_text(text)


class TestSectionKey:
    def test_heading_and_body_joined(self) -> None:
        s = _section("What is X?", "X is a thing.")
        assert section_key(s) == "what is x x is a thing"

    def test_implicit_section_has_body_only(self) -> None:
        s = _section("", "Just text.")
        assert section_key(s) == "just text"

    def test_formatting_differences_ignored(self) -> None:
        a = _section("What is X?", "X is **a** thing.")
        b = _section("what is x", "", "X  is a   thing", "")
        assert section_key(a) == section_key(b)

    def test_different_headings_differ(self) -> None:
        a = _section("What is X?", "Same body.")
        b = _section("What is Y?", "Same body.")
        assert section_key(a) != section_key(b)

    def test_normalize_section_wraps_key(self) -> None:
        s = _section("Title", "Body")
        ns = normalize_section(s)
        assert ns.section is s
        assert ns.key == "title body"
        assert ns.fingerprint == fingerprint("title body")


class TestFingerprint:
    def test_length_and_hex(self) -> None:
        fp = fingerprint("what is x")
        assert len(fp) == 16
        int(fp, 16)

    def test_stable(self) -> None:
        assert fingerprint("abc") == fingerprint("abc")
        assert fingerprint("abc") != fingerprint("abd")
