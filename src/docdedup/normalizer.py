"""Deterministic normalization of sections into comparison keys.

Current transforms, applied in order:
1. Unicode NFKC folding.
2. Remove zero-width characters.
3. Reduce markdown links and images to their visible text.
4. Strip emphasis / code markers (``*``, ``_``, ``~``, backticks).
5. Case-fold.
6. Drop apostrophes, turn other non-semantic punctuation into spaces.
7. Collapse whitespace runs to single spaces.
"""

from __future__ import annotations

import hashlib
import re
import unicodedata
from dataclasses import dataclass

from docdedup.types import Section


_ZERO_WIDTH_CHARS = frozenset({"\u200b", "\u200c", "\u200d", "\u2060", "\ufeff"})

# Punctuation that carries meaning in technical prose ("C#", "100%", "@JvmStatic").
_SEMANTIC_PUNCTUATION = frozenset("#%&@")
_APOSTROPHES = frozenset("'\u2019\u02bc")

_LINK_RE = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
_EMPHASIS_RE = re.compile(r"[*_~`]+")
_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class NormalizedSection:
    """A section paired with its comparison key. Never persisted."""

    section: Section
    key: str

    @property
    def fingerprint(self) -> str:
        return fingerprint(self.key)


def _strip_punctuation(text: str) -> str:
    out: list[str] = []
    for ch in text:
        if ch in _APOSTROPHES:
            continue
        if ch in _SEMANTIC_PUNCTUATION:
            out.append(ch)
        elif unicodedata.category(ch).startswith("P"):
            out.append(" ")
        else:
            out.append(ch)
    return "".join(out)


def normalize_text(text: str) -> str:
    """Normalize free text into a whitespace/case/punctuation-insensitive key."""
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text)
    text = "".join(ch for ch in text if ch not in _ZERO_WIDTH_CHARS)
    text = _LINK_RE.sub(r"\1", text)
    text = _EMPHASIS_RE.sub("", text)
    text = _strip_punctuation(text.casefold())
    return _WS_RE.sub(" ", text).strip()


def section_key(section: Section) -> str:
    """Key for a section: heading and body normalized as one text."""
    return normalize_text(section.text)


def normalize_section(section: Section) -> NormalizedSection:
    return NormalizedSection(section=section, key=section_key(section))


def fingerprint(key: str) -> str:
    """Short content address of a key: SHA-256 truncated to 16 hex chars."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]
