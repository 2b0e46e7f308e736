"""Core types shared by every stage of the duplicate-content pipeline.

All offsets are byte offsets into the UTF-8 encoding of the source
document, end exclusive. All dataclasses are frozen and use slots=True.

Type hierarchy:
  Section          - Heading-delimited block of one document
  Document         - Identifier plus ordered sections
  SectionRef       - Location of a section (the unit groups are made of)
  DuplicateGroup   - Equivalent sections; first member is canonical
  DocumentFailure  - A document that could not be segmented
  ScanResult       - Output of one detector run
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Section:
    """A heading-delimited block of text within a document."""

    heading: str                    # "" for the implicit leading section
    body_lines: tuple[str, ...]     # Line terminators stripped
    byte_start: int
    byte_end: int                   # Exclusive
    level: int                      # 1-6 for headings, 0 when implicit
    index: int                      # Position within the owning document

    @property
    def text(self) -> str:
        """Heading and body joined as one block of text."""
        body = "\n".join(self.body_lines)
        if not self.heading:
            return body
        return f"{self.heading}\n{body}" if body else self.heading

    @property
    def byte_length(self) -> int:
        return self.byte_end - self.byte_start


@dataclass(frozen=True, slots=True)
class Document:
    """A scanned document and its sections, in source order."""

    identifier: str
    order: int
    sections: tuple[Section, ...]
    byte_length: int = 0


@dataclass(frozen=True, slots=True)
class SectionRef:
    """Where a section lives. Sorts by (document order, section index)."""

    document: str
    document_order: int
    section_index: int
    heading: str
    byte_start: int
    byte_end: int

    @classmethod
    def of(cls, document: Document, section: Section) -> SectionRef:
        return cls(
            document=document.identifier,
            document_order=document.order,
            section_index=section.index,
            heading=section.heading,
            byte_start=section.byte_start,
            byte_end=section.byte_end,
        )

    @property
    def position(self) -> tuple[int, int]:
        return (self.document_order, self.section_index)

    @property
    def byte_length(self) -> int:
        return self.byte_end - self.byte_start

    def to_dict(self) -> dict[str, object]:
        return {
            "document": self.document,
            "section_index": self.section_index,
            "heading": self.heading,
            "byte_start": self.byte_start,
            "byte_end": self.byte_end,
        }


@dataclass(frozen=True, slots=True)
class DuplicateGroup:
    """Sections judged equivalent.

    ``members`` is ordered by traversal position, so ``members[0]`` is
    always the canonical section.
    """

    key: str
    fingerprint: str
    members: tuple[SectionRef, ...]

    def __post_init__(self) -> None:
        if not self.members:
            raise ValueError("DuplicateGroup requires at least one member")

    @property
    def canonical(self) -> SectionRef:
        return self.members[0]

    @property
    def redundant(self) -> tuple[SectionRef, ...]:
        return self.members[1:]

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def is_duplicate(self) -> bool:
        return len(self.members) > 1


@dataclass(frozen=True, slots=True)
class DocumentFailure:
    """A document that raised MalformedInputError during segmentation."""

    identifier: str
    order: int
    reason: str

    def to_dict(self) -> dict[str, object]:
        return {"document": self.identifier, "reason": self.reason}


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Everything one detector run produced."""

    documents: tuple[Document, ...]
    groups: tuple[DuplicateGroup, ...]
    failures: tuple[DocumentFailure, ...] = field(default_factory=tuple)

    @property
    def section_count(self) -> int:
        return sum(len(d.sections) for d in self.documents)
