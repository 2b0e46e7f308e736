"""Duplicate report construction and rendering.

``build_report`` is a pure transformation from groups to a report value;
rendering to JSON-compatible dicts or text is left to the caller.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from docdedup.types import DocumentFailure, DuplicateGroup, ScanResult, SectionRef


REPORT_VERSION = "1.0"


@dataclass(frozen=True, slots=True)
class ReportEntry:
    """One reported group: its canonical location and redundant copies."""

    fingerprint: str
    canonical: SectionRef
    redundant: tuple[SectionRef, ...]

    @property
    def redundant_bytes(self) -> int:
        return sum(ref.byte_length for ref in self.redundant)

    def to_dict(self) -> dict[str, object]:
        return {
            "fingerprint": self.fingerprint,
            "canonical": self.canonical.to_dict(),
            "redundant": [ref.to_dict() for ref in self.redundant],
        }


@dataclass(frozen=True, slots=True)
class DuplicateReport:
    """Report value handed to presentation code."""

    entries: tuple[ReportEntry, ...]
    group_count: int
    section_count: int
    failures: tuple[DocumentFailure, ...] = field(default_factory=tuple)

    @property
    def duplicate_group_count(self) -> int:
        return sum(1 for e in self.entries if e.redundant)

    @property
    def redundant_section_count(self) -> int:
        return sum(len(e.redundant) for e in self.entries)

    @property
    def redundant_bytes(self) -> int:
        return sum(e.redundant_bytes for e in self.entries)

    @property
    def has_duplicates(self) -> bool:
        return self.redundant_section_count > 0

    def summary(self) -> dict[str, int]:
        return {
            "groups": self.group_count,
            "sections": self.section_count,
            "duplicate_groups": self.duplicate_group_count,
            "redundant_sections": self.redundant_section_count,
            "redundant_bytes": self.redundant_bytes,
            "failed_documents": len(self.failures),
        }

    def to_dict(self) -> dict[str, object]:
        return {
            "report_version": REPORT_VERSION,
            "summary": self.summary(),
            "groups": [e.to_dict() for e in self.entries],
            "failures": [f.to_dict() for f in self.failures],
        }


def build_report(
    groups: Iterable[DuplicateGroup],
    *,
    failures: Iterable[DocumentFailure] = (),
    include_singletons: bool = False,
) -> DuplicateReport:
    """Build a report listing every group with more than one member.

    Args:
        groups: Groups in order of first appearance.
        failures: Documents that could not be segmented.
        include_singletons: Also list groups with a single member.

    Returns:
        DuplicateReport with entries in group order.
    """
    groups = tuple(groups)
    entries = tuple(
        ReportEntry(
            fingerprint=g.fingerprint,
            canonical=g.canonical,
            redundant=g.redundant,
        )
        for g in groups
        if include_singletons or g.is_duplicate
    )
    return DuplicateReport(
        entries=entries,
        group_count=len(groups),
        section_count=sum(g.size for g in groups),
        failures=tuple(failures),
    )


def report_from_scan(result: ScanResult, *, include_singletons: bool = False) -> DuplicateReport:
    return build_report(
        result.groups,
        failures=result.failures,
        include_singletons=include_singletons,
    )


def _location(ref: SectionRef) -> str:
    heading = ref.heading or "(untitled)"
    return f"{ref.document} #{ref.section_index} [{ref.byte_start}:{ref.byte_end}] {heading}"


def render_text(report: DuplicateReport) -> str:
    """Render a human-readable listing of the report."""
    lines: list[str] = []
    for entry in report.entries:
        lines.append(f"group {entry.fingerprint} ({1 + len(entry.redundant)} copies)")
        lines.append(f"  canonical: {_location(entry.canonical)}")
        for ref in entry.redundant:
            lines.append(f"  redundant: {_location(ref)}")
    for failure in report.failures:
        lines.append(f"failed: {failure.identifier}: {failure.reason}")
    s = report.summary()
    lines.append(
        f"{s['duplicate_groups']} duplicate groups, "
        f"{s['redundant_sections']} redundant sections "
        f"({s['redundant_bytes']} bytes) across {s['sections']} sections"
    )
    return "\n".join(lines) + "\n"
