"""Tests for docdedup.reporter."""
from __future__ import annotations

from docdedup.reporter import REPORT_VERSION, build_report, render_text
from docdedup.types import DocumentFailure, DuplicateGroup, SectionRef


def _ref(document: str, order: int, index: int, heading: str = "Q", size: int = 10) -> SectionRef:
    return SectionRef(
        document=document,
        document_order=order,
        section_index=index,
        heading=heading,
        byte_start=index * 100,
        byte_end=index * 100 + size,
    )


def _groups() -> list[DuplicateGroup]:
    return [
        DuplicateGroup(
            key="q a",
            fingerprint="f1",
            members=(_ref("a.md", 0, 0), _ref("b.md", 1, 0, size=12), _ref("c.md", 2, 3, size=8)),
        ),
        DuplicateGroup(key="solo", fingerprint="f2", members=(_ref("a.md", 0, 1, "Solo"),)),
    ]


class TestBuildReport:
    def test_only_duplicate_groups_listed(self) -> None:
        report = build_report(_groups())
        assert [e.fingerprint for e in report.entries] == ["f1"]
        entry = report.entries[0]
        assert entry.canonical.document == "a.md"
        assert [r.document for r in entry.redundant] == ["b.md", "c.md"]

    def test_summary_counts(self) -> None:
        report = build_report(_groups())
        assert report.summary() == {
            "groups": 2,
            "sections": 4,
            "duplicate_groups": 1,
            "redundant_sections": 2,
            "redundant_bytes": 20,
            "failed_documents": 0,
        }
        assert report.has_duplicates

    def test_include_singletons(self) -> None:
        report = build_report(_groups(), include_singletons=True)
        assert [e.fingerprint for e in report.entries] == ["f1", "f2"]
        assert report.duplicate_group_count == 1

    def test_no_groups(self) -> None:
        report = build_report([])
        assert report.entries == ()
        assert not report.has_duplicates

    def test_failures_carried(self) -> None:
        failure = DocumentFailure(identifier="e.md", order=3, reason="document is empty")
        report = build_report(_groups(), failures=[failure])
        assert report.failures == (failure,)
        assert report.summary()["failed_documents"] == 1

    def test_pure(self) -> None:
        groups = _groups()
        assert build_report(groups) == build_report(groups)


class TestToDict:
    def test_shape(self) -> None:
        failure = DocumentFailure(identifier="e.md", order=3, reason="document is empty")
        payload = build_report(_groups(), failures=[failure]).to_dict()
        assert payload["report_version"] == REPORT_VERSION
        groups = payload["groups"]
        assert isinstance(groups, list)
        assert groups[0] == {
            "fingerprint": "f1",
            "canonical": {
                "document": "a.md",
                "section_index": 0,
                "heading": "Q",
                "byte_start": 0,
                "byte_end": 10,
            },
            "redundant": [
                {"document": "b.md", "section_index": 0, "heading": "Q", "byte_start": 0, "byte_end": 12},
                {"document": "c.md", "section_index": 3, "heading": "Q", "byte_start": 300, "byte_end": 308},
            ],
        }
        assert payload["failures"] == [{"document": "e.md", "reason": "document is empty"}]


class TestRenderText:
    def test_lists_locations(self) -> None:
        text = render_text(build_report(_groups()))
        assert "group f1 (3 copies)" in text
        assert "canonical: a.md #0 [0:10] Q" in text
        assert "redundant: c.md #3 [300:308] Q" in text
        assert text.endswith("2 redundant sections (20 bytes) across 4 sections\n")

    def test_untitled_section(self) -> None:
        group = DuplicateGroup(
            key="x", fingerprint="f", members=(_ref("a.md", 0, 0, ""), _ref("b.md", 1, 0, "")),
        )
        assert "(untitled)" in render_text(build_report([group]))

    def test_failures_listed(self) -> None:
        failure = DocumentFailure(identifier="e.md", order=0, reason="document is empty")
        text = render_text(build_report([], failures=[failure]))
        assert "failed: e.md: document is empty" in text
