"""Tests for docdedup.loader."""
from __future__ import annotations

from pathlib import Path

import pytest

from docdedup.detector import DuplicateContentDetector
from docdedup.errors import ConfigError, MalformedInputError
from docdedup.loader import expand_paths, load_documents, read_document


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestExpandPaths:
    def test_explicit_files_keep_caller_order(self, tmp_path: Path) -> None:
        b = _write(tmp_path / "b.md", "# B\n")
        a = _write(tmp_path / "a.md", "# A\n")
        assert list(expand_paths([b, a])) == [b, a]

    def test_directory_sorted_and_recursive(self, tmp_path: Path) -> None:
        _write(tmp_path / "docs" / "z.md", "# Z\n")
        _write(tmp_path / "docs" / "sub" / "a.md", "# A\n")
        _write(tmp_path / "docs" / "skip.txt", "x")
        found = list(expand_paths([tmp_path / "docs"]))
        assert found == sorted(found)
        assert {p.name for p in found} == {"z.md", "a.md"}

    def test_custom_glob(self, tmp_path: Path) -> None:
        _write(tmp_path / "d" / "x.txt", "x")
        _write(tmp_path / "d" / "y.md", "y")
        assert [p.name for p in expand_paths([tmp_path / "d"], glob="*.txt")] == ["x.txt"]

    def test_duplicate_paths_yielded_once(self, tmp_path: Path) -> None:
        a = _write(tmp_path / "a.md", "# A\n")
        assert list(expand_paths([a, tmp_path, a])) == [a]


class TestReadDocument:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(MalformedInputError, match="unreadable"):
            read_document(tmp_path / "nope.md")

    def test_undecodable(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.md"
        path.write_bytes(b"\xff\xfe\xfa not utf8")
        with pytest.raises(MalformedInputError, match="cannot decode"):
            read_document(path)


class TestLoadDocuments:
    def test_collects_failures(self, tmp_path: Path) -> None:
        good = _write(tmp_path / "good.md", "# Q\nA\n")
        result = load_documents([good, tmp_path / "missing.md"])
        assert result.documents == ((str(good), "# Q\nA\n"),)
        assert [f.identifier for f in result.failures] == [str(tmp_path / "missing.md")]
        assert result.failures[0].order == 1

    def test_crlf_offsets_point_at_file_bytes(self, tmp_path: Path) -> None:
        raw = b"# A\r\nbody\r\n# B\r\nx\r\n"
        path = tmp_path / "crlf.md"
        path.write_bytes(raw)
        loaded = load_documents([path])
        result = DuplicateContentDetector().scan(loaded.documents)
        sections = result.documents[0].sections
        assert [raw[s.byte_start:s.byte_end] for s in sections] == [
            b"# A\r\nbody\r\n",
            b"# B\r\nx\r\n",
        ]
        assert sections[-1].byte_end == len(raw)


class TestReadDocumentLineEndings:
    def test_line_endings_preserved(self, tmp_path: Path) -> None:
        path = tmp_path / "mixed.md"
        path.write_bytes(b"# A\r\nb\rc\n")
        assert read_document(path) == "# A\r\nb\rc\n"

    def test_unknown_encoding(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "a.md", "# A\n")
        with pytest.raises(ConfigError, match="Unknown encoding"):
            read_document(path, encoding="bogus")
