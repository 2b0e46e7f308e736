"""File loading for the CLI: paths and directories -> (identifier, text) pairs."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from docdedup.errors import ConfigError, MalformedInputError
from docdedup.types import DocumentFailure

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoadResult:
    documents: tuple[tuple[str, str], ...]
    failures: tuple[DocumentFailure, ...] = field(default_factory=tuple)


def expand_paths(paths: Iterable[Path], *, glob: str = "*.md") -> Iterator[Path]:
    """Yield files in caller order; directories expand recursively, sorted.

    Paths that do not exist are yielded as-is so the read reports them.
    A file reached twice is yielded once, at its first position.
    """
    seen: set[Path] = set()
    for path in paths:
        candidates = (
            sorted(p for p in path.rglob(glob) if p.is_file())
            if path.is_dir()
            else [path]
        )
        for candidate in candidates:
            resolved = candidate.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            yield candidate


def read_document(path: Path, *, encoding: str = "utf-8") -> str:
    """Read one document, mapping read/decode problems to MalformedInputError.

    Line endings are kept as stored so section offsets match the file bytes.
    """
    try:
        return path.read_bytes().decode(encoding)
    except LookupError as exc:
        raise ConfigError(f"Unknown encoding: {encoding!r}") from exc
    except UnicodeDecodeError as exc:
        raise MalformedInputError(str(path), f"cannot decode as {encoding}: {exc.reason}") from exc
    except OSError as exc:
        raise MalformedInputError(str(path), f"unreadable: {exc.strerror or exc}") from exc


def load_documents(
    paths: Iterable[Path],
    *,
    glob: str = "*.md",
    encoding: str = "utf-8",
) -> LoadResult:
    """Read every document under ``paths``, collecting per-file failures."""
    documents: list[tuple[str, str]] = []
    failures: list[DocumentFailure] = []
    for order, path in enumerate(expand_paths(paths, glob=glob)):
        try:
            text = read_document(path, encoding=encoding)
        except MalformedInputError as exc:
            log.warning("Cannot load %s: %s", path, exc.reason)
            failures.append(DocumentFailure(identifier=str(path), order=order, reason=exc.reason))
            continue
        documents.append((str(path), text))
    log.debug("Loaded %d documents (%d unreadable)", len(documents), len(failures))
    return LoadResult(documents=tuple(documents), failures=tuple(failures))
