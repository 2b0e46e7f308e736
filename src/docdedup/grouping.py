"""Group sections into duplicate groups by normalized key.

Exact grouping is a single pass over documents in caller order with a
key -> members map. The first section seen with a key is canonical; ties
are broken by traversal order only.

Near-duplicate merging is an optional second pass over the exact groups
(word-shingle Jaccard, quadratic in the number of groups).
"""
from __future__ import annotations

import logging
from collections.abc import Iterable

from docdedup.normalizer import fingerprint, normalize_section
from docdedup.similarity import jaccard, shingles
from docdedup.types import Document, DuplicateGroup, SectionRef

log = logging.getLogger(__name__)


class GroupBuilder:
    """Accumulates documents in traversal order and emits duplicate groups.

    Not thread-safe: the key map is the only shared mutable state in the
    pipeline, so callers feed documents from one thread.
    """

    def __init__(self) -> None:
        self._members: dict[str, list[SectionRef]] = {}

    def add_document(self, document: Document) -> None:
        for section in document.sections:
            ref = SectionRef.of(document, section)
            key = normalize_section(section).key
            self._members.setdefault(key, []).append(ref)

    def build(self) -> tuple[DuplicateGroup, ...]:
        # dict preserves insertion order, i.e. order of first appearance
        return tuple(
            DuplicateGroup(key=key, fingerprint=fingerprint(key), members=tuple(refs))
            for key, refs in self._members.items()
        )


def build_groups(documents: Iterable[Document]) -> tuple[DuplicateGroup, ...]:
    """Group every section of ``documents`` (already in traversal order)."""
    builder = GroupBuilder()
    for document in documents:
        builder.add_document(document)
    groups = builder.build()
    log.debug("Built %d groups", len(groups))
    return groups


def merge_near_duplicates(
    groups: Iterable[DuplicateGroup],
    *,
    threshold: float,
    shingle_size: int = 5,
) -> tuple[DuplicateGroup, ...]:
    """Fold groups whose keys are near-duplicates into the earliest match.

    Each group is compared against the keys of earlier surviving groups;
    it joins the first one whose shingle Jaccard similarity is at least
    ``threshold``. Groups with an empty key never merge.

    Args:
        groups: Exact groups in order of first appearance.
        threshold: Similarity in (0, 1] required to merge.
        shingle_size: Shingle width in words.

    Returns:
        Merged groups, still in order of first appearance, members sorted
        by (document order, section index).
    """
    if not 0.0 < threshold <= 1.0:
        raise ValueError(f"Near-duplicate threshold must be in (0, 1], got {threshold}")

    roots: list[DuplicateGroup] = []
    root_shingles: list[frozenset[tuple[str, ...]]] = []
    merged: list[list[SectionRef]] = []

    for group in groups:
        sh = shingles(group.key, shingle_size)
        target = None
        if sh:
            for idx, other in enumerate(root_shingles):
                if jaccard(sh, other) >= threshold:
                    target = idx
                    break
        if target is None:
            roots.append(group)
            root_shingles.append(sh)
            merged.append(list(group.members))
        else:
            log.debug(
                "Merging group %s into near-duplicate %s",
                group.fingerprint, roots[target].fingerprint,
            )
            merged[target].extend(group.members)

    return tuple(
        DuplicateGroup(
            key=root.key,
            fingerprint=root.fingerprint,
            members=tuple(sorted(members, key=lambda r: r.position)),
        )
        for root, members in zip(roots, merged)
    )
