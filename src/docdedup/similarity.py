"""Reusable text-similarity primitives for near-duplicate detection.

Pure text operations with zero domain dependencies. Inputs are
normalized keys (see docdedup.normalizer), so tokenization is a plain
whitespace split.
"""
from __future__ import annotations


def shingles(key: str, k: int = 5) -> frozenset[tuple[str, ...]]:
    """Word k-shingles of a normalized key.

    Keys shorter than ``k`` words yield a single shingle holding every
    word, so short sections still compare on their full content.

    Args:
        key: Normalized text.
        k: Shingle width in words. Must be >= 1.

    Returns:
        Frozen set of word tuples. Empty for an empty key.
    """
    if k < 1:
        raise ValueError(f"Shingle size must be >= 1, got {k}")
    tokens = key.split()
    if not tokens:
        return frozenset()
    if len(tokens) < k:
        return frozenset({tuple(tokens)})
    return frozenset(tuple(tokens[i:i + k]) for i in range(len(tokens) - k + 1))


def jaccard(a: frozenset[tuple[str, ...]], b: frozenset[tuple[str, ...]]) -> float:
    """Jaccard similarity of two shingle sets. Empty sets never match."""
    if not a or not b:
        return 0.0
    inter = len(a & b)
    union = len(a | b)
    return inter / union if union else 0.0
