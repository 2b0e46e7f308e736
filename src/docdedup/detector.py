"""Duplicate-content detection pipeline.

Segment -> Normalize -> Group -> Report, as a single batch pass.

Documents are segmented independently (optionally in a thread pool);
grouping always runs on the calling thread in caller order, so results
do not depend on the worker count.
"""
from __future__ import annotations

import concurrent.futures
import logging
import time
from collections.abc import Iterable

from docdedup.config import DetectorConfig
from docdedup.errors import MalformedInputError
from docdedup.grouping import build_groups, merge_near_duplicates
from docdedup.reporter import DuplicateReport, report_from_scan
from docdedup.segmenter import segment_document
from docdedup.types import Document, DocumentFailure, ScanResult

log = logging.getLogger(__name__)


def load_document(identifier: str, text: str, *, order: int) -> Document:
    """Segment one document. Raises MalformedInputError for empty input."""
    sections = segment_document(identifier, text)
    return Document(
        identifier=identifier,
        order=order,
        sections=sections,
        byte_length=len(text.encode("utf-8")),
    )


class DuplicateContentDetector:
    """Finds exact (and optionally near) duplicate sections across documents."""

    def __init__(self, config: DetectorConfig | None = None) -> None:
        self.config = config or DetectorConfig()

    def _segment_one(self, order: int, identifier: str, text: str) -> Document | DocumentFailure:
        try:
            return load_document(identifier, text, order=order)
        except MalformedInputError as exc:
            return DocumentFailure(identifier=identifier, order=order, reason=exc.reason)

    def _segment_all(
        self, inputs: list[tuple[str, str]],
    ) -> list[Document | DocumentFailure]:
        if self.config.workers <= 1 or len(inputs) <= 1:
            return [
                self._segment_one(order, identifier, text)
                for order, (identifier, text) in enumerate(inputs)
            ]
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.config.workers) as ex:
            futures = [
                ex.submit(self._segment_one, order, identifier, text)
                for order, (identifier, text) in enumerate(inputs)
            ]
            # Collected in submission order, not completion order
            return [fut.result() for fut in futures]

    def scan(self, documents: Iterable[tuple[str, str]]) -> ScanResult:
        """Segment and group ``documents`` given as (identifier, text) pairs.

        A document that raises MalformedInputError is recorded as a
        DocumentFailure; the rest of the batch is still processed.
        """
        t0 = time.perf_counter()
        inputs = list(documents)
        outcomes = self._segment_all(inputs)

        docs: list[Document] = []
        failures: list[DocumentFailure] = []
        for outcome in outcomes:
            if isinstance(outcome, DocumentFailure):
                log.warning("Skipping %s: %s", outcome.identifier, outcome.reason)
                failures.append(outcome)
            else:
                log.debug(
                    "Segmented %s into %d sections",
                    outcome.identifier, len(outcome.sections),
                )
                docs.append(outcome)

        groups = build_groups(docs)
        threshold = self.config.near_duplicate_threshold
        if threshold is not None:
            exact_count = len(groups)
            groups = merge_near_duplicates(
                groups,
                threshold=threshold,
                shingle_size=self.config.shingle_size,
            )
            log.debug(
                "Near-duplicate merge (threshold=%.2f): %d -> %d groups",
                threshold, exact_count, len(groups),
            )

        result = ScanResult(
            documents=tuple(docs),
            groups=groups,
            failures=tuple(failures),
        )
        log.info(
            "Scanned %d documents (%d failed), %d sections, %d groups in %.2fs",
            len(inputs), len(failures), result.section_count, len(groups),
            time.perf_counter() - t0,
        )
        return result

    def report(self, documents: Iterable[tuple[str, str]]) -> DuplicateReport:
        """Scan ``documents`` and build the duplicate report."""
        return report_from_scan(
            self.scan(documents),
            include_singletons=self.config.include_singletons,
        )
