#!/usr/bin/env python3
"""Report duplicated sections across markdown / text documents.

Usage:
    python3 scripts/dedup_report.py docs/ README.md --glob "*.md"

    # Near-duplicate merging and a DuckDB copy of the report:
    python3 scripts/dedup_report.py docs/ --near-duplicate-threshold 0.8 \
      --duckdb out/dedup.duckdb

Structured JSON output goes to stdout; human messages go to stderr.
Exit codes: 0 no duplicates, 1 duplicates found, 2 usage/config error.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from docdedup.config import DetectorConfig, load_config
from docdedup.detector import DuplicateContentDetector
from docdedup.errors import ConfigError
from docdedup.io_utils import dumps_json, save_json, save_jsonl
from docdedup.loader import load_documents
from docdedup.report_store import write_report_duckdb
from docdedup.reporter import build_report, render_text

log = logging.getLogger("dedup_report")

EXIT_CLEAN = 0
EXIT_DUPLICATES = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find duplicated sections across documents."
    )
    parser.add_argument("paths", nargs="+", type=Path, help="Files or directories to scan")
    parser.add_argument("--glob", default=None, help="Pattern for files inside directories (default *.md)")
    parser.add_argument("--config", type=Path, default=None, help="JSON config file")
    parser.add_argument("--workers", type=int, default=None, help="Segmentation worker threads")
    parser.add_argument(
        "--near-duplicate-threshold",
        type=float,
        default=None,
        help="Merge groups whose shingle Jaccard similarity is at least this value",
    )
    parser.add_argument("--shingle-size", type=int, default=None, help="Shingle width in words")
    parser.add_argument("--encoding", default=None, help="Text encoding of input files")
    parser.add_argument(
        "--all-groups",
        action="store_true",
        default=None,
        help="Report singleton groups too",
    )
    parser.add_argument(
        "--format",
        choices=("json", "jsonl", "text"),
        default="json",
        help="Output format (jsonl writes one group per line)",
    )
    parser.add_argument("--output", type=Path, default=None, help="Write the report here instead of stdout")
    parser.add_argument("--duckdb", type=Path, default=None, help="Also export the report to this DuckDB file")
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")
    return parser


def resolve_config(args: argparse.Namespace) -> DetectorConfig:
    base = load_config(args.config) if args.config is not None else DetectorConfig()
    return base.merged(
        workers=args.workers,
        near_duplicate_threshold=args.near_duplicate_threshold,
        shingle_size=args.shingle_size,
        include_singletons=args.all_groups,
        glob=args.glob,
        encoding=args.encoding,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    try:
        config = resolve_config(args)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    loaded = load_documents(args.paths, glob=config.glob, encoding=config.encoding)
    detector = DuplicateContentDetector(config)
    result = detector.scan(loaded.documents)
    report = build_report(
        result.groups,
        failures=(*loaded.failures, *result.failures),
        include_singletons=config.include_singletons,
    )

    if args.format == "text":
        payload = render_text(report).encode("utf-8")
    elif args.format == "jsonl":
        payload = b"".join(dumps_json(e.to_dict(), pretty=False) + b"\n" for e in report.entries)
    else:
        payload = dumps_json(report.to_dict()) + b"\n"

    if args.output is not None:
        if args.format == "jsonl":
            save_jsonl([e.to_dict() for e in report.entries], args.output)
        elif args.format == "json":
            save_json(report.to_dict(), args.output)
        else:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_bytes(payload)
        print(f"Wrote report to {args.output}", file=sys.stderr)
    else:
        sys.stdout.buffer.write(payload)
        sys.stdout.buffer.flush()

    if args.duckdb is not None:
        counts = write_report_duckdb(report, args.duckdb)
        log.info("Exported %d groups to %s", counts["duplicate_groups"], args.duckdb)

    summary = report.summary()
    print(
        f"{summary['duplicate_groups']} duplicate groups, "
        f"{summary['redundant_sections']} redundant sections, "
        f"{summary['failed_documents']} failed documents",
        file=sys.stderr,
    )
    return EXIT_DUPLICATES if report.has_duplicates else EXIT_CLEAN


if __name__ == "__main__":
    sys.exit(main())
