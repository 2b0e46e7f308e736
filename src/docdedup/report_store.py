"""DuckDB export of a duplicate report for ad-hoc SQL.

Tables:
    duplicate_groups   - one row per reported group
    group_members      - every member of every group (rank 0 = canonical)
    document_failures  - documents that could not be segmented
    _schema_version    - schema version tracking
"""
from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any

from docdedup.reporter import DuplicateReport

# Dynamic DuckDB import for pyright compatibility
_duckdb_mod = importlib.import_module("duckdb")

SCHEMA_VERSION = "1.0"

_DDL: tuple[str, ...] = (
    """
    CREATE OR REPLACE TABLE _schema_version (
        table_name VARCHAR PRIMARY KEY,
        version VARCHAR NOT NULL,
        created_at TIMESTAMP
    )
    """,
    """
    CREATE OR REPLACE TABLE duplicate_groups (
        fingerprint VARCHAR PRIMARY KEY,
        canonical_document VARCHAR NOT NULL,
        canonical_section_index INTEGER NOT NULL,
        canonical_heading VARCHAR,
        copies INTEGER NOT NULL,
        redundant_bytes BIGINT NOT NULL
    )
    """,
    """
    CREATE OR REPLACE TABLE group_members (
        fingerprint VARCHAR NOT NULL,
        member_rank INTEGER NOT NULL,
        document VARCHAR NOT NULL,
        section_index INTEGER NOT NULL,
        heading VARCHAR,
        byte_start BIGINT NOT NULL,
        byte_end BIGINT NOT NULL
    )
    """,
    """
    CREATE OR REPLACE TABLE document_failures (
        document VARCHAR NOT NULL,
        reason VARCHAR NOT NULL
    )
    """,
)


def write_report_duckdb(report: DuplicateReport, db_path: Path) -> dict[str, int]:
    """Write ``report`` into ``db_path``, replacing earlier report tables.

    Returns row counts per table written.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    group_rows: list[tuple[Any, ...]] = []
    member_rows: list[tuple[Any, ...]] = []
    for entry in report.entries:
        c = entry.canonical
        group_rows.append((
            entry.fingerprint, c.document, c.section_index, c.heading,
            1 + len(entry.redundant), entry.redundant_bytes,
        ))
        for rank, ref in enumerate((c, *entry.redundant)):
            member_rows.append((
                entry.fingerprint, rank, ref.document, ref.section_index,
                ref.heading, ref.byte_start, ref.byte_end,
            ))
    failure_rows = [(f.identifier, f.reason) for f in report.failures]

    conn = _duckdb_mod.connect(str(db_path))
    try:
        for ddl in _DDL:
            conn.execute(ddl)
        conn.execute(
            "INSERT INTO _schema_version VALUES ('report', ?, current_timestamp)",
            [SCHEMA_VERSION],
        )
        if group_rows:
            conn.executemany(
                "INSERT INTO duplicate_groups VALUES (?, ?, ?, ?, ?, ?)", group_rows,
            )
        if member_rows:
            conn.executemany(
                "INSERT INTO group_members VALUES (?, ?, ?, ?, ?, ?, ?)", member_rows,
            )
        if failure_rows:
            conn.executemany("INSERT INTO document_failures VALUES (?, ?)", failure_rows)
    finally:
        conn.close()
    return {
        "duplicate_groups": len(group_rows),
        "group_members": len(member_rows),
        "document_failures": len(failure_rows),
    }
