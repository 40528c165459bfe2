"""
exporters/seed_bundle.py — Build store -> portable seed bundle of SQL files.

The bundle seeds a deployed store from the build store:

  00_schema.sql            CREATE ... IF NOT EXISTS for every table and index
  states_00000.sql         INSERT OR IGNORE INTO states (...) VALUES ...;
  msas_00000.sql, msas_00001.sql, ...
  msa_history_00000.sql, ...
  state_history_00000.sql, ...

Each insert file batches at most chunk_size rows (default 500) to stay under
payload limits of the deployment target. INSERT OR IGNORE makes reapplying
the bundle a no-op on an already seeded store.

Usage:
    from plaincost_pipeline.exporters.seed_bundle import export_seed_bundle, apply_seed_bundle

    result = export_seed_bundle(cfg.db_path, cfg.seed_dir, chunk_size=500)
    apply_seed_bundle(deployed_conn, cfg.seed_dir)
"""

from __future__ import annotations

import math
import shutil
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import duckdb
import structlog

from plaincost_shared.db import connect_store
from plaincost_shared.schema import EXPORT_TABLES, PRIMARY_KEYS, SCHEMA_SQL, TABLE_COLUMNS

log = structlog.get_logger(__name__)

CHUNK_SIZE = 500
SCHEMA_FILE = "00_schema.sql"


@dataclass
class ExportResult:
    """Summary of one bundle export."""

    seed_dir: Path
    rows_by_table: dict[str, int] = field(default_factory=dict)
    files_by_table: dict[str, list[str]] = field(default_factory=dict)
    duration_ms: int = 0

    @property
    def total_files(self) -> int:
        # +1 for the schema file
        return 1 + sum(len(files) for files in self.files_by_table.values())


# ---------------------------------------------------------------------------
# Literal serialization
# ---------------------------------------------------------------------------


def sql_literal(value: Any) -> str:
    """
    Render a Python value as a SQL literal valid in both DuckDB and SQLite.

    Strings are single-quoted with embedded quotes doubled; neither dialect
    treats backslash as an escape in a standard string literal.

    Raises:
        ValueError: a string contains a NUL character.
        TypeError:  the value has no literal form.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value) if math.isfinite(value) else "NULL"
    if isinstance(value, str):
        if "\x00" in value:
            raise ValueError("NUL character in text value")
        return "'" + value.replace("'", "''") + "'"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "X'" + bytes(value).hex().upper() + "'"
    raise TypeError(f"No SQL literal for {type(value).__name__}")


def insert_statement(table: str, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    values = ",\n".join("(" + ",".join(sql_literal(v) for v in row) + ")" for row in rows)
    return f"INSERT OR IGNORE INTO {table} ({','.join(columns)}) VALUES\n{values};\n"


def chunked(rows: Sequence[Any], size: int) -> list[Sequence[Any]]:
    if size < 1:
        raise ValueError("chunk size must be >= 1")
    return [rows[i : i + size] for i in range(0, len(rows), size)]


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def _reset_dir(seed_dir: Path) -> None:
    if seed_dir.exists():
        log.info("removing_existing_seed_dir", path=str(seed_dir))
        shutil.rmtree(seed_dir)
    seed_dir.mkdir(parents=True)


def export_table(
    conn: duckdb.DuckDBPyConnection,
    table: str,
    seed_dir: Path,
    *,
    chunk_size: int = CHUNK_SIZE,
) -> tuple[int, list[str]]:
    """
    Write one table as {table}_{NNNNN}.sql chunk files.

    Returns:
        (row count, file names written)
    """
    columns = TABLE_COLUMNS[table]
    rows = conn.execute(
        f"SELECT {', '.join(columns)} FROM {table} ORDER BY {', '.join(PRIMARY_KEYS[table])}"
    ).fetchall()

    files: list[str] = []
    for index, chunk in enumerate(chunked(rows, chunk_size)):
        file_name = f"{table}_{index:05d}.sql"
        (seed_dir / file_name).write_text(
            insert_statement(table, columns, chunk), encoding="utf-8"
        )
        files.append(file_name)

    log.info("table_exported", table=table, rows=len(rows), files=len(files))
    return len(rows), files


def export_seed_bundle(
    db_path: Path,
    seed_dir: Path,
    *,
    chunk_size: int = CHUNK_SIZE,
) -> ExportResult:
    """
    Export the build store as a seed bundle, replacing seed_dir entirely.

    Raises:
        FileNotFoundError: db_path does not exist (checked before seed_dir
                           is touched).
    """
    t0 = time.monotonic()
    conn = connect_store(db_path, read_only=True)
    try:
        _reset_dir(seed_dir)
        (seed_dir / SCHEMA_FILE).write_text(SCHEMA_SQL.lstrip(), encoding="utf-8")
        log.info("schema_exported", path=str(seed_dir / SCHEMA_FILE))

        result = ExportResult(seed_dir=seed_dir)
        for table in EXPORT_TABLES:
            rows, files = export_table(conn, table, seed_dir, chunk_size=chunk_size)
            result.rows_by_table[table] = rows
            result.files_by_table[table] = files
    finally:
        conn.close()

    result.duration_ms = int((time.monotonic() - t0) * 1000)
    log.info(
        "export_complete",
        total_files=result.total_files,
        seed_dir=str(seed_dir),
        duration_ms=result.duration_ms,
    )
    return result


# ---------------------------------------------------------------------------
# Apply
# ---------------------------------------------------------------------------


def bundle_files(seed_dir: Path) -> list[Path]:
    """Schema first, then insert chunks in table export order."""
    schema = seed_dir / SCHEMA_FILE
    if not schema.is_file():
        raise FileNotFoundError(f"Seed bundle schema not found: {schema}")
    chunks: list[Path] = []
    for table in EXPORT_TABLES:
        chunks.extend(sorted(seed_dir.glob(f"{table}_[0-9][0-9][0-9][0-9][0-9].sql")))
    return [schema, *chunks]


def apply_seed_bundle(conn: duckdb.DuckDBPyConnection, seed_dir: Path) -> int:
    """
    Execute a seed bundle against a target store.

    Safe to repeat: the schema uses IF NOT EXISTS and every insert ignores
    rows whose key already exists.

    Returns:
        Number of files applied.
    """
    files = bundle_files(seed_dir)
    for path in files:
        conn.execute(path.read_text(encoding="utf-8"))
        log.debug("bundle_file_applied", file=path.name)
    log.info("bundle_applied", files=len(files), seed_dir=str(seed_dir))
    return len(files)
