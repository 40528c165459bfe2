"""
db.py — DuckDB connection helpers.

The pipeline opens the build store read-write and the exporter opens it
read-only. The API holds one read-only connection to the deployed store per
process and hands each request its own cursor.

Usage:
    from plaincost_shared.db import connect_store, fetch_dicts, get_deployed_connection

    conn = connect_store(cfg.db_path)                   # build store, read-write
    conn = connect_store(cfg.db_path, read_only=True)   # exporter
    api_conn = get_deployed_connection()                # API singleton
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Optional, Sequence

import duckdb
import structlog

from plaincost_shared.config import settings
from plaincost_shared.schema import SCHEMA_SQL

logger = structlog.get_logger(__name__)


def connect_store(
    path: str | Path,
    *,
    read_only: bool = False,
) -> duckdb.DuckDBPyConnection:
    """
    Open a DuckDB store file.

    Read-only opens require the file to exist; read-write opens create the
    parent directory if needed.

    Raises:
        FileNotFoundError: read_only=True and the store does not exist.
    """
    db_path = Path(path)
    if read_only:
        if not db_path.is_file():
            raise FileNotFoundError(f"Database not found: {db_path}")
    else:
        db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = duckdb.connect(str(db_path), read_only=read_only)
    logger.debug("duckdb_connected", path=str(db_path), read_only=read_only)
    return conn


def remove_store(path: str | Path) -> bool:
    """Delete a store file and its write-ahead log. Returns True if one existed."""
    db_path = Path(path)
    existed = db_path.exists()
    for candidate in (db_path, db_path.with_name(db_path.name + ".wal")):
        candidate.unlink(missing_ok=True)
    return existed


def create_schema(conn: duckdb.DuckDBPyConnection) -> None:
    conn.execute(SCHEMA_SQL)


def fetch_dicts(
    conn: duckdb.DuckDBPyConnection,
    sql: str,
    params: Sequence[Any] | None = None,
) -> list[dict[str, Any]]:
    """Run a query and return rows as column-name dicts."""
    cursor = conn.execute(sql, list(params)) if params else conn.execute(sql)
    columns = [col[0] for col in cursor.description]
    return [dict(zip(columns, row)) for row in cursor.fetchall()]


def fetch_one(
    conn: duckdb.DuckDBPyConnection,
    sql: str,
    params: Sequence[Any] | None = None,
) -> dict[str, Any] | None:
    rows = fetch_dicts(conn, sql, params)
    return rows[0] if rows else None


# ---------------------------------------------------------------------------
# Deployed store: single read-only connection per API process
# ---------------------------------------------------------------------------
_deployed_lock = threading.Lock()
_deployed_conn: Optional[duckdb.DuckDBPyConnection] = None


def get_deployed_connection() -> duckdb.DuckDBPyConnection:
    """
    Return a singleton read-only connection to the deployed store.

    The file path is read from settings.deployed_db_path.
    """
    global _deployed_conn

    with _deployed_lock:
        if _deployed_conn is None:
            _deployed_conn = connect_store(settings.deployed_db_path, read_only=True)
            logger.info("deployed_store_opened", path=str(settings.deployed_db_path))
        return _deployed_conn


def reset_deployed_connection() -> None:
    """Close and forget the deployed-store singleton (useful in tests)."""
    global _deployed_conn
    with _deployed_lock:
        if _deployed_conn is not None:
            _deployed_conn.close()
            _deployed_conn = None
