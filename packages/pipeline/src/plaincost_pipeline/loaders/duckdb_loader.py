"""
loaders/duckdb_loader.py — Transactional two-phase loader for the build store.

The store is loaded in two phases, each in its own transaction:

  Phase 1  load_msas()    — msas + msa_history
  Phase 2  load_states()  — states + state_history, with msa_count read back
                            from the committed msas table

Phase 2 takes Phase 1's PhaseResult and refuses to run unless that phase
committed. A failure inside a phase rolls back every row of that phase, so
a broken run leaves at most one whole class missing.

Snapshot rows go in with a plain INSERT (the store is always fresh). History
rows use INSERT OR IGNORE, so reapplying a history batch never duplicates or
alters an existing (key, year) row.

Usage:
    from plaincost_pipeline.loaders.duckdb_loader import DuckDBLoader

    loader = DuckDBLoader(conn)
    loader.create_schema()
    msa_phase = loader.load_msas(normalized_msas)
    state_phase = loader.load_states(normalized_states, msa_phase)
"""

from __future__ import annotations

import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

import duckdb
import structlog

from plaincost_shared.db import create_schema, fetch_dicts
from plaincost_shared.schema import TABLE_COLUMNS
from plaincost_pipeline.transforms.normalize import NormalizedClass

log = structlog.get_logger(__name__)


class PhaseOrderError(RuntimeError):
    """The state phase was attempted before the metro phase committed."""


@dataclass
class PhaseResult:
    """Outcome of one load phase."""

    table: str
    snapshot_rows: int = 0
    history_rows: int = 0
    committed: bool = False
    duration_ms: int = 0


class DuckDBLoader:
    """Writes normalized RPP rows into a DuckDB store."""

    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    # ------------------------------------------------------------------
    # Schema / transactions
    # ------------------------------------------------------------------

    def create_schema(self) -> None:
        create_schema(self._conn)
        log.info("tables_created")

    @contextmanager
    def transaction(self) -> Iterator[None]:
        self._conn.begin()
        try:
            yield
        except Exception:
            self._conn.rollback()
            raise
        self._conn.commit()

    # ------------------------------------------------------------------
    # Row writers
    # ------------------------------------------------------------------

    @staticmethod
    def _columns(table: str) -> tuple[str, ...]:
        try:
            return TABLE_COLUMNS[table]
        except KeyError:
            raise ValueError(f"Unknown table {table!r}") from None

    def insert_snapshots(self, table: str, rows: Sequence[dict[str, Any]]) -> int:
        """Plain INSERT of snapshot rows; a duplicate key or slug raises."""
        if not rows:
            return 0
        columns = self._columns(table)
        sql = (
            f"INSERT INTO {table} ({', '.join(columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)})"
        )
        self._conn.executemany(sql, [[row.get(col) for col in columns] for row in rows])
        return len(rows)

    def insert_history(self, table: str, rows: Sequence[Sequence[Any]]) -> int:
        """
        INSERT OR IGNORE history rows given in (key, year, rpp_*) order.

        Returns:
            Number of rows actually added.
        """
        if not rows:
            return 0
        columns = self._columns(table)
        before = self.count(table)
        self._conn.executemany(
            f"INSERT OR IGNORE INTO {table} ({', '.join(columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)})",
            [list(row) for row in rows],
        )
        return self.count(table) - before

    def count(self, table: str) -> int:
        self._columns(table)
        return int(self._conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0])

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def load_msas(self, msas: NormalizedClass) -> PhaseResult:
        """Phase 1: metros and their history in one transaction."""
        result = PhaseResult(table="msas")
        t0 = time.monotonic()

        with self.transaction():
            result.snapshot_rows = self.insert_snapshots("msas", msas.snapshots)
            result.history_rows = self.insert_history("msa_history", msas.history_rows())

        result.committed = True
        result.duration_ms = int((time.monotonic() - t0) * 1000)
        log.info(
            "msas_loaded",
            msas=result.snapshot_rows,
            history_rows=result.history_rows,
            duration_ms=result.duration_ms,
        )
        return result

    def msa_counts_by_state(self) -> dict[str, int]:
        rows = fetch_dicts(
            self._conn,
            "SELECT state_abbr, COUNT(*) AS cnt FROM msas "
            "WHERE state_abbr IS NOT NULL GROUP BY state_abbr",
        )
        return {row["state_abbr"]: int(row["cnt"]) for row in rows}

    def load_states(self, states: NormalizedClass, msa_phase: PhaseResult) -> PhaseResult:
        """
        Phase 2: states and their history in one transaction.

        Requires:
            msa_phase is the committed result of load_msas() on this store.

        Raises:
            PhaseOrderError: msa_phase is not a committed msas phase.
        """
        if msa_phase.table != "msas" or not msa_phase.committed:
            raise PhaseOrderError("load_states() requires a committed load_msas() phase")

        result = PhaseResult(table="states")
        t0 = time.monotonic()
        counts = self.msa_counts_by_state()
        rows = [{**row, "msa_count": counts.get(row["abbr"], 0)} for row in states.snapshots]

        with self.transaction():
            result.snapshot_rows = self.insert_snapshots("states", rows)
            result.history_rows = self.insert_history("state_history", states.history_rows())

        result.committed = True
        result.duration_ms = int((time.monotonic() - t0) * 1000)
        log.info(
            "states_loaded",
            states=result.snapshot_rows,
            history_rows=result.history_rows,
            duration_ms=result.duration_ms,
        )
        return result
