"""
pipelines/rpp.py — Regional Price Parity pipeline stages.

Stages (each runs to completion and owns its store exclusively):
  1. fetch()  BEA API -> raw/msa_rpp.json, raw/state_rpp.json
  2. build()  raw JSON -> fresh DuckDB build store (two-phase load)
  3. export() build store -> seed bundle
  4. seed()   seed bundle -> deployed store read by the API

Every stage takes an explicit Settings so tests and parallel runs can point
at their own directories.

Usage:
    from plaincost_shared.config import Settings
    from plaincost_pipeline.pipelines import rpp

    cfg = Settings()
    summary = asyncio.run(rpp.fetch(cfg))
    result = rpp.build(cfg)
    rpp.export(cfg)
"""

from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from plaincost_shared.config import Settings
from plaincost_shared.constants import BEA_TABLES
from plaincost_shared.db import connect_store, create_schema, remove_store
from plaincost_pipeline.exporters.seed_bundle import (
    ExportResult,
    apply_seed_bundle,
    export_seed_bundle,
)
from plaincost_pipeline.loaders.duckdb_loader import DuckDBLoader, PhaseResult
from plaincost_pipeline.sources.base import RawRecords
from plaincost_pipeline.sources.bea import BEARegionalSource
from plaincost_pipeline.transforms.normalize import (
    ParseStats,
    normalize_msas,
    normalize_states,
    read_raw_artifact,
)

log = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Fetch
# ---------------------------------------------------------------------------


@dataclass
class FetchSummary:
    geographies: dict[str, int] = field(default_factory=dict)
    years: dict[str, list[int]] = field(default_factory=dict)
    artifacts: dict[str, Path] = field(default_factory=dict)
    empty_categories: list[tuple[str, str]] = field(default_factory=list)


def write_raw_artifact(path: Path, records: RawRecords) -> None:
    """Write via a temp file and rename, so a failed write never leaves a torn artifact."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(json.dumps(records, indent=2), encoding="utf-8")
    os.replace(tmp, path)


def _summarize(records: RawRecords) -> tuple[int, list[int]]:
    geos: set[str] = set()
    years: set[int] = set()
    for rows in records.values():
        for r in rows:
            if not isinstance(r, dict):
                continue
            if r.get("GeoFips"):
                geos.add(str(r["GeoFips"]))
            period = str(r.get("TimePeriod", ""))[:4]
            if period.isdigit():
                years.add(int(period))
    return len(geos), sorted(years)


async def fetch(config: Settings) -> FetchSummary:
    """
    Fetch both geography classes and persist one artifact per class.

    Each artifact is written only after all of its categories were fetched.
    If the state class fails, an already written metro artifact stays.

    Raises:
        httpx.HTTPStatusError: a non-2xx response from BEA.
    """
    source = BEARegionalSource(config)
    summary = FetchSummary()

    for geo_class in BEA_TABLES:
        records = await source.run(geo_class=geo_class)
        path = config.raw_path(geo_class)
        write_raw_artifact(path, records)
        geo_count, years = _summarize(records)
        summary.artifacts[geo_class] = path
        summary.geographies[geo_class] = geo_count
        summary.years[geo_class] = years
        log.info(
            "raw_artifact_saved",
            geo_class=geo_class,
            path=str(path),
            geographies=geo_count,
            years=years,
        )

    summary.empty_categories = list(source.empty_categories)
    if summary.empty_categories:
        log.warning("empty_categories", categories=summary.empty_categories)
    return summary


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------


@dataclass
class BuildResult:
    msas: PhaseResult
    states: PhaseResult
    msa_stats: ParseStats
    state_stats: ParseStats
    avg_rpp_all: float | None = None
    duration_ms: int = 0


def build(config: Settings) -> BuildResult:
    """
    Rebuild the build store from the raw artifacts.

    Both artifacts are read and validated before the old store is removed,
    so a missing or malformed artifact leaves any previous store untouched.

    Raises:
        FileNotFoundError: a raw artifact is missing.
        RawArtifactError:  a raw artifact is not valid JSON of the right shape.
    """
    t0 = time.monotonic()
    msa_raw = read_raw_artifact(config.raw_path("msa"))
    state_raw = read_raw_artifact(config.raw_path("state"))

    msas = normalize_msas(msa_raw)
    states = normalize_states(state_raw)

    if remove_store(config.db_path):
        log.info("removed_existing_database", path=str(config.db_path))

    conn = connect_store(config.db_path)
    try:
        create_schema(conn)
        loader = DuckDBLoader(conn)
        msa_phase = loader.load_msas(msas)
        state_phase = loader.load_states(states, msa_phase)
        avg = conn.execute("SELECT AVG(rpp_all) FROM msas").fetchone()[0]
    finally:
        conn.close()

    result = BuildResult(
        msas=msa_phase,
        states=state_phase,
        msa_stats=msas.stats,
        state_stats=states.stats,
        avg_rpp_all=round(avg, 1) if avg is not None else None,
        duration_ms=int((time.monotonic() - t0) * 1000),
    )
    log.info(
        "build_complete",
        msas=msa_phase.snapshot_rows,
        msa_history_rows=msa_phase.history_rows,
        states=state_phase.snapshot_rows,
        state_history_rows=state_phase.history_rows,
        avg_rpp_all=result.avg_rpp_all,
        database=str(config.db_path),
        duration_ms=result.duration_ms,
    )
    return result


# ---------------------------------------------------------------------------
# Export / seed
# ---------------------------------------------------------------------------


def export(config: Settings) -> ExportResult:
    """Write the seed bundle for config.db_path into config.seed_dir."""
    return export_seed_bundle(
        config.db_path, config.seed_dir, chunk_size=config.export_chunk_size
    )


def seed(config: Settings, *, fresh: bool = False) -> dict[str, Any]:
    """
    Apply the seed bundle to the deployed store.

    Args:
        fresh: Remove the deployed store first instead of layering the
               bundle over existing rows.

    Returns:
        Row counts per table in the deployed store.
    """
    if fresh and remove_store(config.deployed_db_path):
        log.info("removed_existing_deployed_store", path=str(config.deployed_db_path))

    conn = connect_store(config.deployed_db_path)
    try:
        files = apply_seed_bundle(conn, config.seed_dir)
        counts = {
            table: int(conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0])
            for table in ("msas", "msa_history", "states", "state_history")
        }
    finally:
        conn.close()

    log.info("seed_complete", files=files, **counts)
    return counts
