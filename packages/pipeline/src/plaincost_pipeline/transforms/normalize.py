"""
transforms/normalize.py — Raw BEA records -> snapshot and history rows.

Each raw artifact maps a category label to a list of BEA records. The
normalizer:
  1. validates every record into a RawObservation (malformed ones are counted
     and skipped; unusable values become None)
  2. builds a long polars frame (key, name, year, category, value)
  3. reshapes it to one row per (key, year) with the four rpp_* columns,
     last record winning per slot
  4. keeps years with a composite (rpp_all) value as history and picks the
     most recent of them as the snapshot year

Entities with no composite year produce no snapshot and no history.

Usage:
    from plaincost_pipeline.transforms.normalize import (
        read_raw_artifact, normalize_msas, normalize_states,
    )

    msas = normalize_msas(read_raw_artifact(cfg.raw_path("msa")))
    msas.snapshots   # list[dict] in first-seen order, slugs assigned
    msas.history     # polars DataFrame keyed by (cbsa, year)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import polars as pl
import structlog
from pydantic import ValidationError

from plaincost_shared.constants import CATEGORIES
from plaincost_shared.geo import (
    SlugRegistry,
    clean_msa_name,
    extract_state_abbr,
    fips_to_state_abbr,
    state_name,
    state_slug,
)
from plaincost_shared.models.rpp import RawObservation

log = structlog.get_logger(__name__)

RPP_COLUMNS: tuple[str, ...] = tuple(f"rpp_{c}" for c in CATEGORIES)

_LONG_SCHEMA: dict[str, Any] = {
    "key": pl.String,
    "name": pl.String,
    "year": pl.Int64,
    "category": pl.String,
    "value": pl.Float64,
}


class RawArtifactError(ValueError):
    """A raw artifact is not valid JSON or not a category -> records object."""


@dataclass
class ParseStats:
    records: int = 0
    malformed: int = 0
    unmapped_geographies: int = 0
    unknown_categories: list[str] = field(default_factory=list)


@dataclass
class NormalizedClass:
    """Output of normalizing one geography class."""

    key_column: str
    snapshots: list[dict[str, Any]]
    history: pl.DataFrame
    stats: ParseStats
    dropped_no_composite: int = 0

    def history_rows(self) -> list[tuple[Any, ...]]:
        return self.history.select([self.key_column, "year", *RPP_COLUMNS]).rows()


# ---------------------------------------------------------------------------
# Raw artifact I/O
# ---------------------------------------------------------------------------


def read_raw_artifact(path: Path) -> dict[str, list[Any]]:
    """
    Load and shape-check a raw artifact file.

    Raises:
        FileNotFoundError: the file does not exist.
        RawArtifactError:  invalid JSON, or not an object of lists.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Raw data not found: {path}. Run the fetch stage first.")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RawArtifactError(f"{path}: invalid JSON ({exc})") from exc

    if not isinstance(payload, dict):
        raise RawArtifactError(f"{path}: expected an object keyed by category")
    for category, records in payload.items():
        if not isinstance(records, list):
            raise RawArtifactError(f"{path}: category {category!r} is not a list")
    return payload


# ---------------------------------------------------------------------------
# Frame building
# ---------------------------------------------------------------------------


def observations_frame(
    raw: dict[str, list[Any]],
    key_fn: Callable[[RawObservation], str | None],
) -> tuple[pl.DataFrame, ParseStats]:
    """
    Validate raw records into the long (key, name, year, category, value) frame.

    key_fn maps an observation to its natural key; returning None drops the
    record as an unmapped geography.
    """
    stats = ParseStats()
    rows: list[dict[str, Any]] = []

    for category, records in raw.items():
        if category not in CATEGORIES:
            stats.unknown_categories.append(category)
            continue
        for record in records:
            stats.records += 1
            if not isinstance(record, dict):
                stats.malformed += 1
                continue
            try:
                obs = RawObservation.model_validate(record)
            except ValidationError:
                stats.malformed += 1
                continue
            key = key_fn(obs)
            if key is None:
                stats.unmapped_geographies += 1
                continue
            rows.append(
                {
                    "key": key,
                    "name": obs.geo_name,
                    "year": obs.year,
                    "category": category,
                    "value": obs.value,
                }
            )

    return pl.DataFrame(rows, schema=_LONG_SCHEMA), stats


def pivot_categories(long: pl.DataFrame) -> pl.DataFrame:
    """One row per (key, year) with rpp_all / rpp_goods / rpp_services / rpp_rents."""
    return long.group_by(["key", "year"], maintain_order=True).agg(
        [
            pl.col("value").filter(pl.col("category") == category).last().alias(f"rpp_{category}")
            for category in CATEGORIES
        ]
    )


def composite_history(wide: pl.DataFrame) -> pl.DataFrame:
    """Keep only years with a composite value, ordered by (key, year)."""
    return wide.filter(pl.col("rpp_all").is_not_null()).sort(["key", "year"])


def latest_observations(history: pl.DataFrame) -> pl.DataFrame:
    """The most recent composite-bearing year per key."""
    return (
        history.sort("year", descending=True)
        .group_by("key", maintain_order=True)
        .first()
    )


def _snapshot_frame(long: pl.DataFrame) -> tuple[pl.DataFrame, pl.DataFrame, int]:
    """Return (snapshots in first-seen key order, history, dropped count)."""
    first_seen = (
        long.group_by("key", maintain_order=True)
        .agg(pl.col("name").first().alias("raw_name"))
        .with_row_index("order")
    )
    history = composite_history(pivot_categories(long))
    snapshots = (
        first_seen.join(latest_observations(history), on="key", how="inner")
        .sort("order")
        .drop("order")
    )
    return snapshots, history, first_seen.height - snapshots.height


def _log_stats(geo_class: str, stats: ParseStats, dropped: int) -> None:
    class_log = log.bind(geo_class=geo_class)
    if stats.malformed:
        class_log.warning("malformed_records_skipped", count=stats.malformed, total=stats.records)
    if stats.unmapped_geographies:
        class_log.warning("unmapped_geographies", count=stats.unmapped_geographies)
    if stats.unknown_categories:
        class_log.warning("unknown_categories_ignored", categories=stats.unknown_categories)
    if dropped:
        class_log.warning("entities_without_composite_dropped", count=dropped)


# ---------------------------------------------------------------------------
# Per-class normalization
# ---------------------------------------------------------------------------


def normalize_msas(raw: dict[str, list[Any]]) -> NormalizedClass:
    """
    Normalize the metro artifact.

    Snapshot rows carry cbsa, cleaned name, unique slug, state_abbr, the four
    rpp_* values and the year they were observed.
    """
    long, stats = observations_frame(raw, lambda obs: obs.geo_fips)
    snapshots, history, dropped = _snapshot_frame(long)

    slugs = SlugRegistry()
    rows: list[dict[str, Any]] = []
    for snap in snapshots.iter_rows(named=True):
        name = clean_msa_name(snap["raw_name"])
        rows.append(
            {
                "cbsa": snap["key"],
                "name": name,
                "slug": slugs.assign(name, snap["key"]),
                "state_abbr": extract_state_abbr(snap["raw_name"]),
                **{col: snap[col] for col in RPP_COLUMNS},
                "year": snap["year"],
                "population": None,
                "median_income": None,
            }
        )

    _log_stats("msa", stats, dropped)
    return NormalizedClass(
        key_column="cbsa",
        snapshots=rows,
        history=history.rename({"key": "cbsa"}),
        stats=stats,
        dropped_no_composite=dropped,
    )


def normalize_states(raw: dict[str, list[Any]]) -> NormalizedClass:
    """
    Normalize the state artifact.

    BEA state codes are translated through FIPS_TO_ABBR; records whose code
    does not map (the US total, regions) are dropped and counted. msa_count
    is filled in by the loader once metros are committed.
    """
    long, stats = observations_frame(raw, lambda obs: fips_to_state_abbr(obs.geo_fips))
    snapshots, history, dropped = _snapshot_frame(long)

    rows: list[dict[str, Any]] = []
    for snap in snapshots.iter_rows(named=True):
        name = state_name(snap["key"])
        rows.append(
            {
                "abbr": snap["key"],
                "name": name,
                "slug": state_slug(name),
                **{col: snap[col] for col in RPP_COLUMNS},
                "year": snap["year"],
                "population": None,
                "median_income": None,
            }
        )

    _log_stats("state", stats, dropped)
    return NormalizedClass(
        key_column="abbr",
        snapshots=rows,
        history=history.rename({"key": "abbr"}),
        stats=stats,
        dropped_no_composite=dropped,
    )
