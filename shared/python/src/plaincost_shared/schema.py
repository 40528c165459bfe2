"""
schema.py — DDL for the plaincost store.

The same statements build the local DuckDB store and head the exported seed
bundle, so they stick to syntax DuckDB and SQLite both accept: IF NOT EXISTS
everywhere, DOUBLE for index values, no index sort direction.
"""

from __future__ import annotations

from typing import Final

SCHEMA_SQL: Final[str] = """
CREATE TABLE IF NOT EXISTS msas (
  cbsa TEXT PRIMARY KEY,
  name TEXT NOT NULL,
  slug TEXT UNIQUE,
  state_abbr TEXT,
  rpp_all DOUBLE,
  rpp_goods DOUBLE,
  rpp_services DOUBLE,
  rpp_rents DOUBLE,
  year INTEGER,
  population INTEGER,
  median_income INTEGER
);

CREATE TABLE IF NOT EXISTS msa_history (
  cbsa TEXT NOT NULL,
  year INTEGER NOT NULL,
  rpp_all DOUBLE,
  rpp_goods DOUBLE,
  rpp_services DOUBLE,
  rpp_rents DOUBLE,
  PRIMARY KEY (cbsa, year)
);

CREATE TABLE IF NOT EXISTS states (
  abbr TEXT PRIMARY KEY,
  name TEXT NOT NULL,
  slug TEXT UNIQUE,
  rpp_all DOUBLE,
  rpp_goods DOUBLE,
  rpp_services DOUBLE,
  rpp_rents DOUBLE,
  year INTEGER,
  population INTEGER,
  median_income INTEGER,
  msa_count INTEGER DEFAULT 0
);

CREATE TABLE IF NOT EXISTS state_history (
  abbr TEXT NOT NULL,
  year INTEGER NOT NULL,
  rpp_all DOUBLE,
  rpp_goods DOUBLE,
  rpp_services DOUBLE,
  rpp_rents DOUBLE,
  PRIMARY KEY (abbr, year)
);

CREATE INDEX IF NOT EXISTS idx_msas_state ON msas(state_abbr);
CREATE INDEX IF NOT EXISTS idx_msas_slug ON msas(slug);
CREATE INDEX IF NOT EXISTS idx_msas_rpp ON msas(rpp_all);
CREATE INDEX IF NOT EXISTS idx_msa_history_cbsa ON msa_history(cbsa);
CREATE INDEX IF NOT EXISTS idx_state_history_abbr ON state_history(abbr);

CREATE TABLE IF NOT EXISTS _stats (key TEXT PRIMARY KEY, value TEXT NOT NULL);
"""

# Column order used by the loader inserts and the exporter
TABLE_COLUMNS: Final[dict[str, tuple[str, ...]]] = {
    "states": (
        "abbr", "name", "slug", "rpp_all", "rpp_goods", "rpp_services", "rpp_rents",
        "year", "population", "median_income", "msa_count",
    ),
    "msas": (
        "cbsa", "name", "slug", "state_abbr", "rpp_all", "rpp_goods", "rpp_services",
        "rpp_rents", "year", "population", "median_income",
    ),
    "msa_history": ("cbsa", "year", "rpp_all", "rpp_goods", "rpp_services", "rpp_rents"),
    "state_history": ("abbr", "year", "rpp_all", "rpp_goods", "rpp_services", "rpp_rents"),
    "_stats": ("key", "value"),
}

PRIMARY_KEYS: Final[dict[str, tuple[str, ...]]] = {
    "states": ("abbr",),
    "msas": ("cbsa",),
    "msa_history": ("cbsa", "year"),
    "state_history": ("abbr", "year"),
    "_stats": ("key",),
}

# Export order: parents before children
EXPORT_TABLES: Final[tuple[str, ...]] = (
    "states", "msas", "msa_history", "state_history", "_stats",
)
