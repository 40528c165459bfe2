"""
RPP read queries against the deployed store.

Every function takes the connection as its first argument; nothing holds a
connection at module scope. Lookups by key return None when nothing
matches, lists return [] and search treats too-short input as no match.
"""

from __future__ import annotations

import re

import duckdb

from plaincost_shared.db import fetch_dicts, fetch_one
from plaincost_shared.models.rpp import Msa, MsaHistory, NationalStats, StateHistory, StateInfo

DEFAULT_RANKING_LIMIT = 25
SEARCH_MIN_LENGTH = 2
SEARCH_RESULT_CAP = 15

_CBSA_PREFIX = re.compile(r"\d{1,5}")
_STATE_CODE = re.compile(r"[A-Za-z]{2}")


# --- Metros ---


def get_msa_by_slug(conn: duckdb.DuckDBPyConnection, slug: str) -> Msa | None:
    row = fetch_one(conn, "SELECT * FROM msas WHERE slug = ?", [slug])
    return Msa.from_db_row(row) if row else None


def get_all_msas(conn: duckdb.DuckDBPyConnection) -> list[Msa]:
    rows = fetch_dicts(conn, "SELECT * FROM msas ORDER BY name COLLATE NOCASE")
    return [Msa.from_db_row(r) for r in rows]


def get_msas_by_state(conn: duckdb.DuckDBPyConnection, state_abbr: str) -> list[Msa]:
    rows = fetch_dicts(
        conn,
        "SELECT * FROM msas WHERE state_abbr = ? ORDER BY name COLLATE NOCASE",
        [state_abbr],
    )
    return [Msa.from_db_row(r) for r in rows]


def get_msa_history(conn: duckdb.DuckDBPyConnection, cbsa: str) -> list[MsaHistory]:
    rows = fetch_dicts(conn, "SELECT * FROM msa_history WHERE cbsa = ? ORDER BY year", [cbsa])
    return [MsaHistory.from_db_row(r) for r in rows]


# --- States ---


def get_all_states(conn: duckdb.DuckDBPyConnection) -> list[StateInfo]:
    rows = fetch_dicts(conn, "SELECT * FROM states ORDER BY name COLLATE NOCASE")
    return [StateInfo.from_db_row(r) for r in rows]


def get_state_by_slug(conn: duckdb.DuckDBPyConnection, slug: str) -> StateInfo | None:
    row = fetch_one(conn, "SELECT * FROM states WHERE slug = ?", [slug])
    return StateInfo.from_db_row(row) if row else None


def get_state_history(conn: duckdb.DuckDBPyConnection, abbr: str) -> list[StateHistory]:
    rows = fetch_dicts(conn, "SELECT * FROM state_history WHERE abbr = ? ORDER BY year", [abbr])
    return [StateHistory.from_db_row(r) for r in rows]


# --- Rankings ---


def _ranked(conn: duckdb.DuckDBPyConnection, order_by: str, limit: int) -> list[Msa]:
    rows = fetch_dicts(
        conn,
        f"SELECT * FROM msas ORDER BY {order_by}, name COLLATE NOCASE LIMIT ?",
        [max(0, int(limit))],
    )
    return [Msa.from_db_row(r) for r in rows]


def get_most_expensive_msas(
    conn: duckdb.DuckDBPyConnection, limit: int = DEFAULT_RANKING_LIMIT
) -> list[Msa]:
    return _ranked(conn, "rpp_all DESC", limit)


def get_least_expensive_msas(
    conn: duckdb.DuckDBPyConnection, limit: int = DEFAULT_RANKING_LIMIT
) -> list[Msa]:
    return _ranked(conn, "rpp_all ASC", limit)


def get_highest_rent_msas(
    conn: duckdb.DuckDBPyConnection, limit: int = DEFAULT_RANKING_LIMIT
) -> list[Msa]:
    return _ranked(conn, "rpp_rents DESC NULLS LAST", limit)


# --- Search ---


def search_msas(
    conn: duckdb.DuckDBPyConnection, query: str, limit: int = SEARCH_RESULT_CAP
) -> list[Msa]:
    """
    Case-insensitive name search over metros.

    A digit-only query also matches CBSA codes by prefix, and a two-letter
    query also matches the state code. Anything else matches the name or an
    exact CBSA code. Fewer than two characters returns [] without a query.
    """
    trimmed = query.strip()
    if len(trimmed) < SEARCH_MIN_LENGTH:
        return []
    limit = max(0, min(int(limit), SEARCH_RESULT_CAP))
    needle = trimmed.lower()

    if _CBSA_PREFIX.fullmatch(trimmed):
        where = "starts_with(cbsa, ?) OR contains(lower(name), ?)"
        params: list[object] = [trimmed, needle]
    elif _STATE_CODE.fullmatch(trimmed):
        where = "state_abbr = ? OR contains(lower(name), ?)"
        params = [trimmed.upper(), needle]
    else:
        where = "contains(lower(name), ?) OR cbsa = ?"
        params = [needle, trimmed]

    rows = fetch_dicts(
        conn,
        f"SELECT * FROM msas WHERE {where} "
        "ORDER BY population DESC NULLS LAST, rpp_all DESC LIMIT ?",
        [*params, limit],
    )
    return [Msa.from_db_row(r) for r in rows]


# --- Stats ---


def get_national_stats(conn: duckdb.DuckDBPyConnection) -> NationalStats:
    row = fetch_one(
        conn,
        """
        SELECT
          (SELECT COUNT(*) FROM msas) AS msa_count,
          (SELECT COUNT(*) FROM states) AS state_count,
          (SELECT MAX(rpp_all) FROM msas) AS max_rpp_all,
          (SELECT MIN(rpp_all) FROM msas) AS min_rpp_all,
          (SELECT AVG(rpp_all) FROM msas) AS avg_rpp_all,
          (SELECT MAX(rpp_rents) FROM msas) AS max_rpp_rents,
          (SELECT MIN(rpp_rents) FROM msas) AS min_rpp_rents,
          (SELECT AVG(rpp_rents) FROM msas) AS avg_rpp_rents
        """,
    )
    return NationalStats.from_db_row(row or {})
