"""Metro rankings."""

from __future__ import annotations

import duckdb
from fastapi import APIRouter, Depends, Query

from plaincost_api.dependencies import get_db
from plaincost_api.responses import wrap_response
from plaincost_api.services import rpp_service

router = APIRouter(prefix="/rankings", tags=["rankings"])


@router.get("/most-expensive")
async def most_expensive(
    limit: int = Query(rpp_service.DEFAULT_RANKING_LIMIT, ge=1, le=100),
    conn: duckdb.DuckDBPyConnection = Depends(get_db),
):
    data = rpp_service.get_most_expensive_msas(conn, limit)
    return wrap_response(data, total_count=len(data))


@router.get("/least-expensive")
async def least_expensive(
    limit: int = Query(rpp_service.DEFAULT_RANKING_LIMIT, ge=1, le=100),
    conn: duckdb.DuckDBPyConnection = Depends(get_db),
):
    data = rpp_service.get_least_expensive_msas(conn, limit)
    return wrap_response(data, total_count=len(data))


@router.get("/highest-rent")
async def highest_rent(
    limit: int = Query(rpp_service.DEFAULT_RANKING_LIMIT, ge=1, le=100),
    conn: duckdb.DuckDBPyConnection = Depends(get_db),
):
    data = rpp_service.get_highest_rent_msas(conn, limit)
    return wrap_response(data, total_count=len(data))
