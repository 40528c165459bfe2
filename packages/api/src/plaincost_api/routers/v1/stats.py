"""National aggregate statistics."""

from __future__ import annotations

import duckdb
from fastapi import APIRouter, Depends

from plaincost_api.dependencies import get_db
from plaincost_api.responses import wrap_response
from plaincost_api.services import rpp_service

router = APIRouter(tags=["stats"])


@router.get("/stats")
async def national_stats(conn: duckdb.DuckDBPyConnection = Depends(get_db)):
    return wrap_response(rpp_service.get_national_stats(conn))
