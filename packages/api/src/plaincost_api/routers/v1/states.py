"""State endpoints."""

from __future__ import annotations

import duckdb
from fastapi import APIRouter, Depends, HTTPException

from plaincost_api.dependencies import get_db
from plaincost_api.formatting import rpp_diff
from plaincost_api.responses import wrap_response
from plaincost_api.services import rpp_service

router = APIRouter(prefix="/states", tags=["states"])


@router.get("")
async def list_states(conn: duckdb.DuckDBPyConnection = Depends(get_db)):
    """All states (and DC), alphabetical."""
    data = rpp_service.get_all_states(conn)
    return wrap_response(data, total_count=len(data))


@router.get("/{slug}")
async def get_state(slug: str, conn: duckdb.DuckDBPyConnection = Depends(get_db)):
    """A state's snapshot with its metro areas and history."""
    state = rpp_service.get_state_by_slug(conn, slug)
    if state is None:
        raise HTTPException(status_code=404, detail=f"State '{slug}' not found")
    return wrap_response(
        {
            "state": state,
            "metros": rpp_service.get_msas_by_state(conn, state.abbr),
            "history": rpp_service.get_state_history(conn, state.abbr),
            "display": {"rpp_all_diff": rpp_diff(state.rpp_all)},
        },
        year=state.year,
    )
