"""Cost-of-living salary comparison between two places."""

from __future__ import annotations

import duckdb
from fastapi import APIRouter, Depends, HTTPException, Query

from plaincost_api.dependencies import get_db
from plaincost_api.formatting import format_money, salary_equivalent
from plaincost_api.responses import wrap_response
from plaincost_api.services import rpp_service

router = APIRouter(tags=["compare"])


def _resolve_place(conn: duckdb.DuckDBPyConnection, slug: str) -> tuple[str, float]:
    """Metro slug first, then state slug; returns (name, rpp_all)."""
    place = rpp_service.get_msa_by_slug(conn, slug) or rpp_service.get_state_by_slug(conn, slug)
    if place is None:
        raise HTTPException(status_code=404, detail=f"Place '{slug}' not found")
    if place.rpp_all is None:
        raise HTTPException(status_code=404, detail=f"Place '{slug}' has no price index")
    return place.name, place.rpp_all


@router.get("/salary-equivalent")
async def get_salary_equivalent(
    salary: float = Query(..., gt=0),
    from_slug: str = Query(...),
    to_slug: str = Query(...),
    conn: duckdb.DuckDBPyConnection = Depends(get_db),
):
    """Salary in to_slug with the same purchasing power as salary in from_slug."""
    from_name, from_rpp = _resolve_place(conn, from_slug)
    to_name, to_rpp = _resolve_place(conn, to_slug)
    equivalent = salary_equivalent(salary, from_rpp, to_rpp)
    return wrap_response(
        {
            "salary": salary,
            "from": {"slug": from_slug, "name": from_name, "rpp_all": from_rpp},
            "to": {"slug": to_slug, "name": to_name, "rpp_all": to_rpp},
            "equivalent_salary": equivalent,
            "display": f"{format_money(salary)} in {from_name} ≈ {format_money(equivalent)} in {to_name}",
        }
    )
