"""Metro area (MSA) endpoints."""

from __future__ import annotations

import duckdb
from fastapi import APIRouter, Depends, HTTPException

from plaincost_shared.models.rpp import Msa

from plaincost_api.dependencies import get_db
from plaincost_api.formatting import format_number, format_rpp, rpp_diff
from plaincost_api.responses import wrap_response
from plaincost_api.services import rpp_service

router = APIRouter(prefix="/metros", tags=["metros"])


def display_fields(item: Msa) -> dict[str, str]:
    return {
        "rpp_all": format_rpp(item.rpp_all),
        "rpp_all_diff": rpp_diff(item.rpp_all),
        "rpp_rents_diff": rpp_diff(item.rpp_rents),
        "rpp_goods_diff": rpp_diff(item.rpp_goods),
        "rpp_services_diff": rpp_diff(item.rpp_services),
        "population": format_number(item.population),
    }


def _require_msa(conn: duckdb.DuckDBPyConnection, slug: str) -> Msa:
    msa = rpp_service.get_msa_by_slug(conn, slug)
    if msa is None:
        raise HTTPException(status_code=404, detail=f"Metro area '{slug}' not found")
    return msa


@router.get("")
async def list_metros(conn: duckdb.DuckDBPyConnection = Depends(get_db)):
    """All metro areas, alphabetical."""
    data = rpp_service.get_all_msas(conn)
    return wrap_response(data, total_count=len(data))


@router.get("/{slug}")
async def get_metro(slug: str, conn: duckdb.DuckDBPyConnection = Depends(get_db)):
    """A metro's latest snapshot, its history and display strings."""
    msa = _require_msa(conn, slug)
    history = rpp_service.get_msa_history(conn, msa.cbsa)
    return wrap_response(
        {"metro": msa, "history": history, "display": display_fields(msa)},
        year=msa.year,
    )


@router.get("/{slug}/history")
async def get_metro_history(slug: str, conn: duckdb.DuckDBPyConnection = Depends(get_db)):
    msa = _require_msa(conn, slug)
    history = rpp_service.get_msa_history(conn, msa.cbsa)
    return wrap_response(history, total_count=len(history))
