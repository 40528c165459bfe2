"""Metro search endpoint used by the site's search box."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from plaincost_api.dependencies import CursorFactory, get_cursor_factory
from plaincost_api.services import rpp_service

router = APIRouter(tags=["search"])

# Short browser freshness, long shared-cache (edge) lifetime
CACHE_HEADERS = {"Cache-Control": "public, max-age=300, s-maxage=3600"}

RESULT_FIELDS = {
    "cbsa", "name", "slug", "state_abbr",
    "rpp_all", "rpp_goods", "rpp_services", "rpp_rents",
}


def parse_limit(raw: str | None) -> int:
    """Lenient limit parsing: junk falls back to the cap, values clamp to [1, cap]."""
    cap = rpp_service.SEARCH_RESULT_CAP
    try:
        value = int(raw) if raw is not None else cap
    except ValueError:
        return cap
    return max(1, min(value, cap))


@router.get("/search")
async def search(
    q: str = Query("", description="Metro name, CBSA code or state code"),
    limit: str | None = Query(None, description=f"Max results (capped at {rpp_service.SEARCH_RESULT_CAP})"),
    open_cursor: CursorFactory = Depends(get_cursor_factory),
) -> JSONResponse:
    trimmed = q.strip()
    if len(trimmed) < rpp_service.SEARCH_MIN_LENGTH:
        return JSONResponse({"results": [], "query": ""}, headers=CACHE_HEADERS)

    with open_cursor() as conn:
        matches = rpp_service.search_msas(conn, trimmed, parse_limit(limit))

    results = [m.model_dump(include=RESULT_FIELDS) for m in matches]
    return JSONResponse({"results": results, "query": trimmed}, headers=CACHE_HEADERS)
