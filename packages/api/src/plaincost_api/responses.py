"""Standardized API response wrappers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


def _dump(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump()
    if isinstance(data, list):
        return [_dump(item) for item in data]
    if isinstance(data, dict):
        return {k: _dump(v) for k, v in data.items()}
    return data


def wrap_response(
    data: Any,
    *,
    total_count: int | None = None,
    source: str | None = "BEA Regional Price Parities",
    year: int | None = None,
    links: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Build a standardized {data, meta, links} response dict."""
    meta = {"total_count": total_count, "source": source, "year": year}
    return {
        "data": _dump(data),
        "meta": {k: v for k, v in meta.items() if v is not None},
        "links": links or {},
    }


def error_response(
    code: str,
    message: str,
    *,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a standardized error response dict."""
    err: dict[str, Any] = {"code": code, "message": message}
    if details:
        err["details"] = details
    return {"error": err}
