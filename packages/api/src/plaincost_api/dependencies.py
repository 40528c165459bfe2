"""Shared FastAPI dependencies."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager

import duckdb

from plaincost_shared.db import get_deployed_connection

CursorFactory = Callable[[], AbstractContextManager[duckdb.DuckDBPyConnection]]


@contextmanager
def open_cursor() -> Iterator[duckdb.DuckDBPyConnection]:
    """A cursor on the deployed store, closed on exit."""
    cursor = get_deployed_connection().cursor()
    try:
        yield cursor
    finally:
        cursor.close()


def get_db() -> Iterator[duckdb.DuckDBPyConnection]:
    """Per-request cursor for endpoints that always read the store."""
    with open_cursor() as cursor:
        yield cursor


def get_cursor_factory() -> CursorFactory:
    """For endpoints that only open the store when the request warrants it."""
    return open_cursor


__all__ = ["CursorFactory", "get_cursor_factory", "get_db", "open_cursor"]
