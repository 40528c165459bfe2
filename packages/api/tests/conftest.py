"""Shared test fixtures for plaincost-api."""

from __future__ import annotations

from contextlib import contextmanager

import duckdb
import pytest
from fastapi.testclient import TestClient

from plaincost_shared.db import create_schema
from plaincost_shared.schema import TABLE_COLUMNS

from plaincost_api.dependencies import get_cursor_factory, get_db

MSAS = [
    ("10180", "Abilene, TX", "abilene-tx", "TX", 88.5, 96.0, 81.2, 72.9, 2022, 176579, None),
    ("35620", "New York-Newark-Jersey City, NY-NJ-PA", "new-york-newark-jersey-city-ny-nj-pa",
     "NY", 125.4, 108.3, 139.7, 176.6, 2022, 19617869, None),
    ("44100", "Springfield, IL", "springfield-il", "IL", 89.9, 97.1, 84.0, 74.2, 2022, 205000, None),
    ("44180", "Springfield, MO", "springfield-mo", "MO", 87.0, 95.5, 80.0, 70.0, 2022, None, None),
    ("41860", "San Francisco-Oakland-Berkeley, CA", "san-francisco-oakland-berkeley-ca",
     "CA", 117.9, 106.9, 128.7, 200.1, 2022, 4579599, None),
    ("31080", "Los Angeles-Long Beach-Anaheim, CA", "los-angeles-long-beach-anaheim-ca",
     "CA", 115.6, 106.3, 123.0, 170.2, 2022, 13200998, None),
]

STATES = [
    ("CA", "California", "california", 112.6, 105.2, 118.0, 150.3, 2022, None, None, 2),
    ("IL", "Illinois", "illinois", 99.0, 99.5, 98.7, 96.0, 2022, None, None, 1),
    ("MO", "Missouri", "missouri", 100.0, 98.0, 96.0, 85.0, 2022, None, None, 1),
    ("NY", "New York", "new-york", 110.0, 102.1, 115.6, 136.0, 2022, None, None, 1),
    ("TX", "Texas", "texas", 95.0, 98.0, 96.5, 95.0, 2022, None, None, 1),
]

MSA_HISTORY = [
    ("10180", 2021, 87.1, 95.2, 80.3, 70.4),
    ("10180", 2022, 88.5, 96.0, 81.2, 72.9),
    ("35620", 2022, 125.4, 108.3, 139.7, 176.6),
]

STATE_HISTORY = [
    ("CA", 2021, 111.0, 104.8, 117.1, 147.9),
    ("CA", 2022, 112.6, 105.2, 118.0, 150.3),
]


def seed_store(conn: duckdb.DuckDBPyConnection) -> None:
    """Create the schema and load the sample rows."""
    create_schema(conn)
    for table, rows in (
        ("msas", MSAS),
        ("states", STATES),
        ("msa_history", MSA_HISTORY),
        ("state_history", STATE_HISTORY),
    ):
        columns = TABLE_COLUMNS[table]
        conn.executemany(
            f"INSERT INTO {table} ({', '.join(columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)})",
            [list(r) for r in rows],
        )


@pytest.fixture()
def seed_rows():
    """The seeding helper, for tests that build their own store file."""
    return seed_store


@pytest.fixture()
def store():
    """In-memory DuckDB store holding the sample rows."""
    conn = duckdb.connect(":memory:")
    seed_store(conn)
    yield conn
    conn.close()


@pytest.fixture()
def empty_store():
    conn = duckdb.connect(":memory:")
    create_schema(conn)
    yield conn
    conn.close()


def _override_store(app, conn: duckdb.DuckDBPyConnection) -> None:
    @contextmanager
    def _cursor():
        cursor = conn.cursor()
        try:
            yield cursor
        finally:
            cursor.close()

    def _get_db():
        with _cursor() as cursor:
            yield cursor

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_cursor_factory] = lambda: _cursor


@pytest.fixture()
def app(store):
    """Test FastAPI app reading from the in-memory store."""
    from plaincost_api.app import create_app

    application = create_app()
    _override_store(application, store)
    return application


@pytest.fixture()
def client(app):
    """HTTP test client."""
    return TestClient(app)


@pytest.fixture()
def empty_client(empty_store):
    """HTTP test client over a store with the schema but no rows."""
    from plaincost_api.app import create_app

    application = create_app()
    _override_store(application, empty_store)
    return TestClient(application)
