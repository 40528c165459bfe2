"""
tests/conftest.py — Shared pytest fixtures for the pipeline test suite.

Provides:
  fixture_path()     — resolves paths to tests/fixtures/
  test_settings      — Settings pointing every path at tmp_path, no throttle
  msa_raw/state_raw  — raw artifacts loaded from fixture files
  raw_artifacts      — both artifacts written where the build stage reads them
  built_store        — a build store produced from the fixture artifacts
  mock_http          — configured respx router for faking HTTP responses
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest
import respx

from plaincost_shared.config import Settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def fixture_path() -> Path:
    return FIXTURES_DIR


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings isolated under tmp_path with request throttling disabled."""
    return Settings(
        bea_api_key="test-key",
        request_delay_seconds=0,
        raw_dir=tmp_path / "raw",
        db_path=tmp_path / "plaincost.duckdb",
        seed_dir=tmp_path / "seed",
        deployed_db_path=tmp_path / "deployed.duckdb",
    )


# ---------------------------------------------------------------------------
# Raw artifacts
# ---------------------------------------------------------------------------

@pytest.fixture
def msa_raw() -> dict:
    """Metro artifact keyed by category, as the fetch stage writes it."""
    return json.loads((FIXTURES_DIR / "msa_rpp_sample.json").read_text())


@pytest.fixture
def state_raw() -> dict:
    """State artifact keyed by category, as the fetch stage writes it."""
    return json.loads((FIXTURES_DIR / "state_rpp_sample.json").read_text())


@pytest.fixture
def bea_payload() -> dict:
    """A successful BEA GetData response."""
    return json.loads((FIXTURES_DIR / "bea_marpp_response.json").read_text())


@pytest.fixture
def bea_error_payload() -> dict:
    """A BEA response carrying an in-band error with HTTP 200."""
    return json.loads((FIXTURES_DIR / "bea_error_response.json").read_text())


@pytest.fixture
def raw_artifacts(test_settings: Settings) -> Settings:
    """Copy both fixture artifacts into test_settings.raw_dir."""
    test_settings.raw_dir.mkdir(parents=True, exist_ok=True)
    shutil.copy(FIXTURES_DIR / "msa_rpp_sample.json", test_settings.raw_path("msa"))
    shutil.copy(FIXTURES_DIR / "state_rpp_sample.json", test_settings.raw_path("state"))
    return test_settings


@pytest.fixture
def built_store(raw_artifacts: Settings) -> Settings:
    """Run the build stage over the fixture artifacts."""
    from plaincost_pipeline.pipelines import rpp

    rpp.build(raw_artifacts)
    return raw_artifacts


# ---------------------------------------------------------------------------
# respx HTTP mock router
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_http():
    """
    Activate the respx mock router for all httpx requests.

    Usage in tests:
        def test_something(mock_http):
            mock_http.get("https://...").mock(return_value=httpx.Response(200, json={...}))
    """
    with respx.mock(assert_all_called=False) as router:
        yield router
