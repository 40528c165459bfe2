"""
tests/test_pipelines/test_cli.py — Tests for the click entrypoint.
"""

from __future__ import annotations

import shutil

import pytest
from click.testing import CliRunner

from plaincost_pipeline.cli import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _path_args(cfg) -> list[str]:
    return [
        "--raw-dir", str(cfg.raw_dir),
        "--db-path", str(cfg.db_path),
        "--seed-dir", str(cfg.seed_dir),
        "--deployed-db-path", str(cfg.deployed_db_path),
    ]


class TestCli:
    def test_build_export_seed(self, runner, raw_artifacts):
        args = _path_args(raw_artifacts)

        result = runner.invoke(main, [*args, "build"])
        assert result.exit_code == 0, result.output
        assert "MSAs:" in result.output
        assert "States:" in result.output

        result = runner.invoke(main, [*args, "export", "--chunk-size", "2"])
        assert result.exit_code == 0, result.output
        assert (raw_artifacts.seed_dir / "msas_00002.sql").is_file()

        result = runner.invoke(main, [*args, "seed", "--fresh"])
        assert result.exit_code == 0, result.output
        assert raw_artifacts.deployed_db_path.is_file()

    def test_build_without_raw_data_fails_cleanly(self, runner, test_settings):
        result = runner.invoke(main, [*_path_args(test_settings), "build"])
        assert result.exit_code == 1
        assert "build failed" in result.output
        assert not test_settings.db_path.exists()

    def test_export_without_store_fails_cleanly(self, runner, test_settings):
        result = runner.invoke(main, [*_path_args(test_settings), "export"])
        assert result.exit_code == 1
        assert "export failed" in result.output

    def test_fetch_requires_api_key(self, runner, test_settings, monkeypatch):
        monkeypatch.setenv("BEA_API_KEY", "")
        result = runner.invoke(main, [*_path_args(test_settings), "fetch"])
        assert result.exit_code == 1
        assert "BEA_API_KEY" in result.output

    def test_run_all_skip_fetch(self, runner, test_settings, fixture_path):
        test_settings.raw_dir.mkdir(parents=True)
        shutil.copy(fixture_path / "msa_rpp_sample.json", test_settings.raw_path("msa"))
        shutil.copy(fixture_path / "state_rpp_sample.json", test_settings.raw_path("state"))

        result = runner.invoke(main, [*_path_args(test_settings), "run-all", "--skip-fetch"])
        assert result.exit_code == 0, result.output
        assert "Total files:" in result.output
        assert test_settings.deployed_db_path.is_file()
