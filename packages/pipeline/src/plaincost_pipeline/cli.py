"""
cli.py — Click CLI entrypoint for the plaincost pipeline.

Usage:
    plaincost fetch
    plaincost build --db-path ./data/plaincost.duckdb
    plaincost export --chunk-size 500
    plaincost seed --fresh
    plaincost run-all
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click
import httpx
import structlog

from plaincost_shared.config import Settings
from plaincost_pipeline.pipelines import rpp
from plaincost_pipeline.transforms.normalize import RawArtifactError
from plaincost_pipeline.utils.logging import configure_logging

log = structlog.get_logger(__name__)

T = TypeVar("T")

# Errors that abort a stage with a diagnostic rather than a traceback
FATAL_ERRORS = (FileNotFoundError, RawArtifactError, httpx.HTTPError)


def _run_stage(stage: str, fn: Callable[[], T]) -> T:
    log.info("stage_start", stage=stage)
    try:
        result = fn()
    except FATAL_ERRORS as exc:
        log.error("stage_failed", stage=stage, error=str(exc))
        raise click.ClickException(f"{stage} failed: {exc}") from exc
    log.info("stage_complete", stage=stage)
    return result


@click.group()
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level (default: LOG_LEVEL or INFO)",
)
@click.option(
    "--log-format",
    default=None,
    type=click.Choice(["json", "console"]),
    help="Log renderer (default: LOG_FORMAT or console)",
)
@click.option("--raw-dir", type=click.Path(path_type=Path), default=None)
@click.option("--db-path", type=click.Path(path_type=Path), default=None)
@click.option("--seed-dir", type=click.Path(path_type=Path), default=None)
@click.option("--deployed-db-path", type=click.Path(path_type=Path), default=None)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_format: str | None,
    **paths: Any,
) -> None:
    """plaincost Regional Price Parity pipeline."""
    overrides = {k: v for k, v in paths.items() if v is not None}
    config = Settings(**overrides)
    configure_logging(config, log_level=log_level, log_format=log_format)
    ctx.obj = config


@main.command()
@click.option("--delay", type=float, default=None, help="Seconds between BEA requests")
@click.pass_obj
def fetch(config: Settings, delay: float | None) -> None:
    """Download raw RPP data from the BEA Regional API."""
    if delay is not None:
        config = config.model_copy(update={"request_delay_seconds": delay})
    if not config.bea_api_key:
        raise click.ClickException("BEA_API_KEY is not set. Set it in .env.")
    summary = _run_stage("fetch", lambda: asyncio.run(rpp.fetch(config)))
    for geo_class, count in summary.geographies.items():
        years = summary.years[geo_class]
        span = f"{years[0]}-{years[-1]}" if years else "none"
        click.echo(f"  {geo_class:6s} {count:5d} geographies  years {span}")
    for geo_class, category in summary.empty_categories:
        click.echo(f"  warning: {geo_class}/{category} returned no records", err=True)


@main.command()
@click.pass_obj
def build(config: Settings) -> None:
    """Rebuild the DuckDB store from raw JSON."""
    result = _run_stage("build", lambda: rpp.build(config))
    click.echo(f"  MSAs:               {result.msas.snapshot_rows}")
    click.echo(f"  MSA history rows:   {result.msas.history_rows}")
    click.echo(f"  States:             {result.states.snapshot_rows}")
    click.echo(f"  State history rows: {result.states.history_rows}")
    click.echo(f"  Avg RPP (all items): {result.avg_rpp_all}")


@main.command()
@click.option("--chunk-size", type=click.IntRange(min=1), default=None)
@click.pass_obj
def export(config: Settings, chunk_size: int | None) -> None:
    """Export the store as a chunked INSERT OR IGNORE seed bundle."""
    if chunk_size is not None:
        config = config.model_copy(update={"export_chunk_size": chunk_size})
    result = _run_stage("export", lambda: rpp.export(config))
    for table, rows in result.rows_by_table.items():
        click.echo(f"  {table:14s} {rows:7,d} rows -> {len(result.files_by_table[table])} files")
    click.echo(f"  Total files: {result.total_files}")


@main.command()
@click.option("--fresh", is_flag=True, help="Delete the deployed store before seeding")
@click.pass_obj
def seed(config: Settings, fresh: bool) -> None:
    """Apply the seed bundle to the deployed store."""
    counts = _run_stage("seed", lambda: rpp.seed(config, fresh=fresh))
    for table, count in counts.items():
        click.echo(f"  {table:14s} {count:7,d} rows")


@main.command("run-all")
@click.option("--skip-fetch", is_flag=True, help="Reuse existing raw artifacts")
@click.pass_context
def run_all(ctx: click.Context, skip_fetch: bool) -> None:
    """fetch -> build -> export -> seed."""
    if not skip_fetch:
        ctx.invoke(fetch)
    ctx.invoke(build)
    ctx.invoke(export)
    ctx.invoke(seed, fresh=True)


if __name__ == "__main__":
    main()
