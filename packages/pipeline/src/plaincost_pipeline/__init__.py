"""
plaincost_pipeline — ETL stages for the plaincost Regional Price Parity store.

Architecture:
  sources/     — BEA Regional API source (raw JSON per geography class)
  transforms/  — record validation, category reconciliation, latest-year snapshots
  loaders/     — transactional two-phase DuckDB loader
  exporters/   — chunked INSERT OR IGNORE seed bundle writer / applier
  pipelines/   — fetch / build / export / seed stages
  utils/       — structlog configuration

CLI:
    plaincost fetch
    plaincost build
    plaincost export
    plaincost seed --fresh
    plaincost run-all

Shared code from plaincost_shared:
    from plaincost_shared.config import Settings
    from plaincost_shared.db import connect_store
    from plaincost_shared.geo import slugify, clean_msa_name
"""

__version__ = "0.1.0"
