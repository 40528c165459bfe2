"""
sources/base.py — Abstract base class for raw data sources.

A concrete source implements:
  extract()      — fetch raw records, grouped by category label
  get_metadata() — describe the source for run summaries

run() wraps extract() with timing and structured logging. Pipelines call
run() rather than extract() directly.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any

import structlog

log = structlog.get_logger(__name__)

RawRecords = dict[str, list[dict[str, Any]]]


class BaseSource(ABC):
    """Abstract base for plaincost raw data sources."""

    # Override in subclass; used for logging
    name: str = "unknown"

    def __init__(self) -> None:
        self._log = log.bind(source_name=self.name)

    @abstractmethod
    async def extract(self, **kwargs: Any) -> RawRecords:
        """
        Fetch raw observation records from the external source.

        Returns:
            Mapping of category label -> list of raw records, exactly as the
            upstream API returned them.
        """
        ...

    @abstractmethod
    async def get_metadata(self) -> dict[str, Any]:
        ...

    async def run(self, **kwargs: Any) -> RawRecords:
        """
        Run extract() with timing and logging.

        Raises:
            Any exception from extract(), after logging it.
        """
        run_log = self._log.bind(**{k: str(v) for k, v in kwargs.items()})
        run_log.info("source_run_start")

        t0 = time.monotonic()
        try:
            records = await self.extract(**kwargs)
        except Exception as exc:
            run_log.error(
                "source_run_failed",
                error=str(exc),
                duration_ms=int((time.monotonic() - t0) * 1000),
            )
            raise

        run_log.info(
            "source_run_complete",
            categories=len(records),
            records=sum(len(v) for v in records.values()),
            duration_ms=int((time.monotonic() - t0) * 1000),
        )
        return records
