"""
sources/bea.py — BEA Regional API source for Regional Price Parities.

Endpoint:
  GET {bea_base_url}/?UserID=...&method=GetData&DataSetName=Regional
      &TableName=MARPP|SARPP&LineCode=1..4&GeoFips=MSA|STATE&Year=ALL
      &ResultFormat=JSON

Response shape:
  {
    "BEAAPI": {
      "Results": {
        "Data": [
          {"GeoFips": "10180", "GeoName": "Abilene, TX (Metropolitan Statistical Area)",
           "TimePeriod": "2022", "DataValue": "88.123", ...},
          ...
        ]
      }
    }
  }

An upstream data error arrives as HTTP 200 with BEAAPI.Results.Error (or
BEAAPI.Error); that category yields no records and the run continues. A
non-2xx status raises httpx.HTTPStatusError and aborts the run.

Requests are sequential, with config.request_delay_seconds between them.

Usage:
    source = BEARegionalSource(cfg)
    records = await source.run(geo_class="msa")
    # {"all": [...], "goods": [...], "rents": [...], "services": [...]}
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import structlog

from plaincost_shared.config import Settings
from plaincost_shared.constants import BEA_TABLES, LINE_CODES, GeoClass
from plaincost_pipeline.sources.base import BaseSource, RawRecords

log = structlog.get_logger(__name__)


class BEARegionalSource(BaseSource):
    """Pulls RPP observations, one request per (geo class, line code)."""

    name = "BEA"

    def __init__(self, config: Settings) -> None:
        super().__init__()
        self._config = config
        self._url = f"{config.bea_base_url}/"
        self._has_requested = False
        self.empty_categories: list[tuple[str, str]] = []

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    async def _throttle(self) -> None:
        if self._has_requested and self._config.request_delay_seconds > 0:
            await asyncio.sleep(self._config.request_delay_seconds)
        self._has_requested = True

    async def _fetch_category(
        self,
        client: httpx.AsyncClient,
        *,
        table: str,
        geo_fips: str,
        line_code: int,
    ) -> list[dict[str, Any]]:
        params = {
            "UserID": self._config.bea_api_key,
            "method": "GetData",
            "DataSetName": "Regional",
            "ResultFormat": "JSON",
            "TableName": table,
            "LineCode": str(line_code),
            "GeoFips": geo_fips,
            "Year": "ALL",
        }
        await self._throttle()
        self._log.info("bea_fetch", table=table, line_code=line_code, geo_fips=geo_fips)

        response = await client.get(self._url, params=params)
        response.raise_for_status()
        payload = response.json()

        beaapi = payload.get("BEAAPI", {}) if isinstance(payload, dict) else {}
        results = beaapi.get("Results", {})
        if isinstance(results, list):
            results = results[0] if results else {}

        error = results.get("Error") or beaapi.get("Error")
        if error:
            self._log.warning(
                "bea_api_error", table=table, line_code=line_code, error=error
            )
            return []

        data = results.get("Data") or []
        self._log.info("bea_records", table=table, line_code=line_code, count=len(data))
        return data

    # ------------------------------------------------------------------
    # BaseSource interface
    # ------------------------------------------------------------------

    async def extract(self, *, geo_class: GeoClass, **kwargs: Any) -> RawRecords:
        """
        Download every RPP category for one geography class.

        Args:
            geo_class: "msa" or "state".

        Returns:
            Mapping of category label -> raw BEA records.
        """
        if geo_class not in BEA_TABLES:
            raise ValueError(f"Unknown geo class {geo_class!r}")
        table, geo_fips = BEA_TABLES[geo_class]

        records: RawRecords = {}
        async with httpx.AsyncClient(timeout=self._config.request_timeout_seconds) as client:
            for line_code, label in LINE_CODES.items():
                data = await self._fetch_category(
                    client, table=table, geo_fips=geo_fips, line_code=line_code
                )
                if not data:
                    self.empty_categories.append((geo_class, label))
                records[label] = data
        return records

    async def get_metadata(self) -> dict[str, Any]:
        return {
            "source_name": self.name,
            "base_url": self._config.bea_base_url,
            "description": "BEA Regional Price Parities by MSA and state",
            "tables": {k: v[0] for k, v in BEA_TABLES.items()},
        }
