"""
models/rpp.py — Pydantic models for the RPP tables and raw BEA observations.
"""

from __future__ import annotations

import math
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from plaincost_shared.constants import SUPPRESSED_VALUES

_DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")
_LEADING_YEAR = re.compile(r"\s*(\d{4})")


def parse_value(raw: Any) -> float | None:
    """
    Parse a BEA DataValue.

    Returns a float only for a plain decimal numeral. Sentinels ("(NA)",
    "(D)"), empty strings and anything non-numeric give None.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw) if math.isfinite(raw) else None
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text or text in SUPPRESSED_VALUES:
        return None
    if not _DECIMAL.fullmatch(text):
        return None
    return float(text)


class RawObservation(BaseModel):
    """
    One record from a BEA GetData response.

    Validation fails (and the record counts as malformed) when the geography
    code is missing or the period carries no year. An unusable DataValue is
    not a failure; it becomes None.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    geo_fips: str = Field(alias="GeoFips", min_length=1)
    geo_name: str = Field(default="", alias="GeoName")
    year: int = Field(alias="TimePeriod")
    value: float | None = Field(default=None, alias="DataValue")

    @field_validator("geo_fips", mode="before")
    @classmethod
    def strip_fips(cls, v: Any) -> Any:
        if isinstance(v, (int, str)) and not isinstance(v, bool):
            return str(v).strip()
        return v

    @field_validator("geo_name", mode="before")
    @classmethod
    def none_name_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("year", mode="before")
    @classmethod
    def leading_year(cls, v: Any) -> Any:
        if isinstance(v, str):
            match = _LEADING_YEAR.match(v)
            if match is None:
                raise ValueError(f"no year in period {v!r}")
            return int(match.group(1))
        return v

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> float | None:
        return parse_value(v)


class RppValues(BaseModel):
    """The four price-parity facets for one observation year."""

    rpp_all: float | None = None
    rpp_goods: float | None = None
    rpp_services: float | None = None
    rpp_rents: float | None = None


class Msa(RppValues):
    """Matches the msas table row exactly."""

    cbsa: str
    name: str
    slug: str
    state_abbr: str | None = None
    year: int | None = None
    population: int | None = None
    median_income: int | None = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "Msa":
        return cls(**row)


class MsaHistory(RppValues):
    """Matches the msa_history table row. Primary key is (cbsa, year)."""

    cbsa: str
    year: int

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "MsaHistory":
        return cls(**row)


class StateInfo(RppValues):
    """Matches the states table row exactly."""

    abbr: str
    name: str
    slug: str
    year: int | None = None
    population: int | None = None
    median_income: int | None = None
    msa_count: int = 0

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "StateInfo":
        return cls(**row)


class StateHistory(RppValues):
    """Matches the state_history table row. Primary key is (abbr, year)."""

    abbr: str
    year: int

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "StateHistory":
        return cls(**row)


class NationalStats(BaseModel):
    msa_count: int = 0
    state_count: int = 0
    max_rpp_all: float | None = None
    min_rpp_all: float | None = None
    avg_rpp_all: float | None = None
    max_rpp_rents: float | None = None
    min_rpp_rents: float | None = None
    avg_rpp_rents: float | None = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "NationalStats":
        return cls(**row)
