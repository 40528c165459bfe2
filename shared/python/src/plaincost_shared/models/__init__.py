"""
plaincost_shared.models — Pydantic models mirroring the store tables.
"""

from plaincost_shared.models.rpp import (
    Msa,
    MsaHistory,
    NationalStats,
    RawObservation,
    RppValues,
    StateHistory,
    StateInfo,
    parse_value,
)

__all__ = [
    "Msa",
    "MsaHistory",
    "NationalStats",
    "RawObservation",
    "RppValues",
    "StateHistory",
    "StateInfo",
    "parse_value",
]
