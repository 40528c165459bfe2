"""
constants.py — shared constants used across the pipeline and API.

State names, BEA FIPS codes, RPP line codes and category labels are defined
here so they stay in sync between Python packages.
"""

from __future__ import annotations

from typing import Final, Literal

# ---------------------------------------------------------------------------
# States (plus DC): postal abbreviation -> name
# ---------------------------------------------------------------------------
STATE_NAMES: Final[dict[str, str]] = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas",
    "CA": "California", "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware",
    "FL": "Florida", "GA": "Georgia", "HI": "Hawaii", "ID": "Idaho",
    "IL": "Illinois", "IN": "Indiana", "IA": "Iowa", "KS": "Kansas",
    "KY": "Kentucky", "LA": "Louisiana", "ME": "Maine", "MD": "Maryland",
    "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota", "MS": "Mississippi",
    "MO": "Missouri", "MT": "Montana", "NE": "Nebraska", "NV": "Nevada",
    "NH": "New Hampshire", "NJ": "New Jersey", "NM": "New Mexico", "NY": "New York",
    "NC": "North Carolina", "ND": "North Dakota", "OH": "Ohio", "OK": "Oklahoma",
    "OR": "Oregon", "PA": "Pennsylvania", "RI": "Rhode Island", "SC": "South Carolina",
    "SD": "South Dakota", "TN": "Tennessee", "TX": "Texas", "UT": "Utah",
    "VT": "Vermont", "VA": "Virginia", "WA": "Washington", "WV": "West Virginia",
    "WI": "Wisconsin", "WY": "Wyoming", "DC": "District of Columbia",
}

# ---------------------------------------------------------------------------
# State FIPS codes as BEA reports them
# ---------------------------------------------------------------------------
_STATE_FIPS: Final[dict[str, str]] = {
    "01": "AL", "02": "AK", "04": "AZ", "05": "AR", "06": "CA", "08": "CO",
    "09": "CT", "10": "DE", "11": "DC", "12": "FL", "13": "GA", "15": "HI",
    "16": "ID", "17": "IL", "18": "IN", "19": "IA", "20": "KS", "21": "KY",
    "22": "LA", "23": "ME", "24": "MD", "25": "MA", "26": "MI", "27": "MN",
    "28": "MS", "29": "MO", "30": "MT", "31": "NE", "32": "NV", "33": "NH",
    "34": "NJ", "35": "NM", "36": "NY", "37": "NC", "38": "ND", "39": "OH",
    "40": "OK", "41": "OR", "42": "PA", "44": "RI", "45": "SC", "46": "SD",
    "47": "TN", "48": "TX", "49": "UT", "50": "VT", "51": "VA", "53": "WA",
    "54": "WV", "55": "WI", "56": "WY",
}

# BEA uses both "06" and the state-level "06000" form
FIPS_TO_ABBR: Final[dict[str, str]] = {
    **_STATE_FIPS,
    **{f"{fips}000": abbr for fips, abbr in _STATE_FIPS.items()},
}

# ---------------------------------------------------------------------------
# Regional Price Parities
# ---------------------------------------------------------------------------
Category = Literal["all", "goods", "services", "rents"]
GeoClass = Literal["msa", "state"]

CATEGORIES: Final[tuple[Category, ...]] = ("all", "goods", "services", "rents")

# BEA LineCode -> category label
#   1 = RPP: All items
#   2 = RPP: Goods
#   3 = RPP: Services: Housing (rents)
#   4 = RPP: Services: Other
LINE_CODES: Final[dict[int, Category]] = {1: "all", 2: "goods", 3: "rents", 4: "services"}

# geo class -> (BEA table, GeoFips selector)
BEA_TABLES: Final[dict[str, tuple[str, str]]] = {
    "msa": ("MARPP", "MSA"),
    "state": ("SARPP", "STATE"),
}

# Values BEA uses for unavailable / non-disclosed observations
SUPPRESSED_VALUES: Final[frozenset[str]] = frozenset({"(NA)", "(D)"})

NATIONAL_BASELINE: Final[float] = 100.0
