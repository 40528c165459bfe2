"""
geo.py — Geography name cleanup and slug helpers.

BEA metro names carry a classification suffix and a state list, e.g.
"New York-Newark-Jersey City, NY-NJ-PA (Metropolitan Statistical Area)".

Usage:
    from plaincost_shared.geo import clean_msa_name, extract_state_abbr, slugify

    clean_msa_name("Abilene, TX (Metropolitan Statistical Area)")   # "Abilene, TX"
    extract_state_abbr("Abilene, TX (Metropolitan Statistical Area)")  # "TX"
    slugify("Abilene, TX")                                          # "abilene-tx"
    fips_to_state_abbr("06000")                                     # "CA"
"""

from __future__ import annotations

import re

from plaincost_shared.constants import FIPS_TO_ABBR, STATE_NAMES

_CLASSIFICATION_SUFFIX = re.compile(
    r"\s*\((?:Metropolitan|Micropolitan) Statistical Area\)"
)
# First two-letter uppercase token after a comma; multi-state names keep the first
_STATE_TOKEN = re.compile(r",\s*([A-Z]{2})(?=\s|$|-|/)")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")


def clean_msa_name(geo_name: str) -> str:
    """Strip the '(Metropolitan|Micropolitan Statistical Area)' suffix and trim."""
    return _CLASSIFICATION_SUFFIX.sub("", geo_name, count=1).strip()


def extract_state_abbr(geo_name: str) -> str:
    """Return the owning state's postal code, or '' if none can be parsed."""
    match = _STATE_TOKEN.search(geo_name)
    return match.group(1) if match else ""


def slugify(text: str) -> str:
    return _NON_ALNUM.sub("-", text.lower()).strip("-")


def state_slug(name: str) -> str:
    """State names are unique, so only whitespace needs replacing."""
    return _WHITESPACE.sub("-", name.lower())


def fips_to_state_abbr(fips: str | None) -> str | None:
    if not fips:
        return None
    return FIPS_TO_ABBR.get(fips.strip())


def state_name(abbr: str) -> str:
    return STATE_NAMES.get(abbr, abbr)


class SlugRegistry:
    """
    Hands out unique metro slugs in the order entities are registered.

    A collision on the cleaned name falls back to the name with the CBSA
    code appended, so two metros with the same name never share a slug.
    """

    def __init__(self) -> None:
        self._taken: set[str] = set()

    def assign(self, name: str, code: str) -> str:
        slug = slugify(name)
        if slug in self._taken:
            slug = slugify(f"{name}-{code}")
        self._taken.add(slug)
        return slug

    def __contains__(self, slug: object) -> bool:
        return slug in self._taken

    def __len__(self) -> int:
        return len(self._taken)
