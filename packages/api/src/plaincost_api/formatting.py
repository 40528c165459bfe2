"""Display helpers for RPP values. Pure functions, no store access."""

from __future__ import annotations

import math

from plaincost_shared.constants import NATIONAL_BASELINE

PLACEHOLDER = "N/A"
AT_AVERAGE = "at national average"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity."""
    return math.floor(value + 0.5)


def format_rpp(value: float | None) -> str:
    if value is None:
        return PLACEHOLDER
    return f"{value:.1f}"


def rpp_diff(value: float | None) -> str:
    """
    Describe an index relative to the national baseline of 100.

    rpp_diff(112.3) -> "+12.3% vs national avg"
    rpp_diff(87.5)  -> "-12.5% vs national avg"
    rpp_diff(100)   -> "at national average"
    """
    if value is None:
        return ""
    diff = value - NATIONAL_BASELINE
    if diff == 0:
        return AT_AVERAGE
    sign = "+" if diff > 0 else ""
    return f"{sign}{diff:.1f}% vs national avg"


def format_number(num: int | float | None) -> str:
    if num is None:
        return PLACEHOLDER
    if isinstance(num, float) and not num.is_integer():
        return f"{num:,.3f}".rstrip("0").rstrip(".")
    return f"{int(num):,}"


def format_money(amount: int | float | None) -> str:
    if amount is None:
        return PLACEHOLDER
    return f"${round_half_up(amount):,}"


def salary_equivalent(salary: float, from_rpp: float, to_rpp: float) -> int:
    """
    Salary needed in the destination to match purchasing power at the origin.

    salary_equivalent(100000, 110, 95) -> 86364

    Raises:
        ValueError: from_rpp is not positive.
    """
    if from_rpp <= 0:
        raise ValueError("from_rpp must be positive")
    return round_half_up(salary * (to_rpp / from_rpp))
