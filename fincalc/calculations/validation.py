"""Boundary checks shared by the calculators."""

import math

from fincalc.calculations.errors import InvalidInputError

MIN_RATE_PERCENT = -100.0


def require_number(name: str, value) -> float:
    """Reject non-numeric and non-finite values (bools included)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{name} must be a number")
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite")
    return float(value)


def require_positive(name: str, value) -> float:
    value = require_number(name, value)
    if value <= 0:
        raise InvalidInputError(f"{name} must be greater than 0")
    return value


def require_non_negative(name: str, value) -> float:
    value = require_number(name, value)
    if value < 0:
        raise InvalidInputError(f"{name} must not be negative")
    return value


def require_rate(name: str, value) -> float:
    """Annual percentage rates may be negative but not below -100%."""
    value = require_number(name, value)
    if value < MIN_RATE_PERCENT:
        raise InvalidInputError(f"{name} must not be below {MIN_RATE_PERCENT:g}%")
    return value


def require_whole_number(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{name} must be a whole number")
    if value <= 0:
        raise InvalidInputError(f"{name} must be greater than 0")
    return value


def periods_in(years: float, per_year: int) -> int:
    """
    Convert a horizon in years to a whole number of periods.

    Raises:
        InvalidInputError: If the horizon is shorter than one period
    """
    periods = int(round(years * per_year))
    if periods < 1:
        raise InvalidInputError("years must cover at least one period")
    return periods
