"""
XIRR Calculations

Money-weighted annual return for irregular, dated cash flows, matching the
behaviour of Excel's XIRR() function.

Exponents are actual/365 year fractions measured from the earliest cash flow
date. The solver runs Newton-Raphson from DEFAULT_GUESS and falls back to
bisection when Newton leaves the domain (rate <= -100%), stalls on a
vanishing derivative, or runs out of iterations. Failures are reported as a
status on the result, never as a made-up rate.
"""

import enum
import math
from typing import List, Optional, Sequence
from datetime import date, datetime
from dataclasses import dataclass

import numpy as np

from fincalc.calculations.dates import (
    DAYS_PER_YEAR,
    days_between,
    months_between,
)
from fincalc.calculations.errors import InvalidInputError
from fincalc.calculations.validation import require_number

MAX_ITERATIONS = 100
NPV_TOLERANCE = 1e-7  # Currency units
RATE_TOLERANCE = 1e-9
DEFAULT_GUESS = 0.1
MIN_DERIVATIVE = 1e-12

BRACKET_LOW = -0.99
BRACKET_HIGH = 10.0
MAX_BRACKET_EXPANSIONS = 60
MAX_BISECTION_ITERATIONS = 200


class XirrStatus(str, enum.Enum):
    """How an XIRR calculation ended."""

    converged = "converged"
    insufficient_sign_variation = "insufficient_sign_variation"
    non_convergent = "non_convergent"


@dataclass(frozen=True)
class CashFlow:
    """A dated amount; negative = investment, positive = redemption."""

    date: date
    amount: float


@dataclass(frozen=True)
class XirrResult:
    """Outcome of an XIRR calculation; `rate` is set only when converged."""

    status: XirrStatus
    rate: Optional[float] = None
    iterations: int = 0
    method: Optional[str] = None  # 'newton' or 'bisection'
    span_days: int = 0
    span_months: int = 0

    @property
    def converged(self) -> bool:
        return self.status is XirrStatus.converged

    @property
    def rate_percent(self) -> Optional[float]:
        """Rate as a percentage (e.g., 12.0 for 12%)."""
        if self.rate is None:
            return None
        return self.rate * 100


def _year_fractions(cash_flows: Sequence[CashFlow]) -> np.ndarray:
    anchor = min(cf.date for cf in cash_flows)
    return np.array(
        [days_between(anchor, cf.date) / DAYS_PER_YEAR for cf in cash_flows],
        dtype=float,
    )


def _amounts(cash_flows: Sequence[CashFlow]) -> np.ndarray:
    return np.array([cf.amount for cf in cash_flows], dtype=float)


def _xnpv(rate: float, amounts: np.ndarray, years: np.ndarray) -> float:
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        return float(np.sum(amounts / (1 + rate) ** years))


def _xnpv_derivative(rate: float, amounts: np.ndarray, years: np.ndarray) -> float:
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        return float(np.sum(-years * amounts / (1 + rate) ** (years + 1)))


def xnpv(rate: float, cash_flows: Sequence[CashFlow]) -> float:
    """
    Calculate XNPV (NPV with specific dates).

    Args:
        rate: Annual discount rate as decimal (e.g., 0.10 for 10%)
        cash_flows: Dated cash flows, discounted from the earliest date

    Returns:
        Net present value at the earliest cash flow date
    """
    if rate <= -1:
        raise InvalidInputError("rate must be greater than -1")
    if not cash_flows:
        raise InvalidInputError("At least 1 cash flow required")
    return _xnpv(rate, _amounts(cash_flows), _year_fractions(cash_flows))


def xnpv_derivative(rate: float, cash_flows: Sequence[CashFlow]) -> float:
    """Derivative of XNPV with respect to rate (for Newton-Raphson)."""
    if rate <= -1:
        raise InvalidInputError("rate must be greater than -1")
    if not cash_flows:
        raise InvalidInputError("At least 1 cash flow required")
    return _xnpv_derivative(rate, _amounts(cash_flows), _year_fractions(cash_flows))


def _newton(amounts: np.ndarray, years: np.ndarray, guess: float):
    """Return (rate, iterations) or (None, iterations) when Newton gives up."""
    rate = guess

    for iteration in range(1, MAX_ITERATIONS + 1):
        npv = _xnpv(rate, amounts, years)
        if not math.isfinite(npv):
            return None, iteration
        if abs(npv) < NPV_TOLERANCE:
            return rate, iteration

        dnpv = _xnpv_derivative(rate, amounts, years)
        if not math.isfinite(dnpv) or abs(dnpv) < MIN_DERIVATIVE:
            return None, iteration

        new_rate = rate - npv / dnpv
        if not math.isfinite(new_rate) or new_rate <= -1:
            return None, iteration

        if abs(new_rate - rate) < RATE_TOLERANCE:
            return new_rate, iteration

        rate = new_rate

    return None, MAX_ITERATIONS


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def _find_bracket(amounts: np.ndarray, years: np.ndarray):
    """
    Search outward from [BRACKET_LOW, BRACKET_HIGH] for a sign change.

    The upper bound doubles and the lower bound halves its distance to -1
    on every expansion. Returns (low, high) or None.
    """
    low, high = BRACKET_LOW, BRACKET_HIGH

    for _ in range(MAX_BRACKET_EXPANSIONS + 1):
        f_low = _xnpv(low, amounts, years)
        f_high = _xnpv(high, amounts, years)
        if not (math.isnan(f_low) or math.isnan(f_high)):
            if _sign(f_low) * _sign(f_high) <= 0:
                return low, high
        high *= 2
        low = -1 + (1 + low) / 2

    return None


def _bisect(amounts: np.ndarray, years: np.ndarray, low: float, high: float):
    """Return (rate, iterations) or (None, iterations) if the cap is hit."""
    f_low = _xnpv(low, amounts, years)
    if f_low == 0:
        return low, 0
    if _xnpv(high, amounts, years) == 0:
        return high, 0

    for iteration in range(1, MAX_BISECTION_ITERATIONS + 1):
        mid = (low + high) / 2
        f_mid = _xnpv(mid, amounts, years)

        if abs(f_mid) < NPV_TOLERANCE or (high - low) / 2 < RATE_TOLERANCE:
            return mid, iteration

        if _sign(f_mid) == _sign(f_low):
            low, f_low = mid, f_mid
        else:
            high = mid

    return None, MAX_BISECTION_ITERATIONS


def xirr(cash_flows: Sequence[CashFlow], guess: float = DEFAULT_GUESS) -> XirrResult:
    """
    Calculate XIRR (IRR with specific dates).

    Args:
        cash_flows: Dated cash flows in any order (negative = invested)
        guess: Initial Newton guess (default 0.1 = 10%)

    Returns:
        XirrResult. status is `converged` with the annual rate as a decimal,
        `insufficient_sign_variation` when the flows lack both an outflow and
        an inflow, or `non_convergent` when all flows fall on one date or
        neither Newton nor bisection reached tolerance.

    Raises:
        InvalidInputError: If no cash flows are given, a date is a datetime,
            or an amount is not finite
    """
    if not cash_flows:
        raise InvalidInputError("At least 1 cash flow required")
    for cf in cash_flows:
        if isinstance(cf.date, datetime) or not isinstance(cf.date, date):
            raise InvalidInputError("Cash flow dates must be dates without a time of day")
        require_number("amount", cf.amount)
    guess = require_number("guess", guess)
    if guess <= -1:
        raise InvalidInputError("guess must be greater than -1")

    start = min(cf.date for cf in cash_flows)
    end = max(cf.date for cf in cash_flows)
    span = dict(span_days=days_between(start, end), span_months=months_between(start, end))

    has_positive = any(cf.amount > 0 for cf in cash_flows)
    has_negative = any(cf.amount < 0 for cf in cash_flows)

    if not has_positive or not has_negative:
        return XirrResult(status=XirrStatus.insufficient_sign_variation, **span)

    if span["span_days"] == 0:
        # Every flow shares one date, so NPV does not depend on the rate
        return XirrResult(status=XirrStatus.non_convergent, **span)

    amounts = _amounts(cash_flows)
    years = _year_fractions(cash_flows)

    rate, newton_iterations = _newton(amounts, years, guess)
    if rate is not None:
        return XirrResult(
            status=XirrStatus.converged,
            rate=rate,
            iterations=newton_iterations,
            method="newton",
            **span,
        )

    bracket = _find_bracket(amounts, years)
    if bracket is None:
        return XirrResult(
            status=XirrStatus.non_convergent, iterations=newton_iterations, **span
        )

    rate, bisection_iterations = _bisect(amounts, years, *bracket)
    iterations = newton_iterations + bisection_iterations
    if rate is None:
        return XirrResult(status=XirrStatus.non_convergent, iterations=iterations, **span)

    return XirrResult(
        status=XirrStatus.converged,
        rate=rate,
        iterations=iterations,
        method="bisection",
        **span,
    )


def cash_flows_from_pairs(pairs: Sequence[tuple]) -> List[CashFlow]:
    """Build CashFlow records from (date, amount) pairs."""
    return [CashFlow(date=d, amount=amount) for d, amount in pairs]
