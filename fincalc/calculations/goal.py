"""
Goal Planning

Works the growth formulas backwards: given a target in today's money, find
the monthly SIP or one-time investment that reaches its inflated value.

The inversion must use exactly the factors the projections use
(`annuity_due_factor` and `compound_factor` from growth), otherwise
projecting the required amounts forward would miss the goal.
"""

from typing import Tuple
from dataclasses import dataclass

from fincalc.calculations.errors import InvalidInputError
from fincalc.calculations.growth import (
    MONTHS_PER_YEAR,
    series_checkpoints,
    series_index,
    annuity_due_factor,
    compound_factor,
)
from fincalc.calculations.validation import (
    periods_in,
    require_positive,
    require_rate,
)


@dataclass(frozen=True)
class GoalPoint:
    """Corpus needed at the end of a period to stay on track for the goal."""

    period: int  # Months for monthly series, years for yearly series
    required_corpus: float


@dataclass(frozen=True)
class GoalResult:
    inflated_goal: float
    required_sip: float
    required_lumpsum: float
    series: Tuple[GoalPoint, ...]


def inflate(amount: float, inflation_pct: float, years: float) -> float:
    """Value of today's amount after `years` of inflation."""
    return amount * (1 + inflation_pct / 100) ** years


def plan_goal(
    goal_today: float,
    years: float,
    inflation_pct: float,
    return_pct: float,
    compounding_per_year: int = MONTHS_PER_YEAR,
    frequency: str = "yearly",
) -> GoalResult:
    """
    Calculate the investment needed to reach an inflation-adjusted goal.

    Args:
        goal_today: Goal amount in today's money
        years: Years until the goal is due
        inflation_pct: Expected annual inflation in percent
        return_pct: Expected annual return in percent
        compounding_per_year: Compounding frequency assumed for the lumpsum
            (12 = monthly, matching project_lumpsum defaults)
        frequency: Series granularity, 'monthly' or 'yearly'

    Returns:
        GoalResult with the inflated goal, required monthly SIP,
        required one-time investment and the required-corpus glide path

    Raises:
        InvalidInputError: If the goal or horizon is not positive, or a rate is below -100%
    """
    goal_today = require_positive("goal_today", goal_today)
    years = require_positive("years", years)
    inflation_pct = require_rate("inflation_pct", inflation_pct)
    return_pct = require_rate("return_pct", return_pct)
    if (
        isinstance(compounding_per_year, bool)
        or not isinstance(compounding_per_year, int)
        or not 1 <= compounding_per_year <= MONTHS_PER_YEAR
    ):
        raise InvalidInputError("compounding_per_year must be a whole number from 1 to 12")

    months = periods_in(years, MONTHS_PER_YEAR)
    steps = months * compounding_per_year // MONTHS_PER_YEAR
    if steps < 1:
        raise InvalidInputError("years must cover at least one compounding period")

    monthly_return = return_pct / MONTHS_PER_YEAR / 100
    inflated_goal = inflate(goal_today, inflation_pct, years)

    sip_factor = annuity_due_factor(monthly_return, months)
    lumpsum_factor = compound_factor(return_pct / 100 / compounding_per_year, steps)
    if sip_factor <= 0 or lumpsum_factor <= 0:
        # Only reachable at a -100% return
        raise InvalidInputError("return_pct leaves no growth to invert")

    # Corpus needed at each checkpoint to grow into the goal by month n
    series = tuple(
        GoalPoint(
            period=series_index(month, frequency),
            required_corpus=inflated_goal / compound_factor(monthly_return, months - month),
        )
        for month in series_checkpoints(months, frequency)
    )

    return GoalResult(
        inflated_goal=inflated_goal,
        required_sip=inflated_goal / sip_factor,
        required_lumpsum=inflated_goal / lumpsum_factor,
        series=series,
    )
