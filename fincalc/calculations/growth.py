"""
Growth Projections

Closed-form future-value projections for single and recurring contributions:
lumpsum, fixed deposit, SIP, recurring deposit, PPF, step-up SIP and
pension accumulation.

Recurring contributions use the annuity-due convention: each monthly
contribution is made at the start of its month and compounds for one extra
period,

    FV = A * [((1 + i)^n - 1) / i] * (1 + i)

which degenerates to A * n when i == 0. Series values are produced by
re-evaluating the formula at each elapsed period rather than by running
accumulation, so no floating-point error carries from one point to the next.
"""

from typing import List, Tuple
from dataclasses import dataclass

from fincalc.calculations.errors import InvalidInputError
from fincalc.calculations.validation import (
    periods_in,
    require_non_negative,
    require_positive,
    require_rate,
)

MONTHS_PER_YEAR = 12
DEFAULT_FD_COMPOUNDING = 4  # Quarterly
DEFAULT_ANNUITY_SHARE_PCT = 60.0
PPF_TENURE_YEARS = 15

FREQUENCIES = ("monthly", "yearly")


@dataclass(frozen=True)
class GrowthPoint:
    """Projected position at the end of a period."""

    period: int  # Months for monthly series, years for yearly series
    contributed: float  # Cumulative amount invested so far
    value: float  # Projected corpus
    withdrawn: float = 0.0  # Cumulative withdrawals (SWP only)


@dataclass(frozen=True)
class GrowthResult:
    """Maturity summary for recurring contributions."""

    maturity: float
    total_invested: float
    gains: float
    series: Tuple[GrowthPoint, ...]


@dataclass(frozen=True)
class LumpsumResult:
    """Maturity summary for a single contribution."""

    future_value: float
    total_invested: float
    gains: float
    series: Tuple[GrowthPoint, ...]


@dataclass(frozen=True)
class PensionResult:
    """Pension accumulation and the annuity it buys at retirement."""

    corpus: float
    total_invested: float
    gains: float
    annuity_corpus: float
    lumpsum_withdrawal: float
    estimated_monthly_pension: float
    series: Tuple[GrowthPoint, ...]


def compound_factor(rate: float, periods: int) -> float:
    """Growth of one unit after `periods` compounding steps at `rate`."""
    return (1 + rate) ** periods


def annuity_due_factor(rate: float, periods: int) -> float:
    """Future value of one unit paid at the start of each of `periods` periods."""
    if periods <= 0:
        return 0.0
    if rate == 0:
        return float(periods)
    return ((1 + rate) ** periods - 1) / rate * (1 + rate)


def sip_future_value(amount: float, rate: float, periods: int) -> float:
    """Future value of a recurring contribution (annuity-due)."""
    return amount * annuity_due_factor(rate, periods)


def series_checkpoints(total_months: int, frequency: str) -> List[int]:
    """Month offsets at which series points are emitted."""
    if frequency not in FREQUENCIES:
        raise InvalidInputError(f"frequency must be one of {', '.join(FREQUENCIES)}")
    if frequency == "monthly":
        return list(range(1, total_months + 1))
    points = list(range(MONTHS_PER_YEAR, total_months + 1, MONTHS_PER_YEAR))
    if not points or points[-1] != total_months:
        # Final partial year
        points.append(total_months)
    return points


def series_index(month: int, frequency: str) -> int:
    if frequency == "monthly":
        return month
    return -(-month // MONTHS_PER_YEAR)


def _project_compound(
    principal: float,
    annual_rate_pct: float,
    years: float,
    compounding_per_year: int,
    frequency: str,
) -> LumpsumResult:
    principal = require_positive("principal", principal)
    annual_rate_pct = require_rate("annual_rate_pct", annual_rate_pct)
    years = require_positive("years", years)
    if (
        isinstance(compounding_per_year, bool)
        or not isinstance(compounding_per_year, int)
        or not 1 <= compounding_per_year <= MONTHS_PER_YEAR
    ):
        raise InvalidInputError("compounding_per_year must be a whole number from 1 to 12")

    rate = annual_rate_pct / 100 / compounding_per_year
    total_months = periods_in(years, MONTHS_PER_YEAR)
    total_steps = total_months * compounding_per_year // MONTHS_PER_YEAR
    if total_steps < 1:
        raise InvalidInputError("years must cover at least one compounding period")

    series = []
    for month in series_checkpoints(total_months, frequency):
        # Interest is credited only at completed compounding boundaries
        steps = month * compounding_per_year // MONTHS_PER_YEAR
        series.append(
            GrowthPoint(
                period=series_index(month, frequency),
                contributed=principal,
                value=principal * compound_factor(rate, steps),
            )
        )

    future_value = principal * compound_factor(rate, total_steps)
    return LumpsumResult(
        future_value=future_value,
        total_invested=principal,
        gains=future_value - principal,
        series=tuple(series),
    )


def project_lumpsum(
    principal: float,
    annual_rate_pct: float,
    years: float,
    compounding_per_year: int = MONTHS_PER_YEAR,
    frequency: str = "yearly",
) -> LumpsumResult:
    """
    Project a one-time investment.

    FV = P * (1 + r/k)^(k*t)

    Args:
        principal: Amount invested today
        annual_rate_pct: Expected annual return in percent
        years: Investment horizon in years
        compounding_per_year: Compounding frequency k (12 = monthly, 1 = annual)
        frequency: Series granularity, 'monthly' or 'yearly'

    Returns:
        LumpsumResult with future value, gains and series
    """
    return _project_compound(
        principal, annual_rate_pct, years, compounding_per_year, frequency
    )


def project_fixed_deposit(
    principal: float,
    annual_rate_pct: float,
    years: float,
    compounding_per_year: int = DEFAULT_FD_COMPOUNDING,
    frequency: str = "yearly",
) -> LumpsumResult:
    """Project a fixed deposit; banks compound quarterly unless told otherwise."""
    return _project_compound(
        principal, annual_rate_pct, years, compounding_per_year, frequency
    )


def _project_annuity(
    monthly_amount: float, annual_rate_pct: float, years: float, frequency: str
) -> GrowthResult:
    monthly_amount = require_positive("monthly_amount", monthly_amount)
    annual_rate_pct = require_rate("annual_rate_pct", annual_rate_pct)
    years = require_positive("years", years)

    rate = annual_rate_pct / MONTHS_PER_YEAR / 100
    total_months = periods_in(years, MONTHS_PER_YEAR)

    series = tuple(
        GrowthPoint(
            period=series_index(month, frequency),
            contributed=monthly_amount * month,
            value=sip_future_value(monthly_amount, rate, month),
        )
        for month in series_checkpoints(total_months, frequency)
    )

    maturity = sip_future_value(monthly_amount, rate, total_months)
    total_invested = monthly_amount * total_months
    return GrowthResult(
        maturity=maturity,
        total_invested=total_invested,
        gains=maturity - total_invested,
        series=series,
    )


def project_sip(
    monthly_amount: float,
    annual_rate_pct: float,
    years: float,
    frequency: str = "yearly",
) -> GrowthResult:
    """
    Project a monthly SIP (systematic investment plan).

    Args:
        monthly_amount: Contribution made at the start of every month
        annual_rate_pct: Expected annual return in percent
        years: Investment horizon in years
        frequency: Series granularity, 'monthly' or 'yearly'

    Returns:
        GrowthResult with maturity value, total invested, gains and series
    """
    return _project_annuity(monthly_amount, annual_rate_pct, years, frequency)


def project_recurring_deposit(
    monthly_amount: float,
    annual_rate_pct: float,
    years: float,
    frequency: str = "yearly",
) -> GrowthResult:
    """Project a recurring deposit with monthly instalments."""
    return _project_annuity(monthly_amount, annual_rate_pct, years, frequency)


def project_ppf(
    monthly_amount: float,
    annual_rate_pct: float,
    years: float = PPF_TENURE_YEARS,
    frequency: str = "yearly",
) -> GrowthResult:
    """
    Project a Public Provident Fund account.

    PPF interest is declared annually but accrues on the monthly balance, so
    deposits are modelled monthly at annual_rate_pct / 12. The declared rate
    is never negative.
    """
    annual_rate_pct = require_non_negative("annual_rate_pct", annual_rate_pct)
    return _project_annuity(monthly_amount, annual_rate_pct, years, frequency)


def project_step_up_sip(
    base_amount: float,
    annual_rate_pct: float,
    years: float,
    step_up_pct: float,
    frequency: str = "yearly",
) -> GrowthResult:
    """
    Project a SIP whose contribution rises by a fixed percentage every year.

    The contribution in year y is A * (1 + s)^(y - 1). Each year is valued as
    the previous year's closing corpus compounded as a lumpsum plus a fresh
    annuity-due of that year's contribution.

    Args:
        base_amount: Monthly contribution in the first year
        annual_rate_pct: Expected annual return in percent
        years: Investment horizon in years
        step_up_pct: Annual contribution increase in percent
        frequency: Series granularity, 'monthly' or 'yearly'
    """
    base_amount = require_positive("base_amount", base_amount)
    annual_rate_pct = require_rate("annual_rate_pct", annual_rate_pct)
    years = require_positive("years", years)
    step_up_pct = require_rate("step_up_pct", step_up_pct)

    rate = annual_rate_pct / MONTHS_PER_YEAR / 100
    step = step_up_pct / 100
    total_months = periods_in(years, MONTHS_PER_YEAR)
    wanted = set(series_checkpoints(total_months, frequency))

    series = []
    opening_value = 0.0
    invested_before = 0.0
    month = 0
    year = 0

    while month < total_months:
        year += 1
        amount = base_amount * (1 + step) ** (year - 1)
        months_this_year = min(MONTHS_PER_YEAR, total_months - month)

        for m in range(1, months_this_year + 1):
            if month + m in wanted:
                value = opening_value * compound_factor(rate, m) + sip_future_value(
                    amount, rate, m
                )
                series.append(
                    GrowthPoint(
                        period=series_index(month + m, frequency),
                        contributed=invested_before + amount * m,
                        value=value,
                    )
                )

        opening_value = opening_value * compound_factor(
            rate, months_this_year
        ) + sip_future_value(amount, rate, months_this_year)
        invested_before += amount * months_this_year
        month += months_this_year

    return GrowthResult(
        maturity=opening_value,
        total_invested=invested_before,
        gains=opening_value - invested_before,
        series=tuple(series),
    )


def project_pension(
    monthly_amount: float,
    years: float,
    annual_rate_pct: float,
    annuity_rate_pct: float,
    annuity_share_pct: float = DEFAULT_ANNUITY_SHARE_PCT,
    frequency: str = "yearly",
) -> PensionResult:
    """
    Project a pension (NPS-style) corpus and the monthly pension it funds.

    The corpus accumulates like a SIP. At retirement `annuity_share_pct` of it
    buys an annuity paying annuity_rate_pct a year; the rest is withdrawn.
    """
    annuity_rate_pct = require_non_negative("annuity_rate_pct", annuity_rate_pct)
    annuity_share_pct = require_non_negative("annuity_share_pct", annuity_share_pct)
    if not 0 <= annuity_share_pct <= 100:
        raise InvalidInputError("annuity_share_pct must be between 0 and 100")

    accumulation = _project_annuity(monthly_amount, annual_rate_pct, years, frequency)
    annuity_corpus = accumulation.maturity * annuity_share_pct / 100

    return PensionResult(
        corpus=accumulation.maturity,
        total_invested=accumulation.total_invested,
        gains=accumulation.gains,
        annuity_corpus=annuity_corpus,
        lumpsum_withdrawal=accumulation.maturity - annuity_corpus,
        estimated_monthly_pension=annuity_corpus * annuity_rate_pct / 100 / MONTHS_PER_YEAR,
        series=accumulation.series,
    )
