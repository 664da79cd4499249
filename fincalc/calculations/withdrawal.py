"""
Systematic Withdrawal Plan (SWP)

Month-by-month simulation of a corpus that earns a return while paying out a
fixed monthly withdrawal. Unlike the growth projections this has no closed
form worth using: growth and withdrawals interact along the path, and the
simulation has to stop the month the corpus runs out.
"""

from typing import Tuple
from dataclasses import dataclass

from fincalc.calculations.growth import MONTHS_PER_YEAR, GrowthPoint
from fincalc.calculations.validation import (
    periods_in,
    require_non_negative,
    require_positive,
)


@dataclass(frozen=True)
class WithdrawalResult:
    """
    Outcome of an SWP simulation.

    `depleted` is False when the corpus lasts the whole horizon; that is a
    normal outcome, not an error.
    """

    months_survived: int
    depleted: bool
    horizon_months: int
    total_withdrawn: float
    total_interest: float
    ending_balance: float
    series: Tuple[GrowthPoint, ...]

    @property
    def survives_horizon(self) -> bool:
        return not self.depleted


def simulate_swp(
    corpus: float,
    monthly_withdrawal: float,
    annual_rate_pct: float,
    years: float,
) -> WithdrawalResult:
    """
    Simulate monthly withdrawals from an invested corpus.

    Each month the balance grows by the monthly rate and then the withdrawal
    is paid. If the grown balance cannot cover the withdrawal, whatever is
    left is paid out, the balance is clamped to zero and the simulation ends;
    that final month still counts towards months_survived.

    Args:
        corpus: Starting balance
        monthly_withdrawal: Amount withdrawn at the end of every month
        annual_rate_pct: Expected annual return in percent
        years: Maximum horizon to simulate

    Returns:
        WithdrawalResult with survival, totals and one point per simulated month
    """
    corpus = require_positive("corpus", corpus)
    monthly_withdrawal = require_positive("monthly_withdrawal", monthly_withdrawal)
    annual_rate_pct = require_non_negative("annual_rate_pct", annual_rate_pct)
    years = require_positive("years", years)

    rate = annual_rate_pct / MONTHS_PER_YEAR / 100
    horizon = periods_in(years, MONTHS_PER_YEAR)

    balance = corpus
    total_withdrawn = 0.0
    total_interest = 0.0
    months_survived = 0
    depleted = False
    series = []

    for month in range(1, horizon + 1):
        interest = balance * rate
        grown = balance + interest
        total_interest += interest

        if grown < monthly_withdrawal:
            # Pay out what is left; terminal state
            total_withdrawn += grown
            balance = 0.0
            depleted = True
        else:
            total_withdrawn += monthly_withdrawal
            balance = grown - monthly_withdrawal
            depleted = balance == 0
        months_survived = month

        series.append(
            GrowthPoint(
                period=month,
                contributed=corpus,
                value=balance,
                withdrawn=total_withdrawn,
            )
        )

        if depleted:
            break

    return WithdrawalResult(
        months_survived=months_survived,
        depleted=depleted,
        horizon_months=horizon,
        total_withdrawn=total_withdrawn,
        total_interest=total_interest,
        ending_balance=balance,
        series=tuple(series),
    )
