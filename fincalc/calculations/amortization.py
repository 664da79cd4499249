"""
Loan Amortization Calculations

Implements EMI (equated monthly instalment) and amortization schedule
calculations, matching Excel's PMT, IPMT, and PPMT functions.
Rates are annual percentages (e.g., 9 for 9%).
"""

from typing import Tuple
from dataclasses import dataclass

from fincalc.calculations.errors import InvalidInputError
from fincalc.calculations.validation import (
    require_non_negative,
    require_positive,
    require_whole_number,
)


@dataclass(frozen=True)
class ScheduleRow:
    """One repayment period of an amortization schedule."""

    period: int  # 1-based month number
    opening_balance: float
    payment: float
    principal: float
    interest: float
    closing_balance: float


@dataclass(frozen=True)
class AmortizationResult:
    """EMI summary and the full repayment schedule."""

    payment: float
    total_interest: float
    total_payment: float
    schedule: Tuple[ScheduleRow, ...]


def monthly_rate(annual_rate_pct: float) -> float:
    """Convert an annual percentage rate to a monthly decimal rate."""
    return annual_rate_pct / 12 / 100


def calculate_payment(
    principal: float, annual_rate_pct: float, tenure_months: int
) -> float:
    """
    Calculate the monthly loan payment (EMI).

    Matches Excel's PMT() function.

    Args:
        principal: Loan principal amount
        annual_rate_pct: Annual interest rate in percent (e.g., 9 for 9%)
        tenure_months: Total repayment period in months

    Returns:
        Monthly payment amount (positive number)

    Raises:
        InvalidInputError: If principal or tenure is not positive, or rate is negative
    """
    principal = require_positive("principal", principal)
    annual_rate_pct = require_non_negative("annual_rate_pct", annual_rate_pct)
    tenure_months = require_whole_number("tenure_months", tenure_months)

    rate = monthly_rate(annual_rate_pct)

    if rate == 0:
        return principal / tenure_months

    growth = (1 + rate) ** tenure_months
    return principal * rate * growth / (growth - 1)


def calculate_remaining_balance(
    principal: float,
    annual_rate_pct: float,
    tenure_months: int,
    payments_completed: int,
) -> float:
    """Calculate the outstanding balance after N payments."""
    payment = calculate_payment(principal, annual_rate_pct, tenure_months)
    if isinstance(payments_completed, bool) or not isinstance(payments_completed, int):
        raise InvalidInputError("payments_completed must be a whole number")
    if payments_completed < 0:
        raise InvalidInputError("payments_completed must not be negative")
    if payments_completed >= tenure_months:
        return 0.0

    rate = monthly_rate(annual_rate_pct)

    if rate == 0:
        return max(0.0, principal - payment * payments_completed)

    balance = principal * ((1 + rate) ** payments_completed) - payment * (
        ((1 + rate) ** payments_completed - 1) / rate
    )

    return max(0.0, balance)


def amortize(
    principal: float, annual_rate_pct: float, tenure_months: int
) -> AmortizationResult:
    """
    Generate an EMI amortization schedule.

    Each period's interest is charged on the opening balance. The final
    period repays whatever balance remains, so the schedule always closes
    at exactly zero and small floating-point residue ends up in the last
    payment.

    Args:
        principal: Loan principal amount
        annual_rate_pct: Annual interest rate in percent
        tenure_months: Repayment period in months

    Returns:
        AmortizationResult with the EMI, totals and one row per month
    """
    payment = calculate_payment(principal, annual_rate_pct, tenure_months)
    rate = monthly_rate(annual_rate_pct)

    schedule = []
    balance = float(principal)
    total_interest = 0.0
    total_payment = 0.0

    for period in range(1, tenure_months + 1):
        interest = balance * rate

        if period == tenure_months:
            # Absorb rounding residue
            principal_pmt = balance
        else:
            principal_pmt = min(payment - interest, balance)

        period_payment = principal_pmt + interest
        closing = 0.0 if period == tenure_months else max(0.0, balance - principal_pmt)

        schedule.append(
            ScheduleRow(
                period=period,
                opening_balance=balance,
                payment=period_payment,
                principal=principal_pmt,
                interest=interest,
                closing_balance=closing,
            )
        )

        total_interest += interest
        total_payment += period_payment
        balance = closing

    return AmortizationResult(
        payment=payment,
        total_interest=total_interest,
        total_payment=total_payment,
        schedule=tuple(schedule),
    )
