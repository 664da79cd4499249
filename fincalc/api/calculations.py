"""
Calculator API endpoints.

These endpoints accept calculator inputs and return the engine's result
records as JSON. Used by the web front end for real-time updates.
"""

import logging
from dataclasses import asdict
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from fincalc.calculations import amortization, goal, growth, irr, withdrawal
from fincalc.calculations.errors import InvalidInputError
from fincalc.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_years(years: float) -> None:
    limit = get_settings().max_projection_years
    if years > limit:
        logger.info("Rejected horizon of %s years (limit %s)", years, limit)
        raise HTTPException(
            status_code=400, detail=f"years must not exceed {limit}"
        )


def _calculate(calculator, *args, **kwargs):
    """Run a calculator, translating input errors into 400 responses."""
    try:
        return calculator(*args, **kwargs)
    except InvalidInputError as e:
        logger.info("Rejected %s input: %s", calculator.__name__, e)
        raise HTTPException(status_code=400, detail=str(e))


class EmiInput(BaseModel):
    """Input for EMI calculation."""

    principal: float
    annual_rate_pct: float
    tenure_months: int


@router.post("/emi")
async def calculate_emi(inputs: EmiInput):
    """Calculate EMI and the amortization schedule."""
    limit = get_settings().max_tenure_months
    if inputs.tenure_months > limit:
        logger.info("Rejected tenure of %s months (limit %s)", inputs.tenure_months, limit)
        raise HTTPException(
            status_code=400, detail=f"tenure_months must not exceed {limit}"
        )

    result = _calculate(
        amortization.amortize,
        inputs.principal,
        inputs.annual_rate_pct,
        inputs.tenure_months,
    )
    return asdict(result)


class LumpsumInput(BaseModel):
    """Input for lumpsum and fixed deposit projections."""

    principal: float
    annual_rate_pct: float
    years: float
    compounding_per_year: Optional[int] = None
    frequency: str = "yearly"


@router.post("/lumpsum")
async def calculate_lumpsum(inputs: LumpsumInput):
    """Project a one-time investment."""
    _check_years(inputs.years)
    result = _calculate(
        growth.project_lumpsum,
        inputs.principal,
        inputs.annual_rate_pct,
        inputs.years,
        compounding_per_year=(
            growth.MONTHS_PER_YEAR
            if inputs.compounding_per_year is None
            else inputs.compounding_per_year
        ),
        frequency=inputs.frequency,
    )
    return asdict(result)


@router.post("/fixed-deposit")
async def calculate_fixed_deposit(inputs: LumpsumInput):
    """Project a fixed deposit (quarterly compounding by default)."""
    _check_years(inputs.years)
    result = _calculate(
        growth.project_fixed_deposit,
        inputs.principal,
        inputs.annual_rate_pct,
        inputs.years,
        compounding_per_year=(
            growth.DEFAULT_FD_COMPOUNDING
            if inputs.compounding_per_year is None
            else inputs.compounding_per_year
        ),
        frequency=inputs.frequency,
    )
    return asdict(result)


class SipInput(BaseModel):
    """Input for SIP, recurring deposit and PPF projections."""

    monthly_amount: float
    annual_rate_pct: float
    years: float
    frequency: str = "yearly"


@router.post("/sip")
async def calculate_sip(inputs: SipInput):
    """Project a monthly SIP."""
    _check_years(inputs.years)
    result = _calculate(
        growth.project_sip,
        inputs.monthly_amount,
        inputs.annual_rate_pct,
        inputs.years,
        frequency=inputs.frequency,
    )
    return asdict(result)


@router.post("/recurring-deposit")
async def calculate_recurring_deposit(inputs: SipInput):
    """Project a recurring deposit."""
    _check_years(inputs.years)
    result = _calculate(
        growth.project_recurring_deposit,
        inputs.monthly_amount,
        inputs.annual_rate_pct,
        inputs.years,
        frequency=inputs.frequency,
    )
    return asdict(result)


@router.post("/ppf")
async def calculate_ppf(inputs: SipInput):
    """Project a Public Provident Fund account."""
    _check_years(inputs.years)
    result = _calculate(
        growth.project_ppf,
        inputs.monthly_amount,
        inputs.annual_rate_pct,
        inputs.years,
        frequency=inputs.frequency,
    )
    return asdict(result)


class StepUpSipInput(SipInput):
    """Input for step-up SIP projection."""

    step_up_pct: float = 10.0


@router.post("/step-up-sip")
async def calculate_step_up_sip(inputs: StepUpSipInput):
    """Project a SIP with an annual contribution increase."""
    _check_years(inputs.years)
    result = _calculate(
        growth.project_step_up_sip,
        inputs.monthly_amount,
        inputs.annual_rate_pct,
        inputs.years,
        inputs.step_up_pct,
        frequency=inputs.frequency,
    )
    return asdict(result)


class PensionInput(BaseModel):
    """Input for pension (NPS) projection."""

    monthly_amount: float
    years: float
    annual_rate_pct: float
    annuity_rate_pct: float
    annuity_share_pct: float = growth.DEFAULT_ANNUITY_SHARE_PCT
    frequency: str = "yearly"


@router.post("/pension")
async def calculate_pension(inputs: PensionInput):
    """Project a pension corpus and estimated monthly pension."""
    _check_years(inputs.years)
    result = _calculate(
        growth.project_pension,
        inputs.monthly_amount,
        inputs.years,
        inputs.annual_rate_pct,
        inputs.annuity_rate_pct,
        annuity_share_pct=inputs.annuity_share_pct,
        frequency=inputs.frequency,
    )
    return asdict(result)


class GoalInput(BaseModel):
    """Input for goal planning."""

    goal_today: float
    years: float
    inflation_pct: float
    return_pct: float
    frequency: str = "yearly"


@router.post("/goal")
async def calculate_goal(inputs: GoalInput):
    """Calculate the SIP or lumpsum needed for an inflation-adjusted goal."""
    _check_years(inputs.years)
    result = _calculate(
        goal.plan_goal,
        inputs.goal_today,
        inputs.years,
        inputs.inflation_pct,
        inputs.return_pct,
        frequency=inputs.frequency,
    )
    return asdict(result)


class SwpInput(BaseModel):
    """Input for systematic withdrawal simulation."""

    corpus: float
    monthly_withdrawal: float
    annual_rate_pct: float
    years: float


@router.post("/swp")
async def calculate_swp(inputs: SwpInput):
    """Simulate monthly withdrawals from a corpus."""
    _check_years(inputs.years)
    result = _calculate(
        withdrawal.simulate_swp,
        inputs.corpus,
        inputs.monthly_withdrawal,
        inputs.annual_rate_pct,
        inputs.years,
    )
    response = asdict(result)
    response["survives_horizon"] = result.survives_horizon
    return response


class CashFlowInput(BaseModel):
    """A single dated cash flow."""

    date: date
    amount: float


class XirrInput(BaseModel):
    """Input for XIRR calculation."""

    cash_flows: List[CashFlowInput]
    guess: float = irr.DEFAULT_GUESS


class XirrResponse(BaseModel):
    """Response with XIRR calculation."""

    status: irr.XirrStatus
    rate: Optional[float] = None
    rate_percent: Optional[float] = None
    iterations: int
    method: Optional[str] = None
    span_days: int
    span_months: int


@router.post("/xirr", response_model=XirrResponse)
async def calculate_xirr(inputs: XirrInput):
    """Calculate XIRR for dated cash flows."""
    limit = get_settings().max_cash_flows
    if len(inputs.cash_flows) > limit:
        logger.info("Rejected %s cash flows (limit %s)", len(inputs.cash_flows), limit)
        raise HTTPException(
            status_code=400, detail=f"At most {limit} cash flows allowed"
        )

    cash_flows = irr.cash_flows_from_pairs(
        [(cf.date, cf.amount) for cf in inputs.cash_flows]
    )
    result = _calculate(irr.xirr, cash_flows, guess=inputs.guess)

    if not result.converged:
        logger.warning(
            "XIRR not solved for %s cash flows: %s",
            len(cash_flows),
            result.status.value,
        )

    return XirrResponse(
        status=result.status,
        rate=result.rate,
        rate_percent=result.rate_percent,
        iterations=result.iterations,
        method=result.method,
        span_days=result.span_days,
        span_months=result.span_months,
    )
