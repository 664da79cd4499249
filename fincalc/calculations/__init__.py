"""
Financial Calculation Engine

Pure calculation modules for the personal-finance calculators.
Every function takes plain scalars and returns a fresh, immutable result.
"""

from fincalc.calculations import amortization, dates, goal, growth, irr, withdrawal
from fincalc.calculations.errors import CalculationError, InvalidInputError

__all__ = [
    "amortization",
    "dates",
    "goal",
    "growth",
    "irr",
    "withdrawal",
    "CalculationError",
    "InvalidInputError",
]
