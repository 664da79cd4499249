"""
Calculation Errors

Exceptions raised at the engine boundary when inputs are outside the domain
of a calculator. Expected solver outcomes (for example an XIRR that cannot be
bracketed) are returned as result values instead.
"""


class CalculationError(ValueError):
    """Base class for calculation engine errors."""


class InvalidInputError(CalculationError):
    """Raised when an input fails range, sign, or type validation."""
