"""
Exceptions raised by the Glicko-2 engine.

The engine is a total function over well-formed inputs, so these only
surface for malformed players or parameters, when the volatility
solver exceeds its iteration cap, or when a rating gap is so large that
the variance of the period is no longer a finite float.
"""


class Glicko2Error(Exception):
    """Base class for all engine errors."""


class InvalidPlayerState(Glicko2Error, ValueError):
    """A player's rating, deviation or volatility is outside its valid range."""


class InvalidParameters(Glicko2Error, ValueError):
    """A calculation parameter is missing, malformed or out of range."""


class SolverDidNotConverge(Glicko2Error, RuntimeError):
    """The volatility solver hit its iteration cap."""

    def __init__(self, message: str, iterations: int):
        super().__init__(message)
        self.iterations = iterations


class NumericalRangeError(Glicko2Error, ArithmeticError):
    """The games push the update beyond floating-point range."""
