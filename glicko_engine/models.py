"""
Value types for the Glicko-2 engine.

Player values are stored as exact decimals so they survive a round trip
through storage unchanged; all calculation happens on floats after
conversion to the Glicko-2 scale (see scaling.py).

Attributes follow Professor Mark Glickman's paper:
"Example of the Glicko-2 system" (2013)
http://www.glicko.net/glicko/glicko2.pdf
"""

import math
import numbers
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation, getcontext, localcontext
from enum import Enum
from typing import Tuple, Type, Union

from .errors import InvalidParameters, InvalidPlayerState


Number = Union[Decimal, int, float, str]


# Constants from Glickman paper
GLICKO2_SCALE = 173.7178  # Conversion factor between Glicko and Glicko-2 scales
DEFAULT_RATING = 1500
DEFAULT_RD = 350
DEFAULT_VOLATILITY = 0.06
DEFAULT_TAU = 0.5  # System constant - constrains volatility change
CONVERGENCE_TOLERANCE = 0.000001
MAX_ITERATIONS = 10000


def to_decimal(value: Number, name: str, error: Type[ValueError] = InvalidPlayerState) -> Decimal:
    """
    Convert a number to Decimal without picking up binary float noise.

    Floats go through their shortest repr, so 0.06 becomes Decimal("0.06")
    rather than 0.059999999999999997779553950749686919152736663818359375.
    numpy scalars are read as the plain int or float they hold.
    """
    if isinstance(value, bool):
        raise error(f"{name} must be a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, numbers.Integral):
        result = Decimal(int(value))
    elif isinstance(value, numbers.Real):
        result = Decimal(repr(float(value)))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise error(f"{name} is not a valid number: {value!r}") from None
    else:
        raise error(f"{name} must be a number, got {type(value).__name__}")

    if not result.is_finite():
        raise error(f"{name} must be finite, got {value!r}")
    return result


def exact_context(*values: Decimal):
    """
    Decimal context in which r ± z·d over the given values is not rounded.

    The default context keeps 28 significant digits, fewer than a result
    rounded to many decimal places can carry.
    """
    context = getcontext().copy()
    needed = sum(abs(v.adjusted()) + abs(v.as_tuple().exponent) for v in values) + 3
    context.prec = max(context.prec, needed)
    return localcontext(context)


@dataclass(frozen=True)
class Player:
    """
    A player's rating in display (Glicko) units.

    Attributes:
        rating: "r" in the paper
        deviation: "RD" in the paper, must be positive
        volatility: "σ" in the paper, must be positive
    """
    rating: Decimal
    deviation: Decimal
    volatility: Decimal

    def __post_init__(self):
        rating = to_decimal(self.rating, "rating")
        deviation = to_decimal(self.deviation, "deviation")
        volatility = to_decimal(self.volatility, "volatility")

        if deviation <= 0:
            raise InvalidPlayerState(f"deviation must be positive, got {deviation}")
        if volatility <= 0:
            raise InvalidPlayerState(f"volatility must be positive, got {volatility}")

        object.__setattr__(self, "rating", rating)
        object.__setattr__(self, "deviation", deviation)
        object.__setattr__(self, "volatility", volatility)

    @property
    def rating_low(self) -> Decimal:
        """Lowest value of the 95% confidence interval."""
        return self.confidence_interval()[0]

    @property
    def rating_high(self) -> Decimal:
        """Highest value of the 95% confidence interval."""
        return self.confidence_interval()[1]

    def confidence_interval(self, z: Number = 2) -> Tuple[Decimal, Decimal]:
        """
        Calculate a confidence interval for the rating.

        Args:
            z: Multiple of the deviation (2 ≈ 95%, the band used by
               rating_low/rating_high)

        Returns:
            Tuple of (lower_bound, upper_bound)
        """
        z = to_decimal(z, "z", ValueError)
        with exact_context(self.rating, self.deviation, z):
            margin = z * self.deviation
            return (self.rating - margin, self.rating + margin)

    def __str__(self) -> str:
        return f"Rating: {self.rating} ± {self.deviation} (95% CI: {self.rating_low}-{self.rating_high}), σ={self.volatility}"


class Outcome(Enum):
    """Result of a game from the rated player's point of view."""
    WIN = "win"
    DRAW = "draw"
    LOSS = "loss"

    @property
    def score(self) -> float:
        return _SCORES[self]


_SCORES = {
    Outcome.WIN: 1.0,
    Outcome.DRAW: 0.5,
    Outcome.LOSS: 0.0,
}


@dataclass(frozen=True)
class Game:
    """A game against an opponent and its outcome."""
    outcome: Outcome
    opponent: Player

    def __post_init__(self):
        if not isinstance(self.outcome, Outcome):
            raise TypeError(f"outcome must be an Outcome, got {self.outcome!r}")
        if not isinstance(self.opponent, Player):
            raise TypeError(f"opponent must be a Player, got {type(self.opponent).__name__}")

    @property
    def score(self) -> float:
        """1 for a win, 0.5 for a draw, 0 for a loss."""
        return self.outcome.score

    @classmethod
    def win(cls, opponent: Player) -> 'Game':
        return cls(Outcome.WIN, opponent)

    @classmethod
    def draw(cls, opponent: Player) -> 'Game':
        return cls(Outcome.DRAW, opponent)

    @classmethod
    def loss(cls, opponent: Player) -> 'Game':
        return cls(Outcome.LOSS, opponent)


def _positive_float(value, name: str) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise InvalidParameters(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(result) or result <= 0:
        raise InvalidParameters(f"{name} must be a positive finite number, got {value!r}")
    return result


def _non_negative_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidParameters(f"{name} must be a non-negative integer, got {value!r}")
    return value


@dataclass(frozen=True)
class Parameters:
    """
    Calculation parameters, generally the same for every update.

    Attributes:
        tau: "τ", constrains the change in volatility over time
        epsilon: "ε", convergence tolerance of the volatility solver
        scale: 173.7178, conversion factor between Glicko and Glicko-2 scales
        default_rating: "r" of a new player
        default_deviation: "RD" of a new player
        default_volatility: "σ" of a new player
        rating_scale: digits after the decimal point in a result rating
        deviation_scale: digits after the decimal point in a result deviation
        sigma_scale: digits after the decimal point in a result volatility
        max_iterations: cap on volatility solver iterations
    """
    # System constants
    tau: float = DEFAULT_TAU
    epsilon: float = CONVERGENCE_TOLERANCE
    scale: float = GLICKO2_SCALE

    # Values for a new player
    default_rating: Decimal = Decimal(DEFAULT_RATING)
    default_deviation: Decimal = Decimal(DEFAULT_RD)
    default_volatility: Decimal = Decimal(repr(DEFAULT_VOLATILITY))

    # Decimal places of the result
    rating_scale: int = 2
    deviation_scale: int = 2
    sigma_scale: int = 6

    max_iterations: int = MAX_ITERATIONS

    def __post_init__(self):
        object.__setattr__(self, "tau", _positive_float(self.tau, "tau"))
        object.__setattr__(self, "epsilon", _positive_float(self.epsilon, "epsilon"))
        object.__setattr__(self, "scale", _positive_float(self.scale, "scale"))

        for name in ("default_rating", "default_deviation", "default_volatility"):
            object.__setattr__(self, name, to_decimal(getattr(self, name), name, InvalidParameters))
        if self.default_deviation <= 0:
            raise InvalidParameters(f"default_deviation must be positive, got {self.default_deviation}")
        if self.default_volatility <= 0:
            raise InvalidParameters(f"default_volatility must be positive, got {self.default_volatility}")

        for name in ("rating_scale", "deviation_scale", "sigma_scale"):
            _non_negative_int(getattr(self, name), name)
        if _non_negative_int(self.max_iterations, "max_iterations") == 0:
            raise InvalidParameters("max_iterations must be at least 1")

    def replace(self, **changes) -> 'Parameters':
        """Return a copy with the given options changed."""
        return replace(self, **changes)


DEFAULT_PARAMETERS = Parameters()
