"""
Conversion between the Glicko (display) scale and the Glicko-2 scale.

Display values are exact decimals; the Glicko-2 values are floats that
exist only for the duration of one update. Rounding happens exactly once,
in to_display(). Rounding in the middle of the calculation is what puts
the worked example in Glickman's paper at r' = 1464.06: keeping full
precision until the end gives 1464.05.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, localcontext

from .errors import NumericalRangeError
from .models import Parameters, Player


@dataclass(frozen=True)
class Scaled:
    """A player on the Glicko-2 scale (μ, φ, σ)."""
    mu: float
    phi: float
    sigma: float


def round_half_up(number: float, places: int) -> Decimal:
    """
    Round a float to a fixed number of decimal places, half up.

    The float is read through its shortest repr first, so a value like
    2.675 rounds to 2.68 instead of following its binary expansion
    (2.67499999...) down to 2.67. Precision is widened as needed, so any
    number of places works.

    Raises:
        NumericalRangeError: if number is infinite or NaN
    """
    number = float(number)
    if not math.isfinite(number):
        raise NumericalRangeError(f"Cannot represent {number} as a rating value")

    value = Decimal(repr(number))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def to_internal(player: Player, parameters: Parameters) -> Scaled:
    """Convert a player to the Glicko-2 scale."""
    return Scaled(
        mu=(float(player.rating) - float(parameters.default_rating)) / parameters.scale,
        phi=float(player.deviation) / parameters.scale,
        sigma=float(player.volatility),
    )


def to_display(mu: float, phi: float, sigma: float, parameters: Parameters) -> Player:
    """Convert Glicko-2 values back to a display player, rounded per parameters."""
    return Player(
        rating=round_half_up(parameters.scale * mu + float(parameters.default_rating), parameters.rating_scale),
        deviation=round_half_up(parameters.scale * phi, parameters.deviation_scale),
        volatility=round_half_up(sigma, parameters.sigma_scale),
    )
