"""
Glicko-2 Rating System Implementation

Based on Professor Mark Glickman's paper:
"Example of the Glicko-2 system" (2013)
http://www.glicko.net/glicko/glicko2.pdf

This module provides:
- update(): a player's new rating after one rating period
- update_many(): the same for several players sharing a period
- default_player(): a new player seeded from the parameters

Every function is pure. Parameters are passed explicitly on each call and
default to DEFAULT_PARAMETERS; nothing here keeps state between calls.
"""

import logging
import math
from typing import Dict, Hashable, Iterable, Mapping, Sequence, Tuple

from .aggregation import aggregate
from .errors import NumericalRangeError
from .models import DEFAULT_PARAMETERS, Game, Parameters, Player
from .scaling import to_display, to_internal
from .volatility import compute_new_volatility

logger = logging.getLogger(__name__)


def update(
    player: Player,
    games: Iterable[Game] = (),
    parameters: Parameters = DEFAULT_PARAMETERS
) -> Player:
    """
    Apply Glicko-2 algorithm for a single rating period.

    Implements the 8-step algorithm from Glickman's paper. The sums shared by
    steps 3, 4 and 7 are computed once, so the code does not follow the
    paper step by step.

    Args:
        player: Player whose rating is updated (not modified)
        games: Games the player played during the rating period
        parameters: System constants and result precision

    Returns:
        New Player, rounded per parameters. update_with_empty_period() is
        used when games is empty.

    Raises:
        NumericalRangeError: if the opponents are so far from the player
            that the period's variance or rating change is not a finite float
        SolverDidNotConverge: if the volatility solver hits its cap
    """
    games = list(games)
    if not games:
        return update_with_empty_period(player, parameters)

    # Step 1-2: Convert to Glicko-2 scale
    scaled = to_internal(player, parameters)

    # Step 3-4: Variance v and improvement delta
    sum_g, sum_gs = aggregate(scaled, games, parameters)
    v = 1.0 / sum_g if sum_g > 0 else math.inf
    delta = v * sum_gs
    if not math.isfinite(delta * delta):
        raise NumericalRangeError(
            f"Rating gap too large for a finite variance (sum_g={sum_g}, sum_gs={sum_gs})"
        )

    # Step 5: New volatility
    phi_sq = scaled.phi * scaled.phi
    sigma_new = compute_new_volatility(scaled.sigma, phi_sq, delta, v, parameters)

    # Step 6: Update RD (phi* then phi')
    phi_star = math.sqrt(phi_sq + sigma_new * sigma_new)
    phi_new = 1.0 / math.sqrt(1.0 / (phi_star * phi_star) + 1.0 / v)

    # Step 7: Update rating (mu')
    mu_new = scaled.mu + phi_new * phi_new * sum_gs

    # Step 8: Convert back to Glicko scale
    return to_display(mu_new, phi_new, sigma_new, parameters)


def update_with_empty_period(player: Player, parameters: Parameters = DEFAULT_PARAMETERS) -> Player:
    """
    New rating of a player who did not compete during the rating period.

    Only RD grows (φ' = √(φ² + σ²)); rating and volatility carry over.
    """
    scaled = to_internal(player, parameters)
    phi_new = math.sqrt(scaled.phi * scaled.phi + scaled.sigma * scaled.sigma)
    logger.debug("No games in period, deviation grows from %s", player.deviation)
    return to_display(scaled.mu, phi_new, scaled.sigma, parameters)


def update_many(
    updates: Mapping[Hashable, Tuple[Player, Sequence[Game]]],
    parameters: Parameters = DEFAULT_PARAMETERS
) -> Dict[Hashable, Player]:
    """
    Update several players over the same rating period.

    Each player is updated against the opponent ratings the caller passed
    in, so results do not depend on iteration order.

    Args:
        updates: Mapping of key -> (player, games)
        parameters: System constants and result precision

    Returns:
        Mapping of key -> new Player
    """
    return {key: update(player, games, parameters) for key, (player, games) in updates.items()}


def default_player(parameters: Parameters = DEFAULT_PARAMETERS) -> Player:
    """Create a new Player with the default rating, RD and volatility."""
    return Player(
        rating=parameters.default_rating,
        deviation=parameters.default_deviation,
        volatility=parameters.default_volatility,
    )
