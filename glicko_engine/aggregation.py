"""
Per-opponent statistics for a rating period (steps 3-4 of Glicko-2).

Reduces a player's games to the two sums the update needs:

    sum_g  = Σ g(φⱼ)² × Eⱼ × (1 - Eⱼ)     (v = 1 / sum_g)
    sum_gs = Σ g(φⱼ) × (sⱼ - Eⱼ)           (Δ = v × sum_gs)
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .models import Game, Parameters
from .scaling import Scaled, to_internal


PI_SQ = math.pi * math.pi


@dataclass(frozen=True)
class OpponentStat:
    """An opponent on the Glicko-2 scale with the values reused from it."""
    opponent: Scaled
    g_phi: float     # g(φⱼ)
    expected: float  # Eⱼ
    variance: float  # Eⱼ(1 - Eⱼ)
    score: float     # sⱼ


def g(phi: float) -> float:
    """
    The g function from Glicko-2.
    Reduces the impact of an opponent's rating based on their uncertainty.

    g(φ) = 1 / √(1 + 3φ²/π²)
    """
    return 1.0 / math.sqrt(1.0 + 3.0 * phi * phi / PI_SQ)


def _logistic(x: float) -> float:
    """1 / (1 + exp(-x)) without overflow for large |x|."""
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    ex = math.exp(x)
    return ex / (1.0 + ex)


def expected_score(mu: float, mu_j: float, g_phi_j: float) -> float:
    """
    Calculate expected score against an opponent.

    E(μ, μⱼ, g(φⱼ)) = 1 / (1 + exp(-g(φⱼ)(μ - μⱼ)))
    """
    return _logistic(g_phi_j * (mu - mu_j))


def opponent_stats(player: Scaled, games: Sequence[Game], parameters: Parameters) -> List[OpponentStat]:
    """Convert each game's opponent to the Glicko-2 scale and compute g(φⱼ) and Eⱼ."""
    stats = []
    for game in games:
        if not isinstance(game, Game):
            raise TypeError(f"expected a Game, got {type(game).__name__}")
        opponent = to_internal(game.opponent, parameters)
        g_phi = g(opponent.phi)
        expected = expected_score(player.mu, opponent.mu, g_phi)
        # 1 - E taken from the other tail, so heavy favourites keep a non-zero variance
        complement = expected_score(opponent.mu, player.mu, g_phi)
        stats.append(OpponentStat(
            opponent=opponent,
            g_phi=g_phi,
            expected=expected,
            variance=expected * complement,
            score=game.score,
        ))
    return stats


def aggregate(player: Scaled, games: Sequence[Game], parameters: Parameters) -> Tuple[float, float]:
    """
    Reduce the games of a rating period to (sum_g, sum_gs).

    Args:
        player: Rated player on the Glicko-2 scale
        games: Games played in the period, at least one
        parameters: Calculation parameters

    Returns:
        Tuple of (sum_g, sum_gs)
    """
    if not games:
        raise ValueError("Cannot aggregate an empty rating period")

    stats = opponent_stats(player, games, parameters)
    g_phi = np.array([s.g_phi for s in stats])
    expected = np.array([s.expected for s in stats])
    variance = np.array([s.variance for s in stats])
    scores = np.array([s.score for s in stats])

    sum_g = float(np.sum(g_phi * g_phi * variance))
    sum_gs = float(np.sum(g_phi * (scores - expected)))
    return sum_g, sum_gs
