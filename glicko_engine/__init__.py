"""
Glicko-2 rating engine.

    >>> from glicko_engine import Game, Player, update
    >>> player = Player(1500, 200, 0.06)
    >>> games = [
    ...     Game.win(Player(1400, 30, 0.06)),
    ...     Game.loss(Player(1550, 100, 0.06)),
    ...     Game.loss(Player(1700, 300, 0.06)),
    ... ]
    >>> update(player, games)
    Player(rating=Decimal('1464.05'), deviation=Decimal('151.52'), volatility=Decimal('0.059996'))
"""

from .config import load_parameters
from .errors import (
    Glicko2Error,
    InvalidParameters,
    InvalidPlayerState,
    NumericalRangeError,
    SolverDidNotConverge,
)
from .glicko2 import default_player, update, update_many, update_with_empty_period
from .models import DEFAULT_PARAMETERS, Game, Outcome, Parameters, Player

__all__ = [
    'Player',
    'Game',
    'Outcome',
    'Parameters',
    'DEFAULT_PARAMETERS',
    'update',
    'update_many',
    'update_with_empty_period',
    'default_player',
    'load_parameters',
    'Glicko2Error',
    'InvalidParameters',
    'InvalidPlayerState',
    'NumericalRangeError',
    'SolverDidNotConverge',
]
