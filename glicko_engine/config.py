"""
Loading calculation parameters from the environment.

Values are read from GLICKO2_* environment variables, with a .env file
loaded first if present. Unset variables keep the defaults from
Parameters. The engine never reads configuration itself; load once and
pass the result to update().
"""

import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from .errors import InvalidParameters
from .models import Parameters


# Environment variable suffix -> (Parameters field, parser)
_FIELDS = {
    "TAU": ("tau", float),
    "EPSILON": ("epsilon", float),
    "SCALE": ("scale", float),
    "DEFAULT_RATING": ("default_rating", str),
    "DEFAULT_DEVIATION": ("default_deviation", str),
    "DEFAULT_VOLATILITY": ("default_volatility", str),
    "RATING_SCALE": ("rating_scale", int),
    "DEVIATION_SCALE": ("deviation_scale", int),
    "SIGMA_SCALE": ("sigma_scale", int),
    "MAX_ITERATIONS": ("max_iterations", int),
}


def load_parameters(
    env_file: Optional[Union[str, Path]] = None,
    prefix: str = "GLICKO2_"
) -> Parameters:
    """
    Build Parameters from environment variables.

    Args:
        env_file: .env file to load (defaults to searching from the
                  current directory, as load_dotenv() does)
        prefix: Prefix of the variable names

    Returns:
        Parameters with any configured options overridden

    Raises:
        InvalidParameters: if a variable cannot be parsed or is out of range
    """
    load_dotenv(env_file)

    options = {}
    for suffix, (name, parse) in _FIELDS.items():
        key = prefix + suffix
        raw = os.getenv(key)
        if raw is None or raw.strip() == "":
            continue
        try:
            options[name] = parse(raw.strip())
        except ValueError:
            raise InvalidParameters(f"{key} is not a valid {parse.__name__}: {raw!r}") from None

    return Parameters(**options)
