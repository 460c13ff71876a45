"""
New volatility σ' (step 5 of Glicko-2).

Finds the root of

    f(x) = eˣ(Δ² - φ² - v - eˣ) / (2(φ² + v + eˣ)²) - (x - a) / τ²,   a = ln(σ²)

with the Illinois variant of regula falsi, then σ' = exp(A / 2).
"""

import logging
import math
from typing import Callable

from .errors import NumericalRangeError, SolverDidNotConverge
from .models import Parameters

logger = logging.getLogger(__name__)


def volatility_objective(sigma: float, phi_sq: float, delta: float, v: float, tau: float) -> Callable[[float], float]:
    """Build f(x) for one player's rating period."""
    a = 2.0 * math.log(sigma)
    tau_sq = tau * tau
    phi_v = phi_sq + v
    excess = delta * delta - phi_sq - v

    def f(x: float) -> float:
        ex = math.exp(x)
        total = phi_v + ex
        # two ratios instead of dividing by total², which overflows for huge v
        return (ex / total) * (excess - ex) / (2.0 * total) - (x - a) / tau_sq

    return f


def compute_new_volatility(sigma: float, phi_sq: float, delta: float, v: float, parameters: Parameters) -> float:
    """
    Compute new volatility using the Illinois algorithm.

    Args:
        sigma: Current volatility σ
        phi_sq: Current φ² on the Glicko-2 scale
        delta: Estimated improvement Δ
        v: Estimated variance v
        parameters: Supplies τ, ε and the iteration cap

    Returns:
        New volatility σ' (always positive)

    Raises:
        SolverDidNotConverge: if bracketing or iteration exceeds
            parameters.max_iterations
        NumericalRangeError: if Δ² or v is not a finite float
    """
    if not all(math.isfinite(x) for x in (sigma, phi_sq, delta * delta, v)):
        raise NumericalRangeError(
            f"Volatility inputs out of float range (sigma={sigma}, phi_sq={phi_sq}, delta={delta}, v={v})"
        )
    try:
        return _illinois(sigma, phi_sq, delta, v, parameters)
    except OverflowError as err:
        raise NumericalRangeError(f"Volatility out of float range (sigma={sigma}, delta={delta}, v={v})") from err


def _illinois(sigma: float, phi_sq: float, delta: float, v: float, parameters: Parameters) -> float:
    tau = parameters.tau
    a = 2.0 * math.log(sigma)
    f = volatility_objective(sigma, phi_sq, delta, v, tau)

    # Initial bounds
    A = a
    delta_sq = delta * delta
    if delta_sq > phi_sq + v:
        B = math.log(delta_sq - phi_sq - v)
    else:
        k = 1
        while f(a - k * tau) < 0:
            k += 1
            if k > parameters.max_iterations:
                raise SolverDidNotConverge(
                    f"No lower bracket for volatility within {parameters.max_iterations} steps "
                    f"(sigma={sigma}, delta={delta}, v={v}, tau={tau})",
                    iterations=k - 1,
                )
        B = a - k * tau
        logger.debug("Bracketed volatility root after %d steps", k)

    f_A = f(A)
    f_B = f(B)

    iterations = 0
    while abs(B - A) > parameters.epsilon:
        if iterations >= parameters.max_iterations:
            raise SolverDidNotConverge(
                f"Volatility did not converge within {parameters.max_iterations} iterations "
                f"(|B - A| = {abs(B - A)}, epsilon={parameters.epsilon})",
                iterations=iterations,
            )
        iterations += 1

        C = A + (A - B) * f_A / (f_B - f_A)
        f_C = f(C)
        if f_C == 0.0:  # exact root, the bracket would stop shrinking
            A = C
            break

        if f_C * f_B < 0:
            A, f_A = B, f_B
        else:
            f_A = f_A / 2.0
        B, f_B = C, f_C

    logger.debug("Volatility converged in %d iterations", iterations)
    return math.exp(A / 2.0)
