"""
Tests for conversion between the Glicko and Glicko-2 scales.

Tests verify that:
1. Display values convert to the Glicko-2 scale as in Glickman's example
2. Results are rounded half up, once, to the configured places

Run with: pytest tests/test_scaling.py -v
"""

import pytest
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from glicko_engine.errors import NumericalRangeError
from glicko_engine.models import Parameters, Player
from glicko_engine.scaling import Scaled, round_half_up, to_display, to_internal


# =============================================================================
# Tests for round_half_up
# =============================================================================

class TestRoundHalfUp:
    """Tests for the float -> fixed precision Decimal boundary."""

    def test_returns_decimal_with_requested_places(self):
        result = round_half_up(1464.0506684507089, 2)
        assert result == Decimal("1464.05")
        assert result.as_tuple().exponent == -2

    def test_half_rounds_up(self):
        """2.675 is 2.67499999... in binary; the decimal reading rounds it up."""
        assert round_half_up(2.675, 2) == Decimal("2.68")
        assert round_half_up(0.5, 0) == Decimal("1")

    def test_ties_round_away_from_zero(self):
        assert round_half_up(-0.5, 0) == Decimal("-1")
        assert round_half_up(-1.005, 2) == Decimal("-1.01")

    def test_volatility_is_not_truncated(self):
        """The paper truncates σ' to 0.05999; rounding gives 0.059996."""
        assert round_half_up(0.0599958431496, 6) == Decimal("0.059996")
        assert round_half_up(0.0599958431496, 5) == Decimal("0.06000")

    def test_zero_places(self):
        assert round_half_up(200.2714, 0) == Decimal("200")

    @pytest.mark.parametrize("places", [28, 30, 40])
    def test_more_places_than_default_precision(self, places):
        result = round_half_up(1464.0506684507089, places)
        assert result.as_tuple().exponent == -places
        assert result == Decimal(repr(1464.0506684507089))

    def test_large_value_many_places(self):
        assert round_half_up(6.8e147, 2) == Decimal("6.8e147")

    @pytest.mark.parametrize("number", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_raises_range_error(self, number):
        with pytest.raises(NumericalRangeError):
            round_half_up(number, 2)


# =============================================================================
# Tests for to_internal / to_display
# =============================================================================

class TestToInternal:
    """Tests for display -> Glicko-2 scale."""

    def test_default_rating_is_zero_mu(self):
        scaled = to_internal(Player(1500, 200, 0.06), Parameters())
        assert scaled.mu == 0.0
        assert scaled.phi == pytest.approx(1.1513, abs=1e-4)
        assert scaled.sigma == 0.06

    @pytest.mark.parametrize("rating,deviation,mu,phi", [
        (1400, 30, -0.5756, 0.1727),
        (1550, 100, 0.2878, 0.5756),
        (1700, 300, 1.1513, 1.7269),
    ])
    def test_paper_opponents(self, rating, deviation, mu, phi):
        """Opponents from Glickman's worked example."""
        scaled = to_internal(Player(rating, deviation, 0.06), Parameters())
        assert scaled.mu == pytest.approx(mu, abs=1e-4)
        assert scaled.phi == pytest.approx(phi, abs=1e-4)

    def test_uses_configured_scale_and_default_rating(self):
        params = Parameters(scale=100, default_rating=1000)
        scaled = to_internal(Player(1250, 50, 0.05), params)
        assert scaled == Scaled(mu=2.5, phi=0.5, sigma=0.05)


class TestToDisplay:
    """Tests for Glicko-2 scale -> display."""

    def test_paper_result(self):
        player = to_display(-0.20694134592563, 0.8722, 0.0599958431496, Parameters())
        assert player == Player("1464.05", "151.52", "0.059996")

    def test_rounds_to_configured_places(self):
        params = Parameters(rating_scale=0, deviation_scale=1, sigma_scale=3)
        player = to_display(-0.20694134592563, 0.8722, 0.0599958431496, params)
        assert player.rating == Decimal("1464")
        assert player.rating.as_tuple().exponent == 0
        assert player.deviation == Decimal("151.5")
        assert player.volatility == Decimal("0.060")

    def test_round_trip_of_display_values(self):
        """Rounded display values survive a conversion round trip."""
        params = Parameters()
        original = Player("1464.05", "151.52", "0.059996")
        scaled = to_internal(original, params)
        assert to_display(scaled.mu, scaled.phi, scaled.sigma, params) == original
