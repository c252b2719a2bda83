"""Unit tests for the volatility root finder."""

import math

import pytest

from rankinator.exceptions import NumericDivergenceError
from rankinator.glicko_ranker.glicko import update_volatility
from rankinator.glicko_ranker.solver import illinois_root

# Mark all tests in this module as unit tests
pytestmark = pytest.mark.unit


class TestIllinoisRoot:
    """Tests for illinois_root."""

    def test_finds_square_root(self):
        root = illinois_root(lambda x: x * x - 2.0, 0.0, 2.0)
        assert root == pytest.approx(math.sqrt(2.0), abs=1e-5)

    def test_bracket_order_does_not_matter(self):
        root = illinois_root(lambda x: 1.0 - x, 3.0, -1.0)
        assert root == pytest.approx(1.0, abs=1e-5)

    def test_root_at_endpoint(self):
        root = illinois_root(lambda x: x - 1.0, 1.0, 4.0)
        assert root == pytest.approx(1.0, abs=1e-9)

    def test_no_sign_change_raises(self):
        with pytest.raises(NumericDivergenceError):
            illinois_root(lambda x: x * x + 1.0, 0.0, 1.0)

    def test_non_finite_value_raises(self):
        with pytest.raises(NumericDivergenceError):
            illinois_root(lambda x: math.inf, 0.0, 1.0)

    def test_iteration_cap_raises(self):
        with pytest.raises(NumericDivergenceError) as exc_info:
            illinois_root(lambda x: x * x - 2.0, 0.0, 2.0, tolerance=1e-15, max_iterations=1)
        assert exc_info.value.iterations == 1

    def test_converges_well_inside_default_cap(self):
        calls = []

        def f(x):
            calls.append(x)
            return x**3 - x - 2.0

        root = illinois_root(f, 1.0, 2.0)
        assert root == pytest.approx(1.52138, abs=1e-4)
        assert len(calls) < 30


class TestUpdateVolatility:
    """Tests for the volatility step of Glicko-2."""

    def test_reference_example(self):
        """Worked example from Glickman's Glicko-2 description."""
        sigma = update_volatility(sigma=0.06, phi=1.1513, v=1.7785, delta=-0.4834)
        assert sigma == pytest.approx(0.05999, abs=1e-5)

    def test_unsurprising_result_lowers_volatility(self):
        sigma = update_volatility(sigma=0.06, phi=1.0, v=2.0, delta=0.0)
        assert 0.05 < sigma < 0.06

    def test_surprising_result_raises_volatility(self):
        """delta² > phi² + v takes the logarithmic bracket."""
        sigma = update_volatility(sigma=0.06, phi=0.5, v=1.0, delta=3.0)
        assert sigma > 0.06

    def test_smaller_tau_moves_less(self):
        loose = update_volatility(sigma=0.06, phi=0.5, v=1.0, delta=3.0, tau=1.2)
        tight = update_volatility(sigma=0.06, phi=0.5, v=1.0, delta=3.0, tau=0.3)
        assert loose - 0.06 > tight - 0.06 > 0
