"""Bracketed root finding for the Glicko-2 volatility update."""

import math
from collections.abc import Callable

from rankinator.exceptions import NumericDivergenceError
from rankinator.logging import get_logger

log = get_logger(__name__)

DEFAULT_TOLERANCE = 1e-6
DEFAULT_MAX_ITERATIONS = 100


def illinois_root(
    f: Callable[[float], float],
    a: float,
    b: float,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> float:
    """Find a root of f inside the bracket [a, b] with the Illinois algorithm.

    Each step takes the secant point of the current bracket. When the new
    value has the same sign as the retained endpoint, that endpoint's value
    is halved so the bracket keeps shrinking from both sides.

    Args:
        f: Continuous function with f(a) and f(b) of opposite sign
        a: First bracket endpoint (returned side on convergence)
        b: Second bracket endpoint
        tolerance: Stop once |b - a| <= tolerance
        max_iterations: Hard cap on secant steps

    Returns:
        The retained endpoint a once the bracket is narrower than tolerance

    Raises:
        NumericDivergenceError: If the endpoints do not bracket a root, a
            function value is not finite, or the cap is exhausted
    """
    fa = f(a)
    fb = f(b)

    if not (math.isfinite(fa) and math.isfinite(fb)):
        log.error("solver_non_finite_bracket", a=a, b=b, fa=fa, fb=fb)
        raise NumericDivergenceError("non-finite function value at bracket endpoints")
    if fa * fb > 0:
        log.error("solver_no_bracket", a=a, b=b, fa=fa, fb=fb)
        raise NumericDivergenceError("endpoints do not bracket a root")

    iterations = 0
    while abs(b - a) > tolerance:
        if iterations >= max_iterations:
            log.error("solver_iteration_cap", a=a, b=b, iterations=iterations)
            raise NumericDivergenceError("volatility did not converge", iterations=iterations)

        if fb == fa:
            # Flat secant; only possible when both values are zero
            break

        c = a + (a - b) * fa / (fb - fa)
        fc = f(c)
        if not math.isfinite(fc):
            log.error("solver_non_finite_step", c=c, iterations=iterations)
            raise NumericDivergenceError("non-finite function value", iterations=iterations)

        if fc * fb <= 0:
            a, fa = b, fb
        else:
            fa = fa / 2

        b, fb = c, fc
        iterations += 1

    log.debug("solver_converged", root=a, iterations=iterations)
    return a
