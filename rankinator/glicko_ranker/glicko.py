"""Pure Glicko-2 rating calculations.

Each call rates one comparison from one side's point of view. A host rating
a pair calls update_rating twice, once per side, always against the
opponent's pre-comparison state.

No time-decay step is applied: an item that sits out many comparisons keeps
its deviation unchanged.
"""

import math

from rankinator.exceptions import InvalidInputError, NumericDivergenceError
from rankinator.glicko_ranker.models import RatingState
from rankinator.glicko_ranker.solver import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE, illinois_root
from rankinator.logging import get_logger

log = get_logger(__name__)

# Conversion factor between the public scale and the internal Glicko-2 scale
GLICKO_SCALE = 173.7178
BASE_RATING = 1500.0

# System constant limiting how far volatility may move per comparison
DEFAULT_TAU = 0.5

VALID_SCORES = (0.0, 0.5, 1.0)


def to_glicko_scale(state: RatingState) -> tuple[float, float, float]:
    """Convert a public rating state to internal (mu, phi, sigma)."""
    mu = (state.rating - BASE_RATING) / GLICKO_SCALE
    phi = state.deviation / GLICKO_SCALE
    return mu, phi, state.volatility


def to_standard_scale(mu: float, phi: float, sigma: float) -> RatingState:
    """Convert internal (mu, phi, sigma) back to a public rating state."""
    return RatingState(
        rating=mu * GLICKO_SCALE + BASE_RATING,
        deviation=phi * GLICKO_SCALE,
        volatility=sigma,
    )


def impact_factor(phi: float) -> float:
    """Glicko-2 g function: discounts a comparison by the opponent's uncertainty."""
    return 1.0 / math.sqrt(1.0 + 3.0 * phi**2 / math.pi**2)


def expected_score(mu: float, mu_opponent: float, phi_opponent: float) -> float:
    """Expected score of a player against an opponent on the internal scale."""
    return 1.0 / (1.0 + math.exp(-impact_factor(phi_opponent) * (mu - mu_opponent)))


def win_probability(state: RatingState, opponent: RatingState) -> float:
    """Probability that state beats opponent, on the public scale.

    Args:
        state: Rating of the player
        opponent: Rating of the opponent

    Returns:
        Expected score (0.0 to 1.0) for the player
    """
    _validate_state(state, "state")
    _validate_state(opponent, "opponent")
    mu, _, _ = to_glicko_scale(state)
    mu_opp, phi_opp, _ = to_glicko_scale(opponent)
    return expected_score(mu, mu_opp, phi_opp)


def _validate_state(state: RatingState, name: str) -> None:
    # States built with model_construct skip pydantic validation
    if not math.isfinite(state.rating):
        raise InvalidInputError("rating must be finite", field=f"{name}.rating", value=state.rating)
    if not (state.deviation > 0 and math.isfinite(state.deviation)):
        raise InvalidInputError(
            "deviation must be positive and finite",
            field=f"{name}.deviation",
            value=state.deviation,
        )
    if not (state.volatility > 0 and math.isfinite(state.volatility)):
        raise InvalidInputError(
            "volatility must be positive and finite",
            field=f"{name}.volatility",
            value=state.volatility,
        )


def _validate_score(score: float) -> float:
    if isinstance(score, bool) or not isinstance(score, (int, float)) or score not in VALID_SCORES:
        raise InvalidInputError("score must be 0, 0.5 or 1", field="score", value=score)
    return float(score)


def update_volatility(
    sigma: float,
    phi: float,
    v: float,
    delta: float,
    tau: float = DEFAULT_TAU,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> float:
    """Solve for the new volatility sigma'.

    Finds the root x of

        f(x) = e^x (delta² - phi² - v - e^x) / (2 (phi² + v + e^x)²) - (x - ln sigma²) / tau²

    and returns exp(x / 2).

    Args:
        sigma: Current volatility
        phi: Current deviation on the internal scale
        v: Estimated variance of the player's performance
        delta: Estimated improvement
        tau: System constant constraining the volatility change
        tolerance: Convergence tolerance on the bracket width
        max_iterations: Cap on both the bracket search and the secant steps

    Raises:
        NumericDivergenceError: If no bracket is found or the solver does not converge
    """
    a = math.log(sigma**2)
    phi2 = phi**2

    def f(x: float) -> float:
        ex = math.exp(x)
        return (ex * (delta**2 - phi2 - v - ex)) / (2.0 * (phi2 + v + ex) ** 2) - (x - a) / tau**2

    # Initial bracket
    if delta**2 > phi2 + v:
        b = math.log(delta**2 - phi2 - v)
    else:
        k = 1
        while f(a - k * tau) < 0:
            k += 1
            if k > max_iterations:
                log.error("volatility_bracket_not_found", sigma=sigma, phi=phi, v=v, delta=delta)
                raise NumericDivergenceError("could not bracket the volatility root", iterations=k)
        b = a - k * tau

    root = illinois_root(f, a, b, tolerance=tolerance, max_iterations=max_iterations)
    return math.exp(root / 2.0)


def update_rating(
    state: RatingState,
    opponent: RatingState,
    score: float,
    *,
    tau: float = DEFAULT_TAU,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> RatingState:
    """Rate one comparison of state against opponent.

    Args:
        state: Current rating of the player being updated
        opponent: Opponent's rating before this comparison
        score: Player's result: 1 win, 0.5 draw, 0 loss (Outcome members work too)
        tau: System constant constraining the volatility change
        tolerance: Convergence tolerance of the volatility solver
        max_iterations: Iteration cap of the volatility solver

    Returns:
        New RatingState for the player; the inputs are left untouched

    Raises:
        InvalidInputError: If score is not one of 0, 0.5, 1 or a state is invalid
        NumericDivergenceError: If the update produces a non-finite value
    """
    score = _validate_score(score)
    _validate_state(state, "state")
    _validate_state(opponent, "opponent")

    mu, phi, sigma = to_glicko_scale(state)
    mu_opp, phi_opp, _ = to_glicko_scale(opponent)

    try:
        g_opp = impact_factor(phi_opp)
        expected = expected_score(mu, mu_opp, phi_opp)

        # Estimated variance of performance and estimated improvement
        v = 1.0 / (g_opp**2 * expected * (1.0 - expected))
        delta = v * g_opp * (score - expected)

        new_sigma = update_volatility(
            sigma, phi, v, delta, tau=tau, tolerance=tolerance, max_iterations=max_iterations
        )

        phi_star = math.sqrt(phi**2 + new_sigma**2)
        new_phi = 1.0 / math.sqrt(1.0 / phi_star**2 + 1.0 / v)
        new_mu = mu + new_phi**2 * g_opp * (score - expected)
    except (OverflowError, ZeroDivisionError) as exc:
        log.error("rating_update_failed", error=str(exc), rating=state.rating, opponent=opponent.rating)
        raise NumericDivergenceError(str(exc)) from exc

    if not all(math.isfinite(x) for x in (new_mu, new_phi, new_sigma)) or new_phi <= 0 or new_sigma <= 0:
        log.error("rating_update_non_finite", mu=new_mu, phi=new_phi, sigma=new_sigma)
        raise NumericDivergenceError("non-finite or non-positive result")

    return to_standard_scale(new_mu, new_phi, new_sigma)
