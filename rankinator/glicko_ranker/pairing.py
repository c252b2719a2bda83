"""Pairing strategies for choosing the next comparison."""

import random
from collections.abc import Sequence
from typing import Protocol

from rankinator.glicko_ranker.models import Pair, RankedItem
from rankinator.logging import get_logger

log = get_logger(__name__)

NEED_WINDOW = 3
CLOSE_RATING_DIFF = 100.0
FALLBACK_OPPONENTS = 3


class PairingStrategy(Protocol):
    """Protocol for pairing strategies."""

    def select_pair(self, pool: Sequence[RankedItem]) -> Pair | None:
        """Select the next pair of items to compare.

        Args:
            pool: Every item currently in play

        Returns:
            Two items with different ids, or None if the pool has fewer than two
        """
        ...


def rank_by_need(pool: Sequence[RankedItem]) -> list[RankedItem]:
    """Order items by how much a new comparison would tell us.

    Fewest matches first; among equal match counts, highest deviation first.
    """
    return sorted(pool, key=lambda item: (item.match_count, -item.deviation))


def select_next_pair(
    pool: Sequence[RankedItem],
    rng: random.Random | None = None,
    *,
    need_window: int = NEED_WINDOW,
    close_rating_diff: float = CLOSE_RATING_DIFF,
    fallback_opponents: int = FALLBACK_OPPONENTS,
) -> Pair | None:
    """Pick the next pair, favouring under-sampled items and close ratings.

    The first competitor is drawn uniformly from the top need_window items by
    need. The second is drawn uniformly from the other items rated within
    close_rating_diff of it, or, if there are none, from the
    fallback_opponents items with the nearest ratings.

    Args:
        pool: Every item currently in play
        rng: Random source; a freshly seeded one is used if omitted
        need_window: Number of neediest items the first competitor comes from
        close_rating_diff: Maximum rating gap for a preferred opponent
        fallback_opponents: Number of nearest items used when no opponent is close

    Returns:
        (first, second) with first.id != second.id, or None for pools under two items
    """
    if len(pool) < 2:
        return None

    if rng is None:
        rng = random.Random()

    ranked = rank_by_need(pool)
    first = ranked[rng.randrange(min(need_window, len(ranked)))]

    opponents = [item for item in pool if item.id != first.id]
    candidates = [
        item for item in opponents
        if abs(item.rating - first.rating) <= close_rating_diff
    ]

    if not candidates:
        # Outlier: fall back to the nearest ratings
        candidates = sorted(opponents, key=lambda item: abs(item.rating - first.rating))
        candidates = candidates[:fallback_opponents]

    if not candidates:
        # Every item shares the first competitor's id
        return None

    second = rng.choice(candidates)

    log.debug(
        "pair_selected",
        first=first.id,
        second=second.id,
        candidates=len(candidates),
    )
    return first, second


class NeedBasedPairing:
    """Need-ranked pairing with a closeness filter on the opponent.

    Produces informative comparisons: under-observed, uncertain items come
    first and are matched against items of similar rating, where the
    expected score is near 0.5.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        need_window: int = NEED_WINDOW,
        close_rating_diff: float = CLOSE_RATING_DIFF,
        fallback_opponents: int = FALLBACK_OPPONENTS,
    ):
        """Initialize the strategy.

        Args:
            rng: Random source; pass a seeded instance for reproducible pairings
            need_window: Number of neediest items the first competitor comes from
            close_rating_diff: Maximum rating gap for a preferred opponent
            fallback_opponents: Number of nearest items used when no opponent is close
        """
        self.rng = rng if rng is not None else random.Random()
        self.need_window = need_window
        self.close_rating_diff = close_rating_diff
        self.fallback_opponents = fallback_opponents

    def select_pair(self, pool: Sequence[RankedItem]) -> Pair | None:
        return select_next_pair(
            pool,
            self.rng,
            need_window=self.need_window,
            close_rating_diff=self.close_rating_diff,
            fallback_opponents=self.fallback_opponents,
        )


class RandomPairing:
    """Random pairing strategy - any two distinct items, uniformly."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng if rng is not None else random.Random()

    def select_pair(self, pool: Sequence[RankedItem]) -> Pair | None:
        if len(pool) < 2:
            return None

        first, second = self.rng.sample(list(pool), 2)

        # Ensure they're different items
        if first.id == second.id:
            others = [item for item in pool if item.id != first.id]
            if not others:
                return None
            second = self.rng.choice(others)

        return first, second
