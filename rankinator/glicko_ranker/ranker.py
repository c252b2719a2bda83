"""Ranking session tying the rating engine and matchmaker into a host loop."""

import random
from collections.abc import Callable, Iterable

from rankinator.events import EventHandler, NullEventHandler
from rankinator.exceptions import InvalidInputError
from rankinator.glicko_ranker.glicko import update_rating
from rankinator.glicko_ranker.models import (
    MatchResult,
    Outcome,
    Pair,
    RankedItem,
    RankerConfig,
    RatingState,
)
from rankinator.glicko_ranker.pairing import NeedBasedPairing, PairingStrategy, RandomPairing
from rankinator.glicko_ranker.stopping import StabilityChecker
from rankinator.logging import get_logger
from rankinator.models import Item

log = get_logger(__name__)

Judge = Callable[[RankedItem, RankedItem], Outcome | float]


def _as_outcome(outcome: Outcome | float) -> Outcome:
    if isinstance(outcome, Outcome):
        return outcome
    if isinstance(outcome, bool):
        raise InvalidInputError("outcome must be 0, 0.5 or 1", field="outcome", value=outcome)
    try:
        return Outcome(outcome)
    except ValueError as exc:
        raise InvalidInputError("outcome must be 0, 0.5 or 1", field="outcome", value=outcome) from exc


def process_match(
    first: RankedItem,
    second: RankedItem,
    outcome: Outcome | float,
    config: RankerConfig | None = None,
) -> Pair:
    """Apply one judged comparison to both items.

    Both sides are rated against the other's pre-comparison state, and both
    match counts go up by one.

    Args:
        first: First competitor
        second: Second competitor
        outcome: Result from the first competitor's point of view
        config: Solver settings (uses defaults if None)

    Returns:
        New (first, second) items; the arguments are not modified
    """
    config = config or RankerConfig()
    outcome = _as_outcome(outcome)

    if first.id == second.id:
        raise InvalidInputError("an item cannot be compared with itself", field="second.id", value=second.id)

    solver = {
        "tau": config.tau,
        "tolerance": config.convergence_tolerance,
        "max_iterations": config.max_solver_iterations,
    }
    first_state = update_rating(first.state, second.state, outcome.score, **solver)
    second_state = update_rating(second.state, first.state, outcome.complement, **solver)

    return (
        first.model_copy(update={"state": first_state, "match_count": first.match_count + 1}),
        second.model_copy(update={"state": second_state, "match_count": second.match_count + 1}),
    )


class RankingSession:
    """Glicko-2 ranking of a pool of items through pairwise human judgments.

    Holds the authoritative pool, hands out the next pair to compare and
    applies judged outcomes. All mutation goes through this object, so a
    host that wants concurrency only has to serialise calls to it.

    Features:
    - Need-based pairing (under-sampled, uncertain items first)
    - Skipping a pair without recording anything
    - Leaderboard and match history
    - Optional early stopping when the top of the leaderboard settles
    """

    def __init__(
        self,
        items: Iterable[RankedItem] | None = None,
        config: RankerConfig | None = None,
        event_handler: EventHandler | None = None,
        rng: random.Random | None = None,
    ):
        """Initialize the session.

        Args:
            items: Existing pool, e.g. loaded by the host from storage
            config: Configuration for ranking behavior (uses defaults if None)
            event_handler: Optional event handler for progress updates (uses NullHandler if None)
            rng: Random source for pairing; pass a seeded instance for reproducible runs
        """
        self.config = config or RankerConfig()
        self.event_handler = event_handler or NullEventHandler()

        self.items: list[RankedItem] = []
        for item in items or []:
            self._ensure_unique(item.id)
            self.items.append(item)

        self.match_history: list[MatchResult] = []
        self.current_pair: Pair | None = None
        self.max_matches = 0

        if self.config.pairing_strategy == "need":
            self.pairing: PairingStrategy = NeedBasedPairing(
                rng=rng,
                need_window=self.config.need_window,
                close_rating_diff=self.config.close_rating_diff,
                fallback_opponents=self.config.fallback_opponents,
            )
        else:
            self.pairing = RandomPairing(rng=rng)

        self.stability_checker: StabilityChecker | None = None
        if self.config.early_stop_enabled:
            self.stability_checker = StabilityChecker(
                top_k=self.config.early_stop_top_k,
                check_interval=self.config.early_stop_check_interval,
                threshold=self.config.early_stop_threshold,
            )

    def _ensure_unique(self, item_id: str) -> None:
        if any(existing.id == item_id for existing in self.items):
            raise InvalidInputError("an item with this id already exists", field="id", value=item_id)

    def get_item(self, item_id: str) -> RankedItem:
        """Look up an item by id.

        Raises:
            KeyError: If no item has this id
        """
        for item in self.items:
            if item.id == item_id:
                return item
        raise KeyError(f"Item '{item_id}' is not in the pool")

    def add_item(self, item_id: str, name: str, image: str | None = None) -> RankedItem:
        """Add a new item with the configured starting rating.

        Args:
            item_id: Identifier generated by the host
            name: Display name
            image: Optional image reference, stored untouched

        Returns:
            The new ranked item
        """
        self._ensure_unique(item_id)

        ranked = RankedItem(
            item=Item(id=item_id, name=name, image=image),
            state=RatingState(
                rating=self.config.initial_rating,
                deviation=self.config.initial_deviation,
                volatility=self.config.initial_volatility,
            ),
        )
        self.items.append(ranked)
        if self.stability_checker:
            self.stability_checker.reset()

        log.info("item_added", item_id=item_id, pool_size=len(self.items))
        return ranked

    def remove_item(self, item_id: str) -> RankedItem:
        """Remove an item from the pool.

        A pending pair that involves the item is replaced by a fresh one.

        Raises:
            KeyError: If no item has this id
        """
        removed = self.get_item(item_id)
        self.items = [item for item in self.items if item.id != item_id]

        if self.current_pair and item_id in (self.current_pair[0].id, self.current_pair[1].id):
            self.next_pair()
        if self.stability_checker:
            self.stability_checker.reset()

        log.info("item_removed", item_id=item_id, pool_size=len(self.items))
        return removed

    def next_pair(self) -> Pair | None:
        """Select the next pair to compare and make it the pending one.

        Returns:
            The pending pair, or None when fewer than two items exist
        """
        self.current_pair = self.pairing.select_pair(self.items)

        if self.current_pair:
            first, second = self.current_pair
            self.event_handler.on_match_start(first=first, second=second, items=self.items)

        return self.current_pair

    def skip(self) -> Pair | None:
        """Discard the pending pair without recording anything and select another."""
        if self.current_pair:
            log.info("pair_skipped", first=self.current_pair[0].id, second=self.current_pair[1].id)
        return self.next_pair()

    def record_outcome(self, outcome: Outcome | float) -> MatchResult:
        """Apply the judged outcome of the pending pair.

        Args:
            outcome: Result from the first competitor's point of view

        Returns:
            The recorded match result

        Raises:
            InvalidInputError: If no pair is pending or the outcome is invalid
        """
        if self.current_pair is None:
            raise InvalidInputError("no comparison is pending; call next_pair() first")

        outcome = _as_outcome(outcome)

        # Re-read from the pool so the update starts from the authoritative state
        first = self.get_item(self.current_pair[0].id)
        second = self.get_item(self.current_pair[1].id)

        new_first, new_second = process_match(first, second, outcome, self.config)
        self.items = [
            new_first if item.id == new_first.id
            else new_second if item.id == new_second.id
            else item
            for item in self.items
        ]

        result = MatchResult(
            first_id=first.id,
            second_id=second.id,
            outcome=outcome,
            first_delta=new_first.rating - first.rating,
            second_delta=new_second.rating - second.rating,
        )
        self.match_history.append(result)

        log.info(
            "match_recorded",
            first=first.id,
            second=second.id,
            outcome=outcome.name,
            first_rating=round(new_first.rating, 1),
            second_rating=round(new_second.rating, 1),
        )

        self.event_handler.on_match_complete(match=result, items=self.items)
        self.event_handler.on_rating_update(
            items=self.items,
            match_num=len(self.match_history),
            total_matches=self.max_matches,
        )

        self.next_pair()
        return result

    def standings(self) -> list[RankedItem]:
        """Items sorted by rating (highest first)."""
        return sorted(self.items, key=lambda x: x.rating, reverse=True)

    def run(self, judge: Judge, max_matches: int | None = None) -> list[RankedItem]:
        """Drive the comparison loop with a judge callable.

        Stops after max_matches comparisons, when no pair can be formed, or
        when early stopping reports a stable leaderboard.

        Args:
            judge: Called with (first, second); returns the Outcome for first
            max_matches: Match cap (defaults to config.max_matches, then len * 3)

        Returns:
            Items sorted by rating (highest first)
        """
        if max_matches is not None:
            self.max_matches = max_matches
        elif self.config.max_matches is not None:
            self.max_matches = self.config.max_matches
        else:
            self.max_matches = len(self.items) * 3

        matches_played = 0
        while matches_played < self.max_matches:
            pair = self.current_pair or self.next_pair()
            if pair is None:
                break

            self.record_outcome(judge(*pair))
            matches_played += 1

            self.event_handler.on_progress(
                current=matches_played,
                total=self.max_matches,
                message="Running comparisons...",
            )

            if self.stability_checker and self.stability_checker.check(self.items):
                self.event_handler.on_progress(
                    current=matches_played,
                    total=self.max_matches,
                    message="Rankings stabilized - stopping early",
                )
                log.info("early_stop", matches=matches_played)
                break

        return self.standings()
