"""Early stopping for a ranking session."""

from collections.abc import Sequence

from rankinator.glicko_ranker.models import RankedItem


class StabilityChecker:
    """Checks if the top-K of the leaderboard has stopped changing."""

    def __init__(
        self,
        top_k: int = 10,
        check_interval: int = 20,
        threshold: float = 0.9
    ):
        """Initialize stability checker.

        Args:
            top_k: Number of top items to track
            check_interval: Check stability every N calls
            threshold: Overlap threshold (0-1) to consider stable
        """
        self.top_k = top_k
        self.check_interval = check_interval
        self.threshold = threshold
        self.snapshots: list[list[str]] = []
        self.match_count = 0

    def check(self, items: Sequence[RankedItem]) -> bool:
        """Record one match and report whether the top-K is stable.

        Args:
            items: Current pool

        Returns:
            True if stable (should stop), False otherwise
        """
        self.match_count += 1

        if self.match_count % self.check_interval != 0:
            return False

        ranked = sorted(items, key=lambda x: x.rating, reverse=True)
        top_ids = [item.id for item in ranked[:self.top_k]]
        if not top_ids:
            return False

        # Need at least 2 snapshots to compare
        if len(self.snapshots) >= 2:
            last_snapshot = self.snapshots[-1]
            overlap = len(set(top_ids) & set(last_snapshot)) / len(top_ids)

            if overlap >= self.threshold:
                return True

        self.snapshots.append(top_ids)

        # Keep only last 3 snapshots
        if len(self.snapshots) > 3:
            self.snapshots.pop(0)

        return False

    def reset(self) -> None:
        """Forget all snapshots, e.g. after the pool changes."""
        self.snapshots.clear()
        self.match_count = 0
