"""Event system for decoupling the ranking loop from presentation.

The ranking session emits events without knowing how (or whether) they are
shown. A terminal front end, a web app or a test can subscribe by
implementing the methods it cares about.
"""

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from rankinator.glicko_ranker.models import MatchResult, RankedItem


class EventHandler(Protocol):
    """Protocol for event handlers that process events from the ranking session."""

    def on_progress(
        self,
        current: int,
        total: int,
        message: str,
        **kwargs: Any
    ) -> None:
        """Called when progress updates occur.

        Args:
            current: Current progress value
            total: Total expected value
            message: Progress message
            **kwargs: Additional context
        """
        ...

    def on_match_start(
        self,
        first: "RankedItem",
        second: "RankedItem",
        **kwargs: Any
    ) -> None:
        """Called when a pair is selected for comparison.

        Args:
            first: First competitor
            second: Second competitor
            **kwargs: Additional context
        """
        ...

    def on_match_complete(
        self,
        match: "MatchResult",
        **kwargs: Any
    ) -> None:
        """Called when a judged outcome has been applied.

        Args:
            match: The completed match result
            **kwargs: Additional context
        """
        ...

    def on_rating_update(
        self,
        items: list["RankedItem"],
        match_num: int,
        total_matches: int,
        **kwargs: Any
    ) -> None:
        """Called after ratings change.

        Args:
            items: Current pool
            match_num: Number of matches recorded so far
            total_matches: Total expected matches (0 when open-ended)
            **kwargs: Additional context
        """
        ...


class NullEventHandler:
    """Null event handler that does nothing.

    Useful as a default when no event handling is needed.
    """

    def on_progress(self, *args: Any, **kwargs: Any) -> None:
        pass

    def on_match_start(self, *args: Any, **kwargs: Any) -> None:
        pass

    def on_match_complete(self, *args: Any, **kwargs: Any) -> None:
        pass

    def on_rating_update(self, *args: Any, **kwargs: Any) -> None:
        pass
