"""Rankinator - rank anything by comparing two items at a time."""

from rankinator.exceptions import InvalidInputError, NumericDivergenceError, RankinatorError
from rankinator.glicko_ranker import (
    MatchResult,
    Outcome,
    RankedItem,
    RankerConfig,
    RankingSession,
    RatingState,
    process_match,
    select_next_pair,
    update_rating,
)
from rankinator.models import Item

__all__ = [
    "Item",
    "RankingSession",
    "RankedItem",
    "RatingState",
    "Outcome",
    "MatchResult",
    "RankerConfig",
    "update_rating",
    "select_next_pair",
    "process_match",
    "RankinatorError",
    "InvalidInputError",
    "NumericDivergenceError",
]
