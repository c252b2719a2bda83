"""Glicko-2 ranking of items through pairwise comparisons."""

from rankinator.glicko_ranker.glicko import update_rating, win_probability
from rankinator.glicko_ranker.models import (
    MatchResult,
    Outcome,
    Pair,
    RankedItem,
    RankerConfig,
    RatingState,
)
from rankinator.glicko_ranker.pairing import NeedBasedPairing, RandomPairing, select_next_pair
from rankinator.glicko_ranker.ranker import RankingSession, process_match

__all__ = [
    "RankingSession",
    "RankedItem",
    "RatingState",
    "Outcome",
    "Pair",
    "MatchResult",
    "RankerConfig",
    "update_rating",
    "win_probability",
    "select_next_pair",
    "process_match",
    "NeedBasedPairing",
    "RandomPairing",
]
