"""Unit tests for domain models."""

import pytest
from pydantic import ValidationError

from rankinator.glicko_ranker.models import (
    MatchResult,
    Outcome,
    RankedItem,
    RankerConfig,
    RatingState,
)
from rankinator.models import Item

# Mark all tests in this module as unit tests
pytestmark = pytest.mark.unit


class TestItem:
    """Tests for Item model."""

    def test_minimal_item(self):
        item = Item(id="i-1", name="Pizza")
        assert item.id == "i-1"
        assert item.name == "Pizza"
        assert item.image is None


class TestRatingState:
    """Tests for RatingState model."""

    def test_defaults(self):
        state = RatingState()
        assert state.rating == 1500.0
        assert state.deviation == 350.0
        assert state.volatility == 0.06

    def test_is_frozen(self):
        state = RatingState()
        with pytest.raises(ValidationError):
            state.rating = 1600.0

    @pytest.mark.parametrize(
        "fields",
        [
            {"deviation": 0},
            {"deviation": -5},
            {"volatility": 0},
            {"rating": float("nan")},
            {"rating": float("inf")},
        ],
    )
    def test_invalid_values_rejected(self, fields):
        with pytest.raises(ValidationError):
            RatingState(**fields)


class TestRankedItem:
    """Tests for RankedItem model."""

    def test_defaults_and_shortcuts(self):
        ranked = RankedItem(item=Item(id="i-1", name="Pizza"))

        assert ranked.id == "i-1"
        assert ranked.name == "Pizza"
        assert ranked.rating == 1500.0
        assert ranked.deviation == 350.0
        assert ranked.volatility == 0.06
        assert ranked.match_count == 0

    def test_negative_match_count_rejected(self):
        with pytest.raises(ValidationError):
            RankedItem(item=Item(id="i-1", name="Pizza"), match_count=-1)


class TestOutcome:
    """Tests for Outcome enum."""

    def test_scores(self):
        assert Outcome.FIRST_WINS.score == 1.0
        assert Outcome.FIRST_WINS.complement == 0.0
        assert Outcome.DRAW.score == Outcome.DRAW.complement == 0.5
        assert Outcome.SECOND_WINS.score == 0.0
        assert Outcome.SECOND_WINS.complement == 1.0

    def test_lookup_by_score(self):
        assert Outcome(1) is Outcome.FIRST_WINS
        assert Outcome(0.5) is Outcome.DRAW
        assert Outcome(0) is Outcome.SECOND_WINS


class TestMatchResult:
    """Tests for MatchResult model."""

    def test_serialises_outcome(self):
        result = MatchResult(first_id="a", second_id="b", outcome=Outcome.DRAW)
        assert result.model_dump()["outcome"] == Outcome.DRAW
        assert result.first_delta == 0.0


class TestRankerConfig:
    """Tests for RankerConfig model."""

    def test_reference_defaults(self):
        config = RankerConfig()
        assert config.initial_rating == 1500.0
        assert config.initial_deviation == 350.0
        assert config.initial_volatility == 0.06
        assert config.tau == 0.5
        assert config.convergence_tolerance == 1e-6
        assert config.max_solver_iterations == 100
        assert config.need_window == 3
        assert config.close_rating_diff == 100.0
        assert config.fallback_opponents == 3
        assert config.pairing_strategy == "need"
        assert config.max_matches is None

    def test_unknown_strategy_rejected(self):
        with pytest.raises(ValidationError):
            RankerConfig(pairing_strategy="swiss")

    def test_non_positive_tau_rejected(self):
        with pytest.raises(ValidationError):
            RankerConfig(tau=0)
