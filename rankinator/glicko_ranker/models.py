"""Data models for the Glicko-2 ranking system."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from rankinator.models import Item


class RatingState(BaseModel):
    """Glicko-2 rating of a single item on the public (standard) scale.

    The engine never mutates a state; every update returns a new one.
    """
    model_config = ConfigDict(frozen=True)

    rating: float = Field(1500.0, allow_inf_nan=False, description="Skill estimate, centred at 1500")
    deviation: float = Field(350.0, gt=0, description="Uncertainty in the rating")
    volatility: float = Field(0.06, gt=0, description="Expected fluctuation of the rating")


class RankedItem(BaseModel):
    """An item together with its current rating and comparison count."""
    item: Item
    state: RatingState = Field(default_factory=RatingState)
    match_count: int = Field(0, ge=0)

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def name(self) -> str:
        return self.item.name

    @property
    def rating(self) -> float:
        return self.state.rating

    @property
    def deviation(self) -> float:
        return self.state.deviation

    @property
    def volatility(self) -> float:
        return self.state.volatility


class Outcome(float, Enum):
    """Result of a comparison, valued as the first competitor's score."""
    FIRST_WINS = 1.0
    DRAW = 0.5
    SECOND_WINS = 0.0

    @property
    def score(self) -> float:
        return float(self.value)

    @property
    def complement(self) -> float:
        """Score of the second competitor."""
        return 1.0 - float(self.value)


Pair = tuple[RankedItem, RankedItem]


class MatchResult(BaseModel):
    """Result of a single judged comparison."""
    first_id: str
    second_id: str
    outcome: Outcome
    first_delta: float = 0.0
    second_delta: float = 0.0


class RankerConfig(BaseModel):
    """Configuration for the Glicko-2 ranking system."""
    initial_rating: float = 1500.0
    initial_deviation: float = Field(350.0, gt=0)
    initial_volatility: float = Field(0.06, gt=0)

    # Volatility solver
    tau: float = Field(0.5, gt=0)
    convergence_tolerance: float = Field(1e-6, gt=0)
    max_solver_iterations: int = Field(100, gt=0)

    # Pairing
    pairing_strategy: Literal["need", "random"] = "need"
    need_window: int = Field(3, gt=0)  # First competitor drawn from the top N by need
    close_rating_diff: float = Field(100.0, ge=0)
    fallback_opponents: int = Field(3, gt=0)

    # Stopping
    max_matches: int | None = None  # None = auto (len * 3)
    early_stop_enabled: bool = False
    early_stop_top_k: int = Field(10, gt=0)
    early_stop_threshold: float = Field(0.9, gt=0, le=1)
    early_stop_check_interval: int = Field(20, gt=0)
