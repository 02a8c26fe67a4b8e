"""Domain models for pm_rewards: frozen dataclasses, no business logic.

Prices are per-share token prices in [0, 1]: a YES order is priced in YES
terms, a NO order in NO terms. MarketConfig.midpoint is the YES midpoint; the
NO token trades around 1 - midpoint. Spreads are distances from the order
token's own midpoint in probability points.
"""

from dataclasses import dataclass, field
from datetime import datetime

from src.pm_common.enums import (
    CompetitionLevel,
    CompetitionSource,
    FillRiskLevel,
    LegSide,
    OrderType,
    OutcomeSide,
)


@dataclass(frozen=True)
class MarketConfig:
    id: str
    question: str
    midpoint: float
    max_spread: float
    min_size: float
    reward_pool: float  # daily, USD


@dataclass(frozen=True)
class Order:
    price: float
    size: float  # shares
    side: OutcomeSide
    type: OrderType


@dataclass(frozen=True)
class MarketStats:
    """Aggregate market activity used when order books are not fetched."""

    volume_24h: float
    liquidity: float


@dataclass(frozen=True)
class PricePoint:
    timestamp: datetime
    price: float


@dataclass(frozen=True)
class ScoreResult:
    q_one: float
    q_two: float
    q_min: float


@dataclass(frozen=True)
class RewardEstimate:
    user_share: float
    daily_reward: float
    monthly_reward: float
    annualized_apy: float


@dataclass(frozen=True)
class CalculationCheck:
    is_valid: bool
    error: float
    error_percent: float


@dataclass(frozen=True)
class CompetitionEstimate:
    total_q_min: float
    source: CompetitionSource


@dataclass(frozen=True)
class VolatilityMetrics:
    hourly_std_dev: float
    daily_std_dev: float
    max_hourly_swing: float
    max_daily_swing: float
    volatility_score: float  # 0 = very stable, 100 = extremely volatile
    sample_count: int
    has_history: bool


@dataclass(frozen=True)
class FillProbabilityEstimate:
    probability: float
    expected_hours_to_fill: float
    confidence_lower: float
    confidence_upper: float
    risk_level: FillRiskLevel


@dataclass(frozen=True)
class PlacementSuggestion:
    side: LegSide
    price: float
    size: float
    capital_required: float
    expected_score: float
    reasoning: str
    outcome: OutcomeSide
    order_type: OrderType

    def to_order(self) -> Order:
        return Order(price=self.price, size=self.size, side=self.outcome, type=self.order_type)


@dataclass(frozen=True)
class PlacementStrategy:
    total_capital: float  # as requested by the caller
    capital_required: float  # actually needed, may exceed total_capital
    suggestions: tuple[PlacementSuggestion, PlacementSuggestion]  # (buy, sell)
    expected_score: ScoreResult
    expected_total_score: float  # the strategy's q_min
    expected_daily_reward: float
    estimated_roi: float  # annualized, fraction of capital_required
    tips: tuple[str, ...] = ()

    @property
    def buy(self) -> PlacementSuggestion:
        return self.suggestions[0]

    @property
    def sell(self) -> PlacementSuggestion:
        return self.suggestions[1]

    def orders(self) -> list[Order]:
        return [s.to_order() for s in self.suggestions]


@dataclass(frozen=True)
class SpreadCandidate:
    """One evaluated point of the dynamic spread search."""

    spread_ratio: float
    spread: float
    q_min: float
    daily_reward: float
    fill_probability: float
    expected_value: float
    risk_adjusted_return: float


@dataclass(frozen=True)
class DynamicPlacementStrategy(PlacementStrategy):
    fill_probability: float = 0.0
    volatility_score: float = 0.0
    expected_value: float = 0.0
    risk_adjusted_return: float = 0.0
    optimal_spread_ratio: float = 0.0
    fill_risk_level: FillRiskLevel = FillRiskLevel.LOW
    volatility: VolatilityMetrics | None = None
    candidates: tuple[SpreadCandidate, ...] = field(default=())


@dataclass(frozen=True)
class MarketOpportunity:
    market_id: str
    question: str
    reward_pool: float
    estimated_competition: float
    competition_source: CompetitionSource
    estimated_daily_reward: float
    capital_efficiency: float  # daily reward / capital
    roi: float  # annualized, percent
    competition_level: CompetitionLevel
    recommended_capital: float
