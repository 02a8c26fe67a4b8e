"""Pydantic schemas at the engine boundary.

Inbound models parse upstream market / order / price-history payloads
(snake_case or camelCase keys; CLOB price history uses {"t", "p"}).
Structural checks that need domain context (midpoint range, max_spread > 0,
...) stay in pm_rewards.domain.rules so they raise AppError codes.

Outbound models render domain results for the API layer via from_domain.
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.pm_common.cents import usd_display
from src.pm_common.enums import OrderType, OutcomeSide
from src.pm_rewards.application.ranker import MarketCandidate
from src.pm_rewards.domain.models import (
    DynamicPlacementStrategy,
    MarketConfig,
    MarketOpportunity,
    MarketStats,
    Order,
    PlacementStrategy,
    PlacementSuggestion,
    PricePoint,
    RewardEstimate,
    ScoreResult,
    SpreadCandidate,
)

# ---------------------------------------------------------------------------
# Inbound
# ---------------------------------------------------------------------------


class _Inbound(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MarketConfigIn(_Inbound):
    id: str
    question: str = ""
    midpoint: float
    max_spread: float
    min_size: float
    reward_pool: float = 0.0

    def to_domain(self) -> MarketConfig:
        return MarketConfig(
            id=self.id,
            question=self.question,
            midpoint=self.midpoint,
            max_spread=self.max_spread,
            min_size=self.min_size,
            reward_pool=self.reward_pool,
        )


class OrderIn(_Inbound):
    price: float
    size: float
    side: Literal["YES", "NO"]
    type: Literal["BID", "ASK"]

    def to_domain(self) -> Order:
        return Order(
            price=self.price,
            size=self.size,
            side=OutcomeSide(self.side),
            type=OrderType(self.type),
        )


class MarketStatsIn(BaseModel):
    volume_24h: float = Field(
        default=0.0, validation_alias=AliasChoices("volume_24h", "volume24h", "volume")
    )
    liquidity: float = 0.0

    def to_domain(self) -> MarketStats:
        return MarketStats(volume_24h=self.volume_24h, liquidity=self.liquidity)


class PricePointIn(BaseModel):
    timestamp: datetime = Field(validation_alias=AliasChoices("timestamp", "t"))
    price: float = Field(validation_alias=AliasChoices("price", "p"))

    @field_validator("timestamp")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are taken as UTC; aware ones are converted to UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    def to_domain(self) -> PricePoint:
        return PricePoint(timestamp=self.timestamp, price=self.price)


class MarketCandidateIn(_Inbound):
    market: MarketConfigIn
    stats: MarketStatsIn | None = None
    orders: list[OrderIn] | None = None

    def to_domain(self) -> MarketCandidate:
        return MarketCandidate(
            market=self.market.to_domain(),
            stats=self.stats.to_domain() if self.stats else None,
            orders=[o.to_domain() for o in self.orders] if self.orders is not None else None,
        )


# ---------------------------------------------------------------------------
# Scores and rewards
# ---------------------------------------------------------------------------


class ScoreResultOut(BaseModel):
    q_one: float
    q_two: float
    q_min: float

    @classmethod
    def from_domain(cls, s: ScoreResult) -> "ScoreResultOut":
        return cls(q_one=s.q_one, q_two=s.q_two, q_min=s.q_min)


class RewardEstimateOut(BaseModel):
    user_share: float
    daily_reward: float
    daily_reward_display: str
    monthly_reward: float
    annualized_apy: float

    @classmethod
    def from_domain(cls, r: RewardEstimate) -> "RewardEstimateOut":
        return cls(
            user_share=r.user_share,
            daily_reward=r.daily_reward,
            daily_reward_display=usd_display(r.daily_reward),
            monthly_reward=r.monthly_reward,
            annualized_apy=r.annualized_apy,
        )


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------


class PlacementSuggestionOut(BaseModel):
    side: str
    outcome: str
    order_type: str
    price: float
    size: float
    capital_required: float
    expected_score: float
    reasoning: str

    @classmethod
    def from_domain(cls, s: PlacementSuggestion) -> "PlacementSuggestionOut":
        return cls(
            side=s.side.value,
            outcome=s.outcome.value,
            order_type=s.order_type.value,
            price=s.price,
            size=s.size,
            capital_required=s.capital_required,
            expected_score=s.expected_score,
            reasoning=s.reasoning,
        )


class PlacementStrategyOut(BaseModel):
    total_capital: float
    capital_required: float
    capital_required_display: str
    suggestions: list[PlacementSuggestionOut]
    expected_score: ScoreResultOut
    expected_total_score: float
    expected_daily_reward: float
    estimated_roi: float
    tips: list[str]

    @classmethod
    def _base_fields(cls, p: PlacementStrategy) -> dict:
        return dict(
            total_capital=p.total_capital,
            capital_required=p.capital_required,
            capital_required_display=usd_display(p.capital_required),
            suggestions=[PlacementSuggestionOut.from_domain(s) for s in p.suggestions],
            expected_score=ScoreResultOut.from_domain(p.expected_score),
            expected_total_score=p.expected_total_score,
            expected_daily_reward=p.expected_daily_reward,
            estimated_roi=p.estimated_roi,
            tips=list(p.tips),
        )

    @classmethod
    def from_domain(cls, p: PlacementStrategy) -> "PlacementStrategyOut":
        return cls(**cls._base_fields(p))


class SpreadCandidateOut(BaseModel):
    spread_ratio: float
    spread: float
    q_min: float
    daily_reward: float
    fill_probability: float
    expected_value: float
    risk_adjusted_return: float

    @classmethod
    def from_domain(cls, c: SpreadCandidate) -> "SpreadCandidateOut":
        return cls(
            spread_ratio=c.spread_ratio,
            spread=c.spread,
            q_min=c.q_min,
            daily_reward=c.daily_reward,
            fill_probability=c.fill_probability,
            expected_value=c.expected_value,
            risk_adjusted_return=c.risk_adjusted_return,
        )


class DynamicPlacementStrategyOut(PlacementStrategyOut):
    fill_probability: float
    fill_risk_level: str
    volatility_score: float
    expected_value: float
    risk_adjusted_return: float
    optimal_spread_ratio: float
    candidates: list[SpreadCandidateOut]

    @classmethod
    def from_domain(cls, p: DynamicPlacementStrategy) -> "DynamicPlacementStrategyOut":
        return cls(
            **cls._base_fields(p),
            fill_probability=p.fill_probability,
            fill_risk_level=p.fill_risk_level.value,
            volatility_score=p.volatility_score,
            expected_value=p.expected_value,
            risk_adjusted_return=p.risk_adjusted_return,
            optimal_spread_ratio=p.optimal_spread_ratio,
            candidates=[SpreadCandidateOut.from_domain(c) for c in p.candidates],
        )


# ---------------------------------------------------------------------------
# Opportunities
# ---------------------------------------------------------------------------


class MarketOpportunityOut(BaseModel):
    market_id: str
    question: str
    reward_pool: float
    estimated_competition: float
    competition_source: str
    estimated_daily_reward: float
    estimated_daily_reward_display: str
    capital_efficiency: float
    roi: float
    competition_level: str
    recommended_capital: float
    recommended_capital_display: str

    @classmethod
    def from_domain(cls, o: MarketOpportunity) -> "MarketOpportunityOut":
        return cls(
            market_id=o.market_id,
            question=o.question,
            reward_pool=o.reward_pool,
            estimated_competition=o.estimated_competition,
            competition_source=o.competition_source.value,
            estimated_daily_reward=o.estimated_daily_reward,
            estimated_daily_reward_display=usd_display(o.estimated_daily_reward),
            capital_efficiency=o.capital_efficiency,
            roi=o.roi,
            competition_level=o.competition_level.value,
            recommended_capital=o.recommended_capital,
            recommended_capital_display=usd_display(o.recommended_capital),
        )
