"""Spread search trading reward against fill risk.

For each candidate spread ratio in [min_spread_ratio, max_spread_ratio]:
  1. build the two legs exactly as the static placement does
  2. daily reward against competition + own Q_min
  3. fill probability from the spread and recent volatility
  4. EV = daily * horizon * (1 - p) - capital * cost_rate * p

The candidate with the highest EV wins; near-ties (within
DYNAMIC_TIE_TOLERANCE) go to the widest spread.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from config.settings import settings
from src.pm_common.enums import FillRiskLevel, RiskTolerance
from src.pm_common.errors import InvalidOptimizerOptionsError
from src.pm_rewards.domain.models import (
    DynamicPlacementStrategy,
    MarketConfig,
    PlacementStrategy,
    PricePoint,
    SpreadCandidate,
    VolatilityMetrics,
)
from src.pm_rewards.domain.rules import check_capital, check_market_config
from src.pm_rewards.engine.fill_probability import (
    expected_value,
    fill_probability,
    risk_adjusted_return,
)
from src.pm_rewards.engine.static_optimizer import build_placement
from src.pm_rewards.engine.volatility import (
    calculate_volatility,
    lookback_days_for_horizon,
    recommended_min_spread_ratio,
    volatility_level,
)

logger = logging.getLogger(__name__)

# Tighter ranges for more risk-tolerant callers
RISK_TOLERANCE_RANGES: dict[RiskTolerance, tuple[float, float]] = {
    RiskTolerance.LOW: (0.40, 0.80),
    RiskTolerance.MEDIUM: (0.25, 0.70),
    RiskTolerance.HIGH: (0.20, 0.50),
}


@dataclass(frozen=True)
class DynamicOptions:
    time_horizon_days: float = 30
    min_spread_ratio: float = 0.25
    max_spread_ratio: float = 0.80
    candidate_count: int | None = None  # settings.DYNAMIC_CANDIDATE_COUNT
    order_book_depth: float | None = None  # settings.DEFAULT_ORDER_BOOK_DEPTH
    transaction_cost_rate: float | None = None  # settings.DEFAULT_TRANSACTION_COST_RATE
    respect_volatility_floor: bool = True


def options_for_risk_tolerance(
    tolerance: RiskTolerance | str, time_horizon_days: float = 30
) -> DynamicOptions:
    low, high = RISK_TOLERANCE_RANGES[RiskTolerance(tolerance)]
    return DynamicOptions(
        time_horizon_days=time_horizon_days,
        min_spread_ratio=low,
        max_spread_ratio=high,
    )


def _check_options(options: DynamicOptions) -> None:
    if not (0.0 <= options.min_spread_ratio <= options.max_spread_ratio <= 1.0):
        raise InvalidOptimizerOptionsError(
            f"spread ratio range [{options.min_spread_ratio}, {options.max_spread_ratio}] "
            "must satisfy 0 <= min <= max <= 1"
        )
    if options.time_horizon_days <= 0:
        raise InvalidOptimizerOptionsError(
            f"time_horizon_days {options.time_horizon_days} must be > 0"
        )
    if options.candidate_count is not None and options.candidate_count < 1:
        raise InvalidOptimizerOptionsError(
            f"candidate_count {options.candidate_count} must be >= 1"
        )
    if options.order_book_depth is not None and options.order_book_depth < 0:
        raise InvalidOptimizerOptionsError(
            f"order_book_depth {options.order_book_depth} must be >= 0"
        )
    if options.transaction_cost_rate is not None and options.transaction_cost_rate < 0:
        raise InvalidOptimizerOptionsError(
            f"transaction_cost_rate {options.transaction_cost_rate} must be >= 0"
        )


def candidate_ratios(low: float, high: float, count: int) -> list[float]:
    """`count` evenly spaced ratios from low to high, both ends included."""
    if count == 1 or high <= low:
        return [high]
    step = (high - low) / (count - 1)
    ratios = [low + i * step for i in range(count - 1)]
    ratios.append(high)
    return ratios


def search_bounds(options: DynamicOptions, volatility: VolatilityMetrics) -> tuple[float, float]:
    """Caller bounds, with the lower one raised to the volatility floor if enabled."""
    low, high = options.min_spread_ratio, options.max_spread_ratio
    if options.respect_volatility_floor:
        floor = recommended_min_spread_ratio(volatility.volatility_score)
        low = min(max(low, floor), high)
    return low, high


def _evaluate(
    capital: float,
    market: MarketConfig,
    competition_estimate: float,
    spread_ratio: float,
    volatility: VolatilityMetrics,
    options: DynamicOptions,
) -> tuple[SpreadCandidate, PlacementStrategy, FillRiskLevel]:
    placement = build_placement(capital, market, spread_ratio, competition_estimate)
    spread = spread_ratio * market.max_spread
    fill = fill_probability(
        spread, volatility, options.order_book_depth, options.time_horizon_days
    )
    ev = expected_value(
        placement.expected_daily_reward,
        fill.probability,
        placement.capital_required,
        options.time_horizon_days,
        options.transaction_cost_rate,
    )
    candidate = SpreadCandidate(
        spread_ratio=spread_ratio,
        spread=spread,
        q_min=placement.expected_total_score,
        daily_reward=placement.expected_daily_reward,
        fill_probability=fill.probability,
        expected_value=ev,
        risk_adjusted_return=risk_adjusted_return(
            ev, placement.capital_required, fill.probability
        ),
    )
    return candidate, placement, fill.risk_level


def optimize_dynamic(
    capital: float,
    market: MarketConfig,
    competition_estimate: float,
    options: DynamicOptions | None = None,
    price_history: Sequence[PricePoint] | None = None,
) -> DynamicPlacementStrategy:
    """Search the spread range for the placement with the best expected value.

    Raises on invalid market config, negative capital or inconsistent
    options. Missing price history falls back to a mid-range volatility score.
    """
    options = options or DynamicOptions()
    check_market_config(market)
    check_capital(capital)
    _check_options(options)

    volatility = calculate_volatility(
        price_history, lookback_days_for_horizon(options.time_horizon_days)
    )
    low, high = search_bounds(options, volatility)
    count = options.candidate_count or settings.DYNAMIC_CANDIDATE_COUNT

    evaluated = [
        _evaluate(capital, market, competition_estimate, ratio, volatility, options)
        for ratio in candidate_ratios(low, high, count)
    ]

    best_ev = max(candidate.expected_value for candidate, _, _ in evaluated)
    threshold = best_ev - settings.DYNAMIC_TIE_TOLERANCE * max(1.0, abs(best_ev))
    # candidates are ascending in ratio: the last one over the threshold is the widest
    chosen, placement, risk_level = [e for e in evaluated if e[0].expected_value >= threshold][-1]

    logger.debug(
        "dynamic market=%s ratio=%.4f ev=%.4f fill=%.4f vol=%.1f candidates=%d",
        market.id,
        chosen.spread_ratio,
        chosen.expected_value,
        chosen.fill_probability,
        volatility.volatility_score,
        len(evaluated),
    )

    tips = list(placement.tips)
    if not volatility.has_history:
        tips.append("No recent price history: volatility assumed moderate")
    tips.append(
        f"Volatility: {volatility_level(volatility.volatility_score).value} "
        f"(score {volatility.volatility_score:.1f}/100)"
    )
    tips.append(
        f"Fill risk: {risk_level.value} ({chosen.fill_probability:.1%} over "
        f"{options.time_horizon_days:g} days)"
    )

    return DynamicPlacementStrategy(
        total_capital=placement.total_capital,
        capital_required=placement.capital_required,
        suggestions=placement.suggestions,
        expected_score=placement.expected_score,
        expected_total_score=placement.expected_total_score,
        expected_daily_reward=placement.expected_daily_reward,
        estimated_roi=placement.estimated_roi,
        tips=tuple(tips),
        fill_probability=chosen.fill_probability,
        volatility_score=volatility.volatility_score,
        expected_value=chosen.expected_value,
        risk_adjusted_return=chosen.risk_adjusted_return,
        optimal_spread_ratio=chosen.spread_ratio,
        fill_risk_level=risk_level,
        volatility=volatility,
        candidates=tuple(candidate for candidate, _, _ in evaluated),
    )
