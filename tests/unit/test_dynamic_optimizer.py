"""Tests for pm_rewards.engine.dynamic_optimizer."""

from datetime import UTC, datetime, timedelta

import pytest

from src.pm_common.enums import RiskTolerance
from src.pm_common.errors import (
    InvalidCapitalError,
    InvalidMarketConfigError,
    InvalidOptimizerOptionsError,
)
from src.pm_rewards.domain.models import DynamicPlacementStrategy, MarketConfig, PricePoint
from src.pm_rewards.engine.dynamic_optimizer import (
    DynamicOptions,
    candidate_ratios,
    optimize_dynamic,
    options_for_risk_tolerance,
)
from src.pm_rewards.engine.scoring import score_orders

T0 = datetime(2025, 3, 1, tzinfo=UTC)


def _market(**kwargs) -> MarketConfig:
    defaults = dict(
        id="MKT-1", question="Q?", midpoint=0.5, max_spread=0.05, min_size=100, reward_pool=100,
    )
    defaults.update(kwargs)
    return MarketConfig(**defaults)


def _history(prices: list[float]) -> list[PricePoint]:
    return [PricePoint(timestamp=T0 + timedelta(hours=i), price=p) for i, p in enumerate(prices)]


FLAT = _history([0.5] * 72)
CHOPPY = _history([0.50, 0.503, 0.498, 0.501] * 40)


class TestCandidateRatios:
    def test_endpoints_included(self) -> None:
        ratios = candidate_ratios(0.25, 0.80, 12)
        assert len(ratios) == 12
        assert ratios[0] == 0.25
        assert ratios[-1] == 0.80
        assert ratios == sorted(ratios)

    def test_single_candidate_is_widest(self) -> None:
        assert candidate_ratios(0.3, 0.6, 1) == [0.6]

    def test_degenerate_range(self) -> None:
        assert candidate_ratios(0.5, 0.5, 12) == [0.5]


class TestSearch:
    def test_returns_dynamic_strategy(self) -> None:
        strategy = optimize_dynamic(1000, _market(), 200.0)
        assert isinstance(strategy, DynamicPlacementStrategy)
        assert len(strategy.suggestions) == 2
        assert 0.0 <= strategy.volatility_score <= 100.0
        assert 0.0 <= strategy.fill_probability <= 1.0

    @pytest.mark.parametrize("history", [None, FLAT, CHOPPY])
    @pytest.mark.parametrize("bounds", [(0.25, 0.80), (0.40, 0.80), (0.20, 0.50), (0.6, 0.6)])
    def test_choice_within_caller_bounds(self, history, bounds) -> None:
        low, high = bounds
        options = DynamicOptions(min_spread_ratio=low, max_spread_ratio=high)
        strategy = optimize_dynamic(1000, _market(), 150.0, options, price_history=history)
        assert low <= strategy.optimal_spread_ratio <= high
        for candidate in strategy.candidates:
            assert low <= candidate.spread_ratio <= high

    def test_equal_objectives_prefer_widest(self) -> None:
        # flat history => no fill risk; no competition => whole pool at every spread
        options = DynamicOptions(min_spread_ratio=0.25, max_spread_ratio=0.75, candidate_count=6)
        strategy = optimize_dynamic(1000, _market(), 0.0, options, price_history=FLAT)
        evs = {round(c.expected_value, 6) for c in strategy.candidates}
        assert len(evs) == 1
        assert strategy.optimal_spread_ratio == 0.75

    def test_tighter_spread_wins_when_reward_share_matters(self) -> None:
        options = DynamicOptions(min_spread_ratio=0.30, max_spread_ratio=0.80)
        strategy = optimize_dynamic(1000, _market(), 1000.0, options, price_history=FLAT)
        assert strategy.optimal_spread_ratio == pytest.approx(0.30)
        assert strategy.expected_value == max(c.expected_value for c in strategy.candidates)

    def test_candidate_count(self) -> None:
        options = DynamicOptions(min_spread_ratio=0.2, max_spread_ratio=0.8, candidate_count=7,
                                 respect_volatility_floor=False)
        strategy = optimize_dynamic(1000, _market(), 100.0, options)
        assert len(strategy.candidates) == 7

    def test_fill_probability_non_increasing_across_candidates(self) -> None:
        options = DynamicOptions(respect_volatility_floor=False)
        strategy = optimize_dynamic(1000, _market(), 100.0, options, price_history=CHOPPY)
        probs = [c.fill_probability for c in strategy.candidates]
        assert probs == sorted(probs, reverse=True)

    @pytest.mark.parametrize("midpoint", [0.5, 0.3])
    def test_selected_placement_round_trips(self, midpoint) -> None:
        market = _market(midpoint=midpoint)
        strategy = optimize_dynamic(1000, market, 100.0, price_history=CHOPPY)
        assert score_orders(strategy.orders(), market).q_min == pytest.approx(
            strategy.expected_total_score
        )
        spread = abs(strategy.buy.price - market.midpoint)
        assert spread == pytest.approx(strategy.optimal_spread_ratio * market.max_spread)
        no_spread = abs(strategy.sell.price - (1 - market.midpoint))
        assert no_spread == pytest.approx(spread)
        assert strategy.expected_score.q_two > 0


class TestVolatilityHandling:
    def test_missing_history_uses_mid_range_score(self) -> None:
        strategy = optimize_dynamic(1000, _market(), 100.0, price_history=None)
        assert strategy.volatility_score == 50.0
        assert strategy.volatility is not None
        assert strategy.volatility.has_history is False
        assert any("No recent price history" in tip for tip in strategy.tips)

    def test_volatility_floor_raises_lower_bound(self) -> None:
        # mid-range volatility recommends at least 45% of max spread
        options = DynamicOptions(min_spread_ratio=0.25, max_spread_ratio=0.80)
        strategy = optimize_dynamic(1000, _market(), 100.0, options)
        assert min(c.spread_ratio for c in strategy.candidates) == pytest.approx(0.45)

    def test_floor_never_exceeds_upper_bound(self) -> None:
        options = DynamicOptions(min_spread_ratio=0.20, max_spread_ratio=0.30)
        strategy = optimize_dynamic(1000, _market(), 100.0, options)
        assert strategy.optimal_spread_ratio == pytest.approx(0.30)


class TestRiskTolerance:
    def test_presets(self) -> None:
        assert options_for_risk_tolerance("low").min_spread_ratio == 0.40
        high = options_for_risk_tolerance(RiskTolerance.HIGH, time_horizon_days=7)
        assert (high.min_spread_ratio, high.max_spread_ratio) == (0.20, 0.50)
        assert high.time_horizon_days == 7

    def test_unknown_tolerance(self) -> None:
        with pytest.raises(ValueError):
            options_for_risk_tolerance("reckless")


class TestInvalidInput:
    def test_inverted_bounds(self) -> None:
        with pytest.raises(InvalidOptimizerOptionsError) as exc_info:
            optimize_dynamic(1000, _market(), 0.0, DynamicOptions(min_spread_ratio=0.8,
                                                                  max_spread_ratio=0.2))
        assert exc_info.value.code == 6002

    def test_zero_horizon(self) -> None:
        with pytest.raises(InvalidOptimizerOptionsError):
            optimize_dynamic(1000, _market(), 0.0, DynamicOptions(time_horizon_days=0))

    def test_negative_capital(self) -> None:
        with pytest.raises(InvalidCapitalError):
            optimize_dynamic(-10, _market(), 0.0)

    def test_bad_midpoint(self) -> None:
        with pytest.raises(InvalidMarketConfigError):
            optimize_dynamic(1000, _market(midpoint=-0.1), 0.0)
