"""Tests for pm_rewards.engine.competition."""

import logging

import pytest

from src.pm_common.enums import CompetitionSource, OrderType, OutcomeSide
from src.pm_rewards.domain.models import MarketConfig, MarketStats, Order
from src.pm_rewards.engine.competition import (
    estimate_competition,
    estimate_competition_exact,
    estimate_competition_heuristic,
)
from src.pm_rewards.engine.scoring import score_orders


def _market(**kwargs) -> MarketConfig:
    defaults = dict(
        id="MKT-1", question="Q?", midpoint=0.5, max_spread=0.05, min_size=100, reward_pool=100,
    )
    defaults.update(kwargs)
    return MarketConfig(**defaults)


def _book() -> list[Order]:
    return [
        Order(price=0.48, size=500, side=OutcomeSide.YES, type=OrderType.BID),
        Order(price=0.49, size=300, side=OutcomeSide.YES, type=OrderType.BID),
        Order(price=0.52, size=400, side=OutcomeSide.NO, type=OrderType.ASK),
    ]


class TestExactMode:
    def test_equals_q_min_of_book(self) -> None:
        market = _market()
        assert estimate_competition_exact(_book(), market) == score_orders(_book(), market).q_min

    def test_preferred_when_orders_available(self) -> None:
        est = estimate_competition(
            _market(), stats=MarketStats(volume_24h=5e6, liquidity=1e6), orders=_book()
        )
        assert est.source is CompetitionSource.EXACT
        assert est.total_q_min == pytest.approx(score_orders(_book(), _market()).q_min)

    def test_empty_book_falls_back_to_heuristic(self) -> None:
        est = estimate_competition(_market(), stats=MarketStats(0, 0), orders=[])
        assert est.source is CompetitionSource.HEURISTIC

    def test_malformed_book_falls_back_to_heuristic(self, caplog) -> None:
        book = _book() + [Order(price=1.02, size=50, side=OutcomeSide.YES, type=OrderType.BID)]
        stats = MarketStats(volume_24h=2_000_000, liquidity=250_000)
        with caplog.at_level(logging.WARNING):
            est = estimate_competition(_market(), stats=stats, orders=book)
        assert est.source is CompetitionSource.HEURISTIC
        assert est.total_q_min == pytest.approx(estimate_competition_heuristic(stats, 100))
        assert "MKT-1" in caplog.text

    def test_prefer_exact_false_uses_heuristic(self) -> None:
        est = estimate_competition(_market(), orders=_book(), prefer_exact=False)
        assert est.source is CompetitionSource.HEURISTIC


class TestHeuristicMode:
    @pytest.mark.calibration
    def test_factor_sum_times_average_score(self) -> None:
        # liquidity 2.5 + volume 2.0 + pool 1.0 = 5.5 -> 5.5 * 35
        stats = MarketStats(volume_24h=2_000_000, liquidity=250_000)
        assert estimate_competition_heuristic(stats, 100) == pytest.approx(192.5)

    @pytest.mark.calibration
    def test_factors_are_capped(self) -> None:
        stats = MarketStats(volume_24h=1e12, liquidity=1e12)
        # (10 + 5 + 5) * 35
        assert estimate_competition_heuristic(stats, 1e9) == pytest.approx(700.0)

    def test_monotone_in_each_input(self) -> None:
        base = estimate_competition_heuristic(MarketStats(100_000, 100_000), 50)
        assert estimate_competition_heuristic(MarketStats(100_000, 200_000), 50) > base
        assert estimate_competition_heuristic(MarketStats(200_000, 100_000), 50) > base
        assert estimate_competition_heuristic(MarketStats(100_000, 100_000), 80) > base

    def test_idle_market_competes_on_pool_only(self) -> None:
        est = estimate_competition(_market(reward_pool=0))
        assert est.total_q_min == 0.0
        assert est.source is CompetitionSource.HEURISTIC

    def test_never_negative(self) -> None:
        assert estimate_competition_heuristic(MarketStats(-5, -5), -10) == 0.0
