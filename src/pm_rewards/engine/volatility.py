"""Volatility metrics from a recent price-history series.

The series is expected at roughly hourly fidelity, so consecutive points
give hourly changes and points 24 apart give daily changes.

Score (0-100):
  60 * min(hourly_std / 0.05, 1) + 20 * min(daily_std / 0.10, 1)
  + 20 * min(max_hourly_swing / 0.10, 1)
"""

from collections.abc import Sequence
from datetime import timedelta
from statistics import pstdev

from config.settings import settings
from src.pm_common.enums import VolatilityLevel
from src.pm_rewards.domain.models import PricePoint, VolatilityMetrics

HOURLY_STEP = 1
DAILY_STEP = 24


def lookback_days_for_horizon(time_horizon_days: float) -> float:
    return min(max(time_horizon_days, 1), settings.VOLATILITY_LOOKBACK_CAP_DAYS)


def price_changes(prices: Sequence[float], step: int) -> list[float]:
    return [prices[i] - prices[i - step] for i in range(step, len(prices))]


def volatility_score(hourly_std_dev: float, daily_std_dev: float, max_hourly_swing: float) -> float:
    hourly = min(hourly_std_dev / 0.05, 1.0) * 60
    daily = min(daily_std_dev / 0.10, 1.0) * 20
    swing = min(max_hourly_swing / 0.10, 1.0) * 20
    return min(max(hourly + daily + swing, 0.0), 100.0)


def _no_history() -> VolatilityMetrics:
    return VolatilityMetrics(
        hourly_std_dev=0.0,
        daily_std_dev=0.0,
        max_hourly_swing=0.0,
        max_daily_swing=0.0,
        volatility_score=settings.DEFAULT_VOLATILITY_SCORE,
        sample_count=0,
        has_history=False,
    )


def calculate_volatility(
    price_history: Sequence[PricePoint] | None, lookback_days: float = 7
) -> VolatilityMetrics:
    """Metrics over the trailing `lookback_days` of the series.

    Fewer than two usable points yields the mid-range default score with
    has_history=False; it never raises for missing history.
    """
    if not price_history:
        return _no_history()

    points = sorted(price_history, key=lambda p: p.timestamp)
    cutoff = points[-1].timestamp - timedelta(days=lookback_days)
    prices = [p.price for p in points if p.timestamp >= cutoff]
    if len(prices) < 2:
        return _no_history()

    hourly = price_changes(prices, HOURLY_STEP)
    daily = price_changes(prices, DAILY_STEP)

    hourly_std_dev = pstdev(hourly) if hourly else 0.0
    daily_std_dev = pstdev(daily) if daily else 0.0
    max_hourly_swing = max((abs(c) for c in hourly), default=0.0)
    max_daily_swing = max((abs(c) for c in daily), default=0.0)

    return VolatilityMetrics(
        hourly_std_dev=hourly_std_dev,
        daily_std_dev=daily_std_dev,
        max_hourly_swing=max_hourly_swing,
        max_daily_swing=max_daily_swing,
        volatility_score=volatility_score(hourly_std_dev, daily_std_dev, max_hourly_swing),
        sample_count=len(prices),
        has_history=True,
    )


def volatility_level(score: float) -> VolatilityLevel:
    if score < 20:
        return VolatilityLevel.VERY_STABLE
    if score < 40:
        return VolatilityLevel.STABLE
    if score < 60:
        return VolatilityLevel.MODERATE
    if score < 80:
        return VolatilityLevel.VOLATILE
    return VolatilityLevel.EXTREMELY_VOLATILE


def recommended_min_spread_ratio(score: float) -> float:
    """Calmer markets tolerate quoting closer to the midpoint."""
    if score < 20:
        return 0.25
    if score < 40:
        return 0.35
    if score < 60:
        return 0.45
    if score < 80:
        return 0.60
    return 0.80
