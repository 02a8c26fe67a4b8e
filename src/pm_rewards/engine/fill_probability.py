"""Probability that a resting order is traded through before it is repriced.

Diffusion approximation with the hourly price σ:
  λ = (σ / spread) ** 2
  P(fill) = (1 - exp(-λ * hours)) * depth_adjustment, capped at MAX_FILL_PROBABILITY

Deeper books absorb moves, so depth scales P down by up to 50%. Without
price history a spread-bucket table is used instead. Both models are
non-increasing in spread.
"""

import math

from config.settings import settings
from src.pm_common.enums import FillRiskLevel
from src.pm_rewards.domain.models import FillProbabilityEstimate, VolatilityMetrics

HOURS_PER_DAY = 24

# (upper spread bound, base probability, extra probability per 30 days)
_CONSERVATIVE_BUCKETS = (
    (0.01, 0.50, 0.30),
    (0.02, 0.30, 0.25),
    (0.03, 0.15, 0.20),
    (math.inf, 0.05, 0.15),
)


def classify_fill_risk(probability: float) -> FillRiskLevel:
    if probability < 0.10:
        return FillRiskLevel.LOW
    if probability < 0.25:
        return FillRiskLevel.MEDIUM
    if probability < 0.50:
        return FillRiskLevel.HIGH
    return FillRiskLevel.VERY_HIGH


def depth_adjustment(order_book_depth: float) -> float:
    """1.0 for an empty book down to 0.5 at 100k shares and beyond."""
    normalized = min(max(order_book_depth, 0.0) / 100_000, 1.0)
    return max(1.0 - 0.5 * normalized, 0.5)


def _conservative_estimate(spread: float, time_horizon_days: float) -> FillProbabilityEstimate:
    horizon_hours = time_horizon_days * HOURS_PER_DAY
    for bound, base, per_month in _CONSERVATIVE_BUCKETS:
        if spread < bound:
            probability = base + (time_horizon_days / 30) * per_month
            break
    probability = min(probability, settings.MAX_FILL_PROBABILITY)
    return FillProbabilityEstimate(
        probability=probability,
        expected_hours_to_fill=horizon_hours * (1 - probability),
        confidence_lower=max(0.0, probability - 0.20),
        confidence_upper=min(1.0, probability + 0.20),
        risk_level=classify_fill_risk(probability),
    )


def fill_probability(
    spread: float,
    volatility: VolatilityMetrics,
    order_book_depth: float | None = None,
    time_horizon_days: float = 30,
) -> FillProbabilityEstimate:
    if spread <= 0:
        # at or through the midpoint: fills immediately
        return FillProbabilityEstimate(
            probability=1.0,
            expected_hours_to_fill=0.0,
            confidence_lower=1.0,
            confidence_upper=1.0,
            risk_level=FillRiskLevel.VERY_HIGH,
        )
    if not volatility.has_history:
        return _conservative_estimate(spread, time_horizon_days)

    if order_book_depth is None:
        order_book_depth = settings.DEFAULT_ORDER_BOOK_DEPTH
    horizon_hours = time_horizon_days * HOURS_PER_DAY
    sigma = volatility.hourly_std_dev
    lam = (sigma / spread) ** 2 if sigma > 0 else 0.0

    base = 1 - math.exp(-lam * horizon_hours)
    cap = settings.MAX_FILL_PROBABILITY
    probability = min(base * depth_adjustment(order_book_depth), cap)

    expected_hours = horizon_hours
    if lam > 0 and probability < cap:
        expected_hours = -math.log(1 - probability) / lam

    return FillProbabilityEstimate(
        probability=probability,
        expected_hours_to_fill=expected_hours,
        confidence_lower=max(0.0, probability - 0.15),
        confidence_upper=min(1.0, probability + 0.15),
        risk_level=classify_fill_risk(probability),
    )


def expected_value(
    daily_reward: float,
    fill_probability: float,
    capital: float,
    time_horizon_days: float = 30,
    transaction_cost_rate: float | None = None,
) -> float:
    """Reward over the days we expect to stay resting, minus the expected cost of a fill."""
    if transaction_cost_rate is None:
        transaction_cost_rate = settings.DEFAULT_TRANSACTION_COST_RATE
    expected_days_active = time_horizon_days * (1 - fill_probability)
    expected_loss = capital * transaction_cost_rate * fill_probability
    return daily_reward * expected_days_active - expected_loss


def risk_adjusted_return(ev: float, capital: float, fill_probability: float) -> float:
    """EV / (capital * risk factor), risk factor 0.5 (no fill risk) to 2.0 (certain fill)."""
    if capital <= 0:
        return 0.0
    risk_factor = 0.5 + fill_probability * 1.5
    return ev / (capital * risk_factor)
