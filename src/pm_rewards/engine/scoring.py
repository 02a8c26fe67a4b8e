"""Liquidity-reward Q-score.

Per order:   S = ((v - s) / v) ** 2 * b * size
  v = max_spread, s = |price - side midpoint|, b = boost
  side midpoint = midpoint for YES orders, 1 - midpoint for NO orders
Per side:    Q_one = sum over YES orders, Q_two = sum over NO orders
Market:      Q_min = min(Q_one, Q_two)

Orders smaller than min_size or further than v from the midpoint score 0.
Quoting a single side therefore always yields Q_min == 0.
"""

from collections.abc import Iterable

from src.pm_common.enums import OutcomeSide
from src.pm_rewards.domain.models import CalculationCheck, MarketConfig, Order, ScoreResult
from src.pm_rewards.domain.rules import check_market_config, check_order


def order_spread(price: float, midpoint: float, side: OutcomeSide = OutcomeSide.YES) -> float:
    """Distance from the order token's own midpoint in probability points.

    `midpoint` is the YES midpoint; a NO token trades around 1 - midpoint.
    """
    if side == OutcomeSide.NO:
        midpoint = 1 - midpoint
    return abs(price - midpoint)


def spread_score(max_spread: float, spread: float, boost: float = 1.0) -> float:
    """Squared spread ratio: 1.0 at the midpoint, 0.0 at (or beyond) the edge."""
    if spread > max_spread:
        return 0.0
    ratio = (max_spread - spread) / max_spread
    ratio = min(max(ratio, 0.0), 1.0)
    return ratio * ratio * boost


def order_score(max_spread: float, spread: float, size: float, boost: float = 1.0) -> float:
    return spread_score(max_spread, spread, boost) * size


def score_order(order: Order, market: MarketConfig, boost: float = 1.0) -> float:
    """Contribution of a single order to its side's score."""
    if order.size < market.min_size:
        return 0.0
    spread = order_spread(order.price, market.midpoint, order.side)
    return order_score(market.max_spread, spread, order.size, boost)


def side_score(
    orders: Iterable[Order], market: MarketConfig, side: OutcomeSide, boost: float = 1.0
) -> float:
    score = 0.0
    for order in orders:
        if order.side == side:
            score += score_order(order, market, boost)
    return score


def score_orders(orders: Iterable[Order], market: MarketConfig, boost: float = 1.0) -> ScoreResult:
    """Score a set of orders against one market.

    Raises InvalidMarketConfigError / InvalidOrderError for structurally bad
    input. Summation follows the input order so results are reproducible.
    """
    check_market_config(market)
    orders = list(orders)
    for order in orders:
        check_order(order)

    q_one = side_score(orders, market, OutcomeSide.YES, boost)
    q_two = side_score(orders, market, OutcomeSide.NO, boost)
    return ScoreResult(q_one=q_one, q_two=q_two, q_min=min(q_one, q_two))


def validate_calculation(
    calculated_reward: float, actual_payout: float, tolerance: float = 0.01
) -> CalculationCheck:
    """Compare a predicted reward with a known payout (1% tolerance by default)."""
    error = abs(calculated_reward - actual_payout)
    error_percent = error / actual_payout if actual_payout > 0 else 0.0
    return CalculationCheck(
        is_valid=error_percent <= tolerance,
        error=error,
        error_percent=error_percent,
    )
