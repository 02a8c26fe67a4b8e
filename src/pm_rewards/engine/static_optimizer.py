"""Closed-form two-sided placement at a fixed fraction of the max spread.

Buy leg:  YES BID at midpoint - d
Sell leg: NO  BID at 1 - (midpoint + d), the NO-token price of a YES ask at
          midpoint + d, i.e. d away from the NO midpoint
with d = spread_ratio * max_spread, capital split evenly and
size = (capital / 2) / leg_price, raised to min_size when short. Leg prices
are what one share of each token costs.
"""

from config.settings import settings
from src.pm_common.cents import price_to_cents_display, usd_display
from src.pm_common.enums import LegSide, OrderType, OutcomeSide
from src.pm_rewards.domain.models import (
    MarketConfig,
    Order,
    PlacementStrategy,
    PlacementSuggestion,
)
from src.pm_rewards.domain.rules import check_capital, check_market_config
from src.pm_rewards.engine.reward import estimate_reward
from src.pm_rewards.engine.scoring import score_order, score_orders

EDGE_MIDPOINT_LOW = 0.10
EDGE_MIDPOINT_HIGH = 0.90
CAPITAL_EPSILON = 1e-9  # size * price rounding


def _clamp_price(price: float) -> float:
    return min(max(price, settings.MIN_LEG_PRICE), settings.MAX_LEG_PRICE)


def leg_prices(market: MarketConfig, spread: float) -> tuple[float, float]:
    """(YES bid price, NO bid price) at `spread` either side of the midpoint."""
    yes_bid = _clamp_price(market.midpoint - spread)
    yes_ask = _clamp_price(market.midpoint + spread)
    return yes_bid, 1 - yes_ask


def _leg(
    side: LegSide,
    outcome: OutcomeSide,
    order_type: OrderType,
    price: float,
    capital_per_side: float,
    market: MarketConfig,
) -> PlacementSuggestion:
    size = max(capital_per_side / price, market.min_size)
    expected = score_order(Order(price=price, size=size, side=outcome, type=order_type), market)
    direction = "below" if side is LegSide.BUY else "above"
    yes_price = price if outcome == OutcomeSide.YES else 1 - price
    distance = abs(yes_price - market.midpoint)
    return PlacementSuggestion(
        side=side,
        price=price,
        size=size,
        capital_required=size * price,
        expected_score=expected,
        reasoning=(
            f"Place {side.value} order: buy {outcome.value} at {price_to_cents_display(price)} "
            f"({price_to_cents_display(distance)} {direction} midpoint) "
            f"with size {size:.0f} shares"
        ),
        outcome=outcome,
        order_type=order_type,
    )


def _tips(
    capital: float,
    capital_required: float,
    market: MarketConfig,
    spread_ratio: float,
    q_min: float,
    competition_q_min: float | None,
) -> tuple[str, ...]:
    spread = spread_ratio * market.max_spread
    tips = [
        f"Keep orders about {price_to_cents_display(spread)} from the midpoint "
        f"({spread_ratio:.0%} of the max spread)",
        "Maintain two-sided liquidity (both buy and sell orders); one-sided quotes score zero",
    ]
    if competition_q_min is not None:
        tips.append(
            f"Your Q_min will be {q_min:.2f}, competing against an estimated "
            f"{competition_q_min:.0f} total Q_min"
        )
    midpoint_display = price_to_cents_display(market.midpoint)
    if market.midpoint < EDGE_MIDPOINT_LOW or market.midpoint > EDGE_MIDPOINT_HIGH:
        tips.append(
            f"Market is near the edge ({midpoint_display}); "
            "consider whether you can keep both sides quoted"
        )
    else:
        tips.append(f"Midpoint at {midpoint_display} suits two-sided liquidity")

    if capital_required > capital + CAPITAL_EPSILON:
        tips.insert(
            0,
            f"Warning: minimum order size needs {usd_display(capital_required)} "
            f"in total (you have {usd_display(capital)})",
        )
    return tuple(tips)


def build_placement(
    capital: float,
    market: MarketConfig,
    spread_ratio: float,
    competition_q_min: float | None = None,
) -> PlacementStrategy:
    """Placement at `spread_ratio` of the max spread. Inputs are assumed valid.

    The reward is computed against competition_q_min + own q_min; with no
    competition figure the user is assumed alone in the market.
    """
    yes_price, no_price = leg_prices(market, spread_ratio * market.max_spread)
    capital_per_side = capital / 2

    buy = _leg(LegSide.BUY, OutcomeSide.YES, OrderType.BID, yes_price, capital_per_side, market)
    sell = _leg(LegSide.SELL, OutcomeSide.NO, OrderType.BID, no_price, capital_per_side, market)

    score = score_orders([buy.to_order(), sell.to_order()], market)
    capital_required = buy.capital_required + sell.capital_required
    total_q_min = max(competition_q_min or 0.0, 0.0) + score.q_min
    reward = estimate_reward(score.q_min, total_q_min, market.reward_pool, capital_required)

    return PlacementStrategy(
        total_capital=capital,
        capital_required=capital_required,
        suggestions=(buy, sell),
        expected_score=score,
        expected_total_score=score.q_min,
        expected_daily_reward=reward.daily_reward,
        estimated_roi=reward.annualized_apy,
        tips=_tips(capital, capital_required, market, spread_ratio, score.q_min, competition_q_min),
    )


def optimize_static(
    capital: float,
    market: MarketConfig,
    competition_q_min: float | None = None,
) -> PlacementStrategy:
    """Balanced placement at STATIC_SPREAD_RATIO (80%) of the max spread."""
    check_market_config(market)
    check_capital(capital)
    return build_placement(capital, market, settings.STATIC_SPREAD_RATIO, competition_q_min)
