"""Total competing Q_min in a market.

Exact mode scores the full order book. Heuristic mode is a hand-tuned prior
built from aggregate stats, meant for scanning many markets cheaply; its
constants live in config.settings and carry no guarantee beyond their shape
(each factor is monotone and capped).
"""

import logging
from collections.abc import Sequence

from config.settings import settings
from src.pm_common.enums import CompetitionSource
from src.pm_common.errors import InvalidOrderError
from src.pm_rewards.domain.models import CompetitionEstimate, MarketConfig, MarketStats, Order
from src.pm_rewards.engine.scoring import score_orders

logger = logging.getLogger(__name__)


def estimate_competition_exact(orders: Sequence[Order], market: MarketConfig) -> float:
    return score_orders(orders, market).q_min


def estimate_competition_heuristic(stats: MarketStats, reward_pool: float) -> float:
    """(liquidity factor + volume factor + pool factor) * average LP score."""
    liquidity_factor = min(
        max(stats.liquidity, 0.0) / settings.HEURISTIC_LIQUIDITY_DIVISOR,
        settings.HEURISTIC_LIQUIDITY_CAP,
    )
    volume_factor = min(
        max(stats.volume_24h, 0.0) / settings.HEURISTIC_VOLUME_DIVISOR,
        settings.HEURISTIC_VOLUME_CAP,
    )
    pool_factor = min(
        max(reward_pool, 0.0) / settings.HEURISTIC_POOL_DIVISOR,
        settings.HEURISTIC_POOL_CAP,
    )
    return (liquidity_factor + volume_factor + pool_factor) * settings.HEURISTIC_AVG_LP_SCORE


def estimate_competition(
    market: MarketConfig,
    stats: MarketStats | None = None,
    orders: Sequence[Order] | None = None,
    prefer_exact: bool = True,
) -> CompetitionEstimate:
    """Pick exact mode when a non-empty order book is available, else the heuristic.

    A book holding a malformed order is logged and replaced by the heuristic.
    Missing stats are treated as an idle market (zero liquidity and volume).
    """
    if prefer_exact and orders:
        try:
            total = estimate_competition_exact(orders, market)
        except InvalidOrderError as exc:
            logger.warning("Unusable order book for market %s: %s", market.id, exc.message)
        else:
            logger.debug("competition market=%s source=exact q_min=%.4f", market.id, total)
            return CompetitionEstimate(total_q_min=total, source=CompetitionSource.EXACT)

    stats = stats or MarketStats(volume_24h=0.0, liquidity=0.0)
    total = estimate_competition_heuristic(stats, market.reward_pool)
    logger.debug("competition market=%s source=heuristic q_min=%.4f", market.id, total)
    return CompetitionEstimate(total_q_min=total, source=CompetitionSource.HEURISTIC)
