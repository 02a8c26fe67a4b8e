"""Rank reward markets by expected daily reward per unit of capital.

Per market: competition estimate -> static placement -> reward share.
Markets where the caller's capital is below ADMISSION_CAPITAL_RATIO of the
recommended minimum are dropped; the rest are sorted by capital efficiency.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from config.settings import settings
from src.pm_common.enums import CompetitionLevel
from src.pm_common.errors import AppError
from src.pm_rewards.domain.models import MarketConfig, MarketOpportunity, MarketStats, Order
from src.pm_rewards.domain.rules import check_capital, check_market_config
from src.pm_rewards.engine.competition import estimate_competition
from src.pm_rewards.engine.static_optimizer import optimize_static

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarketCandidate:
    """One market as supplied by the data layer."""

    market: MarketConfig
    stats: MarketStats | None = None
    orders: Sequence[Order] | None = None  # competitors' resting orders, if fetched


@dataclass(frozen=True)
class RankOptions:
    use_exact_competition: bool = False
    limit: int | None = None
    skip_invalid: bool = False


def competition_level(total_q_min: float) -> CompetitionLevel:
    if total_q_min < settings.COMPETITION_LOW_THRESHOLD:
        return CompetitionLevel.LOW
    if total_q_min < settings.COMPETITION_MEDIUM_THRESHOLD:
        return CompetitionLevel.MEDIUM
    return CompetitionLevel.HIGH


def analyze_market_opportunity(
    capital: float,
    candidate: MarketCandidate,
    options: RankOptions | None = None,
) -> MarketOpportunity:
    """Unfiltered opportunity row for a single market."""
    options = options or RankOptions()
    market = candidate.market
    check_market_config(market)
    check_capital(capital)

    competition = estimate_competition(
        market,
        stats=candidate.stats,
        orders=candidate.orders,
        prefer_exact=options.use_exact_competition,
    )
    placement = optimize_static(capital, market, competition.total_q_min)

    daily_reward = placement.expected_daily_reward
    capital_efficiency = daily_reward / capital if capital > 0 else 0.0

    min_size_capital = market.min_size * (placement.buy.price + placement.sell.price)
    recommended_capital = max(
        min_size_capital,
        competition.total_q_min * settings.COMPETITION_CAPITAL_SHARE,
    )

    return MarketOpportunity(
        market_id=market.id,
        question=market.question,
        reward_pool=market.reward_pool,
        estimated_competition=competition.total_q_min,
        competition_source=competition.source,
        estimated_daily_reward=daily_reward,
        capital_efficiency=capital_efficiency,
        roi=capital_efficiency * 365 * 100,
        competition_level=competition_level(competition.total_q_min),
        recommended_capital=recommended_capital,
    )


def is_admissible(capital: float, opportunity: MarketOpportunity) -> bool:
    return capital >= opportunity.recommended_capital * settings.ADMISSION_CAPITAL_RATIO


def rank_opportunities(
    capital: float,
    markets: Iterable[MarketCandidate],
    options: RankOptions | None = None,
) -> list[MarketOpportunity]:
    """Admissible opportunities, best capital efficiency first.

    With options.skip_invalid a market with a broken config is logged and
    left out instead of aborting the whole scan.
    """
    options = options or RankOptions()
    check_capital(capital)

    opportunities: list[MarketOpportunity] = []
    for candidate in markets:
        try:
            opportunity = analyze_market_opportunity(capital, candidate, options)
        except AppError as exc:
            if not options.skip_invalid:
                raise
            logger.warning("Skipping market %s: %s", candidate.market.id, exc.message)
            continue
        if is_admissible(capital, opportunity):
            opportunities.append(opportunity)

    opportunities.sort(key=lambda o: o.capital_efficiency, reverse=True)
    if options.limit is not None:
        opportunities = opportunities[: options.limit]
    return opportunities
