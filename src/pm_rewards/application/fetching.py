"""Bounded fan-out for per-market order-book fetches.

The network client lives outside this package; callers pass an async
`fetch(market_id)` coroutine function. At most FETCH_BATCH_SIZE requests
are in flight, and batches are separated by FETCH_BATCH_DELAY_SECONDS to
stay under the upstream rate limit.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable, Iterable, Sequence
from dataclasses import replace
from typing import TypeVar

from config.settings import settings
from src.pm_rewards.application.ranker import MarketCandidate, RankOptions, rank_opportunities
from src.pm_rewards.domain.models import MarketOpportunity, Order

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


async def fetch_in_batches(
    keys: Iterable[K],
    fetch: Callable[[K], Awaitable[T]],
    batch_size: int | None = None,
    delay_seconds: float | None = None,
) -> dict[K, T | None]:
    """Run `fetch` for every key, `batch_size` at a time.

    A failing fetch is logged and recorded as None; it never aborts the
    other fetches. Result order follows `keys`.
    """
    batch_size = batch_size or settings.FETCH_BATCH_SIZE
    if delay_seconds is None:
        delay_seconds = settings.FETCH_BATCH_DELAY_SECONDS
    keys = list(dict.fromkeys(keys))
    semaphore = asyncio.Semaphore(batch_size)

    async def _guarded(key: K) -> T | None:
        async with semaphore:
            try:
                return await fetch(key)
            except Exception as exc:
                logger.warning("Fetch failed for %s: %r", key, exc)
                return None

    results: dict[K, T | None] = {}
    for start in range(0, len(keys), batch_size):
        if start > 0 and delay_seconds > 0:
            await asyncio.sleep(delay_seconds)
        batch = keys[start : start + batch_size]
        values = await asyncio.gather(*(_guarded(key) for key in batch))
        results.update(zip(batch, values))
        logger.debug("Fetched batch %d-%d of %d", start + 1, start + len(batch), len(keys))
    return results


async def rank_with_order_books(
    capital: float,
    markets: Sequence[MarketCandidate],
    fetch_orders: Callable[[str], Awaitable[Sequence[Order]]],
    options: RankOptions | None = None,
    batch_size: int | None = None,
    delay_seconds: float | None = None,
) -> list[MarketOpportunity]:
    """Fetch every market's order book, then rank using exact competition.

    Markets whose fetch failed or returned no orders use the heuristic.
    """
    order_books = await fetch_in_batches(
        [candidate.market.id for candidate in markets],
        fetch_orders,
        batch_size=batch_size,
        delay_seconds=delay_seconds,
    )
    enriched = [
        replace(candidate, orders=order_books.get(candidate.market.id) or candidate.orders)
        for candidate in markets
    ]
    options = replace(options or RankOptions(), use_exact_competition=True)
    return rank_opportunities(capital, enriched, options)
