"""Structural input checks. Each raises an AppError subclass on failure.

Only inputs the engine cannot reason about at all are rejected here; empty
order lists, zero competition or missing history are handled downstream.
"""

import math

from src.pm_common.errors import (
    InvalidCapitalError,
    InvalidMarketConfigError,
    InvalidOrderError,
)
from src.pm_rewards.domain.models import MarketConfig, Order


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def check_market_config(market: MarketConfig) -> None:
    """Raise InvalidMarketConfigError(3003) for a config the scorer cannot use."""
    if not market.id:
        raise InvalidMarketConfigError(market.id, "id is required")
    for name in ("midpoint", "max_spread", "min_size", "reward_pool"):
        if not _is_number(getattr(market, name)):
            raise InvalidMarketConfigError(market.id, f"{name} must be a finite number")
    if not (0.0 <= market.midpoint <= 1.0):
        raise InvalidMarketConfigError(market.id, f"midpoint {market.midpoint} not in [0, 1]")
    if market.max_spread <= 0:
        raise InvalidMarketConfigError(market.id, f"max_spread {market.max_spread} must be > 0")
    if market.min_size < 0:
        raise InvalidMarketConfigError(market.id, f"min_size {market.min_size} must be >= 0")
    if market.reward_pool < 0:
        raise InvalidMarketConfigError(market.id, f"reward_pool {market.reward_pool} must be >= 0")


def check_order(order: Order) -> None:
    """Raise InvalidOrderError(4007) for a negative size or a price outside [0, 1]."""
    if not _is_number(order.size) or order.size < 0:
        raise InvalidOrderError(f"size {order.size} must be a non-negative number")
    if not _is_number(order.price) or not (0.0 <= order.price <= 1.0):
        raise InvalidOrderError(f"price {order.price} not in [0, 1]")


def check_capital(capital: float) -> None:
    """Raise InvalidCapitalError(6001) if capital is negative or not a number."""
    if not _is_number(capital) or capital < 0:
        raise InvalidCapitalError(capital)
