from math import inf, nan

import pytest

from src.pm_common.enums import OrderType, OutcomeSide
from src.pm_common.errors import InvalidCapitalError, InvalidMarketConfigError, InvalidOrderError
from src.pm_rewards.domain.models import MarketConfig, Order
from src.pm_rewards.domain.rules import check_capital, check_market_config, check_order


def _market(**kwargs) -> MarketConfig:
    defaults = dict(
        id="MKT-1", question="Q?", midpoint=0.5, max_spread=0.05, min_size=100, reward_pool=100,
    )
    defaults.update(kwargs)
    return MarketConfig(**defaults)


class TestMarketConfig:
    def test_valid(self, market) -> None:
        check_market_config(market)  # no exception

    def test_boundary_midpoints(self) -> None:
        check_market_config(_market(midpoint=0.0))
        check_market_config(_market(midpoint=1.0))

    @pytest.mark.parametrize(
        "overrides",
        [
            {"max_spread": 0},
            {"max_spread": -0.01},
            {"midpoint": -0.01},
            {"midpoint": 1.01},
            {"min_size": -1},
            {"reward_pool": -5},
            {"id": ""},
            {"midpoint": nan},
            {"max_spread": inf},
            {"midpoint": None},
        ],
    )
    def test_invalid_raises(self, overrides) -> None:
        with pytest.raises(InvalidMarketConfigError) as exc_info:
            check_market_config(_market(**overrides))
        assert exc_info.value.code == 3003


class TestOrder:
    def test_valid(self) -> None:
        check_order(Order(price=0.5, size=0, side=OutcomeSide.NO, type=OrderType.BID))

    def test_negative_size_raises(self) -> None:
        with pytest.raises(InvalidOrderError):
            check_order(Order(price=0.5, size=-1, side=OutcomeSide.NO, type=OrderType.BID))

    def test_price_above_one_raises(self) -> None:
        with pytest.raises(InvalidOrderError):
            check_order(Order(price=1.5, size=10, side=OutcomeSide.YES, type=OrderType.ASK))


class TestCapital:
    def test_zero_ok(self) -> None:
        check_capital(0)

    def test_negative_raises(self) -> None:
        with pytest.raises(InvalidCapitalError) as exc_info:
            check_capital(-0.01)
        assert exc_info.value.code == 6001
