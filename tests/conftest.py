"""Shared test fixtures."""

import pytest

from src.pm_rewards.domain.models import MarketConfig


@pytest.fixture
def market() -> MarketConfig:
    """A balanced market: midpoint 0.50, 5c max spread, 100-share minimum."""
    return MarketConfig(
        id="MKT-TEST",
        question="Will it happen?",
        midpoint=0.50,
        max_spread=0.05,
        min_size=100,
        reward_pool=100,
    )
