"""Tests for pm_common.enums: values are part of the JSON output contract."""

import pytest

from src.pm_common.enums import (
    CompetitionLevel,
    CompetitionSource,
    FillRiskLevel,
    LegSide,
    OrderType,
    OutcomeSide,
    RiskTolerance,
    VolatilityLevel,
)


class TestAllEnumsAreStr:
    """All enums inherit from (str, Enum) for JSON serialization."""

    @pytest.mark.parametrize(
        "enum_cls",
        [
            CompetitionLevel,
            CompetitionSource,
            FillRiskLevel,
            LegSide,
            OrderType,
            OutcomeSide,
            RiskTolerance,
            VolatilityLevel,
        ],
    )
    def test_members_are_str(self, enum_cls) -> None:
        for member in enum_cls:
            assert isinstance(member, str)


class TestValues:
    def test_outcome_side(self) -> None:
        assert OutcomeSide("YES") is OutcomeSide.YES
        assert OutcomeSide.NO == "NO"

    def test_leg_side_lowercase(self) -> None:
        assert [s.value for s in LegSide] == ["buy", "sell"]

    def test_competition_source(self) -> None:
        assert CompetitionSource.EXACT == "exact"
        assert CompetitionSource.HEURISTIC == "heuristic"

    def test_fill_risk_display(self) -> None:
        assert FillRiskLevel.VERY_HIGH.value == "Very High"

    def test_risk_tolerance_lookup(self) -> None:
        assert RiskTolerance("medium") is RiskTolerance.MEDIUM

    def test_volatility_level_count(self) -> None:
        assert len(VolatilityLevel) == 5
