"""Global enums shared by the reward engine and its schemas."""

from enum import Enum


class OutcomeSide(str, Enum):
    """Outcome token an order rests on. YES feeds Q_one, NO feeds Q_two."""
    YES = "YES"
    NO = "NO"


class OrderType(str, Enum):
    BID = "BID"
    ASK = "ASK"


class LegSide(str, Enum):
    """Which leg of a two-sided placement a suggestion describes."""
    BUY = "buy"
    SELL = "sell"


class CompetitionSource(str, Enum):
    EXACT = "exact"
    HEURISTIC = "heuristic"


class CompetitionLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class FillRiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very High"


class VolatilityLevel(str, Enum):
    VERY_STABLE = "Very Stable"
    STABLE = "Stable"
    MODERATE = "Moderate"
    VOLATILE = "Volatile"
    EXTREMELY_VOLATILE = "Extremely Volatile"


class RiskTolerance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
