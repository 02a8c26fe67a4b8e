"""Unified error codes and custom exceptions.

Error code ranges:
  3xxx: Market
  4xxx: Order
  6xxx: Rewards / optimizer

Every engine error is a structural input problem, so all of them map to
422 for whichever API layer sits in front of the engine.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 3xxx: Market ---

class InvalidMarketConfigError(AppError):
    def __init__(self, market_id: str, detail: str) -> None:
        super().__init__(3003, f"Invalid market config {market_id!r}: {detail}", 422)


# --- 4xxx: Order ---

class InvalidOrderError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(4007, f"Invalid order: {detail}", 422)


# --- 6xxx: Rewards / optimizer ---

class InvalidCapitalError(AppError):
    def __init__(self, capital: float) -> None:
        super().__init__(6001, f"Capital must be non-negative, got {capital}", 422)


class InvalidOptimizerOptionsError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(6002, f"Invalid optimizer options: {detail}", 422)
