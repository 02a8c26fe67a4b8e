from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REWARDS_",
    )

    # Static placement: distance from midpoint as a fraction of max_spread
    STATIC_SPREAD_RATIO: float = 0.80

    # Leg prices are kept inside the tradable tick range
    MIN_LEG_PRICE: float = 0.01
    MAX_LEG_PRICE: float = 0.99

    # Heuristic competition model (hand-tuned, recalibrate freely)
    HEURISTIC_LIQUIDITY_DIVISOR: float = 100_000.0
    HEURISTIC_LIQUIDITY_CAP: float = 10.0
    HEURISTIC_VOLUME_DIVISOR: float = 1_000_000.0
    HEURISTIC_VOLUME_CAP: float = 5.0
    HEURISTIC_POOL_DIVISOR: float = 100.0
    HEURISTIC_POOL_CAP: float = 5.0
    HEURISTIC_AVG_LP_SCORE: float = 35.0

    # Ranker
    COMPETITION_LOW_THRESHOLD: float = 50.0
    COMPETITION_MEDIUM_THRESHOLD: float = 200.0
    COMPETITION_CAPITAL_SHARE: float = 0.05
    ADMISSION_CAPITAL_RATIO: float = 0.80

    # Dynamic optimizer
    DYNAMIC_CANDIDATE_COUNT: int = 12
    DYNAMIC_TIE_TOLERANCE: float = 1e-6
    DEFAULT_VOLATILITY_SCORE: float = 50.0  # used when price history is missing
    VOLATILITY_LOOKBACK_CAP_DAYS: int = 7
    DEFAULT_ORDER_BOOK_DEPTH: float = 50_000.0
    DEFAULT_TRANSACTION_COST_RATE: float = 0.02
    MAX_FILL_PROBABILITY: float = 0.95

    # Order-book fan-out (upstream rate limits)
    FETCH_BATCH_SIZE: int = 5
    FETCH_BATCH_DELAY_SECONDS: float = 0.5


settings = Settings()
