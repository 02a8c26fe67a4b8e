"""Share of the daily reward pool and projected returns.

A zero denominator means "no data yet", not an error: the affected
figures are reported as 0.
"""

from src.pm_rewards.domain.models import RewardEstimate

DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365


def estimate_reward(
    user_q_min: float,
    total_q_min: float,
    reward_pool: float,
    capital_deployed: float = 0.0,
) -> RewardEstimate:
    """user_share = user / total; daily = share * pool; APY = daily / capital * 365."""
    user_share = user_q_min / total_q_min if total_q_min > 0 else 0.0
    user_share = min(max(user_share, 0.0), 1.0)

    daily_reward = user_share * reward_pool
    annualized_apy = (
        daily_reward / capital_deployed * DAYS_PER_YEAR if capital_deployed > 0 else 0.0
    )
    return RewardEstimate(
        user_share=user_share,
        daily_reward=daily_reward,
        monthly_reward=daily_reward * DAYS_PER_MONTH,
        annualized_apy=annualized_apy,
    )
