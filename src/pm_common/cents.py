"""Display helpers for probability prices and USD amounts.

Prices are probabilities in [0, 1]; they are shown to users in cents.
"""


def price_to_cents_display(price: float) -> str:
    """Convert a probability price to a cents string: 0.4875 -> '48.75¢'."""
    return f"{price * 100:.2f}¢"


def usd_display(amount: float) -> str:
    """Format a USD amount: 1500 -> '$1,500.00', -12 -> '-$12.00'."""
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"
