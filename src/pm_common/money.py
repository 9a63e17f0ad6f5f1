"""Float USD helpers for the mock ledger.

Prices are side-contract probabilities in [0, 1]; amounts are USD floats.
Comparisons against balances and share counts use EPSILON.
"""

import math

EPSILON = 1e-9


def clamp01(value: float) -> float:
    """Clamp to [0, 1]. NaN clamps to 0."""
    if math.isnan(value):
        return 0.0
    return min(1.0, max(0.0, value))


def price_to_cents_display(price: float) -> str:
    """0.4 -> '40¢'."""
    return f"{round(price * 100)}¢"
