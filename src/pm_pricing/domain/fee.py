"""Mock fee model: 1% of notional with a $0.10 floor.

Used by both the trade ticket preview and the order engine, so the
confirmation dialog always shows the numbers the engine books.
"""

import math

FEE_RATE = 0.01
MIN_FEE = 0.10

# Step applied when the closed-form estimate overshoots the balance
_NOTIONAL_STEP = 0.01


def estimate_fee(notional_usd: float) -> float:
    """fee = max(MIN_FEE, notional * FEE_RATE); zero for non-positive notional."""
    if not math.isfinite(notional_usd) or notional_usd <= 0:
        return 0.0
    return max(MIN_FEE, notional_usd * FEE_RATE)


def max_notional_for_balance(balance: float) -> float:
    """Largest notional n with n + estimate_fee(n) <= balance.

    Two regimes: below MIN_FEE / FEE_RATE the flat floor applies
    (n = balance - MIN_FEE), above it the fee is proportional
    (n = balance / (1 + FEE_RATE)).
    """
    if not math.isfinite(balance) or balance <= MIN_FEE:
        return 0.0
    notional = balance / (1 + FEE_RATE)
    if estimate_fee(notional) == MIN_FEE:
        notional = balance - MIN_FEE
    if notional + estimate_fee(notional) > balance:
        notional = max(0.0, notional - _NOTIONAL_STEP)
    return max(0.0, notional)
