"""Order quote — the cost/proceeds breakdown shown before confirmation.

OrderEngine books exactly quote_order(...) values, so the preview and the
fill can never diverge.
"""

import math
from dataclasses import dataclass

from src.pm_common.enums import OrderAction
from src.pm_pricing.domain.fee import estimate_fee, max_notional_for_balance


@dataclass(frozen=True)
class OrderQuote:
    action: OrderAction
    shares: float
    side_price: float
    notional_usd: float
    fee_usd: float
    total_cost_usd: float | None   # BUY only
    proceeds_usd: float | None     # SELL only

    @property
    def cash_delta_usd(self) -> float:
        """Signed wallet change if the order fills immediately."""
        if self.action == OrderAction.BUY:
            return -(self.total_cost_usd or 0.0)
        return self.proceeds_usd or 0.0


def quote_order(action: OrderAction, shares: float, side_price: float) -> OrderQuote:
    notional = shares * side_price
    fee = estimate_fee(notional)
    if action == OrderAction.BUY:
        return OrderQuote(action, shares, side_price, notional, fee, notional + fee, None)
    return OrderQuote(action, shares, side_price, notional, fee, None, max(0.0, notional - fee))


def shares_for_amount(amount_usd: float, side_price: float) -> float:
    """Shares bought by spending amount_usd of notional (USD-mode ticket input)."""
    if not math.isfinite(amount_usd) or amount_usd <= 0 or side_price <= 0:
        return 0.0
    return amount_usd / side_price


def max_buy_shares(balance_usd: float, side_price: float) -> float:
    """Largest share count whose notional plus fee fits in the balance."""
    if side_price <= 0:
        return 0.0
    return max_notional_for_balance(balance_usd) / side_price
