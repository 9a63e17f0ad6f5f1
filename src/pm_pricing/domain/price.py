"""Side-price derivation from the single YES quote / YES order book.

A NO contract is priced as 1 - YES. Buying takes the opposing side of the
YES book: BUY YES lifts the best ask, BUY NO hits the best bid (as 1 - bid).
"""

from src.pm_common.enums import OrderAction, OrderType, Side
from src.pm_common.money import clamp01


def side_price_from_yes(yes_price: float, side: Side) -> float:
    yes = clamp01(yes_price)
    return yes if side == Side.YES else 1 - yes


def market_exec_side_price(
    action: OrderAction,
    side: Side,
    yes_price: float,
    best_bid: float | None = None,
    best_ask: float | None = None,
) -> float:
    """Execution price of a MARKET order for the chosen side.

    - BUY  YES -> best ask       (fallback: yes_price)
    - BUY  NO  -> 1 - best bid   (fallback: 1 - yes_price)
    - SELL YES -> best bid       (fallback: yes_price)
    - SELL NO  -> 1 - best ask   (fallback: 1 - yes_price)
    """
    if action == OrderAction.BUY:
        if side == Side.YES:
            return clamp01(best_ask if best_ask is not None else yes_price)
        return clamp01(1 - (best_bid if best_bid is not None else yes_price))
    if side == Side.YES:
        return clamp01(best_bid if best_bid is not None else yes_price)
    return clamp01(1 - (best_ask if best_ask is not None else yes_price))


def resolve_side_price(
    order_type: OrderType,
    exec_side_price: float,
    limit_side_price: float | None = None,
) -> float:
    """Contract price an order books at: the limit for LIMIT, else exec price."""
    if order_type == OrderType.LIMIT and limit_side_price is not None:
        return clamp01(limit_side_price)
    return clamp01(exec_side_price)
