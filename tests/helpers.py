"""Builders shared by unit and integration tests."""

from src.pm_account.application.schemas import PlaceOrderInput
from src.pm_account.domain.models import AccountState
from src.pm_common.enums import OrderAction, OrderType, Side

TEST_KEY = "test.accountStore.v1"
FIXED_NOW_MS = 1_760_000_000_000


def empty_account(cash_usd: float = 500.0) -> AccountState:
    """Wallet only: no positions, orders or history."""
    return AccountState(cash_usd=cash_usd)


def make_order(
    action: str = "BUY",
    side: str = "YES",
    order_type: str = "MARKET",
    shares: float = 100,
    price: float = 0.40,
    limit_price: float | None = None,
    market_id: str = "m1",
) -> PlaceOrderInput:
    return PlaceOrderInput(
        market_id=market_id,
        yes_price=price if side == "YES" else 1 - price,
        action=OrderAction(action),
        side=Side(side),
        order_type=OrderType(order_type),
        exec_side_price=price,
        limit_side_price=limit_price,
        shares=shares,
    )
