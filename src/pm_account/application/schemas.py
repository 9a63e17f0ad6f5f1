"""Pydantic request/result schemas for the account engine."""

from pydantic import BaseModel, ConfigDict

from src.pm_common.enums import OrderAction, OrderType, Side


class PlaceOrderInput(BaseModel):
    """One order request from the trade ticket.

    For LIMIT the contract price is limit_side_price (falling back to
    exec_side_price); for MARKET it is exec_side_price. Prices are for the
    selected side, 0..1. yes_price is informational.
    """

    model_config = ConfigDict(frozen=True)

    market_id: str
    yes_price: float
    action: OrderAction
    side: Side
    order_type: OrderType
    exec_side_price: float
    limit_side_price: float | None = None
    shares: float


class OrderResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: bool
    error: str | None = None      # human-readable, e.g. "Not enough shares"
    code: str | None = None       # INVALID_SHARES / INVALID_PRICE / INSUFFICIENT_BALANCE / NOT_ENOUGH_SHARES
    order_id: str | None = None

    @classmethod
    def success(cls, order_id: str | None = None) -> "OrderResult":
        return cls(ok=True, order_id=order_id)

    @classmethod
    def failure(cls, code: str, error: str) -> "OrderResult":
        return cls(ok=False, code=code, error=error)
