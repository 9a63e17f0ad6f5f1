"""Unified error codes and custom exceptions.

Error code ranges:
  2xxx: Account / wallet
  4xxx: Order
  5xxx: Position
  9xxx: System

Order rejections are raised inside the engine and converted into failed
OrderResult values at its boundary; they never reach UI callers as exceptions.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)


class OrderRejectedError(AppError):
    """Base for validation failures of an order request.

    `reason` is the stable machine-readable name surfaced in OrderResult.code.
    """

    reason: str = "ORDER_REJECTED"


# --- 2xxx: Account ---

class InsufficientBalanceError(OrderRejectedError):
    reason = "INSUFFICIENT_BALANCE"

    def __init__(self, required: float, available: float) -> None:
        self.required = required
        self.available = available
        super().__init__(2001, "Insufficient balance")


# --- 4xxx: Order ---

class InvalidSharesError(OrderRejectedError):
    reason = "INVALID_SHARES"

    def __init__(self, shares: float) -> None:
        self.shares = shares
        super().__init__(4001, "Invalid shares")


class InvalidPriceError(OrderRejectedError):
    reason = "INVALID_PRICE"

    def __init__(self, price: float) -> None:
        self.price = price
        super().__init__(4002, "Invalid price")


# --- 5xxx: Position ---

class InsufficientPositionError(OrderRejectedError):
    reason = "NOT_ENOUGH_SHARES"

    def __init__(self, market_id: str, side: str, requested: float) -> None:
        self.market_id = market_id
        self.side = side
        self.requested = requested
        super().__init__(5001, "Not enough shares")


# --- 9xxx: System ---

class StorageError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9001, f"Storage failure: {detail}")
