"""Domain models for pm_account — frozen dataclasses, no storage dependency.

AccountState is the single unit of mutation and persistence. Every engine
operation builds a new AccountState with dataclasses.replace and hands it to
the store; nothing is mutated in place.
"""

from dataclasses import dataclass, field

from src.pm_common.enums import (
    OrderAction,
    OrderType,
    PositionStatus,
    Side,
    TransactionType,
)


@dataclass(frozen=True)
class Position:
    id: str
    market_id: str
    question: str
    side: Side
    shares: float
    avg_price: float            # paid per share, 0..1
    status: PositionStatus = PositionStatus.OPEN

    @property
    def is_open(self) -> bool:
        return self.status == PositionStatus.OPEN

    @property
    def cost_basis_usd(self) -> float:
        return self.shares * self.avg_price


@dataclass(frozen=True)
class OpenOrder:
    """A resting LIMIT order holding either cash or shares as collateral."""

    id: str
    market_id: str
    action: OrderAction
    side: Side
    limit_price: float
    shares: float
    created_at: int             # epoch ms
    order_type: OrderType = OrderType.LIMIT
    reserved_cash_usd: float | None = None    # BUY
    reserved_shares: float | None = None      # SELL


@dataclass(frozen=True)
class RecentTrade:
    id: str
    market_id: str
    ts: int
    side: Side
    price: float
    shares: float


@dataclass(frozen=True)
class Transaction:
    id: str
    ts: int
    type: TransactionType
    amount_usd: float           # signed; 0 for metadata-only entries
    note: str | None = None


@dataclass(frozen=True)
class AccountState:
    cash_usd: float
    positions: tuple[Position, ...] = field(default_factory=tuple)
    open_orders: tuple[OpenOrder, ...] = field(default_factory=tuple)
    trades: tuple[RecentTrade, ...] = field(default_factory=tuple)              # newest first
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)        # newest first

    def find_open_position(self, market_id: str, side: Side) -> Position | None:
        for p in self.positions:
            if p.market_id == market_id and p.side == side and p.is_open:
                return p
        return None

    def find_open_order(self, order_id: str) -> OpenOrder | None:
        for o in self.open_orders:
            if o.id == order_id:
                return o
        return None

    @property
    def reserved_cash_usd(self) -> float:
        return sum(o.reserved_cash_usd or 0.0 for o in self.open_orders)
