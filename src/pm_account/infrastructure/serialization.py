"""Pydantic schemas for the persisted account blob.

Stored data is never trusted: parse_state validates every field and returns
None on any JSON or schema error so the store can fall back to the seed.
Keys are camelCase to keep the blob layout stable for other readers.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from src.pm_account.domain.models import (
    AccountState,
    OpenOrder,
    Position,
    RecentTrade,
    Transaction,
)
from src.pm_common.enums import (
    OrderAction,
    OrderType,
    PositionStatus,
    Side,
    TransactionType,
)

logger = logging.getLogger(__name__)


class _BlobModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )


class PositionSchema(_BlobModel):
    id: str
    market_id: str
    question: str
    side: Side
    shares: float = Field(..., ge=0)
    avg_price: float
    status: PositionStatus

    @classmethod
    def from_domain(cls, p: Position) -> "PositionSchema":
        return cls(
            id=p.id,
            market_id=p.market_id,
            question=p.question,
            side=p.side,
            shares=p.shares,
            avg_price=p.avg_price,
            status=p.status,
        )

    def to_domain(self) -> Position:
        return Position(
            id=self.id,
            market_id=self.market_id,
            question=self.question,
            side=self.side,
            shares=self.shares,
            avg_price=self.avg_price,
            status=self.status,
        )


class OpenOrderSchema(_BlobModel):
    id: str
    market_id: str
    action: OrderAction
    side: Side
    type: OrderType = OrderType.LIMIT
    limit_price: float
    shares: float = Field(..., gt=0)
    created_at: int
    reserved_cash_usd: float | None = None
    reserved_shares: float | None = None

    @model_validator(mode="after")
    def _one_reservation_matching_action(self) -> "OpenOrderSchema":
        has_cash = self.reserved_cash_usd is not None
        has_shares = self.reserved_shares is not None
        if has_cash == has_shares:
            raise ValueError("exactly one of reservedCashUsd / reservedShares must be set")
        if has_cash != (self.action == OrderAction.BUY):
            raise ValueError(f"reservation does not match action {self.action.value}")
        return self

    @classmethod
    def from_domain(cls, o: OpenOrder) -> "OpenOrderSchema":
        return cls(
            id=o.id,
            market_id=o.market_id,
            action=o.action,
            side=o.side,
            type=o.order_type,
            limit_price=o.limit_price,
            shares=o.shares,
            created_at=o.created_at,
            reserved_cash_usd=o.reserved_cash_usd,
            reserved_shares=o.reserved_shares,
        )

    def to_domain(self) -> OpenOrder:
        return OpenOrder(
            id=self.id,
            market_id=self.market_id,
            action=self.action,
            side=self.side,
            limit_price=self.limit_price,
            shares=self.shares,
            created_at=self.created_at,
            order_type=self.type,
            reserved_cash_usd=self.reserved_cash_usd,
            reserved_shares=self.reserved_shares,
        )


class RecentTradeSchema(_BlobModel):
    id: str
    market_id: str
    ts: int
    side: Side
    price: float
    shares: float

    @classmethod
    def from_domain(cls, t: RecentTrade) -> "RecentTradeSchema":
        return cls(id=t.id, market_id=t.market_id, ts=t.ts, side=t.side, price=t.price, shares=t.shares)

    def to_domain(self) -> RecentTrade:
        return RecentTrade(
            id=self.id,
            market_id=self.market_id,
            ts=self.ts,
            side=self.side,
            price=self.price,
            shares=self.shares,
        )


class TransactionSchema(_BlobModel):
    id: str
    ts: int
    type: TransactionType
    amount_usd: float
    note: str | None = None

    @classmethod
    def from_domain(cls, tx: Transaction) -> "TransactionSchema":
        return cls(id=tx.id, ts=tx.ts, type=tx.type, amount_usd=tx.amount_usd, note=tx.note)

    def to_domain(self) -> Transaction:
        return Transaction(
            id=self.id,
            ts=self.ts,
            type=self.type,
            amount_usd=self.amount_usd,
            note=self.note,
        )


class AccountStateSchema(_BlobModel):
    cash_usd: float
    positions: list[PositionSchema]
    open_orders: list[OpenOrderSchema]
    trades: list[RecentTradeSchema]
    transactions: list[TransactionSchema]

    @classmethod
    def from_domain(cls, state: AccountState) -> "AccountStateSchema":
        return cls(
            cash_usd=state.cash_usd,
            positions=[PositionSchema.from_domain(p) for p in state.positions],
            open_orders=[OpenOrderSchema.from_domain(o) for o in state.open_orders],
            trades=[RecentTradeSchema.from_domain(t) for t in state.trades],
            transactions=[TransactionSchema.from_domain(tx) for tx in state.transactions],
        )

    def to_domain(self) -> AccountState:
        return AccountState(
            cash_usd=self.cash_usd,
            positions=tuple(p.to_domain() for p in self.positions),
            open_orders=tuple(o.to_domain() for o in self.open_orders),
            trades=tuple(t.to_domain() for t in self.trades),
            transactions=tuple(tx.to_domain() for tx in self.transactions),
        )


def dump_state(state: AccountState) -> str:
    return AccountStateSchema.from_domain(state).model_dump_json(by_alias=True)


def parse_state(raw: str | bytes | None) -> AccountState | None:
    """Deserialize a stored blob. Returns None when absent or malformed."""
    if not raw:
        return None
    try:
        return AccountStateSchema.model_validate_json(raw).to_domain()
    except ValidationError as exc:
        logger.warning("Discarding malformed account blob: %d validation error(s)", exc.error_count())
        return None
