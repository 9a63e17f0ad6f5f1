"""AccountEngine — validates and executes order requests against the mock ledger.

Every public operation reads one snapshot, builds one new AccountState and
commits it once. Validation failures are raised as OrderRejectedError while
the new state is being built and converted into a failed OrderResult at the
place_order boundary, so a rejected order never touches the store.

Execution model:
  - MARKET orders fill immediately and in full at exec_side_price.
  - LIMIT orders rest: BUY reserves notional + fee in cash, SELL escrows the
    shares by reducing the position. Resting orders are never matched; they
    only leave the book through cancel_order, which refunds the reservation.
"""

import logging
import math
from collections.abc import Callable
from dataclasses import replace
from typing import TypeVar

from src.pm_account.application.schemas import OrderResult, PlaceOrderInput
from src.pm_account.application.store import AccountStore, Listener, Unsubscribe
from src.pm_account.domain.models import (
    AccountState,
    OpenOrder,
    Position,
    RecentTrade,
    Transaction,
)
from src.pm_common.datetime_utils import now_ms
from src.pm_common.enums import (
    OrderAction,
    OrderType,
    PositionStatus,
    Side,
    TransactionType,
)
from src.pm_common.errors import (
    InsufficientBalanceError,
    InsufficientPositionError,
    InvalidPriceError,
    InvalidSharesError,
    OrderRejectedError,
)
from src.pm_common.id_generator import LedgerIdGenerator
from src.pm_common.money import EPSILON, price_to_cents_display
from src.pm_market.application.service import MarketCatalog
from src.pm_pricing.application.quote import OrderQuote, quote_order
from src.pm_pricing.domain.price import resolve_side_price, side_price_from_yes

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 300

T = TypeVar("T")


def _prepend(items: tuple[T, ...], *new: T, limit: int) -> tuple[T, ...]:
    """Newest-first append with bounded retention."""
    return (*new, *items)[:limit]


class AccountEngine:
    def __init__(
        self,
        store: AccountStore,
        catalog: MarketCatalog | None = None,
        ids: LedgerIdGenerator | None = None,
        clock: Callable[[], int] = now_ms,
        history_limit: int = HISTORY_LIMIT,
    ) -> None:
        self._store = store
        self._catalog = catalog or MarketCatalog()
        self._ids = ids or LedgerIdGenerator(clock=clock)
        self._clock = clock
        self._history_limit = history_limit

    # ------------------------------------------------------------------
    # Store passthrough
    # ------------------------------------------------------------------

    def get_snapshot(self) -> AccountState:
        return self._store.get_snapshot()

    def subscribe(self, listener: Listener) -> Unsubscribe:
        return self._store.subscribe(listener)

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def preview_order(self, order: PlaceOrderInput) -> OrderQuote:
        """Numbers the confirmation dialog shows; place_order books the same ones."""
        side_price = resolve_side_price(order.order_type, order.exec_side_price, order.limit_side_price)
        return quote_order(order.action, order.shares, side_price)

    def place_order(self, order: PlaceOrderInput) -> OrderResult:
        try:
            next_state, order_id = self._apply_order(self._store.get_snapshot(), order)
        except OrderRejectedError as exc:
            logger.info(
                "Order rejected: market=%s %s %s %s shares=%s reason=%s",
                order.market_id,
                order.order_type.value,
                order.action.value,
                order.side.value,
                order.shares,
                exc.reason,
            )
            return OrderResult.failure(exc.reason, exc.message)

        self._store.commit(next_state)
        logger.info(
            "Order accepted: market=%s %s %s %s shares=%s cash=%.2f",
            order.market_id,
            order.order_type.value,
            order.action.value,
            order.side.value,
            order.shares,
            next_state.cash_usd,
        )
        return OrderResult.success(order_id)

    def cancel_order(self, order_id: str) -> bool:
        """Remove a resting order and refund its reservation. Unknown ids are a no-op."""
        state = self._store.get_snapshot()
        order = state.find_open_order(order_id)
        if order is None:
            logger.info("Cancel ignored, no open order %s", order_id)
            return False

        cash = state.cash_usd
        positions = state.positions
        if order.reserved_cash_usd and order.reserved_cash_usd > 0:
            cash += order.reserved_cash_usd
        if order.reserved_shares and order.reserved_shares > 0:
            positions = self._return_escrowed_shares(state, order)

        ts = self._clock()
        tx = Transaction(
            id=self._ids.next_id("tx"),
            ts=ts,
            type=TransactionType.ORDER_CANCEL,
            amount_usd=0.0,
            note=f"Canceled order {order.id} (mock)",
        )
        self._store.commit(
            replace(
                state,
                cash_usd=cash,
                positions=positions,
                open_orders=tuple(o for o in state.open_orders if o.id != order_id),
                transactions=_prepend(state.transactions, tx, limit=self._history_limit),
            )
        )
        logger.info("Order %s cancelled, cash=%.2f", order_id, cash)
        return True

    # ------------------------------------------------------------------
    # Wallet
    # ------------------------------------------------------------------

    def deposit(self, amount_usd: float) -> None:
        if not math.isfinite(amount_usd) or amount_usd <= 0:
            return
        state = self._store.get_snapshot()
        tx = Transaction(
            id=self._ids.next_id("tx"),
            ts=self._clock(),
            type=TransactionType.DEPOSIT,
            amount_usd=amount_usd,
            note="Deposit (mock)",
        )
        self._store.commit(
            replace(
                state,
                cash_usd=state.cash_usd + amount_usd,
                transactions=_prepend(state.transactions, tx, limit=self._history_limit),
            )
        )
        logger.info("Deposited %.2f", amount_usd)

    def withdraw(self, amount_usd: float) -> bool:
        state = self._store.get_snapshot()
        if not math.isfinite(amount_usd) or amount_usd <= 0:
            return False
        if amount_usd > state.cash_usd + EPSILON:
            logger.info("Withdrawal of %.2f refused, cash=%.2f", amount_usd, state.cash_usd)
            return False

        tx = Transaction(
            id=self._ids.next_id("tx"),
            ts=self._clock(),
            type=TransactionType.WITHDRAWAL,
            amount_usd=-amount_usd,
            note="Withdrawal (mock)",
        )
        self._store.commit(
            replace(
                state,
                cash_usd=max(0.0, state.cash_usd - amount_usd),
                transactions=_prepend(state.transactions, tx, limit=self._history_limit),
            )
        )
        logger.info("Withdrew %.2f", amount_usd)
        return True

    def reset(self) -> None:
        self._store.commit(self._store.fresh_seed())
        logger.info("Account reset to seed state")

    # ------------------------------------------------------------------
    # Selectors
    # ------------------------------------------------------------------

    def get_position(self, market_id: str) -> Position | None:
        for p in self._store.get_snapshot().positions:
            if p.market_id == market_id and p.is_open:
                return p
        return None

    def get_position_for_side(self, market_id: str, side: Side) -> Position | None:
        return self._store.get_snapshot().find_open_position(market_id, side)

    @staticmethod
    def implied_mark_from_yes(yes_price: float, side: Side) -> float:
        return side_price_from_yes(yes_price, side)

    # ------------------------------------------------------------------
    # Order execution (pure: snapshot in, new snapshot out)
    # ------------------------------------------------------------------

    def _apply_order(
        self, state: AccountState, order: PlaceOrderInput
    ) -> tuple[AccountState, str | None]:
        shares = order.shares
        if not math.isfinite(shares) or shares <= 0:
            raise InvalidSharesError(shares)

        side_price = resolve_side_price(order.order_type, order.exec_side_price, order.limit_side_price)
        if side_price <= 0 or side_price >= 1:
            raise InvalidPriceError(side_price)

        quote = quote_order(order.action, shares, side_price)

        if order.order_type == OrderType.LIMIT:
            if order.action == OrderAction.BUY:
                return self._limit_buy(state, order, quote)
            return self._limit_sell(state, order, quote)
        if order.action == OrderAction.BUY:
            return self._market_buy(state, order, quote), None
        return self._market_sell(state, order, quote), None

    def _check_balance(self, state: AccountState, quote: OrderQuote) -> float:
        total = quote.total_cost_usd or 0.0
        if total > state.cash_usd + EPSILON:
            raise InsufficientBalanceError(required=total, available=state.cash_usd)
        return total

    def _limit_buy(
        self, state: AccountState, order: PlaceOrderInput, quote: OrderQuote
    ) -> tuple[AccountState, str]:
        total = self._check_balance(state, quote)
        ts = self._clock()
        resting = OpenOrder(
            id=self._ids.next_id("ord"),
            market_id=order.market_id,
            action=OrderAction.BUY,
            side=order.side,
            limit_price=quote.side_price,
            shares=quote.shares,
            created_at=ts,
            reserved_cash_usd=total,
        )
        tx = Transaction(
            id=self._ids.next_id("tx"),
            ts=ts,
            type=TransactionType.ORDER_PLACE,
            amount_usd=0.0,
            note=f"Placed BUY LIMIT {order.side.value} (reserved {total:.2f})",
        )
        next_state = replace(
            state,
            cash_usd=max(0.0, state.cash_usd - total),
            open_orders=(resting, *state.open_orders),
            transactions=_prepend(state.transactions, tx, limit=self._history_limit),
        )
        return next_state, resting.id

    def _limit_sell(
        self, state: AccountState, order: PlaceOrderInput, quote: OrderQuote
    ) -> tuple[AccountState, str]:
        positions = self._reduce_position(state, order.market_id, order.side, quote.shares)
        ts = self._clock()
        resting = OpenOrder(
            id=self._ids.next_id("ord"),
            market_id=order.market_id,
            action=OrderAction.SELL,
            side=order.side,
            limit_price=quote.side_price,
            shares=quote.shares,
            created_at=ts,
            reserved_shares=quote.shares,
        )
        tx = Transaction(
            id=self._ids.next_id("tx"),
            ts=ts,
            type=TransactionType.ORDER_PLACE,
            amount_usd=0.0,
            note=f"Placed SELL LIMIT {order.side.value} (reserved {quote.shares:.2f} shares)",
        )
        next_state = replace(
            state,
            positions=positions,
            open_orders=(resting, *state.open_orders),
            transactions=_prepend(state.transactions, tx, limit=self._history_limit),
        )
        return next_state, resting.id

    def _market_buy(
        self, state: AccountState, order: PlaceOrderInput, quote: OrderQuote
    ) -> AccountState:
        total = self._check_balance(state, quote)
        positions = self._upsert_position(state, order.market_id, order.side, quote.shares, quote.side_price)
        return self._book_fill(
            replace(state, cash_usd=max(0.0, state.cash_usd - total), positions=positions),
            order,
            quote,
            trade_amount=-quote.notional_usd,
            verb="Bought",
        )

    def _market_sell(
        self, state: AccountState, order: PlaceOrderInput, quote: OrderQuote
    ) -> AccountState:
        positions = self._reduce_position(state, order.market_id, order.side, quote.shares)
        proceeds = quote.proceeds_usd or 0.0
        return self._book_fill(
            replace(state, cash_usd=state.cash_usd + proceeds, positions=positions),
            order,
            quote,
            trade_amount=proceeds,
            verb="Sold",
        )

    def _book_fill(
        self,
        state: AccountState,
        order: PlaceOrderInput,
        quote: OrderQuote,
        trade_amount: float,
        verb: str,
    ) -> AccountState:
        """Append the fill to the trade tape plus TRADE and TRADE_FEE ledger lines."""
        ts = self._clock()
        trade = RecentTrade(
            id=self._ids.next_id("tr"),
            market_id=order.market_id,
            ts=ts,
            side=order.side,
            price=quote.side_price,
            shares=quote.shares,
        )
        trade_tx = Transaction(
            id=self._ids.next_id("tx"),
            ts=ts,
            type=TransactionType.TRADE,
            amount_usd=trade_amount,
            note=(
                f"{verb} {quote.shares:.0f} {order.side.value} "
                f"@ {price_to_cents_display(quote.side_price)}"
            ),
        )
        fee_tx = Transaction(
            id=f"{trade_tx.id}-fee",
            ts=ts,
            type=TransactionType.TRADE_FEE,
            amount_usd=-quote.fee_usd,
            note="Fee (mock)",
        )
        return replace(
            state,
            trades=_prepend(state.trades, trade, limit=self._history_limit),
            transactions=_prepend(state.transactions, fee_tx, trade_tx, limit=self._history_limit),
        )

    # ------------------------------------------------------------------
    # Position bookkeeping
    # ------------------------------------------------------------------

    def _upsert_position(
        self, state: AccountState, market_id: str, side: Side, shares: float, price: float
    ) -> tuple[Position, ...]:
        current = state.find_open_position(market_id, side)
        if current is None:
            created = Position(
                id=self._ids.next_id("pos"),
                market_id=market_id,
                question=self._catalog.question_for(market_id),
                side=side,
                shares=shares,
                avg_price=price,
            )
            return (created, *state.positions)

        new_shares = current.shares + shares
        new_avg = (
            (current.avg_price * current.shares + price * shares) / new_shares
            if new_shares > 0
            else current.avg_price
        )
        updated = replace(current, shares=new_shares, avg_price=new_avg)
        return tuple(updated if p is current else p for p in state.positions)

    @staticmethod
    def _reduce_position(
        state: AccountState, market_id: str, side: Side, shares: float
    ) -> tuple[Position, ...]:
        current = state.find_open_position(market_id, side)
        if current is None or shares > current.shares + EPSILON:
            raise InsufficientPositionError(market_id, side.value, shares)

        remaining = current.shares - shares
        if remaining <= EPSILON:
            updated = replace(current, shares=0.0, status=PositionStatus.CLOSED)
        else:
            updated = replace(current, shares=remaining)
        return tuple(updated if p is current else p for p in state.positions)

    def _return_escrowed_shares(self, state: AccountState, order: OpenOrder) -> tuple[Position, ...]:
        """Credit a cancelled SELL LIMIT's shares back to its position.

        Goes to the OPEN position when there is one. Otherwise the most recent
        CLOSED position for the market/side is reopened with its cost basis;
        with no history at all a new position is opened at the limit price.
        """
        reserved = order.reserved_shares or 0.0
        current = state.find_open_position(order.market_id, order.side)
        if current is not None:
            updated = replace(current, shares=current.shares + reserved)
            return tuple(updated if p is current else p for p in state.positions)

        for p in state.positions:
            if (
                p.market_id == order.market_id
                and p.side == order.side
                and p.status == PositionStatus.CLOSED
            ):
                reopened = replace(p, shares=reserved, status=PositionStatus.OPEN)
                return tuple(reopened if q is p else q for q in state.positions)

        created = Position(
            id=self._ids.next_id("pos"),
            market_id=order.market_id,
            question=self._catalog.question_for(order.market_id),
            side=order.side,
            shares=reserved,
            avg_price=order.limit_price,
        )
        return (created, *state.positions)
