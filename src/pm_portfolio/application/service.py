"""Portfolio read models — valuation and activity views over an AccountState.

Pure functions of (snapshot, catalog); nothing here writes to the store.
Positions in markets missing from the catalog are marked at their average
price, i.e. zero unrealized P&L.
"""

from dataclasses import dataclass

from src.pm_account.domain.models import AccountState, Position, RecentTrade
from src.pm_market.application.service import MarketCatalog
from src.pm_pricing.domain.price import side_price_from_yes


@dataclass(frozen=True)
class PositionValuation:
    position: Position
    mark_price: float
    market_value_usd: float
    unrealized_pnl_usd: float


@dataclass(frozen=True)
class PortfolioSummary:
    cash_usd: float
    reserved_cash_usd: float
    reserved_shares_value_usd: float
    positions_value_usd: float
    unrealized_pnl_usd: float
    open_position_count: int
    open_order_count: int

    @property
    def equity_usd(self) -> float:
        """Cash + collateral held by resting orders + marked positions."""
        return (
            self.cash_usd
            + self.reserved_cash_usd
            + self.reserved_shares_value_usd
            + self.positions_value_usd
        )


@dataclass(frozen=True)
class ActivityItem:
    trade: RecentTrade
    question: str


def position_unrealized_pnl(position: Position, yes_price: float) -> float:
    mark = side_price_from_yes(yes_price, position.side)
    return (mark - position.avg_price) * position.shares


def value_position(position: Position, catalog: MarketCatalog) -> PositionValuation:
    yes = catalog.yes_price_for(position.market_id)
    if yes is None:
        mark = position.avg_price
        pnl = 0.0
    else:
        mark = side_price_from_yes(yes, position.side)
        pnl = position_unrealized_pnl(position, yes)
    return PositionValuation(
        position=position,
        mark_price=mark,
        market_value_usd=mark * position.shares,
        unrealized_pnl_usd=pnl,
    )


def reserved_shares_value(state: AccountState, catalog: MarketCatalog) -> float:
    """Shares escrowed by resting SELL orders, marked like open positions."""
    total = 0.0
    for order in state.open_orders:
        if not order.reserved_shares:
            continue
        mark = catalog.mark_price(order.market_id, order.side)
        total += order.reserved_shares * (order.limit_price if mark is None else mark)
    return total


def open_position_valuations(state: AccountState, catalog: MarketCatalog) -> list[PositionValuation]:
    return [value_position(p, catalog) for p in state.positions if p.is_open]


def summarize_portfolio(state: AccountState, catalog: MarketCatalog) -> PortfolioSummary:
    valuations = open_position_valuations(state, catalog)
    return PortfolioSummary(
        cash_usd=state.cash_usd,
        reserved_cash_usd=state.reserved_cash_usd,
        reserved_shares_value_usd=reserved_shares_value(state, catalog),
        positions_value_usd=sum(v.market_value_usd for v in valuations),
        unrealized_pnl_usd=sum(v.unrealized_pnl_usd for v in valuations),
        open_position_count=len(valuations),
        open_order_count=len(state.open_orders),
    )


def activity_feed(
    state: AccountState,
    catalog: MarketCatalog,
    market_id: str | None = None,
    limit: int = 50,
) -> list[ActivityItem]:
    """Recent fills labelled with market questions, newest first."""
    trades = [t for t in state.trades if market_id is None or t.market_id == market_id]
    trades.sort(key=lambda t: t.ts, reverse=True)
    return [ActivityItem(trade=t, question=catalog.question_for(t.market_id)) for t in trades[:limit]]
