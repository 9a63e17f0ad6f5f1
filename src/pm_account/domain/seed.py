"""Seed account used on first run, on unreadable storage and on reset().

Shape is fixed (wallet, positions, resting orders, history). Only ids of the
generated trades and the timestamps depend on `now_ms`; prices and sizes come
from per-market seeded RNGs, so two seeds at the same instant are identical.
"""

import random

from src.pm_account.domain.models import (
    AccountState,
    OpenOrder,
    Position,
    RecentTrade,
    Transaction,
)
from src.pm_common.enums import OrderAction, Side, TransactionType

SEED_CASH_USD = 500.0
SEED_HISTORY_LIMIT = 200
TRADES_PER_MARKET = 16

_MINUTE_MS = 60 * 1000
_HOUR_MS = 60 * _MINUTE_MS

# (market_id, base YES price) for the seeded trade tape
_TRADE_TAPE_MARKETS: tuple[tuple[str, float], ...] = (
    ("btc-100k-2026", 0.42),
    ("election-x-2026", 0.57),
    ("sports-final-2026", 0.31),
)

SEED_POSITIONS: tuple[Position, ...] = (
    Position(
        id="pos-1",
        market_id="btc-100k-2026",
        question="Will Bitcoin trade above $100,000 by June 30, 2026?",
        side=Side.YES,
        shares=220,
        avg_price=0.39,
    ),
    Position(
        id="pos-2",
        market_id="election-x-2026",
        question="Will Candidate X win the 2026 election?",
        side=Side.NO,
        shares=150,
        avg_price=0.44,
    ),
    Position(
        id="pos-3",
        market_id="sports-final-2026",
        question="Will Team A win the 2026 final?",
        side=Side.YES,
        shares=80,
        avg_price=0.35,
    ),
)


def _seed_open_orders(now_ms: int) -> tuple[OpenOrder, ...]:
    return (
        OpenOrder(
            id="ord-1",
            market_id="btc-100k-2026",
            action=OrderAction.BUY,
            side=Side.YES,
            limit_price=0.41,
            shares=250,
            created_at=now_ms - 24 * _MINUTE_MS,
            reserved_cash_usd=250 * 0.41 + 0.1,
        ),
        OpenOrder(
            id="ord-2",
            market_id="election-x-2026",
            action=OrderAction.SELL,
            side=Side.NO,
            limit_price=0.46,
            shares=80,
            created_at=now_ms - 95 * _MINUTE_MS,
            reserved_shares=80,
        ),
    )


def _seed_transactions(now_ms: int) -> list[Transaction]:
    return [
        Transaction("tx-1", now_ms - 26 * _HOUR_MS, TransactionType.DEPOSIT, 500, "Card deposit (mock)"),
        Transaction("tx-2", now_ms - 5 * _HOUR_MS, TransactionType.TRADE_FEE, -1.2, "Fees (mock)"),
        Transaction("tx-3", now_ms - 2 * _HOUR_MS, TransactionType.WITHDRAWAL, -50, "Bank transfer (mock)"),
    ]


def generate_trade_tape(market_id: str, base_yes: float, now_ms: int) -> list[RecentTrade]:
    """Recent fills around base_yes, newest first."""
    rng = random.Random(market_id)
    out: list[RecentTrade] = []
    for i in range(TRADES_PER_MARKET):
        ts = now_ms - int(i * (30_000 + rng.random() * 90_000))
        side = Side.YES if rng.random() > 0.55 else Side.NO
        yes = min(0.99, max(0.01, base_yes + (rng.random() - 0.5) * 0.03))
        price = yes if side == Side.YES else 1 - yes
        out.append(
            RecentTrade(
                id=f"{market_id}-t-{i}",
                market_id=market_id,
                ts=ts,
                side=side,
                price=round(price, 4),
                shares=round(10 + rng.random() * 260),
            )
        )
    out.sort(key=lambda t: t.ts, reverse=True)
    return out


def seed_state(
    now_ms: int,
    initial_cash_usd: float = SEED_CASH_USD,
    history_limit: int = SEED_HISTORY_LIMIT,
) -> AccountState:
    trades: list[RecentTrade] = []
    for market_id, base_yes in _TRADE_TAPE_MARKETS:
        trades.extend(generate_trade_tape(market_id, base_yes, now_ms))
    trades.sort(key=lambda t: t.ts, reverse=True)

    transactions = sorted(_seed_transactions(now_ms), key=lambda t: t.ts, reverse=True)

    return AccountState(
        cash_usd=initial_cash_usd,
        positions=SEED_POSITIONS,
        open_orders=_seed_open_orders(now_ms),
        trades=tuple(trades[:history_limit]),
        transactions=tuple(transactions[:history_limit]),
    )
