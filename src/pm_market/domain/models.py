"""Domain models for pm_market — pure dataclasses, read-only market data."""

from dataclasses import dataclass, field

from src.pm_common.enums import MarketCategory, MarketJurisdiction, MarketStatus


@dataclass(frozen=True)
class Market:
    id: str
    question: str
    yes_price: float          # 0..1 implied probability
    volume_usd: float
    resolves_at: str          # ISO8601
    jurisdiction: MarketJurisdiction
    status: MarketStatus
    category: MarketCategory


@dataclass(frozen=True)
class PriceLevel:
    """Single level of the YES order book."""

    price: float   # YES price 0..1
    qty: float     # shares


@dataclass(frozen=True)
class OrderBook:
    """YES-side order book. NO prices are derived as 1 - YES by the pricing model."""

    market_id: str
    asks: tuple[PriceLevel, ...] = field(default_factory=tuple)   # ascending by price
    bids: tuple[PriceLevel, ...] = field(default_factory=tuple)   # descending by price

    @property
    def best_ask(self) -> float | None:
        return self.asks[0].price if self.asks else None

    @property
    def best_bid(self) -> float | None:
        return self.bids[0].price if self.bids else None
