"""MarketRepository — in-memory, seeded with the demo market catalog.

Markets and YES order books are static mock data; nothing here is mutated
after construction.
"""

from src.pm_common.enums import MarketCategory, MarketJurisdiction, MarketStatus
from src.pm_market.domain.models import Market, OrderBook, PriceLevel

SEED_MARKETS: tuple[Market, ...] = (
    Market(
        id="btc-100k-2026",
        question="Will Bitcoin trade above $100,000 by June 30, 2026?",
        yes_price=0.42,
        volume_usd=1_823_450,
        resolves_at="2026-06-30T23:59:59Z",
        jurisdiction=MarketJurisdiction.INTL,
        status=MarketStatus.TRADING,
        category=MarketCategory.CRYPTO,
    ),
    Market(
        id="eth-etf-approval-2025",
        question="Will an Ethereum spot ETF be approved in the US by Jan 31, 2026?",
        yes_price=0.67,
        volume_usd=945_200,
        resolves_at="2025-12-31T23:59:59Z",
        jurisdiction=MarketJurisdiction.US,
        status=MarketStatus.TRADING,
        category=MarketCategory.CRYPTO,
    ),
    Market(
        id="election-x-2026",
        question="Will Candidate X win the 2026 election?",
        yes_price=0.57,
        volume_usd=845_200,
        resolves_at="2026-11-08T23:59:59Z",
        jurisdiction=MarketJurisdiction.US,
        status=MarketStatus.TRADING,
        category=MarketCategory.POLITICS,
    ),
    Market(
        id="eu-ai-act-2025",
        question="Will the EU fully enforce the AI Act by June 2026?",
        yes_price=0.48,
        volume_usd=412_800,
        resolves_at="2025-12-15T23:59:59Z",
        jurisdiction=MarketJurisdiction.EU,
        status=MarketStatus.TRADING,
        category=MarketCategory.POLITICS,
    ),
    Market(
        id="sports-final-2026",
        question="Will Team A win the 2026 final?",
        yes_price=0.31,
        volume_usd=245_990,
        resolves_at="2026-07-19T23:59:59Z",
        jurisdiction=MarketJurisdiction.INTL,
        status=MarketStatus.HALTED,
        category=MarketCategory.SPORTS,
    ),
    Market(
        id="champions-league-2025-team-b",
        question="Will Team B win the 2026 Champions League?",
        yes_price=0.36,
        volume_usd=318_400,
        resolves_at="2025-05-28T23:59:59Z",
        jurisdiction=MarketJurisdiction.EU,
        status=MarketStatus.TRADING,
        category=MarketCategory.SPORTS,
    ),
    Market(
        id="fed-rate-cut-2025",
        question="Will the Federal Reserve cut interest rates by September 2025?",
        yes_price=0.54,
        volume_usd=1_120_600,
        resolves_at="2025-09-30T23:59:59Z",
        jurisdiction=MarketJurisdiction.US,
        status=MarketStatus.TRADING,
        category=MarketCategory.POLITICS,
    ),
    Market(
        id="btc-halving-impact-2025",
        question="Will Bitcoin reach a new all-time high within 6 months of the 2024 halving?",
        yes_price=0.67,
        volume_usd=2_405_900,
        resolves_at="2025-10-01T23:59:59Z",
        jurisdiction=MarketJurisdiction.INTL,
        status=MarketStatus.RESOLVED,
        category=MarketCategory.CRYPTO,
    ),
)


def _book(market_id: str, asks: list[tuple[float, float]], bids: list[tuple[float, float]]) -> OrderBook:
    return OrderBook(
        market_id=market_id,
        asks=tuple(PriceLevel(p, q) for p, q in sorted(asks)),
        bids=tuple(PriceLevel(p, q) for p, q in sorted(bids, reverse=True)),
    )


SEED_ORDER_BOOKS: dict[str, OrderBook] = {
    "btc-100k-2026": _book(
        "btc-100k-2026",
        asks=[(0.431, 1800), (0.437, 2400), (0.445, 2100), (0.452, 1600), (0.468, 1300)],
        bids=[(0.422, 2500), (0.417, 1900), (0.409, 3200), (0.402, 2800), (0.395, 2100)],
    ),
    "election-x-2026": _book(
        "election-x-2026",
        asks=[(0.586, 1400), (0.593, 2100), (0.601, 1800), (0.612, 1600), (0.628, 1200)],
        bids=[(0.571, 2600), (0.563, 2200), (0.556, 3100), (0.548, 1900), (0.536, 1700)],
    ),
    "sports-final-2026": _book(
        "sports-final-2026",
        asks=[(0.326, 900), (0.334, 1100), (0.349, 800), (0.361, 700), (0.379, 600)],
        bids=[(0.309, 1200), (0.301, 1400), (0.294, 1000), (0.288, 900), (0.275, 800)],
    ),
}


class MarketRepository:
    """Build the id → market index once; lookups are dict hits."""

    def __init__(
        self,
        markets: tuple[Market, ...] | list[Market] = SEED_MARKETS,
        order_books: dict[str, OrderBook] | None = None,
    ) -> None:
        self._markets: dict[str, Market] = {m.id: m for m in markets}
        self._order_books: dict[str, OrderBook] = dict(
            SEED_ORDER_BOOKS if order_books is None else order_books
        )

    def get_market_by_id(self, market_id: str) -> Market | None:
        return self._markets.get(market_id)

    def list_markets(self) -> list[Market]:
        return list(self._markets.values())

    def get_order_book(self, market_id: str) -> OrderBook | None:
        return self._order_books.get(market_id)
