"""MarketCatalog — read-only lookups used to label ledger rows and mark positions.

The account engine never mutates market data; it only asks for questions,
current YES prices and best book levels.
"""

from src.pm_common.enums import MarketCategory, OrderAction, Side
from src.pm_market.domain.models import Market, OrderBook
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository
from src.pm_pricing.domain.price import market_exec_side_price, side_price_from_yes


class MarketCatalog:
    def __init__(self, repo: MarketRepositoryProtocol | None = None) -> None:
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()

    def get_market(self, market_id: str) -> Market | None:
        return self._repo.get_market_by_id(market_id)

    def list_markets(self, category: MarketCategory | None = None) -> list[Market]:
        markets = self._repo.list_markets()
        if category is None:
            return markets
        return [m for m in markets if m.category == category]

    def question_for(self, market_id: str) -> str:
        market = self._repo.get_market_by_id(market_id)
        return market.question if market is not None else market_id

    def yes_price_for(self, market_id: str) -> float | None:
        market = self._repo.get_market_by_id(market_id)
        return market.yes_price if market is not None else None

    def order_book_for(self, market_id: str) -> OrderBook | None:
        return self._repo.get_order_book(market_id)

    def mark_price(self, market_id: str, side: Side) -> float | None:
        """Current side price used to value an open position."""
        yes = self.yes_price_for(market_id)
        return None if yes is None else side_price_from_yes(yes, side)

    def exec_side_price(self, market_id: str, action: OrderAction, side: Side) -> float | None:
        """MARKET execution price from the book, falling back to the quoted YES price."""
        yes = self.yes_price_for(market_id)
        if yes is None:
            return None
        book = self._repo.get_order_book(market_id)
        return market_exec_side_price(
            action,
            side,
            yes,
            best_bid=book.best_bid if book else None,
            best_ask=book.best_ask if book else None,
        )
