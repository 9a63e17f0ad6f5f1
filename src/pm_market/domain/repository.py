"""Repository Protocol — dependency inversion for testability.

MarketCatalog depends only on these three lookups; tests pass a stub.
The seeded in-memory MarketRepository is the only production implementation.
"""

from typing import Protocol

from src.pm_market.domain.models import Market, OrderBook


class MarketRepositoryProtocol(Protocol):
    def get_market_by_id(self, market_id: str) -> Market | None: ...

    def list_markets(self) -> list[Market]: ...

    def get_order_book(self, market_id: str) -> OrderBook | None: ...
