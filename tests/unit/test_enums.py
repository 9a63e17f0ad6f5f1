"""Tests for pm_common.enums — values are persisted and must stay stable."""

from src.pm_common.enums import (
    MarketStatus,
    OrderAction,
    OrderType,
    PositionStatus,
    Side,
    TransactionType,
)


class TestAllEnumsAreStr:
    """All enums inherit from (str, Enum) for JSON serialization."""

    def test_side_is_str(self) -> None:
        assert isinstance(Side.YES, str)
        assert Side.YES == "YES"

    def test_order_type_is_str(self) -> None:
        assert isinstance(OrderType.LIMIT, str)
        assert OrderType.LIMIT == "LIMIT"


class TestValues:
    def test_side(self) -> None:
        assert {s.value for s in Side} == {"YES", "NO"}

    def test_order_action(self) -> None:
        assert {a.value for a in OrderAction} == {"BUY", "SELL"}

    def test_position_status(self) -> None:
        assert {s.value for s in PositionStatus} == {"OPEN", "CLOSED", "RESOLVED"}

    def test_transaction_type(self) -> None:
        assert {t.value for t in TransactionType} == {
            "DEPOSIT",
            "WITHDRAWAL",
            "TRADE",
            "TRADE_FEE",
            "ORDER_PLACE",
            "ORDER_CANCEL",
        }

    def test_market_status(self) -> None:
        assert MarketStatus("TRADING") is MarketStatus.TRADING
