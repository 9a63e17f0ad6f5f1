"""Tests for pm_common.errors."""

from src.pm_common.errors import (
    AppError,
    InsufficientBalanceError,
    InsufficientPositionError,
    InvalidPriceError,
    InvalidSharesError,
    OrderRejectedError,
    StorageError,
)


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert str(err) == "Internal error"

    def test_is_exception(self) -> None:
        err = AppError(code=1001, message="test")
        assert isinstance(err, Exception)


class TestOrderRejections:
    def test_insufficient_balance(self) -> None:
        err = InsufficientBalanceError(required=65.65, available=30.0)
        assert err.code == 2001
        assert err.reason == "INSUFFICIENT_BALANCE"
        assert err.message == "Insufficient balance"
        assert err.required == 65.65
        assert err.available == 30.0

    def test_invalid_shares(self) -> None:
        err = InvalidSharesError(-1)
        assert err.code == 4001
        assert err.reason == "INVALID_SHARES"
        assert err.message == "Invalid shares"

    def test_invalid_price(self) -> None:
        err = InvalidPriceError(1.0)
        assert err.code == 4002
        assert err.reason == "INVALID_PRICE"
        assert err.message == "Invalid price"

    def test_not_enough_shares(self) -> None:
        err = InsufficientPositionError("m1", "YES", 10)
        assert err.code == 5001
        assert err.reason == "NOT_ENOUGH_SHARES"
        assert err.message == "Not enough shares"
        assert (err.market_id, err.side, err.requested) == ("m1", "YES", 10)

    def test_all_share_base(self) -> None:
        for err in (
            InsufficientBalanceError(1, 0),
            InvalidSharesError(0),
            InvalidPriceError(0),
            InsufficientPositionError("m1", "NO", 1),
        ):
            assert isinstance(err, OrderRejectedError)
            assert isinstance(err, AppError)


class TestStorageError:
    def test_storage_error(self) -> None:
        err = StorageError("disk full")
        assert err.code == 9001
        assert err.message == "Storage failure: disk full"
        assert not isinstance(err, OrderRejectedError)
