"""Global enums — values are the persisted wire strings, keep them stable."""

from enum import Enum


class Side(str, Enum):
    YES = "YES"
    NO = "NO"


class OrderAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class OrderType(str, Enum):
    MARKET = "MARKET"
    LIMIT = "LIMIT"


class PositionStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    RESOLVED = "RESOLVED"


class TransactionType(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    TRADE = "TRADE"
    TRADE_FEE = "TRADE_FEE"
    ORDER_PLACE = "ORDER_PLACE"
    ORDER_CANCEL = "ORDER_CANCEL"


class MarketStatus(str, Enum):
    TRADING = "TRADING"
    HALTED = "HALTED"
    RESOLVED = "RESOLVED"


class MarketCategory(str, Enum):
    CRYPTO = "CRYPTO"
    POLITICS = "POLITICS"
    SPORTS = "SPORTS"


class MarketJurisdiction(str, Enum):
    US = "US"
    EU = "EU"
    INTL = "INTL"
