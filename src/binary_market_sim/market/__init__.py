"""Market microstructure: order types, order book view, matching and pricing.

The matcher is a batch crossing engine over the whole pending pool rather than
a continuous price-time queue. Prices are then rediscovered from whatever is
left resting in the book.
"""

from .matching import MatchResult, match_orders
from .models import (
    MAX_PRICE,
    MIN_PRICE,
    SIDES,
    Market,
    Order,
    OrderBook,
    OrderStatus,
    OrderType,
    Side,
    Trade,
    Trader,
    TradingStyle,
)
from .orderbook import create_order_book
from .pricing import normalize_prices, update_market_prices

__all__ = [
    # Types
    "Market",
    "Order",
    "OrderBook",
    "OrderStatus",
    "OrderType",
    "Side",
    "SIDES",
    "Trade",
    "Trader",
    "TradingStyle",
    "MIN_PRICE",
    "MAX_PRICE",
    # Engine
    "MatchResult",
    "match_orders",
    "create_order_book",
    "normalize_prices",
    "update_market_prices",
]
