"""Price discovery from the post-match order book."""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterable, Optional

from .models import Market, Order, OrderBook, Side, Trade, clamp_price, round_price
from .orderbook import create_order_book

logger = logging.getLogger(__name__)

ONE_SIDED_BID_DISCOUNT = 0.95
ONE_SIDED_ASK_PREMIUM = 1.05
SUM_TOLERANCE = 0.01


def quote_from_book(book: OrderBook, side: Side, current: float) -> float:
    """Midpoint of the best bid and ask, or a one-sided estimate.

    With only bids the price settles just under the best bid, with only asks
    just over the best ask. An empty book leaves ``current`` unchanged.
    """
    best_bid: Optional[float] = book.best_bid(side)
    best_ask: Optional[float] = book.best_ask(side)
    if best_bid is not None and best_ask is not None:
        return (best_bid + best_ask) / 2
    if best_bid is not None:
        return best_bid * ONE_SIDED_BID_DISCOUNT
    if best_ask is not None:
        return best_ask * ONE_SIDED_ASK_PREMIUM
    return current


def normalize_prices(yes_price: float, no_price: float) -> tuple[float, float]:
    """Rescale a YES/NO pair so it sums to 1 inside [MIN_PRICE, MAX_PRICE].

    Normalize, clamp, then renormalize by the clamped sum when clamping pushed
    the pair more than a cent away from 1.
    """
    total = yes_price + no_price
    if total > 0:
        yes_price /= total
        no_price /= total

    yes_price = clamp_price(yes_price)
    no_price = clamp_price(no_price)

    clamped_total = yes_price + no_price
    if abs(clamped_total - 1.0) > SUM_TOLERANCE:
        yes_price /= clamped_total
        no_price /= clamped_total

    return round_price(yes_price), round_price(no_price)


def update_market_prices(
    market: Market,
    recent_trades: Iterable[Trade],
    all_orders: Iterable[Order],
) -> Market:
    """Return ``market`` repriced from its pending orders with this tick's volume added."""
    book = create_order_book(all_orders, market.market_id)

    yes_price = quote_from_book(book, "YES", market.yes_price)
    no_price = quote_from_book(book, "NO", market.no_price)
    yes_price, no_price = normalize_prices(yes_price, no_price)

    traded = sum(t.amount for t in recent_trades if t.market_id == market.market_id)

    if (yes_price, no_price) != (market.yes_price, market.no_price):
        logger.debug(
            "%s repriced YES %.2f -> %.2f, NO %.2f -> %.2f",
            market.market_id,
            market.yes_price,
            yes_price,
            market.no_price,
            no_price,
        )

    return dataclasses.replace(
        market,
        yes_price=yes_price,
        no_price=no_price,
        total_volume=market.total_volume + traded,
    )
