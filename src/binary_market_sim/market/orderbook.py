"""Read-only order book projection over the pending order pool."""

from __future__ import annotations

from typing import Iterable, List

from .models import Order, OrderBook, OrderType, Side


def _select(orders: Iterable[Order], side: Side, order_type: OrderType) -> List[Order]:
    return [o for o in orders if o.side == side and o.order_type == order_type]


def sort_bids(orders: Iterable[Order]) -> List[Order]:
    # Stable sort: equal prices keep insertion order.
    return sorted(orders, key=lambda o: o.price, reverse=True)


def sort_asks(orders: Iterable[Order]) -> List[Order]:
    return sorted(orders, key=lambda o: o.price)


def create_order_book(orders: Iterable[Order], market_id: str) -> OrderBook:
    """Build the four price-sorted queues of pending orders for ``market_id``.

    Pure: the input is neither reordered nor mutated, and the queues hold the
    caller's order objects.
    """
    pending = [o for o in orders if o.market_id == market_id and o.is_pending]
    return OrderBook(
        market_id=market_id,
        yes_bids=sort_bids(_select(pending, "YES", "BUY")),
        yes_asks=sort_asks(_select(pending, "YES", "SELL")),
        no_bids=sort_bids(_select(pending, "NO", "BUY")),
        no_asks=sort_asks(_select(pending, "NO", "SELL")),
    )
