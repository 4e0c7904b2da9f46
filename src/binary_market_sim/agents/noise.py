"""Uninformed order flow: random side, direction and size near the quote."""

from __future__ import annotations

from typing import Optional, Sequence

from ..market.models import Market, Order, OrderType, Side, Trader, clamp_price, round_price
from ..utils.rng import Clock, RandomSource, default_rng, new_id, utc_now

MAX_VARIATION = 0.1


def generate_random_order(
    traders: Sequence[Trader],
    markets: Sequence[Market],
    *,
    rng: RandomSource | None = None,
    clock: Clock = utc_now,
) -> Optional[Order]:
    if not traders or not markets:
        return None
    rng = rng or default_rng()

    trader = rng.choice(traders)
    market = rng.choice(markets)
    side: Side = "YES" if rng.random() > 0.5 else "NO"
    order_type: OrderType = "BUY" if rng.random() > 0.5 else "SELL"
    price = market.price_for(side) + rng.uniform(-MAX_VARIATION, MAX_VARIATION)

    return Order(
        order_id=new_id("order", rng, clock),
        trader_id=trader.trader_id,
        market_id=market.market_id,
        side=side,
        order_type=order_type,
        price=round_price(clamp_price(price)),
        amount=rng.randint(100, 1099),
        timestamp=clock(),
    )
