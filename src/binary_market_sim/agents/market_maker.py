"""Liquidity provider that quotes one side a few cents away from the market."""

from __future__ import annotations

from typing import Optional, Sequence

from ..market.models import Market, Order, OrderType, Side, Trader, clamp_price, round_price
from ..utils.rng import Clock, RandomSource, default_rng, new_id, utc_now

MAKER_POOL_SIZE = 3
MIN_SPREAD = 0.02
MAX_SPREAD = 0.05
SIZE_BALANCE_FRACTION = 0.02
SIZE_BASE = 200
SIZE_CAP_FRACTION = 0.1


def market_makers(traders: Sequence[Trader]) -> list[Trader]:
    """The richest traders act as makers."""
    return sorted(traders, key=lambda t: t.balance, reverse=True)[:MAKER_POOL_SIZE]


def maker_size(balance: float) -> int:
    return int(min(balance * SIZE_BALANCE_FRACTION + SIZE_BASE, balance * SIZE_CAP_FRACTION))


def generate_market_maker_order(
    traders: Sequence[Trader],
    markets: Sequence[Market],
    *,
    rng: RandomSource | None = None,
    clock: Clock = utc_now,
) -> Optional[Order]:
    if not traders or not markets:
        return None
    rng = rng or default_rng()

    maker = rng.choice(market_makers(traders))
    market = rng.choice(markets)
    side: Side = rng.choice(("YES", "NO"))
    spread = rng.uniform(MIN_SPREAD, MAX_SPREAD)
    current = market.price_for(side)

    if rng.random() < 0.5:
        order_type: OrderType = "BUY"
        price = current - spread
    else:
        order_type = "SELL"
        price = current + spread

    return Order(
        order_id=new_id("order", rng, clock),
        trader_id=maker.trader_id,
        market_id=market.market_id,
        side=side,
        order_type=order_type,
        price=round_price(clamp_price(price)),
        amount=maker_size(maker.balance),
        timestamp=clock(),
    )
