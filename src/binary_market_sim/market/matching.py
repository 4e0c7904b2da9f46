"""Batch matching of the pending order pool.

Orders are bucketed by (market, side). Within a bucket every bid is walked
against the asks in price priority and crossed at the midpoint. This is a
nested scan, which is fine for a few hundred resting orders per tick.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from ..utils.rng import Clock, RandomSource, default_rng, new_id, utc_now
from .models import Order, Side, Trade, round_price
from .orderbook import sort_asks, sort_bids

logger = logging.getLogger(__name__)

BucketKey = Tuple[str, Side]


@dataclass
class MatchResult:
    trades: List[Trade] = field(default_factory=list)
    updated_orders: List[Order] = field(default_factory=list)


@dataclass
class _Bucket:
    buys: List[Order] = field(default_factory=list)
    sells: List[Order] = field(default_factory=list)


def match_orders(
    orders: Sequence[Order],
    *,
    rng: RandomSource | None = None,
    clock: Clock = utc_now,
    prevent_self_trade: bool = False,
) -> MatchResult:
    """Cross every compatible pending BUY/SELL pair.

    The caller's orders are left untouched: the matcher works on copies and
    hands them back in ``updated_orders`` in the original sequence.
    """
    rng = rng or default_rng()
    updated = [order.copy() for order in orders]

    buckets: Dict[BucketKey, _Bucket] = {}
    for order in updated:
        if not order.is_pending:
            continue
        bucket = buckets.setdefault((order.market_id, order.side), _Bucket())
        if order.order_type == "BUY":
            bucket.buys.append(order)
        else:
            bucket.sells.append(order)

    trades: List[Trade] = []
    for (market_id, side), bucket in buckets.items():
        trades.extend(
            _match_bucket(
                market_id,
                side,
                sort_bids(bucket.buys),
                sort_asks(bucket.sells),
                rng=rng,
                clock=clock,
                prevent_self_trade=prevent_self_trade,
            )
        )

    if trades:
        logger.debug("Matched %d trades across %d books", len(trades), len(buckets))
    return MatchResult(trades=trades, updated_orders=updated)


def _match_bucket(
    market_id: str,
    side: Side,
    buys: List[Order],
    sells: List[Order],
    *,
    rng: RandomSource,
    clock: Clock,
    prevent_self_trade: bool,
) -> List[Trade]:
    trades: List[Trade] = []
    for buy in buys:
        for sell in sells:
            if not buy.is_pending:
                break
            # Asks are ascending, so nothing further along can cross.
            if buy.price < sell.price:
                break
            if not sell.is_pending:
                continue
            if prevent_self_trade and buy.trader_id == sell.trader_id:
                continue

            quantity = min(buy.amount, sell.amount)
            if quantity <= 0:
                continue
            trades.append(
                Trade(
                    trade_id=new_id("trade", rng, clock),
                    market_id=market_id,
                    buyer_id=buy.trader_id,
                    seller_id=sell.trader_id,
                    side=side,
                    price=round_price((buy.price + sell.price) / 2),
                    amount=quantity,
                    timestamp=clock(),
                    buy_order_id=buy.order_id,
                    sell_order_id=sell.order_id,
                )
            )
            buy.fill(quantity)
            sell.fill(quantity)
    return trades
