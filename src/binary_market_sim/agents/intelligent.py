"""Edge-seeking trader strategy.

A trader compares its belief with the quoted YES/NO prices across every
market, picks the largest confidence-weighted edge and quotes toward its own
valuation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..market.models import Market, Order, OrderType, Side, Trader, TradingStyle, clamp_price, round_price
from ..utils.rng import Clock, RandomSource, default_rng, new_id, utc_now

logger = logging.getLogger(__name__)

MIN_EDGE = 0.02
BUY_INTERPOLATION = 0.7
SELL_INTERPOLATION = 0.3
MIN_ORDER_SIZE = 100
MAX_BALANCE_FRACTION = 0.5

STYLE_MULTIPLIERS: Dict[TradingStyle, float] = {
    "conservative": 0.6,
    "moderate": 0.8,
    "aggressive": 1.2,
}


@dataclass(frozen=True)
class Opportunity:
    market: Market
    side: Side
    value: float

    def score(self, confidence_level: float) -> float:
        return abs(self.value) * confidence_level


def find_opportunities(trader: Trader, markets: Sequence[Market]) -> List[Opportunity]:
    """Best-side edge per market, keeping only edges wider than ``MIN_EDGE``."""
    opportunities: List[Opportunity] = []
    for market in markets:
        belief = trader.belief_for(market.market_id)
        yes_edge = belief - market.yes_price
        no_edge = (1 - belief) - market.no_price
        if yes_edge >= no_edge:
            opportunity = Opportunity(market, "YES", yes_edge)
        else:
            opportunity = Opportunity(market, "NO", no_edge)
        if abs(opportunity.value) > MIN_EDGE:
            opportunities.append(opportunity)
    return opportunities


def participation_probability(trader: Trader) -> float:
    return trader.risk_tolerance * 0.8 + 0.2


def target_price(implied: float, market_price: float, confidence_level: float) -> tuple[OrderType, float]:
    """Direction and limit price for a trader valuing a side at ``implied``."""
    if implied > market_price:
        willingness = market_price + (implied - market_price) * confidence_level
        price = market_price + (willingness - market_price) * BUY_INTERPOLATION
        order_type: OrderType = "BUY"
    else:
        floor = market_price - (market_price - implied) * confidence_level
        price = market_price - (market_price - floor) * SELL_INTERPOLATION
        order_type = "SELL"
    return order_type, round_price(clamp_price(price))


def order_size(trader: Trader, opportunity_value: float) -> int:
    size = trader.max_order_size * trader.confidence_level * abs(opportunity_value) * 2
    size *= STYLE_MULTIPLIERS.get(trader.trading_style, 1.0)
    cap = trader.balance * MAX_BALANCE_FRACTION
    return int(min(max(size, MIN_ORDER_SIZE), cap))


def generate_intelligent_order(
    traders: Sequence[Trader],
    markets: Sequence[Market],
    *,
    rng: RandomSource | None = None,
    clock: Clock = utc_now,
) -> Optional[Order]:
    """Return one order from a randomly chosen trader, or None if it sits out."""
    if not traders or not markets:
        return None
    rng = rng or default_rng()

    trader = rng.choice(traders)
    opportunities = find_opportunities(trader, markets)
    if not opportunities:
        return None
    if rng.random() > participation_probability(trader):
        return None

    best = max(opportunities, key=lambda o: o.score(trader.confidence_level))
    belief = trader.belief_for(best.market.market_id)
    implied = belief if best.side == "YES" else 1 - belief
    order_type, price = target_price(implied, best.market.price_for(best.side), trader.confidence_level)

    order = Order(
        order_id=new_id("order", rng, clock),
        trader_id=trader.trader_id,
        market_id=best.market.market_id,
        side=best.side,
        order_type=order_type,
        price=price,
        amount=order_size(trader, best.value),
        timestamp=clock(),
    )
    logger.debug(
        "%s %s %s %d @ %.2f on %s (edge %.3f)",
        trader.name,
        order.order_type,
        order.side,
        order.amount,
        order.price,
        order.market_id,
        best.value,
    )
    return order
