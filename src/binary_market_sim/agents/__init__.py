"""Trader behaviour: belief model, seed population and order strategies.

Strategies share one signature, ``(traders, markets, *, rng, clock)``, and
return an ``Order`` or None, so the driver can mix them freely.
"""

from .beliefs import evolve_beliefs, initial_beliefs
from .intelligent import generate_intelligent_order
from .market_maker import generate_market_maker_order
from .noise import generate_random_order
from .population import generate_markets, generate_traders, trader_name

__all__ = [
    "evolve_beliefs",
    "initial_beliefs",
    "generate_intelligent_order",
    "generate_market_maker_order",
    "generate_random_order",
    "generate_markets",
    "generate_traders",
    "trader_name",
]
