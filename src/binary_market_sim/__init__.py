"""In-memory binary prediction market simulator.

Synthetic traders quote on YES/NO shares, a batch matcher crosses the pending
pool, and prices are rediscovered from the resting book every tick.
"""

from .agents import (
    evolve_beliefs,
    generate_intelligent_order,
    generate_market_maker_order,
    generate_markets,
    generate_random_order,
    generate_traders,
)
from .market import create_order_book, match_orders, update_market_prices
from .simulation.engine import SimulationEngine, SimulationRuntimeConfig

__all__ = [
    "SimulationEngine",
    "SimulationRuntimeConfig",
    "generate_traders",
    "generate_markets",
    "generate_intelligent_order",
    "generate_market_maker_order",
    "generate_random_order",
    "match_orders",
    "update_market_prices",
    "evolve_beliefs",
    "create_order_book",
]
