"""Trader belief model: heterogeneous priors plus slow drift toward the market."""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..market.models import MAX_BELIEF, MIN_BELIEF, Market, Trade, Trader, clamp
from ..utils.rng import RandomSource, default_rng

# (low, high) ranges cycled by trader index.
BELIEF_ARCHETYPES: Tuple[Tuple[str, float, float], ...] = (
    ("strong_optimist", 0.75, 0.95),
    ("strong_pessimist", 0.05, 0.25),
    ("moderate_optimist", 0.55, 0.75),
    ("moderate_pessimist", 0.25, 0.45),
    ("neutral", 0.45, 0.55),
)

DRIFT_RATE = 0.05
NOISE = 0.01
MARKET_OFFSET_SCALE = 0.05


def archetype_for(trader_index: int) -> str:
    return BELIEF_ARCHETYPES[trader_index % len(BELIEF_ARCHETYPES)][0]


def market_offset(market_index: int, trader_index: int) -> float:
    """Bounded per-market nudge so one trader does not hold identical views everywhere."""
    return math.sin((market_index + 1) * (trader_index + 1)) * MARKET_OFFSET_SCALE


def initial_beliefs(
    trader_index: int,
    markets: Sequence[Market],
    rng: RandomSource,
) -> Dict[str, float]:
    _, low, high = BELIEF_ARCHETYPES[trader_index % len(BELIEF_ARCHETYPES)]
    beliefs: Dict[str, float] = {}
    for market_index, market in enumerate(markets):
        base = rng.uniform(low, high)
        beliefs[market.market_id] = clamp(
            base + market_offset(market_index, trader_index), MIN_BELIEF, MAX_BELIEF
        )
    return beliefs


def drift(current: float, market_price: float, confidence_level: float, noise: float) -> float:
    adjustment = (market_price - current) * DRIFT_RATE * (1 - confidence_level)
    return clamp(current + adjustment + noise, MIN_BELIEF, MAX_BELIEF)


def evolve_beliefs(
    traders: Sequence[Trader],
    markets: Sequence[Market],
    trades: Optional[Iterable[Trade]] = None,
    *,
    rng: RandomSource | None = None,
) -> List[Trader]:
    """Pull every belief a little toward the market's YES price.

    Confident traders move less. ``trades`` is accepted for callers that
    already pass the tick's fills but does not influence the update.
    """
    rng = rng or default_rng()
    evolved: List[Trader] = []
    for trader in traders:
        beliefs = dict(trader.beliefs)
        for market in markets:
            current = trader.belief_for(market.market_id)
            beliefs[market.market_id] = drift(
                current,
                market.yes_price,
                trader.confidence_level,
                rng.uniform(-NOISE, NOISE),
            )
        evolved.append(trader.with_beliefs(beliefs))
    return evolved
