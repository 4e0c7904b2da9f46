"""Seed data: the trader population and the fixed market questions."""

from __future__ import annotations

from datetime import timedelta
from typing import List, Optional, Sequence

from ..market.models import Market, Trader, TradingStyle, round_price
from ..utils.rng import Clock, RandomSource, default_rng, utc_now
from .beliefs import initial_beliefs

TRADER_NAMES = ("Alice", "Bob", "Charlie", "Diana", "Eve", "Frank", "Grace", "Henry", "Ivy", "Jack")

MARKET_QUESTIONS = (
    (
        "Will Bitcoin reach $100,000 by end of 2024?",
        "Market resolves YES if Bitcoin (BTC) reaches or exceeds $100,000 USD at any point "
        "before January 1, 2025.",
    ),
    (
        "Will AI achieve AGI by 2025?",
        "Market resolves YES if a widely recognized AI system demonstrates general "
        "intelligence capabilities by December 31, 2025.",
    ),
    (
        "Will SpaceX land humans on Mars by 2030?",
        "Market resolves YES if SpaceX successfully lands human astronauts on Mars before "
        "January 1, 2030.",
    ),
)

UNKNOWN_NAME = "Unknown"


def trading_style_for(risk_tolerance: float) -> TradingStyle:
    if risk_tolerance < 0.4:
        return "conservative"
    if risk_tolerance < 0.7:
        return "moderate"
    return "aggressive"


def generate_markets(*, rng: RandomSource | None = None, clock: Clock = utc_now) -> List[Market]:
    rng = rng or default_rng()
    now = clock()
    markets = []
    for index, (question, description) in enumerate(MARKET_QUESTIONS):
        yes_price = round_price(rng.uniform(0.20, 0.80))
        markets.append(
            Market(
                market_id=f"market-{index + 1}",
                question=question,
                description=description,
                end_date=now + timedelta(days=30 + index * 10),
                total_volume=float(rng.randint(50_000, 149_999)),
                yes_price=yes_price,
                no_price=round_price(1.0 - yes_price),
                is_active=True,
            )
        )
    return markets


def generate_traders(
    markets: Sequence[Market],
    *,
    rng: RandomSource | None = None,
    profiles: Optional[Sequence[dict]] = None,
) -> List[Trader]:
    """Build the trader population.

    Args:
        markets: Markets to seed beliefs for.
        rng: Random source.
        profiles: Optional per-index overrides (see ``utils.personas``). Extra
            profiles beyond the default roster add traders.

    Returns:
        Traders with ids ``trader-1`` .. ``trader-N``.
    """
    rng = rng or default_rng()
    profiles = list(profiles or [])
    count = max(len(TRADER_NAMES), len(profiles))

    traders = []
    for index in range(count):
        profile = profiles[index] if index < len(profiles) else {}
        default_name = TRADER_NAMES[index] if index < len(TRADER_NAMES) else f"Trader {index + 1}"

        balance = float(profile.get("balance", rng.randint(5_000, 14_999)))
        risk_tolerance = float(profile.get("risk_tolerance", rng.uniform(0.1, 0.95)))
        confidence_level = float(profile.get("confidence_level", rng.uniform(0.4, 0.9)))
        trading_style = profile.get("trading_style", trading_style_for(risk_tolerance))

        traders.append(
            Trader(
                trader_id=f"trader-{index + 1}",
                name=profile.get("name", default_name),
                balance=balance,
                beliefs=initial_beliefs(index, markets, rng),
                risk_tolerance=risk_tolerance,
                trading_style=trading_style,
                max_order_size=int(balance * risk_tolerance * 0.2),
                confidence_level=confidence_level,
            )
        )
    return traders


def trader_name(traders: Sequence[Trader], trader_id: str) -> str:
    for trader in traders:
        if trader.trader_id == trader_id:
            return trader.name
    return UNKNOWN_NAME
