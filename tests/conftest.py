"""Shared fixtures and builders for the simulation tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Dict, Iterable, Optional

import pytest

from binary_market_sim.market.models import Market, Order, Trader

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
_order_ids = count(1)


def fixed_clock() -> datetime:
    return FIXED_NOW


class ScriptedRandom:
    """Deterministic stand-in for ``random.Random`` with queued draws.

    ``random()`` and ``uniform()`` pop from their queues and fall back to
    0.0 / the interval midpoint. ``choice`` pops an index (default 0) except
    for strings, which always yield their first character so id suffixes do
    not consume scripted picks.
    """

    def __init__(
        self,
        *,
        randoms: Iterable[float] = (),
        uniforms: Iterable[float] = (),
        choices: Iterable[int] = (),
        randints: Iterable[int] = (),
    ) -> None:
        self.randoms = list(randoms)
        self.uniforms = list(uniforms)
        self.choices = list(choices)
        self.randints = list(randints)

    def random(self) -> float:
        return self.randoms.pop(0) if self.randoms else 0.0

    def uniform(self, a: float, b: float) -> float:
        return self.uniforms.pop(0) if self.uniforms else (a + b) / 2

    def choice(self, seq):
        if isinstance(seq, str):
            return seq[0]
        index = self.choices.pop(0) if self.choices else 0
        return seq[index]

    def randint(self, a: int, b: int) -> int:
        return self.randints.pop(0) if self.randints else a


def make_order(
    *,
    order_type: str = "BUY",
    price: float = 0.5,
    amount: int = 100,
    side: str = "YES",
    market_id: str = "market-1",
    trader_id: str = "trader-1",
    status: str = "PENDING",
    order_id: Optional[str] = None,
) -> Order:
    return Order(
        order_id=order_id or f"order-{next(_order_ids)}",
        trader_id=trader_id,
        market_id=market_id,
        side=side,
        order_type=order_type,
        price=price,
        amount=amount,
        timestamp=FIXED_NOW,
        status=status,
    )


def make_market(
    market_id: str = "market-1",
    *,
    yes_price: float = 0.5,
    no_price: Optional[float] = None,
    total_volume: float = 0.0,
) -> Market:
    return Market(
        market_id=market_id,
        question=f"Question for {market_id}?",
        description="Resolves YES if it happens.",
        end_date=FIXED_NOW + timedelta(days=30),
        total_volume=total_volume,
        yes_price=yes_price,
        no_price=round(1 - yes_price, 2) if no_price is None else no_price,
    )


def make_trader(
    trader_id: str = "trader-1",
    *,
    beliefs: Optional[Dict[str, float]] = None,
    balance: float = 10_000.0,
    risk_tolerance: float = 0.5,
    trading_style: str = "moderate",
    max_order_size: Optional[int] = None,
    confidence_level: float = 0.6,
    name: Optional[str] = None,
) -> Trader:
    return Trader(
        trader_id=trader_id,
        name=name or trader_id.title(),
        balance=balance,
        beliefs=dict(beliefs or {}),
        risk_tolerance=risk_tolerance,
        trading_style=trading_style,
        max_order_size=int(balance * risk_tolerance * 0.2) if max_order_size is None else max_order_size,
        confidence_level=confidence_level,
    )


@pytest.fixture
def clock():
    return fixed_clock
