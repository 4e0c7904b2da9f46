"""Protocol definitions that the simulation driver depends on."""

from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from ..market.models import Market, Order, Trade, Trader
from ..utils.rng import Clock, RandomSource


class OrderStrategy(Protocol):
    """Produces at most one order per call from the current population."""

    def __call__(
        self,
        traders: Sequence[Trader],
        markets: Sequence[Market],
        *,
        rng: RandomSource | None = None,
        clock: Clock = ...,
    ) -> Optional[Order]:
        ...


class Evaluator(Protocol):
    """Consumes state transitions to compute metrics (volatility, spread, etc.)."""

    def on_tick(
        self,
        *,
        timestep: int,
        markets: Sequence[Market],
        traders: Sequence[Trader],
        trades: Sequence[Trade],
        orders: Sequence[Order],
    ) -> None:
        ...

    def finalize(self) -> Mapping[str, object]:
        ...
