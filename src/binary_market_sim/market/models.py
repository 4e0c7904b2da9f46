"""Core value types shared by the order generators, matcher and pricer."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Literal, Optional, Tuple

Side = Literal["YES", "NO"]
OrderType = Literal["BUY", "SELL"]
OrderStatus = Literal["PENDING", "FILLED", "CANCELLED"]
TradingStyle = Literal["conservative", "moderate", "aggressive"]

SIDES: Tuple[Side, Side] = ("YES", "NO")

MIN_PRICE = 0.01
MAX_PRICE = 0.99
MIN_BELIEF = 0.05
MAX_BELIEF = 0.95


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_price(value: float) -> float:
    """Round half-up to whole cents."""
    return math.floor(value * 100 + 0.5) / 100


def clamp_price(value: float) -> float:
    return clamp(value, MIN_PRICE, MAX_PRICE)


@dataclass(frozen=True)
class Trader:
    """A synthetic participant.

    ``beliefs`` maps market id -> subjective probability of YES. It is the only
    field that changes over a run, and it changes by replacement (see
    ``with_beliefs``), never in place.
    """

    trader_id: str
    name: str
    balance: float
    beliefs: Dict[str, float]
    risk_tolerance: float
    trading_style: TradingStyle
    max_order_size: int
    confidence_level: float

    def belief_for(self, market_id: str, default: float = 0.5) -> float:
        return self.beliefs.get(market_id, default)

    def with_beliefs(self, beliefs: Dict[str, float]) -> "Trader":
        return dataclasses.replace(self, beliefs=dict(beliefs))


@dataclass(frozen=True)
class Market:
    market_id: str
    question: str
    description: str
    end_date: datetime
    total_volume: float
    yes_price: float
    no_price: float
    is_active: bool = True

    def price_for(self, side: Side) -> float:
        return self.yes_price if side == "YES" else self.no_price


@dataclass(slots=True)
class Order:
    order_id: str
    trader_id: str
    market_id: str
    side: Side
    order_type: OrderType
    price: float
    amount: int
    timestamp: datetime
    status: OrderStatus = "PENDING"
    original_amount: Optional[int] = None

    def __post_init__(self) -> None:
        if self.original_amount is None:
            self.original_amount = self.amount

    @property
    def is_pending(self) -> bool:
        return self.status == "PENDING"

    @property
    def filled_amount(self) -> int:
        return (self.original_amount or 0) - self.amount

    def fill(self, quantity: int) -> None:
        """Consume ``quantity`` from the remaining amount."""
        if not self.is_pending:
            raise ValueError(f"Order {self.order_id} is {self.status} and cannot be filled")
        if quantity <= 0 or quantity > self.amount:
            raise ValueError(
                f"Fill of {quantity} is invalid for order {self.order_id} with {self.amount} remaining"
            )
        self.amount -= quantity
        if self.amount == 0:
            self.status = "FILLED"

    def cancel(self) -> None:
        if not self.is_pending:
            raise ValueError(f"Order {self.order_id} is {self.status} and cannot be cancelled")
        self.status = "CANCELLED"

    def copy(self) -> "Order":
        return dataclasses.replace(self)


@dataclass(frozen=True)
class Trade:
    trade_id: str
    market_id: str
    buyer_id: str
    seller_id: str
    side: Side
    price: float
    amount: int
    timestamp: datetime
    buy_order_id: str = ""
    sell_order_id: str = ""

    @property
    def notional(self) -> float:
        return self.price * self.amount


@dataclass
class OrderBook:
    """Pending orders for one market, split into four price-sorted queues."""

    market_id: str
    yes_bids: List[Order] = field(default_factory=list)
    yes_asks: List[Order] = field(default_factory=list)
    no_bids: List[Order] = field(default_factory=list)
    no_asks: List[Order] = field(default_factory=list)

    def bids(self, side: Side) -> List[Order]:
        return self.yes_bids if side == "YES" else self.no_bids

    def asks(self, side: Side) -> List[Order]:
        return self.yes_asks if side == "YES" else self.no_asks

    def best_bid(self, side: Side) -> Optional[float]:
        bids = self.bids(side)
        return bids[0].price if bids else None

    def best_ask(self, side: Side) -> Optional[float]:
        asks = self.asks(side)
        return asks[0].price if asks else None

    def spread(self, side: Side) -> Optional[float]:
        best_bid = self.best_bid(side)
        best_ask = self.best_ask(side)
        if best_bid is None or best_ask is None:
            return None
        return round_price(best_ask - best_bid)

    def depth(self, side: Side, levels: int = 10) -> Dict[str, List[Dict[str, float]]]:
        """Aggregate remaining amount per price level, best levels first."""
        return {
            "bids": _aggregate_levels(self.bids(side), levels),
            "asks": _aggregate_levels(self.asks(side), levels),
        }


def _aggregate_levels(orders: List[Order], levels: int) -> List[Dict[str, float]]:
    entries: List[Dict[str, float]] = []
    for order in orders:
        if entries and entries[-1]["price"] == order.price:
            entries[-1]["amount"] += order.amount
            entries[-1]["orders"] += 1
            continue
        if len(entries) >= levels:
            break
        entries.append({"price": order.price, "amount": order.amount, "orders": 1})
    return entries
