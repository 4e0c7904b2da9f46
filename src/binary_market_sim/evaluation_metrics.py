"""
Evaluation metrics for the binary market simulation.
Summarises price paths, book spreads, traded volume and belief dispersion.
"""

import numpy as np
import pandas as pd
from typing import Any, Dict, List, Mapping, Sequence

from .market.models import SIDES, Market, Order, Trade, Trader
from .market.orderbook import create_order_book

TRADE_COLUMNS = ["trade_id", "market_id", "buyer_id", "seller_id", "side", "price", "amount", "notional", "timestamp"]


def trades_to_frame(trades: Sequence[Trade]) -> pd.DataFrame:
    """One row per trade, with notional value (price x amount) precomputed."""
    rows = [
        {
            "trade_id": t.trade_id,
            "market_id": t.market_id,
            "buyer_id": t.buyer_id,
            "seller_id": t.seller_id,
            "side": t.side,
            "price": t.price,
            "amount": t.amount,
            "notional": t.notional,
            "timestamp": t.timestamp,
        }
        for t in trades
    ]
    return pd.DataFrame(rows, columns=TRADE_COLUMNS)


def price_history_frame(price_history: Sequence[Mapping[str, Mapping[str, float]]]) -> pd.DataFrame:
    """
    Flatten ``SimulationResult.price_history`` into [timestep, market_id, yes_price, no_price].
    """
    rows = [
        {"timestep": timestep, "market_id": market_id, "yes_price": prices["YES"], "no_price": prices["NO"]}
        for timestep, snapshot in enumerate(price_history)
        for market_id, prices in snapshot.items()
    ]
    return pd.DataFrame(rows, columns=["timestep", "market_id", "yes_price", "no_price"])


def calculate_brier_score(predicted_probs: Sequence[float], actual_outcome: int) -> float:
    """
    Brier Score of a price path against a resolved outcome.
    Lower is better. Range: [0, 1]

    Formula: BS = (1/N) * sum((predicted_prob - actual_outcome)^2)
    """
    probs = np.asarray(predicted_probs, dtype=float)
    if probs.size == 0:
        return float("nan")
    return float(np.mean((probs - actual_outcome) ** 2))


class MarketMetricsEvaluator:
    """
    Collects per-tick market, book and belief observations and reports
    per-market statistics when the run finishes.
    """

    def __init__(self) -> None:
        self._prices: List[Dict[str, Any]] = []
        self._spreads: List[Dict[str, Any]] = []
        self._beliefs: List[Dict[str, Any]] = []
        self._trades: List[Trade] = []

    def on_tick(
        self,
        *,
        timestep: int,
        markets: Sequence[Market],
        traders: Sequence[Trader],
        trades: Sequence[Trade],
        orders: Sequence[Order],
    ) -> None:
        self._trades.extend(trades)
        for market in markets:
            self._prices.append(
                {"timestep": timestep, "market_id": market.market_id, "yes_price": market.yes_price}
            )
            book = create_order_book(orders, market.market_id)
            for side in SIDES:
                spread = book.spread(side)
                if spread is not None:
                    self._spreads.append({"timestep": timestep, "market_id": market.market_id, "side": side, "spread": spread})
            for trader in traders:
                belief = trader.belief_for(market.market_id)
                self._beliefs.append(
                    {
                        "timestep": timestep,
                        "market_id": market.market_id,
                        "trader_id": trader.trader_id,
                        "belief": belief,
                        "gap": abs(belief - market.yes_price),
                    }
                )

    def prices_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self._prices, columns=["timestep", "market_id", "yes_price"])

    def finalize(self) -> Dict[str, Dict[str, float]]:
        prices = self.prices_frame()
        spreads = pd.DataFrame(self._spreads, columns=["timestep", "market_id", "side", "spread"])
        beliefs = pd.DataFrame(self._beliefs, columns=["timestep", "market_id", "trader_id", "belief", "gap"])
        trades = trades_to_frame(self._trades)

        report: Dict[str, Dict[str, float]] = {}
        for market_id, path in prices.groupby("market_id"):
            yes_path = path.sort_values("timestep")["yes_price"].to_numpy()
            changes = np.diff(yes_path)
            market_trades = trades[trades["market_id"] == market_id]
            market_spreads = spreads[spreads["market_id"] == market_id]["spread"]
            market_beliefs = beliefs[beliefs["market_id"] == market_id]

            final_beliefs = market_beliefs[market_beliefs["timestep"] == market_beliefs["timestep"].max()]

            report[market_id] = {
                "initial_yes_price": float(yes_path[0]),
                "final_yes_price": float(yes_path[-1]),
                "yes_price_volatility": float(np.std(changes)) if changes.size else 0.0,
                "mean_spread": float(market_spreads.mean()) if not market_spreads.empty else float("nan"),
                "num_trades": int(len(market_trades)),
                "traded_volume": float(market_trades["amount"].sum()),
                "notional_volume": float(market_trades["notional"].sum()),
                "belief_dispersion": float(final_beliefs["belief"].std(ddof=0)) if not final_beliefs.empty else 0.0,
                "mean_belief_price_gap": float(market_beliefs["gap"].mean()) if not market_beliefs.empty else 0.0,
            }
        return report
