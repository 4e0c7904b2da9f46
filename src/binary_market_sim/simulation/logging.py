"""Data logging and tracking for simulation runs.

This module provides:
- The package diagnostic logger (stdlib ``logging``)
- Structured per-tick records of market state, trader beliefs and trades,
  exportable as CSV or JSON
- A periodic market activity summary for debugging
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..agents.population import trader_name
from ..market.models import SIDES, Market, Order, Trade, Trader
from ..market.orderbook import create_order_book

PACKAGE_LOGGER = "binary_market_sim"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(level: int | str = logging.INFO) -> logging.Logger:
    """Return the package logger, attaching a stream handler on first use."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if not logger.hasHandlers():
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


def log_market_activity(
    orders: Sequence[Order],
    trades: Sequence[Trade],
    traders: Sequence[Trader],
    *,
    recent: int = 5,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Debug snapshot of the order pool and the most recent fills."""
    logger = logger or logging.getLogger(PACKAGE_LOGGER)
    if not logger.isEnabledFor(logging.DEBUG):
        return

    pending = sum(1 for o in orders if o.status == "PENDING")
    filled = sum(1 for o in orders if o.status == "FILLED")
    logger.debug(
        "Market activity: %d orders (%d pending, %d filled), %d trades",
        len(orders),
        pending,
        filled,
        len(trades),
    )
    for trade in trades[-recent:]:
        logger.debug(
            "  %s bought %d %s from %s @ %.2f on %s",
            trader_name(traders, trade.buyer_id),
            trade.amount,
            trade.side,
            trader_name(traders, trade.seller_id),
            trade.price,
            trade.market_id,
        )


@dataclass
class SimulationLogger:
    """Logs simulation data to structured formats.

    Tracks:
    - market_records: Prices, book top and volume per market per tick
    - belief_records: Trader beliefs per market per tick
    - trade_records: Individual trades
    """

    log_dir: Path = Path("simulation_logs")
    run_id: str = "run_001"
    market_records: List[Dict[str, Any]] = field(default_factory=list)
    belief_records: List[Dict[str, Any]] = field(default_factory=list)
    trade_records: List[Dict[str, Any]] = field(default_factory=list)

    def __post_init__(self):
        self.log_dir = Path(self.log_dir)

    def log_market_state(
        self,
        timestep: int,
        markets: Sequence[Market],
        orders: Sequence[Order],
        trades: Sequence[Trade] = (),
    ) -> None:
        """Log each market's prices and top of book for a timestep.

        Args:
            timestep: Current timestep
            markets: Markets after repricing
            orders: Order pool after matching
            trades: Trades executed this timestep
        """
        for market in markets:
            book = create_order_book(orders, market.market_id)
            record: Dict[str, Any] = {
                "timestep": timestep,
                "market_id": market.market_id,
                "yes_price": market.yes_price,
                "no_price": market.no_price,
                "total_volume": market.total_volume,
                "tick_volume": sum(t.amount for t in trades if t.market_id == market.market_id),
                "num_trades": sum(1 for t in trades if t.market_id == market.market_id),
            }
            for side in SIDES:
                prefix = side.lower()
                record[f"{prefix}_best_bid"] = book.best_bid(side)
                record[f"{prefix}_best_ask"] = book.best_ask(side)
                record[f"{prefix}_spread"] = book.spread(side)
                record[f"{prefix}_bid_depth"] = sum(o.amount for o in book.bids(side))
                record[f"{prefix}_ask_depth"] = sum(o.amount for o in book.asks(side))
            self.market_records.append(record)

    def log_beliefs(
        self,
        timestep: int,
        traders: Sequence[Trader],
        markets: Sequence[Market],
    ) -> None:
        """Log every trader's belief against each market's YES price."""
        for trader in traders:
            for market in markets:
                belief = trader.belief_for(market.market_id)
                self.belief_records.append(
                    {
                        "timestep": timestep,
                        "trader_id": trader.trader_id,
                        "market_id": market.market_id,
                        "belief": belief,
                        "market_price": market.yes_price,
                        "belief_price_gap": abs(belief - market.yes_price),
                    }
                )

    def log_trade(self, timestep: int, trade: Trade) -> None:
        self.trade_records.append(
            {
                "timestep": timestep,
                "trade_id": trade.trade_id,
                "market_id": trade.market_id,
                "buyer_id": trade.buyer_id,
                "seller_id": trade.seller_id,
                "side": trade.side,
                "price": trade.price,
                "amount": trade.amount,
                "notional": trade.notional,
                "buy_order_id": trade.buy_order_id,
                "sell_order_id": trade.sell_order_id,
                "timestamp": trade.timestamp.isoformat(),
            }
        )

    def _datasets(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "market": self.market_records,
            "beliefs": self.belief_records,
            "trades": self.trade_records,
        }

    def save_to_csv(self) -> Dict[str, Path]:
        """Save all logged data to CSV files.

        Returns:
            Dictionary mapping data type to file path
        """
        self.log_dir.mkdir(parents=True, exist_ok=True)
        saved_files = {}
        for name, records in self._datasets().items():
            if records:
                path = self.log_dir / f"{self.run_id}_{name}.csv"
                self._save_csv(path, records)
                saved_files[name] = path
        return saved_files

    def save_to_json(self) -> Dict[str, Path]:
        """Save all logged data to JSON files.

        Returns:
            Dictionary mapping data type to file path
        """
        self.log_dir.mkdir(parents=True, exist_ok=True)
        saved_files = {}
        for name, records in self._datasets().items():
            if records:
                path = self.log_dir / f"{self.run_id}_{name}.json"
                self._save_json(path, records)
                saved_files[name] = path
        return saved_files

    def get_summary_stats(self) -> Dict[str, Any]:
        """Get summary statistics for the simulation run."""
        stats: Dict[str, Any] = {
            "run_id": self.run_id,
            "num_timesteps": len({r["timestep"] for r in self.market_records}),
            "num_markets": len({r["market_id"] for r in self.market_records}),
            "num_traders": len({r["trader_id"] for r in self.belief_records}),
            "num_trades": len(self.trade_records),
            "traded_volume": sum(r["amount"] for r in self.trade_records),
            "notional_volume": sum(r["notional"] for r in self.trade_records),
        }

        by_market: Dict[str, List[float]] = {}
        for record in self.market_records:
            by_market.setdefault(record["market_id"], []).append(record["yes_price"])
        stats["markets"] = {
            market_id: {
                "initial_yes_price": prices[0],
                "final_yes_price": prices[-1],
                "min_yes_price": min(prices),
                "max_yes_price": max(prices),
                "price_change": prices[-1] - prices[0],
            }
            for market_id, prices in by_market.items()
        }

        if self.belief_records:
            gaps = [r["belief_price_gap"] for r in self.belief_records]
            stats["mean_belief_price_gap"] = sum(gaps) / len(gaps)
            stats["max_belief_price_gap"] = max(gaps)

        return stats

    @staticmethod
    def _save_csv(path: Path, records: List[Dict[str, Any]]) -> None:
        if not records:
            return

        fieldnames = set()
        for record in records:
            fieldnames.update(record.keys())

        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=sorted(fieldnames))
            writer.writeheader()
            writer.writerows(records)

    @staticmethod
    def _save_json(path: Path, records: List[Dict[str, Any]]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, default=str)


def create_logger(run_id: str, log_dir: Optional[Path] = None) -> SimulationLogger:
    """Create a simulation logger.

    Args:
        run_id: Unique identifier for this run
        log_dir: Directory for log files (defaults to ./simulation_logs)

    Returns:
        Configured SimulationLogger instance
    """
    if log_dir is None:
        log_dir = Path("simulation_logs")

    return SimulationLogger(log_dir=log_dir, run_id=run_id)
