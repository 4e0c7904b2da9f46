"""Run the binary market simulation from config.env / environment variables.

Run with:

    PYTHONPATH=src python examples/run_simulation.py --ticks 200 --seed 7

Command line flags override the corresponding environment settings.
"""

from __future__ import annotations

import argparse
import os

from binary_market_sim.evaluation_metrics import MarketMetricsEvaluator, price_history_frame
from binary_market_sim.utils.config import SimulationConfig, create_engine_from_config


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a binary YES/NO prediction market simulation")
    parser.add_argument("--config", type=str, default=None, help="Path to a config.env file")
    parser.add_argument("--ticks", type=int, default=None, help="Number of ticks (default: MAX_TICKS or 100)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: SIM_SEED)")
    parser.add_argument("--runs", type=int, default=1, help="Number of independent runs (default: 1)")
    parser.add_argument("--run-name", type=str, default="binary", help="Prefix for log files")
    parser.add_argument("--prevent-self-trade", action="store_true", help="Never cross a trader with itself")

    args = parser.parse_args()

    if args.ticks is not None:
        os.environ["MAX_TICKS"] = str(args.ticks)
    if args.seed is not None:
        os.environ["SIM_SEED"] = str(args.seed)
    if args.prevent_self_trade:
        os.environ["PREVENT_SELF_TRADE"] = "true"

    config = SimulationConfig(args.config)
    engine = create_engine_from_config(
        config,
        run_name=args.run_name,
        evaluator_factories=[MarketMetricsEvaluator],
    )

    print("\nRUNNING BINARY MARKET SIMULATION")
    print(f"Ticks: {engine.config.max_timesteps}, Runs: {args.runs}, Seed: {config.seed}\n")

    seeds = None
    if config.seed is not None:
        seeds = [config.seed + i for i in range(args.runs)]
    results = engine.run_many(num_runs=args.runs, seeds=seeds)

    for result in results:
        print(f"\nRun {result.run_id}: {result.final_state.tick} ticks, {len(result.trade_log)} trades")

        prices = price_history_frame(result.price_history)
        if not prices.empty:
            print("\nFinal Market State:")
            for market in result.final_state.markets:
                path = prices[prices["market_id"] == market.market_id]["yes_price"]
                print(f"   {market.market_id}: {market.question}")
                print(
                    f"      YES {market.yes_price:.2f}  NO {market.no_price:.2f}  "
                    f"(YES moved {path.iloc[-1] - path.iloc[0]:+.2f}, volume {market.total_volume:,.0f})"
                )

        for name, metrics in result.evaluator_metrics.items():
            print(f"\n{name}:")
            for market_id, values in metrics.items():
                print(f"   {market_id}:")
                for metric, value in values.items():
                    print(f"      {metric}: {value:.4f}")

        if result.log_files:
            print("\nSaved log files:")
            for log_type, path in result.log_files.items():
                print(f"   {log_type}: {path}")

    print("\nSIMULATION COMPLETE")


if __name__ == "__main__":
    main()
