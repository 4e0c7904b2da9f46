"""High-level simulation orchestrator.

One tick: generate a handful of orders, append them to the pool, cross the
pool, reprice every market from what is left resting and let beliefs drift
toward the new prices. Ticks must not overlap; the engine is not reentrant.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, MutableMapping, Optional, Sequence

from tqdm import tqdm

from ..agents.beliefs import evolve_beliefs
from ..agents.intelligent import generate_intelligent_order
from ..agents.market_maker import generate_market_maker_order
from ..agents.noise import generate_random_order
from ..agents.population import generate_markets, generate_traders
from ..market.matching import match_orders
from ..market.models import Market, Order, Trade, Trader
from ..market.pricing import update_market_prices
from ..utils.rng import Clock, RandomSource, utc_now
from .interfaces import Evaluator, OrderStrategy
from .logging import SimulationLogger, create_logger, log_market_activity

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SimulationRuntimeConfig:
    """Controls runtime behavior for the simulator."""

    max_timesteps: int = 100
    orders_per_tick_min: int = 2
    orders_per_tick_max: int = 4
    intelligent_order_share: float = 0.7
    noise_order_share: float = 0.0
    initial_intelligent_orders: int = 15
    initial_market_maker_orders: int = 10
    prevent_self_trade: bool = False
    activity_log_probability: float = 0.1
    log_dir: Path = Path("simulation_logs")
    run_name: str = "default"
    log_every: int = 1
    enable_logging: bool = True
    save_logs_as_csv: bool = True
    save_logs_as_json: bool = True
    show_progress: bool = True

    def __post_init__(self) -> None:
        if self.max_timesteps < 0:
            raise ValueError("max_timesteps must be non-negative")
        if not 0 <= self.orders_per_tick_min <= self.orders_per_tick_max:
            raise ValueError("orders_per_tick_min must be between 0 and orders_per_tick_max")
        for name in ("intelligent_order_share", "noise_order_share", "activity_log_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.intelligent_order_share + self.noise_order_share > 1.0:
            raise ValueError("intelligent_order_share + noise_order_share must not exceed 1")
        if self.initial_intelligent_orders < 0 or self.initial_market_maker_orders < 0:
            raise ValueError("initial order counts must be non-negative")
        if self.log_every < 1:
            raise ValueError("log_every must be at least 1")


@dataclass
class SimulationState:
    """Everything the driver feeds back into the next tick."""

    traders: List[Trader]
    markets: List[Market]
    orders: List[Order] = field(default_factory=list)
    trades: List[Trade] = field(default_factory=list)
    tick: int = 0

    @property
    def pending_orders(self) -> List[Order]:
        return [o for o in self.orders if o.is_pending]

    def market(self, market_id: str) -> Optional[Market]:
        for market in self.markets:
            if market.market_id == market_id:
                return market
        return None


@dataclass
class TickResult:
    state: SimulationState
    new_orders: List[Order]
    trades: List[Trade]


@dataclass
class SimulationResult:
    """Structured output for downstream evaluation/reporting."""

    run_id: int
    final_state: Optional[SimulationState] = None
    price_history: List[Mapping[str, Mapping[str, float]]] = field(default_factory=list)
    trade_log: List[Trade] = field(default_factory=list)
    evaluator_metrics: Mapping[str, Mapping[str, object]] = field(default_factory=dict)
    logger: Optional[SimulationLogger] = None
    log_files: Dict[str, Path] = field(default_factory=dict)
    summary_stats: Mapping[str, object] = field(default_factory=dict)


class SimulationEngine:
    """Coordinates the trader population, order flow, matching and repricing."""

    def __init__(
        self,
        runtime_config: Optional[SimulationRuntimeConfig] = None,
        *,
        rng: Optional[RandomSource] = None,
        clock: Clock = utc_now,
        evaluator_factories: Sequence[Callable[[], Evaluator]] = (),
        trader_profiles: Optional[Sequence[dict]] = None,
    ) -> None:
        self._config = runtime_config or SimulationRuntimeConfig()
        self._rng: RandomSource = rng or random.Random()
        self._clock = clock
        self._evaluator_factories = list(evaluator_factories)
        self._trader_profiles = list(trader_profiles) if trader_profiles else None

    @property
    def config(self) -> SimulationRuntimeConfig:
        return self._config

    def bootstrap(self) -> SimulationState:
        """Fresh markets and traders plus the seed orders that open the books."""
        markets = generate_markets(rng=self._rng, clock=self._clock)
        traders = generate_traders(markets, rng=self._rng, profiles=self._trader_profiles)

        orders: List[Order] = []
        for _ in range(self._config.initial_intelligent_orders):
            order = generate_intelligent_order(traders, markets, rng=self._rng, clock=self._clock)
            if order is not None:
                orders.append(order)
        for _ in range(self._config.initial_market_maker_orders):
            order = generate_market_maker_order(traders, markets, rng=self._rng, clock=self._clock)
            if order is not None:
                orders.append(order)

        logger.info(
            "Bootstrapped %d markets, %d traders and %d seed orders",
            len(markets),
            len(traders),
            len(orders),
        )
        return SimulationState(traders=traders, markets=markets, orders=orders)

    def _pick_strategy(self) -> OrderStrategy:
        draw = self._rng.random()
        if draw < self._config.intelligent_order_share:
            return generate_intelligent_order
        if draw < self._config.intelligent_order_share + self._config.noise_order_share:
            return generate_random_order
        return generate_market_maker_order

    def generate_orders(self, state: SimulationState) -> List[Order]:
        count = self._rng.randint(self._config.orders_per_tick_min, self._config.orders_per_tick_max)
        orders: List[Order] = []
        for _ in range(count):
            strategy = self._pick_strategy()
            order = strategy(state.traders, state.markets, rng=self._rng, clock=self._clock)
            if order is not None:
                orders.append(order)
        return orders

    def step(self, state: SimulationState) -> TickResult:
        """Advance one tick. ``state`` is not modified; a new state is returned."""
        new_orders = self.generate_orders(state)
        result = match_orders(
            [*state.orders, *new_orders],
            rng=self._rng,
            clock=self._clock,
            prevent_self_trade=self._config.prevent_self_trade,
        )

        markets = list(state.markets)
        traders = list(state.traders)
        if result.trades:
            markets = [update_market_prices(m, result.trades, result.updated_orders) for m in markets]
            traders = evolve_beliefs(traders, markets, result.trades, rng=self._rng)
            logger.info("Tick %d: %d new trades executed", state.tick, len(result.trades))

        # Cancelled orders leave the pool; filled ones stay for history.
        pool = [o for o in result.updated_orders if o.status != "CANCELLED"]
        next_state = SimulationState(
            traders=traders,
            markets=markets,
            orders=pool,
            trades=[*state.trades, *result.trades],
            tick=state.tick + 1,
        )

        if self._rng.random() < self._config.activity_log_probability:
            log_market_activity(next_state.orders, next_state.trades, next_state.traders)

        return TickResult(state=next_state, new_orders=new_orders, trades=result.trades)

    def run_many(self, *, num_runs: int, seeds: Iterable[int] | None = None) -> List[SimulationResult]:
        """Convenience helper for multi-run experiments."""

        seeds = list(seeds) if seeds is not None else [None] * num_runs
        if len(seeds) != num_runs:
            raise ValueError("Length of seeds iterable must match num_runs.")

        results: List[SimulationResult] = []
        for run_id, seed in enumerate(seeds, start=1):
            results.append(self.run_once(run_id=run_id, seed=seed))
        return results

    def run_once(
        self,
        *,
        run_id: int = 1,
        seed: int | None = None,
        state: Optional[SimulationState] = None,
    ) -> SimulationResult:
        """Execute a single simulation loop, bootstrapping unless ``state`` is given."""

        if seed is not None:
            self._rng = random.Random(seed)
        if state is None:
            state = self.bootstrap()

        evaluators = [factory() for factory in self._evaluator_factories]
        result = SimulationResult(run_id=run_id)

        sim_logger: Optional[SimulationLogger] = None
        if self._config.enable_logging:
            sim_logger = create_logger(
                run_id=f"{self._config.run_name}_run{run_id}",
                log_dir=self._config.log_dir,
            )
            result.logger = sim_logger

        with tqdm(
            total=self._config.max_timesteps,
            desc=f"Run {run_id}",
            unit="tick",
            disable=not self._config.show_progress,
        ) as pbar:
            for _ in range(self._config.max_timesteps):
                timestep = state.tick
                tick = self.step(state)
                state = tick.state

                result.price_history.append(
                    {m.market_id: {"YES": m.yes_price, "NO": m.no_price} for m in state.markets}
                )
                result.trade_log.extend(tick.trades)

                if sim_logger and timestep % self._config.log_every == 0:
                    sim_logger.log_market_state(timestep, state.markets, state.orders, tick.trades)
                    sim_logger.log_beliefs(timestep, state.traders, state.markets)
                if sim_logger:
                    for trade in tick.trades:
                        sim_logger.log_trade(timestep, trade)

                for evaluator in evaluators:
                    evaluator.on_tick(
                        timestep=timestep,
                        markets=state.markets,
                        traders=state.traders,
                        trades=tick.trades,
                        orders=state.orders,
                    )

                pbar.set_postfix(orders=len(tick.new_orders), trades=len(tick.trades))
                pbar.update(1)

        result.final_state = state

        metrics: MutableMapping[str, Mapping[str, object]] = {}
        for evaluator in evaluators:
            metrics[evaluator.__class__.__name__] = evaluator.finalize()
        result.evaluator_metrics = metrics

        if sim_logger:
            if self._config.save_logs_as_csv:
                result.log_files.update(sim_logger.save_to_csv())
            if self._config.save_logs_as_json:
                result.log_files.update(
                    {f"{name}_json": path for name, path in sim_logger.save_to_json().items()}
                )
            result.summary_stats = sim_logger.get_summary_stats()

        logger.info(
            "Run %d finished after %d ticks with %d trades",
            run_id,
            state.tick,
            len(result.trade_log),
        )
        return result
