import random

import pytest

from binary_market_sim.evaluation_metrics import MarketMetricsEvaluator
from binary_market_sim.simulation import SimulationEngine, SimulationRuntimeConfig, SimulationState
from conftest import ScriptedRandom, fixed_clock, make_market, make_order, make_trader


def quiet_config(**overrides) -> SimulationRuntimeConfig:
    params = dict(max_timesteps=20, enable_logging=False, show_progress=False)
    params.update(overrides)
    return SimulationRuntimeConfig(**params)


def _static_state(orders) -> SimulationState:
    return SimulationState(
        traders=[
            make_trader("trader-1", beliefs={"market-1": 0.7}),
            make_trader("trader-2", beliefs={"market-1": 0.3}),
        ],
        markets=[make_market("market-1", yes_price=0.50, no_price=0.50)],
        orders=list(orders),
    )


def test_bootstrap_opens_the_books():
    engine = SimulationEngine(quiet_config(), rng=random.Random(1), clock=fixed_clock)

    state = engine.bootstrap()

    assert len(state.markets) == 3
    assert len(state.traders) == 10
    # Market makers always quote; intelligent traders may sit out.
    assert 10 <= len(state.orders) <= 25
    assert state.trades == []
    assert state.tick == 0


def test_step_without_crossing_orders_leaves_prices_alone():
    state = _static_state(
        [
            make_order(order_type="BUY", price=0.40, trader_id="trader-1"),
            make_order(order_type="SELL", price=0.60, trader_id="trader-2"),
        ]
    )
    engine = SimulationEngine(
        quiet_config(orders_per_tick_min=0, orders_per_tick_max=0),
        rng=ScriptedRandom(randoms=[0.99]),
        clock=fixed_clock,
    )

    tick = engine.step(state)

    assert tick.trades == []
    assert tick.new_orders == []
    assert tick.state.markets == state.markets
    assert tick.state.traders == state.traders
    assert tick.state.tick == 1


def test_step_with_a_cross_reprices_and_moves_beliefs():
    buy = make_order(order_type="BUY", price=0.60, amount=500, trader_id="trader-1")
    sell = make_order(order_type="SELL", price=0.50, amount=300, trader_id="trader-2")
    state = _static_state([buy, sell])
    engine = SimulationEngine(
        quiet_config(orders_per_tick_min=0, orders_per_tick_max=0),
        rng=ScriptedRandom(randoms=[0.99]),
        clock=fixed_clock,
    )

    tick = engine.step(state)

    assert len(tick.trades) == 1
    market = tick.state.markets[0]
    # Only the 200 left on the bid rests: 0.57 against NO 0.50, normalized.
    assert market.yes_price == pytest.approx(0.53)
    assert market.no_price == pytest.approx(0.47)
    assert market.total_volume == pytest.approx(300.0)
    assert tick.state.traders[0].belief_for("market-1") < 0.7
    assert tick.state.trades == tick.trades

    # The incoming state is untouched.
    assert sell.status == "PENDING" and sell.amount == 300
    assert state.markets[0].yes_price == 0.50
    assert state.tick == 0


def test_filled_orders_stay_in_pool_and_cancelled_are_dropped():
    cancelled = make_order(order_type="BUY", price=0.30, status="CANCELLED")
    buy = make_order(order_type="BUY", price=0.60, amount=100, trader_id="trader-1")
    sell = make_order(order_type="SELL", price=0.50, amount=100, trader_id="trader-2")
    engine = SimulationEngine(
        quiet_config(orders_per_tick_min=0, orders_per_tick_max=0),
        rng=ScriptedRandom(randoms=[0.99]),
        clock=fixed_clock,
    )

    tick = engine.step(_static_state([cancelled, buy, sell]))

    assert [o.status for o in tick.state.orders] == ["FILLED", "FILLED"]
    assert tick.state.pending_orders == []


def test_generate_orders_respects_tick_bounds():
    engine = SimulationEngine(
        quiet_config(orders_per_tick_min=3, orders_per_tick_max=3, intelligent_order_share=0.0),
        rng=random.Random(8),
        clock=fixed_clock,
    )
    state = engine.bootstrap()

    # Market makers never sit out.
    assert len(engine.generate_orders(state)) == 3


def test_long_run_keeps_invariants():
    engine = SimulationEngine(
        quiet_config(max_timesteps=60, noise_order_share=0.1),
        rng=random.Random(42),
        clock=fixed_clock,
    )

    result = engine.run_once()

    state = result.final_state
    assert state.tick == 60
    assert len(result.price_history) == 60
    for market in state.markets:
        assert 0.01 <= market.yes_price <= 0.99
        assert 0.01 <= market.no_price <= 0.99
        assert abs(market.yes_price + market.no_price - 1.0) <= 0.01 + 1e-9
    for order in state.orders:
        assert 0 <= order.amount <= order.original_amount
        assert (order.status == "FILLED") == (order.amount == 0)
    for trader in state.traders:
        assert all(0.05 <= b <= 0.95 for b in trader.beliefs.values())
    for trade in result.trade_log:
        assert trade.amount > 0
        assert 0.01 <= trade.price <= 0.99


def test_trader_fields_other_than_beliefs_are_stable():
    engine = SimulationEngine(quiet_config(max_timesteps=30), rng=random.Random(9), clock=fixed_clock)
    initial = engine.bootstrap()

    final = engine.run_once(state=initial).final_state

    for before, after in zip(initial.traders, final.traders):
        assert (before.trader_id, before.balance, before.risk_tolerance, before.max_order_size) == (
            after.trader_id,
            after.balance,
            after.risk_tolerance,
            after.max_order_size,
        )


def test_same_seed_replays_the_same_run():
    first = SimulationEngine(quiet_config(), clock=fixed_clock).run_once(seed=7)
    second = SimulationEngine(quiet_config(), clock=fixed_clock).run_once(seed=7)

    assert first.price_history == second.price_history
    assert [t.trade_id for t in first.trade_log] == [t.trade_id for t in second.trade_log]


def test_run_many_assigns_run_ids():
    engine = SimulationEngine(quiet_config(max_timesteps=5), clock=fixed_clock)

    results = engine.run_many(num_runs=2, seeds=[1, 2])

    assert [r.run_id for r in results] == [1, 2]


def test_run_many_rejects_mismatched_seeds():
    engine = SimulationEngine(quiet_config(max_timesteps=1))

    with pytest.raises(ValueError):
        engine.run_many(num_runs=3, seeds=[1, 2])


def test_run_writes_logs(tmp_path):
    engine = SimulationEngine(
        quiet_config(max_timesteps=5, enable_logging=True, log_dir=tmp_path, run_name="unit"),
        clock=fixed_clock,
    )

    result = engine.run_once(seed=3)

    assert result.logger is not None
    for key in ("market", "beliefs", "market_json", "beliefs_json"):
        assert result.log_files[key].exists()
    assert result.log_files["market"].name == "unit_run1_market.csv"
    assert result.summary_stats["num_timesteps"] == 5
    assert result.summary_stats["num_markets"] == 3
    assert result.summary_stats["num_traders"] == 10


def test_evaluators_receive_every_tick():
    engine = SimulationEngine(
        quiet_config(max_timesteps=10),
        clock=fixed_clock,
        evaluator_factories=[MarketMetricsEvaluator],
    )

    result = engine.run_once(seed=4)

    metrics = result.evaluator_metrics["MarketMetricsEvaluator"]
    assert set(metrics) == {"market-1", "market-2", "market-3"}
    assert sum(m["num_trades"] for m in metrics.values()) == len(result.trade_log)


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_timesteps": -1},
        {"orders_per_tick_min": 5, "orders_per_tick_max": 2},
        {"intelligent_order_share": 0.8, "noise_order_share": 0.3},
        {"activity_log_probability": 1.5},
        {"log_every": 0},
    ],
)
def test_runtime_config_validation(overrides):
    with pytest.raises(ValueError):
        SimulationRuntimeConfig(**overrides)
