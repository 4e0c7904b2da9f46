import random

import pytest

from binary_market_sim.agents.intelligent import (
    find_opportunities,
    generate_intelligent_order,
    order_size,
    participation_probability,
)
from binary_market_sim.agents.market_maker import generate_market_maker_order, maker_size, market_makers
from binary_market_sim.agents.noise import generate_random_order
from conftest import FIXED_NOW, ScriptedRandom, fixed_clock, make_market, make_trader


class TestIntelligentTrader:
    def test_optimist_buys_yes_between_price_and_belief(self):
        market = make_market(yes_price=0.50, no_price=0.50)
        trader = make_trader(
            beliefs={"market-1": 0.90},
            risk_tolerance=1.0,
            confidence_level=0.8,
            trading_style="aggressive",
            max_order_size=2000,
        )

        order = generate_intelligent_order([trader], [market], rng=ScriptedRandom(), clock=fixed_clock)

        assert order is not None
        assert order.side == "YES"
        assert order.order_type == "BUY"
        assert 0.50 < order.price < 0.90
        assert order.price == pytest.approx(0.72)
        # 2000 * 0.8 * 0.4 * 2 * 1.2
        assert abs(order.amount - 1536) <= 1
        assert order.status == "PENDING"
        assert order.original_amount == order.amount
        assert order.timestamp == FIXED_NOW
        assert order.order_id.startswith("order-")

    def test_pessimist_buys_no(self):
        market = make_market(yes_price=0.50, no_price=0.50)
        trader = make_trader(beliefs={"market-1": 0.10}, risk_tolerance=1.0)

        order = generate_intelligent_order([trader], [market], rng=ScriptedRandom(), clock=fixed_clock)

        assert order.side == "NO"
        assert order.order_type == "BUY"
        assert 0.50 < order.price < 0.90

    def test_overpriced_side_is_sold_just_below_market(self):
        market = make_market(yes_price=0.60, no_price=0.60)
        trader = make_trader(beliefs={"market-1": 0.50}, risk_tolerance=1.0, confidence_level=0.5)

        order = generate_intelligent_order([trader], [market], rng=ScriptedRandom(), clock=fixed_clock)

        assert order.side == "YES"
        assert order.order_type == "SELL"
        assert 0.55 <= order.price < 0.60

    def test_no_edge_means_no_order(self):
        market = make_market(yes_price=0.50, no_price=0.50)
        trader = make_trader(beliefs={"market-1": 0.51}, risk_tolerance=1.0)

        assert find_opportunities(trader, [market]) == []
        assert generate_intelligent_order([trader], [market], rng=ScriptedRandom()) is None

    def test_trader_can_sit_out(self):
        market = make_market(yes_price=0.50, no_price=0.50)
        trader = make_trader(beliefs={"market-1": 0.90}, risk_tolerance=0.0)

        assert participation_probability(trader) == pytest.approx(0.2)
        rng = ScriptedRandom(randoms=[0.5])
        assert generate_intelligent_order([trader], [market], rng=rng) is None

    def test_largest_edge_wins(self):
        markets = [make_market("market-1", yes_price=0.50), make_market("market-2", yes_price=0.50)]
        trader = make_trader(beliefs={"market-1": 0.60, "market-2": 0.90}, risk_tolerance=1.0)

        order = generate_intelligent_order([trader], markets, rng=ScriptedRandom(), clock=fixed_clock)

        assert order.market_id == "market-2"

    def test_size_floor_and_balance_cap(self):
        small = make_trader(max_order_size=10, balance=10_000.0)
        poor = make_trader(max_order_size=10_000, balance=150.0)

        assert order_size(small, 0.1) == 100
        assert order_size(poor, 0.4) == 75

    def test_empty_inputs(self):
        assert generate_intelligent_order([], [make_market()]) is None
        assert generate_intelligent_order([make_trader()], []) is None

    def test_seeded_orders_stay_in_bounds(self):
        markets = [make_market(f"market-{i}", yes_price=p) for i, p in enumerate((0.2, 0.5, 0.8), start=1)]
        traders = [
            make_trader(f"trader-{i}", beliefs={m.market_id: b for m in markets}, risk_tolerance=0.7)
            for i, b in enumerate((0.1, 0.3, 0.6, 0.9), start=1)
        ]
        rng = random.Random(11)

        for _ in range(200):
            order = generate_intelligent_order(traders, markets, rng=rng, clock=fixed_clock)
            if order is None:
                continue
            assert 0.01 <= order.price <= 0.99
            assert order.price == round(order.price, 2)
            assert order.amount >= 1


class TestMarketMaker:
    @pytest.fixture
    def traders(self):
        balances = [1_000.0, 5_000.0, 3_000.0, 4_000.0, 2_000.0]
        return [make_trader(f"trader-{i}", balance=b) for i, b in enumerate(balances, start=1)]

    def test_makers_are_the_three_richest(self, traders):
        assert [t.trader_id for t in market_makers(traders)] == ["trader-2", "trader-4", "trader-3"]

    def test_bid_below_market(self, traders):
        rng = ScriptedRandom(choices=[1, 0, 0], uniforms=[0.03], randoms=[0.2])

        order = generate_market_maker_order(traders, [make_market(yes_price=0.50)], rng=rng, clock=fixed_clock)

        assert order.trader_id == "trader-4"
        assert order.side == "YES"
        assert order.order_type == "BUY"
        assert order.price == pytest.approx(0.47)
        assert order.amount == 280

    def test_ask_above_market_on_no(self, traders):
        rng = ScriptedRandom(choices=[0, 0, 1], uniforms=[0.05], randoms=[0.7])

        order = generate_market_maker_order(
            traders, [make_market(yes_price=0.30, no_price=0.70)], rng=rng, clock=fixed_clock
        )

        assert order.side == "NO"
        assert order.order_type == "SELL"
        assert order.price == pytest.approx(0.75)

    def test_quote_is_clamped(self, traders):
        rng = ScriptedRandom(uniforms=[0.05], randoms=[0.9])

        order = generate_market_maker_order(
            traders, [make_market(yes_price=0.97, no_price=0.03)], rng=rng, clock=fixed_clock
        )

        assert order.price == 0.99

    @pytest.mark.parametrize("balance, size", [(10_000.0, 400), (1_000.0, 100), (5_000.0, 300)])
    def test_maker_size(self, balance, size):
        assert maker_size(balance) == size

    def test_seeded_quotes_sit_a_few_cents_off(self, traders):
        market = make_market(yes_price=0.50, no_price=0.50)
        makers = {t.trader_id for t in market_makers(traders)}
        rng = random.Random(5)

        for _ in range(200):
            order = generate_market_maker_order(traders, [market], rng=rng, clock=fixed_clock)
            assert order.trader_id in makers
            assert 0.02 - 0.005 - 1e-9 <= abs(order.price - 0.50) <= 0.05 + 0.005 + 1e-9

    def test_empty_inputs(self, traders):
        assert generate_market_maker_order([], [make_market()]) is None
        assert generate_market_maker_order(traders, []) is None


class TestNoiseTrader:
    def test_scripted_order(self):
        rng = ScriptedRandom(randoms=[0.9, 0.1], uniforms=[0.05], randints=[500])

        order = generate_random_order([make_trader()], [make_market(yes_price=0.50)], rng=rng, clock=fixed_clock)

        assert order.side == "YES"
        assert order.order_type == "SELL"
        assert order.price == pytest.approx(0.55)
        assert order.amount == 500

    def test_seeded_orders_stay_near_price(self):
        market = make_market(yes_price=0.40, no_price=0.60)
        rng = random.Random(21)

        for _ in range(200):
            order = generate_random_order([make_trader()], [market], rng=rng, clock=fixed_clock)
            assert 100 <= order.amount <= 1099
            assert abs(order.price - market.price_for(order.side)) <= 0.1 + 0.005 + 1e-9

    def test_empty_inputs(self):
        assert generate_random_order([], [make_market()]) is None
