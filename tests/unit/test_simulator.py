"""Tests for the synthetic price feed."""

import numpy as np
import pytest

from ml4t.valuation import CashBalance, PriceSimulator, ValuationConfig
from ml4t.valuation.simulator import BASE_CURRENCY


@pytest.fixture
def simulator(config: ValuationConfig) -> PriceSimulator:
    return PriceSimulator(config)


class TestNextPrices:
    """Prices drawn within +/- 10% of buy price."""

    def test_one_price_per_symbol(self, simulator, positions):
        prices = simulator.next_prices(positions)
        assert set(prices) == {p.symbol for p in positions}

    def test_within_band_of_buy_price(self, simulator, positions):
        for _ in range(20):
            prices = simulator.next_prices(positions)
            for position in positions:
                price = prices[position.symbol]
                assert position.buy_price * 0.9 - 0.01 <= price <= position.buy_price * 1.1 + 0.01

    def test_rounded_to_cents(self, simulator, positions):
        for price in simulator.next_prices(positions).values():
            assert price == round(price, 2)

    def test_anchored_on_buy_price_not_last_mark(self, simulator, aapl):
        """Marked at 500, AAPL still draws around its 150 buy price."""
        from ml4t.valuation import revalue

        marked = revalue(aapl, 500.0)
        price = simulator.next_prices([marked])["AAPL"]
        assert 135.0 <= price <= 165.0

    def test_first_position_wins_for_duplicate_symbols(self, config, aapl):
        from dataclasses import replace

        duplicate = replace(aapl, id="1b", buy_price=1_000.0)
        prices = PriceSimulator(config).next_prices([aapl, duplicate])
        assert len(prices) == 1
        assert prices["AAPL"] < 200.0

    def test_zero_shock_returns_buy_price(self, positions):
        simulator = PriceSimulator(ValuationConfig(price_shock=0.0, seed=1))
        prices = simulator.next_prices(positions)
        assert all(prices[p.symbol] == p.buy_price for p in positions)

    def test_seed_reproducible(self, positions):
        first = PriceSimulator(ValuationConfig(seed=3)).next_prices(positions)
        second = PriceSimulator(ValuationConfig(seed=3)).next_prices(positions)
        assert first == second

    def test_empty(self, simulator):
        assert simulator.next_prices([]) == {}


class TestNextExchangeRates:
    """Non-USD rates wander by up to 1% per tick."""

    def test_usd_fixed(self, simulator, cash_balances):
        updated = simulator.next_exchange_rates(cash_balances)
        usd = next(b for b in updated if b.currency == BASE_CURRENCY)
        assert usd.exchange_rate == 1.0

    def test_other_rates_bounded(self, simulator, cash_balances):
        updated = simulator.next_exchange_rates(cash_balances)
        for before, after in zip(cash_balances, updated):
            assert after.currency == before.currency
            assert after.amount == before.amount
            assert abs(after.exchange_rate / before.exchange_rate - 1) <= 0.01

    def test_usd_equivalent_follows_rate(self, simulator):
        [eur] = simulator.next_exchange_rates([CashBalance("EUR", 1_000.0, 1.08)])
        assert eur.usd_equivalent == pytest.approx(1_000.0 * eur.exchange_rate)

    def test_inputs_unchanged(self, simulator, cash_balances):
        simulator.next_exchange_rates(cash_balances)
        assert cash_balances[1].exchange_rate == 1.08


class TestNextHoldingPrices:
    """Standalone holdings re-marked within 0.5% of entry."""

    def test_within_band_of_entry(self, simulator, holdings):
        for marked, original in zip(simulator.next_holding_prices(holdings), holdings):
            assert abs(marked.current_price / original.entry_price - 1) <= 0.005

    def test_pnl_follows_tick_model(self, simulator, holdings):
        from ml4t.valuation import futures_pnl

        for marked in simulator.next_holding_prices(holdings):
            assert marked.unrealized_pnl == pytest.approx(futures_pnl(marked, marked.current_price))
            assert marked.mark_to_market == pytest.approx(marked.quantity * marked.current_price)


class TestRandomRate:
    def test_within_jitter(self, simulator):
        for _ in range(50):
            rate = simulator.random_rate(1.08)
            assert 1.08 * 0.98 - 1e-5 <= rate <= 1.08 * 1.02 + 1e-5

    def test_five_decimals(self, simulator):
        rate = simulator.random_rate(0.00675)
        assert rate == round(rate, 5)


def test_injected_generator_is_used(positions):
    rng = np.random.default_rng(11)
    simulator = PriceSimulator(rng=rng)
    assert simulator.rng is rng
    simulator.next_prices(positions)
