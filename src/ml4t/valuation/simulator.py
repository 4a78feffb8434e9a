"""Synthetic market ticks for demos and tests.

Stands in for a real price feed: each call draws new security prices,
FX rates and futures holding marks from a numpy Generator. Seed the
simulator (``ValuationConfig.seed``) to make a run reproducible.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import numpy as np

from .config import ValuationConfig
from .futures import mark_holding
from .types import CashBalance, FuturesHolding, Position

logger = logging.getLogger(__name__)

BASE_CURRENCY = "USD"


class PriceSimulator:
    """Bounded tick generator.

    Every draw is anchored on a fixed reference (buy price, entry price or
    previous rate), so prices wander within a band instead of drifting.

    Example:
        simulator = PriceSimulator(ValuationConfig(seed=7))
        prices = simulator.next_prices(positions)
        cash = simulator.next_exchange_rates(cash)
    """

    def __init__(
        self,
        config: ValuationConfig | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.config = config or ValuationConfig()
        self.rng = rng or np.random.default_rng(self.config.seed)

    def next_prices(self, positions: Iterable[Position]) -> dict[str, float]:
        """Draw a price per symbol within +/- price_shock of its buy price.

        Prices are rounded to cents. When a symbol appears more than once the
        first position's draw wins.
        """
        shock = self.config.price_shock
        prices: dict[str, float] = {}
        for position in positions:
            if position.symbol in prices:
                continue
            factor = 1 + self.rng.uniform(-shock, shock)
            prices[position.symbol] = round(position.buy_price * factor, 2)
        logger.debug(f"Simulated prices for {len(prices)} symbols")
        return prices

    def next_exchange_rates(self, balances: Iterable[CashBalance]) -> list[CashBalance]:
        """Move each non-USD rate by up to +/- fx_fluctuation.

        USD stays at 1.0 since it is the reporting currency.
        """
        fluctuation = self.config.fx_fluctuation
        updated = []
        for balance in balances:
            if balance.currency != BASE_CURRENCY:
                balance = balance.with_rate(
                    balance.exchange_rate * (1 + self.rng.uniform(-fluctuation, fluctuation))
                )
            updated.append(balance)
        return updated

    def next_holding_prices(self, holdings: Iterable[FuturesHolding]) -> list[FuturesHolding]:
        """Re-mark futures holdings within +/- holding_variation of entry."""
        variation = self.config.holding_variation
        return [
            mark_holding(
                holding, holding.entry_price * (1 + self.rng.uniform(-variation, variation))
            )
            for holding in holdings
        ]

    def random_rate(self, base_rate: float) -> float:
        """Quote near ``base_rate`` (+/- rate_jitter), rounded to 5 decimals."""
        jitter = self.config.rate_jitter
        return round(base_rate * (1 + self.rng.uniform(-jitter, jitter)), 5)
