"""Pytest configuration and fixtures for ml4t.valuation tests."""

import tempfile
from collections.abc import Generator
from datetime import date, datetime, timezone
from pathlib import Path

import numpy as np
import pytest

from ml4t.valuation import (
    CashBalance,
    EquityPosition,
    FuturesContract,
    FuturesPosition,
    PositionSide,
    ValuationConfig,
)
from ml4t.valuation.demo import (
    DEMO_CLOSING_PRICES,
    demo_cash_balances,
    demo_contracts,
    demo_holdings,
    demo_positions,
)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config() -> ValuationConfig:
    """Default conventions with a fixed seed."""
    return ValuationConfig(seed=42)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def fixed_time() -> datetime:
    return datetime(2025, 1, 20, 19, 41, 50, tzinfo=timezone.utc)


# === Demo book ===


@pytest.fixture
def positions():
    return demo_positions()


@pytest.fixture
def cash_balances():
    return demo_cash_balances()


@pytest.fixture
def contracts() -> dict[str, FuturesContract]:
    return {contract.symbol: contract for contract in demo_contracts()}


@pytest.fixture
def holdings():
    return demo_holdings()


@pytest.fixture
def closing_prices() -> dict[str, float]:
    return dict(DEMO_CLOSING_PRICES)


# === Single positions ===


@pytest.fixture
def aapl() -> EquityPosition:
    """100 AAPL bought at $150 (cost $15,000)."""
    return EquityPosition(
        id="1",
        name="Apple Inc.",
        symbol="AAPL",
        quantity=100,
        buy_price=150.0,
        buy_date=date(2023, 6, 15),
        holding_period=180,
    )


@pytest.fixture
def es_long() -> FuturesPosition:
    """2 ES long at 4200, $50 per point, 5% margin."""
    return FuturesPosition(
        id="6",
        name="E-mini S&P 500 Futures",
        symbol="ES",
        quantity=2,
        buy_price=4200.0,
        holding_period=30,
        contract_size=50,
        margin_requirement=0.05,
        margin_used=21_000.0,
        side=PositionSide.LONG,
        tick_size=0.25,
        tick_value=12.50,
    )


@pytest.fixture
def es_short(es_long: FuturesPosition) -> FuturesPosition:
    """Same ES position, short."""
    from dataclasses import replace

    return replace(es_long, id="6s", side=PositionSide.SHORT)


@pytest.fixture
def usd() -> CashBalance:
    return CashBalance("USD", 25_000.0, 1.0)
