"""Shared fixtures for futures tests.

Standard contract specifications modeled on CME Group products, expressed
with margin as a fraction of notional.
"""

from datetime import date

import pytest

from ml4t.valuation import FuturesContract, FuturesHolding, PositionSide


# === Standard Contract Specifications ===


@pytest.fixture
def es_contract() -> FuturesContract:
    """E-mini S&P 500 futures.

    - Contract size: $50 per index point
    - Tick: 0.25 points = $12.50
    - Margin: 5% of notional
    """
    return FuturesContract(
        id="ES1",
        symbol="ES",
        name="E-mini S&P 500 Futures",
        contract_size=50,
        tick_size=0.25,
        tick_value=12.50,
        margin_requirement=0.05,
        expiration_date=date(2024, 3, 15),
        current_price=4250.0,
        last_price=4248.5,
    )


@pytest.fixture
def cl_contract() -> FuturesContract:
    """Crude Oil WTI futures.

    - Contract size: 1,000 barrels
    - Tick: $0.01 = $10
    - Margin: 10% of notional
    """
    return FuturesContract(
        id="CL1",
        symbol="CL",
        name="Crude Oil Futures",
        contract_size=1000,
        tick_size=0.01,
        tick_value=10.0,
        margin_requirement=0.10,
        current_price=75.50,
        last_price=75.25,
    )


@pytest.fixture
def gc_contract() -> FuturesContract:
    """Gold futures.

    - Contract size: 100 troy ounces
    - Tick: $0.10 = $10
    - Margin: 8% of notional
    """
    return FuturesContract(
        id="GC1",
        symbol="GC",
        name="Gold Futures",
        contract_size=100,
        tick_size=0.10,
        tick_value=10.0,
        margin_requirement=0.08,
        current_price=1920.0,
        last_price=1922.5,
    )


@pytest.fixture
def nq_contract() -> FuturesContract:
    """E-mini NASDAQ-100 futures.

    - Contract size: $20 per index point
    - Tick: 0.25 points = $5
    - Margin: 6% of notional
    """
    return FuturesContract(
        id="NQ1",
        symbol="NQ",
        name="E-mini NASDAQ-100 Futures",
        contract_size=20,
        tick_size=0.25,
        tick_value=5.0,
        margin_requirement=0.06,
        current_price=16850.0,
        last_price=16845.0,
    )


# === Standalone holdings (tick model) ===


def _holding(contract: FuturesContract, side: PositionSide, quantity: float, entry: float):
    return FuturesHolding(
        id=f"{contract.symbol}-{side.value}",
        contract_id=contract.id,
        symbol=contract.symbol,
        name=contract.name,
        side=side,
        quantity=quantity,
        entry_price=entry,
        current_price=entry,
        margin_used=contract.contract_size * entry * quantity * contract.margin_requirement,
        margin_requirement=contract.margin_requirement,
        leverage=1 / contract.margin_requirement,
        tick_size=contract.tick_size,
        tick_value=contract.tick_value,
        mark_to_market=quantity * entry,
    )


@pytest.fixture
def cl_long(cl_contract: FuturesContract) -> FuturesHolding:
    """3 CL long at 75.50."""
    return _holding(cl_contract, PositionSide.LONG, 3, 75.50)


@pytest.fixture
def cl_short(cl_contract: FuturesContract) -> FuturesHolding:
    """3 CL short at 75.50."""
    return _holding(cl_contract, PositionSide.SHORT, 3, 75.50)


@pytest.fixture
def es_holding(es_contract: FuturesContract) -> FuturesHolding:
    """2 ES long at 4200."""
    return _holding(es_contract, PositionSide.LONG, 2, 4200.0)
