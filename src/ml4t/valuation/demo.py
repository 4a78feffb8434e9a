"""Demo book: a small multi-asset portfolio for examples and tests.

Five equities/ETFs, two long futures (ES, GC), four cash currencies and the
matching futures reference data. Values are as of the last close in
``DEMO_CLOSING_PRICES``. ``demo_store`` primes an engine and snapshot store
with the book under the ``demo`` preset.
"""

from __future__ import annotations

from datetime import date

from .config import ValuationConfig
from .engine import SnapshotStore, ValuationEngine
from .types import (
    CashBalance,
    EquityPosition,
    FuturesContract,
    FuturesHolding,
    FuturesPosition,
    Position,
    PositionSide,
    SecurityType,
)

DEMO_CLOSING_PRICES: dict[str, float] = {
    "AAPL": 175.50,
    "MSFT": 320.00,
    "VOO": 395.00,
    "TSLA": 180.00,
    "JPM": 155.00,
    "ES": 4250.00,
    "GC": 1920.00,
}

DEMO_FX_RATES: dict[str, float] = {
    "EUR": 1.08,
    "GBP": 1.25,
    "JPY": 0.00675,
    "CHF": 1.12,
    "AUD": 0.68,
    "CAD": 0.75,
}


def _equity(id, name, symbol, quantity, buy_price, buy_date, holding_period, sector, kind=SecurityType.STOCK):
    return EquityPosition(
        id=id,
        name=name,
        symbol=symbol,
        quantity=quantity,
        buy_price=buy_price,
        buy_date=buy_date,
        holding_period=holding_period,
        sector=sector,
        country="US",
        kind=kind,
    )


def demo_positions() -> list[Position]:
    """Securities book, unmarked (current price = buy price)."""
    return [
        _equity("1", "Apple Inc.", "AAPL", 100, 150.00, date(2023, 6, 15), 180, "Technology"),
        _equity("2", "Microsoft Corporation", "MSFT", 75, 280.00, date(2023, 8, 20), 120, "Technology"),
        _equity(
            "3", "Vanguard S&P 500 ETF", "VOO", 50, 380.00, date(2023, 1, 10), 320, "ETF",
            kind=SecurityType.ETF,
        ),
        _equity("4", "Tesla Inc.", "TSLA", 25, 200.00, date(2023, 9, 5), 90, "Automotive"),
        _equity("5", "JPMorgan Chase & Co.", "JPM", 60, 140.00, date(2023, 7, 12), 150, "Financial"),
        FuturesPosition(
            id="6",
            name="E-mini S&P 500 Futures",
            symbol="ES",
            quantity=2,
            buy_price=4200.00,
            buy_date=date(2023, 12, 1),
            holding_period=30,
            sector="Futures",
            country="US",
            contract_size=50,
            margin_requirement=0.05,
            margin_used=21_000.00,
            side=PositionSide.LONG,
            expiration_date=date(2024, 3, 15),
            tick_size=0.25,
            tick_value=12.50,
        ),
        FuturesPosition(
            id="7",
            name="Gold Futures",
            symbol="GC",
            quantity=1,
            buy_price=1950.00,
            buy_date=date(2023, 11, 15),
            holding_period=45,
            sector="Futures",
            country="US",
            contract_size=100,
            margin_requirement=0.08,
            margin_used=15_600.00,
            side=PositionSide.LONG,
            expiration_date=date(2024, 2, 28),
            tick_size=0.10,
            tick_value=10.00,
        ),
    ]


def demo_cash_balances() -> list[CashBalance]:
    return [
        CashBalance("USD", 25_000.00, 1.00),
        CashBalance("EUR", 15_000.00, 1.08),
        CashBalance("GBP", 12_000.00, 1.25),
        CashBalance("JPY", 2_000_000.00, 0.00675),
    ]


def demo_contracts() -> list[FuturesContract]:
    return [
        FuturesContract(
            "ES1", "ES", "E-mini S&P 500 Futures", 50, 0.25, 12.50, 0.05,
            date(2024, 3, 15), 4250.00, 4248.50, 1_250_000, 2_500_000,
        ),
        FuturesContract(
            "GC1", "GC", "Gold Futures", 100, 0.10, 10.00, 0.08,
            date(2024, 2, 28), 1920.00, 1922.50, 85_000, 450_000,
        ),
        FuturesContract(
            "CL1", "CL", "Crude Oil Futures", 1000, 0.01, 10.00, 0.10,
            date(2024, 4, 15), 75.50, 75.25, 95_000, 680_000,
        ),
        FuturesContract(
            "NQ1", "NQ", "E-mini NASDAQ-100 Futures", 20, 0.25, 5.00, 0.06,
            date(2024, 3, 15), 16850.00, 16845.00, 450_000, 1_200_000,
        ),
    ]


def demo_holdings() -> list[FuturesHolding]:
    """Standalone futures book (tick model), unmarked."""
    return [
        FuturesHolding(
            id="pos1",
            contract_id="ES1",
            symbol="ES",
            name="E-mini S&P 500 Futures",
            side=PositionSide.LONG,
            quantity=2,
            entry_price=4200.00,
            current_price=4200.00,
            margin_used=21_000.00,
            margin_requirement=0.05,
            leverage=20.0,
            tick_size=0.25,
            tick_value=12.50,
            mark_to_market=8400.00,
            entry_date=date(2023, 12, 1),
            expiration_date=date(2024, 3, 15),
        ),
        FuturesHolding(
            id="pos2",
            contract_id="GC1",
            symbol="GC",
            name="Gold Futures",
            side=PositionSide.LONG,
            quantity=1,
            entry_price=1950.00,
            current_price=1950.00,
            margin_used=15_600.00,
            margin_requirement=0.08,
            leverage=12.5,
            tick_size=0.10,
            tick_value=10.00,
            mark_to_market=1950.00,
            entry_date=date(2023, 11, 15),
            expiration_date=date(2024, 2, 28),
        ),
    ]


def demo_store(config: ValuationConfig | None = None) -> tuple[ValuationEngine, SnapshotStore]:
    """Engine and store primed with the demo book marked at the last close.

    Uses the ``demo`` preset unless a config is given. Hand both to a
    ``PeriodicRefresher`` to drive the book with simulated ticks:

        engine, store = demo_store()
        with PeriodicRefresher(engine, store):
            ...
    """
    config = config or ValuationConfig.from_preset("demo")
    engine = ValuationEngine(config)
    store = SnapshotStore()
    store.publish(
        engine.recalculate(
            demo_positions(), demo_cash_balances(), DEMO_CLOSING_PRICES, demo_holdings()
        ),
        expected_version=0,
    )
    return engine, store
