"""Core types for the valuation engine.

Positions form a small tagged union: every holding is either an
``EquityPosition`` (stocks, bonds, ETFs, mutual funds, options) or a
``FuturesPosition`` (contract-size futures carried in the securities book).
Both share the ``Position`` base fields and are discriminated by class, so
callers dispatch with ``match`` instead of probing optional attributes.

``FuturesHolding`` is a separate standalone futures record valued with the
tick model; it is not a ``Position``.

All records are frozen. Revaluation returns new records via
``dataclasses.replace``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


# === Enums ===


class SecurityType(str, Enum):
    """Instrument category of a position."""

    STOCK = "STOCK"
    BOND = "BOND"
    ETF = "ETF"
    MUTUAL_FUND = "MUTUAL_FUND"
    OPTION = "OPTION"
    FUTURES = "FUTURES"


class PositionSide(str, Enum):
    """Direction of a futures exposure."""

    LONG = "LONG"
    SHORT = "SHORT"


EQUITY_TYPES = frozenset(
    {
        SecurityType.STOCK,
        SecurityType.BOND,
        SecurityType.ETF,
        SecurityType.MUTUAL_FUND,
        SecurityType.OPTION,
    }
)


# === Positions ===


@dataclass(frozen=True)
class Position(ABC):
    """Fields shared by every position variant (abstract; build a variant).

    ``buy_value``, ``current_price`` and ``current_value`` may be omitted and
    are then derived from quantity and prices. ``gain_loss_percent`` is None
    until the position has been marked.

    Attributes:
        id: Unique identifier
        name: Display name (e.g. "Apple Inc.")
        symbol: Ticker used for price lookup (e.g. "AAPL", "ES")
        quantity: Shares or contracts held
        buy_price: Entry price per share/contract
        buy_value: Cost basis in currency units
        current_price: Last marked price
        current_value: Last marked value
        gain_loss: Unrealized P&L in currency units
        gain_loss_percent: Unrealized P&L as a percentage of cost basis
        buy_date: Acquisition date
        holding_period: Days since acquisition
        historical_returns: Daily returns, most recent last
    """

    id: str
    name: str
    symbol: str
    quantity: float
    buy_price: float
    buy_value: float | None = None
    current_price: float | None = None
    current_value: float | None = None
    gain_loss: float = 0.0
    gain_loss_percent: float | None = None
    buy_date: date | None = None
    holding_period: int = 0
    sector: str | None = None
    country: str | None = None
    historical_returns: tuple[float, ...] | None = None

    def __post_init__(self):
        if self.buy_value is None:
            object.__setattr__(self, "buy_value", self.quantity * self.buy_price * self.multiplier)
        if self.current_price is None:
            object.__setattr__(self, "current_price", self.buy_price)
        if self.current_value is None:
            object.__setattr__(
                self, "current_value", self.quantity * self.current_price * self.multiplier
            )
        if self.historical_returns is not None and not isinstance(self.historical_returns, tuple):
            object.__setattr__(self, "historical_returns", tuple(self.historical_returns))

    @property
    def multiplier(self) -> float:
        """Units of the underlying per share/contract."""
        return 1.0

    @property
    @abstractmethod
    def security_type(self) -> SecurityType:
        """Instrument category; defined by each variant."""


@dataclass(frozen=True)
class EquityPosition(Position):
    """Cash-settled, unlevered holding (stock, bond, ETF, fund, option)."""

    kind: SecurityType = SecurityType.STOCK

    def __post_init__(self):
        if self.kind not in EQUITY_TYPES:
            raise ValueError(f"EquityPosition cannot hold security type {self.kind.value}")
        super().__post_init__()

    @property
    def security_type(self) -> SecurityType:
        return self.kind


@dataclass(frozen=True)
class FuturesPosition(Position):
    """Futures exposure carried in the securities book.

    Valued with the contract-size model: value and P&L scale with
    ``contract_size`` units of the underlying per contract.

    Example:
        es = FuturesPosition(
            id="6", name="E-mini S&P 500 Futures", symbol="ES",
            quantity=2, buy_price=4200.0,
            contract_size=50, margin_requirement=0.05, margin_used=21_000.0,
        )
        # buy_value = 2 * 4200 * 50 = 420,000
    """

    contract_size: float = 1.0
    margin_requirement: float = 0.0  # Fraction of notional
    margin_used: float = 0.0
    side: PositionSide = PositionSide.LONG
    expiration_date: date | None = None
    tick_size: float = 0.01
    tick_value: float = 0.01

    @property
    def multiplier(self) -> float:
        return self.contract_size

    @property
    def security_type(self) -> SecurityType:
        return SecurityType.FUTURES

    @property
    def notional_value(self) -> float:
        """Contract value at the current price."""
        return self.contract_size * self.current_price


# === Cash and futures reference data ===


@dataclass(frozen=True)
class CashBalance:
    """Cash held in one currency.

    ``usd_equivalent`` is derived from ``amount`` and ``exchange_rate`` so it
    is always consistent with the current rate.
    """

    currency: str
    amount: float
    exchange_rate: float = 1.0

    @property
    def usd_equivalent(self) -> float:
        return self.amount * self.exchange_rate

    def with_rate(self, exchange_rate: float) -> CashBalance:
        return CashBalance(self.currency, self.amount, exchange_rate)

    def with_amount(self, amount: float) -> CashBalance:
        return CashBalance(self.currency, amount, self.exchange_rate)


@dataclass(frozen=True)
class FuturesContract:
    """Exchange specification and latest quote for a futures contract.

    Example:
        gc = FuturesContract(
            id="GC1", symbol="GC", name="Gold Futures",
            contract_size=100, tick_size=0.10, tick_value=10.0,
            margin_requirement=0.08, current_price=1920.0, last_price=1922.5,
        )
    """

    id: str
    symbol: str
    name: str
    contract_size: float
    tick_size: float
    tick_value: float
    margin_requirement: float
    expiration_date: date | None = None
    current_price: float = 0.0
    last_price: float = 0.0
    volume: int = 0
    open_interest: int = 0

    @property
    def change(self) -> float:
        return self.current_price - self.last_price

    @property
    def change_percent(self) -> float:
        if self.last_price == 0:
            return 0.0
        return self.change / self.last_price * 100


@dataclass(frozen=True)
class FuturesHolding:
    """Standalone futures position valued with the tick model.

    Kept apart from ``FuturesPosition``: P&L here is measured in ticks
    (``tick_value / tick_size`` per point) rather than contract size.
    """

    id: str
    contract_id: str
    symbol: str
    name: str
    side: PositionSide
    quantity: float
    entry_price: float
    current_price: float
    margin_used: float
    margin_requirement: float
    leverage: float
    tick_size: float = 0.01
    tick_value: float = 0.01
    mark_to_market: float = 0.0
    unrealized_pnl: float = 0.0
    entry_date: date | None = None
    expiration_date: date | None = None

    @property
    def remaining_margin(self) -> float:
        """Posted margin plus unrealized P&L."""
        return self.margin_used + self.unrealized_pnl


# === Derived records ===


@dataclass(frozen=True)
class PortfolioSummary:
    """Book-level totals, rebuilt on every valuation pass."""

    total_value: float
    total_gain_loss: float
    total_gain_loss_percent: float
    cash_value: float
    securities_value: float
    futures_value: float
    total_margin_used: float
    available_margin: float
    margin_utilization_percent: float
    unrealized_pnl: float
    last_updated: datetime


@dataclass(frozen=True)
class RiskMetrics:
    """Risk statistics, rebuilt on every risk pass.

    ``delta`` is a fixed placeholder, not an option greek derived from the
    positions.
    """

    beta: float
    sharpe_ratio: float
    volatility: float
    max_drawdown: float
    margin_utilization: float
    leverage_ratio: float
    futures_exposure: float
    delta: float = 0.85


@dataclass(frozen=True)
class PortfolioSnapshot:
    """Fully formed result of one recalculation pass."""

    positions: tuple[Position, ...]
    cash_balances: tuple[CashBalance, ...]
    summary: PortfolioSummary
    risk: RiskMetrics
    holdings: tuple[FuturesHolding, ...] = field(default_factory=tuple)
    version: int = 0

    @property
    def futures_positions(self) -> tuple[FuturesPosition, ...]:
        return tuple(p for p in self.positions if isinstance(p, FuturesPosition))
