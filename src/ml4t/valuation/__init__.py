"""ml4t.valuation - Mark-to-market valuation and risk analytics.

A small, pure-Python engine for multi-asset books with:
- Mark-to-market revaluation of equities and futures
- Futures P&L (contract-size and tick models), margin and leverage
- Portfolio aggregation across securities, futures and multi-currency cash
- Risk metrics (beta, volatility, Sharpe, drawdown, margin, leverage)
- Immutable snapshots published by a periodic refresher
"""

__version__ = "0.1.0"

from .config import PRESETS_DIR, ValuationConfig
from .engine import PeriodicRefresher, SnapshotStore, ValuationEngine
from .errors import (
    DegeneratePortfolioError,
    InsufficientMarginError,
    InvalidInputError,
    StaleSnapshotError,
    ValuationError,
)
from .futures import (
    check_margin,
    futures_pnl,
    leverage,
    margin_requirement,
    mark_holding,
    required_margin,
)
from .portfolio import summarize
from .risk import (
    BetaProvider,
    InMemoryBetaProvider,
    backfill_returns,
    compute_risk_metrics,
    max_drawdown,
    portfolio_beta,
    portfolio_returns,
    synthetic_returns,
)
from .simulator import PriceSimulator
from .types import (
    CashBalance,
    EquityPosition,
    FuturesContract,
    FuturesHolding,
    FuturesPosition,
    PortfolioSnapshot,
    PortfolioSummary,
    Position,
    PositionSide,
    RiskMetrics,
    SecurityType,
)
from .valuation import gain_loss_percent, holding_period_days, mark_to_market, revalue

__all__ = [
    # Config
    "ValuationConfig",
    "PRESETS_DIR",
    # Types
    "Position",
    "EquityPosition",
    "FuturesPosition",
    "FuturesHolding",
    "FuturesContract",
    "CashBalance",
    "PortfolioSummary",
    "RiskMetrics",
    "PortfolioSnapshot",
    "SecurityType",
    "PositionSide",
    # Errors
    "ValuationError",
    "InvalidInputError",
    "DegeneratePortfolioError",
    "InsufficientMarginError",
    "StaleSnapshotError",
    # Valuation
    "mark_to_market",
    "revalue",
    "gain_loss_percent",
    "holding_period_days",
    # Futures
    "futures_pnl",
    "margin_requirement",
    "leverage",
    "mark_holding",
    "required_margin",
    "check_margin",
    # Aggregation
    "summarize",
    # Risk
    "compute_risk_metrics",
    "backfill_returns",
    "synthetic_returns",
    "portfolio_returns",
    "max_drawdown",
    "portfolio_beta",
    "BetaProvider",
    "InMemoryBetaProvider",
    # Runtime
    "ValuationEngine",
    "SnapshotStore",
    "PeriodicRefresher",
    "PriceSimulator",
]
