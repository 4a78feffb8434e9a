"""Portfolio risk metrics from value-weighted daily return series.

Every call recomputes from the positions passed in; nothing is cached.

Conventions (defaults from ``ValuationConfig``):
- Portfolio series covers min(return_window, shortest position history) days
- Mean and variance divide by the fixed ``return_window`` (365), not by the
  series length, so short histories are still annualized against a full year
- volatility = sqrt(variance * 365)
- sharpe = (mean * 252 - risk_free_rate) / volatility
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import replace

import numpy as np

from .config import ValuationConfig
from .errors import DegeneratePortfolioError
from .types import FuturesPosition, Position, RiskMetrics

logger = logging.getLogger(__name__)


# === Beta reference data ===


class BetaProvider(ABC):
    """Source of per-symbol market betas."""

    @abstractmethod
    def get_beta(self, symbol: str) -> float | None:
        """Beta for ``symbol``, or None if unknown."""


class InMemoryBetaProvider(BetaProvider):
    """Beta lookup table held in memory.

    Ships with betas for the symbols of the demo book. Unknown symbols return
    None and the risk engine substitutes ``ValuationConfig.default_beta``.
    """

    DEFAULT_BETAS: dict[str, float] = {
        "AAPL": 1.2,
        "MSFT": 1.1,
        "VOO": 1.0,
        "TSLA": 1.8,
        "JPM": 0.9,
        "ES": 1.0,
        "GC": 0.0,
    }

    def __init__(self, betas: dict[str, float] | None = None):
        self._betas: dict[str, float] = dict(self.DEFAULT_BETAS if betas is None else betas)

    def register(self, symbol: str, beta: float) -> None:
        self._betas[symbol] = beta

    def get_beta(self, symbol: str) -> float | None:
        return self._betas.get(symbol)

    def list_symbols(self) -> list[str]:
        return list(self._betas.keys())


# === Return series ===


def synthetic_returns(
    days: int,
    mean: float = 0.08,
    std: float = 0.20,
    rng: np.random.Generator | None = None,
) -> tuple[float, ...]:
    """Stand-in daily return history for a position without one.

    r_i = mean / days + std * U(-1, 1) / sqrt(days)

    Draws come from a numpy Generator (pass a seeded one for reproducible
    series); the series has the documented shape and scale, not any
    particular sequence of values.
    """
    if days <= 0:
        return ()
    rng = rng or np.random.default_rng()
    shocks = rng.uniform(-1.0, 1.0, size=days)
    return tuple((mean / days + std * shocks / math.sqrt(days)).tolist())


def backfill_returns(
    positions: Iterable[Position],
    config: ValuationConfig | None = None,
    rng: np.random.Generator | None = None,
) -> list[Position]:
    """Give every position lacking a history a synthetic one.

    Series length is the position's holding period in days. Positions that
    already carry a history are returned unchanged.
    """
    config = config or ValuationConfig()
    rng = rng or np.random.default_rng(config.seed)

    filled = []
    for position in positions:
        if position.historical_returns is None:
            series = synthetic_returns(
                position.holding_period, config.synthetic_mean, config.synthetic_std, rng
            )
            logger.debug(f"Backfilled {len(series)} synthetic returns for {position.symbol}")
            position = replace(position, historical_returns=series)
        filled.append(position)
    return filled


def portfolio_returns(
    series: Sequence[Sequence[float] | None],
    weights: Sequence[float],
    window: int,
) -> np.ndarray:
    """Value-weighted portfolio return for each of the first ``window`` days.

    Missing entries (series shorter than the window, or no series at all)
    contribute 0 for that day rather than being skipped.
    """
    matrix = np.zeros((len(series), window))
    for row, returns in enumerate(series):
        if returns is not None and len(returns):
            values = np.asarray(returns[:window], dtype=float)
            matrix[row, : len(values)] = values
    return np.asarray(weights, dtype=float) @ matrix if len(series) else np.zeros(window)


def max_drawdown(returns: Sequence[float]) -> float:
    """Worst peak-to-trough decline of the compounded value path.

    The path starts at 1.0, so the starting value counts as a peak.

    Returns:
        Drawdown as a non-positive fraction (e.g. -0.08 for an 8% decline)
    """
    if len(returns) == 0:
        return 0.0
    values = np.cumprod(1.0 + np.asarray(returns, dtype=float))
    peaks = np.maximum(np.maximum.accumulate(values), 1.0)
    return float(min(0.0, np.min((values - peaks) / peaks)))


def portfolio_beta(
    positions: Sequence[Position],
    total_value: float,
    beta_provider: BetaProvider | None = None,
    default_beta: float = 1.0,
) -> float:
    """Value-weighted average beta; unknown symbols count as ``default_beta``."""
    beta_provider = beta_provider or InMemoryBetaProvider()
    beta = 0.0
    for position in positions:
        symbol_beta = beta_provider.get_beta(position.symbol)
        if symbol_beta is None:
            symbol_beta = default_beta
        beta += symbol_beta * position.current_value / total_value
    return beta


# === Risk metrics ===


def compute_risk_metrics(
    positions: Iterable[Position],
    beta_provider: BetaProvider | None = None,
    config: ValuationConfig | None = None,
    rng: np.random.Generator | None = None,
) -> RiskMetrics:
    """Compute beta, volatility, Sharpe, drawdown and futures risk figures.

    Positions without a return history get a synthetic one first (see
    ``backfill_returns``); call ``backfill_returns`` yourself beforehand to
    keep the generated histories stable across calls.

    Args:
        positions: Marked positions (cash is not included)
        beta_provider: Per-symbol beta lookup (default: InMemoryBetaProvider)
        config: Conventions (default: ValuationConfig())
        rng: Random generator used for any backfill

    Returns:
        RiskMetrics

    Raises:
        DegeneratePortfolioError: If the positions are worth nothing in total
    """
    config = config or ValuationConfig()
    positions = list(positions)

    total_value = sum(position.current_value for position in positions)
    if total_value == 0:
        logger.warning(f"Risk requested for degenerate portfolio ({len(positions)} positions)")
        raise DegeneratePortfolioError(total_value)

    positions = backfill_returns(positions, config, rng)

    weights = [position.current_value / total_value for position in positions]
    shortest = min(len(position.historical_returns) for position in positions)
    window = min(config.return_window, shortest)
    returns = portfolio_returns(
        [position.historical_returns for position in positions], weights, window
    )

    mean_return = float(np.sum(returns)) / config.return_window
    variance = float(np.sum((returns - mean_return) ** 2)) / config.return_window
    volatility = math.sqrt(variance * config.annualization_days)

    annual_return = mean_return * config.trading_days
    sharpe_ratio = (annual_return - config.risk_free_rate) / volatility if volatility > 0 else 0.0

    futures = [position for position in positions if isinstance(position, FuturesPosition)]
    futures_value = sum(position.current_value for position in futures)
    margin_used = sum(position.margin_used for position in futures)
    net_capital = total_value - margin_used

    return RiskMetrics(
        beta=portfolio_beta(positions, total_value, beta_provider, config.default_beta),
        sharpe_ratio=sharpe_ratio,
        volatility=volatility,
        max_drawdown=max_drawdown(returns),
        margin_utilization=margin_used / total_value,
        leverage_ratio=total_value / net_capital if net_capital != 0 else math.inf,
        futures_exposure=futures_value / total_value,
        delta=config.delta_placeholder,
    )
