"""Futures P&L, margin and leverage calculations.

Two futures representations coexist and are valued with different units:

- ``FuturesPosition`` (securities book): contract-size model, see
  ``ml4t.valuation.valuation.revalue``.
- ``FuturesHolding`` (standalone futures book): tick model implemented here,
  P&L = price move * quantity * tick_value / tick_size.

The two are not unified.
"""

from __future__ import annotations

from dataclasses import replace

from .errors import InsufficientMarginError
from .types import FuturesContract, FuturesHolding, PositionSide


def futures_pnl(holding: FuturesHolding, current_price: float) -> float:
    """Unrealized P&L of a standalone holding under the tick model.

    Example:
        LONG 3 contracts @ 75.50, tick_size 0.01, tick_value 10.00, now 76.00:
            (76.00 - 75.50) * 3 * 10.00 / 0.01 = 1,500
    """
    move = current_price - holding.entry_price
    if holding.side == PositionSide.SHORT:
        move = -move
    return move * holding.quantity * holding.tick_value / holding.tick_size


def margin_requirement(contract: FuturesContract, quantity: float, price: float) -> float:
    """Margin needed to hold ``quantity`` contracts at ``price``.

    margin = contract_size * price * quantity * margin_requirement

    Example:
        2 ES @ 4250, contract_size 50, 5% margin:
            50 * 4250 * 2 * 0.05 = 21,250
    """
    contract_value = contract.contract_size * price * quantity
    return contract_value * contract.margin_requirement


def leverage(contract_value: float, margin_used: float) -> float:
    """Exposure per unit of posted margin; 0.0 when no margin is posted."""
    return contract_value / margin_used if margin_used > 0 else 0.0


def mark_holding(holding: FuturesHolding, current_price: float) -> FuturesHolding:
    """Return a copy of ``holding`` marked at ``current_price``."""
    return replace(
        holding,
        current_price=current_price,
        mark_to_market=holding.quantity * current_price,
        unrealized_pnl=futures_pnl(holding, current_price),
    )


def required_margin(quantity: float, price: float, leverage: float) -> float:
    """Initial margin for a new futures trade at the chosen leverage.

    Used by trade entry, not by the valuation engine.
    """
    if leverage <= 0:
        raise ValueError(f"leverage must be positive, got {leverage}")
    return quantity * price / leverage


def check_margin(available_cash: float, required: float) -> None:
    """Reject a trade whose initial margin exceeds available cash.

    Raises:
        InsufficientMarginError: If ``available_cash < required``
    """
    if available_cash < required:
        raise InsufficientMarginError(available_cash, required)
