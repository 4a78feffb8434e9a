"""Mark-to-market valuation of the securities book."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date

from .errors import InvalidInputError
from .types import EquityPosition, FuturesPosition, Position, PositionSide

logger = logging.getLogger(__name__)


def gain_loss_percent(gain_loss: float, buy_value: float) -> float:
    """Gain/loss as a percentage of cost basis.

    Raises:
        InvalidInputError: If ``buy_value`` is zero
    """
    if buy_value == 0:
        raise InvalidInputError(
            f"Cannot compute gain/loss percent with zero cost basis (gain_loss={gain_loss})"
        )
    return gain_loss / buy_value * 100


def resolve_price(position: Position, prices: Mapping[str, float]) -> float:
    """Latest price for the position, falling back to its stored price.

    Missing, zero or NaN quotes are treated as absent.
    """
    price = prices.get(position.symbol)
    if not price or math.isnan(price):
        return position.current_price
    return float(price)


def revalue(position: Position, price: float) -> Position:
    """Return a copy of ``position`` marked at ``price``.

    Equities:
        current_value = quantity * price
        gain_loss = current_value - buy_value

    Futures (contract-size model):
        current_value = quantity * contract_size * price
        gain_loss = (price - buy_price) * quantity * contract_size   (LONG)
        gain_loss = (buy_price - price) * quantity * contract_size   (SHORT)

    Example:
        ES LONG 2 @ 4200, contract_size 50, marked at 4250:
            gain_loss = (4250 - 4200) * 2 * 50 = 5,000
    """
    match position:
        case FuturesPosition(side=PositionSide.SHORT):
            current_value = position.quantity * (position.contract_size * price)
            gain_loss = (position.buy_price - price) * position.quantity * position.contract_size
        case FuturesPosition():
            current_value = position.quantity * (position.contract_size * price)
            gain_loss = (price - position.buy_price) * position.quantity * position.contract_size
        case EquityPosition():
            current_value = position.quantity * price
            gain_loss = current_value - position.buy_value
        case _:
            raise TypeError(f"Unsupported position type: {type(position).__name__}")

    return replace(
        position,
        current_price=price,
        current_value=current_value,
        gain_loss=gain_loss,
        gain_loss_percent=gain_loss_percent(gain_loss, position.buy_value),
    )


def mark_to_market(
    positions: Iterable[Position],
    prices: Mapping[str, float],
) -> list[Position]:
    """Revalue every position against a symbol -> price map.

    Inputs are not modified; a new list of new records is returned in the
    same order. Symbols missing from ``prices`` keep their stored price, so
    the call never fails for lack of a quote. Applying it twice with the same
    prices yields the same result.

    Args:
        positions: Positions to revalue
        prices: Latest price per symbol

    Returns:
        Revalued positions

    Raises:
        InvalidInputError: If any position has a zero cost basis
    """
    marked = []
    for position in positions:
        if position.symbol not in prices:
            logger.debug(f"No price for {position.symbol}; keeping {position.current_price}")
        marked.append(revalue(position, resolve_price(position, prices)))
    logger.debug(f"Marked {len(marked)} positions to market")
    return marked


def holding_period_days(buy_date: date, today: date | None = None) -> int:
    """Whole days between purchase and ``today`` (default: current date)."""
    today = today or date.today()
    return abs((today - buy_date).days)
