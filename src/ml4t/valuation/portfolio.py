"""Portfolio aggregation: rolls position values into book-level totals."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone

from .types import CashBalance, FuturesPosition, PortfolioSummary, Position

logger = logging.getLogger(__name__)


def summarize(
    positions: Iterable[Position],
    cash_balances: Iterable[CashBalance],
    previous_timestamp: datetime | None = None,
) -> PortfolioSummary:
    """Aggregate positions and cash into a PortfolioSummary.

    Totals:
        securities_value = sum of current_value over non-futures positions
        futures_value = sum of current_value over futures positions
        cash_value = sum of usd_equivalent over cash balances
        total_value = securities_value + futures_value + cash_value
        total_gain_loss = sum of gain_loss over all positions

    Derived ratios (all divisions guarded, never raises):
        total_gain_loss_percent = total_gain_loss / (total_value - total_gain_loss) * 100
        available_margin = cash_value - total_margin_used   (may be negative)
        margin_utilization_percent = total_margin_used / cash_value * 100

    The gain/loss percent denominator approximates the pre-gain capital base
    (total value less gains), not the summed cost basis.

    Args:
        positions: Marked positions
        cash_balances: Cash per currency
        previous_timestamp: Reused as ``last_updated`` when given, so
            re-summarizing unchanged inputs yields an identical record

    Returns:
        PortfolioSummary
    """
    positions = list(positions)

    securities_value = 0.0
    futures_value = 0.0
    total_margin_used = 0.0
    for position in positions:
        if isinstance(position, FuturesPosition):
            futures_value += position.current_value
            total_margin_used += position.margin_used
        else:
            securities_value += position.current_value

    cash_value = sum(balance.usd_equivalent for balance in cash_balances)
    total_value = securities_value + futures_value + cash_value
    total_gain_loss = sum(position.gain_loss for position in positions)

    capital_base = total_value - total_gain_loss
    total_gain_loss_percent = (
        total_gain_loss / capital_base * 100 if total_value > 0 and capital_base != 0 else 0.0
    )
    available_margin = cash_value - total_margin_used
    margin_utilization_percent = total_margin_used / cash_value * 100 if cash_value > 0 else 0.0

    if available_margin < 0:
        logger.warning(
            f"Margin in use ${total_margin_used:,.2f} exceeds cash ${cash_value:,.2f}"
        )

    return PortfolioSummary(
        total_value=total_value,
        total_gain_loss=total_gain_loss,
        total_gain_loss_percent=total_gain_loss_percent,
        cash_value=cash_value,
        securities_value=securities_value,
        futures_value=futures_value,
        total_margin_used=total_margin_used,
        available_margin=available_margin,
        margin_utilization_percent=margin_utilization_percent,
        unrealized_pnl=total_gain_loss,
        last_updated=previous_timestamp or datetime.now(timezone.utc),
    )
