"""JSON-ready dicts and polars tables for the presentation layer.

Dict keys use the camelCase field names of the dashboard payloads
(``buyPrice``, ``currentValue``, ``positionType``, ``usdEquivalent``, ...).
Dates are ISO-8601 strings.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

import polars as pl

from .types import (
    CashBalance,
    EquityPosition,
    FuturesHolding,
    FuturesPosition,
    PortfolioSnapshot,
    PortfolioSummary,
    Position,
    PositionSide,
    RiskMetrics,
    SecurityType,
)


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_date(value: str | date | None) -> date | None:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def position_to_dict(position: Position) -> dict[str, Any]:
    """Serialize a position; futures fields are included only for futures."""
    data: dict[str, Any] = {
        "id": position.id,
        "name": position.name,
        "type": position.security_type.value,
        "symbol": position.symbol,
        "quantity": position.quantity,
        "buyPrice": position.buy_price,
        "buyValue": position.buy_value,
        "currentPrice": position.current_price,
        "currentValue": position.current_value,
        "gainLoss": position.gain_loss,
        "gainLossPercent": position.gain_loss_percent,
        "buyDate": _iso(position.buy_date),
        "holdingPeriod": position.holding_period,
        "sector": position.sector,
        "country": position.country,
    }
    if position.historical_returns is not None:
        data["historicalReturns"] = list(position.historical_returns)

    match position:
        case FuturesPosition():
            data.update(
                {
                    "contractSize": position.contract_size,
                    "marginRequirement": position.margin_requirement,
                    "marginUsed": position.margin_used,
                    "positionType": position.side.value,
                    "expirationDate": _iso(position.expiration_date),
                    "tickSize": position.tick_size,
                    "tickValue": position.tick_value,
                }
            )
    return data


def position_from_dict(data: dict[str, Any]) -> Position:
    """Build the matching position variant from its ``type`` tag."""
    security_type = SecurityType(data.get("type", "STOCK"))
    common = {
        "id": str(data["id"]),
        "name": data["name"],
        "symbol": data["symbol"],
        "quantity": data["quantity"],
        "buy_price": data["buyPrice"],
        "buy_value": data.get("buyValue"),
        "current_price": data.get("currentPrice"),
        "current_value": data.get("currentValue"),
        "gain_loss": data.get("gainLoss", 0.0),
        "gain_loss_percent": data.get("gainLossPercent"),
        "buy_date": _parse_date(data.get("buyDate")),
        "holding_period": data.get("holdingPeriod", 0),
        "sector": data.get("sector"),
        "country": data.get("country"),
        "historical_returns": data.get("historicalReturns"),
    }

    if security_type == SecurityType.FUTURES:
        return FuturesPosition(
            **common,
            contract_size=data.get("contractSize", 1.0),
            margin_requirement=data.get("marginRequirement", 0.0),
            margin_used=data.get("marginUsed", 0.0),
            side=PositionSide(data.get("positionType", "LONG")),
            expiration_date=_parse_date(data.get("expirationDate")),
            tick_size=data.get("tickSize", 0.01),
            tick_value=data.get("tickValue", 0.01),
        )
    return EquityPosition(**common, kind=security_type)


def cash_to_dict(balance: CashBalance) -> dict[str, Any]:
    return {
        "currency": balance.currency,
        "amount": balance.amount,
        "usdEquivalent": balance.usd_equivalent,
        "exchangeRate": balance.exchange_rate,
    }


def cash_from_dict(data: dict[str, Any]) -> CashBalance:
    # usdEquivalent is derived; any value supplied is ignored
    return CashBalance(data["currency"], data["amount"], data.get("exchangeRate", 1.0))


def holding_to_dict(holding: FuturesHolding) -> dict[str, Any]:
    return {
        "id": holding.id,
        "contractId": holding.contract_id,
        "symbol": holding.symbol,
        "name": holding.name,
        "positionType": holding.side.value,
        "quantity": holding.quantity,
        "entryPrice": holding.entry_price,
        "currentPrice": holding.current_price,
        "markToMarket": holding.mark_to_market,
        "unrealizedPnL": holding.unrealized_pnl,
        "marginUsed": holding.margin_used,
        "marginRequirement": holding.margin_requirement,
        "leverage": holding.leverage,
        "entryDate": _iso(holding.entry_date),
        "expirationDate": _iso(holding.expiration_date),
        "tickSize": holding.tick_size,
        "tickValue": holding.tick_value,
    }


def summary_to_dict(summary: PortfolioSummary) -> dict[str, Any]:
    return {
        "totalValue": summary.total_value,
        "totalGainLoss": summary.total_gain_loss,
        "totalGainLossPercent": summary.total_gain_loss_percent,
        "cashValue": summary.cash_value,
        "securitiesValue": summary.securities_value,
        "futuresValue": summary.futures_value,
        "totalMarginUsed": summary.total_margin_used,
        "availableMargin": summary.available_margin,
        "marginUtilizationPercent": summary.margin_utilization_percent,
        "unrealizedPnL": summary.unrealized_pnl,
        "lastUpdated": _iso(summary.last_updated),
    }


def risk_to_dict(risk: RiskMetrics) -> dict[str, Any]:
    return {
        "delta": risk.delta,
        "beta": risk.beta,
        "sharpeRatio": risk.sharpe_ratio,
        "volatility": risk.volatility,
        "maxDrawdown": risk.max_drawdown,
        "marginUtilization": risk.margin_utilization,
        "leverageRatio": risk.leverage_ratio,
        "futuresExposure": risk.futures_exposure,
    }


def snapshot_to_dict(snapshot: PortfolioSnapshot) -> dict[str, Any]:
    """Whole snapshot as one response payload."""
    return {
        "version": snapshot.version,
        "securities": [position_to_dict(p) for p in snapshot.positions],
        "cashBalances": [cash_to_dict(b) for b in snapshot.cash_balances],
        "futuresPositions": [holding_to_dict(h) for h in snapshot.holdings],
        "portfolioSummary": summary_to_dict(snapshot.summary),
        "riskMetrics": risk_to_dict(snapshot.risk),
    }


def positions_frame(positions: Iterable[Position]) -> pl.DataFrame:
    """Holdings table, one row per position.

    Returns:
        DataFrame with columns: id, symbol, name, type, quantity, buy_price,
        current_price, current_value, gain_loss, gain_loss_percent,
        margin_used
    """
    rows = [
        {
            "id": p.id,
            "symbol": p.symbol,
            "name": p.name,
            "type": p.security_type.value,
            "quantity": float(p.quantity),
            "buy_price": float(p.buy_price),
            "current_price": float(p.current_price),
            "current_value": float(p.current_value),
            "gain_loss": float(p.gain_loss),
            "gain_loss_percent": p.gain_loss_percent,
            "margin_used": p.margin_used if isinstance(p, FuturesPosition) else 0.0,
        }
        for p in positions
    ]
    if not rows:
        return pl.DataFrame()
    return pl.DataFrame(rows)


def cash_frame(balances: Iterable[CashBalance]) -> pl.DataFrame:
    """Cash table with columns: currency, amount, exchange_rate, usd_equivalent."""
    balances = list(balances)
    if not balances:
        return pl.DataFrame()
    return pl.DataFrame(
        {
            "currency": [b.currency for b in balances],
            "amount": [float(b.amount) for b in balances],
            "exchange_rate": [float(b.exchange_rate) for b in balances],
            "usd_equivalent": [float(b.usd_equivalent) for b in balances],
        }
    )
