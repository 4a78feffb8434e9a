"""Tests for dashboard payloads and polars tables."""

from datetime import date

import polars as pl
import pytest

from ml4t.valuation import (
    CashBalance,
    EquityPosition,
    FuturesPosition,
    PositionSide,
    SecurityType,
    ValuationEngine,
    mark_to_market,
)
from ml4t.valuation.serialization import (
    cash_from_dict,
    cash_to_dict,
    cash_frame,
    holding_to_dict,
    position_from_dict,
    position_to_dict,
    positions_frame,
    snapshot_to_dict,
)


class TestPositionPayload:
    def test_equity_keys(self, aapl: EquityPosition):
        data = position_to_dict(aapl)
        assert data["type"] == "STOCK"
        assert data["buyPrice"] == 150.0
        assert data["buyValue"] == 15_000.0
        assert data["buyDate"] == "2023-06-15"
        assert "contractSize" not in data
        assert "historicalReturns" not in data

    def test_futures_keys(self, es_long: FuturesPosition):
        data = position_to_dict(es_long)
        assert data["type"] == "FUTURES"
        assert data["contractSize"] == 50
        assert data["positionType"] == "LONG"
        assert data["marginUsed"] == 21_000.0

    def test_futures_from_dict(self, es_short: FuturesPosition):
        restored = position_from_dict(position_to_dict(es_short))
        assert isinstance(restored, FuturesPosition)
        assert restored.side == PositionSide.SHORT
        assert restored == es_short

    def test_etf_from_dashboard_payload(self):
        payload = {
            "id": 3,
            "name": "Vanguard S&P 500 ETF",
            "type": "ETF",
            "symbol": "VOO",
            "quantity": 50,
            "buyPrice": 380.00,
            "buyDate": "2023-01-10T00:00:00.000Z",
            "holdingPeriod": 320,
        }
        restored = position_from_dict(payload)
        assert isinstance(restored, EquityPosition)
        assert restored.security_type == SecurityType.ETF
        assert restored.id == "3"
        assert restored.buy_date == date(2023, 1, 10)
        assert restored.buy_value == pytest.approx(19_000.0)

    def test_history_serialized_as_list(self, aapl: EquityPosition):
        from dataclasses import replace

        data = position_to_dict(replace(aapl, historical_returns=(0.01, -0.02)))
        assert data["historicalReturns"] == [0.01, -0.02]
        assert position_from_dict(data).historical_returns == (0.01, -0.02)


class TestCashPayload:
    def test_derived_usd_equivalent(self):
        data = cash_to_dict(CashBalance("GBP", 12_000.0, 1.25))
        assert data["usdEquivalent"] == pytest.approx(15_000.0)

    def test_supplied_usd_equivalent_ignored(self):
        balance = cash_from_dict(
            {"currency": "EUR", "amount": 100.0, "exchangeRate": 1.1, "usdEquivalent": 999.0}
        )
        assert balance.usd_equivalent == pytest.approx(110.0)


def test_holding_payload(holdings):
    data = holding_to_dict(holdings[0])
    assert data["contractId"] == "ES1"
    assert data["positionType"] == "LONG"
    assert data["unrealizedPnL"] == 0.0
    assert data["expirationDate"] == "2024-03-15"


class TestSnapshotPayload:
    @pytest.fixture
    def payload(self, config, positions, cash_balances, closing_prices, holdings, fixed_time):
        snapshot = ValuationEngine(config).recalculate(
            positions, cash_balances, closing_prices, holdings, fixed_time
        )
        return snapshot_to_dict(snapshot)

    def test_sections(self, payload):
        assert set(payload) == {
            "version",
            "securities",
            "cashBalances",
            "futuresPositions",
            "portfolioSummary",
            "riskMetrics",
        }

    def test_summary(self, payload):
        summary = payload["portfolioSummary"]
        assert summary["totalValue"] == pytest.approx(761_800.0)
        assert summary["lastUpdated"] == "2025-01-20T19:41:50+00:00"

    def test_risk(self, payload):
        assert payload["riskMetrics"]["delta"] == 0.85
        assert set(payload["riskMetrics"]) >= {"beta", "sharpeRatio", "maxDrawdown"}


class TestFrames:
    def test_positions_frame(self, positions, closing_prices):
        frame = positions_frame(mark_to_market(positions, closing_prices))
        assert isinstance(frame, pl.DataFrame)
        assert frame.height == 7
        assert frame["current_value"].sum() == pytest.approx(692_100.0)
        assert frame["margin_used"].sum() == pytest.approx(36_600.0)

    def test_filter_by_type(self, positions):
        frame = positions_frame(positions)
        futures = frame.filter(pl.col("type") == "FUTURES")
        assert futures["symbol"].to_list() == ["ES", "GC"]

    def test_cash_frame(self, cash_balances):
        frame = cash_frame(cash_balances)
        assert frame.columns == ["currency", "amount", "exchange_rate", "usd_equivalent"]
        assert frame["usd_equivalent"].sum() == pytest.approx(69_700.0)

    def test_empty(self):
        assert positions_frame([]).is_empty()
        assert cash_frame([]).is_empty()
