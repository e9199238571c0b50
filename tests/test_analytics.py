"""Property-based tests for session statistics.

**Feature: fxreplay session analytics**
"""

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from fxreplay.db.memory import MemoryStore
from fxreplay.engine.analytics import AnalyticsEngine, calculate_session_stats
from fxreplay.engine.ledger import TradeLedger
from fxreplay.models import Trade

T0 = datetime(2026, 9, 1, 8, tzinfo=timezone.utc)


def closed_trade(trade_id: int, pnl: float, closed_offset_hours: int = 1) -> Trade:
    return Trade(
        id=trade_id,
        session_id=1,
        instrument="EUR/USD",
        direction="BUY",
        position_size=1.0,
        entry_price=1.1,
        exit_price=1.1,
        pnl=pnl,
        status="CLOSED",
        opened_at=T0 + timedelta(hours=trade_id),
        closed_at=T0 + timedelta(hours=trade_id + closed_offset_hours),
    )


def open_trade(trade_id: int) -> Trade:
    return Trade(
        id=trade_id,
        session_id=1,
        instrument="EUR/USD",
        direction="SELL",
        position_size=1.0,
        entry_price=1.1,
        opened_at=T0 + timedelta(hours=trade_id),
    )


class TestDrawdownExample:
    """
    Closed P&Ls [+100, -300, +50]: cumulative 100, -200, -150 against a
    peak of 100 gives a max drawdown of 300.
    """

    def test_stats(self):
        trades = [closed_trade(1, 100.0), closed_trade(2, -300.0), closed_trade(3, 50.0)]

        stats = calculate_session_stats(trades)

        assert stats.total_pnl == pytest.approx(-150.0)
        assert stats.max_drawdown == pytest.approx(300.0)
        assert stats.total_trades == 3
        assert stats.winning_trades == 2
        assert stats.losing_trades == 1
        assert stats.win_rate == pytest.approx(66.6667, abs=1e-3)
        assert stats.avg_trade == pytest.approx(-50.0)

    def test_peak_starts_at_zero(self):
        stats = calculate_session_stats([closed_trade(1, -80.0), closed_trade(2, -20.0)])

        assert stats.max_drawdown == pytest.approx(100.0)

    def test_monotonic_gains_have_no_drawdown(self):
        trades = [closed_trade(i, 10.0 * i) for i in range(1, 6)]

        assert calculate_session_stats(trades).max_drawdown == 0


class TestClosedTradesOnly:
    """Open trades and empty sessions contribute nothing."""

    def test_empty(self):
        stats = calculate_session_stats([])

        assert stats.total_pnl == 0
        assert stats.win_rate == 0
        assert stats.total_trades == 0
        assert stats.max_drawdown == 0
        assert stats.avg_trade == 0
        assert stats.winning_trades == 0
        assert stats.losing_trades == 0

    def test_open_trades_ignored(self):
        trades = [open_trade(1), closed_trade(2, 40.0), open_trade(3)]

        stats = calculate_session_stats(trades)

        assert stats.total_trades == 1
        assert stats.total_pnl == pytest.approx(40.0)
        assert stats.win_rate == pytest.approx(100.0)

    def test_zero_pnl_counts_as_loss(self):
        stats = calculate_session_stats([closed_trade(1, 0.0)])

        assert stats.winning_trades == 0
        assert stats.losing_trades == 1
        assert stats.win_rate == 0


class TestStatsProperties:
    """
    *For any* list of closed P&Ls, wins plus losses equals the trade count,
    total P&L is their sum, and drawdown is non-negative.
    """

    @given(pnls=st.lists(st.floats(min_value=-5000, max_value=5000), max_size=40))
    @settings(max_examples=100)
    def test_totals(self, pnls: list[float]):
        trades = [closed_trade(i + 1, pnl) for i, pnl in enumerate(pnls)]

        stats = calculate_session_stats(trades)

        assert stats.total_trades == len(pnls)
        assert stats.winning_trades + stats.losing_trades == len(pnls)
        assert stats.total_pnl == pytest.approx(sum(pnls), abs=1e-6)
        assert stats.max_drawdown >= 0
        assert 0 <= stats.win_rate <= 100

    @given(pnls=st.lists(st.floats(min_value=-5000, max_value=5000), min_size=1, max_size=40))
    @settings(max_examples=50)
    def test_drawdown_bounded_by_losses(self, pnls: list[float]):
        trades = [closed_trade(i + 1, pnl) for i, pnl in enumerate(pnls)]

        stats = calculate_session_stats(trades)

        assert stats.max_drawdown <= sum(-p for p in pnls if p < 0) + 1e-6


class TestTradeOrdering:
    """Insertion order by default, close time on request."""

    def test_close_order_changes_drawdown(self):
        # Trade 1 closes last; in close order the loss comes before the gain.
        trades = [
            closed_trade(1, 100.0, closed_offset_hours=10),
            closed_trade(2, -300.0),
        ]

        by_open = calculate_session_stats(trades)
        by_close = calculate_session_stats(trades, order="closed")

        assert by_open.max_drawdown == pytest.approx(300.0)
        assert by_close.max_drawdown == pytest.approx(300.0)
        assert by_open.total_pnl == by_close.total_pnl

    def test_close_order_peak(self):
        trades = [
            closed_trade(1, -50.0, closed_offset_hours=10),
            closed_trade(2, 200.0),
            closed_trade(3, -100.0),
        ]

        assert calculate_session_stats(trades).max_drawdown == pytest.approx(100.0)
        # by close: +200, -100, -50 -> peak 200, trough 50
        assert calculate_session_stats(trades, order="closed").max_drawdown == pytest.approx(150.0)


class TestAnalyticsEngine:
    def test_reads_trades_from_store(self):
        store = MemoryStore()
        ledger = TradeLedger(store)
        first = ledger.open(1, "EUR/USD", "BUY", 1.0, 1.1000, opened_at=T0)
        second = ledger.open(1, "EUR/USD", "SELL", 1.0, 1.1000, opened_at=T0)
        ledger.open(2, "EUR/USD", "BUY", 1.0, 1.1000, opened_at=T0)
        ledger.close(first.id, 1.1010, T0 + timedelta(hours=1))
        ledger.close(second.id, 1.1010, T0 + timedelta(hours=1))

        stats = AnalyticsEngine(store).get_session_stats(1)

        assert stats.total_trades == 2
        assert stats.winning_trades == 1
        assert stats.total_pnl == pytest.approx(0.0)

    def test_recomputation_is_idempotent(self):
        store = MemoryStore()
        ledger = TradeLedger(store)
        trade = ledger.open(1, "EUR/USD", "BUY", 1.0, 1.1000, opened_at=T0)
        ledger.close(trade.id, 1.0950, T0 + timedelta(hours=1))
        engine = AnalyticsEngine(store)

        assert engine.get_session_stats(1) == engine.get_session_stats(1)

    def test_unknown_session_is_empty(self):
        stats = AnalyticsEngine(MemoryStore()).get_session_stats(404)

        assert stats.total_trades == 0
        assert stats.total_pnl == 0
