"""Tests for the trade ledger.

**Feature: fxreplay trade ledger**
"""

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from fxreplay.db.memory import MemoryStore
from fxreplay.engine.ledger import TradeLedger, calculate_trade_pnl
from fxreplay.exceptions import ImmutableFieldError, TradeAlreadyClosedError

OPENED = datetime(2026, 9, 1, 9, tzinfo=timezone.utc)
CLOSED = OPENED + timedelta(hours=3)


@pytest.fixture
def ledger() -> TradeLedger:
    return TradeLedger(MemoryStore())


class TestPnLSign:
    """
    A BUY from 1.1000 to 1.1050 at 1 lot earns 500.00; the same move on a
    SELL loses 500.00.
    """

    def test_buy_profit(self, ledger: TradeLedger):
        trade = ledger.open(1, "EUR/USD", "BUY", 1.0, 1.1000, opened_at=OPENED)

        closed = ledger.close(trade.id, 1.1050, CLOSED)

        assert closed.pnl == pytest.approx(500.00)

    def test_sell_loss(self, ledger: TradeLedger):
        trade = ledger.open(1, "EUR/USD", "SELL", 1.0, 1.1000, opened_at=OPENED)

        closed = ledger.close(trade.id, 1.1050, CLOSED)

        assert closed.pnl == pytest.approx(-500.00)

    @given(
        entry=st.floats(min_value=0.5, max_value=200.0),
        exit_=st.floats(min_value=0.5, max_value=200.0),
        size=st.floats(min_value=0.01, max_value=100.0),
    )
    @settings(max_examples=100)
    def test_buy_and_sell_are_opposite(self, entry: float, exit_: float, size: float):
        buy = calculate_trade_pnl("BUY", entry, exit_, size)
        sell = calculate_trade_pnl("SELL", entry, exit_, size)

        assert buy == pytest.approx(-sell, abs=0.01)

    def test_pnl_rounded_to_cents(self):
        assert calculate_trade_pnl("BUY", 1.08501, 1.08512, 0.33) == 3.63

    def test_custom_lot_multiplier(self):
        ledger = TradeLedger(MemoryStore(), lot_multiplier=1000)
        trade = ledger.open(1, "EUR/USD", "BUY", 1.0, 1.1000, opened_at=OPENED)

        assert ledger.close(trade.id, 1.1050, CLOSED).pnl == pytest.approx(5.00)


class TestTradeLifecycle:
    """OPEN -> CLOSED exactly once."""

    def test_open_trade_fields(self, ledger: TradeLedger):
        trade = ledger.open(
            7, "GBP/USD", "BUY", 0.5, 1.2650,
            stop_loss=1.2600, take_profit=1.2750, notes="breakout", opened_at=OPENED,
        )

        assert trade.status == "OPEN"
        assert trade.exit_price is None
        assert trade.pnl is None
        assert trade.closed_at is None
        assert trade.opened_at == OPENED
        assert trade.stop_loss == 1.2600
        assert trade.notes == "breakout"

    def test_close_sets_exit_fields(self, ledger: TradeLedger):
        trade = ledger.open(1, "EUR/USD", "BUY", 1.0, 1.1000, opened_at=OPENED)

        closed = ledger.close(trade.id, 1.0990, CLOSED)

        assert closed.status == "CLOSED"
        assert closed.exit_price == 1.0990
        assert closed.closed_at == CLOSED
        assert closed.entry_price == trade.entry_price
        assert closed.position_size == trade.position_size
        assert ledger.get(trade.id) == closed

    def test_second_close_rejected(self, ledger: TradeLedger):
        trade = ledger.open(1, "EUR/USD", "BUY", 1.0, 1.1000, opened_at=OPENED)
        first = ledger.close(trade.id, 1.1050, CLOSED)

        with pytest.raises(TradeAlreadyClosedError):
            ledger.close(trade.id, 1.2000, CLOSED + timedelta(hours=1))

        assert ledger.get(trade.id) == first

    def test_close_missing_trade(self, ledger: TradeLedger):
        assert ledger.close(999, 1.1, CLOSED) is None

    def test_close_rejects_non_positive_exit(self, ledger: TradeLedger):
        trade = ledger.open(1, "EUR/USD", "BUY", 1.0, 1.1000, opened_at=OPENED)

        with pytest.raises(ValueError):
            ledger.close(trade.id, 0.0, CLOSED)
        assert ledger.get(trade.id).status == "OPEN"


class TestInputValidation:
    """Sizes and prices must be positive."""

    @pytest.mark.parametrize(
        "size,price",
        [(0.0, 1.1), (-1.0, 1.1), (1.0, 0.0), (1.0, -1.1)],
    )
    def test_rejects_non_positive(self, ledger: TradeLedger, size: float, price: float):
        with pytest.raises(ValidationError):
            ledger.open(1, "EUR/USD", "BUY", size, price)

    def test_rejects_unknown_direction(self, ledger: TradeLedger):
        with pytest.raises(ValidationError):
            ledger.open(1, "EUR/USD", "LONG", 1.0, 1.1)

    def test_stop_loss_side_not_checked(self, ledger: TradeLedger):
        trade = ledger.open(1, "EUR/USD", "BUY", 1.0, 1.1, stop_loss=1.2)

        assert trade.stop_loss == 1.2


class TestTradeUpdate:
    def test_patch_notes(self, ledger: TradeLedger):
        trade = ledger.open(1, "EUR/USD", "BUY", 1.0, 1.1)

        updated = ledger.update(trade.id, notes="moved stop", stop_loss=1.095)

        assert updated.notes == "moved stop"
        assert updated.stop_loss == 1.095
        assert updated.entry_price == 1.1

    @pytest.mark.parametrize("field", ["entry_price", "position_size", "status", "pnl"])
    def test_immutable_fields_rejected(self, ledger: TradeLedger, field: str):
        trade = ledger.open(1, "EUR/USD", "BUY", 1.0, 1.1)

        with pytest.raises(ImmutableFieldError):
            ledger.update(trade.id, **{field: 2.0})

    @pytest.mark.parametrize("field", ["stop_loss", "take_profit"])
    @pytest.mark.parametrize("value", [0.0, -1.0])
    def test_patched_prices_must_be_positive(self, ledger: TradeLedger, field: str, value: float):
        trade = ledger.open(1, "EUR/USD", "BUY", 1.0, 1.1, stop_loss=1.09, take_profit=1.12)

        with pytest.raises(ValidationError):
            ledger.update(trade.id, **{field: value})

        assert ledger.get(trade.id) == trade

    def test_clear_stop_loss(self, ledger: TradeLedger):
        trade = ledger.open(1, "EUR/USD", "BUY", 1.0, 1.1, stop_loss=1.09)

        assert ledger.update(trade.id, stop_loss=None).stop_loss is None

    def test_update_missing_trade(self, ledger: TradeLedger):
        assert ledger.update(42, notes="x") is None


class TestTradeListing:
    def test_insertion_order_per_session(self, ledger: TradeLedger):
        a = ledger.open(1, "EUR/USD", "BUY", 1.0, 1.1)
        ledger.open(2, "EUR/USD", "BUY", 1.0, 1.1)
        b = ledger.open(1, "USD/JPY", "SELL", 2.0, 149.5)

        assert [t.id for t in ledger.list_trades(1)] == [a.id, b.id]

    def test_empty_session(self, ledger: TradeLedger):
        assert ledger.list_trades(5) == []
