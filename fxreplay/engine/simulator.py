"""Backtesting simulator facade.

Wires the price store, session clock, trade ledger and analytics engine
together. "The price now" for a session is the close of the candle nearest
to the session's virtual time, and trades opened or closed without an
explicit price are filled at that price.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from fxreplay.config import SimulatorConfig
from fxreplay.db.base import BaseStore
from fxreplay.db.memory import MemoryStore
from fxreplay.engine.analytics import AnalyticsEngine, TradeOrder
from fxreplay.engine.clock import SessionClock
from fxreplay.engine.ledger import TradeLedger
from fxreplay.market.generator import PriceSeriesGenerator
from fxreplay.market.instruments import CURRENCY_PAIRS
from fxreplay.models import Candle, JournalEntry, Session, SessionStats, Trade, TradeDirection, User
from fxreplay.timeutils import to_utc, utc_now

logger = logging.getLogger(__name__)


class BacktestSimulator:
    """Single-process forex backtesting simulator."""

    def __init__(
        self,
        store: BaseStore,
        generator: Optional[PriceSeriesGenerator] = None,
        config: Optional[SimulatorConfig] = None,
    ):
        """Initialize the simulator.

        Args:
            store: Storage backend shared by all components.
            generator: Price generator; built from ``config`` if omitted.
            config: Settings; defaults are used if omitted.
        """
        self.config = config or SimulatorConfig()
        self.store = store
        self.generator = generator or PriceSeriesGenerator(
            seed=self.config.market.seed,
            lookback=self.config.market.lookback_hours,
            interval_minutes=self.config.market.interval_minutes,
        )
        self.clock = SessionClock(store)
        self.ledger = TradeLedger(store, lot_multiplier=self.config.ledger.lot_multiplier)
        self.analytics = AnalyticsEngine(store)

    @classmethod
    def from_config(
        cls,
        config: Optional[SimulatorConfig] = None,
        anchor: Optional[datetime] = None,
    ) -> "BacktestSimulator":
        """Build an in-memory simulator with every pair's series generated."""
        config = config or SimulatorConfig()
        store = MemoryStore(
            backtest_offset=timedelta(days=config.session.backtest_offset_days)
        )
        simulator = cls(store, config=config)
        simulator.initialize(anchor)
        return simulator

    # ==================== Price Data ====================

    def initialize(self, anchor: Optional[datetime] = None) -> None:
        """Generate the series for every supported pair not yet stored."""
        anchor = anchor or utc_now()
        existing = set(self.store.get_instruments())
        for pair in CURRENCY_PAIRS:
            if pair not in existing:
                self.generate_price_series(pair, anchor)

    def generate_price_series(self, instrument: str, anchor: Optional[datetime] = None) -> list[Candle]:
        """Generate and store the series for one pair.

        Raises:
            UnsupportedInstrumentError: If the pair is not supported.
        """
        candles = self.generator.generate(instrument, anchor or utc_now())
        self.store.save_candles(instrument, candles)
        return candles

    def get_prices(
        self,
        instrument: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Optional[list[Candle]]:
        """Get candles within ``[start, end]``.

        Returns:
            Matching candles (possibly empty), or None if the instrument has
            no series.
        """
        series = self.store.get_series(instrument)
        if series is None:
            return None
        return series.between(start, end)

    def get_current_price(self, instrument: str) -> Optional[float]:
        """Get the close of the most recent candle."""
        series = self.store.get_series(instrument)
        latest = series.latest() if series else None
        return latest.close if latest else None

    def get_historical_price(self, instrument: str, instant: datetime) -> Optional[float]:
        """Get the close of the candle nearest to ``instant``."""
        series = self.store.get_series(instrument)
        if series is None:
            return None
        candle = series.nearest(instant)
        if candle is None:
            return None
        logger.debug("%s @ %s -> candle %s", instrument, instant, candle.timestamp)
        return candle.close

    def get_session_price(
        self,
        session_id: int,
        instrument: Optional[str] = None,
    ) -> Optional[float]:
        """Get the price of a pair at the session's virtual time.

        Falls back to the latest close when the session does not exist or
        its clock is unset.

        Args:
            session_id: Session whose clock is used.
            instrument: Pair to price; defaults to the session's pair.
        """
        session = self.store.get_session(session_id)
        pair = instrument or (session.instrument if session else None)
        if pair is None:
            return None
        if session and session.current_time:
            price = self.get_historical_price(pair, session.current_time)
            if price is not None:
                return price
        return self.get_current_price(pair)

    # ==================== Users & Sessions ====================

    def create_user(self, username: str, password: str) -> User:
        return self.store.create_user(username, password)

    def create_session(
        self,
        user_id: int,
        name: str,
        instrument: str,
        starting_balance: Optional[float] = None,
        current_time: Optional[datetime] = None,
        is_active: bool = True,
        is_backtesting: bool = True,
    ) -> Session:
        """Create a session using configured defaults for balance and speed."""
        balance = starting_balance if starting_balance is not None else self.config.session.starting_balance
        return self.store.create_session(
            user_id=user_id,
            name=name,
            instrument=instrument,
            starting_balance=balance,
            is_active=is_active,
            current_time=current_time,
            time_speed=self.config.session.time_speed,
            is_backtesting=is_backtesting,
        )

    def get_session(self, session_id: int) -> Optional[Session]:
        return self.store.get_session(session_id)

    def update_session(self, session_id: int, **updates: Any) -> Optional[Session]:
        return self.store.update_session(session_id, **updates)

    def delete_session(self, session_id: int) -> bool:
        return self.store.delete_session(session_id)

    def set_session_time(self, session_id: int, instant: datetime) -> Optional[Session]:
        return self.clock.set_time(session_id, instant)

    def advance_session_time(self, session_id: int, minutes: int) -> Optional[Session]:
        return self.clock.advance_time(session_id, minutes)

    # ==================== Trades ====================

    def _session_instant(self, session: Session) -> datetime:
        return session.current_time or utc_now()

    def open_trade(
        self,
        session_id: int,
        instrument: str,
        direction: TradeDirection,
        position_size: float,
        entry_price: Optional[float] = None,
        stop_loss: Optional[float] = None,
        take_profit: Optional[float] = None,
        notes: Optional[str] = None,
        opened_at: Optional[datetime] = None,
    ) -> Optional[Trade]:
        """Open a trade in a session.

        Without ``entry_price`` the trade fills at the session price; without
        ``opened_at`` it is stamped with the session's virtual time.

        Returns:
            The new trade, or None if the session does not exist or no
            price is available for the instrument.
        """
        session = self.store.get_session(session_id)
        if session is None:
            return None
        if entry_price is None:
            entry_price = self.get_session_price(session_id, instrument)
            if entry_price is None:
                return None

        return self.ledger.open(
            session_id=session_id,
            instrument=instrument,
            direction=direction,
            position_size=position_size,
            entry_price=entry_price,
            stop_loss=stop_loss,
            take_profit=take_profit,
            notes=notes,
            opened_at=to_utc(opened_at) if opened_at else self._session_instant(session),
        )

    def close_trade(
        self,
        trade_id: int,
        exit_price: Optional[float] = None,
        closed_at: Optional[datetime] = None,
    ) -> Optional[Trade]:
        """Close a trade and credit its P&L to the session balance.

        Without ``exit_price`` the trade fills at the session price; without
        ``closed_at`` it is stamped with the session's virtual time.

        Returns:
            The closed trade, or None if the trade does not exist or no
            price is available.

        Raises:
            TradeAlreadyClosedError: If the trade was closed before.
        """
        trade = self.ledger.get(trade_id)
        if trade is None:
            return None

        session = self.store.get_session(trade.session_id)
        if exit_price is None:
            exit_price = self.get_session_price(trade.session_id, trade.instrument)
            if exit_price is None:
                return None
        if closed_at is None:
            closed_at = self._session_instant(session) if session else utc_now()

        closed = self.ledger.close(trade_id, exit_price, closed_at)
        if closed and session:
            self.store.update_session(
                session.id,
                current_balance=round(session.current_balance + closed.pnl, 2),
            )
        return closed

    def update_trade(self, trade_id: int, **fields: Any) -> Optional[Trade]:
        return self.ledger.update(trade_id, **fields)

    def get_trade(self, trade_id: int) -> Optional[Trade]:
        return self.ledger.get(trade_id)

    def get_trades(self, session_id: int) -> list[Trade]:
        return self.ledger.list_trades(session_id)

    # ==================== Journal ====================

    def add_journal_entry(
        self,
        session_id: int,
        title: str,
        content: str,
        trade_id: Optional[int] = None,
    ) -> JournalEntry:
        return self.store.create_journal_entry(session_id, title, content, trade_id)

    def get_journal(self, session_id: int) -> list[JournalEntry]:
        return self.store.get_journal_entries_by_session(session_id)

    # ==================== Analytics ====================

    def get_session_stats(self, session_id: int, order: TradeOrder = "opened") -> SessionStats:
        return self.analytics.get_session_stats(session_id, order)
