"""In-memory store for fxreplay."""

import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from fxreplay.db.base import BaseStore
from fxreplay.market.series import PriceSeries
from fxreplay.models import Candle, JournalEntry, Session, Trade, TradeRequest, User
from fxreplay.timeutils import to_utc, utc_now

logger = logging.getLogger(__name__)


class MemoryStore(BaseStore):
    """Process-local store holding every entity in dictionaries.

    Each entity type has its own mapping and its own auto-increment
    counter starting at 1. A single lock guards ID allocation and all
    mutations. Nothing is persisted.
    """

    DEFAULT_BACKTEST_OFFSET = timedelta(days=30)

    def __init__(
        self,
        backtest_offset: timedelta = DEFAULT_BACKTEST_OFFSET,
        now: Callable[[], datetime] = utc_now,
    ):
        """Initialize the store.

        Args:
            backtest_offset: How far before creation a backtesting
                session's virtual clock starts.
            now: Wall-clock source, replaceable in tests.
        """
        self._backtest_offset = backtest_offset
        self._now = now
        self._lock = threading.RLock()

        self._users: dict[int, User] = {}
        self._sessions: dict[int, Session] = {}
        self._trades: dict[int, Trade] = {}
        self._journal: dict[int, JournalEntry] = {}
        self._series: dict[str, PriceSeries] = {}
        self._next_ids = {"user": 1, "session": 1, "trade": 1, "journal": 1}

    def _allocate_id(self, entity: str) -> int:
        with self._lock:
            new_id = self._next_ids[entity]
            self._next_ids[entity] += 1
            return new_id

    # ==================== Users ====================

    def create_user(self, username: str, password: str) -> User:
        with self._lock:
            user = User(id=self._allocate_id("user"), username=username, password=password)
            self._users[user.id] = user
            return user

    def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self._users.values() if u.username == username), None)

    # ==================== Sessions ====================

    def create_session(
        self,
        user_id: int,
        name: str,
        instrument: str,
        starting_balance: float,
        current_balance: Optional[float] = None,
        is_active: bool = False,
        current_time: Optional[datetime] = None,
        time_speed: int = 1,
        is_backtesting: bool = True,
    ) -> Session:
        now = self._now()
        if current_time is not None:
            current_time = to_utc(current_time)
        elif is_backtesting:
            current_time = now - self._backtest_offset

        with self._lock:
            session = Session(
                id=self._allocate_id("session"),
                user_id=user_id,
                name=name,
                instrument=instrument,
                starting_balance=starting_balance,
                current_balance=starting_balance if current_balance is None else current_balance,
                created_at=now,
                updated_at=now,
                is_active=is_active,
                current_time=current_time,
                time_speed=time_speed,
                is_backtesting=is_backtesting,
            )
            self._sessions[session.id] = session

        logger.info("Created session %d (%s, %s)", session.id, name, instrument)
        return session

    def get_session(self, session_id: int) -> Optional[Session]:
        return self._sessions.get(session_id)

    def get_sessions_by_user(self, user_id: int) -> list[Session]:
        with self._lock:
            return [s for s in self._sessions.values() if s.user_id == user_id]

    def update_session(self, session_id: int, **updates: Any) -> Optional[Session]:
        updates.pop("id", None)
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            updated = session.model_copy(update={**updates, "updated_at": self._now()})
            self._sessions[session_id] = updated
            return updated

    def delete_session(self, session_id: int) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    # ==================== Trades ====================

    def create_trade(self, request: TradeRequest, opened_at: datetime) -> Trade:
        with self._lock:
            trade = Trade(
                id=self._allocate_id("trade"),
                opened_at=to_utc(opened_at),
                status="OPEN",
                **request.model_dump(),
            )
            self._trades[trade.id] = trade
            return trade

    def get_trade(self, trade_id: int) -> Optional[Trade]:
        return self._trades.get(trade_id)

    def get_trades_by_session(self, session_id: int) -> list[Trade]:
        # dicts keep insertion order, which is also ID order
        with self._lock:
            return [t for t in self._trades.values() if t.session_id == session_id]

    def update_trade(self, trade_id: int, **updates: Any) -> Optional[Trade]:
        updates.pop("id", None)
        with self._lock:
            trade = self._trades.get(trade_id)
            if trade is None:
                return None
            updated = trade.model_copy(update=updates)
            self._trades[trade_id] = updated
            return updated

    # ==================== Journal ====================

    def create_journal_entry(
        self,
        session_id: int,
        title: str,
        content: str,
        trade_id: Optional[int] = None,
    ) -> JournalEntry:
        with self._lock:
            entry = JournalEntry(
                id=self._allocate_id("journal"),
                session_id=session_id,
                trade_id=trade_id,
                title=title,
                content=content,
                created_at=self._now(),
            )
            self._journal[entry.id] = entry
            return entry

    def get_journal_entries_by_session(self, session_id: int) -> list[JournalEntry]:
        with self._lock:
            return [e for e in self._journal.values() if e.session_id == session_id]

    def update_journal_entry(self, entry_id: int, **updates: Any) -> Optional[JournalEntry]:
        updates.pop("id", None)
        with self._lock:
            entry = self._journal.get(entry_id)
            if entry is None:
                return None
            updated = entry.model_copy(update=updates)
            self._journal[entry_id] = updated
            return updated

    def delete_journal_entry(self, entry_id: int) -> bool:
        with self._lock:
            return self._journal.pop(entry_id, None) is not None

    # ==================== Price Series ====================

    def save_candles(self, instrument: str, candles: list[Candle]) -> PriceSeries:
        series = PriceSeries(instrument, candles)
        with self._lock:
            self._series[instrument] = series
        return series

    def get_series(self, instrument: str) -> Optional[PriceSeries]:
        return self._series.get(instrument)

    def get_instruments(self) -> list[str]:
        with self._lock:
            return list(self._series)
