"""Base store interface for fxreplay."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from fxreplay.market.series import PriceSeries
from fxreplay.models import Candle, JournalEntry, Session, Trade, TradeRequest, User


class BaseStore(ABC):
    """Abstract base class for storage backends.

    Every backend (in-memory, SQLite, etc.) must inherit from this class
    and implement all abstract methods. Lookups by ID return None when the
    record does not exist; deletes return False.
    """

    # ==================== Users ====================

    @abstractmethod
    def create_user(self, username: str, password: str) -> User:
        """Create a user.

        Args:
            username: Unique username.
            password: Password, stored as given.

        Returns:
            The created user with its assigned ID.
        """
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        pass

    # ==================== Sessions ====================

    @abstractmethod
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
        """Create a backtesting session.

        Args:
            user_id: Owning user ID.
            name: Session name.
            instrument: Currency pair traded in the session.
            starting_balance: Initial balance.
            current_balance: Defaults to ``starting_balance``.
            is_active: Active flag.
            current_time: Virtual clock start; backtesting sessions default
                to a point before the creation time.
            time_speed: Replay speed multiplier.
            is_backtesting: Backtesting flag.

        Returns:
            The created session.
        """
        pass

    @abstractmethod
    def get_session(self, session_id: int) -> Optional[Session]:
        pass

    @abstractmethod
    def get_sessions_by_user(self, user_id: int) -> list[Session]:
        pass

    @abstractmethod
    def update_session(self, session_id: int, **updates: Any) -> Optional[Session]:
        """Patch session fields and refresh ``updated_at``.

        Returns:
            The updated session, or None if it does not exist.
        """
        pass

    @abstractmethod
    def delete_session(self, session_id: int) -> bool:
        pass

    # ==================== Trades ====================

    @abstractmethod
    def create_trade(self, request: TradeRequest, opened_at: datetime) -> Trade:
        """Record a new OPEN trade.

        Args:
            request: Trade parameters.
            opened_at: Open timestamp.

        Returns:
            The created trade.
        """
        pass

    @abstractmethod
    def get_trade(self, trade_id: int) -> Optional[Trade]:
        pass

    @abstractmethod
    def get_trades_by_session(self, session_id: int) -> list[Trade]:
        """Get a session's trades in insertion order."""
        pass

    @abstractmethod
    def update_trade(self, trade_id: int, **updates: Any) -> Optional[Trade]:
        pass

    # ==================== Journal ====================

    @abstractmethod
    def create_journal_entry(
        self,
        session_id: int,
        title: str,
        content: str,
        trade_id: Optional[int] = None,
    ) -> JournalEntry:
        pass

    @abstractmethod
    def get_journal_entries_by_session(self, session_id: int) -> list[JournalEntry]:
        pass

    @abstractmethod
    def update_journal_entry(self, entry_id: int, **updates: Any) -> Optional[JournalEntry]:
        pass

    @abstractmethod
    def delete_journal_entry(self, entry_id: int) -> bool:
        pass

    # ==================== Price Series ====================

    @abstractmethod
    def save_candles(self, instrument: str, candles: list[Candle]) -> PriceSeries:
        """Store the price series for an instrument.

        Args:
            instrument: Currency pair.
            candles: Candles ordered oldest first.

        Returns:
            The stored series.
        """
        pass

    @abstractmethod
    def get_series(self, instrument: str) -> Optional[PriceSeries]:
        """Get the stored series, or None if the instrument has none."""
        pass

    @abstractmethod
    def get_instruments(self) -> list[str]:
        """Get instruments that have a stored series."""
        pass
