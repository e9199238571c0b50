"""SQLite store scaffold for fxreplay.

Creates the relational schema a durable backend would use. The data
operations are not implemented yet; use ``MemoryStore`` for simulation.
"""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, NoReturn, Optional

from fxreplay.db.base import BaseStore
from fxreplay.market.series import PriceSeries
from fxreplay.models import Candle, JournalEntry, Session, Trade, TradeRequest, User


class SQLiteStore(BaseStore):
    """SQLite-backed store (schema only)."""

    REQUIRED_TABLES = [
        "users",
        "sessions",
        "trades",
        "journal_entries",
        "forex_prices",
    ]

    def __init__(self, db_path: Path):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL UNIQUE,
                    password TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS sessions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    currency_pair TEXT NOT NULL,
                    starting_balance REAL NOT NULL,
                    current_balance REAL NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    is_active INTEGER NOT NULL DEFAULT 0,
                    "current_time" TEXT,
                    time_speed INTEGER DEFAULT 1,
                    is_backtesting INTEGER DEFAULT 1
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trades (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    session_id INTEGER NOT NULL,
                    currency_pair TEXT NOT NULL,
                    type TEXT NOT NULL,
                    position_size REAL NOT NULL,
                    entry_price REAL NOT NULL,
                    stop_loss REAL,
                    take_profit REAL,
                    exit_price REAL,
                    pnl REAL,
                    status TEXT NOT NULL DEFAULT 'OPEN',
                    opened_at TEXT NOT NULL,
                    closed_at TEXT,
                    notes TEXT
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS journal_entries (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    session_id INTEGER NOT NULL,
                    trade_id INTEGER,
                    title TEXT NOT NULL,
                    content TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS forex_prices (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    pair TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    open REAL NOT NULL,
                    high REAL NOT NULL,
                    low REAL NOT NULL,
                    close REAL NOT NULL,
                    volume INTEGER NOT NULL,
                    UNIQUE(pair, timestamp)
                )
            """)

            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    def _unsupported(self, operation: str) -> NoReturn:
        raise NotImplementedError(
            f"SQLiteStore.{operation} is not implemented; use MemoryStore"
        )

    def create_user(self, username: str, password: str) -> User:
        self._unsupported("create_user")

    def get_user(self, user_id: int) -> Optional[User]:
        self._unsupported("get_user")

    def get_user_by_username(self, username: str) -> Optional[User]:
        self._unsupported("get_user_by_username")

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
        self._unsupported("create_session")

    def get_session(self, session_id: int) -> Optional[Session]:
        self._unsupported("get_session")

    def get_sessions_by_user(self, user_id: int) -> list[Session]:
        self._unsupported("get_sessions_by_user")

    def update_session(self, session_id: int, **updates: Any) -> Optional[Session]:
        self._unsupported("update_session")

    def delete_session(self, session_id: int) -> bool:
        self._unsupported("delete_session")

    def create_trade(self, request: TradeRequest, opened_at: datetime) -> Trade:
        self._unsupported("create_trade")

    def get_trade(self, trade_id: int) -> Optional[Trade]:
        self._unsupported("get_trade")

    def get_trades_by_session(self, session_id: int) -> list[Trade]:
        self._unsupported("get_trades_by_session")

    def update_trade(self, trade_id: int, **updates: Any) -> Optional[Trade]:
        self._unsupported("update_trade")

    def create_journal_entry(
        self,
        session_id: int,
        title: str,
        content: str,
        trade_id: Optional[int] = None,
    ) -> JournalEntry:
        self._unsupported("create_journal_entry")

    def get_journal_entries_by_session(self, session_id: int) -> list[JournalEntry]:
        self._unsupported("get_journal_entries_by_session")

    def update_journal_entry(self, entry_id: int, **updates: Any) -> Optional[JournalEntry]:
        self._unsupported("update_journal_entry")

    def delete_journal_entry(self, entry_id: int) -> bool:
        self._unsupported("delete_journal_entry")

    def save_candles(self, instrument: str, candles: list[Candle]) -> PriceSeries:
        self._unsupported("save_candles")

    def get_series(self, instrument: str) -> Optional[PriceSeries]:
        self._unsupported("get_series")

    def get_instruments(self) -> list[str]:
        self._unsupported("get_instruments")
