"""Data models for fxreplay."""

from fxreplay.models.candle import Candle
from fxreplay.models.journal import JournalEntry
from fxreplay.models.session import Session, User
from fxreplay.models.stats import SessionStats
from fxreplay.models.trade import Trade, TradeDirection, TradeRequest, TradeStatus

__all__ = [
    "Candle",
    "JournalEntry",
    "Session",
    "SessionStats",
    "Trade",
    "TradeDirection",
    "TradeRequest",
    "TradeStatus",
    "User",
]
