"""Backtesting engine for fxreplay."""

from fxreplay.engine.analytics import AnalyticsEngine, calculate_session_stats
from fxreplay.engine.clock import SessionClock
from fxreplay.engine.ledger import TradeLedger, calculate_trade_pnl
from fxreplay.engine.simulator import BacktestSimulator

__all__ = [
    "AnalyticsEngine",
    "BacktestSimulator",
    "SessionClock",
    "TradeLedger",
    "calculate_session_stats",
    "calculate_trade_pnl",
]
