"""Session performance statistics."""

from typing import Iterable, Literal

from fxreplay.db.base import BaseStore
from fxreplay.models import SessionStats, Trade

TradeOrder = Literal["opened", "closed"]


def calculate_session_stats(
    trades: Iterable[Trade],
    order: TradeOrder = "opened",
) -> SessionStats:
    """Calculate performance metrics from a session's trades.

    Only CLOSED trades count. A trade with zero P&L counts as a loss.
    Drawdown is the largest fall of cumulative P&L below its running
    peak, where the peak starts at zero.

    Args:
        trades: Trades in insertion order.
        order: ``"opened"`` walks trades in insertion order; ``"closed"``
            walks them by close time, which gives a chronological drawdown
            when positions were closed out of order.

    Returns:
        SessionStats snapshot.
    """
    closed = [t for t in trades if t.status == "CLOSED"]
    if order == "closed":
        closed.sort(key=lambda t: (t.closed_at, t.id))

    total_pnl = 0.0
    winning_trades = 0
    losing_trades = 0
    running_pnl = 0.0
    peak = 0.0
    max_drawdown = 0.0

    for trade in closed:
        pnl = trade.pnl or 0.0
        total_pnl += pnl
        running_pnl += pnl

        if pnl > 0:
            winning_trades += 1
        else:
            losing_trades += 1

        peak = max(peak, running_pnl)
        max_drawdown = max(max_drawdown, peak - running_pnl)

    total_trades = len(closed)
    win_rate = (winning_trades / total_trades * 100) if total_trades > 0 else 0.0
    avg_trade = (total_pnl / total_trades) if total_trades > 0 else 0.0

    return SessionStats(
        total_pnl=total_pnl,
        win_rate=win_rate,
        total_trades=total_trades,
        max_drawdown=max_drawdown,
        avg_trade=avg_trade,
        winning_trades=winning_trades,
        losing_trades=losing_trades,
    )


class AnalyticsEngine:
    """Computes statistics for sessions held in a store.

    Stats are recomputed from the trade log on every call.
    """

    def __init__(self, store: BaseStore):
        self._store = store

    def get_session_stats(self, session_id: int, order: TradeOrder = "opened") -> SessionStats:
        """Get statistics for a session; an unknown session yields empty stats."""
        return calculate_session_stats(self._store.get_trades_by_session(session_id), order)
