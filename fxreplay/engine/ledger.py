"""Trade ledger: opening, closing and patching simulated trades."""

import logging
from datetime import datetime
from typing import Any, Optional

from fxreplay.db.base import BaseStore
from fxreplay.exceptions import ImmutableFieldError, TradeAlreadyClosedError
from fxreplay.models import Trade, TradeDirection, TradeRequest
from fxreplay.timeutils import to_utc, utc_now

logger = logging.getLogger(__name__)

# Units of base currency per standard lot
STANDARD_LOT = 100000

PNL_DECIMALS = 2

# Fixed at open, or changed only by close()
IMMUTABLE_FIELDS = frozenset({
    "id",
    "session_id",
    "instrument",
    "direction",
    "position_size",
    "entry_price",
    "opened_at",
    "status",
    "exit_price",
    "pnl",
    "closed_at",
})


def calculate_trade_pnl(
    direction: TradeDirection,
    entry_price: float,
    exit_price: float,
    position_size: float,
    lot_multiplier: float = STANDARD_LOT,
) -> float:
    """Realized P&L for a position, rounded to cents.

    Uses a flat lot multiplier, ignoring pair-specific pip values and
    account currency conversion.
    """
    if direction == "BUY":
        move = exit_price - entry_price
    else:
        move = entry_price - exit_price
    return round(move * position_size * lot_multiplier, PNL_DECIMALS)


class TradeLedger:
    """Owns the OPEN -> CLOSED lifecycle of trades in a store."""

    def __init__(self, store: BaseStore, lot_multiplier: float = STANDARD_LOT):
        self._store = store
        self.lot_multiplier = lot_multiplier

    def open(
        self,
        session_id: int,
        instrument: str,
        direction: TradeDirection,
        position_size: float,
        entry_price: float,
        stop_loss: Optional[float] = None,
        take_profit: Optional[float] = None,
        notes: Optional[str] = None,
        opened_at: Optional[datetime] = None,
    ) -> Trade:
        """Open a trade.

        Args:
            session_id: Owning session.
            instrument: Currency pair.
            direction: BUY or SELL.
            position_size: Size in lots, must be positive.
            entry_price: Entry price, must be positive.
            stop_loss: Optional stop-loss price.
            take_profit: Optional take-profit price.
            notes: Optional notes.
            opened_at: Open time; defaults to wall-clock now.

        Returns:
            The new OPEN trade.

        Raises:
            pydantic.ValidationError: If size or prices are not positive.
        """
        request = TradeRequest(
            session_id=session_id,
            instrument=instrument,
            direction=direction,
            position_size=position_size,
            entry_price=entry_price,
            stop_loss=stop_loss,
            take_profit=take_profit,
            notes=notes,
        )
        trade = self._store.create_trade(request, opened_at or utc_now())
        logger.info(
            "Opened trade %d: %s %s x%s @ %s",
            trade.id, direction, instrument, position_size, entry_price,
        )
        return trade

    def close(
        self,
        trade_id: int,
        exit_price: float,
        closed_at: Optional[datetime] = None,
    ) -> Optional[Trade]:
        """Close an open trade and record its realized P&L.

        Args:
            trade_id: Trade to close.
            exit_price: Exit price, must be positive.
            closed_at: Close time; defaults to wall-clock now.

        Returns:
            The CLOSED trade, or None if it does not exist.

        Raises:
            TradeAlreadyClosedError: If the trade was closed before.
            ValueError: If the exit price is not positive.
        """
        trade = self._store.get_trade(trade_id)
        if trade is None:
            return None
        if not trade.is_open:
            raise TradeAlreadyClosedError(trade_id)
        if exit_price <= 0:
            raise ValueError(f"Exit price must be positive, got {exit_price}")

        pnl = calculate_trade_pnl(
            trade.direction,
            trade.entry_price,
            exit_price,
            trade.position_size,
            self.lot_multiplier,
        )
        closed = self._store.update_trade(
            trade_id,
            status="CLOSED",
            exit_price=exit_price,
            pnl=pnl,
            closed_at=to_utc(closed_at or utc_now()),
        )
        logger.info("Closed trade %d @ %s, P&L %.2f", trade_id, exit_price, pnl)
        return closed

    def update(self, trade_id: int, **fields: Any) -> Optional[Trade]:
        """Patch editable trade fields (notes, stop-loss, take-profit).

        Returns:
            The patched trade, or None if it does not exist.

        Raises:
            ImmutableFieldError: If a field fixed at open or set by close
                is included.
            pydantic.ValidationError: If a patched price is not positive.
        """
        blocked = [name for name in fields if name in IMMUTABLE_FIELDS]
        if blocked:
            raise ImmutableFieldError(blocked)

        trade = self._store.get_trade(trade_id)
        if trade is None:
            return None
        Trade.model_validate({**trade.model_dump(), **fields})
        return self._store.update_trade(trade_id, **fields)

    def get(self, trade_id: int) -> Optional[Trade]:
        return self._store.get_trade(trade_id)

    def list_trades(self, session_id: int) -> list[Trade]:
        """Get a session's trades in the order they were opened."""
        return self._store.get_trades_by_session(session_id)
