"""SessionStats data model."""

from pydantic import BaseModel, Field


class SessionStats(BaseModel):
    """Point-in-time performance snapshot of a session's closed trades."""

    total_pnl: float = Field(default=0.0, description="Sum of realized P&L")
    win_rate: float = Field(default=0.0, ge=0, le=100, description="Win rate percentage")
    total_trades: int = Field(default=0, ge=0, description="Number of closed trades")
    max_drawdown: float = Field(default=0.0, ge=0, description="Largest peak-to-trough decline")
    avg_trade: float = Field(default=0.0, description="Average P&L per closed trade")
    winning_trades: int = Field(default=0, ge=0, description="Trades with P&L above zero")
    losing_trades: int = Field(default=0, ge=0, description="Trades with P&L at or below zero")

    model_config = {"frozen": True}
