"""Trade and TradeRequest data models."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

TradeDirection = Literal["BUY", "SELL"]
TradeStatus = Literal["OPEN", "CLOSED"]


class TradeRequest(BaseModel):
    """Represents a trade to be opened in a session."""

    session_id: int = Field(..., description="Owning session ID")
    instrument: str = Field(..., min_length=1, description="Currency pair")
    direction: TradeDirection = Field(..., description="Trade direction")
    position_size: float = Field(..., gt=0, description="Position size in lots")
    entry_price: float = Field(..., gt=0, description="Entry price")
    stop_loss: Optional[float] = Field(default=None, gt=0, description="Stop-loss price")
    take_profit: Optional[float] = Field(default=None, gt=0, description="Take-profit price")
    notes: Optional[str] = Field(default=None, description="Free-text notes")

    model_config = {"frozen": True}


class Trade(BaseModel):
    """Represents a simulated position, open or closed."""

    id: int = Field(..., description="Store ID")
    session_id: int = Field(..., description="Owning session ID")
    instrument: str = Field(..., min_length=1, description="Currency pair")
    direction: TradeDirection = Field(..., description="Trade direction")
    position_size: float = Field(..., gt=0, description="Position size in lots")
    entry_price: float = Field(..., gt=0, description="Entry price")
    stop_loss: Optional[float] = Field(default=None, gt=0, description="Stop-loss price")
    take_profit: Optional[float] = Field(default=None, gt=0, description="Take-profit price")
    exit_price: Optional[float] = Field(default=None, description="Exit price once closed")
    pnl: Optional[float] = Field(default=None, description="Realized P&L once closed")
    status: TradeStatus = Field(default="OPEN", description="Trade status")
    opened_at: datetime = Field(..., description="Open timestamp (UTC)")
    closed_at: Optional[datetime] = Field(default=None, description="Close timestamp (UTC)")
    notes: Optional[str] = Field(default=None, description="Free-text notes")

    model_config = {"frozen": True}

    @property
    def is_open(self) -> bool:
        return self.status == "OPEN"
