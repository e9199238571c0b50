"""User and backtesting Session data models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    """Owner of backtesting sessions."""

    id: int = Field(..., description="Store ID")
    username: str = Field(..., min_length=1, description="Unique username")
    password: str = Field(..., description="Password (stored as given, no auth layer)")

    model_config = {"frozen": True}


class Session(BaseModel):
    """Represents one backtesting run with its own virtual clock."""

    id: int = Field(..., description="Store ID")
    user_id: int = Field(..., description="Owning user ID")
    name: str = Field(..., min_length=1, description="Session name")
    instrument: str = Field(..., min_length=1, description="Chosen currency pair")
    starting_balance: float = Field(..., description="Balance at session start")
    current_balance: float = Field(..., description="Balance after realized P&L")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: datetime = Field(..., description="Last modification timestamp (UTC)")
    is_active: bool = Field(default=False, description="Whether the session is active")
    current_time: Optional[datetime] = Field(
        default=None, description="Virtual clock cursor (UTC)"
    )
    time_speed: int = Field(default=1, description="Replay speed multiplier")
    is_backtesting: bool = Field(default=True, description="Backtesting flag")

    model_config = {"frozen": True}
