"""JournalEntry data model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class JournalEntry(BaseModel):
    """Represents a free-text note attached to a session and optionally a trade."""

    id: int = Field(..., description="Store ID")
    session_id: int = Field(..., description="Owning session ID")
    trade_id: Optional[int] = Field(default=None, description="Linked trade ID")
    title: str = Field(..., min_length=1, description="Entry title")
    content: str = Field(..., description="Entry body")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")

    model_config = {"frozen": True}
