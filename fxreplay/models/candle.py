"""Candle (OHLCV) data model."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class Candle(BaseModel):
    """Represents a single hourly OHLCV sample for an instrument."""

    instrument: str = Field(..., min_length=1, description="Currency pair, e.g. EUR/USD")
    timestamp: datetime = Field(..., description="Candle open time (UTC)")
    open: float = Field(..., gt=0, description="Opening price")
    high: float = Field(..., gt=0, description="High price")
    low: float = Field(..., gt=0, description="Low price")
    close: float = Field(..., gt=0, description="Closing price")
    volume: int = Field(..., ge=0, description="Tick volume")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_range(self) -> "Candle":
        if not self.low <= min(self.open, self.close) <= max(self.open, self.close) <= self.high:
            raise ValueError(
                f"OHLC out of range: o={self.open} h={self.high} l={self.low} c={self.close}"
            )
        return self
