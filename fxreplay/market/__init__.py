"""Synthetic market data for fxreplay."""

from fxreplay.market.generator import PriceSeriesGenerator
from fxreplay.market.instruments import (
    CURRENCY_PAIRS,
    INSTRUMENTS,
    Instrument,
    get_instrument,
    is_supported,
)
from fxreplay.market.series import PriceSeries

__all__ = [
    "CURRENCY_PAIRS",
    "INSTRUMENTS",
    "Instrument",
    "PriceSeries",
    "PriceSeriesGenerator",
    "get_instrument",
    "is_supported",
]
