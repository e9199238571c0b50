"""Supported currency pairs and their reference parameters."""

from pydantic import BaseModel, Field

from fxreplay.exceptions import UnsupportedInstrumentError


class Instrument(BaseModel):
    """Static parameters for one currency pair."""

    symbol: str = Field(..., description="Pair symbol, e.g. EUR/USD")
    base_price: float = Field(..., gt=0, description="Anchor price for synthesis")
    base_volatility: float = Field(..., gt=0, description="Hourly volatility as a price fraction")

    model_config = {"frozen": True}

    @property
    def pip_size(self) -> float:
        return 0.01 if self.symbol.endswith("/JPY") else 0.0001


INSTRUMENTS: dict[str, Instrument] = {
    inst.symbol: inst
    for inst in [
        Instrument(symbol="EUR/USD", base_price=1.0850, base_volatility=0.0010),
        Instrument(symbol="GBP/USD", base_price=1.2650, base_volatility=0.0012),
        Instrument(symbol="USD/JPY", base_price=149.50, base_volatility=0.0011),
        Instrument(symbol="AUD/USD", base_price=0.6580, base_volatility=0.0013),
        Instrument(symbol="USD/CAD", base_price=1.3620, base_volatility=0.0009),
        Instrument(symbol="NZD/USD", base_price=0.6120, base_volatility=0.0014),
        Instrument(symbol="EUR/GBP", base_price=0.8580, base_volatility=0.0007),
        Instrument(symbol="EUR/JPY", base_price=162.30, base_volatility=0.0012),
    ]
}

CURRENCY_PAIRS: list[str] = list(INSTRUMENTS)


def is_supported(symbol: str) -> bool:
    return symbol in INSTRUMENTS


def get_instrument(symbol: str) -> Instrument:
    """Get the parameters for a currency pair.

    Raises:
        UnsupportedInstrumentError: If the pair is not in the supported set.
    """
    try:
        return INSTRUMENTS[symbol]
    except KeyError:
        raise UnsupportedInstrumentError(symbol) from None


def normalize_symbol(symbol: str) -> str:
    """Normalize user input such as ``eurusd`` or ``eur_usd`` to ``EUR/USD``."""
    cleaned = symbol.strip().upper().replace("_", "/").replace("-", "/")
    if "/" not in cleaned and len(cleaned) == 6:
        cleaned = f"{cleaned[:3]}/{cleaned[3:]}"
    return cleaned


def pip_size(symbol: str) -> float:
    return get_instrument(symbol).pip_size


def pip_value(symbol: str, lot_size: float = 1.0) -> float:
    """Simplified pip value in account currency: 10 per standard lot.

    Ignores the quote currency and account conversion.
    """
    get_instrument(symbol)
    return 10 * lot_size


def price_change(current: float, previous: float) -> tuple[float, float]:
    """Return (absolute change, percentage change) between two prices."""
    change = current - previous
    percentage = (change / previous * 100) if previous else 0.0
    return change, percentage
