"""Synthetic OHLCV price series generation.

Produces an hourly random-walk series per currency pair whose volatility
follows the trading sessions (Asia, London, New York) and whose drift
follows a weekly sine wave. The walk is pulled back toward the pair's base
price whenever it wanders more than ``MAX_DRIFT`` away from it.
"""

import logging
import math
import random
from datetime import datetime, timedelta
from typing import Optional

from fxreplay.market.instruments import Instrument, get_instrument
from fxreplay.models import Candle
from fxreplay.timeutils import floor_to_interval, to_utc

logger = logging.getLogger(__name__)

# Roughly six months of hourly candles
DEFAULT_LOOKBACK = 4380
DEFAULT_INTERVAL_MINUTES = 60

# Session hours in UTC, [start, end)
LONDON_HOURS = (7, 16)
NEW_YORK_HOURS = (12, 21)
ASIA_HOURS = (0, 7)

OVERLAP_MULTIPLIER = 1.8
MAJOR_SESSION_MULTIPLIER = 1.3
ASIA_MULTIPLIER = 0.8
OFF_HOURS_MULTIPLIER = 0.5
WEEKEND_DAMPING = 0.3

# Fraction of base volatility used as the amplitude of the weekly trend
TREND_STRENGTH = 0.1
WEEK_SECONDS = 7 * 24 * 3600

MAX_DRIFT = 0.15
PULL_BACK = 0.5

BASE_VOLUME_RANGE = (50000, 150000)
SPIKE_THRESHOLD = 0.7
SPIKE_RANGE = (1.5, 3.0)

PRICE_DECIMALS = 5
PRICE_TICK = 10 ** -PRICE_DECIMALS


def _in_hours(hour: int, window: tuple[int, int]) -> bool:
    return window[0] <= hour < window[1]


def volatility_multiplier(timestamp: datetime) -> float:
    """Volatility scale for a candle starting at ``timestamp`` (UTC).

    London/New York overlap is the most active window, a single major
    session is next, then Asia, then the late-evening lull. Saturdays and
    Sundays are further damped.
    """
    timestamp = to_utc(timestamp)
    hour = timestamp.hour
    london = _in_hours(hour, LONDON_HOURS)
    new_york = _in_hours(hour, NEW_YORK_HOURS)

    if london and new_york:
        multiplier = OVERLAP_MULTIPLIER
    elif london or new_york:
        multiplier = MAJOR_SESSION_MULTIPLIER
    elif _in_hours(hour, ASIA_HOURS):
        multiplier = ASIA_MULTIPLIER
    else:
        multiplier = OFF_HOURS_MULTIPLIER

    if timestamp.weekday() >= 5:
        multiplier *= WEEKEND_DAMPING
    return multiplier


def trend_bias(timestamp: datetime, price: float, base_volatility: float) -> float:
    """Weekly sinusoidal drift applied on top of the random term."""
    phase = 2 * math.pi * (to_utc(timestamp).timestamp() % WEEK_SECONDS) / WEEK_SECONDS
    return math.sin(phase) * base_volatility * price * TREND_STRENGTH


class PriceSeriesGenerator:
    """Generates synthetic hourly candles for the supported currency pairs.

    With a ``seed`` every pair gets its own reproducible random stream, so
    generating one pair never changes the candles of another. Without a
    seed the output differs on every run.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        lookback: int = DEFAULT_LOOKBACK,
        interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
    ):
        """Initialize the generator.

        Args:
            seed: Optional seed for reproducible series.
            lookback: Number of candles per generated series.
            interval_minutes: Spacing between consecutive candles.
        """
        if lookback <= 0:
            raise ValueError("lookback must be positive")
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")
        self.seed = seed
        self.lookback = lookback
        self.interval_minutes = interval_minutes

    def _rng(self, symbol: str) -> random.Random:
        if self.seed is None:
            return random.Random()
        return random.Random(f"{self.seed}:{symbol}")

    def generate(self, symbol: str, anchor: datetime) -> list[Candle]:
        """Generate the lookback window of candles ending at ``anchor``.

        The last candle starts at ``anchor`` rounded down to the interval.

        Args:
            symbol: Currency pair.
            anchor: End of the window (usually process start time).

        Returns:
            Candles ordered oldest first, ``lookback`` of them.

        Raises:
            UnsupportedInstrumentError: If the pair is not supported.
        """
        instrument = get_instrument(symbol)
        step = timedelta(minutes=self.interval_minutes)
        last = floor_to_interval(anchor, self.interval_minutes)
        first = last - step * (self.lookback - 1)
        timestamps = [first + step * i for i in range(self.lookback)]

        candles = self._walk(instrument, timestamps)
        logger.info(
            "Generated %d candles for %s ending %s",
            len(candles), symbol, last.isoformat(),
        )
        return candles

    def generate_range(
        self,
        symbol: str,
        start: datetime,
        end: datetime,
        interval_minutes: Optional[int] = None,
    ) -> list[Candle]:
        """Generate candles from ``start`` to ``end`` inclusive.

        Args:
            symbol: Currency pair.
            start: First candle timestamp.
            end: Upper bound for the last candle timestamp.
            interval_minutes: Override for the candle spacing.

        Returns:
            Candles ordered oldest first; empty if ``end`` precedes ``start``.

        Raises:
            UnsupportedInstrumentError: If the pair is not supported.
            ValueError: If ``interval_minutes`` is not positive.
        """
        instrument = get_instrument(symbol)
        if interval_minutes is None:
            interval_minutes = self.interval_minutes
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")
        step = timedelta(minutes=interval_minutes)
        start, end = to_utc(start), to_utc(end)

        timestamps = []
        current = start
        while current <= end:
            timestamps.append(current)
            current += step
        return self._walk(instrument, timestamps)

    def _walk(self, instrument: Instrument, timestamps: list[datetime]) -> list[Candle]:
        rng = self._rng(instrument.symbol)
        price = instrument.base_price
        candles = []
        for timestamp in timestamps:
            candle = self._next_candle(rng, instrument, timestamp, price)
            candles.append(candle)
            price = candle.close
        return candles

    def _next_candle(
        self,
        rng: random.Random,
        instrument: Instrument,
        timestamp: datetime,
        price: float,
    ) -> Candle:
        """Build one candle starting from the previous close ``price``."""
        base = instrument.base_price
        multiplier = volatility_multiplier(timestamp)
        spread = instrument.base_volatility * multiplier * price

        change = rng.gauss(0.0, 0.5) * spread + trend_bias(
            timestamp, price, instrument.base_volatility
        )
        price += change

        if abs(price - base) / base > MAX_DRIFT:
            price += (base - price) * PULL_BACK

        high = price + rng.random() * spread * 0.5
        low = price - rng.random() * spread * 0.5
        open_ = low + rng.random() * (high - low)
        close = low + rng.random() * (high - low)

        # Keep open and close one tick inside the drift band after rounding
        band_high = round(base * (1 + MAX_DRIFT) - PRICE_TICK, PRICE_DECIMALS)
        band_low = round(base * (1 - MAX_DRIFT) + PRICE_TICK, PRICE_DECIMALS)
        open_ = min(max(round(open_, PRICE_DECIMALS), band_low), band_high)
        close = min(max(round(close, PRICE_DECIMALS), band_low), band_high)
        # Rounding and the band clamp can move open/close past the extremes
        high = max(round(high, PRICE_DECIMALS), open_, close)
        low = min(round(low, PRICE_DECIMALS), open_, close)

        volume = rng.randint(*BASE_VOLUME_RANGE) * multiplier
        if abs(change) > SPIKE_THRESHOLD * spread:
            volume *= rng.uniform(*SPIKE_RANGE)

        return Candle(
            instrument=instrument.symbol,
            timestamp=timestamp,
            open=open_,
            high=high,
            low=low,
            close=close,
            volume=int(volume),
        )
