"""Read-only price series with time-range and nearest-time lookups."""

from bisect import bisect_left, bisect_right
from collections.abc import Iterator, Sequence
from datetime import datetime
from typing import Optional

from fxreplay.models import Candle
from fxreplay.timeutils import to_utc


class PriceSeries(Sequence):
    """An immutable, time-ordered run of candles for one instrument.

    Timestamps are indexed once at construction so range queries and
    nearest-time lookups are binary searches.
    """

    def __init__(self, instrument: str, candles: list[Candle]):
        """Initialize the series.

        Args:
            instrument: Currency pair the candles belong to.
            candles: Candles ordered oldest first.

        Raises:
            ValueError: If timestamps are not strictly increasing or a
                candle belongs to another instrument.
        """
        self.instrument = instrument
        self._candles = tuple(candles)
        self._timestamps = [to_utc(c.timestamp) for c in self._candles]

        for candle in self._candles:
            if candle.instrument != instrument:
                raise ValueError(
                    f"Candle for {candle.instrument} in {instrument} series"
                )
        for prev, curr in zip(self._timestamps, self._timestamps[1:]):
            if curr <= prev:
                raise ValueError(f"Timestamps not strictly increasing at {curr.isoformat()}")

    def __len__(self) -> int:
        return len(self._candles)

    def __getitem__(self, index):
        return self._candles[index]

    def __iter__(self) -> Iterator[Candle]:
        return iter(self._candles)

    @property
    def candles(self) -> list[Candle]:
        return list(self._candles)

    def latest(self) -> Optional[Candle]:
        return self._candles[-1] if self._candles else None

    def between(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Candle]:
        """Get candles with ``start <= timestamp <= end``.

        Either bound may be omitted.
        """
        lo = bisect_left(self._timestamps, to_utc(start)) if start else 0
        hi = bisect_right(self._timestamps, to_utc(end)) if end else len(self._candles)
        return list(self._candles[lo:hi])

    def nearest(self, instant: datetime) -> Optional[Candle]:
        """Get the candle whose timestamp is closest to ``instant``.

        When ``instant`` is exactly halfway between two candles the earlier
        one is returned. Instants outside the series resolve to the first
        or last candle.

        Args:
            instant: Target time.

        Returns:
            The nearest candle, or None if the series is empty.
        """
        if not self._candles:
            return None

        instant = to_utc(instant)
        index = bisect_left(self._timestamps, instant)
        if index == 0:
            return self._candles[0]
        if index == len(self._candles):
            return self._candles[-1]

        before = self._timestamps[index - 1]
        after = self._timestamps[index]
        if instant - before <= after - instant:
            return self._candles[index - 1]
        return self._candles[index]
