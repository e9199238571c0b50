"""Property-based tests for synthetic price generation.

**Feature: fxreplay price series**
"""

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from fxreplay.exceptions import UnsupportedInstrumentError
from fxreplay.market.generator import (
    DEFAULT_LOOKBACK,
    MAX_DRIFT,
    OVERLAP_MULTIPLIER,
    PriceSeriesGenerator,
    volatility_multiplier,
)
from fxreplay.market.instruments import CURRENCY_PAIRS, INSTRUMENTS, Instrument

# Wednesday
ANCHOR = datetime(2026, 9, 30, 12, 34, 56, tzinfo=timezone.utc)


class TestCandleInvariant:
    """
    *For any* generated candle, low <= min(open, close) <= max(open, close)
    <= high and volume >= 0.
    """

    @given(
        seed=st.integers(min_value=0, max_value=100000),
        pair=st.sampled_from(CURRENCY_PAIRS),
    )
    @settings(max_examples=25, deadline=None)
    def test_ohlc_ordering(self, seed: int, pair: str):
        candles = PriceSeriesGenerator(seed=seed, lookback=500).generate(pair, ANCHOR)

        for candle in candles:
            assert candle.low <= min(candle.open, candle.close)
            assert min(candle.open, candle.close) <= max(candle.open, candle.close)
            assert max(candle.open, candle.close) <= candle.high
            assert candle.volume >= 0
            assert candle.low > 0

    @pytest.mark.parametrize("pair", CURRENCY_PAIRS)
    def test_full_series_invariant(self, pair: str):
        candles = PriceSeriesGenerator(seed=11).generate(pair, ANCHOR)

        assert all(c.low <= min(c.open, c.close) for c in candles)
        assert all(max(c.open, c.close) <= c.high for c in candles)

    def test_prices_have_five_decimals(self):
        candles = PriceSeriesGenerator(seed=3, lookback=200).generate("EUR/USD", ANCHOR)

        for candle in candles:
            for price in (candle.open, candle.high, candle.low, candle.close):
                assert round(price, 5) == price


class TestSeriesOrdering:
    """
    *For any* generated series, timestamps are strictly increasing, exactly
    one hour apart, and the length equals the lookback.
    """

    @pytest.mark.parametrize("pair", CURRENCY_PAIRS)
    def test_length_and_spacing(self, pair: str):
        candles = PriceSeriesGenerator(seed=1).generate(pair, ANCHOR)

        assert len(candles) == DEFAULT_LOOKBACK == 4380
        for prev, curr in zip(candles, candles[1:]):
            assert curr.timestamp - prev.timestamp == timedelta(hours=1)

    def test_series_ends_at_anchor_hour(self):
        candles = PriceSeriesGenerator(seed=1).generate("EUR/USD", ANCHOR)

        assert candles[-1].timestamp == datetime(2026, 9, 30, 12, 0, tzinfo=timezone.utc)
        assert candles[-1].timestamp <= ANCHOR
        assert candles[0].timestamp == candles[-1].timestamp - timedelta(hours=DEFAULT_LOOKBACK - 1)

    def test_candles_carry_instrument(self):
        candles = PriceSeriesGenerator(seed=1, lookback=10).generate("USD/JPY", ANCHOR)

        assert {c.instrument for c in candles} == {"USD/JPY"}

    @given(lookback=st.integers(min_value=1, max_value=300))
    @settings(max_examples=20, deadline=None)
    def test_custom_lookback(self, lookback: int):
        candles = PriceSeriesGenerator(seed=5, lookback=lookback).generate("EUR/GBP", ANCHOR)

        assert len(candles) == lookback


class TestBoundedDrift:
    """
    *For any* generated series, no open or close lies more than 15% from
    the pair's base price.
    """

    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4, 79])
    @pytest.mark.parametrize("pair", CURRENCY_PAIRS)
    def test_close_within_drift_band(self, seed: int, pair: str):
        base = INSTRUMENTS[pair].base_price
        candles = PriceSeriesGenerator(seed=seed).generate(pair, ANCHOR)

        worst = max(abs(c.close - base) / base for c in candles)
        assert worst <= MAX_DRIFT

    @given(
        seed=st.integers(min_value=0, max_value=10**6),
        pair=st.sampled_from(CURRENCY_PAIRS),
    )
    @settings(max_examples=20, deadline=None)
    def test_any_seed_within_drift_band(self, seed: int, pair: str):
        base = INSTRUMENTS[pair].base_price
        candles = PriceSeriesGenerator(seed=seed).generate(pair, ANCHOR)

        assert all(abs(c.close - base) / base <= MAX_DRIFT for c in candles)

    def test_clamp_contains_high_volatility_walk(self):
        wild = Instrument(symbol="EUR/USD", base_price=1.0, base_volatility=0.02)
        generator = PriceSeriesGenerator(seed=99)
        timestamps = [ANCHOR + timedelta(hours=i) for i in range(DEFAULT_LOOKBACK)]

        candles = generator._walk(wild, timestamps)

        assert max(abs(c.close - 1.0) for c in candles) <= MAX_DRIFT
        assert max(abs(c.open - 1.0) for c in candles) <= MAX_DRIFT


class TestVolatilityMultiplier:
    """Session-based volatility scaling."""

    def test_london_new_york_overlap_is_highest(self):
        overlap = datetime(2026, 9, 30, 13, tzinfo=timezone.utc)
        london_only = datetime(2026, 9, 30, 9, tzinfo=timezone.utc)
        asia = datetime(2026, 9, 30, 3, tzinfo=timezone.utc)
        late = datetime(2026, 9, 30, 22, tzinfo=timezone.utc)

        assert volatility_multiplier(overlap) == OVERLAP_MULTIPLIER
        assert volatility_multiplier(overlap) > volatility_multiplier(london_only)
        assert volatility_multiplier(london_only) > volatility_multiplier(asia)
        assert volatility_multiplier(asia) > volatility_multiplier(late)

    @given(hour=st.integers(min_value=0, max_value=23))
    @settings(max_examples=24)
    def test_weekend_is_damped(self, hour: int):
        wednesday = datetime(2026, 9, 30, hour, tzinfo=timezone.utc)
        saturday = datetime(2026, 10, 3, hour, tzinfo=timezone.utc)

        assert volatility_multiplier(saturday) < volatility_multiplier(wednesday)


class TestDeterminism:
    """Seeded generation is reproducible and independent per pair."""

    def test_same_seed_same_series(self):
        first = PriceSeriesGenerator(seed=42, lookback=100).generate("GBP/USD", ANCHOR)
        second = PriceSeriesGenerator(seed=42, lookback=100).generate("GBP/USD", ANCHOR)

        assert first == second

    def test_pairs_do_not_share_stream(self):
        generator = PriceSeriesGenerator(seed=42, lookback=100)
        alone = generator.generate("AUD/USD", ANCHOR)

        generator.generate("NZD/USD", ANCHOR)
        again = generator.generate("AUD/USD", ANCHOR)

        assert alone == again

    def test_unseeded_runs_differ(self):
        first = PriceSeriesGenerator(lookback=100).generate("EUR/USD", ANCHOR)
        second = PriceSeriesGenerator(lookback=100).generate("EUR/USD", ANCHOR)

        assert [c.close for c in first] != [c.close for c in second]


class TestGenerateRange:
    """Explicit start/end generation."""

    def test_inclusive_range(self):
        start = datetime(2026, 9, 1, tzinfo=timezone.utc)
        end = datetime(2026, 9, 1, 5, tzinfo=timezone.utc)

        candles = PriceSeriesGenerator(seed=1).generate_range("EUR/USD", start, end)

        assert [c.timestamp for c in candles] == [start + timedelta(hours=i) for i in range(6)]

    def test_custom_interval(self):
        start = datetime(2026, 9, 1, tzinfo=timezone.utc)
        end = datetime(2026, 9, 1, 1, tzinfo=timezone.utc)

        candles = PriceSeriesGenerator(seed=1).generate_range("EUR/USD", start, end, 15)

        assert len(candles) == 5

    def test_end_before_start_is_empty(self):
        start = datetime(2026, 9, 2, tzinfo=timezone.utc)

        assert PriceSeriesGenerator(seed=1).generate_range(
            "EUR/USD", start, start - timedelta(hours=1)
        ) == []


class TestGeneratorErrors:
    def test_unsupported_pair(self):
        with pytest.raises(UnsupportedInstrumentError):
            PriceSeriesGenerator(seed=1).generate("BTC/USD", ANCHOR)

    @pytest.mark.parametrize("kwargs", [{"lookback": 0}, {"interval_minutes": 0}])
    def test_rejects_non_positive_settings(self, kwargs: dict):
        with pytest.raises(ValueError):
            PriceSeriesGenerator(**kwargs)

    @pytest.mark.parametrize("interval", [0, -60])
    def test_range_rejects_non_positive_interval(self, interval: int):
        start = datetime(2026, 9, 1, tzinfo=timezone.utc)

        with pytest.raises(ValueError):
            PriceSeriesGenerator(seed=1).generate_range(
                "EUR/USD", start, start + timedelta(hours=2), interval
            )
