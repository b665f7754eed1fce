"""Tests for OHLC samples, validation, aggregation and DataFrame import."""

from __future__ import annotations

import math
import random

import pandas as pd
import pytest

from chartforge.features.ohlc import (
    OHLCData,
    aggregate_labels,
    aggregate_ohlc,
    field_values,
    ohlc_from_dataframe,
    validate_ohlc,
)
from chartforge.features.indicators import TrendLine
from chartforge.features.patterns import PATTERN_DOJI, CandlestickPatternConfig
from chartforge.options import CandlestickSeries, aggregate_candlestick, new_mark_line, new_mark_point


def _make_six_samples():
    return [
        OHLCData(open=100, high=110, low=95, close=105),
        OHLCData(open=105, high=115, low=100, close=112),
        OHLCData(open=112, high=118, low=108, close=115),
        OHLCData(open=115, high=120, low=110, close=118),
        OHLCData(open=118, high=125, low=115, close=122),
        OHLCData(open=122, high=128, low=120, close=125),
    ]


def _make_random_samples(count: int, seed: int):
    rng = random.Random(seed)
    samples = []
    price = 100.0
    for _ in range(count):
        open_ = price
        close = price + rng.uniform(-5, 5)
        high = max(open_, close) + rng.uniform(0, 3)
        low = min(open_, close) - rng.uniform(0, 3)
        samples.append(OHLCData(open=open_, high=high, low=low, close=close))
        price = close
    return samples


def test_sequence_construction() -> None:
    sample = OHLCData.model_validate([1, 4, 0.5, 3])
    assert (sample.open, sample.high, sample.low, sample.close) == (1, 4, 0.5, 3)
    assert sample.field("high") == 4
    with pytest.raises(ValueError):
        sample.field("volume")
    with pytest.raises(ValueError):
        OHLCData.model_validate([1, 2, 3])


@pytest.mark.parametrize(
    "values,expected",
    [
        ((100, 110, 95, 105), True),
        ((100, 100, 100, 100), True),
        ((100, 104, 95, 105), False),
        ((100, 110, 101, 105), False),
        ((100, 90, 110, 105), False),
        ((None, 110, 95, 105), False),
        ((100, float("nan"), 95, 105), False),
        ((100, float("inf"), 95, 105), False),
    ],
)
def test_validate_ohlc(values, expected: bool) -> None:
    """Valid means complete and low <= body <= high."""
    sample = OHLCData(**dict(zip(("open", "high", "low", "close"), values)))
    assert validate_ohlc(sample) is expected


def test_validate_ohlc_matches_definition_on_random_samples() -> None:
    rng = random.Random(7)
    for _ in range(200):
        o, h, lo, c = (rng.choice([None, rng.uniform(90, 110)]) if rng.random() < 0.1 else rng.uniform(90, 110)
                       for _ in range(4))
        sample = OHLCData(open=o, high=h, low=lo, close=c)
        complete = None not in (o, h, lo, c)
        expected = complete and lo <= min(o, c) <= max(o, c) <= h
        assert validate_ohlc(sample) is bool(expected)


def test_aggregate_pairs() -> None:
    """Six samples with period 2 fold into three windows."""
    result = aggregate_ohlc(_make_six_samples(), 2)
    assert [s.open for s in result] == [100, 112, 118]
    assert [s.close for s in result] == [112, 118, 125]
    assert [s.high for s in result] == [115, 120, 128]
    assert [s.low for s in result] == [95, 108, 115]


@pytest.mark.parametrize("period", [1, 2, 3, 4, 7, 50])
def test_aggregate_invariants(period: int) -> None:
    samples = _make_random_samples(23, seed=period)
    result = aggregate_ohlc(samples, period)
    assert len(result) == math.ceil(len(samples) / period)
    assert max(s.high for s in result) == max(s.high for s in samples)
    assert min(s.low for s in result) == min(s.low for s in samples)
    for i, aggregated in enumerate(result):
        window = samples[i * period:(i + 1) * period]
        assert aggregated.open == window[0].open
        assert aggregated.close == window[-1].close


def test_aggregate_skips_invalid_samples() -> None:
    samples = [
        OHLCData(open=1, high=2, low=0.5, close=1.5),
        OHLCData(open=None, high=2, low=0.5, close=1.5),
        OHLCData(),
        OHLCData(),
    ]
    result = aggregate_ohlc(samples, 2)
    assert result[0] == OHLCData(open=1, high=2, low=0.5, close=1.5)
    assert result[1] == OHLCData()


def test_aggregate_candlestick_keeps_series_settings() -> None:
    """Only the samples change; every other field of the series is carried over."""
    series = CandlestickSeries(
        name="ACME",
        data=_make_six_samples(),
        y_axis_index=1,
        candle_style="traditional",
        show_wicks=False,
        candle_width=0.6,
        pattern_config=CandlestickPatternConfig(enabled_patterns=[PATTERN_DOJI]),
        close_trend_lines=[TrendLine(type="sma", period=2)],
        high_mark_point=new_mark_point("max"),
        low_mark_line=new_mark_line("min"),
    )
    result = aggregate_candlestick(series, 2)
    assert result is not series
    assert result.data == aggregate_ohlc(series.data, 2)
    assert len(result.data) == 3
    assert result.model_dump(exclude={"data"}) == series.model_dump(exclude={"data"})
    assert len(series.data) == 6


def test_aggregate_candlestick_period_one_is_a_copy() -> None:
    series = CandlestickSeries(name="ACME", data=_make_six_samples())
    assert aggregate_candlestick(series, 1).data == series.data


def test_aggregate_labels_keep_first_of_window() -> None:
    assert aggregate_labels(["a", "b", "c", "d", "e"], 2) == ["a", "c", "e"]
    assert aggregate_labels(["a", "b"], 1) == ["a", "b"]


def test_field_values_null_for_invalid() -> None:
    samples = [OHLCData(open=1, high=2, low=0.5, close=1.5), OHLCData(open=1, high=0, low=0.5, close=1.5)]
    assert field_values(samples, "close") == [1.5, None]


def test_ohlc_from_dataframe() -> None:
    """Columns match case-insensitively and NaN becomes None."""
    frame = pd.DataFrame(
        {
            "Date": ["2025-01-02", "2025-01-03"],
            "Open": [10.0, 11.0],
            "HIGH": [12.0, float("nan")],
            "low": [9.0, 10.5],
            "Close": [11.0, 10.8],
        }
    )
    samples = ohlc_from_dataframe(frame)
    assert samples[0] == OHLCData(open=10, high=12, low=9, close=11)
    assert samples[1].high is None
    assert not validate_ohlc(samples[1])


def test_ohlc_from_dataframe_missing_column() -> None:
    with pytest.raises(ValueError, match="close"):
        ohlc_from_dataframe(pd.DataFrame({"open": [1], "high": [2], "low": [0]}))
