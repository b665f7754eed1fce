"""Tests for trend line computations."""

from __future__ import annotations

import pytest

from chartforge.features.indicators import (
    TrendLine,
    bollinger_lower,
    bollinger_upper,
    compute_trend,
    cubic,
    default_period,
    ema,
    linear,
    rsi,
    scale_oscillator,
    sma,
)


def _approx(values):
    return [None if v is None else pytest.approx(v, abs=1e-9) for v in values]


def test_sma() -> None:
    assert sma([1, 2, 3, 4, 5], 2) == _approx([None, 1.5, 2.5, 3.5, 4.5])


def test_sma_skips_missing_samples() -> None:
    """A window always holds real values; gaps stay None."""
    assert sma([1, None, 3, 5], 2) == _approx([None, None, 2, 4])


def test_sma_too_short() -> None:
    assert sma([1, 2], 5) == [None, None]


def test_default_period() -> None:
    assert default_period(10, 0) == 2
    assert default_period(100, 0) == 20
    assert default_period(100, 7) == 7
    assert sma(list(range(10))) == sma(list(range(10)), 2)


def test_ema_is_seeded_with_the_simple_average() -> None:
    assert ema([1, 2, 3, 4, 5], 3) == _approx([None, None, 2, 3, 4])


def test_linear_fits_every_index() -> None:
    assert linear([0, None, 2, 3]) == _approx([0, 1, 2, 3])
    assert linear([4]) == [None]


def test_cubic_falls_back_to_linear() -> None:
    assert cubic([1, 2, 3]) == _approx(linear([1, 2, 3]))
    values = [x ** 3 for x in range(6)]
    assert cubic(values) == _approx(values)


def test_bollinger_bands_of_a_constant_series() -> None:
    values = [5.0] * 6
    assert bollinger_upper(values, 3) == _approx([None, None, 5, 5, 5, 5])
    assert bollinger_lower(values, 3) == _approx([None, None, 5, 5, 5, 5])


def test_bollinger_bands_are_symmetric() -> None:
    values = [1, 3, 2, 5, 4, 6]
    upper = bollinger_upper(values, 3)
    lower = bollinger_lower(values, 3)
    middle = sma(values, 3)
    for u, lo, m in zip(upper[2:], lower[2:], middle[2:]):
        assert u - m == pytest.approx(m - lo)
        assert u > lo


def test_rsi_of_a_rising_series() -> None:
    assert rsi([1, 2, 3, 4, 5, 6], 3) == _approx([None, None, None, 100, 100, 100])


def test_rsi_stays_in_range() -> None:
    values = [10, 11, 9, 12, 8, 13, 7, 14, 10, 9]
    for value in rsi(values, 3):
        assert value is None or 0 <= value <= 100


def test_compute_trend_dispatch() -> None:
    assert compute_trend([1, 2, 3, 4, 5], "sma", 2) == sma([1, 2, 3, 4, 5], 2)
    with pytest.raises(ValueError, match="unknown trend type"):
        compute_trend([1, 2, 3], "wma")


def test_scale_oscillator() -> None:
    assert scale_oscillator([0, 50, None, 100], 10, 20) == _approx([10, 15, None, 20])


def test_trend_line_defaults() -> None:
    line = TrendLine()
    assert line.type == "sma"
    assert line.period == 0
    assert line.color.is_zero()
    with pytest.raises(ValueError):
        TrendLine(type="wma")
