"""Trend line computations for chart series.

Each function takes the raw samples of one series (``None`` marks a
missing value) and returns a list of the same length.  Positions where
the indicator is undefined, the warm-up head of a moving window or a
missing input sample, hold ``None`` so the renderer breaks the line
there instead of drawing partial segments.

Windows are causal: the value at index ``i`` only depends on samples at
``i`` and before.  Missing samples are skipped, so a window always holds
``period`` real values.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Literal, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..drawing.color import Color
from ..fields import ColorField, OptionModel

logger = logging.getLogger(__name__)

TREND_SMA = "sma"
TREND_EMA = "ema"
TREND_LINEAR = "linear"
TREND_CUBIC = "cubic"
TREND_BOLLINGER_UPPER = "bollinger_upper"
TREND_BOLLINGER_LOWER = "bollinger_lower"
TREND_RSI = "rsi"

TrendType = Literal["sma", "ema", "linear", "cubic", "bollinger_upper", "bollinger_lower", "rsi"]

BOLLINGER_MULTIPLIER = 2.0


class TrendLine(OptionModel):
    """A trend line drawn over a series.

    Attributes:
        type: Indicator kind.
        period: Window length; 0 picks ``max(2, n // 5)`` from the number
            of valid samples.
        color: Line color; unset uses the series color.
        stroke_width: Line width; 0 uses the default of 2.
        dashed: Force a dashed or solid line; ``None`` follows the chart
            default, which is dashed over line and bar series and solid
            over candlesticks.
        tension: Smoothing tension in [0, 1]; 0 draws straight segments.
    """

    type: TrendType = TREND_SMA
    period: int = 0
    color: ColorField = Color()
    stroke_width: float = 0.0
    dashed: Optional[bool] = None
    tension: float = 0.0


def _clean(values: Sequence[Optional[float]]) -> Tuple[np.ndarray, List[int]]:
    indexes = []
    data = []
    for i, value in enumerate(values):
        if value is None or not np.isfinite(value):
            continue
        indexes.append(i)
        data.append(float(value))
    return np.asarray(data, dtype=float), indexes


def _scatter(size: int, indexes: Sequence[int], fitted: Sequence[float]) -> List[Optional[float]]:
    result: List[Optional[float]] = [None] * size
    for index, value in zip(indexes, fitted):
        if value is None or not np.isfinite(value):
            continue
        result[index] = float(value)
    return result


def default_period(count: int, period: int) -> int:
    if period > 0:
        return period
    return max(2, count // 5)


def sma(values: Sequence[Optional[float]], period: int = 0) -> List[Optional[float]]:
    """Simple moving average over the last *period* valid samples."""
    data, indexes = _clean(values)
    period = default_period(len(data), period)
    if len(data) < period:
        return [None] * len(values)
    fitted = pd.Series(data).rolling(window=period, min_periods=period).mean()
    return _scatter(len(values), indexes, fitted.to_numpy())


def ema(values: Sequence[Optional[float]], period: int = 0) -> List[Optional[float]]:
    """Exponential moving average with ``alpha = 2 / (period + 1)``.

    The first defined value is the simple average of the first *period*
    samples; later values follow ``E[i] = alpha * v[i] + (1 - alpha) * E[i-1]``.
    """
    data, indexes = _clean(values)
    period = default_period(len(data), period)
    if len(data) < period:
        return [None] * len(values)
    alpha = 2.0 / (period + 1.0)
    seed = data[:period].mean()
    seeded = pd.Series(np.concatenate(([seed], data[period:])))
    smoothed = seeded.ewm(alpha=alpha, adjust=False).mean().to_numpy()
    fitted = np.concatenate((np.full(period - 1, np.nan), smoothed))
    return _scatter(len(values), indexes, fitted)


def _polynomial(values: Sequence[Optional[float]], degree: int) -> List[Optional[float]]:
    data, indexes = _clean(values)
    if len(data) < 2:
        return [None] * len(values)
    x = np.asarray(indexes, dtype=float)
    coefficients = np.polyfit(x, data, degree)
    fitted = np.polyval(coefficients, np.arange(len(values), dtype=float))
    return [float(v) for v in fitted]


def linear(values: Sequence[Optional[float]], period: int = 0) -> List[Optional[float]]:
    """Least-squares line through the valid samples, defined at every index."""
    return _polynomial(values, 1)


def cubic(values: Sequence[Optional[float]], period: int = 0) -> List[Optional[float]]:
    """Least-squares cubic; fewer than four samples fall back to a line."""
    data, _ = _clean(values)
    if len(data) < 4:
        return linear(values)
    return _polynomial(values, 3)


def _bollinger(values: Sequence[Optional[float]], period: int, multiplier: float) -> List[Optional[float]]:
    data, indexes = _clean(values)
    period = default_period(len(data), period)
    if len(data) < period:
        return [None] * len(values)
    series = pd.Series(data)
    mean = series.rolling(window=period, min_periods=period).mean()
    std = series.rolling(window=period, min_periods=period).std(ddof=0)
    return _scatter(len(values), indexes, (mean + multiplier * std).to_numpy())


def bollinger_upper(values: Sequence[Optional[float]], period: int = 0) -> List[Optional[float]]:
    """Moving average plus two population standard deviations."""
    return _bollinger(values, period, BOLLINGER_MULTIPLIER)


def bollinger_lower(values: Sequence[Optional[float]], period: int = 0) -> List[Optional[float]]:
    """Moving average minus two population standard deviations."""
    return _bollinger(values, period, -BOLLINGER_MULTIPLIER)


def rsi(values: Sequence[Optional[float]], period: int = 0) -> List[Optional[float]]:
    """Relative strength index (0..100) using Wilder smoothing.

    The first *period* valid samples only seed the average gain and loss,
    so the index is defined from the ``period``-th change onward.
    """
    data, indexes = _clean(values)
    period = default_period(len(data), period)
    if len(data) < period + 1:
        return [None] * len(values)
    changes = np.diff(data)
    gains = np.where(changes > 0, changes, 0.0)
    losses = np.where(changes < 0, -changes, 0.0)
    avg_gain = gains[:period].mean()
    avg_loss = losses[:period].mean()
    fitted = [np.nan] * period
    for i in range(period, len(data)):
        if avg_loss == 0:
            fitted.append(100.0)
        else:
            fitted.append(100.0 - 100.0 / (1.0 + avg_gain / avg_loss))
        if i < len(gains):
            avg_gain = (avg_gain * (period - 1) + gains[i]) / period
            avg_loss = (avg_loss * (period - 1) + losses[i]) / period
    return _scatter(len(values), indexes, fitted)


TREND_FUNCTIONS: Dict[str, Callable[[Sequence[Optional[float]], int], List[Optional[float]]]] = {
    TREND_SMA: sma,
    TREND_EMA: ema,
    TREND_LINEAR: linear,
    TREND_CUBIC: cubic,
    TREND_BOLLINGER_UPPER: bollinger_upper,
    TREND_BOLLINGER_LOWER: bollinger_lower,
    TREND_RSI: rsi,
}


def compute_trend(values: Sequence[Optional[float]], trend_type: str, period: int = 0) -> List[Optional[float]]:
    """Dispatch to the indicator named by *trend_type*.

    Raises ValueError for an unknown type.
    """
    func = TREND_FUNCTIONS.get(trend_type)
    if func is None:
        raise ValueError(f"unknown trend type: {trend_type}")
    return func(values, period)


def scale_oscillator(values: Sequence[Optional[float]], low: float, high: float) -> List[Optional[float]]:
    """Map 0..100 oscillator values onto the ``[low, high]`` axis range."""
    span = high - low
    return [None if v is None else low + v / 100.0 * span for v in values]


__all__ = [
    "TREND_SMA",
    "TREND_EMA",
    "TREND_LINEAR",
    "TREND_CUBIC",
    "TREND_BOLLINGER_UPPER",
    "TREND_BOLLINGER_LOWER",
    "TREND_RSI",
    "TrendType",
    "TrendLine",
    "sma",
    "ema",
    "linear",
    "cubic",
    "bollinger_upper",
    "bollinger_lower",
    "rsi",
    "compute_trend",
    "scale_oscillator",
    "default_period",
]
