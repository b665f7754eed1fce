"""OHLC samples, validation and aggregation.

An :class:`OHLCData` holds one open/high/low/close sample.  Any field may
be ``None`` to mark a missing value; such samples are invalid and are
skipped by the pattern scanner, the trend-line math and the candlestick
renderer alike.
"""

from __future__ import annotations

import logging
import math
from typing import Any, List, Optional, Sequence

import pandas as pd
from pydantic import BaseModel, model_validator

logger = logging.getLogger(__name__)

OHLC_FIELDS = ("open", "high", "low", "close")


class OHLCData(BaseModel):
    """A single open/high/low/close sample.

    Besides keyword construction the model accepts a four element
    sequence in ``(open, high, low, close)`` order, which keeps test data
    and JSON input compact.
    """

    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: Optional[float] = None

    class Config:
        frozen = True

    @model_validator(mode="before")
    @classmethod
    def _from_sequence(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            if len(value) != 4:
                raise ValueError("an OHLC sample needs exactly four values")
            return dict(zip(OHLC_FIELDS, value))
        return value

    @property
    def body_top(self) -> float:
        return max(self.open, self.close)

    @property
    def body_bottom(self) -> float:
        return min(self.open, self.close)

    def is_bullish(self) -> bool:
        return self.close > self.open

    def is_bearish(self) -> bool:
        return self.close < self.open

    def field(self, name: str) -> Optional[float]:
        """Return the value of ``open``, ``high``, ``low`` or ``close``."""
        if name not in OHLC_FIELDS:
            raise ValueError(f"unknown OHLC field: {name}")
        return getattr(self, name)


def _is_number(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


def validate_ohlc(sample: OHLCData) -> bool:
    """Return True when *sample* is complete and internally consistent.

    A valid sample has no missing field and satisfies
    ``low <= min(open, close) <= max(open, close) <= high``.
    """
    if not all(_is_number(sample.field(name)) for name in OHLC_FIELDS):
        return False
    if sample.low > sample.high:
        return False
    return sample.low <= sample.body_bottom and sample.body_top <= sample.high


def field_values(data: Sequence[OHLCData], name: str) -> List[Optional[float]]:
    """Extract one field per sample; invalid samples yield ``None``."""
    values: List[Optional[float]] = []
    for sample in data:
        values.append(sample.field(name) if validate_ohlc(sample) else None)
    return values


def aggregate_ohlc(data: Sequence[OHLCData], period: int) -> List[OHLCData]:
    """Fold every *period* consecutive samples into one.

    Each window takes its open from the first valid sample, its close from
    the last valid sample, and the extreme high and low.  A trailing
    partial window is kept, so the result has ``ceil(n / period)``
    samples.  Invalid samples are ignored; a window without a valid
    sample becomes an all-``None`` sample.
    """
    if period <= 1:
        return list(data)
    result: List[OHLCData] = []
    for start in range(0, len(data), period):
        window = [s for s in data[start:start + period] if validate_ohlc(s)]
        if len(window) < min(period, len(data) - start):
            logger.debug("skipped %d invalid samples in window at %d",
                         min(period, len(data) - start) - len(window), start)
        if not window:
            result.append(OHLCData())
            continue
        result.append(
            OHLCData(
                open=window[0].open,
                high=max(s.high for s in window),
                low=min(s.low for s in window),
                close=window[-1].close,
            )
        )
    return result


def aggregate_labels(labels: Sequence[str], period: int) -> List[str]:
    """Reduce category labels to one per aggregated window.

    Each window keeps the label of its first sample.
    """
    if period <= 1:
        return list(labels)
    return [labels[i] for i in range(0, len(labels), period)]


def ohlc_from_dataframe(df: pd.DataFrame) -> List[OHLCData]:
    """Build samples from a frame with ``open/high/low/close`` columns.

    Column names are matched case-insensitively and ``NaN`` cells become
    ``None``.  Raises ValueError when a column is missing.
    """
    columns = {str(c).lower(): c for c in df.columns}
    missing = [name for name in OHLC_FIELDS if name not in columns]
    if missing:
        raise ValueError(f"dataframe is missing OHLC columns: {', '.join(missing)}")
    frame = df[[columns[name] for name in OHLC_FIELDS]].astype(float)
    samples: List[OHLCData] = []
    for row in frame.itertuples(index=False, name=None):
        samples.append(OHLCData(**{
            name: (None if pd.isna(value) else float(value)) for name, value in zip(OHLC_FIELDS, row)
        }))
    return samples


__all__ = [
    "OHLC_FIELDS",
    "OHLCData",
    "validate_ohlc",
    "field_values",
    "aggregate_ohlc",
    "aggregate_labels",
    "ohlc_from_dataframe",
]
