"""Candlestick analytics: OHLC handling, trend lines and pattern detection."""

from .indicators import TrendLine, compute_trend
from .ohlc import OHLCData, aggregate_labels, aggregate_ohlc, ohlc_from_dataframe, validate_ohlc
from .pattern_labels import format_patterns_default
from .patterns import (
    CandlestickPatternConfig,
    PatternDetectionResult,
    merge_patterns,
    pattern_config_for,
    scan_for_candlestick_patterns,
)

__all__ = [
    "TrendLine",
    "compute_trend",
    "OHLCData",
    "aggregate_labels",
    "aggregate_ohlc",
    "ohlc_from_dataframe",
    "validate_ohlc",
    "format_patterns_default",
    "CandlestickPatternConfig",
    "PatternDetectionResult",
    "merge_patterns",
    "pattern_config_for",
    "scan_for_candlestick_patterns",
]
