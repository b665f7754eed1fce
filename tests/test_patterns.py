"""Tests for candlestick pattern detection."""

from __future__ import annotations

import logging
from typing import List, Sequence

import pytest

from chartforge.drawing.fonts import LabelStyle
from chartforge.features.ohlc import OHLCData
from chartforge.features.pattern_labels import format_patterns_default
from chartforge.features.patterns import (
    PATTERN_DARK_CLOUD_COVER,
    PATTERN_DOJI,
    PATTERN_ENGULFING_BEAR,
    PATTERN_ENGULFING_BULL,
    PATTERN_HAMMER,
    PATTERN_MARUBOZU_BEAR,
    PATTERN_MARUBOZU_BULL,
    PATTERN_MORNING_STAR,
    PATTERN_PIERCING_LINE,
    PATTERN_SHOOTING_STAR,
    PRESETS,
    CandlestickPatternConfig,
    PatternDetectionResult,
    merge_patterns,
    pattern_config_for,
    pattern_display_name,
    preset_patterns,
    scan_for_candlestick_patterns,
)
from chartforge.theme import get_theme


def _make_bars(rows: Sequence[Sequence[float]]) -> List[OHLCData]:
    """Build samples from ``(open, high, low, close)`` rows."""
    return [OHLCData.model_validate(list(row)) for row in rows]


def _types(result, index: int) -> List[str]:
    return [r.pattern_type for r in result.get(index, [])]


def test_doji_with_tight_threshold() -> None:
    """A 0.01 body over a 15 point range is a doji at threshold 0.001."""
    bars = _make_bars([(100, 110, 95, 100.01), (105, 115, 100, 112)])
    config = CandlestickPatternConfig(enabled_patterns=[PATTERN_DOJI], doji_threshold=0.001)
    result = scan_for_candlestick_patterns(bars, config)
    assert result == {0: [PatternDetectionResult(0, "Doji", PATTERN_DOJI)]}
    assert 1 not in result


def test_bullish_engulfing() -> None:
    bars = _make_bars([(110, 112, 105, 106), (104, 115, 103, 114)])
    config = CandlestickPatternConfig(enabled_patterns=[PATTERN_ENGULFING_BULL], engulfing_min_size=0.8)
    result = scan_for_candlestick_patterns(bars, config)
    assert list(result) == [1]
    assert _types(result, 1) == [PATTERN_ENGULFING_BULL]


def test_bearish_engulfing_needs_opposite_colors() -> None:
    bars = _make_bars([(104, 115, 103, 114), (116, 117, 101, 102)])
    config = CandlestickPatternConfig(enabled_patterns=[PATTERN_ENGULFING_BEAR, PATTERN_ENGULFING_BULL])
    assert _types(scan_for_candlestick_patterns(bars, config), 1) == [PATTERN_ENGULFING_BEAR]


@pytest.mark.parametrize(
    "rows,pattern,index",
    [
        ([(10, 10.5, 7, 10.4)], PATTERN_HAMMER, 0),
        ([(10, 13, 9.9, 10.3)], PATTERN_SHOOTING_STAR, 0),
        ([(10, 20, 10, 20)], PATTERN_MARUBOZU_BULL, 0),
        ([(20, 20, 10, 10)], PATTERN_MARUBOZU_BEAR, 0),
        ([(20, 21, 9, 10), (8, 17, 7.5, 16)], PATTERN_PIERCING_LINE, 1),
        ([(10, 21, 9, 20), (22, 23, 12, 13)], PATTERN_DARK_CLOUD_COVER, 1),
        ([(20, 21, 9, 10), (8, 9, 7, 8.5), (9, 18, 8.8, 17)], PATTERN_MORNING_STAR, 2),
    ],
)
def test_single_detectors(rows, pattern: str, index: int) -> None:
    bars = _make_bars(rows)
    result = scan_for_candlestick_patterns(bars, CandlestickPatternConfig(enabled_patterns=[pattern]))
    assert _types(result, index) == [pattern]


def test_results_follow_enabled_order() -> None:
    bars = _make_bars([(10, 20, 10, 20)])
    config = CandlestickPatternConfig(enabled_patterns=[PATTERN_MARUBOZU_BULL, PATTERN_DOJI])
    assert _types(scan_for_candlestick_patterns(bars, config), 0) == [PATTERN_MARUBOZU_BULL]


def test_invalid_samples_are_skipped(caplog) -> None:
    bars = [OHLCData(open=10, high=20, low=10, close=20), OHLCData(open=10, high=None, low=5, close=8),
            OHLCData(open=10, high=9, low=5, close=8)]
    config = CandlestickPatternConfig(enabled_patterns=[PATTERN_MARUBOZU_BULL, PATTERN_DOJI])
    with caplog.at_level(logging.DEBUG, logger="chartforge.features.patterns"):
        result = scan_for_candlestick_patterns(bars, config)
    assert list(result) == [0]
    assert "skipped 2 invalid samples" in caplog.text


def test_scan_is_deterministic() -> None:
    """Scanning the same data twice gives equal maps."""
    bars = _make_bars([(20, 21, 9, 10), (8, 9, 7, 8.5), (9, 18, 8.8, 17), (10, 20, 10, 20), (10, 10.5, 7, 10.4)])
    config = pattern_config_for("all")
    assert scan_for_candlestick_patterns(bars, config) == scan_for_candlestick_patterns(bars, config)


def test_empty_or_missing_config_detects_nothing() -> None:
    bars = _make_bars([(10, 20, 10, 20)])
    assert scan_for_candlestick_patterns(bars, None) == {}
    assert scan_for_candlestick_patterns(bars, CandlestickPatternConfig()) == {}


def test_unknown_pattern_is_logged(caplog) -> None:
    bars = _make_bars([(10, 20, 10, 20)])
    config = CandlestickPatternConfig(enabled_patterns=["not_a_pattern"])
    with caplog.at_level(logging.WARNING, logger="chartforge.features.patterns"):
        assert scan_for_candlestick_patterns(bars, config) == {}
    assert "not_a_pattern" in caplog.text


@pytest.mark.parametrize(
    "a,b",
    [
        ([PATTERN_DOJI, PATTERN_HAMMER], [PATTERN_HAMMER, PATTERN_MARUBOZU_BULL]),
        ([], [PATTERN_DOJI]),
        ([PATTERN_DOJI, PATTERN_DOJI], []),
        ([PATTERN_SHOOTING_STAR], [PATTERN_DOJI, PATTERN_SHOOTING_STAR, PATTERN_HAMMER]),
    ],
)
def test_merge_is_an_ordered_union(a: List[str], b: List[str]) -> None:
    """The merge starts with a's patterns, then b's new ones."""
    merged = merge_patterns(
        CandlestickPatternConfig(enabled_patterns=a), CandlestickPatternConfig(enabled_patterns=b)
    ).enabled_patterns
    assert set(a) <= set(merged) and set(b) <= set(merged)
    expected: List[str] = []
    for pattern in a + b:
        if pattern not in expected:
            expected.append(pattern)
    assert merged == expected


def test_merge_thresholds_and_none() -> None:
    a = CandlestickPatternConfig(doji_threshold=0.1, prefer_pattern_labels=True)
    b = CandlestickPatternConfig(doji_threshold=0.2, shadow_ratio=3.0)
    merged = merge_patterns(a, b)
    assert merged.doji_threshold == pytest.approx(0.1)
    assert merged.shadow_ratio == pytest.approx(3.0)
    assert merged.prefer_pattern_labels
    assert merge_patterns(None, None) is None
    assert merge_patterns(None, b).doji_threshold == pytest.approx(0.2)


def test_presets() -> None:
    assert set(PRESETS) == {"all", "core", "bullish", "bearish", "reversal", "trend"}
    assert len(preset_patterns("all")) == 14
    assert preset_patterns("CORE") == preset_patterns("core")
    with pytest.raises(ValueError):
        preset_patterns("sideways")
    config = pattern_config_for("trend", "core")
    assert config.enabled_patterns[:2] == [PATTERN_MARUBOZU_BULL, PATTERN_MARUBOZU_BEAR]
    assert pattern_display_name(PATTERN_ENGULFING_BULL) == "Bullish Engulfing"


def test_default_pattern_label_uses_sentiment_color() -> None:
    theme = get_theme("light")
    text, style = format_patterns_default([PatternDetectionResult(0, "Hammer", PATTERN_HAMMER)], 0, theme)
    assert text == "Γ Hammer"
    assert isinstance(style, LabelStyle)
    assert style.border_color == theme.up_color

    text, style = format_patterns_default(
        [
            PatternDetectionResult(0, "Doji", PATTERN_DOJI),
            PatternDetectionResult(0, "Bearish Marubozu", PATTERN_MARUBOZU_BEAR),
            PatternDetectionResult(0, "Shooting Star", PATTERN_SHOOTING_STAR),
        ],
        0,
        theme,
    )
    assert text.splitlines() == ["± Doji", "v Bear Marubozu", "※ Shooting Star"]
    assert style.border_color == theme.down_color
    assert format_patterns_default([], 0, theme) == ("", None)
