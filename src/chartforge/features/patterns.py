"""Candlestick pattern detection.

Fourteen classic patterns are recognised.  Each detector looks at the
candle at a given index and, for two and three candle patterns, at the
candles right before it.  Invalid samples never match.

Detection is configured with :class:`CandlestickPatternConfig`, which
names the enabled patterns and tunes four thresholds.  A threshold of 0
selects its textbook default (see :data:`DEFAULT_DOJI_THRESHOLD` and
friends).  :func:`scan_for_candlestick_patterns` runs every enabled
detector over a series and groups the hits by sample index.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import Field

from ..fields import OptionModel
from .ohlc import OHLCData, validate_ohlc

logger = logging.getLogger(__name__)

PATTERN_DOJI = "doji"
PATTERN_HAMMER = "hammer"
PATTERN_INVERTED_HAMMER = "inverted_hammer"
PATTERN_SHOOTING_STAR = "shooting_star"
PATTERN_GRAVESTONE = "gravestone_doji"
PATTERN_DRAGONFLY = "dragonfly_doji"
PATTERN_MARUBOZU_BULL = "marubozu_bull"
PATTERN_MARUBOZU_BEAR = "marubozu_bear"
PATTERN_ENGULFING_BULL = "engulfing_bull"
PATTERN_ENGULFING_BEAR = "engulfing_bear"
PATTERN_PIERCING_LINE = "piercing_line"
PATTERN_DARK_CLOUD_COVER = "dark_cloud_cover"
PATTERN_MORNING_STAR = "morning_star"
PATTERN_EVENING_STAR = "evening_star"

DEFAULT_DOJI_THRESHOLD = 0.05
DEFAULT_SHADOW_TOLERANCE = 0.01
DEFAULT_SHADOW_RATIO = 2.0
DEFAULT_ENGULFING_MIN_SIZE = 1.0

# Opposite shadow may be at most this share of the long shadow.
SHORT_SHADOW_SHARE = 0.3
# Shooting star bodies sit in the lower third of the range.
LOWER_THIRD = 0.33
STAR_MIDDLE_BODY_SHARE = 0.3
STAR_THIRD_BODY_SHARE = 0.5

SENTIMENT_BULLISH = "bullish"
SENTIMENT_BEARISH = "bearish"
SENTIMENT_NEUTRAL = "neutral"


@dataclass(frozen=True)
class PatternDetectionResult:
    """One pattern found at one sample index."""

    index: int
    pattern_name: str
    pattern_type: str


class CandlestickPatternConfig(OptionModel):
    """Which candlestick patterns to detect and how strictly.

    Attributes:
        enabled_patterns: Pattern identifiers in display order.  An empty
            list detects nothing.
        doji_threshold: Maximum body/range ratio of a doji.
        shadow_tolerance: Maximum shadows/range ratio of a marubozu.
        shadow_ratio: Minimum long-shadow/body ratio for hammer-like
            patterns.
        engulfing_min_size: Minimum engulfing/engulfed body ratio.
        prefer_pattern_labels: Let pattern labels replace user labels at
            the same index.
        pattern_formatter: ``(patterns, series_name, value) -> (text,
            LabelStyle | None)`` replacing the default label text and
            style.
    """

    enabled_patterns: List[str] = Field(default_factory=list)
    doji_threshold: float = 0.0
    shadow_tolerance: float = 0.0
    shadow_ratio: float = 0.0
    engulfing_min_size: float = 0.0
    prefer_pattern_labels: bool = False
    pattern_formatter: Optional[Callable] = None

    @property
    def effective_doji_threshold(self) -> float:
        return self.doji_threshold if self.doji_threshold > 0 else DEFAULT_DOJI_THRESHOLD

    @property
    def effective_shadow_tolerance(self) -> float:
        return self.shadow_tolerance if self.shadow_tolerance > 0 else DEFAULT_SHADOW_TOLERANCE

    @property
    def effective_shadow_ratio(self) -> float:
        return self.shadow_ratio if self.shadow_ratio > 0 else DEFAULT_SHADOW_RATIO

    @property
    def effective_engulfing_min_size(self) -> float:
        return self.engulfing_min_size if self.engulfing_min_size > 0 else DEFAULT_ENGULFING_MIN_SIZE

    def with_patterns(self, *patterns: str) -> "CandlestickPatternConfig":
        """Return a copy with *patterns* appended, skipping duplicates."""
        enabled = list(self.enabled_patterns)
        for pattern in patterns:
            if pattern not in enabled:
                enabled.append(pattern)
        return self.model_copy(update={"enabled_patterns": enabled})

    def with_preset(self, name: str) -> "CandlestickPatternConfig":
        """Return a copy with every pattern of preset *name* enabled.

        Raises ValueError for an unknown preset.
        """
        return self.with_patterns(*preset_patterns(name))


@dataclass(frozen=True)
class PatternInfo:
    """Static description of a pattern."""

    pattern_type: str
    name: str
    label: str
    sentiment: str
    min_candles: int
    detector: Callable[[Sequence[OHLCData], int, CandlestickPatternConfig], bool]


def _body(c: OHLCData) -> float:
    return abs(c.close - c.open)


def _upper_shadow(c: OHLCData) -> float:
    return c.high - c.body_top


def _lower_shadow(c: OHLCData) -> float:
    return c.body_bottom - c.low


def _valid(data: Sequence[OHLCData], index: int, count: int) -> bool:
    if index < count - 1 or index >= len(data):
        return False
    return all(validate_ohlc(data[i]) for i in range(index - count + 1, index + 1))


def _is_doji_candle(c: OHLCData, config: CandlestickPatternConfig) -> bool:
    price_range = c.high - c.low
    if price_range == 0:
        return False
    return _body(c) / price_range <= config.effective_doji_threshold


def detect_doji(data: Sequence[OHLCData], index: int, config: CandlestickPatternConfig) -> bool:
    if not _valid(data, index, 1):
        return False
    return _is_doji_candle(data[index], config)


def detect_hammer(data: Sequence[OHLCData], index: int, config: CandlestickPatternConfig) -> bool:
    if not _valid(data, index, 1):
        return False
    c = data[index]
    lower = _lower_shadow(c)
    return lower >= config.effective_shadow_ratio * _body(c) and _upper_shadow(c) <= lower * SHORT_SHADOW_SHARE


def detect_inverted_hammer(data: Sequence[OHLCData], index: int, config: CandlestickPatternConfig) -> bool:
    if not _valid(data, index, 1):
        return False
    c = data[index]
    upper = _upper_shadow(c)
    return upper >= config.effective_shadow_ratio * _body(c) and _lower_shadow(c) <= upper * SHORT_SHADOW_SHARE


def detect_shooting_star(data: Sequence[OHLCData], index: int, config: CandlestickPatternConfig) -> bool:
    """Inverted hammer whose body sits in the lower third of the range."""
    if not detect_inverted_hammer(data, index, config):
        return False
    c = data[index]
    price_range = c.high - c.low
    if price_range == 0:
        return False
    return (c.body_bottom - c.low) / price_range <= LOWER_THIRD


def _doji_shadows(c: OHLCData) -> Tuple[float, float]:
    # shadows measured from the body midpoint
    middle = (c.open + c.close) / 2
    return c.high - middle, middle - c.low


def detect_gravestone_doji(data: Sequence[OHLCData], index: int, config: CandlestickPatternConfig) -> bool:
    if not _valid(data, index, 1):
        return False
    c = data[index]
    if not _is_doji_candle(c, config):
        return False
    upper, lower = _doji_shadows(c)
    return upper >= config.effective_shadow_ratio * _body(c) and lower <= upper * SHORT_SHADOW_SHARE


def detect_dragonfly_doji(data: Sequence[OHLCData], index: int, config: CandlestickPatternConfig) -> bool:
    if not _valid(data, index, 1):
        return False
    c = data[index]
    if not _is_doji_candle(c, config):
        return False
    upper, lower = _doji_shadows(c)
    return lower >= config.effective_shadow_ratio * _body(c) and upper <= lower * SHORT_SHADOW_SHARE


def _is_marubozu(c: OHLCData, config: CandlestickPatternConfig) -> bool:
    total = c.high - c.low
    body = _body(c)
    if total == 0 or body == 0:
        return False
    return (_upper_shadow(c) + _lower_shadow(c)) / total <= config.effective_shadow_tolerance


def detect_marubozu_bull(data: Sequence[OHLCData], index: int, config: CandlestickPatternConfig) -> bool:
    if not _valid(data, index, 1):
        return False
    c = data[index]
    return _is_marubozu(c, config) and c.is_bullish()


def detect_marubozu_bear(data: Sequence[OHLCData], index: int, config: CandlestickPatternConfig) -> bool:
    if not _valid(data, index, 1):
        return False
    c = data[index]
    return _is_marubozu(c, config) and c.is_bearish()


def _engulfs(prev: OHLCData, current: OHLCData, config: CandlestickPatternConfig) -> bool:
    if not (current.body_top > prev.body_top and current.body_bottom < prev.body_bottom):
        return False
    return _body(current) >= config.effective_engulfing_min_size * _body(prev)


def detect_engulfing_bull(data: Sequence[OHLCData], index: int, config: CandlestickPatternConfig) -> bool:
    if not _valid(data, index, 2):
        return False
    prev, current = data[index - 1], data[index]
    return _engulfs(prev, current, config) and prev.is_bearish() and current.is_bullish()


def detect_engulfing_bear(data: Sequence[OHLCData], index: int, config: CandlestickPatternConfig) -> bool:
    if not _valid(data, index, 2):
        return False
    prev, current = data[index - 1], data[index]
    return _engulfs(prev, current, config) and prev.is_bullish() and current.is_bearish()


def detect_piercing_line(data: Sequence[OHLCData], index: int, config: CandlestickPatternConfig) -> bool:
    """Bullish candle gapping below a bearish one and closing past its midpoint."""
    if not _valid(data, index, 2):
        return False
    prev, current = data[index - 1], data[index]
    if not (prev.is_bearish() and current.is_bullish()):
        return False
    if current.open >= prev.close:
        return False
    midpoint = (prev.open + prev.close) / 2
    return midpoint < current.close < prev.open


def detect_dark_cloud_cover(data: Sequence[OHLCData], index: int, config: CandlestickPatternConfig) -> bool:
    """Bearish candle gapping above a bullish one and closing below its midpoint."""
    if not _valid(data, index, 2):
        return False
    prev, current = data[index - 1], data[index]
    if not (prev.is_bullish() and current.is_bearish()):
        return False
    if current.open <= prev.close:
        return False
    midpoint = (prev.open + prev.close) / 2
    return prev.open < current.close < midpoint


def detect_morning_star(data: Sequence[OHLCData], index: int, config: CandlestickPatternConfig) -> bool:
    if not _valid(data, index, 3):
        return False
    first, second, third = data[index - 2], data[index - 1], data[index]
    if not first.is_bearish():
        return False
    first_body = first.open - first.close
    if _body(second) > first_body * STAR_MIDDLE_BODY_SHARE or second.open >= first.close:
        return False
    if not third.is_bullish() or third.open <= second.body_top:
        return False
    if third.close <= (first.open + first.close) / 2:
        return False
    return third.close - third.open >= first_body * STAR_THIRD_BODY_SHARE


def detect_evening_star(data: Sequence[OHLCData], index: int, config: CandlestickPatternConfig) -> bool:
    if not _valid(data, index, 3):
        return False
    first, second, third = data[index - 2], data[index - 1], data[index]
    if not first.is_bullish():
        return False
    first_body = first.close - first.open
    if _body(second) > first_body * STAR_MIDDLE_BODY_SHARE or second.open <= first.close:
        return False
    if not third.is_bearish() or third.open >= second.body_bottom:
        return False
    if third.close >= (first.open + first.close) / 2:
        return False
    return third.open - third.close >= first_body * STAR_THIRD_BODY_SHARE


PATTERNS: Dict[str, PatternInfo] = {
    info.pattern_type: info
    for info in (
        PatternInfo(PATTERN_DOJI, "Doji", "± Doji", SENTIMENT_NEUTRAL, 1, detect_doji),
        PatternInfo(PATTERN_HAMMER, "Hammer", "Γ Hammer", SENTIMENT_BULLISH, 1, detect_hammer),
        PatternInfo(PATTERN_INVERTED_HAMMER, "Inverted Hammer", "Ʇ Inv. Hammer", SENTIMENT_NEUTRAL, 1,
                    detect_inverted_hammer),
        PatternInfo(PATTERN_SHOOTING_STAR, "Shooting Star", "※ Shooting Star", SENTIMENT_BEARISH, 1,
                    detect_shooting_star),
        PatternInfo(PATTERN_GRAVESTONE, "Gravestone Doji", "† Gravestone", SENTIMENT_BEARISH, 1,
                    detect_gravestone_doji),
        PatternInfo(PATTERN_DRAGONFLY, "Dragonfly Doji", "ψ Dragonfly", SENTIMENT_BULLISH, 1,
                    detect_dragonfly_doji),
        PatternInfo(PATTERN_MARUBOZU_BULL, "Bullish Marubozu", "^ Bull Marubozu", SENTIMENT_BULLISH, 1,
                    detect_marubozu_bull),
        PatternInfo(PATTERN_MARUBOZU_BEAR, "Bearish Marubozu", "v Bear Marubozu", SENTIMENT_BEARISH, 1,
                    detect_marubozu_bear),
        PatternInfo(PATTERN_ENGULFING_BULL, "Bullish Engulfing", "Λ Bull Engulfing", SENTIMENT_BULLISH, 2,
                    detect_engulfing_bull),
        PatternInfo(PATTERN_ENGULFING_BEAR, "Bearish Engulfing", "V Bear Engulfing", SENTIMENT_BEARISH, 2,
                    detect_engulfing_bear),
        PatternInfo(PATTERN_PIERCING_LINE, "Piercing Line", "| Piercing Line", SENTIMENT_BULLISH, 2,
                    detect_piercing_line),
        PatternInfo(PATTERN_DARK_CLOUD_COVER, "Dark Cloud Cover", "Ξ Dark Cloud", SENTIMENT_BEARISH, 2,
                    detect_dark_cloud_cover),
        PatternInfo(PATTERN_MORNING_STAR, "Morning Star", "* Morning Star", SENTIMENT_BULLISH, 3,
                    detect_morning_star),
        PatternInfo(PATTERN_EVENING_STAR, "Evening Star", "⁎ Evening Star", SENTIMENT_BEARISH, 3,
                    detect_evening_star),
    )
}

PRESET_ALL = "all"
PRESET_CORE = "core"
PRESET_BULLISH = "bullish"
PRESET_BEARISH = "bearish"
PRESET_REVERSAL = "reversal"
PRESET_TREND = "trend"

PRESETS: Dict[str, Tuple[str, ...]] = {
    PRESET_ALL: (
        PATTERN_ENGULFING_BULL,
        PATTERN_ENGULFING_BEAR,
        PATTERN_HAMMER,
        PATTERN_MORNING_STAR,
        PATTERN_EVENING_STAR,
        PATTERN_SHOOTING_STAR,
        PATTERN_DARK_CLOUD_COVER,
        PATTERN_DRAGONFLY,
        PATTERN_GRAVESTONE,
        PATTERN_MARUBOZU_BEAR,
        PATTERN_MARUBOZU_BULL,
        PATTERN_PIERCING_LINE,
        PATTERN_DOJI,
        PATTERN_INVERTED_HAMMER,
    ),
    PRESET_CORE: (
        PATTERN_ENGULFING_BULL,
        PATTERN_ENGULFING_BEAR,
        PATTERN_HAMMER,
        PATTERN_SHOOTING_STAR,
        PATTERN_MORNING_STAR,
        PATTERN_EVENING_STAR,
    ),
    PRESET_BULLISH: (
        PATTERN_HAMMER,
        PATTERN_INVERTED_HAMMER,
        PATTERN_DRAGONFLY,
        PATTERN_MARUBOZU_BULL,
        PATTERN_ENGULFING_BULL,
        PATTERN_PIERCING_LINE,
        PATTERN_MORNING_STAR,
    ),
    PRESET_BEARISH: (
        PATTERN_SHOOTING_STAR,
        PATTERN_GRAVESTONE,
        PATTERN_MARUBOZU_BEAR,
        PATTERN_ENGULFING_BEAR,
        PATTERN_DARK_CLOUD_COVER,
        PATTERN_EVENING_STAR,
    ),
    PRESET_REVERSAL: (
        PATTERN_HAMMER,
        PATTERN_SHOOTING_STAR,
        PATTERN_DRAGONFLY,
        PATTERN_GRAVESTONE,
        PATTERN_ENGULFING_BULL,
        PATTERN_ENGULFING_BEAR,
        PATTERN_PIERCING_LINE,
        PATTERN_DARK_CLOUD_COVER,
        PATTERN_MORNING_STAR,
        PATTERN_EVENING_STAR,
    ),
    PRESET_TREND: (
        PATTERN_MARUBOZU_BULL,
        PATTERN_MARUBOZU_BEAR,
    ),
}


def preset_patterns(name: str) -> Tuple[str, ...]:
    """Pattern identifiers of the preset *name*.

    Raises ValueError for an unknown preset.
    """
    try:
        return PRESETS[name.lower()]
    except KeyError:
        raise ValueError(f"unknown pattern preset: {name}") from None


def pattern_config_for(*presets: str) -> CandlestickPatternConfig:
    """Build a config enabling the union of *presets*."""
    config = CandlestickPatternConfig()
    for name in presets:
        config = config.with_preset(name)
    return config


def pattern_display_name(pattern_type: str) -> str:
    info = PATTERNS.get(pattern_type)
    return info.name if info else pattern_type


def pattern_label(pattern_type: str) -> str:
    """Glyph prefixed label, e.g. ``"± Doji"``."""
    info = PATTERNS.get(pattern_type)
    return info.label if info else ""


def pattern_sentiment(pattern_type: str) -> str:
    info = PATTERNS.get(pattern_type)
    return info.sentiment if info else SENTIMENT_NEUTRAL


def scan_for_candlestick_patterns(
    data: Sequence[OHLCData], config: Optional[CandlestickPatternConfig]
) -> Dict[int, List[PatternDetectionResult]]:
    """Run every enabled detector over *data*.

    Returns a mapping from sample index to the patterns found there, in
    the order the patterns are enabled.  Indexes without a pattern are
    absent.  Unknown pattern identifiers are logged and ignored.
    """
    if config is None or not config.enabled_patterns:
        return {}
    hits: Dict[int, List[PatternDetectionResult]] = {}
    for pattern_type in config.enabled_patterns:
        info = PATTERNS.get(pattern_type)
        if info is None:
            logger.warning("unknown candlestick pattern %r ignored", pattern_type)
            continue
        for index in range(info.min_candles - 1, len(data)):
            if info.detector(data, index, config):
                hits.setdefault(index, []).append(PatternDetectionResult(index, info.name, pattern_type))
    skipped = sum(1 for sample in data if not validate_ohlc(sample))
    if skipped:
        logger.debug("pattern scan skipped %d invalid samples", skipped)
    return dict(sorted(hits.items()))


def merge_patterns(
    a: Optional[CandlestickPatternConfig], b: Optional[CandlestickPatternConfig]
) -> Optional[CandlestickPatternConfig]:
    """Combine two pattern configs.

    The enabled patterns are the union of both, *a*'s order first.
    Thresholds come from *a* when positive and from *b* otherwise, while
    the label preference and formatter always come from *a*.  When one
    side is ``None`` a copy of the other is returned.
    """
    if a is None and b is None:
        return None
    if a is None:
        return b.model_copy(deep=True)
    if b is None:
        return a.model_copy(deep=True)
    enabled: List[str] = []
    for pattern in list(a.enabled_patterns) + list(b.enabled_patterns):
        if pattern not in enabled:
            enabled.append(pattern)
    return CandlestickPatternConfig(
        enabled_patterns=enabled,
        doji_threshold=a.doji_threshold if a.doji_threshold > 0 else b.doji_threshold,
        shadow_tolerance=a.shadow_tolerance if a.shadow_tolerance > 0 else b.shadow_tolerance,
        shadow_ratio=a.shadow_ratio if a.shadow_ratio > 0 else b.shadow_ratio,
        engulfing_min_size=a.engulfing_min_size if a.engulfing_min_size > 0 else b.engulfing_min_size,
        prefer_pattern_labels=a.prefer_pattern_labels,
        pattern_formatter=a.pattern_formatter,
    )


__all__ = [
    "PATTERN_DOJI",
    "PATTERN_HAMMER",
    "PATTERN_INVERTED_HAMMER",
    "PATTERN_SHOOTING_STAR",
    "PATTERN_GRAVESTONE",
    "PATTERN_DRAGONFLY",
    "PATTERN_MARUBOZU_BULL",
    "PATTERN_MARUBOZU_BEAR",
    "PATTERN_ENGULFING_BULL",
    "PATTERN_ENGULFING_BEAR",
    "PATTERN_PIERCING_LINE",
    "PATTERN_DARK_CLOUD_COVER",
    "PATTERN_MORNING_STAR",
    "PATTERN_EVENING_STAR",
    "SENTIMENT_BULLISH",
    "SENTIMENT_BEARISH",
    "SENTIMENT_NEUTRAL",
    "PRESETS",
    "PATTERNS",
    "PatternDetectionResult",
    "PatternInfo",
    "CandlestickPatternConfig",
    "preset_patterns",
    "pattern_config_for",
    "pattern_display_name",
    "pattern_label",
    "pattern_sentiment",
    "scan_for_candlestick_patterns",
    "merge_patterns",
]
