"""Default text and badge style for detected candlestick patterns."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..config import DEFAULT_LABEL_FONT_SIZE
from ..drawing.color import BLACK, WHITE, rgb
from ..drawing.fonts import FontStyle, LabelStyle
from ..theme import Theme
from .patterns import (
    SENTIMENT_BEARISH,
    SENTIMENT_BULLISH,
    PatternDetectionResult,
    pattern_label,
    pattern_sentiment,
)

NEUTRAL_DARK = rgb(100, 100, 100)
NEUTRAL_LIGHT = rgb(200, 200, 200)
BADGE_ALPHA = 180
FONT_LIGHTNESS_SHIFT = 0.28
BADGE_CORNER_RADIUS = 4
BADGE_BORDER_WIDTH = 1.2


def format_patterns_default(
    patterns: Sequence[PatternDetectionResult], series_index: int, theme: Theme
) -> Tuple[str, Optional[LabelStyle]]:
    """Format the patterns found at one candle.

    Returns the label text, one glyph prefixed name per line, and a badge
    style colored by the majority sentiment: the up color when bullish
    patterns outnumber the rest, the down color when bearish ones do,
    and gray otherwise.
    """
    if not patterns:
        return "", None
    lines: List[str] = []
    bullish = bearish = neutral = 0
    for pattern in patterns:
        lines.append(pattern_label(pattern.pattern_type) or pattern.pattern_name)
        sentiment = pattern_sentiment(pattern.pattern_type)
        if sentiment == SENTIMENT_BULLISH:
            bullish += 1
        elif sentiment == SENTIMENT_BEARISH:
            bearish += 1
        else:
            neutral += 1

    up_color, down_color = theme.get_series_up_down_colors(series_index)
    if bullish > bearish and bullish > neutral:
        color = up_color
    elif bearish > bullish and bearish > neutral:
        color = down_color
    else:
        color = NEUTRAL_DARK if theme.is_dark else NEUTRAL_LIGHT

    if theme.is_dark:
        background = BLACK.with_alpha(BADGE_ALPHA)
        font_color = color.with_adjust_hsl(0, 0, FONT_LIGHTNESS_SHIFT)
    else:
        background = WHITE.with_alpha(BADGE_ALPHA)
        font_color = color.with_adjust_hsl(0, 0, -FONT_LIGHTNESS_SHIFT)

    style = LabelStyle(
        font_style=FontStyle(size=DEFAULT_LABEL_FONT_SIZE, color=font_color),
        background_color=background,
        corner_radius=BADGE_CORNER_RADIUS,
        border_color=color,
        border_width=BADGE_BORDER_WIDTH,
    )
    return "\n".join(lines), style


__all__ = ["format_patterns_default"]
