"""Candlestick series renderer.

Every valid sample is drawn as a candle centered in its category
section: a body from open to close and wicks out to the high and the
low, colored by direction.  Invalid samples (a missing field or a low
above the body, for instance) leave a gap.

Several candlestick series share each section the way grouped bars do.
Per-field (open/high/low/close) trend lines, mark points and mark lines
are drawn over the candles, and detected patterns are shown as badges
which are moved apart when they collide.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..drawing.color import Color
from ..drawing.geometry import Box, Point, null_point
from ..features.ohlc import OHLC_FIELDS, OHLCData, validate_ohlc
from ..features.pattern_labels import format_patterns_default
from ..features.patterns import PatternDetectionResult, scan_for_candlestick_patterns
from ..layout.painter import Painter, call_formatter
from ..layout.pipeline import RenderResult
from ..layout.range import AxisRange
from ..options import (
    CANDLE_STYLE_OHLC,
    CANDLE_STYLE_OUTLINE,
    CANDLE_STYLE_TRADITIONAL,
    CandlestickSeries,
    ChartOption,
)
from ..theme import Theme
from .bar import group_margins
from .labels import LabelValue, SeriesLabelPainter
from .marks import MarkLinePainter, MarkLineRenderOption, MarkPointPainter, MarkPointRenderOption
from .trend import TrendLinePainter, TrendLineRenderOption

logger = logging.getLogger(__name__)

DEFAULT_CANDLE_WIDTH_RATIO = 0.8
DEFAULT_WICK_WIDTH = 1.0


@dataclass(frozen=True)
class CandleSlot:
    """Horizontal placement of one candle."""

    left: int
    width: int

    @property
    def center(self) -> int:
        return self.left + self.width // 2


def candle_width_ratio(series: CandlestickSeries) -> float:
    ratio = series.candle_width if series.candle_width > 0 else DEFAULT_CANDLE_WIDTH_RATIO
    return min(ratio, 1.0)


def section_widths(divide: Sequence[int], count: int, width: int, max_count: int) -> List[int]:
    """Width of each of the first *count* sections of *divide*.

    A section past the end reuses the width of the previous one.
    """
    widths: List[int] = []
    for j in range(count):
        if j + 1 < len(divide):
            widths.append(divide[j + 1] - divide[j])
        elif widths:
            widths.append(widths[-1])
        else:
            widths.append(width // max(max_count, 1))
    return widths


def candle_group_layout(space: int, count: int, configured: int,
                        candle_margin: Optional[float] = None) -> Tuple[int, int, int]:
    """Split one section among *count* candles.

    Returns ``(margin, candle_margin, candle_width)``.  An explicit
    *candle_margin* is a share of the section and only applies when it
    leaves room for a candle of the *configured* width.
    """
    margin, between = group_margins(space)
    per_candle = space // count
    if candle_margin is not None:
        wanted = int(round(candle_margin * space))
        if configured + wanted < per_candle:
            between = max(0, min(wanted, per_candle - configured))
    size = (space - 2 * margin - between * (count - 1)) // count
    if 0 < configured < size:
        size = configured
        margin = (space - count * size - between * (count - 1)) // 2
    return margin, between, max(size, 1)


def candle_slots(divide: Sequence[int], sections: Sequence[int], position: int, series_count: int,
                 candle_width: int, candle_margin: Optional[float] = None) -> List[CandleSlot]:
    """Slots of the candles of series number *position* in every section."""
    slots = []
    for j, space in enumerate(sections):
        start = divide[j] if j < len(divide) else divide[-1] + space * (j - len(divide) + 1)
        if series_count == 1:
            center = start + space // 2
            slots.append(CandleSlot(center - candle_width // 2, candle_width))
            continue
        margin, between, width = candle_group_layout(space, series_count, candle_width, candle_margin)
        slots.append(CandleSlot(start + margin + position * (width + between), width))
    return slots


def draw_candle(p: Painter, sample: OHLCData, slot: CandleSlot, y_range: AxisRange, up: Color, down: Color,
                style: str, show_wicks: bool, wick_width: float) -> None:
    """Draw one valid *sample* into *slot*."""
    bullish = sample.close >= sample.open
    color = up if bullish else down
    center = slot.center
    left = center - slot.width // 2
    right = left + slot.width
    open_y = y_range.get_rest_height(sample.open)
    close_y = y_range.get_rest_height(sample.close)
    high_y = y_range.get_rest_height(sample.high)
    low_y = y_range.get_rest_height(sample.low)
    top = min(open_y, close_y)
    bottom = max(open_y, close_y)

    if style == CANDLE_STYLE_OHLC:
        p.line(center, high_y, center, low_y, color, wick_width)
        p.line(left, open_y, center, open_y, color, wick_width)
        p.line(center, close_y, right, close_y, color, wick_width)
        return

    if show_wicks:
        cap = max(1, slot.width // 6)
        if high_y < top:
            p.line(center, high_y, center, top, color, wick_width)
            p.line(center - cap, high_y, center + cap, high_y, color, wick_width)
        if low_y > bottom:
            p.line(center, bottom, center, low_y, color, wick_width)
            p.line(center - cap, low_y, center + cap, low_y, color, wick_width)

    if bottom - top < 1:
        # doji: open and close share a pixel row
        p.line(left, top, right, top, color, 1)
        return
    body = Box(left, top, right, bottom, True)
    if style == CANDLE_STYLE_OUTLINE or (style == CANDLE_STYLE_TRADITIONAL and bullish):
        p.rect(body, color, max(wick_width, 1))
    else:
        p.filled_rect(body, color)


def pattern_label(series: CandlestickSeries, patterns: List[PatternDetectionResult], series_index: int,
                  value: float, theme: Theme):
    """Text and badge style of the patterns found at one candle."""
    config = series.pattern_config
    if config is not None and config.pattern_formatter is not None:
        result = call_formatter(config.pattern_formatter, patterns, series.name, value)
        if isinstance(result, tuple):
            return result[0], result[1]
        return result, None
    return format_patterns_default(patterns, series_index, theme)


def user_label_wins(series: CandlestickSeries, label_painter: SeriesLabelPainter, index: int,
                    value: float) -> bool:
    """Whether the series label replaces a pattern label at *index*."""
    config = series.pattern_config
    if config is not None and config.prefer_pattern_labels:
        return False
    if not series.label.show or series.label.label_formatter is None:
        return False
    text, _ = label_painter.text_for(LabelValue(index=index, value=value, x=0, y=0))
    return bool(text)


class CandlestickChart:
    def __init__(self, result: RenderResult, opt: ChartOption) -> None:
        self.result = result
        self.opt = opt

    def render(self, series_list: Sequence[Tuple[int, CandlestickSeries]]) -> None:
        p = self.result.series_painter
        theme = p.theme
        divide = self.result.x_range.auto_divide()
        max_count = max((len(s.data) for _, s in series_list), default=0)
        if max_count == 0:
            return
        sections = section_widths(divide, max_count, p.width, max_count)
        series_count = len(series_list)

        mark_points = MarkPointPainter(p)
        mark_lines = MarkLinePainter(p)
        trends = TrendLinePainter(p)
        label_painters: List[SeriesLabelPainter] = []

        for position, (index, series) in enumerate(series_list):
            y_range = self.result.y_ranges.get(series.y_axis_index)
            if y_range is None:
                continue
            up, down = theme.get_series_up_down_colors(index)
            candle_width = max(1, int(p.width * candle_width_ratio(series) / max_count))
            if series_count > 1:
                candle_width = max(1, candle_width // series_count)
            slots = candle_slots(divide, sections, position, series_count, candle_width, series.candle_margin)
            wick_width = series.wick_width or DEFAULT_WICK_WIDTH
            show_wicks = series.show_wicks is not False

            skipped = 0
            for sample, slot in zip(series.data, slots):
                if not validate_ohlc(sample):
                    skipped += 1
                    continue
                draw_candle(p, sample, slot, y_range, up, down, series.candle_style, show_wicks, wick_width)
            if skipped:
                logger.debug("candlestick series %r: %d invalid samples skipped", series.name, skipped)

            label_painter = self._labels(series, index, slots, y_range, theme)
            if label_painter is not None:
                label_painters.append(label_painter)

            xs = [slot.center for slot in slots]
            color = theme.get_series_color(index)
            for name in OHLC_FIELDS:
                values = series.field_values(name)
                points = [
                    null_point(x) if value is None else Point(x, y_range.get_rest_height(value))
                    for x, value in zip(xs, values)
                ]
                mark_points.add(MarkPointRenderOption(
                    fill_color=color,
                    mark_point=getattr(series, f"{name}_mark_point"),
                    values=values,
                    points=points,
                    value_formatter=self.opt.value_formatter,
                ))
                mark_lines.add(MarkLineRenderOption(
                    fill_color=color,
                    stroke_color=color,
                    mark_line=getattr(series, f"{name}_mark_line"),
                    values=values,
                    axis_range=y_range,
                    value_formatter=self.opt.value_formatter,
                ))
                trend_lines = getattr(series, f"{name}_trend_lines")
                if trend_lines:
                    trends.add(TrendLineRenderOption(
                        default_color=color,
                        xs=xs,
                        values=values,
                        axis_range=y_range,
                        trend_lines=trend_lines,
                        dashed=False,
                    ))

        trends.render()
        mark_lines.render()
        mark_points.render()
        for label_painter in label_painters:
            label_painter.render()

    def _labels(self, series: CandlestickSeries, index: int, slots: Sequence[CandleSlot], y_range: AxisRange,
                theme: Theme) -> Optional[SeriesLabelPainter]:
        patterns: Dict[int, List[PatternDetectionResult]] = scan_for_candlestick_patterns(
            series.data, series.pattern_config
        )
        if not series.label.show and not patterns:
            return None
        painter = SeriesLabelPainter(
            self.result.series_painter,
            series.label,
            series.name,
            value_formatter=self.opt.value_formatter,
            avoid_overlap=bool(patterns),
        )
        for j, (sample, slot) in enumerate(zip(series.data, slots)):
            if not validate_ohlc(sample):
                continue
            y = y_range.get_rest_height(sample.close)
            found = patterns.get(j)
            if found and not user_label_wins(series, painter, j, sample.close):
                text, style = pattern_label(series, found, index, sample.close, theme)
                if text:
                    painter.add(LabelValue(index=j, value=sample.close, x=slot.center, y=y, text=text,
                                           style=style))
                continue
            if series.label.show:
                painter.add(LabelValue(index=j, value=sample.close, x=slot.center, y=y))
        return painter


__all__ = [
    "CandlestickChart",
    "CandleSlot",
    "candle_group_layout",
    "candle_slots",
    "candle_width_ratio",
    "draw_candle",
    "section_widths",
    "DEFAULT_CANDLE_WIDTH_RATIO",
]
