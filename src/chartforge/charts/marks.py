"""Mark points and mark lines.

A mark point is a pin glyph over the sample holding a series maximum or
minimum, with the value written inside the pin head.  A mark line is a
dashed line across the plot at the maximum, minimum or average, with the
value printed past its arrow end.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..config import DEFAULT_LABEL_FONT_SIZE, SMALL_LABEL_FONT_SIZE
from ..drawing.color import FONT_DARK, FONT_LIGHT, Color, is_light_color
from ..drawing.fonts import FontStyle
from ..drawing.geometry import Point
from ..humanize import ValueFormatter, format_comma
from ..layout.painter import Painter, call_formatter
from ..layout.range import AxisRange
from ..options import SeriesMarkLine, SeriesMarkPoint
from .series import mark_index, mark_value, summarize

DEFAULT_SYMBOL_SIZE = 28
MARK_LINE_DASHES = (4.0, 2.0)


def _format(formatter: Optional[ValueFormatter], value: float) -> str:
    if formatter is None:
        return format_comma(value)
    return call_formatter(formatter, value)


@dataclass
class MarkPointRenderOption:
    fill_color: Color
    mark_point: SeriesMarkPoint
    values: Sequence[Optional[float]]
    points: Sequence[Point]
    value_formatter: Optional[ValueFormatter] = None
    font: str = ""


@dataclass
class MarkLineRenderOption:
    """A set of mark lines over one series.

    ``axis_range`` is the value axis: the y axis normally, the x axis for
    horizontal bars, which also set ``vertical``.
    """

    fill_color: Color
    stroke_color: Color
    mark_line: SeriesMarkLine
    values: Sequence[Optional[float]]
    axis_range: AxisRange
    font_color: Color = field(default_factory=Color)
    value_formatter: Optional[ValueFormatter] = None
    vertical: bool = False
    font: str = ""


class MarkPointPainter:
    def __init__(self, painter: Painter) -> None:
        self.painter = painter
        self.options: List[MarkPointRenderOption] = []

    def add(self, opt: MarkPointRenderOption) -> None:
        self.options.append(opt)

    def render(self) -> None:
        painter = self.painter
        for opt in self.options:
            if not opt.mark_point.data:
                continue
            summary = summarize(opt.values)
            size = opt.mark_point.symbol_size or DEFAULT_SYMBOL_SIZE
            text_color = FONT_LIGHT if is_light_color(opt.fill_color) else FONT_DARK
            formatter = opt.mark_point.value_formatter or opt.value_formatter
            for mark in opt.mark_point.data:
                index = mark_index(summary, mark.type)
                if index < 0 or index >= len(opt.points) or opt.points[index].is_null():
                    continue
                point = opt.points[index]
                text = _format(formatter, mark_value(summary, mark.type))
                style = FontStyle(opt.font, DEFAULT_LABEL_FONT_SIZE, text_color)
                text_box = painter.measure_text(text, 0.0, style)
                if text_box.width > size:
                    style = FontStyle(opt.font, SMALL_LABEL_FONT_SIZE, text_color)
                    text_box = painter.measure_text(text, 0.0, style)
                painter.pin(point.x, point.y - size // 2, size, opt.fill_color)
                painter.text(text, point.x - text_box.width // 2, point.y - size // 2 - 2, 0.0, style)


class MarkLinePainter:
    def __init__(self, painter: Painter) -> None:
        self.painter = painter
        self.options: List[MarkLineRenderOption] = []

    def add(self, opt: MarkLineRenderOption) -> None:
        self.options.append(opt)

    def render(self) -> None:
        painter = self.painter
        for opt in self.options:
            if not opt.mark_line.data:
                continue
            summary = summarize(opt.values)
            if summary.count == 0:
                continue
            font_color = opt.font_color if not opt.font_color.is_zero() else painter.theme.text_color
            style = FontStyle(opt.font, DEFAULT_LABEL_FONT_SIZE, font_color)
            formatter = opt.mark_line.value_formatter or opt.value_formatter
            for mark in opt.mark_line.data:
                value = mark_value(summary, mark.type)
                text = _format(formatter, value)
                text_box = painter.measure_text(text, 0.0, style)
                if opt.vertical:
                    x = opt.axis_range.get_height(value)
                    painter.vertical_mark_line(x, 2, painter.height - 2, opt.fill_color, opt.stroke_color, 1,
                                               MARK_LINE_DASHES)
                    painter.text(text, x - text_box.width // 2 - 1, 0, 0.0, style)
                else:
                    y = opt.axis_range.get_rest_height(value)
                    painter.mark_line(0, y, painter.width - 2, opt.fill_color, opt.stroke_color, 1,
                                      MARK_LINE_DASHES)
                    painter.text(text, painter.width, y + text_box.height // 2 - 2, 0.0, style)


__all__ = [
    "MarkPointPainter",
    "MarkLinePainter",
    "MarkPointRenderOption",
    "MarkLineRenderOption",
    "DEFAULT_SYMBOL_SIZE",
]
