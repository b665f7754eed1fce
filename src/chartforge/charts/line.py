"""Line series renderer."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from ..config import DEFAULT_DOT_WIDTH, DEFAULT_STROKE_WIDTH
from ..drawing.geometry import Point, auto_divide, null_point
from ..layout.pipeline import RenderResult
from ..options import SYMBOL_CIRCLE, SYMBOL_DOT, SYMBOL_NONE, ChartOption, LineSeries
from .labels import LabelValue, SeriesLabelPainter
from .marks import MarkLinePainter, MarkLineRenderOption, MarkPointPainter, MarkPointRenderOption
from .series import stacked_values
from .trend import TrendLinePainter, TrendLineRenderOption

DEFAULT_FILL_OPACITY = 200
# Series with this many samples or more default to no symbol
SYMBOL_SAMPLE_LIMIT = 100


def sample_positions(width: int, count: int, boundary_gap: bool) -> List[int]:
    """X pixel of every sample across *width*.

    With a boundary gap samples sit in the middle of their section,
    otherwise on the section edges.
    """
    if count <= 0:
        return []
    if not boundary_gap:
        return auto_divide(width, max(count - 1, 1))[:count]
    divide = auto_divide(width, count)
    return [(divide[i] + divide[i + 1]) // 2 for i in range(count)]


def default_symbol(series: LineSeries) -> str:
    if series.symbol:
        return series.symbol
    if len(series.values) < SYMBOL_SAMPLE_LIMIT and series.smooth_tension == 0:
        return SYMBOL_CIRCLE
    return SYMBOL_NONE


def _area_points(points: Sequence[Point], bottom: int) -> List[Point]:
    """Close the line *points* against the bottom edge.

    Leading missing samples are dropped; a closed area needs a defined
    first point to return to.
    """
    start = 0
    while start < len(points) and points[start].is_null():
        start += 1
    line = [p for p in points[start:] if not p.is_null()]
    if len(line) < 2:
        return []
    first = line[0]
    last = line[-1]
    return line + [Point(last.x, bottom), Point(first.x, bottom), first]


def _stacked_area_points(points: Sequence[Point], below: Sequence[Point]) -> List[Point]:
    """Close the line *points* against the layer *below* it."""
    line = [p for p in points if not p.is_null()]
    lower = [p for p in below if not p.is_null()]
    if len(line) < 2 or not lower:
        return []
    return line + lower[::-1] + [line[0]]


class LineChart:
    """Draws the line series of a chart on the plot area of *result*.

    With ``stack_series`` the series of the first y axis are drawn at
    the running total of the series before them, filled down to the
    previous layer, and without smoothing.
    """

    def __init__(self, result: RenderResult, opt: ChartOption) -> None:
        self.result = result
        self.opt = opt

    def render(self, series_list: Sequence[Tuple[int, LineSeries]]) -> None:
        p = self.result.series_painter
        theme = p.theme
        x_range = self.result.x_range
        count = x_range.divide_count
        xs = sample_positions(p.width, count, self.result.boundary_gap)
        stack = self.opt.stack_series
        stacked_rows = iter(stacked_values([s.values for _, s in series_list if stack and s.y_axis_index == 0]))

        mark_points = MarkPointPainter(p)
        mark_lines = MarkLinePainter(p)
        trends = TrendLinePainter(p)
        label_painters: List[SeriesLabelPainter] = []
        below: List[Point] = []
        first_stacked = True

        for index, series in series_list:
            is_stacked = stack and series.y_axis_index == 0
            plotted = next(stacked_rows) if is_stacked else series.values
            color = theme.get_series_color(index)
            y_range = self.result.y_ranges.get(series.y_axis_index)
            if y_range is None:
                continue
            stroke_width = series.stroke_width or DEFAULT_STROKE_WIDTH
            tension = 0.0 if is_stacked else series.smooth_tension

            label_painter = None
            if series.label.show:
                label_painter = SeriesLabelPainter(p, series.label, series.name,
                                                   value_formatter=self.opt.value_formatter)
                label_painters.append(label_painter)

            points: List[Point] = []
            for i, value in enumerate(series.values[:len(xs)]):
                x = xs[i]
                if value is None:
                    points.append(null_point(x))
                    continue
                y = y_range.get_rest_height(plotted[i])
                points.append(Point(x, y))
                if label_painter is not None:
                    label_painter.add(LabelValue(index=i, value=value, x=x, y=y))

            fill = series.fill_area if series.fill_area is not None else is_stacked
            if fill:
                if is_stacked and below:
                    area = _stacked_area_points(points, below)
                else:
                    area = _area_points(points, p.height)
                if area:
                    opacity = series.fill_opacity or DEFAULT_FILL_OPACITY
                    fill_color = color.with_alpha(opacity)
                    if tension > 0:
                        p.smooth_fill_chart_area(area, tension, fill_color)
                    else:
                        p.fill_area(area, fill_color)

            if tension > 0:
                p.smooth_line_stroke(points, tension, color, stroke_width)
            else:
                p.line_stroke(points, color, stroke_width)

            symbol = default_symbol(series)
            if symbol == SYMBOL_CIRCLE:
                p.dots(points, theme.background_color, color, stroke_width, DEFAULT_DOT_WIDTH)
            elif symbol == SYMBOL_DOT:
                p.dots(points, color, color, 0.0, stroke_width * 1.5)

            mark_points.add(MarkPointRenderOption(
                fill_color=color,
                mark_point=series.mark_point,
                values=series.values,
                points=points,
                value_formatter=self.opt.value_formatter,
            ))
            # mark lines hold raw values, which only line up with the bottom layer
            if not is_stacked or first_stacked:
                mark_lines.add(MarkLineRenderOption(
                    fill_color=color,
                    stroke_color=color,
                    mark_line=series.mark_line,
                    values=series.values,
                    axis_range=y_range,
                    value_formatter=self.opt.value_formatter,
                ))
            if series.trend_lines:
                trends.add(TrendLineRenderOption(
                    default_color=color,
                    xs=xs,
                    values=plotted,
                    axis_range=y_range,
                    trend_lines=series.trend_lines,
                ))
            if is_stacked:
                below = points
                first_stacked = False

        trends.render()
        mark_lines.render()
        mark_points.render()
        for label_painter in label_painters:
            label_painter.render()


__all__ = ["LineChart", "sample_positions", "default_symbol", "DEFAULT_FILL_OPACITY"]
