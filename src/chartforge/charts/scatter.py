"""Scatter series renderer."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from ..drawing.geometry import Point
from ..layout.pipeline import RenderResult
from ..options import SYMBOL_CIRCLE, ChartOption, ScatterSeries
from .labels import LabelValue, SeriesLabelPainter
from .line import sample_positions
from .marks import MarkLinePainter, MarkLineRenderOption
from .trend import TrendLinePainter, TrendLineRenderOption

DEFAULT_SYMBOL_SIZE = 2.0


def scatter_points(series: ScatterSeries, xs: Sequence[int], y_of) -> List[Tuple[int, float, Point]]:
    """``(index, value, point)`` for every value that has an x position."""
    result = []
    for i, values in enumerate(series.values[:len(xs)]):
        for value in values:
            if value is None:
                continue
            result.append((i, value, Point(xs[i], y_of(value))))
    return result


class ScatterChart:
    """Draws one symbol per value; an x index may carry several values.

    Trend lines follow the mean of each x index and mark lines the
    extremes and average of all values.
    """

    def __init__(self, result: RenderResult, opt: ChartOption) -> None:
        self.result = result
        self.opt = opt

    def render(self, series_list: Sequence[Tuple[int, ScatterSeries]]) -> None:
        p = self.result.series_painter
        theme = p.theme
        xs = sample_positions(p.width, self.result.x_range.divide_count, self.result.boundary_gap)

        mark_lines = MarkLinePainter(p)
        trends = TrendLinePainter(p)
        label_painters: List[SeriesLabelPainter] = []

        for index, series in series_list:
            color = theme.get_series_color(index)
            y_range = self.result.y_ranges.get(series.y_axis_index)
            if y_range is None:
                continue
            size = series.symbol_size or DEFAULT_SYMBOL_SIZE
            items = scatter_points(series, xs, y_range.get_rest_height)
            points = [point for _, _, point in items]
            if series.symbol == SYMBOL_CIRCLE:
                p.dots(points, theme.background_color, color, 1.0, size)
            else:
                p.dots(points, color, color, 1.0, size)

            if series.label.show:
                label_painter = SeriesLabelPainter(p, series.label, series.name,
                                                   value_formatter=self.opt.value_formatter)
                for i, value, point in items:
                    label_painter.add(LabelValue(index=i, value=value, x=point.x, y=point.y))
                label_painters.append(label_painter)

            mark_lines.add(MarkLineRenderOption(
                fill_color=color,
                stroke_color=color,
                mark_line=series.mark_line,
                values=series.flat_values(),
                axis_range=y_range,
                value_formatter=self.opt.value_formatter,
            ))
            if series.trend_lines:
                trends.add(TrendLineRenderOption(
                    default_color=color,
                    xs=xs,
                    values=series.average_values(),
                    axis_range=y_range,
                    trend_lines=series.trend_lines,
                ))

        trends.render()
        mark_lines.render()
        for label_painter in label_painters:
            label_painter.render()


__all__ = ["ScatterChart", "scatter_points", "DEFAULT_SYMBOL_SIZE"]
