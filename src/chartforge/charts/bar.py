"""Vertical bar series renderer.

Every category section is shared by the bar series: the bars sit side
by side with an outer margin on both ends of the group and a smaller
margin between neighbours.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..drawing.geometry import Box, Point, null_point
from ..layout.pipeline import RenderResult
from ..options import BarSeries, ChartOption
from .labels import LabelValue, SeriesLabelPainter
from .marks import MarkLinePainter, MarkLineRenderOption, MarkPointPainter, MarkPointRenderOption
from .series import stacked_values
from .trend import TrendLinePainter, TrendLineRenderOption


def group_margins(space: int) -> Tuple[int, int]:
    """Outer margin and between-item margin for a section of *space* px."""
    if space < 20:
        return 2, 2
    if space < 50:
        return 5, 3
    return 10, 5


def group_layout(space: int, count: int, configured: int = 0) -> Tuple[int, int, int]:
    """Split a section among *count* items.

    Returns ``(margin, item_margin, item_size)``.  A *configured* size
    smaller than the computed one is honoured and the outer margin grows
    to keep the group centered.
    """
    count = max(count, 1)
    margin, item_margin = group_margins(space)
    size = (space - 2 * margin - item_margin * (count - 1)) // count
    if 0 < configured < size:
        size = configured
        margin = (space - count * size - item_margin * (count - 1)) // 2
    return margin, item_margin, max(size, 1)


class BarChart:
    """Draws the vertical bar series of a chart.

    With ``stack_series`` the bars of the first y axis share one slot per
    category, each drawn from the top of the bar below it; bars on the
    second axis keep their own slots.  Stacked bars are not rounded.
    """

    def __init__(self, result: RenderResult, opt: ChartOption) -> None:
        self.result = result
        self.opt = opt

    def render(self, series_list: Sequence[Tuple[int, BarSeries]]) -> None:
        p = self.result.series_painter
        theme = p.theme
        x_range = self.result.x_range
        divide = x_range.auto_divide()
        if len(divide) < 2:
            return
        section = divide[1] - divide[0]
        stack = self.opt.stack_series
        stacked_count = sum(1 for _, s in series_list if stack and s.y_axis_index == 0)
        slot_count = len(series_list) - max(stacked_count - 1, 0)
        configured = min((s.bar_width for _, s in series_list if s.bar_width > 0), default=0)
        margin, bar_margin, bar_width = group_layout(section, slot_count, configured)
        bar_max_height = p.height
        stacked_rows = iter(stacked_values([s.values for _, s in series_list if stack and s.y_axis_index == 0]))
        # pixel top of the stack per category, None until a bar is drawn there
        stack_tops: List[Optional[int]] = [None] * (len(divide) - 1)
        next_slot = 1 if stacked_count else 0
        first_stacked = True

        mark_points = MarkPointPainter(p)
        mark_lines = MarkLinePainter(p)
        trends = TrendLinePainter(p)
        label_painters: List[SeriesLabelPainter] = []

        for index, series in series_list:
            is_stacked = stack and series.y_axis_index == 0
            plotted = next(stacked_rows) if is_stacked else series.values
            if is_stacked:
                slot = 0
            else:
                slot = next_slot
                next_slot += 1
            color = theme.get_series_color(index)
            y_range = self.result.y_ranges.get(series.y_axis_index)
            if y_range is None:
                continue
            label_painter = None
            if series.label.show:
                label_painter = SeriesLabelPainter(p, series.label, series.name,
                                                   value_formatter=self.opt.value_formatter)
                label_painters.append(label_painter)

            points: List[Point] = []
            xs: List[int] = []
            for j, value in enumerate(series.values):
                if j >= len(divide) - 1:
                    break
                x = divide[j] + margin + slot * (bar_width + bar_margin)
                xs.append(x + bar_width // 2)
                if value is None:
                    points.append(null_point(x + bar_width // 2))
                    continue
                top = bar_max_height - y_range.get_height(plotted[j])
                bottom = bar_max_height - 1
                if is_stacked:
                    if stack_tops[j] is not None:
                        bottom = stack_tops[j]
                    stack_tops[j] = top
                box = Box(x, min(top, bottom), x + bar_width, max(top, bottom), True)
                if series.round_radius > 0 and not is_stacked:
                    p.rounded_rect(box, series.round_radius, True, False, color)
                else:
                    p.filled_rect(box, color)
                points.append(Point(x + bar_width // 2, top))
                if label_painter is not None:
                    label_painter.add(LabelValue(index=j, value=value, x=x + bar_width // 2, y=top))

            mark_points.add(MarkPointRenderOption(
                fill_color=color,
                mark_point=series.mark_point,
                values=series.values,
                points=points,
                value_formatter=self.opt.value_formatter,
            ))
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
                first_stacked = False

        trends.render()
        mark_lines.render()
        mark_points.render()
        for label_painter in label_painters:
            label_painter.render()


__all__ = ["BarChart", "group_layout", "group_margins"]
