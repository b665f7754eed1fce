"""Horizontal bar series renderer.

Categories run up the y axis, first category at the bottom, and the bar
length follows the value axis along x.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from ..drawing.color import FONT_DARK, FONT_LIGHT
from ..drawing.fonts import FontStyle
from ..drawing.geometry import Box
from ..layout.pipeline import RenderResult
from ..options import ChartOption, HorizontalBarSeries
from .bar import group_layout
from .labels import LabelValue, SeriesLabelPainter
from .marks import MarkLinePainter, MarkLineRenderOption


class HorizontalBarChart:
    def __init__(self, result: RenderResult, opt: ChartOption) -> None:
        self.result = result
        self.opt = opt

    def render(self, series_list: Sequence[Tuple[int, HorizontalBarSeries]]) -> None:
        p = self.result.series_painter
        theme = p.theme
        y_range = self.result.y_ranges.get(0)
        x_range = self.result.x_range
        if y_range is None:
            return
        divide = y_range.auto_divide()
        if len(divide) < 2:
            return
        divide_count = len(divide) - 1
        section = divide[1] - divide[0]
        configured = min((s.bar_height for _, s in series_list if s.bar_height > 0), default=0)
        margin, bar_margin, bar_height = group_layout(section, len(series_list), configured)
        label_color = FONT_DARK if theme.is_dark else FONT_LIGHT

        mark_lines = MarkLinePainter(p)
        label_painters: List[SeriesLabelPainter] = []

        for position, (index, series) in enumerate(series_list):
            color = theme.get_series_color(index)
            label_painter = None
            if series.label.show:
                label_painter = SeriesLabelPainter(p, series.label, series.name,
                                                   value_formatter=self.opt.value_formatter)
                label_painters.append(label_painter)

            for j, value in enumerate(series.values[:divide_count]):
                if value is None:
                    continue
                # first category at the bottom
                row = divide_count - j - 1
                y = divide[row] + margin + position * (bar_height + bar_margin)
                right = x_range.get_height(value)
                p.filled_rect(Box(0, y, right, y + bar_height, True), color)
                if label_painter is not None:
                    label_painter.add(LabelValue(
                        index=j,
                        value=value,
                        x=right,
                        y=y + bar_height // 2,
                        vertical=False,
                        font_style=FontStyle(color=label_color),
                    ))

            mark_lines.add(MarkLineRenderOption(
                fill_color=color,
                stroke_color=color,
                mark_line=series.mark_line,
                values=series.values,
                axis_range=x_range,
                value_formatter=self.opt.value_formatter,
                vertical=True,
            ))

        mark_lines.render()
        for label_painter in label_painters:
            label_painter.render()


__all__ = ["HorizontalBarChart"]
