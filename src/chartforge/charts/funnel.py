"""Funnel renderer: one trapezoid per series, stacked top to bottom."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from ..drawing.fonts import FontStyle
from ..drawing.geometry import Point
from ..layout.painter import Painter
from ..options import FunnelSeries
from .labels import LabelValue, SeriesLabelPainter
from .series import label_text

DEFAULT_FUNNEL_LABEL_TEMPLATE = "{b}({d})"
FUNNEL_GAP = 2


class FunnelChart:
    """Each trapezoid is as wide as its value relative to the largest one
    and narrows to the width of the next stage.

    The percent in labels is relative to the largest value too.
    """

    def __init__(self, painter: Painter, value_formatter=None) -> None:
        self.painter = painter
        self.value_formatter = value_formatter

    def render(self, series_list: Sequence[Tuple[int, FunnelSeries]]) -> None:
        p = self.painter
        theme = p.theme
        count = len(series_list)
        if count == 0:
            return
        values = [s.value if s.value is not None and s.value > 0 else 0.0 for _, s in series_list]
        max_value = max(values)
        if max_value <= 0:
            return
        item_height = (p.height - FUNNEL_GAP * (count - 1)) // count
        widths = [int(value / max_value * p.width) for value in values]

        y = 0
        for position, (index, series) in enumerate(series_list):
            width = widths[position]
            next_width = widths[position + 1] if position + 1 < count else 0
            top_left = (p.width - width) // 2
            bottom_left = (p.width - next_width) // 2
            points: List[Point] = [
                Point(top_left, y),
                Point(top_left + width, y),
                Point(bottom_left + next_width, y + item_height),
                Point(bottom_left, y + item_height),
                Point(top_left, y),
            ]
            color = theme.get_series_color(index)
            p.fill_area(points, color)

            if series.label.show is not False:
                percent = values[position] / max_value
                text = self._label_text(series, values[position], percent)
                style = p.resolve_font(FontStyle(
                    series.label.font_style.font,
                    series.label.font_style.size,
                    series.label.font_style.color,
                ))
                box = p.measure_text(text, 0.0, style)
                p.text(text, (p.width - box.width) // 2, y + item_height // 2 + box.height // 2, 0.0, style)
            y += item_height + FUNNEL_GAP

    def _label_text(self, series: FunnelSeries, value: float, percent: float) -> str:
        if series.label.label_formatter is not None:
            painter = SeriesLabelPainter(self.painter, series.label, series.name)
            text, _ = painter.text_for(LabelValue(index=0, value=value, x=0, y=0, percent=percent))
            return text
        return label_text(series.label, series.name, value, percent, DEFAULT_FUNNEL_LABEL_TEMPLATE,
                          self.value_formatter)


__all__ = ["FunnelChart", "DEFAULT_FUNNEL_LABEL_TEMPLATE"]
