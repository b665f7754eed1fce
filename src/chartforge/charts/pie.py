"""Pie and doughnut renderer.

Each :class:`~chartforge.options.PieSeries` is one slice.  Slices start
at 12 o'clock and sweep clockwise in series order, each spanning
``2π · value / total``.  Labels sit outside the circle at the end of a
kinked leader line; on each side of the pie they are pushed apart
vertically so they never overlap.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..drawing.color import Color
from ..drawing.fonts import FontStyle
from ..drawing.geometry import get_radius
from ..layout.painter import Painter
from ..options import PieSeries
from .labels import LabelValue, SeriesLabelPainter
from .series import label_text

DEFAULT_PIE_LABEL_TEMPLATE = "{b}: {d}"
LABEL_LINE_LENGTH = 15
SHORT_LABEL_LINE_LENGTH = 10
LABEL_KINK_LENGTH = 10
LABEL_SPACING = 2


@dataclass
class _SliceLabel:
    text: str
    style: FontStyle
    color: Color
    start_x: int
    start_y: int
    end_x: int
    end_y: int
    right: bool
    height: int = 0


def _spread(labels: List[_SliceLabel]) -> None:
    """Move labels on one side down until consecutive ones clear each other."""
    labels.sort(key=lambda label: label.end_y)
    previous = None
    for label in labels:
        if previous is not None:
            minimum = previous.end_y + previous.height + LABEL_SPACING
            if label.end_y < minimum:
                label.end_y = minimum
        previous = label


class PieChart:
    def __init__(self, painter: Painter, value_formatter=None) -> None:
        self.painter = painter
        self.value_formatter = value_formatter

    def render(self, series_list: Sequence[Tuple[int, PieSeries]]) -> None:
        p = self.painter
        theme = p.theme
        values = [s.value if s.value is not None and s.value > 0 else 0.0 for _, s in series_list]
        total = sum(values)
        if total <= 0:
            return
        cx = p.width // 2
        cy = p.height // 2
        diameter = min(p.width, p.height)
        radius_value = next((s.radius for _, s in series_list if s.radius), "")
        inner_value = next((s.inner_radius for _, s in series_list if s.inner_radius), "")
        radius = get_radius(diameter, radius_value)
        inner_radius = get_radius(diameter, inner_value, 0.0) if inner_value else 0.0
        if inner_radius >= radius:
            inner_radius = 0.0
        line_length = LABEL_LINE_LENGTH if radius >= 50 else SHORT_LABEL_LINE_LENGTH

        labels: List[_SliceLabel] = []
        current = -math.pi / 2
        for (index, series), value in zip(series_list, values):
            if value <= 0:
                continue
            delta = 2 * math.pi * value / total
            color = theme.get_series_color(index)
            self._slice(cx, cy, radius, inner_radius, current, delta, color)
            if series.label.show:
                percent = value / total
                text = self._label_text(series, value, percent)
                if text:
                    labels.append(self._label(series, text, color, cx, cy, radius, line_length,
                                              current + delta / 2))
            current += delta

        self._draw_labels(labels)

    def _slice(self, cx: int, cy: int, radius: float, inner_radius: float, start: float, delta: float,
               color: Color) -> None:
        p = self.painter
        p.set_draw_style(fill_color=color, stroke_color=p.theme.background_color, stroke_width=1)
        if inner_radius > 0:
            p.move_to(cx + int(radius * math.cos(start)), cy + int(radius * math.sin(start)))
            p.arc_to(cx, cy, radius, radius, start, delta)
            end = start + delta
            p.line_to(cx + int(inner_radius * math.cos(end)), cy + int(inner_radius * math.sin(end)))
            p.arc_to(cx, cy, inner_radius, inner_radius, end, -delta)
        else:
            p.move_to(cx, cy)
            p.arc_to(cx, cy, radius, radius, start, delta)
        p.close()
        p.fill_stroke()

    def _label_text(self, series: PieSeries, value: float, percent: float) -> str:
        if series.label.label_formatter is not None:
            painter = SeriesLabelPainter(self.painter, series.label, series.name)
            text, _ = painter.text_for(LabelValue(index=0, value=value, x=0, y=0, percent=percent))
            return text
        return label_text(series.label, series.name, value, percent, DEFAULT_PIE_LABEL_TEMPLATE,
                          self.value_formatter)

    def _label(self, series: PieSeries, text: str, color: Color, cx: int, cy: int, radius: float,
               line_length: int, angle: float) -> _SliceLabel:
        p = self.painter
        cos = math.cos(angle)
        sin = math.sin(angle)
        style = p.resolve_font(FontStyle(
            series.label.font_style.font,
            series.label.font_style.size,
            series.label.font_style.color if not series.label.font_style.color.is_zero() else p.theme.text_color,
        ))
        box = p.measure_text(text, 0.0, style)
        return _SliceLabel(
            text=text,
            style=style,
            color=color,
            start_x=cx + int(radius * cos),
            start_y=cy + int(radius * sin),
            end_x=cx + int((radius + line_length) * cos),
            end_y=cy + int((radius + line_length) * sin),
            right=cos >= 0,
            height=box.height,
        )

    def _draw_labels(self, labels: List[_SliceLabel]) -> None:
        p = self.painter
        _spread([label for label in labels if label.right])
        _spread([label for label in labels if not label.right])
        for label in labels:
            kink_x = label.end_x + LABEL_KINK_LENGTH if label.right else label.end_x - LABEL_KINK_LENGTH
            p.set_draw_style(stroke_color=label.color, stroke_width=1)
            p.move_to(label.start_x, label.start_y)
            p.line_to(label.end_x, label.end_y)
            p.line_to(kink_x, label.end_y)
            p.stroke()
            width = p.measure_text(label.text, 0.0, label.style).width
            x = kink_x + LABEL_SPACING if label.right else kink_x - width - LABEL_SPACING
            x = max(0, min(x, p.width - width))
            p.text(label.text, x, label.end_y + label.height // 2 - 2, 0.0, label.style)


__all__ = ["PieChart", "DEFAULT_PIE_LABEL_TEMPLATE"]
