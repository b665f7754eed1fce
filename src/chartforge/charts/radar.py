"""Radar renderer.

The indicators are spokes spread evenly around the center, the first
one pointing straight up.  Five concentric polygons mark 20 % steps of
each indicator's range and every series becomes a closed, lightly
filled polygon through its scaled values.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from ..config import DEFAULT_DOT_WIDTH
from ..drawing.fonts import FontStyle
from ..drawing.geometry import Point, get_radius, polygon_angles, polygon_point
from ..errors import InvalidOptionsError
from ..layout.painter import Painter
from ..options import RadarIndicator, RadarSeries
from .labels import LabelValue, SeriesLabelPainter

RING_COUNT = 5
FILL_ALPHA = 20
INDICATOR_TEXT_GAP = 5


def validate_indicators(indicators: Sequence[RadarIndicator]) -> None:
    if len(indicators) < 3:
        raise InvalidOptionsError("the count of indicator should be >= 3")


def indicator_bounds(indicator: RadarIndicator, series_list: Sequence[Tuple[int, RadarSeries]],
                     position: int) -> Tuple[float, float]:
    """Range of one indicator; an unset maximum uses the largest value."""
    low = indicator.min
    high = indicator.max
    if high <= low:
        values = [s.values[position] for _, s in series_list
                  if position < len(s.values) and s.values[position] is not None]
        high = max(values, default=low)
    if high <= low:
        high = low + 1
    return low, high


class RadarChart:
    def __init__(self, painter: Painter, indicators: Sequence[RadarIndicator], value_formatter=None) -> None:
        validate_indicators(indicators)
        self.painter = painter
        self.indicators = list(indicators)
        self.value_formatter = value_formatter

    def render(self, series_list: Sequence[Tuple[int, RadarSeries]]) -> None:
        p = self.painter
        theme = p.theme
        sides = len(self.indicators)
        center = Point(p.width // 2, p.height // 2)
        radius = get_radius(min(p.width, p.height), "")
        angles = polygon_angles(sides)

        for ring in range(1, RING_COUNT + 1):
            p.polygon(center, radius * ring / RING_COUNT, sides, theme.axis_split_line_color)
        outer = [polygon_point(center, radius, angle) for angle in angles]
        for point in outer:
            p.line(center.x, center.y, point.x, point.y, theme.axis_split_line_color)
        self._indicator_names(center, outer)

        bounds = [indicator_bounds(ind, series_list, i) for i, ind in enumerate(self.indicators)]
        label_painters: List[SeriesLabelPainter] = []
        for index, series in series_list:
            color = theme.get_series_color(index)
            points: List[Point] = []
            values: List[float] = []
            for i, angle in enumerate(angles):
                value = series.values[i] if i < len(series.values) else None
                value = 0.0 if value is None else value
                low, high = bounds[i]
                share = min(max((value - low) / (high - low), 0.0), 1.0)
                points.append(polygon_point(center, radius * share, angle))
                values.append(value)
            p.set_draw_style(color.with_alpha(FILL_ALPHA), color, 2)
            p.move_to(points[0].x, points[0].y)
            for point in points[1:]:
                p.line_to(point.x, point.y)
            p.close()
            p.fill_stroke()
            p.dots(points, theme.background_color, color, 1, DEFAULT_DOT_WIDTH)

            if series.label.show:
                label_painter = SeriesLabelPainter(p, series.label, series.name,
                                                   value_formatter=self.value_formatter)
                for i, (point, value) in enumerate(zip(points, values)):
                    label_painter.add(LabelValue(index=i, value=value, x=point.x, y=point.y))
                label_painters.append(label_painter)

        for label_painter in label_painters:
            label_painter.render()

    def _indicator_names(self, center: Point, outer: Sequence[Point]) -> None:
        p = self.painter
        style = p.resolve_font(FontStyle())
        for indicator, point in zip(self.indicators, outer):
            box = p.measure_text(indicator.name, 0.0, style)
            x = point.x
            y = point.y
            if x < center.x:
                x -= box.width + INDICATOR_TEXT_GAP
            elif x == center.x:
                x -= box.width // 2
            else:
                x += INDICATOR_TEXT_GAP
            if y < center.y:
                y -= INDICATOR_TEXT_GAP
            elif y > center.y:
                y += box.height + INDICATOR_TEXT_GAP
            else:
                y += box.height // 2
            p.text(indicator.name, x, y, 0.0, style)


__all__ = ["RadarChart", "validate_indicators", "indicator_bounds", "RING_COUNT"]
