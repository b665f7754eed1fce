"""Trend-line overlays.

Each :class:`~chartforge.features.indicators.TrendLine` of a series is
computed over the series values and stroked through the same x positions
as the samples.  Undefined head values (inside the first window) are
omitted, so the line starts at the first defined value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..drawing.color import Color
from ..drawing.geometry import Point, null_point
from ..features.indicators import TREND_RSI, TrendLine, compute_trend, scale_oscillator
from ..layout.painter import Painter
from ..layout.range import AxisRange

logger = logging.getLogger(__name__)

DEFAULT_TREND_STROKE_WIDTH = 2.0
DASH_SHARE = 0.02
MINIMUM_DASH = 4.0
GAP_SHARE = 0.8


@dataclass
class TrendLineRenderOption:
    """Trend lines over one series.

    ``xs`` holds the x pixel of every sample.  ``dashed`` is the default
    used by lines that leave :attr:`TrendLine.dashed` unset.
    """

    default_color: Color
    xs: Sequence[int]
    values: Sequence[Optional[float]]
    axis_range: AxisRange
    trend_lines: List[TrendLine] = field(default_factory=list)
    dashed: bool = True


def trend_dash_array(width: int, height: int) -> List[float]:
    dash = max((width + height) / 2 * DASH_SHARE, MINIMUM_DASH)
    return [dash, dash * GAP_SHARE]


class TrendLinePainter:
    def __init__(self, painter: Painter) -> None:
        self.painter = painter
        self.options: List[TrendLineRenderOption] = []

    def add(self, opt: TrendLineRenderOption) -> None:
        self.options.append(opt)

    def render(self) -> None:
        painter = self.painter
        for opt in self.options:
            for trend in opt.trend_lines:
                values = compute_trend(opt.values, trend.type, trend.period)
                if trend.type == TREND_RSI:
                    values = scale_oscillator(values, opt.axis_range.min, opt.axis_range.max)
                points = self._points(opt, values)
                if sum(1 for p in points if not p.is_null()) < 2:
                    logger.debug("trend line %s skipped: fewer than two defined values", trend.type)
                    continue
                color = trend.color if not trend.color.is_zero() else opt.default_color
                stroke_width = trend.stroke_width or DEFAULT_TREND_STROKE_WIDTH
                dashed = opt.dashed if trend.dashed is None else trend.dashed
                dash_array = trend_dash_array(painter.width, painter.height) if dashed else None
                if trend.tension > 0:
                    painter.smooth_line_stroke(points, trend.tension, color, stroke_width, dash_array)
                else:
                    painter.line_stroke(points, color, stroke_width, dash_array)

    @staticmethod
    def _points(opt: TrendLineRenderOption, values: Sequence[Optional[float]]) -> List[Point]:
        points = []
        started = False
        for x, value in zip(opt.xs, values):
            if value is None:
                # head values are omitted, later gaps break the line
                if started:
                    points.append(null_point(x))
                continue
            started = True
            points.append(Point(x, opt.axis_range.get_rest_height(value)))
        return points


__all__ = ["TrendLinePainter", "TrendLineRenderOption", "trend_dash_array", "DEFAULT_TREND_STROKE_WIDTH"]
