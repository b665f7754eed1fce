"""Clipped, translated drawing surfaces.

A :class:`Painter` owns a :class:`~chartforge.drawing.geometry.Box` and a
shared reference to one drawing back-end.  All coordinates passed to its
primitives are relative to the box; they are translated before reaching
the back-end.  :meth:`Painter.child` derives a sub-surface that shares the
back-end and inherits the theme, font and value formatter, so the layout
pipeline can carve the canvas into title, legend, axis and series regions
without any region knowing about the others.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import BinaryIO, List, Optional, Sequence, Tuple, Union

from ..config import (
    ALIGN_CENTER,
    ALIGN_RIGHT,
    DEFAULT_CHART_HEIGHT,
    DEFAULT_CHART_WIDTH,
    DEFAULT_FONT_FAMILY,
    FORMAT_PNG,
    POSITION_BOTTOM,
    POSITION_LEFT,
    POSITION_RIGHT,
    POSITION_TOP,
)
from ..drawing.backend import DrawingBackend, new_backend
from ..drawing.color import Color, TRANSPARENT
from ..drawing.fonts import FontStyle, measure_text, wrap_text
from ..drawing.geometry import (
    Box,
    OffsetInt,
    Point,
    auto_divide,
    is_tick,
    polygon_points,
)
from ..errors import BackendError, FormatError
from ..humanize import ValueFormatter, humanize
from ..theme import Theme, resolve_theme

logger = logging.getLogger(__name__)


def split_null_segments(points: Sequence[Point]) -> List[List[Point]]:
    """Split *points* at null markers into contiguous runs."""
    segments: List[List[Point]] = []
    current: List[Point] = []
    for point in points:
        if point.is_null():
            if current:
                segments.append(current)
            current = []
            continue
        current.append(point)
    if current:
        segments.append(current)
    return segments


class Painter:
    """A drawable region over a shared back-end."""

    def __init__(
        self,
        backend: DrawingBackend,
        box: Box,
        theme: Optional[Theme] = None,
        font: str = DEFAULT_FONT_FAMILY,
        value_formatter: Optional[ValueFormatter] = None,
    ) -> None:
        self.backend = backend
        self.box = box
        self.theme = resolve_theme(theme)
        self.font = font or DEFAULT_FONT_FAMILY
        self.value_formatter = value_formatter

    @classmethod
    def new(
        cls,
        width: int = DEFAULT_CHART_WIDTH,
        height: int = DEFAULT_CHART_HEIGHT,
        output_format: str = FORMAT_PNG,
        font: str = DEFAULT_FONT_FAMILY,
        theme: Union[Theme, str, None] = None,
    ) -> "Painter":
        """Create a root painter covering a ``width`` x ``height`` canvas."""
        backend = new_backend(output_format, width, height, font)
        return cls(backend, Box(0, 0, width, height, True), resolve_theme(theme), font)

    def child(
        self,
        padding: Optional[Box] = None,
        box: Optional[Box] = None,
        theme: Optional[Theme] = None,
        font: Optional[str] = None,
    ) -> "Painter":
        """Derive a sub-surface sharing this painter's back-end.

        *box* is given in this painter's coordinates and replaces the
        region when it is non-zero; *padding* then shrinks it inward.
        """
        region = self.box
        if box is not None and not box.is_zero():
            region = Box(
                self.box.left + box.left,
                self.box.top + box.top,
                self.box.left + box.right,
                self.box.top + box.bottom,
                True,
            )
        if padding is not None:
            region = region.pad(padding)
        return Painter(
            self.backend,
            region,
            theme or self.theme,
            font or self.font,
            self.value_formatter,
        )

    @property
    def width(self) -> int:
        return self.box.width

    @property
    def height(self) -> int:
        return self.box.height

    @property
    def format(self) -> str:
        return self.backend.format

    # Output

    def bytes(self) -> bytes:
        """Encode the whole canvas in the back-end's output format."""
        try:
            return self.backend.bytes()
        except (OSError, ValueError, RuntimeError) as exc:
            raise BackendError(f"failed to encode {self.backend.format} output: {exc}") from exc

    def save(self, target: Union[str, Path, BinaryIO]) -> None:
        data = self.bytes()
        try:
            if isinstance(target, (str, Path)):
                Path(target).write_bytes(data)
            else:
                target.write(data)
        except OSError as exc:
            raise BackendError(f"failed to write chart: {exc}") from exc

    # Style helpers

    def set_draw_style(
        self,
        fill_color: Color = TRANSPARENT,
        stroke_color: Color = TRANSPARENT,
        stroke_width: float = 0.0,
        dash_array: Optional[Sequence[float]] = None,
    ) -> None:
        self.backend.set_fill_color(fill_color)
        self.backend.set_stroke_color(stroke_color)
        self.backend.set_stroke_width(stroke_width)
        self.backend.set_stroke_dash_array(dash_array)

    def resolve_font(self, style: Optional[FontStyle]) -> FontStyle:
        return (style or FontStyle()).resolved(self.font, self.theme.text_color)

    def _text_style(self, style: Optional[FontStyle]) -> FontStyle:
        resolved = self.resolve_font(style)
        self.backend.set_font(resolved.font)
        self.backend.set_font_size(resolved.size)
        self.backend.set_font_color(resolved.color)
        return resolved

    # Path primitives in painter coordinates

    def move_to(self, x: int, y: int) -> None:
        self.backend.move_to(x + self.box.left, y + self.box.top)

    def line_to(self, x: int, y: int) -> None:
        self.backend.line_to(x + self.box.left, y + self.box.top)

    def quad_curve_to(self, cx: int, cy: int, x: int, y: int) -> None:
        self.backend.quad_curve_to(cx + self.box.left, cy + self.box.top, x + self.box.left, y + self.box.top)

    def arc_to(self, cx: int, cy: int, rx: float, ry: float, start_angle: float, delta: float) -> None:
        self.backend.arc_to(cx + self.box.left, cy + self.box.top, rx, ry, start_angle, delta)

    def close(self) -> None:
        self.backend.close()

    def stroke(self) -> None:
        self.backend.stroke()

    def fill(self) -> None:
        self.backend.fill()

    def fill_stroke(self) -> None:
        self.backend.fill_stroke()

    # Shapes

    def line(self, x1: int, y1: int, x2: int, y2: int, color: Color, stroke_width: float = 1.0,
             dash_array: Optional[Sequence[float]] = None) -> None:
        self.set_draw_style(stroke_color=color, stroke_width=stroke_width, dash_array=dash_array)
        self.move_to(x1, y1)
        self.line_to(x2, y2)
        self.stroke()

    def circle(self, radius: float, x: int, y: int, fill_color: Color, stroke_color: Color = TRANSPARENT,
               stroke_width: float = 0.0) -> None:
        self.set_draw_style(fill_color, stroke_color, stroke_width)
        self.backend.circle(radius, x + self.box.left, y + self.box.top)
        self.fill_stroke()

    def rect(self, box: Box, stroke_color: Color, stroke_width: float = 1.0) -> None:
        """Outline *box*."""
        self.filled_rect(box, TRANSPARENT, stroke_color, stroke_width)

    def filled_rect(self, box: Box, fill_color: Color, stroke_color: Color = TRANSPARENT,
                    stroke_width: float = 0.0) -> None:
        self.set_draw_style(fill_color, stroke_color, stroke_width)
        self.move_to(box.left, box.top)
        self.line_to(box.right, box.top)
        self.line_to(box.right, box.bottom)
        self.line_to(box.left, box.bottom)
        self.close()
        self.fill_stroke()

    def rounded_rect(self, box: Box, radius: int, round_top: bool, round_bottom: bool, fill_color: Color,
                     stroke_color: Color = TRANSPARENT, stroke_width: float = 0.0) -> None:
        """Draw a rectangle whose top and/or bottom corners are rounded."""
        radius = max(0, min(radius, box.width // 2, box.height // 2))
        if radius == 0 or not (round_top or round_bottom):
            self.filled_rect(box, fill_color, stroke_color, stroke_width)
            return
        self.set_draw_style(fill_color, stroke_color, stroke_width)
        r = float(radius)
        if round_top:
            self.move_to(box.left + radius, box.top)
            self.line_to(box.right - radius, box.top)
            self.arc_to(box.right - radius, box.top + radius, r, r, -math.pi / 2, math.pi / 2)
        else:
            self.move_to(box.left, box.top)
            self.line_to(box.right, box.top)
        if round_bottom:
            self.line_to(box.right, box.bottom - radius)
            self.arc_to(box.right - radius, box.bottom - radius, r, r, 0, math.pi / 2)
            self.line_to(box.left + radius, box.bottom)
            self.arc_to(box.left + radius, box.bottom - radius, r, r, math.pi / 2, math.pi / 2)
        else:
            self.line_to(box.right, box.bottom)
            self.line_to(box.left, box.bottom)
        if round_top:
            self.line_to(box.left, box.top + radius)
            self.arc_to(box.left + radius, box.top + radius, r, r, math.pi, math.pi / 2)
        self.close()
        self.fill_stroke()

    def dots(self, points: Sequence[Point], fill_color: Color, stroke_color: Color = TRANSPARENT,
             stroke_width: float = 0.0, radius: float = 2.0) -> None:
        """Draw a dot at every non-null point."""
        for point in points:
            if point.is_null():
                continue
            self.circle(radius, point.x, point.y, fill_color, stroke_color, stroke_width)

    def polygon(self, center: Point, radius: float, sides: int, stroke_color: Color, stroke_width: float = 1.0,
                fill_color: Color = TRANSPARENT) -> None:
        """Draw a regular polygon with its first vertex straight up."""
        points = polygon_points(center, radius, sides)
        if not points:
            return
        self.set_draw_style(fill_color, stroke_color, stroke_width)
        self.move_to(points[0].x, points[0].y)
        for point in points[1:]:
            self.line_to(point.x, point.y)
        self.close()
        self.fill_stroke()

    def pin(self, x: int, y: int, width: int, fill_color: Color, stroke_color: Color = TRANSPARENT,
            stroke_width: float = 0.0) -> None:
        """Draw a map-pin glyph: a round head over a tapering tail."""
        r = width / 2
        y -= width // 4
        angle = math.radians(15)
        self.set_draw_style(fill_color, stroke_color, stroke_width)
        self.arc_to(x, y, r, r, math.pi / 2 + angle, 2 * math.pi - 2 * angle)
        self.line_to(x, y)
        self.close()
        self.fill_stroke()
        self.set_draw_style(fill_color)
        self.move_to(x - int(r), y)
        self.quad_curve_to(x, y + int(r * 2.5), x + int(r), y)
        self.close()
        self.fill()

    def arrow(self, direction: str, x: int, y: int, width: int, height: int, fill_color: Color,
              stroke_color: Color = TRANSPARENT, stroke_width: float = 0.0) -> None:
        """Draw an arrow head pointing toward *direction*, tip at (x, y)."""
        half_width = width // 2
        half_height = height // 2
        self.set_draw_style(fill_color, stroke_color, stroke_width)
        if direction in (POSITION_TOP, POSITION_BOTTOM):
            x0 = x - half_width
            x1 = x0 + width
            dy = -(height // 3)
            y0 = y
            y1 = y0 - height
            if direction == POSITION_BOTTOM:
                y0 = y - height
                y1 = y
                dy = 2 * dy
            self.move_to(x0, y0)
            self.line_to(x0 + half_width, y1)
            self.line_to(x1, y0)
            self.line_to(x0 + half_width, y + dy)
        else:
            x0 = x + width
            dx = -(width // 3)
            if direction == POSITION_RIGHT:
                x0 = x - width
                dx = -dx
            x1 = x
            y0 = y - half_height
            self.move_to(x0, y0)
            self.line_to(x1, y0 + half_height)
            self.line_to(x0, y0 + height)
            self.line_to(x0 + dx, y0 + half_height)
        self.close()
        self.fill_stroke()

    def mark_line(self, x: int, y: int, width: int, fill_color: Color, stroke_color: Color,
                  stroke_width: float = 1.0, dash_array: Optional[Sequence[float]] = None) -> None:
        """Draw a dot, a horizontal segment and a right arrow across *width*."""
        arrow_width = 16
        arrow_height = 10
        radius = 3
        end_x = x + width
        self.circle(radius, x + radius, y, fill_color)
        self.line(x + radius * 3, y, end_x - arrow_width, y, stroke_color, stroke_width, dash_array)
        self.arrow(POSITION_RIGHT, end_x, y, arrow_width, arrow_height, fill_color)

    def vertical_mark_line(self, x: int, top: int, bottom: int, fill_color: Color, stroke_color: Color,
                           stroke_width: float = 1.0, dash_array: Optional[Sequence[float]] = None) -> None:
        """Draw a dot at *bottom*, a vertical segment and an up arrow at *top*."""
        arrow_width = 10
        arrow_height = 16
        radius = 3
        self.circle(radius, x, bottom - radius, fill_color)
        self.line(x, bottom - radius * 3, x, top + arrow_height, stroke_color, stroke_width, dash_array)
        self.arrow(POSITION_TOP, x, top + arrow_height, arrow_width, arrow_height, fill_color)

    def legend_line_dot(self, box: Box, stroke_color: Color, stroke_width: float, dot_color: Color) -> None:
        center = (box.height - int(stroke_width)) // 2 - 1
        self.line(box.left, box.top - center, box.right, box.top - center, stroke_color, stroke_width)
        self.circle(5, box.left + box.width // 2, box.top - center, dot_color, dot_color, 3)

    def set_background(self, width: int, height: int, color: Color, inside: bool = True) -> None:
        """Fill a background rectangle.

        With ``inside=False`` absolute canvas coordinates are used, so a
        child painter can still paint the full canvas.
        """
        self.set_draw_style(fill_color=color)
        if inside:
            self.move_to(0, 0)
            self.line_to(width, 0)
            self.line_to(width, height)
            self.line_to(0, height)
        else:
            self.backend.move_to(0, 0)
            self.backend.line_to(width, 0)
            self.backend.line_to(width, height)
            self.backend.line_to(0, height)
        self.close()
        self.fill()

    # Polylines and areas

    def line_stroke(self, points: Sequence[Point], color: Color, stroke_width: float,
                    dash_array: Optional[Sequence[float]] = None) -> None:
        """Stroke a polyline; null points split it into separate sub-paths.

        A sub-path with a single point is drawn as a small dot so isolated
        samples stay visible.
        """
        for segment in split_null_segments(points):
            if len(segment) == 1:
                self.circle(2, segment[0].x, segment[0].y, color)
                continue
            self.set_draw_style(stroke_color=color, stroke_width=stroke_width, dash_array=dash_array)
            self.move_to(segment[0].x, segment[0].y)
            for point in segment[1:]:
                self.line_to(point.x, point.y)
            self.stroke()

    def _smooth_path(self, points: Sequence[Point], tension: float, start: bool = True) -> None:
        """Append a smoothed run through *points* to the current path.

        Every sample ends one quadratic curve, so the run passes through
        all of them.  The control point leaves the previous sample along
        its tangent (the direction between its neighbours) scaled by
        *tension*; 0 gives straight segments.
        """
        t = min(1.0, max(0.0, tension))
        first = points[0]
        if start:
            self.move_to(first.x, first.y)
        else:
            self.line_to(first.x, first.y)
        for i in range(1, len(points)):
            prev, cur = points[i - 1], points[i]
            before = points[i - 2] if i > 1 else prev
            cx = int(round(prev.x + t * (cur.x - before.x) / 2))
            cy = int(round(prev.y + t * (cur.y - before.y) / 2))
            self.quad_curve_to(cx, cy, cur.x, cur.y)

    def smooth_line_stroke(self, points: Sequence[Point], tension: float, color: Color, stroke_width: float,
                           dash_array: Optional[Sequence[float]] = None) -> None:
        """Stroke a smoothed polyline, splitting at null points."""
        for segment in split_null_segments(points):
            if len(segment) == 1:
                self.circle(2, segment[0].x, segment[0].y, color)
                continue
            self.set_draw_style(stroke_color=color, stroke_width=stroke_width, dash_array=dash_array)
            self._smooth_path(segment, tension)
            self.stroke()

    def fill_area(self, points: Sequence[Point], fill_color: Color) -> None:
        """Fill the polygon through the non-null *points*.

        Fewer than three remaining points enclose no area and are skipped.
        """
        valid = [p for p in points if not p.is_null()]
        if len(valid) < 3:
            return
        self.set_draw_style(fill_color=fill_color)
        self.move_to(valid[0].x, valid[0].y)
        for point in valid[1:]:
            self.line_to(point.x, point.y)
        self.close()
        self.fill()

    def smooth_fill_chart_area(self, points: Sequence[Point], tension: float, fill_color: Color) -> None:
        """Fill under a smoothed line.

        *points* are the line samples followed by the bottom-right corner,
        the bottom-left corner and the first sample again; only the line
        part is smoothed, the corners stay sharp.
        """
        valid = [p for p in points if not p.is_null()]
        if len(valid) < 4:
            self.fill_area(valid, fill_color)
            return
        line_part = valid[:-3]
        corners = valid[-3:]
        self.set_draw_style(fill_color=fill_color)
        self._smooth_path(line_part, tension)
        for point in corners:
            self.line_to(point.x, point.y)
        self.close()
        self.fill()

    # Text

    def measure_text(self, text: str, radians: float = 0.0, style: Optional[FontStyle] = None) -> Box:
        resolved = self.resolve_font(style)
        return measure_text(text, resolved.font, resolved.size, radians)

    def measure_text_max_width_height(self, texts: Sequence[str], radians: float = 0.0,
                                      style: Optional[FontStyle] = None) -> Tuple[int, int]:
        max_width = 0
        max_height = 0
        for text in texts:
            box = self.measure_text(text, radians, style)
            max_width = max(max_width, box.width)
            max_height = max(max_height, box.height)
        return max_width, max_height

    def text(self, body: str, x: int, y: int, radians: float = 0.0, style: Optional[FontStyle] = None) -> None:
        """Draw *body* with its baseline origin at (x, y), rotated clockwise by *radians*."""
        self._text_style(style)
        if radians:
            self.backend.set_text_rotation(radians)
        self.backend.text(body, x + self.box.left, y + self.box.top)
        if radians:
            self.backend.clear_text_rotation()

    def text_fit(self, body: str, x: int, y: int, width: int, style: Optional[FontStyle] = None,
                 align: str = "") -> Box:
        """Word-wrap *body* into *width* and draw it line by line.

        Returns the box covering the drawn lines, relative to (x, y).
        """
        resolved = self.resolve_font(style)
        right = 0
        bottom = 0
        for line in wrap_text(body, width, resolved.font, resolved.size):
            if line == "":
                continue
            line_box = measure_text(line, resolved.font, resolved.size)
            x0 = x
            if align == ALIGN_RIGHT:
                x0 += width - line_box.width
            elif align == ALIGN_CENTER:
                x0 += (width - line_box.width) // 2
            bottom += line_box.height
            self.text(line, x0, y + bottom, 0.0, resolved)
            right = max(right, line_box.width)
        return Box(0, 0, right, bottom, True)

    def measure_text_fit(self, body: str, width: int, style: Optional[FontStyle] = None) -> Box:
        resolved = self.resolve_font(style)
        right = 0
        bottom = 0
        for line in wrap_text(body, width, resolved.font, resolved.size):
            if line == "":
                continue
            line_box = measure_text(line, resolved.font, resolved.size)
            bottom += line_box.height
            right = max(right, line_box.width)
        return Box(0, 0, right, bottom, True)

    # Axis helpers

    def ticks(self, length: int, label_count: int, tick_spaces: int, vertical: bool, color: Color,
              stroke_width: float = 1.0, first: int = 0) -> None:
        """Draw tick marks, keeping only those aligned with labels."""
        if label_count <= 0 or length <= 0:
            return
        values = auto_divide(self.height if vertical else self.width, tick_spaces)
        for index, value in enumerate(values):
            if index < first:
                continue
            if not is_tick(len(values) - first, label_count + 1, index - first):
                continue
            if vertical:
                self.line_stroke([Point(0, value), Point(length, value)], color, stroke_width)
            else:
                self.line_stroke([Point(value, length), Point(value, 0)], color, stroke_width)

    def multi_text(
        self,
        texts: Sequence[str],
        vertical: bool,
        label_count: int,
        center_labels: bool = False,
        align: str = "",
        radians: float = 0.0,
        style: Optional[FontStyle] = None,
        offset: OffsetInt = OffsetInt(),
        first: int = 0,
        label_skip_count: int = 0,
    ) -> None:
        """Distribute *texts* along the painter's width or height."""
        if not texts:
            return
        count = len(texts)
        size = self.height if vertical else self.width
        positions = auto_divide(size, count if center_labels else count - 1)
        position_count = len(positions)
        skipped = label_skip_count
        for index, start in enumerate(positions):
            if center_labels and index == position_count - 1:
                break
            if index < first:
                continue
            if (not vertical and index != count - 1
                    and not is_tick(position_count - first, label_count + 1, index - first)):
                continue
            if index != count - 1 and skipped < label_skip_count:
                skipped += 1
                continue
            skipped = 0
            if index >= count:
                break
            text = texts[index]
            box = self.measure_text(text, radians, style)
            x = 0
            y = 0
            if vertical:
                if center_labels:
                    start = (positions[index] + positions[index + 1]) // 2
                y = start + box.height // 2
                if align == ALIGN_RIGHT:
                    x = self.width - box.width
                elif align == ALIGN_CENTER:
                    x = (self.width - box.width) // 2
            else:
                # baseline sits one unrotated line below the top edge
                y = self.measure_text(text, 0.0, style).height
                if center_labels:
                    exact = count == label_count
                    if not exact and index == 0:
                        x = start - 1
                    elif not exact and index == count - 1:
                        x = self.width - box.width
                    else:
                        start = (positions[index] + positions[index + 1]) // 2
                        x = start - box.width // 2
                elif index == count - 1:
                    x = self.width - box.width
                else:
                    x = start - 1
            x += offset.left
            y += offset.top
            self.text(text, x, y, radians, style)

    def format_value(self, value: float) -> str:
        """Format *value* with the inherited formatter, defaulting to humanize."""
        if self.value_formatter is None:
            return humanize(value)
        return call_formatter(self.value_formatter, value)


def call_formatter(formatter, *args) -> str:
    """Invoke a user supplied formatter, wrapping its failures in FormatError."""
    try:
        return formatter(*args)
    except Exception as exc:
        raise FormatError(f"value formatter failed: {exc}") from exc


def position_is_vertical(position: str) -> bool:
    return position in (POSITION_LEFT, POSITION_RIGHT)


__all__ = ["Painter", "call_formatter", "split_null_segments", "position_is_vertical"]
