"""Drawing back-end contract.

A back-end accepts primitive path and text calls in absolute canvas
coordinates and serializes the result.  Path construction is stateful:
``move_to``/``line_to``/``quad_curve_to``/``arc_to``/``circle``/``close``
append to the current path, and ``stroke``/``fill``/``fill_stroke`` paint
it and start a new one.  Concrete back-ends only implement the painting of
a finished path, the drawing of a text run and the final encoding.
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from typing import BinaryIO, List, Optional, Sequence, Tuple

from ..config import DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE, FORMAT_JPG, FORMAT_PNG, FORMAT_SVG
from ..errors import InvalidOptionsError
from .color import BLACK, Color, TRANSPARENT
from .fonts import measure_text
from .geometry import Box

logger = logging.getLogger(__name__)

# Path commands.  Each entry is a tuple whose first item is the command:
#   ("M", x, y), ("L", x, y), ("Q", cx, cy, x, y),
#   ("A", cx, cy, rx, ry, start, delta), ("O", radius, x, y), ("Z",)
PathCommand = Tuple


class DrawingBackend(ABC):
    """Base class holding the shared path and style state."""

    format: str = ""

    def __init__(self, width: int, height: int, font: str = DEFAULT_FONT_FAMILY) -> None:
        self.width = width
        self.height = height
        self.font = font or DEFAULT_FONT_FAMILY
        self.font_size = DEFAULT_FONT_SIZE
        self.font_color: Color = BLACK
        self.stroke_color: Color = TRANSPARENT
        self.fill_color: Color = TRANSPARENT
        self.stroke_width = 0.0
        self.dash_array: List[float] = []
        self.text_rotation = 0.0
        self._path: List[PathCommand] = []

    # Style setters

    def set_font(self, font: str) -> None:
        self.font = font or DEFAULT_FONT_FAMILY

    def set_font_size(self, size: float) -> None:
        self.font_size = size if size > 0 else DEFAULT_FONT_SIZE

    def set_font_color(self, color: Color) -> None:
        self.font_color = color

    def set_stroke_color(self, color: Color) -> None:
        self.stroke_color = color

    def set_fill_color(self, color: Color) -> None:
        self.fill_color = color

    def set_stroke_width(self, width: float) -> None:
        self.stroke_width = width

    def set_stroke_dash_array(self, dashes: Optional[Sequence[float]]) -> None:
        self.dash_array = list(dashes or [])

    def set_text_rotation(self, radians: float) -> None:
        self.text_rotation = radians

    def clear_text_rotation(self) -> None:
        self.text_rotation = 0.0

    # Path construction

    def move_to(self, x: int, y: int) -> None:
        self._path.append(("M", x, y))

    def line_to(self, x: int, y: int) -> None:
        if not self._path:
            self._path.append(("M", x, y))
            return
        self._path.append(("L", x, y))

    def quad_curve_to(self, cx: int, cy: int, x: int, y: int) -> None:
        self._path.append(("Q", cx, cy, x, y))

    def arc_to(self, cx: int, cy: int, rx: float, ry: float, start_angle: float, delta: float) -> None:
        """Append an elliptical arc starting at *start_angle* and sweeping *delta* radians.

        Angles grow clockwise on screen because the y axis points down.
        """
        self._path.append(("A", cx, cy, rx, ry, start_angle, delta))

    def circle(self, radius: float, x: int, y: int) -> None:
        self._path.append(("O", radius, x, y))

    def close(self) -> None:
        if self._path:
            self._path.append(("Z",))

    def stroke(self) -> None:
        self._flush(stroke=True, fill=False)

    def fill(self) -> None:
        self._flush(stroke=False, fill=True)

    def fill_stroke(self) -> None:
        self._flush(stroke=True, fill=True)

    def _flush(self, stroke: bool, fill: bool) -> None:
        path = self._path
        self._path = []
        if not path:
            return
        if stroke and (self.stroke_width <= 0 or self.stroke_color.is_transparent()):
            stroke = False
        if fill and self.fill_color.is_transparent():
            fill = False
        if not stroke and not fill:
            return
        self.draw_path(path, stroke, fill)

    # Text

    def measure_text(self, body: str) -> Box:
        return measure_text(body, self.font, self.font_size, self.text_rotation)

    def text(self, body: str, x: int, y: int) -> None:
        """Draw *body* with its baseline origin at (x, y)."""
        if body == "":
            return
        self.draw_text(body, x, y)

    # Output

    @abstractmethod
    def draw_path(self, path: List[PathCommand], stroke: bool, fill: bool) -> None:
        """Paint a finished path with the current style."""

    @abstractmethod
    def draw_text(self, body: str, x: int, y: int) -> None:
        """Paint a text run with the current font style and rotation."""

    @abstractmethod
    def save(self, writer: BinaryIO) -> None:
        """Encode the canvas into *writer*."""

    def bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.save(buffer)
        return buffer.getvalue()


def new_backend(output_format: str, width: int, height: int, font: str = DEFAULT_FONT_FAMILY) -> DrawingBackend:
    """Create a back-end for ``svg``, ``png`` or ``jpg`` output."""
    fmt = (output_format or FORMAT_PNG).lower()
    if fmt == "jpeg":
        fmt = FORMAT_JPG
    logger.debug("creating %s back-end %dx%d", fmt, width, height)
    if fmt == FORMAT_SVG:
        from .svg import SVGBackend

        return SVGBackend(width, height, font)
    if fmt in (FORMAT_PNG, FORMAT_JPG):
        from .raster import RasterBackend

        return RasterBackend(width, height, font, output_format=fmt)
    raise InvalidOptionsError(f"unsupported output format: {output_format!r}")
