"""Drawing primitives for chartforge.

This package contains the color and geometry value types, text
measurement, and the SVG and raster back-ends that the painter draws
through.
"""

from .backend import DrawingBackend, new_backend
from .color import Color, color_from_hex, is_light_color, parse_color, rgb
from .fonts import FontStyle, LabelStyle, measure_text, wrap_text
from .geometry import (
    NULL_Y,
    Box,
    OffsetInt,
    OffsetStr,
    Point,
    auto_divide,
    auto_divide_spans,
    box_of,
    is_tick,
    null_point,
    padding_all,
    parse_flexible_value,
)

__all__ = [
    "DrawingBackend",
    "new_backend",
    "Color",
    "color_from_hex",
    "is_light_color",
    "parse_color",
    "rgb",
    "FontStyle",
    "LabelStyle",
    "measure_text",
    "wrap_text",
    "NULL_Y",
    "Box",
    "OffsetInt",
    "OffsetStr",
    "Point",
    "auto_divide",
    "auto_divide_spans",
    "box_of",
    "is_tick",
    "null_point",
    "padding_all",
    "parse_flexible_value",
]
