"""Font resolution and text measurement.

Both back-ends measure text through matplotlib's text-to-path machinery so
that layout decisions are identical for SVG and raster output.  A font is
identified either by a family name known to matplotlib's font manager or
by a path to a TrueType file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional

from matplotlib.font_manager import FontProperties
from matplotlib.textpath import TextToPath

from ..config import DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE
from .color import Color
from .geometry import Box, ceil_to_int, rotated_size

_TEXT_TO_PATH = TextToPath()


@dataclass(frozen=True)
class FontStyle:
    """Font family (or file path), size in points and color.

    A size of zero inherits the default size and a zero color inherits the
    theme's text color.
    """

    font: str = ""
    size: float = 0.0
    color: Color = Color()

    def resolved(self, default_font: str, default_color: Color, default_size: float = DEFAULT_FONT_SIZE) -> "FontStyle":
        return FontStyle(
            font=self.font or default_font,
            size=self.size if self.size > 0 else default_size,
            color=default_color if self.color.is_zero() else self.color,
        )


@lru_cache(maxsize=32)
def font_properties(font: str = DEFAULT_FONT_FAMILY) -> FontProperties:
    """Return matplotlib font properties for a family name or file path."""
    name = font or DEFAULT_FONT_FAMILY
    if os.path.isfile(name):
        return FontProperties(fname=name)
    return FontProperties(family=name)


@lru_cache(maxsize=4096)
def _text_extent(text: str, font: str, size: float) -> tuple[float, float, float]:
    props = font_properties(font).copy()
    props.set_size(size)
    width, height, descent = _TEXT_TO_PATH.get_text_width_height_descent(text, props, ismath=False)
    return width, height, descent


def measure_text(text: str, font: str, size: float, radians: float = 0.0) -> Box:
    """Measure the bounding box of *text* rendered with the given font.

    Returns a box anchored at the origin; rotation enlarges it to the
    axis-aligned bounds of the rotated text.
    """
    if not text:
        return Box(0, 0, 0, 0, True)
    width, height, _ = _text_extent(text, font or DEFAULT_FONT_FAMILY, size or DEFAULT_FONT_SIZE)
    w, h = rotated_size(width, height, radians)
    return Box(0, 0, w, h, True)


def text_descent(text: str, font: str, size: float) -> int:
    _, _, descent = _text_extent(text or "x", font or DEFAULT_FONT_FAMILY, size or DEFAULT_FONT_SIZE)
    return ceil_to_int(descent)


def wrap_text(text: str, width: int, font: str, size: float) -> List[str]:
    """Wrap *text* on word boundaries so each line fits in *width* pixels.

    Explicit newlines are kept.  A single word wider than *width* stays on
    its own line.
    """
    lines: List[str] = []
    for paragraph in text.split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue
        current: Optional[str] = None
        for word in words:
            candidate = word if current is None else current + " " + word
            if current is not None and measure_text(candidate, font, size).width > width:
                lines.append(current)
                current = word
            else:
                current = candidate
        if current is not None:
            lines.append(current)
    return lines


@dataclass(frozen=True)
class LabelStyle:
    """Badge styling for a text label.

    A transparent background draws plain text; otherwise the text sits in
    a rounded rectangle with an optional border.
    """

    font_style: FontStyle = FontStyle()
    background_color: Color = Color()
    corner_radius: int = 0
    border_color: Color = Color()
    border_width: float = 0.0
