"""RGBA colors with parsing and HSL adjustment.

Colors are immutable 8-bit RGBA tuples.  The all-zero color doubles as the
"unset" marker in option models, so code that needs to know whether a user
chose a color checks :meth:`Color.is_zero` before falling back to the theme.
"""

from __future__ import annotations

import colorsys
import math
import re
from dataclasses import dataclass

from matplotlib.colors import CSS4_COLORS

_RGB_RE = re.compile(r"^rgba?\(([^)]*)\)$")


def _channel(value: float) -> int:
    return int(min(255, max(0, value)))


@dataclass(frozen=True)
class Color:
    """An RGBA color with 0..255 channels."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    def is_zero(self) -> bool:
        """Return True when every channel is zero (the unset color)."""
        return self.r == 0 and self.g == 0 and self.b == 0 and self.a == 0

    def is_transparent(self) -> bool:
        return self.a == 0

    def with_alpha(self, alpha: int) -> "Color":
        """Return a copy of the color with the alpha channel replaced."""
        return Color(self.r, self.g, self.b, _channel(alpha))

    def hsl(self) -> tuple[float, float, float]:
        """Return (hue in degrees, saturation, lightness)."""
        h, l, s = colorsys.rgb_to_hls(self.r / 255.0, self.g / 255.0, self.b / 255.0)
        return h * 360.0, s, l

    def with_adjust_hsl(self, hue_delta: float, sat_delta: float, light_delta: float) -> "Color":
        """Shift hue (degrees), saturation and lightness (both in [-1, 1]).

        Hue wraps around 360 degrees while saturation and lightness are
        clamped to [0, 1].  Alpha is preserved.
        """
        h, s, l = self.hsl()
        h = math.fmod(h + hue_delta, 360.0)
        if h < 0:
            h += 360.0
        s = min(1.0, max(0.0, s + sat_delta))
        l = min(1.0, max(0.0, l + light_delta))
        r, g, b = colorsys.hls_to_rgb(h / 360.0, l, s)
        return Color(_channel(round(r * 255)), _channel(round(g * 255)), _channel(round(b * 255)), self.a)

    def svg(self) -> str:
        """Format the color for SVG attributes."""
        if self.a == 255:
            return f"rgb({self.r},{self.g},{self.b})"
        return f"rgba({self.r},{self.g},{self.b},{self.a / 255.0:.2f})"

    def unit_rgba(self) -> tuple[float, float, float, float]:
        """Return the channels scaled to 0..1 for matplotlib artists."""
        return (self.r / 255.0, self.g / 255.0, self.b / 255.0, self.a / 255.0)

    def __str__(self) -> str:
        return self.svg()


def rgb(r: int, g: int, b: int) -> Color:
    """Construct a fully opaque color."""
    return Color(r, g, b, 255)


def color_from_hex(value: str) -> Color:
    """Parse ``#RGB``, ``#RRGGBB`` or ``#RRGGBBAA`` (the ``#`` is optional)."""
    text = value.strip().lstrip("#")
    try:
        if len(text) == 3:
            return Color(int(text[0], 16) * 0x11, int(text[1], 16) * 0x11, int(text[2], 16) * 0x11, 255)
        if len(text) == 6:
            return Color(int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16), 255)
        if len(text) == 8:
            return Color(int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16), int(text[6:8], 16))
    except ValueError:
        return Color()
    return Color()


def color_from_rgba(value: str) -> Color:
    """Parse CSS ``rgb(r,g,b)`` or ``rgba(r,g,b,a)``.

    An alpha in [0, 1] is scaled to 0..255; values above 1 are taken as
    already scaled.  Malformed input yields the zero color.
    """
    match = _RGB_RE.match(value.strip().replace(" ", ""))
    if not match:
        return Color()
    parts = match.group(1).split(",")
    if len(parts) < 3:
        return Color()
    try:
        r, g, b = (_channel(int(float(p))) for p in parts[:3])
        alpha = 255
        if len(parts) > 3:
            a = float(parts[3])
            if a < 0:
                a = 0.0
            elif a <= 1:
                a *= 255
            alpha = _channel(int(a))
    except ValueError:
        return Color()
    return Color(r, g, b, alpha)


def color_from_known(name: str) -> Color:
    """Resolve a CSS color keyword; unknown names map to black."""
    key = name.strip().lower()
    if key == "":
        return Color()
    if key == "transparent":
        return Color(0, 0, 0, 0)
    hex_value = CSS4_COLORS.get(key)
    if hex_value is None:
        return rgb(0, 0, 0)
    return color_from_hex(hex_value)


def parse_color(value: str) -> Color:
    """Parse a color from hex, ``rgb()``/``rgba()`` or a CSS keyword."""
    text = value.strip()
    if text.startswith("#"):
        return color_from_hex(text)
    if text.startswith("rgb"):
        return color_from_rgba(text)
    return color_from_known(text)


def is_light_color(c: Color) -> bool:
    """Return True when the perceived brightness is above the midpoint."""
    brightness = math.sqrt(c.r * c.r * 0.299 + c.g * c.g * 0.587 + c.b * c.b * 0.114)
    return brightness > 127.5


BLACK = rgb(0, 0, 0)
WHITE = rgb(255, 255, 255)
TRANSPARENT = Color(0, 0, 0, 0)
LIGHT_GRAY = rgb(211, 211, 211)
FONT_LIGHT = rgb(70, 70, 70)
FONT_DARK = rgb(238, 238, 238)
