"""Named color palettes.

A :class:`Theme` bundles the background, axis, split-line, text and series
colors of a chart, plus the up/down colors used for candlesticks.  The
registry of built-in themes is created once at import time and exposed as
a read-only mapping; callers derive variations with the ``with_*``
helpers, which return new themes instead of mutating shared ones.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple, Union

from .config import DEFAULT_THEME
from .drawing.color import Color, color_from_hex, is_light_color, rgb

logger = logging.getLogger(__name__)

THEME_LIGHT = "light"
THEME_DARK = "dark"
THEME_VIVID_LIGHT = "vivid-light"
THEME_VIVID_DARK = "vivid-dark"
THEME_ANT = "ant"
THEME_GRAFANA = "grafana"

UP_COLOR = rgb(34, 197, 94)
DOWN_COLOR = rgb(239, 68, 68)


@dataclass(frozen=True)
class Theme:
    """A chart color palette."""

    name: str
    is_dark: bool
    axis_stroke_color: Color
    axis_split_line_color: Color
    background_color: Color
    text_color: Color
    series_colors: Tuple[Color, ...]
    up_color: Color = UP_COLOR
    down_color: Color = DOWN_COLOR

    def get_series_color(self, index: int) -> Color:
        """Return the color for series *index*.

        Indexes past the end of the palette cycle through it again with
        the shade shifted by 40 per wrap (darker on dark themes), keeping
        the dominant channel emphasized.
        """
        colors = self.series_colors
        count = len(colors)
        if index < count:
            return colors[index]
        result = colors[index % count]
        r_max = g_max = b_max = 200
        r_min = g_min = b_min = 0
        adjustment = 40 * ((index // count) % 3)
        if self.is_dark:
            adjustment = -adjustment
            r_max = g_max = b_max = 255
            r_min = g_min = b_min = 40
        if result.r != result.g or result.r != result.b:
            if result.r >= result.g and result.r >= result.b:
                r_min += 80
                g_max -= 20
                b_max -= 20
            elif result.g >= result.r and result.g >= result.b:
                g_min += 80
                r_max -= 20
                b_max -= 20
            else:
                b_min += 80
                r_max -= 20
                g_max -= 20
        return Color(
            max(min(result.r + adjustment, r_max), r_min),
            max(min(result.g + adjustment, g_max), g_min),
            max(min(result.b + adjustment, b_max), b_min),
            result.a,
        )

    def get_series_up_down_colors(self, index: int) -> Tuple[Color, Color]:
        """Return the (up, down) candle colors for series *index*.

        The first series uses the theme colors as is; later series shift
        the lightness in steps of 0.12 so grouped candles stay apart.
        """
        step = index % 3
        if step == 0:
            return self.up_color, self.down_color
        delta = 0.12 * step if self.is_dark else -0.12 * step
        return self.up_color.with_adjust_hsl(0, 0, delta), self.down_color.with_adjust_hsl(0, 0, delta)

    def with_axis_color(self, color: Color) -> "Theme":
        """Use *color* for the axis line, split lines and text."""
        return replace(
            self,
            name=self.name + "-axis_mod",
            axis_stroke_color=color,
            axis_split_line_color=color,
            text_color=color,
        )

    def with_text_color(self, color: Color) -> "Theme":
        return replace(self, name=self.name + "-text_mod", text_color=color)

    def with_series_colors(self, colors: Sequence[Color]) -> "Theme":
        if not colors:
            return self
        return replace(self, name=self.name + "-series_mod", series_colors=tuple(colors))

    def with_background_color(self, color: Color) -> "Theme":
        """Replace the background; dark mode follows the new luminance."""
        return replace(
            self,
            name=self.name + "-background_mod",
            background_color=color,
            is_dark=not is_light_color(color),
        )

    def with_up_down_colors(self, up: Color, down: Color) -> "Theme":
        return replace(self, up_color=up, down_color=down)


def _hex_colors(values: Sequence[str]) -> Tuple[Color, ...]:
    return tuple(color_from_hex(v) for v in values)


_LIGHT_SERIES = _hex_colors(
    ["#5470c6", "#91cc75", "#fac858", "#ee6666", "#73c0de", "#3ba272", "#fc8452", "#9a60b4", "#ea7ccc"]
)
_VIVID_SERIES = (
    rgb(255, 100, 100),
    rgb(255, 210, 100),
    rgb(100, 180, 210),
    rgb(64, 160, 110),
    rgb(154, 100, 180),
    rgb(250, 128, 80),
    rgb(90, 210, 110),
    rgb(220, 150, 210),
    rgb(90, 118, 140),
)
_ANT_SERIES = _hex_colors(
    ["#5b8ff9", "#5ad8a6", "#5d7092", "#f6bd16", "#6f5ef9", "#6dc8ec", "#945fb9", "#ff9845"]
)
_GRAFANA_SERIES = _hex_colors(
    ["#7EB26D", "#EAB839", "#6ED0E0", "#EF843C", "#E24D42", "#1F78C1", "#705DA0", "#508642"]
)


def make_theme(
    name: str,
    *,
    is_dark: bool = False,
    axis_stroke_color: Optional[Color] = None,
    axis_split_line_color: Optional[Color] = None,
    background_color: Optional[Color] = None,
    text_color: Optional[Color] = None,
    series_colors: Optional[Sequence[Color]] = None,
    up_color: Color = UP_COLOR,
    down_color: Color = DOWN_COLOR,
) -> Theme:
    """Build a theme, filling unset colors from the light or dark defaults."""
    base = _build_dark() if is_dark else _build_light()
    return Theme(
        name=name,
        is_dark=is_dark,
        axis_stroke_color=axis_stroke_color or base.axis_stroke_color,
        axis_split_line_color=axis_split_line_color or base.axis_split_line_color,
        background_color=background_color or base.background_color,
        text_color=text_color or base.text_color,
        series_colors=tuple(series_colors) if series_colors else base.series_colors,
        up_color=up_color,
        down_color=down_color,
    )


def _build_light() -> Theme:
    return Theme(
        name=THEME_LIGHT,
        is_dark=False,
        axis_stroke_color=rgb(110, 112, 121),
        axis_split_line_color=rgb(224, 230, 242),
        background_color=rgb(255, 255, 255),
        text_color=rgb(70, 70, 70),
        series_colors=_LIGHT_SERIES,
    )


def _build_dark() -> Theme:
    return Theme(
        name=THEME_DARK,
        is_dark=True,
        axis_stroke_color=rgb(185, 184, 206),
        axis_split_line_color=rgb(72, 71, 83),
        background_color=rgb(40, 40, 40),
        text_color=rgb(238, 238, 238),
        series_colors=_LIGHT_SERIES,
    )


def _build_registry() -> Mapping[str, Theme]:
    light = _build_light()
    dark = _build_dark()
    themes = {
        THEME_LIGHT: light,
        THEME_DARK: dark,
        THEME_VIVID_LIGHT: replace(light, name=THEME_VIVID_LIGHT, series_colors=_VIVID_SERIES),
        THEME_VIVID_DARK: replace(dark, name=THEME_VIVID_DARK, series_colors=_VIVID_SERIES),
        THEME_ANT: replace(light, name=THEME_ANT, series_colors=_ANT_SERIES),
        THEME_GRAFANA: Theme(
            name=THEME_GRAFANA,
            is_dark=True,
            axis_stroke_color=rgb(185, 184, 206),
            axis_split_line_color=rgb(68, 67, 67),
            background_color=rgb(31, 29, 29),
            text_color=rgb(216, 217, 218),
            series_colors=_GRAFANA_SERIES,
        ),
    }
    return MappingProxyType(themes)


# Populated once; never mutated afterwards.
THEMES: Mapping[str, Theme] = _build_registry()


def theme_names() -> list:
    return list(THEMES.keys())


def get_theme(name: Optional[str] = None) -> Theme:
    """Return a registered theme; unknown names fall back to the default."""
    key = (name or DEFAULT_THEME).lower()
    theme = THEMES.get(key)
    if theme is None:
        logger.warning("unknown theme %r, using %r", name, DEFAULT_THEME)
        return THEMES[DEFAULT_THEME]
    return theme


def resolve_theme(theme: Union[Theme, str, None]) -> Theme:
    if isinstance(theme, Theme):
        return theme
    return get_theme(theme)


def get_default_theme() -> Theme:
    return THEMES[DEFAULT_THEME]


__all__ = [
    "Theme",
    "THEMES",
    "THEME_LIGHT",
    "THEME_DARK",
    "THEME_VIVID_LIGHT",
    "THEME_VIVID_DARK",
    "THEME_ANT",
    "THEME_GRAFANA",
    "make_theme",
    "theme_names",
    "get_theme",
    "resolve_theme",
    "get_default_theme",
]
