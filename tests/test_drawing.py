"""Tests for the color, geometry and theme primitives."""

from __future__ import annotations

import logging

import pytest

from chartforge.drawing.color import Color, color_from_hex, is_light_color, parse_color, rgb
from chartforge.drawing.geometry import (
    Box,
    Point,
    auto_divide,
    auto_divide_spans,
    get_radius,
    is_tick,
    null_point,
    padding_all,
    parse_flexible_value,
    polygon_points,
)
from chartforge.fields import box_from_css, coerce_box, coerce_color
from chartforge.theme import THEMES, get_theme, make_theme, theme_names


@pytest.mark.parametrize("total", [1, 7, 100, 599, 1000])
@pytest.mark.parametrize("size", [1, 2, 3, 5, 11])
def test_auto_divide_spans_the_axis(total: int, size: int) -> None:
    """Every division returns size + 1 increasing positions from 0 to total."""
    positions = auto_divide(total, size)
    assert len(positions) == size + 1
    assert positions[0] == 0
    assert positions[-1] == total
    assert all(a <= b for a, b in zip(positions, positions[1:]))


def test_auto_divide_spans_merges_columns() -> None:
    assert auto_divide_spans(100, 4, [1, 3]) == [0, 25, 100]
    assert auto_divide_spans(100, 4, []) == [0, 25, 50, 75, 100]


def test_is_tick_always_keeps_both_ends() -> None:
    assert is_tick(10, 3, 0)
    assert is_tick(10, 3, 9)
    assert sum(is_tick(10, 3, i) for i in range(10)) == 3


def test_null_point_and_box() -> None:
    assert null_point(5).is_null()
    assert not Point(5, 10).is_null()
    box = Box(10, 20, 110, 70, True)
    assert (box.width, box.height) == (100, 50)
    assert box.pad(padding_all(5)) == Box(15, 25, 105, 65, True)
    assert Box().is_zero()
    assert not Box(is_set=True).is_zero()


def test_radius_and_flexible_values() -> None:
    assert get_radius(200, "25%") == pytest.approx(50)
    assert get_radius(200, "30") == pytest.approx(30)
    assert get_radius(200, "") == pytest.approx(80)
    assert parse_flexible_value("50%", 400) == pytest.approx(200)
    with pytest.raises(ValueError):
        parse_flexible_value("abc", 400)


def test_polygon_first_vertex_points_up() -> None:
    points = polygon_points(Point(100, 100), 50, 4)
    assert points[0] == Point(100, 50)
    assert len(points) == 4


def test_parse_color_forms() -> None:
    """Hex, rgb()/rgba() and CSS keywords are accepted."""
    assert parse_color("#f00") == rgb(255, 0, 0)
    assert parse_color("#00ff0080") == Color(0, 255, 0, 128)
    assert parse_color("rgb(1, 2, 3)") == rgb(1, 2, 3)
    assert parse_color("rgba(10,20,30,0.5)").a == 127
    assert parse_color("white") == rgb(255, 255, 255)
    assert parse_color("transparent") == Color(0, 0, 0, 0)
    assert parse_color("").is_zero()
    assert color_from_hex("#zzz").is_zero()


def test_color_helpers() -> None:
    assert is_light_color(rgb(255, 255, 255))
    assert not is_light_color(rgb(20, 20, 20))
    assert rgb(1, 2, 3).svg() == "rgb(1,2,3)"
    assert Color(1, 2, 3, 0).svg() == "rgba(1,2,3,0.00)"
    lighter = rgb(100, 100, 100).with_adjust_hsl(0, 0, 0.2)
    assert lighter.r > 100 and lighter.a == 255


def test_box_from_css_shorthand() -> None:
    """One to four values follow the CSS padding shorthand."""
    assert box_from_css([5]) == Box(5, 5, 5, 5, True)
    assert box_from_css([10, 20]) == Box(left=20, top=10, right=20, bottom=10, is_set=True)
    assert box_from_css([1, 2, 3]) == Box(left=2, top=1, right=2, bottom=3, is_set=True)
    assert box_from_css([1, 2, 3, 4]) == Box(left=4, top=1, right=2, bottom=3, is_set=True)
    with pytest.raises(ValueError):
        box_from_css([1, 2, 3, 4, 5])


def test_coercers_reject_bad_input() -> None:
    assert coerce_box(None) == Box()
    assert coerce_color((1, 2, 3)) == rgb(1, 2, 3)
    with pytest.raises(ValueError):
        coerce_color(3.5)
    with pytest.raises(ValueError):
        coerce_box(True)


def test_theme_registry() -> None:
    assert theme_names() == ["light", "dark", "vivid-light", "vivid-dark", "ant", "grafana"]
    assert THEMES["dark"].is_dark
    assert not THEMES["light"].is_dark


def test_unknown_theme_falls_back_with_warning(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="chartforge.theme"):
        theme = get_theme("no-such-theme")
    assert theme.name == "light"
    assert "unknown theme" in caplog.text


def test_series_colors_cycle_with_shade_shift() -> None:
    """Colors past the palette reuse it with a shifted shade."""
    theme = get_theme("light")
    count = len(theme.series_colors)
    assert theme.get_series_color(0) == theme.series_colors[0]
    wrapped = theme.get_series_color(count)
    assert wrapped != theme.series_colors[0]
    assert theme.get_series_color(count) == theme.get_series_color(count)


def test_with_background_color_recomputes_dark_mode() -> None:
    theme = get_theme("light").with_background_color(rgb(10, 10, 10))
    assert theme.is_dark
    assert theme.background_color == rgb(10, 10, 10)
    assert not get_theme("dark").with_background_color(rgb(250, 250, 250)).is_dark


def test_up_down_colors_shift_per_series() -> None:
    theme = get_theme("light")
    up0, down0 = theme.get_series_up_down_colors(0)
    up1, down1 = theme.get_series_up_down_colors(1)
    assert (up0, down0) == (theme.up_color, theme.down_color)
    assert up1 != up0 and down1 != down0


def test_make_theme_fills_defaults() -> None:
    theme = make_theme("custom", series_colors=[rgb(1, 2, 3)])
    assert theme.get_series_color(0) == rgb(1, 2, 3)
    assert theme.background_color == get_theme("light").background_color
