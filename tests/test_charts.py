"""Geometry of the pie, radar, funnel and bar renderers."""

from __future__ import annotations

import math

import pytest

from chartforge.charts.bar import BarChart, group_layout, group_margins
from chartforge.charts.funnel import FunnelChart
from chartforge.charts.horizontal_bar import HorizontalBarChart
from chartforge.charts.pie import PieChart
from chartforge.charts.radar import RING_COUNT, RadarChart
from chartforge.drawing.geometry import Point, polygon_angles, polygon_point
from chartforge.echarts import render_echarts_options
from chartforge.layout.painter import Painter
from chartforge.layout.pipeline import RenderResult
from chartforge.layout.range import AxisRange
from chartforge.options import (
    BarSeries,
    ChartOption,
    FunnelSeries,
    HorizontalBarSeries,
    PieSeries,
    RadarIndicator,
    RadarSeries,
)


def _record(monkeypatch, name: str) -> list:
    calls = []
    original = getattr(Painter, name)

    def wrapper(self, *args, **kwargs):
        calls.append(args)
        return original(self, *args, **kwargs)

    monkeypatch.setattr(Painter, name, wrapper)
    return calls


def _paths(p: Painter) -> list:
    return [line for line in p.bytes().decode("utf-8").splitlines() if line.startswith("<path ")]


def _path_box(path: str):
    """Bounding box of the straight segments of an SVG path element."""
    d = path.split('d="', 1)[1].split('"', 1)[0]
    numbers = [int(v.lstrip("ML")) for v in d.split() if v != "Z"]
    xs, ys = numbers[0::2], numbers[1::2]
    return min(xs), min(ys), max(xs), max(ys)


def test_pie_slices_cover_the_full_circle(monkeypatch) -> None:
    arcs = _record(monkeypatch, "arc_to")
    p = Painter.new(200, 200, "svg")
    PieChart(p).render([(0, PieSeries(value=1)), (1, PieSeries(value=2)), (2, PieSeries(value=3))])
    starts = [args[4] for args in arcs]
    deltas = [args[5] for args in arcs]
    assert starts[0] == pytest.approx(-math.pi / 2)
    assert sum(deltas) == pytest.approx(2 * math.pi)
    assert deltas == pytest.approx([2 * math.pi * share for share in (1 / 6, 2 / 6, 3 / 6)])
    for i in range(1, len(arcs)):
        assert starts[i] == pytest.approx(starts[i - 1] + deltas[i - 1])


def test_pie_skips_empty_slices(monkeypatch) -> None:
    arcs = _record(monkeypatch, "arc_to")
    p = Painter.new(200, 200, "svg")
    PieChart(p).render([(0, PieSeries(value=1)), (1, PieSeries(value=0)), (2, PieSeries(value=None)),
                        (3, PieSeries(value=1))])
    assert [args[5] for args in arcs] == pytest.approx([math.pi, math.pi])


def test_doughnut_slices_return_along_the_inner_ring(monkeypatch) -> None:
    arcs = _record(monkeypatch, "arc_to")
    p = Painter.new(200, 200, "svg")
    PieChart(p).render([(0, PieSeries(value=1, radius="40%", inner_radius="20%")), (1, PieSeries(value=3))])
    outer = [args for args in arcs if args[5] > 0]
    inner = [args for args in arcs if args[5] < 0]
    assert [args[2] for args in outer] == pytest.approx([80, 80])
    assert [args[2] for args in inner] == pytest.approx([40, 40])
    assert sum(args[5] for args in outer) == pytest.approx(2 * math.pi)


def test_radar_rings_and_polygon(monkeypatch) -> None:
    rings = _record(monkeypatch, "polygon")
    p = Painter.new(200, 200, "svg")
    indicators = [RadarIndicator(name=name, max=10) for name in ("a", "b", "c")]
    RadarChart(p, indicators).render([(0, RadarSeries(values=[10, 5, 0]))])

    radius = 200 * 0.4
    assert len(rings) == RING_COUNT
    assert [args[1] for args in rings] == pytest.approx([radius * i / RING_COUNT for i in range(1, 6)])
    assert all(args[2] == 3 for args in rings)

    center = Point(100, 100)
    angles = polygon_angles(3)
    expected = [polygon_point(center, radius * share, angle) for share, angle in zip((1.0, 0.5, 0.0), angles)]
    d = "M{} {} L{} {} L{} {} Z".format(*(v for point in expected for v in (point.x, point.y)))
    assert any(line.startswith(f'<path d="{d}"') for line in _paths(p))


def test_radar_value_beyond_the_maximum_stays_on_the_outer_ring() -> None:
    p = Painter.new(200, 200, "svg")
    indicators = [RadarIndicator(name=name, max=10) for name in ("a", "b", "c")]
    RadarChart(p, indicators).render([(0, RadarSeries(values=[50, -5, None]))])
    top = polygon_point(Point(100, 100), 80, polygon_angles(3)[0])
    assert any(line.startswith(f'<path d="M{top.x} {top.y} L100 100 L100 100 Z"') for line in _paths(p))


def test_funnel_sections() -> None:
    p = Painter.new(200, 100, "svg")
    FunnelChart(p).render([
        (0, FunnelSeries(name="a", value=100)),
        (1, FunnelSeries(name="b", value=50)),
        (2, FunnelSeries(name="c", value=25)),
    ])
    paths = _paths(p)
    # each stage is as wide as its value and narrows to the next stage, 2 px apart
    assert any(line.startswith('<path d="M0 0 L200 0 L150 32 L50 32 L0 0 Z"') for line in paths)
    assert any(line.startswith('<path d="M50 34 L150 34 L125 66 L75 66 L50 34 Z"') for line in paths)
    assert any(line.startswith('<path d="M75 68 L125 68 L100 100 L100 100 L75 68 Z"') for line in paths)


@pytest.mark.parametrize(
    "space,count,configured,expected",
    [
        (100, 3, 0, (10, 5, 23)),
        (30, 2, 0, (5, 3, 8)),
        (15, 2, 0, (2, 2, 4)),
        (100, 2, 20, (27, 5, 20)),
        (100, 2, 60, (10, 5, 37)),
        (4, 3, 0, (2, 2, 1)),
    ],
)
def test_bar_group_layout(space: int, count: int, configured: int, expected) -> None:
    assert group_layout(space, count, configured) == expected


def test_group_margins_grow_with_the_section() -> None:
    assert [group_margins(space) for space in (10, 20, 49, 50)] == [(2, 2), (5, 3), (5, 3), (10, 5)]


def test_bars_of_a_group_sit_side_by_side() -> None:
    p = Painter.new(200, 100, "svg")
    result = RenderResult(
        painter=p,
        series_painter=p,
        x_range=AxisRange(divide_count=2, size=200, is_category=True),
        y_ranges={0: AxisRange(min=0, max=100, size=100)},
    )
    opt = ChartOption(series=[BarSeries(values=[10]), BarSeries(values=[20]), BarSeries(values=[30])])
    BarChart(result, opt).render(list(enumerate(opt.series)))
    paths = _paths(p)
    assert [_path_box(line) for line in paths] == [(10, 90, 33, 99), (38, 80, 61, 99), (66, 70, 89, 99)]


def test_horizontal_bars_grow_along_x() -> None:
    p = Painter.new(200, 100, "svg")
    result = RenderResult(
        painter=p,
        series_painter=p,
        x_range=AxisRange(min=0, max=100, size=200),
        y_ranges={0: AxisRange(divide_count=2, size=100, is_category=True)},
    )
    opt = ChartOption(series=[HorizontalBarSeries(values=[50, 100])])
    HorizontalBarChart(result, opt).render(list(enumerate(opt.series)))
    # the first category is at the bottom
    assert [_path_box(line) for line in _paths(p)] == [(0, 60, 100, 90), (0, 10, 200, 40)]


def test_value_x_axis_draws_horizontal_bars() -> None:
    p = render_echarts_options({
        "type": "svg",
        "xAxis": {"type": "value"},
        "yAxis": {"type": "category", "data": ["a", "b", "c"]},
        "series": [{"type": "bar", "data": [10, 40, 20]}],
    })
    color = p.theme.get_series_color(0).svg()
    bars = [_path_box(line) for line in _paths(p) if line.endswith(f'style="stroke:none;fill:{color}"/>')]
    assert len(bars) == 3
    widths = [right - left for left, _, right, _ in bars]
    heights = [bottom - top for _, top, _, bottom in bars]
    assert len(set(heights)) == 1
    # bars share the left edge and their lengths follow the values
    assert len({left for left, _, _, _ in bars}) == 1
    assert widths[1] > widths[2] > widths[0]
