"""Tests for scatter series."""

from __future__ import annotations

import re

import pytest

from chartforge.charts import render, scatter_render
from chartforge.charts.scatter import ScatterChart, scatter_points
from chartforge.echarts import parse_echarts_options
from chartforge.errors import InvalidOptionsError
from chartforge.layout.painter import Painter
from chartforge.layout.pipeline import RenderResult
from chartforge.layout.range import AxisRange
from chartforge.options import ChartOption, ScatterSeries

CIRCLE = re.compile(r'<circle cx="(\d+)" cy="(\d+)" r="(\d+)" style="([^"]*)"/>')


def _result() -> RenderResult:
    p = Painter.new(200, 100, "svg")
    return RenderResult(
        painter=p,
        series_painter=p,
        x_range=AxisRange(divide_count=3, size=200, is_category=True),
        y_ranges={0: AxisRange(min=0, max=100, size=100)},
        boundary_gap=False,
    )


def _circles(p: Painter) -> list:
    return CIRCLE.findall(p.bytes().decode("utf-8"))


def test_values_accept_numbers_lists_and_gaps() -> None:
    series = ScatterSeries(values=[1, [2, 3], None, [None, 4]])
    assert series.values == [[1.0], [2.0, 3.0], [], [None, 4.0]]
    assert series.flat_values() == [1.0, 2.0, 3.0, 4.0]
    assert series.average_values() == [1.0, 2.5, None, 4.0]


def test_values_reject_text() -> None:
    with pytest.raises(ValueError):
        ScatterSeries(values=["high"])


def test_generic_view_covers_every_value() -> None:
    generic = ScatterSeries(name="s", values=[[1, 9], 5]).to_generic(2)
    assert generic.values == [5.0, 5.0]
    assert generic.axis_values() == [1.0, 9.0, 5.0]
    assert generic.index == 2


def test_scatter_points_skip_gaps() -> None:
    series = ScatterSeries(values=[10, [20, None, 30], None, 40])
    items = scatter_points(series, [0, 100, 200], lambda v: int(100 - v))
    assert [(i, v, (pt.x, pt.y)) for i, v, pt in items] == [
        (0, 10.0, (0, 90)),
        (1, 20.0, (100, 80)),
        (1, 30.0, (100, 70)),
    ]


def test_every_value_gets_a_symbol() -> None:
    result = _result()
    opt = ChartOption(series=[ScatterSeries(values=[10, [20, 30], None])])
    ScatterChart(result, opt).render(list(enumerate(opt.series)))
    color = result.painter.theme.get_series_color(0).svg()
    circles = _circles(result.painter)
    assert [(x, y, r) for x, y, r, _ in circles] == [("0", "90", "2"), ("100", "80", "2"), ("100", "70", "2")]
    assert all(style == f"stroke-width:1;stroke:{color};fill:{color}" for *_, style in circles)


def test_hollow_symbols_and_size() -> None:
    result = _result()
    opt = ChartOption(series=[ScatterSeries(values=[50], symbol="circle", symbol_size=5)])
    ScatterChart(result, opt).render(list(enumerate(opt.series)))
    theme = result.painter.theme
    circles = _circles(result.painter)
    assert [(x, y, r) for x, y, r, _ in circles] == [("0", "50", "5")]
    assert circles[0][3].endswith(f"fill:{theme.background_color.svg()}")


def test_scatter_render() -> None:
    svg = scatter_render(
        [[1, [2, 4], 3], [None, 5, [1, 2]]],
        names=["a", "b"],
        x_axis_data=["x", "y", "z"],
        output_format="svg",
    ).bytes().decode("utf-8")
    # seven symbols plus the two legend dots
    assert len(CIRCLE.findall(svg)) >= 7


def test_scatter_without_values_has_no_data() -> None:
    with pytest.raises(InvalidOptionsError, match="no data in any series"):
        render(ChartOption(series=[ScatterSeries(values=[None, []])]))


def test_echarts_scatter_and_stack() -> None:
    opt = parse_echarts_options({
        "xAxis": {"data": ["a", "b"]},
        "series": [
            {"type": "scatter", "data": [1, [2, 3]], "symbolSize": 4},
            {"type": "line", "stack": "total", "data": [1, 2]},
        ],
    })
    scatter = opt.series[0]
    assert isinstance(scatter, ScatterSeries)
    assert scatter.values == [[1.0], [2.0, 3.0]]
    assert scatter.symbol_size == 4
    assert opt.stack_series is True


def test_echarts_without_stack() -> None:
    opt = parse_echarts_options({"series": [{"type": "line", "data": [1, 2]}]})
    assert opt.stack_series is False
