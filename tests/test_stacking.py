"""Tests for stacked line and bar series."""

from __future__ import annotations

from chartforge.charts import render
from chartforge.charts.bar import BarChart
from chartforge.charts.line import LineChart
from chartforge.charts.series import stack_series, stacked_values
from chartforge.layout.painter import Painter
from chartforge.layout.pipeline import RenderOption, RenderResult, default_render
from chartforge.layout.range import AxisRange
from chartforge.options import BarSeries, ChartOption, GenericSeries, LineSeries


def _result(boundary_gap: bool = True) -> RenderResult:
    p = Painter.new(200, 100, "svg")
    return RenderResult(
        painter=p,
        series_painter=p,
        x_range=AxisRange(divide_count=2 if boundary_gap else 3, size=200, is_category=True),
        y_ranges={0: AxisRange(min=0, max=100, size=100)},
        boundary_gap=boundary_gap,
    )


def _paths(p: Painter) -> list:
    return [line for line in p.bytes().decode("utf-8").splitlines() if line.startswith("<path ")]


def test_stacked_values_are_running_totals() -> None:
    rows = stacked_values([[1, None, 3], [1, 2], [1, 1, 1, 1]])
    assert rows == [[1, None, 3], [2, 2], [3, 3, 4, 1]]


def test_stack_series_per_type_on_the_first_axis() -> None:
    series = stack_series([
        GenericSeries(type="line", values=[1, 2]),
        GenericSeries(type="bar", values=[5, None]),
        GenericSeries(type="line", values=[3, None]),
        GenericSeries(type="line", values=[100, 100], y_axis_index=1),
    ])
    # all positive: the bottom layer also reaches one below the smallest value
    assert series[0].axis_values() == [1, 2, 0]
    assert series[1].axis_values() == [5, None, 4]
    assert series[2].axis_values() == [4, None]
    assert series[3].range_values is None
    assert series[3].axis_values() == [100, 100]


def test_stack_series_with_negative_values_adds_no_floor() -> None:
    series = stack_series([
        GenericSeries(type="bar", values=[-5, 10]),
        GenericSeries(type="bar", values=[3, 3]),
    ])
    assert series[0].axis_values() == [-5, 10]
    assert series[1].axis_values() == [-2, 13]


def test_stacked_range_covers_the_totals() -> None:
    opt = ChartOption(series=[BarSeries(values=[10, 20]), BarSeries(values=[30, 40])])
    theme = Painter.new(400, 300, "svg").theme

    def y_max(series) -> float:
        p = Painter.new(400, 300, "svg")
        result = default_render(p, RenderOption(theme=theme, series=series))
        return result.y_ranges[0].max

    assert y_max(opt.generic_series()) < 60
    assert y_max(stack_series(opt.generic_series())) >= 60


def test_stacked_bars_share_one_slot() -> None:
    result = _result()
    opt = ChartOption(stack_series=True, series=[BarSeries(values=[10, 20]), BarSeries(values=[30, 40])])
    BarChart(result, opt).render(list(enumerate(opt.series)))
    paths = _paths(result.painter)
    first = result.painter.theme.get_series_color(0).svg()
    second = result.painter.theme.get_series_color(1).svg()
    # one 80 px slot per section; the second bar starts at the top of the first
    assert f'<path d="M10 90 L90 90 L90 99 L10 99 Z" style="stroke:none;fill:{first}"/>' in paths
    assert f'<path d="M110 80 L190 80 L190 99 L110 99 Z" style="stroke:none;fill:{first}"/>' in paths
    assert f'<path d="M10 60 L90 60 L90 90 L10 90 Z" style="stroke:none;fill:{second}"/>' in paths
    assert f'<path d="M110 40 L190 40 L190 80 L110 80 Z" style="stroke:none;fill:{second}"/>' in paths


def test_unstacked_bars_sit_side_by_side() -> None:
    result = _result()
    opt = ChartOption(series=[BarSeries(values=[10, 20]), BarSeries(values=[30, 40])])
    BarChart(result, opt).render(list(enumerate(opt.series)))
    paths = _paths(result.painter)
    second = result.painter.theme.get_series_color(1).svg()
    assert f'<path d="M52 70 L89 70 L89 99 L52 99 Z" style="stroke:none;fill:{second}"/>' in paths


def test_stacked_lines_follow_the_totals() -> None:
    result = _result(boundary_gap=False)
    opt = ChartOption(stack_series=True, series=[LineSeries(values=[10, 20, 30]), LineSeries(values=[5, 5, 5])])
    LineChart(result, opt).render(list(enumerate(opt.series)))
    paths = _paths(result.painter)
    assert any(line.startswith('<path d="M0 90 L100 80 L200 70" ') for line in paths)
    assert any(line.startswith('<path d="M0 85 L100 75 L200 65" ') for line in paths)
    # the bottom layer fills down to the axis, the next one down to the layer below
    assert any(line.startswith('<path d="M0 90 L100 80 L200 70 L200 100 L0 100 L0 90 Z" ') for line in paths)
    assert any(line.startswith('<path d="M0 85 L100 75 L200 65 L200 70 L100 80 L0 90 L0 85 Z" ') for line in paths)


def test_stacked_lines_are_not_smoothed() -> None:
    result = _result(boundary_gap=False)
    opt = ChartOption(stack_series=True, series=[LineSeries(values=[10, 20, 30], smooth_tension=0.5)])
    LineChart(result, opt).render(list(enumerate(opt.series)))
    assert not any(" Q" in line for line in _paths(result.painter))


def test_explicit_fill_area_off_wins_over_stacking() -> None:
    result = _result(boundary_gap=False)
    opt = ChartOption(stack_series=True, series=[LineSeries(values=[10, 20, 30], fill_area=False)])
    LineChart(result, opt).render(list(enumerate(opt.series)))
    assert not any(" Z" in line for line in _paths(result.painter))


def test_stacked_chart_renders() -> None:
    opt = ChartOption(
        output_format="svg",
        stack_series=True,
        series=[LineSeries(values=[1, 2, 3]), LineSeries(values=[3, 2, 1]), BarSeries(values=[2, 2, 2])],
    )
    svg = render(opt).bytes().decode("utf-8")
    assert svg.startswith("<svg")
