"""End-to-end tests for option validation and chart rendering."""

from __future__ import annotations

import zlib

import pytest

from chartforge.charts import (
    bar_render,
    candlestick_render,
    funnel_render,
    horizontal_bar_render,
    line_render,
    pie_render,
    radar_render,
    render,
    table_render,
)
from chartforge.drawing.geometry import Box
from chartforge.errors import FormatError, InvalidOptionsError
from chartforge.features.ohlc import OHLCData
from chartforge.layout.painter import Painter
from chartforge.layout.pipeline import RenderOption, default_render
from chartforge.options import (
    CandlestickSeries,
    ChartOption,
    LineSeries,
    PieSeries,
    TableSeries,
    TitleOption,
)
from chartforge.theme import get_theme

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May"]


def _make_candles():
    return [
        OHLCData(open=100, high=110, low=95, close=105),
        OHLCData(open=105, high=115, low=100, close=112),
        OHLCData(open=112, high=118, low=108, close=115),
        OHLCData(open=115, high=120, low=105, close=108),
        OHLCData(open=108, high=113, low=105, close=109),
    ]


def _make_candle_option(**kwargs) -> ChartOption:
    return ChartOption(
        output_format="svg",
        width=800,
        height=600,
        x_axis={"data": MONTHS},
        series=[CandlestickSeries(name="ACME", data=_make_candles())],
        **kwargs,
    )


def _stroked_paths(svg: str, color: str) -> list:
    return [line for line in svg.splitlines()
            if line.startswith("<path ") and f"stroke:{color}" in line and "fill:none" in line]


def test_candlestick_frame() -> None:
    """Five candles get five x sections and a y range around low..high."""
    opt = _make_candle_option()
    p = Painter.new(800, 600, "svg")
    result = default_render(p, RenderOption(theme=get_theme(), series=opt.generic_series(), x_axis=opt.x_axis))
    assert result.x_range.divide_count == 5
    assert result.x_range.tick_count == 5
    y_range = result.y_ranges[0]
    assert y_range.min == pytest.approx(95)
    assert y_range.max >= 120
    assert y_range.max - y_range.min <= 30


def test_candlestick_svg() -> None:
    svg = render(_make_candle_option()).bytes().decode("utf-8")
    assert svg.startswith("<svg")
    for month in MONTHS:
        assert month in svg


def test_line_breaks_at_missing_value() -> None:
    """A single gap splits the line into two strokes with four dots."""
    svg = line_render([[1, 2, None, 4, 5]], x_axis_data=list("abcde"), output_format="svg").bytes().decode("utf-8")
    color = get_theme("light").get_series_color(0).svg()
    assert len(_stroked_paths(svg, color)) == 2
    circles = [line for line in svg.splitlines() if line.startswith("<circle ") and f"stroke:{color}" in line]
    assert len(circles) == 4


@pytest.mark.parametrize(
    "values,expected",
    [
        ([1, 2, 3, 4], 1),
        ([1, 2, None, 4, 5], 2),
        ([1, 2, None, 4, 5, None, 7, 8], 3),
    ],
)
def test_gaps_add_line_segments(values, expected: int) -> None:
    svg = line_render([values], output_format="svg").bytes().decode("utf-8")
    color = get_theme("light").get_series_color(0).svg()
    assert len(_stroked_paths(svg, color)) == expected


@pytest.mark.parametrize("fmt", ["svg", "png", "jpg"])
def test_rendering_is_deterministic(fmt: str) -> None:
    """Rendering the same option twice yields identical bytes."""
    first = render(_make_candle_option().model_copy(update={"output_format": fmt})).bytes()
    second = render(_make_candle_option().model_copy(update={"output_format": fmt})).bytes()
    assert zlib.crc32(first) == zlib.crc32(second)
    assert first == second


def test_empty_series_list() -> None:
    with pytest.raises(InvalidOptionsError, match="empty series list"):
        render(ChartOption())


def test_exclusive_types_can_not_mix() -> None:
    opt = ChartOption(series=[PieSeries(name="a", value=1), LineSeries(values=[1, 2])])
    with pytest.raises(InvalidOptionsError, match="pie can not mix other charts"):
        render(opt)


def test_invalid_y_axis_index() -> None:
    with pytest.raises(InvalidOptionsError, match="invalid y-axis index"):
        render(ChartOption(series=[LineSeries(values=[1, 2], y_axis_index=2)]))


def test_candlestick_y_axis_index_out_of_bounds() -> None:
    opt = ChartOption(series=[CandlestickSeries(data=_make_candles(), y_axis_index=3)])
    with pytest.raises(InvalidOptionsError, match="candlestick series YAxisIndex out of bounds"):
        render(opt)


def test_no_data() -> None:
    with pytest.raises(InvalidOptionsError, match="no data in any series"):
        line_render([[None, None]])


def test_radar_needs_three_indicators() -> None:
    with pytest.raises(InvalidOptionsError, match="the count of indicator should be >= 3"):
        radar_render([[1, 2]], [("a", 5), ("b", 5)])


def test_table_needs_a_header() -> None:
    with pytest.raises(InvalidOptionsError, match="header can not be empty"):
        render(ChartOption(series=[TableSeries(header=[])]))


def test_invalid_options_are_value_errors() -> None:
    with pytest.raises(ValueError):
        render(ChartOption())


def test_failing_value_formatter() -> None:
    def broken(value: float) -> str:
        raise RuntimeError("boom")

    with pytest.raises(FormatError):
        line_render([[1, 2, 3]], output_format="svg", value_formatter=broken)


def test_second_y_axis() -> None:
    opt = ChartOption(
        output_format="svg",
        x_axis={"data": ["a", "b", "c"]},
        series=[LineSeries(values=[1, 2, 3]), LineSeries(values=[1000, 2000, 3000], y_axis_index=1)],
    )
    p = Painter.new(600, 400, "svg")
    result = default_render(p, RenderOption(theme=get_theme(), series=opt.generic_series(), x_axis=opt.x_axis))
    assert set(result.y_ranges) == {0, 1}
    assert result.y_ranges[1].max >= 3000
    assert result.y_ranges[0].max < 10


@pytest.mark.parametrize(
    "draw",
    [
        lambda: line_render([[120, 132, 101, 134]], names=["visits"], x_axis_data=["Q1", "Q2", "Q3", "Q4"],
                            title={"text": "Visits"}),
        lambda: bar_render([[2.0, 4.9, 7.0], [2.6, 5.9, 9.0]], names=["a", "b"], x_axis_data=["x", "y", "z"]),
        lambda: horizontal_bar_render([[18203, 23489, 29034]], y_axis_data=["Brazil", "India", "China"]),
        lambda: pie_render([1048, 735, 580], names=["Search", "Direct", "Email"]),
        lambda: radar_render([[4200, 3000, 20000]], [("Sales", 6500), ("Admin", 16000), ("IT", 30000)],
                             names=["Budget"]),
        lambda: funnel_render([60, 40, 20], names=["Show", "Click", "Order"]),
        lambda: candlestick_render([(20, 38, 10, 34), (40, 50, 30, 35)], name="K", x_axis_data=["d1", "d2"]),
        lambda: table_render(["Name", "Age"], [["Ann", "31"], ["Bob", "29"]]),
    ],
)
def test_render_helpers_produce_png(draw) -> None:
    data = draw().bytes()
    assert data.startswith(b"\x89PNG")


def test_child_chart_is_drawn_in_its_box() -> None:
    child = ChartOption(
        box=Box(0, 300, 400, 600, True),
        title=TitleOption(text="Inset"),
        series=[LineSeries(values=[3, 1, 2])],
    )
    parent = ChartOption(
        output_format="svg",
        width=800,
        height=600,
        series=[LineSeries(values=[1, 2, 3])],
    )
    alone = render(parent).bytes().decode("utf-8")
    combined = render(parent.model_copy(update={"children": [child]})).bytes().decode("utf-8")
    assert "Inset" not in alone
    assert "Inset" in combined
    assert len(combined) > len(alone)


def test_render_onto_existing_painter() -> None:
    p = Painter.new(400, 300, "svg")
    root = render(ChartOption(series=[LineSeries(values=[1, 2, 3])]), p)
    assert root is p
    assert "<path " in p.bytes().decode("utf-8")
