"""Tests for the ECharts option façade."""

from __future__ import annotations

import json

import pytest

from chartforge.drawing.color import rgb
from chartforge.echarts import (
    SMOOTH_TENSION,
    parse_echarts_options,
    render_echarts_options,
    render_echarts_to_bytes,
)
from chartforge.errors import InvalidOptionsError
from chartforge.features.ohlc import OHLCData
from chartforge.options import (
    BarSeries,
    CandlestickSeries,
    HorizontalBarSeries,
    LineSeries,
    PieSeries,
    RadarSeries,
)


def _make_line_doc(**extra) -> dict:
    doc = {
        "type": "svg",
        "title": {"text": "Visits", "left": "center", "textStyle": {"color": "#333"}},
        "legend": {"data": ["Email", "Ads"], "top": 10},
        "xAxis": {"type": "category", "data": ["Mon", "Tue", "Wed"]},
        "yAxis": [{"type": "value", "axisLabel": {"formatter": "{value} ml"}}],
        "series": [
            {"name": "Email", "type": "line", "data": [120, "-", 101], "smooth": True},
            {"name": "Ads", "type": "bar", "data": [{"value": 220}, 182, 191],
             "markPoint": {"data": [{"type": "max"}, {"type": "unknown"}]}},
        ],
    }
    doc.update(extra)
    return doc


def test_parse_line_and_bar() -> None:
    opt = parse_echarts_options(json.dumps(_make_line_doc()))
    assert opt.output_format == "svg"
    assert opt.title.text == "Visits"
    assert opt.title.offset.left == "center"
    assert opt.title.font_style.color == rgb(0x33, 0x33, 0x33)
    assert opt.legend.offset.top == "10"
    assert opt.x_axis.data == ["Mon", "Tue", "Wed"]

    line, bar = opt.series
    assert isinstance(line, LineSeries)
    assert line.values == [120, None, 101]
    assert line.smooth_tension == pytest.approx(SMOOTH_TENSION)
    assert isinstance(bar, BarSeries)
    assert bar.values == [220, 182, 191]
    assert [m.type for m in bar.mark_point.data] == ["max"]


def test_axis_label_template() -> None:
    opt = parse_echarts_options(_make_line_doc())
    assert opt.y_axis[0].value_formatter(1500) == "1.5k ml"


def test_value_x_axis_makes_horizontal_bars() -> None:
    opt = parse_echarts_options({
        "xAxis": {"type": "value"},
        "yAxis": {"type": "category", "data": ["a", "b"]},
        "series": [{"type": "bar", "data": [3, 4]}],
    })
    assert isinstance(opt.series[0], HorizontalBarSeries)
    assert opt.y_axis[0].data == ["a", "b"]


def test_pie_radius_pair() -> None:
    opt = parse_echarts_options({
        "series": [{"type": "pie", "radius": ["40%", "70%"],
                    "data": [{"value": 10, "name": "A"}, {"value": 20, "name": "B"}]}],
    })
    assert all(isinstance(s, PieSeries) for s in opt.series)
    assert [s.name for s in opt.series] == ["A", "B"]
    assert opt.series[0].inner_radius == "40%"
    assert opt.series[0].radius == "70%"


def test_candlestick_value_order() -> None:
    """ECharts lists candlestick values as open, close, low, high."""
    opt = parse_echarts_options({
        "xAxis": {"data": ["d1"]},
        "series": [{"type": "candlestick", "name": "K", "data": [[20, 34, 10, 38]]}],
    })
    series = opt.series[0]
    assert isinstance(series, CandlestickSeries)
    assert series.data == [OHLCData(open=20, high=38, low=10, close=34)]


def test_radar_items_become_series() -> None:
    opt = parse_echarts_options({
        "radar": {"indicator": [{"name": "a", "max": 10}, {"name": "b", "max": 10}, {"name": "c", "max": 10}]},
        "series": [{"type": "radar", "data": [{"name": "x", "value": [1, 2, 3]}, {"name": "y", "value": [3, 2, 1]}]}],
    })
    assert [type(s) for s in opt.series] == [RadarSeries, RadarSeries]
    assert [i.name for i in opt.radar_indicators] == ["a", "b", "c"]


def test_padding_shorthand_and_children() -> None:
    opt = parse_echarts_options({
        "padding": [10, 20],
        "width": 400,
        "series": [{"data": [1, 2]}],
        "children": [{"box": {"left": 0, "top": 0, "right": 200, "bottom": 150}, "series": [{"data": [3, 4]}]}],
    })
    assert (opt.padding.top, opt.padding.right) == (10, 20)
    assert opt.width == 400
    assert opt.children[0].box.right == 200


def test_invalid_json() -> None:
    with pytest.raises(InvalidOptionsError, match="invalid echarts json"):
        parse_echarts_options("{not json")


def test_invalid_color() -> None:
    with pytest.raises(InvalidOptionsError):
        parse_echarts_options({"title": {"textStyle": {"color": 3.5}}, "series": [{"data": [1]}]})


def test_invalid_data_item() -> None:
    with pytest.raises(InvalidOptionsError):
        parse_echarts_options({"series": [{"data": ["abc"]}]})


def test_render_echarts_document() -> None:
    p = render_echarts_options(_make_line_doc())
    assert p.format == "svg"
    svg = render_echarts_to_bytes(json.dumps(_make_line_doc())).decode("utf-8")
    assert "Visits" in svg
    assert "Email" in svg
