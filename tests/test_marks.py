"""Tests for mark points and mark lines."""

from __future__ import annotations

from chartforge.charts.marks import MarkLinePainter, MarkLineRenderOption, MarkPointPainter, MarkPointRenderOption
from chartforge.charts.series import summarize
from chartforge.drawing.color import rgb
from chartforge.drawing.geometry import Point
from chartforge.layout.painter import Painter
from chartforge.layout.range import AxisRange
from chartforge.options import new_mark_line, new_mark_point

RED = rgb(255, 0, 0)


def _record(monkeypatch, name: str) -> list:
    calls = []
    original = getattr(Painter, name)

    def wrapper(self, *args, **kwargs):
        calls.append(args)
        return original(self, *args, **kwargs)

    monkeypatch.setattr(Painter, name, wrapper)
    return calls


def test_summary_points_at_the_first_extremum() -> None:
    summary = summarize([5, 9, None, 9, 1, 1])
    assert (summary.max, summary.max_index) == (9, 1)
    assert (summary.min, summary.min_index) == (1, 4)
    assert summary.average == 5
    assert summary.count == 5


def test_mark_points_pin_the_first_tied_sample(monkeypatch) -> None:
    pins = _record(monkeypatch, "pin")
    p = Painter.new(200, 100, "svg")
    painter = MarkPointPainter(p)
    painter.add(MarkPointRenderOption(
        fill_color=RED,
        mark_point=new_mark_point("max", "min"),
        values=[5, 9, 9, 1, 1],
        points=[Point(i * 10, 50) for i in range(5)],
    ))
    painter.render()
    assert [args[0] for args in pins] == [10, 30]


def test_mark_points_skip_missing_points(monkeypatch) -> None:
    pins = _record(monkeypatch, "pin")
    p = Painter.new(200, 100, "svg")
    painter = MarkPointPainter(p)
    painter.add(MarkPointRenderOption(
        fill_color=RED,
        mark_point=new_mark_point("max"),
        values=[1, 2, 3],
        points=[Point(0, 50), Point(10, 50)],
    ))
    painter.render()
    assert pins == []


def test_mark_lines_sit_at_their_values(monkeypatch) -> None:
    lines = _record(monkeypatch, "mark_line")
    p = Painter.new(200, 100, "svg")
    painter = MarkLinePainter(p)
    painter.add(MarkLineRenderOption(
        fill_color=RED,
        stroke_color=RED,
        mark_line=new_mark_line("max", "min", "average"),
        values=[10, None, 20, 60],
        axis_range=AxisRange(min=0, max=100, size=100),
    ))
    painter.render()
    # the average of 10, 20 and 60 is 30, drawn 30 px above the bottom
    assert [args[1] for args in lines] == [40, 90, 70]
    assert all(args[0] == 0 and args[2] == p.width - 2 for args in lines)


def test_vertical_mark_line_at_the_average(monkeypatch) -> None:
    lines = _record(monkeypatch, "vertical_mark_line")
    p = Painter.new(200, 100, "svg")
    painter = MarkLinePainter(p)
    painter.add(MarkLineRenderOption(
        fill_color=RED,
        stroke_color=RED,
        mark_line=new_mark_line("average"),
        values=[50, 150],
        axis_range=AxisRange(min=0, max=200, size=200),
        vertical=True,
    ))
    painter.render()
    assert [args[0] for args in lines] == [100]


def test_empty_series_draws_no_mark_line(monkeypatch) -> None:
    lines = _record(monkeypatch, "mark_line")
    p = Painter.new(200, 100, "svg")
    painter = MarkLinePainter(p)
    painter.add(MarkLineRenderOption(
        fill_color=RED,
        stroke_color=RED,
        mark_line=new_mark_line("average"),
        values=[None, None],
        axis_range=AxisRange(min=0, max=100, size=100),
    ))
    painter.render()
    assert lines == []
