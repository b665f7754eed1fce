"""Tests for the axis range solvers and the boundary gap default."""

from __future__ import annotations

import logging
import time
from typing import List, Optional

import pytest

from chartforge.layout.axis import default_boundary_gap
from chartforge.layout.painter import Painter
from chartforge.layout.range import (
    AxisRange,
    calculate_category_range,
    calculate_value_range,
    friendly_min,
    nice_multiplier,
    nice_step,
)


def test_nice_rounding_of_small_data() -> None:
    """[3, 17, 42] with five target labels solves to 0..50 in steps of 10."""
    r = calculate_value_range([3, 17, 42], label_count=5, padding_scale=1.0)
    assert r.min == pytest.approx(0)
    assert r.max == pytest.approx(50)
    assert r.step == pytest.approx(10)
    assert r.labels == ["0", "10", "20", "30", "40", "50"]


@pytest.mark.parametrize("raw,expected", [(0.7, 1.0), (1.5, 2.0), (2.2, 2.5), (3, 5.0), (9.75, 10.0), (12.5, 20.0)])
def test_nice_step(raw: float, expected: float) -> None:
    assert nice_step(raw) == pytest.approx(expected)


_SAMPLE_SETS: List[List[Optional[float]]] = [
    [3, 17, 42],
    [0.001, 0.002],
    [-5, 5],
    [1e6, 3e6, 2.5e6],
    [7],
    [-100, -3],
    [0.5, 0.55, 0.6],
    [None, 12, None, 18],
    [],
]


@pytest.mark.parametrize("values", _SAMPLE_SETS)
@pytest.mark.parametrize("label_count", [0, 3, 5, 8])
def test_value_range_invariants(values: List[Optional[float]], label_count: int) -> None:
    """The range covers the data on whole steps with 2..12 labels."""
    r = calculate_value_range(values, label_count=label_count)
    finite = [v for v in values if v is not None]
    if finite:
        assert r.min <= min(finite)
        assert max(finite) <= r.max
    assert r.step > 0
    steps = (r.max - r.min) / r.step
    assert steps == pytest.approx(round(steps))
    assert len(r.labels) == r.tick_count
    assert 2 <= r.tick_count <= 12


def test_forced_bounds_prefer_nice_intervals() -> None:
    r = calculate_value_range([10, 90], min_value=0, max_value=100)
    assert (r.min, r.max) == (0, 100)
    assert r.step == pytest.approx(20)
    assert r.tick_count == 6


def test_forced_bound_never_clips_data() -> None:
    """A minimum above the data is ignored."""
    r = calculate_value_range([10, 90], min_value=50)
    assert r.min <= 10


def test_swapped_bounds_are_reordered(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="chartforge.layout.range"):
        r = calculate_value_range([10, 90], min_value=100, max_value=0)
    assert (r.min, r.max) == (0, 100)
    assert "swapping" in caplog.text


def test_label_unit_makes_whole_multiples() -> None:
    r = calculate_value_range([0, 95], label_unit=7)
    assert r.step % 7 == pytest.approx(0)


@pytest.mark.parametrize("unit", [1e-3, 1e-4, 1e-5])
def test_small_label_unit_is_solved_directly(unit: float) -> None:
    """A tiny unit still yields a round step without a long search."""
    start = time.perf_counter()
    r = calculate_value_range([0, 1000], label_unit=unit)
    assert time.perf_counter() - start < 0.5
    assert r.step == pytest.approx(100)
    assert (r.min, r.max) == (0, pytest.approx(1100))
    assert r.tick_count <= 12


@pytest.mark.parametrize("raw,expected", [(0.5, 1), (1, 1), (1.2, 2), (3, 5), (7, 10), (9090909.1, 10000000)])
def test_nice_multiplier(raw: float, expected: int) -> None:
    assert nice_multiplier(raw) == expected


@pytest.mark.parametrize(
    "data_min,span,scale,expected",
    [
        (3, 39, 1.0, 0),
        (95, 25, 1.0, 95),
        (-35, 100, 1.0, -50),
        (-5, 10, 1.0, -5),
        (150, 1000, 1.0, 0),
        (3, 39, 0.0, 3),
        (1050, 500, 1.0, 1000),
        (250, 300, 1.0, 200),
    ],
)
def test_friendly_min(data_min: float, span: float, scale: float, expected: float) -> None:
    """Zero is preferred, then round values no more than 20% of the span below the data."""
    assert friendly_min(data_min, span, scale) == expected


def test_candle_range_starts_at_the_lowest_low() -> None:
    """Lows 95 and highs 120 solve to 95..125 in steps of 5."""
    r = calculate_value_range([95, 110, 100, 115, 108, 118, 105, 120, 105, 113])
    assert (r.min, r.max) == (95, 125)
    assert r.step == pytest.approx(5)


def test_custom_formatter_and_labels() -> None:
    r = calculate_value_range([0, 100], min_value=0, max_value=100, label_count=3,
                             value_formatter=lambda v: f"{v:.0f}%")
    assert r.labels == ["0%", "50%", "100%"]
    r = calculate_value_range([0, 100], min_value=0, max_value=100, label_count=3, labels=["lo"])
    assert r.labels[0] == "lo"


def test_value_range_pixel_mapping() -> None:
    r = AxisRange(min=0, max=100, size=200)
    assert r.get_height(50) == 100
    assert r.get_rest_height(25) == 150
    assert AxisRange(min=5, max=5, size=200).get_height(5) == 0


def test_category_range_counts() -> None:
    r = calculate_category_range(["a", "b", "c"])
    assert r.is_category
    assert (r.tick_count, r.label_count, r.divide_count) == (3, 3, 3)


def test_category_range_fills_names_from_series() -> None:
    r = calculate_category_range(["a"], series_names=["x", "y", "z"])
    assert r.labels == ["a", "y", "z"]


def test_category_range_reduces_labels_that_do_not_fit() -> None:
    p = Painter.new(200, 100, "svg")
    labels = [f"label-{i}" for i in range(40)]
    r = calculate_category_range(labels, painter=p, axis_size=200)
    assert r.divide_count == 40
    assert 2 <= r.label_count < 40


@pytest.mark.parametrize(
    "width,count,expected",
    [(400, 10, False), (400, 9, True), (100, 1, True), (10, 2, False), (1000, 2, True)],
)
def test_default_boundary_gap(width: int, count: int, expected: bool) -> None:
    """Dense data (at most 40 px per sample) aligns labels to ticks."""
    assert default_boundary_gap(width, count) is expected
