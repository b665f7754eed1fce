"""Series statistics and label text shared by the chart renderers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from ..humanize import ValueFormatter, humanize
from ..layout.painter import call_formatter
from ..options import CHART_TYPE_BAR, CHART_TYPE_LINE, MARK_MAX, MARK_MIN, GenericSeries, SeriesLabel

STACKED_TYPES = (CHART_TYPE_LINE, CHART_TYPE_BAR)


@dataclass(frozen=True)
class SeriesSummary:
    """Population statistics of a series, ignoring missing samples.

    ``min_index``/``max_index`` point at the first occurrence of the
    extremum and are -1 when the series has no samples.
    """

    min: float = 0.0
    max: float = 0.0
    min_index: int = -1
    max_index: int = -1
    average: float = 0.0
    count: int = 0


def summarize(values: Sequence[Optional[float]]) -> SeriesSummary:
    min_value = max_value = 0.0
    min_index = max_index = -1
    total = 0.0
    count = 0
    for index, value in enumerate(values):
        if value is None:
            continue
        if min_index < 0 or value < min_value:
            min_value, min_index = value, index
        if max_index < 0 or value > max_value:
            max_value, max_index = value, index
        total += value
        count += 1
    if count == 0:
        return SeriesSummary()
    return SeriesSummary(min_value, max_value, min_index, max_index, total / count, count)


def mark_value(summary: SeriesSummary, mark_type: str) -> float:
    if mark_type == MARK_MAX:
        return summary.max
    if mark_type == MARK_MIN:
        return summary.min
    return summary.average


def mark_index(summary: SeriesSummary, mark_type: str) -> int:
    """Sample index a mark points at; averages have none."""
    if mark_type == MARK_MAX:
        return summary.max_index
    if mark_type == MARK_MIN:
        return summary.min_index
    return -1


def sum_values(series: Sequence[GenericSeries]) -> float:
    return sum(v for s in series for v in s.values if v is not None)


def max_data_count(series: Sequence[GenericSeries]) -> int:
    return max((len(s.values) for s in series), default=0)


def stacked_values(values_list: Sequence[Sequence[Optional[float]]]) -> List[List[Optional[float]]]:
    """Running totals per index across *values_list*.

    A missing sample stays ``None`` and adds nothing to the total.
    """
    totals: List[float] = []
    result: List[List[Optional[float]]] = []
    for values in values_list:
        if len(totals) < len(values):
            totals.extend([0.0] * (len(values) - len(totals)))
        row: List[Optional[float]] = []
        for i, value in enumerate(values):
            if value is None:
                row.append(None)
                continue
            totals[i] += value
            row.append(totals[i])
        result.append(row)
    return result


def stack_series(series: Sequence[GenericSeries]) -> List[GenericSeries]:
    """Replace the axis values of stacked series with their running totals.

    Line series stack among themselves and bar series among themselves,
    both only on the first y axis.  When every stacked value is positive
    the range also reaches one below the smallest of them, so the first
    layer keeps a visible height.
    """
    result = list(series)
    for chart_type in STACKED_TYPES:
        positions = [i for i, s in enumerate(result) if s.type == chart_type and s.y_axis_index == 0]
        if not positions:
            continue
        rows = stacked_values([result[i].values for i in positions])
        present = [v for i in positions for v in result[i].values if v is not None]
        for position, row in zip(positions, rows):
            result[position] = replace(result[position], range_values=row)
        if present and min(present) > 0:
            first = result[positions[0]]
            result[positions[0]] = replace(first, range_values=first.axis_values() + [min(present) - 1])
    return result


def format_template(template: str, name: str, value: float, percent: float = -1.0) -> str:
    """Fill ``{b}`` (name), ``{c}`` (value) and ``{d}`` (percent) in *template*.

    A negative *percent* leaves ``{d}`` empty.
    """
    percent_text = humanize(percent * 100) + "%" if percent >= 0 else ""
    text = template.replace("{c}", humanize(value))
    text = text.replace("{d}", percent_text)
    return text.replace("{b}", name)


def label_text(
    label: SeriesLabel,
    name: str,
    value: float,
    percent: float = -1.0,
    default_template: str = "{c}",
    fallback: Optional[ValueFormatter] = None,
) -> str:
    """Text of one series label.

    An explicit template wins, then the label's value formatter, then
    *default_template* for charts whose default is not the bare value
    (pie and funnel), then *fallback* and finally :func:`humanize`.
    """
    if label.format_template:
        return format_template(label.format_template, name, value, percent)
    if label.value_formatter is not None:
        return call_formatter(label.value_formatter, value)
    if default_template != "{c}":
        return format_template(default_template, name, value, percent)
    if fallback is not None:
        return call_formatter(fallback, value)
    return humanize(value)


def names_of(series: Sequence[GenericSeries]) -> List[str]:
    return [s.name for s in series]


__all__ = [
    "SeriesSummary",
    "summarize",
    "mark_value",
    "mark_index",
    "sum_values",
    "max_data_count",
    "stacked_values",
    "stack_series",
    "STACKED_TYPES",
    "format_template",
    "label_text",
    "names_of",
]
