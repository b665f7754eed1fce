"""The :func:`render` entry point and the per-type render helpers.

:func:`render` validates a :class:`~chartforge.options.ChartOption`,
lays out the frame through :func:`~chartforge.layout.default_render` and
dispatches the series to the chart renderers.  Line, bar, candlestick and
scatter series share one cartesian frame; horizontal bar, pie, radar, funnel and
table charts can not be mixed with other types.

The ``*_render`` helpers build the option from raw values::

    painter = line_render([[120, 132, 101, 134]], x_axis_data=["Q1", "Q2", "Q3", "Q4"])
    painter.save("visits.png")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import DEFAULT_PADDING, MINIMUM_HORIZONTAL_AXIS_HEIGHT
from ..drawing.geometry import padding_all
from ..errors import InvalidOptionsError
from ..features.ohlc import OHLCData
from ..layout.painter import Painter
from ..layout.pipeline import RenderOption, RenderResult, default_render
from ..options import (
    CHART_TYPE_BAR,
    CHART_TYPE_CANDLESTICK,
    CHART_TYPE_FUNNEL,
    CHART_TYPE_HORIZONTAL_BAR,
    CHART_TYPE_LINE,
    CHART_TYPE_PIE,
    CHART_TYPE_RADAR,
    CHART_TYPE_SCATTER,
    CHART_TYPE_TABLE,
    ICON_CANDLESTICK,
    ICON_DOT,
    BarSeries,
    CandlestickSeries,
    ChartOption,
    FunnelSeries,
    HorizontalBarSeries,
    LineSeries,
    PieSeries,
    RadarIndicator,
    RadarSeries,
    ScatterSeries,
    TableSeries,
)
from ..theme import Theme, resolve_theme
from .bar import BarChart
from .candlestick import CandlestickChart
from .funnel import FunnelChart
from .horizontal_bar import HorizontalBarChart
from .line import LineChart
from .pie import PieChart
from .radar import RadarChart, validate_indicators
from .scatter import ScatterChart
from .series import stack_series
from .table import TableChart, validate_table

logger = logging.getLogger(__name__)

# Chart types drawn alone on their canvas
EXCLUSIVE_TYPES = {
    CHART_TYPE_HORIZONTAL_BAR: "horizontal bar",
    CHART_TYPE_PIE: "pie",
    CHART_TYPE_RADAR: "radar",
    CHART_TYPE_FUNNEL: "funnel",
    CHART_TYPE_TABLE: "table",
}
MAX_Y_AXIS_INDEX = 1


def validate_options(opt: ChartOption) -> None:
    """Check *opt* before anything is drawn.

    Raises:
        InvalidOptionsError: naming the offending field.
    """
    if not opt.series:
        raise InvalidOptionsError("empty series list")
    types = opt.series_types()
    for chart_type, name in EXCLUSIVE_TYPES.items():
        if chart_type in types and len(types) > 1:
            raise InvalidOptionsError(f"{name} can not mix other charts")
    for series in opt.series:
        index = getattr(series, "y_axis_index", 0)
        if 0 <= index <= MAX_Y_AXIS_INDEX:
            continue
        if series.type == CHART_TYPE_CANDLESTICK:
            raise InvalidOptionsError("candlestick series YAxisIndex out of bounds")
        raise InvalidOptionsError(f"invalid y-axis index: {index}")
    if types == [CHART_TYPE_TABLE]:
        validate_table(opt.series[0])
        return
    if types == [CHART_TYPE_RADAR]:
        validate_indicators(opt.radar_indicators)
    if not any(v is not None for s in opt.generic_series() for v in s.values):
        raise InvalidOptionsError("no data in any series")


def _typed(opt: ChartOption, chart_type: str) -> List[Tuple[int, Any]]:
    return [(index, s) for index, s in enumerate(opt.series) if s.type == chart_type]


def _theme(opt: ChartOption, inherited: Optional[Theme] = None) -> Theme:
    theme = resolve_theme(opt.theme if opt.theme is not None else inherited)
    if not opt.background_color.is_zero():
        theme = theme.with_background_color(opt.background_color)
    return theme


def _legend(opt: ChartOption, types: Sequence[str]):
    legend = opt.legend
    updates: Dict[str, Any] = {}
    if not legend.data:
        names = opt.series_names()
        if any(names):
            updates["data"] = names
    if CHART_TYPE_CANDLESTICK in types and not legend.icon:
        updates["icon"] = ICON_CANDLESTICK
    elif types == [CHART_TYPE_SCATTER] and not legend.icon:
        updates["icon"] = ICON_DOT
    return legend.model_copy(update=updates) if updates else legend


def _named(opt: ChartOption) -> ChartOption:
    """Fill missing series names from the legend data."""
    names = opt.legend.data
    if not names or all(s.name for s in opt.series):
        return opt
    series = [
        s.model_copy(update={"name": names[i]}) if not s.name and i < len(names) else s
        for i, s in enumerate(opt.series)
    ]
    return opt.model_copy(update={"series": series})


def render(opt: ChartOption, painter: Optional[Painter] = None) -> Painter:
    """Render *opt* and return the root painter holding the image.

    With *painter* the chart is drawn onto an existing canvas, confined
    to ``opt.box`` when it is set; this is how child charts are drawn.

    Raises:
        InvalidOptionsError: when the options are inconsistent.
        FormatError: when a user formatter fails.
    """
    validate_options(opt)
    opt = _named(opt)
    theme = _theme(opt, painter.theme if painter is not None else None)
    if painter is None:
        root = Painter.new(opt.width, opt.height, opt.output_format, opt.font, theme)
        p = root
    else:
        root = painter
        p = painter.child(box=opt.box, theme=theme, font=opt.font or None)
    if opt.value_formatter is not None:
        p.value_formatter = opt.value_formatter
    types = opt.series_types()
    logger.debug("rendering %s chart %dx%d", "/".join(types), p.width, p.height)

    if types == [CHART_TYPE_TABLE]:
        _render_table(p, opt, theme)
    else:
        _render_chart(p, opt, theme, types, background_is_filled=painter is not None)

    for child in opt.children:
        updates: Dict[str, Any] = {}
        if child.theme is None:
            updates["theme"] = theme
        if not child.font:
            updates["font"] = opt.font
        render(child.model_copy(update=updates) if updates else child, root)
    return root


def _render_table(p: Painter, opt: ChartOption, theme: Theme) -> None:
    p.set_background(p.width, p.height, theme.background_color)
    TableChart(opt.series[0], opt.font, theme.is_dark).render(p)


def _render_chart(p: Painter, opt: ChartOption, theme: Theme, types: List[str], background_is_filled: bool) -> None:
    padding = opt.padding if not opt.padding.is_zero() else padding_all(DEFAULT_PADDING)
    legend = _legend(opt, types)
    x_axis = opt.x_axis
    hide_axes = any(t in types for t in (CHART_TYPE_PIE, CHART_TYPE_RADAR, CHART_TYPE_FUNNEL))
    axis_reversed = CHART_TYPE_HORIZONTAL_BAR in types
    if axis_reversed and x_axis.minimum_axis_height == 0:
        x_axis = x_axis.model_copy(update={"minimum_axis_height": MINIMUM_HORIZONTAL_AXIS_HEIGHT})
    x_boundary_gap = None
    if types == [CHART_TYPE_LINE]:
        x_boundary_gap = not (opt.stack_series or any(s.fill_area for s in opt.series))
    elif types == [CHART_TYPE_SCATTER]:
        x_boundary_gap = False

    legend_color_for = None
    legend_down_color_for = None
    if CHART_TYPE_CANDLESTICK in types:
        def legend_color_for(i: int):
            return theme.get_series_up_down_colors(i)[0]

        def legend_down_color_for(i: int):
            return theme.get_series_up_down_colors(i)[1]

    series = opt.generic_series()
    if opt.stack_series:
        series = stack_series(series)
    result = default_render(p, RenderOption(
        theme=theme,
        series=series,
        x_axis=x_axis,
        y_axis=list(opt.y_axis),
        title=opt.title,
        legend=legend,
        padding=padding,
        background_is_filled=background_is_filled,
        axis_reversed=axis_reversed,
        hide_axes=hide_axes,
        x_boundary_gap=x_boundary_gap,
        legend_color_for=legend_color_for,
        legend_down_color_for=legend_down_color_for,
    ))
    _dispatch(result, opt, types)


def _dispatch(result: RenderResult, opt: ChartOption, types: List[str]) -> None:
    p = result.series_painter
    if CHART_TYPE_PIE in types:
        PieChart(p, opt.value_formatter).render(_typed(opt, CHART_TYPE_PIE))
        return
    if CHART_TYPE_RADAR in types:
        RadarChart(p, opt.radar_indicators, opt.value_formatter).render(_typed(opt, CHART_TYPE_RADAR))
        return
    if CHART_TYPE_FUNNEL in types:
        FunnelChart(p, opt.value_formatter).render(_typed(opt, CHART_TYPE_FUNNEL))
        return
    if CHART_TYPE_HORIZONTAL_BAR in types:
        HorizontalBarChart(result, opt).render(_typed(opt, CHART_TYPE_HORIZONTAL_BAR))
        return
    # lines go last so they stay visible over bars, candles and points
    bars = _typed(opt, CHART_TYPE_BAR)
    if bars:
        BarChart(result, opt).render(bars)
    candles = _typed(opt, CHART_TYPE_CANDLESTICK)
    if candles:
        CandlestickChart(result, opt).render(candles)
    points = _typed(opt, CHART_TYPE_SCATTER)
    if points:
        ScatterChart(result, opt).render(points)
    lines = _typed(opt, CHART_TYPE_LINE)
    if lines:
        LineChart(result, opt).render(lines)


def _chart_option(series: List[Any], options: Dict[str, Any]) -> ChartOption:
    return ChartOption.model_validate({**options, "series": series})


def _names(names: Optional[Sequence[str]], count: int) -> List[str]:
    names = list(names or [])
    return names + [""] * (count - len(names))


def line_render(values: Sequence[Sequence[Optional[float]]], names: Optional[Sequence[str]] = None,
                x_axis_data: Optional[Sequence[str]] = None, **options: Any) -> Painter:
    """Render one line series per entry of *values*.

    Extra keyword arguments are :class:`ChartOption` fields.
    """
    names = _names(names, len(values))
    series = [LineSeries(name=names[i], values=list(v)) for i, v in enumerate(values)]
    if x_axis_data is not None:
        options["x_axis"] = {**dict(options.get("x_axis") or {}), "data": list(x_axis_data)}
    return render(_chart_option(series, options))


def bar_render(values: Sequence[Sequence[Optional[float]]], names: Optional[Sequence[str]] = None,
               x_axis_data: Optional[Sequence[str]] = None, **options: Any) -> Painter:
    names = _names(names, len(values))
    series = [BarSeries(name=names[i], values=list(v)) for i, v in enumerate(values)]
    if x_axis_data is not None:
        options["x_axis"] = {**dict(options.get("x_axis") or {}), "data": list(x_axis_data)}
    return render(_chart_option(series, options))


def scatter_render(values: Sequence[Sequence[Any]], names: Optional[Sequence[str]] = None,
                   x_axis_data: Optional[Sequence[str]] = None, **options: Any) -> Painter:
    """Render one scatter series per entry of *values*.

    Each sample is ``None``, a number or a list of numbers for its x index.
    """
    names = _names(names, len(values))
    series = [ScatterSeries(name=names[i], values=list(v)) for i, v in enumerate(values)]
    if x_axis_data is not None:
        options["x_axis"] = {**dict(options.get("x_axis") or {}), "data": list(x_axis_data)}
    return render(_chart_option(series, options))


def horizontal_bar_render(values: Sequence[Sequence[Optional[float]]], names: Optional[Sequence[str]] = None,
                          y_axis_data: Optional[Sequence[str]] = None, **options: Any) -> Painter:
    """Render horizontal bars; *y_axis_data* holds the category labels."""
    names = _names(names, len(values))
    series = [HorizontalBarSeries(name=names[i], values=list(v)) for i, v in enumerate(values)]
    if y_axis_data is not None:
        options["y_axis"] = [{"data": list(y_axis_data)}]
    return render(_chart_option(series, options))


def pie_render(values: Sequence[Optional[float]], names: Optional[Sequence[str]] = None,
               **options: Any) -> Painter:
    """Render a pie with one slice per value."""
    names = _names(names, len(values))
    series = [PieSeries(name=names[i], value=v) for i, v in enumerate(values)]
    return render(_chart_option(series, options))


def radar_render(values: Sequence[Sequence[Optional[float]]], indicators: Sequence[Any],
                 names: Optional[Sequence[str]] = None, **options: Any) -> Painter:
    """Render one polygon per entry of *values*.

    *indicators* are :class:`RadarIndicator` instances or ``(name, max)``
    pairs.
    """
    names = _names(names, len(values))
    series = [RadarSeries(name=names[i], values=list(v)) for i, v in enumerate(values)]
    options["radar_indicators"] = [
        ind if isinstance(ind, RadarIndicator) else RadarIndicator(name=ind[0], max=ind[1]) for ind in indicators
    ]
    return render(_chart_option(series, options))


def funnel_render(values: Sequence[Optional[float]], names: Optional[Sequence[str]] = None,
                  **options: Any) -> Painter:
    names = _names(names, len(values))
    series = [FunnelSeries(name=names[i], value=v) for i, v in enumerate(values)]
    return render(_chart_option(series, options))


def candlestick_render(data: Sequence[Any], name: str = "", x_axis_data: Optional[Sequence[str]] = None,
                       **options: Any) -> Painter:
    """Render a single candlestick series.

    *data* items are :class:`OHLCData` or ``(open, high, low, close)``
    tuples.  Keyword arguments that are :class:`CandlestickSeries` fields
    (``candle_style``, ``pattern_config``, ...) go to the series, the
    others to the chart.
    """
    series_fields = {k: options.pop(k) for k in list(options) if k in CandlestickSeries.model_fields}
    samples = [d if isinstance(d, OHLCData) else OHLCData.model_validate(d) for d in data]
    series = CandlestickSeries(name=name, data=samples, **series_fields)
    if x_axis_data is not None:
        options["x_axis"] = {**dict(options.get("x_axis") or {}), "data": list(x_axis_data)}
    return render(_chart_option([series], options))


def table_render(header: Sequence[str], data: Sequence[Sequence[str]], **options: Any) -> Painter:
    """Render a table, sizing the canvas height to fit every row.

    Keyword arguments that are :class:`TableSeries` fields go to the
    table, the others to the chart.
    """
    table_fields = {k: options.pop(k) for k in list(options) if k in TableSeries.model_fields and k != "type"}
    table = TableSeries(header=list(header), data=[list(row) for row in data], **table_fields)
    opt = _chart_option([table], options)
    if "height" not in options:
        theme = _theme(opt)
        height = TableChart(table, opt.font, theme.is_dark).measure(opt.width)
        opt = opt.model_copy(update={"height": max(height, 1)})
    return render(opt)


__all__ = [
    "render",
    "validate_options",
    "line_render",
    "bar_render",
    "scatter_render",
    "horizontal_bar_render",
    "pie_render",
    "radar_render",
    "funnel_render",
    "candlestick_render",
    "table_render",
]
