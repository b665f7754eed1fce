"""Pydantic models describing a chart.

A :class:`ChartOption` is the single input of :func:`chartforge.render`.
It bundles the canvas settings, the title, legend and axis blocks and a
list of typed series.  Every series model carries a literal ``type``
field so a JSON document can be validated straight into the right
variant::

    ChartOption.model_validate({
        "x_axis": {"data": ["Mon", "Tue", "Wed"]},
        "series": [{"type": "line", "name": "visits", "values": [120, 132, 101]}],
    })

Numeric samples use ``None`` for missing values.  Colors, boxes, font
styles and offsets accept the loose forms described in
:mod:`chartforge.fields`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Callable, List, Literal, Optional, Sequence, Union

from pydantic import Field

from .config import (
    DEFAULT_CHART_HEIGHT,
    DEFAULT_CHART_WIDTH,
    FORMAT_PNG,
    POSITION_BOTTOM,
)
from .drawing.color import Color
from .drawing.fonts import FontStyle
from .drawing.geometry import Box, OffsetInt, OffsetStr
from .features.indicators import TrendLine
from .features.ohlc import OHLCData, aggregate_ohlc, validate_ohlc
from .features.patterns import CandlestickPatternConfig
from .fields import (
    BoxField,
    ColorField,
    FontStyleField,
    OffsetIntField,
    OffsetStrField,
    OptionModel,
    SampleValuesField,
    ThemeField,
)

CHART_TYPE_LINE = "line"
CHART_TYPE_BAR = "bar"
CHART_TYPE_HORIZONTAL_BAR = "horizontal_bar"
CHART_TYPE_PIE = "pie"
CHART_TYPE_RADAR = "radar"
CHART_TYPE_FUNNEL = "funnel"
CHART_TYPE_CANDLESTICK = "candlestick"
CHART_TYPE_TABLE = "table"
CHART_TYPE_SCATTER = "scatter"

MARK_MAX = "max"
MARK_MIN = "min"
MARK_AVERAGE = "average"

CANDLE_STYLE_FILLED = "filled"
CANDLE_STYLE_TRADITIONAL = "traditional"
CANDLE_STYLE_OUTLINE = "outline"
CANDLE_STYLE_OHLC = "ohlc"

SYMBOL_CIRCLE = "circle"
SYMBOL_DOT = "dot"
SYMBOL_NONE = "none"

ICON_RECT = "rect"
ICON_DOT = "dot"
ICON_CANDLESTICK = "candlestick"


class TitleOption(OptionModel):
    """Chart title and subtitle.

    ``offset.left`` accepts ``left``, ``center``, ``right``, pixels or a
    percentage; ``offset.top`` accepts ``top``, ``bottom``, pixels or a
    percentage.  Text may span several lines separated by ``\\n``.
    """

    show: Optional[bool] = None
    text: str = ""
    subtext: str = ""
    offset: OffsetStrField = OffsetStr()
    font_style: FontStyleField = FontStyle()
    subtext_font_style: FontStyleField = FontStyle()
    border_width: float = 0.0


class LegendOption(OptionModel):
    show: Optional[bool] = None
    data: List[str] = Field(default_factory=list)
    font_style: FontStyleField = FontStyle()
    padding: BoxField = Box()
    offset: OffsetStrField = OffsetStr()
    align: Literal["", "left", "right"] = ""
    vertical: bool = False
    icon: Literal["", "rect", "dot", "candlestick"] = ""
    overlay_chart: Optional[bool] = None


class XAxisOption(OptionModel):
    """Horizontal axis settings.

    ``data`` holds the category labels.  On a horizontal bar chart the x
    axis shows values instead, and ``min``/``max`` bound that range.
    """

    show: Optional[bool] = None
    data: List[str] = Field(default_factory=list)
    data_start_index: int = 0
    position: Literal["bottom", "top"] = POSITION_BOTTOM
    boundary_gap: Optional[bool] = None
    font_style: FontStyleField = FontStyle()
    label_rotation: float = 0.0
    label_offset: OffsetIntField = OffsetInt()
    unit: float = 0.0
    label_count: int = 0
    label_count_adjustment: int = 0
    label_skip_count: int = 0
    title: str = ""
    title_font_style: FontStyleField = FontStyle()
    axis_color: ColorField = Color()
    minimum_axis_height: int = 0
    split_line_show: Optional[bool] = None
    min: Optional[float] = None
    max: Optional[float] = None
    value_formatter: Optional[Callable] = None


class YAxisOption(OptionModel):
    """Vertical axis settings.

    ``min``/``max`` extend the solved range but never clip the data.
    ``data`` replaces the generated labels; on a horizontal bar chart it
    holds the category labels.
    """

    show: Optional[bool] = None
    min: Optional[float] = None
    max: Optional[float] = None
    range_value_padding_scale: Optional[float] = None
    data: List[str] = Field(default_factory=list)
    position: Literal["", "left", "right"] = ""
    font_style: FontStyleField = FontStyle()
    unit: float = 0.0
    label_count: int = 0
    label_count_adjustment: int = 0
    label_skip_count: int = 0
    title: str = ""
    title_font_style: FontStyleField = FontStyle()
    axis_color: ColorField = Color()
    split_line_show: Optional[bool] = None
    value_formatter: Optional[Callable] = None


class SeriesLabel(OptionModel):
    """Per-sample value labels.

    ``format_template`` substitutes ``{b}`` (series or category name),
    ``{c}`` (value) and ``{d}`` (percent of the total).
    ``label_formatter(index, name, value)`` returns ``(text, LabelStyle |
    None)`` and takes precedence over the template.
    """

    show: Optional[bool] = None
    format_template: str = ""
    value_formatter: Optional[Callable] = None
    label_formatter: Optional[Callable] = None
    font_style: FontStyleField = FontStyle()
    distance: int = 0
    offset: OffsetIntField = OffsetInt()


class SeriesMark(OptionModel):
    type: Literal["max", "min", "average"] = MARK_MAX


class SeriesMarkPoint(OptionModel):
    symbol_size: int = 0
    value_formatter: Optional[Callable] = None
    data: List[SeriesMark] = Field(default_factory=list)


class SeriesMarkLine(OptionModel):
    value_formatter: Optional[Callable] = None
    data: List[SeriesMark] = Field(default_factory=list)


def new_mark_point(*mark_types: str) -> SeriesMarkPoint:
    """Mark points for each of *mark_types* (``max``, ``min``)."""
    return SeriesMarkPoint(data=[SeriesMark(type=t) for t in mark_types])


def new_mark_line(*mark_types: str) -> SeriesMarkLine:
    """Mark lines for each of *mark_types* (``max``, ``min``, ``average``)."""
    return SeriesMarkLine(data=[SeriesMark(type=t) for t in mark_types])


def new_trend_line(trend_type: str, period: int = 0) -> List[TrendLine]:
    return [TrendLine(type=trend_type, period=period)]


@dataclass
class GenericSeries:
    """Uniform view of a series used by the shared renderers.

    ``index`` is the position in the chart's series list, which selects
    the theme color.
    """

    type: str
    values: List[Optional[float]]
    name: str = ""
    y_axis_index: int = 0
    index: int = 0
    label: SeriesLabel = field(default_factory=SeriesLabel)
    mark_point: SeriesMarkPoint = field(default_factory=SeriesMarkPoint)
    mark_line: SeriesMarkLine = field(default_factory=SeriesMarkLine)
    trend_lines: List[TrendLine] = field(default_factory=list)
    range_values: Optional[List[Optional[float]]] = None

    def axis_values(self) -> List[Optional[float]]:
        """Values that must fit inside the value axis."""
        return self.values if self.range_values is None else self.range_values


class _ValueSeries(OptionModel):
    name: str = ""
    values: List[Optional[float]] = Field(default_factory=list)
    label: SeriesLabel = Field(default_factory=SeriesLabel)

    def to_generic(self, index: int = 0) -> GenericSeries:
        return GenericSeries(
            type=self.type,
            values=list(self.values),
            name=self.name,
            y_axis_index=getattr(self, "y_axis_index", 0),
            index=index,
            label=self.label,
            mark_point=getattr(self, "mark_point", SeriesMarkPoint()),
            mark_line=getattr(self, "mark_line", SeriesMarkLine()),
            trend_lines=list(getattr(self, "trend_lines", [])),
        )


class LineSeries(_ValueSeries):
    """A line series.

    ``symbol`` defaults to hollow circles for fewer than 100 samples on
    straight lines and to no symbol otherwise.  ``fill_opacity`` is the
    0..255 alpha of the area fill.  ``fill_area`` left unset fills the
    area only when the chart stacks its series.
    """

    type: Literal["line"] = CHART_TYPE_LINE
    y_axis_index: int = 0
    mark_point: SeriesMarkPoint = Field(default_factory=SeriesMarkPoint)
    mark_line: SeriesMarkLine = Field(default_factory=SeriesMarkLine)
    trend_lines: List[TrendLine] = Field(default_factory=list)
    stroke_width: float = 0.0
    fill_area: Optional[bool] = None
    fill_opacity: int = 0
    symbol: Literal["", "circle", "dot", "none"] = ""
    smooth_tension: float = 0.0


class BarSeries(_ValueSeries):
    type: Literal["bar"] = CHART_TYPE_BAR
    y_axis_index: int = 0
    mark_point: SeriesMarkPoint = Field(default_factory=SeriesMarkPoint)
    mark_line: SeriesMarkLine = Field(default_factory=SeriesMarkLine)
    trend_lines: List[TrendLine] = Field(default_factory=list)
    bar_width: int = 0
    round_radius: int = 0


class HorizontalBarSeries(_ValueSeries):
    type: Literal["horizontal_bar"] = CHART_TYPE_HORIZONTAL_BAR
    mark_line: SeriesMarkLine = Field(default_factory=SeriesMarkLine)
    bar_height: int = 0


class RadarSeries(_ValueSeries):
    """One polygon on a radar chart; ``values`` follow the indicator order."""

    type: Literal["radar"] = CHART_TYPE_RADAR


class PieSeries(OptionModel):
    """One slice of a pie chart.

    ``radius`` and ``inner_radius`` take pixels or a percentage of the
    smaller canvas side; a non-empty inner radius draws a doughnut.
    """

    type: Literal["pie"] = CHART_TYPE_PIE
    name: str = ""
    value: Optional[float] = None
    label: SeriesLabel = Field(default_factory=SeriesLabel)
    radius: str = ""
    inner_radius: str = ""

    def to_generic(self, index: int = 0) -> GenericSeries:
        return GenericSeries(type=self.type, values=[self.value], name=self.name, index=index, label=self.label)


class FunnelSeries(OptionModel):
    type: Literal["funnel"] = CHART_TYPE_FUNNEL
    name: str = ""
    value: Optional[float] = None
    label: SeriesLabel = Field(default_factory=SeriesLabel)

    def to_generic(self, index: int = 0) -> GenericSeries:
        return GenericSeries(type=self.type, values=[self.value], name=self.name, index=index, label=self.label)


class CandlestickSeries(OptionModel):
    """OHLC samples drawn as candles.

    Attributes:
        data: Samples; invalid ones leave a gap.
        candle_style: ``filled`` (default), ``traditional`` (hollow
            bullish bodies), ``outline`` or ``ohlc`` (open/close ticks).
        show_wicks: Draw the high-low wicks; ``None`` draws them.
        candle_width: Share (0..1] of each section taken by candles,
            0.8 by default.
        wick_width: Wick stroke width, 1 px by default.
        candle_margin: Gap between grouped candles as a share of the
            section; ``None`` picks it from the available space.
        pattern_config: Enables pattern detection and labels.
    """

    type: Literal["candlestick"] = CHART_TYPE_CANDLESTICK
    name: str = ""
    data: List[OHLCData] = Field(default_factory=list)
    y_axis_index: int = 0
    label: SeriesLabel = Field(default_factory=SeriesLabel)
    candle_style: Literal["", "filled", "traditional", "outline", "ohlc"] = ""
    show_wicks: Optional[bool] = None
    candle_width: float = 0.0
    wick_width: float = 0.0
    candle_margin: Optional[float] = None
    pattern_config: Optional[CandlestickPatternConfig] = None
    open_trend_lines: List[TrendLine] = Field(default_factory=list)
    high_trend_lines: List[TrendLine] = Field(default_factory=list)
    low_trend_lines: List[TrendLine] = Field(default_factory=list)
    close_trend_lines: List[TrendLine] = Field(default_factory=list)
    open_mark_point: SeriesMarkPoint = Field(default_factory=SeriesMarkPoint)
    high_mark_point: SeriesMarkPoint = Field(default_factory=SeriesMarkPoint)
    low_mark_point: SeriesMarkPoint = Field(default_factory=SeriesMarkPoint)
    close_mark_point: SeriesMarkPoint = Field(default_factory=SeriesMarkPoint)
    open_mark_line: SeriesMarkLine = Field(default_factory=SeriesMarkLine)
    high_mark_line: SeriesMarkLine = Field(default_factory=SeriesMarkLine)
    low_mark_line: SeriesMarkLine = Field(default_factory=SeriesMarkLine)
    close_mark_line: SeriesMarkLine = Field(default_factory=SeriesMarkLine)

    def field_values(self, name: str) -> List[Optional[float]]:
        """One OHLC field per sample, ``None`` for invalid samples."""
        return [sample.field(name) if validate_ohlc(sample) else None for sample in self.data]

    def to_generic(self, index: int = 0) -> GenericSeries:
        bounds: List[Optional[float]] = []
        for sample in self.data:
            if validate_ohlc(sample):
                bounds.extend((sample.low, sample.high))
        return GenericSeries(
            type=self.type,
            values=self.field_values("close"),
            name=self.name,
            y_axis_index=self.y_axis_index,
            index=index,
            label=self.label,
            range_values=bounds,
        )


def aggregate_candlestick(series: CandlestickSeries, period: int) -> CandlestickSeries:
    """Copy of *series* with every *period* samples folded into one.

    Only ``data`` changes (see :func:`~chartforge.features.ohlc.aggregate_ohlc`);
    the name, axis, candle style, marks, trend lines and pattern settings
    are kept.  Category labels are reduced separately with
    :func:`~chartforge.features.ohlc.aggregate_labels`.
    """
    return series.model_copy(update={"data": aggregate_ohlc(series.data, period)})


class ScatterSeries(OptionModel):
    """Free standing symbols, one or more per x index.

    Each entry of ``values`` is ``None``, a number or a list of numbers
    for that x index.  ``symbol`` is ``dot`` (filled, the default) or
    ``circle`` (hollow); ``symbol_size`` is the radius, 2 by default.
    """

    type: Literal["scatter"] = CHART_TYPE_SCATTER
    name: str = ""
    values: List[SampleValuesField] = Field(default_factory=list)
    y_axis_index: int = 0
    label: SeriesLabel = Field(default_factory=SeriesLabel)
    mark_line: SeriesMarkLine = Field(default_factory=SeriesMarkLine)
    trend_lines: List[TrendLine] = Field(default_factory=list)
    symbol: Literal["", "circle", "dot"] = ""
    symbol_size: float = 0.0

    def flat_values(self) -> List[Optional[float]]:
        return [v for values in self.values for v in values if v is not None]

    def average_values(self) -> List[Optional[float]]:
        """Mean of every x index, ``None`` where it holds no value."""
        result: List[Optional[float]] = []
        for values in self.values:
            present = [v for v in values if v is not None]
            result.append(sum(present) / len(present) if present else None)
        return result

    def to_generic(self, index: int = 0) -> GenericSeries:
        return GenericSeries(
            type=self.type,
            values=self.average_values(),
            name=self.name,
            y_axis_index=self.y_axis_index,
            index=index,
            label=self.label,
            mark_line=self.mark_line,
            trend_lines=list(self.trend_lines),
            range_values=self.flat_values(),
        )


class TableSeries(OptionModel):
    """A table rendered in place of a plot.

    ``spans`` sets the relative width of each column and ``text_aligns``
    its alignment.  ``cell_modifier(cell) -> cell`` can adjust the text,
    font and fill of any :class:`~chartforge.charts.table.TableCell`.
    """

    type: Literal["table"] = CHART_TYPE_TABLE
    name: str = ""
    header: List[str] = Field(default_factory=list)
    data: List[List[str]] = Field(default_factory=list)
    spans: List[int] = Field(default_factory=list)
    text_aligns: List[str] = Field(default_factory=list)
    font_style: FontStyleField = FontStyle()
    header_background_color: ColorField = Color()
    header_font_color: ColorField = Color()
    row_background_colors: List[ColorField] = Field(default_factory=list)
    background_color: ColorField = Color()
    cell_padding: BoxField = Box()
    cell_modifier: Optional[Callable] = None

    def to_generic(self, index: int = 0) -> GenericSeries:
        return GenericSeries(type=self.type, values=[], name=self.name, index=index)


SeriesOption = Annotated[
    Union[
        LineSeries,
        BarSeries,
        HorizontalBarSeries,
        PieSeries,
        RadarSeries,
        FunnelSeries,
        CandlestickSeries,
        TableSeries,
        ScatterSeries,
    ],
    Field(discriminator="type"),
]


class RadarIndicator(OptionModel):
    name: str = ""
    max: float = 0.0
    min: float = 0.0


class ChartOption(OptionModel):
    """Everything needed to render one chart.

    Attributes:
        output_format: ``svg``, ``png`` or ``jpg``.
        font: Font family or path to a TrueType file.
        theme: Theme or registered theme name.
        padding: Space around the chart; unset means 20 px per side.
        children: Charts drawn on top of this one, inheriting the theme
            and font; each may limit itself to its own ``box``.
        box: Region of the parent canvas used by a child chart.
        value_formatter: Default formatter for axis and value labels.
        stack_series: Stack the line series, and separately the bar
            series, of the first y axis: each series is drawn on top of
            the running total of the ones before it and the axis range
            covers the totals.
    """

    output_format: Literal["svg", "png", "jpg"] = FORMAT_PNG
    font: str = ""
    theme: ThemeField = None
    title: TitleOption = Field(default_factory=TitleOption)
    legend: LegendOption = Field(default_factory=LegendOption)
    x_axis: XAxisOption = Field(default_factory=XAxisOption)
    y_axis: List[YAxisOption] = Field(default_factory=list)
    series: List[SeriesOption] = Field(default_factory=list)
    padding: BoxField = Box()
    width: int = DEFAULT_CHART_WIDTH
    height: int = DEFAULT_CHART_HEIGHT
    background_color: ColorField = Color()
    children: List["ChartOption"] = Field(default_factory=list)
    box: BoxField = Box()
    value_formatter: Optional[Callable] = None
    radar_indicators: List[RadarIndicator] = Field(default_factory=list)
    stack_series: bool = False

    def series_types(self) -> List[str]:
        seen: List[str] = []
        for s in self.series:
            if s.type not in seen:
                seen.append(s.type)
        return seen

    def series_names(self) -> List[str]:
        return [s.name for s in self.series]

    def generic_series(self, types: Optional[Sequence[str]] = None) -> List[GenericSeries]:
        """Generic views of the series, optionally only those of *types*.

        The ``index`` of each view is its position in the full list.
        """
        result = []
        for index, s in enumerate(self.series):
            if types is None or s.type in types:
                result.append(s.to_generic(index))
        return result


ChartOption.model_rebuild()


__all__ = [
    "CHART_TYPE_LINE",
    "CHART_TYPE_BAR",
    "CHART_TYPE_HORIZONTAL_BAR",
    "CHART_TYPE_PIE",
    "CHART_TYPE_RADAR",
    "CHART_TYPE_FUNNEL",
    "CHART_TYPE_CANDLESTICK",
    "CHART_TYPE_TABLE",
    "CHART_TYPE_SCATTER",
    "MARK_MAX",
    "MARK_MIN",
    "MARK_AVERAGE",
    "CANDLE_STYLE_FILLED",
    "CANDLE_STYLE_TRADITIONAL",
    "CANDLE_STYLE_OUTLINE",
    "CANDLE_STYLE_OHLC",
    "SYMBOL_CIRCLE",
    "SYMBOL_DOT",
    "SYMBOL_NONE",
    "ICON_RECT",
    "ICON_DOT",
    "ICON_CANDLESTICK",
    "TitleOption",
    "LegendOption",
    "XAxisOption",
    "YAxisOption",
    "SeriesLabel",
    "SeriesMark",
    "SeriesMarkPoint",
    "SeriesMarkLine",
    "TrendLine",
    "new_mark_point",
    "new_mark_line",
    "new_trend_line",
    "GenericSeries",
    "LineSeries",
    "BarSeries",
    "HorizontalBarSeries",
    "RadarSeries",
    "PieSeries",
    "FunnelSeries",
    "CandlestickSeries",
    "aggregate_candlestick",
    "TableSeries",
    "ScatterSeries",
    "SeriesOption",
    "RadarIndicator",
    "ChartOption",
    "CandlestickPatternConfig",
    "OHLCData",
]
