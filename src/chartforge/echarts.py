"""Declarative options in the ECharts JSON dialect.

:func:`parse_echarts_options` turns a JSON document shaped like an
ECharts ``option`` object into a :class:`~chartforge.options.ChartOption`::

    opt = parse_echarts_options('''{
        "title": {"text": "Visits"},
        "xAxis": {"data": ["Mon", "Tue", "Wed"]},
        "series": [{"type": "bar", "data": [120, 200, 150]}]
    }''')
    render(opt).save("visits.png")

Only the subset chartforge can draw is read and unknown keys are
ignored.  The loose forms ECharts allows are accepted: a single axis
object or a list of them, bare numbers as positions, ``padding`` with one
to four values and series data given as numbers, ``{value, name}``
objects or value arrays.  On a ``"value"`` x axis bar series become
horizontal bars, and a ``stack`` name on any series stacks the chart.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .charts import render
from .drawing.color import Color
from .drawing.fonts import FontStyle
from .drawing.geometry import Box, OffsetStr
from .errors import InvalidOptionsError
from .fields import BoxField, ColorField
from .features.ohlc import OHLCData
from .humanize import humanize
from .layout.painter import Painter
from .options import (
    CHART_TYPE_BAR,
    CHART_TYPE_CANDLESTICK,
    CHART_TYPE_FUNNEL,
    CHART_TYPE_LINE,
    CHART_TYPE_PIE,
    CHART_TYPE_RADAR,
    CHART_TYPE_SCATTER,
    BarSeries,
    CandlestickSeries,
    ChartOption,
    FunnelSeries,
    HorizontalBarSeries,
    LegendOption,
    LineSeries,
    PieSeries,
    RadarIndicator,
    RadarSeries,
    ScatterSeries,
    SeriesLabel,
    SeriesMark,
    SeriesMarkLine,
    SeriesMarkPoint,
    TitleOption,
    XAxisOption,
    YAxisOption,
)

logger = logging.getLogger(__name__)

AXIS_TYPE_VALUE = "value"
# Tension used for ``smooth: true`` line series
SMOOTH_TENSION = 0.5


def _as_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    return value


def _position(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(int(value))
    return str(value)


def value_template_formatter(template: str) -> Callable[[float], str]:
    """Formatter substituting the humanized value for ``{value}``."""

    def _format(value: float) -> str:
        return template.replace("{value}", humanize(value))

    return _format


class EChartsModel(BaseModel):
    class Config:
        arbitrary_types_allowed = True
        alias_generator = to_camel
        populate_by_name = True
        extra = "ignore"


class EChartsTextStyle(EChartsModel):
    color: ColorField = Color()
    font_family: str = ""
    font_size: float = 0.0

    def to_font_style(self) -> FontStyle:
        return FontStyle(self.font_family, self.font_size, self.color)


class EChartsTitle(EChartsModel):
    show: Optional[bool] = None
    text: str = ""
    subtext: str = ""
    left: str = ""
    top: str = ""
    text_style: EChartsTextStyle = Field(default_factory=EChartsTextStyle)
    subtext_style: EChartsTextStyle = Field(default_factory=EChartsTextStyle)

    @field_validator("left", "top", mode="before")
    @classmethod
    def _offsets(cls, value: Any) -> str:
        return _position(value)

    def to_option(self) -> TitleOption:
        return TitleOption(
            show=self.show,
            text=self.text,
            subtext=self.subtext,
            offset=OffsetStr(self.left, self.top),
            font_style=self.text_style.to_font_style(),
            subtext_font_style=self.subtext_style.to_font_style(),
        )


class EChartsLegend(EChartsModel):
    show: Optional[bool] = None
    data: List[str] = Field(default_factory=list)
    align: str = ""
    orient: str = ""
    padding: BoxField = Box()
    left: str = ""
    top: str = ""
    text_style: EChartsTextStyle = Field(default_factory=EChartsTextStyle)

    @field_validator("left", "top", mode="before")
    @classmethod
    def _offsets(cls, value: Any) -> str:
        return _position(value)

    def to_option(self) -> LegendOption:
        return LegendOption(
            show=self.show,
            data=self.data,
            align=self.align if self.align in ("left", "right") else "",
            vertical=self.orient == "vertical",
            padding=self.padding,
            offset=OffsetStr(self.left, self.top),
            font_style=self.text_style.to_font_style(),
        )


class EChartsAxisLabel(EChartsModel):
    show: Optional[bool] = None
    formatter: str = ""
    rotate: float = 0.0


class EChartsLineStyle(EChartsModel):
    color: ColorField = Color()


class EChartsAxisLine(EChartsModel):
    show: Optional[bool] = None
    line_style: EChartsLineStyle = Field(default_factory=EChartsLineStyle)


class EChartsAxis(EChartsModel):
    """One ``xAxis`` or ``yAxis`` entry."""

    type: str = ""
    data: List[str] = Field(default_factory=list)
    boundary_gap: Optional[bool] = None
    split_number: int = 0
    position: str = ""
    min: Optional[float] = None
    max: Optional[float] = None
    show: Optional[bool] = None
    axis_label: EChartsAxisLabel = Field(default_factory=EChartsAxisLabel)
    axis_line: EChartsAxisLine = Field(default_factory=EChartsAxisLine)

    @field_validator("data", mode="before")
    @classmethod
    def _labels(cls, value: Any) -> Any:
        return [_position(v) for v in _as_list(value)]

    @property
    def formatter(self) -> Optional[Callable[[float], str]]:
        if "{value}" in self.axis_label.formatter:
            return value_template_formatter(self.axis_label.formatter)
        return None

    @property
    def color(self) -> Color:
        return self.axis_line.line_style.color

    def to_x_axis(self) -> XAxisOption:
        return XAxisOption(
            show=self.show,
            data=self.data,
            boundary_gap=self.boundary_gap,
            label_count=self.split_number,
            label_rotation=self.axis_label.rotate,
            axis_color=self.color,
            min=self.min,
            max=self.max,
            value_formatter=self.formatter,
            position="top" if self.position == "top" else "bottom",
        )

    def to_y_axis(self) -> YAxisOption:
        return YAxisOption(
            show=self.show,
            min=self.min,
            max=self.max,
            data=self.data if self.type != AXIS_TYPE_VALUE else [],
            position=self.position if self.position in ("left", "right") else "",
            label_count=self.split_number,
            axis_color=self.color,
            value_formatter=self.formatter,
        )


class EChartsItemStyle(EChartsModel):
    color: ColorField = Color()


class EChartsSeriesData(EChartsModel):
    """A data item: a number, a value array or a ``{value, name}`` object."""

    value: List[Optional[float]] = Field(default_factory=list)
    name: str = ""
    item_style: EChartsItemStyle = Field(default_factory=EChartsItemStyle)

    @classmethod
    def parse(cls, item: Any) -> "EChartsSeriesData":
        if item is None or isinstance(item, (int, float, str)):
            return cls(value=[None if item in (None, "-") else float(item)])
        if isinstance(item, list):
            return cls(value=[None if v in (None, "-") else float(v) for v in item])
        return cls.model_validate(item)

    @field_validator("value", mode="before")
    @classmethod
    def _values(cls, value: Any) -> Any:
        if value is None or isinstance(value, (int, float)):
            return [value]
        return value

    @property
    def first(self) -> Optional[float]:
        return self.value[0] if self.value else None


class EChartsMarkData(EChartsModel):
    type: str = ""


class EChartsMark(EChartsModel):
    data: List[EChartsMarkData] = Field(default_factory=list)

    def marks(self) -> List[SeriesMark]:
        return [SeriesMark(type=m.type) for m in self.data if m.type in ("max", "min", "average")]


class EChartsLabel(EChartsModel):
    show: Optional[bool] = None
    formatter: str = ""
    color: ColorField = Color()


class EChartsSeries(EChartsModel):
    type: str = CHART_TYPE_LINE
    name: str = ""
    data: List[EChartsSeriesData] = Field(default_factory=list)
    y_axis_index: int = 0
    radius: Union[str, List[str]] = ""
    smooth: bool = False
    stack: str = ""
    symbol_size: float = 0.0
    area_style: Optional[Dict[str, Any]] = None
    label: EChartsLabel = Field(default_factory=EChartsLabel)
    mark_point: EChartsMark = Field(default_factory=EChartsMark)
    mark_line: EChartsMark = Field(default_factory=EChartsMark)

    @field_validator("data", mode="before")
    @classmethod
    def _data(cls, value: Any) -> Any:
        return [EChartsSeriesData.parse(item) for item in _as_list(value)]

    @field_validator("radius", mode="before")
    @classmethod
    def _radius(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_position(v) for v in value]
        return _position(value)

    def series_label(self) -> SeriesLabel:
        template = self.label.formatter.replace("{a}", self.name)
        return SeriesLabel(
            show=self.label.show,
            format_template=template,
            font_style=FontStyle(color=self.label.color),
        )

    def values(self) -> List[Optional[float]]:
        return [item.first for item in self.data]


class EChartsRadarIndicator(EChartsModel):
    name: str = ""
    max: float = 0.0
    min: float = 0.0


class EChartsRadar(EChartsModel):
    indicator: List[EChartsRadarIndicator] = Field(default_factory=list)


class EChartsOption(EChartsModel):
    """The top-level option document."""

    type: str = ""
    theme: str = ""
    font_family: str = ""
    padding: Optional[BoxField] = None
    box: Optional[BoxField] = None
    width: int = 0
    height: int = 0
    title: EChartsTitle = Field(default_factory=EChartsTitle)
    legend: EChartsLegend = Field(default_factory=EChartsLegend)
    x_axis: List[EChartsAxis] = Field(default_factory=list)
    y_axis: List[EChartsAxis] = Field(default_factory=list)
    radar: EChartsRadar = Field(default_factory=EChartsRadar)
    series: List[EChartsSeries] = Field(default_factory=list)
    children: List["EChartsOption"] = Field(default_factory=list)

    @field_validator("x_axis", "y_axis", mode="before")
    @classmethod
    def _axes(cls, value: Any) -> Any:
        return _as_list(value)

    def to_chart_option(self) -> ChartOption:
        x_axis = self.x_axis[0] if self.x_axis else EChartsAxis()
        horizontal = x_axis.type == AXIS_TYPE_VALUE
        series = []
        for item in self.series:
            series.extend(self._convert_series(item, horizontal))
        fields: Dict[str, Any] = {
            "title": self.title.to_option(),
            "legend": self.legend.to_option(),
            "x_axis": x_axis.to_x_axis(),
            "y_axis": [axis.to_y_axis() for axis in self.y_axis],
            "series": series,
            "radar_indicators": [
                RadarIndicator(name=ind.name, max=ind.max, min=ind.min) for ind in self.radar.indicator
            ],
            "children": [child.to_chart_option() for child in self.children],
        }
        if any(item.stack for item in self.series):
            fields["stack_series"] = True
        if self.type:
            fields["output_format"] = self.type
        if self.theme:
            fields["theme"] = self.theme
        if self.font_family:
            fields["font"] = self.font_family
        if self.padding is not None:
            fields["padding"] = self.padding
        if self.box is not None:
            fields["box"] = self.box
        if self.width:
            fields["width"] = self.width
        if self.height:
            fields["height"] = self.height
        return ChartOption.model_validate(fields)

    @staticmethod
    def _convert_series(item: EChartsSeries, horizontal: bool) -> List[Any]:
        label = item.series_label()
        if item.type == CHART_TYPE_PIE:
            radius = item.radius
            inner = ""
            if isinstance(radius, list):
                if len(radius) >= 2:
                    inner, radius = radius[0], radius[1]
                else:
                    radius = radius[0] if radius else ""
            return [
                PieSeries(name=d.name, value=d.first, label=label, radius=radius, inner_radius=inner)
                for d in item.data
            ]
        if item.type == CHART_TYPE_FUNNEL:
            return [FunnelSeries(name=d.name, value=d.first, label=label) for d in item.data]
        if item.type == CHART_TYPE_RADAR:
            # each data item is one polygon
            return [RadarSeries(name=d.name or item.name, values=list(d.value), label=label) for d in item.data]
        if item.type == CHART_TYPE_CANDLESTICK:
            samples = []
            for d in item.data:
                # ECharts orders candlestick values open, close, low, high
                o, c, low, high = (list(d.value) + [None] * 4)[:4]
                samples.append(OHLCData(open=o, high=high, low=low, close=c))
            return [CandlestickSeries(name=item.name, data=samples, y_axis_index=item.y_axis_index, label=label)]
        mark_point = SeriesMarkPoint(data=item.mark_point.marks())
        mark_line = SeriesMarkLine(data=item.mark_line.marks())
        if item.type == CHART_TYPE_SCATTER:
            # on a category axis every item holds the values of its index
            return [ScatterSeries(name=item.name, values=[list(d.value) for d in item.data],
                                  y_axis_index=item.y_axis_index, label=label, mark_line=mark_line,
                                  symbol_size=item.symbol_size)]
        if item.type == CHART_TYPE_BAR:
            if horizontal:
                return [HorizontalBarSeries(name=item.name, values=item.values(), label=label, mark_line=mark_line)]
            return [BarSeries(name=item.name, values=item.values(), y_axis_index=item.y_axis_index, label=label,
                              mark_point=mark_point, mark_line=mark_line)]
        if item.type != CHART_TYPE_LINE:
            logger.warning("unsupported series type %r drawn as a line", item.type)
        return [LineSeries(
            name=item.name,
            values=item.values(),
            y_axis_index=item.y_axis_index,
            label=label,
            mark_point=mark_point,
            mark_line=mark_line,
            smooth_tension=SMOOTH_TENSION if item.smooth else 0.0,
            fill_area=True if item.area_style is not None else None,
        )]


EChartsOption.model_rebuild()


def parse_echarts_options(text: Union[str, bytes, Dict[str, Any]]) -> ChartOption:
    """Parse an ECharts option document into a :class:`ChartOption`.

    Raises:
        InvalidOptionsError: on malformed JSON or values of the wrong shape.
    """
    try:
        data = json.loads(text) if isinstance(text, (str, bytes)) else text
        return EChartsOption.model_validate(data).to_chart_option()
    except json.JSONDecodeError as exc:
        raise InvalidOptionsError(f"invalid echarts json: {exc}") from exc
    except ValidationError as exc:
        raise InvalidOptionsError(f"invalid echarts options: {exc}") from exc


def render_echarts_options(text: Union[str, bytes, Dict[str, Any]]) -> Painter:
    return render(parse_echarts_options(text))


def render_echarts_to_bytes(text: Union[str, bytes, Dict[str, Any]]) -> bytes:
    return render_echarts_options(text).bytes()


__all__ = [
    "EChartsOption",
    "EChartsSeries",
    "EChartsSeriesData",
    "EChartsAxis",
    "parse_echarts_options",
    "render_echarts_options",
    "render_echarts_to_bytes",
    "value_template_formatter",
]
