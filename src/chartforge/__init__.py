"""chartforge: static chart rendering to SVG, PNG and JPEG.

Charts are described with the pydantic option models of
:mod:`chartforge.options` (or an ECharts style JSON document, see
:mod:`chartforge.echarts`) and drawn with :func:`render`, which returns a
painter whose :meth:`~chartforge.layout.painter.Painter.bytes` and
:meth:`~chartforge.layout.painter.Painter.save` produce the encoded
image.
"""

from .charts import (
    bar_render,
    candlestick_render,
    funnel_render,
    horizontal_bar_render,
    line_render,
    pie_render,
    radar_render,
    render,
    scatter_render,
    table_render,
)
from .echarts import parse_echarts_options, render_echarts_options, render_echarts_to_bytes
from .errors import BackendError, ChartError, FormatError, InvalidOptionsError
from .features import CandlestickPatternConfig, OHLCData, TrendLine, ohlc_from_dataframe
from .layout import Painter
from .options import (
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
    SeriesMarkLine,
    SeriesMarkPoint,
    TableSeries,
    TitleOption,
    XAxisOption,
    YAxisOption,
    aggregate_candlestick,
)
from .theme import Theme, get_theme, make_theme

__version__ = "0.1.0"

__all__ = [
    "render",
    "line_render",
    "bar_render",
    "horizontal_bar_render",
    "pie_render",
    "radar_render",
    "funnel_render",
    "candlestick_render",
    "scatter_render",
    "table_render",
    "parse_echarts_options",
    "render_echarts_options",
    "render_echarts_to_bytes",
    "ChartError",
    "InvalidOptionsError",
    "FormatError",
    "BackendError",
    "CandlestickPatternConfig",
    "OHLCData",
    "TrendLine",
    "ohlc_from_dataframe",
    "Painter",
    "ChartOption",
    "TitleOption",
    "LegendOption",
    "XAxisOption",
    "YAxisOption",
    "SeriesLabel",
    "SeriesMarkPoint",
    "SeriesMarkLine",
    "LineSeries",
    "BarSeries",
    "HorizontalBarSeries",
    "PieSeries",
    "RadarSeries",
    "RadarIndicator",
    "ScatterSeries",
    "FunnelSeries",
    "CandlestickSeries",
    "TableSeries",
    "aggregate_candlestick",
    "Theme",
    "get_theme",
    "make_theme",
]
