"""Series renderers and the :func:`render` entry point."""

from .candlestick import CandlestickChart
from .renderer import (
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
    validate_options,
)
from .table import TableCell

__all__ = [
    "CandlestickChart",
    "TableCell",
    "render",
    "validate_options",
    "line_render",
    "bar_render",
    "horizontal_bar_render",
    "pie_render",
    "radar_render",
    "funnel_render",
    "candlestick_render",
    "scatter_render",
    "table_render",
]
