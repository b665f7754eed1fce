"""The default render pipeline shared by the cartesian chart types.

:func:`default_render` paints the background, title and legend, solves the
axis ranges from the series values, paints the axes and hands back a
:class:`RenderResult` whose ``series_painter`` covers the plot area that
remains.  Space is reserved top-down: title and legend first, then the
y-axis gutters on the sides, then the x-axis strip at the bottom.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..config import (
    AXIS_LABEL_MARGIN,
    AXIS_MARGIN,
    POSITION_LEFT,
    POSITION_RIGHT,
    POSITION_TOP,
)
from ..drawing.color import Color
from ..drawing.fonts import FontStyle
from ..drawing.geometry import Box, degrees_to_radians
from ..options import GenericSeries, LegendOption, TitleOption, XAxisOption, YAxisOption
from ..theme import Theme
from .axis import AxisOption, AxisPainter, default_boundary_gap
from .legend import LegendPainter, legend_is_empty
from .painter import Painter
from .range import AxisRange, calculate_category_range, calculate_value_range
from .title import TitlePainter

logger = logging.getLogger(__name__)

# Space left between the title/legend block and the plot.
TITLE_SPACING = 20


@dataclass
class RenderOption:
    """Inputs of :func:`default_render`.

    ``axis_reversed`` puts the categories on the y axis and the values on
    the x axis (horizontal bars).  ``hide_axes`` skips axis solving for
    charts that have none.  ``x_boundary_gap=False`` lets a chart type
    turn off the boundary gap unless the x axis sets it.
    """

    theme: Theme
    series: List[GenericSeries]
    x_axis: XAxisOption = field(default_factory=XAxisOption)
    y_axis: List[YAxisOption] = field(default_factory=list)
    title: TitleOption = field(default_factory=TitleOption)
    legend: LegendOption = field(default_factory=LegendOption)
    padding: Box = field(default_factory=Box)
    background_is_filled: bool = False
    axis_reversed: bool = False
    hide_axes: bool = False
    x_boundary_gap: Optional[bool] = None
    legend_color_for: Optional[Callable[[int], Color]] = None
    legend_down_color_for: Optional[Callable[[int], Color]] = None


@dataclass
class RenderResult:
    """The plot area and the solved ranges.

    ``y_ranges`` is keyed by y-axis index.  For horizontal bars
    ``x_range`` holds the values and ``y_ranges[0]`` the categories.
    ``boundary_gap`` tells whether samples sit between ticks.
    """

    painter: Painter
    series_painter: Painter
    x_range: AxisRange = field(default_factory=AxisRange)
    y_ranges: Dict[int, AxisRange] = field(default_factory=dict)
    boundary_gap: bool = True


def _axis_font(style: FontStyle, axis_color: Color) -> FontStyle:
    if style.color.is_zero() and not axis_color.is_zero():
        return FontStyle(style.font, style.size, axis_color)
    return style


def _y_axis_option(opt: RenderOption, index: int) -> YAxisOption:
    if index < len(opt.y_axis):
        return opt.y_axis[index]
    return YAxisOption()


def _x_axis_height(p: Painter, x_axis: XAxisOption, labels: List[str]) -> int:
    """Height of the x-axis strip, matching what :class:`AxisPainter` uses."""
    if x_axis.show is False:
        return 0
    radians = degrees_to_radians(x_axis.label_rotation)
    style = _axis_font(x_axis.font_style, x_axis.axis_color)
    _, text_height = p.measure_text_max_width_height(labels or ["0"], radians, style)
    height = AXIS_LABEL_MARGIN + text_height + AXIS_MARGIN
    if x_axis.title:
        height += p.measure_text(x_axis.title, 0.0, x_axis.title_font_style).height + AXIS_MARGIN
    # the axis painter keeps one margin outside the strip
    return max(height, x_axis.minimum_axis_height) + AXIS_MARGIN


def _render_header(p: Painter, opt: RenderOption) -> Painter:
    legend_height = 0
    if not legend_is_empty(opt.legend) and opt.legend.show is not False:
        legend_box = LegendPainter(p, opt.legend, opt.legend_color_for, opt.legend_down_color_for).render()
        if not opt.legend.vertical and opt.legend.overlay_chart is not True:
            legend_height = legend_box.height
    title_box = TitlePainter(p, opt.title).render()
    top = max(legend_height, title_box.height)
    if top <= 0:
        return p
    return p.child(padding=Box(top=top + TITLE_SPACING, is_set=True))


def default_render(p: Painter, opt: RenderOption) -> RenderResult:
    """Lay out the chart frame and return the painter for the series."""
    theme = opt.theme
    if not opt.background_is_filled:
        p.set_background(p.width, p.height, theme.background_color)
    if not opt.padding.is_zero():
        p = p.child(padding=opt.padding)
    p = _render_header(p, opt)
    if opt.hide_axes:
        return RenderResult(painter=p, series_painter=p)

    result = RenderResult(painter=p, series_painter=p)
    x_axis = opt.x_axis
    axis_indexes = sorted({s.y_axis_index for s in opt.series}, reverse=True)
    if not axis_indexes:
        axis_indexes = [0]
    data_count = _max_data_count(opt.series)

    if opt.axis_reversed:
        # value labels, solved once across the full width to size the strip
        estimate = calculate_value_range(
            [v for s in opt.series for v in s.axis_values()],
            min_value=x_axis.min,
            max_value=x_axis.max,
            value_formatter=x_axis.value_formatter or p.value_formatter,
        )
        x_labels: List[str] = estimate.labels
    else:
        x_labels = _pad_labels(list(x_axis.data), data_count)
    x_height = _x_axis_height(p, x_axis, x_labels)
    range_height = p.height - x_height
    width_left = 0
    width_right = 0

    category_labels: List[str] = []
    if opt.axis_reversed:
        category_labels = _pad_labels(list(_y_axis_option(opt, 0).data or x_axis.data), data_count)

    for index in axis_indexes:
        y_opt = _y_axis_option(opt, index)
        axis_color = y_opt.axis_color if not y_opt.axis_color.is_zero() else theme.axis_stroke_color
        font_style = _axis_font(y_opt.font_style, y_opt.axis_color)
        if opt.axis_reversed:
            y_range = calculate_category_range(
                category_labels,
                series_names=[],
                painter=p,
                axis_size=range_height,
                is_vertical=True,
                label_count=y_opt.label_count,
                label_count_adjustment=y_opt.label_count_adjustment,
                font_style=font_style,
            )
            boundary_gap = True
            stroke_width = 0.0
        else:
            values: List[Optional[float]] = []
            for series in opt.series:
                if series.y_axis_index == index:
                    values.extend(series.axis_values())
            y_range = calculate_value_range(
                values,
                min_value=y_opt.min,
                max_value=y_opt.max,
                padding_scale=y_opt.range_value_padding_scale,
                label_count=y_opt.label_count,
                label_unit=y_opt.unit,
                label_count_adjustment=y_opt.label_count_adjustment,
                labels=y_opt.data,
                value_formatter=y_opt.value_formatter or p.value_formatter,
                painter=p,
                axis_size=range_height,
                is_vertical=True,
                font_style=font_style,
            )
            boundary_gap = False
            stroke_width = -1.0
        result.y_ranges[index] = y_range

        position = y_opt.position or (POSITION_LEFT if index == 0 else POSITION_RIGHT)
        child = p.child(padding=_strip_padding(x_axis, x_height, width_left, width_right))
        axis_box = AxisPainter(
            child,
            AxisOption(
                axis_range=y_range,
                position=position,
                show=y_opt.show is not False,
                title=y_opt.title,
                title_font_style=y_opt.title_font_style,
                boundary_gap=boundary_gap,
                stroke_width=stroke_width,
                axis_color=axis_color,
                split_line_color=theme.axis_split_line_color,
                split_line_show=(y_opt.split_line_show is not False) and not opt.axis_reversed,
                label_skip_count=y_opt.label_skip_count,
            ),
        ).render()
        if position == POSITION_LEFT:
            width_left += axis_box.width
        else:
            width_right += axis_box.width

    plot_width = p.width - width_left - width_right
    axis_color = x_axis.axis_color if not x_axis.axis_color.is_zero() else theme.axis_stroke_color
    x_font = _axis_font(x_axis.font_style, x_axis.axis_color)
    radians = degrees_to_radians(x_axis.label_rotation)
    if opt.axis_reversed:
        values = []
        for series in opt.series:
            values.extend(series.axis_values())
        x_range = calculate_value_range(
            values,
            min_value=x_axis.min,
            max_value=x_axis.max,
            label_count=x_axis.label_count,
            label_unit=x_axis.unit,
            label_count_adjustment=x_axis.label_count_adjustment,
            labels=None,
            value_formatter=x_axis.value_formatter or p.value_formatter,
            painter=p,
            axis_size=plot_width,
            is_vertical=False,
            label_rotation=radians,
            font_style=x_font,
        )
        x_boundary_gap = False
    else:
        x_range = calculate_category_range(
            x_labels,
            series_names=[],
            painter=p,
            axis_size=plot_width,
            is_vertical=False,
            label_count=x_axis.label_count,
            label_count_adjustment=x_axis.label_count_adjustment,
            label_unit=x_axis.unit,
            label_rotation=radians,
            font_style=x_font,
            data_start_index=x_axis.data_start_index,
        )
        x_boundary_gap = x_axis.boundary_gap
        if x_boundary_gap is None:
            x_boundary_gap = opt.x_boundary_gap is not False and default_boundary_gap(
                plot_width, x_range.divide_count
            )
    result.x_range = x_range
    result.boundary_gap = x_boundary_gap

    x_painter = p.child(padding=Box(left=width_left, right=width_right, is_set=True))
    AxisPainter(
        x_painter,
        AxisOption(
            axis_range=x_range,
            position=x_axis.position,
            show=x_axis.show is not False,
            title=x_axis.title,
            title_font_style=x_axis.title_font_style,
            boundary_gap=x_boundary_gap,
            axis_color=axis_color,
            split_line_color=theme.axis_split_line_color,
            split_line_show=opt.axis_reversed if x_axis.split_line_show is None else x_axis.split_line_show,
            label_offset=x_axis.label_offset,
            label_skip_count=x_axis.label_skip_count,
            minimum_axis_height=x_axis.minimum_axis_height,
        ),
    ).render()

    result.series_painter = p.child(padding=_strip_padding(x_axis, x_height, width_left, width_right))
    x_range.size = result.series_painter.width
    for y_range in result.y_ranges.values():
        y_range.size = result.series_painter.height
    return result


def _strip_padding(x_axis: XAxisOption, x_height: int, left: int, right: int) -> Box:
    if x_axis.position == POSITION_TOP:
        return Box(left=left, top=x_height, right=right, is_set=True)
    return Box(left=left, right=right, bottom=x_height, is_set=True)


def _max_data_count(series: List[GenericSeries]) -> int:
    return max((len(s.values) for s in series), default=0)


def _pad_labels(labels: List[str], count: int) -> List[str]:
    return labels + [""] * (count - len(labels))


__all__ = ["RenderOption", "RenderResult", "default_render", "TITLE_SPACING"]
