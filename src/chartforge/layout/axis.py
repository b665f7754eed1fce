"""Axis painting.

An axis is rendered into a strip carved from the side of its parent
painter.  :class:`AxisPainter` measures what the strip needs (labels,
tick marks and an optional title), draws the spine, ticks, labels and
split lines, and returns a box whose ``right``/``bottom`` hold the
consumed width/height so the render pipeline can shrink the remaining
chart area.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from ..config import (
    ALIGN_CENTER,
    ALIGN_LEFT,
    ALIGN_RIGHT,
    AXIS_LABEL_MARGIN,
    AXIS_MARGIN,
    AXIS_TICK_LENGTH,
    BOUNDARY_GAP_DEFAULT_THRESHOLD,
    POSITION_BOTTOM,
    POSITION_LEFT,
    POSITION_RIGHT,
    POSITION_TOP,
)
from ..drawing.color import Color, TRANSPARENT
from ..drawing.fonts import FontStyle
from ..drawing.geometry import Box, OffsetInt, Point, auto_divide, ceil_to_int, degrees_to_radians
from .painter import Painter, position_is_vertical
from .range import AxisRange

logger = logging.getLogger(__name__)


@dataclass
class AxisOption:
    """Resolved settings for one axis.

    ``stroke_width`` of 0 means the default of 1 px; a negative width
    hides the spine and the tick marks.  ``boundary_gap`` of ``None``
    lets the painter choose from the data density.
    """

    axis_range: AxisRange
    position: str = POSITION_BOTTOM
    show: bool = True
    title: str = ""
    title_font_style: FontStyle = field(default_factory=FontStyle)
    boundary_gap: Optional[bool] = None
    stroke_width: float = 0.0
    minimum_axis_height: int = 0
    tick_length: int = 0
    label_margin: int = 0
    split_line_color: Color = TRANSPARENT
    axis_color: Color = TRANSPARENT
    split_line_show: bool = False
    label_offset: OffsetInt = field(default_factory=OffsetInt)
    label_skip_count: int = 0
    pre_positioned: bool = False


def default_boundary_gap(width: int, data_count: int) -> bool:
    """Center labels between ticks unless the data is dense.

    With more than one sample and at most 40 px per sample, labels align
    to the ticks instead.
    """
    if data_count > 1 and width // data_count <= BOUNDARY_GAP_DEFAULT_THRESHOLD:
        return False
    return True


def rotation_height_adjustment(flat_width: int, flat_height: int, radians: float) -> int:
    """Vertical shift that keeps rotated labels from overlapping the ticks.

    A label rotated about its baseline origin swings part of its body
    above the origin; the returned amount moves it back down so only the
    part below the baseline extends into the label strip.
    """
    if not radians:
        return 0
    sin = math.sin(radians)
    cos = math.cos(radians)
    # height of the rotated glyph box above the baseline origin
    above = max(0.0, -flat_width * sin, flat_height * cos, flat_height * cos - flat_width * sin)
    return int(round(flat_height - above))


class AxisPainter:
    def __init__(self, painter: Painter, opt: AxisOption) -> None:
        self.painter = painter
        self.opt = opt

    def render(self) -> Box:
        """Draw the axis and return the space it consumed."""
        opt = self.opt
        if not opt.show:
            return Box()
        top = self.painter
        a_range = opt.axis_range
        is_vertical = position_is_vertical(opt.position)
        stroke_width = opt.stroke_width
        if stroke_width == 0:
            stroke_width = 1.0
        elif stroke_width < 0:
            stroke_width = 0.0

        tick_length = opt.tick_length or AXIS_TICK_LENGTH
        label_margin = opt.label_margin or AXIS_LABEL_MARGIN
        if is_vertical:
            need_width = label_margin + a_range.text_max_width + AXIS_MARGIN
            need_height = top.height
        else:
            need_width = top.width
            need_height = label_margin + a_range.text_max_height + AXIS_MARGIN

        title_box = Box()
        title_shift = 0
        if opt.title:
            # measured flat; the height is the shift for every orientation
            title_box = top.measure_text(opt.title, 0.0, opt.title_font_style)
            title_shift = title_box.height + AXIS_MARGIN
            if is_vertical:
                need_width += title_shift
            else:
                need_height += title_shift
        need_height = max(need_height, opt.minimum_axis_height)

        padding = Box(is_set=True)
        if not opt.pre_positioned:
            if opt.position == POSITION_LEFT:
                padding = padding.with_(left=AXIS_MARGIN, right=top.width - need_width)
            elif opt.position == POSITION_RIGHT:
                padding = padding.with_(left=top.width - need_width)
            elif opt.position == POSITION_TOP:
                padding = padding.with_(top=AXIS_MARGIN, bottom=top.height - need_height - AXIS_MARGIN)
            else:
                padding = padding.with_(top=top.height - need_height - AXIS_MARGIN)
        child = top.child(padding=padding)

        if opt.title:
            self._draw_title(child, title_box, title_shift)

        if stroke_width > 0:
            if opt.position == POSITION_LEFT:
                spine = [Point(child.width, 0), Point(child.width, child.height)]
            elif opt.position == POSITION_RIGHT:
                spine = [Point(0, 0), Point(0, child.height)]
            elif opt.position == POSITION_TOP:
                spine = [Point(0, child.height), Point(child.width, child.height)]
            else:
                spine = [Point(0, 0), Point(child.width, 0)]
            child.line_stroke(spine, opt.axis_color, stroke_width)

        labels = list(a_range.labels)
        if is_vertical:
            # multi_text draws from the top down
            labels.reverse()

        if opt.boundary_gap is not None:
            center_labels = opt.boundary_gap
        else:
            center_labels = default_boundary_gap(top.width, a_range.divide_count)

        tick_spaces = a_range.tick_count
        tick_count = a_range.tick_count
        if center_labels:
            # one extra tick to center each label between two ticks
            tick_count += 1
        else:
            tick_spaces -= 1

        if stroke_width > 0:
            tick_padding = Box(is_set=True)
            if opt.position == POSITION_LEFT:
                tick_padding = tick_padding.with_(left=child.width - tick_length)
            elif opt.position == POSITION_RIGHT:
                tick_padding = tick_padding.with_(right=tick_length)
            elif opt.position == POSITION_TOP:
                tick_padding = tick_padding.with_(top=child.height - tick_length)
            else:
                tick_padding = tick_padding.with_(bottom=tick_length)
            tick_painter = child.child(padding=tick_padding)
            tick_painter.ticks(
                tick_length,
                tick_count - 1,
                tick_spaces,
                is_vertical,
                opt.axis_color,
                stroke_width,
                a_range.data_start_index,
            )

        label_padding = Box(is_set=True)
        if opt.position == POSITION_LEFT:
            label_padding = label_padding.with_(right=tick_length + label_margin, top=-2, bottom=4)
        elif opt.position == POSITION_RIGHT:
            label_padding = label_padding.with_(left=tick_length + label_margin, top=-2, bottom=4)
        elif opt.position == POSITION_TOP:
            label_padding = label_padding.with_(bottom=tick_length + label_margin)
        else:
            shift = 0
            if a_range.label_rotation:
                flat_width, flat_height = top.measure_text_max_width_height(
                    a_range.labels, 0.0, a_range.font_style
                )
                shift = rotation_height_adjustment(flat_width, flat_height, a_range.label_rotation)
            label_padding = label_padding.with_(top=tick_length + label_margin - shift)
        label_painter = child.child(padding=label_padding)
        align = ALIGN_CENTER
        if is_vertical:
            align = ALIGN_RIGHT if opt.position == POSITION_LEFT else ALIGN_LEFT
        label_painter.multi_text(
            labels,
            is_vertical,
            a_range.label_count,
            center_labels=center_labels,
            align=align,
            radians=a_range.label_rotation,
            style=a_range.font_style,
            offset=opt.label_offset,
            first=a_range.data_start_index,
            label_skip_count=opt.label_skip_count,
        )

        if opt.split_line_show:
            self._draw_split_lines(top, child, is_vertical, tick_spaces)

        return Box(
            right=need_width + ceil_to_int(stroke_width),
            bottom=need_height + ceil_to_int(stroke_width),
            is_set=True,
        )

    def _draw_title(self, child: Painter, title_box: Box, title_shift: int) -> None:
        opt = self.opt
        if opt.position == POSITION_LEFT:
            cy = child.height // 2
            child.text(opt.title, title_shift // 2, cy + title_box.width // 2, degrees_to_radians(270),
                       opt.title_font_style)
        elif opt.position == POSITION_RIGHT:
            cy = child.height // 2
            x = child.width - title_shift // 2 - AXIS_MARGIN
            child.text(opt.title, x, cy - title_box.width // 2, degrees_to_radians(90), opt.title_font_style)
        elif opt.position == POSITION_TOP:
            x = (child.width - title_box.width) // 2
            child.text(opt.title, x, title_shift // 2, 0.0, opt.title_font_style)
        else:
            x = (child.width - title_box.width) // 2
            child.text(opt.title, x, child.height - AXIS_MARGIN, 0.0, opt.title_font_style)

    def _draw_split_lines(self, top: Painter, child: Painter, is_vertical: bool, tick_spaces: int) -> None:
        color = self.opt.split_line_color
        if is_vertical:
            if self.opt.position == POSITION_LEFT:
                x0, x1 = child.width, top.width
            else:
                x0, x1 = 0, top.width - child.width
            # the last one would redraw the x axis line
            for y in auto_divide(child.height, tick_spaces)[:-1]:
                top.line_stroke([Point(x0, y), Point(x1, y)], color, 1)
        else:
            if self.opt.position == POSITION_TOP:
                y0, y1 = child.height, top.height
            else:
                y0, y1 = 0, top.height - child.height
            for x in auto_divide(child.width, tick_spaces)[1:]:
                top.line_stroke([Point(x, y0), Point(x, y1)], color, 1)


__all__ = ["AxisOption", "AxisPainter", "default_boundary_gap", "rotation_height_adjustment"]
