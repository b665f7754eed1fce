"""Legend painting.

Legend items are an icon followed by the series name.  Horizontal legends
wrap onto a new line when the next item would overrun the painter; with
``align="center"`` each wrapped line is re-centered on what remains.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from ..config import ALIGN_CENTER, ALIGN_RIGHT, POSITION_BOTTOM, POSITION_CENTER, POSITION_LEFT, POSITION_RIGHT, POSITION_TOP
from ..drawing.color import Color
from ..drawing.geometry import Box, parse_flexible_value
from ..errors import InvalidOptionsError
from ..options import ICON_CANDLESTICK, ICON_RECT, LegendOption
from .painter import Painter


ITEM_SPACING = 20
TEXT_OFFSET = 2
ICON_WIDTH = 30
ICON_HEIGHT = 20


def legend_is_empty(opt: LegendOption) -> bool:
    return not any(opt.data)


class LegendPainter:
    """Draws a :class:`~chartforge.options.LegendOption`.

    *color_for* maps an item index to its color; the theme series color
    is used by default.  Candlestick charts pass *down_color_for* so the
    candle icon shows both directions.
    """

    def __init__(
        self,
        painter: Painter,
        opt: LegendOption,
        color_for: Optional[Callable[[int], Color]] = None,
        down_color_for: Optional[Callable[[int], Color]] = None,
    ) -> None:
        self.painter = painter
        self.opt = opt
        self.color_for = color_for or painter.theme.get_series_color
        self.down_color_for = down_color_for

    def render(self) -> Box:
        """Draw the legend and return the box it occupies."""
        opt = self.opt
        if legend_is_empty(opt) or opt.show is False:
            return Box()

        font_style = self.painter.resolve_font(opt.font_style)
        vertical = opt.vertical
        left_value = opt.offset.left
        if not left_value:
            left_value = (opt.align or POSITION_LEFT) if vertical else POSITION_CENTER
        padding = opt.padding
        if padding.is_zero():
            padding = Box(top=5, is_set=True)
        p = self.painter.child(padding=padding)

        measures: List[Box] = [p.measure_text(text, 0.0, font_style) for text in opt.data]
        max_text_width = max(b.width for b in measures)
        item_max_height = max(b.height for b in measures)
        count = len(opt.data)
        if vertical:
            width = max_text_width + TEXT_OFFSET + ICON_WIDTH
            height = ITEM_SPACING * count
        else:
            height = ICON_HEIGHT
            width = sum(b.width for b in measures) + (count - 1) * (ITEM_SPACING + TEXT_OFFSET) + count * ICON_WIDTH

        if left_value == POSITION_LEFT:
            left = 0
        elif left_value == POSITION_RIGHT:
            left = p.width - width
        elif left_value == POSITION_CENTER:
            left = p.width // 2 - width // 2
        else:
            left = self._parse(left_value, p.width)
        left = max(left, 0)

        top_value = opt.offset.top
        if top_value in ("", POSITION_TOP):
            top = 0
        elif top_value == POSITION_BOTTOM:
            top = p.height - height
        else:
            top = self._parse(top_value, p.height)

        start_x = left
        y = top + 10
        start_y = y
        x0 = start_x
        y0 = y
        last_index = count - 1
        for index, text in enumerate(opt.data):
            if vertical:
                if opt.align == ALIGN_RIGHT:
                    x0 += max_text_width - measures[index].width
            else:
                item_end = x0 + measures[index].width + ICON_WIDTH
                if index != last_index:
                    item_end += TEXT_OFFSET + ITEM_SPACING
                if item_end > p.width:
                    line_start = start_x
                    if opt.align == ALIGN_CENTER:
                        remaining = sum(b.width for b in measures[index:])
                        remaining_count = count - index
                        remaining += remaining_count * ICON_WIDTH + (remaining_count - 1) * (ITEM_SPACING + TEXT_OFFSET)
                        line_start = max(start_x + p.width // 2 - remaining // 2, 0)
                    x0 = line_start
                    y += item_max_height
                    y0 = y

            if opt.align != ALIGN_RIGHT:
                x0 = self._draw_icon(p, index, y0, x0) + TEXT_OFFSET
            p.text(text, x0, y0, 0.0, font_style)
            x0 += measures[index].width
            if opt.align == ALIGN_RIGHT:
                x0 = self._draw_icon(p, index, y0, x0 + TEXT_OFFSET)

            if vertical:
                y0 += ITEM_SPACING
                x0 = start_x
            else:
                x0 += ITEM_SPACING
                y0 = y

        return Box(
            left=start_x,
            top=start_y,
            right=width,
            bottom=y0 + item_max_height + padding.bottom + padding.top,
            is_set=True,
        )

    def _draw_icon(self, p: Painter, index: int, top: int, left: int) -> int:
        color = self.color_for(index)
        icon = self.opt.icon
        if icon == ICON_RECT:
            p.filled_rect(Box(left, top - ICON_HEIGHT + 8, left + ICON_WIDTH, top + 1, True), color)
        elif icon == ICON_CANDLESTICK:
            down = self.down_color_for(index) if self.down_color_for else color
            center = left + ICON_WIDTH // 2
            body_top = top - ICON_HEIGHT + 10
            p.line(center - 5, top - ICON_HEIGHT + 6, center - 5, top + 1, color)
            p.filled_rect(Box(center - 8, body_top, center - 2, top - 3, True), color)
            p.line(center + 5, top - ICON_HEIGHT + 6, center + 5, top + 1, down)
            p.filled_rect(Box(center + 2, body_top + 2, center + 8, top - 1, True), down)
        else:
            p.legend_line_dot(Box(left, top + 1, left + ICON_WIDTH, top + ICON_HEIGHT + 1, True), color, 3, color)
        return left + ICON_WIDTH

    @staticmethod
    def _parse(value: str, total: int) -> int:
        try:
            return int(parse_flexible_value(value, float(total)))
        except ValueError as exc:
            raise InvalidOptionsError(f"error parsing legend position: {value!r}") from exc


__all__ = ["LegendPainter", "legend_is_empty", "ITEM_SPACING", "ICON_WIDTH", "ICON_HEIGHT"]
