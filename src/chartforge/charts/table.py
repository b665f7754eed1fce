"""Table renderer.

A table is laid out in two passes: :meth:`TableChart.measure` computes
the row heights for a given width (cells word-wrap inside their column)
so the caller can size the canvas, then :meth:`TableChart.render` draws
the rows onto a painter of that size.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Tuple

from ..config import FORMAT_SVG
from ..drawing.color import Color, rgb
from ..drawing.fonts import FontStyle
from ..drawing.geometry import Box, auto_divide_spans
from ..errors import InvalidOptionsError
from ..layout.painter import Painter
from ..options import TableSeries

TABLE_FONT_SIZE = 12.0
DEFAULT_CELL_PADDING = Box(left=10, top=8, right=10, bottom=8, is_set=True)

_LIGHT = {
    "header_background": rgb(220, 220, 220),
    "header_font": rgb(80, 80, 80),
    "font": rgb(50, 50, 50),
    "rows": (rgb(255, 255, 255), rgb(245, 245, 245)),
}
_DARK = {
    "header_background": rgb(38, 38, 42),
    "header_font": rgb(216, 217, 218),
    "font": rgb(216, 217, 218),
    "rows": (rgb(24, 24, 28), rgb(38, 38, 42)),
}


@dataclass
class TableCell:
    """One cell handed to ``cell_modifier``; row 0 is the header."""

    text: str
    font_style: FontStyle
    fill_color: Color = field(default_factory=Color)
    row: int = 0
    column: int = 0


def validate_table(series: TableSeries) -> None:
    if not series.header:
        raise InvalidOptionsError("header can not be empty")


class TableChart:
    def __init__(self, series: TableSeries, font: str = "", is_dark: bool = False) -> None:
        validate_table(series)
        self.series = series
        self.font = font
        self.palette = _DARK if is_dark else _LIGHT

    @property
    def column_count(self) -> int:
        return len(self.series.header)

    def spans(self) -> List[int]:
        spans = [max(span, 1) for span in self.series.spans[:self.column_count]]
        return spans + [1] * (self.column_count - len(spans))

    def padding(self) -> Box:
        return self.series.cell_padding if not self.series.cell_padding.is_zero() else DEFAULT_CELL_PADDING

    def _base_style(self, header: bool) -> FontStyle:
        configured = self.series.font_style
        color = configured.color
        if header and not self.series.header_font_color.is_zero():
            color = self.series.header_font_color
        if color.is_zero():
            color = self.palette["header_font"] if header else self.palette["font"]
        return FontStyle(configured.font or self.font, configured.size or TABLE_FONT_SIZE, color)

    def _row_color(self, row: int) -> Color:
        if row == 0:
            if not self.series.header_background_color.is_zero():
                return self.series.header_background_color
            return self.palette["header_background"]
        colors = self.series.row_background_colors or list(self.palette["rows"])
        return colors[(row - 1) % len(colors)]

    def cells(self) -> List[List[TableCell]]:
        """Every cell, header first, after ``cell_modifier``."""
        rows = [list(self.series.header)] + [list(r) for r in self.series.data]
        result = []
        for row_index, row in enumerate(rows):
            style = self._base_style(row_index == 0)
            cells = []
            for column in range(self.column_count):
                text = row[column] if column < len(row) else ""
                cell = TableCell(text=text, font_style=style, row=row_index, column=column)
                if self.series.cell_modifier is not None:
                    modified = self.series.cell_modifier(replace(cell))
                    if modified is not None:
                        cell = modified
                cells.append(cell)
            result.append(cells)
        return result

    def _column_edges(self, width: int) -> List[int]:
        spans = self.spans()
        return auto_divide_spans(width, sum(spans), spans)

    def _layout(self, p: Painter) -> Tuple[List[List[TableCell]], List[int], List[int]]:
        pad = self.padding()
        edges = self._column_edges(p.width)
        cells = self.cells()
        heights = []
        for row in cells:
            height = 0
            for cell in row:
                width = edges[cell.column + 1] - edges[cell.column] - pad.left - pad.right
                box = p.measure_text_fit(cell.text, max(width, 1), cell.font_style)
                height = max(height, box.height + pad.top + pad.bottom)
            heights.append(height)
        return cells, edges, heights

    def measure(self, width: int) -> int:
        """Total height of the table when drawn *width* pixels wide."""
        p = Painter.new(width, 1, FORMAT_SVG, self.font)
        _, _, heights = self._layout(p)
        return sum(heights)

    def render(self, p: Painter) -> Box:
        pad = self.padding()
        if not self.series.background_color.is_zero():
            p.set_background(p.width, p.height, self.series.background_color)
        cells, edges, heights = self._layout(p)
        aligns = self.series.text_aligns
        y = 0
        for row_index, row in enumerate(cells):
            height = heights[row_index]
            p.filled_rect(Box(0, y, p.width, y + height, True), self._row_color(row_index))
            for cell in row:
                left = edges[cell.column]
                right = edges[cell.column + 1]
                if not cell.fill_color.is_zero():
                    p.filled_rect(Box(left, y, right, y + height, True), cell.fill_color)
                align = aligns[cell.column] if cell.column < len(aligns) else ""
                p.text_fit(cell.text, left + pad.left, y + pad.top, max(right - left - pad.left - pad.right, 1),
                           cell.font_style, align)
            y += height
        return Box(right=p.width, bottom=y, is_set=True)


__all__ = ["TableChart", "TableCell", "validate_table", "DEFAULT_CELL_PADDING", "TABLE_FONT_SIZE"]
