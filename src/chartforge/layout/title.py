"""Title painting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..config import POSITION_BOTTOM, POSITION_CENTER, POSITION_LEFT, POSITION_RIGHT, POSITION_TOP
from ..drawing.fonts import FontStyle
from ..drawing.geometry import Box, Point, parse_flexible_value
from ..errors import InvalidOptionsError
from ..options import TitleOption
from .painter import Painter

# Gap between the title text and its optional border.
TITLE_BORDER_PADDING = 10


@dataclass
class _TitleLine:
    text: str
    style: FontStyle
    width: int = 0
    height: int = 0


def split_title_text(text: str) -> List[str]:
    """Split on newlines, dropping blank lines."""
    return [line.strip() for line in text.split("\n") if line.strip()]


class TitlePainter:
    def __init__(self, painter: Painter, opt: TitleOption) -> None:
        self.painter = painter
        self.opt = opt

    def render(self) -> Box:
        """Draw the title lines, then the subtext lines, centered on each other.

        Returns the box covering the drawn text, or a zero box when there
        is nothing to draw.
        """
        opt = self.opt
        p = self.painter
        if opt.show is False or (not opt.text and not opt.subtext):
            return Box()

        font_style = p.resolve_font(opt.font_style)
        sub = opt.subtext_font_style
        subtext_style = FontStyle(
            font=sub.font or font_style.font,
            size=sub.size if sub.size > 0 else font_style.size,
            color=font_style.color if sub.color.is_zero() else sub.color,
        )
        lines = [_TitleLine(t, font_style) for t in split_title_text(opt.text)]
        lines += [_TitleLine(t, subtext_style) for t in split_title_text(opt.subtext)]

        max_width = 0
        total_height = 0
        for line in lines:
            box = p.measure_text(line.text, 0.0, line.style)
            line.width = box.width
            line.height = box.height
            max_width = max(max_width, box.width)
            total_height += box.height

        x = self._resolve(opt.offset.left, p.width, max_width, POSITION_LEFT)
        y = self._resolve(opt.offset.top, p.height, total_height, POSITION_TOP)
        start_y = y
        for line in lines:
            y += line.height
            p.text(line.text, x + (max_width - line.width) // 2, y, 0.0, line.style)

        result = Box(x, start_y, x + max_width, y, True)
        if opt.border_width > 0:
            pad = TITLE_BORDER_PADDING
            outline = [
                Point(result.left - pad, result.bottom + pad),
                Point(result.left - pad, result.top - pad),
                Point(result.right + pad, result.top - pad),
                Point(result.right + pad, result.bottom + pad),
                Point(result.left - pad, result.bottom + pad),
            ]
            p.line_stroke(outline, p.theme.axis_stroke_color, opt.border_width)
        return result

    @staticmethod
    def _resolve(value: str, total: int, size: int, start: str) -> int:
        if value in ("", start):
            return 0
        if value in (POSITION_RIGHT, POSITION_BOTTOM):
            return total - size
        if value == POSITION_CENTER:
            return total // 2 - size // 2
        try:
            return int(parse_flexible_value(value, float(total)))
        except ValueError as exc:
            raise InvalidOptionsError(f"error parsing title position: {value!r}") from exc


__all__ = ["TitlePainter", "split_title_text", "TITLE_BORDER_PADDING"]
