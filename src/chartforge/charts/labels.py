"""Series value labels.

Labels are collected while a renderer walks its samples and drawn once
the series geometry is done, so they sit on top of lines, bars and
candles.  A label either renders as plain text or, when it carries a
:class:`~chartforge.drawing.fonts.LabelStyle` with a background, as a
badge: a rounded rectangle holding one or more lines of text.

Badges can collide (detected candlestick patterns on neighbouring
candles, for instance).  With ``avoid_overlap`` the painter sorts labels
by x and greedily moves each one below any already placed label it
would overlap, so no label is ever hidden.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..config import DEFAULT_LABEL_FONT_SIZE
from ..drawing.fonts import FontStyle, LabelStyle
from ..drawing.geometry import Box, OffsetInt
from ..layout.painter import Painter, call_formatter
from ..options import SeriesLabel
from .series import label_text

DEFAULT_LABEL_DISTANCE = 5
BADGE_PADDING = 4
BADGE_GAP = 2


@dataclass
class LabelValue:
    """One label request.

    ``vertical`` labels sit above (x, y); horizontal ones to its right.
    """

    index: int
    value: float
    x: int
    y: int
    radians: float = 0.0
    font_style: FontStyle = FontStyle()
    vertical: bool = True
    offset: OffsetInt = OffsetInt()
    percent: float = -1.0
    text: Optional[str] = None
    style: Optional[LabelStyle] = None


@dataclass
class _PlacedLabel:
    lines: List[str]
    box: Box
    font_style: FontStyle
    radians: float = 0.0
    style: Optional[LabelStyle] = None
    line_heights: List[int] = field(default_factory=list)


def is_badge(style: Optional[LabelStyle]) -> bool:
    return style is not None and not style.background_color.is_zero()


def measure_lines(painter: Painter, lines: Sequence[str], style: FontStyle) -> Tuple[int, List[int]]:
    width = 0
    heights = []
    for line in lines:
        box = painter.measure_text(line, 0.0, style)
        width = max(width, box.width)
        heights.append(box.height)
    return width, heights


def draw_badge(painter: Painter, lines: Sequence[str], box: Box, style: LabelStyle,
               font_style: FontStyle, line_heights: Sequence[int]) -> None:
    """Draw a rounded badge filling *box* with *lines* centered inside."""
    painter.rounded_rect(box, style.corner_radius, True, True, style.background_color,
                         style.border_color, style.border_width)
    y = box.top + BADGE_PADDING
    for line, height in zip(lines, line_heights):
        y += height
        width = painter.measure_text(line, 0.0, font_style).width
        painter.text(line, box.left + (box.width - width) // 2, y, 0.0, font_style)


def _overlaps(a: Box, b: Box) -> bool:
    return a.left < b.right and b.left < a.right and a.top < b.bottom and b.top < a.bottom


class SeriesLabelPainter:
    """Collects and draws the labels of one series.

    Args:
        painter: The series painter.
        label: Label settings of the series.
        name: Series name, substituted for ``{b}``.
        default_template: Template used when the label sets neither a
            template nor a formatter (``"{b}: {d}"`` for pies).
        value_formatter: Chart-wide fallback formatter.
        avoid_overlap: Move colliding labels instead of drawing them on
            top of each other.
    """

    def __init__(
        self,
        painter: Painter,
        label: SeriesLabel,
        name: str = "",
        default_template: str = "{c}",
        value_formatter=None,
        avoid_overlap: bool = False,
    ) -> None:
        self.painter = painter
        self.label = label
        self.name = name
        self.default_template = default_template
        self.value_formatter = value_formatter
        self.avoid_overlap = avoid_overlap
        self._labels: List[_PlacedLabel] = []

    def __len__(self) -> int:
        return len(self._labels)

    def text_for(self, value: LabelValue) -> Tuple[str, Optional[LabelStyle]]:
        if value.text is not None:
            return value.text, value.style
        if self.label.label_formatter is not None:
            result = call_formatter(self.label.label_formatter, value.index, self.name, value.value)
            if isinstance(result, tuple):
                return result[0], result[1]
            return result, None
        text = label_text(self.label, self.name, value.value, value.percent, self.default_template,
                          self.value_formatter)
        return text, None

    def add(self, value: LabelValue) -> None:
        text, style = self.text_for(value)
        if not text:
            return
        distance = self.label.distance or DEFAULT_LABEL_DISTANCE
        font_style = self._font_style(value, style)
        lines = text.split("\n")
        width, heights = measure_lines(self.painter, lines, font_style)
        height = sum(heights)

        if is_badge(style):
            width += 2 * BADGE_PADDING
            height += 2 * BADGE_PADDING
            if value.vertical:
                left = value.x - width // 2
                top = value.y - distance - height
            else:
                left = value.x + distance
                top = value.y - height // 2
        elif value.radians:
            box = self.painter.measure_text(text, value.radians, font_style)
            left = value.x + box.width // 2 - 1
            width, height = box.width, box.height
            top = value.y - height - (distance if value.vertical else 0)
        elif value.vertical:
            left = value.x - width // 2
            if width % 2:
                left += 1
            top = value.y - distance - height
        else:
            left = value.x + distance
            top = value.y + height // 2 - 2 - height
        left += value.offset.left + self.label.offset.left
        top += value.offset.top + self.label.offset.top
        self._labels.append(
            _PlacedLabel(
                lines=lines,
                box=Box(left, top, left + width, top + height, True),
                font_style=font_style,
                radians=value.radians,
                style=style,
                line_heights=heights,
            )
        )

    def _font_style(self, value: LabelValue, style: Optional[LabelStyle]) -> FontStyle:
        base = style.font_style if style is not None else FontStyle()
        configured = self.label.font_style
        size = base.size or configured.size or value.font_style.size or DEFAULT_LABEL_FONT_SIZE
        color = base.color
        if color.is_zero():
            color = configured.color if not configured.color.is_zero() else value.font_style.color
        font = base.font or configured.font or value.font_style.font
        return self.painter.resolve_font(FontStyle(font, size, color))

    def render(self) -> None:
        labels = self._labels
        if self.avoid_overlap:
            labels = self._place(labels)
        for item in labels:
            if is_badge(item.style):
                draw_badge(self.painter, item.lines, item.box, item.style, item.font_style, item.line_heights)
            elif item.radians:
                self.painter.text("\n".join(item.lines), item.box.left, item.box.bottom, item.radians,
                                  item.font_style)
            else:
                y = item.box.top
                for line, height in zip(item.lines, item.line_heights):
                    y += height
                    self.painter.text(line, item.box.left, y, 0.0, item.font_style)

    def _place(self, labels: List[_PlacedLabel]) -> List[_PlacedLabel]:
        placed: List[_PlacedLabel] = []
        for item in sorted(labels, key=lambda label: label.box.left):
            box = item.box
            if box.left < 0:
                box = Box(0, box.top, box.width, box.bottom, True)
            elif box.right > self.painter.width:
                shift = box.right - self.painter.width
                box = Box(box.left - shift, box.top, box.right - shift, box.bottom, True)
            moved = True
            while moved:
                moved = False
                for other in placed:
                    if _overlaps(box, other.box):
                        height = box.height
                        top = other.box.bottom + BADGE_GAP
                        box = Box(box.left, top, box.right, top + height, True)
                        moved = True
            item.box = box
            placed.append(item)
        return placed


__all__ = [
    "LabelValue",
    "SeriesLabelPainter",
    "draw_badge",
    "is_badge",
    "measure_lines",
    "DEFAULT_LABEL_DISTANCE",
]
