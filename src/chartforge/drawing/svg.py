"""SVG back-end.

Builds the document as a list of element strings, one element per painted
path or text run, and joins them on save.  Coordinates are rounded to
integers and colors are written as ``rgb()``/``rgba()``.
"""

from __future__ import annotations

import math
import os
from typing import BinaryIO, List
from xml.sax.saxutils import escape, quoteattr

from .backend import DrawingBackend, PathCommand

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


def _i(value: float) -> int:
    return int(round(value))


def _arc_point(cx: float, cy: float, rx: float, ry: float, angle: float) -> tuple[int, int]:
    return _i(cx + rx * math.cos(angle)), _i(cy + ry * math.sin(angle))


class SVGBackend(DrawingBackend):
    """Vector back-end writing an SVG 1.1 document."""

    format = "svg"

    def __init__(self, width: int, height: int, font: str = "") -> None:
        super().__init__(width, height, font)
        self.elements: List[str] = []

    def _style(self, stroke: bool, fill: bool) -> str:
        parts = []
        if stroke:
            parts.append(f"stroke-width:{self.stroke_width:g}")
            parts.append(f"stroke:{self.stroke_color.svg()}")
            if self.dash_array:
                parts.append("stroke-dasharray:" + ",".join(f"{d:g}" for d in self.dash_array))
        else:
            parts.append("stroke:none")
        if fill:
            parts.append(f"fill:{self.fill_color.svg()}")
        else:
            parts.append("fill:none")
        return ";".join(parts)

    def _path_data(self, path: List[PathCommand]) -> str:
        d: List[str] = []
        for command in path:
            op = command[0]
            if op == "M":
                d.append(f"M{_i(command[1])} {_i(command[2])}")
            elif op == "L":
                d.append(f"L{_i(command[1])} {_i(command[2])}")
            elif op == "Q":
                _, cx, cy, x, y = command
                d.append(f"Q{_i(cx)} {_i(cy)} {_i(x)} {_i(y)}")
            elif op == "A":
                _, cx, cy, rx, ry, start, delta = command
                sx, sy = _arc_point(cx, cy, rx, ry, start)
                d.append(("L" if d else "M") + f"{sx} {sy}")
                # A full turn has coincident end points and must be split
                steps = 2 if abs(delta) >= 2 * math.pi else 1
                step = delta / steps
                for i in range(steps):
                    ex, ey = _arc_point(cx, cy, rx, ry, start + step * (i + 1))
                    large = 1 if abs(step) > math.pi else 0
                    sweep = 1 if step > 0 else 0
                    d.append(f"A{_i(rx)} {_i(ry)} 0 {large} {sweep} {ex} {ey}")
            elif op == "O":
                _, radius, x, y = command
                r = _i(radius)
                d.append(f"M{_i(x) + r} {_i(y)}")
                d.append(f"A{r} {r} 0 1 1 {_i(x) - r} {_i(y)}")
                d.append(f"A{r} {r} 0 1 1 {_i(x) + r} {_i(y)}")
                d.append("Z")
            elif op == "Z":
                d.append("Z")
        return " ".join(d)

    def draw_path(self, path: List[PathCommand], stroke: bool, fill: bool) -> None:
        style = self._style(stroke, fill)
        if all(command[0] == "O" for command in path):
            for _, radius, x, y in path:
                self.elements.append(f'<circle cx="{_i(x)}" cy="{_i(y)}" r="{_i(radius)}" style="{style}"/>')
            return
        self.elements.append(f'<path d="{self._path_data(path)}" style="{style}"/>')

    def _font_family(self) -> str:
        if os.path.isfile(self.font):
            return os.path.splitext(os.path.basename(self.font))[0]
        return self.font

    def draw_text(self, body: str, x: int, y: int) -> None:
        style = (
            f"stroke:none;fill:{self.font_color.svg()};"
            f"font-size:{self.font_size:g}px;font-family:'{self._font_family()}',sans-serif"
        )
        transform = ""
        if self.text_rotation != 0:
            degrees = self.text_rotation * 180.0 / math.pi
            transform = f' transform="rotate({degrees:.2f},{_i(x)},{_i(y)})"'
        self.elements.append(
            f'<text x="{_i(x)}" y="{_i(y)}" style={quoteattr(style)}{transform}>{escape(body)}</text>'
        )

    def document(self) -> str:
        head = (
            f'<svg xmlns="{SVG_NAMESPACE}" width="{self.width}" height="{self.height}" '
            f'viewBox="0 0 {self.width} {self.height}">'
        )
        return "\n".join([head, *self.elements, "</svg>"])

    def save(self, writer: BinaryIO) -> None:
        writer.write(self.document().encode("utf-8"))
