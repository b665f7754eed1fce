"""Raster back-end built on matplotlib's Agg canvas and Pillow.

The figure is sized so one data unit equals one pixel (72 dpi, axes
spanning the whole figure with an inverted y axis).  Every painted path
becomes a :class:`~matplotlib.patches.PathPatch` and every text run a
:class:`~matplotlib.text.Text`; each artist gets an increasing z-order so
the paint order of the chart is preserved.  Encoding goes through Pillow,
whose PNG writer emits no timestamps, so output bytes are reproducible.
"""

from __future__ import annotations

import math
from typing import BinaryIO, List, Tuple

import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.patches import PathPatch
from matplotlib.path import Path
from PIL import Image

from ..config import FORMAT_JPG, FORMAT_PNG, JPEG_QUALITY, TEXT_DPI
from .backend import DrawingBackend, PathCommand
from .fonts import font_properties


def _arc_segments(cx: float, cy: float, rx: float, ry: float, start: float, delta: float):
    """Yield cubic Bezier control triples approximating an elliptical arc."""
    count = max(1, int(math.ceil(abs(delta) / (math.pi / 2) - 1e-9)))
    step = delta / count
    k = 4.0 / 3.0 * math.tan(step / 4.0)
    a0 = start
    for _ in range(count):
        a1 = a0 + step
        x0, y0 = cx + rx * math.cos(a0), cy + ry * math.sin(a0)
        x1, y1 = cx + rx * math.cos(a1), cy + ry * math.sin(a1)
        c1 = (x0 - k * rx * math.sin(a0), y0 + k * ry * math.cos(a0))
        c2 = (x1 + k * rx * math.sin(a1), y1 - k * ry * math.cos(a1))
        yield c1, c2, (x1, y1)
        a0 = a1


def to_mpl_path(path: List[PathCommand]) -> Path:
    """Convert back-end path commands to a matplotlib :class:`Path`."""
    vertices: List[Tuple[float, float]] = []
    codes: List[int] = []
    start = (0.0, 0.0)

    def move(point: Tuple[float, float]) -> None:
        nonlocal start
        vertices.append(point)
        codes.append(Path.MOVETO)
        start = point

    for command in path:
        op = command[0]
        if op == "M":
            move((command[1], command[2]))
        elif op == "L":
            if not vertices:
                move((command[1], command[2]))
            else:
                vertices.append((command[1], command[2]))
                codes.append(Path.LINETO)
        elif op == "Q":
            _, cx, cy, x, y = command
            if not vertices:
                move((cx, cy))
            vertices.extend([(cx, cy), (x, y)])
            codes.extend([Path.CURVE3, Path.CURVE3])
        elif op in ("A", "O"):
            if op == "A":
                _, cx, cy, rx, ry, angle, delta = command
            else:
                _, rx, cx, cy = command
                ry, angle, delta = rx, 0.0, 2 * math.pi
            first = (cx + rx * math.cos(angle), cy + ry * math.sin(angle))
            if op == "O" or not vertices:
                move(first)
            else:
                vertices.append(first)
                codes.append(Path.LINETO)
            for c1, c2, end in _arc_segments(cx, cy, rx, ry, angle, delta):
                vertices.extend([c1, c2, end])
                codes.extend([Path.CURVE4, Path.CURVE4, Path.CURVE4])
            if op == "O":
                vertices.append(start)
                codes.append(Path.CLOSEPOLY)
        elif op == "Z" and vertices:
            vertices.append(start)
            codes.append(Path.CLOSEPOLY)
    return Path(np.array(vertices, dtype=float).reshape(-1, 2), codes)


class RasterBackend(DrawingBackend):
    """PNG/JPEG back-end."""

    def __init__(self, width: int, height: int, font: str = "", output_format: str = FORMAT_PNG) -> None:
        super().__init__(width, height, font)
        self.format = output_format
        self.figure = Figure(figsize=(width / TEXT_DPI, height / TEXT_DPI), dpi=TEXT_DPI)
        self.figure.patch.set_alpha(0.0)
        self.canvas = FigureCanvasAgg(self.figure)
        self.ax = self.figure.add_axes((0, 0, 1, 1))
        self.ax.set_xlim(0, width)
        self.ax.set_ylim(height, 0)
        self.ax.set_axis_off()
        self.ax.patch.set_alpha(0.0)
        self._zorder = 0

    def _next_zorder(self) -> int:
        self._zorder += 1
        return self._zorder

    def draw_path(self, path: List[PathCommand], stroke: bool, fill: bool) -> None:
        mpl_path = to_mpl_path(path)
        if len(mpl_path.vertices) == 0:
            return
        patch = PathPatch(
            mpl_path,
            facecolor=self.fill_color.unit_rgba() if fill else "none",
            edgecolor=self.stroke_color.unit_rgba() if stroke else "none",
            linewidth=self.stroke_width if stroke else 0.0,
            fill=fill,
            capstyle="butt",
            joinstyle="round",
            zorder=self._next_zorder(),
        )
        if stroke and self.dash_array:
            patch.set_linestyle((0, tuple(self.dash_array)))
        self.ax.add_patch(patch)

    def draw_text(self, body: str, x: int, y: int) -> None:
        props = font_properties(self.font).copy()
        props.set_size(self.font_size)
        self.ax.text(
            x,
            y,
            body,
            fontproperties=props,
            color=self.font_color.unit_rgba(),
            rotation=-math.degrees(self.text_rotation),
            rotation_mode="anchor",
            ha="left",
            va="baseline",
            zorder=self._next_zorder(),
        )

    def image(self) -> Image.Image:
        self.canvas.draw()
        rgba = np.array(self.canvas.buffer_rgba(), dtype=np.uint8)
        image = Image.fromarray(rgba)
        if image.size != (self.width, self.height):
            # Float figure sizes can lose a pixel; crop pads with transparency
            image = image.crop((0, 0, self.width, self.height))
        return image

    def save(self, writer: BinaryIO) -> None:
        image = self.image()
        if self.format == FORMAT_JPG:
            image.convert("RGB").save(writer, format="JPEG", quality=JPEG_QUALITY)
            return
        image.save(writer, format="PNG")
