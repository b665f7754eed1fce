"""Integer geometry primitives shared by the painter and the renderers.

Points and boxes use integer pixel coordinates.  A point whose ``y`` is
:data:`NULL_Y` marks a missing sample and splits a polyline into separate
sub-paths.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Union

# Sentinel y coordinate marking a break in a polyline.
NULL_Y = 2147483647


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    def is_null(self) -> bool:
        return self.y == NULL_Y


def null_point(x: int = 0) -> Point:
    """Return a point that breaks the current polyline."""
    return Point(x, NULL_Y)


@dataclass(frozen=True)
class Box:
    """A rectangle expressed by its four edges.

    ``is_set`` distinguishes an explicit all-zero box from "no box given"
    when a box is used as an option value.
    """

    left: int = 0
    top: int = 0
    right: int = 0
    bottom: int = 0
    is_set: bool = False

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    def is_zero(self) -> bool:
        return not self.is_set and self.left == 0 and self.top == 0 and self.right == 0 and self.bottom == 0

    def pad(self, padding: "Box") -> "Box":
        """Shrink the box inward by the four offsets of *padding*."""
        return Box(
            left=self.left + padding.left,
            top=self.top + padding.top,
            right=self.right - padding.right,
            bottom=self.bottom - padding.bottom,
            is_set=True,
        )

    def with_(self, **changes) -> "Box":
        return replace(self, **changes)


def box_of(left: int = 0, top: int = 0, right: int = 0, bottom: int = 0) -> Box:
    """Construct an explicitly set box."""
    return Box(left, top, right, bottom, True)


def padding_all(value: int) -> Box:
    return Box(value, value, value, value, True)


# Offsets are either pixel integers or symbolic strings such as "left",
# "center" or "25%".
Offset = Union[int, str]


@dataclass(frozen=True)
class OffsetInt:
    left: int = 0
    top: int = 0


@dataclass(frozen=True)
class OffsetStr:
    left: str = ""
    top: str = ""


def convert_percent(value: str) -> Optional[float]:
    """Convert ``"NN%"`` to a fraction, or return None when not a percent."""
    text = value.strip()
    if not text.endswith("%"):
        return None
    try:
        return float(text[:-1]) / 100.0
    except ValueError:
        return None


def parse_flexible_value(value: str, percent_total: float) -> float:
    """Parse a pixel value or a percentage of *percent_total*.

    Raises ValueError when the text is neither.
    """
    percent = convert_percent(value)
    if percent is not None:
        return percent * percent_total
    return float(value)


def get_radius(diameter: float, radius_value: str, default_percent: float = 0.4) -> float:
    """Resolve a radius given as pixels or as a percentage of *diameter*."""
    radius = 0.0
    if radius_value:
        percent = convert_percent(radius_value)
        if percent is not None:
            radius = diameter * percent
        else:
            try:
                radius = float(radius_value)
            except ValueError:
                radius = 0.0
    if radius <= 0:
        radius = diameter * default_percent
    return radius


def ceil_to_int(value: float) -> int:
    # Trig on right angles leaves tiny residues that must not round up
    return int(math.ceil(round(value, 6)))


def auto_divide(maximum: int, size: int) -> List[int]:
    """Split ``[0, maximum]`` into *size* steps, returning ``size + 1`` positions.

    The last position is always exactly *maximum*.
    """
    if size <= 0:
        return [0, maximum]
    unit = maximum / size
    values = [int(i * unit) for i in range(size)]
    values.append(maximum)
    return values


def auto_divide_spans(maximum: int, size: int, spans: Sequence[int]) -> List[int]:
    """Like :func:`auto_divide` but merges columns covered by *spans*."""
    values = auto_divide(maximum, size)
    if not spans:
        return values
    merged = [0]
    end = 0
    for span in spans:
        end += span
        merged.append(values[min(end, len(values) - 1)])
    return merged


def is_tick(total_range: int, num_ticks: int, index: int) -> bool:
    """Return True when *index* is one of *num_ticks* evenly spread positions."""
    if num_ticks >= total_range:
        return True
    if index == 0 or index == total_range - 1:
        return True
    if num_ticks < 2:
        return False
    step = (total_range - 1) / (num_ticks - 1)
    i = int(index / step)
    while i < num_ticks:
        value = int(i * step + 0.5)
        if value == index:
            # Rounding can land past the end; wait for the last index then
            if int((i + 1) * step + 0.5) > total_range:
                break
            return True
        if value > index:
            break
        i += 1
    return False


def degrees_to_radians(degrees: float) -> float:
    return degrees * math.pi / 180.0


def radians_to_degrees(radians: float) -> float:
    return radians * 180.0 / math.pi


def polygon_angles(sides: int) -> List[float]:
    """Vertex angles of a regular polygon whose first vertex points up."""
    return [2 * math.pi / sides * i - math.pi / 2 for i in range(sides)]


def polygon_point(center: Point, radius: float, angle: float) -> Point:
    return Point(center.x + int(radius * math.cos(angle)), center.y + int(radius * math.sin(angle)))


def polygon_points(center: Point, radius: float, sides: int) -> List[Point]:
    return [polygon_point(center, radius, angle) for angle in polygon_angles(sides)]


def rotated_size(width: float, height: float, radians: float) -> tuple[int, int]:
    """Bounding box size of a ``width`` x ``height`` rectangle after rotation."""
    if radians == 0:
        return ceil_to_int(width), ceil_to_int(height)
    cos = abs(math.cos(radians))
    sin = abs(math.sin(radians))
    return ceil_to_int(width * cos + height * sin), ceil_to_int(width * sin + height * cos)
