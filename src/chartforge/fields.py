"""Pydantic field types shared by the option models.

The drawing layer works with small frozen dataclasses (:class:`Color`,
:class:`Box`, :class:`FontStyle`, ...).  The annotated types below let
option models accept those values directly or in the loose forms people
write in code and JSON: ``"#ff0000"`` for a color, ``20`` or
``[10, 20]`` for a padding box, ``{"size": 14}`` for a font style.
"""

from __future__ import annotations

from typing import Annotated, Any, List, Optional, Sequence, Union

from pydantic import BaseModel, PlainValidator

from .drawing.color import Color, parse_color
from .drawing.fonts import FontStyle
from .drawing.geometry import Box, OffsetInt, OffsetStr
from .theme import Theme, get_theme


def coerce_color(value: Any) -> Color:
    """Accept a :class:`Color`, a color string or an ``(r, g, b[, a])`` sequence."""
    if value is None:
        return Color()
    if isinstance(value, Color):
        return value
    if isinstance(value, str):
        return parse_color(value)
    if isinstance(value, (list, tuple)) and len(value) in (3, 4):
        channels = [int(v) for v in value]
        if len(channels) == 3:
            channels.append(255)
        return Color(*channels)
    raise ValueError(f"invalid color: {value!r}")


def box_from_css(values: Sequence[int]) -> Box:
    """Build a padding box from one to four CSS ordered values.

    ``[a]`` pads every side, ``[v, h]`` pads vertically and horizontally,
    ``[t, h, b]`` and ``[t, r, b, l]`` follow the CSS shorthand.
    """
    items = [int(v) for v in values]
    if len(items) == 1:
        top = right = bottom = left = items[0]
    elif len(items) == 2:
        top, right = items
        bottom, left = top, right
    elif len(items) == 3:
        top, right, bottom = items
        left = right
    elif len(items) == 4:
        top, right, bottom, left = items
    else:
        raise ValueError(f"padding needs one to four values, got {len(items)}")
    return Box(left=left, top=top, right=right, bottom=bottom, is_set=True)


def coerce_box(value: Any) -> Box:
    if value is None:
        return Box()
    if isinstance(value, Box):
        return value
    if isinstance(value, bool):
        raise ValueError("invalid box: bool")
    if isinstance(value, (int, float)):
        return box_from_css([int(value)])
    if isinstance(value, (list, tuple)):
        return box_from_css(value)
    if isinstance(value, dict):
        return Box(
            left=int(value.get("left", 0)),
            top=int(value.get("top", 0)),
            right=int(value.get("right", 0)),
            bottom=int(value.get("bottom", 0)),
            is_set=True,
        )
    raise ValueError(f"invalid box: {value!r}")


def coerce_font_style(value: Any) -> FontStyle:
    if value is None:
        return FontStyle()
    if isinstance(value, FontStyle):
        return value
    if isinstance(value, dict):
        return FontStyle(
            font=str(value.get("font", value.get("family", "")) or ""),
            size=float(value.get("size", value.get("font_size", 0)) or 0),
            color=coerce_color(value.get("color")),
        )
    raise ValueError(f"invalid font style: {value!r}")


def coerce_offset_int(value: Any) -> OffsetInt:
    if value is None:
        return OffsetInt()
    if isinstance(value, OffsetInt):
        return value
    if isinstance(value, dict):
        return OffsetInt(int(value.get("left", 0)), int(value.get("top", 0)))
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return OffsetInt(int(value[0]), int(value[1]))
    raise ValueError(f"invalid offset: {value!r}")


def _offset_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(int(value))
    return str(value)


def coerce_offset_str(value: Any) -> OffsetStr:
    if value is None:
        return OffsetStr()
    if isinstance(value, OffsetStr):
        return value
    if isinstance(value, dict):
        return OffsetStr(_offset_text(value.get("left")), _offset_text(value.get("top")))
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return OffsetStr(_offset_text(value[0]), _offset_text(value[1]))
    raise ValueError(f"invalid offset: {value!r}")


def coerce_sample_values(value: Any) -> List[Optional[float]]:
    """Accept ``None``, a number or a sequence of numbers (``None`` allowed)."""
    if value is None:
        return []
    if isinstance(value, bool):
        raise ValueError("invalid sample value: bool")
    if isinstance(value, (int, float)):
        return [float(value)]
    if isinstance(value, (list, tuple)):
        return [None if v is None else float(v) for v in value]
    raise ValueError(f"invalid sample value: {value!r}")


def coerce_theme(value: Any) -> Union[Theme, None]:
    if value is None or isinstance(value, Theme):
        return value
    if isinstance(value, str):
        return get_theme(value)
    raise ValueError(f"invalid theme: {value!r}")


ColorField = Annotated[Color, PlainValidator(coerce_color)]
BoxField = Annotated[Box, PlainValidator(coerce_box)]
FontStyleField = Annotated[FontStyle, PlainValidator(coerce_font_style)]
OffsetIntField = Annotated[OffsetInt, PlainValidator(coerce_offset_int)]
OffsetStrField = Annotated[OffsetStr, PlainValidator(coerce_offset_str)]
ThemeField = Annotated[Union[Theme, None], PlainValidator(coerce_theme)]
SampleValuesField = Annotated[List[Optional[float]], PlainValidator(coerce_sample_values)]


class OptionModel(BaseModel):
    """Base class for option models; unknown keys are rejected."""

    class Config:
        extra = "forbid"
        arbitrary_types_allowed = True
        validate_assignment = True


__all__ = [
    "ColorField",
    "BoxField",
    "FontStyleField",
    "OffsetIntField",
    "OffsetStrField",
    "ThemeField",
    "SampleValuesField",
    "OptionModel",
    "box_from_css",
    "coerce_box",
    "coerce_color",
    "coerce_font_style",
    "coerce_offset_int",
    "coerce_offset_str",
    "coerce_sample_values",
    "coerce_theme",
]
