"""Surface partitioning, range solving and the shared chart frame."""

from .axis import AxisOption, AxisPainter, default_boundary_gap
from .legend import LegendPainter
from .painter import Painter
from .pipeline import RenderOption, RenderResult, default_render
from .range import AxisRange, calculate_category_range, calculate_value_range, nice_step
from .title import TitlePainter

__all__ = [
    "AxisOption",
    "AxisPainter",
    "default_boundary_gap",
    "LegendPainter",
    "Painter",
    "RenderOption",
    "RenderResult",
    "default_render",
    "AxisRange",
    "calculate_category_range",
    "calculate_value_range",
    "nice_step",
    "TitlePainter",
]
