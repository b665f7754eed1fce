"""
Configuration constants for the chartforge project.

This module centralises the layout and rendering defaults that are shared
across the drawing, layout and chart packages.  New values should be added
here deliberately; option models refer to these names rather than
repeating literals.
"""

from typing import Final

# Branding for the project.
PROJECT_NAME: Final[str] = "chartforge"

# Canvas defaults used when an option leaves the size unset.
DEFAULT_CHART_WIDTH: Final[int] = 600
DEFAULT_CHART_HEIGHT: Final[int] = 400
DEFAULT_PADDING: Final[int] = 20

# Text defaults.  DejaVu Sans ships with matplotlib so measurement and
# raster output never depend on fonts installed on the host.
DEFAULT_FONT_FAMILY: Final[str] = "DejaVu Sans"
DEFAULT_FONT_SIZE: Final[float] = 12.0
DEFAULT_LABEL_FONT_SIZE: Final[float] = 10.0
SMALL_LABEL_FONT_SIZE: Final[float] = 8.0
# 72 dots per inch makes one point equal to one pixel.
TEXT_DPI: Final[int] = 72

# Stroke defaults for line series and their symbols.
DEFAULT_STROKE_WIDTH: Final[float] = 2.0
DEFAULT_DOT_WIDTH: Final[float] = 2.0

# Axis layout.
DEFAULT_X_AXIS_HEIGHT: Final[int] = 30
DEFAULT_Y_LABEL_COUNT_LOW: Final[int] = 3
DEFAULT_Y_LABEL_COUNT_HIGH: Final[int] = 10
MINIMUM_AXIS_LABELS: Final[int] = 2
MAXIMUM_AXIS_TICKS: Final[int] = 12
BOUNDARY_GAP_DEFAULT_THRESHOLD: Final[int] = 40
AXIS_MARGIN: Final[int] = 4
AXIS_TICK_LENGTH: Final[int] = 5
AXIS_LABEL_MARGIN: Final[int] = 5
MINIMUM_HORIZONTAL_AXIS_HEIGHT: Final[int] = 24

# Output formats understood by the back-ends.
FORMAT_SVG: Final[str] = "svg"
FORMAT_PNG: Final[str] = "png"
FORMAT_JPG: Final[str] = "jpg"
OUTPUT_FORMATS: Final[tuple] = (FORMAT_SVG, FORMAT_PNG, FORMAT_JPG)
JPEG_QUALITY: Final[int] = 90

# Symbolic positions and alignments.
POSITION_LEFT: Final[str] = "left"
POSITION_RIGHT: Final[str] = "right"
POSITION_TOP: Final[str] = "top"
POSITION_BOTTOM: Final[str] = "bottom"
POSITION_CENTER: Final[str] = "center"
ALIGN_LEFT: Final[str] = "left"
ALIGN_RIGHT: Final[str] = "right"
ALIGN_CENTER: Final[str] = "center"

DEFAULT_THEME: Final[str] = "light"

__all__ = [
    "PROJECT_NAME",
    "DEFAULT_CHART_WIDTH",
    "DEFAULT_CHART_HEIGHT",
    "DEFAULT_PADDING",
    "DEFAULT_FONT_FAMILY",
    "DEFAULT_FONT_SIZE",
    "DEFAULT_LABEL_FONT_SIZE",
    "SMALL_LABEL_FONT_SIZE",
    "TEXT_DPI",
    "DEFAULT_STROKE_WIDTH",
    "DEFAULT_DOT_WIDTH",
    "DEFAULT_X_AXIS_HEIGHT",
    "DEFAULT_Y_LABEL_COUNT_LOW",
    "DEFAULT_Y_LABEL_COUNT_HIGH",
    "MINIMUM_AXIS_LABELS",
    "MAXIMUM_AXIS_TICKS",
    "BOUNDARY_GAP_DEFAULT_THRESHOLD",
    "AXIS_MARGIN",
    "AXIS_TICK_LENGTH",
    "AXIS_LABEL_MARGIN",
    "MINIMUM_HORIZONTAL_AXIS_HEIGHT",
    "FORMAT_SVG",
    "FORMAT_PNG",
    "FORMAT_JPG",
    "OUTPUT_FORMATS",
    "JPEG_QUALITY",
    "POSITION_LEFT",
    "POSITION_RIGHT",
    "POSITION_TOP",
    "POSITION_BOTTOM",
    "POSITION_CENTER",
    "ALIGN_LEFT",
    "ALIGN_RIGHT",
    "ALIGN_CENTER",
    "DEFAULT_THEME",
]
