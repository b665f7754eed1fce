"""Human friendly number formatting.

:func:`humanize` is the default value formatter for axis labels, series
labels and mark points.  It renders large magnitudes with SI suffixes
(``k``, ``M``, ``G``, ``T``) and trims trailing fractional zeros.
"""

from __future__ import annotations

import math
from typing import Callable, List, Tuple

ValueFormatter = Callable[[float], str]

_SUFFIXES: List[Tuple[float, str]] = [
    (1.0, ""),
    (1e3, "k"),
    (1e6, "M"),
    (1e9, "G"),
    (1e12, "T"),
]


def _fixed(value: float, digits: int, strict: bool) -> str:
    text = f"{value:.{digits}f}"
    if not strict and "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _clean_sign(text: str) -> str:
    # "-0" (or "-0.00") after rounding a tiny negative value
    if text.startswith("-") and float(text.rstrip("kMGT").replace(",", "")) == 0:
        return text[1:]
    return text


def humanize(value: float, fraction_digits: int = 2, strict_fractional: bool = False) -> str:
    """Format *value* in short SI form.

    Parameters
    ----------
    value : float
        The number to format.
    fraction_digits : int
        Maximum number of fractional digits; negative counts are treated
        as zero.
    strict_fractional : bool
        Keep trailing zeros so every label has exactly *fraction_digits*
        decimals.

    Returns
    -------
    str
        For example ``1.2k`` for 1200 or ``-3.5M`` for -3,500,000.
    """
    if value is None:
        return ""
    if math.isnan(value) or math.isinf(value):
        return str(value)
    digits = max(0, fraction_digits)
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    index = 0
    for i, (threshold, _) in enumerate(_SUFFIXES):
        if magnitude >= threshold:
            index = i
    scaled = magnitude / _SUFFIXES[index][0]
    # Rounding can carry into the next magnitude (999.999 -> 1000)
    if index < len(_SUFFIXES) - 1 and float(f"{scaled:.{digits}f}") >= 1000:
        index += 1
        scaled = magnitude / _SUFFIXES[index][0]
    text = sign + _fixed(scaled, digits, strict_fractional) + _SUFFIXES[index][1]
    return _clean_sign(text)


def format_comma(value: float, fraction_digits: int = 2, strict_fractional: bool = False) -> str:
    """Format *value* with thousands separators, e.g. ``1,200.12``."""
    if math.isnan(value) or math.isinf(value):
        return str(value)
    digits = max(0, fraction_digits)
    text = f"{value:,.{digits}f}"
    if not strict_fractional and "." in text:
        text = text.rstrip("0").rstrip(".")
    return _clean_sign(text)


def parse_humanized(text: str) -> float:
    """Parse the output of :func:`humanize` or :func:`format_comma` back to a float.

    Raises ValueError for text that is not a humanized number.
    """
    body = text.strip().replace(",", "")
    if not body:
        raise ValueError("empty humanized value")
    multiplier = 1.0
    for threshold, suffix in _SUFFIXES[1:]:
        if body.endswith(suffix):
            multiplier = threshold
            body = body[: -len(suffix)]
            break
    return float(body) * multiplier


def make_value_formatter(fraction_digits: int = 2, strict_fractional: bool = False) -> ValueFormatter:
    """Return a formatter bound to a digit count."""

    def _format(value: float) -> str:
        return humanize(value, fraction_digits, strict_fractional)

    return _format


__all__ = ["ValueFormatter", "humanize", "format_comma", "parse_humanized", "make_value_formatter"]
