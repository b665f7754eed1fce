"""Axis range solving.

Two solvers are provided.  :func:`calculate_value_range` picks a minimum,
maximum and step for numeric axes so that labels land on human friendly
intervals (steps of 1, 2, 2.5 or 5 times a power of ten).
:func:`calculate_category_range` decides how many category labels fit
along an axis and how dense the ticks may be.  Both return an
:class:`AxisRange`, which also maps values to pixels for the renderers.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import (
    DEFAULT_Y_LABEL_COUNT_HIGH,
    DEFAULT_Y_LABEL_COUNT_LOW,
    MAXIMUM_AXIS_TICKS,
    MINIMUM_AXIS_LABELS,
)
from ..drawing.fonts import FontStyle
from ..drawing.geometry import auto_divide, ceil_to_int
from ..humanize import ValueFormatter, humanize
from .painter import Painter, call_formatter

logger = logging.getLogger(__name__)

_NICE_BASES = (1.0, 2.0, 2.5, 5.0, 10.0)
_NICE_MULTIPLIER_BASES = (1, 2, 5, 10)
# Shares of the data span added below and above the data per unit of padding scale.
RANGE_MIN_PADDING_SHARE = 0.20
RANGE_MAX_PADDING_SHARE = 0.05
_EPSILON = 1e-9


@dataclass
class AxisRange:
    """Solved range of one axis.

    For value axes ``min``/``max``/``step`` describe the scale and
    ``labels`` hold one formatted value per tick.  For category axes
    ``labels`` hold one entry per data index and ``divide_count`` equals
    the number of categories.
    """

    labels: List[str] = field(default_factory=list)
    min: float = 0.0
    max: float = 1.0
    step: float = 1.0
    tick_count: int = MINIMUM_AXIS_LABELS
    label_count: int = MINIMUM_AXIS_LABELS
    divide_count: int = MINIMUM_AXIS_LABELS
    is_category: bool = False
    size: int = 0
    text_max_width: int = 0
    text_max_height: int = 0
    label_rotation: float = 0.0
    font_style: FontStyle = FontStyle()
    data_start_index: int = 0

    def divide(self, total: int) -> List[int]:
        """Return ``tick_count`` increasing positions spanning ``[0, total]``."""
        return auto_divide(total, max(1, self.tick_count - 1))

    def auto_divide(self) -> List[int]:
        """Split the axis size into ``divide_count`` equal sections."""
        return auto_divide(self.size, self.divide_count)

    def get_height(self, value: float) -> int:
        """Pixel offset of *value* from the axis minimum."""
        if self.max <= self.min:
            return 0
        return int((value - self.min) / (self.max - self.min) * self.size)

    def get_rest_height(self, value: float) -> int:
        """Pixel offset of *value* from the axis maximum (inverted y)."""
        return self.size - self.get_height(value)

    def get_range(self, index: int) -> Tuple[float, float]:
        unit = self.size / self.divide_count if self.divide_count else 0.0
        return unit * index, unit * (index + 1)


def finite_values(values: Iterable[Optional[float]]) -> List[float]:
    result = []
    for value in values:
        if value is None:
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            continue
        if math.isfinite(number):
            result.append(number)
    return result


def nice_step(raw: float) -> float:
    """Smallest step of the form {1, 2, 2.5, 5} x 10^k that is >= *raw*."""
    if raw <= 0 or not math.isfinite(raw):
        return 1.0
    exponent = math.floor(math.log10(raw))
    magnitude = 10.0 ** exponent
    for base in _NICE_BASES:
        candidate = base * magnitude
        if candidate >= raw * (1 - _EPSILON):
            return candidate
    return 10.0 * magnitude


def _next_nice_step(step: float) -> float:
    return nice_step(step * (1 + 1e-6))


def nice_multiplier(raw: float) -> int:
    """Smallest whole number of the form {1, 2, 5} x 10^k that is >= *raw*."""
    if raw <= 1 or not math.isfinite(raw):
        return 1
    magnitude = 10 ** int(math.floor(math.log10(raw)))
    for base in _NICE_MULTIPLIER_BASES:
        if base * magnitude >= raw * (1 - _EPSILON):
            return base * magnitude
    return 10 * magnitude


def friendly_min(data_min: float, span: float, scale: float) -> float:
    """Round axis start at most ``RANGE_MIN_PADDING_SHARE`` of *span* below *data_min*.

    Zero is preferred, then powers of ten, then twice and five times a
    power of ten (negated for negative data).  Without a match the data
    minimum is kept and later rounded down to a whole step.
    """
    lowest = data_min - scale * RANGE_MIN_PADDING_SHARE * span
    sign = -1.0 if data_min < 0 else 1.0
    for base in (1.0, 2.0, 5.0):
        targets = [0.0] if base == 1.0 else []
        targets.extend(sign * base * 10.0 ** exponent for exponent in range(6))
        for target in targets:
            if lowest <= target <= data_min:
                return target
            # targets only move away from the window once past it
            if (sign > 0 and target > data_min) or (sign < 0 and target < lowest):
                break
    return data_min


def _snap(value: float) -> float:
    # Remove float noise such as 0.30000000000000004
    return float(round(value, 10))


def _tick_count(lo: float, hi: float, step: float) -> int:
    return int(round((hi - lo) / step)) + 1


def _value_labels(labels_cfg: Sequence[str], formatter: Optional[ValueFormatter], lo: float, step: float,
                  count: int) -> List[str]:
    labels = []
    for i in range(count):
        if i < len(labels_cfg):
            labels.append(labels_cfg[i])
        elif formatter is None:
            labels.append(humanize(_snap(lo + i * step)))
        else:
            labels.append(call_formatter(formatter, _snap(lo + i * step)))
    return labels


def calculate_value_range(
    values: Iterable[Optional[float]],
    *,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
    padding_scale: Optional[float] = None,
    label_count: int = 0,
    label_unit: float = 0.0,
    label_count_adjustment: int = 0,
    labels: Optional[Sequence[str]] = None,
    value_formatter: Optional[ValueFormatter] = None,
    painter: Optional[Painter] = None,
    axis_size: int = 0,
    is_vertical: bool = True,
    label_rotation: float = 0.0,
    font_style: FontStyle = FontStyle(),
    data_start_index: int = 0,
) -> AxisRange:
    """Solve a numeric axis range.

    Args:
        values: Raw samples; ``None`` and non-finite values are skipped.
        min_value: Forced lower bound.  It can extend the range below the
            data but never clips it.
        max_value: Forced upper bound, with the same rule.
        padding_scale: Multiplier for the headroom added beyond the data
            (default 1.0, 0 disables headroom).
        label_count: Target number of labels.  The solver keeps steps
            human friendly, so the final count may differ slightly.
        label_unit: Suggested step; the solved step is a whole multiple.
        label_count_adjustment: Added to the target label count.
        labels: Explicit label text, used in place of formatted values.
        value_formatter: Label formatter, :func:`humanize` by default.
        painter: When given together with *axis_size*, labels are
            measured and the count is reduced until they fit.

    Returns:
        The solved :class:`AxisRange`.
    """
    data = finite_values(values)
    if data:
        data_min, data_max = min(data), max(data)
    else:
        logger.debug("no finite values for value axis, using 0..1")
        data_min, data_max = 0.0, 1.0
    if min_value is not None and max_value is not None and min_value > max_value:
        logger.warning("axis min %s is greater than max %s, swapping", min_value, max_value)
        min_value, max_value = max_value, min_value
    scale = 1.0 if padding_scale is None else max(0.0, padding_scale)
    min_forced = min_value is not None and min_value <= data_min
    max_forced = max_value is not None and max_value >= data_max
    if min_forced:
        data_min = float(min_value)
    if max_forced:
        data_max = float(max_value)
    if data_max == data_min:
        if data_min == 0:
            data_max = 2.0
        else:
            data_min, data_max = data_min - 1, data_max + 1
    span = data_max - data_min
    decimal_data = data_min != math.floor(data_min) or span != math.floor(span)

    # Target label count
    target = label_count
    if target <= 0:
        if label_unit > 0:
            target = int(span / label_unit) + 1
        else:
            target = min(max(int(span) + 1, DEFAULT_Y_LABEL_COUNT_LOW), DEFAULT_Y_LABEL_COUNT_HIGH)
            if decimal_data:
                target = min(target * 2, DEFAULT_Y_LABEL_COUNT_HIGH)
    target = min(max(target + label_count_adjustment, MINIMUM_AXIS_LABELS), MAXIMUM_AXIS_TICKS)

    # Reduce the count when labels would not fit along the axis
    limit = MAXIMUM_AXIS_TICKS
    if painter is not None and axis_size > 0:
        estimate = _value_labels(labels or [], value_formatter, data_min, span / (target - 1), target)
        width, height = painter.measure_text_max_width_height(estimate, label_rotation, font_style)
        fit = limit
        if is_vertical and height > 0:
            fit = axis_size // height
        elif not is_vertical and width > 0:
            fit = axis_size // (width + min(20, width))
        limit = min(limit, max(fit, MINIMUM_AXIS_LABELS))
        if label_count <= 0:
            target = min(target, limit)

    # A round start below the data and headroom above it, never crossing zero for negative data
    lo, hi = data_min, data_max
    if not min_forced:
        lo = friendly_min(data_min, span, scale)
    if not max_forced:
        hi = data_max + scale * RANGE_MAX_PADDING_SHARE * span
        if data_max <= 0 < hi:
            hi = 0.0

    if min_forced and max_forced:
        if label_count <= 0:
            # Prefer the largest count whose interval is already a nice step
            for candidate in range(target, MINIMUM_AXIS_LABELS - 1, -1):
                interval = span / (candidate - 1)
                if abs(nice_step(interval) - interval) <= interval * 1e-6:
                    target = candidate
                    break
        step = span / (target - 1)
        return _build_range(data_min, data_max, step, target, labels, value_formatter, painter, axis_size,
                            label_rotation, font_style, data_start_index)

    if label_unit > 0:
        multiplier = nice_multiplier(span / (label_unit * (limit - 1)))
        while True:
            step = label_unit * multiplier
            new_lo, new_hi = _align(lo, hi, step, min_forced, max_forced)
            # a step wider than the range can not shrink the count further
            if _tick_count(new_lo, new_hi, step) <= limit or step >= hi - lo:
                break
            multiplier = nice_multiplier(multiplier + 1)
    else:
        step = nice_step(span / (target - 1))
        while True:
            new_lo, new_hi = _align(lo, hi, step, min_forced, max_forced)
            if _tick_count(new_lo, new_hi, step) <= MAXIMUM_AXIS_TICKS:
                break
            step = _next_nice_step(step)
    count = _tick_count(new_lo, new_hi, step)
    return _build_range(new_lo, new_hi, step, count, labels, value_formatter, painter, axis_size,
                        label_rotation, font_style, data_start_index)


def _align(lo: float, hi: float, step: float, keep_lo: bool, keep_hi: bool) -> Tuple[float, float]:
    """Round *lo* down and *hi* up to whole steps, keeping forced ends."""
    if keep_lo:
        new_lo = lo
        new_hi = lo + math.ceil((hi - lo) / step - _EPSILON) * step
    elif keep_hi:
        new_hi = hi
        new_lo = hi - math.ceil((hi - lo) / step - _EPSILON) * step
    else:
        new_lo = math.floor(lo / step + _EPSILON) * step
        new_hi = math.ceil(hi / step - _EPSILON) * step
    if new_hi <= new_lo:
        new_hi = new_lo + step
    return _snap(new_lo), _snap(new_hi)


def _build_range(lo: float, hi: float, step: float, count: int, labels_cfg: Optional[Sequence[str]],
                 formatter: Optional[ValueFormatter], painter: Optional[Painter], axis_size: int,
                 label_rotation: float, font_style: FontStyle, data_start_index: int) -> AxisRange:
    labels = _value_labels(labels_cfg or [], formatter, lo, step, count)
    width = height = 0
    if painter is not None:
        width, height = painter.measure_text_max_width_height(labels, label_rotation, font_style)
    return AxisRange(
        labels=labels,
        min=lo,
        max=hi,
        step=step,
        tick_count=count,
        label_count=count,
        divide_count=count,
        is_category=False,
        size=axis_size,
        text_max_width=width,
        text_max_height=height,
        label_rotation=label_rotation,
        font_style=font_style,
        data_start_index=data_start_index,
    )


def calculate_category_range(
    labels: Sequence[str],
    *,
    series_names: Sequence[str] = (),
    painter: Optional[Painter] = None,
    axis_size: int = 0,
    is_vertical: bool = False,
    extra_space: bool = True,
    label_count: int = 0,
    label_count_adjustment: int = 0,
    label_unit: float = 0.0,
    label_rotation: float = 0.0,
    font_style: FontStyle = FontStyle(),
    data_start_index: int = 0,
) -> AxisRange:
    """Solve a category axis.

    Missing labels are filled from *series_names* (then from 1-based
    indexes).  When the labels do not fit in *axis_size* the label count
    is reduced either to whole multiples of *label_unit* or by skipping
    evenly spaced labels.
    """
    texts = list(labels)
    if not texts:
        texts = list(series_names)
    else:
        for i in range(len(texts), len(series_names)):
            texts.append(series_names[i] or str(i + 1))
    data_count = len(texts)
    width = height = 0
    if painter is not None:
        width, height = painter.measure_text_max_width_height(texts, label_rotation, font_style)

    count = label_count
    if count <= 0 or count > data_count:
        count = data_count
    count = max(count + label_count_adjustment, MINIMUM_AXIS_LABELS)
    if label_count <= 0:
        max_count = count
        if is_vertical and height > 0:
            extra = 10 if extra_space else 0
            max_count = max(axis_size // (height + extra), MINIMUM_AXIS_LABELS)
        elif not is_vertical and width > 0:
            extra = width if extra_space else width // 2
            max_count = max(axis_size // (width + extra), MINIMUM_AXIS_LABELS)
        if label_unit > 0:
            multiplier = 1.0
            while True:
                candidate = ceil_to_int(data_count / (label_unit * multiplier))
                if candidate > max_count:
                    multiplier += 1
                    continue
                count = max(candidate, MINIMUM_AXIS_LABELS)
                break
        elif max_count < count:
            # Skip evenly: every step-th label plus both ends
            step = 1
            candidate = 2 + (data_count - 2) // step
            while candidate > max_count:
                step += 1
                candidate = 2 + (data_count - 2) // step
            count = max(candidate, MINIMUM_AXIS_LABELS)
    tick_count = data_count
    if tick_count > count * 2:
        tick_count = count
    return AxisRange(
        labels=texts,
        tick_count=max(tick_count, 1),
        label_count=count,
        divide_count=data_count,
        is_category=True,
        size=axis_size,
        text_max_width=width,
        text_max_height=height,
        label_rotation=label_rotation,
        font_style=font_style,
        data_start_index=data_start_index,
    )
