"""Missing-value repair for observed series.

Strategies:
  - linear:   straight line between nearest valid neighbours
  - forward:  repeat nearest valid predecessor (successor if none)
  - gompertz: evaluate a curve fitted to the valid points

"ignore" is a caller policy (leave gaps, fit on valid points only) and is
accepted by `apply_interpolation` as a no-op.
"""

from __future__ import annotations

import logging
import math
from typing import Literal

from growthcast.data.series import ObservedPoint, PointClass, missing_indices, valid_values
from growthcast.fitting import CurveFitter
from growthcast.models import evaluate

logger = logging.getLogger(__name__)

FillMethod = Literal["linear", "gompertz", "forward"]
InterpolationPolicy = Literal["ignore", "linear", "gompertz", "forward"]

MIN_POINTS_FOR_GOMPERTZ = 8


def _prev_valid(points: list[ObservedPoint], index: int) -> int | None:
    for i in range(index - 1, -1, -1):
        if not points[i].is_missing:
            return i
    return None


def _next_valid(points: list[ObservedPoint], index: int) -> int | None:
    for i in range(index + 1, len(points)):
        if not points[i].is_missing:
            return i
    return None


def linear_value(points: list[ObservedPoint], index: int) -> float | None:
    prev_i = _prev_valid(points, index)
    next_i = _next_valid(points, index)

    if prev_i is not None and next_i is not None:
        prev_v = points[prev_i].value
        next_v = points[next_i].value
        return prev_v + (next_v - prev_v) * ((index - prev_i) / (next_i - prev_i))
    if prev_i is not None:
        return points[prev_i].value
    if next_i is not None:
        return points[next_i].value
    return None


def forward_value(points: list[ObservedPoint], index: int) -> float | None:
    prev_i = _prev_valid(points, index)
    if prev_i is not None:
        return points[prev_i].value
    next_i = _next_valid(points, index)
    if next_i is not None:
        return points[next_i].value
    return None


def gompertz_value(
    points: list[ObservedPoint], index: int, fitter: CurveFitter | None = None
) -> float | None:
    """Curve estimate at `index`, falling back to linear.

    The curve is fitted on the valid values re-indexed 0..m-1, while it is
    evaluated at the original position `index`. With gaps before `index`
    the two time axes disagree; this mirrors how the baseline itself is fitted.
    """

    values = valid_values(points)
    if len(values) < MIN_POINTS_FOR_GOMPERTZ:
        return linear_value(points, index)

    result = (fitter or CurveFitter()).fit(values)
    if result is None or not result.valid:
        logger.warning(f"Gompertz interpolation fit unusable at index {index}; using linear")
        return linear_value(points, index)

    p = result.params
    value = evaluate(index, p.K, p.b, p.t0)
    if not math.isfinite(value):
        return linear_value(points, index)
    return value


def fill(
    points: list[ObservedPoint],
    index: int,
    method: FillMethod,
    fitter: CurveFitter | None = None,
) -> float | None:
    """Estimate the value at `index` and write it onto the point.

    Returns the filled value, or None when there is nothing to anchor on
    (the point is then left untouched).
    """

    if not 0 <= index < len(points):
        raise ValueError(f"Point index {index} out of range for {len(points)} points")

    if method == "linear":
        value = linear_value(points, index)
    elif method == "forward":
        value = forward_value(points, index)
    elif method == "gompertz":
        value = gompertz_value(points, index, fitter)
    else:
        raise ValueError(f"Unknown interpolation method: {method!r}")

    if value is None or not math.isfinite(value):
        return None

    point = points[index]
    point.value = float(value)
    point.is_missing = False
    point.classification = PointClass.INTERPOLATED
    return point.value


def apply_interpolation(
    points: list[ObservedPoint],
    method: InterpolationPolicy,
    fitter: CurveFitter | None = None,
) -> list[int]:
    """Fill every missing point in order; returns the indices filled.

    Earlier fills are visible to later ones.
    """

    if method == "ignore":
        return []
    if method not in ("linear", "gompertz", "forward"):
        raise ValueError(f"Unknown interpolation method: {method!r}")

    filled: list[int] = []
    for i in missing_indices(points):
        if fill(points, i, method, fitter) is not None:
            filled.append(i)

    logger.info(f"Interpolation ({method}) filled {len(filled)} point(s)")
    return filled
