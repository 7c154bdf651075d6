from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

import pandas as pd


class PointClass(Enum):
    """Provenance of an observed value."""
    ORIGINAL = "Original"
    MISSING = "Missing"
    INTERPOLATED = "Interpolated"
    CORRECTED = "Corrected"  # entered by hand over a missing or wrong value
    CONFIRMED = "Confirmed"  # flagged outlier confirmed as real data


@dataclass
class ObservedPoint:
    """One quarter of history. Its list position is the model time index t."""

    period_label: str
    value: float | None
    is_missing: bool = False
    classification: PointClass = PointClass.ORIGINAL
    is_outlier: bool = False


def valid_points(points: list[ObservedPoint]) -> list[ObservedPoint]:
    return [p for p in points if not p.is_missing]


def valid_values(points: list[ObservedPoint]) -> list[float]:
    return [float(p.value) for p in points if not p.is_missing]


def missing_indices(points: list[ObservedPoint]) -> list[int]:
    return [i for i, p in enumerate(points) if p.is_missing]


def _check_index(points: list[ObservedPoint], index: int) -> None:
    if not 0 <= index < len(points):
        raise ValueError(f"Point index {index} out of range for {len(points)} points")


def correct_point(points: list[ObservedPoint], index: int, value: float) -> ObservedPoint:
    """Overwrite a point with a hand-entered value."""

    _check_index(points, index)
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"Corrected value must be a non-negative number, got {value}")

    point = points[index]
    point.value = value
    point.is_missing = False
    point.classification = PointClass.CORRECTED
    return point


def confirm_point(points: list[ObservedPoint], index: int) -> ObservedPoint:
    """Accept a flagged outlier as genuine; it will not be flagged again."""

    _check_index(points, index)
    point = points[index]
    point.is_outlier = False
    point.classification = PointClass.CONFIRMED
    return point


def points_frame(points: list[ObservedPoint]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "t": i,
                "period": p.period_label,
                "value": p.value if not p.is_missing else float("nan"),
                "classification": p.classification.value,
                "is_outlier": p.is_outlier,
            }
            for i, p in enumerate(points)
        ]
    )
