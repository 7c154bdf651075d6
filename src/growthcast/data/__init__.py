from .sample import SAMPLE_PERIODS, SAMPLE_VALUES, sample_lines
from .series import (
    ObservedPoint,
    PointClass,
    confirm_point,
    correct_point,
    missing_indices,
    points_frame,
    valid_points,
    valid_values,
)

__all__ = [
    "SAMPLE_PERIODS",
    "SAMPLE_VALUES",
    "sample_lines",
    "ObservedPoint",
    "PointClass",
    "confirm_point",
    "correct_point",
    "missing_indices",
    "points_frame",
    "valid_points",
    "valid_values",
]
