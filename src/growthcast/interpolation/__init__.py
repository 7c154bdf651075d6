from .interpolator import (
    FillMethod,
    InterpolationPolicy,
    apply_interpolation,
    fill,
    forward_value,
    gompertz_value,
    linear_value,
)

__all__ = [
    "FillMethod",
    "InterpolationPolicy",
    "apply_interpolation",
    "fill",
    "forward_value",
    "gompertz_value",
    "linear_value",
]
