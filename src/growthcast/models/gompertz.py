from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np

logger = logging.getLogger(__name__)

# exp() overflows a double just above 709.
EXPONENT_LIMIT = 700.0


@dataclass(frozen=True)
class GompertzParams:
    """Fitted curve parameters.

    K  - asymptotic capacity
    b  - growth rate / steepness
    t0 - inflection time (in quarter index units)
    """

    K: float
    b: float
    t0: float

    def is_finite(self) -> bool:
        return math.isfinite(self.K) and math.isfinite(self.b) and math.isfinite(self.t0)


def _clamp_exponent(x: float) -> float:
    return max(-EXPONENT_LIMIT, min(EXPONENT_LIMIT, x))


def evaluate(t: float, K: float, b: float, t0: float) -> float:
    """Gompertz curve K * exp(-exp(-b * (t - t0))).

    Never raises for degenerate numbers: returns NaN when `t` or a parameter
    is non-finite, when K <= 0 or b <= 0, or when any intermediate overflows.
    """

    if not (math.isfinite(t) and math.isfinite(K) and math.isfinite(b) and math.isfinite(t0)):
        logger.debug(f"Invalid Gompertz inputs: t={t}, K={K}, b={b}, t0={t0}")
        return float("nan")
    if K <= 0 or b <= 0:
        logger.debug(f"K and b must be positive: K={K}, b={b}")
        return float("nan")

    inner = math.exp(_clamp_exponent(-b * (t - t0)))
    if not math.isfinite(inner):
        logger.debug(f"Inner exponential overflow at t={t}")
        return float("nan")

    outer = math.exp(_clamp_exponent(-inner))
    if not math.isfinite(outer):
        return float("nan")

    result = K * outer
    if not math.isfinite(result):
        logger.debug(f"Gompertz value not finite at t={t}")
        return float("nan")
    return result


def curve(ts: Iterable[float], params: GompertzParams) -> np.ndarray:
    """Evaluate the curve at every index in `ts` (NaN where evaluation fails)."""

    return np.array([evaluate(t, params.K, params.b, params.t0) for t in ts], dtype=float)
