"""Gompertz curve fitting.

Two stages:
  1. Coarse grid search over fixed multipliers of the observed maximum (K),
     growth rates (b) and inflection offsets (t0), minimising squared error.
  2. Bounded gradient refinement of the best grid point with closed-form
     partial derivatives.

This is a deterministic local heuristic. The grid decides which basin the
refinement starts in, so the grid constants below are part of the model and
must not be tuned casually: test fixtures depend on them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from growthcast.evaluation import fit_quality
from growthcast.models import GompertzParams, curve, evaluate

logger = logging.getLogger(__name__)

K_MULTIPLIERS: tuple[float, ...] = (1.1, 1.3, 1.5, 2.0, 2.5)
B_STEPS: tuple[float, ...] = (0.05, 0.1, 0.15, 0.2, 0.3, 0.4)
# t0 candidates as (absolute offset, fraction of series length) pairs: -2, 0, 0.3n, 0.5n, 0.7n, n+2
T0_CANDIDATES: tuple[tuple[float, float], ...] = (
    (-2.0, 0.0),
    (0.0, 0.0),
    (0.0, 0.3),
    (0.0, 0.5),
    (0.0, 0.7),
    (2.0, 1.0),
)

LEARNING_RATE = 0.001
REFINE_ITERATIONS = 50

# Accepted parameter window during refinement.
K_UPPER_MULTIPLIER = 5.0
B_MIN_EXCLUSIVE = 0.01
B_MAX_EXCLUSIVE = 1.0

# Heuristic start when no grid point is usable.
FALLBACK_K_MULTIPLIER = 1.5
FALLBACK_B = 0.2
FALLBACK_T0_FRACTION = 0.5

# Post-refinement correction.
CORRECTED_K_MULTIPLIER = 1.2
B_CLAMP_LOW = 0.05
B_CLAMP_HIGH = 0.5


@dataclass(frozen=True)
class GradientGuard:
    """Overflow policy for the refinement stage.

    - A data point whose exponent |-b*(i - t0)| exceeds `max_exponent` is
      skipped for that iteration (its gradient contribution is dropped).
    - Any non-finite accumulated gradient aborts refinement entirely.
    """

    max_exponent: float = 100.0

    def skip_point(self, exponent: float) -> bool:
        return abs(exponent) > self.max_exponent

    def usable(self, *grads: float) -> bool:
        return all(math.isfinite(g) for g in grads)


@dataclass(frozen=True)
class FitSettings:
    k_multipliers: tuple[float, ...] = K_MULTIPLIERS
    b_steps: tuple[float, ...] = B_STEPS
    t0_candidates: tuple[tuple[float, float], ...] = T0_CANDIDATES
    learning_rate: float = LEARNING_RATE
    iterations: int = REFINE_ITERATIONS
    guard: GradientGuard = field(default_factory=GradientGuard)

    def t0_grid(self, n: int) -> list[float]:
        return [offset + fraction * n for offset, fraction in self.t0_candidates]


@dataclass(frozen=True)
class FitResult:
    params: GompertzParams
    r2: float
    rmse: float
    valid: bool


class CurveFitter:
    def __init__(self, settings: FitSettings | None = None):
        self.settings = settings or FitSettings()

    def fit(self, series: Sequence[float]) -> FitResult | None:
        """Fit K, b, t0 to `series` (indexed 0..n-1).

        Returns None when the final parameters are non-finite; callers must
        treat that as a failed fit, not a degraded one.
        """

        data = np.asarray(series, dtype=float)
        n = int(data.size)
        if n < 1:
            raise ValueError("Cannot fit a Gompertz curve to an empty series")
        if not np.all(np.isfinite(data)):
            raise ValueError("Series contains non-finite values; drop missing points before fitting")

        observed_max = float(np.max(data))
        if observed_max <= 0:
            # No positive K can sit above a non-positive maximum after correction.
            logger.error(f"Series maximum {observed_max} is not positive; cannot fit")
            return None
        logger.info(f"Fitting Gompertz curve: points={n}, min={float(np.min(data))}, max={observed_max}")

        params = self._grid_search(data, observed_max)
        if params is None:
            logger.warning("No valid grid candidate; using fallback parameters")
            params = GompertzParams(
                K=observed_max * FALLBACK_K_MULTIPLIER,
                b=FALLBACK_B,
                t0=n * FALLBACK_T0_FRACTION,
            )
        logger.debug(f"Initial parameters: {params}")

        params = self._refine(data, observed_max, params)
        params = self._correct(params, observed_max)

        if not params.is_finite():
            logger.error(f"Final parameters are not finite: {params}")
            return None

        fitted = curve(range(n), params)
        quality = fit_quality(data, fitted)
        if quality.invalid_predictions:
            logger.error(f"{quality.invalid_predictions} fitted value(s) are NaN")

        r2_finite = math.isfinite(quality.r2)
        result = FitResult(
            params=params,
            r2=quality.r2 if r2_finite else 0.0,
            rmse=quality.rmse if math.isfinite(quality.rmse) else float("inf"),
            valid=quality.invalid_predictions == 0 and r2_finite,
        )
        logger.info(f"Fit complete: {params}, r2={result.r2:.4f}, rmse={result.rmse:.2f}")
        return result

    def _grid_search(self, data: np.ndarray, observed_max: float) -> GompertzParams | None:
        n = int(data.size)
        indices = range(n)
        best: GompertzParams | None = None
        best_error = math.inf
        candidates = 0

        for k_mult in self.settings.k_multipliers:
            K = observed_max * k_mult
            if K <= observed_max:
                continue
            for b in self.settings.b_steps:
                if b <= 0 or b > 1.0:
                    continue
                for t0 in self.settings.t0_grid(n):
                    predicted = curve(indices, GompertzParams(K=K, b=b, t0=t0))
                    if not np.all(np.isfinite(predicted)):
                        continue
                    error = float(np.sum((data - predicted) ** 2))
                    if math.isfinite(error) and error < best_error:
                        best_error = error
                        best = GompertzParams(K=K, b=b, t0=t0)
                        candidates += 1

        logger.debug(f"Grid search improved on the best candidate {candidates} time(s)")
        return best

    def _gradients(self, data: np.ndarray, p: GompertzParams) -> tuple[float, float, float] | None:
        guard = self.settings.guard
        grad_k = grad_b = grad_t0 = 0.0

        for i, observed in enumerate(data):
            predicted = evaluate(i, p.K, p.b, p.t0)
            if not math.isfinite(predicted):
                return None
            error = predicted - observed

            exponent = -p.b * (i - p.t0)
            if guard.skip_point(exponent):
                continue

            exp_inner = math.exp(exponent)
            exp_outer = math.exp(-exp_inner)
            if not (math.isfinite(exp_inner) and math.isfinite(exp_outer)):
                return None

            grad_k += 2 * error * exp_outer
            grad_b += 2 * error * p.K * exp_outer * exp_inner * (i - p.t0)
            grad_t0 += 2 * error * p.K * exp_outer * exp_inner * p.b

        if not guard.usable(grad_k, grad_b, grad_t0):
            return None
        return grad_k, grad_b, grad_t0

    def _refine(self, data: np.ndarray, observed_max: float, params: GompertzParams) -> GompertzParams:
        n = int(data.size)
        lr = self.settings.learning_rate

        for iteration in range(self.settings.iterations):
            grads = self._gradients(data, params)
            if grads is None:
                logger.warning(f"Invalid gradients at iteration {iteration}")
                break

            grad_k, grad_b, grad_t0 = grads
            new_k = params.K - lr * grad_k / n
            new_b = params.b - lr * grad_b / n
            new_t0 = params.t0 - lr * grad_t0 / n

            accepted = (
                observed_max < new_k < observed_max * K_UPPER_MULTIPLIER
                and B_MIN_EXCLUSIVE < new_b < B_MAX_EXCLUSIVE
                and math.isfinite(new_k)
                and math.isfinite(new_b)
                and math.isfinite(new_t0)
            )
            if not accepted:
                logger.warning(f"Parameter update rejected at iteration {iteration}")
                break
            params = GompertzParams(K=new_k, b=new_b, t0=new_t0)

        return params

    @staticmethod
    def _correct(params: GompertzParams, observed_max: float) -> GompertzParams:
        K, b = params.K, params.b
        if math.isfinite(K) and K <= observed_max:
            logger.warning(f"K={K} is not greater than observed max {observed_max}; adjusting")
            K = observed_max * CORRECTED_K_MULTIPLIER
        if math.isfinite(b) and (b <= 0 or b > 1.0):
            logger.warning(f"b={b} out of range; clamping")
            b = max(B_CLAMP_LOW, min(B_CLAMP_HIGH, b))
        return GompertzParams(K=K, b=b, t0=params.t0)


def fit_gompertz(series: Sequence[float], settings: FitSettings | None = None) -> FitResult | None:
    return CurveFitter(settings).fit(series)
