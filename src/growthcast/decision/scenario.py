"""Intervention scenarios on top of a fitted Gompertz baseline.

An intervention launched at quarter L perturbs the baseline curve for t >= L:
  - acceleration: b is boosted by up to `alpha`, decaying with `half_life`,
    for `window_length` quarters
  - capacity expansion: K grows smoothly by up to `kappa` over
    `expansion_length` quarters, then stays fully expanded
  - inflection shift: t0 moves `delta_t` quarters earlier

Effect sizes are capped at apply time (alpha <= 0.5, kappa <= 0.2,
b multiplier <= 2, delta_t <= 5). Any non-finite intermediate falls back to
the baseline value, so a scenario is never less defined than the baseline.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import pandas as pd

from growthcast.config import SCENARIO_NAMES, ScenarioParams, ScenarioSet
from growthcast.data.series import ObservedPoint
from growthcast.models import GompertzParams, evaluate
from growthcast.monitoring import QualityReport
from growthcast.utils import following_periods

logger = logging.getLogger(__name__)

ALPHA_CAP = 0.5
KAPPA_CAP = 0.2
ACCELERATION_CAP = 2.0
DELTA_T_CAP = 5.0
DECAY_EXPONENT_FLOOR = -100.0
EXPANSION_RATE = 3.0


def _clamp(x: float, low: float, high: float) -> float:
    # NaN passes through so that it can be detected downstream.
    if math.isnan(x):
        return x
    return max(low, min(high, x))


def _ratio(num: float, den: float) -> float:
    """IEEE-style division: x/0 is +-inf, 0/0 is NaN."""
    try:
        return num / den
    except ZeroDivisionError:
        if num == 0 or math.isnan(num):
            return math.nan
        return math.copysign(math.inf, num) * math.copysign(1.0, den)


def acceleration_factor(tau: float, scenario: ScenarioParams) -> float:
    if tau >= scenario.window_length:
        return 1.0
    exponent = _clamp(_ratio(-math.log(2) * tau, scenario.half_life), DECAY_EXPONENT_FLOOR, 0.0)
    decay = math.exp(exponent)
    if not math.isfinite(decay):
        logger.warning(f"Invalid decay factor at tau={tau}")
        return 1.0
    return 1.0 + _clamp(scenario.alpha, 0.0, ALPHA_CAP) * decay


def capacity_factor(tau: float, scenario: ScenarioParams) -> float:
    kappa = _clamp(scenario.kappa, 0.0, KAPPA_CAP)
    if tau >= scenario.expansion_length:
        return 1.0 + kappa

    exponent = _clamp(-EXPANSION_RATE * _ratio(tau, scenario.expansion_length), DECAY_EXPONENT_FLOOR, 0.0)
    smoother = 1.0 - math.exp(exponent)
    if not math.isfinite(smoother):
        logger.warning(f"Invalid expansion smoother at tau={tau}")
        return 1.0
    return 1.0 + kappa * smoother


def apply_intervention(
    t: float,
    baseline_value: float,
    params: GompertzParams,
    scenario: ScenarioParams,
    launch_quarter: float,
) -> float:
    """Scenario value at time `t`; `baseline_value` before launch or on failure."""

    if not (math.isfinite(t) and math.isfinite(baseline_value)):
        return baseline_value
    if not params.is_finite():
        logger.warning(f"Invalid params in intervention: {params}")
        return baseline_value
    if t < launch_quarter:
        return baseline_value

    tau = t - launch_quarter
    accel = acceleration_factor(tau, scenario)
    capacity = capacity_factor(tau, scenario)
    if not (math.isfinite(accel) and math.isfinite(capacity)):
        return baseline_value

    K = params.K * capacity
    b = params.b * min(ACCELERATION_CAP, accel)
    t0 = params.t0 - _clamp(scenario.delta_t, 0.0, DELTA_T_CAP)
    if not (math.isfinite(K) and math.isfinite(b) and math.isfinite(t0)):
        return baseline_value

    value = evaluate(t, K, b, t0)
    if not math.isfinite(value):
        logger.warning(f"Invalid intervention result at t={t}; returning baseline")
        return baseline_value
    return value


def uncertainty_percent(score: int | None) -> float:
    """Heuristic band width from the data quality score (100 if unknown)."""
    score = 100 if score is None else score
    if score >= 95:
        return 2.0
    if score >= 80:
        return 5.0
    return 8.0


@dataclass
class ForecastBundle:
    periods: list[str]
    baseline: list[float] = field(default_factory=list)
    conservative: list[float] = field(default_factory=list)
    moderate: list[float] = field(default_factory=list)
    aggressive: list[float] = field(default_factory=list)
    uncertainty_percent: float = 2.0
    start_t: int = 0

    def series(self, name: str) -> list[float]:
        if name != "baseline" and name not in SCENARIO_NAMES:
            raise ValueError(f"Unknown series: {name!r}")
        return getattr(self, name)

    def incremental(self, name: str) -> list[float]:
        """Scenario minus baseline per step; NaN where either is non-finite."""
        return [
            v - b if math.isfinite(v) and math.isfinite(b) else math.nan
            for v, b in zip(self.series(name), self.baseline)
        ]

    @property
    def has_invalid(self) -> bool:
        return any(
            not math.isfinite(v) for name in ("baseline", *SCENARIO_NAMES) for v in self.series(name)
        )

    def to_frame(self) -> pd.DataFrame:
        data = {
            "t": range(self.start_t, self.start_t + len(self.baseline)),
            "period": self.periods,
            "baseline": self.baseline,
        }
        for name in SCENARIO_NAMES:
            data[name] = self.series(name)
            data[f"{name}_incremental"] = self.incremental(name)
        return pd.DataFrame(data)


class ScenarioEngine:
    """Project the fitted baseline and the named scenarios over a horizon."""

    def __init__(self, scenarios: ScenarioSet | None = None):
        self.scenarios = scenarios or ScenarioSet()

    def apply(
        self,
        name: str,
        t: float,
        baseline_value: float,
        params: GompertzParams,
        launch_quarter: float,
    ) -> float:
        return apply_intervention(t, baseline_value, params, self.scenarios.get(name), launch_quarter)

    def forecast(
        self,
        points: list[ObservedPoint],
        params: GompertzParams,
        *,
        horizon_quarters: int,
        launch_quarter: int,
        quality: QualityReport | None = None,
    ) -> ForecastBundle:
        """Forecast `horizon_quarters` steps after the history.

        Time continues from t = len(points); the intervention starts at
        t = len(points) + launch_quarter. A NaN baseline step is NaN in every
        series.
        """

        if horizon_quarters < 1:
            raise ValueError("horizon_quarters must be >= 1")
        if not points:
            raise ValueError("Cannot forecast without historical points")

        base_offset = len(points)
        launch = base_offset + launch_quarter
        bundle = ForecastBundle(
            periods=following_periods(points[-1].period_label, horizon_quarters),
            uncertainty_percent=uncertainty_percent(quality.score if quality else None),
            start_t=base_offset,
        )

        invalid = 0
        for i in range(horizon_quarters):
            t = base_offset + i
            baseline = evaluate(t, params.K, params.b, params.t0)
            if not math.isfinite(baseline):
                invalid += 1
                bundle.baseline.append(math.nan)
                for name in SCENARIO_NAMES:
                    bundle.series(name).append(math.nan)
                continue

            bundle.baseline.append(baseline)
            for name in SCENARIO_NAMES:
                bundle.series(name).append(self.apply(name, t, baseline, params, launch))

        if invalid:
            logger.warning(f"{invalid} forecast step(s) produced an invalid baseline")
        logger.info(
            f"Forecast generated: {horizon_quarters} quarters, launch at t={launch}, "
            f"uncertainty ±{bundle.uncertainty_percent:g}%"
        )
        return bundle
