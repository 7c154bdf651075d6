"""Aggregate scenario statistics over a forecast bundle."""

from __future__ import annotations

import math
from dataclasses import dataclass

import pandas as pd

from growthcast.config import SCENARIO_NAMES

from .scenario import ForecastBundle


@dataclass(frozen=True)
class ScenarioSummary:
    scenario: str
    total_incremental: float  # sum of (scenario - baseline) over finite steps
    peak_incremental: float  # largest single-quarter increment (0 if none finite)
    final_value: float  # last forecast value (NaN if invalid)
    invalid_steps: int


def summarize_scenario(bundle: ForecastBundle, name: str) -> ScenarioSummary:
    increments = bundle.incremental(name)
    finite = [v for v in increments if math.isfinite(v)]
    values = bundle.series(name)
    return ScenarioSummary(
        scenario=name,
        total_incremental=float(sum(finite)),
        peak_incremental=max(finite) if finite else 0.0,
        final_value=values[-1] if values else math.nan,
        invalid_steps=len(increments) - len(finite),
    )


def summarize_scenarios(bundle: ForecastBundle) -> dict[str, ScenarioSummary]:
    return {name: summarize_scenario(bundle, name) for name in SCENARIO_NAMES}


def summary_frame(bundle: ForecastBundle) -> pd.DataFrame:
    return pd.DataFrame([s.__dict__ for s in summarize_scenarios(bundle).values()])
