"""Scenario layer.

Applies intervention scenarios to the fitted Gompertz baseline. It operates
purely on fit outputs (parameters and quality score) without refitting.

Use case:
- Take the fitted baseline curve.
- Project conservative / moderate / aggressive interventions after launch.
- Aggregate incremental gains per scenario.

Design:
- Config-driven (scenario parameters come from ProjectConfig).
- Pure functions; no shared state.
- Numerical guardrails fall back to the baseline value.
"""

from .scenario import (  # noqa
    ForecastBundle,
    ScenarioEngine,
    apply_intervention,
    uncertainty_percent,
)
from .summary import ScenarioSummary, summarize_scenarios, summary_frame  # noqa

__all__ = [
    "ForecastBundle",
    "ScenarioEngine",
    "apply_intervention",
    "uncertainty_percent",
    "ScenarioSummary",
    "summarize_scenarios",
    "summary_frame",
]
