import math

import pytest

from growthcast.config import ScenarioParams, ScenarioSet, preset
from growthcast.decision import (
    ForecastBundle,
    ScenarioEngine,
    apply_intervention,
    summarize_scenarios,
    summary_frame,
    uncertainty_percent,
)
from growthcast.models import GompertzParams, evaluate
from growthcast.monitoring import analyze

PARAMS = GompertzParams(K=1000.0, b=0.3, t0=5.0)


def _scenario(**overrides) -> ScenarioParams:
    fields = dict(alpha=0.2, delta_t=1.0, kappa=0.05, half_life=8, window_length=8, expansion_length=10)
    fields.update(overrides)
    # model_construct skips validation so degenerate values can be exercised
    return ScenarioParams.model_construct(**fields)


def test_before_launch_returns_baseline_exactly():
    baseline = 123.456
    assert apply_intervention(9, baseline, PARAMS, preset("aggressive"), 10) == baseline


def test_zero_half_life_falls_back_to_finite_value():
    scenario = _scenario(half_life=0)
    for t in (10, 11, 13):
        baseline = evaluate(t, PARAMS.K, PARAMS.b, PARAMS.t0)
        value = apply_intervention(t, baseline, PARAMS, scenario, 10)
        assert math.isfinite(value)


def test_fully_realised_intervention():
    scenario = preset("moderate")
    launch, t = 10, 25  # past both the window and the expansion period
    baseline = evaluate(t, PARAMS.K, PARAMS.b, PARAMS.t0)

    value = apply_intervention(t, baseline, PARAMS, scenario, launch)

    expected = evaluate(t, PARAMS.K * (1 + scenario.kappa), PARAMS.b, PARAMS.t0 - scenario.delta_t)
    assert value == pytest.approx(expected)
    assert value > baseline


def test_at_launch_acceleration_is_full_and_expansion_zero():
    scenario = preset("conservative")
    t = 10
    value = apply_intervention(t, 0.0, PARAMS, scenario, 10)
    expected = evaluate(t, PARAMS.K, PARAMS.b * (1 + scenario.alpha), PARAMS.t0 - scenario.delta_t)
    assert value == pytest.approx(expected)


def test_effect_sizes_are_capped():
    t, launch = 14, 10
    capped = apply_intervention(t, 0.0, PARAMS, _scenario(alpha=0.5, kappa=0.2, delta_t=5), launch)
    oversized = apply_intervention(t, 0.0, PARAMS, _scenario(alpha=5.0, kappa=3.0, delta_t=50), launch)
    assert oversized == pytest.approx(capped)


def test_non_finite_inputs_return_baseline():
    scenario = preset("moderate")
    bad = GompertzParams(K=float("nan"), b=0.3, t0=5.0)
    assert apply_intervention(12, 400.0, bad, scenario, 10) == 400.0
    assert apply_intervention(12, 400.0, PARAMS, _scenario(alpha=float("nan")), 10) == 400.0
    assert math.isnan(apply_intervention(12, float("nan"), PARAMS, scenario, 10))


@pytest.mark.parametrize("score, pct", [(100, 2.0), (95, 2.0), (94, 5.0), (80, 5.0), (79, 8.0), (0, 8.0), (None, 2.0)])
def test_uncertainty_steps(score, pct):
    assert uncertainty_percent(score) == pct


def test_forecast_run(make_points, linear_values):
    points = make_points(linear_values)  # Q1 2020 .. Q4 2024
    quality = analyze(points)
    engine = ScenarioEngine(ScenarioSet())

    bundle = engine.forecast(points, PARAMS, horizon_quarters=8, launch_quarter=1, quality=quality)

    assert bundle.periods[0] == "Q1 2025"
    assert bundle.periods[-1] == "Q4 2026"
    assert len(bundle.baseline) == len(bundle.aggressive) == 8
    assert bundle.baseline[0] == evaluate(20, PARAMS.K, PARAMS.b, PARAMS.t0)
    # t=20 precedes the effective launch at t=21
    assert bundle.conservative[0] == bundle.baseline[0]
    assert bundle.moderate[0] == bundle.baseline[0]
    assert bundle.uncertainty_percent == 2.0
    assert bundle.start_t == 20
    assert not bundle.has_invalid


def test_invalid_baseline_propagates_nan(make_points, linear_values):
    points = make_points(linear_values)
    bad = GompertzParams(K=-1.0, b=0.3, t0=5.0)

    bundle = ScenarioEngine().forecast(points, bad, horizon_quarters=3, launch_quarter=1)

    for name in ("baseline", "conservative", "moderate", "aggressive"):
        assert all(math.isnan(v) for v in bundle.series(name))
    assert bundle.has_invalid


def test_non_quarter_labels_continue_with_offsets(make_points, linear_values):
    points = make_points(linear_values)
    points[-1].period_label = "2024-12"
    bundle = ScenarioEngine().forecast(points, PARAMS, horizon_quarters=2, launch_quarter=1)
    assert bundle.periods == ["2024-12+1", "2024-12+2"]


def test_summary_skips_invalid_steps():
    bundle = ForecastBundle(
        periods=["a", "b", "c"],
        baseline=[100.0, float("nan"), 120.0],
        conservative=[100.0, float("nan"), 130.0],
        moderate=[105.0, 110.0, 140.0],
        aggressive=[110.0, 150.0, float("nan")],
    )
    summary = summarize_scenarios(bundle)

    assert summary["conservative"].total_incremental == 10.0
    assert summary["conservative"].peak_incremental == 10.0
    assert summary["moderate"].total_incremental == 25.0
    assert summary["moderate"].invalid_steps == 1
    assert summary["aggressive"].total_incremental == 10.0
    assert math.isnan(summary["aggressive"].final_value)

    frame = summary_frame(bundle)
    assert list(frame["scenario"]) == ["conservative", "moderate", "aggressive"]


def test_bundle_frame_has_incremental_columns():
    bundle = ForecastBundle(
        periods=["Q1 2025"],
        baseline=[100.0],
        conservative=[101.0],
        moderate=[102.0],
        aggressive=[103.0],
        start_t=20,
    )
    frame = bundle.to_frame()
    assert frame.loc[0, "t"] == 20
    assert frame.loc[0, "aggressive_incremental"] == 3.0
