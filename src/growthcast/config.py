from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

SCENARIO_NAMES: tuple[str, ...] = ("conservative", "moderate", "aggressive")


class ScenarioParams(BaseModel):
    """Intervention shape for one named scenario.

    alpha and kappa may exceed their effective caps (0.5 and 0.2); the
    scenario engine clamps them when applying the intervention.
    """

    model_config = ConfigDict(extra="forbid")

    alpha: float = Field(gt=0)  # peak growth-rate boost
    delta_t: float = Field(gt=0)  # inflection shift, quarters earlier
    kappa: float = Field(gt=0)  # capacity expansion fraction
    half_life: float = Field(gt=0)  # acceleration decay half-life, quarters
    window_length: float = Field(gt=0)  # quarters the acceleration is active
    expansion_length: float = Field(gt=0)  # quarters to realise the capacity expansion


PRESETS: dict[str, dict[str, float]] = {
    "conservative": dict(alpha=0.10, delta_t=0.5, kappa=0.02, half_life=6, window_length=6, expansion_length=8),
    "moderate": dict(alpha=0.20, delta_t=1.0, kappa=0.05, half_life=8, window_length=8, expansion_length=10),
    "aggressive": dict(alpha=0.35, delta_t=1.5, kappa=0.08, half_life=10, window_length=12, expansion_length=12),
}


def preset(name: str) -> ScenarioParams:
    if name not in PRESETS:
        raise ValueError(f"Unknown scenario: {name!r}; expected one of {SCENARIO_NAMES}")
    return ScenarioParams(**PRESETS[name])


class ScenarioSet(BaseModel):
    model_config = ConfigDict(extra="forbid")

    conservative: ScenarioParams = Field(default_factory=lambda: preset("conservative"))
    moderate: ScenarioParams = Field(default_factory=lambda: preset("moderate"))
    aggressive: ScenarioParams = Field(default_factory=lambda: preset("aggressive"))

    @model_validator(mode="before")
    @classmethod
    def _merge_presets(cls, data):
        # Partial scenario blocks in YAML override only the fields they name.
        if isinstance(data, dict):
            data = {
                name: {**PRESETS.get(name, {}), **value} if isinstance(value, dict) else value
                for name, value in data.items()
            }
        return data

    def get(self, name: str) -> ScenarioParams:
        if name not in SCENARIO_NAMES:
            raise ValueError(f"Unknown scenario: {name!r}; expected one of {SCENARIO_NAMES}")
        return getattr(self, name)

    def items(self) -> list[tuple[str, ScenarioParams]]:
        return [(name, getattr(self, name)) for name in SCENARIO_NAMES]


class DataConfig(BaseModel):
    path: str | None = None
    # Use the built-in demo dataset when no path is given.
    use_sample: bool = False
    interpolation: Literal["ignore", "linear", "gompertz", "forward"] = "ignore"


class ForecastConfig(BaseModel):
    horizon_quarters: int = Field(default=20, ge=1)
    # 1-based quarter offset past the last historical quarter.
    launch_quarter: int = Field(default=1, ge=1)


class ProjectMeta(BaseModel):
    name: str = "default"


class ProjectConfig(BaseModel):
    project: ProjectMeta = ProjectMeta()
    data: DataConfig = DataConfig()
    forecast: ForecastConfig = ForecastConfig()
    scenarios: ScenarioSet = ScenarioSet()


def load_config(path: str | Path) -> ProjectConfig:
    path = Path(path)
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    cfg = ProjectConfig.model_validate(data)
    if cfg.data.path is not None and not Path(cfg.data.path).is_absolute():
        # Data paths in a config file are relative to that file.
        cfg.data.path = str((path.parent / cfg.data.path).resolve())
    return cfg
