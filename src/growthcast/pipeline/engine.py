from __future__ import annotations

import logging
from dataclasses import dataclass, field

from growthcast.config import ProjectConfig
from growthcast.connectors import TextSeriesConnector
from growthcast.data import ObservedPoint, confirm_point, correct_point, sample_lines, valid_values
from growthcast.decision import ForecastBundle, ScenarioEngine
from growthcast.fitting import CurveFitter, FitResult
from growthcast.ingestion import parse_rows
from growthcast.interpolation import apply_interpolation
from growthcast.monitoring import QualityReport, analyze

logger = logging.getLogger(__name__)

LOW_QUALITY_SCORE = 60


class FitFailedError(RuntimeError):
    """The fitter could not produce finite parameters; the run cannot continue."""


@dataclass
class ForecastSession:
    """Everything one forecast run reads and writes.

    Steps mutate the session strictly in order: analyze -> interpolate ->
    fit -> forecast. `quality` always reflects the current `points`; manual
    edits go through the engine, which re-scores and drops any earlier fit.
    """

    points: list[ObservedPoint]
    quality: QualityReport | None = None
    filled: list[int] = field(default_factory=list)
    fit: FitResult | None = None
    forecast: ForecastBundle | None = None


class GrowthForecastEngine:
    def __init__(self, cfg: ProjectConfig, fitter: CurveFitter | None = None):
        self.cfg = cfg
        self.fitter = fitter or CurveFitter()
        self.scenarios = ScenarioEngine(cfg.scenarios)

    def load_session(self, lines: list[str] | None = None) -> ForecastSession:
        """Parse input rows into a fresh session.

        Source precedence: explicit `lines`, then `data.path`, then the
        built-in sample when `data.use_sample` is set.
        """

        if lines is None:
            if self.cfg.data.path is not None:
                lines = TextSeriesConnector(self.cfg.data.path).load_lines()
            elif self.cfg.data.use_sample:
                lines = sample_lines()
            else:
                raise ValueError("No input data: set data.path or data.use_sample")

        return ForecastSession(points=parse_rows(lines))

    def analyze(self, session: ForecastSession) -> QualityReport:
        session.quality = analyze(session.points)
        logger.info(
            f"Data quality score {session.quality.score}/100 "
            f"({session.quality.missing_count} missing, {session.quality.valid_count} valid)"
        )
        return session.quality

    def interpolate(self, session: ForecastSession) -> list[int]:
        method = self.cfg.data.interpolation
        session.filled = apply_interpolation(session.points, method, self.fitter)
        if session.filled:
            before = session.quality.score if session.quality else None
            self.analyze(session)
            logger.info(f"Quality score after interpolation: {before} -> {session.quality.score}")
        return session.filled

    def correct(self, session: ForecastSession, index: int, value: float) -> QualityReport:
        """Overwrite one point by hand and re-score the series."""
        correct_point(session.points, index, value)
        session.fit = session.forecast = None
        logger.info(f"Point {index} ({session.points[index].period_label}) corrected to {value}")
        return self.analyze(session)

    def confirm(self, session: ForecastSession, index: int) -> QualityReport:
        """Accept a flagged outlier as genuine and re-score the series."""
        confirm_point(session.points, index)
        session.fit = session.forecast = None
        logger.info(f"Point {index} ({session.points[index].period_label}) confirmed")
        return self.analyze(session)

    def fit(self, session: ForecastSession) -> FitResult:
        """Fit the baseline on the non-missing values.

        Remaining gaps are dropped and the valid values re-indexed 0..m-1.
        """

        if session.quality is None:
            self.analyze(session)
        if session.quality.score < LOW_QUALITY_SCORE:
            logger.warning(f"Low data quality ({session.quality.score}/100); forecasts may be unreliable")
        if session.quality.missing_count:
            logger.warning(f"{session.quality.missing_count} missing point(s) will be ignored in fitting")

        values = valid_values(session.points)
        if not values:
            raise FitFailedError("No valid data points to fit")

        result = self.fitter.fit(values)
        if result is None:
            raise FitFailedError("Fitting failed: parameters are not finite; check the data follows an S-curve")
        if not result.valid:
            logger.warning("Fit completed but parameters may be unstable")

        session.fit = result
        return result

    def forecast(self, session: ForecastSession) -> ForecastBundle:
        if session.fit is None:
            self.fit(session)

        bundle = self.scenarios.forecast(
            session.points,
            session.fit.params,
            horizon_quarters=self.cfg.forecast.horizon_quarters,
            launch_quarter=self.cfg.forecast.launch_quarter,
            quality=session.quality,
        )
        if bundle.has_invalid:
            logger.warning("Some forecast values are invalid (NaN)")

        session.forecast = bundle
        return bundle

    def run(self, lines: list[str] | None = None) -> ForecastSession:
        session = self.load_session(lines)
        self.analyze(session)
        self.interpolate(session)
        self.fit(session)
        self.forecast(session)
        return session
