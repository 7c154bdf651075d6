from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
import pandas as pd

from growthcast.data.series import ObservedPoint, PointClass, valid_points

OUTLIER_Z_THRESHOLD = 2.0
MIN_POINTS_FOR_OUTLIERS = 5
MIN_VALID_POINTS = 8
RECOMMENDED_VALID_POINTS = 12


class Severity(Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class QualityLevel(Enum):
    EXCELLENT = "excellent"  # >= 95
    GOOD = "good"  # >= 80
    ACCEPTABLE = "acceptable"  # >= 60
    POOR = "poor"


@dataclass(frozen=True)
class QualityIssue:
    severity: Severity
    message: str


@dataclass(frozen=True)
class QualityReport:
    score: int
    issues: tuple[QualityIssue, ...]
    missing_count: int
    valid_count: int
    total_count: int
    outlier_count: int = 0
    confirmed_outlier_count: int = 0  # flagged outliers the user already confirmed
    non_monotonic_count: int = 0

    @property
    def level(self) -> QualityLevel:
        if self.score >= 95:
            return QualityLevel.EXCELLENT
        if self.score >= 80:
            return QualityLevel.GOOD
        if self.score >= 60:
            return QualityLevel.ACCEPTABLE
        return QualityLevel.POOR

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [{"severity": i.severity.value, "message": i.message} for i in self.issues],
            columns=["severity", "message"],
        )


@dataclass
class _Scoring:
    score: int = 100
    issues: list[QualityIssue] = field(default_factory=list)

    def add(self, severity: Severity, message: str, deduction: int = 0) -> None:
        self.issues.append(QualityIssue(severity, message))
        self.score -= deduction


def _missing_penalty(missing: int) -> int:
    if missing == 0:
        return 0
    if missing <= 2:
        return 10 * missing
    if missing <= 5:
        return 30
    return 50


def _flag_outliers(valid: list[ObservedPoint]) -> int:
    """Recompute outlier flags from scratch; returns the number flagged.

    Confirmation does not exempt a point: a confirmed value that is still
    extreme is flagged and deducted like any other.
    """

    if len(valid) < MIN_POINTS_FOR_OUTLIERS:
        for p in valid:
            p.is_outlier = False
        return 0

    values = np.array([p.value for p in valid], dtype=float)
    mean = float(np.mean(values))
    std = float(np.std(values))  # population std

    count = 0
    for p, v in zip(valid, values):
        z = abs(v - mean) / std if std > 0 else 0.0
        flagged = math.isfinite(z) and z > OUTLIER_Z_THRESHOLD
        p.is_outlier = flagged
        count += int(flagged)
    return count


def analyze(points: list[ObservedPoint]) -> QualityReport:
    """Score a series 0-100 for fitness to fit.

    Deductions: missing quarters, z-score outliers, quarter-on-quarter drops,
    and too few valid samples. Writes `is_outlier` back onto the points; the
    flags are recomputed on every call so repeated analysis is idempotent.
    """

    total = len(points)
    missing = sum(1 for p in points if p.is_missing)
    valid = valid_points(points)
    for p in points:
        if p.is_missing:
            p.is_outlier = False

    s = _Scoring()

    pct = 100.0 * missing / total if total else 0.0
    if missing == 0:
        s.add(Severity.SUCCESS, f"Data completeness: excellent, all {total} quarters present")
    elif missing <= 2:
        s.add(Severity.WARNING, f"{missing} quarter(s) missing; interpolation recommended", _missing_penalty(missing))
    elif missing <= 5:
        s.add(
            Severity.WARNING,
            f"{missing} quarters missing ({pct:.1f}%); use Gompertz interpolation and verify the result",
            _missing_penalty(missing),
        )
    else:
        s.add(
            Severity.ERROR,
            f"{missing} quarters missing ({pct:.1f}%); model reliability may be affected",
            _missing_penalty(missing),
        )

    outliers = _flag_outliers(valid)
    confirmed = sum(1 for p in valid if p.is_outlier and p.classification is PointClass.CONFIRMED)
    if outliers:
        message = f"{outliers} outlier(s) detected; confirm these values are genuine"
        if confirmed:
            message += f" ({confirmed} already confirmed)"
        s.add(Severity.WARNING, message, 5 * outliers)

    drops = sum(1 for prev, cur in zip(valid, valid[1:]) if cur.value < prev.value)
    if drops:
        s.add(
            Severity.WARNING,
            f"{drops} quarter(s) of negative growth; the Gompertz model assumes monotonic growth",
            5 * drops,
        )

    n_valid = len(valid)
    if n_valid < MIN_VALID_POINTS:
        s.add(
            Severity.ERROR,
            f"Only {n_valid} valid points; at least {MIN_VALID_POINTS} are needed for a reliable fit",
            40,
        )
    elif n_valid < RECOMMENDED_VALID_POINTS:
        s.add(
            Severity.WARNING,
            f"Only {n_valid} valid points; at least {RECOMMENDED_VALID_POINTS} are recommended",
            10,
        )

    return QualityReport(
        score=max(0, min(100, s.score)),
        issues=tuple(s.issues),
        missing_count=missing,
        valid_count=n_valid,
        total_count=total,
        outlier_count=outliers,
        confirmed_outlier_count=confirmed,
        non_monotonic_count=drops,
    )


def recommend_actions(report: QualityReport) -> list[str]:
    """Plain-text follow-up actions for a quality report."""

    actions: list[str] = []
    if 0 < report.missing_count <= 2:
        actions.append("Fill missing quarters with Gompertz interpolation")
    elif 2 < report.missing_count <= 5:
        actions.append("Fill missing quarters with Gompertz interpolation and check parameter stability after fitting")
        actions.append("Obtain the actual missing values from the source if possible")
    elif report.missing_count > 5:
        actions.append("Obtain the actual missing values before fitting")
        actions.append("Otherwise shorten the analysis window to a more complete stretch")

    if report.score < 80:
        actions.append("Forecast uncertainty will be higher; use results with caution")
        actions.append("Note the data quality limitations in any report")
    return actions
