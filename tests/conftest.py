from __future__ import annotations

import pytest

from growthcast.data import SAMPLE_VALUES, ObservedPoint, PointClass, sample_lines
from growthcast.ingestion import parse_rows


def build_points(values, start_year: int = 2020) -> list[ObservedPoint]:
    """Points from raw values; None marks a missing quarter."""
    points = []
    for i, v in enumerate(values):
        label = f"Q{i % 4 + 1} {start_year + i // 4}"
        missing = v is None
        points.append(
            ObservedPoint(
                period_label=label,
                value=None if missing else float(v),
                is_missing=missing,
                classification=PointClass.MISSING if missing else PointClass.ORIGINAL,
            )
        )
    return points


@pytest.fixture
def make_points():
    return build_points


@pytest.fixture
def sample_points() -> list[ObservedPoint]:
    # Demo dataset with Q2 2022 and Q1 2023 blanked.
    return parse_rows(sample_lines(with_gaps=True))


@pytest.fixture
def complete_sample_points() -> list[ObservedPoint]:
    return parse_rows(sample_lines(with_gaps=False))


@pytest.fixture
def sample_values() -> list[float]:
    return [float(v) for v in SAMPLE_VALUES]


@pytest.fixture
def linear_values() -> list[float]:
    return [10.0 * (i + 1) for i in range(20)]
