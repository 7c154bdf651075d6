import pytest

from growthcast.data import PointClass, confirm_point
from growthcast.monitoring import QualityLevel, Severity, analyze, recommend_actions


def test_clean_series_scores_100(make_points, linear_values):
    report = analyze(make_points(linear_values))

    assert report.score == 100
    assert len(report.issues) == 1
    assert report.issues[0].severity is Severity.SUCCESS
    assert report.missing_count == 0
    assert report.valid_count == report.total_count == 20
    assert report.level is QualityLevel.EXCELLENT
    assert recommend_actions(report) == []


@pytest.mark.parametrize(
    "gaps, expected",
    [
        ([5], 90),
        ([5, 9], 80),
        ([3, 5, 9], 70),
        ([1, 3, 5, 7, 9], 70),
        ([1, 3, 5, 7, 9, 11], 50),
    ],
)
def test_missing_deductions(make_points, linear_values, gaps, expected):
    values = [None if i in gaps else v for i, v in enumerate(linear_values)]
    report = analyze(make_points(values))
    assert report.score == expected
    assert report.missing_count == len(gaps)


def test_score_non_increasing_with_missing_count(make_points, linear_values):
    odd = list(range(1, 20, 2))
    scores = []
    for k in range(len(odd) + 1):
        gaps = set(odd[:k])
        values = [None if i in gaps else v for i, v in enumerate(linear_values)]
        scores.append(analyze(make_points(values)).score)

    assert all(b <= a for a, b in zip(scores, scores[1:]))
    assert scores[0] == 100


def test_outlier_flagged_and_written_back(make_points):
    values = [100.0 + i for i in range(20)]
    values[10] = 1000.0
    points = make_points(values)

    report = analyze(points)

    assert report.outlier_count == 1
    assert [i for i, p in enumerate(points) if p.is_outlier] == [10]
    # -5 for the outlier, -5 for the drop right after it
    assert report.non_monotonic_count == 1
    assert report.score == 90


def test_repeated_analysis_is_idempotent(make_points):
    values = [100.0 + i for i in range(20)]
    values[10] = 1000.0
    values[4] = None
    points = make_points(values)

    first = analyze(points)
    second = analyze(points)

    assert first == second
    assert sum(p.is_outlier for p in points) == 1


def test_confirmed_outlier_still_counts(make_points):
    values = [100.0 + i for i in range(20)]
    values[10] = 1000.0
    points = make_points(values)
    analyze(points)

    confirm_point(points, 10)
    assert not points[10].is_outlier

    report = analyze(points)

    assert report.outlier_count == 1
    assert report.confirmed_outlier_count == 1
    assert points[10].is_outlier
    assert points[10].classification is PointClass.CONFIRMED
    assert report.score == 90
    assert "1 already confirmed" in report.issues[-2].message


def test_outliers_need_five_valid_points(make_points):
    # 4 valid points only: no outlier check, but heavily penalised otherwise
    points = make_points([1.0, 1.0, 1.0, 100.0, None, None, None, None])
    report = analyze(points)
    assert report.outlier_count == 0
    assert not any(p.is_outlier for p in points)


def test_non_monotonic_skips_missing(make_points):
    values = [10.0 * (i + 1) for i in range(20)]
    values[6] = None
    values[7] = 55.0  # below index 5 (60)
    report = analyze(make_points(values))
    assert report.non_monotonic_count == 1


@pytest.mark.parametrize("n, expected", [(7, 60), (8, 90), (11, 90), (12, 100)])
def test_sample_size_deductions(make_points, n, expected):
    report = analyze(make_points([float(i + 1) for i in range(n)]))
    assert report.score == expected


def test_score_is_clamped_at_zero(make_points):
    values = [None] * 14 + [5.0, 4.0, 3.0, 2.0, 1.0, 0.5]
    report = analyze(make_points(values))
    # -50 missing, -25 drops, -40 sample size
    assert report.score == 0
    assert report.level is QualityLevel.POOR


def test_recommendations_follow_missing_count(make_points, linear_values):
    values = [None if i in (2, 4, 6, 8) else v for i, v in enumerate(linear_values)]
    report = analyze(make_points(values))
    actions = recommend_actions(report)
    assert len(actions) == 4  # two for 3-5 gaps, two for score < 80


def test_report_frame(make_points, linear_values):
    frame = analyze(make_points(linear_values)).to_frame()
    assert list(frame.columns) == ["severity", "message"]
    assert frame.iloc[0]["severity"] == "success"
