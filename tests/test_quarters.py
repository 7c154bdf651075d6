from growthcast.utils import following_periods, generate_quarters, parse_quarter


def test_parse_quarter():
    assert parse_quarter("Q3 2024") == (3, 2024)
    assert parse_quarter("2024-09") is None


def test_generate_quarters_rolls_over_year():
    assert generate_quarters("Q3 2024", 3) == ["Q3 2024", "Q4 2024", "Q1 2025"]


def test_following_periods():
    assert following_periods("Q4 2024", 2) == ["Q1 2025", "Q2 2025"]
    assert following_periods("week 12", 2) == ["week 12+1", "week 12+2"]
